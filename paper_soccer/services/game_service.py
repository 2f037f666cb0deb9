# paper_soccer/services/game_service.py

from typing import Dict, Any, Optional, List, Tuple
from paper_soccer.services.game_engine_interface import MoveResult
from paper_soccer.services.games import GAME_ENGINES
from paper_soccer.services.games.soccer_engine import SoccerEngine
from paper_soccer.services.event_dispatcher import EventDispatcher
from paper_soccer.schemas.game_schema import (
    GameplayConfig,
    PlayerProfile,
    MatchStateResponse,
)
from paper_soccer.exceptions.domain_exceptions import (
    NotFoundException,
    BadRequestException,
)
import logging

logger = logging.getLogger(__name__)


class GameService:
    """
    Presentation-facing wrapper around a soccer engine.

    Holds the input toggles that used to be process-wide flags (swipe moves,
    animations, settings panel) and decides when raw input reaches the engine.
    """

    # Registry of available game engines
    GAME_ENGINES = GAME_ENGINES

    def __init__(self, engine: SoccerEngine, config: Optional[GameplayConfig] = None):
        self.engine = engine
        self.config = config or GameplayConfig()
        self.settings_open = False
        self.dispatcher: Optional[EventDispatcher] = None

    @staticmethod
    def get_available_games() -> List[str]:
        """Get list of available game types"""
        return list(GameService.GAME_ENGINES.keys())

    @classmethod
    def create_game(
        cls,
        game_name: str = "soccer",
        players: Optional[List[PlayerProfile]] = None,
        rules: Optional[Dict[str, Any]] = None,
        config: Optional[GameplayConfig] = None,
    ) -> "GameService":
        """
        Create a new game instance.

        Args:
            game_name: Name of the game type (e.g., 'soccer')
            players: Optional player profiles (nickname and rating per player)
            rules: Optional custom rules for the game
            config: Optional input/presentation toggles

        Returns:
            GameService wrapping the new engine

        Raises:
            NotFoundException: If the game name is not registered
            BadRequestException: If the engine rejects the players or rules
        """
        if game_name not in cls.GAME_ENGINES:
            raise NotFoundException(
                message=f"Unknown game type: {game_name}",
                details={
                    "available_games": cls.get_available_games(),
                    "requested_game": game_name
                }
            )

        engine_class = cls.GAME_ENGINES[game_name]
        try:
            engine = engine_class(players, rules)
        except ValueError as e:
            raise BadRequestException(
                message=f"Failed to create game: {str(e)}",
                details={"game_name": game_name, "rules": rules or {}}
            )

        logger.info(f"Created {game_name} game ({engine.field_width}x{engine.field_height})")
        return cls(engine, config)

    def attach_dispatcher(self, dispatcher: EventDispatcher):
        """Forward every engine event to ``dispatcher``, replacing any previous one"""
        if self.dispatcher is not None:
            self.engine.unsubscribe(self.dispatcher.publish)
        self.dispatcher = dispatcher
        self.engine.subscribe(dispatcher.publish)

    def set_settings_open(self, is_open: bool):
        self.settings_open = is_open

    @property
    def is_input_locked(self) -> bool:
        """Whether taps and swipes are currently ignored"""
        if self.engine.is_game_over or self.engine.ball_in_flight:
            return True
        if self.settings_open:
            return True
        if self.config.animations_enabled and self.dispatcher is not None and not self.dispatcher.is_idle:
            return True
        return False

    def handle_tap(self, point: Tuple[float, float]) -> MoveResult:
        """Forward a tap at world point ``(x, z)`` to the engine"""
        if self.is_input_locked:
            return MoveResult.rejected("Input is locked")
        return self.engine.handle_tap(point, snap_radius=self.config.tap_snap_radius)

    def handle_swipe(self, delta: Tuple[float, float]) -> MoveResult:
        """Forward a released swipe ``(dx, dy)`` in pointer units to the engine"""
        if not self.config.swipe_enabled:
            return MoveResult.rejected("Swipe moves are disabled")
        if self.is_input_locked:
            return MoveResult.rejected("Input is locked")
        return self.engine.try_swipe_move(delta, min_distance=self.config.swipe_min_distance)

    def time_out(self, player_id: int) -> bool:
        """Called by the external clock when ``player_id`` runs out of time"""
        return self.engine.lose_by_timeout(player_id)

    def restart(self):
        self.engine.restart()

    def get_game_state(self) -> MatchStateResponse:
        return self.engine.get_game_state()
