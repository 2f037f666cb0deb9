# paper_soccer/services/game_engine_interface.py

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, Callable
from enum import Enum
from pydantic import BaseModel
from paper_soccer.schemas.game_schema import (
    GameInfo,
    PlayerProfile,
    WinnerInfo,
    GameEndedEvent,
)
import logging

logger = logging.getLogger(__name__)


class GameResult(Enum):
    """Possible game results; anything but IN_PROGRESS is the cause of the win"""
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    GOAL = "goal"
    TIMEOUT = "timeout"


class MatchPhase(Enum):
    """Forward-only lifecycle of a match"""
    AWAITING_FIRST_MOVE = "awaiting_first_move"
    IN_PROGRESS = "in_progress"
    GAME_OVER = "game_over"


class MoveValidationResult:
    """Result of move validation"""
    def __init__(self, valid: bool, error_message: Optional[str] = None):
        self.valid = valid
        self.error_message = error_message


class MoveResult:
    """Outcome of a move or goal attempt. Rejected attempts leave the match untouched."""
    def __init__(
        self,
        accepted: bool,
        error_message: Optional[str] = None,
        extra_turn: bool = False,
        game_result: GameResult = GameResult.IN_PROGRESS,
    ):
        self.accepted = accepted
        self.error_message = error_message
        self.extra_turn = extra_turn
        self.game_result = game_result

    @classmethod
    def rejected(cls, error_message: str) -> "MoveResult":
        return cls(False, error_message)

    def __bool__(self):
        return self.accepted

    def __repr__(self):
        if not self.accepted:
            return f"MoveResult(rejected: {self.error_message})"
        return f"MoveResult(accepted, extra_turn={self.extra_turn}, result={self.game_result.value})"


EventListener = Callable[[BaseModel], None]


class GameEngineInterface(ABC):
    """
    Abstract interface for two-player turn-based game engines.

    Each game implementation should:
    - Validate moves according to game rules
    - Own and mutate its board state
    - Determine win conditions
    - Support custom rule configurations

    The interface owns the turn/match state machine: whose turn it is, the
    forward-only phase, the winner and the cause of the win. State changes are
    announced as Pydantic events to subscribed listeners once the operation
    that caused them has fully committed.
    """

    DEFAULT_RATING = 2000

    def __init__(self, players: Optional[List[PlayerProfile]] = None, rules: Optional[Dict[str, Any]] = None):
        """
        Initialize the game engine.

        Args:
            players: Profiles for player 1 and player 2 (defaults to "Player1"/"Player2")
            rules: Optional dictionary of custom rules for this game instance
        """
        self.rules = rules or {}
        self.players = sorted(players if players is not None else self._default_players(), key=lambda p: p.player_id)
        self.player_ids = [player.player_id for player in self.players]
        self.current_turn_index = 0
        self.game_result = GameResult.IN_PROGRESS
        self.winner_id: Optional[int] = None
        self._listeners: List[EventListener] = []
        self._pending_events: List[BaseModel] = []

        # Validate custom rules against game info
        self._validate_rules()

    @classmethod
    def _default_players(cls) -> List[PlayerProfile]:
        return [
            PlayerProfile(player_id=1, nickname="Player1", rating=cls.DEFAULT_RATING),
            PlayerProfile(player_id=2, nickname="Player2", rating=cls.DEFAULT_RATING),
        ]

    def _validate_rules(self):
        """
        Validate custom rules against the game's supported rules.
        This uses the GameRuleOption definitions from get_game_info().
        Only validates rules that are explicitly provided by the caller.
        """
        game_info = self.get_game_info()

        for rule_name, rule_value in self.rules.items():
            # Skip validation for rules not defined in game info
            if rule_name not in game_info.supported_rules:
                continue

            # Skip validation for None values - they'll use defaults
            if rule_value is None:
                continue

            rule_option = game_info.supported_rules[rule_name]

            # Type validation
            if rule_option.type == "integer":
                if not isinstance(rule_value, int) or isinstance(rule_value, bool):
                    raise ValueError(f"{rule_name} must be an integer, got {type(rule_value).__name__}")
            elif rule_option.type == "float" or rule_option.type == "number":
                if not isinstance(rule_value, (int, float)) or isinstance(rule_value, bool):
                    raise ValueError(f"{rule_name} must be a number, got {type(rule_value).__name__}")
            elif rule_option.type == "boolean":
                if not isinstance(rule_value, bool):
                    raise ValueError(f"{rule_name} must be a boolean, got {type(rule_value).__name__}")
            elif rule_option.type == "string":
                if not isinstance(rule_value, str):
                    raise ValueError(f"{rule_name} must be a string, got {type(rule_value).__name__}")

            # Range validation
            if rule_option.min is not None and rule_value < rule_option.min:
                raise ValueError(f"{rule_name} must be at least {rule_option.min}")
            if rule_option.max is not None and rule_value > rule_option.max:
                raise ValueError(f"{rule_name} must be at most {rule_option.max}")

            # Allowed values validation
            if rule_option.allowed_values is not None:
                if rule_value not in rule_option.allowed_values:
                    raise ValueError(f"{rule_name} value '{rule_value}' is not in allowed values: {rule_option.allowed_values}")

    @property
    def current_player_id(self) -> int:
        """Get the ID of the player whose turn it is"""
        return self.player_ids[self.current_turn_index]

    @property
    def is_game_over(self) -> bool:
        return self.game_result != GameResult.IN_PROGRESS

    @property
    def running_clock_player(self) -> Optional[int]:
        """Player whose clock an external timer should be running, None once the game is over"""
        if self.is_game_over:
            return None
        return self.current_player_id

    @property
    @abstractmethod
    def phase(self) -> MatchPhase:
        """Current lifecycle phase of the match"""
        pass

    def opponent_of(self, player_id: int) -> int:
        if player_id not in self.player_ids:
            raise ValueError(f"Unknown player id: {player_id}")
        return next(pid for pid in self.player_ids if pid != player_id)

    def player_profile(self, player_id: int) -> PlayerProfile:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise ValueError(f"Unknown player id: {player_id}")

    # Events
    def subscribe(self, listener: EventListener) -> EventListener:
        """Register a synchronous callable that receives every emitted event"""
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: EventListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _queue_event(self, event: BaseModel):
        self._pending_events.append(event)

    def _flush_events(self):
        """
        Deliver events queued by the operation that just committed.

        Every listener receives every event even when one of them fails; the
        first listener error is re-raised once delivery is complete.
        """
        events, self._pending_events = self._pending_events, []
        first_error: Optional[Exception] = None
        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception as e:
                    if first_error is None:
                        first_error = e
                    else:
                        logger.error(f"Listener failed on {type(event).__name__}: {e}", exc_info=True)
        if first_error is not None:
            raise first_error

    # Turn and match state
    def advance_turn(self):
        """Advance to the next player's turn"""
        self.current_turn_index = (self.current_turn_index + 1) % len(self.player_ids)

    def end_game(self, result: GameResult, winner_id: int):
        """
        Enter the terminal state.

        Args:
            result: Cause of the win (never IN_PROGRESS)
            winner_id: ID of the winning player
        """
        if result == GameResult.IN_PROGRESS:
            raise ValueError("A finished game needs a terminal result")
        self.game_result = result
        self.winner_id = winner_id
        logger.info(f"Game over: player {winner_id} wins ({result.value})")
        self._queue_event(GameEndedEvent(result=result.value, winner=self.winner()))

    def winner(self) -> Optional[WinnerInfo]:
        """Winner of a finished game with their externally supplied name and rating"""
        if self.winner_id is None:
            return None
        profile = self.player_profile(self.winner_id)
        return WinnerInfo(
            player_id=profile.player_id,
            nickname=profile.nickname,
            rating=profile.rating,
            reason=self.game_result.value,
        )

    def lose_by_timeout(self, player_id: int) -> bool:
        """
        Handle a player's clock running out.

        Args:
            player_id: ID of the player whose time expired

        Returns:
            True if the game ended, False if it was already over
        """
        winner_id = self.opponent_of(player_id)
        if self.is_game_over:
            return False

        logger.info(f"Player {player_id} timed out - game ended")
        self.end_game(GameResult.TIMEOUT, winner_id)
        self._flush_events()
        return True

    def validate_move(self, target: Any) -> MoveValidationResult:
        """
        Validate if a move is legal according to game rules.

        Args:
            target: Game-specific move target

        Returns:
            MoveValidationResult indicating if the move is valid
        """
        if self.is_game_over:
            return MoveValidationResult(False, "Game has already ended")

        # Delegate to game-specific validation
        return self._validate_game_specific_move(target)

    @abstractmethod
    def _validate_game_specific_move(self, target: Any) -> MoveValidationResult:
        """
        Validate game-specific move rules (to be implemented by subclasses).

        Args:
            target: Game-specific move target

        Returns:
            MoveValidationResult indicating if the move is valid
        """
        pass

    @abstractmethod
    def apply_move(self, target: Any) -> MoveResult:
        """
        Apply a validated move to the board and update the turn state.

        Args:
            target: Game-specific move target

        Returns:
            MoveResult describing the committed move
        """
        pass

    @abstractmethod
    def restart(self):
        """Discard the current match and start a fresh one"""
        pass

    @classmethod
    @abstractmethod
    def get_game_name(cls) -> str:
        """
        Get the unique name identifier for this game type.

        Returns:
            String name of the game
        """
        pass

    @classmethod
    @abstractmethod
    def get_game_info(cls) -> GameInfo:
        """
        Get static game information without requiring an instance.

        Returns:
            GameInfo DTO with static game information
        """
        pass
