# paper_soccer/main.py

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, List, Optional
from paper_soccer.config.settings import settings
from paper_soccer.services.event_dispatcher import EventDispatcher, EventHandler
from paper_soccer.services.game_service import GameService
from paper_soccer.schemas.game_schema import GameplayConfig, PlayerProfile
import asyncio
import logging

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None):
    """Apply the configured log level to the root logger"""
    level_name = (level or settings.LOG_LEVEL).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level_value)
    logging.getLogger().setLevel(level_value)


def default_players() -> List[PlayerProfile]:
    return [
        PlayerProfile(player_id=1, nickname=settings.PLAYER1_NICKNAME, rating=settings.DEFAULT_RATING),
        PlayerProfile(player_id=2, nickname=settings.PLAYER2_NICKNAME, rating=settings.DEFAULT_RATING),
    ]


def create_game_service(
    players: Optional[List[PlayerProfile]] = None,
    rules: Optional[Dict[str, Any]] = None,
    config: Optional[GameplayConfig] = None,
) -> GameService:
    """Build a soccer game from settings, letting callers override any part"""
    return GameService.create_game(
        "soccer",
        players=players or default_players(),
        rules=rules if rules is not None else settings.engine_rules,
        config=config or GameplayConfig.from_settings(settings),
    )


@asynccontextmanager
async def game_session(
    animation_handler: EventHandler,
    players: Optional[List[PlayerProfile]] = None,
    rules: Optional[Dict[str, Any]] = None,
    config: Optional[GameplayConfig] = None,
) -> AsyncIterator[GameService]:
    """
    Run a match with its event consumer.

    Engine events are fed to ``animation_handler`` by a background task that
    lives as long as the session.
    """
    service = create_game_service(players, rules, config)
    dispatcher = EventDispatcher(animation_handler)
    service.attach_dispatcher(dispatcher)

    dispatcher_task = asyncio.create_task(dispatcher.start())
    logger.info("Game session started")

    try:
        yield service
    finally:
        dispatcher.stop()
        try:
            await asyncio.wait_for(dispatcher_task, timeout=settings.DISPATCHER_STOP_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Event dispatcher did not stop gracefully")
        logger.info("Game session closed")
