"""
Pytest configuration and fixtures for testing
"""
import pytest
from typing import List
from paper_soccer.services.games.soccer_engine import SoccerEngine
from paper_soccer.schemas.game_schema import PlayerProfile


@pytest.fixture
def engine() -> SoccerEngine:
    """Fresh classic 9x11 match"""
    return SoccerEngine()


@pytest.fixture
def players() -> List[PlayerProfile]:
    return [
        PlayerProfile(player_id=1, nickname="Alice", rating=1500),
        PlayerProfile(player_id=2, nickname="Bob", rating=1800),
    ]


@pytest.fixture
def events(engine) -> list:
    """Events emitted by the engine fixture, in order"""
    received = []
    engine.subscribe(received.append)
    return received
