# paper_soccer/config/settings.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SOCCER_",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Configuration
    APP_NAME: str = "Paper Soccer"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Pitch Configuration
    PITCH_SIZE: str = "classic"  # small (7x9), classic (9x11), large (11x13)
    GOAL_DEPTH: float = 0.7  # How far behind the goal line the ball comes to rest

    # Input Configuration
    SWIPE_MIN_DISTANCE: float = 50.0  # Pointer-space units
    TAP_SNAP_RADIUS: float = 0.5  # Grid units
    SWIPE_MOVE_ENABLED: bool = True
    ANIMATIONS_ENABLED: bool = True

    # Player Defaults
    PLAYER1_NICKNAME: str = "Player1"
    PLAYER2_NICKNAME: str = "Player2"
    DEFAULT_RATING: int = 2000

    # Event dispatching
    DISPATCHER_STOP_TIMEOUT: float = 5.0  # Seconds to wait for the animation consumer to drain

    @property
    def engine_rules(self) -> dict:
        """Rules dictionary handed to the soccer engine"""
        return {"pitch_size": self.PITCH_SIZE, "goal_depth": self.GOAL_DEPTH}


settings = Settings()
