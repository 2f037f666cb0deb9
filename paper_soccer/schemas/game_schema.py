# paper_soccer/schemas/game_schema.py

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Union


# Game Info DTOs
class GameRuleOption(BaseModel):
    """Schema for a configurable game rule option"""
    type: str = Field(..., description="Data type of the rule (e.g., 'integer', 'number', 'string')")
    min: Optional[Union[int, float]] = Field(None, description="Minimum value for numeric rules")
    max: Optional[Union[int, float]] = Field(None, description="Maximum value for numeric rules")
    allowed_values: Optional[List[Any]] = Field(None, description="Exhaustive list of accepted values")
    default: Any = Field(..., description="Default value for the rule")
    description: str = Field(..., description="Human-readable description of the rule")


class GameInfo(BaseModel):
    """Static information about a game type"""
    game_name: str = Field(..., description="Unique identifier for the game type")
    display_name: str = Field(..., description="Human-readable display name")
    description: str = Field(..., description="Description of the game")
    min_players: int = Field(..., description="Minimum number of players required")
    max_players: int = Field(..., description="Maximum number of players allowed")
    supported_rules: Dict[str, GameRuleOption] = Field(default_factory=dict, description="Configurable rules for the game")
    turn_based: bool = Field(..., description="Whether the game is turn-based")
    category: str = Field(..., description="Game category (e.g., 'strategy', 'action', 'puzzle')")


# Players
class PlayerProfile(BaseModel):
    """Externally supplied player identity; the engine only stores and returns it"""
    player_id: int = Field(..., ge=1, le=2, description="Player number (1 or 2)")
    nickname: str = Field(..., description="Display name")
    rating: int = Field(2000, description="Player rating")


class WinnerInfo(BaseModel):
    """Winner of a finished match"""
    player_id: int
    nickname: str
    rating: int
    reason: str = Field(..., description="Why the match ended: 'blocked', 'goal' or 'timeout'")


# Board views
class Position(BaseModel):
    """Grid node coordinate"""
    x: int
    y: int


class GoalPoint(BaseModel):
    """Virtual point behind a goal line, in world units"""
    x: float
    z: float


class NodeView(BaseModel):
    """Read-only view of a single board node"""
    x: int
    y: int
    connections: Dict[str, bool] = Field(..., description="Connection flag per compass direction")
    connection_count: int
    node_class: str = Field(..., description="'center', 'border', 'corner' or 'goal_adjacent'")


# Presentation-facing configuration
class GameplayConfig(BaseModel):
    """Input and presentation toggles handed to the game service"""
    animations_enabled: bool = True
    swipe_enabled: bool = True
    swipe_min_distance: float = Field(50.0, ge=0)
    tap_snap_radius: float = Field(0.5, gt=0)

    @classmethod
    def from_settings(cls, settings) -> "GameplayConfig":
        return cls(
            animations_enabled=settings.ANIMATIONS_ENABLED,
            swipe_enabled=settings.SWIPE_MOVE_ENABLED,
            swipe_min_distance=settings.SWIPE_MIN_DISTANCE,
            tap_snap_radius=settings.TAP_SNAP_RADIUS,
        )


# Response schemas
class MatchStateResponse(BaseModel):
    """Snapshot of the match for presentation and clock collaborators"""
    game_name: str
    width: int
    height: int
    ball_position: Position
    current_player_id: int
    running_clock_player: Optional[int]
    phase: str
    result: str
    is_first_move: bool
    move_count: int
    lines: List[List[Position]] = Field(default_factory=list, description="Drawn segments as [from, to] pairs")
    goal_target: Optional[GoalPoint] = None
    winner: Optional[WinnerInfo] = None


# Event schemas (delivered to engine listeners)
class LineDrawnEvent(BaseModel):
    """Event when a player draws a line between two nodes"""
    player_id: int
    from_node: Position
    to_node: Position
    extra_turn: bool = Field(..., description="Whether the mover keeps the turn")


class TurnChangedEvent(BaseModel):
    """Event when the turn passes to the other player"""
    previous_player_id: int
    current_player_id: int


class GoalReachedEvent(BaseModel):
    """Event when the ball is shot into a goal and should travel to the goal point"""
    player_id: int
    from_node: Position
    target: GoalPoint
    goal_side: str


class GameEndedEvent(BaseModel):
    """Event when a match ends"""
    result: str
    winner: WinnerInfo


class MatchRestartedEvent(BaseModel):
    """Event when a fresh board has been built"""
    width: int
    height: int
    ball_position: Position
    current_player_id: int
