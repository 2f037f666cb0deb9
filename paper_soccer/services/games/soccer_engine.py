# paper_soccer/services/games/soccer_engine.py

from typing import Dict, Any, Optional, List, Sequence, Tuple
import logging

from paper_soccer.services.game_engine_interface import (
    GameEngineInterface,
    MoveValidationResult,
    MoveResult,
    GameResult,
    MatchPhase,
)
from paper_soccer.services.games.soccer_board import (
    Coordinate,
    Direction,
    GoalSide,
    NodeClass,
    build_board,
    opposite,
)
from paper_soccer.services.games.direction_mapper import (
    SwipeAction,
    SWIPE_MIN_DISTANCE,
    TAP_SNAP_RADIUS,
    delta_to_direction,
    goal_tap_column,
    nearest_node,
    resolve_swipe,
    swipe_to_direction,
)
from paper_soccer.schemas.game_schema import (
    GameInfo,
    GameRuleOption,
    PlayerProfile,
    Position,
    GoalPoint,
    NodeView,
    MatchStateResponse,
    LineDrawnEvent,
    TurnChangedEvent,
    GoalReachedEvent,
    MatchRestartedEvent,
)
from paper_soccer.exceptions.domain_exceptions import ValidationException

logger = logging.getLogger(__name__)


class SoccerEngine(GameEngineInterface):
    """
    Paper soccer game engine implementation.

    Rules implemented:
    - The ball starts on the centre node and player 1 moves first
    - Move the ball in 8 directions (king move) along a segment nobody has drawn yet
    - The pitch walls are drawn before kick-off, only the goal mouths are open
    - Landing on a node that already had a segment (walls included) keeps the turn
    - The opening move always passes the turn
    - A player who leaves the ball on a node with every direction used loses
    - A shot into the north goal wins for player 1, into the south goal for player 2
    """

    PITCH_PRESETS: Dict[str, Dict[str, int]] = {
        "small": {"field_width": 7, "field_height": 9},
        "classic": {"field_width": 9, "field_height": 11},
        "large": {"field_width": 11, "field_height": 13},
    }
    GOAL_WIDTH = 3
    DEFAULT_GOAL_DEPTH = 0.7

    # Connection count that leaves no direction open, per node class
    BLOCKED_THRESHOLDS: Dict[NodeClass, Optional[int]] = {
        NodeClass.CENTER: 8,
        NodeClass.BORDER: 5,
        NodeClass.CORNER: 3,
        NodeClass.GOAL_ADJACENT: None,  # The goal is always open
    }

    # Player credited for a goal on each side
    GOAL_SCORERS: Dict[GoalSide, int] = {
        GoalSide.NORTH: 1,
        GoalSide.SOUTH: 2,
    }

    def __init__(self, players: Optional[List[PlayerProfile]] = None, rules: Optional[Dict[str, Any]] = None):
        super().__init__(players, rules)

        if len(self.players) != 2:
            raise ValueError("Paper soccer requires exactly 2 players")
        if self.player_ids != [1, 2]:
            raise ValueError("Paper soccer players must have ids 1 and 2")

        # Pitch configuration via presets
        self.pitch_size = self.rules.get("pitch_size") or "classic"
        preset = self.PITCH_PRESETS[self.pitch_size]
        self.field_width = preset["field_width"]
        self.field_height = preset["field_height"]
        self.goal_start_x = (self.field_width - self.GOAL_WIDTH) // 2
        self.goal_end_x = self.goal_start_x + self.GOAL_WIDTH - 1

        goal_depth = self.rules.get("goal_depth")
        self.goal_depth = float(goal_depth) if goal_depth is not None else self.DEFAULT_GOAL_DEPTH

        self._initialize_game_specific_state()

    def _initialize_game_specific_state(self):
        """Build a fresh pitch, put the ball on the centre spot and reset the match"""
        self.board = build_board(self.field_width, self.field_height, self.goal_start_x, self.goal_end_x)
        self.ball = self.board.center
        self.is_first_move = True
        self.current_turn_index = 0
        self.game_result = GameResult.IN_PROGRESS
        self.winner_id = None
        self.goal_target: Optional[GoalPoint] = None
        self.move_count = 0
        self.lines: List[Tuple[Coordinate, Coordinate]] = []
        self._pending_events = []

    # Queries
    @property
    def current_node(self) -> Coordinate:
        return self.ball

    @property
    def phase(self) -> MatchPhase:
        if self.is_game_over:
            return MatchPhase.GAME_OVER
        if self.is_first_move:
            return MatchPhase.AWAITING_FIRST_MOVE
        return MatchPhase.IN_PROGRESS

    @property
    def ball_in_flight(self) -> bool:
        """Whether the ball has been shot and is travelling to a goal"""
        return self.goal_target is not None

    def node_at(self, position: Tuple[int, int]) -> NodeView:
        """Read-only view of a node; raises ValueError outside the board"""
        node = self.board.node(position)
        return NodeView(
            x=node.position.x,
            y=node.position.y,
            connections={direction.name: node.is_connected(direction) for direction in Direction},
            connection_count=node.connection_count(),
            node_class=self.board.node_class(node.position).value,
        )

    def legal_targets(self) -> List[Coordinate]:
        """All nodes the ball can be moved to right now"""
        if self.is_game_over:
            return []
        return [
            self.board.neighbor(self.ball, direction)
            for direction in Direction
            if self.board.in_bounds(self.board.neighbor(self.ball, direction))
            and not self.board.is_connected(self.ball, direction)
        ]

    def get_game_state(self) -> MatchStateResponse:
        return MatchStateResponse(
            game_name=self.get_game_name(),
            width=self.field_width,
            height=self.field_height,
            ball_position=self._position(self.ball),
            current_player_id=self.current_player_id,
            running_clock_player=self.running_clock_player,
            phase=self.phase.value,
            result=self.game_result.value,
            is_first_move=self.is_first_move,
            move_count=self.move_count,
            lines=[[self._position(start), self._position(end)] for start, end in self.lines],
            goal_target=self.goal_target,
            winner=self.winner(),
        )

    # Moves
    def select_node(self, target: Tuple[int, int]) -> MoveResult:
        """
        Try to move the ball to ``target``.

        Illegal targets are ignored: the board and the match stay unchanged
        and the returned result carries the reason.
        """
        validation = self.validate_move(target)
        if not validation.valid:
            logger.debug(f"Rejected move to {target}: {validation.error_message}")
            return MoveResult.rejected(validation.error_message)

        result = self.apply_move(self._as_coordinate(target))
        self._flush_events()
        return result

    def _validate_game_specific_move(self, target: Any) -> MoveValidationResult:
        """Validate a single step from the ball's node"""
        try:
            target = self._as_coordinate(target)
        except (TypeError, ValueError, OverflowError):
            return MoveValidationResult(False, "Move target must be an (x, y) pair")

        if not self.board.in_bounds(target):
            return MoveValidationResult(False, "Target position is outside the pitch")

        if target not in self.board.neighbors(self.ball):
            return MoveValidationResult(False, "Move must be to an adjacent node (8 directions)")

        direction = delta_to_direction(target.x - self.ball.x, target.y - self.ball.y)
        if direction is None:
            return MoveValidationResult(False, "Move must be a single step")

        if self.board.is_connected(self.ball, direction):
            return MoveValidationResult(False, "This line segment has already been used")

        return MoveValidationResult(True)

    def apply_move(self, target: Coordinate) -> MoveResult:
        """Draw the segment, move the ball, then resolve stalemate and turn order"""
        origin = self.ball
        mover = self.current_player_id
        direction = delta_to_direction(target.x - origin.x, target.y - origin.y)

        # Both ends of the segment are recorded together
        self.board.connect(origin, direction)
        self.board.connect(target, opposite(direction))
        self.ball = target
        self.move_count += 1
        self.lines.append((origin, target))
        logger.debug(f"Player {mover} drew {origin} -> {target}")

        if self._is_blocked(target):
            self._queue_event(LineDrawnEvent(
                player_id=mover,
                from_node=self._position(origin),
                to_node=self._position(target),
                extra_turn=False,
            ))
            logger.info(f"Player {mover} is stuck at ({target.x}, {target.y})")
            self.end_game(GameResult.BLOCKED, self.opponent_of(mover))
            return MoveResult(True, game_result=GameResult.BLOCKED)

        connection_count = self.board.connection_count(target)
        if self.is_first_move:
            self.is_first_move = False
            switch_turn = True
        else:
            switch_turn = connection_count == 1

        self._queue_event(LineDrawnEvent(
            player_id=mover,
            from_node=self._position(origin),
            to_node=self._position(target),
            extra_turn=not switch_turn,
        ))

        if switch_turn:
            self.advance_turn()
            self._queue_event(TurnChangedEvent(
                previous_player_id=mover,
                current_player_id=self.current_player_id,
            ))
            logger.info(f"Now it's Player {self.current_player_id}'s turn")
        else:
            logger.debug(f"Player {mover} bounced at ({target.x}, {target.y}) and moves again")

        return MoveResult(True, extra_turn=not switch_turn)

    def _is_blocked(self, position: Coordinate) -> bool:
        threshold = self.BLOCKED_THRESHOLDS[self.board.node_class(position)]
        if threshold is None:
            return False
        return self.board.connection_count(position) == threshold

    def try_swipe_move(self, delta: Tuple[float, float], min_distance: float = SWIPE_MIN_DISTANCE) -> MoveResult:
        """
        Move the ball in the direction of a swipe.

        Swipes through the goal line from a goal-adjacent node become shots;
        everything else is a single-step move.
        """
        if self.is_game_over:
            return MoveResult.rejected("Game has already ended")

        dx, dy = delta
        direction = swipe_to_direction(dx, dy, min_distance)
        if direction is None:
            return MoveResult.rejected("Swipe is too short")

        resolution = resolve_swipe(self.board, self.ball, direction)
        if resolution.action == SwipeAction.REJECTED:
            logger.debug(f"Rejected {direction.name} shot from {self.ball}: outside the goal mouth")
            return MoveResult.rejected("Shot would cross the wall beside the goal")
        if resolution.action == SwipeAction.GOAL:
            return self._score(resolution.goal_side, resolution.goal_x)

        return self.select_node(resolution.target)

    def attempt_goal_tap(self, point: Tuple[float, float]) -> MoveResult:
        """Shoot when a tap at world point ``(x, z)`` lands in the goal the ball faces"""
        if self.is_game_over:
            return MoveResult.rejected("Game has already ended")

        column = goal_tap_column(self.board, self.ball, point, self.goal_depth)
        if column is None:
            return MoveResult.rejected("Tap did not hit the goal in front of the ball")

        return self._score(self.board.goal_side(self.ball), column)

    def handle_tap(self, point: Tuple[float, float], snap_radius: float = TAP_SNAP_RADIUS) -> MoveResult:
        """Resolve a tap to a goal shot or to the nearest node"""
        if self.is_game_over:
            return MoveResult.rejected("Game has already ended")

        if goal_tap_column(self.board, self.ball, point, self.goal_depth) is not None:
            return self.attempt_goal_tap(point)

        target = nearest_node(self.board, point, snap_radius)
        if target is None:
            return MoveResult.rejected("Tap is not close enough to any node")
        return self.select_node(target)

    def goal_target_point(self, side: GoalSide, goal_x: float) -> GoalPoint:
        """Resting point behind the goal line for a shot at column ``goal_x``"""
        x = min(max(float(goal_x), float(self.goal_start_x)), float(self.goal_end_x))
        if side == GoalSide.NORTH:
            z = self.field_height - 1 + self.goal_depth
        else:
            z = -self.goal_depth
        return GoalPoint(x=x, z=z)

    def _score(self, side: GoalSide, goal_x: float) -> MoveResult:
        """Short-circuit path for a shot: no segment is drawn on the grid"""
        shooter = self.current_player_id
        target = self.goal_target_point(side, goal_x)
        self.goal_target = target

        logger.info(f"Player {shooter} shot into the {side.value} goal at x={target.x}")
        self._queue_event(GoalReachedEvent(
            player_id=shooter,
            from_node=self._position(self.ball),
            target=target,
            goal_side=side.value,
        ))
        self.end_game(GameResult.GOAL, self.GOAL_SCORERS[side])
        self._flush_events()
        return MoveResult(True, game_result=GameResult.GOAL)

    # Match lifecycle
    def restart(self):
        """Throw the board away and start over from kick-off"""
        logger.info("Restarting match with a fresh board")
        self._initialize_game_specific_state()
        self._queue_event(MatchRestartedEvent(
            width=self.field_width,
            height=self.field_height,
            ball_position=self._position(self.ball),
            current_player_id=self.current_player_id,
        ))
        self._flush_events()

    def load_scenario(self, moves: Sequence[Tuple[int, int]], next_player: Optional[int] = None):
        """
        Restart and replay ``moves`` through select_node.

        A rejected move leaves the engine on a fresh board.

        Args:
            moves: Node coordinates to move the ball to, in order
            next_player: Optionally hand the turn to this player afterwards

        Raises:
            ValidationException: If any move is rejected
            ValueError: If next_player is not a player of this match
        """
        if next_player is not None and next_player not in self.player_ids:
            raise ValueError(f"Unknown player id: {next_player}")

        self.restart()
        for index, move in enumerate(moves):
            result = self.select_node(move)
            if not result.accepted:
                self.restart()
                raise ValidationException(
                    message=f"Scenario move {index} to {move} was rejected: {result.error_message}",
                    details={"index": index, "target": move, "reason": result.error_message},
                )

        if next_player is not None:
            self.current_turn_index = self.player_ids.index(next_player)
        logger.debug(f"Loaded scenario of {len(moves)} moves, player {self.current_player_id} to move")

    # Helpers
    @staticmethod
    def _as_coordinate(target: Any) -> Coordinate:
        x, y = target
        return Coordinate(int(round(x)), int(round(y)))

    @staticmethod
    def _position(coordinate: Coordinate) -> Position:
        return Position(x=coordinate.x, y=coordinate.y)

    @classmethod
    def get_game_name(cls) -> str:
        return "soccer"

    @classmethod
    def get_game_info(cls) -> GameInfo:
        """Expose static info for the paper soccer game."""
        return GameInfo(
            game_name=cls.get_game_name(),
            display_name="Paper Soccer",
            description="Draw lines to move the ball across the grid. Shoot into a goal or leave your opponent without moves.",
            min_players=2,
            max_players=2,
            supported_rules={
                "pitch_size": GameRuleOption(
                    type="string",
                    allowed_values=list(cls.PITCH_PRESETS.keys()),
                    default="classic",
                    description="Preset pitch sizes: small (7x9), classic (9x11), large (11x13)."
                ),
                "goal_depth": GameRuleOption(
                    type="number",
                    min=0.1,
                    max=3.0,
                    default=cls.DEFAULT_GOAL_DEPTH,
                    description="Distance behind the goal line where a scored ball comes to rest."
                ),
            },
            turn_based=True,
            category="strategy",
        )
