# paper_soccer/services/games/soccer_board.py

"""Grid graph for paper soccer.

The pitch is a ``width`` x ``height`` lattice of nodes. Every node keeps one
flag per compass direction telling whether a line already joins it to the
neighbour in that direction. ``y`` grows toward the north goal, so ``N`` is
``(0, +1)``.

Lines are always stored on both endpoints: whoever connects ``a`` in
direction ``d`` also connects ``neighbor(a, d)`` in ``opposite(d)``.
"""

import logging
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


class Direction(IntEnum):
    """The eight king-move directions, clockwise from north"""
    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7


# Direction vectors (dx, dy)
DIRECTION_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction.N: (0, 1),
    Direction.NE: (1, 1),
    Direction.E: (1, 0),
    Direction.SE: (1, -1),
    Direction.S: (0, -1),
    Direction.SW: (-1, -1),
    Direction.W: (-1, 0),
    Direction.NW: (-1, 1),
}


def opposite(direction: Direction) -> Direction:
    return Direction((direction + 4) % 8)


class Coordinate(NamedTuple):
    x: int
    y: int

    def offset(self, direction: Direction) -> "Coordinate":
        dx, dy = DIRECTION_OFFSETS[direction]
        return Coordinate(self.x + dx, self.y + dy)


class NodeClass(Enum):
    """Positional class of a node, used for stalemate detection"""
    CENTER = "center"
    BORDER = "border"
    CORNER = "corner"
    GOAL_ADJACENT = "goal_adjacent"


class GoalSide(Enum):
    NORTH = "north"  # y == height - 1
    SOUTH = "south"  # y == 0


class Node:
    """A lattice point with one connection flag per direction"""

    def __init__(self, x: int, y: int):
        self.position = Coordinate(x, y)
        self.connections: List[bool] = [False] * len(Direction)

    def connect(self, direction: Direction):
        self.connections[direction] = True

    def is_connected(self, direction: Direction) -> bool:
        return self.connections[direction]

    def connection_count(self) -> int:
        return sum(1 for connected in self.connections if connected)

    def __repr__(self):
        return f"Node({self.position.x}, {self.position.y}, connections={self.connection_count()})"


class Board:
    """
    Connection graph of the pitch.

    The board only answers questions about nodes and records single-ended
    connections; move legality and the paired mutation belong to the engine.
    """

    def __init__(self, width: int, height: int, goal_start_x: int, goal_end_x: int):
        self.width = width
        self.height = height
        self.goal_start_x = goal_start_x
        self.goal_end_x = goal_end_x
        self._nodes: List[List[Node]] = [
            [Node(x, y) for y in range(height)] for x in range(width)
        ]

    @property
    def center(self) -> Coordinate:
        return Coordinate((self.width - 1) // 2, (self.height - 1) // 2)

    def in_bounds(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def node(self, position: Tuple[int, int]) -> Node:
        if not self.in_bounds(position):
            raise ValueError(f"Position {tuple(position)} is outside the {self.width}x{self.height} board")
        x, y = position
        return self._nodes[x][y]

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every node column by column (x-major, then y)"""
        for column in self._nodes:
            yield from column

    def connect(self, position: Tuple[int, int], direction: Direction):
        self.node(position).connect(direction)

    def is_connected(self, position: Tuple[int, int], direction: Direction) -> bool:
        return self.node(position).is_connected(direction)

    def neighbor(self, position: Tuple[int, int], direction: Direction) -> Coordinate:
        """Neighbouring coordinate in ``direction``; may lie outside the board"""
        return Coordinate(*position).offset(direction)

    def neighbors(self, position: Tuple[int, int]) -> List[Coordinate]:
        """In-bounds neighbours of ``position`` in direction order"""
        result = []
        for direction in Direction:
            candidate = self.neighbor(position, direction)
            if self.in_bounds(candidate):
                result.append(candidate)
        return result

    def connection_count(self, position: Tuple[int, int]) -> int:
        return self.node(position).connection_count()

    def total_connections(self) -> int:
        """Number of connection flags set across the whole board (two per line)"""
        return sum(node.connection_count() for node in self.iter_nodes())

    def goal_side(self, position: Tuple[int, int]) -> Optional[GoalSide]:
        """Which goal ``position`` faces, or None when it is not goal-adjacent"""
        x, y = position
        if not self.goal_start_x <= x <= self.goal_end_x:
            return None
        if y == self.height - 1:
            return GoalSide.NORTH
        if y == 0:
            return GoalSide.SOUTH
        return None

    def is_goal_adjacent(self, position: Tuple[int, int]) -> bool:
        return self.goal_side(position) is not None

    def goal_line_y(self, side: GoalSide) -> int:
        return self.height - 1 if side == GoalSide.NORTH else 0

    def node_class(self, position: Tuple[int, int]) -> NodeClass:
        x, y = position
        on_vertical_edge = x == 0 or x == self.width - 1
        on_horizontal_edge = y == 0 or y == self.height - 1

        if on_vertical_edge and on_horizontal_edge:
            return NodeClass.CORNER
        if self.is_goal_adjacent(position):
            return NodeClass.GOAL_ADJACENT
        if on_vertical_edge or on_horizontal_edge:
            return NodeClass.BORDER
        return NodeClass.CENTER


def _connect_pair(board: Board, position: Coordinate, direction: Direction):
    board.connect(position, direction)
    board.connect(position.offset(direction), opposite(direction))


def _is_goal_gap(board: Board, x: int) -> bool:
    """Whether the top/bottom edge between ``x`` and ``x + 1`` is part of a goal mouth"""
    return board.goal_start_x <= x and x + 1 <= board.goal_end_x


def build_board(width: int = 9, height: int = 11, goal_start_x: Optional[int] = None, goal_end_x: Optional[int] = None) -> Board:
    """
    Build a fresh pitch with its walls already drawn.

    Every edge along the outer border is pre-connected on both ends, except
    the edges inside the two goal mouths, so the ball can only leave the
    border through a goal.

    Args:
        width: Number of node columns (must be odd for a true centre)
        height: Number of node rows (must be odd for a true centre)
        goal_start_x: First goal-mouth column (defaults to a centred 3-wide goal)
        goal_end_x: Last goal-mouth column

    Returns:
        Board with only the border connected
    """
    if width < 3 or height < 3:
        raise ValueError("Board must be at least 3x3 nodes")
    if width % 2 == 0 or height % 2 == 0:
        raise ValueError("Board dimensions must be odd so that a centre node exists")

    if goal_start_x is None:
        goal_start_x = (width - 3) // 2
    if goal_end_x is None:
        goal_end_x = goal_start_x + 2
    if not 0 < goal_start_x < goal_end_x < width - 1:
        raise ValueError("Goal mouth must span at least two edges and stay clear of the corners")

    board = Board(width, height, goal_start_x, goal_end_x)

    # Side walls
    for x in (0, width - 1):
        for y in range(height - 1):
            _connect_pair(board, Coordinate(x, y), Direction.N)

    # End walls, leaving the goal gaps open
    for y in (0, height - 1):
        for x in range(width - 1):
            if _is_goal_gap(board, x):
                continue
            _connect_pair(board, Coordinate(x, y), Direction.E)

    logger.debug(
        f"Built {width}x{height} board with goal mouth x={goal_start_x}..{goal_end_x} "
        f"({board.total_connections() // 2} border segments)"
    )
    return board
