# paper_soccer/services/games/direction_mapper.py

"""Translate raw pointer input into board directions.

Taps resolve to the nearest node, swipes to one of eight 45 degree sectors.
Pointer deltas use the same orientation as the board: positive ``dy`` points
toward the north goal.
"""

import math
from enum import Enum
from typing import Optional, Tuple

from paper_soccer.services.games.soccer_board import (
    Board,
    Coordinate,
    Direction,
    DIRECTION_OFFSETS,
    GoalSide,
)

SWIPE_MIN_DISTANCE = 50.0
TAP_SNAP_RADIUS = 0.5
SECTOR_WIDTH = 45.0

# Sector index 0 is centred on 0 degrees, counting counter-clockwise
_SECTOR_DIRECTIONS = (
    Direction.E,
    Direction.NE,
    Direction.N,
    Direction.NW,
    Direction.W,
    Direction.SW,
    Direction.S,
    Direction.SE,
)

_DELTA_TO_DIRECTION = {offset: direction for direction, offset in DIRECTION_OFFSETS.items()}


class SwipeAction(Enum):
    MOVE = "move"
    GOAL = "goal"
    REJECTED = "rejected"


class SwipeResolution:
    """What a swipe in a given direction should do from the ball's node"""

    def __init__(
        self,
        action: SwipeAction,
        direction: Direction,
        target: Optional[Coordinate] = None,
        goal_side: Optional[GoalSide] = None,
        goal_x: Optional[int] = None,
    ):
        self.action = action
        self.direction = direction
        self.target = target
        self.goal_side = goal_side
        self.goal_x = goal_x

    def __repr__(self):
        return (
            f"SwipeResolution(action={self.action.value}, direction={self.direction.name}, "
            f"target={self.target}, goal_side={self.goal_side}, goal_x={self.goal_x})"
        )


def delta_to_direction(dx: int, dy: int) -> Optional[Direction]:
    """Exact lookup of a unit step; anything else (including (0, 0)) maps to None"""
    return _DELTA_TO_DIRECTION.get((dx, dy))


def direction_for_angle(angle: float) -> Direction:
    """Bucket an angle in degrees into the sector it falls in (lower bound inclusive)"""
    sector = math.floor((angle + SECTOR_WIDTH / 2) / SECTOR_WIDTH) % len(_SECTOR_DIRECTIONS)
    return _SECTOR_DIRECTIONS[sector]


def angle_to_direction(dx: float, dy: float) -> Direction:
    return direction_for_angle(math.degrees(math.atan2(dy, dx)))


def swipe_to_direction(dx: float, dy: float, min_distance: float = SWIPE_MIN_DISTANCE) -> Optional[Direction]:
    """Direction of a swipe, or None when it is too short to count"""
    if not math.isfinite(dx) or not math.isfinite(dy):
        return None
    if math.hypot(dx, dy) < min_distance:
        return None
    return angle_to_direction(dx, dy)


def nearest_node(board: Board, point: Tuple[float, float], snap_radius: float = TAP_SNAP_RADIUS) -> Optional[Coordinate]:
    """
    Find the node closest to a tap in grid units.

    Ties keep the first node found in x-major order. Taps farther than
    ``snap_radius`` from every node resolve to None.
    """
    px, py = point
    closest = None
    min_dist = math.inf

    for node in board.iter_nodes():
        dist = math.hypot(px - node.position.x, py - node.position.y)
        if dist < min_dist:
            min_dist = dist
            closest = node.position

    if closest is not None and min_dist <= snap_radius:
        return closest
    return None


def goal_mouth_override(board: Board, position: Coordinate, direction: Direction) -> Optional[SwipeResolution]:
    """
    Turn a swipe through the goal line into a goal shot.

    Only applies on goal-adjacent nodes and to directions pointing out of the
    pitch on that side. The shot lands on column ``x + dx``; a column outside
    the goal mouth would cross the wall beside the goal, so the swipe is
    rejected. Returns None when ordinary grid movement should handle the swipe.
    """
    side = board.goal_side(position)
    if side is None:
        return None

    dx, dy = DIRECTION_OFFSETS[direction]
    outward = 1 if side == GoalSide.NORTH else -1
    if dy != outward:
        return None

    goal_x = position.x + dx
    if not board.goal_start_x <= goal_x <= board.goal_end_x:
        return SwipeResolution(SwipeAction.REJECTED, direction, goal_side=side)
    return SwipeResolution(SwipeAction.GOAL, direction, goal_side=side, goal_x=goal_x)


def resolve_swipe(board: Board, position: Coordinate, direction: Direction) -> SwipeResolution:
    override = goal_mouth_override(board, position, direction)
    if override is not None:
        return override
    return SwipeResolution(SwipeAction.MOVE, direction, target=board.neighbor(position, direction))


def goal_tap_column(board: Board, position: Coordinate, point: Tuple[float, float], goal_depth: float) -> Optional[float]:
    """
    Goal-line column hit by a tap, when the tap lands in the goal the ball faces.

    ``point`` is ``(x, z)`` in world units. The goal area spans half a unit
    either side of the goal mouth and reaches one unit past the resting
    depth behind the goal line. The returned column is clamped to the mouth.
    """
    side = board.goal_side(position)
    if side is None:
        return None

    px, pz = point
    if not board.goal_start_x - 0.5 <= px <= board.goal_end_x + 0.5:
        return None

    line = board.goal_line_y(side)
    beyond = pz - line if side == GoalSide.NORTH else line - pz
    if not 0 < beyond <= goal_depth + 1.0:
        return None

    return min(max(px, float(board.goal_start_x)), float(board.goal_end_x))
