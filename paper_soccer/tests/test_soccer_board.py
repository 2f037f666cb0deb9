# paper_soccer/tests/test_soccer_board.py

import pytest
from paper_soccer.services.games.soccer_board import (
    Board,
    Coordinate,
    Direction,
    GoalSide,
    Node,
    NodeClass,
    build_board,
    opposite,
)


class TestDirections:
    """Tests for direction helpers"""

    def test_opposite_pairs(self):
        """Test every direction's opposite"""
        assert opposite(Direction.N) == Direction.S
        assert opposite(Direction.NE) == Direction.SW
        assert opposite(Direction.E) == Direction.W
        assert opposite(Direction.SE) == Direction.NW
        assert opposite(Direction.W) == Direction.E

    def test_opposite_is_involution(self):
        """Test opposite applied twice returns the starting direction"""
        for direction in Direction:
            assert opposite(opposite(direction)) == direction

    def test_offset_north_increases_y(self):
        """Test that north points toward higher y"""
        assert Coordinate(4, 5).offset(Direction.N) == Coordinate(4, 6)
        assert Coordinate(4, 5).offset(Direction.SW) == Coordinate(3, 4)

    def test_neighbor_then_opposite_returns_origin(self):
        """Test neighbour symmetry for every in-bounds node and direction"""
        board = build_board()
        for node in board.iter_nodes():
            for direction in Direction:
                neighbor = board.neighbor(node.position, direction)
                if not board.in_bounds(neighbor):
                    continue
                assert board.neighbor(neighbor, opposite(direction)) == node.position


class TestNode:
    """Tests for Node"""

    def test_new_node_has_no_connections(self):
        """Test fresh node state"""
        node = Node(2, 3)

        assert node.position == Coordinate(2, 3)
        assert node.connections == [False] * 8
        assert node.connection_count() == 0

    def test_connect_sets_single_flag(self):
        """Test connect only touches the given direction"""
        node = Node(0, 0)
        node.connect(Direction.NE)

        assert node.is_connected(Direction.NE) is True
        assert node.is_connected(Direction.SW) is False
        assert node.connection_count() == 1


class TestBoardBuilder:
    """Tests for build_board"""

    def test_default_dimensions(self):
        """Test the classic 9x11 pitch"""
        board = build_board()

        assert board.width == 9
        assert board.height == 11
        assert board.goal_start_x == 3
        assert board.goal_end_x == 5
        assert board.center == Coordinate(4, 5)

    def test_border_segments_count(self):
        """Test 20 side-wall segments plus 12 end-wall segments are drawn"""
        board = build_board()

        assert board.total_connections() == 64

    def test_goal_gaps_left_open(self):
        """Test the goal mouth edges are not connected on either end row"""
        board = build_board()

        for y in (0, 10):
            assert board.is_connected((3, y), Direction.E) is False
            assert board.is_connected((4, y), Direction.W) is False
            assert board.is_connected((4, y), Direction.E) is False
            assert board.is_connected((5, y), Direction.W) is False
            assert board.connection_count((4, y)) == 0

    def test_walls_next_to_goal_are_drawn(self):
        """Test the end-wall edges just outside the goal mouth"""
        board = build_board()

        assert board.is_connected((2, 0), Direction.E) is True
        assert board.is_connected((3, 0), Direction.W) is True
        assert board.is_connected((5, 10), Direction.E) is True
        assert board.is_connected((6, 10), Direction.W) is True

    def test_corners_have_both_walls(self):
        """Test each corner is connected along both of its border edges"""
        board = build_board()

        assert board.node((0, 0)).connections[Direction.N] is True
        assert board.node((0, 0)).connections[Direction.E] is True
        assert board.connection_count((8, 10)) == 2
        assert board.is_connected((8, 10), Direction.S) is True
        assert board.is_connected((8, 10), Direction.W) is True

    def test_side_wall_nodes(self):
        """Test side-wall nodes are connected north and south only"""
        board = build_board()

        assert board.is_connected((0, 5), Direction.N) is True
        assert board.is_connected((0, 5), Direction.S) is True
        assert board.connection_count((0, 5)) == 2

    def test_interior_is_empty(self):
        """Test no interior node starts with a connection"""
        board = build_board()

        for x in range(1, 8):
            for y in range(1, 10):
                assert board.connection_count((x, y)) == 0

    def test_border_connections_are_paired(self):
        """Test every pre-built connection has its mirror on the neighbour"""
        board = build_board()

        for node in board.iter_nodes():
            for direction in Direction:
                if node.is_connected(direction):
                    neighbor = board.neighbor(node.position, direction)
                    assert board.in_bounds(neighbor)
                    assert board.is_connected(neighbor, opposite(direction))

    def test_small_board_goal_is_centred(self):
        """Test default goal placement on a 7x9 pitch"""
        board = build_board(7, 9)

        assert board.goal_start_x == 2
        assert board.goal_end_x == 4
        assert board.connection_count((3, 0)) == 0

    def test_rejects_even_dimensions(self):
        """Test a board without a centre node is refused"""
        with pytest.raises(ValueError, match="odd"):
            build_board(8, 11)

    def test_rejects_tiny_board(self):
        """Test boards smaller than 3x3 are refused"""
        with pytest.raises(ValueError, match="at least 3x3"):
            build_board(1, 1)

    def test_rejects_goal_touching_corner(self):
        """Test goal mouths must stay clear of the corners"""
        with pytest.raises(ValueError, match="Goal mouth"):
            build_board(9, 11, 0, 2)


class TestBoardQueries:
    """Tests for Board queries"""

    def test_in_bounds(self):
        """Test bounds checks on the edges"""
        board = build_board()

        assert board.in_bounds((0, 0)) is True
        assert board.in_bounds((8, 10)) is True
        assert board.in_bounds((9, 0)) is False
        assert board.in_bounds((0, -1)) is False

    def test_node_outside_board_raises(self):
        """Test node lookup outside the board"""
        board = build_board()

        with pytest.raises(ValueError, match="outside"):
            board.node((9, 11))

    def test_neighbors_of_center(self):
        """Test all eight neighbours of an interior node"""
        board = build_board()

        assert len(board.neighbors((4, 5))) == 8
        assert board.neighbors((4, 5))[0] == Coordinate(4, 6)

    def test_neighbors_of_corner(self):
        """Test a corner only has three in-bounds neighbours"""
        board = build_board()

        assert set(board.neighbors((0, 0))) == {Coordinate(0, 1), Coordinate(1, 1), Coordinate(1, 0)}

    def test_neighbor_may_leave_board(self):
        """Test neighbour computation does not bounds-check"""
        board = build_board()

        assert board.neighbor((0, 0), Direction.SW) == Coordinate(-1, -1)

    @pytest.mark.parametrize("position,expected", [
        ((4, 5), NodeClass.CENTER),
        ((1, 1), NodeClass.CENTER),
        ((0, 5), NodeClass.BORDER),
        ((2, 10), NodeClass.BORDER),
        ((6, 0), NodeClass.BORDER),
        ((0, 0), NodeClass.CORNER),
        ((8, 10), NodeClass.CORNER),
        ((3, 10), NodeClass.GOAL_ADJACENT),
        ((4, 0), NodeClass.GOAL_ADJACENT),
        ((5, 0), NodeClass.GOAL_ADJACENT),
    ])
    def test_node_class(self, position, expected):
        """Test positional classes used by stalemate detection"""
        assert build_board().node_class(position) == expected

    def test_goal_side(self):
        """Test which goal a node faces"""
        board = build_board()

        assert board.goal_side((4, 10)) == GoalSide.NORTH
        assert board.goal_side((3, 0)) == GoalSide.SOUTH
        assert board.goal_side((2, 0)) is None
        assert board.goal_side((4, 5)) is None

    def test_connect_is_single_ended(self):
        """Test Board.connect leaves the neighbour untouched"""
        board = Board(3, 3, 1, 1)
        board.connect((1, 1), Direction.N)

        assert board.is_connected((1, 1), Direction.N) is True
        assert board.is_connected((1, 2), Direction.S) is False
