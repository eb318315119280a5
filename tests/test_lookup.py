"""Tests for room lookup and wall distances."""

from voltcheck.compliance import Room, WallSide, find_containing_room
from voltcheck.compliance.lookup import nearest_wall, wall_distances
from voltcheck.geometry import Point


class TestFindContainingRoom:
    def test_device_inside(self, make_device, office):
        assert find_containing_room(make_device("d1", 120, 90), [office]) == office

    def test_device_on_edge_is_inside(self, make_device, office):
        assert find_containing_room(make_device("d1", 0, 90), [office]) == office

    def test_device_outside(self, make_device, office):
        assert find_containing_room(make_device("d1", 300, 90), [office]) is None

    def test_no_rooms(self, make_device):
        assert find_containing_room(make_device("d1", 0, 0), []) is None

    def test_overlapping_rooms_first_match(self, make_device):
        first = Room(id="a", name="A", x=0, y=0, width=100, height=100)
        second = Room(id="b", name="B", x=50, y=50, width=100, height=100)
        device = make_device("d1", 75, 75)

        assert find_containing_room(device, [first, second]) == first
        assert find_containing_room(device, [second, first]) == second


class TestNearestWall:
    def test_distances_in_tie_break_order(self, office):
        sides = [side for side, _ in wall_distances(Point(10, 20), office)]
        assert sides == [WallSide.LEFT, WallSide.RIGHT, WallSide.TOP, WallSide.BOTTOM]

    def test_each_wall(self, office):
        assert nearest_wall(Point(3, 90), office) == (WallSide.LEFT, 3)
        assert nearest_wall(Point(237, 90), office) == (WallSide.RIGHT, 3)
        assert nearest_wall(Point(120, 2), office) == (WallSide.TOP, 2)
        assert nearest_wall(Point(120, 179), office) == (WallSide.BOTTOM, 1)

    def test_tie_goes_to_left_then_right_then_top(self, office):
        assert nearest_wall(Point(3, 3), office)[0] == WallSide.LEFT
        assert nearest_wall(Point(237, 3), office)[0] == WallSide.RIGHT
        assert nearest_wall(Point(237, 177), office)[0] == WallSide.RIGHT
        assert nearest_wall(Point(120, 90), Room("sq", "", 30, 0, 180, 180))[0] == WallSide.LEFT

    def test_offset_room(self):
        room = Room(id="r2", name="Storage", x=240, y=0, width=120, height=180)
        assert nearest_wall(Point(242, 90), room) == (WallSide.LEFT, 2)
