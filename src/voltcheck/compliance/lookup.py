"""Room lookup for device positions."""

from __future__ import annotations

from typing import Iterable, Optional

from ..geometry import Point, point_in_rect
from .conflict import WallSide
from .models import Device, Room


def find_containing_room(device: Device, rooms: Iterable[Room]) -> Optional[Room]:
    """Return the first room, in iteration order, whose rectangle contains the device.

    Rooms are expected not to overlap. When they do, the earliest room in
    ``rooms`` wins.
    """
    position = device.position
    for room in rooms:
        if point_in_rect(position, room.rect):
            return room
    return None


def wall_distances(position: Point, room: Room) -> list[tuple[WallSide, float]]:
    """Perpendicular distance from a point to each wall, in tie-break order."""
    return [
        (WallSide.LEFT, position.x - room.x),
        (WallSide.RIGHT, room.x + room.width - position.x),
        (WallSide.TOP, position.y - room.y),
        (WallSide.BOTTOM, room.y + room.height - position.y),
    ]


def nearest_wall(position: Point, room: Room) -> tuple[WallSide, float]:
    """The closest wall and its distance. Ties go to the earlier of left, right, top, bottom."""
    best_side, best = WallSide.LEFT, float("inf")
    for side, dist in wall_distances(position, room):
        if dist < best:
            best_side, best = side, dist
    return best_side, best
