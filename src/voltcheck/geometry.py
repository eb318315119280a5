"""Geometry primitives in blueprint space.

All coordinates are inches, with the origin at the top-left corner of the
blueprint and y growing downward (so a room's "top" wall is at ``y``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = [
    "Point",
    "Rectangle",
    "distance",
    "point_in_rect",
]


@dataclass(frozen=True)
class Point:
    """2D point in inches."""

    x: float
    y: float

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: Point) -> float:
        """Calculate distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"Point({self.x:.2f}, {self.y:.2f})"


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle given by its origin and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def contains(self, p: Point) -> bool:
        """Inclusive containment test (points on an edge are inside)."""
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def __repr__(self) -> str:
        return f"Rectangle({self.x:.2f}, {self.y:.2f}, {self.width:.2f}, {self.height:.2f})"


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return p1.distance_to(p2)


def point_in_rect(p: Point, rect: Rectangle) -> bool:
    """Inclusive bounds test: ``rect.x <= p.x <= rect.x + rect.width`` and likewise for y."""
    return rect.contains(p)
