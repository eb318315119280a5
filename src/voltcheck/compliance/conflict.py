"""Conflict data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..geometry import Point


class ConflictKind(Enum):
    """Kinds of placement conflicts."""

    OVERLAP = "overlap"  # Same-system devices closer than the overlap radius
    CODE_SPACING = "code-spacing"  # Nearest same-type fire device beyond NFPA 72 spacing
    WALL_PROXIMITY = "wall-proximity"  # Device too close to a wall of its room
    OUTSIDE_BOUNDARY = "outside-boundary"  # Device not inside any room
    COVERAGE_GAP = "coverage-gap"  # Reserved, no rule produces it yet

    @classmethod
    def from_string(cls, s: str) -> "ConflictKind":
        """Parse conflict kind from string."""
        s_norm = s.lower().strip().replace("_", "-")
        for kind in cls:
            if kind.value == s_norm:
                return kind
        # Older layouts used "nfpa-spacing"
        if "spacing" in s_norm or "nfpa" in s_norm:
            return cls.CODE_SPACING
        if "wall" in s_norm:
            return cls.WALL_PROXIMITY
        if "boundary" in s_norm or "outside" in s_norm:
            return cls.OUTSIDE_BOUNDARY
        if "coverage" in s_norm:
            return cls.COVERAGE_GAP
        raise ValueError(f"Unknown conflict kind: {s!r}")


class ConflictSeverity(Enum):
    """Severity level of a conflict."""

    ERROR = "error"  # Blocks a compliant layout
    WARNING = "warning"  # Needs review, may need an added device

    @classmethod
    def from_string(cls, s: str) -> "ConflictSeverity":
        if "error" in s.lower():
            return cls.ERROR
        return cls.WARNING


class WallSide(Enum):
    """Room walls, in tie-break order."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class Conflict:
    """A detected violation attached to one device.

    Conflicts are plain data. Whether a corrected position can be computed is
    recorded in ``has_auto_fix``; the correction itself lives in
    :mod:`voltcheck.compliance.autofix`.
    """

    id: str
    device_id: str
    kind: ConflictKind
    severity: ConflictSeverity
    message: str
    related_device_id: Optional[str] = None
    suggestion: Optional[str] = None
    has_auto_fix: bool = False

    # Measurements, inches
    actual_distance: Optional[float] = None
    required_distance: Optional[float] = None
    wall: Optional[WallSide] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ConflictSeverity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.value.upper()} [{self.kind.value}] {self.device_id}: {self.message}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "device_id": self.device_id,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "related_device_id": self.related_device_id,
            "suggestion": self.suggestion,
            "has_auto_fix": self.has_auto_fix,
            "actual_distance": self.actual_distance,
            "required_distance": self.required_distance,
            "wall": self.wall.value if self.wall else None,
        }


def conflict_id(device_id: str, kind: ConflictKind, related_device_id: Optional[str] = None) -> str:
    """Deterministic conflict id, stable across validation passes."""
    if related_device_id is None:
        return f"conflict-{device_id}-{kind.value}"
    return f"conflict-{device_id}-{kind.value}-{related_device_id}"


@dataclass(frozen=True)
class PlacementFix:
    """A proposed device move that resolves one conflict."""

    conflict: Conflict
    device_id: str
    old_position: Point
    new_position: Point

    @property
    def move_vector(self) -> Point:
        return self.new_position - self.old_position

    def __str__(self) -> str:
        move = self.move_vector
        return (
            f"FIX: Move {self.device_id} by ({move.x:+.2f}, {move.y:+.2f})in "
            f"to resolve {self.conflict.kind.value}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "conflict_id": self.conflict.id,
            "device_id": self.device_id,
            "conflict_kind": self.conflict.kind.value,
            "old_position": {"x": self.old_position.x, "y": self.old_position.y},
            "new_position": {"x": self.new_position.x, "y": self.new_position.y},
            "move_vector": {"x": self.move_vector.x, "y": self.move_vector.y},
        }
