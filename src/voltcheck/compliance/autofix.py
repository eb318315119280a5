"""Auto-fix resolver: corrected device positions for fixable conflicts.

Corrections are looked up by conflict kind in a strategy table. A strategy
only computes a destination; moving the device and re-validating is the
caller's job (see :class:`voltcheck.compliance.fixer.LayoutFixer`).
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Optional

from .conflict import Conflict, ConflictKind, WallSide
from .lookup import find_containing_room, nearest_wall
from .models import Device

if TYPE_CHECKING:
    from .context import ValidationContext

logger = logging.getLogger(__name__)

# Push direction for an overlap fix when both devices share a position
COINCIDENT_FALLBACK_DIRECTION = (1.0, 0.0)

Position = tuple[float, float]
FixStrategy = Callable[[Conflict, Device, "ValidationContext"], Optional[Position]]


def _fix_overlap(conflict: Conflict, device: Device, context: ValidationContext) -> Optional[Position]:
    """Move along the line from the other device to ``radius + clearance`` away from it."""
    if conflict.related_device_id is None:
        return None
    other = context.get_device(conflict.related_device_id)
    if other is None:
        logger.warning(
            "Overlap conflict %s refers to missing device %s",
            conflict.id,
            conflict.related_device_id,
        )
        return None

    dx = device.x - other.x
    dy = device.y - other.y
    dist = math.hypot(dx, dy)
    if dist == 0:
        ux, uy = COINCIDENT_FALLBACK_DIRECTION
    else:
        ux, uy = dx / dist, dy / dist

    target = context.rules.overlap_radius + context.rules.overlap_fix_clearance
    return (other.x + ux * target, other.y + uy * target)


def _fix_wall_proximity(
    conflict: Conflict, device: Device, context: ValidationContext
) -> Optional[Position]:
    """Push the device perpendicular to the violated wall; the other axis is kept."""
    room = find_containing_room(device, context.rooms)
    if room is None:
        return None

    wall = conflict.wall or nearest_wall(device.position, room)[0]
    offset = context.rules.min_wall_distance + context.rules.wall_fix_clearance

    if wall == WallSide.LEFT:
        return (room.x + offset, device.y)
    if wall == WallSide.RIGHT:
        return (room.x + room.width - offset, device.y)
    if wall == WallSide.TOP:
        return (device.x, room.y + offset)
    return (device.x, room.y + room.height - offset)


# Code-spacing needs a new device and boundary needs a human choice of room:
# neither has an entry.
_STRATEGIES: dict[ConflictKind, FixStrategy] = {
    ConflictKind.OVERLAP: _fix_overlap,
    ConflictKind.WALL_PROXIMITY: _fix_wall_proximity,
}


def has_auto_fix(kind: ConflictKind) -> bool:
    """Whether conflicts of this kind can be corrected geometrically."""
    return kind in _STRATEGIES


def auto_fix(conflict: Conflict, context: ValidationContext) -> Optional[Position]:
    """Compute a corrected ``(x, y)`` for the conflict's device.

    Pure: nothing is mutated. Returns None when the kind has no correction or
    the devices the conflict names are not part of ``context``. The result may
    introduce new conflicts; re-validate after applying it.
    """
    strategy = _STRATEGIES.get(conflict.kind)
    if strategy is None:
        return None

    device = context.get_device(conflict.device_id)
    if device is None:
        logger.warning("Conflict %s refers to missing device %s", conflict.id, conflict.device_id)
        return None

    return strategy(conflict, device, context)
