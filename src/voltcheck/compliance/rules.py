"""Placement rule evaluators.

Each evaluator is a pure function of ``(device, context)`` returning at most
one :class:`Conflict`:

- Overlap: same-system devices closer than the overlap radius
- Code-Spacing: nearest same-type fire device farther than NFPA 72 allows
- Wall-Proximity: device too close to a wall of its room
- Boundary-Containment: device outside every room
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Mapping, Optional

import numpy as np

from ..units import INCHES_PER_FOOT
from .autofix import has_auto_fix
from .conflict import Conflict, ConflictKind, ConflictSeverity, conflict_id
from .lookup import find_containing_room, nearest_wall
from .models import Device, DeviceKind, DeviceType, SystemType

if TYPE_CHECKING:
    from .context import ValidationContext

# Devices of the same system closer than this overlap, inches
OVERLAP_RADIUS = 12.0

# Minimum distance from any wall, inches
MIN_WALL_DISTANCE = 4.0

# NFPA 72 maximum spacing, feet. Types not listed have no spacing rule.
DEFAULT_SPACING_FT: dict[DeviceType, float] = {
    DeviceType.SMOKE_DETECTOR: 30.0,
    DeviceType.HEAT_DETECTOR: 25.0,
    DeviceType.CO_DETECTOR: 15.0,
    DeviceType.PULL_STATION: 200.0,  # travel distance
    DeviceType.STROBE: 100.0,  # visibility
    DeviceType.HORN: 100.0,  # audibility
}


@dataclass(frozen=True)
class ComplianceRules:
    """Thresholds for conflict detection and correction."""

    overlap_radius: float = OVERLAP_RADIUS  # inches
    overlap_fix_clearance: float = 2.0  # inches beyond the radius an overlap fix moves to
    min_wall_distance: float = MIN_WALL_DISTANCE  # inches
    wall_fix_clearance: float = 1.0  # inches beyond the minimum a wall fix moves to
    spacing_ft: Mapping[DeviceKind, float] = field(
        default_factory=lambda: dict(DEFAULT_SPACING_FT), hash=False
    )

    def required_spacing(self, device_type: DeviceKind) -> Optional[float]:
        """Maximum spacing for a device type in inches, or None when it has no rule."""
        feet = self.spacing_ft.get(device_type)
        if not feet:
            return None
        return feet * INCHES_PER_FOOT


Evaluator = Callable[[Device, "ValidationContext"], Optional[Conflict]]


def check_overlap(device: Device, context: ValidationContext) -> Optional[Conflict]:
    """Report the first same-system device, in input order, inside the overlap radius."""
    rules = context.rules
    table = context.table
    radius = rules.overlap_radius

    if context.grid is not None:
        candidates = context.grid.candidates(device.system, None, device.x, device.y, radius)
    else:
        candidates = table.bucket(device.system)
    candidates = candidates[table.ids[candidates] != device.id]
    if candidates.size == 0:
        return None

    dists = table.distances(candidates, device.x, device.y)
    hits = np.flatnonzero(dists < radius)
    if hits.size == 0:
        return None

    other = context.devices[int(candidates[hits[0]])]
    dist = float(dists[hits[0]])
    kind = ConflictKind.OVERLAP
    return Conflict(
        id=conflict_id(device.id, kind, other.id),
        device_id=device.id,
        kind=kind,
        severity=ConflictSeverity.ERROR,
        message=(
            f"{device.label} overlaps with {other.label} "
            f'({dist:.1f}" apart, minimum {radius:g}")'
        ),
        related_device_id=other.id,
        suggestion=f"Move device away from {other.label}",
        has_auto_fix=has_auto_fix(kind),
        actual_distance=dist,
        required_distance=radius,
    )


def check_code_spacing(device: Device, context: ValidationContext) -> Optional[Conflict]:
    """Report when the nearest same-type fire device exceeds the NFPA 72 spacing."""
    if device.system != SystemType.FIRE:
        return None
    required = context.rules.required_spacing(device.device_type)
    if required is None:
        return None

    table = context.table

    if context.grid is not None:
        # Any peer within the limit means the nearest one is too
        near = context.grid.candidates(SystemType.FIRE, device.device_type, device.x, device.y, required)
        near = near[table.ids[near] != device.id]
        if near.size and bool(np.any(table.distances(near, device.x, device.y) <= required)):
            return None

    peers = table.bucket(SystemType.FIRE, device.device_type)
    peers = peers[table.ids[peers] != device.id]
    if peers.size == 0:
        return None

    dists = table.distances(peers, device.x, device.y)
    # NaN distances come from non-finite positions and never count as nearest
    measurable = ~np.isnan(dists)
    if not measurable.any():
        return None
    peers, dists = peers[measurable], dists[measurable]
    k = int(np.argmin(dists))
    nearest = float(dists[k])
    if nearest <= required:
        return None

    other = context.devices[int(peers[k])]
    kind = ConflictKind.CODE_SPACING
    return Conflict(
        id=conflict_id(device.id, kind),
        device_id=device.id,
        kind=kind,
        severity=ConflictSeverity.WARNING,
        message=(
            f"{device.label} is {nearest / INCHES_PER_FOOT:.1f}ft from nearest {other.label}, "
            f"exceeding NFPA 72 maximum of {required / INCHES_PER_FOOT:g}ft"
        ),
        related_device_id=other.id,
        suggestion=f"Add a {device.type_name} between these devices",
        has_auto_fix=has_auto_fix(kind),
        actual_distance=nearest,
        required_distance=required,
    )


def check_wall_proximity(device: Device, context: ValidationContext) -> Optional[Conflict]:
    """Report when a device sits closer than the minimum to a wall of its room."""
    room = find_containing_room(device, context.rooms)
    if room is None:
        # Outside every room: boundary containment reports it
        return None

    minimum = context.rules.min_wall_distance
    wall, dist = nearest_wall(device.position, room)
    if dist >= minimum:
        return None

    kind = ConflictKind.WALL_PROXIMITY
    return Conflict(
        id=conflict_id(device.id, kind),
        device_id=device.id,
        kind=kind,
        severity=ConflictSeverity.ERROR,
        message=(
            f"{device.label} is too close to {wall.value} wall of {room.name or room.id} "
            f'({dist:.1f}" < {minimum:g}")'
        ),
        suggestion=f"Move device at least {minimum:g} inches from walls",
        has_auto_fix=has_auto_fix(kind),
        actual_distance=dist,
        required_distance=minimum,
        wall=wall,
    )


def check_boundary(device: Device, context: ValidationContext) -> Optional[Conflict]:
    """Report a device that no room contains."""
    if find_containing_room(device, context.rooms) is not None:
        return None

    kind = ConflictKind.OUTSIDE_BOUNDARY
    where = f" on {context.blueprint.name}" if context.blueprint and context.blueprint.name else ""
    return Conflict(
        id=conflict_id(device.id, kind),
        device_id=device.id,
        kind=kind,
        severity=ConflictSeverity.ERROR,
        message=(
            f"{device.label} at ({device.x:.1f}, {device.y:.1f}) is placed outside "
            f"all room boundaries{where}"
        ),
        suggestion="Move device inside a room",
        has_auto_fix=has_auto_fix(kind),
    )


# Evaluation order per device
RULES: tuple[Evaluator, ...] = (
    check_overlap,
    check_code_spacing,
    check_wall_proximity,
    check_boundary,
)
