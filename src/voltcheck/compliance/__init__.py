"""
Spatial compliance checks and auto-fixes for device layouts.

This module detects placement conflicts on a floor plan:
- Overlapping devices of the same system
- NFPA 72 spacing between same-type fire devices
- Devices too close to a wall
- Devices outside every room

Usage:
    from voltcheck.compliance import LayoutFixer, validate_layout

    result = validate_layout(rooms, devices)
    print(result.stats.to_dict())

    fixer = LayoutFixer()
    fixes = fixer.suggest_fixes(result)
"""

from .autofix import auto_fix, has_auto_fix
from .conflict import (
    Conflict,
    ConflictKind,
    ConflictSeverity,
    PlacementFix,
    WallSide,
)
from .context import ValidationContext
from .fixer import FixResult, LayoutFixer, apply_auto_fix, suggest_fixes
from .lookup import find_containing_room
from .models import Blueprint, Device, DeviceType, Room, RoomType, SystemType
from .rules import (
    DEFAULT_SPACING_FT,
    MIN_WALL_DISTANCE,
    OVERLAP_RADIUS,
    ComplianceRules,
    check_boundary,
    check_code_spacing,
    check_overlap,
    check_wall_proximity,
)
from .summary import ConflictStats, summarize
from .validator import (
    LayoutValidator,
    SpatialIndexMode,
    ValidationResult,
    validate_device,
    validate_layout,
)

__all__ = [
    # Models
    "Blueprint",
    "Device",
    "DeviceType",
    "Room",
    "RoomType",
    "SystemType",
    # Conflicts
    "Conflict",
    "ConflictKind",
    "ConflictSeverity",
    "PlacementFix",
    "WallSide",
    # Rules
    "ComplianceRules",
    "DEFAULT_SPACING_FT",
    "MIN_WALL_DISTANCE",
    "OVERLAP_RADIUS",
    "check_boundary",
    "check_code_spacing",
    "check_overlap",
    "check_wall_proximity",
    "find_containing_room",
    # Validation
    "LayoutValidator",
    "SpatialIndexMode",
    "ValidationContext",
    "ValidationResult",
    "validate_device",
    "validate_layout",
    # Fixes
    "FixResult",
    "LayoutFixer",
    "apply_auto_fix",
    "auto_fix",
    "has_auto_fix",
    "suggest_fixes",
    # Summary
    "ConflictStats",
    "summarize",
]
