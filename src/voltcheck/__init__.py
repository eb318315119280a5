"""
voltcheck: placement compliance checks for low-voltage device layouts.

Checks fire alarm, CCTV and access control devices placed on a floor plan
against spatial rules, explains every conflict, and can move devices to
resolve the ones with a deterministic fix.

Modules:
    geometry: Points, rectangles and distance
    compliance: Rule evaluators, validation, auto-fix and summaries
    layout_io: JSON layout files
    config: TOML configuration
    units: Inch/feet display formatting

Quick Start::

    from voltcheck import load_layout, LayoutValidator, LayoutFixer

    blueprint = load_layout("level1.json")
    result = LayoutValidator().validate_blueprint(blueprint)
    print(result.stats.to_dict())

    outcome = LayoutFixer().apply_all(result)
    print(outcome.message)
"""

__version__ = "0.1.0"

from voltcheck.compliance import (
    Blueprint,
    ComplianceRules,
    Conflict,
    ConflictKind,
    ConflictSeverity,
    ConflictStats,
    Device,
    DeviceType,
    FixResult,
    LayoutFixer,
    LayoutValidator,
    Room,
    RoomType,
    SystemType,
    ValidationResult,
    apply_auto_fix,
    auto_fix,
    summarize,
    validate_layout,
)
from voltcheck.config import Config
from voltcheck.exceptions import (
    ConfigurationError,
    LayoutFormatError,
    LayoutNotFoundError,
    VoltCheckError,
)
from voltcheck.geometry import Point, Rectangle, distance, point_in_rect
from voltcheck.layout_io import load_layout, save_layout

__all__ = [
    "__version__",
    # Geometry
    "Point",
    "Rectangle",
    "distance",
    "point_in_rect",
    # Layout
    "Blueprint",
    "Device",
    "DeviceType",
    "Room",
    "RoomType",
    "SystemType",
    "load_layout",
    "save_layout",
    # Compliance
    "ComplianceRules",
    "Conflict",
    "ConflictKind",
    "ConflictSeverity",
    "ConflictStats",
    "FixResult",
    "LayoutFixer",
    "LayoutValidator",
    "ValidationResult",
    "apply_auto_fix",
    "auto_fix",
    "summarize",
    "validate_layout",
    # Config and errors
    "Config",
    "ConfigurationError",
    "LayoutFormatError",
    "LayoutNotFoundError",
    "VoltCheckError",
]
