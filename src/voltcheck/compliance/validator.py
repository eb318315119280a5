"""Conflict aggregation over a whole layout.

Runs every rule evaluator over every device, attaches the findings to the
devices and collects them in one flat list.

Usage:
    from voltcheck.compliance import validate_layout

    result = validate_layout(rooms, devices)
    for conflict in result.conflicts:
        print(conflict)

    # Or with custom rules and a worker pool:
    validator = LayoutValidator(rules=ComplianceRules(overlap_radius=18), workers=4)
    result = validator.validate(rooms, devices)

Pairwise rules scan all same-bucket devices, O(n^2) per pass, and the room
rules are O(n*m). That is fine for a floor's worth of devices (tens to low
hundreds). Past ``index_threshold`` devices a :class:`GridIndex` limits the
pairwise scans to nearby cells; findings are identical either way.
"""

from __future__ import annotations

import copy
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from .conflict import Conflict
from .context import ValidationContext
from .models import Blueprint, Device, Room
from .rules import RULES, ComplianceRules
from .summary import ConflictStats, summarize

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)


class SpatialIndexMode(Enum):
    """When to build a grid index for the pairwise rules."""

    AUTO = "auto"  # Only for layouts at or above the threshold
    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def from_string(cls, s: str) -> "SpatialIndexMode":
        s_lower = s.lower().strip()
        for mode in cls:
            if mode.value == s_lower:
                return mode
        raise ValueError(f"Unknown spatial index mode: {s!r} (expected auto, always or never)")


@dataclass
class ValidationResult:
    """Outcome of one validation pass.

    Attributes:
        devices: Copies of the input devices with ``conflicts`` filled in
        conflicts: All conflicts, grouped by device in input order
        context: The context the pass ran against
    """

    devices: list[Device]
    conflicts: list[Conflict]
    context: ValidationContext

    @property
    def stats(self) -> ConflictStats:
        return summarize(self.conflicts)

    @property
    def passed(self) -> bool:
        """True when no error-severity conflict was found."""
        return not any(c.is_error for c in self.conflicts)

    def devices_with_conflicts(self) -> list[Device]:
        return [d for d in self.devices if d.conflicts]

    def find_conflict(self, conflict_id: str) -> Optional[Conflict]:
        for conflict in self.conflicts:
            if conflict.id == conflict_id:
                return conflict
        return None

    def conflicts_for(self, device_id: str) -> list[Conflict]:
        return [c for c in self.conflicts if c.device_id == device_id]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "conflicts": [c.to_dict() for c in self.conflicts],
            "summary": self.stats.to_dict(),
        }


def validate_device(device: Device, context: ValidationContext) -> list[Conflict]:
    """Run all rules against one device, in rule order. At most one finding per rule."""
    conflicts: list[Conflict] = []
    for rule in RULES:
        if conflict := rule(device, context):
            conflicts.append(conflict)
    return conflicts


class LayoutValidator:
    """Validates device layouts against the placement rules.

    Usage:
        validator = LayoutValidator()
        result = validator.validate(rooms, devices)

        # Or configured from voltcheck.toml:
        validator = LayoutValidator.from_config(Config.load())
    """

    def __init__(
        self,
        rules: Optional[ComplianceRules] = None,
        workers: int = 1,
        spatial_index: SpatialIndexMode = SpatialIndexMode.AUTO,
        index_cell_size: float = 120.0,
        index_threshold: int = 500,
    ):
        """Initialize validator.

        Args:
            rules: Thresholds and spacing table (uses defaults if None)
            workers: Threads used to evaluate devices; 1 runs serially
            spatial_index: When to use the grid index
            index_cell_size: Grid cell edge in inches
            index_threshold: Device count at which AUTO switches the grid on
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if index_cell_size <= 0:
            raise ValueError(f"index_cell_size must be positive, got {index_cell_size}")
        self.rules = rules or ComplianceRules()
        self.workers = workers
        self.spatial_index = spatial_index
        self.index_cell_size = index_cell_size
        self.index_threshold = index_threshold

    @classmethod
    def from_config(cls, config: Config) -> "LayoutValidator":
        """Create a validator from loaded configuration."""
        return cls(
            rules=config.to_rules(),
            workers=config.engine.workers,
            spatial_index=SpatialIndexMode.from_string(config.engine.spatial_index),
            index_cell_size=config.engine.index_cell_size,
            index_threshold=config.engine.index_threshold,
        )

    def _use_grid(self, device_count: int) -> bool:
        if self.spatial_index == SpatialIndexMode.ALWAYS:
            return True
        if self.spatial_index == SpatialIndexMode.NEVER:
            return False
        return device_count >= self.index_threshold

    def build_context(
        self,
        rooms: Iterable[Room],
        devices: Iterable[Device],
        blueprint: Optional[Blueprint] = None,
    ) -> ValidationContext:
        devices = tuple(devices)
        return ValidationContext.build(
            rooms,
            devices,
            blueprint=blueprint,
            rules=self.rules,
            use_grid=self._use_grid(len(devices)),
            cell_size=self.index_cell_size,
        )

    def validate(
        self,
        rooms: Iterable[Room],
        devices: Iterable[Device],
        blueprint: Optional[Blueprint] = None,
    ) -> ValidationResult:
        """Validate every device of a layout.

        Args:
            rooms: Room rectangles
            devices: Devices to check; they are not modified
            blueprint: Blueprint the layout belongs to (messages only)

        Returns:
            ValidationResult with per-device and flat conflict lists
        """
        start = time.perf_counter()
        context = self.build_context(rooms, devices, blueprint)
        return self.validate_context(context, start)

    def validate_context(
        self, context: ValidationContext, start: Optional[float] = None
    ) -> ValidationResult:
        """Validate a prepared context."""
        if start is None:
            start = time.perf_counter()

        if self.workers > 1 and len(context.devices) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                per_device = list(pool.map(lambda d: validate_device(d, context), context.devices))
        else:
            per_device = [validate_device(d, context) for d in context.devices]

        devices: list[Device] = []
        conflicts: list[Conflict] = []
        for device, found in zip(context.devices, per_device):
            devices.append(
                replace(device, properties=copy.deepcopy(device.properties), conflicts=found)
            )
            conflicts.extend(found)

        logger.debug(
            "Validated %d devices against %d rooms: %d conflicts in %.1fms (grid=%s, workers=%d)",
            len(context.devices),
            len(context.rooms),
            len(conflicts),
            (time.perf_counter() - start) * 1000,
            context.grid is not None,
            self.workers,
        )
        return ValidationResult(devices=devices, conflicts=conflicts, context=context)

    def validate_blueprint(self, blueprint: Blueprint) -> ValidationResult:
        """Validate the rooms and devices stored on a blueprint."""
        return self.validate(blueprint.rooms, blueprint.devices, blueprint)


def validate_layout(
    rooms: Iterable[Room],
    devices: Iterable[Device],
    *,
    blueprint: Optional[Blueprint] = None,
    rules: Optional[ComplianceRules] = None,
    workers: int = 1,
    spatial_index: SpatialIndexMode = SpatialIndexMode.AUTO,
) -> ValidationResult:
    """Validate a layout with a one-off :class:`LayoutValidator`."""
    validator = LayoutValidator(rules=rules, workers=workers, spatial_index=spatial_index)
    return validator.validate(rooms, devices, blueprint)
