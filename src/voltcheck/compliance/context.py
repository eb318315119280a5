"""Immutable input bundle for one validation pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .index import DeviceTable, GridIndex
from .models import Blueprint, Device, Room
from .rules import ComplianceRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationContext:
    """Everything a rule evaluator may look at.

    Build with :meth:`build` rather than the constructor so the device table
    (and optionally the grid index) is prepared once per pass.

    Attributes:
        devices: All devices in the layout, input order.
        rooms: All rooms, input order.
        blueprint: The blueprint being validated, for messages only.
        rules: Thresholds and the spacing table.
        table: Columnar device positions shared by the pairwise rules.
        grid: Grid index, or None for plain bucket scans.
    """

    devices: tuple[Device, ...]
    rooms: tuple[Room, ...]
    blueprint: Optional[Blueprint] = None
    rules: ComplianceRules = field(default_factory=ComplianceRules)
    table: DeviceTable = field(default=None, repr=False, compare=False)  # type: ignore[assignment]
    grid: Optional[GridIndex] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.table is None:
            object.__setattr__(self, "table", DeviceTable(self.devices))

    @classmethod
    def build(
        cls,
        rooms: Iterable[Room],
        devices: Iterable[Device],
        blueprint: Optional[Blueprint] = None,
        rules: Optional[ComplianceRules] = None,
        use_grid: bool = False,
        cell_size: float = 120.0,
    ) -> "ValidationContext":
        """Create a context, indexing device positions.

        Args:
            rooms: Room rectangles
            devices: Devices to validate
            blueprint: Blueprint back-reference (optional)
            rules: Thresholds (uses defaults if None)
            use_grid: Build a :class:`GridIndex` for the pairwise rules
            cell_size: Grid cell edge in inches
        """
        devices = tuple(devices)
        grid = GridIndex(devices, cell_size) if use_grid else None
        if grid is not None:
            logger.debug("Built grid index for %d devices (cell %.1fin)", len(devices), cell_size)
        return cls(
            devices=devices,
            rooms=tuple(rooms),
            blueprint=blueprint,
            rules=rules or ComplianceRules(),
            table=DeviceTable(devices),
            grid=grid,
        )

    def get_device(self, device_id: str) -> Optional[Device]:
        """Look up a device by id."""
        i = self.table.index_of(device_id)
        return None if i is None else self.devices[i]
