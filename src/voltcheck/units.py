"""
Unit formatting for voltcheck output.

All values are stored in inches. Output can show inches or feet.
Supports layered configuration: CLI flag > Environment variable > Config file > Default (in).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

__all__ = [
    "UnitSystem",
    "UnitFormatter",
    "INCHES_PER_FOOT",
    "inches_to_feet",
    "get_unit_formatter",
]

INCHES_PER_FOOT = 12.0

# Environment variable for unit preference
UNITS_ENV_VAR = "VOLTCHECK_UNITS"


def inches_to_feet(inches: float) -> float:
    return inches / INCHES_PER_FOOT


class UnitSystem(Enum):
    """Unit system for display output."""

    INCHES = "in"
    FEET = "ft"

    @classmethod
    def from_string(cls, value: str | None) -> UnitSystem | None:
        """Parse a unit system from a string value.

        Args:
            value: String like "in", "inches", "ft", "feet", or None

        Returns:
            UnitSystem or None if value is None or invalid
        """
        if value is None:
            return None
        value = value.lower().strip()
        if value in ("in", "inch", "inches", '"'):
            return cls.INCHES
        if value in ("ft", "foot", "feet", "'"):
            return cls.FEET
        return None


@dataclass
class UnitFormatter:
    """Formatter for length values with configurable unit system.

    Examples:
        >>> fmt = UnitFormatter(UnitSystem.INCHES)
        >>> fmt.format(18)
        '18.0 in'

        >>> fmt = UnitFormatter(UnitSystem.FEET)
        >>> fmt.format(18)
        '1.5 ft'
    """

    system: UnitSystem
    precision: int = 1

    def convert_to_display(self, value_in: float) -> float:
        if self.system == UnitSystem.FEET:
            return inches_to_feet(value_in)
        return value_in

    def format(self, value_in: float, include_unit: bool = True) -> str:
        """Format an inch value in the configured unit system.

        Args:
            value_in: Value in inches
            include_unit: Whether to include the unit suffix (default: True)
        """
        text = f"{self.convert_to_display(value_in):.{self.precision}f}"
        if include_unit:
            return f"{text} {self.unit_name}"
        return text

    def format_coordinate(self, x_in: float, y_in: float) -> str:
        """Format a coordinate pair, e.g. "(12.0, 30.5) in"."""
        x = self.convert_to_display(x_in)
        y = self.convert_to_display(y_in)
        return f"({x:.{self.precision}f}, {y:.{self.precision}f}) {self.unit_name}"

    def format_comparison(self, actual_in: float, required_in: float) -> str:
        """Format a measured value against its limit, e.g. "3.0 in (limit: 4.0 in)"."""
        return f"{self.format(actual_in)} (limit: {self.format(required_in)})"

    @property
    def unit_name(self) -> str:
        return self.system.value


def get_unit_formatter(
    cli_units: str | None = None,
    config: Config | None = None,
) -> UnitFormatter:
    """Get a unit formatter based on precedence: CLI > env > config > default.

    Args:
        cli_units: Unit system from CLI flag (highest priority)
        config: Config object to read defaults.units from
    """
    system = UnitSystem.from_string(cli_units)

    if system is None:
        system = UnitSystem.from_string(os.environ.get(UNITS_ENV_VAR))

    if system is None and config is not None:
        system = UnitSystem.from_string(config.defaults.units)

    if system is None:
        system = UnitSystem.INCHES

    return UnitFormatter(system=system)
