"""
Custom exception hierarchy for voltcheck.

Conflicts found in a layout are results, not errors; these exceptions cover
the things around the engine that can fail: reading layout files and loading
configuration. All exceptions include:
- Context information (file paths, offending fields, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from voltcheck.exceptions import LayoutFormatError

    raise LayoutFormatError(
        "Device is missing coordinates",
        context={"file": "level1.json", "device": "sd-3"},
        suggestions=["Every device needs numeric 'x' and 'y' in inches"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class VoltCheckError(Exception):
    """
    Base exception for all voltcheck errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (file, field, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class LayoutFormatError(VoltCheckError):
    """
    Layout file could not be read as a blueprint layout.

    Raised for invalid JSON, missing required fields, non-numeric
    coordinates or an unknown device system.

    Example::

        raise LayoutFormatError(
            "Unknown system 'hvac'",
            file_path="level1.json",
            context={"device": "d-7"},
            suggestions=["Use one of: fire, cctv, access"],
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        super().__init__(message, ctx, suggestions)


class LayoutNotFoundError(VoltCheckError):
    """
    Layout file does not exist.

    Example::

        raise LayoutNotFoundError(
            "Layout file not found",
            context={"file": "level1.json"},
            suggestions=["Check the path", "Export the layout from the editor first"],
        )
    """

    pass


class ConfigurationError(VoltCheckError):
    """
    Configuration or settings error.

    Raised when a config file is unreadable, is not valid TOML, or holds a
    value of the wrong type.

    Example::

        raise ConfigurationError(
            "Invalid value for rules.overlap_radius",
            context={"file": ".voltcheck.toml", "value": "twelve"},
            suggestions=["Use a number of inches, e.g. overlap_radius = 12"],
        )
    """

    pass


__all__ = [
    "VoltCheckError",
    "LayoutFormatError",
    "LayoutNotFoundError",
    "ConfigurationError",
]
