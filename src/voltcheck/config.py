"""
Configuration file support for voltcheck.

Provides hierarchical configuration loading from:
1. Project config: .voltcheck.toml or voltcheck.toml in the project root
2. User config: ~/.config/voltcheck/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

from __future__ import annotations

import math
import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .compliance.models import DeviceType
from .compliance.rules import (
    DEFAULT_SPACING_FT,
    MIN_WALL_DISTANCE,
    OVERLAP_RADIUS,
    ComplianceRules,
)
from .exceptions import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Config file names to search for in project directories
CONFIG_FILENAMES = [".voltcheck.toml", "voltcheck.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "voltcheck" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "units", "verbose"},
    "rules": {
        "overlap_radius",
        "overlap_fix_clearance",
        "min_wall_distance",
        "wall_fix_clearance",
        "spacing_ft",
    },
    "engine": {"workers", "spatial_index", "index_cell_size", "index_threshold"},
}

# Expected value types per key, for type checking loaded values
_NUMBER = (int, float)
_KEY_TYPES: dict[str, dict[str, tuple[type, ...]]] = {
    "defaults": {"format": (str,), "units": (str,), "verbose": (bool,)},
    "rules": {
        "overlap_radius": _NUMBER,
        "overlap_fix_clearance": _NUMBER,
        "min_wall_distance": _NUMBER,
        "wall_fix_clearance": _NUMBER,
        "spacing_ft": (dict,),
    },
    "engine": {
        "workers": (int,),
        "spatial_index": (str,),
        "index_cell_size": _NUMBER,
        "index_threshold": (int,),
    },
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    units: str = "in"
    verbose: bool = False


@dataclass
class RulesConfig:
    """Placement rule thresholds, inches (spacing in feet)."""

    overlap_radius: float = OVERLAP_RADIUS
    overlap_fix_clearance: float = 2.0
    min_wall_distance: float = MIN_WALL_DISTANCE
    wall_fix_clearance: float = 1.0
    spacing_ft: dict[str, float] = field(
        default_factory=lambda: {t.value: ft for t, ft in DEFAULT_SPACING_FT.items()}
    )


@dataclass
class EngineConfig:
    """Validation engine settings."""

    workers: int = 1
    spatial_index: str = "auto"
    index_cell_size: float = 120.0
    index_threshold: int = 500


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None, explicit: Path | None = None) -> "Config":
        """
        Load configuration with precedence: explicit > project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)
            explicit: Config file given on the command line; replaces the project file

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = explicit if explicit is not None else _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def to_rules(self) -> ComplianceRules:
        """Build rule thresholds from the [rules] section.

        Device types in ``spacing_ft`` that are not known types are kept by
        name; a spacing of 0 disables the rule for that type.
        """
        spacing: dict[Any, float] = {}
        for name, feet in self.rules.spacing_ft.items():
            spacing[DeviceType.from_string(name) or name] = float(feet)
        return ComplianceRules(
            overlap_radius=float(self.rules.overlap_radius),
            overlap_fix_clearance=float(self.rules.overlap_fix_clearance),
            min_wall_distance=float(self.rules.min_wall_distance),
            wall_fix_clearance=float(self.rules.wall_fix_clearance),
            spacing_ft=spacing,
        )


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigurationError: If the file is unreadable or not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}: {e}",
            context={"file": str(path)},
            suggestions=["Check the file with a TOML validator"],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {path}: {e}",
            context={"file": str(path)},
        ) from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    sections = {"defaults": config.defaults, "rules": config.rules, "engine": config.engine}
    for section, target in sections.items():
        if section not in data:
            continue
        section_data = data[section]
        if not isinstance(section_data, dict):
            raise ConfigurationError(
                f"Config section [{section}] must be a table",
                context={"file": source},
            )
        _warn_unknown_keys(section_data, KNOWN_KEYS[section], section, source)

        for key in sorted(KNOWN_KEYS[section] & section_data.keys()):
            value = section_data[key]
            _check_type(section, key, value, source)
            if key == "spacing_ft":
                # Merge per device type instead of replacing the table
                merged = dict(config.rules.spacing_ft)
                for name, feet in value.items():
                    _check_type(section, f"spacing_ft.{name}", feet, source, _NUMBER)
                    merged[name] = feet
                value = merged
            setattr(target, key, value)
            sources[f"{section}.{key}"] = source


def _check_type(
    section: str,
    key: str,
    value: Any,
    source: str,
    expected: tuple[type, ...] | None = None,
) -> None:
    """Raise ConfigurationError when a value has the wrong type."""
    if expected is None:
        expected = _KEY_TYPES[section][key]
    # bool is an int subclass; only accept it where bool is expected
    ok = isinstance(value, expected) and (bool in expected or not isinstance(value, bool))
    if not ok:
        names = " or ".join(t.__name__ for t in expected)
        raise ConfigurationError(
            f"Invalid value for {section}.{key}: expected {names}, got {type(value).__name__}",
            context={"file": source, "value": repr(value)},
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise ConfigurationError(
            f"Invalid value for {section}.{key}: must be a finite number, got {value!r}",
            context={"file": source},
        )


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# voltcheck configuration file
# Place as .voltcheck.toml in project root or ~/.config/voltcheck/config.toml for user defaults

[defaults]
# Output format: table, json, summary
# format = "table"

# Display units: in, ft
# units = "in"

# Enable verbose output by default
# verbose = false

[rules]
# Same-system devices closer than this overlap (inches)
# overlap_radius = 12

# Extra distance beyond overlap_radius an overlap fix moves to (inches)
# overlap_fix_clearance = 2

# Minimum distance from any wall (inches)
# min_wall_distance = 4

# Extra distance beyond min_wall_distance a wall fix moves to (inches)
# wall_fix_clearance = 1

# NFPA 72 maximum spacing per fire device type (feet); 0 disables the check
# [rules.spacing_ft]
# "smoke-detector" = 30
# "heat-detector" = 25
# "co-detector" = 15
# "pull-station" = 200
# "strobe" = 100
# "horn" = 100

[engine]
# Threads used to evaluate devices
# workers = 1

# Grid index for large layouts: auto, always, never
# spatial_index = "auto"

# Grid cell edge (inches)
# index_cell_size = 120

# Device count at which "auto" turns the grid index on
# index_threshold = 500
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
