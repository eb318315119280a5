"""Helpers shared by the voltcheck commands."""

from __future__ import annotations

import logging
from pathlib import Path

from voltcheck.compliance import LayoutValidator, SpatialIndexMode
from voltcheck.config import Config
from voltcheck.exceptions import ConfigurationError
from voltcheck.units import UnitFormatter, get_unit_formatter

OUTPUT_FORMATS = ("table", "json", "summary")


def setup_logging(verbose: bool) -> None:
    """Route library log records to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def load_config(args) -> Config:
    """Load configuration, honoring ``--config`` when given."""
    explicit = getattr(args, "config", None)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigurationError(
                f"Config file not found: {path}",
                context={"file": str(path)},
                suggestions=["Create one with: voltcheck config --init"],
            )
        return Config.load(explicit=path)
    return Config.load()


def build_validator(args, config: Config) -> LayoutValidator:
    """Create a validator from config, with CLI overrides applied on top."""
    flags: dict[str, str] = {}
    if getattr(args, "workers", None) is not None:
        config.engine.workers = args.workers
        flags["workers"] = "--workers"
    if getattr(args, "spatial_index", None) is not None:
        config.engine.spatial_index = args.spatial_index
        flags["spatial_index"] = "--spatial-index"

    engine = config.engine
    try:
        SpatialIndexMode.from_string(engine.spatial_index)
    except ValueError as e:
        raise _engine_error(config, flags, "spatial_index", str(e)) from e
    if engine.workers < 1:
        raise _engine_error(
            config, flags, "workers", f"workers must be at least 1, got {engine.workers}"
        )
    if engine.index_cell_size <= 0:
        raise _engine_error(
            config,
            flags,
            "index_cell_size",
            f"index_cell_size must be positive, got {engine.index_cell_size}",
        )
    return LayoutValidator.from_config(config)


def _engine_error(
    config: Config, flags: dict[str, str], key: str, message: str
) -> ConfigurationError:
    return ConfigurationError(
        message,
        context={
            "key": f"engine.{key}",
            "source": flags.get(key) or config.get_source(f"engine.{key}"),
        },
    )


def resolve_format(args, config: Config) -> str:
    fmt = getattr(args, "format", None) or config.defaults.format
    if fmt not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Unknown output format '{fmt}'",
            context={"source": config.get_source("defaults.format")},
            suggestions=[f"Use one of: {', '.join(OUTPUT_FORMATS)}"],
        )
    return fmt


def setup_units(args, config: Config) -> UnitFormatter:
    """Pick the display units: --units, then VOLTCHECK_UNITS, then config."""
    return get_unit_formatter(getattr(args, "units", None), config)
