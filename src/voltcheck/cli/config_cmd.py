"""
Config command for voltcheck.

Usage:
    voltcheck config --show     Show effective configuration with sources
    voltcheck config --init     Create template config file
    voltcheck config --paths    Show config file paths
"""

from __future__ import annotations

import sys
from pathlib import Path

from voltcheck.config import (
    CONFIG_FILENAMES,
    USER_CONFIG_PATH,
    Config,
    generate_template,
    get_config_paths,
)


def run(args) -> int:
    if args.init:
        return _init_config(args.user)
    if args.paths:
        return _show_paths()
    return _show_config()


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective voltcheck configuration")
    for section_name in ("defaults", "rules", "engine"):
        section = getattr(config, section_name)
        print()
        print(f"[{section_name}]")
        for key, value in vars(section).items():
            if key == "spacing_ft":
                continue
            _print_value(key, value, config.get_source(f"{section_name}.{key}"))

    print()
    print("[rules.spacing_ft]")
    source = config.get_source("rules.spacing_ft")
    for device_type, feet in config.rules.spacing_ft.items():
        _print_value(f'"{device_type}"', feet, source)

    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, bool):
        formatted = "true" if value else "false"
    elif isinstance(value, str):
        formatted = f'"{value}"'
    else:
        formatted = str(value)

    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print(f"User config: {USER_CONFIG_PATH}")
    print(f"  Status: {'exists' if paths['user'] else 'not found'}")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool = False) -> int:
    """Create a template config file."""
    if user:
        target = USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    try:
        target.write_text(generate_template())
    except OSError as e:
        print(f"Error writing config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config template: {target}")
    print("Uncomment and modify values as needed.")
    return 0
