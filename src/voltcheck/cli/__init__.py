"""
Command-line interface for voltcheck.

    voltcheck check <layout>    - Check a layout for placement conflicts
    voltcheck fix <layout>      - Apply auto-fixes and write the corrected layout
    voltcheck config            - Show or create configuration

Examples:
    voltcheck check level1.json
    voltcheck check level1.json --format summary --units ft
    voltcheck fix level1.json --all -o level1-fixed.json
    voltcheck fix level1.json --conflict conflict-sd-1-wall-proximity --dry-run
    voltcheck config --init
"""

import argparse
import sys
from typing import List, Optional

from voltcheck import __version__
from voltcheck.exceptions import VoltCheckError

from . import check_cmd, config_cmd, fix_cmd
from .utils import OUTPUT_FORMATS, setup_logging

__all__ = ["main"]


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("layout", help="Path to a JSON layout file")
    parser.add_argument("--config", help="Config file to use instead of the project config")
    parser.add_argument(
        "--units",
        choices=["in", "ft"],
        help="Display units (default: from config, else inches)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Threads used to evaluate devices (default: from config, else 1)",
    )
    parser.add_argument(
        "--spatial-index",
        choices=["auto", "always", "never"],
        help="Use the grid index for pairwise rules (default: auto)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the voltcheck CLI."""
    parser = argparse.ArgumentParser(
        prog="voltcheck",
        description="Placement compliance checks for low-voltage device layouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"voltcheck {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check subcommand
    check_parser = subparsers.add_parser("check", help="Check a layout for placement conflicts")
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        help="Output format (default: from config, else table)",
    )

    # Fix subcommand
    fix_parser = subparsers.add_parser("fix", help="Apply auto-fixes to a layout")
    _add_common_arguments(fix_parser)
    target_group = fix_parser.add_mutually_exclusive_group()
    target_group.add_argument("--conflict", help="Fix only the conflict with this id")
    target_group.add_argument(
        "--all",
        action="store_true",
        help="Fix every fixable conflict (default)",
    )
    fix_parser.add_argument(
        "-o", "--output",
        help="Output file path (default: modify in place)",
    )
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show suggested fixes without applying",
    )

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="Show or create configuration")
    action_group = config_parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show",
        action="store_true",
        help="Show effective configuration with sources (default)",
    )
    action_group.add_argument(
        "--init",
        action="store_true",
        help="Create template config file in current directory",
    )
    action_group.add_argument("--paths", action="store_true", help="Show config file paths")
    config_parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/voltcheck/config.toml) for --init",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(getattr(args, "verbose", False))

    try:
        if args.command == "check":
            return check_cmd.run(args)
        elif args.command == "fix":
            return fix_cmd.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
    except VoltCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
