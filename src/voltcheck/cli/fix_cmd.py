"""
Apply auto-fixes to a layout.

Usage:
    voltcheck fix level1.json --all -o level1-fixed.json
    voltcheck fix level1.json --conflict conflict-sd-1-wall-proximity
    voltcheck fix level1.json --dry-run
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from voltcheck.compliance import LayoutFixer, PlacementFix
from voltcheck.layout_io import load_layout, save_layout
from voltcheck.units import UnitFormatter

from .utils import build_validator, load_config, setup_units


def run(args) -> int:
    """Fix conflicts in a layout file and write the corrected layout."""
    config = load_config(args)
    formatter = setup_units(args, config)
    validator = build_validator(args, config)
    console = Console()

    layout_path = Path(args.layout)
    blueprint = load_layout(layout_path)
    result = validator.validate_blueprint(blueprint)

    if not result.conflicts:
        console.print("[green]No placement conflicts found![/green]")
        return 0

    console.print(f"Found {len(result.conflicts)} conflicts")
    fixer = LayoutFixer(validator)

    suggested = fixer.suggest_fixes(result)
    if args.conflict:
        suggested = [f for f in suggested if f.conflict.id == args.conflict]

    if args.dry_run:
        if not suggested:
            console.print("No fixes could be suggested")
            return 0
        print_fixes(console, suggested, formatter, title="Suggested Fixes")
        console.print("\n(Dry run - no changes made)")
        return 0

    if args.conflict:
        outcome = fixer.apply_fix(result, args.conflict)
    else:
        outcome = fixer.apply_all(result)

    if not outcome.success:
        print(f"Error: {outcome.message}", file=sys.stderr)
        return 1

    print_fixes(console, outcome.fixes, formatter, title="Applied Fixes")

    fixed = replace(blueprint, devices=[replace(d, conflicts=[]) for d in outcome.devices])
    output_path = Path(args.output) if args.output else layout_path
    save_layout(fixed, output_path)

    console.print(f"\n{escape(outcome.message)}")
    console.print(f"Saved to {escape(str(output_path))}")

    if outcome.introduced:
        console.print(
            f"[yellow]Warning: fixes introduced {len(outcome.introduced)} new conflicts[/yellow]"
        )
        for conflict in outcome.introduced:
            console.print(f"  {escape(str(conflict))}")

    if outcome.remaining_conflicts:
        console.print(f"{outcome.remaining_conflicts} conflicts remain after fixes")

    return 0


def print_fixes(
    console: Console, fixes: list[PlacementFix], formatter: UnitFormatter, title: str
) -> None:
    table = Table(title=title)
    table.add_column("Conflict")
    table.add_column("Device")
    table.add_column("From")
    table.add_column("To")
    for fix in fixes:
        table.add_row(
            fix.conflict.kind.value,
            escape(fix.device_id),
            formatter.format_coordinate(fix.old_position.x, fix.old_position.y),
            formatter.format_coordinate(fix.new_position.x, fix.new_position.y),
        )
    console.print(table)
