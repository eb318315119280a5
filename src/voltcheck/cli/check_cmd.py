"""
Check a layout for placement conflicts.

Usage:
    voltcheck check level1.json
    voltcheck check level1.json --format json
    voltcheck check level1.json --units ft --workers 4
"""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from voltcheck.compliance import ConflictSeverity, ValidationResult
from voltcheck.layout_io import load_layout
from voltcheck.units import UnitFormatter

from .utils import build_validator, load_config, resolve_format, setup_units

SEVERITY_COLORS = {
    ConflictSeverity.ERROR: "red",
    ConflictSeverity.WARNING: "yellow",
}


def run(args) -> int:
    """Validate a layout file and print the conflicts.

    Returns 1 when any error-severity conflict is found, else 0.
    """
    config = load_config(args)
    fmt = resolve_format(args, config)
    formatter = setup_units(args, config)
    validator = build_validator(args, config)

    layout_path = Path(args.layout)
    blueprint = load_layout(layout_path)
    result = validator.validate_blueprint(blueprint)
    name = blueprint.name or layout_path.name

    if fmt == "json":
        output_json(result, name)
    elif fmt == "summary":
        output_summary(result, name)
    else:
        output_table(result, name, formatter, verbose=args.verbose or config.defaults.verbose)

    return 1 if result.stats.has_blocking_errors else 0


def output_table(
    result: ValidationResult, name: str, formatter: UnitFormatter, verbose: bool = False
) -> None:
    """Output conflicts as a table."""
    console = Console()

    if not result.conflicts:
        console.print(f"[green]No placement conflicts found in {escape(name)}[/green]")
        return

    table = Table(title=f"Placement Conflicts: {escape(name)}")
    table.add_column("Device")
    table.add_column("Kind")
    table.add_column("Severity")
    table.add_column("Distance")
    table.add_column("Message")
    if verbose:
        table.add_column("Suggestion")

    devices = {d.id: d for d in result.devices}
    for conflict in result.conflicts:
        color = SEVERITY_COLORS[conflict.severity]
        measured = ""
        if conflict.actual_distance is not None and conflict.required_distance is not None:
            measured = formatter.format_comparison(
                conflict.actual_distance, conflict.required_distance
            )
        row = [
            escape(devices[conflict.device_id].label),
            conflict.kind.value,
            f"[{color}]{conflict.severity.value}[/{color}]",
            measured,
            escape(conflict.message),
        ]
        if verbose:
            fix = " (auto-fix)" if conflict.has_auto_fix else ""
            row.append(escape(conflict.suggestion or "") + fix)
        table.add_row(*row)

    console.print(table)
    stats = result.stats
    console.print(
        f"\nTotal: {stats.total} conflicts "
        f"({stats.error_count} errors, {stats.warning_count} warnings)"
    )


def output_summary(result: ValidationResult, name: str) -> None:
    """Output conflict counts by kind."""
    console = Console()
    stats = result.stats

    if not stats.total:
        console.print(f"[green]No placement conflicts found in {escape(name)}[/green]")
        return

    console.print(f"\n[bold]Conflict Summary: {escape(name)}[/bold]")
    for kind, count in sorted(stats.count_by_kind.items()):
        console.print(f"  {kind}: {count}")

    console.print(
        f"\nTotal: {stats.total} conflicts "
        f"({stats.error_count} errors, {stats.warning_count} warnings)"
    )
    if stats.has_blocking_errors:
        console.print("[red]Layout has blocking errors[/red]")


def output_json(result: ValidationResult, name: str) -> None:
    """Output conflicts as JSON."""
    output = {"layout": name, "passed": result.passed, **result.to_dict()}
    print(json.dumps(output, indent=2))
