"""Conflict statistics for reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .conflict import Conflict, ConflictSeverity


@dataclass(frozen=True)
class ConflictStats:
    """Aggregate counts over a list of conflicts."""

    total: int = 0
    error_count: int = 0
    warning_count: int = 0
    count_by_kind: dict[str, int] = field(default_factory=dict, hash=False)

    @property
    def has_blocking_errors(self) -> bool:
        """True when any error-severity conflict is unresolved."""
        return self.error_count > 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "count_by_kind": dict(self.count_by_kind),
        }


def summarize(conflicts: Iterable[Conflict]) -> ConflictStats:
    """Count conflicts by severity and kind. Kinds appear in first-seen order."""
    total = errors = warnings = 0
    by_kind: dict[str, int] = {}
    for conflict in conflicts:
        total += 1
        if conflict.severity == ConflictSeverity.ERROR:
            errors += 1
        elif conflict.severity == ConflictSeverity.WARNING:
            warnings += 1
        by_kind[conflict.kind.value] = by_kind.get(conflict.kind.value, 0) + 1
    return ConflictStats(
        total=total,
        error_count=errors,
        warning_count=warnings,
        count_by_kind=by_kind,
    )
