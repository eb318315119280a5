"""Applying auto-fixes to layouts.

Suggests and applies corrections for fixable conflicts:
- Preview every available fix before touching the layout
- Apply one fix by conflict id, or sweep all fixable conflicts
- Re-validate after each move and report what the move introduced
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ..geometry import Point
from .autofix import auto_fix
from .conflict import Conflict, PlacementFix
from .models import Device
from .validator import LayoutValidator, ValidationResult

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    """Result of applying auto-fixes."""

    success: bool
    validation: ValidationResult  # Validation of the layout after the fixes
    message: str
    fixes: list[PlacementFix] = field(default_factory=list)
    introduced: list[Conflict] = field(default_factory=list)  # Conflicts the moves created

    @property
    def fixes_applied(self) -> int:
        return len(self.fixes)

    @property
    def devices(self) -> list[Device]:
        return self.validation.devices

    @property
    def remaining_conflicts(self) -> int:
        return len(self.validation.conflicts)


class LayoutFixer:
    """Suggests and applies fixes for placement conflicts.

    Usage:
        fixer = LayoutFixer()
        result = validate_layout(rooms, devices)

        # Preview changes
        for fix in fixer.suggest_fixes(result):
            print(fix)

        # Apply one, then check what is left
        outcome = fixer.apply_fix(result, "conflict-sd-1-wall-proximity")
        print(outcome.message)
    """

    def __init__(self, validator: Optional[LayoutValidator] = None):
        """Initialize fixer.

        Args:
            validator: Validator used to re-check layouts after a move. When None,
                a default validator with the rules of the result being fixed is used.
        """
        self.validator = validator

    def suggest_fixes(self, result: ValidationResult) -> list[PlacementFix]:
        """Every fixable conflict with its proposed destination, in conflict order."""
        fixes: list[PlacementFix] = []
        for conflict in result.conflicts:
            if fix := self._suggest_fix(conflict, result):
                fixes.append(fix)
        return fixes

    def _suggest_fix(self, conflict: Conflict, result: ValidationResult) -> Optional[PlacementFix]:
        if not conflict.has_auto_fix:
            return None
        target = auto_fix(conflict, result.context)
        if target is None:
            return None
        device = result.context.get_device(conflict.device_id)
        if device is None:
            return None
        return PlacementFix(
            conflict=conflict,
            device_id=device.id,
            old_position=device.position,
            new_position=Point(*target),
        )

    def apply_fix(self, result: ValidationResult, conflict_id: str) -> FixResult:
        """Move the device of one conflict to its corrected position and re-validate.

        An unknown id or a conflict without a fix leaves the layout unchanged
        and returns an unsuccessful result.
        """
        conflict = result.find_conflict(conflict_id)
        if conflict is None:
            return FixResult(
                success=False,
                validation=result,
                message=f"Conflict not found: {conflict_id}",
            )

        fix = self._suggest_fix(conflict, result)
        if fix is None:
            return FixResult(
                success=False,
                validation=result,
                message=f"No auto-fix available for {conflict.kind.value} conflict {conflict_id}",
            )

        new_result = self._move_and_validate(result, fix)
        before = {c.id for c in result.conflicts}
        introduced = [c for c in new_result.conflicts if c.id not in before]
        if introduced:
            logger.info("Fix for %s introduced %d new conflict(s)", conflict_id, len(introduced))

        return FixResult(
            success=True,
            validation=new_result,
            message=f"Moved {fix.device_id} to ({fix.new_position.x:.1f}, {fix.new_position.y:.1f})",
            fixes=[fix],
            introduced=introduced,
        )

    def apply_all(self, result: ValidationResult) -> FixResult:
        """Apply every fixable conflict once, re-validating after each move.

        Conflicts resolved as a side effect of an earlier move are skipped.
        There is no convergence guarantee; check ``remaining_conflicts``.
        """
        current = result
        applied: list[PlacementFix] = []
        before = {c.id for c in result.conflicts}

        for conflict in result.conflicts:
            if not conflict.has_auto_fix:
                continue
            outcome = self.apply_fix(current, conflict.id)
            if outcome.success:
                applied.extend(outcome.fixes)
                current = outcome.validation
            else:
                logger.debug("Skipped %s: %s", conflict.id, outcome.message)

        introduced = [c for c in current.conflicts if c.id not in before]
        return FixResult(
            success=bool(applied),
            validation=current,
            message=(
                f"Applied {len(applied)} fixes, {len(current.conflicts)} conflicts remaining"
                if applied
                else "No fixes to apply"
            ),
            fixes=applied,
            introduced=introduced,
        )

    def _move_and_validate(self, result: ValidationResult, fix: PlacementFix) -> ValidationResult:
        context = result.context
        devices = [
            replace(d, x=fix.new_position.x, y=fix.new_position.y, conflicts=[])
            if d.id == fix.device_id
            else d
            for d in context.devices
        ]
        validator = self.validator or LayoutValidator(rules=context.rules)
        logger.debug("Applying %s", fix)
        return validator.validate(context.rooms, devices, context.blueprint)


def suggest_fixes(result: ValidationResult) -> list[PlacementFix]:
    """Preview every available fix for a validation result."""
    return LayoutFixer().suggest_fixes(result)


def apply_auto_fix(result: ValidationResult, conflict_id: str) -> FixResult:
    """Apply the fix for one conflict and re-validate with the same rules."""
    return LayoutFixer().apply_fix(result, conflict_id)
