"""Models for test unit results handed to reporters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hdata_conformance.models.status import FAILED, PREREQ_FAILED, SUCCESS, Status

if TYPE_CHECKING:
    from hdata_conformance.units.base import TestUnit


@dataclass(frozen=True, kw_only=True)
class UnitResult:
    """Read-only snapshot of an executed (or rejected) test unit."""

    unit_id: str
    name: str
    required: bool
    status: Status | None
    reason: str | None = None
    warnings: Sequence[str] = ()
    prerequisites: Sequence[str] = ()
    duration: float = 0.0

    @classmethod
    def from_unit(cls, unit: TestUnit) -> UnitResult:
        """Capture the reporting view of a unit."""
        return cls(
            unit_id=unit.id,
            name=unit.name or unit.id,
            required=unit.required,
            status=unit.status,
            reason=unit.reason,
            warnings=tuple(unit.warnings),
            prerequisites=tuple(dep.id for dep in unit.dependencies),
            duration=unit.duration,
        )

    @property
    def outcome(self) -> str:
        """Human readable disposition, taking the required flag into account.

        A failed optional unit only fails a recommended (SHOULD) clause so it
        is reported as a warning and does not affect the conformance result.
        """
        if self.status == SUCCESS:
            return "Passed with warnings" if self.warnings else "Passed"
        if self.status == FAILED:
            return "*FAILED*" if self.required else "warning"
        if self.status == PREREQ_FAILED:
            return "Prerequisite Failed"
        return "Skipped"


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Aggregated counts over a whole run."""

    total: int
    tests_run: int
    failures: int
    prereq_failures: int
    skipped: int
    warnings: int

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 when any required unit failed."""
        return 1 if self.failures else 0


def summarize(results: Sequence[UnitResult]) -> RunSummary:
    """Aggregate unit results into run level counts."""
    tests_run = 0
    failures = 0
    prereq_failures = 0
    skipped = 0
    warnings = 0

    for result in results:
        warnings += len(result.warnings)
        if result.status in {SUCCESS, FAILED}:
            tests_run += 1
        if result.status == FAILED:
            if result.required:
                failures += 1
            else:
                warnings += 1
        elif result.status == PREREQ_FAILED:
            prereq_failures += 1
        elif result.status != SUCCESS:
            skipped += 1

    return RunSummary(
        total=len(results),
        tests_run=tests_run,
        failures=failures,
        prereq_failures=prereq_failures,
        skipped=skipped,
        warnings=warnings,
    )
