"""Plain text report writer."""

from collections.abc import Sequence
from dataclasses import dataclass

from hdata_conformance.models.result import RunSummary, UnitResult
from hdata_conformance.models.status import FAILED, SKIPPED, SUCCESS
from hdata_conformance.reporting.base import Reporter
from hdata_conformance.units.base import TestUnit


@dataclass(kw_only=True)
class TextReporter(Reporter):
    """Writes progress and the conformance report as plain text."""

    def _print(self, s: str = "") -> None:
        print(s, file=self.stream)

    def start_group(self, title: str) -> None:
        self._print(f"{title}:")

    def execute_start(self, count: int) -> None:
        super().execute_start(count)
        self._print()
        self._print(f"Exec Tests ({count})")

    def start_unit(self, unit: TestUnit) -> None:
        self._print()
        self._print(f"Run test: {type(unit).__name__} [{unit.id}]")

    def stop_unit(self, unit: TestUnit) -> None:
        if unit.status == SUCCESS:
            self._print("Test: OK")
        elif unit.status == FAILED:
            self._print("Test: *failed*")
        elif unit.status == SKIPPED:
            self._print("Test: Skipped")
        else:
            self._print("Test: Prerequisite Failed")
        if unit.status != SUCCESS and unit.reason:
            self._print(f"Reason: {unit.reason}")

    def write_summary(
        self, results: Sequence[UnitResult], summary: RunSummary
    ) -> None:
        self._print()
        self._print("-" * 80)
        self._print()
        self._print("Conformance Test Report:")
        self._print()

        for result in results:
            self._print(f"{result.unit_id}: {result.outcome}")
            if result.name != result.unit_id:
                self._print(result.name)
            if result.warnings:
                self._print("Warnings:")
                for warning in result.warnings:
                    self._print(f"\t{warning}")
            if result.reason:
                self._print(f"Reason: {result.reason}")
            prerequisites = ", ".join(result.prerequisites) or "None"
            self._print(f"Prerequisites: {prerequisites}")
            self._print()

        self._print(
            f"Tests run: {summary.tests_run}, Failures: {summary.failures}, "
            f"Prerequisite failures: {summary.prereq_failures}, "
            f"Skipped: {summary.skipped}, Warnings: {summary.warnings}, "
            f"Time elapsed: {self.elapsed_time:.1f} sec"
        )
