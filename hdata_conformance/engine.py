"""Sequential execution of an execution plan."""

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from hdata_conformance.context import ConformanceContext
from hdata_conformance.errors import AssertionFailure
from hdata_conformance.models.status import (
    FAILED,
    PREREQ_FAILED,
    PREREQ_FAILURE_STATUSES,
    SKIPPED,
    SUCCESS,
)
from hdata_conformance.reporting.base import Reporter
from hdata_conformance.units.base import TestUnit

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ExecutionEngine:
    """Runs units one at a time in plan order.

    Prerequisites are guaranteed to run first by the plan, so a unit whose
    prerequisite failed or was skipped is never executed. A failing unit never
    aborts the run: every outcome is converted into a terminal status.
    """

    context: ConformanceContext
    reporter: Reporter | None = None

    async def run(self, plan: Iterable[TestUnit]) -> Sequence[TestUnit]:
        """Execute every unit of the plan, returning them in execution order."""
        units = list(plan)
        log.info("Executing %d test(s)", len(units))
        if self.reporter is not None:
            self.reporter.execute_start(len(units))

        for unit in units:
            await self._run_unit(unit)

        if self.reporter is not None:
            self.reporter.execute_stop()
        log.info("Test execution completed")
        return units

    async def _run_unit(self, unit: TestUnit) -> None:
        log.info("Run test: %s [%s]", type(unit).__name__, unit.id)
        if self.reporter is not None:
            self.reporter.start_unit(unit)

        start = time.monotonic()
        try:
            if unit.status is not None:
                log.error(
                    "Expected status of test %s to be unset at start but was: %s",
                    unit.id,
                    unit.status,
                )
            elif self._prerequisites_succeeded(unit):
                await self._execute(unit)
        finally:
            if unit.status is None:
                log.error("Status for test %s is undefined after execution", unit.id)
                unit.set_status(SKIPPED, "Unknown status after execution")
            unit.duration = time.monotonic() - start
            try:
                unit.cleanup()
            except Exception as e:
                log.error("Cleanup of test %s failed: %s", unit.id, e, exc_info=e)
            if self.reporter is not None:
                self.reporter.stop_unit(unit)

    def _prerequisites_succeeded(self, unit: TestUnit) -> bool:
        """Check wired prerequisite statuses, recording why a unit cannot run."""
        for dep in unit.dependencies:
            if dep.status in PREREQ_FAILURE_STATUSES:
                msg = f"Prerequisite test {dep.id} failed"
                log.info("%s: %s", unit.id, msg)
                unit.set_status(PREREQ_FAILED, msg)
                return False

        for dep in unit.dependencies:
            if dep.status == SKIPPED:
                msg = f"Prerequisite test {dep.id} skipped"
                log.info("%s: %s", unit.id, msg)
                unit.set_status(SKIPPED, msg)
                return False

        for dep in unit.dependencies:
            if dep.status != SUCCESS:
                log.error(
                    "Unexpected status %s of prerequisite test %s for %s",
                    dep.status,
                    dep.id,
                    unit.id,
                )
                return False

        return True

    async def _execute(self, unit: TestUnit) -> None:
        try:
            await unit.execute(self.context)
        except AssertionFailure as e:
            log.error("Test %s failed: %s", unit.id, e)
            self._record_failure(unit, str(e))
        except Exception as e:
            log.error("Unexpected exception in test %s: %s", unit.id, e, exc_info=e)
            self._record_failure(unit, f"Unexpected exception: {e!r}")
        else:
            if unit.status == SUCCESS:
                log.info("Test %s: OK", unit.id)

    def _record_failure(self, unit: TestUnit, reason: str) -> None:
        if unit.status is None:
            unit.set_status(FAILED, reason)
        else:
            log.error(
                "Test %s raised after reaching status %s: %s",
                unit.id,
                unit.status,
                reason,
            )
