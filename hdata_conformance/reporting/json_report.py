"""JSON report writer."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from hdata_conformance.models.result import RunSummary, UnitResult
from hdata_conformance.reporting.base import Reporter


@dataclass(kw_only=True)
class JsonReporter(Reporter):
    """Writes a single JSON document with the summary and every unit result."""

    def write_summary(
        self, results: Sequence[UnitResult], summary: RunSummary
    ) -> None:
        print(json.dumps(format_output(results, summary), indent=2), file=self.stream)


def format_output(
    results: Sequence[UnitResult], summary: RunSummary
) -> dict[str, Any]:
    """Format unit results for JSON output."""
    return {
        "total": summary.total,
        "run": summary.tests_run,
        "failed": summary.failures,
        "prereq_failed": summary.prereq_failures,
        "skipped": summary.skipped,
        "warnings": summary.warnings,
        "results": [
            {
                "id": result.unit_id,
                "name": result.name,
                "required": result.required,
                "status": result.status,
                "outcome": result.outcome,
                "reason": result.reason,
                "warnings": list(result.warnings),
                "prerequisites": list(result.prerequisites),
                "duration": result.duration,
            }
            for result in results
        ],
    }
