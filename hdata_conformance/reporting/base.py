"""Abstract base class for report writers."""

import sys
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from hdata_conformance.models.result import RunSummary, UnitResult, summarize
from hdata_conformance.units.base import TestUnit


@dataclass(kw_only=True)
class Reporter(ABC):
    """Receives progress events from a run and renders the final report.

    Units never write to the report directly; the engine calls the unit
    hooks and the caller asks for the summary once every unit has run.
    """

    stream: TextIO = field(default_factory=lambda: sys.stdout, repr=False)
    start_time: float = field(default=0.0, init=False)
    elapsed_time: float = field(default=0.0, init=False)

    def setup(self) -> None:
        """Called once before any other hook."""

    def start_group(self, title: str) -> None:
        """Start a new section of the report."""

    def end_group(self) -> None:
        """End the current section of the report."""

    def execute_start(self, count: int) -> None:
        self.start_time = time.monotonic()

    def execute_stop(self) -> None:
        self.elapsed_time = time.monotonic() - self.start_time

    def start_unit(self, unit: TestUnit) -> None:
        """Called before a unit is checked and executed."""

    def stop_unit(self, unit: TestUnit) -> None:
        """Called after a unit reached its terminal status and was cleaned up."""

    def generate_summary(self, units: Sequence[TestUnit]) -> RunSummary:
        """Render the conformance report for every unit and return the counts."""
        results = [UnitResult.from_unit(unit) for unit in units]
        summary = summarize(results)
        self.write_summary(results, summary)
        self.stream.flush()
        return summary

    @abstractmethod
    def write_summary(
        self, results: Sequence[UnitResult], summary: RunSummary
    ) -> None:
        """Write the final report."""
