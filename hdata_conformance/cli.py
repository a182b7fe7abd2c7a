"""CLI entry point for the hData conformance test suite."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Generator, Iterable, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from hdata_conformance.config import load_config
from hdata_conformance.context import ConformanceContext
from hdata_conformance.engine import ExecutionEngine
from hdata_conformance.errors import ConfigError
from hdata_conformance.models.result import RunSummary
from hdata_conformance.plan import ExecutionPlan
from hdata_conformance.registry import Registry
from hdata_conformance.reporting.loading import (
    ReporterNotFoundError,
    load_reporter_class,
)
from hdata_conformance.units import TestUnit, default_units

EXIT_CONFIG_ERROR = 2


def log_results_summary(log: logging.Logger, summary: RunSummary) -> None:
    """Log the run level counts."""
    log.info("=" * 80)
    log.info(
        "Tests run: %d, Failures: %d, Prerequisite failures: %d, "
        "Skipped: %d, Warnings: %d",
        summary.tests_run,
        summary.failures,
        summary.prereq_failures,
        summary.skipped,
        summary.warnings,
    )
    if summary.failures:
        log.info("Target does NOT conform: %d required test(s) failed", summary.failures)
    else:
        log.info("Target conforms: no required test failed")
    log.info("=" * 80)


def parse_unit_ids(unit_ids: str) -> Sequence[str]:
    """Parse comma-separated unit ids."""
    if not unit_ids.strip():
        return ()
    return tuple(s.strip() for s in unit_ids.split(",") if s.strip())


def select_units(registry: Registry, unit_ids: Sequence[str]) -> Sequence[TestUnit]:
    """Return the registered units to request, every unit when no id is given."""
    if not unit_ids:
        return registry.units

    log = logging.getLogger("hdata_conformance")
    selected: list[TestUnit] = []
    for unit_id in unit_ids:
        unit = registry.lookup(unit_id)
        if unit is None:
            log.warning("Unknown test id %s ignored", unit_id)
            continue
        selected.append(unit)
    return selected


def report_units(
    requested: Iterable[TestUnit], plan: ExecutionPlan
) -> Sequence[TestUnit]:
    """Units to report on: requested, planned and rejected, sorted by id."""
    units = {unit.id: unit for unit in requested}
    units.update((unit.id, unit) for unit in plan)
    units.update((unit.id, unit) for unit in plan.rejected)
    return [units[unit_id] for unit_id in sorted(units)]


@contextmanager
def open_output(path: Path | None) -> Generator[TextIO]:
    """Yield the report stream: the given file, or stdout."""
    if path is None:
        yield sys.stdout
        return
    with path.open("w", encoding="utf-8") as stream:
        yield stream


async def run(
    config_path: Path,
    reporter_key: str = "text",
    output: Path | None = None,
    unit_ids: Sequence[str] = (),
) -> int:
    """Run the conformance suite and return exit code."""
    log = logging.getLogger("hdata_conformance")

    try:
        config = await load_config(config_path)
        reporter_cls = load_reporter_class(reporter_key)
    except (ConfigError, ReporterNotFoundError) as e:
        log.error("%s", e)
        return EXIT_CONFIG_ERROR

    log.info("Target baseURL: %s", config.base_url)

    registry = Registry(default_units())
    requested = select_units(registry, unit_ids or config.units)
    if not requested:
        log.error("No tests selected")
        return EXIT_CONFIG_ERROR

    with open_output(output) as stream:
        reporter = reporter_cls(stream=stream)
        reporter.setup()

        reporter.start_group("Build Execution Plan")
        plan = ExecutionPlan.resolve(registry, requested)
        reporter.end_group()

        async with ConformanceContext.from_config(config) as context:
            engine = ExecutionEngine(context=context, reporter=reporter)
            await engine.run(plan)

        summary = reporter.generate_summary(report_units(requested, plan))

    log_results_summary(log, summary)
    return summary.exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run hData conformance tests against a remote HDR"
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the YAML run configuration",
    )
    parser.add_argument(
        "--reporter",
        default="text",
        help="Reporter key (text, json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the report to this file instead of stdout",
    )
    parser.add_argument(
        "--units",
        default="",
        help="Comma-separated test ids to run (overrides the configuration)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics written to stderr",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            config_path=args.config,
            reporter_key=args.reporter,
            output=args.output,
            unit_ids=parse_unit_ids(args.units),
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
