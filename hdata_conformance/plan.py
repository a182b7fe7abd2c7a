"""Execution plan: a deterministic, dependency-respecting order of test units.

Requested units are resolved depth-first. Every prerequisite is placed before
the unit that depends on it (post-order), so the plan is a valid topological
order and submission order only matters between unrelated units.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from hdata_conformance.errors import ConfigurationDefectError, PropertyRejectedError
from hdata_conformance.models.status import SKIPPED
from hdata_conformance.registry import Registry
from hdata_conformance.units.base import TestUnit, UnitOptions

log = logging.getLogger(__name__)

IN_PROGRESS, PLACED, REJECTED = 0, 1, 2


@dataclass(frozen=True)
class ExecutionPlan:
    """Ordered, read-only list of units ready to be executed.

    `rejected` holds the units, requested or pulled in as prerequisites, that
    could not be placed. They are already marked skipped.
    """

    units: Sequence[TestUnit]
    rejected: Sequence[TestUnit] = ()

    @classmethod
    def resolve(cls, registry: Registry, requested: Iterable[TestUnit]) -> ExecutionPlan:
        """Expand requested units with their prerequisites and order them.

        Units that cannot be placed (missing or failed prerequisites, cycles,
        invalid deferred properties) are marked skipped and left out of the
        plan; resolution of the other requested units carries on.

        Args:
            registry: Registry used to look up prerequisites by id
            requested: Units to run, in submission order

        Returns:
            The execution plan

        """
        resolver = _Resolver(registry)
        for unit in requested:
            resolver.visit(unit)

        log.info("Execution plan contains %d test(s)", len(resolver.order))
        return cls(units=tuple(resolver.order), rejected=tuple(resolver.rejected))

    @property
    def ids(self) -> Sequence[str]:
        return [unit.id for unit in self.units]

    def __iter__(self) -> Iterator[TestUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)


class _Resolver:
    """Depth-first resolution with memoized outcome per unit id."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry
        self.order: list[TestUnit] = []
        self.rejected: list[TestUnit] = []
        self.state: dict[str, int] = {}

    def visit(self, unit: TestUnit) -> bool:
        """Place a unit after its prerequisites, returning False if rejected."""
        state = self.state.get(unit.id)
        if state is not None:
            log.debug("Test already visited: %s", unit.id)
            return state == PLACED

        log.debug("Check: %s", unit.id)
        self.state[unit.id] = IN_PROGRESS
        try:
            self._wire(unit)
        except (ConfigurationDefectError, PropertyRejectedError) as e:
            self.state[unit.id] = REJECTED
            self.rejected.append(unit)
            log.error("Skip test %s: %s", unit.id, e)
            if unit.status is None:
                unit.set_status(SKIPPED, str(e))
            return False

        self.order.append(unit)
        self.state[unit.id] = PLACED
        log.debug("Add[%d]: %s", len(self.order) - 1, unit.id)
        return True

    def _wire(self, unit: TestUnit) -> None:
        if unit.id in unit.depends_on:
            raise ConfigurationDefectError(f"Test {unit.id} cannot depend on itself")

        # deferred properties may only target declared dependencies
        for prop in unit.pending_properties:
            if prop.target not in unit.depends_on:
                raise ConfigurationDefectError(
                    f"Cannot set property {prop.key} on non-dependent test {prop.target}"
                )

        for dep_id in unit.depends_on:
            other = self.registry.lookup(dep_id)
            if other is None:
                raise ConfigurationDefectError(f"Dependency test {dep_id} not loaded")
            if self.state.get(dep_id) == IN_PROGRESS:
                raise ConfigurationDefectError(
                    f"Dependency cycle between test {unit.id} and {dep_id}"
                )
            if not self.visit(other):
                raise ConfigurationDefectError(f"Failed to add dependency test {dep_id}")
            unit.add_dependency(other)

        # check every request before touching any target
        updates: dict[str, dict[str, Any]] = {}
        for prop in unit.pending_properties:
            updates.setdefault(prop.target, {})[prop.key] = prop.value

        staged: list[tuple[TestUnit, UnitOptions]] = []
        for target_id, values in updates.items():
            target = unit.get_dependency(target_id)
            if target is None:
                # should never happen, every declared dependency was wired above
                raise ConfigurationDefectError(
                    f"Failed to set property on dependent test {target_id}"
                )
            try:
                staged.append((target, target.validate_properties(values)))
            except PropertyRejectedError as e:
                raise PropertyRejectedError(
                    f"Failed to set property on dependent test {target_id}: {e}"
                ) from e

        for target, options in staged:
            target.options = options
