"""Registry of instantiated test units, indexed by id."""

import logging
from collections.abc import Iterable, Sequence

from hdata_conformance.units.base import TestUnit

log = logging.getLogger(__name__)


class Registry:
    """Holds every loaded test unit so the resolver can look up prerequisites.

    A registry is an explicit object handed to the resolver; independent runs
    use independent registries.
    """

    def __init__(self, units: Iterable[TestUnit] = ()) -> None:
        self._units: dict[str, TestUnit] = {}
        for unit in units:
            self.register(unit)

    def register(self, unit: TestUnit) -> bool:
        """Register a unit, returning False if it was rejected.

        Units with an empty or duplicate id, or that list themselves as a
        dependency, are logged and discarded.
        """
        unit_id = getattr(unit, "id", "")
        if not unit_id:
            log.error("Test %s has no id", type(unit).__name__)
            return False
        if unit_id in self._units:
            log.error(
                "Duplicate id [%s] found with test %s", unit_id, type(unit).__name__
            )
            return False
        if unit_id in unit.depends_on:
            log.error("Dependency cannot include self: %s", unit_id)
            return False

        self._units[unit_id] = unit
        return True

    def lookup(self, unit_id: str) -> TestUnit | None:
        """Return the unit registered under an id."""
        return self._units.get(unit_id)

    @property
    def units(self) -> Sequence[TestUnit]:
        """Registered units sorted by id."""
        return [self._units[unit_id] for unit_id in sorted(self._units)]

    @property
    def ids(self) -> Sequence[str]:
        return sorted(self._units)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._units

    def __len__(self) -> int:
        return len(self._units)
