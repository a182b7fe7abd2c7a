"""Abstract base class for conformance test units."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, NamedTuple, NoReturn

from pydantic import BaseModel, ConfigDict, ValidationError

from hdata_conformance.context import ConformanceContext, HttpResponse
from hdata_conformance.errors import (
    AssertionFailure,
    ConfigurationDefectError,
    PropertyRejectedError,
    StatusAlreadySetError,
)
from hdata_conformance.models.status import SUCCESS, Status


class PendingProperty(NamedTuple):
    """Deferred property to set on a dependency once the edge is resolved."""

    target: str
    key: str
    value: Any


class UnitOptions(BaseModel):
    """Options a dependent unit may set on this unit via a deferred property.

    Subclasses extend the model with their own keys. Unknown keys and values of
    the wrong type are rejected.
    """

    model_config = ConfigDict(extra="forbid", strict=True, validate_assignment=True)

    # Keep the artifact (e.g. HTTP response) after cleanup when execution succeeds
    retain: bool = False


@dataclass(kw_only=True, eq=False)
class TestUnit(ABC):
    """Atomic, stateful test asserting one clause of the hData REST binding.

    Subclasses declare their identity as class attributes:

    - id: unique, non-empty identifier (usually the clause number)
    - name: short description of the clause
    - required: True for mandatory (MUST, SHALL) clauses, False for
      recommended or optional ones (SHOULD, MAY)
    - depends_on: ids of the units this one may depend on
    - Options: pydantic model of the properties dependents may set

    A unit is constructed once, registered, wired by the resolver, executed at
    most once, and cleaned up exactly once.
    """

    __test__ = False

    id: ClassVar[str]
    name: ClassVar[str] = ""
    required: ClassVar[bool] = True
    depends_on: ClassVar[Sequence[str]] = ()
    Options: ClassVar[type[UnitOptions]] = UnitOptions

    options: UnitOptions = field(init=False)
    dependencies: list["TestUnit"] = field(default_factory=list, init=False, repr=False)
    pending_properties: list[PendingProperty] = field(
        default_factory=list, init=False, repr=False
    )
    status: Status | None = field(default=None, init=False)
    reason: str | None = field(default=None, init=False)
    warnings: list[str] = field(default_factory=list, init=False, repr=False)
    artifact: HttpResponse | None = field(default=None, init=False, repr=False)
    duration: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.options = self.Options()

    @property
    def log(self) -> logging.Logger:
        """Logger named after the module defining the concrete unit."""
        return logging.getLogger(type(self).__module__)

    @abstractmethod
    async def execute(self, context: ConformanceContext) -> None:
        """Run the assertion. Only called when every prerequisite succeeded.

        Implementations set a terminal status, or raise AssertionFailure.
        """

    def cleanup(self) -> None:
        """Release the artifact unless retention was requested and we passed."""
        if not self.options.retain or self.status != SUCCESS:
            self.artifact = None

    # dependencies

    def add_dependency(self, unit: "TestUnit") -> None:
        """Wire a resolved prerequisite. Called by the resolver only."""
        if unit is self:
            raise ConfigurationDefectError(f"Test {self.id} cannot depend on itself")
        if unit.id not in self.depends_on:
            raise ConfigurationDefectError(
                f"Test {self.id} does not declare a dependency on {unit.id}"
            )
        if unit not in self.dependencies:
            self.dependencies.append(unit)

    def get_dependency(self, unit_id: str) -> "TestUnit | None":
        """Return the resolved prerequisite with the given id."""
        for unit in self.dependencies:
            if unit.id == unit_id:
                return unit
        return None

    def prerequisite_artifact(self, unit_id: str) -> HttpResponse | None:
        """Return the artifact retained by a resolved prerequisite."""
        unit = self.get_dependency(unit_id)
        return unit.artifact if unit is not None else None

    # deferred properties

    def request_property(self, target: str, key: str, value: Any) -> None:
        """Ask for key=value to be set on the prerequisite `target`.

        Applied by the resolver only once the dependency edge is validated;
        `target` must be one of this unit's declared dependencies.
        """
        self.pending_properties.append(PendingProperty(target, key, value))

    def validate_properties(self, values: Mapping[str, Any]) -> UnitOptions:
        """Return a copy of the options with `values` applied.

        The current options are left untouched, so several requests can be
        checked before any of them is committed.

        Raises:
            PropertyRejectedError: If a key is unknown or a value invalid

        """
        options_cls = type(self.options)
        for key in values:
            if key not in options_cls.model_fields:
                raise PropertyRejectedError(f"Test {self.id} has no property {key!r}")
        try:
            return options_cls.model_validate({**self.options.model_dump(), **values})
        except ValidationError as e:
            error = e.errors()[0]
            key = error["loc"][0] if error["loc"] else "?"
            raise PropertyRejectedError(
                f"Test {self.id} rejected property {key}={values.get(str(key))!r}: "
                f"{error['msg']}"
            ) from e

    def apply_property(self, key: str, value: Any) -> None:
        """Set an option requested by a dependent unit.

        Raises:
            PropertyRejectedError: If the key is unknown or the value invalid

        """
        self.options = self.validate_properties({key: value})

    # status

    def set_status(self, status: Status, reason: str | None = None) -> None:
        """Record the terminal status of this unit.

        Raises:
            StatusAlreadySetError: If a status was already recorded

        """
        if self.status is not None:
            raise StatusAlreadySetError(
                f"Status of test {self.id} already set to {self.status}"
            )
        self.status = status
        self.reason = reason

    def add_warning(self, msg: str) -> bool:
        """Add a warning, returning False if it was already recorded."""
        if msg in self.warnings:
            return False
        self.warnings.append(msg)
        return True

    def add_log_warning(self, msg: str) -> bool:
        """Add a warning and log it the first time it is seen."""
        added = self.add_warning(msg)
        if added:
            self.log.warning("%s: %s", self.id, msg)
        return added

    # assertions

    def fail(self, msg: str) -> NoReturn:
        raise AssertionFailure(msg)

    def assert_equal(self, expected: object, actual: object) -> None:
        if expected != actual:
            self.fail(f"Expected <{expected}> but was: <{actual}>")

    def assert_true(self, cond: bool, msg: str) -> None:
        if not cond:
            self.fail(msg)

    def assert_false(self, cond: bool, msg: str) -> None:
        if cond:
            self.fail(msg)
