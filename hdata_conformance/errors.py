"""Exceptions raised while resolving and executing conformance tests."""


class ConformanceError(Exception):
    """Base class for all errors raised by hdata_conformance."""


class AssertionFailure(ConformanceError):  # noqa: N818
    """Raised by a unit when the clause it checks does not hold.

    The execution engine maps this to a ``failed`` status carrying the
    exception message.
    """


class ConfigurationDefectError(ConformanceError):
    """Raised when a unit is wired inconsistently with its declarations.

    Self dependencies, unresolved prerequisites, dependency cycles, and
    deferred properties aimed at undeclared dependencies all end up here.
    """


class PropertyRejectedError(ConformanceError):
    """Raised by a unit refusing a deferred property (unknown key or bad value)."""


class StatusAlreadySetError(ConformanceError):
    """Raised when a unit's terminal status is written a second time."""


class ConfigError(ConformanceError):
    """Raised when the run configuration cannot be loaded."""
