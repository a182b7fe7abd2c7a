"""Reporter lookup through the ``hdata_conformance.reporters`` entry points.

Third-party packages add report formats by registering a ``Reporter``
subclass under this group in their own packaging metadata.
"""

from collections.abc import Mapping
from importlib.metadata import EntryPoint, entry_points

from hdata_conformance.errors import ConformanceError
from hdata_conformance.reporting.base import Reporter

ENTRY_POINT_GROUP = "hdata_conformance.reporters"


class ReporterNotFoundError(ConformanceError):
    """Raised when no usable reporter is registered under a key."""


def available_reporters() -> Mapping[str, EntryPoint]:
    """Registered reporter entry points by key."""
    return {entry.name: entry for entry in entry_points(group=ENTRY_POINT_GROUP)}


def load_reporter_class(key: str) -> type[Reporter]:
    """Load a reporter class by key.

    Args:
        key: Entry point name, e.g. "text" or "json"

    Returns:
        The reporter class

    Raises:
        ReporterNotFoundError: If the key is not registered, or points at
            something other than a Reporter subclass

    """
    reporters = available_reporters()
    entry = reporters.get(key)
    if entry is None:
        raise ReporterNotFoundError(
            f"Reporter '{key}' not found. Available reporters: {sorted(reporters)}"
        )

    reporter_cls = entry.load()
    if not (isinstance(reporter_cls, type) and issubclass(reporter_cls, Reporter)):
        raise ReporterNotFoundError(
            f"Entry point '{key}' ({entry.value}) is not a Reporter subclass"
        )
    return reporter_cls
