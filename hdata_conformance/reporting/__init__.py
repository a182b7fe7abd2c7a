"""Report writers for conformance runs."""

from hdata_conformance.reporting.base import Reporter
from hdata_conformance.reporting.json_report import JsonReporter
from hdata_conformance.reporting.text_report import TextReporter

__all__ = ["JsonReporter", "Reporter", "TextReporter"]
