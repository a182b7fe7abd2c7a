"""Terminal statuses a test unit can reach."""

from typing import Literal, TypeAlias

Status: TypeAlias = Literal["success", "failed", "skipped", "prereq_failed"]

SUCCESS: Status = "success"
FAILED: Status = "failed"
SKIPPED: Status = "skipped"
PREREQ_FAILED: Status = "prereq_failed"

# Dependency statuses that turn a dependent into prereq_failed
PREREQ_FAILURE_STATUSES: frozenset[Status] = frozenset({FAILED, PREREQ_FAILED})
