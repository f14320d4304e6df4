"""Enumerations for Conveyor models."""

from enum import Enum


class StageStatus(str, Enum):
    """Outcome of a single stage within a run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
    NOT_RUN = "not_run"


class RunStatus(str, Enum):
    """Overall outcome of a run. Binary, no partial success."""

    SUCCESS = "success"
    FAILURE = "failure"
