"""Data models for Conveyor."""

from conveyor.models.enums import StageStatus, RunStatus
from conveyor.models.command import ShellAction, CommandResult
from conveyor.models.stage import StageResult
from conveyor.models.report import ReportSummary
from conveyor.models.result import RunResult

__all__ = [
    "StageStatus",
    "RunStatus",
    "ShellAction",
    "CommandResult",
    "StageResult",
    "ReportSummary",
    "RunResult",
]
