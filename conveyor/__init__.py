"""
Conveyor: Build, Test and Deploy Pipeline Runner

Clone a repository, run its tests, build it, containerize it, publish the
image and start it, stopping at the first failing stage.
"""

from conveyor.config import ConveyorConfig
from conveyor.conveyor import Conveyor, ConveyorBuilder
from conveyor.models import (
    StageStatus,
    RunStatus,
    ShellAction,
    CommandResult,
    StageResult,
    ReportSummary,
    RunResult,
)
from conveyor.exceptions import (
    ConveyorError,
    ConveyorConfigError,
    CommandError,
    ReportError,
    StageFailure,
    SourceUnavailable,
    TestFailure,
    BuildFailure,
    ContainerBuildFailure,
    PublishFailure,
    DeployFailure,
)

__version__ = "1.0.0"
__all__ = [
    # Main classes
    "Conveyor",
    "ConveyorBuilder",
    "ConveyorConfig",
    # Models
    "ShellAction",
    "CommandResult",
    "StageResult",
    "ReportSummary",
    "RunResult",
    # Enums
    "StageStatus",
    "RunStatus",
    # Exceptions
    "ConveyorError",
    "ConveyorConfigError",
    "CommandError",
    "ReportError",
    "StageFailure",
    "SourceUnavailable",
    "TestFailure",
    "BuildFailure",
    "ContainerBuildFailure",
    "PublishFailure",
    "DeployFailure",
]
