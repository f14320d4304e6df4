"""Custom exceptions for Conveyor."""

from typing import List, Optional


class ConveyorError(Exception):
    """Base exception for all Conveyor errors."""

    pass


class ConveyorConfigError(ConveyorError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key


class CommandError(ConveyorError):
    """Raised when an external command cannot be run to completion."""

    def __init__(self, message: str, command: Optional[List[str]] = None):
        super().__init__(message)
        self.command = command or []


class ReportError(ConveyorError):
    """Raised when a test report cannot be published."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class StageFailure(ConveyorError):
    """Raised when a pipeline stage fails. Terminal for the current run."""

    def __init__(
        self,
        message: str,
        stage_name: Optional[str] = None,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.stage_name = stage_name
        self.command = command or []
        self.returncode = returncode
        self.output = output

    @property
    def kind(self) -> str:
        """Error kind reported to the operator."""
        return type(self).__name__


class SourceUnavailable(StageFailure):
    """Raised when the repository is unreachable or the branch/ref is missing."""

    pass


class TestFailure(StageFailure):
    """Raised when a test fails or the test command errors."""

    __test__ = False


class BuildFailure(StageFailure):
    """Raised on a compile or packaging error."""

    pass


class ContainerBuildFailure(StageFailure):
    """Raised when the container image cannot be built."""

    pass


class PublishFailure(StageFailure):
    """Raised on registry authentication or push errors."""

    pass


class DeployFailure(StageFailure):
    """Raised when the container engine cannot start the instance."""

    pass
