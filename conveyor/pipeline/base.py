"""Base classes for pipeline components."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from conveyor.pipeline.context import PipelineContext


class PipelineStage(ABC):
    """Base class for all pipeline stages."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Stage name for logging and reporting."""
        pass

    @abstractmethod
    def process(self, context: "PipelineContext") -> "PipelineContext":
        """Run the stage's actions and return the updated context.

        Args:
            context: Pipeline context with current state

        Returns:
            Updated pipeline context

        Raises:
            StageFailure: If any action fails
        """
        pass

    def post_process(self, context: "PipelineContext", succeeded: bool) -> None:
        """Override to run a post-action after the stage, whatever its outcome.

        Args:
            context: Pipeline context
            succeeded: Whether ``process`` completed without failure
        """
        return None

    def should_skip(self, context: "PipelineContext") -> bool:
        """Override to conditionally skip this stage.

        Args:
            context: Pipeline context

        Returns:
            True if this stage should be skipped
        """
        return False
