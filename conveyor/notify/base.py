"""Abstract base class for run notifiers."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from conveyor.models import RunResult


class Notifier(ABC):
    """Receives exactly one terminal notification per run."""

    @abstractmethod
    def on_success(self, result: "RunResult") -> None:
        """Called when every stage succeeded."""
        pass

    @abstractmethod
    def on_failure(self, result: "RunResult") -> None:
        """Called when a stage failed. ``result.failed_stage`` names it."""
        pass
