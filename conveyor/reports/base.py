"""Abstract base class for test report publishers."""

from abc import ABC, abstractmethod
from pathlib import Path

from conveyor.models import ReportSummary


class ReportPublisher(ABC):
    """Abstract base class for test report publishers."""

    @abstractmethod
    def publish(self, source_dir: Path, destination: Path) -> ReportSummary:
        """Collect reports from a checkout and publish them as run artifacts.

        Args:
            source_dir: Checkout the test command ran in
            destination: Directory the reports are copied to

        Returns:
            Summary of the published reports
        """
        pass
