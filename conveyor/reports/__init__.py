"""Test report publishers."""

from conveyor.reports.base import ReportPublisher
from conveyor.reports.junit import JUnitReportPublisher

__all__ = [
    "ReportPublisher",
    "JUnitReportPublisher",
]
