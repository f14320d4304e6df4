"""JUnit XML report publisher."""

import logging
import shutil
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Tuple

import yaml

from conveyor.models import ReportSummary
from conveyor.reports.base import ReportPublisher
from conveyor.exceptions import ReportError

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "summary.yaml"


class JUnitReportPublisher(ReportPublisher):
    """Publishes JUnit XML reports (Maven Surefire, pytest --junitxml, ...)."""

    def __init__(self, pattern: str = "target/surefire-reports/*.xml") -> None:
        """Initialize the publisher.

        Args:
            pattern: Glob, relative to the checkout, matching report files
        """
        self._pattern = pattern

    @property
    def pattern(self) -> str:
        return self._pattern

    def publish(self, source_dir: Path, destination: Path) -> ReportSummary:
        """Copy matching reports to ``destination`` and summarise them.

        Args:
            source_dir: Checkout the test command ran in
            destination: Directory the reports are copied to

        Returns:
            ReportSummary with test counts

        Raises:
            ReportError: If the destination cannot be written
        """
        summary = ReportSummary()
        report_files = sorted(p for p in Path(source_dir).glob(self._pattern) if p.is_file())

        if not report_files:
            logger.info(f"No test reports matched {self._pattern} in {source_dir}")
            return summary

        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ReportError(f"Cannot create report directory: {e}", str(destination))

        for report_file in report_files:
            try:
                tests, failures, errors, skipped = self.count_cases(report_file)
            except (ET.ParseError, OSError) as e:
                logger.warning(f"Unreadable test report {report_file}: {e}")
                summary.unreadable.append(report_file.name)
                continue

            summary.files.append(report_file.name)
            summary.tests += tests
            summary.failures += failures
            summary.errors += errors
            summary.skipped += skipped

            try:
                shutil.copy2(report_file, destination / report_file.name)
            except OSError as e:
                raise ReportError(f"Cannot copy test report: {e}", str(report_file))

        summary.published_to = str(destination)
        self._write_summary(summary, destination / SUMMARY_FILENAME)

        logger.info(
            f"Published {len(summary.files)} test report(s): "
            f"{summary.tests} tests, {summary.failures} failures, "
            f"{summary.errors} errors, {summary.skipped} skipped"
        )
        return summary

    @staticmethod
    def count_cases(report_file: Path) -> Tuple[int, int, int, int]:
        """Count test cases in one JUnit XML file.

        Works for both ``<testsuite>`` and ``<testsuites>`` roots.

        Returns:
            (tests, failures, errors, skipped)
        """
        root = ET.parse(report_file).getroot()
        cases: List[ET.Element] = list(root.iter("testcase"))

        failures = sum(1 for c in cases if c.find("failure") is not None)
        errors = sum(1 for c in cases if c.find("error") is not None)
        skipped = sum(1 for c in cases if c.find("skipped") is not None)

        return len(cases), failures, errors, skipped

    @staticmethod
    def _write_summary(summary: ReportSummary, path: Path) -> None:
        content = yaml.dump(
            summary.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ReportError(f"Cannot write report summary: {e}", str(path))
