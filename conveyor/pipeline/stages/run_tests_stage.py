"""Run Tests stage - runs the project's tests and publishes the report."""

import logging
from typing import List, TYPE_CHECKING

from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.models import ShellAction
from conveyor.utils.command import CommandRunner
from conveyor.exceptions import TestFailure

if TYPE_CHECKING:
    from conveyor.reports.base import ReportPublisher

logger = logging.getLogger(__name__)


class RunTestsStage(CommandStage):
    """Stage that runs the test command.

    The report is published after the command whether or not it passed.
    """

    failure_type = TestFailure

    def __init__(self, runner: CommandRunner, publisher: "ReportPublisher") -> None:
        """Initialize the stage.

        Args:
            runner: Runner used for the test command
            publisher: Publisher for the test report post-action
        """
        super().__init__(runner)
        self._publisher = publisher

    @property
    def name(self) -> str:
        return "Run Tests"

    def actions(self, context: PipelineContext) -> List[ShellAction]:
        return [
            ShellAction.from_command_line(
                context.config.test_command,
                cwd=context.checkout_dir,
                description="test",
            )
        ]

    def post_process(self, context: PipelineContext, succeeded: bool) -> None:
        """Publish the test report."""
        if context.dry_run:
            return

        summary = self._publisher.publish(context.checkout_dir, context.test_reports_dir)
        context.test_report = summary
        context.add_metric("tests_total", summary.tests)
        context.add_metric("tests_failed", summary.failures + summary.errors)

        if summary.is_empty:
            context.add_warning("No test reports found to publish")
        for name in summary.unreadable:
            context.add_warning(f"Unreadable test report: {name}")
        if not succeeded:
            logger.info(f"Test report published for failed test run {context.run_id}")
