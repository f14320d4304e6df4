"""Command stage - base for stages made of ordered shell actions."""

import logging
import time
from abc import abstractmethod
from typing import List, Type

from conveyor.pipeline.base import PipelineStage
from conveyor.pipeline.context import PipelineContext
from conveyor.models import CommandResult, ShellAction
from conveyor.utils.command import CommandRunner
from conveyor.exceptions import CommandError, StageFailure

logger = logging.getLogger(__name__)


class CommandStage(PipelineStage):
    """Stage that runs its actions in order and fails on the first bad exit.

    Subclasses set ``failure_type`` and build their actions from the context.
    """

    failure_type: Type[StageFailure] = StageFailure

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize the stage.

        Args:
            runner: Runner used for every external command
        """
        self._runner = runner

    @abstractmethod
    def actions(self, context: PipelineContext) -> List[ShellAction]:
        """Build the ordered actions for this run."""
        pass

    def process(self, context: PipelineContext) -> PipelineContext:
        """Run every action in order.

        Args:
            context: Pipeline context

        Returns:
            Updated context

        Raises:
            StageFailure: Of ``failure_type`` when an action fails
        """
        start_time = time.time()

        for action in self.actions(context):
            result = self.run_action(context, action)
            self.on_result(context, action, result)

        context.add_metric(f"{self.metric_key}_time", time.time() - start_time)
        return context

    def on_result(
        self, context: PipelineContext, action: ShellAction, result: CommandResult
    ) -> None:
        """Override to capture output from a successful action."""
        return None

    def run_action(self, context: PipelineContext, action: ShellAction) -> CommandResult:
        """Run one action, raising ``failure_type`` on any failure."""
        if context.dry_run:
            logger.info(f"[dry-run] {self.name}: {action.display}")
            result = CommandResult(argv=list(action.argv), returncode=0, dry_run=True)
            context.record_command(result)
            return result

        logger.info(f"{self.name}: {action.display}")
        try:
            result = self._runner.run(
                action.argv,
                cwd=action.cwd,
                env=context.environment,
                stdin=action.stdin,
                timeout=context.config.command_timeout,
            )
        except CommandError as e:
            raise self.failure_type(
                str(e), stage_name=self.name, command=list(action.argv)
            )

        context.record_command(result)
        context.increment_metric("commands_run")

        if not result.ok:
            output = result.output_tail()
            logger.debug(f"{self.name} output:\n{output}")
            raise self.failure_type(
                f"`{action.display}` exited with status {result.returncode}",
                stage_name=self.name,
                command=list(action.argv),
                returncode=result.returncode,
                output=output,
            )

        return result

    @property
    def metric_key(self) -> str:
        return self.name.lower().replace(" ", "_").replace("/", "_")
