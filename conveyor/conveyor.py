"""Main Conveyor class - entry point for the library."""

from datetime import datetime, timezone
import logging
from pathlib import Path
import shutil
import uuid
from typing import Optional, Callable, List

from conveyor.config import ConveyorConfig
from conveyor.models import RunResult, RunStatus
from conveyor.notify.base import Notifier
from conveyor.notify.logging_notifier import LoggingNotifier
from conveyor.reports.base import ReportPublisher
from conveyor.reports.junit import JUnitReportPublisher
from conveyor.utils.command import CommandRunner
from conveyor.pipeline.base import PipelineStage
from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.orchestrator import PipelineOrchestrator
from conveyor.pipeline.stages import (
    CloneStage,
    RunTestsStage,
    BuildStage,
    ContainerizeStage,
    PublishStage,
    DeployStage,
)
from conveyor.exceptions import ConveyorConfigError

logger = logging.getLogger(__name__)


class Conveyor:
    """Runs the clone, test, build, containerize, publish, deploy pipeline."""

    def __init__(
        self,
        config: ConveyorConfig,
        runner: Optional[CommandRunner] = None,
        notifier: Optional[Notifier] = None,
        report_publisher: Optional[ReportPublisher] = None,
        stages: Optional[List[PipelineStage]] = None,
    ) -> None:
        """Initialize Conveyor.

        Args:
            config: Configuration object
            runner: Custom command runner
            notifier: Receives the terminal success/failure notification
            report_publisher: Custom test report publisher
            stages: Custom stage list (overrides the default pipeline)
        """
        if config is None:
            raise ConveyorConfigError("A ConveyorConfig must be provided")
        self._config = config

        self._runner = runner or CommandRunner(timeout=config.command_timeout)
        self._notifier = notifier or LoggingNotifier()
        self._report_publisher = report_publisher or JUnitReportPublisher(
            pattern=config.test_report_pattern
        )
        self._orchestrator = PipelineOrchestrator(
            stages=list(stages) if stages is not None else self.build_stages(),
            config=config,
        )

    @classmethod
    def builder(cls) -> "ConveyorBuilder":
        """Create a builder for fluent configuration.

        Returns:
            ConveyorBuilder instance
        """
        return ConveyorBuilder()

    def build_stages(self) -> List[PipelineStage]:
        """Build the default stage list, in execution order."""
        return [
            CloneStage(self._runner),
            RunTestsStage(self._runner, publisher=self._report_publisher),
            BuildStage(self._runner),
            ContainerizeStage(self._runner),
            PublishStage(self._runner),
            DeployStage(self._runner),
        ]

    def run(
        self,
        source_ref: Optional[str] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None,
        dry_run: bool = False,
    ) -> RunResult:
        """Execute one run of the pipeline.

        Args:
            source_ref: Revision to check out (None for the branch head)
            progress_callback: Optional callback for progress updates
            dry_run: If True, log commands instead of running them

        Returns:
            RunResult with per-stage outcomes
        """
        started_at = datetime.now(timezone.utc)
        run_id = f"{started_at.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        run_dir = self._config.workspace_root / run_id

        logger.info(
            f"Starting run {run_id} of {self._config.repository_url} "
            f"({self._config.branch}@{source_ref or 'HEAD'})"
        )

        try:
            context = self._orchestrator.execute(
                run_id=run_id,
                run_dir=run_dir,
                source_ref=source_ref,
                dry_run=dry_run,
                progress_callback=progress_callback,
            )
        finally:
            if not self._config.keep_workspace:
                self._cleanup(run_dir)

        result = self._build_result(context, started_at)
        self._notify(result)
        return result

    def _build_result(self, context: PipelineContext, started_at: datetime) -> RunResult:
        return RunResult(
            run_id=context.run_id,
            status=RunStatus.SUCCESS if context.succeeded else RunStatus.FAILURE,
            stages=context.stage_results,
            source_ref=context.source_ref,
            revision=context.revision,
            image=self._config.image,
            container_id=context.container_id,
            failed_stage=context.failed_stage,
            error_kind=context.failure.kind if context.failure else None,
            test_report=context.test_report,
            dry_run=context.dry_run,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            metrics=context.metrics,
            warnings=context.warnings,
            errors=context.errors,
        )

    def _notify(self, result: RunResult) -> None:
        """Send the single terminal notification for a run."""
        try:
            if result.success:
                self._notifier.on_success(result)
            else:
                self._notifier.on_failure(result)
        except Exception as e:
            logger.exception("Notifier failed")
            result.add_warning(f"Notification failed: {e}")

    @staticmethod
    def _cleanup(run_dir: Path) -> None:
        if not run_dir.exists():
            return
        try:
            shutil.rmtree(run_dir)
        except OSError as e:
            logger.warning(f"Could not remove run directory {run_dir}: {e}")
            return
        logger.debug(f"Removed run directory {run_dir}")

    @property
    def config(self) -> ConveyorConfig:
        """Get the configuration."""
        return self._config

    @property
    def stage_names(self) -> List[str]:
        """Get list of stage names in execution order."""
        return self._orchestrator.stage_names

    def add_stage(self, stage: PipelineStage) -> None:
        """Append a stage; it runs after the existing ones on later runs."""
        self._orchestrator.add_stage(stage)

    def insert_stage(self, index: int, stage: PipelineStage) -> None:
        """Insert a stage at a position in the execution order."""
        self._orchestrator.insert_stage(index, stage)

    def remove_stage(self, stage_name: str) -> bool:
        """Remove a stage by name.

        Returns:
            True if stage was found and removed
        """
        return self._orchestrator.remove_stage(stage_name)


class ConveyorBuilder:
    """Builder for fluent Conveyor configuration."""

    def __init__(self) -> None:
        """Initialize the builder."""
        self._config: Optional[ConveyorConfig] = None
        self._runner: Optional[CommandRunner] = None
        self._notifier: Optional[Notifier] = None
        self._report_publisher: Optional[ReportPublisher] = None
        self._stages: Optional[List[PipelineStage]] = None

    def with_config(self, config: ConveyorConfig) -> "ConveyorBuilder":
        """Set configuration.

        Args:
            config: ConveyorConfig instance

        Returns:
            Self for chaining
        """
        self._config = config
        return self

    def with_runner(self, runner: CommandRunner) -> "ConveyorBuilder":
        """Set the command runner."""
        self._runner = runner
        return self

    def with_notifier(self, notifier: Notifier) -> "ConveyorBuilder":
        """Set the notifier."""
        self._notifier = notifier
        return self

    def with_report_publisher(self, publisher: ReportPublisher) -> "ConveyorBuilder":
        """Set the test report publisher."""
        self._report_publisher = publisher
        return self

    def with_stages(self, stages: List[PipelineStage]) -> "ConveyorBuilder":
        """Replace the default stage list."""
        self._stages = stages
        return self

    def build(self) -> Conveyor:
        """Build the Conveyor instance.

        Returns:
            Configured Conveyor instance

        Raises:
            ConveyorConfigError: If no configuration was given
        """
        if self._config is None:
            raise ConveyorConfigError("with_config() must be called before build()")
        return Conveyor(
            config=self._config,
            runner=self._runner,
            notifier=self._notifier,
            report_publisher=self._report_publisher,
            stages=self._stages,
        )
