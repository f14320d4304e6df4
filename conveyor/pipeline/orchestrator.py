"""Pipeline orchestrator - runs stages in order, stopping on first failure."""

import logging
import time
from pathlib import Path
from typing import List, Optional, Callable

from conveyor.pipeline.base import PipelineStage
from conveyor.pipeline.context import PipelineContext
from conveyor.config import ConveyorConfig
from conveyor.exceptions import StageFailure
from conveyor.models import StageResult, StageStatus

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Coordinates execution of pipeline stages."""

    def __init__(
        self,
        stages: List[PipelineStage],
        config: ConveyorConfig,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> None:
        """Initialize the pipeline orchestrator.

        Args:
            stages: Stages to execute, in order
            config: Conveyor configuration
            progress_callback: Optional callback for progress updates
        """
        self._stages = list(stages)
        self._config = config
        self._progress_callback = progress_callback

    def execute(
        self,
        run_id: str,
        run_dir: Path,
        source_ref: Optional[str] = None,
        dry_run: bool = False,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> PipelineContext:
        """Execute the pipeline once.

        Args:
            run_id: Identifier of this run
            run_dir: Directory owned by this run
            source_ref: Revision to check out (None for the branch head)
            dry_run: If True, log commands instead of running them
            progress_callback: Overrides the constructor callback for this run

        Returns:
            Pipeline context with per-stage results
        """
        start_time = time.time()

        context = PipelineContext(
            run_id=run_id,
            config=self._config,
            run_dir=run_dir,
            source_ref=source_ref,
            dry_run=dry_run,
        )

        stages = list(self._stages)
        total_stages = len(stages)
        callback = progress_callback or self._progress_callback

        for i, stage in enumerate(stages):
            if context.should_stop:
                context.stage_results.append(
                    StageResult(name=stage.name, status=StageStatus.NOT_RUN)
                )
                continue

            stage_result = StageResult(name=stage.name)
            context.stage_results.append(stage_result)

            if stage.should_skip(context):
                logger.info(f"Skipping stage: {stage.name}")
                stage_result.status = StageStatus.SKIPPED
                self._report_progress(callback, f"Skipped: {stage.name}", i, total_stages)
                continue

            logger.info(f"Executing stage: {stage.name}")
            stage_start = time.time()
            succeeded = False

            try:
                context = stage.process(context)
                succeeded = True
            except StageFailure as e:
                self._record_failure(context, stage_result, stage.name, e)
            except Exception as e:
                logger.exception(f"Unexpected error in stage {stage.name}")
                failure = StageFailure(str(e) or type(e).__name__, stage_name=stage.name)
                self._record_failure(context, stage_result, stage.name, failure)
            finally:
                self._run_post_action(stage, context, succeeded)

            stage_result.duration = time.time() - stage_start
            if succeeded:
                stage_result.status = StageStatus.SUCCEEDED
                if self._config.verbose:
                    logger.info(
                        f"Stage {stage.name} completed in {stage_result.duration:.2f}s"
                    )

            self._report_progress(callback, stage.name, i, total_stages)

        # Record total time
        context.add_metric("total_time", time.time() - start_time)

        return context

    def _record_failure(
        self,
        context: PipelineContext,
        stage_result: StageResult,
        stage_name: str,
        failure: StageFailure,
    ) -> None:
        if failure.stage_name is None:
            failure.stage_name = stage_name
        logger.error(f"Stage {stage_name} failed ({failure.kind}): {failure}")
        stage_result.status = StageStatus.FAILED
        stage_result.error = str(failure)
        stage_result.error_kind = failure.kind
        context.fail(stage_name, failure)

    @staticmethod
    def _run_post_action(
        stage: PipelineStage, context: PipelineContext, succeeded: bool
    ) -> None:
        """Run the stage's post-action. Its errors never change the outcome."""
        try:
            stage.post_process(context, succeeded)
        except Exception as e:
            logger.warning(f"Post-action of stage {stage.name} failed: {e}")
            context.add_warning(f"{stage.name} post-action failed: {e}")

    @staticmethod
    def _report_progress(
        callback: Optional[Callable[[str, float], None]],
        label: str,
        index: int,
        total: int,
    ) -> None:
        if callback:
            callback(label, (index + 1) / total)

    def add_stage(self, stage: PipelineStage) -> None:
        """Add a stage to the pipeline.

        Args:
            stage: Stage to add
        """
        self._stages.append(stage)

    def insert_stage(self, index: int, stage: PipelineStage) -> None:
        """Insert a stage at a specific position.

        Args:
            index: Position to insert at
            stage: Stage to insert
        """
        self._stages.insert(index, stage)

    def remove_stage(self, stage_name: str) -> bool:
        """Remove a stage by name.

        Args:
            stage_name: Name of stage to remove

        Returns:
            True if stage was found and removed
        """
        for i, stage in enumerate(self._stages):
            if stage.name == stage_name:
                self._stages.pop(i)
                return True
        return False

    @property
    def stages(self) -> List[PipelineStage]:
        """Stages in execution order."""
        return list(self._stages)

    @property
    def stage_names(self) -> List[str]:
        """Get list of stage names in order."""
        return [stage.name for stage in self._stages]
