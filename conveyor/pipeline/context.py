"""Pipeline context for carrying state through stages."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Any, Dict

from conveyor.config import ConveyorConfig
from conveyor.exceptions import StageFailure
from conveyor.models import CommandResult, ReportSummary, StageResult

CHECKOUT_DIRNAME = "source"
TEST_REPORTS_DIRNAME = "test-reports"


@dataclass
class PipelineContext:
    """Carries state through the pipeline stages of one run."""

    # Input
    run_id: str
    config: ConveyorConfig
    run_dir: Path
    source_ref: Optional[str] = None

    # Stage outputs (populated as pipeline progresses)
    revision: Optional[str] = None
    container_id: Optional[str] = None
    test_report: Optional[ReportSummary] = None
    stage_results: List[StageResult] = field(default_factory=list)

    # Control flow
    should_stop: bool = False
    dry_run: bool = False
    failed_stage: Optional[str] = None
    failure: Optional[StageFailure] = None

    # Metrics
    metrics: Dict[str, Any] = field(default_factory=dict)

    # Error tracking
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def checkout_dir(self) -> Path:
        """Directory the source is cloned into."""
        return self.run_dir / CHECKOUT_DIRNAME

    @property
    def artifacts_dir(self) -> Path:
        """Directory this run's artifacts are published to."""
        return self.config.artifacts_root / self.run_id

    @property
    def test_reports_dir(self) -> Path:
        return self.artifacts_dir / TEST_REPORTS_DIRNAME

    @property
    def environment(self) -> Dict[str, str]:
        """Process environment for stage commands.

        Fresh on every call; the configured variables are never mutated.
        """
        env = dict(os.environ)
        env.update(self.config.environment)
        env["CONVEYOR_IMAGE"] = self.config.image
        env["CONVEYOR_RUN_ID"] = self.run_id
        return env

    @property
    def current_stage(self) -> Optional[StageResult]:
        """Result record of the stage currently executing."""
        return self.stage_results[-1] if self.stage_results else None

    def record_command(self, result: CommandResult) -> None:
        """Attach a command result to the current stage."""
        if self.current_stage is not None:
            self.current_stage.commands.append(result)

    def fail(self, stage_name: str, failure: StageFailure) -> None:
        """Mark the run failed at ``stage_name`` and stop the pipeline."""
        if self.failed_stage is None:
            self.failed_stage = stage_name
            self.failure = failure
        self.add_error(f"{stage_name}: {failure}")
        self.should_stop = True

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)

    def add_metric(self, key: str, value: Any) -> None:
        """Add or update a metric."""
        self.metrics[key] = value

    def increment_metric(self, key: str, amount: int = 1) -> None:
        """Increment a numeric metric."""
        current = self.metrics.get(key, 0)
        self.metrics[key] = current + amount

    @property
    def succeeded(self) -> bool:
        """Check if no stage has failed."""
        return self.failed_stage is None
