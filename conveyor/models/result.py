"""Result models for Conveyor."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional

from conveyor.models.enums import RunStatus, StageStatus
from conveyor.models.report import ReportSummary
from conveyor.models.stage import StageResult


@dataclass
class RunResult:
    """Result of one pipeline run against one source revision."""

    run_id: str
    status: RunStatus
    stages: List[StageResult]
    source_ref: Optional[str] = None
    revision: Optional[str] = None
    image: Optional[str] = None
    container_id: Optional[str] = None
    failed_stage: Optional[str] = None
    error_kind: Optional[str] = None
    test_report: Optional[ReportSummary] = None
    dry_run: bool = False
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == RunStatus.SUCCESS

    @property
    def executed_stages(self) -> List[str]:
        """Names of stages that actually ran, in order."""
        return [
            s.name
            for s in self.stages
            if s.status in (StageStatus.SUCCEEDED, StageStatus.FAILED)
        ]

    def stage(self, name: str) -> Optional[StageResult]:
        """Look up a stage result by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    @property
    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "source_ref": self.source_ref,
            "revision": self.revision,
            "image": self.image,
            "container_id": self.container_id,
            "failed_stage": self.failed_stage,
            "error_kind": self.error_kind,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "stages": [s.to_dict() for s in self.stages],
            "test_report": self.test_report.to_dict() if self.test_report else None,
            "metrics": self.metrics,
            "warnings": self.warnings,
            "errors": self.errors,
        }
