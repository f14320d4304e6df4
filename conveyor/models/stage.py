"""Stage result model."""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from conveyor.models.enums import StageStatus
from conveyor.models.command import CommandResult


@dataclass
class StageResult:
    """Outcome of one stage in a run."""

    name: str
    status: StageStatus = StageStatus.NOT_RUN
    duration: float = 0.0
    commands: List[CommandResult] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == StageStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status == StageStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "status": self.status.value,
            "duration": round(self.duration, 3),
            "commands": [c.to_dict() for c in self.commands],
            "error": self.error,
            "error_kind": self.error_kind,
        }
