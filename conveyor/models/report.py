"""Test report summary model."""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class ReportSummary:
    """Aggregate of the JUnit XML reports published for a run."""

    files: List[str] = field(default_factory=list)
    tests: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0
    unreadable: List[str] = field(default_factory=list)
    published_to: Optional[str] = None

    @property
    def passed(self) -> int:
        return self.tests - self.failures - self.errors - self.skipped

    @property
    def is_empty(self) -> bool:
        """Check if no report files were found."""
        return not self.files and not self.unreadable

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "files": self.files,
            "tests": self.tests,
            "passed": self.passed,
            "failures": self.failures,
            "errors": self.errors,
            "skipped": self.skipped,
            "unreadable": self.unreadable,
            "published_to": self.published_to,
        }
