"""Shell action and command result models."""

from dataclasses import dataclass
from pathlib import Path
import shlex
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class ShellAction:
    """One external command a stage runs.

    ``stdin`` is fed to the process and never logged.
    """

    argv: List[str]
    cwd: Optional[Path] = None
    stdin: Optional[str] = None
    description: str = ""

    @property
    def display(self) -> str:
        """Shell-quoted command line for logs and reports."""
        return shlex.join(self.argv)

    @classmethod
    def from_command_line(
        cls,
        command_line: str,
        cwd: Optional[Path] = None,
        description: str = "",
    ) -> "ShellAction":
        """Create an action from a configured command string."""
        return cls(argv=shlex.split(command_line), cwd=cwd, description=description)


@dataclass
class CommandResult:
    """Result of running (or, in dry-run mode, not running) a command."""

    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        """Check if the command exited successfully."""
        return self.returncode == 0

    @property
    def display(self) -> str:
        return shlex.join(self.argv)

    def output_tail(self, lines: int = 20) -> str:
        """Last lines of combined output, for failure messages."""
        combined = "\n".join(part for part in (self.stdout, self.stderr) if part)
        return "\n".join(combined.rstrip().splitlines()[-lines:])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "command": self.display,
            "returncode": self.returncode,
            "duration": round(self.duration, 3),
            "dry_run": self.dry_run,
        }
