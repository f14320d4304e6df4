"""Subprocess execution for pipeline stages."""

import logging
import subprocess
import time
from pathlib import Path
from typing import List, Optional, Mapping

from conveyor.models import CommandResult
from conveyor.exceptions import CommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs external commands and captures their output.

    A non-zero exit status is returned in the result. A missing or
    non-executable program, or a timeout, raises ``CommandError``. Output is
    decoded as UTF-8; undecodable bytes become U+FFFD.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        """Initialize the command runner.

        Args:
            timeout: Default timeout in seconds (None waits indefinitely)
        """
        self._timeout = timeout

    def run(
        self,
        argv: List[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        stdin: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Run a command to completion.

        Args:
            argv: Command and arguments
            cwd: Working directory
            env: Full environment for the process (None inherits ours)
            stdin: Text written to the process's standard input
            timeout: Override for the default timeout

        Returns:
            CommandResult with return code and captured output

        Raises:
            CommandError: If the executable or working directory is missing,
                the program cannot be started, or the command times out
        """
        timeout = timeout if timeout is not None else self._timeout
        logger.debug(f"Running: {' '.join(argv)} (cwd={cwd}, timeout={timeout})")

        if cwd is not None and not Path(cwd).is_dir():
            raise CommandError(f"Working directory does not exist: {cwd}", argv)

        start_time = time.time()
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(f"Executable not found: {argv[0]} ({e})", argv)
        except OSError as e:
            raise CommandError(f"Cannot execute {argv[0]}: {e}", argv)
        except subprocess.TimeoutExpired:
            raise CommandError(
                f"Command timed out after {timeout:g}s: {argv[0]}", argv
            )

        duration = time.time() - start_time
        logger.debug(f"Exited {completed.returncode} in {duration:.2f}s: {argv[0]}")

        return CommandResult(
            argv=list(argv),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration=duration,
        )
