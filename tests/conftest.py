from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import pytest

from conveyor import ConveyorConfig, CommandResult, RunResult
from conveyor.notify.base import Notifier
from conveyor.utils.command import CommandRunner

CONTAINER_ID = "c0ffee1234567890abcdef"
REVISION = "3f2a9c1d0b7e"

JUNIT_PASSING = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="hello" tests="2" failures="0" errors="0" skipped="0">
  <testcase classname="tests.test_hello" name="test_status"/>
  <testcase classname="tests.test_hello" name="test_body"/>
</testsuite>
"""

JUNIT_FAILING = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="hello" tests="2" failures="1" errors="0" skipped="0">
  <testcase classname="tests.test_hello" name="test_status"/>
  <testcase classname="tests.test_hello" name="test_body">
    <failure message="assert 'Hello' == 'Hello, DevOps World from Java!'"/>
  </testcase>
</testsuite>
"""


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[Path]
    env: Optional[Mapping[str, str]]
    stdin: Optional[str]


Response = Any  # int | CommandResult | Exception | Callable[[Call], CommandResult]


class FakeRunner(CommandRunner):
    """Scripted stand-in for CommandRunner keyed by argv prefix."""

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], Response]] = None) -> None:
        super().__init__()
        self.calls: List[Call] = []
        self._responses = responses or {}

    def run(self, argv, cwd=None, env=None, stdin=None, timeout=None) -> CommandResult:
        call = Call(argv=list(argv), cwd=cwd, env=env, stdin=stdin)
        self.calls.append(call)

        for prefix, response in self._responses.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return self._resolve(call, response)

        return CommandResult(argv=list(argv), returncode=0, stdout=self._default_stdout(argv))

    @staticmethod
    def _default_stdout(argv: List[str]) -> str:
        if argv[1:3] == ["rev-parse", "HEAD"]:
            return REVISION + "\n"
        if argv[1:2] == ["run"]:
            return CONTAINER_ID + "\n"
        return ""

    def _resolve(self, call: Call, response: Response) -> CommandResult:
        if isinstance(response, Exception):
            raise response
        if isinstance(response, CommandResult):
            return response
        if isinstance(response, int):
            return CommandResult(
                argv=call.argv,
                returncode=response,
                stdout=self._default_stdout(call.argv) if response == 0 else "",
                stderr="" if response == 0 else "boom",
            )
        return response(call)

    @property
    def commands(self) -> List[str]:
        return [" ".join(c.argv) for c in self.calls]

    def called(self, *prefix: str) -> bool:
        return any(tuple(c.argv[: len(prefix)]) == prefix for c in self.calls)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.successes: List[RunResult] = []
        self.failures: List[RunResult] = []

    def on_success(self, result: RunResult) -> None:
        self.successes.append(result)

    def on_failure(self, result: RunResult) -> None:
        self.failures.append(result)


def write_report(content: str) -> Callable[[Call], CommandResult]:
    """Response for the test command that drops a JUnit file into reports/."""

    def _respond(call: Call) -> CommandResult:
        report_dir = Path(call.cwd) / "reports"
        report_dir.mkdir(parents=True, exist_ok=True)
        (report_dir / "TEST-hello.xml").write_text(content, encoding="utf-8")
        returncode = 1 if "<failure" in content else 0
        return CommandResult(argv=call.argv, returncode=returncode)

    return _respond


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ConveyorConfig]:
    def _make(**overrides: Any) -> ConveyorConfig:
        values: Dict[str, Any] = {
            "repository_url": "https://git.example.com/hello-devops.git",
            "branch": "main",
            "test_command": "pytest -q",
            "build_command": "make package",
            "test_report_pattern": "reports/*.xml",
            "image": "registry.example.com/team/hello:1.0",
            "registry_url": "registry.example.com",
            "registry_username": "ci-bot",
            "registry_password": "s3cret-token",
            "workspace_dir": str(tmp_path / "workspace"),
            "artifacts_dir": str(tmp_path / "artifacts"),
        }
        values.update(overrides)
        return ConveyorConfig(**values)

    return _make
