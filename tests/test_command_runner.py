from __future__ import annotations

import sys
from pathlib import Path

import pytest

from conveyor import CommandError
from conveyor.utils.command import CommandRunner


def test_captures_output_and_exit_status(tmp_path: Path) -> None:
    result = CommandRunner().run(
        [sys.executable, "-c", "import os, sys; print(os.getcwd()); sys.exit(3)"],
        cwd=tmp_path,
    )

    assert result.returncode == 3
    assert not result.ok
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


def test_stdin_and_environment_are_passed() -> None:
    script = "import os, sys; print(sys.stdin.read() + os.environ['GREETING_SUFFIX'])"

    result = CommandRunner().run(
        [sys.executable, "-c", script],
        env={"GREETING_SUFFIX": "!"},
        stdin="hello",
    )

    assert result.ok
    assert result.stdout.strip() == "hello!"


def test_missing_executable_raises() -> None:
    with pytest.raises(CommandError, match="Executable not found") as exc_info:
        CommandRunner().run(["definitely-not-a-real-tool-xyz"])

    assert exc_info.value.command == ["definitely-not-a-real-tool-xyz"]


def test_timeout_raises() -> None:
    with pytest.raises(CommandError, match="timed out"):
        CommandRunner(timeout=0.5).run([sys.executable, "-c", "import time; time.sleep(5)"])


def test_output_tail_keeps_last_lines() -> None:
    result = CommandRunner().run(
        [sys.executable, "-c", "for i in range(50): print(i)"],
    )

    assert result.output_tail(lines=3).splitlines() == ["47", "48", "49"]


def test_undecodable_output_is_replaced() -> None:
    script = "import sys; sys.stdout.buffer.write(b'caf\\xe9 ok\\n')"

    result = CommandRunner().run([sys.executable, "-c", script])

    assert result.ok
    assert result.stdout == "caf\ufffd ok\n"


def test_non_executable_program_raises(tmp_path: Path) -> None:
    tool = tmp_path / "mvn"
    tool.write_text("#!/bin/sh\necho built\n", encoding="utf-8")
    tool.chmod(0o644)

    with pytest.raises(CommandError, match="Cannot execute") as exc_info:
        CommandRunner().run([str(tool)])

    assert exc_info.value.command == [str(tool)]
