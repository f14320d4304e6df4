from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from conveyor import ConveyorConfig, StageStatus, BuildFailure
from conveyor.pipeline import PipelineContext, PipelineOrchestrator, PipelineStage


class ScriptedStage(PipelineStage):
    def __init__(self, name: str, log: List[str], error: Exception | None = None) -> None:
        self._name = name
        self._log = log
        self._error = error

    @property
    def name(self) -> str:
        return self._name

    def process(self, context: PipelineContext) -> PipelineContext:
        self._log.append(self._name)
        if self._error is not None:
            raise self._error
        return context


class StageWithPostAction(ScriptedStage):
    def __init__(self, *args, post_error: Exception | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.post_calls: List[bool] = []
        self._post_error = post_error

    def post_process(self, context: PipelineContext, succeeded: bool) -> None:
        self.post_calls.append(succeeded)
        if self._post_error is not None:
            raise self._post_error


class SkippedStage(ScriptedStage):
    def should_skip(self, context: PipelineContext) -> bool:
        return True


@pytest.fixture
def config(make_config) -> ConveyorConfig:
    return make_config()


def _execute(stages, config, tmp_path: Path, callback=None) -> PipelineContext:
    orchestrator = PipelineOrchestrator(stages, config, progress_callback=callback)
    return orchestrator.execute(run_id="run-1", run_dir=tmp_path / "run-1")


def test_stages_run_in_declared_order(config, tmp_path: Path) -> None:
    log: List[str] = []
    stages = [ScriptedStage(n, log) for n in ("a", "b", "c")]

    context = _execute(stages, config, tmp_path)

    assert log == ["a", "b", "c"]
    assert context.succeeded
    assert [r.status for r in context.stage_results] == [StageStatus.SUCCEEDED] * 3


def test_first_failure_short_circuits(config, tmp_path: Path) -> None:
    log: List[str] = []
    stages = [
        ScriptedStage("a", log),
        ScriptedStage("b", log, error=BuildFailure("compile error")),
        ScriptedStage("c", log),
    ]

    context = _execute(stages, config, tmp_path)

    assert log == ["a", "b"]
    assert context.failed_stage == "b"
    assert context.failure.kind == "BuildFailure"
    assert context.failure.stage_name == "b"
    assert context.should_stop
    assert context.stage_results[2].status == StageStatus.NOT_RUN
    assert context.errors == ["b: compile error"]


def test_unexpected_exception_fails_stage(config, tmp_path: Path) -> None:
    log: List[str] = []
    stages = [ScriptedStage("a", log, error=KeyError("oops")), ScriptedStage("b", log)]

    context = _execute(stages, config, tmp_path)

    assert context.failed_stage == "a"
    assert context.failure.kind == "StageFailure"
    assert context.stage_results[0].error_kind == "StageFailure"
    assert log == ["a"]


@pytest.mark.parametrize("error", [None, BuildFailure("tests exploded")])
def test_post_action_runs_on_both_outcomes(config, tmp_path: Path, error) -> None:
    log: List[str] = []
    stage = StageWithPostAction("tests", log, error=error)

    _execute([stage], config, tmp_path)

    assert stage.post_calls == [error is None]


def test_post_action_error_is_only_a_warning(config, tmp_path: Path) -> None:
    log: List[str] = []
    stage = StageWithPostAction("tests", log, post_error=OSError("disk full"))

    context = _execute([stage, ScriptedStage("next", log)], config, tmp_path)

    assert context.succeeded
    assert log == ["tests", "next"]
    assert context.warnings == ["tests post-action failed: disk full"]


def test_skipped_stage_does_not_run(config, tmp_path: Path) -> None:
    log: List[str] = []
    seen = []
    stages = [SkippedStage("a", log), ScriptedStage("b", log)]

    context = _execute(stages, config, tmp_path, callback=lambda s, p: seen.append(s))

    assert log == ["b"]
    assert context.stage_results[0].status == StageStatus.SKIPPED
    assert seen == ["Skipped: a", "b"]


def test_stage_list_editing(config) -> None:
    log: List[str] = []
    orchestrator = PipelineOrchestrator([ScriptedStage("a", log)], config)

    orchestrator.add_stage(ScriptedStage("c", log))
    orchestrator.insert_stage(1, ScriptedStage("b", log))

    assert orchestrator.stage_names == ["a", "b", "c"]
    assert orchestrator.remove_stage("b") is True
    assert orchestrator.remove_stage("missing") is False
    assert orchestrator.stage_names == ["a", "c"]


def test_total_time_metric_recorded(config, tmp_path: Path) -> None:
    context = _execute([ScriptedStage("a", [])], config, tmp_path)

    assert context.metrics["total_time"] >= 0
