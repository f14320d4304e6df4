"""Pipeline components for Conveyor."""

from conveyor.pipeline.base import PipelineStage
from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.orchestrator import PipelineOrchestrator

__all__ = [
    "PipelineStage",
    "PipelineContext",
    "PipelineOrchestrator",
]
