"""Pipeline stages for Conveyor."""

from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.pipeline.stages.clone_stage import CloneStage
from conveyor.pipeline.stages.run_tests_stage import RunTestsStage
from conveyor.pipeline.stages.build_stage import BuildStage
from conveyor.pipeline.stages.containerize_stage import ContainerizeStage
from conveyor.pipeline.stages.publish_stage import PublishStage
from conveyor.pipeline.stages.deploy_stage import DeployStage

__all__ = [
    "CommandStage",
    "CloneStage",
    "RunTestsStage",
    "BuildStage",
    "ContainerizeStage",
    "PublishStage",
    "DeployStage",
]
