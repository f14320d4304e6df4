"""Containerize stage - builds the tagged container image."""

from typing import List

from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.models import ShellAction
from conveyor.exceptions import ContainerBuildFailure


class ContainerizeStage(CommandStage):
    """Stage that builds an image tagged with the configured identifier."""

    failure_type = ContainerBuildFailure

    @property
    def name(self) -> str:
        return "Containerize"

    def actions(self, context: PipelineContext) -> List[ShellAction]:
        config = context.config
        return [
            ShellAction(
                argv=[
                    config.container_engine,
                    "build",
                    "-t",
                    config.image,
                    "-f",
                    config.dockerfile,
                    config.build_context,
                ],
                cwd=context.checkout_dir,
                description="image build",
            )
        ]
