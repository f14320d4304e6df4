"""Build stage - compiles and packages the project."""

from typing import List

from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.models import ShellAction
from conveyor.exceptions import BuildFailure


class BuildStage(CommandStage):
    """Stage that runs the configured build command."""

    failure_type = BuildFailure

    @property
    def name(self) -> str:
        return "Build"

    def actions(self, context: PipelineContext) -> List[ShellAction]:
        return [
            ShellAction.from_command_line(
                context.config.build_command,
                cwd=context.checkout_dir,
                description="build",
            )
        ]
