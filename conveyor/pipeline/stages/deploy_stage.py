"""Deploy/Run stage - starts a container from the published image."""

import logging
from typing import List

from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.models import CommandResult, ShellAction
from conveyor.exceptions import DeployFailure

logger = logging.getLogger(__name__)


class DeployStage(CommandStage):
    """Stage that runs the image detached, binding host port to service port.

    A port already bound on the host is not resolved here; the engine's error
    surfaces as ``DeployFailure``.
    """

    failure_type = DeployFailure

    @property
    def name(self) -> str:
        return "Deploy/Run"

    @property
    def metric_key(self) -> str:
        return "deploy"

    def actions(self, context: PipelineContext) -> List[ShellAction]:
        config = context.config
        argv = [
            config.container_engine,
            "run",
            "-d",
            "-p",
            f"{config.host_port}:{config.container_port}",
        ]
        if config.container_name:
            argv += ["--name", config.container_name]
        argv.append(config.image)
        return [ShellAction(argv=argv, description="run")]

    def on_result(
        self, context: PipelineContext, action: ShellAction, result: CommandResult
    ) -> None:
        if result.dry_run:
            return

        lines = result.stdout.strip().splitlines()
        container_id = lines[-1].strip() if lines else ""
        if not container_id:
            raise DeployFailure(
                "Container engine reported no instance identifier",
                stage_name=self.name,
                command=list(action.argv),
                returncode=result.returncode,
                output=result.output_tail(),
            )

        context.container_id = container_id
        logger.info(
            f"Container {container_id[:12]} listening on host port "
            f"{context.config.host_port}"
        )
