"""Publish stage - authenticates to the registry and pushes the image."""

from typing import List

from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.models import ShellAction
from conveyor.exceptions import PublishFailure


class PublishStage(CommandStage):
    """Stage that logs in to the registry and pushes the tagged image.

    The password goes to the engine on stdin so it never shows up in argv.
    """

    failure_type = PublishFailure

    @property
    def name(self) -> str:
        return "Publish"

    def actions(self, context: PipelineContext) -> List[ShellAction]:
        config = context.config
        if not config.has_registry_credential:
            message = "No registry credential configured (registry_username/registry_password)"
            if not context.dry_run:
                raise PublishFailure(message, stage_name=self.name)
            context.add_warning(message)

        login = [config.container_engine, "login"]
        if config.registry_url:
            login.append(config.registry_url)
        login += ["-u", config.registry_username or "<unset>", "--password-stdin"]

        return [
            ShellAction(argv=login, stdin=config.registry_password, description="login"),
            ShellAction(
                argv=[config.container_engine, "push", config.image],
                description="push",
            ),
        ]
