"""Clone stage - fetches the source checkout for the run."""

from typing import List

from conveyor.pipeline.context import PipelineContext
from conveyor.pipeline.stages.command_stage import CommandStage
from conveyor.models import CommandResult, ShellAction
from conveyor.exceptions import SourceUnavailable

REV_PARSE = ["git", "rev-parse", "HEAD"]


class CloneStage(CommandStage):
    """Stage that clones the configured branch and checks out the source ref."""

    failure_type = SourceUnavailable

    @property
    def name(self) -> str:
        return "Clone"

    def actions(self, context: PipelineContext) -> List[ShellAction]:
        config = context.config
        checkout = context.checkout_dir

        if not context.dry_run:
            context.run_dir.mkdir(parents=True, exist_ok=True)

        actions = [
            ShellAction(
                argv=[
                    "git",
                    "clone",
                    "--branch",
                    config.branch,
                    "--single-branch",
                    config.repository_url,
                    checkout.name,
                ],
                cwd=context.run_dir,
                description="clone",
            )
        ]
        if context.source_ref:
            actions.append(
                ShellAction(
                    argv=["git", "checkout", "--quiet", context.source_ref],
                    cwd=checkout,
                    description="checkout",
                )
            )
        actions.append(ShellAction(argv=list(REV_PARSE), cwd=checkout))
        return actions

    def on_result(
        self, context: PipelineContext, action: ShellAction, result: CommandResult
    ) -> None:
        if action.argv == REV_PARSE and not result.dry_run:
            context.revision = result.stdout.strip() or None
