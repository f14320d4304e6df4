"""Notifier that reports run outcomes through logging."""

import logging

from conveyor.models import RunResult
from conveyor.notify.base import Notifier

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    """Default notifier: one log line per run outcome."""

    def on_success(self, result: RunResult) -> None:
        revision = result.revision or result.source_ref or "HEAD"
        logger.info(
            f"Run {result.run_id} succeeded at {revision}; "
            f"image {result.image} running as {result.container_id or '-'}"
        )

    def on_failure(self, result: RunResult) -> None:
        stage = result.stage(result.failed_stage) if result.failed_stage else None
        detail = stage.error if stage and stage.error else "no details"
        logger.error(
            f"Run {result.run_id} failed at stage '{result.failed_stage}' "
            f"({result.error_kind}): {detail}"
        )
