"""Run outcome notifiers."""

from conveyor.notify.base import Notifier
from conveyor.notify.logging_notifier import LoggingNotifier

__all__ = [
    "Notifier",
    "LoggingNotifier",
]
