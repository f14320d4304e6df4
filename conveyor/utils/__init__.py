"""Utility modules for Conveyor."""

from conveyor.utils.command import CommandRunner

__all__ = [
    "CommandRunner",
]
