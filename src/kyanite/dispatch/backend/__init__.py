"""Command backend implementations."""

from kyanite.dispatch.backend.base import CommandBackend, CommandRunResult
from kyanite.dispatch.backend.shell_backend import ShellBackend, ShellLaunchError

__all__ = [
    "CommandBackend",
    "CommandRunResult",
    "ShellBackend",
    "ShellLaunchError",
]
