"""Subprocess-based backend that runs commands under the system shell."""

from __future__ import annotations

import subprocess

from kyanite.dispatch.backend.base import CommandRunResult

DEFAULT_SHELL = "sh"


class ShellLaunchError(RuntimeError):
    """The shell process could not be started."""


class ShellBackend:
    """Execute each command line through ``<shell> -c``."""

    def __init__(self, shell: str = DEFAULT_SHELL) -> None:
        self.shell = shell

    def run(self, command: str) -> CommandRunResult:
        try:
            completed = subprocess.run(  # noqa: S603
                [self.shell, "-c", command],
                check=False,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as error:
            # ValueError: the command holds a NUL byte and cannot become an argv entry.
            raise ShellLaunchError(str(error)) from error

        return CommandRunResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
