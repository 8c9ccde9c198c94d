"""Backend interface for running expanded commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True)
class CommandRunResult:
    """Captured output and exit status of one command."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class CommandBackend(Protocol):
    """Protocol implemented by command runners."""

    def run(self, command: str) -> CommandRunResult:
        """Run ``command`` to completion and return its captured output."""
