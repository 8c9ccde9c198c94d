"""Shared test fixtures."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from kyanite.dispatch.backend import CommandRunResult, ShellLaunchError
from kyanite.dispatch.collector import OutputSink


@dataclass(slots=True)
class RecordingSink:
    """Thread-safe capture of normal and error output lines."""

    out_lines: list[str] = field(default_factory=list)
    err_lines: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def _out(self, line: str) -> None:
        with self._lock:
            self.out_lines.append(line)

    def _err(self, line: str) -> None:
        with self._lock:
            self.err_lines.append(line)

    def as_sink(self) -> OutputSink:
        return OutputSink(out=self._out, err=self._err)


class FakeBackend:
    """In-process backend: echoes the command, optionally sleeping or failing."""

    def __init__(
        self,
        *,
        delay_for: Callable[[str], float] | None = None,
        exit_code_for: Callable[[str], int] | None = None,
        launch_error_for: Callable[[str], bool] | None = None,
    ) -> None:
        self.delay_for = delay_for or (lambda _command: 0.0)
        self.exit_code_for = exit_code_for or (lambda _command: 0)
        self.launch_error_for = launch_error_for or (lambda _command: False)
        self.commands: list[str] = []
        self._lock = threading.Lock()

    def run(self, command: str) -> CommandRunResult:
        with self._lock:
            self.commands.append(command)
        if self.launch_error_for(command):
            raise ShellLaunchError("No such file or directory: 'sh'")
        time.sleep(self.delay_for(command))
        return CommandRunResult(
            exit_code=self.exit_code_for(command),
            stdout=f"{command}\n",
            stderr="",
        )


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove KYANITE_* variables so defaults are deterministic."""
    for name in (
        "KYANITE_JOBS",
        "KYANITE_KEEP_ORDER",
        "KYANITE_DRY_RUN",
        "KYANITE_VERBOSE",
        "KYANITE_MAX_JOBS",
        "KYANITE_PLACEHOLDER",
        "KYANITE_FIELD_SEPARATOR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def make_backend() -> type[FakeBackend]:
    return FakeBackend


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """The CLI reconfigures the root logger; undo that between tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
