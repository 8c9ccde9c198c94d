"""Controller behind the ``kyanite`` CLI command."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from kyanite.config import Settings
from kyanite.dispatch.backend import CommandBackend
from kyanite.dispatch.collector import OutputSink
from kyanite.dispatch.dispatcher import Dispatcher
from kyanite.dispatch.models import DispatchSummary


@dataclass(slots=True)
class RunCommand:
    """CLI input for one dispatch run; ``None`` falls back to the environment."""

    command: str
    workers: int | None = None
    keep_order: bool = False
    dry_run: bool = False
    verbose: bool = False
    max_jobs: int | None = None
    placeholder: str | None = None
    field_separator: str | None = None


class DispatchCliController:
    """Resolve settings and drive a dispatch run."""

    def resolve_settings(self, command: RunCommand) -> Settings:
        """Merge CLI input over environment defaults and validate the result."""

        base = Settings.from_env(command=command.command)
        settings = replace(
            base,
            workers=base.workers if command.workers is None else command.workers,
            keep_order=command.keep_order or base.keep_order,
            dry_run=command.dry_run or base.dry_run,
            verbose=command.verbose or base.verbose,
            max_jobs=base.max_jobs if command.max_jobs is None else command.max_jobs,
            placeholder=base.placeholder if command.placeholder is None else command.placeholder,
            field_separator=(
                base.field_separator
                if command.field_separator is None
                else command.field_separator
            ),
        )
        settings.validate()
        return settings

    def run(
        self,
        settings: Settings,
        *,
        lines: Iterable[str],
        sink: OutputSink,
        backend: CommandBackend | None = None,
    ) -> DispatchSummary:
        dispatcher = Dispatcher(settings=settings, sink=sink, backend=backend)
        return dispatcher.run(lines)
