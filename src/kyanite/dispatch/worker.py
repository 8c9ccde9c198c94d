"""Worker threads that expand and run one job at a time."""

from __future__ import annotations

import logging
import signal
from dataclasses import dataclass

from kyanite.config import Settings
from kyanite.dispatch.backend import CommandBackend, CommandRunResult, ShellLaunchError
from kyanite.dispatch.channel import Channel, ChannelClosed
from kyanite.dispatch.models import Job, JobResult
from kyanite.template import expand_template

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "[+] "


@dataclass(slots=True)
class WorkerRunSummary:
    """Per-worker counters, logged when the worker finishes."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0


class CommandWorker:
    """Pulls jobs from the shared channel until it is closed and drained."""

    def __init__(
        self,
        *,
        worker_id: int,
        settings: Settings,
        backend: CommandBackend,
        jobs: Channel[Job],
        results: Channel[JobResult],
    ) -> None:
        self.worker_id = worker_id
        self.settings = settings
        self.backend = backend
        self.jobs = jobs
        self.results = results

    def run_loop(self) -> WorkerRunSummary:
        """Process jobs until the job channel is exhausted.

        A failing job never stops the loop; only a closed job channel (or a
        closed result channel, which means nobody is listening) does.
        """

        summary = WorkerRunSummary()
        while True:
            try:
                job = self.jobs.recv()
            except ChannelClosed:
                break

            logger.debug("worker %d processing job %d", self.worker_id, job.id)
            result = self.run_once(job)
            summary.processed += 1
            if result.ok:
                summary.succeeded += 1
            else:
                summary.failed += 1
            if not self.results.send(result):
                break

        logger.debug(
            "worker %d finished: processed=%d succeeded=%d failed=%d",
            self.worker_id,
            summary.processed,
            summary.succeeded,
            summary.failed,
        )
        return summary

    def run_once(self, job: Job) -> JobResult:
        """Expand the template for ``job`` and run (or preview) it.

        Always returns a result; any failure is recorded on it.
        """

        try:
            return self._execute(job)
        except Exception as error:  # noqa: BLE001
            logger.debug("worker %d: job %d raised", self.worker_id, job.id, exc_info=True)
            return JobResult(id=job.id, output="", error=f"unexpected error: {error}")

    def _execute(self, job: Job) -> JobResult:
        command = expand_template(
            self.settings.command,
            job.line,
            self.settings.field_separator,
            self.settings.placeholder,
        )
        if self.settings.dry_run:
            return JobResult(id=job.id, output=f"{DRY_RUN_PREFIX}{command}")

        try:
            execution = self.backend.run(command)
        except ShellLaunchError as error:
            return JobResult(
                id=job.id,
                output="",
                error=f"failed to execute command: {error}",
            )

        return JobResult(
            id=job.id,
            output=combine_output(execution),
            error=None if execution.succeeded else describe_exit(execution.exit_code),
        )


def combine_output(execution: CommandRunResult) -> str:
    """Join trimmed stdout and stderr, stdout first, without a separator."""

    return execution.stdout.rstrip() + execution.stderr.rstrip()


def describe_exit(exit_code: int) -> str:
    if exit_code < 0:
        try:
            name = signal.Signals(-exit_code).name
        except ValueError:
            name = str(-exit_code)
        return f"command terminated by signal: {name}"
    return f"command failed with exit code: {exit_code}"
