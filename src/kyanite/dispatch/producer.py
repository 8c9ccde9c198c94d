"""Turn an input line stream into sequenced jobs."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator

from kyanite.dispatch.channel import Channel
from kyanite.dispatch.models import Job, ProducerOutcome

logger = logging.getLogger(__name__)


def iter_jobs(
    lines: Iterable[str],
    *,
    max_jobs: int = 0,
    stop_event: threading.Event | None = None,
) -> Iterator[Job]:
    """Yield one job per non-blank line, numbering them from 0.

    Blank lines are skipped without consuming an id. Iteration ends when the
    input is exhausted, ``max_jobs`` jobs were yielded (0 means no limit), or
    ``stop_event`` is set. Read errors from ``lines`` propagate to the caller.
    """

    next_id = 0
    for raw_line in lines:
        if stop_event is not None and stop_event.is_set():
            return

        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue

        yield Job(id=next_id, line=line)
        next_id += 1
        # Stop before pulling another line, which may block on an idle stdin.
        if max_jobs > 0 and next_id >= max_jobs:
            return


class JobProducer:
    """Feed jobs from a line source into the job channel."""

    def __init__(
        self,
        *,
        lines: Iterable[str],
        jobs: Channel[Job],
        max_jobs: int = 0,
        stop_event: threading.Event | None = None,
    ) -> None:
        self.lines = lines
        self.jobs = jobs
        self.max_jobs = max_jobs
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.outcome = ProducerOutcome()

    def run(self) -> ProducerOutcome:
        """Queue jobs until input ends, the cap is hit or shutdown is requested.

        A failure to read the input is returned in ``ProducerOutcome.error``
        rather than raised; deciding what to do about it is up to the caller.
        """

        outcome = self.outcome
        try:
            for job in iter_jobs(self.lines, max_jobs=self.max_jobs, stop_event=self.stop_event):
                if not self.jobs.send(job):
                    outcome.interrupted = True
                    break
                outcome.jobs_queued += 1
                logger.debug("queued job %d: %s", job.id, job.line)
        except (OSError, UnicodeDecodeError) as error:
            outcome.error = str(error)
            return outcome

        if self.stop_event.is_set():
            outcome.interrupted = True
        else:
            logger.debug("input finished, processed %d jobs", outcome.jobs_queued)
        return outcome
