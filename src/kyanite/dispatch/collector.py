"""Result collection in arrival or input order."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from kyanite.dispatch.channel import Channel
from kyanite.dispatch.models import CollectorSummary, JobResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OutputSink:
    """Line writers for normal output and for errors."""

    out: Callable[[str], None]
    err: Callable[[str], None]


class ResultPrinter:
    """Render one job result to an output sink."""

    def __init__(self, sink: OutputSink, *, verbose: bool = False) -> None:
        self.sink = sink
        self.verbose = verbose

    def emit(self, result: JobResult) -> None:
        if result.error is not None:
            self.sink.err(f"error in job {result.id}: {result.error}")
            if result.output:
                self.sink.err(f"output: {result.output}")
            return

        if not result.output:
            return
        if self.verbose:
            self.sink.out(f"[job {result.id}] {result.output}")
        else:
            self.sink.out(result.output)


class ResultCollector:
    """Consume the result channel until it is closed.

    With ``keep_order`` results are held back until every lower id has been
    emitted, so output follows input order whatever order workers finish in.
    """

    def __init__(
        self,
        *,
        results: Channel[JobResult],
        printer: ResultPrinter,
        keep_order: bool = False,
    ) -> None:
        self.results = results
        self.printer = printer
        self.keep_order = keep_order
        self.summary = CollectorSummary()

    def run(self) -> CollectorSummary:
        if self.keep_order:
            self._collect_in_order()
        else:
            for result in self.results:
                self._emit(result)
        return self.summary

    def _collect_in_order(self) -> None:
        pending: dict[int, JobResult] = {}
        next_expected = 0

        for result in self.results:
            pending[result.id] = result
            while next_expected in pending:
                self._emit(pending.pop(next_expected))
                next_expected += 1

        if pending:
            # Only reachable if a dispatched job never reported back.
            logger.warning(
                "flushing %d out-of-order results; job %d never completed",
                len(pending),
                next_expected,
            )
        for job_id in sorted(pending):
            self._emit(pending[job_id])

    def _emit(self, result: JobResult) -> None:
        self.summary.collected += 1
        if result.ok:
            self.summary.succeeded += 1
        else:
            self.summary.failed += 1
        self.printer.emit(result)
