"""Wire the producer, worker pool and collector into one run."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from kyanite.config import Settings
from kyanite.dispatch.backend import CommandBackend, ShellBackend
from kyanite.dispatch.channel import Channel
from kyanite.dispatch.collector import OutputSink, ResultCollector, ResultPrinter
from kyanite.dispatch.models import DispatchSummary, Job, JobResult
from kyanite.dispatch.producer import JobProducer
from kyanite.dispatch.worker import CommandWorker

logger = logging.getLogger(__name__)


class Dispatcher:
    """Run the configured command for every input line.

    Threads only talk through two channels: the producer feeds the job
    channel, workers move jobs to the result channel, and the collector
    drains it. Shutdown always runs in the same order: stop producing, close
    the job channel, wait for workers to drain it, close the result channel,
    wait for the collector to flush.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        sink: OutputSink,
        backend: CommandBackend | None = None,
        poll_interval_seconds: float = 0.1,
    ) -> None:
        self.settings = settings
        self.sink = sink
        self.backend = backend or ShellBackend()
        self.poll_interval_seconds = poll_interval_seconds
        self._stop_event = threading.Event()

    def request_stop(self, *, signal_name: str = "manual") -> None:
        """Stop queuing new jobs; queued and running jobs still complete."""

        if not self._stop_event.is_set():
            logger.info("received %s, shutting down gracefully...", signal_name)
        self._stop_event.set()

    def run(self, lines: Iterable[str]) -> DispatchSummary:
        jobs: Channel[Job] = Channel()
        results: Channel[JobResult] = Channel()

        collector = ResultCollector(
            results=results,
            printer=ResultPrinter(self.sink, verbose=self.settings.verbose),
            keep_order=self.settings.keep_order,
        )
        collector_thread = threading.Thread(target=collector.run, name="kyanite-collector")
        collector_thread.start()

        worker_threads = [
            threading.Thread(
                target=CommandWorker(
                    worker_id=worker_id,
                    settings=self.settings,
                    backend=self.backend,
                    jobs=jobs,
                    results=results,
                ).run_loop,
                name=f"kyanite-worker-{worker_id}",
            )
            for worker_id in range(self.settings.workers)
        ]
        for thread in worker_threads:
            thread.start()

        producer = JobProducer(
            lines=lines,
            jobs=jobs,
            max_jobs=self.settings.max_jobs,
            stop_event=self._stop_event,
        )
        producer_done = threading.Event()

        def _produce() -> None:
            try:
                producer.run()
            finally:
                producer_done.set()

        # Daemon: a read blocked on an idle stdin must not hold the process open.
        producer_thread = threading.Thread(target=_produce, name="kyanite-producer", daemon=True)

        with self._signal_handlers():
            producer_thread.start()
            while not producer_done.wait(timeout=self.poll_interval_seconds):
                if self._stop_event.is_set():
                    break

            jobs.close()
            for thread in worker_threads:
                thread.join()
            results.close()
            collector_thread.join()
            producer_thread.join(timeout=self.poll_interval_seconds)

        outcome = producer.outcome
        collected = collector.summary
        summary = DispatchSummary(
            jobs_queued=outcome.jobs_queued,
            results_collected=collected.collected,
            succeeded=collected.succeeded,
            failed=collected.failed,
            interrupted=outcome.interrupted or self._stop_event.is_set(),
            input_error=outcome.error,
        )
        logger.debug(
            "dispatch finished: queued=%d collected=%d succeeded=%d failed=%d",
            summary.jobs_queued,
            summary.results_collected,
            summary.succeeded,
            summary.failed,
        )
        return summary

    @contextmanager
    def _signal_handlers(self) -> Iterator[None]:
        if not hasattr(signal, "SIGINT"):
            yield
            return

        original_sigint = signal.getsignal(signal.SIGINT)
        original_sigterm = signal.getsignal(signal.SIGTERM)

        def _handler(signum: int, _: object | None) -> None:
            try:
                name = signal.Signals(signum).name
            except ValueError:
                name = str(signum)
            self.request_stop(signal_name=name)

        try:
            signal.signal(signal.SIGINT, _handler)
            signal.signal(signal.SIGTERM, _handler)
        except ValueError:
            # Signal handlers can only be installed in main thread.
            yield
            return

        try:
            yield
        finally:
            signal.signal(signal.SIGINT, original_sigint)
            signal.signal(signal.SIGTERM, original_sigterm)
