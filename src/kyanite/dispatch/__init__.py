"""Parallel per-line command dispatch.

One producer thread turns input lines into numbered jobs, a fixed pool of
worker threads expands and runs them, and a collector thread prints the
results either as they arrive or reassembled into input order. The threads
share nothing but two :class:`~kyanite.dispatch.channel.Channel` instances
and the read-only :class:`~kyanite.config.Settings`.
"""

from kyanite.dispatch.collector import OutputSink, ResultCollector, ResultPrinter
from kyanite.dispatch.dispatcher import Dispatcher
from kyanite.dispatch.models import DispatchSummary, Job, JobResult

__all__ = [
    "DispatchSummary",
    "Dispatcher",
    "Job",
    "JobResult",
    "OutputSink",
    "ResultCollector",
    "ResultPrinter",
]
