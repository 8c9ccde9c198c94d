"""Typed records passed between producer, workers and collector."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Job:
    """One input line together with its sequence id."""

    id: int
    line: str


@dataclass(frozen=True, slots=True)
class JobResult:
    """Outcome of running exactly one job."""

    id: int
    output: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ProducerOutcome:
    """What the producer managed to do before it stopped."""

    jobs_queued: int = 0
    interrupted: bool = False
    error: str | None = None


@dataclass(slots=True)
class CollectorSummary:
    """Counters kept by the result collector."""

    collected: int = 0
    succeeded: int = 0
    failed: int = 0


@dataclass(slots=True)
class DispatchSummary:
    """Aggregate counters for one dispatch run."""

    jobs_queued: int = 0
    results_collected: int = 0
    succeeded: int = 0
    failed: int = 0
    interrupted: bool = False
    input_error: str | None = None
