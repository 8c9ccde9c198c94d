from __future__ import annotations

import random

import allure
import pytest

from kyanite.dispatch.channel import Channel
from kyanite.dispatch.collector import ResultCollector, ResultPrinter
from kyanite.dispatch.models import JobResult

pytestmark = [
    allure.epic("Dispatch Pipeline"),
    allure.feature("Result Collector"),
]


def _collect(results: list[JobResult], sink, *, keep_order: bool, verbose: bool = False):
    channel: Channel[JobResult] = Channel()
    for result in results:
        channel.send(result)
    channel.close()
    collector = ResultCollector(
        results=channel,
        printer=ResultPrinter(sink.as_sink(), verbose=verbose),
        keep_order=keep_order,
    )
    return collector.run()


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_keep_order_emits_ids_in_sequence_for_any_arrival_order(seed: int, sink) -> None:
    ids = list(range(25))
    random.Random(seed).shuffle(ids)

    summary = _collect(
        [JobResult(id=job_id, output=f"out-{job_id}") for job_id in ids],
        sink,
        keep_order=True,
    )

    assert sink.out_lines == [f"out-{job_id}" for job_id in range(25)]
    assert summary.collected == 25


def test_arrival_order_emits_immediately(sink) -> None:
    _collect(
        [JobResult(id=2, output="two"), JobResult(id=0, output="zero")],
        sink,
        keep_order=False,
    )

    assert sink.out_lines == ["two", "zero"]


def test_keep_order_flushes_leftovers_after_a_gap(sink) -> None:
    _collect(
        [
            JobResult(id=3, output="three"),
            JobResult(id=0, output="zero"),
            JobResult(id=2, output="two"),
        ],
        sink,
        keep_order=True,
    )

    assert sink.out_lines == ["zero", "two", "three"]


def test_errors_go_to_error_sink_with_output(sink) -> None:
    summary = _collect(
        [
            JobResult(id=0, output="partial", error="command failed with exit code: 1"),
            JobResult(id=1, output="", error="failed to execute command: boom"),
            JobResult(id=2, output="fine"),
        ],
        sink,
        keep_order=True,
    )

    assert sink.err_lines == [
        "error in job 0: command failed with exit code: 1",
        "output: partial",
        "error in job 1: failed to execute command: boom",
    ]
    assert sink.out_lines == ["fine"]
    assert (summary.succeeded, summary.failed) == (1, 2)


def test_empty_output_is_silent_and_verbose_tags_job_id(sink) -> None:
    _collect(
        [JobResult(id=0, output=""), JobResult(id=1, output="hello")],
        sink,
        keep_order=True,
        verbose=True,
    )

    assert sink.out_lines == ["[job 1] hello"]
    assert sink.err_lines == []
