from __future__ import annotations

import threading
import time

import pytest

from helpers import FakeClock
from storefront.domain.entities import Failure, Success
from storefront.usecases.process_batch import ProcessBatch, chunked, process_batch


def test_chunked_sizes() -> None:
    assert [len(chunk) for chunk in chunked(list(range(25)), 10)] == [10, 10, 5]
    with pytest.raises(ValueError):
        list(chunked([1], 0))


def test_results_keep_input_order_across_chunks() -> None:
    clock = FakeClock()
    items = list(range(1, 26))

    def work(n: int) -> int:
        # Later items in a chunk finish first.
        time.sleep((10 - n % 10) / 10000.0)
        return n * 2

    results = process_batch(items, work, batch_size=10, inter_batch_delay_ms=0, clock=clock)

    assert results == [n * 2 for n in items]
    assert clock.sleeps == []


def test_chunk_items_run_concurrently_and_delay_only_between_chunks() -> None:
    clock = FakeClock()
    barrier = threading.Barrier(10, timeout=5)
    seen = []
    lock = threading.Lock()

    def work(n: int) -> int:
        if n <= 20:
            barrier.wait()
        with lock:
            seen.append(n)
        return n

    runner = ProcessBatch(batch_size=10, inter_batch_delay_ms=100, clock=clock)
    results = runner(list(range(1, 26)), work)

    assert results == list(range(1, 26))
    assert clock.sleeps == [0.1, 0.1]
    assert set(seen[:10]) == set(range(1, 11))
    assert set(seen[20:]) == set(range(21, 26))


def test_first_failure_aborts_the_batch() -> None:
    clock = FakeClock()
    calls = []

    def work(n: int) -> int:
        calls.append(n)
        if n == 3:
            raise RuntimeError("item 3 failed")
        return n

    with pytest.raises(RuntimeError, match="item 3 failed"):
        ProcessBatch(batch_size=5, inter_batch_delay_ms=10, clock=clock)(list(range(1, 16)), work)

    assert max(calls) <= 5
    assert clock.sleeps == []


def test_collect_mode_reports_every_item() -> None:
    clock = FakeClock()

    def work(n: int) -> int:
        if n % 4 == 0:
            raise ValueError(f"bad {n}")
        return n

    outcomes = ProcessBatch(batch_size=3, inter_batch_delay_ms=0, clock=clock).collect(list(range(1, 9)), work)

    assert len(outcomes) == 8
    assert [type(outcome) for outcome in outcomes] == [
        Success, Success, Success, Failure, Success, Success, Success, Failure,
    ]
    assert str(outcomes[3].error) == "bad 4"
    assert outcomes[4] == Success(5)


def test_empty_input() -> None:
    assert process_batch([], lambda n: n, clock=FakeClock()) == []


@pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"inter_batch_delay_ms": -1}])
def test_invalid_configuration(kwargs) -> None:
    with pytest.raises(ValueError):
        ProcessBatch(clock=FakeClock(), **kwargs)
