from __future__ import annotations

"""Chunked, concurrent processing of work items with inter-batch pacing."""

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from storefront.adapters.clock import SystemClock
from storefront.domain.entities import Failure, Result, Success
from storefront.domain.ports import Clock

T = TypeVar("T")
R = TypeVar("R")

_log = logging.getLogger(__name__)


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of ``items`` with at most ``size`` elements."""
    if size < 1:
        raise ValueError("batch_size must be >= 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


@dataclass
class ProcessBatch:
    """Run ``work_fn`` over items in chunks of ``batch_size``.

    Every call of a chunk is submitted before any is awaited; chunks run one
    after another with ``inter_batch_delay_ms`` slept in between so the remote
    service is not flooded. Results always come back in input order.
    """

    batch_size: int = 10
    inter_batch_delay_ms: int = 100
    clock: Clock = field(default_factory=SystemClock)
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.inter_batch_delay_ms < 0:
            raise ValueError("inter_batch_delay_ms must be >= 0")

    def __call__(self, items: Sequence[T], work_fn: Callable[[T], R]) -> List[R]:
        """Fail-fast mode: the first failing item aborts the whole batch."""
        results: List[R] = []
        for chunk in self._paced_chunks(items):
            results.extend(self._run_chunk_fail_fast(chunk, work_fn))
        return results

    def collect(
        self, items: Sequence[T], work_fn: Callable[[T], R]
    ) -> List[Result[R, Exception]]:
        """Collect mode: every item yields ``Success`` or ``Failure``, nothing raises."""
        outcomes: List[Result[R, Exception]] = []
        for chunk in self._paced_chunks(items):
            with ThreadPoolExecutor(max_workers=self._workers(chunk)) as pool:
                futures = [pool.submit(work_fn, item) for item in chunk]
                for future in futures:
                    exc = future.exception()
                    if exc is None:
                        outcomes.append(Success(future.result()))
                    else:
                        outcomes.append(Failure(exc))
        failed = sum(1 for outcome in outcomes if isinstance(outcome, Failure))
        if failed:
            _log.warning("Batch finished with %d/%d failed items", failed, len(outcomes))
        return outcomes

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _paced_chunks(self, items: Sequence[T]) -> Iterator[List[T]]:
        chunks = list(chunked(items, self.batch_size))
        for index, chunk in enumerate(chunks):
            if index > 0 and self.inter_batch_delay_ms > 0:
                self.clock.sleep(self.inter_batch_delay_ms / 1000.0)
            _log.debug("Processing batch %d/%d (%d items)", index + 1, len(chunks), len(chunk))
            yield chunk

    def _workers(self, chunk: Sequence[T]) -> int:
        if self.max_workers is None:
            return max(1, len(chunk))
        return max(1, min(self.max_workers, len(chunk)))

    def _run_chunk_fail_fast(self, chunk: List[T], work_fn: Callable[[T], R]) -> List[R]:
        with ThreadPoolExecutor(max_workers=self._workers(chunk)) as pool:
            futures: List[Future] = [pool.submit(work_fn, item) for item in chunk]
            done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
            failed = [future for future in futures if future in done and future.exception() is not None]
            if failed:
                for future in futures:
                    future.cancel()
                raise failed[0].exception()
            return [future.result() for future in futures]


def process_batch(
    items: Sequence[T],
    work_fn: Callable[[T], R],
    batch_size: int = 10,
    inter_batch_delay_ms: int = 100,
    *,
    clock: Optional[Clock] = None,
) -> List[R]:
    """Functional form of ``ProcessBatch`` in fail-fast mode."""
    runner = ProcessBatch(
        batch_size=batch_size,
        inter_batch_delay_ms=inter_batch_delay_ms,
        clock=clock or SystemClock(),
    )
    return runner(items, work_fn)


__all__ = ["ProcessBatch", "chunked", "process_batch"]
