"""Test doubles shared across the unit suites.

``SessionStub`` stands in for ``requests.Session`` and replays scripted
outcomes; ``FakeClock`` records sleeps and advances time without blocking.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

EPOCH_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, epoch_ms: int = EPOCH_MS) -> None:
        self.now = 0.0
        self.epoch_ms = epoch_ms
        self.sleeps: List[float] = []
        self._lock = threading.Lock()

    def monotonic(self) -> float:
        with self._lock:
            return self.now

    def time_ms(self) -> int:
        with self._lock:
            return self.epoch_ms + int(self.now * 1000)

    def sleep(self, seconds: float) -> None:
        with self._lock:
            self.sleeps.append(seconds)
            self.now += seconds

    def advance(self, seconds: float) -> None:
        with self._lock:
            self.now += seconds


class ResponseStub:
    def __init__(self, status_code: int = 200, payload: Any = None, *, text: Optional[str] = None):
        self.status_code = status_code
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text
        self.content = text.encode("utf-8")

    def json(self) -> Any:
        return json.loads(self.text)


class SessionStub:
    """Replay ``outcomes`` in order; the last one repeats once the script runs out.

    An outcome is a ``ResponseStub``, an exception instance (raised from
    ``request``), or a ``(status, payload)`` tuple.
    """

    def __init__(self, outcomes: Sequence[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._lock = threading.Lock()

    def request(self, method: str, url: str, **kwargs: Any) -> ResponseStub:
        with self._lock:
            index = min(len(self.calls), len(self.outcomes) - 1)
            self.calls.append((method, url, kwargs))
            outcome = self.outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, tuple):
            status, payload = outcome
            return ResponseStub(status, payload)
        return outcome

    @property
    def urls(self) -> List[str]:
        return [url for _method, url, _kwargs in self.calls]

    def body(self, index: int = -1) -> Any:
        data = self.calls[index][2].get("data")
        return None if data is None else json.loads(data)
