from __future__ import annotations

"""Naming helpers for request identifiers shared between layers."""

import random
import string
from datetime import datetime, timezone
from typing import Optional

from .entities import RequestContext

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 9


def make_request_id(epoch_ms: int, rng: Optional[random.Random] = None) -> str:
    """Compose a request identifier `req_{epoch_ms}_{9 base36 chars}`."""

    chooser = rng or random
    random_token = "".join(chooser.choices(_BASE36_ALPHABET, k=_RANDOM_LENGTH))
    return f"req_{int(epoch_ms)}_{random_token}"


def make_request_context(
    epoch_ms: int, rng: Optional[random.Random] = None
) -> RequestContext:
    """Build the context for one logical call started at ``epoch_ms``."""

    started = datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc)
    timestamp = started.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return RequestContext(request_id=make_request_id(epoch_ms, rng), timestamp=timestamp)


__all__ = ["make_request_context", "make_request_id"]
