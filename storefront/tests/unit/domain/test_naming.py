from __future__ import annotations

import random
import re

from storefront.domain.naming import make_request_context, make_request_id

REQUEST_ID = re.compile(r"^req_(\d+)_([0-9a-z]{9})$")


def test_request_id_format() -> None:
    request_id = make_request_id(1_700_000_000_123)

    match = REQUEST_ID.match(request_id)
    assert match is not None
    assert match.group(1) == "1700000000123"


def test_request_id_is_deterministic_with_seeded_rng() -> None:
    first = make_request_id(1, random.Random(7))
    second = make_request_id(1, random.Random(7))

    assert first == second


def test_request_context_timestamp_is_utc_iso() -> None:
    ctx = make_request_context(0)

    assert ctx.timestamp == "1970-01-01T00:00:00.000Z"
    assert str(ctx) == ctx.request_id
