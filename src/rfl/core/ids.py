from __future__ import annotations

import time
from datetime import UTC, datetime
from uuid import uuid4


def now_utc() -> datetime:
    return datetime.now(UTC)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def make_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"
