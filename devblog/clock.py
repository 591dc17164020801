from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    # Naive UTC, the form SQLite hands timestamps back in.
    return datetime.now(timezone.utc).replace(tzinfo=None)
