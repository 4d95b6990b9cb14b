from __future__ import annotations
from datetime import datetime, timezone


class SystemClock:
    """ClockPort backed by the wall clock, always timezone-aware (UTC)."""

    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)
