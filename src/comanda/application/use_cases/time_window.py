from __future__ import annotations

from datetime import datetime, time, timedelta, timezone


def utc_day_bounds(now: datetime) -> tuple[datetime, datetime]:
    current = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
    day = current.astimezone(timezone.utc).date()
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end
