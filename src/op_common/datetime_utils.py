"""UTC datetime utilities."""

import math
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def days_until(target: date | datetime | None, now: datetime | None = None) -> int | None:
    """Whole days (rounded up) from now until *target*; None when no target."""
    if target is None:
        return None
    now = now or utc_now()
    if not isinstance(target, datetime):
        target = datetime(target.year, target.month, target.day, tzinfo=timezone.utc)
    elif target.tzinfo is None:
        target = target.replace(tzinfo=timezone.utc)
    return math.ceil((target - now).total_seconds() / 86400)
