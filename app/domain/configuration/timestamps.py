"""Monotonic update stamps for profiles."""

from datetime import datetime, timedelta

_TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    """Naive UTC now, matching how the DateTime columns are stored."""
    return datetime.utcnow()


def next_update_stamp(previous: datetime | None, now: datetime | None = None) -> datetime:
    """Return an ``updated_at`` value strictly later than ``previous``.

    Two mutations inside the same clock tick (or after a clock step back)
    still get increasing stamps.
    """
    now = now or utcnow()
    if previous is not None and now <= previous:
        return previous + _TICK
    return now
