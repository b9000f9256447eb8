from datetime import datetime, timezone, timedelta
from typing import Optional


def get_now_utc() -> datetime:
    """Get current datetime in UTC"""
    return datetime.now(timezone.utc)


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are treated as UTC)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def hours_ago(hours: int, now: Optional[datetime] = None) -> datetime:
    return (now or get_now_utc()) - timedelta(hours=hours)

