"""Human readable ages for "last seen" labels."""

from datetime import datetime, timezone
from typing import Optional


def format_time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    """Describe how long ago ``moment`` was, in whole hours or days."""
    now = now or datetime.now(timezone.utc)
    hours = int((now - moment).total_seconds() // 3600)

    if hours < 1:
        return "A few minutes ago"
    if hours < 24:
        return "1 hour ago" if hours == 1 else f"{hours} hours ago"
    days = hours // 24
    return "1 day ago" if days == 1 else f"{days} days ago"
