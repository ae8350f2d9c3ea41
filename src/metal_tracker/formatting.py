"""Display formatting for prices, percentages, and timestamps."""

from __future__ import annotations

from datetime import datetime, timezone

# (seconds per unit, suffix), largest first
_RELATIVE_UNITS: tuple[tuple[int, str], ...] = (
    (31536000, "y"),
    (2592000, "mo"),
    (86400, "d"),
    (3600, "h"),
    (60, "m"),
)


def format_inr(amount: float) -> str:
    """Format as rupees with Indian digit grouping, e.g. ``₹1,23,456.78``."""
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups) + "," + tail
    return f"{sign}₹{whole}.{fraction}"


def format_percentage(percentage: float) -> str:
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{percentage:.2f}%"


def format_timestamp(timestamp: datetime) -> str:
    """Render in local time, e.g. ``17/10/2026, 14:05:09``."""
    return timestamp.astimezone().strftime("%d/%m/%Y, %H:%M:%S")


def format_relative_time(timestamp: datetime, now: datetime | None = None) -> str:
    """Coarse age of ``timestamp``: ``just now``, ``5m ago``, ``2h ago``, ..."""
    if now is None:
        now = datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - timestamp).total_seconds())
    if seconds < 60:
        return "just now"

    for unit, suffix in _RELATIVE_UNITS:
        if seconds / unit > 1:
            return f"{seconds // unit}{suffix} ago"
    return f"{seconds}s ago"
