from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from models import ScheduledItem


def as_utc(value: datetime) -> datetime:
    """Treat a naive timestamp as UTC; convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(now: datetime) -> datetime:
    """Midnight UTC of the day containing ``now``."""
    return as_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)


def is_due(item: ScheduledItem, now: datetime) -> bool:
    return as_utc(item.next_review) <= as_utc(now)


def select_due(now: datetime, items: Iterable[ScheduledItem]) -> List[ScheduledItem]:
    """Return the items whose next review has elapsed, keeping input order."""
    now = as_utc(now)
    return [item for item in items if is_due(item, now)]


def latest_pending(items: Sequence[ScheduledItem]) -> Optional[ScheduledItem]:
    """Most recently served item of a serve-ordered sequence."""
    if not items:
        return None
    return items[-1]
