"""Business-day staleness for hill chart items.

An item is stale once at least ``threshold`` weekday calendar dates lie
between its last update (that date included) and now (today excluded).
Monday 09:00 -> Wednesday 09:00 counts Monday and Tuesday and is stale;
Monday -> Tuesday counts only Monday and is not.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set, Tuple

from .models import Item

STALE_AFTER_BUSINESS_DAYS = 2

_ONE_DAY = timedelta(days=1)


def _calendar_dates(start: datetime, end: datetime) -> Tuple[date, date]:
    if start.tzinfo is not None and end.tzinfo is not None:
        start = start.astimezone(end.tzinfo)
    return start.date(), end.date()


def business_days_between(start: datetime, end: datetime, limit: Optional[int] = None) -> int:
    """Count Monday-Friday dates in [start.date(), end.date()).

    Stops counting once ``limit`` is reached.
    """
    current, stop = _calendar_dates(start, end)
    count = 0
    while current < stop:
        if current.weekday() < 5:
            count += 1
            if limit is not None and count >= limit:
                break
        current += _ONE_DAY
    return count


def is_stale(item: Item, now: datetime, threshold: int = STALE_AFTER_BUSINESS_DAYS) -> bool:
    return business_days_between(item.last_updated, now, limit=threshold) >= threshold


def stale_item_ids(items: Iterable[Item], now: datetime, threshold: int = STALE_AFTER_BUSINESS_DAYS) -> Set[str]:
    return {item.id for item in items if is_stale(item, now, threshold)}
