"""
Aggregation primitives shared by the analytics utilities.
Grouping, day bucketing, distribution counting and numeric summaries.
All helpers are pure and never raise on empty input.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return a naive UTC datetime; naive input is assumed to already be UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def date_key(dt: datetime) -> str:
    """Calendar day of a timestamp in UTC as YYYY-MM-DD."""
    return as_utc(dt).strftime('%Y-%m-%d')


def isoformat_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with millisecond precision and a Z suffix, e.g. 2024-03-01T09:30:00.000Z"""
    if dt is None:
        return None
    return as_utc(dt).isoformat(timespec='milliseconds') + 'Z'


def js_round(value: float) -> int:
    """Round half up, the way browsers round for display."""
    return int((value + 0.5) // 1)


def group_by_key(items: Iterable[Any], key_fn: Callable[[Any], Any]) -> Dict[Any, List[Any]]:
    groups: Dict[Any, List[Any]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def group_by_date(items: Iterable[Any], timestamp_fn: Callable[[Any], datetime]) -> Dict[str, List[Any]]:
    """Bucket items by the UTC calendar day of their timestamp; items without one are skipped."""
    groups: Dict[str, List[Any]] = {}
    for item in items:
        timestamp = timestamp_fn(item)
        if timestamp is None:
            continue
        groups.setdefault(date_key(timestamp), []).append(item)
    return groups


def distribution(items: Iterable[Any], value_fn: Callable[[Any], Any]) -> Dict[Any, int]:
    """
    Count occurrences of the values produced by value_fn.

    A list or tuple fans out so every element gets its own count; None is ignored.
    """
    counts: Dict[Any, int] = {}
    for item in items:
        value = value_fn(item)
        if value is None:
            continue
        values = value if isinstance(value, (list, tuple)) else (value,)
        for each in values:
            counts[each] = counts.get(each, 0) + 1
    return counts


def numeric_summary(values: Iterable[float]) -> Dict[str, Any]:
    """
    Summarize numbers as {count, sum, average, mode}.

    An empty input yields average 0 and mode None. Mode ties go to the value seen first.
    """
    values = list(values)
    count = len(values)
    total = sum(values)
    counts = distribution(values, lambda v: v)

    mode = None
    best = 0
    for value, occurrences in counts.items():
        if occurrences > best:
            mode, best = value, occurrences

    return {
        'count': count,
        'sum': total,
        'average': total / count if count else 0,
        'mode': mode,
    }


def sorted_by_date(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(entries, key=lambda entry: entry['date'])
