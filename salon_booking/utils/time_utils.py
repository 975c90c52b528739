# salon_booking/utils/time_utils.py
"""
Interval and wall-clock helpers for slot math.

All intervals are half-open [start, end). Instants are timezone-aware; wall
clock values ("HH:MM" rules, business hours) are turned into instants in the
salon's zone through zoneinfo so DST gaps and folds come from the tz database.
Arithmetic and comparisons happen on UTC instants.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from salon_booking.core.errors import ValidationError

logger = logging.getLogger(__name__)

Interval = Tuple[datetime, datetime]

DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA zone name, rejecting unknown names"""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name}")


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """True when two half-open intervals share at least one instant"""
    return a_start < b_end and b_start < a_end


def add_minutes(instant: datetime, minutes: int) -> datetime:
    return instant + timedelta(minutes=minutes)


def diff_in_minutes(start: datetime, end: datetime) -> int:
    return round((end - start).total_seconds() / 60)


def day_of_week(value: Union[date, datetime], tz: ZoneInfo) -> int:
    """Day of week in the salon's zone, 0=Sunday ... 6=Saturday"""
    if isinstance(value, datetime):
        value = ensure_aware(value, tz).astimezone(tz).date()
    return (value.weekday() + 1) % 7


def day_name(day: int) -> str:
    return DAY_NAMES[day] if 0 <= day < 7 else ""


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" (or "HH:MM:SS") wall-clock string"""
    if isinstance(value, time):
        return value
    try:
        parts = [int(p) for p in str(value).strip().split(":")]
        if len(parts) not in (2, 3):
            raise ValueError(value)
        return time(*parts)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def ensure_aware(value: datetime, tz: ZoneInfo) -> datetime:
    """Interpret naive datetimes as wall-clock time in the salon's zone"""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def local_datetime(day: date, wall_time: time, tz: ZoneInfo) -> datetime:
    """Attach a wall-clock time on a local day to the salon's zone"""
    return datetime.combine(day, wall_time, tzinfo=tz)


def day_bounds(day: date, tz: ZoneInfo) -> Interval:
    """Local midnight to the next local midnight, expressed in UTC"""
    start = local_datetime(day, time(0, 0), tz)
    end = local_datetime(day + timedelta(days=1), time(0, 0), tz)
    return to_utc(start), to_utc(end)


def to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


def format_local_time(instant: datetime, tz: ZoneInfo) -> str:
    return instant.astimezone(tz).strftime("%H:%M")


def format_local_datetime(instant: datetime, tz: ZoneInfo) -> str:
    return instant.astimezone(tz).strftime("%d/%m/%Y %H:%M")


# ============================================================================
# Interval arithmetic
# ============================================================================

def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Union of intervals; overlapping or touching ones are joined"""
    ordered = sorted(intervals, key=lambda i: to_utc(i[0]))
    merged: List[Interval] = []

    for start, end in ordered:
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))

    return merged


def subtract_interval(interval: Interval, block: Interval) -> List[Interval]:
    """Remove block from interval, leaving 0, 1 or 2 pieces"""
    start, end = interval
    block_start, block_end = block

    if not overlaps(start, end, block_start, block_end):
        return [interval]

    pieces = []
    if block_start > start:
        pieces.append((start, block_start))
    if block_end < end:
        pieces.append((block_end, end))
    return pieces


def subtract_all(intervals: Iterable[Interval], blocks: Iterable[Interval]) -> List[Interval]:
    remaining = list(intervals)
    for block in blocks:
        if block[0] >= block[1]:
            continue
        next_remaining = []
        for interval in remaining:
            next_remaining.extend(subtract_interval(interval, block))
        remaining = next_remaining
    return remaining


def contains(outer: Interval, inner: Interval) -> bool:
    return outer[0] <= inner[0] and inner[1] <= outer[1]
