"""Unit tests for interval and wall-clock helpers."""
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

from salon_booking.core.errors import ValidationError
from salon_booking.utils.time_utils import (
    add_minutes,
    contains,
    day_bounds,
    day_name,
    day_of_week,
    diff_in_minutes,
    ensure_aware,
    format_hhmm,
    format_local_datetime,
    format_local_time,
    get_zone,
    local_datetime,
    merge_intervals,
    overlaps,
    parse_hhmm,
    subtract_all,
    subtract_interval,
)

UTC = timezone.utc
SP = ZoneInfo("America/Sao_Paulo")


def utc(hour, minute=0, day=19):
    return datetime(2026, 10, day, hour, minute, tzinfo=UTC)


class TestOverlaps:

    def test_partial_overlap(self):
        assert overlaps(utc(9), utc(11), utc(10), utc(12))

    def test_containment(self):
        assert overlaps(utc(9), utc(12), utc(10), utc(11))

    def test_touching_boundaries_do_not_overlap(self):
        assert not overlaps(utc(9), utc(10), utc(10), utc(11))
        assert not overlaps(utc(10), utc(11), utc(9), utc(10))

    def test_disjoint(self):
        assert not overlaps(utc(9), utc(10), utc(11), utc(12))


class TestWallClock:

    def test_parse_hhmm(self):
        assert parse_hhmm("09:30") == time(9, 30)
        assert parse_hhmm(" 18:00 ") == time(18, 0)
        assert parse_hhmm("07:15:30") == time(7, 15, 30)

    @pytest.mark.parametrize("value", ["9h", "25:00", "", "12", "ab:cd", None])
    def test_parse_hhmm_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            parse_hhmm(value)

    def test_format_hhmm(self):
        assert format_hhmm(time(8, 5)) == "08:05"

    def test_day_of_week_is_sunday_based(self):
        assert day_of_week(date(2026, 10, 18), SP) == 0
        assert day_of_week(date(2026, 10, 19), SP) == 1
        assert day_of_week(date(2026, 10, 24), SP) == 6

    def test_day_of_week_uses_salon_zone(self):
        # 02:00 UTC Monday is still Sunday evening in Sao Paulo
        assert day_of_week(datetime(2026, 10, 19, 2, 0, tzinfo=UTC), SP) == 0

    def test_day_name(self):
        assert day_name(0) == "Sunday"
        assert day_name(6) == "Saturday"
        assert day_name(9) == ""

    def test_local_datetime_and_formatting(self):
        instant = local_datetime(date(2026, 10, 19), time(9, 0), SP)
        assert instant.astimezone(UTC) == utc(12)
        assert format_local_time(utc(12), SP) == "09:00"
        assert format_local_datetime(utc(12), SP) == "19/10/2026 09:00"

    def test_ensure_aware_reads_naive_values_in_zone(self):
        value = ensure_aware(datetime(2026, 10, 19, 9, 0), SP)
        assert value.astimezone(UTC) == utc(12)
        aware = utc(8)
        assert ensure_aware(aware, SP) is aware

    def test_day_bounds_are_utc(self):
        start, end = day_bounds(date(2026, 10, 19), SP)
        assert start == utc(3)
        assert end == utc(3, day=20)
        assert start.tzinfo == UTC

    def test_day_bounds_on_dst_start_is_23_hours(self):
        ny = ZoneInfo("America/New_York")
        start, end = day_bounds(date(2026, 3, 8), ny)
        assert diff_in_minutes(start, end) == 23 * 60

    def test_get_zone_rejects_unknown(self):
        with pytest.raises(ValidationError):
            get_zone("Mars/Olympus_Mons")

    def test_add_minutes(self):
        assert add_minutes(utc(9), 45) == utc(9, 45)


class TestIntervalArithmetic:

    def test_merge_unions_overlapping_and_touching(self):
        merged = merge_intervals([
            (utc(13), utc(14)),
            (utc(9), utc(11)),
            (utc(10), utc(12)),
            (utc(12), utc(12, 30)),
        ])
        assert merged == [(utc(9), utc(12, 30)), (utc(13), utc(14))]

    def test_subtract_inner_block_splits(self):
        assert subtract_interval((utc(9), utc(12)), (utc(10), utc(10, 15))) == [
            (utc(9), utc(10)),
            (utc(10, 15), utc(12)),
        ]

    def test_subtract_edge_blocks(self):
        assert subtract_interval((utc(9), utc(12)), (utc(8), utc(10))) == [(utc(10), utc(12))]
        assert subtract_interval((utc(9), utc(12)), (utc(11), utc(13))) == [(utc(9), utc(11))]
        assert subtract_interval((utc(9), utc(12)), (utc(8), utc(13))) == []

    def test_subtract_disjoint_block_keeps_interval(self):
        assert subtract_interval((utc(9), utc(12)), (utc(12), utc(13))) == [(utc(9), utc(12))]

    def test_subtract_all_ignores_empty_blocks(self):
        remaining = subtract_all(
            [(utc(9), utc(12)), (utc(14), utc(16))],
            [(utc(11), utc(15)), (utc(10), utc(10))],
        )
        assert remaining == [(utc(9), utc(11)), (utc(15), utc(16))]

    def test_contains(self):
        assert contains((utc(9), utc(12)), (utc(9), utc(12)))
        assert contains((utc(9), utc(12)), (utc(10), utc(11)))
        assert not contains((utc(9), utc(12)), (utc(11), utc(12, 1)))
