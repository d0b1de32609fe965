"""Tests for daily glucose aggregation."""

import itertools
import math
from datetime import UTC, date, datetime, timedelta, timezone

from glucose_analytics.domain.stats import DailyAverage
from glucose_analytics.services.stats import aggregate_daily, local_day
from tests.conftest import reading


def test_daily_means_match_example_days() -> None:
    readings = [
        reading(100, datetime(2024, 5, 1, 9, 0, tzinfo=UTC)),
        reading(140, datetime(2024, 5, 1, 21, 0, tzinfo=UTC)),
        reading(110, datetime(2024, 5, 2, 10, 0, tzinfo=UTC)),
    ]

    result = aggregate_daily(readings, UTC)

    assert result == [
        DailyAverage(day=date(2024, 5, 1), mean=120, sample_count=2),
        DailyAverage(day=date(2024, 5, 2), mean=110, sample_count=1),
    ]


def test_output_is_identical_for_every_input_order() -> None:
    base = datetime(2024, 5, 1, 6, 0, tzinfo=UTC)
    readings = [
        reading(0.1, base + timedelta(days=2)),
        reading(95.3, base),
        reading(0.2, base + timedelta(days=2, hours=3)),
        reading(180.7, base + timedelta(hours=7)),
        reading(0.3, base + timedelta(days=2, hours=8)),
    ]

    expected = aggregate_daily(readings, UTC)
    for permutation in itertools.permutations(readings):
        assert aggregate_daily(list(permutation), UTC) == expected
    assert [item.day for item in expected] == sorted(item.day for item in expected)


def test_days_without_readings_are_absent() -> None:
    readings = [
        reading(100, datetime(2024, 5, 1, 8, 0, tzinfo=UTC)),
        reading(200, datetime(2024, 5, 4, 8, 0, tzinfo=UTC)),
    ]

    days = [item.day for item in aggregate_daily(readings, UTC)]

    assert days == [date(2024, 5, 1), date(2024, 5, 4)]


def test_day_key_uses_configured_timezone() -> None:
    plus_five = timezone(timedelta(hours=5))
    late_utc = reading(100, datetime(2024, 5, 1, 22, 0, tzinfo=UTC))
    next_morning_utc = reading(140, datetime(2024, 5, 2, 3, 0, tzinfo=UTC))

    in_utc = aggregate_daily([late_utc, next_morning_utc], UTC)
    shifted = aggregate_daily([late_utc, next_morning_utc], plus_five)

    assert [item.day for item in in_utc] == [date(2024, 5, 1), date(2024, 5, 2)]
    assert shifted == [DailyAverage(day=date(2024, 5, 2), mean=120, sample_count=2)]


def test_local_day_keeps_naive_timestamps_as_is() -> None:
    assert local_day(datetime(2024, 5, 1, 23, 59)) == date(2024, 5, 1)


def test_unusable_values_are_skipped() -> None:
    moment = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
    readings = [
        reading(100, moment),
        reading(math.nan, moment),
        reading(math.inf, moment),
        reading(-5, moment),
    ]

    assert aggregate_daily(readings, UTC) == [
        DailyAverage(day=date(2024, 5, 1), mean=100, sample_count=1)
    ]


def test_empty_input_returns_empty_list() -> None:
    assert aggregate_daily([]) == []
