"""Tests for calendar buckets and zero-filled time series."""

from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import line, make_order, utc
from dropship_manager.engine.errors import InvalidAggregationSpec
from dropship_manager.engine.timeseries import (
    bucket_key,
    build_time_series,
    format_bucket_label,
    iter_buckets,
    local_date,
    next_bucket,
    series_total,
)
from dropship_manager.models.analytics import BucketKey, BucketUnit


def revenue(order):
    return order.total


class TestBuckets:
    def test_day_and_month_keys(self):
        stamp = utc(2025, 3, 9)

        assert bucket_key(stamp, "day") == BucketKey(2025, 3, 9)
        assert bucket_key(stamp, BucketUnit.MONTH) == BucketKey(2025, 3)

    def test_keys_sort_chronologically(self):
        keys = [BucketKey(2025, 1, 2), BucketKey(2024, 12, 31), BucketKey(2025, 1, 1)]

        assert sorted(keys) == [BucketKey(2024, 12, 31), BucketKey(2025, 1, 1), BucketKey(2025, 1, 2)]

    def test_next_bucket_rolls_over_year(self):
        assert next_bucket(BucketKey(2024, 12)) == BucketKey(2025, 1)
        assert next_bucket(BucketKey(2024, 12, 31)) == BucketKey(2025, 1, 1)
        assert next_bucket(BucketKey(2024, 2, 28)) == BucketKey(2024, 2, 29)

    def test_unknown_unit_raises(self):
        with pytest.raises(InvalidAggregationSpec):
            bucket_key(utc(2025, 1, 1), "week")

    def test_naive_datetime_is_utc(self):
        plus_three = timezone(timedelta(hours=3))

        assert local_date(datetime(2025, 1, 1, 22, 0), plus_three) == date(2025, 1, 2)

    def test_reversed_window_is_empty(self):
        assert iter_buckets(date(2025, 1, 3), date(2025, 1, 1), "day") == []

    def test_iso_and_str(self):
        assert BucketKey(2025, 1, 5).iso == "2025-01-05"
        assert str(BucketKey(2025, 1)) == "2025-01"


class TestBuildTimeSeries:
    def test_zero_fills_empty_days(self):
        order = make_order("o-1", utc(2025, 1, 2), [line(price=50.0)])

        series = build_time_series([order], date(2025, 1, 1), date(2025, 1, 3), "day", revenue)

        assert [p.key for p in series] == [BucketKey(2025, 1, 1), BucketKey(2025, 1, 2), BucketKey(2025, 1, 3)]
        assert [p.value for p in series] == [0, 50.0, 0]

    def test_one_point_per_day_in_window(self, orders):
        series = build_time_series(orders, date(2024, 12, 1), date(2025, 1, 31), "day", revenue)

        assert len(series) == 62
        assert series_total(series) == pytest.approx(100 + 220 + 55 + 100 + 20)

    def test_records_outside_window_are_skipped(self, orders):
        series = build_time_series(orders, date(2025, 1, 1), date(2025, 1, 3), "day", revenue)

        assert [p.value for p in series] == [100.0, 220.0, 55.0]

    def test_month_buckets_across_year_boundary(self, orders):
        series = build_time_series(orders, date(2024, 11, 15), date(2025, 2, 10), "month", lambda o: 1)

        assert [p.key.iso for p in series] == ["2024-11", "2024-12", "2025-01", "2025-02"]
        assert [p.value for p in series] == [0, 2, 3, 0]

    def test_display_timezone_moves_late_orders(self, orders):
        plus_three = timezone(timedelta(hours=3))

        series = build_time_series(orders, date(2025, 1, 1), date(2025, 1, 3), "day",
                                   revenue, tz=plus_three)

        # o-3 23:59 UTC düşer, 4 Ocak'a kayar
        assert [p.value for p in series] == [100.0, 220.0, 0]

    def test_missing_timestamp_is_skipped(self):
        order = make_order("o-1", None, [line(price=10.0)])

        series = build_time_series([order], date(2025, 1, 1), date(2025, 1, 1), "day", revenue)

        assert series[0].value == 0

    def test_empty_input(self):
        series = build_time_series([], date(2025, 1, 1), date(2025, 1, 2), "day", revenue)

        assert [p.value for p in series] == [0, 0]


class TestLabels:
    def test_day_label(self):
        assert format_bucket_label(BucketKey(2025, 1, 5)) == "Jan 5"

    def test_month_label(self):
        assert format_bucket_label(BucketKey(2025, 12)) == "Dec 2025"
