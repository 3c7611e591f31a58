"""
Zaman kovaları: gün/ay anahtarları ve boşluksuz zaman serileri.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Callable, Iterable, Optional, Union
from zoneinfo import ZoneInfo

from dropship_manager.config.settings import DISPLAY_TIMEZONE
from dropship_manager.engine.errors import InvalidAggregationSpec
from dropship_manager.models.analytics import BucketKey, BucketUnit, TimeSeriesPoint

DateLike = Union[date, datetime]

# Etiketler yerel ayardan bağımsız olsun diye sabit
MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def display_timezone(name: str = DISPLAY_TIMEZONE) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def to_bucket_unit(unit) -> BucketUnit:
    try:
        return BucketUnit(unit)
    except ValueError:
        raise InvalidAggregationSpec("bucket_unit", unit) from None


def local_date(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    """
    Zaman damgasının gösterim dilimindeki takvim günü.

    Saat dilimi olmayan datetime'lar UTC kabul edilir.
    """
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz or display_timezone()).date()


def bucket_key(value: DateLike, unit, tz: Optional[tzinfo] = None) -> BucketKey:
    d = local_date(value, tz)
    if to_bucket_unit(unit) == BucketUnit.MONTH:
        return BucketKey(d.year, d.month)
    return BucketKey(d.year, d.month, d.day)


def next_bucket(key: BucketKey) -> BucketKey:
    if key.unit == BucketUnit.MONTH:
        if key.month == 12:
            return BucketKey(key.year + 1, 1)
        return BucketKey(key.year, key.month + 1)
    d = key.start_date + timedelta(days=1)
    return BucketKey(d.year, d.month, d.day)


def iter_buckets(window_start: DateLike, window_end: DateLike, unit,
                 tz: Optional[tzinfo] = None) -> list[BucketKey]:
    """Pencereyi kapsayan tüm kovalar, kronolojik sırada. Ters pencere boş döner."""
    unit = to_bucket_unit(unit)
    first = bucket_key(window_start, unit, tz)
    last = bucket_key(window_end, unit, tz)

    keys = []
    current = first
    while current <= last:
        keys.append(current)
        current = next_bucket(current)
    return keys


def default_timestamp(record) -> DateLike:
    return record.created_at


def build_time_series(
    records: Iterable,
    window_start: DateLike,
    window_end: DateLike,
    bucket_unit,
    value_extractor: Callable[[object], float],
    timestamp_extractor: Callable[[object], DateLike] = default_timestamp,
    tz: Optional[tzinfo] = None,
) -> list[TimeSeriesPoint]:
    """
    Kayıtları kovalara toplar; pencere içindeki her kova için bir nokta.

    Kaydı olmayan kovalar 0 alır, pencere dışındaki kayıtlar atlanır.
    """
    tz = tz or display_timezone()
    keys = iter_buckets(window_start, window_end, bucket_unit, tz)
    if not keys:
        return []

    start = local_date(window_start, tz)
    end = local_date(window_end, tz)
    totals: dict[BucketKey, float] = dict.fromkeys(keys, 0)

    for record in records:
        stamp = timestamp_extractor(record)
        if stamp is None:
            continue
        d = local_date(stamp, tz)
        if not start <= d <= end:
            continue
        key = bucket_key(d, bucket_unit)
        totals[key] += value_extractor(record)

    return [TimeSeriesPoint(key=k, value=totals[k]) for k in keys]


def format_bucket_label(key: BucketKey) -> str:
    """Grafik etiketi: "Jan 5" ya da "Jan 2025"."""
    month = MONTH_ABBR[key.month - 1]
    if key.unit == BucketUnit.MONTH:
        return f"{month} {key.year}"
    return f"{month} {key.day}"


def series_total(series: Iterable[TimeSeriesPoint]) -> float:
    return sum(p.value for p in series)
