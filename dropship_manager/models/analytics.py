"""
Analiz çıktıları - Dashboard ve raporlar için.

Bu yapılar her sorguda yeniden hesaplanır, saklanmaz.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class BucketUnit(str, Enum):
    DAY = "day"
    MONTH = "month"


class Metric(str, Enum):
    REVENUE = "revenue"
    ORDER_COUNT = "orderCount"


@dataclass(frozen=True, order=True)
class BucketKey:
    """
    Takvim kovası. Aylık kovalarda day = 0.

    Alan sırası kronolojik sıralamayı verir.
    """
    year: int
    month: int
    day: int = 0

    @property
    def unit(self) -> BucketUnit:
        return BucketUnit.MONTH if self.day == 0 else BucketUnit.DAY

    @property
    def iso(self) -> str:
        """Yerelden bağımsız anahtar: 2025-01-05 ya da 2025-01."""
        if self.day == 0:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, self.day or 1)

    def __str__(self) -> str:
        return self.iso


@dataclass(frozen=True)
class TimeSeriesPoint:
    key: BucketKey
    value: float


@dataclass(frozen=True)
class RankingEntry:
    """Sıralamadaki tek bir özne (vendor, tedarikçi, ürün)."""
    subject_id: str
    name: str
    value: float


@dataclass(frozen=True)
class StatusCount:
    name: str
    value: int


@dataclass(frozen=True)
class AggregationSpec:
    """Analiz isteği. Pencere her iki uçta da dahildir."""
    window_start: date
    window_end: date
    bucket_unit: BucketUnit = BucketUnit.DAY
    top_n: int = 5
    metric: Metric = Metric.REVENUE

    @property
    def window_days(self) -> int:
        return (self.window_end - self.window_start).days + 1


@dataclass
class DashboardStats:
    """Dönem KPI'ları ve önceki döneme göre değişimler (%)."""
    total_revenue: float = 0.0
    revenue_change: float = 0.0
    total_orders: int = 0
    orders_change: float = 0.0
    avg_order_value: float = 0.0
    avg_change: float = 0.0
    total_users: int = 0
    new_users: int = 0
    active_vendors: int = 0
    active_suppliers: int = 0
    total_payouts: float = 0.0

    # Önceki dönem ham değerleri
    previous_revenue: float = 0.0
    previous_orders: int = 0


@dataclass
class AggregationResult:
    spec: AggregationSpec
    stats: DashboardStats = field(default_factory=DashboardStats)
    revenue_trend: list[TimeSeriesPoint] = field(default_factory=list)
    order_volume_trend: list[TimeSeriesPoint] = field(default_factory=list)
    user_registration: list[TimeSeriesPoint] = field(default_factory=list)
    order_status: list[StatusCount] = field(default_factory=list)
    payout_status: list[StatusCount] = field(default_factory=list)
    user_type: list[StatusCount] = field(default_factory=list)
    top_vendors: list[RankingEntry] = field(default_factory=list)
    top_suppliers: list[RankingEntry] = field(default_factory=list)
    top_products: list[RankingEntry] = field(default_factory=list)

    def trend(self, metric: Optional[Metric] = None) -> list[TimeSeriesPoint]:
        """İstenen metriğin zaman serisi."""
        metric = metric or self.spec.metric
        if metric == Metric.ORDER_COUNT:
            return self.order_volume_trend
        return self.revenue_trend
