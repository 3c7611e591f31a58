"""
Sipariş, kullanıcı ve payout verilerini analiz eder, dashboard metrikleri üretir.

Tüm fonksiyonlar salt okunurdur; boş girdide sıfır değerli ama doğru
biçimli sonuç döner.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, Iterable, Mapping, Optional

from dropship_manager.config.settings import (
    DEFAULT_STATUS_COLOR,
    ORDER_STATUS_DISPLAY,
    PAYOUT_STATUS_DISPLAY,
    STATUS_COLORS,
)
from dropship_manager.engine.errors import InvalidAggregationSpec
from dropship_manager.engine.ranking import rank_entries
from dropship_manager.engine.timeseries import (
    build_time_series,
    display_timezone,
    local_date,
    to_bucket_unit,
)
from dropship_manager.models.analytics import (
    AggregationResult,
    AggregationSpec,
    DashboardStats,
    Metric,
    RankingEntry,
    StatusCount,
)
from dropship_manager.models.order import Order, normalize_status
from dropship_manager.models.user import Payout, User, UserRole

logger = logging.getLogger(__name__)


# ── Dağılımlar ────────────────────────────────────────────

def status_distribution(
    records: Iterable,
    status_extractor: Callable[[object], object],
    display_name_map: Optional[Mapping[str, str]] = None,
) -> list[StatusCount]:
    """
    Durum başına kayıt sayısı, ilk görülme sırasıyla.

    Haritada olmayan durumlar normalize edilmiş haliyle listede kalır.
    """
    display_name_map = display_name_map or {}
    counts: dict[str, int] = {}
    for record in records:
        status = normalize_status(status_extractor(record))
        name = display_name_map.get(status)
        if name is None:
            logger.debug("Unmapped status %r, passing through", status)
            name = status
        counts[name] = counts.get(name, 0) + 1
    return [StatusCount(name=name, value=value) for name, value in counts.items()]


def status_color(name: str) -> str:
    return STATUS_COLORS.get(name, DEFAULT_STATUS_COLOR)


def user_type_distribution(users: Iterable[User]) -> list[StatusCount]:
    """Müşteri / vendor / tedarikçi sayıları. Adminler sayılmaz."""
    counts = {UserRole.CUSTOMER: 0, UserRole.VENDOR: 0, UserRole.SUPPLIER: 0}
    for user in users:
        if user.role in counts:
            counts[user.role] += 1
    return [
        StatusCount(name="Customers", value=counts[UserRole.CUSTOMER]),
        StatusCount(name="Vendors", value=counts[UserRole.VENDOR]),
        StatusCount(name="Suppliers", value=counts[UserRole.SUPPLIER]),
    ]


# ── Dönem karşılaştırma ───────────────────────────────────

def period_over_period_change(current: float, previous: float) -> float:
    """Önceki döneme göre değişim (%). Önceki dönem 0 ise 0."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def previous_window(window_start: date, window_end: date) -> tuple[date, date]:
    """Aynı uzunlukta, hemen önceki pencere."""
    length = (window_end - window_start).days + 1
    prev_end = window_start - timedelta(days=1)
    prev_start = prev_end - timedelta(days=length - 1)
    return prev_start, prev_end


def filter_window(records: Iterable, window_start: date, window_end: date,
                  timestamp_extractor=None, tz=None) -> list:
    """Pencere içindeki kayıtlar (gösterim dilimindeki güne göre)."""
    tz = tz or display_timezone()
    stamp = timestamp_extractor or (lambda r: r.created_at)
    return [
        r for r in records
        if stamp(r) is not None
        and window_start <= local_date(stamp(r), tz) <= window_end
    ]


# ── Aktif katılımcılar ────────────────────────────────────

def active_vendor_count(vendors: Iterable[User], orders: Iterable[Order]) -> int:
    """En az bir siparişi olan vendor sayısı."""
    with_orders = {o.vendor_id for o in orders}
    return sum(1 for v in vendors if v.user_id in with_orders)


def active_supplier_count(suppliers: Iterable[User], orders: Iterable[Order]) -> int:
    """Ürünlerinden en az biri sipariş almış tedarikçi sayısı."""
    with_orders = {
        item.supplier_id
        for o in orders
        for item in o.items
        if item.supplier_id is not None
    }
    return sum(1 for s in suppliers if s.user_id in with_orders)


# ── Sıralamalar ───────────────────────────────────────────

def top_vendors(vendors: Iterable[User], orders: Iterable[Order], n: int,
                metric: Metric = Metric.REVENUE) -> list[RankingEntry]:
    revenue: dict[str, float] = defaultdict(float)
    order_count: dict[str, int] = defaultdict(int)
    for o in orders:
        revenue[o.vendor_id] += o.total
        order_count[o.vendor_id] += 1

    source = order_count if metric == Metric.ORDER_COUNT else revenue
    return rank_entries(
        sorted(vendors, key=lambda u: u.user_id),
        lambda u: source.get(u.user_id, 0),
        n,
        id_fn=lambda u: u.user_id,
        name_fn=lambda u: u.display_name,
    )


def top_suppliers(suppliers: Iterable[User], orders: Iterable[Order], n: int,
                  metric: Metric = Metric.REVENUE) -> list[RankingEntry]:
    revenue: dict[str, float] = defaultdict(float)
    order_ids: dict[str, set] = defaultdict(set)
    for o in orders:
        for item in o.items:
            if item.supplier_id is None:
                continue
            revenue[item.supplier_id] += item.total_price
            order_ids[item.supplier_id].add(o.order_id)

    def metric_fn(u: User) -> float:
        if metric == Metric.ORDER_COUNT:
            return len(order_ids.get(u.user_id, ()))
        return revenue.get(u.user_id, 0)

    return rank_entries(
        sorted(suppliers, key=lambda u: u.user_id),
        metric_fn,
        n,
        id_fn=lambda u: u.user_id,
        name_fn=lambda u: u.display_name,
    )


def top_products(orders: Iterable[Order], n: int,
                 metric: Metric = Metric.REVENUE) -> list[RankingEntry]:
    product_stats: dict[str, dict] = defaultdict(
        lambda: {"name": "", "revenue": 0.0, "orders": set()}
    )
    for o in orders:
        for item in o.items:
            stats = product_stats[item.product_id]
            stats["name"] = item.product_name
            stats["revenue"] += item.total_price
            stats["orders"].add(o.order_id)

    def metric_fn(pid: str) -> float:
        if metric == Metric.ORDER_COUNT:
            return len(product_stats[pid]["orders"])
        return product_stats[pid]["revenue"]

    return rank_entries(
        sorted(product_stats),
        metric_fn,
        n,
        id_fn=lambda pid: pid,
        name_fn=lambda pid: product_stats[pid]["name"] or pid,
    )


# ── KPI ───────────────────────────────────────────────────

def calculate_dashboard_stats(
    orders: list[Order],
    previous_orders: list[Order],
    users: list[User],
    new_users: list[User],
    payouts: list[Payout],
) -> DashboardStats:
    """Dönem KPI'larını önceki dönemle karşılaştırarak hesaplar."""
    revenue = sum(o.total for o in orders)
    prev_revenue = sum(o.total for o in previous_orders)
    total_orders = len(orders)
    prev_total = len(previous_orders)

    avg = revenue / total_orders if total_orders > 0 else 0.0
    prev_avg = prev_revenue / prev_total if prev_total > 0 else 0.0

    vendors = [u for u in users if u.role == UserRole.VENDOR]
    suppliers = [u for u in users if u.role == UserRole.SUPPLIER]

    return DashboardStats(
        total_revenue=revenue,
        revenue_change=period_over_period_change(revenue, prev_revenue),
        total_orders=total_orders,
        orders_change=period_over_period_change(total_orders, prev_total),
        avg_order_value=avg,
        avg_change=period_over_period_change(avg, prev_avg),
        total_users=len(users),
        new_users=len(new_users),
        active_vendors=active_vendor_count(vendors, orders),
        active_suppliers=active_supplier_count(suppliers, orders),
        total_payouts=sum(p.amount for p in payouts if p.counts_against_balance),
        previous_revenue=prev_revenue,
        previous_orders=prev_total,
    )


def round_for_display(stats: DashboardStats) -> DashboardStats:
    """Yüzdeler 1, tutarlar 2 ondalık."""
    return replace(
        stats,
        total_revenue=round(stats.total_revenue, 2),
        revenue_change=round(stats.revenue_change, 1),
        orders_change=round(stats.orders_change, 1),
        avg_order_value=round(stats.avg_order_value, 2),
        avg_change=round(stats.avg_change, 1),
        total_payouts=round(stats.total_payouts, 2),
        previous_revenue=round(stats.previous_revenue, 2),
    )


# ── Kapsam ────────────────────────────────────────────────

def scope_records(
    records: Mapping[str, Iterable],
    vendor_id: Optional[str] = None,
    supplier_id: Optional[str] = None,
) -> dict[str, list]:
    """
    Kayıtları tek bir vendor ya da tedarikçiye daraltır.

    Tedarikçi kapsamında siparişler yalnızca o tedarikçinin kalemleriyle
    kalır ve toplamı kalem toplamıdır (kargo/vergi vendor'a aittir).
    """
    orders = list(records.get("orders") or [])
    users = list(records.get("users") or [])
    payouts = list(records.get("payouts") or [])

    if vendor_id is not None:
        orders = [o for o in orders if o.vendor_id == vendor_id]
        payouts = [p for p in payouts if p.user_id == vendor_id]
    elif supplier_id is not None:
        scoped = []
        for o in orders:
            items = [i for i in o.items if i.supplier_id == supplier_id]
            if not items:
                continue
            subtotal = sum(i.total_price for i in items)
            scoped.append(replace(o, items=items, subtotal=subtotal, shipping=0.0, tax=0.0, total=subtotal))
        orders = scoped
        payouts = [p for p in payouts if p.user_id == supplier_id]

    return {"orders": orders, "users": users, "payouts": payouts}


# ── Toplu analiz ──────────────────────────────────────────

def validate_spec(spec: AggregationSpec) -> AggregationSpec:
    """Metin değerleri enum'a çevirir, hatalı isteği reddeder."""
    bucket = to_bucket_unit(spec.bucket_unit)
    try:
        metric = Metric(spec.metric)
    except ValueError:
        raise InvalidAggregationSpec("metric", spec.metric) from None
    if isinstance(spec.top_n, bool) or not isinstance(spec.top_n, int) or spec.top_n < 0:
        raise InvalidAggregationSpec("top_n", spec.top_n)
    window = []
    for name in ("window_start", "window_end"):
        value = getattr(spec, name)
        if not isinstance(value, date):
            raise InvalidAggregationSpec(name, value)
        window.append(local_date(value))
    start, end = window
    if start > end:
        raise InvalidAggregationSpec("window", (start, end))
    return replace(spec, window_start=start, window_end=end, bucket_unit=bucket, metric=metric)


def aggregate(spec: AggregationSpec, records: Mapping[str, Iterable]) -> AggregationResult:
    """
    Dashboard için tüm analiz yapılarını üretir.

    records: {"orders": [...], "users": [...], "payouts": [...]}; eksik
    anahtarlar boş kabul edilir. Kayıtlar çağıran tarafından kapsamına
    göre (ör. tek vendor) süzülmüş olmalıdır; pencere süzmesi burada
    yapılır ve önceki dönem karşılaştırması için aynı kayıtlar kullanılır.
    """
    spec = validate_spec(spec)
    tz = display_timezone()

    all_orders = list(records.get("orders") or [])
    users = list(records.get("users") or [])
    all_payouts = list(records.get("payouts") or [])

    start, end = spec.window_start, spec.window_end
    prev_start, prev_end = previous_window(start, end)

    orders = filter_window(all_orders, start, end, tz=tz)
    previous_orders = filter_window(all_orders, prev_start, prev_end, tz=tz)
    new_users = filter_window(users, start, end, tz=tz)
    payouts = filter_window(all_payouts, start, end, tz=tz)

    vendors = [u for u in users if u.role == UserRole.VENDOR]
    suppliers = [u for u in users if u.role == UserRole.SUPPLIER]

    result = AggregationResult(
        spec=spec,
        stats=calculate_dashboard_stats(orders, previous_orders, users, new_users, payouts),
        revenue_trend=build_time_series(
            orders, start, end, spec.bucket_unit, lambda o: o.total, tz=tz,
        ),
        order_volume_trend=build_time_series(
            orders, start, end, spec.bucket_unit, lambda o: 1, tz=tz,
        ),
        user_registration=build_time_series(
            users, start, end, spec.bucket_unit, lambda u: 1, tz=tz,
        ),
        order_status=status_distribution(orders, lambda o: o.status_name, ORDER_STATUS_DISPLAY),
        payout_status=status_distribution(payouts, lambda p: p.status, PAYOUT_STATUS_DISPLAY),
        user_type=user_type_distribution(users),
        top_vendors=top_vendors(vendors, orders, spec.top_n, spec.metric),
        top_suppliers=top_suppliers(suppliers, orders, spec.top_n, spec.metric),
        top_products=top_products(orders, spec.top_n, spec.metric),
    )
    logger.debug(
        "Aggregated %d orders (%d previous) over %s..%s by %s",
        len(orders), len(previous_orders), start, end, spec.bucket_unit.value,
    )
    return result
