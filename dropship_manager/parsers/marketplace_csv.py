"""
Pazaryeri CSV dışa aktarımlarını parse eder ve ortak veri modeline dönüştürür.

Dosyalar:
  - orders.csv   → her satır bir sipariş kalemi (sipariş alanları tekrarlanır)
  - users.csv    → kullanıcılar
  - payouts.csv  → vendor/tedarikçi ödemeleri
"""
from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from dropship_manager.models.order import Order, OrderLineItem, OrderStatus, PaymentStatus
from dropship_manager.models.user import Payout, PayoutStatus, User, UserRole

logger = logging.getLogger(__name__)

ORDER_HEADERS = [
    "order_id", "order_number", "created_at", "store_id", "vendor_id",
    "customer_id", "status", "payment_status", "shipping", "tax",
    "line_id", "product_id", "product_name", "quantity", "price",
    "supplier_id", "supplier_cost",
]
USER_HEADERS = [
    "user_id", "name", "role", "created_at", "email",
    "business_name", "commission_rate",
]
PAYOUT_HEADERS = [
    "payout_id", "user_id", "amount", "method", "status",
    "created_at", "processed_at", "net_amount",
]


def _parse_date(date_str: Optional[str]) -> Optional[datetime]:
    """ISO tarihleri parse eder ("2025-01-15", "2025-01-15T10:30:00Z")."""
    if not date_str or not date_str.strip():
        return None
    value = date_str.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _parse_money(value: Optional[str]) -> float:
    """Para değerini float'a çevirir. '$12.50' → 12.50"""
    if not value:
        return 0.0
    cleaned = value.replace("$", "").replace(",", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def _parse_optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return _parse_money(value)


def _parse_int(value: Optional[str], default: int = 0) -> int:
    try:
        return int((value or "").strip())
    except ValueError:
        return default


def _map_order_status(status_str: str):
    """Bilinmeyen durumlar ham metin olarak kalır."""
    value = (status_str or "pending").strip().lower()
    try:
        return OrderStatus(value)
    except ValueError:
        return value


def _map_payment_status(status_str: str) -> PaymentStatus:
    value = (status_str or "pending").strip().lower()
    try:
        return PaymentStatus(value)
    except ValueError:
        return PaymentStatus.PENDING


def parse_orders(file_path: Path) -> list[Order]:
    """Sipariş CSV dosyasını parse eder; kalemleri sipariş altında toplar."""
    orders: dict[str, Order] = {}
    skipped: set[str] = set()

    with open(file_path, "r", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        for row in reader:
            order_id = (row.get("order_id") or "").strip()
            if not order_id or order_id in skipped:
                continue

            supplier_id = (row.get("supplier_id") or "").strip() or None
            item = OrderLineItem(
                product_id=(row.get("product_id") or "").strip(),
                product_name=(row.get("product_name") or "").strip(),
                quantity=_parse_int(row.get("quantity"), 1),
                price=_parse_money(row.get("price")),
                supplier_id=supplier_id,
                supplier_cost=_parse_money(row.get("supplier_cost")) if supplier_id else 0.0,
                line_id=(row.get("line_id") or "").strip() or None,
            )

            if order_id in orders:
                orders[order_id].items.append(item)
                continue

            created = _parse_date(row.get("created_at"))
            if created is None:
                # Tarihsiz sipariş analizde yer alamaz; kalan kalemleri de atlanır
                logger.warning("Order %s has no valid created_at; skipping all its lines", order_id)
                skipped.add(order_id)
                continue
            orders[order_id] = Order(
                order_id=order_id,
                order_number=(row.get("order_number") or "").strip() or None,
                store_id=(row.get("store_id") or "").strip(),
                vendor_id=(row.get("vendor_id") or "").strip(),
                customer_id=(row.get("customer_id") or "").strip() or None,
                created_at=created,
                status=_map_order_status(row.get("status")),
                payment_status=_map_payment_status(row.get("payment_status")),
                items=[item],
                shipping=_parse_money(row.get("shipping")),
                tax=_parse_money(row.get("tax")),
            )

    for order in orders.values():
        order.subtotal = order.line_total
        order.total = order.subtotal + order.shipping + order.tax

    return list(orders.values())


def parse_users(file_path: Path) -> list[User]:
    users: list[User] = []

    with open(file_path, "r", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        for row in reader:
            user_id = (row.get("user_id") or "").strip()
            created = _parse_date(row.get("created_at"))
            if not user_id or created is None:
                continue
            try:
                role = UserRole((row.get("role") or "customer").strip().lower())
            except ValueError:
                role = UserRole.CUSTOMER

            users.append(User(
                user_id=user_id,
                name=(row.get("name") or "").strip(),
                role=role,
                created_at=created,
                email=(row.get("email") or "").strip() or None,
                business_name=(row.get("business_name") or "").strip() or None,
                commission_rate=_parse_optional_float(row.get("commission_rate")),
            ))

    return users


def parse_payouts(file_path: Path) -> list[Payout]:
    payouts: list[Payout] = []

    with open(file_path, "r", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        for row in reader:
            payout_id = (row.get("payout_id") or "").strip()
            created = _parse_date(row.get("created_at"))
            if not payout_id or created is None:
                continue
            try:
                status = PayoutStatus((row.get("status") or "pending").strip().lower())
            except ValueError:
                status = PayoutStatus.PENDING

            payouts.append(Payout(
                payout_id=payout_id,
                user_id=(row.get("user_id") or "").strip(),
                amount=_parse_money(row.get("amount")),
                method=(row.get("method") or "bank_transfer").strip(),
                created_at=created,
                status=status,
                net_amount=_parse_optional_float(row.get("net_amount")),
                processed_at=_parse_date(row.get("processed_at")),
            ))

    return payouts


def load_marketplace(data_dir: Path) -> dict[str, list]:
    """Klasördeki tüm dosyaları yükler; eksik dosya boş liste verir."""
    loaders = {
        "orders": ("orders.csv", parse_orders),
        "users": ("users.csv", parse_users),
        "payouts": ("payouts.csv", parse_payouts),
    }
    records: dict[str, list] = {}
    for key, (filename, loader) in loaders.items():
        path = data_dir / filename
        records[key] = loader(path) if path.exists() else []
    return records
