"""Pytest fixtures for dropship_manager tests."""

from datetime import datetime, timezone

import pytest

from dropship_manager.models.order import Order, OrderLineItem, OrderStatus, PaymentStatus
from dropship_manager.models.user import Payout, PayoutStatus, User, UserRole


def utc(year, month, day, hour=12, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_order(
    order_id,
    created_at,
    items,
    vendor_id="v-1",
    status=OrderStatus.DELIVERED,
    payment_status=PaymentStatus.PAID,
    shipping=0.0,
    tax=0.0,
):
    order = Order(
        order_id=order_id,
        store_id=f"st-{vendor_id}",
        vendor_id=vendor_id,
        created_at=created_at,
        status=status,
        payment_status=payment_status,
        items=list(items),
        shipping=shipping,
        tax=tax,
    )
    order.subtotal = order.line_total
    order.total = order.subtotal + shipping + tax
    return order


def line(product_id="p-1", price=100.0, quantity=1, supplier_id="s-1", supplier_cost=40.0, name=None):
    return OrderLineItem(
        product_id=product_id,
        product_name=name or f"Product {product_id}",
        quantity=quantity,
        price=price,
        supplier_id=supplier_id,
        supplier_cost=supplier_cost if supplier_id else 0.0,
    )


@pytest.fixture
def users():
    return [
        User("a-1", "Admin", UserRole.ADMIN, utc(2024, 1, 1)),
        User("v-1", "Vera", UserRole.VENDOR, utc(2024, 12, 1), business_name="Vera Home"),
        User("v-2", "Vik", UserRole.VENDOR, utc(2025, 1, 2), commission_rate=0.10),
        User("v-3", "Idle", UserRole.VENDOR, utc(2024, 6, 1)),
        User("s-1", "Sam", UserRole.SUPPLIER, utc(2024, 11, 1), business_name="Sam Supply"),
        User("s-2", "Sue", UserRole.SUPPLIER, utc(2024, 11, 5)),
        User("c-1", "Cara", UserRole.CUSTOMER, utc(2025, 1, 2)),
        User("c-2", "Cole", UserRole.CUSTOMER, utc(2025, 1, 3)),
    ]


@pytest.fixture
def orders():
    """Window 2025-01-01..2025-01-03 plus two orders in the previous period."""
    return [
        make_order("o-1", utc(2025, 1, 1, 9), [line("p-1", 100.0, 1, "s-1", 40.0)], vendor_id="v-1"),
        make_order("o-2", utc(2025, 1, 2, 15), [
            line("p-1", 100.0, 2, "s-1", 40.0),
            line("p-2", 20.0, 1, None),
        ], vendor_id="v-2", status=OrderStatus.SHIPPED),
        make_order("o-3", utc(2025, 1, 3, 23, 59), [line("p-3", 50.0, 1, "s-2", 10.0)],
                   vendor_id="v-1", status="on_hold", shipping=5.0),
        make_order("o-prev-1", utc(2024, 12, 30), [line("p-1", 100.0, 1)], vendor_id="v-1"),
        make_order("o-prev-2", utc(2024, 12, 31), [line("p-2", 20.0, 1, None)], vendor_id="v-2"),
    ]


@pytest.fixture
def payouts():
    return [
        Payout("po-1", "v-1", 30.0, "bank_transfer", utc(2025, 1, 2), status=PayoutStatus.COMPLETED),
        Payout("po-2", "s-1", 10.0, "bank_transfer", utc(2025, 1, 3), status=PayoutStatus.FAILED),
        Payout("po-3", "v-2", 5.0, "stripe_connect", utc(2024, 12, 1), status=PayoutStatus.PENDING),
    ]


@pytest.fixture
def records(orders, users, payouts):
    return {"orders": orders, "users": users, "payouts": payouts}
