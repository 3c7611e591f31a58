"""Tests for the marketplace CSV parser."""

import csv

import pytest

from dropship_manager.models.order import OrderStatus, PaymentStatus
from dropship_manager.models.user import PayoutStatus, UserRole
from dropship_manager.parsers.marketplace_csv import (
    ORDER_HEADERS,
    PAYOUT_HEADERS,
    USER_HEADERS,
    load_marketplace,
    parse_orders,
    parse_payouts,
    parse_users,
)


def write_csv(path, headers, rows):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=headers)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path


def order_row(order_id, product_id, **overrides):
    row = {
        "order_id": order_id, "order_number": f"#{order_id}", "created_at": "2025-01-02T10:30:00Z",
        "store_id": "st-1", "vendor_id": "v-1", "customer_id": "c-1", "status": "delivered",
        "payment_status": "paid", "shipping": "5.00", "tax": "0",
        "line_id": f"{order_id}-{product_id}", "product_id": product_id, "product_name": "Lamp",
        "quantity": "2", "price": "$12.50", "supplier_id": "s-1", "supplier_cost": "4.00",
    }
    row.update(overrides)
    return row


class TestParseOrders:
    def test_lines_grouped_by_order(self, tmp_path):
        path = write_csv(tmp_path / "orders.csv", ORDER_HEADERS, [
            order_row("o-1", "p-1"),
            order_row("o-1", "p-2", supplier_id="", supplier_cost="9", price="10"),
            order_row("o-2", "p-1", status="on_hold", payment_status="weird"),
        ])

        orders = {o.order_id: o for o in parse_orders(path)}

        first = orders["o-1"]
        assert first.created_at.tzinfo is not None
        assert first.status == OrderStatus.DELIVERED
        assert first.payment_status == PaymentStatus.PAID
        assert [i.product_id for i in first.items] == ["p-1", "p-2"]
        assert first.items[0].price == 12.5
        assert first.items[1].supplier_id is None
        assert first.items[1].supplier_cost == 0.0
        assert first.subtotal == pytest.approx(45.0)
        assert first.total == pytest.approx(50.0)
        assert first.is_total_consistent()

        second = orders["o-2"]
        assert second.status == "on_hold"
        assert second.payment_status == PaymentStatus.PENDING

    def test_rows_without_date_are_skipped(self, tmp_path):
        path = write_csv(tmp_path / "orders.csv", ORDER_HEADERS, [
            order_row("o-1", "p-1", created_at=""),
            order_row("", "p-1"),
        ])

        assert parse_orders(path) == []

    def test_undated_order_drops_all_its_lines(self, tmp_path):
        path = write_csv(tmp_path / "orders.csv", ORDER_HEADERS, [
            order_row("o-1", "p-1", created_at="not-a-date"),
            order_row("o-1", "p-2"),
            order_row("o-2", "p-1"),
        ])

        orders = parse_orders(path)

        assert [o.order_id for o in orders] == ["o-2"]


class TestParseUsersAndPayouts:
    def test_users(self, tmp_path):
        path = write_csv(tmp_path / "users.csv", USER_HEADERS, [
            {"user_id": "v-1", "name": "Vera", "role": "Vendor", "created_at": "2025-01-01",
             "email": "", "business_name": "Vera Home", "commission_rate": "0.12"},
            {"user_id": "x-1", "name": "X", "role": "robot", "created_at": "2025-01-01",
             "email": "x@example.com", "business_name": "", "commission_rate": ""},
        ])

        vendor, other = parse_users(path)

        assert vendor.role == UserRole.VENDOR
        assert vendor.commission_rate == 0.12
        assert vendor.display_name == "Vera Home"
        assert other.role == UserRole.CUSTOMER
        assert other.commission_rate is None

    def test_payouts(self, tmp_path):
        path = write_csv(tmp_path / "payouts.csv", PAYOUT_HEADERS, [
            {"payout_id": "po-1", "user_id": "v-1", "amount": "1,250.00", "method": "stripe_connect",
             "status": "FAILED", "created_at": "2025-01-03T08:00:00Z", "processed_at": "",
             "net_amount": "1213.45"},
        ])

        payout, = parse_payouts(path)

        assert payout.amount == 1250.0
        assert payout.status == PayoutStatus.FAILED
        assert not payout.counts_against_balance
        assert payout.processed_at is None
        assert payout.net_amount == pytest.approx(1213.45)


def test_load_marketplace_missing_files(tmp_path):
    write_csv(tmp_path / "orders.csv", ORDER_HEADERS, [order_row("o-1", "p-1")])

    records = load_marketplace(tmp_path)

    assert len(records["orders"]) == 1
    assert records["users"] == []
    assert records["payouts"] == []
