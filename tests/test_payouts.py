"""Tests for payout summaries and validation."""

import pytest

from conftest import line, make_order, utc
from dropship_manager.engine.errors import InvalidPayout, PayoutExceedsBalance
from dropship_manager.engine.payouts import (
    paid_out_amount,
    payable_summary,
    payout_net_amount,
    supplier_payout_summary,
    unpaid_balance,
    validate_payout,
    vendor_payout_summary,
)
from dropship_manager.engine.settlement import settle_order
from dropship_manager.models.order import PaymentStatus
from dropship_manager.models.user import Payout, PayoutStatus, User, UserRole


def flat_fee(amount):
    return 3.2


@pytest.fixture
def settled_orders():
    paid = make_order("o-1", utc(2025, 1, 1), [line("p-1", 100.0, 1, "s-1", 40.0)])
    unpaid = make_order("o-2", utc(2025, 1, 2), [line("p-1", 100.0, 1, "s-1", 40.0)],
                        payment_status=PaymentStatus.PENDING)
    settled = settle_order(paid, flat_fee) + settle_order(unpaid, flat_fee)
    return settled, {"o-1"}


@pytest.fixture
def vendor():
    return User("v-1", "Vera", UserRole.VENDOR, utc(2024, 1, 1))


@pytest.fixture
def supplier():
    return User("s-1", "Sam", UserRole.SUPPLIER, utc(2024, 1, 1))


class TestSummaries:
    def test_vendor_summary(self, settled_orders):
        settled, paid_ids = settled_orders

        summary = vendor_payout_summary(settled, "v-1", paid_ids)

        assert summary.line_count == 1
        assert summary.base_amount == pytest.approx(60.0)
        assert summary.platform_fee == pytest.approx(15.0)
        assert summary.processor_fee == pytest.approx(45 / 85 * 3.2)
        assert summary.net_amount == pytest.approx(
            summary.base_amount - summary.processor_fee - summary.platform_fee
        )

    def test_supplier_summary(self, settled_orders):
        settled, paid_ids = settled_orders

        summary = supplier_payout_summary(settled, "s-1", paid_ids)

        assert summary.base_amount == pytest.approx(40.0)
        assert summary.net_amount == pytest.approx(40.0 - 40 / 85 * 3.2)
        assert summary.platform_fee == 0

    def test_unpaid_orders_count_without_filter(self, settled_orders):
        settled, _ = settled_orders

        assert vendor_payout_summary(settled, "v-1").line_count == 2

    def test_customer_cannot_receive_payout(self, settled_orders):
        settled, _ = settled_orders
        customer = User("c-1", "Cara", UserRole.CUSTOMER, utc(2024, 1, 1))

        with pytest.raises(InvalidPayout):
            payable_summary(customer, settled)


class TestBalance:
    def test_failed_payouts_do_not_reduce_balance(self, settled_orders, vendor):
        settled, paid_ids = settled_orders
        payouts = [
            Payout("po-1", "v-1", 20.0, "bank", utc(2025, 1, 3), status=PayoutStatus.COMPLETED),
            Payout("po-2", "v-1", 15.0, "bank", utc(2025, 1, 4), status=PayoutStatus.FAILED),
            Payout("po-3", "s-1", 5.0, "bank", utc(2025, 1, 4)),
        ]

        assert paid_out_amount(payouts, "v-1") == pytest.approx(20.0)
        net = vendor_payout_summary(settled, "v-1", paid_ids).net_amount
        assert unpaid_balance(vendor, settled, payouts, paid_ids) == pytest.approx(net - 20.0)

    def test_validate_payout_returns_remaining(self, settled_orders, supplier):
        settled, paid_ids = settled_orders
        payout = Payout("po-9", "s-1", 30.0, "bank", utc(2025, 1, 5))

        remaining = validate_payout(payout, supplier, settled, [], paid_ids)

        assert remaining == pytest.approx(40.0 - 40 / 85 * 3.2 - 30.0)

    def test_validate_payout_exceeding_balance(self, settled_orders, vendor):
        settled, paid_ids = settled_orders
        payout = Payout("po-9", "v-1", 50.0, "bank", utc(2025, 1, 5))

        with pytest.raises(PayoutExceedsBalance) as exc_info:
            validate_payout(payout, vendor, settled, [], paid_ids)
        assert exc_info.value.requested == 50.0
        assert exc_info.value.available == pytest.approx(43.30588, abs=1e-5)

    @pytest.mark.parametrize("amount", [0.0, -10.0])
    def test_validate_payout_non_positive(self, settled_orders, vendor, amount):
        settled, _ = settled_orders
        payout = Payout("po-9", "v-1", amount, "bank", utc(2025, 1, 5))

        with pytest.raises(InvalidPayout):
            validate_payout(payout, vendor, settled, [])

    def test_validate_payout_wrong_user(self, settled_orders, vendor):
        settled, _ = settled_orders
        payout = Payout("po-9", "v-2", 1.0, "bank", utc(2025, 1, 5))

        with pytest.raises(InvalidPayout):
            validate_payout(payout, vendor, settled, [])


def test_payout_net_amount():
    assert payout_net_amount(100.0, {"percentage": 0.01, "fixed": 0.25}) == pytest.approx(98.75)
