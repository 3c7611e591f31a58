"""
Vendor ve tedarikçi ödeme hesapları.

Yalnızca ödemesi alınmış (PAID) siparişlerin kalemleri ödenebilir
bakiyeye girer. Başarısız ya da iptal edilmiş payout'lar bakiyeden
düşülmez.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from dropship_manager.config.settings import MONEY_TOLERANCE
from dropship_manager.engine.errors import InvalidPayout, PayoutExceedsBalance
from dropship_manager.engine.fees import compute_processor_fee, resolve_fee_model
from dropship_manager.models.ledger import PayoutSummary, SettledLineItem
from dropship_manager.models.user import Payout, User, UserRole

logger = logging.getLogger(__name__)


def vendor_payout_summary(
    settled: Iterable[SettledLineItem],
    vendor_id: str,
    paid_order_ids: Optional[set[str]] = None,
) -> PayoutSummary:
    """
    Vendor özeti: base = perakende - tedarikçi maliyeti,
    net = base - işlem ücreti payı - platform ücreti.
    """
    summary = PayoutSummary()
    for line in settled:
        if line.vendor_id != vendor_id:
            continue
        if paid_order_ids is not None and line.order_id not in paid_order_ids:
            continue
        summary.base_amount += line.vendor_gross_profit_total + line.platform_fee_total
        summary.processor_fee += line.processor_fee_vendor_total
        summary.platform_fee += line.platform_fee_total
        summary.net_amount += line.vendor_profit_total
        summary.line_count += 1
    return summary


def supplier_payout_summary(
    settled: Iterable[SettledLineItem],
    supplier_id: str,
    paid_order_ids: Optional[set[str]] = None,
) -> PayoutSummary:
    """Tedarikçi özeti: base = maliyet, net = maliyet - işlem ücreti payı."""
    summary = PayoutSummary()
    for line in settled:
        if line.supplier_id != supplier_id:
            continue
        if paid_order_ids is not None and line.order_id not in paid_order_ids:
            continue
        summary.base_amount += line.supplier_price_total
        summary.processor_fee += line.processor_fee_supplier_total
        summary.net_amount += line.supplier_net_total
        summary.line_count += 1
    return summary


def payable_summary(user: User, settled, paid_order_ids=None) -> PayoutSummary:
    if user.role == UserRole.VENDOR:
        return vendor_payout_summary(settled, user.user_id, paid_order_ids)
    if user.role == UserRole.SUPPLIER:
        return supplier_payout_summary(settled, user.user_id, paid_order_ids)
    raise InvalidPayout(f"user {user.user_id} with role {user.role.value} cannot receive payouts")


def paid_out_amount(payouts: Iterable[Payout], user_id: str) -> float:
    """Kullanıcıya yapılmış (ya da bekleyen) payout toplamı."""
    return sum(
        p.amount for p in payouts
        if p.user_id == user_id and p.counts_against_balance
    )


def unpaid_balance(user: User, settled, payouts, paid_order_ids=None) -> float:
    """Hesaplaşılmış net tutar eksi mevcut payout'lar."""
    earned = payable_summary(user, settled, paid_order_ids).net_amount
    return earned - paid_out_amount(payouts, user.user_id)


def payout_net_amount(amount: float, fee_model=None) -> float:
    """Payout tutarından işlem ücretini düşer."""
    model = resolve_fee_model(fee_model)
    return amount - compute_processor_fee(model, amount)


def validate_payout(
    payout: Payout,
    user: User,
    settled,
    existing_payouts,
    paid_order_ids=None,
) -> float:
    """
    Yeni payout'u kontrol eder ve kalan bakiyeyi döndürür.

    existing_payouts yeni payout'u içermemelidir.
    """
    if payout.user_id != user.user_id:
        raise InvalidPayout(f"payout belongs to {payout.user_id}, not {user.user_id}", payout.payout_id)
    if not payout.amount > 0:
        raise InvalidPayout(f"amount must be positive, got {payout.amount!r}", payout.payout_id)

    available = unpaid_balance(user, settled, existing_payouts, paid_order_ids)
    if payout.amount > available + MONEY_TOLERANCE:
        logger.warning(
            "Rejected payout %s for %s: %.2f > %.2f",
            payout.payout_id, user.user_id, payout.amount, available,
        )
        raise PayoutExceedsBalance(payout.amount, available, payout.payout_id)
    return available - payout.amount
