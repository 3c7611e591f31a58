"""
Sipariş hesaplaşması: her kalemin perakende tutarını platform, vendor ve
tedarikçi arasında böler.

Birim başına adımlar:
    platform_fee     = fiyat * komisyon
    vendor_gross     = fiyat - tedarikçi maliyeti - platform_fee
    processor_fee    = ücret_modeli(fiyat)
    ödeme tabanı     = fiyat - platform_fee  (vendor_gross + maliyet)
    işlem ücreti tabana oranla vendor ve tedarikçiye paylaştırılır;
    taban sıfır ya da negatifse ücretin tamamı vendor'a yazılır.

Negatif vendor kârı hata değildir, olduğu gibi raporlanır.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from dropship_manager.config.settings import MONEY_TOLERANCE
from dropship_manager.engine.errors import InvalidSettlementInput, UnbalancedSettlement
from dropship_manager.engine.fees import (
    CommissionResolver,
    FeeModel,
    compute_processor_fee,
    resolve_commission_rate,
    resolve_fee_model,
)
from dropship_manager.models.ledger import SettledLineItem
from dropship_manager.models.order import Order, OrderLineItem

logger = logging.getLogger(__name__)


def validate_line_item(item: OrderLineItem, line_ref: str) -> None:
    """Fiyat/adet/maliyet alanlarını kontrol eder."""
    if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
        raise InvalidSettlementInput("quantity", item.quantity, "must be a positive integer", line_ref)
    if not _finite(item.price) or item.price < 0:
        raise InvalidSettlementInput("price", item.price, "must be a non-negative number", line_ref)
    if not _finite(item.supplier_cost) or item.supplier_cost < 0:
        raise InvalidSettlementInput("supplier_cost", item.supplier_cost, "must be a non-negative number", line_ref)


def settle_line_item(
    item: OrderLineItem,
    commission_rate: float,
    fee_model: FeeModel,
    order_id: str = "",
    vendor_id: str = "",
    line_ref: Optional[str] = None,
) -> SettledLineItem:
    """Tek kalemin birim paylaşımını hesaplar."""
    line_ref = line_ref or item.line_id or f"{order_id}:{item.product_id}"
    validate_line_item(item, line_ref)

    retail = float(item.price)
    supplier_cost = float(item.supplier_cost)
    if not item.has_supplier and supplier_cost:
        # Vendor'un kendi ürünü: tedarikçi maliyeti yok sayılır
        logger.warning(
            "Line %s has supplier_cost %.2f but no supplier; treating cost as 0",
            line_ref, supplier_cost,
        )
        supplier_cost = 0.0

    platform_fee = retail * commission_rate
    vendor_gross = retail - supplier_cost - platform_fee
    processor_fee = compute_processor_fee(fee_model, retail)

    payable_base = retail - platform_fee
    if payable_base > 0:
        vendor_fee_share = processor_fee * vendor_gross / payable_base
        supplier_fee_share = processor_fee * supplier_cost / payable_base
    else:
        logger.warning(
            "Line %s has no payable base (%.4f); processor fee charged to vendor",
            line_ref, payable_base,
        )
        vendor_fee_share = processor_fee
        supplier_fee_share = 0.0

    vendor_net = vendor_gross - vendor_fee_share
    supplier_net = supplier_cost - supplier_fee_share if item.has_supplier else 0.0

    settled = SettledLineItem(
        order_id=order_id,
        vendor_id=vendor_id,
        product_id=item.product_id,
        quantity=item.quantity,
        supplier_id=item.supplier_id,
        vendor_price=retail,
        supplier_price=supplier_cost,
        commission_rate=commission_rate,
        platform_fee=platform_fee,
        processor_fee=processor_fee,
        processor_fee_vendor_share=vendor_fee_share,
        processor_fee_supplier_share=supplier_fee_share,
        vendor_gross_profit=vendor_gross,
        vendor_profit=vendor_net,
        supplier_net=supplier_net,
        line_id=item.line_id,
    )
    assert_balanced(settled, line_ref)
    return settled


def settle_order(
    order: Order,
    fee_model=None,
    commission_rate_resolver: Optional[CommissionResolver] = None,
) -> list[SettledLineItem]:
    """
    Siparişin tüm kalemlerini hesaplaşır.

    Tüm kalemler önce doğrulanır; herhangi biri hatalıysa hiçbir kayıt
    üretilmez (kısmi hesaplaşma yok). Dönen kayıtlar olduğu gibi
    saklanmalıdır.
    """
    model = resolve_fee_model(fee_model)
    rate = resolve_commission_rate(commission_rate_resolver, order.vendor_id)

    refs = []
    for index, item in enumerate(order.items):
        ref = item.line_id or f"{order.order_id}#{index}"
        validate_line_item(item, ref)
        refs.append(ref)

    settled = [
        settle_line_item(
            item, rate, model,
            order_id=order.order_id,
            vendor_id=order.vendor_id,
            line_ref=ref,
        )
        for item, ref in zip(order.items, refs)
    ]
    logger.debug(
        "Settled order %s: %d lines, platform fee %.2f",
        order.order_id, len(settled), sum(s.platform_fee_total for s in settled),
    )
    return settled


def assert_balanced(settled: SettledLineItem, line_ref: Optional[str] = None,
                    tolerance: float = MONEY_TOLERANCE) -> None:
    """Paylaşım toplamı perakende toplamına eşit değilse hata verir."""
    expected = settled.retail_total
    actual = settled.allocated_total
    # Büyük tutarlarda göreli tolerans
    allowed = tolerance * max(1.0, abs(expected))
    if abs(expected - actual) > allowed:
        ref = line_ref or settled.line_id or f"{settled.order_id}:{settled.product_id}"
        logger.error("Unbalanced settlement for %s: %r != %r", ref, expected, actual)
        raise UnbalancedSettlement(ref, expected, actual)


def summarize_settlement(settled: list[SettledLineItem]) -> dict[str, float]:
    """Sipariş düzeyinde toplamlar (rapor ve CLI için)."""
    return {
        "retail": sum(s.retail_total for s in settled),
        "platform_fee": sum(s.platform_fee_total for s in settled),
        "processor_fee": sum(s.processor_fee_total for s in settled),
        "vendor_profit": sum(s.vendor_profit_total for s in settled),
        "supplier_net": sum(s.supplier_net_total for s in settled),
    }


def _finite(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
