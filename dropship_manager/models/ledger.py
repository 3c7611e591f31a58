"""
Hesaplaşma (settlement) defter kayıtları.

Her sipariş kalemi sonuçlandığında platform, vendor ve tedarikçi
arasındaki paylaşım birim başına bir kez hesaplanır ve kalem üzerinde
değişmeden saklanır.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SettledLineItem:
    """Tek bir kalemin birim bazlı paylaşımı."""
    order_id: str
    vendor_id: str
    product_id: str
    quantity: int
    supplier_id: Optional[str]

    # Birim fiyatlar
    vendor_price: float                   # müşterinin ödediği perakende fiyat
    supplier_price: float                 # tedarikçi maliyeti (yoksa 0)
    commission_rate: float

    # Birim paylar
    platform_fee: float
    processor_fee: float
    processor_fee_vendor_share: float
    processor_fee_supplier_share: float
    vendor_gross_profit: float            # işlem ücreti öncesi
    vendor_profit: float                  # işlem ücreti sonrası net
    supplier_net: float

    line_id: Optional[str] = None

    @property
    def retail_total(self) -> float:
        return self.vendor_price * self.quantity

    @property
    def vendor_profit_total(self) -> float:
        return self.vendor_profit * self.quantity

    @property
    def vendor_gross_profit_total(self) -> float:
        return self.vendor_gross_profit * self.quantity

    @property
    def supplier_price_total(self) -> float:
        return self.supplier_price * self.quantity

    @property
    def supplier_net_total(self) -> float:
        return self.supplier_net * self.quantity

    @property
    def platform_fee_total(self) -> float:
        return self.platform_fee * self.quantity

    @property
    def processor_fee_total(self) -> float:
        return self.processor_fee * self.quantity

    @property
    def processor_fee_vendor_total(self) -> float:
        return self.processor_fee_vendor_share * self.quantity

    @property
    def processor_fee_supplier_total(self) -> float:
        return self.processor_fee_supplier_share * self.quantity

    @property
    def allocated_total(self) -> float:
        """Taraflara dağıtılan toplam; retail_total'a eşit olmalı."""
        return (
            self.vendor_profit_total
            + self.supplier_net_total
            + self.platform_fee_total
            + self.processor_fee_total
        )

    def as_record(self) -> dict:
        """Kalıcı katmana yazılacak alanlar."""
        return {
            "order_id": self.order_id,
            "line_id": self.line_id,
            "product_id": self.product_id,
            "supplier_id": self.supplier_id,
            "quantity": self.quantity,
            "vendor_price": self.vendor_price,
            "supplier_price": self.supplier_price,
            "commission_rate": self.commission_rate,
            "platform_fee": self.platform_fee,
            "processor_fee": self.processor_fee,
            "processor_fee_vendor_share": self.processor_fee_vendor_share,
            "processor_fee_supplier_share": self.processor_fee_supplier_share,
            "vendor_gross_profit": self.vendor_gross_profit,
            "vendor_profit": self.vendor_profit,
            "supplier_net": self.supplier_net,
        }


@dataclass
class PayoutSummary:
    """Bir kullanıcının ödenebilir tutar özeti."""
    base_amount: float = 0.0
    processor_fee: float = 0.0
    platform_fee: float = 0.0
    net_amount: float = 0.0
    line_count: int = 0
