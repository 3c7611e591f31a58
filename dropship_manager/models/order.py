"""
Sipariş veri modeli - mağaza siparişleri ve satır kalemleri.

Kalıcı katmandan (veritabanı, CSV) gelen siparişler bu ortak modele
dönüşür; hesaplama motoru yalnızca bu modeli tanır.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass
class OrderLineItem:
    """Siparişteki tek bir ürün kalemi."""
    product_id: str
    product_name: str
    quantity: int
    price: float                          # müşterinin ödediği birim fiyat
    supplier_id: Optional[str] = None     # vendor'un kendi ürünü ise None
    supplier_cost: float = 0.0            # tedarikçinin birim fiyatı
    line_id: Optional[str] = None

    @property
    def total_price(self) -> float:
        return self.quantity * self.price

    @property
    def has_supplier(self) -> bool:
        return self.supplier_id is not None


@dataclass
class Order:
    """Mağaza siparişi. Kalemler siparişe aittir."""
    order_id: str
    store_id: str
    vendor_id: str
    created_at: datetime
    status: Union[OrderStatus, str] = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    items: list[OrderLineItem] = field(default_factory=list)
    customer_id: Optional[str] = None
    order_number: Optional[str] = None

    # Finansal
    subtotal: float = 0.0
    shipping: float = 0.0
    tax: float = 0.0
    total: float = 0.0

    @property
    def line_total(self) -> float:
        """Kalem toplamları."""
        return sum(item.total_price for item in self.items)

    @property
    def status_name(self) -> str:
        """Durumun normalize edilmiş metni (enum ya da ham metin)."""
        return normalize_status(self.status)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def is_total_consistent(self, tolerance: float = 1e-6) -> bool:
        """total == kalemler + kargo + vergi mi?"""
        expected = self.line_total + self.shipping + self.tax
        return abs(self.total - expected) <= tolerance


def normalize_status(status) -> str:
    """Enum ya da metin durumunu küçük harfli anahtara çevirir."""
    if status is None:
        return ""
    value = status.value if isinstance(status, Enum) else str(status)
    return value.strip().lower()
