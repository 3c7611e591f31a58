"""Hesaplama motorunun hata sınıfları."""
from __future__ import annotations

from typing import Optional


class DropshipError(Exception):
    """Tüm dropship_manager hatalarının tabanı."""

    pass


class InvalidSettlementInput(DropshipError):
    """Hatalı fiyat, adet ya da ücret modeli; sipariş kaydedilmemeli."""

    def __init__(self, field: str, value, reason: str, line_ref: Optional[str] = None):
        self.field = field
        self.value = value
        self.reason = reason
        self.line_ref = line_ref
        msg = f"Invalid settlement input {field}={value!r}: {reason}"
        if line_ref:
            msg = f"{msg} (line {line_ref})"
        super().__init__(msg)


class UnbalancedSettlement(DropshipError):
    """Paylaşım toplamı perakende toplamına eşit değil. Kod hatasıdır."""

    def __init__(self, line_ref: str, expected: float, actual: float):
        self.line_ref = line_ref
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Settlement for {line_ref} does not balance: "
            f"expected {expected!r}, allocated {actual!r}"
        )


class InvalidAggregationSpec(DropshipError):
    """Analiz isteği tanınmayan kova birimi, metrik ya da top-N içeriyor."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid aggregation spec {field}={value!r}")


class InvalidPayout(DropshipError):
    """Ödeme isteği geçersiz."""

    def __init__(self, reason: str, payout_id: Optional[str] = None):
        self.reason = reason
        self.payout_id = payout_id
        msg = f"Invalid payout: {reason}"
        if payout_id:
            msg = f"Invalid payout {payout_id}: {reason}"
        super().__init__(msg)


class PayoutExceedsBalance(InvalidPayout):
    """Ödeme tutarı kullanıcının ödenmemiş bakiyesini aşıyor."""

    def __init__(self, requested: float, available: float, payout_id: Optional[str] = None):
        self.requested = requested
        self.available = available
        super().__init__(
            f"requested {requested:.2f} exceeds unpaid balance {available:.2f}",
            payout_id=payout_id,
        )
