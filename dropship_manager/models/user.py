"""
Kullanıcı ve ödeme (payout) veri modelleri.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPPLIER = "supplier"
    VENDOR = "vendor"
    CUSTOMER = "customer"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


# Bu durumlardaki ödemeler bakiyeden düşülmez
VOID_PAYOUT_STATUSES = frozenset({PayoutStatus.FAILED, PayoutStatus.CANCELLED})


@dataclass
class User:
    """Platform kullanıcısı (admin, tedarikçi, vendor, müşteri)."""
    user_id: str
    name: str
    role: UserRole
    created_at: datetime
    email: Optional[str] = None
    business_name: Optional[str] = None
    commission_rate: Optional[float] = None   # sadece vendor; None ise varsayılan

    @property
    def display_name(self) -> str:
        return self.business_name or self.name


@dataclass
class Payout:
    """Vendor ya da tedarikçiye yapılan gerçek para transferi."""
    payout_id: str
    user_id: str
    amount: float
    method: str
    created_at: datetime
    status: PayoutStatus = PayoutStatus.PENDING
    net_amount: Optional[float] = None        # amount - işlem ücreti
    processed_at: Optional[datetime] = None

    @property
    def counts_against_balance(self) -> bool:
        return self.status not in VOID_PAYOUT_STATUSES
