"""
Ödeme işleme ücreti modelleri ve vendor komisyon oranı çözümleyicileri.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Union

from dropship_manager.config.settings import DEFAULT_COMMISSION_RATE, PROCESSOR_FEE
from dropship_manager.engine.errors import InvalidSettlementInput

FeeModel = Callable[[float], float]
CommissionResolver = Callable[[str], Optional[float]]


@dataclass(frozen=True)
class PercentagePlusFixedFee:
    """Yüzde + sabit ücret (ör. %2.9 + $0.30)."""
    percentage: float
    fixed: float = 0.0

    CONFIG_KEYS = ("percentage", "fixed")

    def __call__(self, amount: float) -> float:
        return amount * self.percentage + self.fixed

    @classmethod
    def from_config(cls, config: Mapping[str, float]) -> "PercentagePlusFixedFee":
        unknown = set(config) - set(cls.CONFIG_KEYS)
        if unknown or "percentage" not in config:
            raise InvalidSettlementInput(
                "fee_model", dict(config),
                "expected keys 'percentage' and optional 'fixed'",
            )
        percentage = config["percentage"]
        fixed = config.get("fixed", 0.0)
        for name, value in (("percentage", percentage), ("fixed", fixed)):
            if not _is_number(value) or value < 0:
                raise InvalidSettlementInput(f"fee_model.{name}", value, "must be a non-negative number")
        # Oran kesirdir: 2.9 değil 0.029
        if percentage > 1:
            raise InvalidSettlementInput("fee_model.percentage", percentage, "must be a fraction between 0 and 1")
        return cls(percentage=float(percentage), fixed=float(fixed))


def default_fee_model() -> PercentagePlusFixedFee:
    return PercentagePlusFixedFee.from_config(PROCESSOR_FEE)


def resolve_fee_model(model: Union[FeeModel, Mapping[str, float], None]) -> FeeModel:
    """
    Ücret modelini çağrılabilir hale getirir.

    Kabul edilenler: None (varsayılan model), {"percentage", "fixed"}
    sözlüğü ya da tutar -> ücret döndüren herhangi bir çağrılabilir.
    """
    if model is None:
        return default_fee_model()
    if isinstance(model, Mapping):
        return PercentagePlusFixedFee.from_config(model)
    if callable(model):
        return model
    raise InvalidSettlementInput("fee_model", model, "unknown fee model shape")


def compute_processor_fee(model: FeeModel, amount: float) -> float:
    """Modeli çalıştırır ve sonucun geçerli bir ücret olduğunu kontrol eder."""
    try:
        fee = model(amount)
    except (TypeError, ValueError) as exc:
        raise InvalidSettlementInput("fee_model", model, "unknown fee model shape") from exc
    if not _is_number(fee) or fee < 0:
        raise InvalidSettlementInput("processor_fee", fee, "fee model must return a non-negative number")
    return float(fee)


# ── Komisyon oranları ─────────────────────────────────────

def make_commission_resolver(
    rates: Optional[Mapping[str, float]] = None,
    default: float = DEFAULT_COMMISSION_RATE,
) -> CommissionResolver:
    """vendor_id -> oran eşlemesinden çözümleyici oluşturur."""
    rates = dict(rates or {})

    def resolve(vendor_id: str) -> float:
        rate = rates.get(vendor_id)
        return default if rate is None else rate

    return resolve


def commission_resolver_from_users(users, default: float = DEFAULT_COMMISSION_RATE) -> CommissionResolver:
    """Vendor kullanıcılarındaki commission_rate alanından çözümleyici."""
    return make_commission_resolver(
        {u.user_id: u.commission_rate for u in users if u.commission_rate is not None},
        default=default,
    )


def resolve_commission_rate(resolver: Optional[CommissionResolver], vendor_id: str) -> float:
    rate = resolver(vendor_id) if resolver is not None else None
    if rate is None:
        rate = DEFAULT_COMMISSION_RATE
    if not _is_number(rate) or not 0 <= rate <= 1:
        raise InvalidSettlementInput("commission_rate", rate, "must be a fraction between 0 and 1")
    return float(rate)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
