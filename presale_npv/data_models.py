"""Data models for the pre-sale NPV calculator.

This module defines dataclasses representing the entities used by the
calculator: the shared terms both schemes are evaluated under, a single
payment scheme as entered by the user, the normalized shares derived from it
and the present-value results. All of them are frozen; every input change
builds new values instead of mutating the old ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List

PERCENT = "percent"
ABSOLUTE = "absolute"
INPUT_MODES = (PERCENT, ABSOLUTE)

INITIAL = "initial"
INSTALLMENT = "installment"
REMAINDER = "remainder"


@dataclass(frozen=True)
class SharedTerms:
    """Inputs shared by the Traditional and Custom schemes."""

    base_value: float  # property value, non-negative
    annual_rate_pct: float  # annual nominal discount rate in percent
    installment_count: int  # number of equal monthly installments


@dataclass(frozen=True)
class PaymentScheme:
    """One payment structure as entered by the user.

    Attributes
    ----------
    name: str
        Display name, e.g. ``"Traditional"`` or ``"Custom"``.
    input_mode: str
        ``"percent"`` means ``initial_raw`` and ``installment_raw`` are
        percentages of the base value (0-100). ``"absolute"`` means they are
        currency amounts.
    initial_raw: float
        The payment made up front at time 0.
    installment_raw: float
        The total spread over the monthly installments.
    defer_remainder: bool
        When True the remainder is paid one month after the last installment
        instead of together with it.
    """

    name: str
    input_mode: str = PERCENT
    initial_raw: float = 0.0
    installment_raw: float = 0.0
    defer_remainder: bool = False

    def with_mode(self, input_mode: str, initial_raw: float, installment_raw: float) -> "PaymentScheme":
        return replace(self, input_mode=input_mode, initial_raw=initial_raw, installment_raw=installment_raw)


@dataclass(frozen=True)
class NormalizedShares:
    """Scheme shares expressed as percentages of the base value.

    Each percentage lies in ``[0, 100]``. ``exceeds_base`` is the advisory
    warning raised when the initial payment and the installments together go
    beyond the base value; the remainder is clamped to zero in that case.
    """

    initial_pct: float
    installment_pct: float
    remainder_pct: float
    exceeds_base: bool = False


@dataclass(frozen=True)
class NpvResult:
    """Present value breakdown of one scheme."""

    monthly_rate: float
    initial_pct: float
    installment_pct: float
    initial_fraction: float
    installment_fraction: float
    remainder_fraction: float
    initial_payment: float
    installment_total: float
    installment_payment: float
    installments_pv: float
    remainder_payment: float
    remainder_pv: float
    npv: float
    installment_count: int
    remainder_period: int
    exceeds_hundred: bool = False  # initial + installment shares above 100 %

    def to_dict(self) -> Dict[str, object]:
        return {
            "monthly_rate": self.monthly_rate,
            "initial_pct": self.initial_pct,
            "installment_pct": self.installment_pct,
            "initial_fraction": self.initial_fraction,
            "installment_fraction": self.installment_fraction,
            "remainder_fraction": self.remainder_fraction,
            "initial_payment": self.initial_payment,
            "installment_total": self.installment_total,
            "installment_payment": self.installment_payment,
            "installments_pv": self.installments_pv,
            "remainder_payment": self.remainder_payment,
            "remainder_pv": self.remainder_pv,
            "npv": self.npv,
            "installment_count": self.installment_count,
            "remainder_period": self.remainder_period,
            "exceeds_hundred": self.exceeds_hundred,
        }


@dataclass(frozen=True)
class CashFlow:
    """A single nominal payment and its value discounted to time 0."""

    period: int
    component: str  # "initial", "installment" or "remainder"
    amount: float
    discount_factor: float
    present_value: float


@dataclass(frozen=True)
class SchemeResult:
    scheme: PaymentScheme
    shares: NormalizedShares
    result: NpvResult

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.scheme.name,
            "input_mode": self.scheme.input_mode,
            "defer_remainder": self.scheme.defer_remainder,
            "initial_pct": self.shares.initial_pct,
            "installment_pct": self.shares.installment_pct,
            "remainder_pct": self.shares.remainder_pct,
            "exceeds_base": self.shares.exceeds_base,
            "result": self.result.to_dict(),
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Both schemes evaluated under the same terms.

    ``npv_difference`` is ``traditional - custom``: positive means the
    Traditional scheme has the higher present value.
    """

    terms: SharedTerms
    traditional: SchemeResult
    custom: SchemeResult
    npv_difference: float
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "base_value": self.terms.base_value,
            "annual_rate_pct": self.terms.annual_rate_pct,
            "installment_count": self.terms.installment_count,
            "traditional": self.traditional.to_dict(),
            "custom": self.custom.to_dict(),
            "npv_difference": self.npv_difference,
            "warnings": list(self.warnings),
        }


# Longest schedule accepted from users: 100 years of monthly installments.
MAX_INSTALLMENTS = 1200

DEFAULT_TERMS = SharedTerms(base_value=5_000_000.0, annual_rate_pct=12.0, installment_count=24)

DEFAULT_TRADITIONAL = PaymentScheme(name="Traditional", initial_raw=10.0, installment_raw=60.0)
DEFAULT_CUSTOM = PaymentScheme(name="Custom", initial_raw=30.0, installment_raw=50.0)

# Amounts pre-filled when a scheme is switched to absolute mode.
DEFAULT_ABSOLUTE_AMOUNTS = {
    "Traditional": (500_000.0, 3_000_000.0),
    "Custom": (1_500_000.0, 2_500_000.0),
}
