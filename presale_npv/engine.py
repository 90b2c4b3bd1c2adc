"""Core calculation engine for the pre-sale NPV calculator.

This module discounts the three cash-flow components of a payment scheme
(initial payment, equal monthly installments and the final remainder) back
to time 0 using a monthly effective rate derived from an annual nominal
rate:

    i = (1 + r / 100) ** (1 / 12) - 1

The functions are pure and never raise for numeric edge cases. Results that
come out NaN or infinite are reported as 0 so that callers can display them
as they are.
"""

from __future__ import annotations

import math
from typing import List

from .data_models import (
    ABSOLUTE,
    INITIAL,
    INSTALLMENT,
    REMAINDER,
    CashFlow,
    ComparisonResult,
    NpvResult,
    PaymentScheme,
    SchemeResult,
    SharedTerms,
)
from .normalizer import normalize
from .utils import clamp, coerce_installment_count, finite_or_zero


def monthly_effective_rate(annual_rate_pct: float) -> float:
    """Return the monthly rate ``i`` such that ``(1 + i) ** 12 == 1 + r / 100``.

    Rates below -100 % have no real monthly equivalent; NaN is returned so
    that every discounted value built on it ends up reported as 0.
    """
    growth = 1 + finite_or_zero(annual_rate_pct) / 100
    if growth < 0:
        return math.nan
    return growth ** (1 / 12) - 1


def _discount(amount: float, rate: float, period: int) -> float:
    """Return ``amount / (1 + rate) ** period`` following IEEE semantics.

    Python raises where IEEE arithmetic would produce infinities; those cases
    are mapped back to their limits so NaN/inf handling stays in one place.
    """
    try:
        factor = (1 + rate) ** period
    except OverflowError:
        return 0.0
    if factor == 0:
        return math.nan if amount == 0 else math.copysign(math.inf, amount)
    return amount / factor


def _annuity_pv(payment: float, rate: float, periods: int) -> float:
    """Return the value at time 0 of ``periods`` equal payments due at ``1..periods``.

    Closed form of the sum of ``payment / (1 + rate) ** t``:

        payment * (1 - (1 + rate) ** -n) / rate

    which reduces to ``payment * n`` when the rate is zero.
    """
    if periods <= 0:
        return 0.0
    if rate == 0:
        return payment * periods
    return payment * (1 - _discount(1.0, rate, periods)) / rate


def _fractions(initial_pct: float, installment_pct: float):
    p1 = clamp(finite_or_zero(initial_pct) / 100, 0, 1)
    pm = clamp(finite_or_zero(installment_pct) / 100, 0, 1)
    pr = clamp(1 - (p1 + pm), 0, 1)
    return p1, pm, pr


def compute_npv(
    base_value: float,
    annual_rate_pct: float,
    initial_pct: float,
    installment_pct: float,
    installment_count: int,
    defer_remainder: bool = False,
) -> NpvResult:
    """Compute the present value of a scheme's cash flows.

    Parameters
    ----------
    base_value: float
        The property value the shares refer to.
    annual_rate_pct: float
        Annual nominal discount rate in percent (``12`` means 12 %).
    initial_pct, installment_pct: float
        Shares of ``base_value`` paid up front and spread over the
        installments, in percent. The remainder share is their complement,
        floored at 0; it is never renormalized.
    installment_count: int
        Number of equal monthly installments, paid at periods ``1..N``.
        Floored to a non-negative integer.
    defer_remainder: bool
        Pay the remainder at period ``N + 1`` instead of ``N``.

    Returns
    -------
    NpvResult
        Monthly rate, per-component nominal and present values and their
        total. Non-finite values are reported as 0.
    """
    base_value = finite_or_zero(base_value)
    n = coerce_installment_count(installment_count)
    p1, pm, pr = _fractions(initial_pct, installment_pct)
    i = monthly_effective_rate(annual_rate_pct)

    initial_payment = base_value * p1  # t = 0
    installment_total = base_value * pm
    installment_payment = installment_total / n if n > 0 else 0.0
    installments_pv = _annuity_pv(installment_payment, i, n)

    remainder_period = n + (1 if defer_remainder else 0)
    remainder_payment = base_value * max(pr, 0)
    if remainder_period > 0:
        remainder_pv = _discount(remainder_payment, i, remainder_period)
    else:
        remainder_pv = remainder_payment

    npv = initial_payment + installments_pv + remainder_pv

    return NpvResult(
        monthly_rate=finite_or_zero(i),
        initial_pct=finite_or_zero(initial_pct),
        installment_pct=finite_or_zero(installment_pct),
        initial_fraction=p1,
        installment_fraction=pm,
        remainder_fraction=pr,
        initial_payment=finite_or_zero(initial_payment),
        installment_total=finite_or_zero(installment_total),
        installment_payment=finite_or_zero(installment_payment),
        installments_pv=finite_or_zero(installments_pv),
        remainder_payment=finite_or_zero(remainder_payment),
        remainder_pv=finite_or_zero(remainder_pv),
        npv=finite_or_zero(npv),
        installment_count=n,
        remainder_period=remainder_period,
        exceeds_hundred=p1 + pm > 1,
    )


def cash_flows(
    base_value: float,
    annual_rate_pct: float,
    initial_pct: float,
    installment_pct: float,
    installment_count: int,
    defer_remainder: bool = False,
) -> List[CashFlow]:
    """List every nominal payment of a scheme with its discounted value.

    The present values add up to ``compute_npv(...).npv``. Installments
    are only listed when ``installment_count > 0``; when the remainder is
    due on the same period as the last installment it is listed after it.
    """
    result = compute_npv(base_value, annual_rate_pct, initial_pct, installment_pct, installment_count, defer_remainder)
    i = monthly_effective_rate(annual_rate_pct)

    def flow(period: int, component: str, amount: float) -> CashFlow:
        factor = _discount(1.0, i, period)
        return CashFlow(
            period=period,
            component=component,
            amount=amount,
            discount_factor=finite_or_zero(factor),
            present_value=finite_or_zero(_discount(amount, i, period)),
        )

    flows = [flow(0, INITIAL, result.initial_payment)]
    for t in range(1, result.installment_count + 1):
        flows.append(flow(t, INSTALLMENT, result.installment_payment))
    flows.append(flow(result.remainder_period, REMAINDER, result.remainder_payment))
    return flows


def evaluate_scheme(terms: SharedTerms, scheme: PaymentScheme) -> SchemeResult:
    """Normalize a scheme's raw shares and compute its NPV under ``terms``."""
    shares = normalize(terms.base_value, scheme.input_mode, scheme.initial_raw, scheme.installment_raw)
    result = compute_npv(
        terms.base_value,
        terms.annual_rate_pct,
        shares.initial_pct,
        shares.installment_pct,
        terms.installment_count,
        scheme.defer_remainder,
    )
    return SchemeResult(scheme=scheme, shares=shares, result=result)


def warning_for(scheme_result: SchemeResult) -> str | None:
    """Return the advisory message for a scheme whose shares exceed the base value."""
    if not scheme_result.shares.exceeds_base:
        return None
    name = scheme_result.scheme.name
    if scheme_result.scheme.input_mode == ABSOLUTE:
        return f"In {name}, the initial payment plus installments exceed the base value."
    return f"In {name}, initial % plus installments % exceed 100%. Adjust them so the remainder is not negative."


def compare_schemes(terms: SharedTerms, traditional: PaymentScheme, custom: PaymentScheme) -> ComparisonResult:
    """Evaluate both schemes independently and report the NPV difference.

    ``npv_difference`` is Traditional minus Custom.
    """
    traditional_result = evaluate_scheme(terms, traditional)
    custom_result = evaluate_scheme(terms, custom)
    warnings = [w for w in (warning_for(traditional_result), warning_for(custom_result)) if w]
    return ComparisonResult(
        terms=terms,
        traditional=traditional_result,
        custom=custom_result,
        npv_difference=finite_or_zero(traditional_result.result.npv - custom_result.result.npv),
        warnings=warnings,
    )
