"""Conversion of user-entered shares into normalized percentages.

A scheme's initial payment and installment pool can be entered either as
percentages of the base value or as currency amounts. ``normalize`` turns
both forms into the same triple of percentages so the engine only ever sees
one representation. Nothing here raises: out-of-range input is clamped and
the caller decides whether to show the ``exceeds_base`` warning.
"""

from __future__ import annotations

from typing import Tuple

from .data_models import ABSOLUTE, NormalizedShares
from .utils import clamp, finite_or_zero


def _amount_to_pct(amount: float, base_value: float) -> float:
    if base_value <= 0:
        return 0.0
    return finite_or_zero(amount / base_value * 100)


def shares_exceed_base(base_value: float, input_mode: str, initial_raw: float, installment_raw: float) -> bool:
    """Return True when the first two shares add up to more than the whole.

    In percent mode the clamped percentages are compared against 100; in
    absolute mode the raw amounts are compared against the base value.
    """
    base_value = finite_or_zero(base_value)
    initial_raw = finite_or_zero(initial_raw)
    installment_raw = finite_or_zero(installment_raw)
    if input_mode == ABSOLUTE:
        return initial_raw + installment_raw > base_value
    return clamp(initial_raw, 0, 100) + clamp(installment_raw, 0, 100) > 100


def normalize(base_value: float, input_mode: str, initial_raw: float, installment_raw: float) -> NormalizedShares:
    """Return the initial, installment and remainder shares in percent.

    Parameters
    ----------
    base_value: float
        The value the shares are a part of. Only used in absolute mode.
    input_mode: str
        ``"percent"`` or ``"absolute"``. Anything other than ``"absolute"``
        is read as percentages.
    initial_raw, installment_raw: float
        Percentages (0-100) or currency amounts depending on ``input_mode``.

    Returns
    -------
    NormalizedShares
        Each percentage in ``[0, 100]``. The remainder is the complement of
        the first two, floored at 0; the three may therefore add up to more
        than 100 only when ``exceeds_base`` is set.
    """
    base_value = finite_or_zero(base_value)
    initial_raw = finite_or_zero(initial_raw)
    installment_raw = finite_or_zero(installment_raw)

    if input_mode == ABSOLUTE:
        initial_pct = clamp(_amount_to_pct(initial_raw, base_value), 0, 100)
        installment_pct = clamp(_amount_to_pct(installment_raw, base_value), 0, 100)
    else:
        initial_pct = clamp(initial_raw, 0, 100)
        installment_pct = clamp(installment_raw, 0, 100)
    remainder_pct = clamp(100 - (initial_pct + installment_pct), 0, 100)

    return NormalizedShares(
        initial_pct=initial_pct,
        installment_pct=installment_pct,
        remainder_pct=remainder_pct,
        exceeds_base=shares_exceed_base(base_value, input_mode, initial_raw, installment_raw),
    )


def pct_to_amount(pct: float, base_value: float) -> float:
    """Return the currency amount that ``pct`` percent of ``base_value`` represents."""
    return finite_or_zero(finite_or_zero(base_value) * finite_or_zero(pct) / 100)


def equivalent_amounts(base_value: float, shares: NormalizedShares) -> Tuple[float, float, float]:
    """Return the currency equivalents of the three shares, for display in both units."""
    return (
        pct_to_amount(shares.initial_pct, base_value),
        pct_to_amount(shares.installment_pct, base_value),
        pct_to_amount(shares.remainder_pct, base_value),
    )


def raw_equivalent_pcts(base_value: float, initial_raw: float, installment_raw: float) -> Tuple[float, float, float]:
    """Return entered amounts as percentages of ``base_value`` without clamping.

    Shown next to absolute-mode inputs so that an amount above the base value
    reads as more than 100 %. A zero base value is treated as 1; the
    remainder is floored at 0.
    """
    base = finite_or_zero(base_value) or 1.0
    initial_pct = finite_or_zero(finite_or_zero(initial_raw) / base * 100)
    installment_pct = finite_or_zero(finite_or_zero(installment_raw) / base * 100)
    remainder_pct = max(0.0, 100 - (initial_pct + installment_pct))
    return initial_pct, installment_pct, remainder_pct
