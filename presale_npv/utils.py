"""Utility functions for the pre-sale NPV calculator.

This module provides helpers for turning user input into Python numbers and
for keeping arithmetic results inside a displayable range. The calculation
core never raises on odd numbers; it relies on ``clamp``,
``finite_or_zero`` and ``coerce_installment_count`` to substitute safe
defaults instead. The ``parse_*`` helpers are meant for the outer layers
(CLI, web form) and raise ``ValueError`` where noted.
"""

from __future__ import annotations

import math
import re
from typing import Any

_CURRENCY_NOISE = re.compile(r"[^0-9.,-]")


def clamp(value: float, low: float, high: float) -> float:
    """Return ``value`` limited to the closed interval ``[low, high]``."""
    return min(high, max(low, value))


def finite_or_zero(value: Any) -> float:
    """Return ``value`` as a float, or ``0.0`` if it is NaN, infinite or not a number."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_installment_count(value: Any) -> int:
    """Floor ``value`` to a non-negative integer.

    Negative, non-finite and non-numeric input all become ``0``.
    """
    number = finite_or_zero(value)
    return max(0, math.floor(number))


def parse_currency(text: Any) -> float:
    """Parse a masked currency string leniently.

    Everything except digits, dots, commas and minus signs is dropped, commas
    are treated as thousands separators and only the first dot is kept as the
    decimal point. Text that still does not parse yields ``0.0``, so partial
    input such as ``"$"`` or ``""`` is accepted while the user is typing.
    """
    if text is None:
        return 0.0
    clean = _CURRENCY_NOISE.sub("", str(text)).replace(",", "")
    first_dot = clean.find(".")
    if first_dot != -1:
        clean = clean[: first_dot + 1] + clean[first_dot + 1 :].replace(".", "")
    try:
        return finite_or_zero(float(clean))
    except ValueError:
        return 0.0


def parse_percent(text: Any) -> float:
    """Parse a percentage typed as ``"12"``, ``"12.5%"`` or ``"12,5"``.

    The value stays in percent units (``"12"`` means 12 %, not 0.12).

    Raises
    ------
    ValueError
        If the text is not a finite number.
    """
    raw = str(text).strip().replace("%", "").replace(",", ".", 1)
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid percentage: {text}") from exc
    if not math.isfinite(value):
        raise ValueError(f"Invalid percentage: {text}")
    return value


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("5000000"), thousands separators ("5,000,000"), a
    leading currency sign and shorthand with ``k``/``m`` suffixes (e.g.
    "500k" meaning 500_000).

    Raises
    ------
    ValueError
        If the string is not a valid amount.
    """
    cleaned = value.strip().lower().replace(",", "").lstrip("$").strip()
    factor = 1.0
    if cleaned.endswith("k"):
        factor = 1_000.0
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = 1_000_000.0
        cleaned = cleaned[:-1]
    try:
        amount = float(cleaned) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc
    if not math.isfinite(amount):
        raise ValueError(f"Invalid amount: {value}")
    return amount
