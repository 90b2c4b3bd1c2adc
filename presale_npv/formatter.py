"""Output helpers for the pre-sale NPV calculator.

This module renders amounts and percentages the way the calculator shows
them everywhere (two decimal places, non-finite values as zero) and prints
scheme results and the Traditional vs. Custom comparison as plain text
tables. ``click.echo`` is used for output so the CLI commands can be tested
with ``CliRunner``.
"""

from __future__ import annotations

from typing import Iterable

import click

from .data_models import CashFlow, ComparisonResult, SchemeResult
from .normalizer import equivalent_amounts
from .utils import finite_or_zero

RULE_WIDTH = 72


def format_currency(value: float) -> str:
    """Format ``value`` as a two-decimal amount with thousands separators, e.g. ``$1,234.50``."""
    amount = finite_or_zero(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_pct(value_pct: float) -> str:
    """Format a value that is already in percent units, e.g. ``12.5`` -> ``12.50%``."""
    return f"{finite_or_zero(value_pct):.2f}%"


def format_fraction(value: float) -> str:
    """Format a fraction as a percentage, e.g. ``0.0094888`` -> ``0.95%``."""
    return format_pct(finite_or_zero(value) * 100)


def print_scheme(base_value: float, scheme_result: SchemeResult) -> None:
    """Print one scheme's parameters in both units and its present values."""
    shares = scheme_result.shares
    result = scheme_result.result
    initial_amt, installment_amt, remainder_amt = equivalent_amounts(base_value, shares)
    click.echo(f"Scheme: {scheme_result.scheme.name}")
    click.echo("-" * RULE_WIDTH)
    click.echo(f"Base value            : {format_currency(base_value)}")
    click.echo(f"Monthly effective rate: {format_fraction(result.monthly_rate)}")
    click.echo(f"Installments          : {result.installment_count}")
    click.echo(f"Initial payment       : {format_pct(shares.initial_pct)} / {format_currency(initial_amt)}")
    click.echo(f"Installments total    : {format_pct(shares.installment_pct)} / {format_currency(installment_amt)}")
    click.echo(f"Remainder             : {format_pct(shares.remainder_pct)} / {format_currency(remainder_amt)}")
    if scheme_result.scheme.defer_remainder:
        click.echo(f"Remainder paid in     : month {result.remainder_period} (deferred)")
    click.echo(f"Per installment       : {format_currency(result.installment_payment)}")
    click.echo(f"PV installments       : {format_currency(result.installments_pv)}")
    click.echo(f"PV remainder          : {format_currency(result.remainder_pv)}")
    click.echo(f"NPV                   : {format_currency(result.npv)}")
    click.echo("-" * RULE_WIDTH)


def print_comparison(comparison: ComparisonResult) -> None:
    """Print both schemes side by side and the NPV difference.

    A positive difference means the Traditional scheme has the higher present
    value; a negative one means the Custom scheme is worth more.
    """
    trad = comparison.traditional
    custom = comparison.custom
    click.echo("Comparison")
    click.echo("=" * RULE_WIDTH)
    click.echo(f"{'Metric':24s} {trad.scheme.name:>15s} {custom.scheme.name:>15s}")
    rows = [
        ("Initial %", format_pct(trad.shares.initial_pct), format_pct(custom.shares.initial_pct)),
        ("Installments %", format_pct(trad.shares.installment_pct), format_pct(custom.shares.installment_pct)),
        ("Remainder %", format_pct(trad.shares.remainder_pct), format_pct(custom.shares.remainder_pct)),
        (
            "Per installment",
            format_currency(trad.result.installment_payment),
            format_currency(custom.result.installment_payment),
        ),
        ("NPV", format_currency(trad.result.npv), format_currency(custom.result.npv)),
    ]
    for label, v1, v2 in rows:
        click.echo(f"{label:24s} {v1:>15s} {v2:>15s}")
    click.echo("=" * RULE_WIDTH)
    click.echo(f"NPV difference ({trad.scheme.name} - {custom.scheme.name}): {format_currency(comparison.npv_difference)}")


def print_warnings(warnings: Iterable[str]) -> None:
    for message in warnings:
        click.secho(f"Warning: {message}", fg="yellow", err=True)


def print_cash_flows(flows: Iterable[CashFlow]) -> None:
    """Print a scheme's cash flows as a tab separated table."""
    click.echo("\t".join(["Period", "Component", "Amount", "Discount", "PV"]))
    for flow in flows:
        click.echo(
            "\t".join(
                [
                    str(flow.period),
                    flow.component,
                    f"{flow.amount:.2f}",
                    f"{flow.discount_factor:.6f}",
                    f"{flow.present_value:.2f}",
                ]
            )
        )
