"""Command-line interface for the pre-sale NPV calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can evaluate a single payment scheme or compare a
Traditional and a Custom scheme under the same terms. Results can be printed
to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .data_models import ABSOLUTE, INPUT_MODES, MAX_INSTALLMENTS, PERCENT, CashFlow, PaymentScheme, SharedTerms
from .engine import cash_flows, compare_schemes, evaluate_scheme, warning_for
from .formatter import print_cash_flows, print_comparison, print_scheme, print_warnings
from .utils import coerce_installment_count, parse_amount, parse_percent


def parse_share(value: str, input_mode: str) -> float:
    """Parse a share option: a percentage in percent mode, an amount in absolute mode."""
    try:
        if input_mode == ABSOLUTE:
            return parse_amount(value)
        return parse_percent(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_terms_from_options(base_value: str, rate: str, installments: int) -> SharedTerms:
    try:
        base = parse_amount(base_value)
        rate_pct = parse_percent(rate)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    if base < 0:
        raise click.BadParameter("Base value must not be negative")
    if installments < 0:
        raise click.BadParameter("Number of installments must not be negative")
    if installments > MAX_INSTALLMENTS:
        raise click.BadParameter(f"Number of installments must not exceed {MAX_INSTALLMENTS}")
    return SharedTerms(
        base_value=base,
        annual_rate_pct=rate_pct,
        installment_count=coerce_installment_count(installments),
    )


def build_scheme_from_options(
    name: str,
    input_mode: str,
    initial: str,
    installment_share: str,
    defer_remainder: bool,
) -> PaymentScheme:
    input_mode = input_mode.lower()
    if input_mode not in INPUT_MODES:
        raise click.BadParameter(f"Mode must be 'percent' or 'absolute'; got {input_mode}")
    return PaymentScheme(
        name=name,
        input_mode=input_mode,
        initial_raw=parse_share(initial, input_mode),
        installment_raw=parse_share(installment_share, input_mode),
        defer_remainder=defer_remainder,
    )


def parse_scheme_opts(name: str, opts: str) -> PaymentScheme:
    """Build a scheme from a quoted option string such as ``"--initial 10 --installment-share 60"``."""
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {
        "input_mode": PERCENT,
        "initial": None,
        "installment_share": None,
        "defer_remainder": False,
    }
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "--defer-remainder":
            params["defer_remainder"] = True
            i += 1
            continue
        if token not in ("-m", "--mode", "-i", "--initial", "-s", "--installment-share"):
            raise click.BadParameter(f"Unknown option in {name} scheme: {token}")
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Option {token} in {name} scheme needs a value")
        value = tokens[i + 1]
        if token in ("-m", "--mode"):
            params["input_mode"] = value
        elif token in ("-i", "--initial"):
            params["initial"] = value
        else:
            params["installment_share"] = value
        i += 2
    for required in ("initial", "installment_share"):
        if params[required] is None:
            raise click.BadParameter(f"{name} scheme missing required option {required}")
    return build_scheme_from_options(name, **params)


def _flows_for(terms: SharedTerms, scheme: PaymentScheme) -> List[CashFlow]:
    shares = evaluate_scheme(terms, scheme).shares
    return cash_flows(
        terms.base_value,
        terms.annual_rate_pct,
        shares.initial_pct,
        shares.installment_pct,
        terms.installment_count,
        scheme.defer_remainder,
    )


def export_to_json(path: Path, data: Dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, flows: List[CashFlow]) -> None:
    """Export a scheme's cash flows to a CSV file."""
    header = ["Period", "Component", "Amount", "Discount_Factor", "Present_Value"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for flow in flows:
            writer.writerow([flow.period, flow.component, flow.amount, flow.discount_factor, flow.present_value])


shared_options = [
    click.option("--base-value", "-b", "base_value", default="5m", show_default=True, help="Property value (accepts 500k, 5m)"),
    click.option("--rate", "-r", "rate", default="12", show_default=True, help="Annual discount rate (percent)"),
    click.option("--installments", "-n", "installments", default=24, show_default=True, type=int, help="Number of monthly installments"),
]


def with_shared_options(func):
    for option in reversed(shared_options):
        func = option(func)
    return func


@click.group()
def cli() -> None:
    """Compare pre-sale payment schemes by net present value."""
    pass


@cli.command()
@with_shared_options
@click.option("--mode", "-m", "input_mode", type=click.Choice(list(INPUT_MODES)), default=PERCENT, help="How shares are entered")
@click.option("--initial", "-i", "initial", required=True, help="Initial payment (percent or amount)")
@click.option("--installment-share", "-s", "installment_share", required=True, help="Total paid in installments (percent or amount)")
@click.option("--defer-remainder", is_flag=True, help="Pay the remainder one month after the last installment")
@click.option("--name", "name", default="Scheme", help="Scheme name shown in the output")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def npv(
    base_value: str,
    rate: str,
    installments: int,
    input_mode: str,
    initial: str,
    installment_share: str,
    defer_remainder: bool,
    name: str,
    output: Optional[str],
) -> None:
    """Compute the NPV of a single payment scheme."""
    terms = build_terms_from_options(base_value, rate, installments)
    scheme = build_scheme_from_options(name, input_mode, initial, installment_share, defer_remainder)
    scheme_result = evaluate_scheme(terms, scheme)
    warning = warning_for(scheme_result)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, scheme_result.to_dict())
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, _flows_for(terms, scheme))
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Result exported to {path}")
    else:
        print_scheme(terms.base_value, scheme_result)
    if warning:
        print_warnings([warning])


@cli.command()
@with_shared_options
@click.option("--traditional", "traditional", required=True, help="Traditional scheme options quoted string")
@click.option("--custom", "custom", required=True, help="Custom scheme options quoted string")
@click.option("--flows", "show_flows", is_flag=True, help="Also print every cash flow of both schemes")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def compare(
    base_value: str,
    rate: str,
    installments: int,
    traditional: str,
    custom: str,
    show_flows: bool,
    output: Optional[str],
) -> None:
    """Compare a Traditional and a Custom scheme.

    Schemes are provided as quoted option strings, for example:

        presale-npv compare -b 5m -r 12 -n 24 --traditional "-i 10 -s 60" --custom "-i 30 -s 50 --defer-remainder"
    """
    terms = build_terms_from_options(base_value, rate, installments)
    traditional_scheme = parse_scheme_opts("Traditional", traditional)
    custom_scheme = parse_scheme_opts("Custom", custom)
    comparison = compare_schemes(terms, traditional_scheme, custom_scheme)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Comparison export must use .json extension")
        export_to_json(path, comparison.to_dict())
        click.echo(f"Comparison exported to {path}")
    else:
        print_scheme(terms.base_value, comparison.traditional)
        print_scheme(terms.base_value, comparison.custom)
        print_comparison(comparison)
        if show_flows:
            for scheme in (traditional_scheme, custom_scheme):
                click.echo(f"Cash flows: {scheme.name}")
                print_cash_flows(_flows_for(terms, scheme))
    print_warnings(comparison.warnings)


if __name__ == "__main__":
    cli()
