"""Flask front end for the pre-sale NPV calculator.

The page shows the shared terms (base value, annual discount rate, number of
installments) and the Traditional and Custom schemes side by side. Every
submit recomputes both schemes from scratch; nothing is stored between
requests. ``POST /api/compare`` exposes the same comparison as JSON.
"""

import math
import os
from typing import Any, Dict, Tuple

from flask import Flask, jsonify, render_template, request

from presale_npv.data_models import (
    ABSOLUTE,
    DEFAULT_ABSOLUTE_AMOUNTS,
    DEFAULT_CUSTOM,
    DEFAULT_TERMS,
    DEFAULT_TRADITIONAL,
    INPUT_MODES,
    MAX_INSTALLMENTS,
    PERCENT,
    PaymentScheme,
    SharedTerms,
)
from presale_npv.engine import compare_schemes
from presale_npv.fields import CurrencyField, PercentField
from presale_npv.formatter import format_currency, format_fraction, format_pct
from presale_npv.normalizer import equivalent_amounts, raw_equivalent_pcts
from presale_npv.utils import coerce_installment_count

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")

def _submitted(form, name: str, field):
    """Feed a submitted text into ``field`` the way a user would type it, then leave the field."""
    text = form.get(name)
    if text is not None:
        field.focus()
        field.type(text)
    field.blur()
    return field


def _check_installments(count: int) -> int:
    if count > MAX_INSTALLMENTS:
        raise ValueError(f"Number of installments must not exceed {MAX_INSTALLMENTS}")
    return count


def _form_to_terms(form) -> Tuple[SharedTerms, Dict[str, str]]:
    base_field = _submitted(form, "base_value", CurrencyField(DEFAULT_TERMS.base_value))
    rate_field = _submitted(form, "rate", PercentField(DEFAULT_TERMS.annual_rate_pct))
    installments = _check_installments(coerce_installment_count(form.get("installments", DEFAULT_TERMS.installment_count)))
    terms = SharedTerms(
        base_value=max(base_field.value, 0.0),
        annual_rate_pct=rate_field.value,
        installment_count=installments,
    )
    display = {"base_value": base_field.text, "rate": rate_field.text, "installments": str(installments)}
    return terms, display


def _form_to_scheme(form, prefix: str, default: PaymentScheme, submitted: bool) -> Tuple[PaymentScheme, Dict[str, Any]]:
    mode = form.get(f"{prefix}_mode", default.input_mode)
    if mode not in INPUT_MODES:
        mode = PERCENT
    abs_initial, abs_installment = DEFAULT_ABSOLUTE_AMOUNTS[default.name]
    initial_pct = _submitted(form, f"{prefix}_initial_pct", PercentField(default.initial_raw))
    installment_pct = _submitted(form, f"{prefix}_installment_pct", PercentField(default.installment_raw))
    initial_abs = _submitted(form, f"{prefix}_initial_abs", CurrencyField(abs_initial))
    installment_abs = _submitted(form, f"{prefix}_installment_abs", CurrencyField(abs_installment))
    # Unchecked checkboxes are simply missing from a submitted form.
    defer = form.get(f"{prefix}_defer_remainder") == "1" if submitted else default.defer_remainder
    show = form.get(f"{prefix}_show_results") == "1" if submitted else True

    source = (initial_abs, installment_abs) if mode == ABSOLUTE else (initial_pct, installment_pct)
    scheme = PaymentScheme(name=default.name, defer_remainder=defer).with_mode(mode, source[0].value, source[1].value)
    display = {
        "prefix": prefix,
        "mode": mode,
        "initial_pct": initial_pct.text,
        "installment_pct": installment_pct.text,
        "initial_abs": initial_abs.text,
        "installment_abs": installment_abs.text,
        "defer_remainder": defer,
        "show_results": show,
    }
    return scheme, display


def _scheme_view(terms: SharedTerms, scheme_result, display: Dict[str, Any]) -> Dict[str, Any]:
    shares = scheme_result.shares
    result = scheme_result.result
    scheme = scheme_result.scheme
    initial_amt, installment_amt, remainder_amt = equivalent_amounts(terms.base_value, shares)
    if scheme.input_mode == ABSOLUTE:
        pcts = raw_equivalent_pcts(terms.base_value, scheme.initial_raw, scheme.installment_raw)
        equivalents = [f"% equiv.: {format_pct(pct)}" for pct in pcts]
    else:
        equivalents = [f"$ equiv.: {format_currency(amt)}" for amt in (initial_amt, installment_amt, remainder_amt)]
    view = dict(display)
    view.update(
        {
            "name": scheme.name,
            "initial": f"{format_pct(shares.initial_pct)} · {format_currency(initial_amt)}",
            "installments": f"{format_pct(shares.installment_pct)} · {format_currency(installment_amt)}",
            "remainder": f"{format_pct(shares.remainder_pct)} · {format_currency(remainder_amt)}",
            "remainder_pct": PercentField(shares.remainder_pct, read_only=True).text,
            "remainder_abs": CurrencyField(max(0.0, terms.base_value - scheme.initial_raw - scheme.installment_raw), read_only=True).text,
            "equivalents": equivalents,
            "monthly_rate": format_fraction(result.monthly_rate),
            "installment_count": result.installment_count,
            "installment_payment": format_currency(result.installment_payment),
            "npv": format_currency(result.npv),
            "exceeds_base": shares.exceeds_base,
        }
    )
    return view


def _payload_number(data: Dict[str, Any], key: str, default: Any = None) -> float:
    value = data.get(key, default)
    if value is None:
        raise ValueError(f"Missing field: {key}")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"Field {key} must be a finite number")
    return float(value)


def _payload_flag(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"Field {key} must be true or false")
    return value


def _payload_to_scheme(data: Dict[str, Any], default: PaymentScheme) -> PaymentScheme:
    if not isinstance(data, dict):
        raise ValueError(f"Scheme {default.name} must be an object")
    mode = data.get("input_mode", PERCENT)
    if mode not in INPUT_MODES:
        raise ValueError(f"Scheme {default.name}: input_mode must be 'percent' or 'absolute'")
    return PaymentScheme(
        name=default.name,
        input_mode=mode,
        initial_raw=_payload_number(data, "initial"),
        installment_raw=_payload_number(data, "installment"),
        defer_remainder=_payload_flag(data, "defer_remainder"),
    )


def _payload_to_inputs(data: Any) -> Tuple[SharedTerms, PaymentScheme, PaymentScheme]:
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    base_value = _payload_number(data, "base_value", DEFAULT_TERMS.base_value)
    if base_value < 0:
        raise ValueError("base_value must not be negative")
    installments = _payload_number(data, "installment_count", DEFAULT_TERMS.installment_count)
    if installments < 0:
        raise ValueError("installment_count must not be negative")
    terms = SharedTerms(
        base_value=base_value,
        annual_rate_pct=_payload_number(data, "annual_rate_pct", DEFAULT_TERMS.annual_rate_pct),
        installment_count=_check_installments(coerce_installment_count(installments)),
    )
    traditional = _payload_to_scheme(data.get("traditional", {}), DEFAULT_TRADITIONAL)
    custom = _payload_to_scheme(data.get("custom", {}), DEFAULT_CUSTOM)
    return terms, traditional, custom


@app.route("/", methods=["GET", "POST"])
def index():
    submitted = request.method == "POST"
    form = request.form if submitted else {}
    error = None
    try:
        terms, shared_display = _form_to_terms(form)
    except ValueError as exc:
        error = str(exc)
        app.logger.warning("rejected form input: %s", exc)
        form = {key: value for key, value in form.items() if key != "installments"}
        terms, shared_display = _form_to_terms(form)
    traditional, trad_display = _form_to_scheme(form, "t", DEFAULT_TRADITIONAL, submitted)
    custom, custom_display = _form_to_scheme(form, "c", DEFAULT_CUSTOM, submitted)

    comparison = compare_schemes(terms, traditional, custom)
    for message in comparison.warnings:
        app.logger.warning(message)
    app.logger.debug("comparison computed: %s", comparison.to_dict())

    return render_template(
        "index.html",
        shared=shared_display,
        monthly_rate=format_fraction(comparison.traditional.result.monthly_rate),
        schemes=[
            _scheme_view(terms, comparison.traditional, trad_display),
            _scheme_view(terms, comparison.custom, custom_display),
        ],
        warnings=comparison.warnings,
        error=error,
        npv_difference=format_currency(comparison.npv_difference),
        asset_version=app.config["ASSET_VERSION"],
    )


@app.post("/api/compare")
def api_compare():
    try:
        terms, traditional, custom = _payload_to_inputs(request.get_json(silent=True))
    except ValueError as exc:
        app.logger.warning("rejected comparison request: %s", exc)
        return jsonify({"error": str(exc)}), 400
    comparison = compare_schemes(terms, traditional, custom)
    return jsonify(comparison.to_dict())


if __name__ == "__main__":
    host = os.environ.get("PRESALE_NPV_HOST", "0.0.0.0")
    port = int(os.environ.get("PRESALE_NPV_PORT", "8710"))
    print("Starting pre-sale NPV calculator web app...")
    app.run(host=host, port=port, debug=True)
