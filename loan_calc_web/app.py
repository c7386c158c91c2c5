"""Flask front end for the loan calculator.

Renders the calculator form, summary cards, yearly breakdown and schedule
table, and exposes the same numbers as JSON for chart widgets. Every request
recomputes the whole result from the submitted fields; nothing is stored
between requests.
"""

import json
import logging
import os

from flask import Flask, jsonify, render_template, request

from loan_calc.aggregation import chart_rows, yearly_summary
from loan_calc.engine import compute_amortization
from loan_calc.formatter import format_currency, serialize_schedule, serialize_yearly, summarize
from loan_calc.validator import parse_parameters

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.jinja_env.filters["currency"] = format_currency

MAX_PREVIEW_ROWS = 120
EMPTY_RESULT_MESSAGE = "Enter valid loan details to see the schedule."

DEFAULT_FORM = {
    "principal": "250000",
    "rate": "3.5",
    "term": "30",
    "balloon": "0",
    "payment": "",
    "override": "",
}


def _form_values(source) -> dict:
    values = dict(DEFAULT_FORM)
    for key in values:
        if key in source:
            values[key] = source.get(key, "").strip()
    return values


def _override_active(values: dict) -> bool:
    return values.get("override", "").lower() in {"1", "on", "true", "yes"}


def _run_analysis(values: dict):
    """Validate the raw field values and compute the result.

    The payment field is only ever passed to the engine as an override; the
    computed payment shown in it when the override is off is display only.
    """
    params = parse_parameters(values["principal"], values["rate"], values["term"], values["balloon"])
    override = _override_active(values)
    result = compute_amortization(params, override, values["payment"] or None)
    yearly = yearly_summary(result.schedule, params.term_years) if params else []
    return result, yearly


def _result_payload(result, yearly) -> dict:
    return {
        "summary": summarize(result),
        "yearly": serialize_yearly(yearly),
        "chart": chart_rows(yearly),
        "schedule": serialize_schedule(result.schedule),
    }


@app.route("/", methods=["GET", "POST"])
def index():
    values = _form_values(request.values)
    show_full_schedule = request.values.get("show_full_schedule") == "1"
    result, yearly = _run_analysis(values)

    schedule = serialize_schedule(result.schedule)
    truncated = 0
    if not show_full_schedule and len(schedule) > MAX_PREVIEW_ROWS:
        truncated = len(schedule) - MAX_PREVIEW_ROWS
        schedule = schedule[:MAX_PREVIEW_ROWS]

    override = _override_active(values)
    payment_display = values["payment"] if override else f"{result.computed_payment:.2f}"

    return render_template(
        "index.html",
        form=values,
        override=override,
        payment_display=payment_display,
        summary=summarize(result),
        yearly=serialize_yearly(yearly),
        chart_payload=json.dumps(chart_rows(yearly)),
        schedule=schedule,
        truncated=truncated,
        show_full_schedule=show_full_schedule,
        empty_message=EMPTY_RESULT_MESSAGE if result.is_empty else None,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.route("/api/amortization", methods=["GET", "POST"])
def amortization_api():
    source = request.get_json(silent=True) if request.is_json else None
    if isinstance(source, dict):
        source = {k: str(v) for k, v in source.items() if v is not None}
    else:
        source = request.values
    values = _form_values(source)
    result, yearly = _run_analysis(values)
    if result.is_empty:
        logger.info("Amortization request with invalid parameters: %s", values)
    return jsonify(_result_payload(result, yearly))


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOAN_CALC_LOG_LEVEL", "INFO").upper())
    print("Starting Loan Calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
