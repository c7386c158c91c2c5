"""Command-line interface for the loan calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization schedules, view summaries or
the yearly principal/interest breakdown, or compare two loan scenarios.
Results can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
import os
import shlex
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import click

from .aggregation import yearly_summary
from .data_models import AmortizationResult
from .engine import compute_amortization
from .formatter import (
    print_comparison,
    print_schedule,
    print_summary,
    print_yearly,
    serialize_schedule,
    serialize_yearly,
    summarize,
)
from .utils import parse_amount
from .validator import parse_parameters

logger = logging.getLogger(__name__)

MAX_ROWS = 120
EMPTY_RESULT_MESSAGE = "Enter valid loan details to see the schedule."


def _amount(value: str, label: str) -> str:
    """Expand ``k``/``m`` shorthand, leaving range checks to the validator."""
    try:
        return str(parse_amount(value))
    except ValueError:
        raise click.BadParameter(f"Invalid {label}: {value}")


def run_calculation(
    principal: str,
    rate: str,
    years: str,
    balloon: Optional[str] = None,
    payment: Optional[str] = None,
) -> AmortizationResult:
    """Parse option strings and run the engine.

    Supplying ``payment`` turns the manual override on.
    """
    params = parse_parameters(
        _amount(principal, "principal"),
        rate.strip().rstrip("%"),
        years,
        _amount(balloon, "balloon") if balloon else None,
    )
    override_payment = _amount(payment, "payment") if payment else None
    return compute_amortization(params, override_payment is not None, override_payment)


def _require_result(result: AmortizationResult) -> None:
    if result.is_empty:
        raise click.ClickException(EMPTY_RESULT_MESSAGE)


def export_to_json(path: Path, result: AmortizationResult) -> None:
    """Export summary, yearly breakdown and schedule to a JSON file."""
    yearly = yearly_summary(result.schedule, result.params.term_years) if result.params else []
    data = {
        "summary": summarize(result),
        "yearly": serialize_yearly(yearly),
        "schedule": serialize_schedule(result.schedule),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info("Wrote %d schedule rows to %s", result.months, path)


def export_to_csv(path: Path, result: AmortizationResult) -> None:
    """Export the schedule to a CSV file."""
    header = ["Month", "Payment", "Principal", "Interest", "Balloon", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in serialize_schedule(result.schedule):
            writer.writerow(
                [
                    row["month"],
                    row["payment"],
                    row["principal"],
                    row["interest"],
                    row["balloon"],
                    row["remaining_balance"],
                ]
            )
    logger.info("Wrote %d schedule rows to %s", result.months, path)


def loan_options(func: Callable) -> Callable:
    """Attach the options shared by every single-loan command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount, e.g. 250000 or 250k"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--years", "-y", "years", required=True, help="Loan term in years"),
        click.option("--balloon", "-b", "balloon", help="Balloon payment due at the end of the term"),
        click.option(
            "--payment",
            "payment",
            help="Pay this amount every month instead of the calculated repayment.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--log-level",
    "log_level",
    default=lambda: os.environ.get("LOAN_CALC_LOG_LEVEL", "WARNING"),
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity (defaults to $LOAN_CALC_LOG_LEVEL or WARNING).",
)
def cli(log_level: str) -> None:
    """A command-line loan repayment calculator with balloon support."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--all", "show_all", is_flag=True, help="Print every row instead of the first 120.")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: str,
    years: str,
    balloon: Optional[str],
    payment: Optional[str],
    show_all: bool,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    result = run_calculation(principal, rate, years, balloon, payment)
    _require_result(result)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(summarize(result))
    rows = serialize_schedule(result.schedule)
    show_balloon = bool(result.params and result.params.balloon_amount > 0)
    # Limit schedule length printed to avoid flooding the terminal
    if not show_all and len(rows) > MAX_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_ROWS} rows.")
        rows = rows[:MAX_ROWS]
    print_schedule(rows, show_balloon=show_balloon)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: str,
    years: str,
    balloon: Optional[str],
    payment: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    result = run_calculation(principal, rate, years, balloon, payment)
    _require_result(result)
    summary_data = summarize(result)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@loan_options
def yearly(
    principal: str,
    rate: str,
    years: str,
    balloon: Optional[str],
    payment: Optional[str],
) -> None:
    """Print principal and interest paid in each year of the loan."""
    result = run_calculation(principal, rate, years, balloon, payment)
    _require_result(result)
    print_yearly(serialize_yearly(yearly_summary(result.schedule, result.params.term_years)))


def parse_scenario_opts(opts: str) -> Dict[str, Any]:
    """Convert a quoted scenario option string into ``run_calculation`` kwargs."""
    flags = {
        "-p": "principal",
        "--principal": "principal",
        "-r": "rate",
        "--rate": "rate",
        "-y": "years",
        "--years": "years",
        "-b": "balloon",
        "--balloon": "balloon",
        "--payment": "payment",
    }
    params: Dict[str, Any] = {
        "principal": None,
        "rate": None,
        "years": None,
        "balloon": None,
        "payment": None,
    }
    tokens: List[str] = shlex.split(opts)
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token not in flags:
            raise click.BadParameter(f"Unknown option in scenario: {token}")
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Option {token} in scenario needs a value")
        params[flags[token]] = tokens[i + 1]
        i += 2
    for required in ("principal", "rate", "years"):
        if params[required] is None:
            raise click.BadParameter(f"Scenario missing required option {required}")
    return params


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        loan-calc compare --scenario1 "-p 250k -r 3.5 -y 30" --scenario2 "-p 250k -r 3.5 -y 30 --payment 2000"
    """
    result1 = run_calculation(**parse_scenario_opts(scenario1))
    result2 = run_calculation(**parse_scenario_opts(scenario2))
    _require_result(result1)
    _require_result(result2)
    print_comparison(summarize(result1), summarize(result2))


if __name__ == "__main__":
    cli()
