"""Output helpers for the loan calculator.

This module renders amortization results for people and for machines: plain
text tables for the terminal and JSON-serialisable dictionaries for exports
and the web front end. This is the only place where amounts are rounded to
cents; the engine hands over unrounded values.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence

from .data_models import AmortizationResult, ScheduleEntry, YearlySummary
from .utils import round_money


def format_currency(value: Decimal) -> str:
    """Format an amount as US dollars, e.g. ``$1,122.61`` or ``-$5.00``."""
    rounded = round_money(Decimal(value))
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def _money(value: Decimal) -> float:
    return float(round_money(value))


def serialize_schedule(schedule: Iterable[ScheduleEntry]) -> List[Dict[str, Any]]:
    """Convert schedule entries into JSON-serialisable dictionaries."""
    rows = []
    for entry in schedule:
        rows.append(
            {
                "month": entry.month,
                "payment": _money(entry.payment_amount),
                "principal": _money(entry.principal_amount),
                "interest": _money(entry.interest_amount),
                "balloon": _money(entry.balloon_payment),
                "remaining_balance": _money(entry.remaining_balance),
            }
        )
    return rows


def serialize_yearly(summaries: Iterable[YearlySummary]) -> List[Dict[str, Any]]:
    return [
        {
            "year": s.year,
            "principal": _money(s.total_principal),
            "interest": _money(s.total_interest),
        }
        for s in summaries
    ]


def summarize(result: AmortizationResult) -> Dict[str, Any]:
    """Return the headline figures of a result as a flat dictionary."""
    params = result.params
    return {
        "valid": not result.is_empty,
        "principal": _money(params.principal) if params else 0.0,
        "balloon": _money(params.balloon_amount) if params else 0.0,
        "term_months": params.term_months if params else 0,
        "computed_payment": _money(result.computed_payment),
        "effective_payment": _money(result.effective_payment),
        "total_interest": _money(result.total_interest),
        "total_payment": _money(result.total_payment),
        "payments_made": result.months,
        "final_balance": _money(result.final_balance),
        "paid_off": result.paid_off,
        "balloon_exceeds_balance": result.balloon_exceeds_balance,
        "payment_covers_interest": result.payment_covers_interest,
    }


def print_summary(summary: Dict[str, Any]) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {format_currency(summary['principal'])}")
    if summary.get("balloon"):
        print(f"Balloon payment    : {format_currency(summary['balloon'])}")
    print(f"Monthly repayment  : {format_currency(summary['effective_payment'])}")
    if summary["effective_payment"] != summary["computed_payment"]:
        print(f"Calculated payment : {format_currency(summary['computed_payment'])}")
    print(f"Total interest     : {format_currency(summary['total_interest'])}")
    print(f"Total payment      : {format_currency(summary['total_payment'])}")
    print(f"Payments made      : {summary['payments_made']} of {summary['term_months']}")
    if not summary["paid_off"]:
        print(f"Balance left       : {format_currency(summary['final_balance'])}")
    if summary.get("balloon_exceeds_balance"):
        print("Note               : the payment retires more than the balloon leaves owing")
    if not summary.get("payment_covers_interest", True):
        print("Note               : the payment does not cover the interest due in some months")
    print("-" * 72)


def print_schedule(rows: Sequence[Dict[str, Any]], show_balloon: bool = False) -> None:
    """Print serialised schedule rows as a simple table.

    Parameters
    ----------
    rows: Sequence[dict]
        Rows as produced by :func:`serialize_schedule`.
    show_balloon: bool
        Whether to include the ``Balloon`` column. Hidden by default because
        only the final row of a balloon loan uses it.
    """
    headers = ["Month", "Payment", "Principal", "Interest"]
    if show_balloon:
        headers.append("Balloon")
    headers.append("Balance")
    print("\t".join(headers))
    for row in rows:
        cells = [
            str(row["month"]),
            f"{row['payment']:.2f}",
            f"{row['principal']:.2f}",
            f"{row['interest']:.2f}",
        ]
        if show_balloon:
            cells.append(f"{row['balloon']:.2f}")
        cells.append(f"{row['remaining_balance']:.2f}")
        print("\t".join(cells))


def print_yearly(rows: Sequence[Dict[str, Any]]) -> None:
    print("Year\tPrincipal\tInterest")
    for row in rows:
        print(f"{row['year']}\t{row['principal']:.2f}\t{row['interest']:.2f}")


def _status(summary: Dict[str, Any]) -> str:
    if summary["paid_off"]:
        return "paid off"
    return f"{format_currency(summary['final_balance'])} left"


def print_comparison(s1: Dict[str, Any], s2: Dict[str, Any]) -> None:
    """Print a comparison of two loan summaries side by side.

    The difference column is scenario2 minus scenario1, so a negative value
    means the second scenario is cheaper or shorter. Below the table each
    scenario's outcome is listed, followed by the interest saved when both
    loans are repaid.
    """
    print("Comparison")
    print("=" * 72)
    keys = [
        "computed_payment",
        "effective_payment",
        "total_interest",
        "total_payment",
        "payments_made",
    ]
    print(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = s1.get(key)
        v2 = s2.get(key)
        diff = v2 - v1
        print(f"{key:20s} {v1:15.2f} {v2:15.2f} {diff:15.2f}")
    print("=" * 72)
    print(f"Scenario1          : {_status(s1)}")
    print(f"Scenario2          : {_status(s2)}")
    saved = s1["total_interest"] - s2["total_interest"]
    if s1["paid_off"] and s2["paid_off"]:
        if saved >= 0:
            print(f"Interest saved     : {format_currency(saved)} with scenario2")
        else:
            print(f"Interest saved     : {format_currency(-saved)} with scenario1")
