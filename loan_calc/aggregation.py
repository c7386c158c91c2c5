"""Yearly rollup of an amortization schedule.

Charts show principal and interest per year rather than per month, so the
monthly schedule is folded into one :class:`YearlySummary` per elapsed year.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from .data_models import ScheduleEntry, YearlySummary


def yearly_summary(schedule: Sequence[ScheduleEntry], term_years: int) -> List[YearlySummary]:
    """Sum principal and interest for each year of the schedule.

    Year ``y`` covers months ``(y - 1) * 12 + 1`` to ``y * 12``. The rollup
    stops at ``term_years`` or at the first year without entries, whichever
    comes first, so a loan paid off early yields fewer years and a partial
    final year.
    """
    summaries: List[YearlySummary] = []
    for year in range(1, term_years + 1):
        first_month = (year - 1) * 12 + 1
        last_month = year * 12
        entries = [e for e in schedule if first_month <= e.month <= last_month]
        if not entries:
            break
        summaries.append(
            YearlySummary(
                year=year,
                total_principal=sum((e.principal_amount for e in entries), Decimal("0")),
                total_interest=sum((e.interest_amount for e in entries), Decimal("0")),
            )
        )
    return summaries


def chart_rows(summaries: Iterable[YearlySummary]) -> List[Dict[str, object]]:
    """Convert yearly summaries into rows for a stacked bar chart."""
    return [
        {
            "name": f"Year {s.year}",
            "Principal": float(s.total_principal),
            "Interest": float(s.total_interest),
        }
        for s in summaries
    ]
