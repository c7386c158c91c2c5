"""Data models for the loan calculator.

This module defines dataclasses representing the entities used by the
calculator: the validated loan parameters, individual schedule entries, yearly
summaries used for charting and the overall amortization result. All monetary
values are ``Decimal`` and carried unrounded; rounding happens only when the
values are formatted for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

# Balances smaller than half a cent are treated as fully repaid.
RESIDUAL_TOLERANCE = Decimal("0.005")


@dataclass(frozen=True)
class LoanParameters:
    """Validated inputs of a fixed-rate, fixed-term loan.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed. Always positive.
    annual_rate_percent: Decimal
        Nominal annual interest rate in percent (``3.5`` means 3.5 %).
    term_years: int
        Loan term in whole years.
    balloon_amount: Decimal
        Lump sum due together with the final scheduled payment. Zero for a
        fully amortizing loan.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_years: int
    balloon_amount: Decimal = Decimal("0")

    @property
    def periodic_rate(self) -> Decimal:
        return (self.annual_rate_percent / Decimal(100)) / Decimal(12)

    @property
    def term_months(self) -> int:
        return self.term_years * 12


@dataclass(frozen=True)
class ScheduleEntry:
    """One month of the amortization schedule.

    ``payment_amount`` is the regular payment (interest plus principal). The
    balloon, when applied on the final scheduled month, is reported separately
    in ``balloon_payment`` and is already deducted from ``remaining_balance``.
    """

    month: int
    interest_amount: Decimal
    principal_amount: Decimal
    payment_amount: Decimal
    remaining_balance: Decimal
    balloon_payment: Decimal = Decimal("0")


Schedule = Tuple[ScheduleEntry, ...]


@dataclass(frozen=True)
class YearlySummary:
    year: int
    total_principal: Decimal
    total_interest: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    """Output of a single amortization run.

    ``computed_payment`` is what the payment formula recommends for the given
    parameters; ``effective_payment`` is what was actually used to build the
    schedule (the override, when one is active). For invalid input every
    field is zero and ``schedule`` is empty, see :meth:`empty`.
    """

    schedule: Schedule
    total_interest: Decimal
    total_payment: Decimal
    computed_payment: Decimal
    effective_payment: Decimal
    params: Optional[LoanParameters] = None

    @classmethod
    def empty(cls) -> "AmortizationResult":
        zero = Decimal("0")
        return cls(
            schedule=(),
            total_interest=zero,
            total_payment=zero,
            computed_payment=zero,
            effective_payment=zero,
        )

    @property
    def is_empty(self) -> bool:
        return not self.schedule

    @property
    def months(self) -> int:
        return len(self.schedule)

    @property
    def final_balance(self) -> Decimal:
        if not self.schedule:
            return Decimal("0")
        return self.schedule[-1].remaining_balance

    @property
    def paid_off(self) -> bool:
        """True when the last entry leaves nothing owed."""
        return bool(self.schedule) and self.final_balance <= RESIDUAL_TOLERANCE

    @property
    def payment_covers_interest(self) -> bool:
        """False when some month's interest exceeds the payment used.

        Such months are recorded as interest-only rows whose
        ``payment_amount`` is the interest due, which is more than
        ``effective_payment``.
        """
        return all(e.interest_amount <= self.effective_payment for e in self.schedule)

    @property
    def balloon_paid(self) -> Decimal:
        return sum((e.balloon_payment for e in self.schedule), Decimal("0"))

    @property
    def balloon_exceeds_balance(self) -> bool:
        """True when less than the full balloon was owed at term end.

        This happens when the payment used (typically an override) retired
        more principal than the balloon formula intended, either leaving less
        than the balloon outstanding on the final month or paying the loan
        off before the balloon fell due.
        """
        if self.params is None or self.params.balloon_amount <= 0:
            return False
        return self.params.balloon_amount - self.balloon_paid > RESIDUAL_TOLERANCE
