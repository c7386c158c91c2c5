"""Core calculation engine for the loan calculator.

This module implements the financial logic required to build the amortization
schedule of a fixed-rate, fixed-term loan. It supports an optional balloon
payment due at the end of the term and an optional manually chosen monthly
payment that replaces the formula-derived one.

Every function here is pure: results depend only on the arguments of the call
and nothing is cached between calls. Amounts are ``Decimal``; the schedule is
worked out at whatever precision the loan needs and handed back at the
caller's context precision. Amounts are never rounded to cents here, see
:mod:`loan_calc.formatter` for display rounding.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal, getcontext, localcontext
from typing import List, Optional, Tuple

from .data_models import (
    RESIDUAL_TOLERANCE,
    AmortizationResult,
    LoanParameters,
    Schedule,
    ScheduleEntry,
)
from .utils import Number, to_decimal
from .validator import InvalidInput, validate_parameters

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

BASE_PRECISION = 28
# Loans needing more digits than this are reported as empty results.
MAX_PRECISION = 10_000


def calculate_payment(
    principal: Decimal,
    rate_per_month: Decimal,
    term: int,
    balloon: Decimal = ZERO,
) -> Decimal:
    """Return the fixed monthly payment for a loan.

    Without a balloon the standard annuity formula is used:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    With a balloon ``B`` the balloon is discounted to present value and only
    the remainder is amortized over the term:

        payment = (P - B / (1 + i)^n) * i / (1 - (1 + i)^-n)

    where ``P`` is the principal, ``i`` the monthly interest rate and ``n``
    the number of payments. The rate must be positive.
    """
    if term <= 0:
        raise ValueError("Term must be positive")
    if rate_per_month <= 0:
        raise ValueError("Monthly rate must be positive")
    factor = (1 + rate_per_month) ** term
    if balloon > 0:
        discounted_balloon = balloon / factor
        return (principal - discounted_balloon) * (rate_per_month / (1 - (1 + rate_per_month) ** -term))
    return principal * (rate_per_month * factor) / (factor - 1)


def resolve_effective_payment(
    computed_payment: Decimal,
    override_active: bool,
    override_payment: Optional[Number],
) -> Decimal:
    """Pick the payment used to build the schedule.

    The override wins only when the flag is set and the amount is a finite,
    positive number. Anything else falls back to ``computed_payment``.
    """
    if not override_active or override_payment is None:
        return computed_payment
    try:
        amount = to_decimal(override_payment)
    except ValueError:
        logger.debug("Ignoring unparsable override payment %r", override_payment)
        return computed_payment
    if not amount.is_finite() or amount <= 0:
        logger.debug("Ignoring non-positive override payment %r", override_payment)
        return computed_payment
    return amount


def amortization_step(month: int, balance: Decimal, rate_per_month: Decimal, payment: Decimal) -> ScheduleEntry:
    """Apply one monthly payment to ``balance``.

    Interest accrues on the opening balance; the rest of the payment reduces
    principal. The principal part is kept between zero and the opening
    balance, so the last payment never overpays and a payment that does not
    cover the interest leaves the balance unchanged.
    """
    interest = balance * rate_per_month
    principal_part = payment - interest
    if principal_part > balance:
        principal_part = balance
    if principal_part < 0:
        principal_part = ZERO
    remaining = balance - principal_part
    # Treat sub-half-cent residue as fully repaid.
    if remaining.copy_abs() < RESIDUAL_TOLERANCE:
        remaining = ZERO
    return ScheduleEntry(
        month=month,
        interest_amount=interest,
        principal_amount=principal_part,
        payment_amount=principal_part + interest,
        remaining_balance=remaining,
    )


def _apply_balloon(entry: ScheduleEntry, balloon: Decimal) -> ScheduleEntry:
    owed = entry.remaining_balance
    if balloon - owed > RESIDUAL_TOLERANCE:
        logger.warning(
            "Balloon of %s exceeds the %s still owed at month %d; the chosen payment over-amortized the loan",
            balloon,
            owed,
            entry.month,
        )
    paid = min(balloon, owed)
    remaining = owed - paid
    if remaining.copy_abs() < RESIDUAL_TOLERANCE:
        remaining = ZERO
    return ScheduleEntry(
        month=entry.month,
        interest_amount=entry.interest_amount,
        principal_amount=entry.principal_amount,
        payment_amount=entry.payment_amount,
        remaining_balance=remaining,
        balloon_payment=paid,
    )


def generate_schedule(
    principal: Decimal,
    rate_per_month: Decimal,
    term: int,
    balloon: Decimal,
    payment: Decimal,
) -> Tuple[Schedule, Decimal]:
    """Build the month-by-month schedule.

    Returns the schedule and the cumulative interest. The schedule stops
    early once the balance reaches zero. On the final scheduled month a
    positive ``balloon`` is deducted from the balance (never more than is
    still owed).
    """
    entries: List[ScheduleEntry] = []
    cumulative_interest = ZERO
    balance = principal
    for month in range(1, term + 1):
        if balance <= 0:
            break
        entry = amortization_step(month, balance, rate_per_month, payment)
        if month == term and balloon > 0:
            entry = _apply_balloon(entry, balloon)
        entries.append(entry)
        cumulative_interest += entry.interest_amount
        balance = entry.remaining_balance
    return tuple(entries), cumulative_interest


def working_precision(rate_per_month: Decimal, term: int) -> int:
    """Return the number of significant digits needed to amortize a loan.

    ``(1 + i)^n`` needs about ``n * log10(1 + i)`` extra digits so that
    ``factor - 1`` and ``payment - interest`` keep their significant digits,
    and a tiny rate needs enough digits for ``1 + i`` to differ from ``1``.
    """
    growth_digits = term * math.log1p(float(rate_per_month)) / math.log(10)
    if not math.isfinite(growth_digits):
        return MAX_PRECISION + 1
    small_rate_digits = max(0, -rate_per_month.adjusted())
    return BASE_PRECISION + math.ceil(growth_digits) + small_rate_digits


def _round_entry(entry: ScheduleEntry) -> ScheduleEntry:
    # Unary plus rounds to the current context's precision.
    interest = +entry.interest_amount
    principal_part = +entry.principal_amount
    return ScheduleEntry(
        month=entry.month,
        interest_amount=interest,
        principal_amount=principal_part,
        payment_amount=principal_part + interest,
        remaining_balance=+entry.remaining_balance,
        balloon_payment=+entry.balloon_payment,
    )


def compute_amortization(
    params: Optional[LoanParameters],
    override_active: bool = False,
    override_payment: Optional[Number] = None,
) -> AmortizationResult:
    """Compute the amortization schedule and totals for a loan.

    Parameters
    ----------
    params: LoanParameters or None
        The loan to amortize. ``None`` or parameters that fail validation
        yield :meth:`AmortizationResult.empty` instead of an exception.
    override_active: bool
        Whether the caller chose to pay ``override_payment`` each month
        instead of the formula payment.
    override_payment: number, optional
        The manually chosen monthly payment.

    Returns
    -------
    AmortizationResult
        The schedule, total interest, total payment (principal plus total
        interest), the formula payment and the payment actually used.
    """
    if params is None:
        return AmortizationResult.empty()
    try:
        params = validate_parameters(
            params.principal,
            params.annual_rate_percent,
            params.term_years,
            params.balloon_amount,
        )
    except InvalidInput as exc:
        logger.debug("Returning empty result for invalid parameters: %s", exc)
        return AmortizationResult.empty()

    term = params.term_months
    precision = working_precision(params.periodic_rate, term)
    if precision > MAX_PRECISION:
        logger.warning(
            "Cannot amortize %s at %s%% over %d months: needs more than %d digits",
            params.principal,
            params.annual_rate_percent,
            term,
            MAX_PRECISION,
        )
        return AmortizationResult.empty()

    try:
        with localcontext() as ctx:
            ctx.prec = precision
            rate_per_month = params.periodic_rate
            computed_payment = calculate_payment(params.principal, rate_per_month, term, params.balloon_amount)
            effective_payment = resolve_effective_payment(computed_payment, override_active, override_payment)
            logger.debug(
                "Amortizing %s over %d months at %d digits: computed payment %s, effective payment %s",
                params.principal,
                term,
                precision,
                computed_payment,
                effective_payment,
            )
            schedule, _ = generate_schedule(
                params.principal,
                rate_per_month,
                term,
                params.balloon_amount,
                effective_payment,
            )
    except ArithmeticError as exc:
        logger.warning("Cannot amortize %s at %s%%: %r", params.principal, params.annual_rate_percent, exc)
        return AmortizationResult.empty()

    # Hand results back at the caller's precision.
    schedule = tuple(_round_entry(e) for e in schedule)
    total_interest = sum((e.interest_amount for e in schedule), ZERO)
    computed_payment = +computed_payment
    effective_payment = +effective_payment
    return AmortizationResult(
        schedule=schedule,
        total_interest=total_interest,
        total_payment=params.principal + total_interest,
        computed_payment=computed_payment,
        effective_payment=effective_payment,
        params=params,
    )
