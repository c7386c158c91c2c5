"""Validation of raw loan inputs.

Form and command-line layers hand over whatever the user typed. This module
turns those values into a :class:`~loan_calc.data_models.LoanParameters` or
reports them as invalid.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from .data_models import LoanParameters
from .utils import Number, to_decimal

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """Raised when loan parameters are missing, non-numeric or out of range."""


def _parse(name: str, value: Optional[Number]) -> Decimal:
    if value is None:
        raise InvalidInput(f"{name} is required")
    try:
        number = to_decimal(value)
    except ValueError as exc:
        raise InvalidInput(f"{name} is not a number: {value!r}") from exc
    if not number.is_finite():
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return number


def validate_parameters(
    principal: Optional[Number],
    annual_rate_percent: Optional[Number],
    term_years: Optional[Number],
    balloon_amount: Optional[Number] = None,
) -> LoanParameters:
    """Return validated ``LoanParameters`` or raise ``InvalidInput``.

    Principal and rate must be finite and strictly positive, the term a
    positive whole number of years and the balloon, if given, finite and not
    negative. An empty balloon string counts as no balloon.
    """
    principal_value = _parse("principal", principal)
    if principal_value <= 0:
        raise InvalidInput("principal must be positive")

    rate_value = _parse("annual rate", annual_rate_percent)
    if rate_value <= 0:
        raise InvalidInput("annual rate must be positive")

    term_value = _parse("term", term_years)
    if term_value <= 0 or term_value != term_value.to_integral_value():
        raise InvalidInput("term must be a positive whole number of years")

    if balloon_amount is None or (isinstance(balloon_amount, str) and not balloon_amount.strip()):
        balloon_value = Decimal("0")
    else:
        balloon_value = _parse("balloon", balloon_amount)
        if balloon_value < 0:
            raise InvalidInput("balloon must not be negative")

    return LoanParameters(
        principal=principal_value,
        annual_rate_percent=rate_value,
        term_years=int(term_value),
        balloon_amount=balloon_value,
    )


def parse_parameters(
    principal: Optional[Number],
    annual_rate_percent: Optional[Number],
    term_years: Optional[Number],
    balloon_amount: Optional[Number] = None,
) -> Optional[LoanParameters]:
    """Like :func:`validate_parameters` but return ``None`` on invalid input."""
    try:
        return validate_parameters(principal, annual_rate_percent, term_years, balloon_amount)
    except InvalidInput as exc:
        logger.debug("Rejected loan parameters: %s", exc)
        return None
