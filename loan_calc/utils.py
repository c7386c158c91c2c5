"""Utility functions for the loan calculator.

This module provides helpers for turning user input into ``Decimal`` values
and for rounding amounts at the presentation boundary. The engine itself never
rounds; it works with full ``Decimal`` precision.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENTS = Decimal("0.01")

Number = Union[int, float, Decimal, str]


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips surrounding whitespace and any commas and handles both
    integer and float-like strings. It raises ``ValueError`` if conversion
    fails.
    """
    try:
        cleaned = value.strip().replace(",", "")
        return Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def to_decimal(value: Number) -> Decimal:
    """Convert an int, float, ``Decimal`` or numeric string to ``Decimal``.

    Floats go through ``str`` so ``3.5`` becomes ``Decimal("3.5")`` rather
    than its binary expansion. Booleans are rejected.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        return decimal_from_str(value)
    raise ValueError(f"Invalid numeric value: {value!r}")


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000", "500,000") and shorthand with ``k``/``m``
    suffixes (e.g., "500k" meaning 500_000). Raises ``ValueError`` for
    anything else.
    """
    text = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if text.endswith("k"):
        factor = Decimal(1_000)
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal(1_000_000)
        text = text[:-1]
    return decimal_from_str(text) * factor


def round_money(value: Decimal) -> Decimal:
    """Round an amount to cents, half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
