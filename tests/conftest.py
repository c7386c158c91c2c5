"""Shared fixtures.

Reference loan: $250,000 at 3.5 % over 30 years, the calculator's default.
"""

from decimal import Decimal

import pytest

from loan_calc.data_models import LoanParameters


@pytest.fixture
def standard_loan() -> LoanParameters:
    return LoanParameters(
        principal=Decimal("250000"),
        annual_rate_percent=Decimal("3.5"),
        term_years=30,
    )


@pytest.fixture
def balloon_loan() -> LoanParameters:
    """The reference loan with $50,000 due at the end of the term."""
    return LoanParameters(
        principal=Decimal("250000"),
        annual_rate_percent=Decimal("3.5"),
        term_years=30,
        balloon_amount=Decimal("50000"),
    )
