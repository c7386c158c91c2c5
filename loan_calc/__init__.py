"""Fixed-rate loan amortization with optional balloon and payment override."""

import logging

from .aggregation import chart_rows, yearly_summary
from .data_models import AmortizationResult, LoanParameters, ScheduleEntry, YearlySummary
from .engine import compute_amortization
from .validator import InvalidInput, parse_parameters, validate_parameters

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AmortizationResult",
    "InvalidInput",
    "LoanParameters",
    "ScheduleEntry",
    "YearlySummary",
    "chart_rows",
    "compute_amortization",
    "parse_parameters",
    "validate_parameters",
    "yearly_summary",
]
