from decimal import Decimal

from loan_calc.engine import compute_amortization
from loan_calc.formatter import format_currency, serialize_schedule, summarize
from loan_calc.data_models import AmortizationResult


class TestFormatCurrency:
    def test_thousands_and_cents(self):
        assert format_currency(Decimal("1122.6118")) == "$1,122.61"

    def test_rounds_half_up(self):
        assert format_currency(Decimal("0.005")) == "$0.01"

    def test_negative(self):
        assert format_currency(Decimal("-5")) == "-$5.00"

    def test_float(self):
        assert format_currency(250000.0) == "$250,000.00"


class TestSerializeSchedule:
    def test_rounds_to_cents(self, standard_loan):
        rows = serialize_schedule(compute_amortization(standard_loan).schedule)
        assert rows[0]["month"] == 1
        assert rows[0]["interest"] == 729.17
        assert rows[0]["balloon"] == 0.0
        assert rows[-1]["remaining_balance"] == 0.0
        assert len(rows) == 360


class TestSummarize:
    def test_standard_loan(self, standard_loan):
        summary = summarize(compute_amortization(standard_loan))
        assert summary["valid"] is True
        assert summary["computed_payment"] == 1122.61
        assert summary["effective_payment"] == 1122.61
        assert summary["term_months"] == 360
        assert summary["payments_made"] == 360
        assert summary["paid_off"] is True

    def test_empty_result(self):
        summary = summarize(AmortizationResult.empty())
        assert summary["valid"] is False
        assert summary["total_payment"] == 0.0
        assert summary["payments_made"] == 0
        assert summary["paid_off"] is False
