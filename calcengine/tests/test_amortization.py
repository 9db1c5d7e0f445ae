"""
Tests for loan amortization.

Validates:
1. Payoff months from the logarithmic inversion, rounded up
2. Non-convergent payments (at or below interest-only) are rejected
3. Zero-rate degenerate case
4. Monotonicity in the payment amount
5. EMI quote and month-by-month schedule consistency
"""

import math

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from calcengine.amortization import (
    MAX_SCHEDULE_MONTHS,
    amortization_schedule,
    format_duration,
    monthly_rate,
    quote_monthly_payment,
    solve_payoff,
)
from calcengine.errors import DomainError, NonConvergentPayoffError


class TestSolvePayoff:
    """Months-to-payoff via n = ln(P / (P − B·i)) / ln(1 + i)."""

    def test_boundary_converges(self):
        """50000 at 36% APR (3%/month) with 2500/month pays off in finite time."""
        result = solve_payoff(50000, 36, 2500)
        expected = math.log(2500 / (2500 - 1500)) / math.log(1.03)
        assert result.months_to_pay_off == math.ceil(expected)
        assert result.months_to_pay_off == 31
        assert math.isfinite(result.total_interest)

    def test_below_interest_only_raises(self):
        """1400/month never covers the 1500 monthly interest."""
        with pytest.raises(NonConvergentPayoffError):
            solve_payoff(50000, 36, 1400)

    def test_exactly_interest_only_raises(self):
        with pytest.raises(NonConvergentPayoffError):
            solve_payoff(50000, 36, 1500)

    def test_zero_rate(self):
        result = solve_payoff(1200, 0, 100)
        assert result.months_to_pay_off == 12
        assert result.total_interest == 0
        assert result.total_payment == pytest.approx(1200)

    def test_zero_rate_partial_month(self):
        result = solve_payoff(1250, 0, 100)
        assert result.months_to_pay_off == 13
        assert result.total_payment == pytest.approx(1250)

    def test_totals_use_unrounded_months(self):
        result = solve_payoff(50000, 36, 2500)
        months = math.log(2.5) / math.log(1.03)
        assert result.total_payment == pytest.approx(2500 * months)
        assert result.total_interest == pytest.approx(2500 * months - 50000)

    def test_payment_larger_than_balance(self):
        result = solve_payoff(500, 18, 1000)
        assert result.months_to_pay_off == 1
        assert result.total_interest >= 0

    def test_monotonic_in_payment(self):
        """A bigger payment never takes longer or costs more interest."""
        previous = None
        for payment in range(1600, 10001, 200):
            result = solve_payoff(50000, 36, payment)
            if previous is not None:
                assert result.months_to_pay_off <= previous.months_to_pay_off
                assert result.total_interest <= previous.total_interest
            previous = result

    @pytest.mark.parametrize('balance,apr,payment', [
        (0, 10, 100),
        (-100, 10, 100),
        (1000, -1, 100),
        (1000, 10, 0),
        (1000, 10, -5),
        (float('nan'), 10, 100),
        (1000, float('inf'), 100),
    ])
    def test_invalid_inputs_raise(self, balance, apr, payment):
        with pytest.raises(DomainError):
            solve_payoff(balance, apr, payment)

    def test_tiny_term_is_one_month(self):
        """A payoff far shorter than a month still takes one payment."""
        result = solve_payoff(0.0001, 0, 1e6)
        assert result.months_to_pay_off == 1
        assert result.total_payment == pytest.approx(0.0001)

    def test_never_returns_non_finite(self):
        """Payments a hair above interest-only still produce finite figures."""
        result = solve_payoff(50000, 36, 1500.0001)
        assert math.isfinite(result.total_payment)
        assert result.months_to_pay_off > 0


class TestQuoteMonthlyPayment:
    """EMI = B·i·(1+i)^n / ((1+i)^n − 1)."""

    def test_standard_loan(self):
        quote = quote_monthly_payment(100000, 12, 12)
        growth = 1.01 ** 12
        expected = 100000 * 0.01 * growth / (growth - 1)
        assert quote.monthly_payment == pytest.approx(expected)
        assert quote.total_payment == pytest.approx(expected * 12)
        assert quote.total_interest == pytest.approx(expected * 12 - 100000)

    def test_zero_rate(self):
        quote = quote_monthly_payment(1200, 0, 12)
        assert quote.monthly_payment == pytest.approx(100)
        assert quote.total_interest == 0

    def test_inverse_of_payoff(self):
        """Paying the quoted EMI retires the loan in the quoted term."""
        quote = quote_monthly_payment(25000, 9.5, 60)
        payoff = solve_payoff(25000, 9.5, quote.monthly_payment)
        assert payoff.months_to_pay_off == 60

    @pytest.mark.parametrize('months', [0, -12, 12.5, True])
    def test_bad_term_raises(self, months):
        with pytest.raises(DomainError):
            quote_monthly_payment(1000, 5, months)


class TestSchedule:
    """Month-by-month breakdown."""

    def test_zero_rate_schedule(self):
        rows = amortization_schedule(1200, 0, 100)
        assert len(rows) == 12
        assert all(r['interest'] == 0 for r in rows)
        assert rows[0]['balance'] == pytest.approx(1100)
        assert rows[-1]['balance'] == 0
        assert rows[-1]['payment'] == pytest.approx(100)

    def test_interest_schedule(self):
        rows = amortization_schedule(50000, 36, 2500)
        assert len(rows) == 31
        assert rows[0]['interest'] == pytest.approx(1500)
        assert rows[0]['principal'] == pytest.approx(1000)
        assert rows[-1]['balance'] == 0
        assert rows[-1]['payment'] <= 2500
        assert sum(r['principal'] for r in rows) == pytest.approx(50000)

    def test_balances_decrease(self):
        rows = amortization_schedule(8000, 19.99, 300)
        balances = [r['balance'] for r in rows]
        assert balances == sorted(balances, reverse=True)
        assert all(r['interest'] >= 0 for r in rows)

    def test_schedule_matches_payoff(self):
        rows = amortization_schedule(8000, 19.99, 300)
        payoff = solve_payoff(8000, 19.99, 300)
        assert len(rows) == payoff.months_to_pay_off
        assert rows[-1]['payment'] <= 300
        assert sum(r['principal'] for r in rows) == pytest.approx(8000)

    def test_tiny_term_single_row(self):
        rows = amortization_schedule(0.0001, 0, 1e6)
        assert len(rows) == 1
        assert rows[0]['payment'] == pytest.approx(0.0001)
        assert rows[0]['balance'] == 0

    def test_too_long_raises(self):
        """Payments barely above interest-only would need centuries."""
        with pytest.raises(DomainError, match=str(MAX_SCHEDULE_MONTHS)):
            amortization_schedule(100000, 1.2, 100.01)

    def test_non_convergent_propagates(self):
        with pytest.raises(NonConvergentPayoffError):
            amortization_schedule(50000, 36, 1400)


class TestHelpers:

    def test_monthly_rate(self):
        assert monthly_rate(36) == pytest.approx(0.03)

    def test_format_duration(self):
        assert format_duration(31) == '2 years and 7 months'
        assert format_duration(12) == '1 year'
        assert format_duration(5) == '5 months'
        assert format_duration(13) == '1 year and 1 month'
        assert format_duration(24) == '2 years'
        assert format_duration(1) == '1 month'
