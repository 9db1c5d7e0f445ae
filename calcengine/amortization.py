"""
Fixed-payment loan amortization.

Payoff duration is found by inverting the standard annuity formula

    B = P · (1 − (1 + i)^−n) / i

for n, which gives

    n = ln(P / (P − B·i)) / ln(1 + i)

where B is the balance, P the monthly payment and i the monthly rate.
No month-by-month simulation is needed for the payoff figures; the
schedule helper uses the closed-form remaining balance

    B_k = B·(1 + i)^k − P·((1 + i)^k − 1) / i

evaluated for all k at once.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from calcengine.errors import DomainError, NonConvergentPayoffError

logger = logging.getLogger(__name__)

# Schedules longer than this are refused (100 years of monthly payments)
MAX_SCHEDULE_MONTHS = 1200


@dataclass(frozen=True)
class PayoffSchedule:
    months_to_pay_off: int
    total_interest: float
    total_payment: float


@dataclass(frozen=True)
class LoanQuote:
    monthly_payment: float
    total_payment: float
    total_interest: float


def monthly_rate(annual_rate_percent: float) -> float:
    """Annual percentage rate → monthly fractional rate."""
    return annual_rate_percent / 100 / 12


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DomainError(f"{name} must be a number, got {value!r}", name)
        if not math.isfinite(value):
            raise DomainError(f"{name} must be a finite number", name)


def _ceil_months(months: float) -> int:
    # Snap to a whole month only within 1e-9 of it; any positive term is at least 1 month
    nearest = round(months)
    if nearest >= 1 and abs(months - nearest) < 1e-9:
        return int(nearest)
    return max(math.ceil(months), 1)


def solve_payoff(balance: float, annual_rate_percent: float, monthly_payment: float) -> PayoffSchedule:
    """
    Months to pay off a balance with a fixed monthly payment.

    Args:
        balance: Outstanding principal, > 0
        annual_rate_percent: APR in percent, >= 0
        monthly_payment: Fixed payment, > 0

    Returns:
        PayoffSchedule. months_to_pay_off is rounded up to a whole month;
        total_payment and total_interest use the unrounded month count.

    Raises:
        DomainError: an input is out of range.
        NonConvergentPayoffError: the payment does not exceed the first
            month's interest, so the balance is never paid off.
    """
    _require_finite(balance=balance, annual_rate_percent=annual_rate_percent, monthly_payment=monthly_payment)
    if balance <= 0:
        raise DomainError("Balance must be positive.", 'balance')
    if annual_rate_percent < 0:
        raise DomainError("Annual rate cannot be negative.", 'annual_rate_percent')
    if monthly_payment <= 0:
        raise DomainError("Monthly payment must be positive.", 'monthly_payment')

    i = monthly_rate(annual_rate_percent)

    if i == 0:
        months = balance / monthly_payment
    else:
        interest_only = balance * i
        if monthly_payment <= interest_only:
            raise NonConvergentPayoffError(
                f"Monthly payment of {monthly_payment:.2f} does not cover the first month's "
                f"interest of {interest_only:.2f}. The balance will never be paid off."
            )
        try:
            months = math.log(monthly_payment / (monthly_payment - interest_only)) / math.log1p(i)
        except (ValueError, ZeroDivisionError, OverflowError):
            months = math.nan

    if not math.isfinite(months) or months <= 0:
        raise NonConvergentPayoffError(
            "The payoff period could not be determined for these terms. "
            "The balance will never be paid off."
        )

    total_payment = monthly_payment * months
    if not math.isfinite(total_payment):
        raise NonConvergentPayoffError("Total payment is not a finite amount for these terms.")
    total_interest = max(total_payment - balance, 0.0)

    logger.debug("Payoff of %.2f at %.4f%% with %.2f/month: %.4f months",
                  balance, annual_rate_percent, monthly_payment, months)
    return PayoffSchedule(
        months_to_pay_off=_ceil_months(months),
        total_interest=total_interest,
        total_payment=total_payment,
    )


def quote_monthly_payment(principal: float, annual_rate_percent: float, months: int) -> LoanQuote:
    """
    Fixed monthly payment (EMI) that retires `principal` in `months` payments.

        P = B · i · (1 + i)^n / ((1 + i)^n − 1)

    With a zero rate this degenerates to B / n.
    """
    _require_finite(principal=principal, annual_rate_percent=annual_rate_percent)
    if principal <= 0:
        raise DomainError("Principal must be positive.", 'principal')
    if annual_rate_percent < 0:
        raise DomainError("Annual rate cannot be negative.", 'annual_rate_percent')
    if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
        raise DomainError(f"Loan term must be a positive whole number of months, got {months!r}", 'months')

    i = monthly_rate(annual_rate_percent)
    if i == 0:
        payment = principal / months
    else:
        try:
            growth = (1 + i) ** months
        except OverflowError:
            raise DomainError("Loan term is too long to evaluate at this rate.", 'months')
        payment = principal * i * growth / (growth - 1)

    if not math.isfinite(payment):
        raise DomainError("Monthly payment is not a finite amount for these terms.", 'months')

    total_payment = payment * months
    return LoanQuote(
        monthly_payment=payment,
        total_payment=total_payment,
        total_interest=max(total_payment - principal, 0.0),
    )


def amortization_schedule(balance: float, annual_rate_percent: float, monthly_payment: float) -> List[Dict]:
    """
    Month-by-month breakdown of a fixed-payment payoff.

    Returns:
        List of dicts with month, payment, interest, principal and balance
        (remaining after that month's payment). The final payment is reduced
        to exactly clear the balance.
    """
    payoff = solve_payoff(balance, annual_rate_percent, monthly_payment)
    n = payoff.months_to_pay_off
    if n > MAX_SCHEDULE_MONTHS:
        raise DomainError(
            f"Schedule would run {n} months; the limit is {MAX_SCHEDULE_MONTHS}.",
            'monthly_payment',
        )

    i = monthly_rate(annual_rate_percent)
    k = np.arange(0, n + 1, dtype=float)

    if i == 0:
        remaining = balance - monthly_payment * k
    else:
        growth = np.power(1.0 + i, k)
        remaining = balance * growth - monthly_payment * (growth - 1.0) / i
    remaining = np.clip(remaining, 0.0, None)
    remaining[-1] = 0.0

    opening = remaining[:-1]
    interest = opening * i
    payments = np.full(n, float(monthly_payment))
    payments[-1] = opening[-1] + interest[-1]
    principal = payments - interest

    return [
        {
            'month': month + 1,
            'payment': float(payments[month]),
            'interest': float(interest[month]),
            'principal': float(principal[month]),
            'balance': float(remaining[month + 1]),
        }
        for month in range(n)
    ]


def format_duration(months: int) -> str:
    """31 → '2 years and 7 months', 12 → '1 year', 5 → '5 months'."""
    years, rem = divmod(int(months), 12)
    parts = []
    if years:
        parts.append(f"{years} year" + ("s" if years != 1 else ""))
    if rem or not years:
        parts.append(f"{rem} month" + ("s" if rem != 1 else ""))
    return " and ".join(parts)
