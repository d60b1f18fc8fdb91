"""
Loan payment math: annuity payment, inverse annuity, amortization schedule,
mortgage payment by frequency and time-to-payoff at a fixed payment.

Conventions:
- Rates are annual fractions. The periodic rate is annual / periods per year
  (12 monthly, 26 bi-weekly).
- A zero rate falls back to straight-line repayment instead of dividing by zero.
- Nothing is rounded here; cents are a display concern.
"""

import math

from finance_engine.errors import InvalidInput
from finance_engine.models import (
    AmortizationResult,
    BalancePoint,
    DebtPayoffResult,
    LoanTerms,
    MortgageInputs,
    MortgageResult,
    RateTable,
    ScheduleEntry,
)

PAYMENTS_PER_YEAR: dict[str, int] = {
    "monthly": 12,
    "biweekly": 26,
}

# Slack on the payoff period count before rounding up
_PERIOD_EPSILON = 1e-9


def periodic_payment(principal: float, periodic_rate: float, periods: int) -> float:
    """
    Standard annuity payment P*r*(1+r)^n / ((1+r)^n - 1).
    Returns principal / n when the rate is zero.
    """
    if periodic_rate == 0:
        return principal / periods
    factor = (1 + periodic_rate) ** periods
    return principal * periodic_rate * factor / (factor - 1)


def monthly_payment(principal: float, annual_rate: float, term_months: int) -> float:
    return periodic_payment(principal, annual_rate / 12, term_months)


def solve_for_principal(payment: float, annual_rate: float, term_months: int) -> float:
    """
    Inverse of the annuity formula: the largest principal that `payment`
    repays over `term_months` at `annual_rate`.

        principal = payment * ((1+r)^n - 1) / (r * (1+r)^n)
    """
    if payment < 0:
        raise InvalidInput(f"payment cannot be negative, got {payment}")
    if term_months < 1:
        raise InvalidInput(f"term_months must be at least 1, got {term_months}")
    if annual_rate < 0:
        raise InvalidInput(f"annual_rate cannot be negative, got {annual_rate}")

    r = annual_rate / 12
    if r == 0:
        return payment * term_months
    factor = (1 + r) ** term_months
    return payment * (factor - 1) / (r * factor)


def build_schedule(terms: LoanTerms, payment: float) -> list[ScheduleEntry]:
    """
    Period-by-period split of each payment into interest and principal.

    The balance after the last period is zero up to floating-point error.
    """
    r = terms.annual_rate / 12
    balance = terms.principal
    schedule: list[ScheduleEntry] = []

    for period in range(1, terms.term_months + 1):
        interest = balance * r
        principal = payment - interest
        balance -= principal
        schedule.append(
            ScheduleEntry(
                period=period,
                interest_portion=interest,
                principal_portion=principal,
                remaining_balance=balance,
            )
        )

    return schedule


def compute_payment(terms: LoanTerms, include_schedule: bool = False) -> AmortizationResult:
    """
    Monthly payment, lifetime totals and, optionally, the full schedule.
    """
    payment = monthly_payment(terms.principal, terms.annual_rate, terms.term_months)
    total_paid = payment * terms.term_months

    schedule = build_schedule(terms, payment) if include_schedule else None

    return AmortizationResult(
        monthly_payment=payment,
        total_paid=total_paid,
        total_interest=total_paid - terms.principal,
        schedule=schedule,
    )


# ── Mortgage ─────────────────────────────────────────────────────────────────

def balance_over_time(
    principal: float,
    periodic_rate: float,
    payment: float,
    periods_per_year: int,
    years: int,
) -> list[BalancePoint]:
    """Outstanding balance at the start (year 0) and after each full year."""
    balance = principal
    points = [BalancePoint(year=0, balance=principal)]

    for year in range(1, years + 1):
        for _ in range(periods_per_year):
            balance -= payment - balance * periodic_rate
        points.append(BalancePoint(year=year, balance=max(0.0, balance)))

    return points


def compute_mortgage(
    inputs: MortgageInputs,
    table: RateTable,
    include_stress_test: bool = False,
) -> MortgageResult:
    """
    Mortgage payment at a monthly or bi-weekly frequency, lifetime totals,
    the yearly balance series and, optionally, the payment at the
    qualifying rate (contract rate + the table's stress-test add-on).
    """
    per_year = PAYMENTS_PER_YEAR[inputs.frequency]
    periods = inputs.amortization_years * per_year
    r = inputs.annual_rate / per_year

    payment = periodic_payment(inputs.principal, r, periods)
    total_paid = payment * periods

    stress_payment = None
    stress_increase = None
    if include_stress_test:
        stress_rate = inputs.annual_rate + table.mortgage_rules.stress_test_add_on
        stress_payment = periodic_payment(inputs.principal, stress_rate / per_year, periods)
        stress_increase = stress_payment - payment

    return MortgageResult(
        payment=payment,
        payments_per_year=per_year,
        total_paid=total_paid,
        total_interest=total_paid - inputs.principal,
        balance_over_time=balance_over_time(
            inputs.principal, r, payment, per_year, inputs.amortization_years
        ),
        stress_test_payment=stress_payment,
        stress_test_increase=stress_increase,
    )


# ── Debt payoff ──────────────────────────────────────────────────────────────

def debt_payoff(balance: float, annual_rate: float, payment: float) -> DebtPayoffResult:
    """
    Months needed to clear `balance` with a fixed monthly `payment`.

    The count solves the annuity formula for n and rounds up; the last
    payment only covers what is left. A payment that does not exceed the
    first month's interest never pays the debt off.
    """
    if balance < 0 or payment < 0:
        raise InvalidInput("balance and payment cannot be negative")
    if annual_rate < 0:
        raise InvalidInput(f"annual_rate cannot be negative, got {annual_rate}")

    r = annual_rate / 12
    if balance == 0 or payment <= balance * r:
        return DebtPayoffResult(
            balance=balance,
            annual_rate=annual_rate,
            monthly_payment=payment,
            is_payoff_possible=balance == 0,
            months_to_payoff=0,
            total_paid=0.0,
            total_interest=0.0,
        )

    if r == 0:
        exact = balance / payment
    else:
        exact = -math.log(1 - r * balance / payment) / math.log(1 + r)
    months = max(1, math.ceil(exact - _PERIOD_EPSILON))

    # Balance left after months - 1 full payments, then the final partial one
    growth = (1 + r) ** (months - 1)
    if r == 0:
        remaining = balance - payment * (months - 1)
    else:
        remaining = balance * growth - payment * (growth - 1) / r
    total_paid = payment * (months - 1) + remaining * (1 + r)

    return DebtPayoffResult(
        balance=balance,
        annual_rate=annual_rate,
        monthly_payment=payment,
        is_payoff_possible=True,
        months_to_payoff=months,
        total_paid=total_paid,
        total_interest=total_paid - balance,
    )
