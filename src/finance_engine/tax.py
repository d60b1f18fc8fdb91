"""
Quebec income tax: federal + provincial brackets and payroll contributions.

Basic personal amount:
  - Non-refundable credit worth basic_personal_amount x lowest bracket rate.
  - Can reduce the bracket tax to zero but never below.

Payroll contributions (RRQ, RQAP, AE):
  - Assessed on earnings between the exemption and the insurable-earnings cap:
        base = clamp(gross - exemption, 0, max_insurable_earnings - exemption)
  - Contribution = base x rate.
"""

import logging
from collections.abc import Sequence

from finance_engine.brackets import evaluate_brackets, marginal_rate
from finance_engine.errors import InvalidInput
from finance_engine.models import (
    Bracket,
    Contribution,
    ContributionRule,
    IncomeTaxResult,
    PayFrequency,
    RateTable,
    TaxReturnEstimate,
)

logger = logging.getLogger(__name__)

PAY_PERIODS_PER_YEAR: dict[str, int] = {
    "annual": 1,
    "monthly": 12,
    "biweekly": 26,
    "weekly": 52,
}


# ── Building blocks ──────────────────────────────────────────────────────────

def basic_personal_credit(amount: float, brackets: Sequence[Bracket]) -> float:
    """Value of a basic personal amount, credited at the lowest bracket rate."""
    return amount * brackets[0].rate


def bracket_tax_after_credit(income: float, brackets: Sequence[Bracket], personal_amount: float) -> float:
    return max(0.0, evaluate_brackets(income, brackets) - basic_personal_credit(personal_amount, brackets))


def compute_contribution(gross_annual: float, rule: ContributionRule) -> float:
    ceiling = rule.max_insurable_earnings - rule.exemption
    base = min(max(gross_annual - rule.exemption, 0.0), ceiling)
    return base * rule.rate


def income_tax(taxable_income: float, table: RateTable) -> tuple[float, float]:
    """Federal and provincial tax (after basic personal credits) on `taxable_income`."""
    amounts = table.basic_personal_amounts
    federal = bracket_tax_after_credit(taxable_income, table.federal_brackets, amounts.federal)
    provincial = bracket_tax_after_credit(taxable_income, table.provincial_brackets, amounts.provincial)
    return federal, provincial


def convert_to_annual(amount: float, frequency: PayFrequency) -> float:
    """Annualise a pay amount received `frequency` times a year."""
    if frequency not in PAY_PERIODS_PER_YEAR:
        raise InvalidInput(
            f"frequency must be one of {list(PAY_PERIODS_PER_YEAR)}, got {frequency!r}"
        )
    return amount * PAY_PERIODS_PER_YEAR[frequency]


# ── Net income ───────────────────────────────────────────────────────────────

def compute_net(gross_annual: float, table: RateTable) -> IncomeTaxResult:
    """
    Net annual and monthly income after income tax and payroll contributions.

    Raises InvalidInput for a negative gross income.
    """
    if gross_annual < 0:
        logger.debug("Rejected negative gross income %s", gross_annual)
        raise InvalidInput(f"gross_annual cannot be negative, got {gross_annual}")

    federal_tax, provincial_tax = income_tax(gross_annual, table)

    contributions = [
        Contribution(name=rule.name, amount=compute_contribution(gross_annual, rule))
        for rule in table.payroll_contributions
    ]

    total_tax = federal_tax + provincial_tax + sum(c.amount for c in contributions)
    net_annual = gross_annual - total_tax
    logger.debug(
        "Net income %s on gross %s (federal %s, provincial %s, contributions %s)",
        net_annual, gross_annual, federal_tax, provincial_tax, total_tax - federal_tax - provincial_tax,
    )

    return IncomeTaxResult(
        gross_annual=gross_annual,
        federal_tax=federal_tax,
        provincial_tax=provincial_tax,
        contributions=contributions,
        total_tax=total_tax,
        net_annual=net_annual,
        net_monthly=net_annual / 12,
        effective_rate=total_tax / gross_annual if gross_annual > 0 else 0.0,
        marginal_rate=max(
            marginal_rate(gross_annual, table.federal_brackets),
            marginal_rate(gross_annual, table.provincial_brackets),
        ),
    )


# ── RRSP and simplified return ───────────────────────────────────────────────

def rrsp_tax_savings(gross_annual: float, contribution: float, table: RateTable) -> float:
    """
    Income tax saved by deducting an RRSP contribution.

    Evaluated on the actual brackets (with and without the deduction) rather
    than with a flat marginal-rate guess, so a contribution spanning two
    brackets is credited at both rates. Payroll contributions are unaffected
    by RRSP deductions and are left out.
    """
    if gross_annual < 0 or contribution < 0:
        raise InvalidInput("gross_annual and contribution cannot be negative")

    before = sum(income_tax(gross_annual, table))
    after = sum(income_tax(max(0.0, gross_annual - contribution), table))
    return before - after


def estimate_return(
    employment_income: float,
    federal_tax_paid: float,
    provincial_tax_paid: float,
    table: RateTable,
    rrsp_contributions: float = 0.0,
    union_dues: float = 0.0,
) -> TaxReturnEstimate:
    """
    Simplified return: tax owed on employment income less RRSP and union
    dues deductions, compared with the tax already withheld.

    Not a filing: other deductions and credits are ignored.
    """
    amounts = [employment_income, federal_tax_paid, provincial_tax_paid, rrsp_contributions, union_dues]
    if any(a < 0 for a in amounts):
        raise InvalidInput("return amounts cannot be negative")

    deductions = rrsp_contributions + union_dues
    taxable = max(0.0, employment_income - deductions)
    federal_owed, provincial_owed = income_tax(taxable, table)

    total_owed = federal_owed + provincial_owed
    total_paid = federal_tax_paid + provincial_tax_paid

    return TaxReturnEstimate(
        total_income=employment_income,
        total_deductions=deductions,
        federal_tax_owed=federal_owed,
        provincial_tax_owed=provincial_owed,
        total_tax_owed=total_owed,
        total_tax_paid=total_paid,
        refund_or_owing=total_paid - total_owed,
    )
