"""
Sliding-scale credits: a rate looked up by income band.

The bands are an administrative schedule, so the lookup is a step function
(no interpolation between thresholds).
"""

from collections.abc import Sequence

from finance_engine.errors import InvalidInput
from finance_engine.models import CreditBand, DaycareResult, RateTable


def rate_for(income: float, bands: Sequence[CreditBand]) -> float:
    """
    Rate of the last band whose threshold <= income.
    Income below the first threshold gets the first band's rate.
    """
    if not bands:
        raise InvalidInput("no credit bands supplied")
    rate = bands[0].rate
    for band in bands:
        if band.threshold > income:
            break
        rate = band.rate
    return rate


def daycare_costs(
    family_income: float,
    private_daily_rate: float,
    days_per_year: int,
    table: RateTable,
) -> DaycareResult:
    """
    Compare subsidized (CPE) daycare with private daycare net of the
    income-based refundable credit.
    """
    if family_income < 0 or private_daily_rate < 0:
        raise InvalidInput("family_income and private_daily_rate cannot be negative")
    if days_per_year < 1:
        raise InvalidInput(f"days_per_year must be at least 1, got {days_per_year}")

    cpe_daily_rate = table.daycare_daily_rate
    cpe_annual = cpe_daily_rate * days_per_year

    private_annual = private_daily_rate * days_per_year
    credit_rate = rate_for(family_income, table.daycare_credit_bands)
    credit_amount = private_annual * credit_rate
    private_net_annual = private_annual - credit_amount
    private_net_daily = private_net_annual / days_per_year

    return DaycareResult(
        days_per_year=days_per_year,
        cpe_daily_rate=cpe_daily_rate,
        cpe_annual_cost=cpe_annual,
        private_daily_rate=private_daily_rate,
        private_annual_cost=private_annual,
        credit_rate=credit_rate,
        credit_amount=credit_amount,
        private_net_annual_cost=private_net_annual,
        private_net_daily_cost=private_net_daily,
        annual_difference=private_net_annual - cpe_annual,
        is_private_competitive=private_net_daily <= cpe_daily_rate * table.daycare_competitive_factor,
    )
