"""
Compound-growth projection with monthly contributions, by year or by age.

Both the final value and every yearly point come from the same closed form

    FV(m) = initial * (1+r)^m + contribution * ((1+r)^m - 1) / r

evaluated at m = year * 12, so the yearly series ends exactly on the final
value and carries no accumulated rounding. r == 0 degrades to a plain sum.
"""

from finance_engine.models import (
    GrowthInputs,
    GrowthResult,
    RetirementInputs,
    RetirementResult,
    YearEntry,
)


def _future_value(initial: float, contribution: float, monthly_rate: float, months: int) -> float:
    growth = (1 + monthly_rate) ** months
    if monthly_rate > 0:
        fv_contributions = contribution * (growth - 1) / monthly_rate
    else:
        fv_contributions = contribution * months
    return initial * growth + fv_contributions


def project(inputs: GrowthInputs) -> GrowthResult:
    """Project `inputs` forward and return the total plus a year-by-year series."""
    r = inputs.annual_rate / 12

    yearly: list[YearEntry] = []
    for year in range(inputs.years + 1):
        months = year * 12
        total = _future_value(inputs.initial, inputs.monthly_contribution, r, months)
        contributed = inputs.initial + inputs.monthly_contribution * months
        yearly.append(
            YearEntry(
                year=year,
                contributed=contributed,
                interest=total - contributed,
                total=total,
            )
        )

    final = yearly[-1]
    return GrowthResult(
        final_value=final.total,
        total_contributed=final.contributed,
        total_interest=final.interest,
        yearly=yearly,
    )


def doubling_time(annual_rate: float) -> float:
    """Rule of 72: approximate years to double at `annual_rate` (fraction)."""
    if annual_rate <= 0:
        return float("inf")
    return 72 / (annual_rate * 100)


def project_retirement(inputs: RetirementInputs) -> RetirementResult:
    """
    Savings projected from the current age to the retirement age, with the
    saver's age on every yearly point.
    """
    growth = project(
        GrowthInputs(
            initial=inputs.current_savings,
            monthly_contribution=inputs.monthly_contribution,
            annual_rate=inputs.annual_rate,
            years=inputs.years_until_retirement,
        )
    )
    yearly = [
        entry.model_copy(update={"age": inputs.current_age + entry.year})
        for entry in growth.yearly
    ]

    return RetirementResult(
        current_age=inputs.current_age,
        retirement_age=inputs.retirement_age,
        years_until_retirement=inputs.years_until_retirement,
        total_at_retirement=growth.final_value,
        total_contributed=growth.total_contributed,
        total_interest=growth.total_interest,
        yearly=yearly,
    )
