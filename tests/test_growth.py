"""
Tests for growth.py: closed-form projection vs monthly simulation.
"""

import math

import pytest

from finance_engine.errors import InvalidInput
from finance_engine.growth import doubling_time, project, project_retirement
from finance_engine.models import GrowthInputs, RetirementInputs


def simulate_monthly(initial: float, contribution: float, annual_rate: float, years: int) -> list[float]:
    """Balance at the end of every year, compounding and contributing monthly."""
    r = annual_rate / 12
    balance = initial
    totals = [balance]
    for _ in range(years):
        for _ in range(12):
            balance = balance * (1 + r) + contribution
        totals.append(balance)
    return totals


def test_growth_example():
    """1,000 at 12% for one year, no contributions."""
    result = project(GrowthInputs(initial=1_000, monthly_contribution=0, annual_rate=0.12, years=1))
    assert result.final_value == pytest.approx(1_126.83, abs=0.01)
    assert result.total_contributed == 1_000
    assert result.total_interest == pytest.approx(126.83, abs=0.01)


@pytest.mark.parametrize(
    "initial,contribution,rate,years",
    [(1_000, 0, 0.12, 1), (10_000, 500, 0.06, 30), (0, 250, 0.0799, 40), (5_000, 100, 0.0, 10)],
)
def test_closed_form_matches_simulation(initial, contribution, rate, years):
    inputs = GrowthInputs(initial=initial, monthly_contribution=contribution, annual_rate=rate, years=years)
    result = project(inputs)
    expected = simulate_monthly(initial, contribution, rate, years)

    assert len(result.yearly) == years + 1
    for entry, simulated in zip(result.yearly, expected):
        assert math.isclose(entry.total, simulated, rel_tol=1e-6, abs_tol=1e-9)


def test_yearly_ends_on_final_value():
    result = project(GrowthInputs(initial=2_500, monthly_contribution=300, annual_rate=0.07, years=25))
    last = result.yearly[-1]
    assert last.year == 25
    assert last.total == result.final_value
    assert last.contributed == result.total_contributed
    assert last.interest == result.total_interest


def test_year_zero_is_initial():
    result = project(GrowthInputs(initial=2_500, monthly_contribution=300, annual_rate=0.07, years=3))
    first = result.yearly[0]
    assert first.year == 0
    assert first.total == 2_500
    assert first.interest == 0


def test_zero_rate_sums_contributions():
    result = project(GrowthInputs(initial=1_000, monthly_contribution=100, annual_rate=0.0, years=2))
    assert result.final_value == 1_000 + 100 * 24
    assert result.total_interest == 0


def test_zero_years():
    result = project(GrowthInputs(initial=1_000, monthly_contribution=100, annual_rate=0.05, years=0))
    assert result.final_value == 1_000
    assert len(result.yearly) == 1


def test_interest_never_negative():
    result = project(GrowthInputs(initial=100, monthly_contribution=50, annual_rate=0.03, years=15))
    assert all(e.interest >= 0 for e in result.yearly)


def test_total_contributed():
    result = project(GrowthInputs(initial=10_000, monthly_contribution=500, annual_rate=0.06, years=20))
    assert result.total_contributed == 10_000 + 500 * 12 * 20


@pytest.mark.parametrize(
    "field,value",
    [("initial", -1.0), ("monthly_contribution", -10.0), ("annual_rate", 1.5), ("years", -1)],
)
def test_invalid_inputs(field, value):
    kwargs = dict(initial=1_000, monthly_contribution=100, annual_rate=0.05, years=10)
    kwargs[field] = value
    with pytest.raises(InvalidInput, match=field):
        GrowthInputs(**kwargs)


def test_doubling_time():
    assert doubling_time(0.08) == pytest.approx(9.0)
    assert doubling_time(0.0) == math.inf


def test_idempotent():
    inputs = GrowthInputs(initial=10_000, monthly_contribution=500, annual_rate=0.06, years=30)
    assert project(inputs) == project(inputs)


# ── Retirement ────────────────────────────────────────────────────────────────

def make_retirement(**kwargs) -> RetirementInputs:
    defaults = dict(
        current_age=30, retirement_age=65, current_savings=10_000, monthly_contribution=500, annual_rate=0.07
    )
    defaults.update(kwargs)
    return RetirementInputs(**defaults)


def test_retirement_matches_plain_projection():
    result = project_retirement(make_retirement())
    plain = project(GrowthInputs(initial=10_000, monthly_contribution=500, annual_rate=0.07, years=35))

    assert result.years_until_retirement == 35
    assert result.total_at_retirement == plain.final_value
    assert result.total_contributed == plain.total_contributed
    assert result.total_interest == plain.total_interest
    assert [e.total for e in result.yearly] == [e.total for e in plain.yearly]


def test_retirement_points_carry_age():
    result = project_retirement(make_retirement())
    assert [e.age for e in result.yearly] == list(range(30, 66))
    assert result.yearly[-1].total == result.total_at_retirement


def test_plain_projection_has_no_age():
    result = project(GrowthInputs(initial=1_000, annual_rate=0.05, years=2))
    assert all(e.age is None for e in result.yearly)


def test_retiring_now():
    result = project_retirement(make_retirement(retirement_age=30))
    assert result.years_until_retirement == 0
    assert result.total_at_retirement == 10_000
    assert len(result.yearly) == 1


@pytest.mark.parametrize(
    "kwargs,match",
    [
        (dict(retirement_age=25), "retirement_age"),
        (dict(current_age=-1, retirement_age=65), "current_age"),
        (dict(current_savings=-1), "current_savings"),
        (dict(annual_rate=1.2), "annual_rate"),
    ],
)
def test_retirement_invalid_inputs(kwargs, match):
    with pytest.raises(InvalidInput, match=match):
        make_retirement(**kwargs)
