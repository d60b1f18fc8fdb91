"""
Tests for affordability.py: bank ratios, stress test, inverse annuity.
"""

import itertools

import pytest

from finance_engine.affordability import RATIO_TOLERANCE, evaluate_affordability
from finance_engine.amortization import monthly_payment
from finance_engine.errors import InvalidInput
from finance_engine.models import AffordabilityInputs, MortgageRules
from finance_engine.rate_tables import load_rate_table

RULES = MortgageRules(gds_limit=0.39, tds_limit=0.44, stress_test_add_on=0.02)


# ── Helpers ───────────────────────────────────────────────────────────────────

def make_inputs(**kwargs) -> AffordabilityInputs:
    defaults = dict(
        annual_income=80_000,
        monthly_debts=0,
        down_payment=50_000,
        contract_rate=0.05,
        amortization_years=25,
        monthly_housing_expenses=150,
    )
    defaults.update(kwargs)
    return AffordabilityInputs(**defaults)


def inverse_annuity(payment: float, annual_rate: float, months: int) -> float:
    r = annual_rate / 12
    return payment * ((1 + r) ** months - 1) / (r * (1 + r) ** months)


# ── Worked example ────────────────────────────────────────────────────────────

def test_affordability_example():
    result = evaluate_affordability(make_inputs(), RULES)

    assert result.monthly_income == pytest.approx(80_000 / 12)
    assert result.gds_limit == pytest.approx(2_600.00)
    assert result.tds_limit == pytest.approx(2_933.33, abs=0.01)
    assert result.max_monthly_payment == pytest.approx(2_450.00)
    assert result.stress_rate == pytest.approx(0.07)

    expected_mortgage = inverse_annuity(2_450, 0.07, 300)
    assert result.max_mortgage == pytest.approx(expected_mortgage, rel=1e-9)
    assert result.max_purchase_price == pytest.approx(expected_mortgage + 50_000, rel=1e-9)
    assert result.is_affordable


def test_ratios_use_contract_rate_payment():
    result = evaluate_affordability(make_inputs(), RULES)
    payment = monthly_payment(result.max_mortgage, 0.05, 300)

    assert result.monthly_payment == pytest.approx(payment)
    assert result.gds_ratio == pytest.approx((payment + 150) / result.monthly_income)
    # Contract payment is below the stress payment, so GDS lands under 39%
    assert result.gds_ratio < 0.39


def test_tds_governs_with_debts():
    """With 600/month of debts, TDS (2,333.33) is tighter than GDS (2,600)."""
    result = evaluate_affordability(make_inputs(monthly_debts=600), RULES)
    assert result.tds_limit == pytest.approx(80_000 / 12 * 0.44 - 600)
    assert result.max_monthly_payment == pytest.approx(result.tds_limit - 150)


# ── Ratio bound ───────────────────────────────────────────────────────────────

GRID = list(
    itertools.product(
        [30_000, 80_000, 250_000],     # annual income
        [0, 400, 1_500],               # monthly debts
        [0.0, 0.0399, 0.0799],         # contract rate
        [10, 25, 30],                  # amortization years
        [0, 150, 400],                 # housing expenses
    )
)


@pytest.mark.parametrize("income,debts,rate,years,housing", GRID)
def test_ratios_within_ceilings(income, debts, rate, years, housing):
    result = evaluate_affordability(
        make_inputs(
            annual_income=income,
            monthly_debts=debts,
            contract_rate=rate,
            amortization_years=years,
            monthly_housing_expenses=housing,
        ),
        RULES,
    )
    if result.max_monthly_payment > 0:
        assert result.gds_ratio <= 0.39 + RATIO_TOLERANCE
        assert result.tds_ratio <= 0.44 + RATIO_TOLERANCE
        assert result.is_affordable
    else:
        assert result.max_mortgage == 0.0
        assert not result.is_affordable


# ── Edge cases ────────────────────────────────────────────────────────────────

def test_debts_exceed_tds_ceiling():
    result = evaluate_affordability(make_inputs(monthly_debts=3_000), RULES)
    assert result.tds_limit == 0.0
    assert result.max_monthly_payment == 0.0
    assert result.max_mortgage == 0.0
    assert result.max_purchase_price == 50_000
    assert not result.is_affordable


def test_housing_expenses_exceed_gds_ceiling():
    result = evaluate_affordability(make_inputs(monthly_housing_expenses=3_000), RULES)
    assert result.max_monthly_payment == 0.0
    assert not result.is_affordable


def test_custom_rules():
    rules = MortgageRules(gds_limit=0.32, tds_limit=0.40, stress_test_add_on=0.0)
    result = evaluate_affordability(make_inputs(monthly_housing_expenses=0), rules)

    assert result.gds_limit == pytest.approx(80_000 / 12 * 0.32)
    assert result.stress_rate == pytest.approx(0.05)
    # No stress add-on: the contract payment uses the whole GDS ceiling
    assert result.gds_ratio == pytest.approx(0.32)


@pytest.mark.parametrize(
    "field,value",
    [
        ("annual_income", 0),
        ("annual_income", -1),
        ("monthly_debts", -1),
        ("down_payment", -1),
        ("contract_rate", 1.2),
        ("amortization_years", 0),
        ("monthly_housing_expenses", -5),
    ],
)
def test_invalid_inputs(field, value):
    with pytest.raises(InvalidInput, match=field):
        make_inputs(**{field: value})


def test_idempotent():
    inputs = make_inputs(monthly_debts=250)
    assert evaluate_affordability(inputs, RULES) == evaluate_affordability(inputs, RULES)


def test_bundled_rules_match_bank_ratios():
    """The 2026 table carries the 39% / 44% ceilings and the 2% stress add-on."""
    rules = load_rate_table(2026).mortgage_rules
    assert rules == RULES
    assert evaluate_affordability(make_inputs(), rules) == evaluate_affordability(make_inputs(), RULES)
