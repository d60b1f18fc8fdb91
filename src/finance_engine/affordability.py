"""
Mortgage affordability: the largest mortgage allowed by the bank ratios.

  GDS ceiling: housing costs          <= gds_limit of gross monthly income
  TDS ceiling: housing + other debts  <= tds_limit of gross monthly income

The tighter ceiling, minus non-mortgage housing expenses, is the maximum
monthly mortgage payment. Borrowing is sized at the qualifying (stress)
rate, contract rate + stress_test_add_on, by inverting the annuity formula.

Displayed ratios use the payment at the contract rate. That payment is
never above the stress-rate payment, so an applicant who qualifies at all
(max_monthly_payment > 0) stays under both ceilings.
"""

from finance_engine.amortization import monthly_payment, solve_for_principal
from finance_engine.models import AffordabilityInputs, AffordabilityResult, MortgageRules

# Floating-point slack when checking the ratio ceilings
RATIO_TOLERANCE = 1e-9


def evaluate_affordability(inputs: AffordabilityInputs, rules: MortgageRules) -> AffordabilityResult:
    """
    Maximum payment, mortgage and purchase price for `inputs` under `rules`
    (normally `table.mortgage_rules` of the year's rate table).
    """
    monthly_income = inputs.annual_income / 12
    n = inputs.amortization_years * 12

    gds_limit = monthly_income * rules.gds_limit
    tds_limit = max(0.0, monthly_income * rules.tds_limit - inputs.monthly_debts)
    max_monthly_payment = max(0.0, min(gds_limit, tds_limit) - inputs.monthly_housing_expenses)

    stress_rate = inputs.contract_rate + rules.stress_test_add_on
    max_mortgage = solve_for_principal(max_monthly_payment, stress_rate, n)

    payment = monthly_payment(max_mortgage, inputs.contract_rate, n)
    housing_costs = payment + inputs.monthly_housing_expenses
    gds_ratio = housing_costs / monthly_income
    tds_ratio = (housing_costs + inputs.monthly_debts) / monthly_income

    is_affordable = (
        max_monthly_payment > 0
        and gds_ratio <= rules.gds_limit + RATIO_TOLERANCE
        and tds_ratio <= rules.tds_limit + RATIO_TOLERANCE
    )

    return AffordabilityResult(
        monthly_income=monthly_income,
        gds_limit=gds_limit,
        tds_limit=tds_limit,
        max_monthly_payment=max_monthly_payment,
        stress_rate=stress_rate,
        max_mortgage=max_mortgage,
        max_purchase_price=max_mortgage + inputs.down_payment,
        monthly_payment=payment,
        gds_ratio=gds_ratio,
        tds_ratio=tds_ratio,
        is_affordable=is_affordable,
    )
