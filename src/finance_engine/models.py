"""Pydantic v2 models for the finance engine.

Every model is frozen: results are created per call and never mutated.
Input models reject out-of-domain values with InvalidInput.

RateTable is shared by every caller once loaded, so its collections are
tuples and read-only mappings as well.
"""

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_validator,
)

from finance_engine.errors import InvalidInput

HeatingType = Literal["none", "electricity", "gas", "oil"]
PayFrequency = Literal["annual", "monthly", "biweekly", "weekly"]
MortgageFrequency = Literal["monthly", "biweekly"]


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


def _non_negative(v: float, info: ValidationInfo) -> float:
    if v < 0:
        raise InvalidInput(f"{info.field_name} cannot be negative, got {v}")
    return v


def _unit_rate(v: float, info: ValidationInfo) -> float:
    if not 0 <= v < 1:
        raise InvalidInput(f"{info.field_name} must be in [0, 1), got {v}")
    return v


# ── Rate table configuration ─────────────────────────────────────────────────

class Bracket(FrozenModel):
    lower_bound: float
    upper_bound: float = math.inf    # Top bracket is unbounded
    rate: float

    @field_validator("upper_bound", mode="before")
    @classmethod
    def null_means_unbounded(cls, v: float | None) -> float:
        # JSON has no infinity; pydantic dumps it as null
        return math.inf if v is None else v


class BracketSlice(FrozenModel):
    lower_bound: float
    upper_bound: float
    taxed_amount: float      # Portion of the amount falling in this bracket
    rate: float
    tax: float


class ContributionRule(FrozenModel):
    name: str                        # "RRQ" | "RQAP" | "AE"
    rate: float
    max_insurable_earnings: float    # Earnings above this are not assessed
    exemption: float = 0.0           # Earnings below this are not assessed


class BasicPersonalAmounts(FrozenModel):
    federal: float
    provincial: float


class CreditBand(FrozenModel):
    threshold: float
    rate: float


class MortgageRules(FrozenModel):
    gds_limit: float                 # Gross Debt Service ceiling
    tds_limit: float                 # Total Debt Service ceiling
    stress_test_add_on: float        # Qualifying rate = contract rate + add-on


class RentIncreaseRules(FrozenModel):
    base_index_rate: float
    heating_adjustment_rates: Mapping[str, float]
    renovation_amortization_rate: float

    @field_validator("heating_adjustment_rates")
    @classmethod
    def read_only_rates(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType(dict(v))

    @field_serializer("heating_adjustment_rates")
    def dump_rates(self, v: Mapping[str, float]) -> dict[str, float]:
        return dict(v)


class RateTable(FrozenModel):
    year: int
    federal_brackets: tuple[Bracket, ...]
    provincial_brackets: tuple[Bracket, ...]
    payroll_contributions: tuple[ContributionRule, ...]
    basic_personal_amounts: BasicPersonalAmounts
    mortgage_rules: MortgageRules
    daycare_daily_rate: float
    daycare_credit_bands: tuple[CreditBand, ...]
    daycare_competitive_factor: float   # Multiple of the CPE daily rate
    transfer_tax_brackets: Mapping[str, tuple[Bracket, ...]]
    rent_increase: RentIncreaseRules
    student_loan_credit_rate: float
    tps_rate: float                     # Federal GST
    tvq_rate: float                     # Quebec QST

    @field_validator("transfer_tax_brackets")
    @classmethod
    def read_only_schedules(
        cls, v: Mapping[str, tuple[Bracket, ...]]
    ) -> Mapping[str, tuple[Bracket, ...]]:
        return MappingProxyType(dict(v))

    @field_serializer("transfer_tax_brackets")
    def dump_schedules(self, v: Mapping[str, tuple[Bracket, ...]]) -> dict[str, tuple[Bracket, ...]]:
        return dict(v)

    @property
    def sales_tax_rate(self) -> float:
        """Combined TPS + TVQ rate."""
        return self.tps_rate + self.tvq_rate


# ── Income tax ───────────────────────────────────────────────────────────────

class Contribution(FrozenModel):
    name: str
    amount: float


class IncomeTaxResult(FrozenModel):
    gross_annual: float
    federal_tax: float
    provincial_tax: float
    contributions: list[Contribution]
    total_tax: float
    net_annual: float
    net_monthly: float
    effective_rate: float
    marginal_rate: float     # Higher of the federal and provincial marginal rates


class TaxReturnEstimate(FrozenModel):
    total_income: float
    total_deductions: float
    federal_tax_owed: float
    provincial_tax_owed: float
    total_tax_owed: float
    total_tax_paid: float
    refund_or_owing: float   # > 0 refund, < 0 balance owing

    @property
    def is_refund(self) -> bool:
        return self.refund_or_owing > 0


# ── Amortization ─────────────────────────────────────────────────────────────

class LoanTerms(FrozenModel):
    principal: float
    annual_rate: float       # Fraction, e.g. 0.0799
    term_months: int

    @field_validator("principal")
    @classmethod
    def validate_principal(cls, v: float, info: ValidationInfo) -> float:
        return _non_negative(v, info)

    @field_validator("annual_rate")
    @classmethod
    def validate_rate(cls, v: float, info: ValidationInfo) -> float:
        return _unit_rate(v, info)

    @field_validator("term_months")
    @classmethod
    def validate_term(cls, v: int) -> int:
        if v < 1:
            raise InvalidInput(f"term_months must be at least 1, got {v}")
        return v


class ScheduleEntry(FrozenModel):
    period: int
    interest_portion: float
    principal_portion: float
    remaining_balance: float     # Balance after this period's payment


class AmortizationResult(FrozenModel):
    monthly_payment: float
    total_paid: float
    total_interest: float
    schedule: list[ScheduleEntry] | None = None


class MortgageInputs(FrozenModel):
    principal: float
    annual_rate: float
    amortization_years: int = 25
    frequency: MortgageFrequency = "monthly"

    @field_validator("principal")
    @classmethod
    def validate_principal(cls, v: float, info: ValidationInfo) -> float:
        return _non_negative(v, info)

    @field_validator("annual_rate")
    @classmethod
    def validate_rate(cls, v: float, info: ValidationInfo) -> float:
        return _unit_rate(v, info)

    @field_validator("amortization_years")
    @classmethod
    def validate_years(cls, v: int) -> int:
        if v < 1:
            raise InvalidInput(f"amortization_years must be at least 1, got {v}")
        return v


class BalancePoint(FrozenModel):
    year: int
    balance: float           # Outstanding after the year's last payment


class MortgageResult(FrozenModel):
    payment: float                   # Per period at the chosen frequency
    payments_per_year: int
    total_paid: float
    total_interest: float
    balance_over_time: list[BalancePoint]
    stress_test_payment: float | None = None
    stress_test_increase: float | None = None


class DebtPayoffResult(FrozenModel):
    balance: float
    annual_rate: float
    monthly_payment: float
    is_payoff_possible: bool         # False when the payment never beats the interest
    months_to_payoff: int
    total_paid: float
    total_interest: float

    @property
    def years_to_payoff(self) -> float:
        return self.months_to_payoff / 12


class SalesTaxResult(FrozenModel):
    amount_before_tax: float
    tps: float
    tvq: float
    total: float

    @property
    def total_tax(self) -> float:
        return self.tps + self.tvq


class AutoLoanResult(FrozenModel):
    vehicle_price: float
    sales_tax: float
    down_payment: float
    loan_amount: float
    monthly_payment: float
    biweekly_payment: float
    total_paid: float
    total_interest: float


class StudentLoanResult(FrozenModel):
    principal: float
    monthly_payment: float
    total_paid: float
    total_interest: float
    interest_credit: float           # Provincial credit on interest paid
    effective_interest_cost: float


# ── Growth ───────────────────────────────────────────────────────────────────

class GrowthInputs(FrozenModel):
    initial: float
    monthly_contribution: float = 0.0
    annual_rate: float
    years: int

    @field_validator("initial", "monthly_contribution")
    @classmethod
    def validate_amounts(cls, v: float, info: ValidationInfo) -> float:
        return _non_negative(v, info)

    @field_validator("annual_rate")
    @classmethod
    def validate_rate(cls, v: float, info: ValidationInfo) -> float:
        return _unit_rate(v, info)

    @field_validator("years")
    @classmethod
    def validate_years(cls, v: int) -> int:
        if v < 0:
            raise InvalidInput(f"years cannot be negative, got {v}")
        return v


class YearEntry(FrozenModel):
    year: int
    contributed: float       # Cumulative, including the initial amount
    interest: float          # Cumulative
    total: float
    age: int | None = None   # Set by retirement projections


class GrowthResult(FrozenModel):
    final_value: float
    total_contributed: float
    total_interest: float
    yearly: list[YearEntry]


class RetirementInputs(FrozenModel):
    current_age: int
    retirement_age: int
    current_savings: float = 0.0
    monthly_contribution: float = 0.0
    annual_rate: float

    @field_validator("current_savings", "monthly_contribution")
    @classmethod
    def validate_amounts(cls, v: float, info: ValidationInfo) -> float:
        return _non_negative(v, info)

    @field_validator("annual_rate")
    @classmethod
    def validate_rate(cls, v: float, info: ValidationInfo) -> float:
        return _unit_rate(v, info)

    @model_validator(mode="after")
    def validate_ages(self) -> "RetirementInputs":
        if self.current_age < 0:
            raise InvalidInput(f"current_age cannot be negative, got {self.current_age}")
        if self.retirement_age < self.current_age:
            raise InvalidInput(
                f"retirement_age {self.retirement_age} is before current_age {self.current_age}"
            )
        return self

    @property
    def years_until_retirement(self) -> int:
        return self.retirement_age - self.current_age


class RetirementResult(FrozenModel):
    current_age: int
    retirement_age: int
    years_until_retirement: int
    total_at_retirement: float
    total_contributed: float
    total_interest: float
    yearly: list[YearEntry]  # One entry per age, current through retirement


# ── Affordability ────────────────────────────────────────────────────────────

class AffordabilityInputs(FrozenModel):
    annual_income: float
    monthly_debts: float = 0.0
    down_payment: float = 0.0
    contract_rate: float
    amortization_years: int = 25
    monthly_housing_expenses: float = 0.0    # Heating, property tax, condo fees

    @field_validator("annual_income")
    @classmethod
    def validate_income(cls, v: float) -> float:
        if v <= 0:
            raise InvalidInput(f"annual_income must be positive, got {v}")
        return v

    @field_validator("monthly_debts", "down_payment", "monthly_housing_expenses")
    @classmethod
    def validate_amounts(cls, v: float, info: ValidationInfo) -> float:
        return _non_negative(v, info)

    @field_validator("contract_rate")
    @classmethod
    def validate_rate(cls, v: float, info: ValidationInfo) -> float:
        return _unit_rate(v, info)

    @field_validator("amortization_years")
    @classmethod
    def validate_years(cls, v: int) -> int:
        if v < 1:
            raise InvalidInput(f"amortization_years must be at least 1, got {v}")
        return v


class AffordabilityResult(FrozenModel):
    monthly_income: float
    gds_limit: float
    tds_limit: float
    max_monthly_payment: float
    stress_rate: float
    max_mortgage: float
    max_purchase_price: float
    monthly_payment: float   # Payment on max_mortgage at the contract rate
    gds_ratio: float
    tds_ratio: float
    is_affordable: bool


# ── Credits and housing estimators ───────────────────────────────────────────

class DaycareResult(FrozenModel):
    days_per_year: int
    cpe_daily_rate: float
    cpe_annual_cost: float
    private_daily_rate: float
    private_annual_cost: float       # Before the credit
    credit_rate: float
    credit_amount: float
    private_net_annual_cost: float
    private_net_daily_cost: float
    annual_difference: float         # Private net minus CPE
    is_private_competitive: bool     # Net daily cost within the competitive factor of CPE


class TransferTaxResult(FrozenModel):
    price: float
    municipality: str
    total_tax: float
    effective_rate: float
    breakdown: list[BracketSlice]


class RentIncreaseInputs(FrozenModel):
    current_rent: float
    heated_by_landlord: bool = False
    heating_type: HeatingType = "none"
    municipal_tax_increase: float = 0.0      # Annual amounts
    school_tax_increase: float = 0.0
    insurance_increase: float = 0.0
    maintenance_increase: float = 0.0
    major_renovations: float = 0.0           # Total renovation cost

    @field_validator("current_rent")
    @classmethod
    def validate_rent(cls, v: float) -> float:
        if v <= 0:
            raise InvalidInput(f"current_rent must be positive, got {v}")
        return v

    @field_validator("major_renovations")
    @classmethod
    def validate_renovations(cls, v: float, info: ValidationInfo) -> float:
        return _non_negative(v, info)


class RentIncreaseResult(FrozenModel):
    current_rent: float
    base_index_increase: float
    heating_adjustment: float
    municipal_tax_increase: float    # Monthly pass-through amounts below
    school_tax_increase: float
    insurance_increase: float
    maintenance_increase: float
    renovation_increase: float
    total_increase: float
    new_rent: float
    percentage_increase: float       # Fraction of current rent
