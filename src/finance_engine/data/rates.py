"""
Hardcoded Quebec rate data for the 2026 tax year.
Add a new entry to RATE_TABLES each year; calculation code never changes.

Brackets omit "upper_bound" on the top bracket (unbounded).
"""

from typing import TypedDict

RATES_DATE = "2026-01-01"

DEFAULT_YEAR = 2026


class _BracketBase(TypedDict):
    lower_bound: float
    rate: float


class BracketData(_BracketBase, total=False):
    upper_bound: float   # Omitted on the top bracket


class ContributionData(TypedDict):
    name: str
    rate: float
    max_insurable_earnings: float
    exemption: float


class CreditBandData(TypedDict):
    threshold: float
    rate: float


class MortgageRulesData(TypedDict):
    gds_limit: float
    tds_limit: float
    stress_test_add_on: float


class RentIncreaseData(TypedDict):
    base_index_rate: float
    heating_adjustment_rates: dict[str, float]
    renovation_amortization_rate: float


class BasicPersonalAmountsData(TypedDict):
    federal: float
    provincial: float


class RateTableData(TypedDict):
    """Raw rate data for one tax year, in RateTable field names."""
    year: int
    federal_brackets: list[BracketData]
    provincial_brackets: list[BracketData]
    payroll_contributions: list[ContributionData]
    basic_personal_amounts: BasicPersonalAmountsData
    mortgage_rules: MortgageRulesData
    daycare_daily_rate: float
    daycare_credit_bands: list[CreditBandData]
    daycare_competitive_factor: float
    transfer_tax_brackets: dict[str, list[BracketData]]
    rent_increase: RentIncreaseData
    student_loan_credit_rate: float
    tps_rate: float
    tvq_rate: float

# ── Income tax brackets ──────────────────────────────────────────────────────

FEDERAL_BRACKETS_2026: list[BracketData] = [
    {"lower_bound": 0,       "upper_bound": 55_867,  "rate": 0.15},
    {"lower_bound": 55_867,  "upper_bound": 111_733, "rate": 0.205},
    {"lower_bound": 111_733, "upper_bound": 173_205, "rate": 0.26},
    {"lower_bound": 173_205, "upper_bound": 246_752, "rate": 0.29},
    {"lower_bound": 246_752,                         "rate": 0.33},
]

QUEBEC_BRACKETS_2026: list[BracketData] = [
    {"lower_bound": 0,       "upper_bound": 51_780,  "rate": 0.14},
    {"lower_bound": 51_780,  "upper_bound": 103_545, "rate": 0.19},
    {"lower_bound": 103_545, "upper_bound": 126_000, "rate": 0.24},
    {"lower_bound": 126_000,                         "rate": 0.2575},
]

BASIC_PERSONAL_AMOUNTS_2026: BasicPersonalAmountsData = {
    "federal": 15_705,
    "provincial": 18_952,
}

# ── Payroll contributions ────────────────────────────────────────────────────
# RRQ (QPP) has a 3,500 basic exemption; RQAP and EI are capped only.

PAYROLL_CONTRIBUTIONS_2026: list[ContributionData] = [
    {"name": "RRQ",  "rate": 0.064,   "max_insurable_earnings": 68_500, "exemption": 3_500},
    {"name": "RQAP", "rate": 0.00494, "max_insurable_earnings": 94_000, "exemption": 0},
    {"name": "AE",   "rate": 0.0127,  "max_insurable_earnings": 63_200, "exemption": 0},
]

# ── Mortgage qualification ───────────────────────────────────────────────────

MORTGAGE_RULES_2026: MortgageRulesData = {
    "gds_limit": 0.39,            # Gross Debt Service ceiling
    "tds_limit": 0.44,            # Total Debt Service ceiling
    "stress_test_add_on": 0.02,   # Qualifying rate = contract rate + 2%
}

# ── Daycare (CPE vs private) ─────────────────────────────────────────────────
# Refundable credit rate for private daycare by family income (simplified grid)

DAYCARE_DAILY_RATE_2026 = 9.10    # Subsidized CPE rate per day

DAYCARE_CREDIT_BANDS_2026: list[CreditBandData] = [
    {"threshold": 0,       "rate": 0.78},
    {"threshold": 36_500,  "rate": 0.70},
    {"threshold": 100_000, "rate": 0.67},
]

# Private daycare counts as competitive when its net daily cost is within
# this multiple of the CPE rate
DAYCARE_COMPETITIVE_FACTOR_2026 = 1.20

# ── Land transfer tax (taxe de bienvenue) ────────────────────────────────────

TRANSFER_TAX_BRACKETS_2026: dict[str, list[BracketData]] = {
    "quebec": [
        {"lower_bound": 0,       "upper_bound": 58_900,  "rate": 0.005},
        {"lower_bound": 58_900,  "upper_bound": 294_600, "rate": 0.01},
        {"lower_bound": 294_600,                         "rate": 0.015},
    ],
    "montreal": [
        {"lower_bound": 0,         "upper_bound": 58_900,    "rate": 0.005},
        {"lower_bound": 58_900,    "upper_bound": 294_600,   "rate": 0.01},
        {"lower_bound": 294_600,   "upper_bound": 589_200,   "rate": 0.015},
        {"lower_bound": 589_200,   "upper_bound": 1_178_500, "rate": 0.02},
        {"lower_bound": 1_178_500, "upper_bound": 2_357_000, "rate": 0.025},
        {"lower_bound": 2_357_000,                           "rate": 0.035},
    ],
}

# ── Rent increase (TAL) ──────────────────────────────────────────────────────

RENT_INCREASE_2026: RentIncreaseData = {
    "base_index_rate": 0.04,      # Unheated units
    "heating_adjustment_rates": {
        "none": 0.0,
        "electricity": 0.015,
        "gas": 0.012,
        "oil": 0.018,
    },
    "renovation_amortization_rate": 0.048,   # Per year, of renovation cost
}

# ── Misc ─────────────────────────────────────────────────────────────────────

STUDENT_LOAN_CREDIT_RATE_2026 = 0.20   # Quebec credit on student loan interest
TPS_RATE_2026 = 0.05                   # Federal GST
TVQ_RATE_2026 = 0.09975                # Quebec QST; combined 14.975%


RATE_TABLES: dict[int, RateTableData] = {
    2026: {
        "year": 2026,
        "federal_brackets": FEDERAL_BRACKETS_2026,
        "provincial_brackets": QUEBEC_BRACKETS_2026,
        "payroll_contributions": PAYROLL_CONTRIBUTIONS_2026,
        "basic_personal_amounts": BASIC_PERSONAL_AMOUNTS_2026,
        "mortgage_rules": MORTGAGE_RULES_2026,
        "daycare_daily_rate": DAYCARE_DAILY_RATE_2026,
        "daycare_credit_bands": DAYCARE_CREDIT_BANDS_2026,
        "daycare_competitive_factor": DAYCARE_COMPETITIVE_FACTOR_2026,
        "transfer_tax_brackets": TRANSFER_TAX_BRACKETS_2026,
        "rent_increase": RENT_INCREASE_2026,
        "student_loan_credit_rate": STUDENT_LOAN_CREDIT_RATE_2026,
        "tps_rate": TPS_RATE_2026,
        "tvq_rate": TVQ_RATE_2026,
    },
}
