"""
Tests for tax.py against the bundled 2026 Quebec rate table.

Hand-computed 2026 figures at 60,000 gross:
  Federal:   55,867 x 15% + 4,133 x 20.5% - 15,705 x 15%  = 6,871.565
  Quebec:    51,780 x 14% + 8,220 x 19%   - 18,952 x 14%  = 6,157.72
  RRQ:       (60,000 - 3,500) x 6.4%                      = 3,616.00
  RQAP:      60,000 x 0.494%                              =   296.40
  AE:        60,000 x 1.27%                               =   762.00
"""

import logging

import pytest

from finance_engine.errors import InvalidInput
from finance_engine.models import BasicPersonalAmounts, Bracket, ContributionRule
from finance_engine.rate_tables import load_rate_table
from finance_engine.tax import (
    compute_contribution,
    compute_net,
    convert_to_annual,
    estimate_return,
    rrsp_tax_savings,
)


@pytest.fixture(scope="module")
def table():
    return load_rate_table(2026)


def contributions_by_name(result) -> dict[str, float]:
    return {c.name: c.amount for c in result.contributions}


# ── Net income ────────────────────────────────────────────────────────────────

def test_net_income_60k(table):
    result = compute_net(60_000, table)

    assert result.federal_tax == pytest.approx(6_871.565)
    assert result.provincial_tax == pytest.approx(6_157.72)
    assert contributions_by_name(result) == pytest.approx(
        {"RRQ": 3_616.0, "RQAP": 296.4, "AE": 762.0}
    )
    assert result.total_tax == pytest.approx(17_703.685)
    assert result.net_annual == pytest.approx(42_296.315)
    assert result.net_monthly == pytest.approx(42_296.315 / 12)
    assert result.effective_rate == pytest.approx(17_703.685 / 60_000)
    assert result.marginal_rate == pytest.approx(0.205)


def test_contributions_capped_at_high_income(table):
    result = compute_net(200_000, table)
    assert contributions_by_name(result) == pytest.approx(
        {"RRQ": 65_000 * 0.064, "RQAP": 94_000 * 0.00494, "AE": 63_200 * 0.0127}
    )
    assert result.marginal_rate == pytest.approx(0.29)


def test_basic_personal_credit_cannot_go_negative(table):
    result = compute_net(10_000, table)
    assert result.federal_tax == 0.0
    assert result.provincial_tax == 0.0
    assert contributions_by_name(result)["RRQ"] == pytest.approx(6_500 * 0.064)


def test_zero_income(table):
    result = compute_net(0, table)
    assert result.total_tax == 0.0
    assert result.net_annual == 0.0
    assert result.effective_rate == 0.0


def test_negative_income_rejected(table):
    with pytest.raises(InvalidInput):
        compute_net(-1, table)


def test_net_never_decreases_with_gross(table):
    nets = [compute_net(g, table).net_annual for g in range(0, 300_001, 2_500)]
    for lower, higher in zip(nets, nets[1:]):
        assert lower <= higher


def test_idempotent(table):
    assert compute_net(87_654.32, table) == compute_net(87_654.32, table)


# ── Contribution rule ─────────────────────────────────────────────────────────

class TestComputeContribution:
    RULE = ContributionRule(name="RRQ", rate=0.064, max_insurable_earnings=68_500, exemption=3_500)

    def test_below_exemption(self):
        assert compute_contribution(3_000, self.RULE) == 0.0

    def test_between_exemption_and_cap(self):
        assert compute_contribution(40_000, self.RULE) == pytest.approx(36_500 * 0.064)

    def test_at_and_above_cap(self):
        capped = 65_000 * 0.064
        assert compute_contribution(68_500, self.RULE) == pytest.approx(capped)
        assert compute_contribution(500_000, self.RULE) == pytest.approx(capped)


# ── Pay frequency ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "frequency,expected",
    [("annual", 52_000), ("monthly", 624_000), ("biweekly", 1_352_000), ("weekly", 2_704_000)],
)
def test_convert_to_annual(frequency, expected):
    assert convert_to_annual(52_000, frequency) == expected


def test_convert_to_annual_unknown_frequency():
    with pytest.raises(InvalidInput):
        convert_to_annual(1_000, "daily")


# ── RRSP savings ──────────────────────────────────────────────────────────────

def test_rrsp_savings_use_actual_brackets(table):
    """
    5,000 off 60,000: federal 4,133 at 20.5% + 867 at 15%; Quebec 5,000 at 19%.
    """
    expected = 4_133 * 0.205 + 867 * 0.15 + 5_000 * 0.19
    assert rrsp_tax_savings(60_000, 5_000, table) == pytest.approx(expected)


def test_rrsp_savings_zero_for_untaxed_income(table):
    assert rrsp_tax_savings(12_000, 2_000, table) == 0.0


def test_rrsp_contribution_larger_than_income(table):
    saving = rrsp_tax_savings(30_000, 50_000, table)
    result = compute_net(30_000, table)
    assert saving == pytest.approx(result.federal_tax + result.provincial_tax)


# ── Simplified return ─────────────────────────────────────────────────────────

def test_estimate_return_owing(table):
    estimate = estimate_return(60_000, federal_tax_paid=7_000, provincial_tax_paid=6_000, table=table)
    assert estimate.total_tax_owed == pytest.approx(6_871.565 + 6_157.72)
    assert estimate.refund_or_owing == pytest.approx(13_000 - 13_029.285)
    assert not estimate.is_refund


def test_estimate_return_refund_with_deductions(table):
    estimate = estimate_return(
        60_000,
        federal_tax_paid=7_000,
        provincial_tax_paid=6_500,
        table=table,
        rrsp_contributions=5_000,
        union_dues=500,
    )
    assert estimate.total_deductions == 5_500
    assert estimate.is_refund
    assert estimate.refund_or_owing > 0


def test_estimate_return_rejects_negative(table):
    with pytest.raises(InvalidInput):
        estimate_return(60_000, -1, 0, table)


# ── Custom table ──────────────────────────────────────────────────────────────

def test_custom_flat_table(table):
    """A flat-rate table with no credits or contributions taxes gross x rate."""
    flat = table.model_copy(
        update={
            "federal_brackets": (Bracket(lower_bound=0, rate=0.10),),
            "provincial_brackets": (Bracket(lower_bound=0, rate=0.05),),
            "payroll_contributions": (),
            "basic_personal_amounts": BasicPersonalAmounts(federal=0, provincial=0),
        }
    )
    result = compute_net(100_000, flat)
    assert result.total_tax == pytest.approx(15_000)
    assert result.marginal_rate == 0.10


# ── Logging ───────────────────────────────────────────────────────────────────

def test_compute_net_logs_at_debug(table, caplog):
    with caplog.at_level(logging.DEBUG, logger="finance_engine.tax"):
        compute_net(60_000, table)
    assert any(r.levelno == logging.DEBUG and "Net income" in r.getMessage() for r in caplog.records)
