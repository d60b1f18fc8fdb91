"""
Rate table store: turns year-scoped rate data into validated RateTable models.

Tables are validated eagerly and cached, so every caller in the process
shares one immutable instance per year. Any problem with the data is a
ConfigurationError; it is meant to stop the process at startup, not to be
caught per calculation.
"""

import logging
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from finance_engine.brackets import validate_bracket_set
from finance_engine.data.rates import RATE_TABLES
from finance_engine.errors import ConfigurationError
from finance_engine.models import CreditBand, RateTable

logger = logging.getLogger(__name__)


def _validate_rate(value: float, name: str) -> None:
    if not 0 <= value <= 1:
        raise ConfigurationError(f"{name}: rate {value} outside [0, 1]")


def validate_credit_bands(bands: Sequence[CreditBand], name: str = "credit_bands") -> None:
    """Credit bands must start at 0 and ascend strictly by threshold."""
    if not bands:
        return
    if bands[0].threshold != 0:
        raise ConfigurationError(
            f"{name}: first band must start at 0, got {bands[0].threshold}"
        )
    for i, band in enumerate(bands):
        _validate_rate(band.rate, f"{name}[{i}]")
        if i > 0 and band.threshold <= bands[i - 1].threshold:
            raise ConfigurationError(
                f"{name}[{i}]: thresholds must ascend, "
                f"{band.threshold} follows {bands[i - 1].threshold}"
            )


def validate_rate_table(table: RateTable) -> None:
    """Check every structural invariant of `table`; raise ConfigurationError."""
    validate_bracket_set(table.federal_brackets, "federal_brackets")
    validate_bracket_set(table.provincial_brackets, "provincial_brackets")
    for municipality, brackets in table.transfer_tax_brackets.items():
        validate_bracket_set(brackets, f"transfer_tax_brackets[{municipality}]")

    for rule in table.payroll_contributions:
        _validate_rate(rule.rate, f"payroll_contributions[{rule.name}]")
        if rule.exemption < 0 or rule.max_insurable_earnings < rule.exemption:
            raise ConfigurationError(
                f"payroll_contributions[{rule.name}]: exemption {rule.exemption} "
                f"must lie in [0, {rule.max_insurable_earnings}]"
            )

    validate_credit_bands(table.daycare_credit_bands, "daycare_credit_bands")

    rules = table.mortgage_rules
    _validate_rate(rules.gds_limit, "mortgage_rules.gds_limit")
    _validate_rate(rules.tds_limit, "mortgage_rules.tds_limit")
    _validate_rate(rules.stress_test_add_on, "mortgage_rules.stress_test_add_on")
    if rules.gds_limit > rules.tds_limit:
        raise ConfigurationError(
            f"mortgage_rules: GDS limit {rules.gds_limit} exceeds TDS limit {rules.tds_limit}"
        )

    _validate_rate(table.student_loan_credit_rate, "student_loan_credit_rate")
    _validate_rate(table.tps_rate, "tps_rate")
    _validate_rate(table.tvq_rate, "tvq_rate")
    if table.daycare_competitive_factor < 1:
        raise ConfigurationError(
            f"daycare_competitive_factor {table.daycare_competitive_factor} must be at least 1"
        )


def build_rate_table(data: dict) -> RateTable:
    """Parse and validate raw rate data (e.g. one entry of RATE_TABLES)."""
    try:
        table = RateTable.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"malformed rate table: {exc}") from exc
    validate_rate_table(table)
    return table


def available_years() -> list[int]:
    return sorted(RATE_TABLES)


@lru_cache(maxsize=None)
def load_rate_table(year: int) -> RateTable:
    """
    Return the validated rate table for `year`.

    Raises ConfigurationError if no table exists for the year or the bundled
    data is invalid.
    """
    if year not in RATE_TABLES:
        raise ConfigurationError(
            f"no rate table for {year}; available: {available_years()}"
        )
    table = build_rate_table(RATE_TABLES[year])
    logger.info("Loaded rate table for %d", year)
    return table


def load_rate_table_file(path: Path | str) -> RateTable:
    """
    Load a rate table from a JSON file, either written by hand with the
    RATE_TABLES keys or dumped with RateTable.model_dump_json().
    An omitted or null bracket upper_bound means unbounded.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read rate table {path}: {exc}") from exc

    try:
        table = RateTable.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"malformed rate table {path}: {exc}") from exc
    validate_rate_table(table)
    logger.info("Loaded rate table for %d from %s", table.year, path)
    return table
