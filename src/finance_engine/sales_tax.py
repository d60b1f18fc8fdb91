"""
Quebec sales tax: TPS (federal GST) and TVQ (QST), both charged on the
pre-tax amount.

Adding taxes works forward from the pre-tax amount; extracting them works
back from a tax-included total by dividing by 1 + TPS + TVQ.
"""

from finance_engine.errors import InvalidInput
from finance_engine.models import RateTable, SalesTaxResult


def _split(amount_before_tax: float, total: float, table: RateTable) -> SalesTaxResult:
    return SalesTaxResult(
        amount_before_tax=amount_before_tax,
        tps=amount_before_tax * table.tps_rate,
        tvq=amount_before_tax * table.tvq_rate,
        total=total,
    )


def add_sales_tax(amount_before_tax: float, table: RateTable) -> SalesTaxResult:
    if amount_before_tax < 0:
        raise InvalidInput(f"amount_before_tax cannot be negative, got {amount_before_tax}")
    total = amount_before_tax * (1 + table.sales_tax_rate)
    return _split(amount_before_tax, total, table)


def extract_sales_tax(total: float, table: RateTable) -> SalesTaxResult:
    """Split a tax-included `total` into its pre-tax amount, TPS and TVQ."""
    if total < 0:
        raise InvalidInput(f"total cannot be negative, got {total}")
    return _split(total / (1 + table.sales_tax_rate), total, table)
