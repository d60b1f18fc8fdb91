"""
Housing estimators: land transfer tax and TAL rent increase.

Land transfer tax (taxe de bienvenue) is a progressive bracket schedule on
the purchase price, with Montreal adding higher brackets.

Rent increase:
  - base index on the current rent, plus a heating adjustment when the
    landlord heats the unit;
  - annual municipal/school tax, insurance and maintenance increases are
    passed through monthly (/ 12);
  - major renovations are amortized at a yearly rate of their cost.
"""

from finance_engine.brackets import bracket_breakdown
from finance_engine.errors import InvalidInput
from finance_engine.models import (
    RateTable,
    RentIncreaseInputs,
    RentIncreaseResult,
    TransferTaxResult,
)


def transfer_tax(price: float, municipality: str, table: RateTable) -> TransferTaxResult:
    if price < 0:
        raise InvalidInput(f"price cannot be negative, got {price}")
    if municipality not in table.transfer_tax_brackets:
        raise InvalidInput(
            f"municipality must be one of {sorted(table.transfer_tax_brackets)}, "
            f"got {municipality!r}"
        )

    breakdown = bracket_breakdown(price, table.transfer_tax_brackets[municipality])
    total = sum(s.tax for s in breakdown)

    return TransferTaxResult(
        price=price,
        municipality=municipality,
        total_tax=total,
        effective_rate=total / price if price > 0 else 0.0,
        breakdown=breakdown,
    )


def rent_increase(inputs: RentIncreaseInputs, table: RateTable) -> RentIncreaseResult:
    rules = table.rent_increase
    rent = inputs.current_rent
    base_index = rent * rules.base_index_rate

    heating = 0.0
    if inputs.heated_by_landlord:
        heating = rent * rules.heating_adjustment_rates.get(inputs.heating_type, 0.0)

    municipal = inputs.municipal_tax_increase / 12
    school = inputs.school_tax_increase / 12
    insurance = inputs.insurance_increase / 12
    maintenance = inputs.maintenance_increase / 12
    renovation = inputs.major_renovations * rules.renovation_amortization_rate / 12

    total = base_index + heating + municipal + school + insurance + maintenance + renovation

    return RentIncreaseResult(
        current_rent=rent,
        base_index_increase=base_index,
        heating_adjustment=heating,
        municipal_tax_increase=municipal,
        school_tax_increase=school,
        insurance_increase=insurance,
        maintenance_increase=maintenance,
        renovation_increase=renovation,
        total_increase=total,
        new_rent=rent + total,
        percentage_increase=total / rent,
    )
