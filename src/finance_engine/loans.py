"""
Consumer loan calculators built on the amortization engine.

Auto loan: in Quebec the sales tax is charged on the net amount, i.e. the
vehicle price less the down payment / trade-in, and is financed with it.
"""

from finance_engine.amortization import compute_payment
from finance_engine.errors import InvalidInput
from finance_engine.models import AutoLoanResult, LoanTerms, RateTable, StudentLoanResult
from finance_engine.sales_tax import add_sales_tax


def auto_loan(
    vehicle_price: float,
    down_payment: float,
    annual_rate: float,
    term_months: int,
    table: RateTable,
    include_taxes: bool = True,
) -> AutoLoanResult:
    if vehicle_price < 0 or down_payment < 0:
        raise InvalidInput("vehicle_price and down_payment cannot be negative")
    if down_payment > vehicle_price:
        raise InvalidInput(
            f"down_payment {down_payment} exceeds vehicle_price {vehicle_price}"
        )

    taxable = vehicle_price - down_payment
    sales_tax = add_sales_tax(taxable, table).total_tax if include_taxes else 0.0
    loan_amount = taxable + sales_tax

    result = compute_payment(
        LoanTerms(principal=loan_amount, annual_rate=annual_rate, term_months=term_months)
    )

    return AutoLoanResult(
        vehicle_price=vehicle_price,
        sales_tax=sales_tax,
        down_payment=down_payment,
        loan_amount=loan_amount,
        monthly_payment=result.monthly_payment,
        biweekly_payment=result.monthly_payment * 12 / 26,
        total_paid=result.total_paid,
        total_interest=result.total_interest,
    )


def student_loan(
    principal: float,
    annual_rate: float,
    term_months: int,
    table: RateTable,
) -> StudentLoanResult:
    """Student loan repayment and the provincial credit on interest paid."""
    result = compute_payment(
        LoanTerms(principal=principal, annual_rate=annual_rate, term_months=term_months)
    )
    credit = result.total_interest * table.student_loan_credit_rate

    return StudentLoanResult(
        principal=principal,
        monthly_payment=result.monthly_payment,
        total_paid=result.total_paid,
        total_interest=result.total_interest,
        interest_credit=credit,
        effective_interest_cost=result.total_interest - credit,
    )
