"""
Interactive Rich CLI for the Quebec finance calculators.

Flow:
  1. Banner (tax year + rate-table date + staleness warning)
  2. Calculator menu
  3. Input prompts for the chosen calculator
  4. Result panel / table
  5. Back to the menu until the user quits

All numbers come from the engine modules; this file only prompts and renders.
Pass --verbose to log rate-table loading.
"""

import logging
import sys
from datetime import date, datetime

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from finance_engine.affordability import evaluate_affordability
from finance_engine.amortization import PAYMENTS_PER_YEAR, compute_mortgage, compute_payment, debt_payoff
from finance_engine.credits import daycare_costs
from finance_engine.data.rates import DEFAULT_YEAR, RATES_DATE
from finance_engine.errors import FinanceEngineError
from finance_engine.growth import doubling_time, project, project_retirement
from finance_engine.housing import rent_increase, transfer_tax
from finance_engine.loans import auto_loan, student_loan
from finance_engine.models import (
    AffordabilityInputs,
    GrowthInputs,
    LoanTerms,
    MortgageInputs,
    RateTable,
    RentIncreaseInputs,
    RetirementInputs,
)
from finance_engine.rate_tables import load_rate_table
from finance_engine.sales_tax import add_sales_tax, extract_sales_tax
from finance_engine.tax import PAY_PERIODS_PER_YEAR, compute_net, convert_to_annual

console = Console()


def _fmt_cad(amount: float) -> str:
    return f"{amount:,.2f} $"


def _fmt_pct(rate: float) -> str:
    return f"{rate * 100:.2f}%"


def _ask_rate(label: str, default: float) -> float:
    """Prompt for a percentage and return it as a fraction."""
    return FloatPrompt.ask(f"  {label} (%)", default=default) / 100


def _summary_panel(title: str, rows: list[tuple[str, str]], border_style: str = "cyan") -> Panel:
    width = max(len(label) for label, _ in rows) + 2
    body = "\n".join(f"  {label:<{width}}{value}" for label, value in rows)
    return Panel(body, title=title, border_style=border_style, expand=False)


# ── Banner ───────────────────────────────────────────────────────────────────

def show_banner(table: RateTable) -> None:
    rates_date_obj = datetime.strptime(RATES_DATE, "%Y-%m-%d").date()
    age_days = (date.today() - rates_date_obj).days

    title = Text("Quebec Finance Calculators", style="bold cyan")
    subtitle = Text(f"Tax year {table.year}  |  Rate data as of {RATES_DATE}", style="dim")

    staleness = ""
    if age_days > 365:
        staleness = (
            f"\n[bold red]WARNING:[/bold red] Rate data is {age_days} days old. "
            "Brackets and contribution caps have likely changed."
        )

    console.print(Panel(f"[bold]{title}[/bold]\n{subtitle}{staleness}", expand=False, border_style="cyan"))
    console.print()


# ── Calculators ──────────────────────────────────────────────────────────────

def run_income_tax(table: RateTable) -> None:
    frequency = Prompt.ask("  Pay frequency", choices=list(PAY_PERIODS_PER_YEAR), default="annual")
    amount = FloatPrompt.ask("  Gross pay", default=60_000.0)
    result = compute_net(convert_to_annual(amount, frequency), table)

    grid = Table(title=f"Net salary {table.year}", border_style="blue")
    grid.add_column("Item")
    grid.add_column("Annual", justify="right")
    grid.add_column("Monthly", justify="right")
    grid.add_row("Gross income", _fmt_cad(result.gross_annual), _fmt_cad(result.gross_annual / 12))
    grid.add_row("Federal tax", _fmt_cad(result.federal_tax), _fmt_cad(result.federal_tax / 12))
    grid.add_row("Quebec tax", _fmt_cad(result.provincial_tax), _fmt_cad(result.provincial_tax / 12))
    for c in result.contributions:
        grid.add_row(c.name, _fmt_cad(c.amount), _fmt_cad(c.amount / 12))
    grid.add_row("Net income", _fmt_cad(result.net_annual), _fmt_cad(result.net_monthly), style="bold green")
    console.print(grid)
    console.print(
        f"  Effective rate: {_fmt_pct(result.effective_rate)}  |  "
        f"Marginal rate: {_fmt_pct(result.marginal_rate)}"
    )


def run_loan(table: RateTable) -> None:
    principal = FloatPrompt.ask("  Loan amount", default=20_000.0)
    rate = _ask_rate("Annual interest rate", 7.99)
    term = IntPrompt.ask("  Term (months)", default=60)
    result = compute_payment(LoanTerms(principal=principal, annual_rate=rate, term_months=term))

    console.print(_summary_panel("Loan", [
        ("Monthly payment", _fmt_cad(result.monthly_payment)),
        ("Total paid", _fmt_cad(result.total_paid)),
        ("Total interest", _fmt_cad(result.total_interest)),
    ]))


def run_auto_loan(table: RateTable) -> None:
    price = FloatPrompt.ask("  Vehicle price", default=35_000.0)
    down = FloatPrompt.ask("  Down payment / trade-in", default=5_000.0)
    rate = _ask_rate("Annual interest rate", 6.99)
    term = int(Prompt.ask("  Term (months)", choices=["36", "48", "60", "72", "84"], default="60"))
    taxes = Confirm.ask("  Include TPS + TVQ?", default=True)
    result = auto_loan(price, down, rate, term, table, include_taxes=taxes)

    console.print(_summary_panel("Auto loan", [
        ("Sales tax", _fmt_cad(result.sales_tax)),
        ("Amount financed", _fmt_cad(result.loan_amount)),
        ("Monthly payment", _fmt_cad(result.monthly_payment)),
        ("Bi-weekly payment", _fmt_cad(result.biweekly_payment)),
        ("Total interest", _fmt_cad(result.total_interest)),
    ]))


def run_student_loan(table: RateTable) -> None:
    principal = FloatPrompt.ask("  Loan amount", default=25_000.0)
    rate = _ask_rate("Annual interest rate", 5.0)
    term = IntPrompt.ask("  Term (months)", default=120)
    result = student_loan(principal, rate, term, table)

    console.print(_summary_panel("Student loan", [
        ("Monthly payment", _fmt_cad(result.monthly_payment)),
        ("Total interest", _fmt_cad(result.total_interest)),
        ("Credit on interest", _fmt_cad(result.interest_credit)),
        ("Net interest cost", _fmt_cad(result.effective_interest_cost)),
    ]))


def run_growth(table: RateTable) -> None:
    inputs = GrowthInputs(
        initial=FloatPrompt.ask("  Initial deposit", default=10_000.0),
        monthly_contribution=FloatPrompt.ask("  Monthly contribution", default=500.0),
        annual_rate=_ask_rate("Annual return", 6.0),
        years=IntPrompt.ask("  Years", default=20),
    )
    result = project(inputs)

    grid = Table(title="Compound growth", border_style="blue")
    grid.add_column("Year", justify="center")
    grid.add_column("Contributed", justify="right")
    grid.add_column("Interest", justify="right")
    grid.add_column("Total", justify="right")
    for entry in result.yearly[1:]:
        grid.add_row(
            str(entry.year), _fmt_cad(entry.contributed), _fmt_cad(entry.interest), _fmt_cad(entry.total)
        )
    console.print(grid)
    console.print(
        f"  Final value: [bold green]{_fmt_cad(result.final_value)}[/bold green]  |  "
        f"Doubling time (rule of 72): {doubling_time(inputs.annual_rate):.1f} years"
    )


def run_affordability(table: RateTable) -> None:
    inputs = AffordabilityInputs(
        annual_income=FloatPrompt.ask("  Gross household income", default=90_000.0),
        monthly_debts=FloatPrompt.ask("  Monthly debt payments", default=0.0),
        down_payment=FloatPrompt.ask("  Down payment", default=50_000.0),
        contract_rate=_ask_rate("Mortgage rate", 4.5),
        amortization_years=IntPrompt.ask("  Amortization (years)", default=25),
        monthly_housing_expenses=FloatPrompt.ask("  Heating, taxes, fees (monthly)", default=150.0),
    )
    result = evaluate_affordability(inputs, table.mortgage_rules)

    verdict = "[green]qualifies[/green]" if result.is_affordable else "[red]does not qualify[/red]"
    console.print(_summary_panel("Borrowing capacity", [
        ("Max monthly payment", _fmt_cad(result.max_monthly_payment)),
        ("Qualifying rate", _fmt_pct(result.stress_rate)),
        ("Max mortgage", _fmt_cad(result.max_mortgage)),
        ("Max purchase price", _fmt_cad(result.max_purchase_price)),
        ("GDS / TDS", f"{_fmt_pct(result.gds_ratio)} / {_fmt_pct(result.tds_ratio)}"),
        ("Result", verdict),
    ], border_style="green"))


def run_daycare(table: RateTable) -> None:
    income = FloatPrompt.ask("  Family income", default=80_000.0)
    private_rate = FloatPrompt.ask("  Private daycare daily rate", default=45.0)
    days = IntPrompt.ask("  Days per year", default=260)
    result = daycare_costs(income, private_rate, days, table)

    console.print(_summary_panel("Daycare", [
        ("CPE annual cost", _fmt_cad(result.cpe_annual_cost)),
        ("Private before credit", _fmt_cad(result.private_annual_cost)),
        ("Credit rate", _fmt_pct(result.credit_rate)),
        ("Private after credit", _fmt_cad(result.private_net_annual_cost)),
        ("Difference vs CPE", _fmt_cad(result.annual_difference)),
    ]))


def run_transfer_tax(table: RateTable) -> None:
    price = FloatPrompt.ask("  Purchase price", default=450_000.0)
    municipality = Prompt.ask(
        "  Municipality", choices=sorted(table.transfer_tax_brackets), default="quebec"
    )
    result = transfer_tax(price, municipality, table)

    grid = Table(title="Land transfer tax", border_style="blue")
    grid.add_column("Bracket")
    grid.add_column("Rate", justify="right")
    grid.add_column("Tax", justify="right")
    for s in result.breakdown:
        upper = "+" if s.upper_bound == float("inf") else f"{s.upper_bound:,.0f}"
        grid.add_row(f"{s.lower_bound:,.0f} - {upper}", _fmt_pct(s.rate), _fmt_cad(s.tax))
    grid.add_row("Total", _fmt_pct(result.effective_rate), _fmt_cad(result.total_tax), style="bold")
    console.print(grid)


def run_rent_increase(table: RateTable) -> None:
    heated = Confirm.ask("  Heated by the landlord?", default=False)
    heating_type = "none"
    if heated:
        heating_type = Prompt.ask(
            "  Heating type", choices=["electricity", "gas", "oil"], default="electricity"
        )
    inputs = RentIncreaseInputs(
        current_rent=FloatPrompt.ask("  Current monthly rent", default=1_200.0),
        heated_by_landlord=heated,
        heating_type=heating_type,
        municipal_tax_increase=FloatPrompt.ask("  Municipal tax increase (annual)", default=0.0),
        school_tax_increase=FloatPrompt.ask("  School tax increase (annual)", default=0.0),
        insurance_increase=FloatPrompt.ask("  Insurance increase (annual)", default=0.0),
        maintenance_increase=FloatPrompt.ask("  Maintenance increase (annual)", default=0.0),
        major_renovations=FloatPrompt.ask("  Major renovations (total cost)", default=0.0),
    )
    result = rent_increase(inputs, table)

    console.print(_summary_panel("Rent increase", [
        ("Base index", _fmt_cad(result.base_index_increase)),
        ("Heating", _fmt_cad(result.heating_adjustment)),
        ("Taxes", _fmt_cad(result.municipal_tax_increase + result.school_tax_increase)),
        ("Insurance + maintenance", _fmt_cad(result.insurance_increase + result.maintenance_increase)),
        ("Renovations", _fmt_cad(result.renovation_increase)),
        ("New rent", f"{_fmt_cad(result.new_rent)} (+{_fmt_pct(result.percentage_increase)})"),
    ]))


def run_mortgage(table: RateTable) -> None:
    inputs = MortgageInputs(
        principal=FloatPrompt.ask("  Mortgage amount", default=350_000.0),
        annual_rate=_ask_rate("Interest rate", 4.79),
        amortization_years=int(
            Prompt.ask("  Amortization (years)", choices=["15", "20", "25", "30"], default="25")
        ),
        frequency=Prompt.ask("  Payment frequency", choices=list(PAYMENTS_PER_YEAR), default="monthly"),
    )
    stress = Confirm.ask("  Show stress-test payment?", default=True)
    result = compute_mortgage(inputs, table, include_stress_test=stress)

    rows = [
        (f"Payment ({inputs.frequency})", _fmt_cad(result.payment)),
        ("Total paid", _fmt_cad(result.total_paid)),
        ("Total interest", _fmt_cad(result.total_interest)),
    ]
    if result.stress_test_payment is not None:
        rows.append(("Stress-test payment", _fmt_cad(result.stress_test_payment)))
        rows.append(("Increase", _fmt_cad(result.stress_test_increase)))
    console.print(_summary_panel("Mortgage", rows))

    grid = Table(title="Balance by year", border_style="blue")
    grid.add_column("Year", justify="center")
    grid.add_column("Balance", justify="right")
    for point in result.balance_over_time[::5]:
        grid.add_row(str(point.year), _fmt_cad(point.balance))
    console.print(grid)


def run_debt_payoff(table: RateTable) -> None:
    balance = FloatPrompt.ask("  Card balance", default=5_000.0)
    rate = _ask_rate("Annual interest rate", 19.99)
    payment = FloatPrompt.ask("  Monthly payment", default=200.0)
    result = debt_payoff(balance, rate, payment)

    if not result.is_payoff_possible:
        console.print("[bold red]This payment never pays the balance off.[/bold red]")
        return

    years, months = divmod(result.months_to_payoff, 12)
    console.print(_summary_panel("Debt payoff", [
        ("Time to payoff", f"{years} years {months} months"),
        ("Total interest", _fmt_cad(result.total_interest)),
        ("Total paid", _fmt_cad(result.total_paid)),
    ]))


def run_retirement(table: RateTable) -> None:
    inputs = RetirementInputs(
        current_age=IntPrompt.ask("  Current age", default=30),
        retirement_age=IntPrompt.ask("  Retirement age", default=65),
        current_savings=FloatPrompt.ask("  Current savings", default=10_000.0),
        monthly_contribution=FloatPrompt.ask("  Monthly contribution", default=500.0),
        annual_rate=_ask_rate("Expected return", 7.0),
    )
    result = project_retirement(inputs)

    grid = Table(title="Retirement savings", border_style="blue")
    grid.add_column("Age", justify="center")
    grid.add_column("Contributed", justify="right")
    grid.add_column("Interest", justify="right")
    grid.add_column("Total", justify="right")
    for entry in result.yearly[::5]:
        grid.add_row(
            str(entry.age), _fmt_cad(entry.contributed), _fmt_cad(entry.interest), _fmt_cad(entry.total)
        )
    console.print(grid)
    console.print(
        f"  At {result.retirement_age}: [bold green]{_fmt_cad(result.total_at_retirement)}[/bold green]"
    )


def run_sales_tax(table: RateTable) -> None:
    mode = Prompt.ask("  Amount is", choices=["before-tax", "tax-included"], default="before-tax")
    amount = FloatPrompt.ask("  Amount", default=100.0)
    if mode == "before-tax":
        result = add_sales_tax(amount, table)
    else:
        result = extract_sales_tax(amount, table)

    console.print(_summary_panel("Sales tax", [
        ("Before tax", _fmt_cad(result.amount_before_tax)),
        (f"TPS ({_fmt_pct(table.tps_rate)})", _fmt_cad(result.tps)),
        (f"TVQ ({table.tvq_rate * 100:.3f}%)", _fmt_cad(result.tvq)),
        ("Total", _fmt_cad(result.total)),
    ]))


CALCULATORS = {
    "1": ("Net salary / income tax", run_income_tax),
    "2": ("Loan payment", run_loan),
    "3": ("Auto loan", run_auto_loan),
    "4": ("Student loan", run_student_loan),
    "5": ("Compound interest / retirement", run_growth),
    "6": ("Mortgage affordability", run_affordability),
    "7": ("Daycare costs", run_daycare),
    "8": ("Land transfer tax", run_transfer_tax),
    "9": ("Rent increase", run_rent_increase),
    "10": ("Mortgage payment", run_mortgage),
    "11": ("Credit card payoff", run_debt_payoff),
    "12": ("Retirement savings", run_retirement),
    "13": ("Sales tax (TPS + TVQ)", run_sales_tax),
}


# ── Main entry point ─────────────────────────────────────────────────────────

def main() -> None:
    if "--verbose" in sys.argv[1:]:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    table = load_rate_table(DEFAULT_YEAR)

    try:
        show_banner(table)
        while True:
            for key, (label, _) in CALCULATORS.items():
                console.print(f"  [bold]{key}[/bold]. {label}")
            choice = Prompt.ask("\n  Calculator (q to quit)", choices=[*CALCULATORS, "q"], default="1")
            if choice == "q":
                break

            label, run = CALCULATORS[choice]
            console.print(f"\n[bold]{label}[/bold]\n")
            try:
                run(table)
            except FinanceEngineError as e:
                console.print(f"[red]Invalid input: {e}[/red]")
            console.print()

        console.print("\n[bold cyan]Done.[/bold cyan]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
