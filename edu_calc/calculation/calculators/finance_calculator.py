# Finance calculators: simple interest and amortized loans
from dataclasses import dataclass

from ..engine import CalculatorStrategy
from ..fields import FieldMap, number_field
from ..formatting import format_number, step_header, to_fixed
from ..results import CalculationResult, ChartDataset, PlotData


@dataclass
class LoanSummary:
    monthly: float
    months: int
    total: float
    interest: float


def amortized_loan(principal: float, annual_rate: float, years: float) -> LoanSummary:
    """
    Fixed monthly payment M = P·i(1+i)^n / ((1+i)^n - 1) with i the monthly rate.

    A zero rate degenerates to P / n.
    """
    i = annual_rate / 100 / 12
    n = int(round(years * 12))
    if i == 0:
        monthly = principal / n
    else:
        growth = (1 + i) ** n
        monthly = principal * i * growth / (growth - 1)
    total = monthly * n
    return LoanSummary(monthly, n, total, total - principal)


def _money(value: float) -> str:
    return f"${to_fixed(value, 2)}"


class SimpleInterestCalculator(CalculatorStrategy):
    name = 'Simple Interest Calculator'
    category = 'Finance'
    description = 'Simple interest and total amount.'
    fields = (
        number_field('principal', 'Principal', positive=True),
        number_field('rate', 'Annual rate (%)', min_value=0),
        number_field('time', 'Time (years)', min_value=0),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        p, r, t = fields.number('principal'), fields.number('rate'), fields.number('time')
        interest = p * r * t / 100
        amount = p + interest

        return CalculationResult(
            text=f"Simple Interest (SI) = (P × R × T) / 100 = {_money(interest)}\n"
                 f"Total Amount (A) = P + SI = {_money(amount)}",
            steps=[
                step_header("1. Identify variables:"),
                f"   P = {format_number(p)}, R = {format_number(r)}%, T = {format_number(t)} years",
                step_header("2. Apply formula:"),
                "   SI = (P × R × T) / 100",
                f"   SI = ({format_number(p)} × {format_number(r)} × {format_number(t)}) / 100 = {_money(interest)}",
                step_header("3. Result:"),
                f"   A = {format_number(p)} + {to_fixed(interest, 2)} = {_money(amount)}",
            ],
            plot_data=PlotData('bar', [ChartDataset('Amount ($)', [p, interest, amount], {
                'backgroundColor': ['#60a5fa', '#34d399', '#f472b6'],
            })], labels=['Principal', 'Interest', 'Total']),
        )


class MortgageCalculator(CalculatorStrategy):
    """Monthly payment and total cost of a fixed-rate mortgage."""

    name = 'Mortgage Calculator'
    category = 'Finance'
    description = 'Monthly payment, total interest and total cost of a mortgage.'
    fields = (
        number_field('principal', 'Loan amount', positive=True),
        number_field('rate', 'Annual interest rate (%)', min_value=0),
        number_field('years', 'Term (years)', positive=True),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        principal = fields.number('principal')
        rate = fields.number('rate')
        loan = amortized_loan(principal, rate, fields.number('years'))

        return CalculationResult(
            text=f"Monthly Payment: {_money(loan.monthly)}\n"
                 f"Total Interest Paid: {_money(loan.interest)}\n"
                 f"Total Cost: {_money(loan.total)}",
            steps=[
                step_header("1. Identify variables:"),
                f"   P = {format_number(principal)}",
                f"   Monthly rate i = {format_number(rate)}% / 12 = {to_fixed(rate / 100 / 12, 6)}",
                f"   Number of payments n = {loan.months}",
                step_header("2. Apply formula:"),
                "   M = P[i(1 + i)^n] / [(1 + i)^n - 1]" if rate else "   M = P / n",
                f"   M = {_money(loan.monthly)}",
                step_header("3. Totals:"),
                f"   Total Cost = M × n = {_money(loan.total)}",
                f"   Total Interest = Total Cost - P = {_money(loan.interest)}",
            ],
            plot_data=PlotData('doughnut', [ChartDataset('Cost Breakdown', [principal, loan.interest], {
                'backgroundColor': ['#818cf8', '#f43f5e'],
            })], labels=['Principal', 'Interest']),
        )


class LoanComparisonCalculator(CalculatorStrategy):
    name = 'Loan Comparison Calculator'
    category = 'Finance'
    description = 'Compare the monthly payment and total interest of two loans.'
    fields = tuple(
        rule
        for suffix in 'AB'
        for rule in (
            number_field(f"principal{suffix}", f"Loan {suffix} amount", positive=True),
            number_field(f"rate{suffix}", f"Loan {suffix} rate (%)", min_value=0),
            number_field(f"years{suffix}", f"Loan {suffix} term (years)", positive=True),
        )
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        loans = {
            suffix: amortized_loan(fields.number(f"principal{suffix}"), fields.number(f"rate{suffix}"),
                                   fields.number(f"years{suffix}"))
            for suffix in 'AB'
        }
        text = '\n\n'.join(
            f"Loan {suffix}:\n  Monthly: {_money(loan.monthly)}\n  Total Interest: {_money(loan.interest)}"
            for suffix, loan in loans.items()
        )
        cheaper = min(loans, key=lambda suffix: loans[suffix].interest)

        return CalculationResult(
            text=text,
            steps=[
                step_header("1. Monthly payments:"),
                *(f"   Loan {suffix}: {_money(loan.monthly)} over {loan.months} months" for suffix, loan in loans.items()),
                step_header("2. Total interest:"),
                *(f"   Loan {suffix}: {_money(loan.interest)}" for suffix, loan in loans.items()),
                step_header("3. Comparison:"),
                f"   Loan {cheaper} costs less in total interest.",
            ],
            plot_data=PlotData('bar', [
                ChartDataset('Loan A', [loans['A'].monthly, loans['A'].interest], {'backgroundColor': '#60a5fa'}),
                ChartDataset('Loan B', [loans['B'].monthly, loans['B'].interest], {'backgroundColor': '#f472b6'}),
            ], labels=['Monthly Payment', 'Total Interest']),
        )
