# Algebra calculators: quadratic, linear, polynomial roots, 2x2 systems, complex numbers
import math
from typing import List, Optional, Tuple

from ..engine import CalculatorStrategy
from ..exceptions import DomainError, UnsupportedFeatureError
from ..fields import FieldMap, choice_field, number_field, text_field
from ..formatting import format_complex, format_number, step_header, to_fixed
from ..formulas import parse_number_list
from ..numerical import solve_linear_system_2x2
from ..plotting import HIGHLIGHT, PRIMARY, sample_points
from ..results import CalculationResult, ChartDataset, PlotData


def _signed_number(value: float) -> str:
    """'+ 3' / '- 3' for echoing equations."""
    return f"- {format_number(abs(value))}" if value < 0 else f"+ {format_number(value)}"


def _complex_text(real: float, imag: float) -> str:
    sign = '-' if imag < 0 else '+'
    return f"{format_number(real)} {sign} {format_number(abs(imag))}i"


def solve_quadratic(a: float, b: float, c: float) -> CalculationResult:
    """Roots of ax² + bx + c = 0 by the quadratic formula, with a parabola plot."""
    if a == 0:
        raise DomainError("Error: a cannot be 0, this is not a quadratic equation.")
    d = b * b - 4 * a * c
    a_text, b_text, c_text, d_text = (format_number(v) for v in (a, b, c, d))
    steps = [
        step_header("1. Identify coefficients:"),
        f"   a = {a_text}, b = {b_text}, c = {c_text}",
        step_header("2. Apply Quadratic Formula:"),
        "   x = [-b ± √(b² - 4ac)] / 2a",
        "   Discriminant (Δ) = b² - 4ac",
        f"   Δ = ({b_text})² - 4({a_text})({c_text})",
        f"   Δ = {format_number(b * b)} - {format_number(4 * a * c)}",
        f"   Δ = {d_text}",
    ]
    roots: List[float] = []

    if d > 0:
        r1 = (-b + math.sqrt(d)) / (2 * a)
        r2 = (-b - math.sqrt(d)) / (2 * a)
        roots = [r1, r2]
        answer = f"Two real roots: x₁ = {to_fixed(r1)}, x₂ = {to_fixed(r2)}"
        steps.extend([
            step_header("3. Calculate Roots:"),
            f"   x₁ = (-({b_text}) + √{d_text}) / 2({a_text}) = {to_fixed(r1)}",
            f"   x₂ = (-({b_text}) - √{d_text}) / 2({a_text}) = {to_fixed(r2)}",
        ])
    elif d == 0:
        r = -b / (2 * a)
        roots = [r]
        answer = f"One real root: x = {to_fixed(r)}"
        steps.extend([
            step_header("3. Calculate Root:"),
            f"   x = -({b_text}) / 2({a_text})",
            f"   x = {to_fixed(r)}",
        ])
    else:
        real = -b / (2 * a)
        imag = math.sqrt(-d) / (2 * a)
        answer = f"Two complex roots: x₁ = {format_complex(real, imag)}, x₂ = {format_complex(real, -imag)}"
        steps.extend([
            step_header("3. Calculate Complex Roots:"),
            f"   x = [-({b_text}) ± i√{format_number(-d)}] / 2({a_text})",
            f"   x = {to_fixed(real)} ± {to_fixed(abs(imag))}i",
        ])

    vertex = -b / (2 * a)
    spread = max(abs(vertex) * 2, 10)
    curve = sample_points(lambda x: a * x * x + b * x + c, vertex - spread, vertex + spread, samples=50)
    plot = PlotData('line', [
        ChartDataset('y = ax² + bx + c', curve, {'borderColor': PRIMARY, 'pointRadius': 0}),
        ChartDataset('Roots', [{'x': r, 'y': 0.0} for r in roots],
                     {'type': 'scatter', 'backgroundColor': HIGHLIGHT, 'pointRadius': 5, 'showLine': False}),
    ])
    return CalculationResult(text=f"Discriminant Δ = {d_text}\n{answer}", steps=steps, plot_data=plot)


class QuadraticEquationSolver(CalculatorStrategy):
    """ax² + bx + c = 0."""

    name = 'Quadratic Equation Solver'
    category = 'Algebra'
    description = 'Solve ax² + bx + c = 0, including complex roots.'
    fields = (
        number_field('a', 'a'),
        number_field('b', 'b'),
        number_field('c', 'c'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        return solve_quadratic(fields.number('a'), fields.number('b'), fields.number('c'))


class LinearEquationSolver(CalculatorStrategy):
    name = 'Linear Equation Solver'
    category = 'Algebra'
    description = 'Solve ax + b = c for x.'
    fields = (
        number_field('a', 'a', nonzero=True),
        number_field('b', 'b'),
        number_field('c', 'c'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        a, b, c = fields.number('a'), fields.number('b'), fields.number('c')
        x = (c - b) / a
        equation = f"{format_number(a)}x {_signed_number(b)} = {format_number(c)}"
        return CalculationResult(
            text=f"{equation}\nSolution: x = {to_fixed(x)}",
            steps=[
                step_header("1. Identify constants:"),
                f"   a = {format_number(a)}, b = {format_number(b)}, c = {format_number(c)}",
                step_header("2. Rearrange Equation:"),
                f"   {equation}",
                f"   {format_number(a)}x = {format_number(c)} - ({format_number(b)}) = {format_number(c - b)}",
                step_header("3. Solve for x:"),
                f"   x = {format_number(c - b)} / {format_number(a)}",
                f"   x = {to_fixed(x)}",
            ],
        )


def _polynomial_coefficients(text: str) -> List[float]:
    coefficients = parse_number_list(text)
    while len(coefficients) > 1 and coefficients[0] == 0:
        coefficients.pop(0)
    return coefficients


class PolynomialRootFinder(CalculatorStrategy):
    """
    Roots of a polynomial given by comma separated coefficients, highest
    power first. Degrees 1 and 2 are solved exactly; higher degrees are refused.
    """

    name = 'Polynomial Root Finder'
    category = 'Algebra'
    description = 'Find the roots of a linear or quadratic polynomial.'
    fields = (
        text_field('coeffsStr', 'Coefficients'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        coefficients = _polynomial_coefficients(fields.text('coeffsStr'))
        degree = len(coefficients) - 1
        if degree >= 3:
            raise UnsupportedFeatureError(
                f"Polynomials of degree {degree} are not supported. "
                "Enter 2 or 3 coefficients for a linear or quadratic polynomial."
            )
        if degree == 2:
            return solve_quadratic(*coefficients)
        if degree == 0:
            raise DomainError("A constant polynomial has no roots to find.")

        a, b = coefficients
        root = -b / a
        return CalculationResult(
            text=f"One real root: x = {to_fixed(root)}",
            steps=[
                step_header("1. Identify coefficients:"),
                f"   {format_number(a)}x {_signed_number(b)} = 0",
                step_header("2. Solve for x:"),
                f"   x = -({format_number(b)}) / {format_number(a)}",
                f"   x = {to_fixed(root)}",
            ],
        )


def _line_points(a: float, b: float, c: float, x: float, y: float) -> List[dict]:
    """Two points on a·x + b·y = c around the solution (vertical when b == 0)."""
    if b == 0:
        return [{'x': c / a, 'y': y - 5}, {'x': c / a, 'y': y + 5}]
    return [{'x': x - 5, 'y': (c - a * (x - 5)) / b}, {'x': x + 5, 'y': (c - a * (x + 5)) / b}]


class SystemOfEquationsSolver(CalculatorStrategy):
    """a1·x + b1·y = c1 and a2·x + b2·y = c2 by Cramer's rule."""

    name = 'System of Equations'
    category = 'Algebra'
    description = "Solve two linear equations in x and y with Cramer's rule."
    fields = tuple(number_field(key, key) for key in ('a1', 'b1', 'c1', 'a2', 'b2', 'c2'))

    def calculate(self, fields: FieldMap) -> CalculationResult:
        a1, b1, c1, a2, b2, c2 = (fields.number(key) for key in ('a1', 'b1', 'c1', 'a2', 'b2', 'c2'))
        x, y, det = solve_linear_system_2x2(a1, b1, c1, a2, b2, c2)
        n = format_number
        return CalculationResult(
            text=f"x = {to_fixed(x)}\ny = {to_fixed(y)}",
            steps=[
                step_header("1. Identify coefficients:"),
                f"   Eq 1: {n(a1)}x {_signed_number(b1)}y = {n(c1)}",
                f"   Eq 2: {n(a2)}x {_signed_number(b2)}y = {n(c2)}",
                step_header("2. Calculate Determinant (D):"),
                f"   D = ({n(a1)})({n(b2)}) - ({n(a2)})({n(b1)}) = {n(det)}",
                step_header("3. Cramer's Rule:"),
                f"   x = (c1*b2 - c2*b1) / D = ({n(c1)}*{n(b2)} - {n(c2)}*{n(b1)}) / {n(det)}",
                f"   x = {to_fixed(x)}",
                f"   y = (a1*c2 - a2*c1) / D = ({n(a1)}*{n(c2)} - {n(a2)}*{n(c1)}) / {n(det)}",
                f"   y = {to_fixed(y)}",
            ],
            plot_data=PlotData('line', [
                ChartDataset('Eq 1', _line_points(a1, b1, c1, x, y), {'borderColor': 'blue'}),
                ChartDataset('Eq 2', _line_points(a2, b2, c2, x, y), {'borderColor': 'green'}),
                ChartDataset('Solution', [{'x': x, 'y': y}],
                             {'type': 'scatter', 'backgroundColor': 'red', 'pointRadius': 6}),
            ]),
        )


class ComplexNumberCalculator(CalculatorStrategy):
    name = 'Complex Number Calculator'
    category = 'Algebra'
    description = 'Add, subtract, multiply or divide two complex numbers.'
    fields = (
        number_field('c1_real', 'z1 real part'),
        number_field('c1_imag', 'z1 imaginary part'),
        number_field('c2_real', 'z2 real part'),
        number_field('c2_imag', 'z2 imaginary part'),
        choice_field('operation', ('+', '-', '*', '/'), 'Operation'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        r1, i1 = fields.number('c1_real'), fields.number('c1_imag')
        r2, i2 = fields.number('c2_real'), fields.number('c2_imag')
        op = fields.text('operation')
        n = format_number

        steps = [
            step_header("1. Identify complex numbers:"),
            f"   z1 = {_complex_text(r1, i1)}",
            f"   z2 = {_complex_text(r2, i2)}",
        ]
        result: Optional[Tuple[float, float]] = None
        if op == '+':
            result = (r1 + r2, i1 + i2)
            steps.extend([step_header("2. Addition:"), "   (a+c) + (b+d)i",
                          f"   ({n(r1)}+{n(r2)}) + ({n(i1)}+{n(i2)})i"])
        elif op == '-':
            result = (r1 - r2, i1 - i2)
            steps.extend([step_header("2. Subtraction:"), "   (a-c) + (b-d)i",
                          f"   ({n(r1)}-{n(r2)}) + ({n(i1)}-{n(i2)})i"])
        elif op == '*':
            result = (r1 * r2 - i1 * i2, r1 * i2 + r2 * i1)
            steps.extend([step_header("2. Multiplication:"), "   (ac - bd) + (ad + bc)i",
                          f"   ({n(r1)}*{n(r2)} - {n(i1)}*{n(i2)}) + ({n(r1)}*{n(i2)} + {n(r2)}*{n(i1)})i"])
        else:
            denominator = r2 * r2 + i2 * i2
            if denominator == 0:
                raise DomainError("Error: Division by zero")
            result = ((r1 * r2 + i1 * i2) / denominator, (i1 * r2 - r1 * i2) / denominator)
            steps.extend([
                step_header("2. Division (Multiply by Conjugate):"),
                f"   Numerator = ({_complex_text(r1, i1)})({_complex_text(r2, -i2)})",
                f"   Denominator = {n(r2)}² + {n(i2)}² = {n(denominator)}",
                f"   Real = ({n(r1)}*{n(r2)} + {n(i1)}*{n(i2)}) / {n(denominator)}",
                f"   Imag = ({n(i1)}*{n(r2)} - {n(r1)}*{n(i2)}) / {n(denominator)}",
            ])

        answer = format_complex(*result)
        steps.extend([step_header("3. Result:"), f"   {answer}"])
        return CalculationResult(
            text=f"({_complex_text(r1, i1)}) {op} ({_complex_text(r2, i2)})\n= {answer}",
            steps=steps,
        )
