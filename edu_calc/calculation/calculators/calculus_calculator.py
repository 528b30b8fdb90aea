# Calculus calculators: derivatives, integrals, limits, first-order ODEs, Laplace table
import logging
import math
from typing import List, Optional

import numpy as np

from ..engine import CalculatorStrategy
from ..exceptions import DomainError, EvaluationError, InvalidFieldError, ParseError, UnsupportedFeatureError
from ..expression import BinaryOp, FunctionCall, Node, Number, UnaryOp, Variable, parse, parse_tree
from ..fields import FieldMap, choice_field, number_field, text_field
from ..formatting import format_number, step_header, to_fixed
from ..numerical import approach_limit, euler, finite_difference, normalize_method, parametric_derivative, trapezoid
from ..plotting import ACCENT, PRIMARY, axis_options, sample_points
from ..results import CalculationResult, ChartDataset, PlotData
from ..symbolic import differentiate

logger = logging.getLogger(__name__)

METHOD_TITLES = {'forward': 'Forward', 'backward': 'Backward', 'central': 'Central', 'fivepoint': 'Five-Point'}


class DerivativeCalculator(CalculatorStrategy):
    """
    First or second derivative at a point.

    Explicit functions get a symbolic first derivative when every term is
    covered by the rule set, with finite differences as the fallback.
    Parametric curves (x(t), y(t)) are always differentiated numerically.
    """

    name = 'Derivative Calculator'
    category = 'Calculus'
    description = 'Differentiate an explicit or parametric function at a point.'
    fields = (
        choice_field('inputType', ('explicit', 'parametric'), 'Input type', default='explicit'),
        text_field('func', 'f(x)', required=False),
        text_field('funcX', 'x(t)', required=False),
        text_field('funcY', 'y(t)', required=False),
        number_field('point', 'Point'),
        number_field('h', 'Step size h', default=0.0001, positive=True),
        number_field('order', 'Order', default=1, integer=True, min_value=1, max_value=2),
        text_field('method', 'Method', default='central'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        point = fields.number('point')
        h = fields.number('h')
        order = fields.integer('order')
        method = normalize_method(fields.text('method'))

        if fields.text('inputType') == 'parametric':
            return self._parametric(fields, point, h, order, method)
        return self._explicit(fields, point, h, order, method)

    def _configuration(self, kind: str, point: float, method: str) -> List[str]:
        return [
            step_header("1. Configuration:"),
            f"   Type: {kind}",
            f"   Point: {format_number(point)}",
            f"   Method: {METHOD_TITLES[method]}",
            step_header("2. Calculation:"),
        ]

    def _explicit(self, fields, point, h, order, method) -> CalculationResult:
        expression = fields.text('func')
        if not expression:
            raise InvalidFieldError("Please provide a value for f(x).", field='func')
        f = parse(expression)
        point_text = format_number(point)
        label = f"f'({point_text})" if order == 1 else f"f''({point_text})"

        value = finite_difference(f, point, h, order, method)
        calculation = [f"   Using {METHOD_TITLES[method]} Difference method"]
        derivative_curve = lambda x: finite_difference(f, x, h, order, method)

        symbolic = differentiate(expression) if order == 1 else None
        if symbolic is not None:
            try:
                value = symbolic.function(point)
            except EvaluationError as e:
                logger.debug(f"Symbolic derivative undefined at {point_text}, keeping numeric value: {e}")
            else:
                derivative_curve = symbolic.function
                calculation = [
                    step_header("Symbolic Differentiation:"),
                    f"   f'(x) = {symbolic.derivative}",
                    *(f"   {line}" for line in symbolic.steps),
                    step_header("Substitution:"),
                    f"   Evaluate at x = {point_text}:",
                    f"   {label} = {value:.6f}",
                ]

        curve_label = "f'(x)" if order == 1 else "f''(x)"
        plot = PlotData('line', [
            ChartDataset('f(x)', sample_points(f, point - 5, point + 5),
                         {'borderColor': 'rgba(129, 140, 248, 0.5)', 'borderWidth': 2, 'pointRadius': 0}),
            ChartDataset(curve_label, sample_points(derivative_curve, point - 5, point + 5),
                         {'borderColor': ACCENT, 'borderWidth': 2, 'pointRadius': 0}),
            ChartDataset(f"Point (x={point_text})", [{'x': point, 'y': value}],
                         {'type': 'scatter', 'backgroundColor': 'red', 'pointRadius': 5}),
        ], options=axis_options('x', 'y', f"Function and {curve_label}"))

        return CalculationResult(
            text=f"{'First' if order == 1 else 'Second'} Derivative at x = {point_text}:\n{label} ≈ {value:.6f}",
            steps=self._configuration('Explicit', point, method) + calculation + [
                step_header("3. Result:"),
                f"   {label} ≈ {value:.6f}",
            ],
            plot_data=plot,
        )

    def _parametric(self, fields, point, h, order, method) -> CalculationResult:
        x_text, y_text = fields.text('funcX'), fields.text('funcY')
        if not x_text or not y_text:
            raise InvalidFieldError("Invalid parametric functions.", field='funcX')
        fx = parse(x_text, ['t'])
        fy = parse(y_text, ['t'])
        result = parametric_derivative(fx, fy, point, h, order, method)
        label = 'dy/dx' if order == 1 else 'd²y/dx²'

        if order == 1:
            calculation = [
                f"   dx/dt ≈ {to_fixed(result.dx_dt)}",
                f"   dy/dt ≈ {to_fixed(result.dy_dt)}",
                "   dy/dx = (dy/dt) / (dx/dt)",
            ]
        else:
            calculation = [
                "   First calculate dy/dx as a function of t",
                "   Then d²y/dx² = [d/dt (dy/dx)] / (dx/dt)",
            ]

        curve = []
        for t in np.linspace(point - 5, point + 5, 101):
            try:
                curve.append({'x': fx(float(t)), 'y': fy(float(t))})
            except EvaluationError:
                continue
        plot = PlotData('line', [
            ChartDataset('Parametric Curve (x(t), y(t))', curve,
                         {'borderColor': 'rgba(129, 140, 248, 0.5)', 'borderWidth': 2, 'pointRadius': 0}),
            ChartDataset(f"Point (t={format_number(point)})", [{'x': fx(point), 'y': fy(point)}],
                         {'type': 'scatter', 'backgroundColor': 'red', 'pointRadius': 5}),
        ], options=axis_options('x(t)', 'y(t)', 'Parametric Curve'))

        return CalculationResult(
            text=f"{'First' if order == 1 else 'Second'} Derivative at t = {format_number(point)}:\n"
                 f"{label} ≈ {result.value:.6f}",
            steps=self._configuration('Parametric', point, method) + calculation + [
                step_header("3. Result:"),
                f"   {label} ≈ {result.value:.6f}",
            ],
            plot_data=plot,
        )


class IntegralCalculator(CalculatorStrategy):
    name = 'Integral Calculator'
    category = 'Calculus'
    description = 'Definite integral by the composite trapezoidal rule.'
    fields = (
        text_field('func', 'f(x)'),
        number_field('lower', 'Lower limit'),
        number_field('upper', 'Upper limit'),
    )

    segments = 1000

    def calculate(self, fields: FieldMap) -> CalculationResult:
        expression = fields.text('func')
        f = parse(expression)
        a, b = fields.number('lower'), fields.number('upper')
        integral = trapezoid(f, a, b, self.segments)
        a_text, b_text = format_number(a), format_number(b)

        return CalculationResult(
            text=f"Integral from {a_text} to {b_text} ≈ {integral:.6f}",
            steps=[
                step_header("1. Identify variables:"),
                f"   Function f(x) = {expression}",
                f"   Lower limit a = {a_text}",
                f"   Upper limit b = {b_text}",
                step_header("2. Apply Numerical Method (Trapezoidal Rule):"),
                "   Area ≈ (h/2) * [f(a) + 2f(a+h) + ... + f(b)]",
                f"   Using n={self.segments} segments, h={format_number((b - a) / self.segments)}",
                step_header("3. Result:"),
                f"   Area ≈ sum(trapezoids) = {integral:.6f}",
            ],
            plot_data=PlotData('line', [ChartDataset('f(x)', sample_points(f, a, b), {
                'fill': True, 'backgroundColor': 'rgba(129, 140, 248, 0.2)', 'borderColor': PRIMARY,
            })]),
        )


class LimitCalculator(CalculatorStrategy):
    """Numeric two-sided limit."""

    name = 'Limit Calculator'
    category = 'Calculus'
    description = 'Estimate a limit by approaching the point from both sides.'
    fields = (
        text_field('func', 'f(x)'),
        number_field('point', 'Point'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        expression = fields.text('func')
        f = parse(expression)
        a = fields.number('point')
        approach = approach_limit(f, a)
        a_text, h_text = format_number(a), format_number(approach.h)

        steps = [
            step_header("1. Identify variables:"),
            f"   Function f(x) = {expression}",
            f"   Target point a = {a_text}",
            step_header(f"2. Evaluate approaches to x = {a_text}:"),
            f"   Left Limit (x = {a_text} - {h_text}): {approach.left:.6f}",
            f"   Right Limit (x = {a_text} + {h_text}): {approach.right:.6f}",
        ]
        if not approach.exists:
            steps.extend([step_header("3. Conclusion:"), "   Left and Right limits differ significantly."])
            return CalculationResult(
                text=f"Limit appears to diverge or does not exist.\n"
                     f"Left approach: {approach.left:.4f}\nRight approach: {approach.right:.4f}",
                steps=steps,
            )

        steps.extend([step_header("3. Result:"), f"   Limits converge to ≈ {approach.value:.6f}"])
        return CalculationResult(text=f"Limit ≈ {approach.value:.7f}", steps=steps)


class DifferentialEquationSolver(CalculatorStrategy):
    """y' = f(x, y) by explicit Euler steps."""

    name = 'Differential Equation Solver'
    category = 'Calculus'
    description = "Solve y' = f(x, y) numerically with Euler's method."
    fields = (
        text_field('func', "y' = f(x, y)"),
        number_field('x0', 'x0', default=0),
        number_field('y0', 'y0', default=0),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        expression = fields.text('func')
        try:
            f = parse(expression, ['x', 'y'])
        except ParseError as e:
            raise ParseError("Error parsing ODE function. Ensure you use 'x' and 'y' variables.", e.detail)
        x0, y0 = fields.number('x0'), fields.number('y0')
        solution = euler(f, x0, y0)
        x_end, y_end = solution.final

        trace = [
            f"   x={step.x:.1f}, y={step.y:.2f}, slope={step.slope:.2f} → "
            f"new y = {step.y:.2f} + {format_number(solution.h)}*{step.slope:.2f} = {step.next_y:.2f}"
            for step in solution.trace
        ]
        return CalculationResult(
            text=f"Numerical Solution (Euler Method)\ny({x_end:.2f}) ≈ {y_end:.4f}",
            steps=[
                step_header("1. Identify variables:"),
                f"   ODE: y' = {expression}",
                f"   Initial Condition: y({format_number(x0)}) = {format_number(y0)}",
                step_header("2. Apply Numerical Method (Euler's Method):"),
                f"   Step size h = {format_number(solution.h)}",
                "   Formula: y_next = y_curr + h * f(x, y)",
                step_header(f"3. First {len(trace)} Steps:"),
                *trace,
                "   ...",
                f"   Final y({x_end:.2f}) ≈ {y_end:.4f}",
            ],
            plot_data=PlotData('line', [ChartDataset(
                'y(x)', [{'x': x, 'y': y} for x, y in solution.points], {'borderColor': ACCENT},
            )]),
        )


LAPLACE_UNSUPPORTED = ("Symbolic Laplace Transform requires a more advanced CAS engine. "
                       "Supported patterns: c, t^n, exp(at), sin(at), cos(at).")


def _linear_coefficient(node: Node, var: str = 't') -> Optional[float]:
    """a when node is a·t (in any of the forms t, a*t, t*a, -t, t/a), else None."""
    if isinstance(node, Variable) and node.name == var:
        return 1.0
    if isinstance(node, UnaryOp):
        inner = _linear_coefficient(node.operand, var)
        return None if inner is None else -inner
    if isinstance(node, BinaryOp) and node.op in '*/':
        if node.op == '*' and not node.left.depends_on(var):
            inner = _linear_coefficient(node.right, var)
            return None if inner is None else node.left.evaluate({}) * inner
        if not node.right.depends_on(var):
            inner = _linear_coefficient(node.left, var)
            if inner is None:
                return None
            constant = node.right.evaluate({})
            if node.op == '/' and constant == 0:
                raise DomainError("Division by zero in the function argument.")
            return inner * constant if node.op == '*' else inner / constant
    return None


def laplace_transform(node: Node) -> Optional[tuple]:
    """(F(s), table entry) for the supported patterns, or None."""
    if not node.depends_on('t'):
        c = node.evaluate({})
        if c == 1:
            return "1/s", "L{1} = 1/s"
        return f"{format_number(c)}/s", f"L{{c}} = c/s with c={format_number(c)}"

    if isinstance(node, Variable):
        return "1/s^2", "L{t} = 1/s^2"

    if isinstance(node, BinaryOp) and node.op == '^' and isinstance(node.left, Variable) \
            and not node.right.depends_on('t'):
        n = node.right.evaluate({})
        if n >= 0 and float(n).is_integer():
            n = int(n)
            return f"{math.factorial(n)} / s^{n + 1}", f"L{{t^n}} = n! / s^(n+1) with n={n}"
        return None

    exponent = None
    if isinstance(node, FunctionCall) and node.name == 'exp':
        exponent = node.args[0]
    elif isinstance(node, BinaryOp) and node.op == '^' and isinstance(node.left, Number) and node.left.symbol == 'e':
        exponent = node.right
    if exponent is not None:
        a = _linear_coefficient(exponent)
        if a is None:
            return None
        denominator = f"s - {format_number(a)}" if a >= 0 else f"s + {format_number(-a)}"
        return f"1 / ({denominator})", f"L{{e^(at)}} = 1/(s-a) with a={format_number(a)}"

    if isinstance(node, FunctionCall) and node.name in ('sin', 'cos'):
        a = _linear_coefficient(node.args[0])
        if a is None:
            return None
        a_squared = format_number(a * a)
        if node.name == 'sin':
            return f"{format_number(a)} / (s^2 + {a_squared})", \
                f"L{{sin(at)}} = a/(s^2+a^2) with a={format_number(a)}"
        return f"s / (s^2 + {a_squared})", f"L{{cos(at)}} = s/(s^2+a^2) with a={format_number(a)}"
    return None


class LaplaceTransformCalculator(CalculatorStrategy):
    """Table lookup of elementary Laplace transforms."""

    name = 'Laplace Transform Calculator'
    category = 'Calculus'
    description = 'Laplace transform of c, t^n, exp(at), sin(at) and cos(at).'
    fields = (
        text_field('func', 'f(t)'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        expression = fields.text('func')
        transform = laplace_transform(parse_tree(expression, ['t']))
        if transform is None:
            raise UnsupportedFeatureError(f"L{{{expression}}} = {LAPLACE_UNSUPPORTED}")
        result, rule = transform
        return CalculationResult(
            text=f"L{{{expression}}} = {result}",
            steps=[
                step_header("1. Identify function:"),
                f"   f(t) = {expression}",
                step_header("2. Apply Transform Table:"),
                "   L{f(t)} = F(s)",
                f"   {rule}",
                step_header("3. Result:"),
                f"   F(s) = {result}",
            ],
        )
