# Calculus calculator tests
import pytest

from edu_calc.calculation import solve
from edu_calc.calculation.calculators.calculus_calculator import laplace_transform
from edu_calc.calculation.exceptions import DomainError
from edu_calc.calculation.expression import parse_tree


class TestDerivativeCalculator:
    """Explicit and parametric derivatives"""

    def test_symbolic_first_derivative(self):
        result = solve('Derivative Calculator', {'func': 'x^2', 'point': 3})
        assert result.text == "First Derivative at x = 3:\nf'(3) ≈ 6.000000"
        assert "   f'(x) = 2*x" in result.steps
        assert [dataset.label for dataset in result.plot_data.datasets] == ["f(x)", "f'(x)", "Point (x=3)"]

    def test_small_coefficient(self):
        result = solve('Derivative Calculator', {'func': '0.00001x^2', 'point': 1})
        assert result.text == "First Derivative at x = 1:\nf'(1) ≈ 0.000020"
        assert "   f'(x) = 0.00002*x" in result.steps

    def test_second_derivative(self):
        result = solve('Derivative Calculator', {'func': 'x^3', 'point': 2, 'order': 2, 'h': 0.001})
        assert result.text.startswith("Second Derivative at x = 2:\nf''(2) ≈ 12.0000")

    def test_numeric_fallback(self):
        """abs() has no symbolic rule, so the difference quotient is used"""
        result = solve('Derivative Calculator', {'func': 'abs(x)', 'point': 2, 'method': 'Five-Point'})
        assert result.text == "First Derivative at x = 2:\nf'(2) ≈ 1.000000"
        assert "   Using Five-Point Difference method" in result.steps

    def test_missing_function(self):
        result = solve('Derivative Calculator', {'point': 1})
        assert result.text == "Please provide a value for f(x)."

    def test_invalid_function(self):
        result = solve('Derivative Calculator', {'func': 'import os', 'point': 1})
        assert result.text == "Invalid function."

    def test_order_out_of_range(self):
        result = solve('Derivative Calculator', {'func': 'x', 'point': 1, 'order': 3})
        assert result.text == "Error: Order must be at most 2."

    def test_parametric(self):
        result = solve('Derivative Calculator', {
            'inputType': 'parametric', 'funcX': 't^2', 'funcY': 't^3', 'point': 1,
        })
        assert result.text == "First Derivative at t = 1:\ndy/dx ≈ 1.500000"

    def test_parametric_missing_component(self):
        result = solve('Derivative Calculator', {'inputType': 'parametric', 'funcX': 't', 'point': 1})
        assert result.text == "Invalid parametric functions."

    def test_parametric_vertical_tangent(self):
        result = solve('Derivative Calculator', {
            'inputType': 'parametric', 'funcX': 'cos(t)', 'funcY': 'sin(t)', 'point': 0,
        })
        assert result.text == "Vertical tangent detected (dx/dt ≈ 0). Derivative undefined."


class TestIntegralCalculator:

    def test_linear_integrand(self):
        result = solve('Integral Calculator', {'func': '2x', 'lower': 0, 'upper': 3})
        assert result.text == "Integral from 0 to 3 ≈ 9.000000"
        assert result.plot_data.datasets[0].style['fill'] is True

    def test_quadratic_integrand(self):
        """Integral of x^2 over [0, 1] is 1/3"""
        result = solve('Integral Calculator', {'func': 'x^2', 'lower': 0, 'upper': 1})
        assert result.text.startswith("Integral from 0 to 1 ≈ ")
        value = float(result.text.split("≈ ")[1])
        assert abs(value - 1 / 3) < 1e-6

    def test_reversed_limits(self):
        result = solve('Integral Calculator', {'func': 'x', 'lower': 2, 'upper': 1})
        assert result.text == "Lower limit must be less than upper limit for this implementation."

    def test_integrand_outside_domain(self):
        result = solve('Integral Calculator', {'func': 'log(x)', 'lower': -1, 'upper': 1})
        assert result.text.startswith("log() is undefined for the given input")


class TestLimitCalculator:

    def test_removable_singularity(self):
        result = solve('Limit Calculator', {'func': 'sin(x)/x', 'point': 0})
        assert result.text == "Limit ≈ 1.0000000"

    def test_divergent(self):
        result = solve('Limit Calculator', {'func': '1/x', 'point': 0})
        assert result.text.startswith("Limit appears to diverge or does not exist.\nLeft approach: -100000.0000")


class TestDifferentialEquationSolver:

    def test_exponential_growth(self):
        result = solve('Differential Equation Solver', {'func': 'y', 'x0': 0, 'y0': 1})
        assert result.text == "Numerical Solution (Euler Method)\ny(2.00) ≈ 6.7275"
        assert len(result.plot_data.datasets[0].data) == 21

    def test_bad_variable(self):
        result = solve('Differential Equation Solver', {'func': 'x + z'})
        assert result.text == "Error parsing ODE function. Ensure you use 'x' and 'y' variables."


class TestLaplaceTransform:
    """Transform table lookups"""

    def test_zero_divisor_in_argument(self):
        with pytest.raises(DomainError):
            laplace_transform(parse_tree("exp(t/0)", ['t']))
        result = solve('Laplace Transform Calculator', {'func': 'sin(t/0)'})
        assert result.text == "Division by zero in the function argument."

    @pytest.mark.parametrize("expression, expected", [
        ("1", "1/s"),
        ("5", "5/s"),
        ("t", "1/s^2"),
        ("t^3", "6 / s^4"),
        ("exp(3t)", "1 / (s - 3)"),
        ("e^(-2t)", "1 / (s + 2)"),
        ("sin(2t)", "2 / (s^2 + 4)"),
        ("cos(3*t)", "s / (s^2 + 9)"),
    ])
    def test_table(self, expression, expected):
        result, _ = laplace_transform(parse_tree(expression, ['t']))
        assert result == expected

    def test_unsupported_pattern(self):
        assert laplace_transform(parse_tree("t^2 + 1", ['t'])) is None
        assert laplace_transform(parse_tree("sin(t^2)", ['t'])) is None

    def test_calculator_text(self):
        result = solve('Laplace Transform Calculator', {'func': 'sin(2t)'})
        assert result.text == "L{sin(2t)} = 2 / (s^2 + 4)"

    def test_calculator_unsupported(self):
        result = solve('Laplace Transform Calculator', {'func': 't*sin(t)'})
        assert result.text.startswith("L{t*sin(t)} = Symbolic Laplace Transform requires a more advanced CAS engine.")
