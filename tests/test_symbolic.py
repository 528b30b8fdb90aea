# Symbolic differentiation tests
import math

import pytest

from edu_calc.calculation.exceptions import ParseError
from edu_calc.calculation.expression import Number, Variable, parse, parse_tree
from edu_calc.calculation.numerical import finite_difference
from edu_calc.calculation.symbolic import derive, differentiate, simplify


class TestDifferentiate:
    """Rule-based first derivatives"""

    def test_power_rule(self):
        result = differentiate("x^2")
        assert result.derivative == "2*x"
        assert result.function(3) == 6

    def test_sine(self):
        result = differentiate("sin(x)")
        assert result.derivative == "cos(x)"

    def test_constant(self):
        result = differentiate("5")
        assert result.derivative == "0"

    def test_sum_of_terms(self):
        """Each additive term gets its own step line"""
        result = differentiate("x^3 + 2x")
        assert abs(result.function(2) - 14) < 1e-9
        assert len([line for line in result.steps if line.startswith("d/dx")]) == 2
        assert any("Power Rule" in line for line in result.steps)

    def test_product_rule(self):
        result = differentiate("x*sin(x)")
        expected = math.sin(1) + math.cos(1)
        assert abs(result.function(1) - expected) < 1e-9
        assert any("Product Rule" in line for line in result.steps)

    def test_quotient_rule(self):
        result = differentiate("sin(x)/x")
        x = 2.0
        expected = (x * math.cos(x) - math.sin(x)) / (x * x)
        assert abs(result.function(x) - expected) < 1e-9
        assert any("Quotient Rule" in line for line in result.steps)

    def test_chain_rule(self):
        result = differentiate("sin(x^2)")
        x = 1.5
        assert abs(result.function(x) - 2 * x * math.cos(x * x)) < 1e-9
        assert any("Chain Rule" in line for line in result.steps)

    def test_exponential_with_e_base(self):
        result = differentiate("e^(2x)")
        assert abs(result.function(0.5) - 2 * math.exp(1)) < 1e-9

    def test_exponential_with_constant_base(self):
        result = differentiate("2^x")
        assert abs(result.function(3) - 8 * math.log(2)) < 1e-9

    def test_natural_log(self):
        result = differentiate("ln(x)")
        assert abs(result.function(4) - 0.25) < 1e-12

    def test_subtracted_term_sign(self):
        result = differentiate("x^2 - 3x")
        assert abs(result.function(1) - (-1)) < 1e-12

    def test_other_variable(self):
        result = differentiate("t^2", variable='t')
        assert result.function(5) == 10

    def test_uncovered_function_returns_none(self):
        assert differentiate("abs(x)") is None
        assert differentiate("x + floor(x)") is None

    def test_variable_base_and_exponent_returns_none(self):
        assert differentiate("x^x") is None

    def test_invalid_expression_raises(self):
        with pytest.raises(ParseError):
            differentiate("2x +")


class TestSimplify:
    """Constant folding and identity removal"""

    def test_folds_constants(self):
        assert simplify(parse_tree("2 + 3")) == Number(5.0)

    def test_removes_identities(self):
        assert simplify(parse_tree("x*1 + 0")) == Variable('x')

    def test_zero_product(self):
        assert simplify(parse_tree("0*sin(x)")) == Number(0.0)

    def test_double_negation(self):
        assert simplify(parse_tree("-(-x)")) == Variable('x')

    def test_derive_without_dependency_is_zero(self):
        assert derive(parse_tree("pi^2"), 'x') == Number(0.0)


class TestNumberRendering:
    """Derivative text is parsed again, so constants must print without exponents"""

    @pytest.mark.parametrize("value", [2e-05, 1.5e-07, 3.25, 2e22, 123456789.125])
    def test_text_parses_back_to_value(self, value):
        text = str(Number(value))
        assert 'e' not in text
        assert parse_tree(text).evaluate({}) == value

    def test_small_coefficient(self):
        result = differentiate("0.00001x^2")
        assert result.derivative == "0.00002*x"
        assert abs(result.function(1) - 2e-05) < 1e-15

    def test_large_coefficient(self):
        result = differentiate("10000000000000000000000*x^2")
        assert result.derivative == "20000000000000000000000*x"
        assert result.function(1) == 2e22


class TestSymbolicNumericAgreement:
    """Rule-based derivatives match central differences"""

    @pytest.mark.parametrize("expression", [
        "3x^4 - 2x^2 + 7",
        "x^2*sin(x)",
        "x*exp(x)*cos(x)",
        "(x^2 + 1)/(x - 3)",
        "sin(x)/x",
        "sin(x^2)",
        "sqrt(x^2 + 1)",
        "ln(x^2 + 1)",
        "e^(2x)*cos(x)",
        "0.00001x^2",
        "0.00003x^3 + 0.00005x",
        "10000000000000000000000*x^2",
    ])
    @pytest.mark.parametrize("x", [0.7, 1.3])
    def test_agreement(self, expression, x):
        symbolic = differentiate(expression)
        assert symbolic is not None
        numeric = finite_difference(parse(expression), x)
        exact = symbolic.function(x)
        assert abs(exact - numeric) <= 1e-4 * max(1.0, abs(exact))
