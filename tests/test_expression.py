# Expression parser and evaluator tests
import math

import pytest

from edu_calc.calculation.exceptions import EvaluationError, ParseError
from edu_calc.calculation.expression import (
    BinaryOp, FunctionCall, Number, UnaryOp, Variable, parse, parse_tree, tokenize,
)


class TestParse:
    """Parsing user text into callables"""

    def test_polynomial(self):
        """Implicit multiplication between a number and a variable"""
        f = parse("2x^2")
        assert f(3) == 18

    def test_implicit_multiplication_before_function(self):
        f = parse("xsin(x)")
        assert abs(f(2) - 2 * math.sin(2)) < 1e-12

    def test_implicit_multiplication_between_groups(self):
        f = parse("(x+1)(x-1)")
        assert f(3) == 8

    def test_power_is_right_associative(self):
        f = parse("2^3^2")
        assert f(0) == 512

    def test_exponent_may_be_negative(self):
        f = parse("2^-x")
        assert abs(f(1) - 0.5) < 1e-12

    def test_unary_minus_binds_looser_than_power(self):
        f = parse("-x^2")
        assert f(3) == -9

    def test_constants(self):
        f = parse("pi + e")
        assert abs(f(0) - (math.pi + math.e)) < 1e-12

    def test_ln_is_natural_log(self):
        f = parse("ln(x)")
        assert abs(f(math.e) - 1.0) < 1e-12
        assert "log" in str(f)

    def test_python_power_operator(self):
        f = parse("x**3")
        assert f(2) == 8

    def test_case_insensitive(self):
        f = parse("SIN(X) + COS(X)")
        assert abs(f(0) - 1.0) < 1e-12

    def test_two_variables(self):
        f = parse("x*y + y", ['x', 'y'])
        assert f(2, 3) == 9
        assert f.variables == ('x', 'y')

    def test_pow_takes_two_arguments(self):
        f = parse("pow(x, 3)")
        assert f(2) == 8

    def test_round_half_up(self):
        f = parse("round(x)")
        assert f(2.5) == 3
        assert f(-2.5) == -2

    def test_wrong_argument_count_raises(self):
        with pytest.raises(ParseError):
            parse("pow(x)")

    def test_wrong_arity_on_call(self):
        f = parse("x + 1")
        with pytest.raises(TypeError):
            f(1, 2)


class TestRejectedInput:
    """Anything outside the closed grammar is an invalid function"""

    @pytest.mark.parametrize("text", [
        "__import__('os')",
        "os",
        "invalidfunc(x)",
        "x +",
        "sin x",
        "2 3",
        "(x + 1",
        "",
        "   ",
        "x; 1",
    ])
    def test_invalid_expressions(self, text):
        with pytest.raises(ParseError) as exc_info:
            parse(text)
        assert str(exc_info.value) == "Invalid function."

    def test_unknown_variable(self):
        """A variable that was not declared is an unknown name"""
        with pytest.raises(ParseError) as exc_info:
            parse("t + 1")
        assert "Unknown name" in exc_info.value.detail

    def test_none_is_rejected(self):
        with pytest.raises(ParseError):
            parse(None)


class TestEvaluation:
    """Domain errors surface as EvaluationError at call time"""

    def test_division_by_zero(self):
        f = parse("1/x")
        with pytest.raises(EvaluationError):
            f(0)

    def test_log_of_negative(self):
        f = parse("log(x)")
        with pytest.raises(EvaluationError):
            f(-1)

    def test_overflow(self):
        f = parse("exp(x)")
        with pytest.raises(EvaluationError):
            f(1000)

    def test_smoke_test_tolerates_domain_error_at_one(self):
        """1/(x-1) is undefined at the smoke point but still a valid function"""
        f = parse("1/(x-1)")
        assert f(3) == 0.5


class TestTree:
    """AST shape and rendering"""

    def test_tree_nodes(self):
        tree = parse_tree("2x + sin(x)")
        assert isinstance(tree, BinaryOp)
        assert tree.op == '+'
        assert tree.left == BinaryOp('*', Number(2.0), Variable('x'))
        assert tree.right == FunctionCall('sin', (Variable('x'),))

    def test_negation_node(self):
        tree = parse_tree("-x")
        assert tree == UnaryOp('-', Variable('x'))

    def test_constant_keeps_symbol(self):
        tree = parse_tree("pi")
        assert tree.symbol == 'pi'
        assert str(tree) == 'pi'

    def test_render_keeps_needed_parentheses(self):
        assert str(parse_tree("(x+1)^2")) == "(x + 1)^2"
        assert str(parse_tree("x - (x - 1)")) == "x - (x - 1)"
        assert str(parse_tree("2*x^2")) == "2*x^2"

    def test_tokenize_inserts_multiplication(self):
        tokens = tokenize("2x")
        assert [token.value for token in tokens] == [2.0, '*', 'x']
