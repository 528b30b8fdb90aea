# Symbolic differentiation over the expression AST
"""
Structural derivative rules with a small simplifier.

``differentiate`` returns ``None`` when the expression contains something the
rules do not cover (abs/floor/ceil/round, variable base with variable
exponent); callers then fall back to finite differences.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .expression import (
    BinaryOp, FunctionCall, Node, Number, ParsedFunction, UnaryOp, Variable,
    PREC_PRODUCT, parse, parse_tree,
)
from .exceptions import EvaluationError, ParseError

logger = logging.getLogger(__name__)

ZERO = Number(0.0)
ONE = Number(1.0)

NON_DIFFERENTIABLE = {'abs', 'floor', 'ceil', 'round'}


class NotDifferentiable(Exception):
    """Raised inside the rule walk when a node has no supported derivative."""
    pass


@dataclass(frozen=True)
class SymbolicDerivative:
    derivative: str
    steps: List[str]
    function: ParsedFunction


def _is_number(node: Node, value: Optional[float] = None) -> bool:
    if not isinstance(node, Number):
        return False
    return value is None or node.value == value


def _plain_number(node: Node) -> bool:
    return isinstance(node, Number) and node.symbol is None


def _is_euler(node: Node) -> bool:
    return isinstance(node, Number) and (node.symbol == 'e' or node.value == math.e)


def _negate(node: Node) -> Node:
    return simplify(UnaryOp('-', node))


# -----------------------------
# Simplifier
# -----------------------------

def _fold(op: str, left: Number, right: Number) -> Optional[Number]:
    try:
        value = BinaryOp(op, left, right).evaluate({})
    except EvaluationError:
        return None
    return Number(value)


def simplify(node: Node) -> Node:
    """Bottom-up constant folding and identity removal."""
    if isinstance(node, UnaryOp):
        operand = simplify(node.operand)
        if _plain_number(operand):
            return Number(-operand.value) if operand.value != 0 else ZERO
        if isinstance(operand, UnaryOp):
            return operand.operand
        return UnaryOp('-', operand)

    if isinstance(node, FunctionCall):
        return FunctionCall(node.name, tuple(simplify(arg) for arg in node.args))

    if not isinstance(node, BinaryOp):
        return node

    left = simplify(node.left)
    right = simplify(node.right)
    op = node.op

    if _plain_number(left) and _plain_number(right):
        folded = _fold(op, left, right)
        if folded is not None:
            return folded

    if op == '+':
        if _is_number(left, 0):
            return right
        if _is_number(right, 0):
            return left
        if isinstance(right, UnaryOp):
            return simplify(BinaryOp('-', left, right.operand))
        if _plain_number(right) and right.value < 0:
            return BinaryOp('-', left, Number(-right.value))
    elif op == '-':
        if _is_number(right, 0):
            return left
        if _is_number(left, 0):
            return _negate(right)
        if isinstance(right, UnaryOp):
            return simplify(BinaryOp('+', left, right.operand))
        if _plain_number(right) and right.value < 0:
            return BinaryOp('+', left, Number(-right.value))
    elif op == '*':
        if _is_number(left, 0) or _is_number(right, 0):
            return ZERO
        if _is_number(left, 1):
            return right
        if _is_number(right, 1):
            return left
        if _is_number(left, -1):
            return _negate(right)
        if _is_number(right, -1):
            return _negate(left)
        if _plain_number(right) and not _plain_number(left):
            left, right = right, left
        if isinstance(left, UnaryOp):
            return _negate(simplify(BinaryOp('*', left.operand, right)))
        if isinstance(right, UnaryOp):
            return _negate(simplify(BinaryOp('*', left, right.operand)))
        if _plain_number(left) and left.value < 0:
            return _negate(simplify(BinaryOp('*', Number(-left.value), right)))
        if _plain_number(left) and isinstance(right, BinaryOp) and right.op == '*' and _plain_number(right.left):
            return simplify(BinaryOp('*', Number(left.value * right.left.value), right.right))
    elif op == '/':
        if _is_number(right, 1):
            return left
        if _is_number(left, 0):
            return ZERO
        if isinstance(left, UnaryOp):
            return _negate(simplify(BinaryOp('/', left.operand, right)))
    elif op == '^':
        if _is_number(right, 1):
            return left
        if _is_number(right, 0):
            return ONE

    return BinaryOp(op, left, right)


# -----------------------------
# Derivative rules
# -----------------------------

def _outer_derivative(name: str, u: Node) -> Node:
    """d/du of name(u)."""
    if name == 'sin':
        return FunctionCall('cos', (u,))
    if name == 'cos':
        return UnaryOp('-', FunctionCall('sin', (u,)))
    if name == 'tan':
        return BinaryOp('/', ONE, BinaryOp('^', FunctionCall('cos', (u,)), Number(2.0)))
    if name == 'exp':
        return FunctionCall('exp', (u,))
    if name == 'log':
        return BinaryOp('/', ONE, u)
    if name == 'sqrt':
        return BinaryOp('/', ONE, BinaryOp('*', Number(2.0), FunctionCall('sqrt', (u,))))
    one_minus_square = BinaryOp('-', ONE, BinaryOp('^', u, Number(2.0)))
    if name == 'asin':
        return BinaryOp('/', ONE, FunctionCall('sqrt', (one_minus_square,)))
    if name == 'acos':
        return UnaryOp('-', BinaryOp('/', ONE, FunctionCall('sqrt', (one_minus_square,))))
    if name == 'atan':
        return BinaryOp('/', ONE, BinaryOp('+', ONE, BinaryOp('^', u, Number(2.0))))
    raise NotDifferentiable(name)


def derive(node: Node, var: str = 'x') -> Node:
    """Unsimplified derivative of ``node`` with respect to ``var``."""
    if not node.depends_on(var):
        return ZERO
    if isinstance(node, Variable):
        return ONE
    if isinstance(node, UnaryOp):
        return UnaryOp('-', derive(node.operand, var))
    if isinstance(node, FunctionCall):
        if node.name in NON_DIFFERENTIABLE:
            raise NotDifferentiable(node.name)
        if node.name == 'pow':
            return derive(BinaryOp('^', node.args[0], node.args[1]), var)
        u = node.args[0]
        return BinaryOp('*', _outer_derivative(node.name, u), derive(u, var))
    if not isinstance(node, BinaryOp):
        raise NotDifferentiable(type(node).__name__)

    left, right, op = node.left, node.right, node.op
    if op in '+-':
        return BinaryOp(op, derive(left, var), derive(right, var))
    if op == '*':
        if not left.depends_on(var):
            return BinaryOp('*', left, derive(right, var))
        if not right.depends_on(var):
            return BinaryOp('*', derive(left, var), right)
        return BinaryOp('+', BinaryOp('*', derive(left, var), right), BinaryOp('*', left, derive(right, var)))
    if op == '/':
        if not right.depends_on(var):
            return BinaryOp('/', derive(left, var), right)
        numerator = BinaryOp('-', BinaryOp('*', derive(left, var), right), BinaryOp('*', left, derive(right, var)))
        return BinaryOp('/', numerator, BinaryOp('^', right, Number(2.0)))

    # op == '^'
    if left.depends_on(var) and right.depends_on(var):
        raise NotDifferentiable('variable base with variable exponent')
    if left.depends_on(var):
        reduced = BinaryOp('-', right, ONE)
        return BinaryOp('*', BinaryOp('*', right, BinaryOp('^', left, reduced)), derive(left, var))
    if _is_euler(left):
        return BinaryOp('*', node, derive(right, var))
    return BinaryOp('*', BinaryOp('*', node, FunctionCall('log', (left,))), derive(right, var))


# -----------------------------
# Step trail
# -----------------------------

def _additive_terms(node: Node, negative: bool = False) -> List[Tuple[bool, Node]]:
    if isinstance(node, BinaryOp) and node.op in '+-':
        return _additive_terms(node.left, negative) + _additive_terms(node.right, negative != (node.op == '-'))
    if isinstance(node, UnaryOp):
        return _additive_terms(node.operand, not negative)
    return [(negative, node)]


def _strip_constant_factors(node: Node, var: str) -> Node:
    while isinstance(node, BinaryOp) and node.op in '*/':
        if node.op == '*' and not node.left.depends_on(var):
            node = node.right
        elif not node.right.depends_on(var):
            node = node.left
        else:
            break
    return node


def _describe_rule(node: Node, var: str) -> Tuple[str, List[str]]:
    """Rule name for one additive term, plus indented detail lines."""
    if not node.depends_on(var):
        return 'Constant Rule', []
    core = _strip_constant_factors(node, var)
    if isinstance(core, Variable):
        return ('Power Rule' if core is node else 'Power Rule (linear)'), []
    if isinstance(core, UnaryOp):
        return _describe_rule(core.operand, var)
    if isinstance(core, BinaryOp) and core.op in '*/':
        u, v = core.left, core.right
        du = simplify(derive(u, var))
        dv = simplify(derive(v, var))
        details = [f"   u = {u}, v = {v}", f"   u' = {du}, v' = {dv}"]
        if core.op == '*':
            return "Product Rule: u'v + uv'", details
        return "Quotient Rule: (u'v - uv')/v^2", details
    if isinstance(core, BinaryOp) and core.op == '^':
        inner = core.left if core.left.depends_on(var) else core.right
        rule = 'Power Rule' if core.left.depends_on(var) else 'Exponential Rule'
        return _with_chain(rule, inner, var)
    if isinstance(core, BinaryOp):
        return 'Sum Rule', []
    if isinstance(core, FunctionCall):
        if core.name == 'pow':
            return _describe_rule(BinaryOp('^', core.args[0], core.args[1]), var)
        names = {'exp': 'Exponential Rule', 'log': 'Natural Log Rule'}
        rule = names.get(core.name, f"Derivative of {core.name}({var})")
        return _with_chain(rule, core.args[0], var)
    return 'Derivative', []


def _with_chain(rule: str, inner: Node, var: str) -> Tuple[str, List[str]]:
    if isinstance(inner, Variable):
        return rule, []
    return f"{rule} + Chain Rule", [f"   inner u = {inner}, u' = {simplify(derive(inner, var))}"]


def _signed(negative: bool, node: Node) -> str:
    if not negative:
        return str(node)
    if node.precedence < PREC_PRODUCT:
        return f"-({node})"
    return f"-{node}"


def differentiate(expression: str, variable: str = 'x') -> Optional[SymbolicDerivative]:
    """
    Symbolic first derivative of ``expression``.

    Returns:
        SymbolicDerivative, or None when a sub-expression is not covered.
    Raises:
        ParseError: the expression itself is invalid.
    """
    var = variable.lower()
    tree = parse_tree(expression, [var])

    steps: List[str] = []
    try:
        for negative, term in _additive_terms(tree):
            term_derivative = simplify(derive(term, var))
            rule, details = _describe_rule(term, var)
            result = str(_negate(term_derivative) if negative else term_derivative)
            steps.append(f"d/d{var} [{_signed(negative, term)}] = {result}  [{rule}]")
            steps.extend(details)
        derivative_tree = simplify(derive(tree, var))
    except NotDifferentiable as exc:
        logger.debug(f"No symbolic rule for {expression!r}: {exc}")
        return None

    text = str(derivative_tree)
    try:
        function = parse(text, [var])
    except ParseError:
        logger.warning(f"Derivative {text!r} of {expression!r} did not re-parse")
        return None
    return SymbolicDerivative(derivative=text, steps=steps, function=function)
