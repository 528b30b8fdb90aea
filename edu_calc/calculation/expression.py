# Expression parser and evaluator
"""
Turns user-typed maths such as ``2x^2 + sin(x)`` into a callable.

Pipeline
--------
1) Tokenizer: lowercases the text, splits runs of letters into known names
   (functions, constants, declared variables), and inserts the implicit
   multiplication a student means when writing ``2x`` or ``xsin(x)``.
2) Parser: recursive descent over the tokens, producing an AST of
   Number / Variable / UnaryOp / BinaryOp / FunctionCall nodes.
3) Evaluator: walks the AST with a variable environment. Only the functions in
   ``FUNCTIONS`` are reachable, so there is no path to host-language code.
"""
import logging
import math
import re
from collections import namedtuple
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .exceptions import EvaluationError, ParseError
from .formatting import format_positional

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


# Closed function registry: name -> (implementation, arity)
FUNCTIONS: Dict[str, Tuple[Callable[..., float], int]] = {
    'sin': (math.sin, 1),
    'cos': (math.cos, 1),
    'tan': (math.tan, 1),
    'asin': (math.asin, 1),
    'acos': (math.acos, 1),
    'atan': (math.atan, 1),
    'exp': (math.exp, 1),
    'abs': (math.fabs, 1),
    'log': (math.log, 1),
    'sqrt': (math.sqrt, 1),
    'pow': (math.pow, 2),
    'floor': (lambda v: float(math.floor(v)), 1),
    'ceil': (lambda v: float(math.ceil(v)), 1),
    'round': (_round_half_up, 1),
}

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'e': math.e,
}

FUNCTION_ALIASES: Dict[str, str] = {
    'ln': 'log',
}

_ALLOWED_CHARACTERS = re.compile(r'^[0-9a-z+\-*/^().,\s]*$')
_NUMBER = re.compile(r'\d+(?:\.\d*)?|\.\d+')

# Binding strength used when rendering nodes back to text
PREC_SUM = 1
PREC_PRODUCT = 2
PREC_UNARY = 3
PREC_POWER = 4
PREC_ATOM = 5


# -----------------------------
# AST node types
# -----------------------------

class Node:
    """Base AST node."""

    precedence = PREC_ATOM

    def evaluate(self, env: Dict[str, float]) -> float:
        raise NotImplementedError

    def depends_on(self, name: str) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Number(Node):
    """Numeric literal; ``symbol`` keeps the name of a constant such as pi."""
    value: float
    symbol: Optional[str] = None

    @property
    def precedence(self):
        return PREC_UNARY if self.value < 0 and not self.symbol else PREC_ATOM

    def evaluate(self, env):
        return self.value

    def depends_on(self, name):
        return False

    def __str__(self):
        return self.symbol or format_positional(self.value)


@dataclass(frozen=True)
class Variable(Node):
    name: str

    def evaluate(self, env):
        try:
            return env[self.name]
        except KeyError:
            raise EvaluationError(f"No value supplied for variable '{self.name}'.")

    def depends_on(self, name):
        return self.name == name

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str
    operand: Node

    @property
    def precedence(self):
        # '-a*b' reads as a product, so it binds no tighter than one
        return PREC_PRODUCT if self.operand.precedence == PREC_PRODUCT else PREC_UNARY

    def evaluate(self, env):
        value = self.operand.evaluate(env)
        return -value if self.op == '-' else value

    def depends_on(self, name):
        return self.operand.depends_on(name)

    def __str__(self):
        inner = str(self.operand)
        if self.operand.precedence < PREC_PRODUCT:
            inner = f"({inner})"
        return f"{self.op}{inner}"


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node

    @property
    def precedence(self):
        return {'+': PREC_SUM, '-': PREC_SUM, '*': PREC_PRODUCT, '/': PREC_PRODUCT}.get(self.op, PREC_POWER)

    def evaluate(self, env):
        left = self.left.evaluate(env)
        right = self.right.evaluate(env)
        try:
            if self.op == '+':
                result = left + right
            elif self.op == '-':
                result = left - right
            elif self.op == '*':
                result = left * right
            elif self.op == '/':
                result = left / right
            else:
                result = math.pow(left, right)
        except ZeroDivisionError:
            raise EvaluationError("Division by zero while evaluating the function.")
        except (ValueError, OverflowError) as exc:
            raise EvaluationError(f"'{self}' is undefined for the given input ({exc}).")
        if not math.isfinite(result):
            raise EvaluationError(f"'{self}' overflowed for the given input.")
        return result

    def depends_on(self, name):
        return self.left.depends_on(name) or self.right.depends_on(name)

    def __str__(self):
        prec = self.precedence
        left = str(self.left)
        right = str(self.right)
        if self.left.precedence < prec or (self.op == '^' and self.left.precedence <= PREC_POWER):
            left = f"({left})"
        if self.right.precedence < prec or (self.op in '-/' and self.right.precedence == prec):
            right = f"({right})"
        if self.op in '+-':
            return f"{left} {self.op} {right}"
        return f"{left}{self.op}{right}"


@dataclass(frozen=True)
class FunctionCall(Node):
    name: str
    args: Tuple[Node, ...]

    def evaluate(self, env):
        implementation, _ = FUNCTIONS[self.name]
        values = [arg.evaluate(env) for arg in self.args]
        try:
            result = implementation(*values)
        except (ValueError, OverflowError, ZeroDivisionError) as exc:
            raise EvaluationError(f"{self.name}() is undefined for the given input ({exc}).")
        if not math.isfinite(result):
            raise EvaluationError(f"{self.name}() overflowed for the given input.")
        return result

    def depends_on(self, name):
        return any(arg.depends_on(name) for arg in self.args)

    def __str__(self):
        return f"{self.name}({', '.join(str(arg) for arg in self.args)})"


# -----------------------------
# Tokenizer
# -----------------------------

Token = namedtuple('Token', 'kind value position')

NUMBER = 'number'
NAME = 'name'
FUNC = 'func'
OP = 'op'
LPAREN = '('
RPAREN = ')'
COMMA = ','


def _split_name_run(run: str, position: int, variables: Sequence[str]) -> List[Token]:
    """Split a run of letters ('xsin', 'pix') into known names, longest match first."""
    known = set(FUNCTIONS) | set(CONSTANTS) | set(FUNCTION_ALIASES) | set(variables)
    tokens = []
    i = 0
    while i < len(run):
        match = None
        for end in range(len(run), i, -1):
            if run[i:end] in known:
                match = run[i:end]
                break
        if match is None:
            raise ParseError(detail=f"Unknown name '{run[i:]}' at position {position + i}")
        name = FUNCTION_ALIASES.get(match, match)
        kind = FUNC if name in FUNCTIONS else NAME
        tokens.append(Token(kind, name, position + i))
        i += len(match)
    return tokens


def tokenize(text: str, variables: Sequence[str] = ('x',)) -> List[Token]:
    """Convert normalized expression text into tokens with implicit '*' inserted."""
    text = text.lower().replace('**', '^')
    if not _ALLOWED_CHARACTERS.match(text):
        bad = sorted(set(re.sub(r'[0-9a-z+\-*/^().,\s]', '', text)))
        raise ParseError(detail=f"Disallowed characters: {''.join(bad)!r}")

    raw_tokens: List[Token] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char.isspace():
            i += 1
        elif char.isdigit() or char == '.':
            match = _NUMBER.match(text, i)
            if match is None:
                raise ParseError(detail=f"Malformed number at position {i}")
            raw_tokens.append(Token(NUMBER, float(match.group()), i))
            i = match.end()
        elif char.isalpha():
            end = i
            while end < len(text) and text[end].isalpha():
                end += 1
            raw_tokens.extend(_split_name_run(text[i:end], i, variables))
            i = end
        elif char in '+-*/^':
            raw_tokens.append(Token(OP, char, i))
            i += 1
        else:
            raw_tokens.append(Token(char, char, i))
            i += 1

    # Implicit multiplication pass: 2x, 2(x), (x)(x), x2, xsin(x), pi x
    tokens: List[Token] = []
    for token in raw_tokens:
        if tokens:
            previous = tokens[-1]
            if previous.kind == FUNC and token.kind != LPAREN:
                raise ParseError(detail=f"Missing '(' after function '{previous.value}'")
            if previous.kind == NUMBER and token.kind == NUMBER:
                raise ParseError(detail=f"Two numbers in a row at position {token.position}")
            if previous.kind in (NUMBER, NAME, RPAREN) and token.kind in (NUMBER, NAME, FUNC, LPAREN):
                tokens.append(Token(OP, '*', token.position))
        tokens.append(token)
    if tokens and tokens[-1].kind == FUNC:
        raise ParseError(detail=f"Missing '(' after function '{tokens[-1].value}'")
    return tokens


# -----------------------------
# Parser (recursive descent)
# -----------------------------

class Parser:
    """Precedence climbing by nested rules: expression -> term -> unary -> power -> primary."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> Node:
        if not self.tokens:
            raise ParseError(detail="Empty expression")
        node = self.parse_expression()
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            raise ParseError(detail=f"Unexpected token {token.value!r} at position {token.position}")
        return node

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self) -> Token:
        token = self._peek()
        if token is None:
            raise ParseError(detail="Unexpected end of expression")
        self.pos += 1
        return token

    def _accept_op(self, *ops: str) -> Optional[str]:
        token = self._peek()
        if token is not None and token.kind == OP and token.value in ops:
            self.pos += 1
            return token.value
        return None

    def parse_expression(self) -> Node:
        node = self.parse_term()
        while True:
            op = self._accept_op('+', '-')
            if op is None:
                return node
            node = BinaryOp(op, node, self.parse_term())

    def parse_term(self) -> Node:
        node = self.parse_unary()
        while True:
            op = self._accept_op('*', '/')
            if op is None:
                return node
            node = BinaryOp(op, node, self.parse_unary())

    def parse_unary(self) -> Node:
        op = self._accept_op('+', '-')
        if op is not None:
            operand = self.parse_unary()
            return operand if op == '+' else UnaryOp('-', operand)
        return self.parse_power()

    def parse_power(self) -> Node:
        base = self.parse_primary()
        if self._accept_op('^'):
            # Right-associative, and the exponent may carry its own sign: 2^-x
            return BinaryOp('^', base, self.parse_unary())
        return base

    def parse_primary(self) -> Node:
        token = self._take()
        if token.kind == NUMBER:
            return Number(token.value)
        if token.kind == NAME:
            if token.value in CONSTANTS:
                return Number(CONSTANTS[token.value], symbol=token.value)
            return Variable(token.value)
        if token.kind == FUNC:
            return self._parse_call(token)
        if token.kind == LPAREN:
            node = self.parse_expression()
            self._expect(RPAREN)
            return node
        raise ParseError(detail=f"Unexpected token {token.value!r} at position {token.position}")

    def _parse_call(self, token: Token) -> Node:
        self._expect(LPAREN)
        args = [self.parse_expression()]
        while self._peek() is not None and self._peek().kind == COMMA:
            self.pos += 1
            args.append(self.parse_expression())
        self._expect(RPAREN)
        _, arity = FUNCTIONS[token.value]
        if len(args) != arity:
            raise ParseError(detail=f"{token.value}() takes {arity} argument(s), got {len(args)}")
        return FunctionCall(token.value, tuple(args))

    def _expect(self, kind: str):
        token = self._take()
        if token.kind != kind:
            raise ParseError(detail=f"Expected {kind!r} at position {token.position}, got {token.value!r}")
        return token


# -----------------------------
# Public API
# -----------------------------

@dataclass(frozen=True)
class ParsedFunction:
    """Immutable callable over a fixed, ordered set of variables."""
    expression: str
    variables: Tuple[str, ...]
    tree: Node

    def __call__(self, *args: float) -> float:
        if len(args) != len(self.variables):
            raise TypeError(f"Expected {len(self.variables)} argument(s), got {len(args)}")
        env = {name: float(value) for name, value in zip(self.variables, args)}
        return float(self.tree.evaluate(env))

    def __str__(self):
        return str(self.tree)


def parse_tree(expression, variables: Sequence[str] = ('x',)) -> Node:
    """Parse expression text into an AST without the smoke test."""
    text = '' if expression is None else str(expression).strip()
    if not text:
        raise ParseError(detail="Empty expression")
    names = tuple(name.lower() for name in variables)
    try:
        return Parser(tokenize(text, names)).parse()
    except RecursionError:
        raise ParseError(detail="Expression is nested too deeply")


def parse(expression, variables: Sequence[str] = ('x',)) -> ParsedFunction:
    """
    Build a ParsedFunction from user text.

    Raises:
        ParseError: the text is not a valid expression over ``variables``.
    """
    try:
        tree = parse_tree(expression, variables)
    except ParseError as exc:
        logger.debug(f"Rejected expression {expression!r}: {exc.detail}")
        raise

    function = ParsedFunction(str(expression), tuple(name.lower() for name in variables), tree)

    # Smoke test at all-ones; a domain failure at that single point is tolerated
    try:
        value = function(*([1.0] * len(function.variables)))
    except EvaluationError as exc:
        logger.debug(f"Smoke test of {expression!r} hit a domain error: {exc}")
        return function
    if not isinstance(value, float) or not math.isfinite(value):
        logger.debug(f"Smoke test of {expression!r} returned a non-numeric result")
        raise ParseError(detail="Smoke test returned a non-numeric result")
    return function
