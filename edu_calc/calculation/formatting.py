# Number formatting helpers shared by all calculators
import math
from typing import Union

import numpy as np

Number = Union[int, float]


def format_number(value: Number) -> str:
    """Render a number without a trailing '.0' for whole values (5.0 -> '5')."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if not math.isfinite(value):
        return str(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def format_positional(value: Number) -> str:
    """Decimal rendering without an exponent (2e-05 -> '0.00002'), readable by the expression tokenizer."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return np.format_float_positional(value, trim='-')


def to_fixed(value: Number, digits: int = 4) -> str:
    """Fixed-point rendering; negative zero is printed as zero."""
    text = f"{float(value):.{digits}f}"
    if text.startswith('-') and float(text) == 0:
        text = text[1:]
    return text


def to_exponential(value: Number, digits: int = 4) -> str:
    """Scientific rendering with a compact exponent (12345 -> '1.2345e+4')."""
    text = f"{float(value):.{digits}e}"
    mantissa, exponent = text.split('e')
    return f"{mantissa}e{int(exponent):+d}"


def format_magnitude(value: Number, digits: int = 4) -> str:
    """Fixed-point inside [1e-4, 1e4], scientific outside it."""
    magnitude = abs(float(value))
    if magnitude != 0 and (magnitude < 1e-4 or magnitude > 1e4):
        return to_exponential(value, digits)
    return to_fixed(value, digits)


def format_complex(real: Number, imag: Number, digits: int = 4) -> str:
    """a + bi with the sign folded into the operator (2 - 5i, not 2 + -5i)."""
    sign = '-' if imag < 0 and to_fixed(imag, digits) != to_fixed(0, digits) else '+'
    return f"{to_fixed(real, digits)} {sign} {to_fixed(abs(imag), digits)}i"


def format_signed_term(value: Number, digits: int = 4) -> str:
    """'+ 1.5000' / '- 1.5000', used when appending a constant to an equation."""
    if value < 0 and to_fixed(value, digits) != to_fixed(0, digits):
        return f"- {to_fixed(abs(value), digits)}"
    return f"+ {to_fixed(abs(value), digits)}"


def step_header(title: str) -> str:
    """Section header in the step trail (rendered bold by the client)."""
    return f"**{title}**"
