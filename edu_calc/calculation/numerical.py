# Numerical methods: finite differences, quadrature, limits, ODEs, small linear algebra, DFT
import math
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .exceptions import DomainError, EvaluationError, InputRangeError

Function = Callable[[float], float]

DIFFERENCE_METHODS = ('forward', 'backward', 'central', 'fivepoint')
VERTICAL_TANGENT_TOLERANCE = 1e-10


def normalize_method(method: str) -> str:
    """Canonical difference-method name ('Five-Point' -> 'fivepoint')."""
    name = (method or 'central').strip().lower().replace('-', '').replace('_', '').replace(' ', '')
    if name not in DIFFERENCE_METHODS:
        raise InputRangeError(f"Unknown difference method: {method}")
    return name


def finite_difference(f: Function, x: float, h: float = 1e-4, order: int = 1,
                      method: str = 'central') -> float:
    """
    Approximate f'(x) or f''(x) with a difference quotient.

    Second order uses the five-point stencil for 'fivepoint' and the
    three-point central stencil for every other method.
    """
    if h <= 0:
        raise InputRangeError("Step size h must be positive.")
    if order not in (1, 2):
        raise InputRangeError("Derivative order must be 1 or 2.")
    method = normalize_method(method)

    if order == 1:
        if method == 'forward':
            value = (f(x + h) - f(x)) / h
        elif method == 'backward':
            value = (f(x) - f(x - h)) / h
        elif method == 'fivepoint':
            value = (-f(x + 2 * h) + 8 * f(x + h) - 8 * f(x - h) + f(x - 2 * h)) / (12 * h)
        else:
            value = (f(x + h) - f(x - h)) / (2 * h)
    elif method == 'fivepoint':
        value = (-f(x + 2 * h) + 16 * f(x + h) - 30 * f(x) + 16 * f(x - h) - f(x - 2 * h)) / (12 * h * h)
    else:
        value = (f(x + h) - 2 * f(x) + f(x - h)) / (h * h)

    if not math.isfinite(value):
        raise EvaluationError("The derivative could not be approximated at this point.")
    return value


@dataclass
class ParametricDerivative:
    value: float
    dx_dt: float
    dy_dt: float


def parametric_derivative(fx: Function, fy: Function, t: float, h: float = 1e-4,
                          order: int = 1, method: str = 'central') -> ParametricDerivative:
    """dy/dx (order 1) or d²y/dx² (order 2) of the curve (x(t), y(t))."""
    dx_dt = finite_difference(fx, t, h, 1, method)
    dy_dt = finite_difference(fy, t, h, 1, method)
    if abs(dx_dt) < VERTICAL_TANGENT_TOLERANCE:
        raise DomainError("Vertical tangent detected (dx/dt ≈ 0). Derivative undefined.")

    if order == 1:
        return ParametricDerivative(dy_dt / dx_dt, dx_dt, dy_dt)
    if order != 2:
        raise InputRangeError("Derivative order must be 1 or 2.")

    def slope(s: float) -> float:
        local_dx = finite_difference(fx, s, h, 1, method)
        if abs(local_dx) <= VERTICAL_TANGENT_TOLERANCE:
            return 0.0
        return finite_difference(fy, s, h, 1, method) / local_dx

    d_slope_dt = finite_difference(slope, t, h, 1, method)
    return ParametricDerivative(d_slope_dt / dx_dt, dx_dt, dy_dt)


def trapezoid(f: Function, a: float, b: float, n: int = 1000) -> float:
    """Composite trapezoidal rule over n equal segments."""
    if a >= b:
        raise InputRangeError("Lower limit must be less than upper limit for this implementation.")
    xs = np.linspace(a, b, n + 1)
    ys = np.array([f(float(x)) for x in xs])
    h = (b - a) / n
    return float(h * (ys.sum() - 0.5 * (ys[0] + ys[-1])))


@dataclass
class LimitApproach:
    left: float
    right: float
    h: float
    exists: bool

    @property
    def value(self) -> float:
        return (self.left + self.right) / 2


def approach_limit(f: Function, a: float, h: float = 1e-5, threshold: float = 0.1) -> LimitApproach:
    """Two-sided numeric limit; one-sided values further apart than threshold mean no limit."""
    left = f(a - h)
    right = f(a + h)
    return LimitApproach(left=left, right=right, h=h, exists=abs(left - right) <= threshold)


@dataclass
class EulerStep:
    x: float
    y: float
    slope: float
    next_y: float


@dataclass
class EulerSolution:
    h: float
    points: List[Tuple[float, float]] = field(default_factory=list)
    trace: List[EulerStep] = field(default_factory=list)

    @property
    def final(self) -> Tuple[float, float]:
        return self.points[-1]


def euler(f: Callable[[float, float], float], x0: float, y0: float, h: float = 0.1,
          steps: int = 20, traced: int = 5) -> EulerSolution:
    """Explicit Euler for y' = f(x, y); the first ``traced`` steps are recorded."""
    solution = EulerSolution(h=h, points=[(x0, y0)])
    x, y = x0, y0
    for i in range(steps):
        slope = f(x, y)
        next_y = y + h * slope
        if i < traced:
            solution.trace.append(EulerStep(x, y, slope, next_y))
        x, y = x + h, next_y
        solution.points.append((x, y))
    if not math.isfinite(y):
        raise EvaluationError("The numerical solution diverged.")
    return solution


# -----------------------------
# Linear algebra
# -----------------------------

def determinant_2x2(a: float, b: float, c: float, d: float) -> float:
    return a * d - b * c


def determinant_3x3(m: Sequence[Sequence[float]]) -> float:
    """Cofactor expansion along the first row."""
    return (m[0][0] * determinant_2x2(m[1][1], m[1][2], m[2][1], m[2][2])
            - m[0][1] * determinant_2x2(m[1][0], m[1][2], m[2][0], m[2][2])
            + m[0][2] * determinant_2x2(m[1][0], m[1][1], m[2][0], m[2][1]))


@dataclass
class Eigenvalues:
    trace: float
    determinant: float
    discriminant: float
    kind: str  # real | repeated | complex
    values: Tuple[complex, ...]


def eigenvalues_2x2(a: float, b: float, c: float, d: float) -> Eigenvalues:
    """Roots of λ² - tr(A)λ + det(A) = 0 for A = [[a, b], [c, d]]."""
    trace = a + d
    det = determinant_2x2(a, b, c, d)
    discriminant = trace * trace - 4 * det
    if discriminant > 0:
        root = math.sqrt(discriminant)
        return Eigenvalues(trace, det, discriminant, 'real', ((trace + root) / 2, (trace - root) / 2))
    if discriminant == 0:
        return Eigenvalues(trace, det, discriminant, 'repeated', (trace / 2, trace / 2))
    imag = math.sqrt(-discriminant) / 2
    return Eigenvalues(trace, det, discriminant, 'complex',
                       (complex(trace / 2, imag), complex(trace / 2, -imag)))


def cross_product(u: Sequence[float], v: Sequence[float]) -> Tuple[float, float, float]:
    ax, ay, az = u
    bx, by, bz = v
    return (ay * bz - az * by, az * bx - ax * bz, ax * by - ay * bx)


def solve_linear_system_2x2(a1: float, b1: float, c1: float,
                            a2: float, b2: float, c2: float) -> Tuple[float, float, float]:
    """Cramer's rule for a1·x + b1·y = c1, a2·x + b2·y = c2. Returns (x, y, D)."""
    det = a1 * b2 - a2 * b1
    if det == 0:
        raise InputRangeError("Determinant is zero. No unique solution (parallel or identical lines).")
    x = (c1 * b2 - c2 * b1) / det
    y = (a1 * c2 - a2 * c1) / det
    return x, y, det


def matrix_multiply(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> List[List[float]]:
    left = np.asarray(a, dtype=float)
    right = np.asarray(b, dtype=float)
    if left.ndim != 2 or right.ndim != 2 or left.shape[1] != right.shape[0]:
        raise InputRangeError("Matrix dimensions do not allow multiplication.")
    return (left @ right).tolist()


def dft_magnitudes(signal: Sequence[float]) -> List[float]:
    """|X[k]| of the direct discrete Fourier transform X[k] = Σ x[n]·e^(-i2πkn/N)."""
    x = np.asarray(signal, dtype=float)
    n_samples = len(x)
    if n_samples == 0:
        raise InputRangeError("Please provide a list of numbers.")
    n = np.arange(n_samples)
    k = n.reshape(-1, 1)
    spectrum = (x * np.exp(-2j * np.pi * k * n / n_samples)).sum(axis=1)
    return np.abs(spectrum).tolist()
