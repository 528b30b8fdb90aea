# Statistics and probability formulas
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .exceptions import DomainError, InputRangeError

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r'[,\s]+')

# Abramowitz & Stegun 7.1.26
_ERF_A1 = 0.254829592
_ERF_A2 = -0.284496736
_ERF_A3 = 1.421413741
_ERF_A4 = -1.453152027
_ERF_A5 = 1.061405429
_ERF_P = 0.3275911


def parse_number_list(text) -> List[float]:
    """Comma/whitespace separated numbers; tokens that are not numbers are dropped."""
    tokens = [token for token in _SEPARATORS.split(str(text or '').strip()) if token]
    values = pd.to_numeric(pd.Series(tokens, dtype=object), errors='coerce').astype(float)
    values = values[np.isfinite(values)]
    if values.empty:
        raise InputRangeError("Please provide a list of numbers.")
    dropped = len(tokens) - len(values)
    if dropped:
        logger.debug(f"Dropped {dropped} non-numeric token(s) from number list")
    return [float(v) for v in values]


def parse_point_list(text) -> List[Tuple[float, float]]:
    """One 'x,y' pair per line; malformed lines are dropped."""
    text = str(text or '').strip()
    if not text:
        raise InputRangeError("Please provide a list of numbers.")
    points = []
    for line in text.splitlines():
        parts = [part for part in _SEPARATORS.split(line.strip()) if part]
        if len(parts) != 2:
            continue
        pair = pd.to_numeric(pd.Series(parts, dtype=object), errors='coerce').astype(float)
        if not np.isfinite(pair).all():
            continue
        points.append((float(pair.iloc[0]), float(pair.iloc[1])))
    return points


@dataclass
class DescriptiveStatistics:
    values: List[float]
    count: int
    sum: float
    mean: float
    median: float
    mode: float
    variance: float
    std_dev: float
    min: float
    max: float
    range: float


def describe(values: Sequence[float]) -> DescriptiveStatistics:
    """Population statistics (ddof=0) of a non-empty sample."""
    series = pd.Series(values, dtype=float).dropna().sort_values(ignore_index=True)
    if series.empty:
        raise InputRangeError("Please provide a list of numbers.")

    # Series.mode() is sorted, so ties resolve to the smallest value
    mode_values = series.mode()
    return DescriptiveStatistics(
        values=series.tolist(),
        count=int(len(series)),
        sum=float(series.sum()),
        mean=float(series.mean()),
        median=float(series.median()),
        mode=float(mode_values.iloc[0]),
        variance=float(series.var(ddof=0)),
        std_dev=float(series.std(ddof=0)),
        min=float(series.min()),
        max=float(series.max()),
        range=float(series.max() - series.min()),
    )


def factorial(n: int) -> int:
    if n < 0 or int(n) != n:
        raise DomainError("Factorial is only defined for non-negative whole numbers.")
    return math.factorial(int(n))


def combinations(n: int, k: int) -> int:
    """C(n, k); zero outside 0 <= k <= n."""
    if k < 0 or k > n:
        return 0
    return math.comb(int(n), int(k))


def binomial_pmf(n: int, k: int, p: float) -> float:
    if not 0 <= p <= 1:
        raise DomainError("Probability p must be between 0 and 1.")
    return combinations(n, k) * math.pow(p, k) * math.pow(1 - p, n - k)


def binomial_distribution(n: int, p: float) -> List[float]:
    """P(X = i) for i = 0..n."""
    return [binomial_pmf(n, i, p) for i in range(n + 1)]


def erf(x: float) -> float:
    """Error function, A&S 7.1.26 (max abs error about 1.5e-7)."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    t = 1.0 / (1.0 + _ERF_P * x)
    poly = ((((_ERF_A5 * t + _ERF_A4) * t + _ERF_A3) * t + _ERF_A2) * t + _ERF_A1) * t
    return sign * (1.0 - poly * math.exp(-x * x))


def normal_cdf(x: float, mean: float, std: float) -> float:
    if std <= 0:
        raise DomainError("Error: Standard Deviation must be a positive number.")
    return 0.5 * (1 + erf((x - mean) / (std * math.sqrt(2))))


def normal_pdf(x: float, mean: float, std: float) -> float:
    if std <= 0:
        raise DomainError("Error: Standard Deviation must be a positive number.")
    return math.exp(-0.5 * ((x - mean) / std) ** 2) / (std * math.sqrt(2 * math.pi))


@dataclass
class RegressionResult:
    n: int
    sum_x: float
    sum_y: float
    sum_xy: float
    sum_xx: float
    sum_yy: float
    slope: float
    intercept: float
    r: Optional[float]


def linear_regression(points: Sequence[Tuple[float, float]]) -> RegressionResult:
    """
    Ordinary least squares fit y = slope·x + intercept with Pearson r.

    r is None when every y value is equal (correlation undefined).
    """
    if len(points) < 2:
        raise DomainError("Linear regression needs at least two data points.")
    frame = pd.DataFrame(points, columns=['x', 'y'], dtype=float)
    n = len(frame)
    sum_x = float(frame['x'].sum())
    sum_y = float(frame['y'].sum())
    sum_xy = float((frame['x'] * frame['y']).sum())
    sum_xx = float((frame['x'] ** 2).sum())
    sum_yy = float((frame['y'] ** 2).sum())

    denominator_x = n * sum_xx - sum_x * sum_x
    if frame['x'].nunique() < 2 or denominator_x == 0:
        raise DomainError("All x values are identical; the regression line is undefined.")
    slope = (n * sum_xy - sum_x * sum_y) / denominator_x
    intercept = (sum_y - slope * sum_x) / n

    denominator_y = n * sum_yy - sum_y * sum_y
    r = None
    if frame['y'].nunique() > 1 and denominator_y > 0:
        r = (n * sum_xy - sum_x * sum_y) / math.sqrt(denominator_x * denominator_y)

    return RegressionResult(n, sum_x, sum_y, sum_xy, sum_xx, sum_yy, slope, intercept, r)
