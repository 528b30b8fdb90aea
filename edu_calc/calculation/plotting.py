# Chart helpers: sample functions into point lists and build chart options
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .exceptions import EvaluationError
from .results import ChartDataset

PRIMARY = 'rgb(129, 140, 248)'
ACCENT = 'rgb(52, 211, 153)'
HIGHLIGHT = 'rgb(244, 63, 94)'


def sample_points(f: Callable[[float], float], start: float, end: float,
                  samples: int = 100) -> List[Dict[str, float]]:
    """Evenly sample ``f`` on [start, end]; points outside the domain are skipped."""
    points = []
    for x in np.linspace(start, end, samples + 1):
        try:
            y = f(float(x))
        except EvaluationError:
            continue
        points.append({'x': float(x), 'y': float(y)})
    return points


def axis_options(x_title: str = 'x', y_title: str = 'y', title: Optional[str] = None) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        'scales': {
            'x': {'type': 'linear', 'position': 'bottom', 'title': {'display': True, 'text': x_title}},
            'y': {'title': {'display': True, 'text': y_title}},
        }
    }
    if title:
        options['plugins'] = {'title': {'display': True, 'text': title}}
    return options


def point_dataset(label: str, x: float, y: float, color: str = HIGHLIGHT) -> ChartDataset:
    return ChartDataset(label, [{'x': x, 'y': y}],
                        {'type': 'scatter', 'backgroundColor': color, 'pointRadius': 6})
