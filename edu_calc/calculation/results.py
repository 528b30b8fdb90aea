# Calculation result containers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PLOT_TYPES = ('line', 'bar', 'scatter', 'doughnut')


@dataclass
class ChartDataset:
    """One series of a chart. ``style`` carries renderer hints (colours, dash, fill)."""
    label: str
    data: List[Any]
    style: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = {'label': self.label, 'data': list(self.data)}
        payload.update(self.style)
        return payload


@dataclass
class PlotData:
    type: str
    datasets: List[ChartDataset]
    labels: Optional[List[Any]] = None
    options: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.type not in PLOT_TYPES:
            raise ValueError(f"Unsupported plot type: {self.type}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.labels is not None:
            data['labels'] = list(self.labels)
        data['datasets'] = [dataset.to_dict() for dataset in self.datasets]
        payload = {'type': self.type, 'data': data}
        if self.options:
            payload['options'] = self.options
        return payload


@dataclass
class CalculationResult:
    """Answer of one calculator call: text is always present, steps and plot are optional."""
    text: str
    steps: Optional[List[str]] = None
    plot_data: Optional[PlotData] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'text': self.text}
        if self.steps is not None:
            payload['steps'] = list(self.steps)
        if self.plot_data is not None:
            payload['plotData'] = self.plot_data.to_dict()
        return payload
