# Calculation engine package
from .engine import CalculationEngine, CalculatorStrategy, get_calculation_engine, solve
from .exceptions import CalculationError
from .results import CalculationResult, ChartDataset, PlotData
from .calculators import initialize_calculation_system, register_default_strategies

__all__ = [
    'CalculationEngine',
    'CalculatorStrategy',
    'CalculationError',
    'CalculationResult',
    'ChartDataset',
    'PlotData',
    'get_calculation_engine',
    'initialize_calculation_system',
    'register_default_strategies',
    'solve',
]
