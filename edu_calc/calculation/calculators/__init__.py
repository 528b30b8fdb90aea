# Calculator strategies grouped by subject
from .strategy_registry import (
    CalculationStrategyRegistry,
    get_registry,
    initialize_calculation_system,
    list_all_strategies,
    register_default_strategies,
)

__all__ = [
    'CalculationStrategyRegistry',
    'get_registry',
    'initialize_calculation_system',
    'list_all_strategies',
    'register_default_strategies',
]
