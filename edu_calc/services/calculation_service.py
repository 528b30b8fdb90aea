# Calculator service used by the HTTP layer
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..calculation.engine import CalculationEngine, get_calculation_engine

logger = logging.getLogger(__name__)


class CalculationService:
    """Thin facade over the calculation engine."""

    def __init__(self, engine: Optional[CalculationEngine] = None):
        self.engine = engine or get_calculation_engine()

    def solve(self, calculator_id: str, fields: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        logger.debug(f"Solving {calculator_id!r} with fields {sorted((fields or {}).keys())}")
        result = self.engine.calculate(calculator_id, fields)
        return result.to_dict()

    def list_calculators(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        calculators = []
        for name in self.engine.get_registered_strategies():
            info = self.engine.get_strategy_info(name)
            if category and info['category'].lower() != category.lower():
                continue
            calculators.append({
                'name': name,
                'category': info['category'],
                'description': info['description'],
            })
        return calculators

    def get_calculator(self, calculator_id: str) -> Dict[str, Any]:
        """Raises ValueError for unknown ids."""
        info = self.engine.get_strategy_info(calculator_id)
        info['class_name'] = type(self.engine.strategies[calculator_id]).__name__
        info['name'] = calculator_id
        return info

    def list_categories(self) -> List[str]:
        categories = []
        for calculator in self.list_calculators():
            if calculator['category'] not in categories:
                categories.append(calculator['category'])
        return categories

    def get_performance_stats(self) -> Dict[str, Any]:
        return self.engine.get_performance_stats()
