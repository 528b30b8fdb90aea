# Core calculation engine: strategy base class, field validation, dispatch and monitoring
import logging
import re
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Mapping, Optional, Sequence

import numpy as np

from .. import config
from .exceptions import CalculationError, InvalidFieldError
from .fields import CHOICE, NUMBER, FieldMap, FieldRule, coerce_float, is_blank
from .results import CalculationResult

logger = logging.getLogger(__name__)

NOT_IMPLEMENTED_TEXT = "Calculator logic not yet implemented."
UNEXPECTED_ERROR_TEXT = "An unexpected error occurred during calculation. Please check your inputs."
NON_NUMERIC_RESULT_TEXT = "The calculation did not produce a finite result. Please check your inputs."

_NON_FINITE = re.compile(r'\b(nan|inf|infinity)\b', re.IGNORECASE)


class CalculatorStrategy(ABC):
    """Base class of every calculator."""

    name: str = ''
    category: str = ''
    description: str = ''
    fields: Sequence[FieldRule] = ()

    @abstractmethod
    def calculate(self, fields: FieldMap) -> CalculationResult:
        """Run the calculation on validated fields."""
        pass

    def validate_input(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Check the declared field rules."""
        return FieldValidator().validate(self.fields, values)

    def get_algorithm_info(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'category': self.category,
            'description': self.description or (self.__doc__ or '').strip(),
            'fields': [rule.name for rule in self.fields],
        }


@dataclass
class CalculationMetrics:
    """Timing record of one calculation."""
    operation_name: str
    field_count: int
    execution_time: float
    success: bool
    error_message: Optional[str] = None


class PerformanceMonitor:
    """
    Collects calculation timings and warns about slow ones.

    Totals are running aggregates; only the latest ``history_size`` records
    are kept for the percentile.
    """

    def __init__(self, slow_threshold: float = config.SLOW_CALCULATION_SECONDS,
                 history_size: int = config.PERFORMANCE_HISTORY_SIZE):
        self.metrics: Deque[CalculationMetrics] = deque(maxlen=history_size)
        self.slow_threshold = slow_threshold
        self.total_operations = 0
        self.successful_operations = 0
        self.successful_time = 0.0
        self.max_execution_time = 0.0

    def record_calculation(self, operation: str, field_count: int, execution_time: float,
                           success: bool, error: Optional[str] = None):
        self.metrics.append(CalculationMetrics(
            operation_name=operation,
            field_count=field_count,
            execution_time=execution_time,
            success=success,
            error_message=error,
        ))
        self.total_operations += 1
        if success:
            self.successful_operations += 1
            self.successful_time += execution_time
        self.max_execution_time = max(self.max_execution_time, execution_time)
        if execution_time > self.slow_threshold:
            logger.warning(f"Slow calculation: {operation} took {execution_time:.2f}s")

    def get_stats(self) -> Dict[str, Any]:
        if not self.total_operations:
            return {}

        successful = self.successful_operations
        return {
            'total_operations': self.total_operations,
            'successful_operations': successful,
            'failed_operations': self.total_operations - successful,
            'success_rate': successful / self.total_operations,
            'avg_execution_time': self.successful_time / successful if successful else 0.0,
            'max_execution_time': self.max_execution_time,
            'p95_execution_time': float(np.percentile([m.execution_time for m in self.metrics], 95)),
        }


class FieldValidator:
    """Applies FieldRule declarations to raw request values."""

    def validate(self, rules: Sequence[FieldRule], values: Mapping[str, Any]) -> Dict[str, Any]:
        validation_result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'stats': {},
        }
        values = values or {}
        field_map = FieldMap(values, rules)

        for rule in rules:
            error = self._check(rule, field_map, values.get(rule.name))
            if error:
                validation_result['errors'].append(error)

        unknown = [key for key in values if key not in {r.name for r in rules} and not key.endswith('_unit')]
        if unknown:
            validation_result['warnings'].append(f"Ignored fields: {', '.join(sorted(unknown))}")

        validation_result['is_valid'] = not validation_result['errors']
        validation_result['stats']['field_count'] = len(values)
        return validation_result

    def _check(self, rule: FieldRule, field_map: FieldMap, raw: Any) -> Optional[str]:
        label = rule.display_name
        if is_blank(raw):
            if rule.required and rule.default is None:
                return f"Please provide a value for {label}."
            return None

        if rule.kind == CHOICE:
            if str(raw).strip() not in rule.choices:
                return f"{label} must be one of: {', '.join(rule.choices)}."
            return None
        if rule.kind != NUMBER:
            return None

        if coerce_float(raw) is None:
            return f"Invalid input detected for: {label}"
        try:
            value = field_map.number(rule.name)
        except InvalidFieldError as e:
            return str(e)

        if rule.positive and value <= 0:
            return f"{label} must be a positive number."
        if rule.nonzero and value == 0:
            return f"{label} cannot be zero."
        if rule.integer and not float(value).is_integer():
            return f"{label} must be a whole number."
        if rule.min_value is not None and value < rule.min_value:
            return f"{label} must be at least {rule.min_value:g}."
        if rule.max_value is not None and value > rule.max_value:
            return f"{label} must be at most {rule.max_value:g}."
        return None


class CalculationEngine:
    """Dispatches calculator ids to registered strategies."""

    def __init__(self):
        self.strategies: Dict[str, CalculatorStrategy] = {}
        self.performance_monitor = PerformanceMonitor()

    def register_strategy(self, name: str, strategy: CalculatorStrategy):
        self.strategies[name] = strategy
        logger.info(f"Registered calculator: {name}")

    def calculate(self, strategy_name: str, values: Optional[Mapping[str, Any]] = None) -> CalculationResult:
        """
        Validate the fields and run one calculator.

        Never raises: every failure becomes a result whose text explains it.
        """
        start_time = time.time()
        values = dict(values or {})

        strategy = self.strategies.get(strategy_name)
        if strategy is None:
            logger.warning(f"Unknown calculator requested: {strategy_name!r}")
            return CalculationResult(text=NOT_IMPLEMENTED_TEXT)

        error = None
        try:
            validation_result = strategy.validate_input(values)
            if not validation_result['is_valid']:
                error = '; '.join(validation_result['errors'])
                result = CalculationResult(text='\n'.join(f"Error: {e}" for e in validation_result['errors']))
            else:
                for warning in validation_result['warnings']:
                    logger.debug(f"{strategy_name}: {warning}")
                result = self._checked(strategy.calculate(FieldMap(values, strategy.fields)))
        except CalculationError as e:
            error = str(e)
            result = CalculationResult(text=str(e))
        except Exception as e:
            logger.exception(f"Calculator {strategy_name!r} failed")
            error = repr(e)
            result = CalculationResult(text=UNEXPECTED_ERROR_TEXT)

        self.performance_monitor.record_calculation(
            strategy_name, len(values), time.time() - start_time, error is None, error
        )
        return result

    @staticmethod
    def _checked(result: CalculationResult) -> CalculationResult:
        if not result.text or _NON_FINITE.search(result.text):
            logger.warning(f"Discarding non-numeric calculation text: {result.text!r}")
            return CalculationResult(text=NON_NUMERIC_RESULT_TEXT)
        return result

    def get_performance_stats(self) -> Dict[str, Any]:
        return self.performance_monitor.get_stats()

    def reset_performance_stats(self):
        self.performance_monitor = PerformanceMonitor()

    def get_registered_strategies(self) -> List[str]:
        return list(self.strategies.keys())

    def get_strategy_info(self, strategy_name: str) -> Dict[str, Any]:
        if strategy_name not in self.strategies:
            raise ValueError(f"Calculator '{strategy_name}' is not registered")
        return self.strategies[strategy_name].get_algorithm_info()


# Process-wide engine instance
_calculation_engine = None


def get_calculation_engine() -> CalculationEngine:
    """Return the global engine, registering the default calculators on first use."""
    global _calculation_engine
    if _calculation_engine is None:
        _calculation_engine = CalculationEngine()
        logger.info("Initialized global calculation engine")
        from .calculators.strategy_registry import register_default_strategies
        register_default_strategies(_calculation_engine)
    return _calculation_engine


def solve(calculator_id: str, fields: Optional[Mapping[str, Any]] = None) -> CalculationResult:
    """Single entry point: run calculator ``calculator_id`` on raw ``fields``."""
    return get_calculation_engine().calculate(calculator_id, fields)
