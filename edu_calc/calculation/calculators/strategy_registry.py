# Calculator registry: maps calculator ids to strategy classes
import logging
from typing import Any, Dict, List, Type

from ..engine import CalculationEngine, CalculatorStrategy, get_calculation_engine
from .algebra_calculator import (ComplexNumberCalculator, LinearEquationSolver, PolynomialRootFinder,
                                 QuadraticEquationSolver, SystemOfEquationsSolver)
from .basic_calculator import ArithmeticCalculator, PercentageCalculator, UnitConverter
from .calculus_calculator import (DerivativeCalculator, DifferentialEquationSolver, IntegralCalculator,
                                  LaplaceTransformCalculator, LimitCalculator)
from .finance_calculator import LoanComparisonCalculator, MortgageCalculator, SimpleInterestCalculator
from .geometry_calculator import AreaPerimeterCalculator, CircleCalculator, DistanceFormulaCalculator, TriangleSolver
from .matrix_calculator import (EigenvalueCalculator, FourierTransformCalculator, MatrixDeterminantCalculator,
                                MatrixMultiplicationCalculator, VectorCrossProductCalculator)
from .physics_calculator import FORMULA_CALCULATORS, KinematicsCalculator, OhmsLawCalculator, ProjectileMotionCalculator
from .statistics_calculator import (BinomialDistributionCalculator, LinearRegressionCalculator,
                                    NormalDistributionCalculator, StatisticsCalculator)
from .trigonometry_calculator import TrigBasicsCalculator, TrigEquationSolver

logger = logging.getLogger(__name__)

# Registration order is the order calculators are listed to clients
DEFAULT_STRATEGIES = (
    ArithmeticCalculator, PercentageCalculator, UnitConverter,
    QuadraticEquationSolver, LinearEquationSolver, PolynomialRootFinder, SystemOfEquationsSolver,
    ComplexNumberCalculator,
    DerivativeCalculator, IntegralCalculator, LimitCalculator, DifferentialEquationSolver,
    LaplaceTransformCalculator,
    AreaPerimeterCalculator, TriangleSolver, CircleCalculator, DistanceFormulaCalculator,
    TrigBasicsCalculator, TrigEquationSolver,
    MatrixMultiplicationCalculator, MatrixDeterminantCalculator, EigenvalueCalculator,
    VectorCrossProductCalculator, FourierTransformCalculator,
    StatisticsCalculator, BinomialDistributionCalculator, NormalDistributionCalculator, LinearRegressionCalculator,
    SimpleInterestCalculator, MortgageCalculator, LoanComparisonCalculator,
    ProjectileMotionCalculator, OhmsLawCalculator, KinematicsCalculator,
) + FORMULA_CALCULATORS


class CalculationStrategyRegistry:
    """Calculator id -> strategy class."""

    def __init__(self):
        self._strategies: Dict[str, Type[CalculatorStrategy]] = {}
        self._descriptions: Dict[str, str] = {}

    def register(self, name: str, strategy_class: Type[CalculatorStrategy], description: str = ""):
        if not issubclass(strategy_class, CalculatorStrategy):
            raise ValueError(f"Strategy class {strategy_class.__name__} must inherit from CalculatorStrategy")

        self._strategies[name] = strategy_class
        self._descriptions[name] = description or (strategy_class.__doc__ or '').strip() or "No description"
        logger.debug(f"Registered calculator strategy: {name} ({strategy_class.__name__})")

    def get_strategy(self, name: str) -> Type[CalculatorStrategy]:
        if name not in self._strategies:
            raise ValueError(f"Strategy not found: {name}")
        return self._strategies[name]

    def create_strategy(self, name: str) -> CalculatorStrategy:
        strategy_class = self.get_strategy(name)
        return strategy_class()

    def list_strategies(self) -> List[Dict[str, str]]:
        return [
            {
                'name': name,
                'category': strategy_class.category,
                'class_name': strategy_class.__name__,
                'description': self._descriptions[name],
            }
            for name, strategy_class in self._strategies.items()
        ]

    def is_registered(self, name: str) -> bool:
        return name in self._strategies

    def unregister(self, name: str) -> bool:
        if name in self._strategies:
            del self._strategies[name]
            del self._descriptions[name]
            logger.info(f"Unregistered calculator strategy: {name}")
            return True
        return False

    def register_to_engine(self, engine: CalculationEngine):
        """Instantiate registered strategies the engine does not have yet into ``engine``."""
        for name in self._strategies:
            if name in engine.strategies:
                continue
            engine.register_strategy(name, self.create_strategy(name))


# Global registry
_registry = CalculationStrategyRegistry()


def get_registry() -> CalculationStrategyRegistry:
    return _registry


def register_strategy(name: str, strategy_class: Type[CalculatorStrategy], description: str = ""):
    _registry.register(name, strategy_class, description)


def register_default_strategies(engine: CalculationEngine = None):
    """Register the built-in calculators and load them into ``engine`` (the global engine by default)."""
    for strategy_class in DEFAULT_STRATEGIES:
        register_strategy(strategy_class.name, strategy_class, strategy_class.description)

    if engine is None:
        engine = get_calculation_engine()
    _registry.register_to_engine(engine)

    logger.info(f"Loaded {len(_registry.list_strategies())} calculators into the calculation engine")


def initialize_calculation_system() -> CalculationEngine:
    logger.info("Initializing calculation system...")

    # the global engine loads the default calculators when it is created
    engine = get_calculation_engine()

    registered_strategies = engine.get_registered_strategies()
    logger.info(f"Calculation system ready with {len(registered_strategies)} calculators")
    return engine


def get_strategy_info(name: str) -> Dict[str, Any]:
    if not _registry.is_registered(name):
        raise ValueError(f"Strategy {name} is not registered")

    strategy_instance = _registry.create_strategy(name)
    return {
        'name': name,
        'description': _registry._descriptions[name],
        'class_name': _registry._strategies[name].__name__,
        'algorithm_info': strategy_instance.get_algorithm_info(),
    }


def list_all_strategies() -> List[Dict[str, Any]]:
    return [get_strategy_info(strategy_info['name']) for strategy_info in _registry.list_strategies()]
