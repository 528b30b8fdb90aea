# Calculation engine, validation and registry tests
from unittest.mock import patch

import pytest

from edu_calc.calculation import CalculationResult, CalculatorStrategy, solve
from edu_calc.calculation.calculators import (
    CalculationStrategyRegistry, get_registry, initialize_calculation_system, list_all_strategies,
)
from edu_calc.calculation.calculators.strategy_registry import DEFAULT_STRATEGIES, get_strategy_info
from edu_calc.calculation.engine import (
    NON_NUMERIC_RESULT_TEXT, NOT_IMPLEMENTED_TEXT, UNEXPECTED_ERROR_TEXT,
    CalculationEngine, FieldValidator, PerformanceMonitor, get_calculation_engine,
)
from edu_calc.calculation.exceptions import DomainError
from edu_calc.calculation.fields import choice_field, number_field, text_field


class EchoStrategy(CalculatorStrategy):
    """Returns its input, or fails on demand"""

    name = 'Echo'
    category = 'Test'
    fields = (
        number_field('value', 'Value'),
        choice_field('mode', ('ok', 'domain', 'crash', 'nan', 'empty'), 'Mode', default='ok'),
    )

    def calculate(self, fields):
        mode = fields.text('mode')
        if mode == 'domain':
            raise DomainError("Value is out of range.")
        if mode == 'crash':
            raise RuntimeError("boom")
        if mode == 'nan':
            return CalculationResult(text="Result = nan")
        if mode == 'empty':
            return CalculationResult(text="")
        return CalculationResult(text=f"Value = {fields.number('value')}")


class TestCalculationEngine:
    """Dispatch and error-to-text conversion"""

    def setup_method(self):
        self.engine = CalculationEngine()
        self.engine.register_strategy('Echo', EchoStrategy())

    def test_successful_calculation(self):
        result = self.engine.calculate('Echo', {'value': '2.5'})
        assert result.text == "Value = 2.5"

    def test_unknown_calculator(self):
        result = self.engine.calculate('No Such Calculator', {})
        assert result.text == NOT_IMPLEMENTED_TEXT
        assert result.steps is None
        assert result.plot_data is None

    def test_validation_errors_are_listed(self):
        result = self.engine.calculate('Echo', {'value': 'abc', 'mode': 'loud'})
        assert result.text.split('\n') == [
            "Error: Invalid input detected for: Value",
            "Error: Mode must be one of: ok, domain, crash, nan, empty.",
        ]

    def test_missing_required_field(self):
        result = self.engine.calculate('Echo', {})
        assert result.text == "Error: Please provide a value for Value."

    def test_calculation_error_becomes_text(self):
        result = self.engine.calculate('Echo', {'value': 1, 'mode': 'domain'})
        assert result.text == "Value is out of range."

    def test_unexpected_error_is_generic(self):
        with patch('edu_calc.calculation.engine.logger') as mock_logger:
            result = self.engine.calculate('Echo', {'value': 1, 'mode': 'crash'})
        assert result.text == UNEXPECTED_ERROR_TEXT
        mock_logger.exception.assert_called_once()

    def test_non_finite_text_is_replaced(self):
        result = self.engine.calculate('Echo', {'value': 1, 'mode': 'nan'})
        assert result.text == NON_NUMERIC_RESULT_TEXT

    def test_empty_text_is_replaced(self):
        result = self.engine.calculate('Echo', {'value': 1, 'mode': 'empty'})
        assert result.text == NON_NUMERIC_RESULT_TEXT

    def test_performance_is_recorded(self):
        self.engine.calculate('Echo', {'value': 1})
        self.engine.calculate('Echo', {'value': 1, 'mode': 'domain'})
        stats = self.engine.get_performance_stats()
        assert stats['total_operations'] == 2
        assert stats['successful_operations'] == 1
        assert stats['failed_operations'] == 1
        assert stats['success_rate'] == 0.5

    def test_reset_performance_stats(self):
        self.engine.calculate('Echo', {'value': 1})
        self.engine.reset_performance_stats()
        assert self.engine.get_performance_stats() == {}

    def test_strategy_info(self):
        info = self.engine.get_strategy_info('Echo')
        assert info['category'] == 'Test'
        assert info['fields'] == ['value', 'mode']
        with pytest.raises(ValueError):
            self.engine.get_strategy_info('Missing')


class TestFieldValidator:

    def setup_method(self):
        self.validator = FieldValidator()
        self.rules = (
            number_field('n', 'n', integer=True, min_value=0),
            number_field('p', 'p', min_value=0, max_value=1),
            number_field('r', 'Radius', positive=True),
            number_field('d', 'Divisor', nonzero=True, required=False),
            text_field('note', 'Note', required=False),
        )

    def test_valid_input(self):
        result = self.validator.validate(self.rules, {'n': '3', 'p': '0.5', 'r': 2})
        assert result['is_valid']
        assert result['errors'] == []

    def test_rule_violations(self):
        result = self.validator.validate(self.rules, {'n': '2.5', 'p': '1.5', 'r': '-1', 'd': '0'})
        assert not result['is_valid']
        assert "n must be a whole number." in result['errors']
        assert "p must be at most 1." in result['errors']
        assert "Radius must be a positive number." in result['errors']
        assert "Divisor cannot be zero." in result['errors']

    def test_minimum(self):
        result = self.validator.validate(self.rules, {'n': '-1', 'p': '0', 'r': 1})
        assert result['errors'] == ["n must be at least 0."]

    def test_unknown_fields_are_warnings(self):
        result = self.validator.validate(self.rules, {'n': 1, 'p': 0, 'r': 1, 'extra': 'x', 'r_unit': '1'})
        assert result['is_valid']
        assert result['warnings'] == ["Ignored fields: extra"]


class TestPerformanceMonitor:

    def test_empty_stats(self):
        assert PerformanceMonitor().get_stats() == {}

    def test_slow_calculation_warning(self):
        monitor = PerformanceMonitor(slow_threshold=0.5)
        with patch('edu_calc.calculation.engine.logger') as mock_logger:
            monitor.record_calculation('Echo', 1, 1.2, True)
        mock_logger.warning.assert_called_once()
        assert monitor.get_stats()['max_execution_time'] == 1.2

    def test_history_is_bounded(self):
        """Totals keep counting while only the recent records are retained"""
        monitor = PerformanceMonitor(history_size=10)
        for i in range(500):
            monitor.record_calculation('Echo', 1, 0.001, i % 5 != 0)

        assert len(monitor.metrics) == 10
        stats = monitor.get_stats()
        assert stats['total_operations'] == 500
        assert stats['successful_operations'] == 400
        assert stats['failed_operations'] == 100
        assert abs(stats['success_rate'] - 0.8) < 1e-12
        assert abs(stats['avg_execution_time'] - 0.001) < 1e-12

    def test_engine_history_is_bounded(self):
        engine = CalculationEngine()
        engine.performance_monitor = PerformanceMonitor(history_size=25)
        engine.register_strategy('Echo', EchoStrategy())
        for _ in range(200):
            engine.calculate('Echo', {'value': 1})

        assert len(engine.performance_monitor.metrics) == 25
        assert engine.get_performance_stats()['total_operations'] == 200


class TestStrategyRegistry:

    def setup_method(self):
        self.registry = CalculationStrategyRegistry()

    def test_register_and_create(self):
        self.registry.register('Echo', EchoStrategy, 'Echo calculator')
        assert self.registry.is_registered('Echo')
        assert isinstance(self.registry.create_strategy('Echo'), EchoStrategy)
        assert self.registry.list_strategies() == [{
            'name': 'Echo', 'category': 'Test', 'class_name': 'EchoStrategy', 'description': 'Echo calculator',
        }]

    def test_register_rejects_non_strategy(self):
        with pytest.raises(ValueError):
            self.registry.register('Bad', dict)

    def test_unregister(self):
        self.registry.register('Echo', EchoStrategy)
        assert self.registry.unregister('Echo')
        assert not self.registry.unregister('Echo')
        with pytest.raises(ValueError):
            self.registry.get_strategy('Echo')

    def test_register_to_engine(self):
        engine = CalculationEngine()
        self.registry.register('Echo', EchoStrategy)
        self.registry.register_to_engine(engine)
        assert engine.get_registered_strategies() == ['Echo']

    def test_register_to_engine_skips_loaded_strategies(self):
        engine = CalculationEngine()
        self.registry.register('Echo', EchoStrategy)
        with patch.object(engine, 'register_strategy', wraps=engine.register_strategy) as mock_register:
            self.registry.register_to_engine(engine)
            self.registry.register_to_engine(engine)
        assert mock_register.call_count == 1


class TestDefaultCalculators:
    """The built-in calculator set loaded into the global engine"""

    def test_every_default_is_registered(self):
        engine = get_calculation_engine()
        registered = set(engine.get_registered_strategies())
        assert {strategy.name for strategy in DEFAULT_STRATEGIES} <= registered
        assert len(DEFAULT_STRATEGIES) == 60

    def test_calculator_names_are_unique(self):
        names = [strategy.name for strategy in DEFAULT_STRATEGIES]
        assert len(names) == len(set(names))

    def test_every_calculator_has_category(self):
        assert all(strategy.category for strategy in DEFAULT_STRATEGIES)

    def test_strategy_info(self):
        get_calculation_engine()
        info = get_strategy_info('Quadratic Equation Solver')
        assert info['class_name'] == 'QuadraticEquationSolver'
        assert info['algorithm_info']['fields'] == ['a', 'b', 'c']
        with pytest.raises(ValueError):
            get_strategy_info('Missing Calculator')

    def test_list_all_strategies(self):
        get_calculation_engine()
        assert len(list_all_strategies()) >= 60

    def test_initialize_calculation_system(self):
        """Initialization returns the global engine with every default loaded"""
        engine = initialize_calculation_system()
        assert engine is get_calculation_engine()
        assert len(engine.get_registered_strategies()) == 60
        assert get_registry().is_registered('Mortgage Calculator')

    def test_fresh_engine_registers_each_default_once(self):
        """Creating the global engine through initialization loads every calculator exactly once"""
        with patch('edu_calc.calculation.engine._calculation_engine', None), \
                patch.object(CalculationEngine, 'register_strategy', autospec=True,
                             side_effect=CalculationEngine.register_strategy) as mock_register:
            engine = initialize_calculation_system()

        assert mock_register.call_count == len(DEFAULT_STRATEGIES)
        assert len(engine.get_registered_strategies()) == len(DEFAULT_STRATEGIES)


class TestSolve:
    """Single entry point over the global engine"""

    def test_quadratic(self):
        result = solve('Quadratic Equation Solver', {'a': 1, 'b': -3, 'c': 2})
        assert result.text == "Discriminant Δ = 1\nTwo real roots: x₁ = 2.0000, x₂ = 1.0000"
        assert result.steps[0] == "**1. Identify coefficients:**"
        assert result.plot_data.type == 'line'

    def test_unknown_id(self):
        assert solve('Time Machine', {}).text == NOT_IMPLEMENTED_TEXT

    def test_none_fields(self):
        result = solve('Arithmetic Calculator', None)
        assert result.text.startswith("Error: ")

    def test_string_numbers_are_accepted(self):
        result = solve('Arithmetic Calculator', {'num1': ' 7 ', 'num2': '3', 'operation': '-'})
        assert result.text == "7 - 3 = 4"
