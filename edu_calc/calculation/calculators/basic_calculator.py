# Basic math calculators: arithmetic, percentage, unit conversion
from typing import Dict, List

from ..engine import CalculatorStrategy
from ..exceptions import DomainError, InvalidFieldError
from ..fields import FieldMap, choice_field, number_field, text_field
from ..formatting import format_magnitude, format_number, step_header, to_fixed
from ..results import CalculationResult, ChartDataset, PlotData

OPERATION_SYMBOLS = {'+': '+', '-': '-', '*': '×', '/': '÷'}

# Factors to the base unit of each category (m, kg, L, byte)
LENGTH_UNITS = {'m': 1, 'km': 1000, 'cm': 0.01, 'mm': 0.001, 'mi': 1609.344, 'yd': 0.9144, 'ft': 0.3048, 'in': 0.0254}
MASS_UNITS = {'kg': 1, 'g': 0.001, 'mg': 0.000001, 't': 1000, 'lb': 0.45359237, 'oz': 0.02834952}
VOLUME_UNITS = {'L': 1, 'mL': 0.001, 'm3': 1000, 'gal': 3.78541, 'qt': 0.946353, 'pt': 0.473176,
                'cup': 0.24, 'floz': 0.0295735}
DATA_UNITS = {'b': 0.125, 'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3, 'TB': 1024 ** 4, 'PB': 1024 ** 5}
TEMPERATURE_UNITS = ('C', 'F', 'K')

CONVERSION_TABLES: Dict[str, Dict[str, float]] = {
    'length': LENGTH_UNITS,
    'mass': MASS_UNITS,
    'volume': VOLUME_UNITS,
    'data': DATA_UNITS,
}

# Form field prefix per conversion category
UNIT_FIELD_PREFIX = {
    'length': 'length',
    'mass': 'mass',
    'temperature': 'temp',
    'volume': 'volume',
    'data': 'data',
}


class ArithmeticCalculator(CalculatorStrategy):
    """Two-operand arithmetic."""

    name = 'Arithmetic Calculator'
    category = 'Basic Math'
    description = 'Add, subtract, multiply or divide two numbers.'
    fields = (
        number_field('num1', 'Number 1'),
        number_field('num2', 'Number 2'),
        choice_field('operation', ('+', '-', '*', '/'), 'Operation'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        a = fields.number('num1')
        b = fields.number('num2')
        operation = fields.text('operation')

        if operation == '+':
            result = a + b
        elif operation == '-':
            result = a - b
        elif operation == '*':
            result = a * b
        else:
            if b == 0:
                raise DomainError("Error: Division by zero is not allowed.")
            result = a / b

        symbol = OPERATION_SYMBOLS[operation]
        a_text, b_text, result_text = format_number(a), format_number(b), format_number(result)
        return CalculationResult(
            text=f"{a_text} {symbol} {b_text} = {result_text}",
            steps=[
                step_header("1. Identify variables:"),
                f"   a = {a_text}",
                f"   b = {b_text}",
                step_header("2. Apply formula:"),
                f"   Result = a {symbol} b",
                f"   Result = {a_text} {symbol} {b_text}",
                step_header("3. Result:"),
                f"   {result_text}",
            ],
            plot_data=PlotData('bar', [ChartDataset('Values', [a, b, result], {
                'backgroundColor': ['rgba(129, 140, 248, 0.5)', 'rgba(52, 211, 153, 0.5)', 'rgba(244, 63, 94, 0.5)'],
            })], labels=['Number 1', 'Number 2', 'Result']),
        )


class PercentageCalculator(CalculatorStrategy):
    """What percentage one value is of another."""

    name = 'Percentage Calculator'
    category = 'Basic Math'
    description = 'Express a part as a percentage of a total.'
    fields = (
        number_field('part', 'Part'),
        number_field('total', 'Total value', nonzero=True),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        part = fields.number('part')
        total = fields.number('total')
        percentage = part / total * 100
        remainder = 100 - percentage
        part_text, total_text = format_number(part), format_number(total)

        return CalculationResult(
            text=f"{part_text} is {to_fixed(percentage, 2)}% of {total_text}.",
            steps=[
                step_header("1. Identify variables:"),
                f"   Part = {part_text}",
                f"   Total = {total_text}",
                step_header("2. Apply formula:"),
                "   Percentage = (Part / Total) × 100",
                f"   Percentage = ({part_text} / {total_text}) × 100",
                f"   Percentage = {format_number(part / total)} × 100",
                step_header("3. Result:"),
                f"   {to_fixed(percentage, 2)}%",
            ],
            plot_data=PlotData(
                'doughnut',
                [ChartDataset('Percentage Breakdown', [percentage, remainder], {
                    'backgroundColor': ['rgb(129, 140, 248)', 'rgba(255, 255, 255, 0.1)'],
                    'borderColor': ['rgb(129, 140, 248)', 'rgba(255, 255, 255, 0.2)'],
                    'borderWidth': 1,
                })],
                labels=[f"Part ({to_fixed(percentage, 2)}%)", f"Remainder ({to_fixed(remainder, 2)}%)"],
                options={'plugins': {'title': {'display': True, 'text': 'Percentage Breakdown'}}},
            ),
        )


def to_kelvin(value: float, unit: str) -> float:
    if unit == 'C':
        return value + 273.15
    if unit == 'F':
        return (value - 32) * 5 / 9 + 273.15
    return value


def from_kelvin(kelvin: float, unit: str) -> float:
    if unit == 'C':
        return kelvin - 273.15
    if unit == 'F':
        return (kelvin - 273.15) * 9 / 5 + 32
    return kelvin


class UnitConverter(CalculatorStrategy):
    """
    Converts between units of length, mass, temperature, volume and digital data.

    Units may arrive as ``<category>From``/``<category>To`` (``tempFrom`` for
    temperature) or as the generic ``fromUnit``/``toUnit`` pair.
    """

    name = 'Unit Converter'
    category = 'Basic Math'
    description = 'Convert a value between units of the same quantity.'
    fields = (
        choice_field('conversionType', tuple(UNIT_FIELD_PREFIX), 'Conversion type'),
        number_field('value', 'Value'),
        text_field('fromUnit', 'From unit', required=False),
        text_field('toUnit', 'To unit', required=False),
    ) + tuple(
        text_field(f"{prefix}{direction}", required=False)
        for prefix in UNIT_FIELD_PREFIX.values() for direction in ('From', 'To')
    )

    def _units(self, fields: FieldMap, category: str):
        prefix = UNIT_FIELD_PREFIX[category]
        from_unit = fields.text(f"{prefix}From") or fields.text('fromUnit')
        to_unit = fields.text(f"{prefix}To") or fields.text('toUnit')
        if not from_unit or not to_unit:
            raise InvalidFieldError("Please provide a valid value and units.")
        known = TEMPERATURE_UNITS if category == 'temperature' else CONVERSION_TABLES[category]
        for unit in (from_unit, to_unit):
            if unit not in known:
                raise InvalidFieldError(f"Unknown {category} unit: {unit}")
        return from_unit, to_unit

    def calculate(self, fields: FieldMap) -> CalculationResult:
        category = fields.text('conversionType')
        value = fields.number('value')
        from_unit, to_unit = self._units(fields, category)
        value_text = format_number(value)

        steps: List[str] = [
            step_header("1. Identify variables:"),
            f"   Value = {value_text} {from_unit}",
            f"   Target Unit = {to_unit}",
        ]
        if category == 'temperature':
            result, equivalents = self._convert_temperature(value, from_unit, to_unit, steps)
        else:
            result, equivalents = self._convert_linear(value, from_unit, to_unit, CONVERSION_TABLES[category], steps)

        summary = f"{value_text} {from_unit} = {to_fixed(result)} {to_unit}"
        steps.extend([step_header("4. Result:"), f"   {summary}"])
        return CalculationResult(
            text=f"{summary}\n\nEquivalent Values:\n" + '\n'.join(equivalents),
            steps=steps,
        )

    def _convert_temperature(self, value, from_unit, to_unit, steps):
        kelvin = to_kelvin(value, from_unit)
        if kelvin < 0:
            raise DomainError("Temperature cannot be below absolute zero (0 K).")
        result = from_kelvin(kelvin, to_unit)

        steps.append(step_header("2. Convert to Base (Kelvin):"))
        if from_unit == 'K':
            steps.append(f"   Already in Kelvin: {format_number(value)} K")
        elif from_unit == 'C':
            steps.append(f"   K = {format_number(value)} + 273.15 = {to_fixed(kelvin)} K")
        else:
            steps.append(f"   K = ({format_number(value)} - 32) × 5/9 + 273.15 = {to_fixed(kelvin)} K")
        steps.extend([step_header(f"3. Convert to Target ({to_unit}):"), f"   Result = {to_fixed(result)} {to_unit}"])

        equivalents = [f"{to_fixed(from_kelvin(kelvin, unit), 2)} {unit}" for unit in TEMPERATURE_UNITS]
        return result, equivalents

    def _convert_linear(self, value, from_unit, to_unit, table, steps):
        base_value = value * table[from_unit]
        result = base_value / table[to_unit]

        steps.extend([
            step_header("2. Convert to Base Unit:"),
            "   Base Value = Value × UnitFactor",
            f"   Base Value = {format_number(value)} × {format_number(table[from_unit])} = {format_magnitude(base_value)} (Base)",
            step_header("3. Convert to Target Unit:"),
            "   Result = Base Value / TargetFactor",
            f"   Result = {format_magnitude(base_value)} / {format_number(table[to_unit])}",
            f"   Result = {to_fixed(result, 6)} {to_unit}",
        ])
        equivalents = [f"{format_magnitude(base_value / factor)} {unit}" for unit, factor in table.items()]
        return result, equivalents
