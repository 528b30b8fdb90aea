# Trigonometry calculators
import math

from ..engine import CalculatorStrategy
from ..exceptions import UnsupportedFeatureError
from ..fields import FieldMap, choice_field, number_field, text_field
from ..formatting import format_number, step_header, to_fixed
from ..plotting import HIGHLIGHT, PRIMARY, axis_options, point_dataset, sample_points
from ..results import CalculationResult, ChartDataset, PlotData

# |cos θ| below this is treated as zero, so tan θ is reported as undefined
TANGENT_POLE_TOLERANCE = 1e-12


class TrigBasicsCalculator(CalculatorStrategy):
    """sin, cos and tan of one angle given in degrees or radians."""

    name = 'Trigonometry Calculator (sin, cos, tan)'
    category = 'Trigonometry'
    description = 'Sine, cosine and tangent of an angle.'
    fields = (
        number_field('angle', 'Angle'),
        choice_field('unit', ('deg', 'rad'), 'Unit', default='deg'),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        angle = fields.number('angle')
        unit = fields.text('unit')
        rad = math.radians(angle) if unit == 'deg' else angle
        sin, cos = math.sin(rad), math.cos(rad)
        tan = None if abs(cos) < TANGENT_POLE_TOLERANCE else sin / cos

        def fixed(value, digits):
            return 'undefined' if value is None else to_fixed(value, digits)

        steps = [step_header("1. Identify angle:"), f"   {format_number(angle)} {unit}"]
        if unit == 'deg':
            steps.append(f"   Converted to radians: {to_fixed(rad)} rad")
        steps.extend([
            step_header("2. Calculate Trig Functions:"),
            "   sin(θ), cos(θ), tan(θ)",
            f"   sin({to_fixed(rad)}) = {fixed(sin, 4)}",
            f"   cos({to_fixed(rad)}) = {fixed(cos, 4)}",
            f"   tan({to_fixed(rad)}) = {fixed(tan, 4)}",
        ])

        return CalculationResult(
            text=f"Angle: {format_number(angle)} {unit}\n\n"
                 f"sin = {fixed(sin, 6)}\ncos = {fixed(cos, 6)}\ntan = {fixed(tan, 6)}",
            steps=steps,
            plot_data=PlotData('line', [
                ChartDataset('sin(θ)', sample_points(math.sin, 0, 2 * math.pi), {'borderColor': PRIMARY, 'pointRadius': 0}),
                ChartDataset('cos(θ)', sample_points(math.cos, 0, 2 * math.pi), {'borderColor': HIGHLIGHT, 'pointRadius': 0}),
                point_dataset('sin at angle', rad % (2 * math.pi), sin),
            ], options=axis_options('θ (rad)', 'value', 'Unit circle functions')),
        )


class TrigEquationSolver(CalculatorStrategy):
    """Placeholder entry: symbolic trigonometric equations need a CAS."""

    name = 'Trigonometric Equation Solver'
    category = 'Trigonometry'
    description = 'Solve trigonometric equations symbolically (not available).'
    fields = (
        text_field('equation', 'Equation', required=False),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        raise UnsupportedFeatureError(
            "Symbolic trigonometric equation solving is not fully supported in this version. "
            "Please check back for updates using a CAS engine."
        )
