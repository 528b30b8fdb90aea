# Physics calculators: single-formula solvers, projectile motion, Ohm's law, SUVAT kinematics
import logging
import math
from abc import abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

from ..engine import CalculatorStrategy
from ..exceptions import DomainError, InputRangeError
from ..fields import FieldMap, choice_field, number_field
from ..formatting import format_number, step_header, to_exponential, to_fixed
from ..results import CalculationResult, ChartDataset, PlotData

logger = logging.getLogger(__name__)

GRAVITATIONAL_CONSTANT = 6.67430e-11  # N·m²/kg²
STANDARD_GRAVITY = 9.80665  # m/s²
COULOMB_CONSTANT = 8.9875517923e9  # N·m²/C²


class FormulaCalculator(CalculatorStrategy):
    """
    A calculator that evaluates one closed-form physics formula.

    Subclasses declare the printed ``symbol``/``formula``, a ``substitution``
    template over the field names and implement ``compute``. Each field may
    carry a ``<name>_unit`` multiplier that converts it to SI first.
    """

    category = 'Physics'
    symbol = ''
    formula = ''
    substitution = ''
    unit = ''
    scientific = False

    @abstractmethod
    def compute(self, v: Dict[str, float]) -> float:
        pass

    def format_result(self, value: float) -> str:
        return to_exponential(value) if self.scientific else to_fixed(value)

    def calculate(self, fields: FieldMap) -> CalculationResult:
        values = {rule.name: fields.number(rule.name) for rule in self.fields}
        result = self.compute(values)
        substituted = self.substitution.format(**{name: format_number(value) for name, value in values.items()})
        result_text = self.format_result(result) + (f" {self.unit}" if self.unit else '')

        return CalculationResult(
            text=f"{self.symbol} = {self.formula} = {substituted} = {result_text}",
            steps=[
                step_header("1. Identify variables:"),
                *(f"   {rule.display_name} = {format_number(values[rule.name])}" for rule in self.fields),
                step_header("2. Apply formula:"),
                f"   {self.symbol} = {self.formula}",
                f"   {self.symbol} = {substituted}",
                step_header("3. Result:"),
                f"   {self.symbol} = {result_text}",
            ],
        )


class ForceCalculator(FormulaCalculator):
    name = "Force Calculator (Newton's 2nd Law)"
    description = 'Net force from mass and acceleration.'
    fields = (number_field('mass', 'Mass (kg)'), number_field('acceleration', 'Acceleration (m/s²)'))
    symbol, formula, substitution, unit = 'F', 'ma', '{mass} × {acceleration}', 'N'

    def compute(self, v):
        return v['mass'] * v['acceleration']


class MassCalculator(FormulaCalculator):
    name = 'Mass Calculator'
    description = 'Mass from density and volume.'
    fields = (number_field('density', 'Density (kg/m³)'), number_field('volume', 'Volume (m³)'))
    symbol, formula, substitution, unit = 'M', 'ρV', '{density} × {volume}', 'kg'

    def compute(self, v):
        return v['density'] * v['volume']


class DensityCalculator(FormulaCalculator):
    name = 'Density Calculator'
    description = 'Density from mass and volume.'
    fields = (number_field('mass', 'Mass (kg)'), number_field('volume', 'Volume', nonzero=True))
    symbol, formula, substitution, unit = 'ρ', 'm/V', '{mass} / {volume}', 'kg/m³'

    def compute(self, v):
        return v['mass'] / v['volume']


class MomentumCalculator(FormulaCalculator):
    name = 'Momentum Calculator'
    description = 'Linear momentum of a moving mass.'
    fields = (number_field('mass', 'Mass (kg)'), number_field('velocity', 'Velocity (m/s)'))
    symbol, formula, substitution, unit = 'p', 'mv', '{mass} × {velocity}', 'kg·m/s'

    def compute(self, v):
        return v['mass'] * v['velocity']


class KineticEnergyCalculator(FormulaCalculator):
    name = 'Kinetic Energy Calculator'
    description = 'Kinetic energy of a moving mass.'
    fields = (number_field('mass', 'Mass (kg)'), number_field('velocity', 'Velocity (m/s)'))
    symbol, formula, substitution, unit = 'KE', '½mv²', '0.5 × {mass} × {velocity}²', 'J'

    def compute(self, v):
        return 0.5 * v['mass'] * v['velocity'] ** 2


class PotentialEnergyCalculator(FormulaCalculator):
    name = 'Potential Energy Calculator'
    description = 'Gravitational potential energy near the Earth surface.'
    fields = (number_field('mass', 'Mass (kg)'), number_field('height', 'Height (m)'))
    symbol, formula, unit = 'PE', 'mgh', 'J'
    substitution = '{mass} × ' + to_fixed(STANDARD_GRAVITY, 2) + ' × {height}'

    def compute(self, v):
        return v['mass'] * STANDARD_GRAVITY * v['height']


class WorkCalculator(FormulaCalculator):
    name = 'Work Calculator'
    description = 'Work done by a constant force along a displacement.'
    fields = (
        number_field('force', 'Force (N)'),
        number_field('distance', 'Distance (m)'),
        number_field('angle', 'Angle (degrees)', default=0),
    )
    symbol, formula, substitution, unit = 'W', 'Fd cos(θ)', '{force} × {distance} × cos({angle}°)', 'J'

    def compute(self, v):
        return v['force'] * v['distance'] * math.cos(math.radians(v['angle']))


class PowerCalculator(FormulaCalculator):
    name = 'Power Calculator'
    description = 'Average power from work and time.'
    fields = (number_field('work', 'Work (J)'), number_field('time', 'Time', nonzero=True))
    symbol, formula, substitution, unit = 'P', 'W/t', '{work} / {time}', 'Watts'

    def compute(self, v):
        return v['work'] / v['time']


class PressureCalculator(FormulaCalculator):
    name = 'Pressure Calculator'
    description = 'Pressure of a force spread over an area.'
    fields = (number_field('force', 'Force (N)'), number_field('area', 'Area', nonzero=True))
    symbol, formula, substitution, unit = 'P', 'F/A', '{force} / {area}', 'Pa'

    def compute(self, v):
        return v['force'] / v['area']


class TorqueCalculator(FormulaCalculator):
    name = 'Torque Calculator'
    description = 'Torque of a force applied at a lever arm.'
    fields = (
        number_field('force', 'Force (N)'),
        number_field('leverArm', 'Lever arm (m)'),
        number_field('angle', 'Angle (degrees)', default=90),
    )
    symbol, formula, substitution, unit = 'τ', 'rF sin(θ)', '{leverArm} × {force} × sin({angle}°)', 'N·m'

    def compute(self, v):
        return v['leverArm'] * v['force'] * math.sin(math.radians(v['angle']))


class AngularAccelerationCalculator(FormulaCalculator):
    name = 'Angular Acceleration Calculator'
    description = 'Average angular acceleration.'
    fields = (
        number_field('initialAngularVelocity', 'Initial angular velocity (rad/s)'),
        number_field('finalAngularVelocity', 'Final angular velocity (rad/s)'),
        number_field('time', 'Time', nonzero=True),
    )
    symbol, formula, unit = 'α', '(ωf - ωi) / t', 'rad/s²'
    substitution = '({finalAngularVelocity} - {initialAngularVelocity}) / {time}'

    def compute(self, v):
        return (v['finalAngularVelocity'] - v['initialAngularVelocity']) / v['time']


class AngularMomentumCalculator(FormulaCalculator):
    name = 'Angular Momentum Calculator'
    description = 'Angular momentum of a rotating body.'
    fields = (
        number_field('momentOfInertia', 'Moment of inertia (kg·m²)'),
        number_field('angularVelocity', 'Angular velocity (rad/s)'),
    )
    symbol, formula, substitution, unit = 'L', 'Iω', '{momentOfInertia} × {angularVelocity}', 'kg·m²/s'

    def compute(self, v):
        return v['momentOfInertia'] * v['angularVelocity']


class VelocityCalculator(FormulaCalculator):
    name = 'Velocity Calculator'
    description = 'Average velocity from distance and time.'
    fields = (number_field('distance', 'Distance (m)'), number_field('time', 'Time', nonzero=True))
    symbol, formula, substitution, unit = 'v', 'd/t', '{distance} / {time}', 'm/s'

    def compute(self, v):
        return v['distance'] / v['time']


class CentrifugalForceCalculator(FormulaCalculator):
    name = 'Centrifugal Force Calculator'
    description = 'Centrifugal force on a mass moving in a circle.'
    fields = (
        number_field('mass', 'Mass (kg)'),
        number_field('velocity', 'Velocity (m/s)'),
        number_field('radius', 'Radius', nonzero=True),
    )
    symbol, formula, substitution, unit = 'Fc', 'mv²/r', '{mass} × {velocity}² / {radius}', 'N'

    def compute(self, v):
        return v['mass'] * v['velocity'] ** 2 / v['radius']


class CoulombsLawCalculator(FormulaCalculator):
    name = "Coulomb's Law Calculator"
    description = 'Electrostatic force between two point charges.'
    fields = (
        number_field('charge1', 'Charge 1 (C)'),
        number_field('charge2', 'Charge 2 (C)'),
        number_field('distance', 'Distance', nonzero=True),
    )
    symbol, formula, unit, scientific = 'Fe', 'k|q1q2|/r²', 'N', True
    substitution = to_exponential(COULOMB_CONSTANT, 2) + ' × |{charge1} × {charge2}| / {distance}²'

    def compute(self, v):
        return COULOMB_CONSTANT * abs(v['charge1'] * v['charge2']) / v['distance'] ** 2


class DisplacementCalculator(FormulaCalculator):
    name = 'Displacement Calculator'
    description = 'Displacement between two positions.'
    fields = (number_field('initialPosition', 'Initial position (m)'), number_field('finalPosition', 'Final position (m)'))
    symbol, formula, substitution, unit = 'Δx', 'x - x0', '{finalPosition} - {initialPosition}', 'm'

    def compute(self, v):
        return v['finalPosition'] - v['initialPosition']


class FallingObjectDistanceCalculator(FormulaCalculator):
    name = 'Falling Object Distance Calculator'
    description = 'Distance fallen under gravity after a given time.'
    fields = (
        number_field('initialVelocity', 'Initial velocity (m/s)', default=0),
        number_field('time', 'Time (s)', min_value=0),
    )
    symbol, formula, unit = 'd', 'v0·t + ½gt²', 'm'
    substitution = '{initialVelocity} × {time} + 0.5 × ' + format_number(STANDARD_GRAVITY) + ' × {time}²'

    def compute(self, v):
        return v['initialVelocity'] * v['time'] + 0.5 * STANDARD_GRAVITY * v['time'] ** 2


class FrictionCalculator(FormulaCalculator):
    name = 'Friction Calculator'
    description = 'Friction force from the normal force and friction coefficient.'
    fields = (
        number_field('normalForce', 'Normal force (N)'),
        number_field('frictionCoefficient', 'Friction coefficient', min_value=0),
    )
    symbol, formula, substitution, unit = 'Ff', 'μN', '{frictionCoefficient} × {normalForce}', 'N'

    def compute(self, v):
        return v['frictionCoefficient'] * v['normalForce']


class GravitationalForceCalculator(FormulaCalculator):
    name = 'Gravitational Force Calculator'
    description = "Newton's law of universal gravitation."
    fields = (
        number_field('mass1', 'Mass 1 (kg)'),
        number_field('mass2', 'Mass 2 (kg)'),
        number_field('distance', 'Distance', nonzero=True),
    )
    symbol, formula, unit, scientific = 'Fg', 'G·m1·m2/r²', 'N', True
    substitution = to_exponential(GRAVITATIONAL_CONSTANT, 4) + ' × {mass1} × {mass2} / {distance}²'

    def compute(self, v):
        return GRAVITATIONAL_CONSTANT * v['mass1'] * v['mass2'] / v['distance'] ** 2


class HeatCalculator(FormulaCalculator):
    name = 'Heat Calculator'
    description = 'Heat needed to change the temperature of a mass.'
    fields = (
        number_field('mass', 'Mass (kg)'),
        number_field('specificHeat', 'Specific heat (J/kg·K)'),
        number_field('temperatureChange', 'Temperature change (K)'),
    )
    symbol, formula, substitution, unit = 'Q', 'mcΔT', '{mass} × {specificHeat} × {temperatureChange}', 'J'

    def compute(self, v):
        return v['mass'] * v['specificHeat'] * v['temperatureChange']


class PulleyTensionCalculator(FormulaCalculator):
    """Rope tension of a static single pulley holding a mass."""

    name = 'Simple Pulley Tension Calculator'
    description = 'Tension in the rope of a static single pulley.'
    fields = (number_field('mass', 'Mass (kg)'),)
    symbol, formula, unit = 'T', 'mg', 'N'
    substitution = '{mass} × ' + format_number(STANDARD_GRAVITY)

    def compute(self, v):
        return v['mass'] * STANDARD_GRAVITY


class AccelerationCalculator(FormulaCalculator):
    name = 'Acceleration Calculator'
    description = 'Average acceleration from a change of velocity.'
    fields = (
        number_field('initialVelocity', 'Initial velocity (m/s)'),
        number_field('finalVelocity', 'Final velocity (m/s)'),
        number_field('time', 'Time', nonzero=True),
    )
    symbol, formula, substitution, unit = 'a', '(vf - v0)/t', '({finalVelocity} - {initialVelocity}) / {time}', 'm/s²'

    def compute(self, v):
        return (v['finalVelocity'] - v['initialVelocity']) / v['time']


class AbsolutePressureCalculator(FormulaCalculator):
    name = 'Absolute Pressure Calculator'
    description = 'Absolute pressure from gauge and atmospheric pressure.'
    fields = (
        number_field('gaugePressure', 'Gauge pressure (Pa)'),
        number_field('atmosphericPressure', 'Atmospheric pressure (Pa)', default=101325),
    )
    symbol, formula, substitution, unit = 'Pabs', 'Pgauge + Patm', '{gaugePressure} + {atmosphericPressure}', 'Pa'

    def compute(self, v):
        return v['gaugePressure'] + v['atmosphericPressure']


class WavelengthCalculator(FormulaCalculator):
    name = 'Wavelength Calculator'
    description = 'Wavelength from wave speed and frequency.'
    fields = (number_field('waveSpeed', 'Wave speed (m/s)'), number_field('frequency', 'Frequency', nonzero=True))
    symbol, formula, substitution, unit = 'λ', 'v/f', '{waveSpeed} / {frequency}', 'm'

    def compute(self, v):
        return v['waveSpeed'] / v['frequency']


class BeersLambertLawCalculator(FormulaCalculator):
    name = "Beer's Lambert Law Calculator"
    description = 'Absorbance of a solution.'
    fields = (
        number_field('absorptivity', 'Molar absorptivity (L/mol·cm)'),
        number_field('pathLength', 'Path length (cm)'),
        number_field('concentration', 'Concentration (mol/L)'),
    )
    symbol, formula, substitution = 'A', 'εlc', '{absorptivity} × {pathLength} × {concentration}'

    def compute(self, v):
        return v['absorptivity'] * v['pathLength'] * v['concentration']


class ResultantVectorCalculator(FormulaCalculator):
    name = 'Resultant Vector Calculator'
    description = 'Magnitude of the sum of two vectors at an angle.'
    fields = (
        number_field('magnitudeA', 'Magnitude A', min_value=0),
        number_field('magnitudeB', 'Magnitude B', min_value=0),
        number_field('angle', 'Angle between vectors (degrees)'),
    )
    symbol, formula = 'R', '√(a² + b² + 2ab cos θ)'
    substitution = '√({magnitudeA}² + {magnitudeB}² + 2 × {magnitudeA} × {magnitudeB} × cos({angle}°))'

    def compute(self, v):
        a, b = v['magnitudeA'], v['magnitudeB']
        # clamp rounding noise below zero when the vectors cancel exactly
        return math.sqrt(max(0.0, a * a + b * b + 2 * a * b * math.cos(math.radians(v['angle']))))


FORMULA_CALCULATORS = (
    ForceCalculator, MassCalculator, DensityCalculator, MomentumCalculator, KineticEnergyCalculator,
    PotentialEnergyCalculator, WorkCalculator, PowerCalculator, PressureCalculator, TorqueCalculator,
    AngularAccelerationCalculator, AngularMomentumCalculator, VelocityCalculator, CentrifugalForceCalculator,
    CoulombsLawCalculator, DisplacementCalculator, FallingObjectDistanceCalculator, FrictionCalculator,
    GravitationalForceCalculator, HeatCalculator, PulleyTensionCalculator, AccelerationCalculator,
    AbsolutePressureCalculator, WavelengthCalculator, BeersLambertLawCalculator, ResultantVectorCalculator,
)


class ProjectileMotionCalculator(CalculatorStrategy):
    """Ideal projectile launched from a height, landing at y = 0."""

    name = 'Projectile Motion Calculator'
    category = 'Physics'
    description = 'Time of flight, maximum height and range of a projectile.'
    fields = (
        number_field('initialVelocity', 'Initial velocity (m/s)', min_value=0),
        number_field('launchAngle', 'Launch angle (degrees)', min_value=0, max_value=90),
        number_field('initialHeight', 'Initial height (m)', default=0, min_value=0),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        v0 = fields.number('initialVelocity')
        angle = fields.number('launchAngle')
        h0 = fields.number('initialHeight')
        theta = math.radians(angle)
        g = STANDARD_GRAVITY

        vx, vy = v0 * math.cos(theta), v0 * math.sin(theta)
        t_flight = (vy + math.sqrt(vy * vy + 2 * g * h0)) / g
        if t_flight <= 0:
            raise DomainError("The projectile never leaves the ground. Provide a launch speed or a height.")
        t_peak = vy / g
        h_max = h0 + vy * t_peak - 0.5 * g * t_peak * t_peak
        horizontal_range = vx * t_flight

        trajectory = []
        for i in range(51):
            t = t_flight * i / 50
            trajectory.append({'x': vx * t, 'y': max(0.0, h0 + vy * t - 0.5 * g * t * t)})

        return CalculationResult(
            text=f"Time of Flight: {to_fixed(t_flight, 2)} s\n"
                 f"Maximum Height: {to_fixed(h_max, 2)} m\n"
                 f"Horizontal Range: {to_fixed(horizontal_range, 2)} m",
            steps=[
                step_header("1. Components:"),
                f"   vx = {format_number(v0)} cos({format_number(angle)}°) = {to_fixed(vx, 2)} m/s",
                f"   vy = {format_number(v0)} sin({format_number(angle)}°) = {to_fixed(vy, 2)} m/s",
                step_header("2. Time of Flight:"),
                f"   Solves y(t) = {format_number(h0)} + {to_fixed(vy, 2)}t - {to_fixed(g / 2, 2)}t² = 0",
                f"   t = {to_fixed(t_flight)} s",
                step_header("3. Max Height:"),
                f"   Occurs at t = vy/g = {to_fixed(t_peak, 2)} s",
                f"   Max Height = {to_fixed(h_max, 2)} m",
                step_header("4. Range:"),
                f"   R = vx × t = {to_fixed(horizontal_range, 2)} m",
            ],
            plot_data=PlotData('line', [ChartDataset('Trajectory', trajectory, {
                'borderColor': 'orange', 'fill': False,
            })]),
        )


class OhmsLawCalculator(CalculatorStrategy):
    """V = IR solved for whichever quantity ``solveFor`` names."""

    name = "Ohm's Law Calculator"
    category = 'Physics'
    description = 'Voltage, current or resistance from the other two.'
    fields = (
        choice_field('solveFor', ('voltage', 'current', 'resistance'), 'Solve for'),
        number_field('voltage', 'Voltage (V)', required=False),
        number_field('current', 'Current (A)', required=False),
        number_field('resistance', 'Resistance (Ω)', required=False),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        target = fields.text('solveFor')
        if target == 'voltage':
            i, r = fields.number('current'), fields.number('resistance')
            value, unit = i * r, 'V'
            text = f"Voltage = I × R = {format_number(i)} A × {format_number(r)} Ω = {to_fixed(value)} V"
        elif target == 'current':
            v, r = fields.number('voltage'), fields.number('resistance')
            if r == 0:
                raise DomainError("Resistance cannot be zero.")
            value, unit = v / r, 'A'
            text = f"Current = V / R = {format_number(v)} V / {format_number(r)} Ω = {to_fixed(value)} A"
        else:
            v, i = fields.number('voltage'), fields.number('current')
            if i == 0:
                raise DomainError("Current cannot be zero.")
            value, unit = v / i, 'Ω'
            text = f"Resistance = V / I = {format_number(v)} V / {format_number(i)} A = {to_fixed(value)} Ω"

        return CalculationResult(
            text=text,
            steps=[
                step_header("1. Ohm's Law:"),
                "   V = I × R",
                step_header(f"2. Solve for {target}:"),
                f"   {text}",
                step_header("3. Result:"),
                f"   {to_fixed(value)} {unit}",
            ],
        )


KINEMATIC_NAMES = {
    's': 'Displacement (s)',
    'u': 'Initial Velocity (u)',
    'v': 'Final Velocity (v)',
    'a': 'Acceleration (a)',
    't': 'Time (t)',
}

Solution = List[Tuple[str, float, str]]


def _require_nonzero(value: float, message: str):
    if value == 0:
        raise DomainError(message)


def _solve_uat(s, u, v, a, t) -> Solution:
    return [('v', u + a * t, 'v = u + at'), ('s', u * t + 0.5 * a * t * t, 's = ut + ½at²')]


def _solve_uva(s, u, v, a, t) -> Solution:
    if a == 0:
        if u != v:
            raise DomainError("Invalid input: Constant acceleration 0 implies u=v.")
        raise DomainError("Time cannot be determined when a = 0 and u = v. Provide s or t instead.")
    return [('t', (v - u) / a, 't = (v - u) / a'), ('s', (v * v - u * u) / (2 * a), 's = (v² - u²) / 2a')]


def _solve_svt(s, u, v, a, t) -> Solution:
    _require_nonzero(t, "Time cannot be zero.")
    u = 2 * s / t - v
    return [('u', u, 'u = 2s/t - v'), ('a', (v - u) / t, 'a = (v - u) / t')]


def _solve_sua(s, u, v, a, t) -> Solution:
    v_squared = u * u + 2 * a * s
    if v_squared < 0:
        raise DomainError("No real solution for final velocity.")
    v = math.sqrt(v_squared)
    if a != 0:
        t = (v - u) / a
    else:
        _require_nonzero(u, "Time cannot be determined when u = 0 and a = 0.")
        t = s / u
    return [('v', v, 'v = +√(u² + 2as)'), ('t', t, 't = (v - u) / a')]


def _solve_uvt(s, u, v, a, t) -> Solution:
    _require_nonzero(t, "Time cannot be zero.")
    return [('a', (v - u) / t, 'a = (v - u) / t'), ('s', 0.5 * (u + v) * t, 's = ½(u + v)t')]


def _solve_sut(s, u, v, a, t) -> Solution:
    _require_nonzero(t, "Time cannot be zero.")
    a = 2 * (s - u * t) / (t * t)
    return [('a', a, 'a = 2(s - ut) / t²'), ('v', u + a * t, 'v = u + at')]


def _solve_suv(s, u, v, a, t) -> Solution:
    _require_nonzero(s, "Displacement cannot be zero when solving for acceleration.")
    _require_nonzero(u + v, "u + v cannot be zero when solving for time.")
    return [('a', (v * v - u * u) / (2 * s), 'a = (v² - u²) / 2s'), ('t', 2 * s / (u + v), 't = 2s / (u + v)')]


def _solve_sva(s, u, v, a, t) -> Solution:
    u_squared = v * v - 2 * a * s
    if u_squared < 0:
        raise DomainError("No real solution for initial velocity.")
    u = math.sqrt(u_squared)
    if a != 0:
        t = (v - u) / a
    else:
        _require_nonzero(v, "Time cannot be determined when v = 0 and a = 0.")
        t = s / v
    return [('u', u, 'u = +√(v² - 2as)'), ('t', t, 't = (v - u) / a')]


def _solve_vat(s, u, v, a, t) -> Solution:
    return [('u', v - a * t, 'u = v - at'), ('s', v * t - 0.5 * a * t * t, 's = vt - ½at²')]


def _solve_sat(s, u, v, a, t) -> Solution:
    _require_nonzero(t, "Time cannot be zero.")
    u = s / t - 0.5 * a * t
    return [('u', u, 'u = s/t - ½at'), ('v', u + a * t, 'v = u + at')]


# Every 3-of-5 choice of known SUVAT quantities, in lookup order
KINEMATIC_SOLVERS: Tuple[Tuple[str, Callable[..., Solution]], ...] = (
    ('uat', _solve_uat),
    ('uva', _solve_uva),
    ('svt', _solve_svt),
    ('sua', _solve_sua),
    ('uvt', _solve_uvt),
    ('sut', _solve_sut),
    ('suv', _solve_suv),
    ('sva', _solve_sva),
    ('vat', _solve_vat),
    ('sat', _solve_sat),
)


def solve_kinematics(known: Dict[str, Optional[float]]) -> Tuple[str, Solution]:
    """Pick the first solver whose three inputs are known; returns (inputs, solution)."""
    present = {name for name, value in known.items() if value is not None}
    if len(present) < 3:
        raise InputRangeError("Please provide at least 3 known variables to solve for the others.")
    if len(present) == 5:
        raise InputRangeError("All five variables are already known. Leave at least one blank to solve for it.")
    for inputs, solver in KINEMATIC_SOLVERS:
        if set(inputs) <= present:
            return inputs, solver(**known)
    raise InputRangeError("Solver combination not supported.")


class KinematicsCalculator(CalculatorStrategy):
    """
    Constant-acceleration motion (SUVAT).

    Any three of s, u, v, a and t determine the other two. With four knowns
    the first matching triple is used and only the missing quantity is
    reported.
    """

    name = 'Kinematic Equations Calculator'
    category = 'Physics'
    description = 'Solve the constant-acceleration equations from any three known quantities.'
    fields = tuple(number_field(symbol, label, required=False) for symbol, label in KINEMATIC_NAMES.items())

    def calculate(self, fields: FieldMap) -> CalculationResult:
        known = {symbol: fields.optional_number(symbol) for symbol in KINEMATIC_NAMES}
        inputs, solution = solve_kinematics(known)
        missing = [(symbol, value, equation) for symbol, value, equation in solution if known[symbol] is None]
        logger.debug(f"Kinematics solved from {inputs} for {[symbol for symbol, _, _ in missing]}")

        return CalculationResult(
            text='\n'.join(f"{KINEMATIC_NAMES[symbol]}: {to_fixed(value)}" for symbol, value, _ in missing),
            steps=[
                step_header("1. Known values:"),
                *(f"   {symbol} = {format_number(known[symbol])}" for symbol in inputs),
                step_header("2. Apply equations of motion:"),
                *(f"   {equation}" for _, _, equation in missing),
                step_header("3. Result:"),
                *(f"   {symbol} = {to_fixed(value)}" for symbol, value, _ in missing),
            ],
        )
