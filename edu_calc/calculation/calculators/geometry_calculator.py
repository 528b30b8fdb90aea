# Geometry calculators: plane figures, triangle angles, circles and point distance
import math
from typing import Tuple

from ..engine import CalculatorStrategy
from ..exceptions import DomainError
from ..fields import FieldMap, choice_field, number_field
from ..formatting import format_number, step_header, to_fixed
from ..results import CalculationResult, ChartDataset, PlotData

SHAPES = ('square', 'rectangle', 'circle', 'triangle', 'trapezoid', 'parallelogram')


class AreaPerimeterCalculator(CalculatorStrategy):
    """
    Area and perimeter of common plane figures.

    Each shape reads its own dimension fields; dimensions of other shapes are
    ignored. A triangle is given either by base and height (area only) or by
    its three sides (Heron's formula).
    """

    name = 'Area & Perimeter'
    category = 'Geometry'
    description = 'Area and perimeter of squares, rectangles, circles, triangles, trapezoids and parallelograms.'
    fields = (
        choice_field('shape', SHAPES, 'Shape'),
        choice_field('triangleMethod', ('sides', 'baseHeight'), 'Triangle method', default='sides'),
        number_field('side', 'Side', required=False, positive=True),
        number_field('length', 'Length', required=False, positive=True),
        number_field('width', 'Width', required=False, positive=True),
        number_field('radius', 'Radius', required=False, positive=True),
        number_field('base', 'Base', required=False, positive=True),
        number_field('height', 'Height', required=False, positive=True),
        number_field('s1', 'Side a', required=False, positive=True),
        number_field('s2', 'Side b', required=False, positive=True),
        number_field('s3', 'Side c', required=False, positive=True),
        number_field('pa', 'Parallel side a', required=False, positive=True),
        number_field('pb', 'Parallel side b', required=False, positive=True),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        shape = fields.text('shape')
        solver = getattr(self, f"_{shape}")
        lines, area, perimeter, inputs, formulas = solver(fields)

        steps = [step_header("1. Identify variables:"), f"   Shape: {shape.capitalize()}"]
        steps.extend(inputs)
        steps.append(step_header("2. Apply formulas:" if perimeter is not None else "2. Apply formula:"))
        steps.extend(formulas)
        steps.extend([step_header("3. Result:"), f"   Area = {to_fixed(area)}"])
        if perimeter is not None:
            steps.append(f"   Perimeter = {to_fixed(perimeter)}")

        return CalculationResult(text=f"Shape: {shape}\n\n" + '\n'.join(lines), steps=steps)

    def _square(self, fields):
        s = fields.number('side')
        area, perimeter = s * s, 4 * s
        st = format_number(s)
        return (
            [f"Side = {st}", f"Area = {to_fixed(area)}", f"Perimeter = {to_fixed(perimeter)}"],
            area, perimeter,
            [f"   Side (s) = {st}"],
            ["   Area (A) = s²", f"   A = {st}² = {to_fixed(area)}",
             "   Perimeter (P) = 4s", f"   P = 4 × {st} = {to_fixed(perimeter)}"],
        )

    def _rectangle(self, fields):
        length, width = fields.number('length'), fields.number('width')
        area, perimeter = length * width, 2 * (length + width)
        lt, wt = format_number(length), format_number(width)
        return (
            [f"Length = {lt}, Width = {wt}", f"Area = {to_fixed(area)}", f"Perimeter = {to_fixed(perimeter)}"],
            area, perimeter,
            [f"   Length (l) = {lt}", f"   Width (w) = {wt}"],
            ["   Area (A) = l × w", f"   A = {lt} × {wt} = {to_fixed(area)}",
             "   Perimeter (P) = 2(l + w)", f"   P = 2({lt} + {wt}) = {to_fixed(perimeter)}"],
        )

    def _circle(self, fields):
        r = fields.number('radius')
        area, circumference = math.pi * r * r, 2 * math.pi * r
        rt = format_number(r)
        return (
            [f"Radius = {rt}", f"Area = {to_fixed(area)}", f"Circumference = {to_fixed(circumference)}"],
            area, circumference,
            [f"   Radius (r) = {rt}"],
            ["   Area (A) = πr²", f"   A = π × {rt}² ≈ {to_fixed(area)}",
             "   Circumference (C) = 2πr", f"   C = 2π × {rt} ≈ {to_fixed(circumference)}"],
        )

    def _triangle(self, fields):
        if fields.text('triangleMethod') == 'baseHeight':
            b, h = fields.number('base'), fields.number('height')
            area = 0.5 * b * h
            bt, ht = format_number(b), format_number(h)
            return (
                [f"Base = {bt}, Height = {ht}", f"Area = {to_fixed(area)}"],
                area, None,
                [f"   Base (b) = {bt}", f"   Height (h) = {ht}"],
                ["   Area (A) = ½ × b × h", f"   A = 0.5 × {bt} × {ht} = {to_fixed(area)}"],
            )

        a, b, c = fields.number('s1'), fields.number('s2'), fields.number('s3')
        s = (a + b + c) / 2
        if s <= a or s <= b or s <= c:
            raise DomainError("Invalid triangle sides. Sum of any two sides must be greater than the third.")
        area = math.sqrt(s * (s - a) * (s - b) * (s - c))
        perimeter = a + b + c
        at, bt, ct = format_number(a), format_number(b), format_number(c)
        return (
            [f"Sides: {at}, {bt}, {ct}", f"Area (Heron's Formula) = {to_fixed(area)}",
             f"Perimeter = {to_fixed(perimeter)}"],
            area, perimeter,
            [f"   Side a = {at}", f"   Side b = {bt}", f"   Side c = {ct}"],
            ["   Semi-perimeter (s) = (a+b+c)/2",
             f"   s = ({at}+{bt}+{ct})/2 = {format_number(s)}",
             "   Area (A) = √[s(s-a)(s-b)(s-c)]",
             f"   A = √[{format_number(s)}({format_number(s - a)})({format_number(s - b)})({format_number(s - c)})]"
             f" = {to_fixed(area)}",
             "   Perimeter (P) = a + b + c",
             f"   P = {at} + {bt} + {ct} = {format_number(perimeter)}"],
        )

    def _trapezoid(self, fields):
        a, b, h = fields.number('pa'), fields.number('pb'), fields.number('height')
        area = 0.5 * (a + b) * h
        at, bt, ht = format_number(a), format_number(b), format_number(h)
        return (
            [f"Sides: {at}, {bt}, Height: {ht}", f"Area = {to_fixed(area)}"],
            area, None,
            [f"   Parallel Side a = {at}", f"   Parallel Side b = {bt}", f"   Height (h) = {ht}"],
            ["   Area (A) = ½(a + b)h", f"   A = 0.5 × ({at} + {bt}) × {ht}", f"   A = {to_fixed(area)}"],
        )

    def _parallelogram(self, fields):
        b, h = fields.number('base'), fields.number('height')
        area = b * h
        bt, ht = format_number(b), format_number(h)
        return (
            [f"Base: {bt}, Height: {ht}", f"Area = {to_fixed(area)}"],
            area, None,
            [f"   Base (b) = {bt}", f"   Height (h) = {ht}"],
            ["   Area (A) = b × h", f"   A = {bt} × {ht} = {to_fixed(area)}"],
        )


class CircleCalculator(AreaPerimeterCalculator):
    """Circle area and circumference, plus arc length and sector area for an optional central angle."""

    name = 'Circle Calculator'
    description = 'Area, circumference and optional arc length of a circle.'
    fields = (
        number_field('radius', 'Radius', positive=True),
        number_field('angle', 'Central angle (degrees)', required=False, min_value=0, max_value=360),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        lines, area, circumference, inputs, formulas = self._circle(fields)
        steps = [step_header("1. Identify variables:"), "   Shape: Circle", *inputs,
                 step_header("2. Apply formulas:"), *formulas]

        angle = fields.optional_number('angle')
        if angle is not None:
            r = fields.number('radius')
            theta = math.radians(angle)
            arc, sector = r * theta, 0.5 * r * r * theta
            lines.extend([
                f"Arc Length (θ = {format_number(angle)}°) = {to_fixed(arc)}",
                f"Sector Area = {to_fixed(sector)}",
            ])
            steps.extend([
                f"   θ = {format_number(angle)}° = {to_fixed(theta)} rad",
                "   Arc Length (L) = rθ",
                f"   L = {format_number(r)} × {to_fixed(theta)} = {to_fixed(arc)}",
                "   Sector Area = ½r²θ",
                f"   Sector Area = {to_fixed(sector)}",
            ])

        steps.extend([step_header("3. Result:"), f"   Area = {to_fixed(area)}", f"   Perimeter = {to_fixed(circumference)}"])
        return CalculationResult(text="Shape: circle\n\n" + '\n'.join(lines), steps=steps)


def triangle_angles(a: float, b: float, c: float) -> Tuple[float, float, float]:
    """Interior angles in degrees opposite sides a, b and c (law of cosines)."""
    if a + b <= c or a + c <= b or b + c <= a:
        raise DomainError("Invalid triangle. Sum of two sides must be greater than the third.")
    angle_a = math.degrees(math.acos((b * b + c * c - a * a) / (2 * b * c)))
    angle_b = math.degrees(math.acos((a * a + c * c - b * b) / (2 * a * c)))
    return angle_a, angle_b, 180 - angle_a - angle_b


class TriangleSolver(CalculatorStrategy):
    name = 'Triangle Solver'
    category = 'Geometry'
    description = 'Angles of a triangle from its three sides.'
    fields = (
        number_field('s1', 'Side a', positive=True),
        number_field('s2', 'Side b', positive=True),
        number_field('s3', 'Side c', positive=True),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        a, b, c = fields.number('s1'), fields.number('s2'), fields.number('s3')
        angle_a, angle_b, angle_c = triangle_angles(a, b, c)
        at, bt, ct = format_number(a), format_number(b), format_number(c)

        return CalculationResult(
            text=f"Angle A (opposite side a): {angle_a:.2f}°\n"
                 f"Angle B (opposite side b): {angle_b:.2f}°\n"
                 f"Angle C (opposite side c): {angle_c:.2f}°",
            steps=[
                step_header("1. Identify sides:"),
                f"   a={at}, b={bt}, c={ct}",
                step_header("2. Law of Cosines for Angle A:"),
                "   cos A = (b² + c² - a²) / 2bc",
                f"   cos A = ({bt}² + {ct}² - {at}²) / 2({bt})({ct})",
                f"   A = arccos(...) = {angle_a:.2f}°",
                step_header("3. Law of Cosines for Angle B:"),
                "   cos B = (a² + c² - b²) / 2ac",
                f"   B = {angle_b:.2f}°",
                step_header("4. Sum of Angles:"),
                f"   C = 180° - A - B = {angle_c:.2f}°",
            ],
        )


class DistanceFormulaCalculator(CalculatorStrategy):
    name = 'Distance Formula'
    category = 'Geometry'
    description = 'Euclidean distance between two points in the plane.'
    fields = tuple(number_field(key, key) for key in ('x1', 'y1', 'x2', 'y2'))

    def calculate(self, fields: FieldMap) -> CalculationResult:
        x1, y1, x2, y2 = (fields.number(key) for key in ('x1', 'y1', 'x2', 'y2'))
        dx2, dy2 = (x2 - x1) ** 2, (y2 - y1) ** 2
        distance = math.sqrt(dx2 + dy2)
        a = f"({format_number(x1)}, {format_number(y1)})"
        b = f"({format_number(x2)}, {format_number(y2)})"

        return CalculationResult(
            text=f"Point A: {a}\nPoint B: {b}\nDistance = {to_fixed(distance)}",
            steps=[
                step_header("1. Identify coordinates:"),
                f"   Point A: {a}",
                f"   Point B: {b}",
                step_header("2. Apply Distance Formula:"),
                "   d = √((x2-x1)² + (y2-y1)²)",
                f"   d = √(({format_number(x2)} - {format_number(x1)})² + ({format_number(y2)} - {format_number(y1)})²)",
                f"   d = √({format_number(dx2)} + {format_number(dy2)})",
                step_header("3. Result:"),
                f"   d = √{format_number(dx2 + dy2)}",
                f"   d = {to_fixed(distance)}",
            ],
            plot_data=PlotData('scatter', [ChartDataset('Segment AB', [{'x': x1, 'y': y1}, {'x': x2, 'y': y2}], {
                'showLine': True, 'borderColor': 'rgb(129, 140, 248)', 'backgroundColor': 'red', 'pointRadius': 5,
            })]),
        )
