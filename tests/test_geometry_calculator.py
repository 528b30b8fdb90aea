# Geometry and trigonometry calculator tests
import pytest

from edu_calc.calculation import solve
from edu_calc.calculation.calculators.geometry_calculator import triangle_angles
from edu_calc.calculation.exceptions import DomainError


class TestAreaPerimeterCalculator:
    """One test per supported shape"""

    def test_square(self):
        result = solve('Area & Perimeter', {'shape': 'square', 'side': 4})
        assert result.text == "Shape: square\n\nSide = 4\nArea = 16.0000\nPerimeter = 16.0000"
        assert result.steps[0] == "**1. Identify variables:**"

    def test_rectangle(self):
        result = solve('Area & Perimeter', {'shape': 'rectangle', 'length': 3, 'width': 5})
        assert result.text == "Shape: rectangle\n\nLength = 3, Width = 5\nArea = 15.0000\nPerimeter = 16.0000"

    def test_circle(self):
        result = solve('Area & Perimeter', {'shape': 'circle', 'radius': 1})
        assert result.text == "Shape: circle\n\nRadius = 1\nArea = 3.1416\nCircumference = 6.2832"

    def test_triangle_from_sides(self):
        result = solve('Area & Perimeter', {'shape': 'triangle', 's1': 3, 's2': 4, 's3': 5})
        assert result.text == "Shape: triangle\n\nSides: 3, 4, 5\nArea (Heron's Formula) = 6.0000\nPerimeter = 12.0000"

    def test_triangle_from_base_and_height(self):
        result = solve('Area & Perimeter', {
            'shape': 'triangle', 'triangleMethod': 'baseHeight', 'base': 10, 'height': 4,
        })
        assert result.text == "Shape: triangle\n\nBase = 10, Height = 4\nArea = 20.0000"
        assert "   Perimeter" not in '\n'.join(result.steps)

    def test_degenerate_triangle(self):
        result = solve('Area & Perimeter', {'shape': 'triangle', 's1': 1, 's2': 2, 's3': 3})
        assert result.text == "Invalid triangle sides. Sum of any two sides must be greater than the third."

    def test_trapezoid(self):
        result = solve('Area & Perimeter', {'shape': 'trapezoid', 'pa': 3, 'pb': 5, 'height': 2})
        assert result.text == "Shape: trapezoid\n\nSides: 3, 5, Height: 2\nArea = 8.0000"

    def test_parallelogram(self):
        result = solve('Area & Perimeter', {'shape': 'parallelogram', 'base': 6, 'height': 2.5})
        assert result.text == "Shape: parallelogram\n\nBase: 6, Height: 2.5\nArea = 15.0000"

    def test_missing_dimension(self):
        result = solve('Area & Perimeter', {'shape': 'square'})
        assert result.text == "Please provide a value for Side."

    def test_negative_dimension(self):
        result = solve('Area & Perimeter', {'shape': 'square', 'side': -2})
        assert result.text == "Error: Side must be a positive number."


class TestCircleCalculator:

    def test_arc_and_sector(self):
        result = solve('Circle Calculator', {'radius': 2, 'angle': 90})
        lines = result.text.split('\n')
        assert lines[0] == "Shape: circle"
        assert "Arc Length (θ = 90°) = 3.1416" in lines
        assert "Sector Area = 3.1416" in lines

    def test_without_angle(self):
        result = solve('Circle Calculator', {'radius': 1})
        assert "Arc Length" not in result.text

    def test_angle_out_of_range(self):
        result = solve('Circle Calculator', {'radius': 1, 'angle': 400})
        assert result.text == "Error: Central angle (degrees) must be at most 360."


class TestTriangleSolver:

    def test_right_triangle(self):
        result = solve('Triangle Solver', {'s1': 3, 's2': 4, 's3': 5})
        assert result.text == ("Angle A (opposite side a): 36.87°\n"
                               "Angle B (opposite side b): 53.13°\n"
                               "Angle C (opposite side c): 90.00°")

    def test_angles_sum_to_180(self):
        angles = triangle_angles(5, 6, 7)
        assert abs(sum(angles) - 180) < 1e-9

    def test_invalid_triangle(self):
        with pytest.raises(DomainError):
            triangle_angles(1, 1, 5)
        result = solve('Triangle Solver', {'s1': 1, 's2': 1, 's3': 5})
        assert result.text == "Invalid triangle. Sum of two sides must be greater than the third."


class TestDistanceFormulaCalculator:

    def test_distance(self):
        result = solve('Distance Formula', {'x1': 0, 'y1': 0, 'x2': 3, 'y2': 4})
        assert result.text == "Point A: (0, 0)\nPoint B: (3, 4)\nDistance = 5.0000"
        assert result.plot_data.type == 'scatter'


class TestTrigonometry:

    def test_degrees(self):
        result = solve('Trigonometry Calculator (sin, cos, tan)', {'angle': 30})
        assert result.text == "Angle: 30 deg\n\nsin = 0.500000\ncos = 0.866025\ntan = 0.577350"

    def test_radians(self):
        result = solve('Trigonometry Calculator (sin, cos, tan)', {'angle': 0, 'unit': 'rad'})
        assert result.text == "Angle: 0 rad\n\nsin = 0.000000\ncos = 1.000000\ntan = 0.000000"

    def test_tangent_undefined(self):
        result = solve('Trigonometry Calculator (sin, cos, tan)', {'angle': 90})
        assert result.text.endswith("tan = undefined")

    def test_equation_solver_is_unsupported(self):
        result = solve('Trigonometric Equation Solver', {'equation': 'sin(x) = 0.5'})
        assert result.text.startswith("Symbolic trigonometric equation solving is not fully supported")
