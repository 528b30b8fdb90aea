# Basic math and algebra calculator tests
from edu_calc.calculation import solve


class TestArithmeticCalculator:

    def test_multiplication(self):
        result = solve('Arithmetic Calculator', {'num1': 10, 'num2': 2.5, 'operation': '*'})
        assert result.text == "10 × 2.5 = 25"
        assert result.plot_data.labels == ['Number 1', 'Number 2', 'Result']

    def test_division(self):
        result = solve('Arithmetic Calculator', {'num1': 7, 'num2': 2, 'operation': '/'})
        assert result.text == "7 ÷ 2 = 3.5"

    def test_division_by_zero(self):
        result = solve('Arithmetic Calculator', {'num1': 6, 'num2': 0, 'operation': '/'})
        assert result.text == "Error: Division by zero is not allowed."

    def test_unknown_operation(self):
        result = solve('Arithmetic Calculator', {'num1': 6, 'num2': 2, 'operation': '%'})
        assert result.text.startswith("Error: Operation must be one of")


class TestPercentageCalculator:

    def test_percentage(self):
        result = solve('Percentage Calculator', {'part': 25, 'total': 200})
        assert result.text == "25 is 12.50% of 200."
        assert result.plot_data.type == 'doughnut'

    def test_zero_total(self):
        result = solve('Percentage Calculator', {'part': 25, 'total': 0})
        assert result.text == "Error: Total value cannot be zero."


class TestUnitConverter:
    """Linear and temperature conversions"""

    def test_length(self):
        result = solve('Unit Converter', {
            'conversionType': 'length', 'value': 1, 'lengthFrom': 'km', 'lengthTo': 'm',
        })
        assert result.text.startswith("1 km = 1000.0000 m\n\nEquivalent Values:\n")
        assert "100000.0000 cm" not in result.text
        assert "1.0000e+5 cm" in result.text

    def test_generic_unit_fields(self):
        result = solve('Unit Converter', {'conversionType': 'mass', 'value': 2, 'fromUnit': 'kg', 'toUnit': 'g'})
        assert result.text.startswith("2 kg = 2000.0000 g")

    def test_temperature(self):
        result = solve('Unit Converter', {
            'conversionType': 'temperature', 'value': 100, 'tempFrom': 'C', 'tempTo': 'F',
        })
        assert result.text.startswith("100 C = 212.0000 F")
        assert "373.15 K" in result.text

    def test_below_absolute_zero(self):
        result = solve('Unit Converter', {
            'conversionType': 'temperature', 'value': -300, 'tempFrom': 'C', 'tempTo': 'K',
        })
        assert result.text == "Temperature cannot be below absolute zero (0 K)."

    def test_unknown_unit(self):
        result = solve('Unit Converter', {
            'conversionType': 'length', 'value': 1, 'lengthFrom': 'parsec', 'lengthTo': 'm',
        })
        assert result.text == "Unknown length unit: parsec"

    def test_missing_units(self):
        result = solve('Unit Converter', {'conversionType': 'volume', 'value': 1})
        assert result.text == "Please provide a valid value and units."


class TestQuadraticEquationSolver:

    def test_two_real_roots(self):
        result = solve('Quadratic Equation Solver', {'a': 1, 'b': -3, 'c': 2})
        assert "x₁ = 2.0000, x₂ = 1.0000" in result.text
        roots = result.plot_data.datasets[1].data
        assert roots == [{'x': 2.0, 'y': 0.0}, {'x': 1.0, 'y': 0.0}]

    def test_one_root(self):
        result = solve('Quadratic Equation Solver', {'a': 1, 'b': 2, 'c': 1})
        assert result.text == "Discriminant Δ = 0\nOne real root: x = -1.0000"

    def test_complex_roots(self):
        result = solve('Quadratic Equation Solver', {'a': 1, 'b': 2, 'c': 5})
        assert result.text == ("Discriminant Δ = -16\n"
                               "Two complex roots: x₁ = -1.0000 + 2.0000i, x₂ = -1.0000 - 2.0000i")

    def test_not_quadratic(self):
        result = solve('Quadratic Equation Solver', {'a': 0, 'b': 2, 'c': 1})
        assert result.text == "Error: a cannot be 0, this is not a quadratic equation."


class TestLinearEquationSolver:

    def test_solution(self):
        result = solve('Linear Equation Solver', {'a': 2, 'b': 3, 'c': 7})
        assert result.text == "2x + 3 = 7\nSolution: x = 2.0000"

    def test_negative_constant(self):
        result = solve('Linear Equation Solver', {'a': 4, 'b': -2, 'c': 6})
        assert result.text == "4x - 2 = 6\nSolution: x = 2.0000"

    def test_zero_coefficient(self):
        result = solve('Linear Equation Solver', {'a': 0, 'b': 3, 'c': 7})
        assert result.text == "Error: a cannot be zero."


class TestPolynomialRootFinder:

    def test_linear(self):
        result = solve('Polynomial Root Finder', {'coeffsStr': '2, 4'})
        assert result.text == "One real root: x = -2.0000"

    def test_quadratic(self):
        result = solve('Polynomial Root Finder', {'coeffsStr': '1, -3, 2'})
        assert "x₁ = 2.0000, x₂ = 1.0000" in result.text

    def test_leading_zeros_are_ignored(self):
        result = solve('Polynomial Root Finder', {'coeffsStr': '0, 1, -5'})
        assert result.text == "One real root: x = 5.0000"

    def test_cubic_is_unsupported(self):
        result = solve('Polynomial Root Finder', {'coeffsStr': '1, 0, 0, 1'})
        assert result.text.startswith("Polynomials of degree 3 are not supported.")

    def test_constant(self):
        result = solve('Polynomial Root Finder', {'coeffsStr': '0, 0, 5'})
        assert result.text == "A constant polynomial has no roots to find."


class TestSystemOfEquationsSolver:

    def test_reference_system(self):
        """2x + 3y = 6, 4x + y = 25"""
        result = solve('System of Equations', {'a1': 2, 'b1': 3, 'c1': 6, 'a2': 4, 'b2': 1, 'c2': 25})
        assert result.text == "x = 6.9000\ny = -2.6000"

    def test_reference_parallel_lines(self):
        """2x + 3y = 6 and 4x + 6y = 10 never meet"""
        result = solve('System of Equations', {'a1': 2, 'b1': 3, 'c1': 6, 'a2': 4, 'b2': 6, 'c2': 10})
        assert result.text == "Determinant is zero. No unique solution (parallel or identical lines)."

    def test_unique_solution(self):
        result = solve('System of Equations', {'a1': 1, 'b1': 1, 'c1': 3, 'a2': 1, 'b2': -1, 'c2': 1})
        assert result.text == "x = 2.0000\ny = 1.0000"
        assert result.plot_data.datasets[2].data == [{'x': 2.0, 'y': 1.0}]

    def test_parallel_lines(self):
        result = solve('System of Equations', {'a1': 1, 'b1': 2, 'c1': 3, 'a2': 2, 'b2': 4, 'c2': 5})
        assert result.text == "Determinant is zero. No unique solution (parallel or identical lines)."


class TestComplexNumberCalculator:

    def test_multiplication(self):
        result = solve('Complex Number Calculator', {
            'c1_real': 1, 'c1_imag': 2, 'c2_real': 3, 'c2_imag': 4, 'operation': '*',
        })
        assert result.text == "(1 + 2i) * (3 + 4i)\n= -5.0000 + 10.0000i"

    def test_division(self):
        result = solve('Complex Number Calculator', {
            'c1_real': 1, 'c1_imag': 1, 'c2_real': 1, 'c2_imag': -1, 'operation': '/',
        })
        assert result.text == "(1 + 1i) / (1 - 1i)\n= 0.0000 + 1.0000i"

    def test_division_by_zero(self):
        result = solve('Complex Number Calculator', {
            'c1_real': 1, 'c1_imag': 1, 'c2_real': 0, 'c2_imag': 0, 'operation': '/',
        })
        assert result.text == "Error: Division by zero"
