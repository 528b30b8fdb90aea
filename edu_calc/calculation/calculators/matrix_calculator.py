# Matrix and vector calculators, plus the discrete Fourier transform
from typing import List, Sequence

from ..engine import CalculatorStrategy
from ..fields import FieldMap, number_field, text_field
from ..formatting import format_number, step_header, to_fixed
from ..formulas import parse_number_list
from ..numerical import cross_product, determinant_2x2, determinant_3x3, dft_magnitudes, eigenvalues_2x2, matrix_multiply
from ..results import CalculationResult, ChartDataset, PlotData


def _matrix_fields(prefix: str, size: int = 2, required: bool = True) -> tuple:
    return tuple(
        number_field(f"{prefix}_{i}{j}", f"{prefix}[{i}][{j}]", required=required)
        for i in range(size) for j in range(size)
    )


def _read_matrix(fields: FieldMap, prefix: str, size: int = 2) -> List[List[float]]:
    return [[fields.number(f"{prefix}_{i}{j}") for j in range(size)] for i in range(size)]


def _row(values: Sequence[float]) -> str:
    return ', '.join(format_number(v) for v in values)


def _matrix_text(matrix: Sequence[Sequence[float]]) -> str:
    return '[' + ', '.join(f"[{_row(row)}]" for row in matrix) + ']'


class MatrixMultiplicationCalculator(CalculatorStrategy):
    """Product of two 2×2 matrices."""

    name = 'Matrix Multiplication'
    category = 'Matrix'
    description = 'Multiply two 2×2 matrices.'
    fields = _matrix_fields('m1') + _matrix_fields('m2')

    def calculate(self, fields: FieldMap) -> CalculationResult:
        a = _read_matrix(fields, 'm1')
        b = _read_matrix(fields, 'm2')
        c = matrix_multiply(a, b)

        products = []
        for i in range(2):
            for j in range(2):
                terms = ' + '.join(f"({format_number(a[i][k])})({format_number(b[k][j])})" for k in range(2))
                products.append(f"   Row {i + 1} • Col {j + 1}: {terms} = {format_number(c[i][j])}")

        return CalculationResult(
            text="Result Matrix:\n" + '\n'.join(f"[ {_row(row)} ]" for row in c),
            steps=[
                step_header("1. Identify Matrices A & B:"),
                f"   A = {_matrix_text(a)}",
                f"   B = {_matrix_text(b)}",
                step_header("2. Apply Formula:"),
                "   C_ij = Row_i(A) • Col_j(B)",
                step_header("3. Compute Dot Products:"),
                *products,
                step_header("4. Result:"),
                f"   {_matrix_text(c)}",
            ],
        )


class MatrixDeterminantCalculator(CalculatorStrategy):
    """Determinant of a 2×2 matrix, or of a 3×3 one when the third row and column are supplied."""

    name = 'Matrix Determinant'
    category = 'Matrix'
    description = 'Determinant of a 2×2 or 3×3 matrix.'
    fields = _matrix_fields('m') + tuple(
        number_field(f"m_{i}{j}", f"m[{i}][{j}]", required=False)
        for i in range(3) for j in range(3) if i == 2 or j == 2
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        if fields.has('m_22'):
            return self._determinant_3x3(_read_matrix(fields, 'm', 3))

        (a, b), (c, d) = _read_matrix(fields, 'm')
        det = determinant_2x2(a, b, c, d)
        return CalculationResult(
            text=f"Determinant = {format_number(det)}",
            steps=[
                step_header("1. Identify Matrix:"),
                f"   {_matrix_text([[a, b], [c, d]])}",
                step_header("2. Apply Formula:"),
                "   det = ad - bc",
                f"   det = ({format_number(a)})({format_number(d)}) - ({format_number(b)})({format_number(c)})",
                f"   det = {format_number(a * d)} - {format_number(b * c)}",
                step_header("3. Result:"),
                f"   det = {format_number(det)}",
            ],
        )

    def _determinant_3x3(self, m: List[List[float]]) -> CalculationResult:
        det = determinant_3x3(m)
        minors = [
            determinant_2x2(m[1][1], m[1][2], m[2][1], m[2][2]),
            determinant_2x2(m[1][0], m[1][2], m[2][0], m[2][2]),
            determinant_2x2(m[1][0], m[1][1], m[2][0], m[2][1]),
        ]
        return CalculationResult(
            text=f"Determinant = {format_number(det)}",
            steps=[
                step_header("1. Identify Matrix:"),
                f"   {_matrix_text(m)}",
                step_header("2. Cofactor Expansion along Row 1:"),
                "   det = a₁₁M₁₁ - a₁₂M₁₂ + a₁₃M₁₃",
                *(f"   M₁{j + 1} = {format_number(minor)}" for j, minor in enumerate(minors)),
                f"   det = ({format_number(m[0][0])})({format_number(minors[0])})"
                f" - ({format_number(m[0][1])})({format_number(minors[1])})"
                f" + ({format_number(m[0][2])})({format_number(minors[2])})",
                step_header("3. Result:"),
                f"   det = {format_number(det)}",
            ],
        )


class EigenvalueCalculator(CalculatorStrategy):
    """Eigenvalues of a 2×2 matrix from its characteristic polynomial."""

    name = 'Eigenvalue/Eigenvector'
    category = 'Matrix'
    description = 'Eigenvalues of a 2×2 matrix.'
    fields = _matrix_fields('m')

    def calculate(self, fields: FieldMap) -> CalculationResult:
        (a, b), (c, d) = _read_matrix(fields, 'm')
        eigen = eigenvalues_2x2(a, b, c, d)
        trace, det = format_number(eigen.trace), format_number(eigen.determinant)

        steps = [
            step_header("1. Identify Matrix parameters:"),
            f"   Matrix = {_matrix_text([[a, b], [c, d]])}",
            f"   Trace (tr) = a + d = {format_number(a)} + {format_number(d)} = {trace}",
            f"   Determinant (det) = ad - bc = {det}",
            step_header("2. Characteristic Equation:"),
            "   det(A - λI) = 0",
            "   λ² - tr(A)λ + det(A) = 0",
            f"   λ² - {trace}λ + {det} = 0",
            step_header("3. Solve Quadratic:"),
        ]

        if eigen.kind == 'complex':
            real, imag = to_fixed(eigen.values[0].real), to_fixed(eigen.values[0].imag)
            steps.extend([
                f"   Discriminant is negative ({format_number(eigen.discriminant)}), so roots are complex.",
                f"   Real part = {trace}/2 = {real}",
                f"   Imaginary part = √{format_number(-eigen.discriminant)}/2 = {imag}",
            ])
            return CalculationResult(text=f"Complex Eigenvalues:\n{real} ± {imag}i", steps=steps)

        l1, l2 = (to_fixed(value) for value in eigen.values)
        steps.extend([
            f"   λ = [{trace} ± √({trace}² - 4(1)({det}))] / 2",
            f"   λ = [{trace} ± √{format_number(eigen.discriminant)}] / 2",
            step_header("4. Results:"),
            f"   λ₁ = {l1}",
            f"   λ₂ = {l2}",
        ])
        return CalculationResult(text=f"Eigenvalues:\nλ₁ = {l1}\nλ₂ = {l2}", steps=steps)


class VectorCrossProductCalculator(CalculatorStrategy):
    name = 'Vector Cross Product'
    category = 'Matrix'
    description = 'Cross product of two 3D vectors.'
    fields = tuple(number_field(f"v{i}{axis}", f"v{i}{axis}") for i in (1, 2) for axis in 'xyz')

    def calculate(self, fields: FieldMap) -> CalculationResult:
        u = [fields.number(f"v1{axis}") for axis in 'xyz']
        v = [fields.number(f"v2{axis}") for axis in 'xyz']
        cx, cy, cz = cross_product(u, v)
        (ax, ay, az), (bx, by, bz) = ([format_number(x) for x in w] for w in (u, v))
        result = _row((cx, cy, cz))

        return CalculationResult(
            text=f"Cross Product = [{result}]",
            steps=[
                step_header("1. Identify Vectors:"),
                f"   A = [{_row(u)}]",
                f"   B = [{_row(v)}]",
                step_header("2. Apply Formulas:"),
                "   cx = ay*bz - az*by",
                "   cy = az*bx - ax*bz",
                "   cz = ax*by - ay*bx",
                step_header("3. Substitute and Solve:"),
                f"   cx = {ay}*{bz} - {az}*{by} = {format_number(cx)}",
                f"   cy = {az}*{bx} - {ax}*{bz} = {format_number(cy)}",
                f"   cz = {ax}*{by} - {ay}*{bx} = {format_number(cz)}",
                step_header("4. Result:"),
                f"   [{result}]",
            ],
        )


class FourierTransformCalculator(CalculatorStrategy):
    """Magnitude spectrum of a short real signal via the direct DFT."""

    name = 'Fourier Transform Calculator'
    category = 'Matrix'
    description = 'Discrete Fourier transform magnitudes of a signal.'
    fields = (
        text_field('signalStr', 'Signal values', required=False),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        signal = parse_number_list(fields.text('signalStr'))
        spectrum = dft_magnitudes(signal)
        magnitudes = ', '.join(to_fixed(value, 2) for value in spectrum)
        n = len(signal)

        return CalculationResult(
            text=f"DFT Magnitudes: {magnitudes}",
            steps=[
                step_header(f"1. Identify input signal (N={n}):"),
                f"   x[n] = [{_row(signal)}]",
                step_header("2. Discrete Fourier Transform (DFT):"),
                "   X[k] = Σ x[n] * e^(-i*2π*k*n/N)",
                step_header("3. Compute Magnitudes |X[k]|:"),
                f"   Iterated over k=0 to {n - 1}",
                step_header("4. Resulting spectrum:"),
                f"   [{magnitudes}]",
            ],
            plot_data=PlotData('bar', [ChartDataset('Magnitude', spectrum, {'backgroundColor': 'purple'})],
                               labels=list(range(n))),
        )
