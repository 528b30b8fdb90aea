# Statistics calculators: descriptive statistics, distributions, regression
import logging

from ..engine import CalculatorStrategy
from ..fields import FieldMap, choice_field, number_field, text_field
from ..formatting import format_number, format_signed_term, step_header, to_fixed
from ..formulas import (binomial_distribution, combinations, describe, linear_regression, normal_cdf, normal_pdf,
                        parse_number_list, parse_point_list)
from ..plotting import HIGHLIGHT, PRIMARY, sample_points
from ..results import CalculationResult, ChartDataset, PlotData

logger = logging.getLogger(__name__)


class StatisticsCalculator(CalculatorStrategy):
    """Mean, median, mode, range, population standard deviation and variance."""

    name = 'Statistics Calculator'
    category = 'Statistics'
    description = 'Descriptive statistics of a list of numbers.'
    fields = (
        text_field('dataStr', 'Data', required=False),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        stats = describe(parse_number_list(fields.text('dataStr')))

        return CalculationResult(
            text=f"Mean (Average): {to_fixed(stats.mean)}\n"
                 f"Median (Middle Value): {to_fixed(stats.median)}\n"
                 f"Mode (Most Frequent): {format_number(stats.mode)}\n"
                 f"Range: {format_number(stats.range)}\n"
                 f"Standard Deviation (Population): {to_fixed(stats.std_dev)}\n"
                 f"Variance: {to_fixed(stats.variance)}",
            steps=[
                step_header(f"1. Sorted data (n={stats.count}):"),
                f"   [{', '.join(format_number(v) for v in stats.values)}]",
                step_header("2. Central tendency:"),
                f"   Mean = Σx / n = {format_number(stats.sum)} / {stats.count} = {to_fixed(stats.mean)}",
                f"   Median = {to_fixed(stats.median)}",
                f"   Mode = {format_number(stats.mode)}",
                step_header("3. Spread:"),
                f"   Range = max - min = {format_number(stats.max)} - {format_number(stats.min)} = {format_number(stats.range)}",
                "   Variance σ² = Σ(x - μ)² / n",
                f"   σ² = {to_fixed(stats.variance)}",
                f"   σ = √σ² = {to_fixed(stats.std_dev)}",
            ],
            plot_data=PlotData('bar', [ChartDataset('Data Points', stats.values, {
                'backgroundColor': 'rgba(52, 211, 153, 0.6)',
            })], labels=list(range(1, stats.count + 1))),
        )


class BinomialDistributionCalculator(CalculatorStrategy):
    name = 'Binomial Distribution'
    category = 'Statistics'
    description = 'P(X = k) for a binomial random variable.'
    fields = (
        number_field('n', 'Number of trials (n)', integer=True, min_value=0),
        number_field('p', 'Probability of success (p)', min_value=0, max_value=1),
        number_field('k', 'Number of successes (k)', integer=True, min_value=0),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        n, k = fields.integer('n'), fields.integer('k')
        p = fields.number('p')
        distribution = binomial_distribution(n, p)
        probability = distribution[k] if k <= n else 0.0
        p_text = format_number(p)

        return CalculationResult(
            text=f"P(X={k}) = {to_fixed(probability, 6)}",
            steps=[
                step_header("1. Identify parameters:"),
                f"   n = {n}, p = {p_text}, k = {k}",
                step_header("2. Apply Formula:"),
                "   P(X=k) = C(n, k) × p^k × (1-p)^(n-k)",
                step_header("3. Substitution:"),
                f"   C({n}, {k}) = {combinations(n, k)}",
                f"   {p_text}^{k} = {to_fixed(p ** k, 6)}",
                f"   (1-{p_text})^({n}-{k}) = {to_fixed((1 - p) ** (n - k), 6) if k <= n else '0'}",
                step_header("4. Result:"),
                f"   {to_fixed(probability, 6)}",
            ],
            plot_data=PlotData('bar', [ChartDataset('Probability', distribution, {
                'backgroundColor': [HIGHLIGHT if i == k else 'rgba(129, 140, 248, 0.5)' for i in range(n + 1)],
            })], labels=list(range(n + 1))),
        )


class NormalDistributionCalculator(CalculatorStrategy):
    """
    Tail and interval probabilities of N(μ, σ²).

    ``probType`` selects P(X < x1), P(X > x1) or P(x1 < X < x2).
    """

    name = 'Normal Distribution'
    category = 'Statistics'
    description = 'Probabilities of a normally distributed variable.'
    fields = (
        number_field('mean', 'Mean'),
        number_field('stdDev', 'Standard Deviation', positive=True),
        choice_field('probType', ('lessThan', 'greaterThan', 'between'), 'Probability type', default='lessThan'),
        number_field('x1', 'x1'),
        number_field('x2', 'x2', required=False),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        mean, std = fields.number('mean'), fields.number('stdDev')
        prob_type = fields.text('probType')
        x1 = fields.number('x1')
        x1_text = format_number(x1)

        if prob_type == 'lessThan':
            probability = normal_cdf(x1, mean, std)
            text, method = f"P(X < {x1_text})", f"Using CDF for x={x1_text}"
        elif prob_type == 'greaterThan':
            probability = 1 - normal_cdf(x1, mean, std)
            text, method = f"P(X > {x1_text})", f"1 - CDF({x1_text})"
        else:
            x2 = fields.number('x2')
            x2_text = format_number(x2)
            probability = normal_cdf(x2, mean, std) - normal_cdf(x1, mean, std)
            text, method = f"P({x1_text} < X < {x2_text})", f"CDF({x2_text}) - CDF({x1_text})"

        spread = 4 * std
        return CalculationResult(
            text=f"{text} = {to_fixed(probability, 6)}",
            steps=[
                step_header("1. Identify parameters:"),
                f"   Mean (μ) = {format_number(mean)}",
                f"   Std Dev (σ) = {format_number(std)}",
                step_header(f"2. Calculation ({method}):"),
                f"   z = (x - μ) / σ = {to_fixed((x1 - mean) / std)} for x = {x1_text}",
                "   CDF(x) = ½[1 + erf(z / √2)]",
                step_header("3. Result:"),
                f"   Probability = {to_fixed(probability, 6)}",
            ],
            plot_data=PlotData('line', [ChartDataset(
                'PDF', sample_points(lambda x: normal_pdf(x, mean, std), mean - spread, mean + spread),
                {'borderColor': PRIMARY, 'fill': True, 'backgroundColor': 'rgba(129, 140, 248, 0.1)'},
            )]),
        )


class LinearRegressionCalculator(CalculatorStrategy):
    """Least-squares line through 'x,y' pairs, one pair per line."""

    name = 'Linear Regression'
    category = 'Statistics'
    description = 'Least-squares regression line and correlation coefficient.'
    fields = (
        text_field('dataStr', 'Data points (x,y per line)', required=False),
    )

    def calculate(self, fields: FieldMap) -> CalculationResult:
        points = parse_point_list(fields.text('dataStr'))
        fit = linear_regression(points)
        slope, intercept = to_fixed(fit.slope), to_fixed(fit.intercept)
        r_text = 'undefined' if fit.r is None else to_fixed(fit.r)
        if fit.r is None:
            logger.debug("Correlation undefined: every y value is equal")

        xs = [x for x, _ in points]
        line = [{'x': x, 'y': fit.slope * x + fit.intercept} for x in (min(xs), max(xs))]
        return CalculationResult(
            text=f"Equation: y = {slope}x {format_signed_term(fit.intercept)}\n"
                 f"Correlation Coefficient (R): {r_text}",
            steps=[
                step_header(f"1. Identify Data & Summations (n={fit.n}):"),
                f"   Σx={format_number(fit.sum_x)}, Σy={format_number(fit.sum_y)}",
                f"   Σxy={format_number(fit.sum_xy)}, Σx²={format_number(fit.sum_xx)}",
                step_header("2. Calculate Slope (m):"),
                "   m = (nΣxy - ΣxΣy) / (nΣx² - (Σx)²)",
                f"   m = ({fit.n}*{format_number(fit.sum_xy)} - {format_number(fit.sum_x)}*{format_number(fit.sum_y)})"
                f" / ({fit.n}*{format_number(fit.sum_xx)} - {format_number(fit.sum_x)}^2)",
                f"   m = {slope}",
                step_header("3. Calculate Intercept (b):"),
                "   b = (Σy - mΣx) / n",
                f"   b = ({format_number(fit.sum_y)} - {slope}*{format_number(fit.sum_x)}) / {fit.n}",
                f"   b = {intercept}",
                step_header("4. Correlation Coefficient:"),
                "   R = (nΣxy - ΣxΣy) / √[(nΣx² - (Σx)²)(nΣy² - (Σy)²)]",
                f"   R = {r_text}",
            ],
            plot_data=PlotData('scatter', [
                ChartDataset('Data Points', [{'x': x, 'y': y} for x, y in points], {'backgroundColor': 'white'}),
                ChartDataset('Best Fit Line', line, {'type': 'line', 'borderColor': HIGHLIGHT, 'borderDash': [5, 5]}),
            ]),
        )
