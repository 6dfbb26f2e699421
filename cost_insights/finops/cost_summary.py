"""
Summary Renderer - human-readable digest and rule-based optimization hints
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union

from cost_insights.finops.period_resolver import Period
from cost_insights.models.cost_schemas import ComparisonResult, DimensionCost, Trend
from cost_insights.utils.aws_constants import CostExplorerServiceName, DEFAULT_CURRENCY

Number = Union[Decimal, int, float]

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥", "INR": "₹"}
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})

TREND_WORDS = {
    Trend.INCREASING: "increase",
    Trend.DECREASING: "decrease",
    Trend.STABLE: "stable",
}

# Advice for well-known services, keyed by Cost Explorer service name.
# Extend this table to add rules.
OPTIMIZATION_RULES: Dict[str, str] = {
    CostExplorerServiceName.EC2_COMPUTE: (
        "EC2 ({cost}): Consider Savings Plans or Reserved Instances for steady workloads "
        "and rightsize underutilized instances"
    ),
    CostExplorerServiceName.S3: (
        "S3 ({cost}): Review storage classes and lifecycle policies "
        "(Intelligent-Tiering, Glacier) for infrequently accessed data"
    ),
    CostExplorerServiceName.RDS: (
        "RDS ({cost}): Consider Reserved Instances and review instance sizing "
        "and Multi-AZ requirements"
    ),
}

GENERIC_REVIEW_HINT = "{name} ({cost}): Review usage for optimization opportunities"


def _format_number(value: Number) -> str:
    text = f"{Decimal(str(value)):.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def format_currency(amount: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount for display, e.g. ``$1,234.56``.

    Currencies without a known symbol are rendered as ``1,234.56 CHF``.
    """
    amount = Decimal(str(amount))
    places = 0 if currency in ZERO_DECIMAL_CURRENCIES else 2
    body = f"{abs(amount):,.{places}f}"
    sign = "-" if amount < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{body} {currency}"


def format_percentage(percentage: Number, show_sign: bool = True) -> str:
    """Render a percentage; positive values get a leading '+' when show_sign is set"""
    sign = "+" if show_sign and percentage > 0 else ""
    return f"{sign}{_format_number(percentage)}%"


def get_top_dimensions(dimensions: List[DimensionCost], top_n: int = 10) -> List[DimensionCost]:
    """Top N dimensions by amount (stable for ties)"""
    return sorted(dimensions, key=lambda d: d.amount, reverse=True)[:top_n]


def result_period(result: ComparisonResult) -> Period:
    return Period(date.fromisoformat(result.period_start), date.fromisoformat(result.period_end))


def generate_cost_summary(result: ComparisonResult, top_n: int = 5) -> str:
    """
    Generate a short digest of a comparison result.

    Args:
        result: Comparison result to describe
        top_n: Number of dimensions listed after the headline
    """
    formatted_cost = format_currency(result.total_amount, result.currency)
    period_label = result_period(result).label()

    if result.month_over_month_change is None:
        return f"Total cost for {period_label} was {formatted_cost}."

    trend_text = TREND_WORDS.get(result.trend, "stable")
    summary = (
        f"Total cost for {period_label} was {formatted_cost}, showing "
        f"{format_percentage(result.month_over_month_change)} {trend_text} compared to previous period."
    )

    top_dimensions = get_top_dimensions(result.dimensions, top_n)
    if top_dimensions:
        top_text = ", ".join(
            f"{d.name} ({format_currency(d.amount, result.currency)}, "
            f"{format_percentage(d.share_of_total, show_sign=False)})"
            for d in top_dimensions
        )
        summary += f" Top costs: {top_text}"

    return summary


def with_summary(result: ComparisonResult, top_n: int = 5) -> ComparisonResult:
    """Return a copy of ``result`` carrying its generated summary text"""
    return result.model_copy(update={"summary": generate_cost_summary(result, top_n)})


def generate_optimization_hints(
    dimensions: List[DimensionCost],
    top_n: int = 5,
    min_cost: Number = 100,
    review_threshold: Number = 500,
    currency: str = DEFAULT_CURRENCY,
) -> List[str]:
    """
    Rule-based optimization hints for the most expensive dimensions.

    Args:
        dimensions: Dimension costs for the period
        top_n: How many of the most expensive dimensions to inspect
        min_cost: Dimensions at or below this cost are ignored
        review_threshold: Unlisted dimensions above this cost get a generic hint
        currency: Currency used to render amounts
    """
    min_cost = Decimal(str(min_cost))
    review_threshold = Decimal(str(review_threshold))

    hints: List[str] = []
    for dimension in get_top_dimensions(dimensions, top_n):
        if dimension.amount <= min_cost:
            continue
        cost = format_currency(dimension.amount, currency)
        rule: Optional[str] = OPTIMIZATION_RULES.get(dimension.name)
        if rule is not None:
            hints.append(rule.format(cost=cost))
        elif dimension.amount > review_threshold:
            hints.append(GENERIC_REVIEW_HINT.format(name=dimension.name, cost=cost))
    return hints
