"""
Comparative Analyzer - period-over-period cost deltas, shares and trend
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Union

import structlog

from cost_insights.finops.period_resolver import Period
from cost_insights.models.cost_schemas import (
    ComparisonResult,
    DimensionCost,
    NormalizedReport,
    Trend,
)

logger = structlog.get_logger(__name__)

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")
DEFAULT_TREND_THRESHOLD = Decimal("5")


def _to_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_percentage_change(current: Number, previous: Number) -> Decimal:
    """
    Percentage change from ``previous`` to ``current``, rounded to 2 places.

    A zero ``previous`` yields 100 when there is new spend and 0 otherwise.
    """
    current = _to_decimal(current)
    previous = _to_decimal(previous)

    if previous == 0:
        return HUNDRED if current > 0 else Decimal("0")

    change = (current - previous) / previous * HUNDRED
    return change.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def determine_trend(percentage_change: Number, threshold: Number = DEFAULT_TREND_THRESHOLD) -> Trend:
    """Stable below the threshold (exclusive), otherwise the sign decides"""
    change = _to_decimal(percentage_change)
    if abs(change) < _to_decimal(threshold):
        return Trend.STABLE
    return Trend.INCREASING if change > 0 else Trend.DECREASING


def calculate_share(amount: Number, total: Number) -> Decimal:
    """Share of ``total`` as a percentage rounded to 2 places; 0 for a zero total"""
    total = _to_decimal(total)
    if total == 0:
        return Decimal("0")
    return (_to_decimal(amount) / total * HUNDRED).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def sort_dimensions(dimensions: List[DimensionCost]) -> List[DimensionCost]:
    """Descending by amount; ties keep their original order"""
    return sorted(dimensions, key=lambda d: d.amount, reverse=True)


def compare_cost_reports(
    current: NormalizedReport,
    previous: Optional[NormalizedReport],
    period: Period,
    trend_threshold: Number = DEFAULT_TREND_THRESHOLD,
) -> ComparisonResult:
    """
    Build the comparison between the current period and its previous period.

    Args:
        current: Normalized report for the requested period
        previous: Normalized report for the mirror-previous period, or None
            when no comparison data is available
        period: The requested period
        trend_threshold: Absolute change (percent) under which the trend is stable

    Returns:
        ComparisonResult without summary text (see cost_summary)
    """
    previous_amounts: Dict[str, Decimal] = {}
    if previous is not None:
        for dimension in previous.dimensions:
            previous_amounts[dimension.name] = previous_amounts.get(dimension.name, Decimal("0")) + dimension.amount

    total = current.total
    dimensions = []
    for dimension in current.dimensions:
        change = None
        if previous is not None:
            change = calculate_percentage_change(
                dimension.amount,
                previous_amounts.get(dimension.name, Decimal("0")),
            )
        dimensions.append(
            DimensionCost(
                name=dimension.name,
                amount=dimension.amount,
                share_of_total=calculate_share(dimension.amount, total),
                change_from_previous=change,
            )
        )

    month_over_month = None
    trend = Trend.STABLE
    if previous is not None:
        month_over_month = calculate_percentage_change(total, previous.total)
        trend = determine_trend(month_over_month, trend_threshold)

    logger.info(
        "cost_comparison_completed",
        period_start=period.start.isoformat(),
        period_end=period.end.isoformat(),
        current_total=str(total),
        previous_total=str(previous.total) if previous is not None else None,
        month_over_month=str(month_over_month) if month_over_month is not None else None,
        trend=trend.value,
        dimensions=len(dimensions),
    )

    return ComparisonResult(
        period_start=period.start.isoformat(),
        period_end=period.end.isoformat(),
        total_amount=total,
        currency=current.currency,
        dimensions=sort_dimensions(dimensions),
        month_over_month_change=month_over_month,
        trend=trend,
    )
