"""
Billing Data Normalizer

Reduces a raw Cost Explorer GetCostAndUsage response to a reconciled total and
a list of per-dimension amounts. The declared total is trusted unless it is
exactly zero while at least one group carries spend; in that case the total
is rebuilt from the groups.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import structlog

from cost_insights.models.cost_schemas import DimensionCost, NormalizedReport
from cost_insights.utils.aws_constants import CostMetric, DEFAULT_CURRENCY

logger = structlog.get_logger(__name__)

UNKNOWN_DIMENSION = "Unknown"
ZERO = Decimal("0")


def parse_amount(value: Any) -> Decimal:
    """Parse a Cost Explorer amount string; missing or malformed values count as zero"""
    if value is None or value == "":
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning("unparseable_cost_amount", value=value)
        return ZERO


def _metric(container: Optional[Dict[str, Any]], metric: str) -> Dict[str, Any]:
    return (container or {}).get(metric) or {}


def _group_name(group: Dict[str, Any]) -> str:
    keys = group.get("Keys") or []
    return keys[0] if keys and keys[0] else UNKNOWN_DIMENSION


def normalize_cost_report(
    report: Optional[Dict[str, Any]],
    metric: str = CostMetric.UNBLENDED_COST,
) -> NormalizedReport:
    """
    Normalize a raw cost report.

    Args:
        report: GetCostAndUsage response (``ResultsByTime`` list of buckets)
        metric: Metric key to read from ``Total`` and group ``Metrics``

    Returns:
        NormalizedReport with the reconciled total and dimension amounts in
        first-encounter order (shares are filled in by the analyzer)
    """
    results = (report or {}).get("ResultsByTime") or []

    amounts: Dict[str, Decimal] = {}
    api_total = ZERO
    total = ZERO
    recalculated = False
    currency: Optional[str] = None
    group_count = 0

    for result in results:
        total_metric = _metric(result.get("Total"), metric)
        bucket_total = parse_amount(total_metric.get("Amount"))
        currency = currency or total_metric.get("Unit")

        bucket_sum = ZERO
        for group in result.get("Groups") or []:
            group_metric = _metric(group.get("Metrics"), metric)
            amount = parse_amount(group_metric.get("Amount"))
            currency = currency or group_metric.get("Unit")
            name = _group_name(group)
            amounts[name] = amounts.get(name, ZERO) + amount
            bucket_sum += amount
            group_count += 1

        api_total += bucket_total
        if bucket_total == 0 and bucket_sum != 0:
            logger.debug(
                "api_total_zero_recalculated_from_groups",
                period=result.get("TimePeriod"),
                calculated_total=str(bucket_sum),
            )
            total += bucket_sum
            recalculated = True
        else:
            total += bucket_total

    dimensions = [DimensionCost(name=name, amount=amount) for name, amount in amounts.items()]

    logger.debug(
        "cost_report_normalized",
        buckets=len(results),
        groups=group_count,
        dimensions=len(dimensions),
        api_total=str(api_total),
        total=str(total),
        recalculated=recalculated,
    )

    return NormalizedReport(
        total=total,
        currency=currency or DEFAULT_CURRENCY,
        dimensions=dimensions,
        api_total=api_total,
        recalculated=recalculated,
    )
