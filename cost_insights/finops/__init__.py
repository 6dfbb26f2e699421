"""
FinOps Module - period resolution, cost reconciliation and comparison
"""

from cost_insights.finops.period_resolver import (
    Period,
    PeriodResolver,
    month_period,
    previous_period,
    resolve_period,
)
from cost_insights.finops.cost_normalizer import normalize_cost_report
from cost_insights.finops.cost_comparison import (
    calculate_percentage_change,
    calculate_share,
    compare_cost_reports,
    determine_trend,
)
from cost_insights.finops.cost_summary import (
    format_currency,
    format_percentage,
    generate_cost_summary,
    generate_optimization_hints,
    get_top_dimensions,
)

__all__ = [
    'Period',
    'PeriodResolver',
    'month_period',
    'previous_period',
    'resolve_period',
    'normalize_cost_report',
    'calculate_percentage_change',
    'calculate_share',
    'compare_cost_reports',
    'determine_trend',
    'format_currency',
    'format_percentage',
    'generate_cost_summary',
    'generate_optimization_hints',
    'get_top_dimensions',
]
