"""Models package for Cost Insights"""

from .cost_schemas import (
    Trend,
    DimensionCost,
    NormalizedReport,
    ComparisonResult,
    ErrorResponse,
)

__all__ = [
    "Trend",
    "DimensionCost",
    "NormalizedReport",
    "ComparisonResult",
    "ErrorResponse",
]
