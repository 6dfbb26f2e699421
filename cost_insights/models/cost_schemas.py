"""
Pydantic models for cost comparison results surfaced to callers
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Trend(str, Enum):
    """Period-over-period trend classification"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class DimensionCost(BaseModel):
    """Cost of one dimension value (e.g. a service) within a period"""
    model_config = ConfigDict(frozen=True)

    name: str
    amount: Decimal
    share_of_total: Decimal = Decimal("0")
    change_from_previous: Optional[Decimal] = None


class NormalizedReport(BaseModel):
    """A cost report reduced to a reconciled total and per-dimension amounts"""
    model_config = ConfigDict(frozen=True)

    total: Decimal
    currency: str
    dimensions: List[DimensionCost] = Field(default_factory=list)
    api_total: Decimal = Decimal("0")
    recalculated: bool = Field(
        default=False,
        description="True when the declared total was replaced by the sum of dimensions"
    )


class ComparisonResult(BaseModel):
    """Comparative breakdown of a period against its mirror-previous period"""
    model_config = ConfigDict(frozen=True)

    period_start: str
    period_end: str
    total_amount: Decimal
    currency: str
    dimensions: List[DimensionCost] = Field(default_factory=list)
    month_over_month_change: Optional[Decimal] = None
    trend: Trend = Trend.STABLE
    summary: str = ""

    @property
    def period(self) -> Dict[str, str]:
        return {"start": self.period_start, "end": self.period_end}

    def to_payload(self) -> Dict[str, Any]:
        """Flatten into JSON-friendly primitives"""
        return {
            "period": self.period,
            "total_amount": float(self.total_amount),
            "currency": self.currency,
            "dimensions": [
                {
                    "name": d.name,
                    "amount": float(d.amount),
                    "share_of_total": float(d.share_of_total),
                    **(
                        {"change_from_previous": float(d.change_from_previous)}
                        if d.change_from_previous is not None else {}
                    ),
                }
                for d in self.dimensions
            ],
            **(
                {"month_over_month_change": float(self.month_over_month_change)}
                if self.month_over_month_change is not None else {}
            ),
            "trend": self.trend.value,
            "summary": self.summary,
        }


class ErrorResponse(BaseModel):
    """Structured failure returned instead of raising to the caller"""
    model_config = ConfigDict(frozen=True)

    success: bool = False
    error: str
    error_type: str
    suggestions: List[str] = Field(default_factory=list)
    retryable: bool = False
