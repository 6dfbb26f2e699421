"""
Abstract cost report source interface.

The analysis service depends only on this contract, so Cost Explorer can be
swapped for a fake in tests or another billing backend.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from cost_insights.finops.period_resolver import Period
from cost_insights.utils.aws_constants import CostDimension, Granularity


class CostReportSource(ABC):
    """
    Abstract base class for billing data sources.

    Implementations return a raw report in the GetCostAndUsage response shape.
    """

    @abstractmethod
    def fetch(
        self,
        period: Period,
        granularity: str = Granularity.MONTHLY,
        group_by: str = CostDimension.SERVICE,
    ) -> Dict[str, Any]:
        """
        Fetch the cost report for an inclusive period.

        Args:
            period: Inclusive date range
            granularity: Time bucketing of the report
            group_by: Dimension key used to break costs down

        Raises:
            Exception: Provider errors propagate unchanged for classification
        """

    @abstractmethod
    def get_name(self) -> str:
        """Return the name of this data source (e.g. 'cost_explorer')."""


class SourceError(Exception):
    """Raised when a data source returns an unusable response."""

    def __init__(self, message: str, source: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.source = source
        self.original_error = original_error
