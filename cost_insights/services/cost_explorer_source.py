"""
Cost Explorer data source implementation.

Fetches grouped cost reports with GetCostAndUsage. Retries and timeouts are
delegated to the botocore client configuration.
"""
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple
import time

import structlog

from cost_insights.finops.period_resolver import Period
from cost_insights.services.data_source import CostReportSource, SourceError
from cost_insights.utils.aws_constants import (
    AwsService,
    COST_EXPLORER_REGION,
    CostDimension,
    Granularity,
)
from cost_insights.utils.aws_session import create_aws_client, get_default_retry_config

logger = structlog.get_logger(__name__)

MAX_PAGES = 50


class CostExplorerSource(CostReportSource):
    """
    AWS Cost Explorer data source.

    Period ends are inclusive; Cost Explorer treats ``TimePeriod.End`` as
    exclusive, so one day is added when building the request.
    """

    def __init__(self, client: Any = None, metric: Optional[str] = None):
        self._client = client
        if metric is None:
            from cost_insights.config.settings import get_settings
            metric = get_settings().cost_metric
        self.metric = metric

    def get_name(self) -> str:
        return "cost_explorer"

    @property
    def client(self) -> Any:
        """Lazily created Cost Explorer client (only available in us-east-1)"""
        if self._client is None:
            self._client = create_aws_client(
                AwsService.COST_EXPLORER,
                region_name=COST_EXPLORER_REGION,
                config=get_default_retry_config(),
            )
        return self._client

    def build_request(
        self,
        period: Period,
        granularity: str = Granularity.MONTHLY,
        group_by: str = CostDimension.SERVICE,
    ) -> Dict[str, Any]:
        return {
            "TimePeriod": {
                "Start": period.start.isoformat(),
                "End": (period.end + timedelta(days=1)).isoformat(),
            },
            "Granularity": granularity,
            "Metrics": [self.metric],
            "GroupBy": [{"Type": "DIMENSION", "Key": group_by}],
        }

    def fetch(
        self,
        period: Period,
        granularity: str = Granularity.MONTHLY,
        group_by: str = CostDimension.SERVICE,
    ) -> Dict[str, Any]:
        """Fetch all pages of the report for ``period`` and merge them."""
        start_time = time.time()
        request = self.build_request(period, granularity, group_by)

        logger.info(
            "cost_explorer_fetch_starting",
            start=request["TimePeriod"]["Start"],
            end=request["TimePeriod"]["End"],
            granularity=granularity,
            group_by=group_by,
            metric=self.metric,
        )

        pages: List[Dict[str, Any]] = []
        token: Optional[str] = None
        while True:
            kwargs = dict(request)
            if token:
                kwargs["NextPageToken"] = token
            response = self.client.get_cost_and_usage(**kwargs)
            if not isinstance(response, dict):
                raise SourceError(
                    f"Unexpected Cost Explorer response type: {type(response).__name__}",
                    source=self.get_name(),
                )
            pages.append(response)
            token = response.get("NextPageToken")
            if not token:
                break
            if len(pages) >= MAX_PAGES:
                raise SourceError(
                    f"Cost Explorer pagination exceeded {MAX_PAGES} pages",
                    source=self.get_name(),
                )

        try:
            report = merge_pages(pages)
        except (AttributeError, TypeError) as e:
            raise SourceError(
                f"Malformed Cost Explorer response: {e}",
                source=self.get_name(),
                original_error=e,
            ) from e

        logger.info(
            "cost_explorer_fetch_completed",
            pages=len(pages),
            buckets=len(report["ResultsByTime"]),
            execution_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return report


def merge_pages(pages: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge paginated GetCostAndUsage responses.

    Later pages repeat the same time buckets with further groups; groups are
    appended to their bucket and the first non-empty ``Total`` is kept.
    """
    buckets: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
    for page in pages:
        for result in page.get("ResultsByTime") or []:
            time_period = result.get("TimePeriod") or {}
            key = (time_period.get("Start"), time_period.get("End"))
            bucket = buckets.get(key)
            if bucket is None:
                bucket = {
                    "TimePeriod": time_period,
                    "Total": dict(result.get("Total") or {}),
                    "Groups": [],
                    "Estimated": result.get("Estimated", False),
                }
                buckets[key] = bucket
            elif not bucket["Total"] and result.get("Total"):
                bucket["Total"] = dict(result["Total"])
            bucket["Groups"].extend(result.get("Groups") or [])

    merged: Dict[str, Any] = {"ResultsByTime": list(buckets.values())}
    if pages and pages[0].get("GroupDefinitions"):
        merged["GroupDefinitions"] = pages[0]["GroupDefinitions"]
    return merged
