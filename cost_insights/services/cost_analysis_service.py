"""
Cost Analysis Service - entry point for natural-language cost queries

Resolves the query into a period, fetches the period and its mirror-previous
period concurrently, reconciles both reports and returns a flattened
comparison payload. Failures are classified and returned, never raised.
"""
import asyncio
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from cost_insights.config.settings import Settings, get_settings
from cost_insights.finops.cost_comparison import compare_cost_reports
from cost_insights.finops.cost_normalizer import normalize_cost_report
from cost_insights.finops.cost_summary import generate_optimization_hints, with_summary
from cost_insights.finops.period_resolver import Period, PeriodResolver
from cost_insights.services.data_source import CostReportSource
from cost_insights.utils.aws_constants import Granularity
from cost_insights.utils.errors import classify_aws_error, client_error_details, log_structured_error
from cost_insights.utils.logging import LoggerPort, get_logger, setup_logging


class CostAnalysisService:
    """
    Orchestrates period resolution, the two fetches and the comparison.

    Each call to ``analyze`` is independent; the service keeps no per-request
    state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        source: Optional[CostReportSource] = None,
        settings: Optional[Settings] = None,
        logger: Optional[LoggerPort] = None,
        resolver: Optional[PeriodResolver] = None,
    ):
        self.settings = settings or get_settings()
        self.logger = get_logger(__name__, logger)
        self.resolver = resolver or PeriodResolver(self.settings.timezone, logger=logger)
        self._source = source

    @property
    def source(self) -> CostReportSource:
        if self._source is None:
            from cost_insights.services.cost_explorer_source import CostExplorerSource
            self._source = CostExplorerSource(metric=self.settings.cost_metric)
        return self._source

    @property
    def metric(self) -> str:
        return getattr(self.source, "metric", None) or self.settings.cost_metric

    async def _fetch_both(self, period: Period, previous: Period):
        group_by = self.settings.group_by_dimension
        return await asyncio.gather(
            asyncio.to_thread(self.source.fetch, period, Granularity.MONTHLY, group_by),
            asyncio.to_thread(self.source.fetch, previous, Granularity.MONTHLY, group_by),
        )

    async def analyze(
        self,
        user_query: str,
        now: Optional[Union[datetime, date]] = None,
    ) -> Dict[str, Any]:
        """
        Analyze costs for a natural-language query.

        Args:
            user_query: e.g. "What's this month's AWS cost?"
            now: Reference instant for period resolution (defaults to now)

        Returns:
            ``{"success": True, "data": {...}}`` or a failure dict with
            ``error``, ``error_type``, ``suggestions`` and ``retryable``
        """
        period = self.resolver.resolve(user_query, now)
        previous = period.previous()

        self.logger.info(
            "cost_analysis_started",
            query=user_query,
            period=period.to_dict(),
            previous_period=previous.to_dict(),
        )

        try:
            current_raw, previous_raw = await self._fetch_both(period, previous)

            current = normalize_cost_report(current_raw, metric=self.metric)
            prior = normalize_cost_report(previous_raw, metric=self.metric)

            result = compare_cost_reports(
                current,
                prior,
                period,
                trend_threshold=self.settings.trend_threshold,
            )
            result = with_summary(result, top_n=self.settings.summary_top_n)

            hints = generate_optimization_hints(
                result.dimensions,
                top_n=self.settings.hint_top_n,
                min_cost=self.settings.hint_min_cost,
                review_threshold=self.settings.hint_review_threshold,
                currency=result.currency,
            )
        except Exception as e:
            log_structured_error(
                "cost_analysis",
                e,
                query=user_query,
                period=period.to_dict(),
            )
            error_response = classify_aws_error(e)
            code, upstream_message = client_error_details(e)
            if code == "ValidationException":
                error_response = error_response.model_copy(
                    update={"error": f"AWS Cost Explorer data limitation: {upstream_message}"}
                )
            self.logger.warning(
                "cost_analysis_failed",
                error_type=error_response.error_type,
                retryable=error_response.retryable,
            )
            return error_response.model_dump()

        self.logger.info(
            "cost_analysis_completed",
            total=str(result.total_amount),
            currency=result.currency,
            trend=result.trend.value,
            month_over_month=(
                str(result.month_over_month_change)
                if result.month_over_month_change is not None else None
            ),
        )

        data = result.to_payload()
        data["previous_period"] = previous.to_dict()
        data["optimization_hints"] = hints
        return {"success": True, "data": data}


async def analyze_costs(
    user_query: str,
    source: Optional[CostReportSource] = None,
    now: Optional[Union[datetime, date]] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """Analyze costs for ``user_query`` with a one-off service instance."""
    service = CostAnalysisService(source=source, settings=settings)
    return await service.analyze(user_query, now)


def run_cost_analysis(user_query: str, **kwargs: Any) -> Dict[str, Any]:
    """
    Blocking wrapper around ``analyze_costs`` for synchronous callers.

    Configures logging from ``log_level`` / ``log_json`` before running.
    """
    settings = kwargs.get("settings") or get_settings()
    setup_logging(settings.log_level, settings.log_json)
    return asyncio.run(analyze_costs(user_query, **kwargs))
