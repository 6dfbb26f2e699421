"""
Services package for Cost Insights
Contains the billing data sources and the cost analysis orchestration
"""

from cost_insights.services.data_source import CostReportSource, SourceError
from cost_insights.services.cost_analysis_service import (
    CostAnalysisService,
    analyze_costs,
    run_cost_analysis,
)

__all__ = [
    'CostReportSource',
    'SourceError',
    'CostAnalysisService',
    'analyze_costs',
    'run_cost_analysis',
]
