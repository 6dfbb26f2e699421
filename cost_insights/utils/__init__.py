"""Utilities package for Cost Insights"""

from cost_insights.utils.errors import AWSErrorType, classify_aws_error, log_structured_error
from cost_insights.utils.logging import setup_logging

__all__ = ['AWSErrorType', 'classify_aws_error', 'log_structured_error', 'setup_logging']
