"""
AWS Constants

Centralizes AWS-related string literals used by the cost fetch layer.

Usage:
    from cost_insights.utils.aws_constants import (
        AwsService,
        CostMetric,
        COST_EXPLORER_REGION,
    )
"""


# =============================================================================
# AWS SERVICE NAMES
# =============================================================================

class AwsService:
    """
    AWS service name constants for boto3 client creation.

    Usage:
        from cost_insights.utils.aws_constants import AwsService
        ce = create_aws_client(AwsService.COST_EXPLORER)
    """
    COST_EXPLORER = "ce"


# =============================================================================
# AWS REGIONS
# =============================================================================

class AwsRegion:
    """AWS region identifiers referenced by this package."""
    US_EAST_1 = "us-east-1"


# Cost Explorer API is ONLY available in us-east-1
COST_EXPLORER_REGION = AwsRegion.US_EAST_1

# Default region used when settings are not available
DEFAULT_AWS_REGION = AwsRegion.US_EAST_1


# =============================================================================
# COST EXPLORER VOCABULARY
# =============================================================================

class CostMetric:
    """Cost Explorer metric names accepted by GetCostAndUsage."""
    UNBLENDED_COST = "UnblendedCost"
    BLENDED_COST = "BlendedCost"
    AMORTIZED_COST = "AmortizedCost"
    NET_UNBLENDED_COST = "NetUnblendedCost"


class CostDimension:
    """Cost Explorer GroupBy dimension keys."""
    SERVICE = "SERVICE"
    LINKED_ACCOUNT = "LINKED_ACCOUNT"
    REGION = "REGION"
    USAGE_TYPE = "USAGE_TYPE"


class Granularity:
    """Cost Explorer time bucketing."""
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"


# Cost Explorer service names used by the optimization hint table
class CostExplorerServiceName:
    EC2_COMPUTE = "Amazon Elastic Compute Cloud - Compute"
    S3 = "Amazon Simple Storage Service"
    RDS = "Amazon Relational Database Service"


DEFAULT_CURRENCY = "USD"
