"""
Centralized Error Handling Utilities

Maps opaque AWS faults into a bounded taxonomy with user-facing guidance.
Classification is a best-effort substring match against known provider
error signatures; anything unrecognised falls through to UNKNOWN.
"""

import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

import structlog
from botocore.exceptions import ClientError

from cost_insights.models.cost_schemas import ErrorResponse

logger = structlog.get_logger(__name__)


class AWSErrorType(str, Enum):
    """Classification of AWS API failures"""
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    THROTTLING = "THROTTLING"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ErrorGuidance:
    """User-facing explanation and remediation for one error class"""
    error_type: AWSErrorType
    message: str
    suggestions: Tuple[str, ...]
    retryable: bool


# Ordered: the first rule with a matching signature wins.
ERROR_RULES: List[Tuple[Tuple[str, ...], ErrorGuidance]] = [
    (
        (
            "The security token included in the request is invalid",
            "SignatureDoesNotMatch",
            "InvalidAccessKeyId",
        ),
        ErrorGuidance(
            AWSErrorType.AUTHENTICATION,
            "AWS credentials are invalid. Please check your access key and secret key.",
            (
                "1. Check AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY in your environment",
                "2. Verify access key is valid in AWS Console",
                "3. Ensure IAM user is in active status",
            ),
            False,
        ),
    ),
    (
        ("UnauthorizedOperation", "AccessDenied", "Forbidden"),
        ErrorGuidance(
            AWSErrorType.AUTHORIZATION,
            "Insufficient access permissions to AWS Cost Explorer.",
            (
                "1. Grant Cost Explorer permissions to IAM user",
                "2. Required permissions: ce:GetCostAndUsage, ce:GetDimensionValues",
                "3. Ask administrator to review IAM policies",
            ),
            False,
        ),
    ),
    (
        ("Throttling", "RequestLimitExceeded", "TooManyRequests"),
        ErrorGuidance(
            AWSErrorType.THROTTLING,
            "AWS API rate limit reached. Please wait a moment and try again.",
            (
                "1. Wait 5-10 minutes before retrying",
                "2. Avoid consecutive rapid executions",
                "3. Contact AWS support for limit increase if needed",
            ),
            True,
        ),
    ),
    (
        ("ValidationException", "InvalidParameter", "invalid date"),
        ErrorGuidance(
            AWSErrorType.INVALID_PARAMETER,
            "Request parameters are invalid. Please check the requested date range.",
            (
                "1. Ensure date format is YYYY-MM-DD",
                "2. Verify start date is before end date",
                "3. Specify period within the last 13 months",
            ),
            False,
        ),
    ),
    (
        ("You haven't enabled historical data", "historical data beyond"),
        ErrorGuidance(
            AWSErrorType.INVALID_PARAMETER,
            "Cost Explorer historical data is not enabled or data for the specified period does not exist.",
            (
                "1. Enable data in AWS Billing and Cost Management (takes 24 hours)",
                "2. Try retrieving data for a shorter period",
                "3. Manually check data existence in Cost Explorer",
            ),
            False,
        ),
    ),
    (
        ("ServiceUnavailable", "InternalError", "500"),
        ErrorGuidance(
            AWSErrorType.SERVICE_UNAVAILABLE,
            "AWS Cost Explorer service is temporarily unavailable.",
            (
                "1. Retry after waiting a moment",
                "2. Check AWS Service Health Dashboard",
                "3. Contact AWS support if the problem persists",
            ),
            True,
        ),
    ),
    (
        ("LimitExceeded", "exceeded your current quota"),
        ErrorGuidance(
            AWSErrorType.QUOTA_EXCEEDED,
            "AWS account usage limit exceeded.",
            (
                "1. Check Usage Limits in billing settings",
                "2. Increase limits as needed",
                "3. Contact AWS support for limit increase",
            ),
            False,
        ),
    ),
]

UNKNOWN_SUGGESTIONS: Tuple[str, ...] = (
    "1. Retry after waiting a moment",
    "2. Check environment variable settings",
    "3. Contact administrator if the problem persists",
)


def _error_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


def client_error_details(error: Any) -> Tuple[Optional[str], str]:
    """Return the AWS error code (None unless a ClientError) and the upstream message."""
    if isinstance(error, ClientError):
        details = error.response.get("Error") or {}
        return details.get("Code"), details.get("Message") or _error_message(error)
    return None, _error_message(error)


def match_error_rule(message: str) -> Optional[ErrorGuidance]:
    """Return the guidance of the first rule whose signature occurs in message."""
    for patterns, guidance in ERROR_RULES:
        if any(pattern in message for pattern in patterns):
            return guidance
    return None


def create_error_response(
    error_type: AWSErrorType,
    message: str,
    suggestions: Optional[List[str]] = None,
    retryable: bool = False,
) -> ErrorResponse:
    """
    Create a standardized error response.

    Args:
        error_type: Classified error type
        message: User-facing explanation
        suggestions: Ordered remediation steps
        retryable: Whether retrying the same request may succeed
    """
    return ErrorResponse(
        error=message,
        error_type=error_type.value,
        suggestions=list(suggestions or []),
        retryable=retryable,
    )


def classify_aws_error(error: Any) -> ErrorResponse:
    """
    Analyze an AWS error and generate the matching structured error response.

    Args:
        error: Caught exception (or any object with a meaningful str())

    Returns:
        ErrorResponse with type, explanation, suggestions and retryable flag
    """
    if error is None:
        return create_error_response(AWSErrorType.UNKNOWN, "Unknown error occurred")

    message = _error_message(error)
    guidance = match_error_rule(message)

    if guidance is None:
        return create_error_response(
            AWSErrorType.UNKNOWN,
            f"Unexpected error occurred: {message}",
            list(UNKNOWN_SUGGESTIONS),
            True,
        )

    return create_error_response(
        guidance.error_type,
        guidance.message,
        list(guidance.suggestions),
        guidance.retryable,
    )


def log_structured_error(context: str, error: Any, **additional_info: Any) -> None:
    """
    Log an error with its name, message and traceback in structured form.

    Args:
        context: Where the error occurred (e.g. "cost_fetch")
        error: The caught error
        additional_info: Extra key/value context
    """
    if isinstance(error, BaseException):
        name = type(error).__name__
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    else:
        name = "UnknownError"
        stack = None

    logger.error(
        "structured_error",
        timestamp=datetime.now(timezone.utc).isoformat(),
        context=context,
        error_name=name,
        error_message=_error_message(error),
        stack=stack,
        **additional_info,
    )
