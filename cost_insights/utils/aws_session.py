"""
AWS Session Factory

Provides AWS session creation using IAM roles and the default credential chain.
Credentials are never passed explicitly; boto3 resolves them in order:
1. IAM role credentials (EC2 instance profile, ECS task role, Lambda execution role)
2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)
3. Shared credentials file (~/.aws/credentials)
4. AWS config file (~/.aws/config)
"""

from typing import Optional, Any

import boto3
from botocore.config import Config
import structlog

from cost_insights.utils.aws_constants import DEFAULT_AWS_REGION

logger = structlog.get_logger(__name__)


def create_aws_session(
    region_name: Optional[str] = None,
    profile_name: Optional[str] = None,
) -> boto3.Session:
    """
    Create an AWS session using the default credential chain.

    Args:
        region_name: AWS region (defaults to settings.aws_region)
        profile_name: Optional AWS profile name (defaults to settings.aws_profile)

    Returns:
        boto3.Session configured with the default credential chain
    """
    if region_name is None or profile_name is None:
        try:
            from cost_insights.config.settings import get_settings
            settings = get_settings()
            region_name = region_name or settings.aws_region
            profile_name = profile_name or settings.aws_profile
        except Exception as e:
            logger.warning("aws_settings_unavailable", error=str(e))
            region_name = region_name or DEFAULT_AWS_REGION

    session_kwargs = {"region_name": region_name}
    if profile_name:
        session_kwargs["profile_name"] = profile_name

    session = boto3.Session(**session_kwargs)

    logger.debug(
        "aws_session_created",
        region=region_name,
        profile=profile_name,
        credential_method="default_chain"
    )

    return session


def create_aws_client(
    service_name: str,
    region_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> Any:
    """
    Create an AWS service client using the default credential chain.

    Args:
        service_name: AWS service name (e.g., 'ce', 'sts')
        region_name: AWS region (defaults to settings.aws_region)
        config: Optional botocore Config for retry/timeout settings

    Example:
        ce = create_aws_client('ce', region_name=COST_EXPLORER_REGION)
    """
    session = create_aws_session(region_name=region_name)

    client_kwargs = {}
    if config:
        client_kwargs["config"] = config

    return session.client(service_name, **client_kwargs)


def get_default_retry_config(
    max_attempts: Optional[int] = None,
    mode: Optional[str] = None,
    connect_timeout: Optional[int] = None,
    read_timeout: Optional[int] = None,
) -> Config:
    """
    Get a standard botocore Config with retry and timeout settings.

    Unset arguments are taken from settings, falling back to botocore-friendly
    defaults when settings cannot be loaded.
    """
    try:
        from cost_insights.config.settings import get_settings
        settings = get_settings()
        region = settings.aws_region
        max_attempts = max_attempts or settings.aws_max_attempts
        mode = mode or settings.aws_retry_mode
        connect_timeout = connect_timeout or settings.aws_connect_timeout
        read_timeout = read_timeout or settings.aws_read_timeout
    except Exception as e:
        logger.warning("aws_settings_unavailable", error=str(e))
        region = DEFAULT_AWS_REGION
        max_attempts = max_attempts or 3
        mode = mode or "adaptive"
        connect_timeout = connect_timeout or 5
        read_timeout = read_timeout or 30

    return Config(
        region_name=region,
        retries={
            "max_attempts": max_attempts,
            "mode": mode,
        },
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )
