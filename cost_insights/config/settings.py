"""
Application settings and configuration management
Uses Pydantic Settings for environment variable handling and validation
"""

from functools import lru_cache
import re
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource

from cost_insights.utils.aws_constants import (
    CostDimension,
    CostMetric,
    DEFAULT_AWS_REGION,
)

_REGION_PATTERN = re.compile(r"^[a-z]{2}(-gov)?-[a-z]+-[0-9]$")


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Render logs as JSON instead of console output")

    # AWS
    aws_region: str = Field(default=DEFAULT_AWS_REGION, description="Default AWS region for sessions")
    aws_profile: Optional[str] = Field(default=None, description="Named profile for local development")
    aws_max_attempts: int = Field(default=3, ge=1, description="botocore retry attempts for Cost Explorer calls")
    aws_retry_mode: str = Field(default="adaptive", description="botocore retry mode (legacy, standard, adaptive)")
    aws_connect_timeout: int = Field(default=5, ge=1, description="Connect timeout in seconds")
    aws_read_timeout: int = Field(default=30, ge=1, description="Read timeout in seconds")

    # Cost Explorer query shape
    cost_metric: str = Field(default=CostMetric.UNBLENDED_COST, description="Metric requested from GetCostAndUsage")
    group_by_dimension: str = Field(default=CostDimension.SERVICE, description="Dimension used to break costs down")
    timezone: str = Field(default="UTC", description="Timezone used as the reference clock for period resolution")

    # Analysis
    trend_threshold: float = Field(
        default=5.0,
        ge=0,
        description="Absolute percentage change below which a trend is reported as stable"
    )
    summary_top_n: int = Field(default=5, ge=1, description="Dimensions listed in the summary text")
    hint_top_n: int = Field(default=5, ge=1, description="Dimensions inspected for optimization hints")
    hint_min_cost: float = Field(default=100.0, ge=0, description="Minimum dimension cost to be considered for hints")
    hint_review_threshold: float = Field(
        default=500.0,
        ge=0,
        description="Cost above which an unlisted dimension gets a generic review hint"
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_parse_none_str="null"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to exclude .env file loading"""
        return init_settings, env_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("aws_region")
    @classmethod
    def validate_aws_region(cls, v):
        if not _REGION_PATTERN.match(v):
            raise ValueError('AWS region must be in format like "us-east-1"')
        return v

    @field_validator("aws_retry_mode")
    @classmethod
    def validate_retry_mode(cls, v):
        valid_modes = ["legacy", "standard", "adaptive"]
        if v.lower() not in valid_modes:
            raise ValueError(f"Retry mode must be one of {valid_modes}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings
    Uses lru_cache to avoid reading environment variables multiple times
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache. Used primarily for testing.
    After calling this, the next call to get_settings() will
    create a new Settings instance with fresh environment variables.
    """
    get_settings.cache_clear()
