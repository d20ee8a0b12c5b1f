"""
Reporting Engine Configuration

Business thresholds used by the classifiers (aging buckets, stock warning
multiplier, compliance window) live here so they can be tuned per deployment
through environment variables instead of being edited in code.
"""

from functools import lru_cache
from typing import List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opsreport.classification.classifiers import (
    DEFAULT_AGING_BOUNDARIES,
    DEFAULT_CREDIT_PERIOD_DAYS,
    DEFAULT_STOCK_WARNING_MULTIPLIER,
    DEFAULT_WARNING_WINDOW_DAYS,
)


class ReportingSettings(BaseSettings):
    """Reporting thresholds and export options"""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    aging_boundaries: List[int] = Field(
        default=list(DEFAULT_AGING_BOUNDARIES),
        description="Upper bounds (inclusive) of the Current, 31-60 and 61-90 aging buckets",
    )
    stock_warning_multiplier: float = Field(
        default=DEFAULT_STOCK_WARNING_MULTIPLIER,
        description="Stock at or below minimum x multiplier is flagged as Warning",
    )
    compliance_warning_days: int = Field(
        default=DEFAULT_WARNING_WINDOW_DAYS,
        description="Days before expiry a document is reported as expiring soon",
    )
    default_credit_period_days: int = Field(
        default=DEFAULT_CREDIT_PERIOD_DAYS,
        description="Credit period applied to invoices without one",
    )
    top_n: int = Field(default=5, description="Rows shown in top-N views")
    export_delimiter: str = Field(default=",", description="Delimiter for exported text")

    @field_validator("aging_boundaries")
    @classmethod
    def validate_boundaries(cls, v: List[int]) -> List[int]:
        """Boundaries must be three strictly increasing non-negative day counts"""
        if len(v) != 3:
            raise ValueError("aging_boundaries needs exactly three values")
        if v[0] < 0 or not (v[0] < v[1] < v[2]):
            raise ValueError("aging_boundaries must be non-negative and strictly increasing")
        return v

    @field_validator("stock_warning_multiplier")
    @classmethod
    def validate_multiplier(cls, v: float) -> float:
        if v < 1.0:
            raise ValueError("stock_warning_multiplier must be at least 1.0")
        return v

    @field_validator("compliance_warning_days", "default_credit_period_days", "top_n")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must not be negative")
        return v

    @field_validator("export_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        if len(v) != 1 or v in ('"', "\n", "\r"):
            raise ValueError("export_delimiter must be a single non-quote character")
        return v

    @property
    def aging_bounds(self) -> Tuple[int, int, int]:
        """Aging boundaries as the tuple the classifier expects"""
        return tuple(self.aging_boundaries)


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseSettings):
    """Application settings with the reporting and monitoring sections nested"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="opsreport", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """True in production, where API docs are hidden"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """Settings are read from the environment once per process"""
    return Settings()
