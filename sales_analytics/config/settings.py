"""
Sales Analytics Report Engine
Centralized Configuration Management

Pydantic settings with environment variable support for the report engine,
the record loader and logging.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    """Report Engine Configuration"""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    # Status values as they appear in the order table
    completed_status: str = Field(default="Completed", description="Order status counted by every report")
    delivered_status: str = Field(default="Delivered", description="Delivery status counted as delivered")
    late_flag: str = Field(default="Late", description="Late-delivery flag value counted as late")

    # Report thresholds
    min_shipments: int = Field(default=100, ge=0, description="Minimum shipments per logistics group")
    top_n_per_region: int = Field(default=10, ge=1, description="Rows kept per region in the category ranking")

    # Execution
    max_workers: int = Field(default=4, ge=1, description="Worker threads used to compute reports")
    output_path: str = Field(default="./data/reports", description="Directory for written reports")
    output_format: str = Field(default="parquet", description="Report file format: parquet or csv")

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format"""
        allowed = ["parquet", "csv"]
        if v.lower() not in allowed:
            raise ValueError(f"Output format must be one of: {allowed}")
        return v.lower()


class DataSettings(BaseSettings):
    """Order Source Configuration"""

    model_config = SettingsConfigDict(env_prefix="DATA_")

    source_path: str = Field(default="./data/raw/amazon_sales.csv", description="Order table source file")
    date_formats: List[str] = Field(
        default=["%Y-%m-%d", "%m/%d/%Y", "%d-%m-%Y", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"],
        description="Order date formats tried in order",
    )
    null_values: List[str] = Field(
        default=["", "NULL", "null", "None", "NA", "N/A"],
        description="Source tokens read as null",
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")
    log_file: Optional[str] = Field(default=None, description="Log file path")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="sales-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    reports: ReportSettings = Field(default_factory=ReportSettings)
    data: DataSettings = Field(default_factory=DataSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Convenience function for accessing settings
settings = get_settings()
