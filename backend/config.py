"""
Data Profiling & Insight Engine - Configuration

Application configuration using Pydantic Settings.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Caching configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    enabled: bool = Field(default=True, description="Enable caching")
    max_size: int = Field(default=128, description="LRU cache max size")
    ttl_seconds: int = Field(default=3600, description="Cache TTL in seconds")


class AnalysisSettings(BaseSettings):
    """Profiling engine configuration."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    # Column statistics
    numeric_ratio_threshold: float = Field(
        default=0.8,
        description="Share of numeric values above which a column is profiled as numeric"
    )
    stats_top_values: int = Field(
        default=5,
        description="Top values reported per categorical column"
    )
    compact_top_values: int = Field(
        default=3,
        description="Top values shown in the compact statistics panel"
    )

    # Distributions
    max_histogram_bins: int = Field(
        default=20,
        description="Upper bound on histogram bins"
    )
    category_top_n: int = Field(
        default=15,
        description="Categories kept in a categorical distribution"
    )
    breakdown_columns: int = Field(
        default=2,
        description="Categorical columns included in the category breakdown"
    )
    breakdown_top_n: int = Field(
        default=6,
        description="Categories per column in the category breakdown"
    )

    # Correlation
    correlation_max_points: int = Field(
        default=1000,
        description="Max scatter points returned for a column pair"
    )

    # Outlier Detection
    outlier_iqr_multiplier: float = Field(
        default=1.5,
        description="IQR multiplier for outlier detection"
    )
    outlier_min_values: int = Field(
        default=10,
        description="Columns need more than this many values for outlier detection"
    )
    outlier_rate_threshold: float = Field(
        default=0.05,
        description="Outlier share above which an insight is reported"
    )

    # Insights
    completeness_threshold: float = Field(
        default=90.0,
        description="Completeness percentage below which data quality is flagged"
    )

    # Preview
    preview_page_size: int = Field(
        default=10,
        description="Rows per preview page"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Data Profiling & Insight Engine"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # File Upload
    max_file_size_mb: int = Field(
        default=50,
        description="Maximum file size in MB"
    )

    # Session
    session_ttl_hours: int = Field(
        default=24,
        description="Session time-to-live in hours"
    )

    # Logging
    log_level: str = Field(default="DEBUG", description="Minimum log level")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_to_file: bool = Field(default=True, description="Write rotating log files")

    # Nested settings
    cache: CacheSettings = Field(default_factory=CacheSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
