#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
design system service. The resilience core never reads these settings
itself: the container and CLI translate them into CircuitBreakerConfig and
DataManagerConfig objects at assembly time.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Grouped views (settings.data, settings.circuit_breaker, ...) for callers

Author: System Architect
Date: 2025-12-05
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _validate_log_level(v: str) -> str:
    if v.upper() not in VALID_LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}")
    return v.upper()


class DataSettings(BaseSettings):
    """
    Dataset location, hot-reload and cache settings.
    """

    DATA_PATH: str = Field(default="./data", description="Dataset directory (also the watch root)")
    ENABLE_FILE_WATCHING: bool = Field(default=True, description="Watch dataset files for changes")
    CACHE_TIMEOUT: float = Field(default=300.0, gt=0, description="Advisory cache TTL in seconds")
    REQUIRE_ALL_DATASETS: bool = Field(
        default=False, description="Require all three datasets to be non-empty for a load to succeed"
    )
    WATCH_FORCE_POLLING: bool = Field(default=False, description="Poll instead of OS notifications")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CircuitBreakerSettings(BaseSettings):
    """
    Circuit breaker configuration for the query facades.

    One breaker per facade, all sharing these parameters.
    """

    CB_FAILURE_THRESHOLD: int = Field(default=5, ge=1, description="Failures in window before opening")
    CB_RECOVERY_TIMEOUT: float = Field(default=30.0, gt=0, description="Seconds before probing recovery")
    CB_REQUEST_TIMEOUT: float = Field(default=5.0, gt=0, description="Per-call timeout in seconds")
    CB_MONITORING_PERIOD: float = Field(default=60.0, gt=0, description="Rolling window width in seconds")
    CB_HALF_OPEN_MAX_CALLS: int = Field(default=3, ge=1, description="Half-open admissions and close threshold")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ToolSettings(BaseSettings):
    """Tool dispatcher settings."""

    TOOL_RETRY_ATTEMPTS: int = Field(default=1, ge=1, description="Attempts for retryable tool errors")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="console", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        return _validate_log_level(v)

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.
    """

    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Design System MCP Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")

    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    API_BASE_PATH: str = Field(default="/api/v1", description="Prefix for all API routes")

    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from design_system.core.config.settings import get_settings

        settings = get_settings()
        data_path = settings.data.DATA_PATH
        threshold = settings.circuit_breaker.CB_FAILURE_THRESHOLD
    """

    # Data settings
    DATA_PATH: str = Field(default="./data", description="Dataset directory (also the watch root)")
    ENABLE_FILE_WATCHING: bool = Field(default=True, description="Watch dataset files for changes")
    CACHE_TIMEOUT: float = Field(default=300.0, gt=0, description="Advisory cache TTL in seconds")
    REQUIRE_ALL_DATASETS: bool = Field(
        default=False, description="Require all three datasets to be non-empty for a load to succeed"
    )
    WATCH_FORCE_POLLING: bool = Field(default=False, description="Poll instead of OS notifications")

    # Circuit Breaker settings
    CB_FAILURE_THRESHOLD: int = Field(default=5, ge=1, description="Failures in window before opening")
    CB_RECOVERY_TIMEOUT: float = Field(default=30.0, gt=0, description="Seconds before probing recovery")
    CB_REQUEST_TIMEOUT: float = Field(default=5.0, gt=0, description="Per-call timeout in seconds")
    CB_MONITORING_PERIOD: float = Field(default=60.0, gt=0, description="Rolling window width in seconds")
    CB_HALF_OPEN_MAX_CALLS: int = Field(default=3, ge=1, description="Half-open admissions and close threshold")

    # Tool settings
    TOOL_RETRY_ATTEMPTS: int = Field(default=1, ge=1, description="Attempts for retryable tool errors")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="console", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Design System MCP Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    API_BASE_PATH: str = Field(default="/api/v1", description="Prefix for all API routes")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        return _validate_log_level(v)

    # Grouped views
    @property
    def data(self) -> DataSettings:
        """Get data settings."""
        return DataSettings(
            DATA_PATH=self.DATA_PATH,
            ENABLE_FILE_WATCHING=self.ENABLE_FILE_WATCHING,
            CACHE_TIMEOUT=self.CACHE_TIMEOUT,
            REQUIRE_ALL_DATASETS=self.REQUIRE_ALL_DATASETS,
            WATCH_FORCE_POLLING=self.WATCH_FORCE_POLLING,
        )

    @property
    def circuit_breaker(self) -> CircuitBreakerSettings:
        """Get circuit breaker settings."""
        return CircuitBreakerSettings(
            CB_FAILURE_THRESHOLD=self.CB_FAILURE_THRESHOLD,
            CB_RECOVERY_TIMEOUT=self.CB_RECOVERY_TIMEOUT,
            CB_REQUEST_TIMEOUT=self.CB_REQUEST_TIMEOUT,
            CB_MONITORING_PERIOD=self.CB_MONITORING_PERIOD,
            CB_HALF_OPEN_MAX_CALLS=self.CB_HALF_OPEN_MAX_CALLS,
        )

    @property
    def tools(self) -> ToolSettings:
        """Get tool dispatcher settings."""
        return ToolSettings(TOOL_RETRY_ATTEMPTS=self.TOOL_RETRY_ATTEMPTS)

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
            API_BASE_PATH=self.API_BASE_PATH,
            CORS_ORIGINS=self.CORS_ORIGINS,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
