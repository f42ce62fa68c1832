"""crashlogs configuration management."""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "crashlogs"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:4200"]

    # Crash report locations; system_root prefixes the system-wide directory
    system_root: str = "/"
    diagnostic_reports_path: str = "/Library/Logs/DiagnosticReports"
    mobile_diagnostic_reports_path: str = "/Library/Logs/CrashReporter/MobileDevice"

    # File selection
    crash_report_suffix: str = ".crash"
    excluded_name_patterns: list[str] = ["LowBattery"]  # Known noise, e.g. mobile battery events

    @field_validator("cors_origins", "excluded_name_patterns", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
