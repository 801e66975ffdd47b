"""Application configuration via pydantic-settings.

Settings are loaded from environment variables (.env file), organized into
logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RulesSettings(BaseSettings):
    """Rule engine knobs that follow regulatory deadlines."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_prefix="RULES_")

    early_withdrawal_cutoff: date = Field(
        default=date(2024, 1, 1),
        description="First offer start date allowed to declare early-withdrawal charges (condition 05)",
    )
    self_check_on_startup: bool = Field(
        default=True,
        description="Run the static rule-set consistency check when the app starts",
    )


class ExportSettings(BaseSettings):
    """XML export settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_prefix="EXPORT_")

    default_action: str = Field(default="INSERIMENTO", description="Action segment of the XML file name")
    xml_pretty: bool = Field(default=True, description="Indent the generated XML")


class ApiSettings(BaseSettings):
    """HTTP surface used by the wizard UI."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_prefix="API_")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated origins allowed to call the API",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.rules.early_withdrawal_cutoff
        settings.export.default_action
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    rules: RulesSettings = Field(default_factory=RulesSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton: import this wherever settings are needed.
settings = Settings()
