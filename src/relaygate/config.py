"""Configuration management for Relaygate."""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Origin gate
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["example.com"],
        description="Origins allowed to embed the relay",
    )

    # Relay behaviour
    max_redirects: int = Field(
        5, description="Redirects followed when followRedirect=true"
    )
    upstream_timeout: float = Field(
        30.0, description="Upstream connect/read timeout in seconds"
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )
    debug: bool = Field(False, description="Enable debug mode")

    # API Configuration
    api_host: str = Field("0.0.0.0", description="API host")
    api_port: int = Field(
        3000,
        validation_alias=AliasChoices("api_port", "port"),
        description="API port",
    )


# Global settings instance
settings = Settings()
