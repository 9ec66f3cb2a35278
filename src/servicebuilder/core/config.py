from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_BUILDER_",
        env_file=".env",
        extra="ignore",
    )

    app_env: str = Field(default="dev")
    log_level: str = Field(default="INFO")

    clients_config_path: str = Field(
        default="config/clients.yaml",
        description="Client configuration file (YAML or XML)",
    )

    cache_dir: str | None = Field(
        default=None,
        description="Directory for the persistent resolution cache (unset disables caching)",
    )
    cache_ttl: int = Field(
        default=86400,
        description="Time-to-live in seconds for cached entries",
    )


settings = Settings()
