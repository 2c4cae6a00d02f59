"""
Application settings using Pydantic.

Provides environment-based configuration loading with CHAINPLAN_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHAINPLAN_",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # RPC endpoint overrides (applied to whichever network is targeted)
    rpc_url: str | None = None
    infura_api_key: str | None = None

    # RPC client behaviour
    rpc_timeout: float = 30.0
    rpc_max_retries: int = 3

    # Confirmation polling
    confirmations: int = 1
    confirmation_timeout: float = 300.0
    poll_interval: float = 2.0

    # Filesystem layout
    deployments_dir: str = "deployments"
    artifacts_dir: str = "artifacts"

    # Networks file (overrides the .chainplan/networks.yaml search)
    networks_file: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
