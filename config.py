"""Configuration management for the link registry."""

from typing import Dict, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL; the in-memory store is used when unset"
    )

    redis_namespace: str = Field(
        default="link_registry",
        description="Prefix for every Redis key the registry writes"
    )

    retention_seconds: int = Field(
        default=31_536_000,
        ge=1,
        description="Retention horizon requested for live links (one year)"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes. Use 1 with the in-memory store."
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:9200",
        description="Base URL for generating short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc1234)"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=0,
        description="Extra attempts when a generated key is taken (0 = fail on first collision)"
    )

    # Ledger clock settings
    ledger_close_seconds: int = Field(
        default=5,
        ge=1,
        description="Seconds between ledger sequence increments"
    )

    ledger_genesis: int = Field(
        default=0,
        ge=0,
        description="Unix timestamp of ledger sequence 0"
    )

    # Authentication
    api_tokens: Dict[str, str] = Field(
        default_factory=dict,
        description="Bearer token -> identity, as a JSON object"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def safe_dump(self) -> dict:
        """Config values suitable for logging (tokens masked)."""
        data = self.model_dump()
        data["api_tokens"] = sorted(self.api_tokens.values())
        return data


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
