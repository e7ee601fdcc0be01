"""Configuration management for the link registry service."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator


class Config(BaseSettings):
    """Application configuration."""

    # Store settings
    database_url: str = Field(
        default="memory://",
        description="Backing store URL: postgresql://..., redis://... or memory://"
    )

    db_create_tables: bool = Field(
        default=False,
        description="Create the PostgreSQL schema on first connect"
    )

    db_pool_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum PostgreSQL connection pool size"
    )

    db_timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="PostgreSQL connection and command timeout"
    )

    redis_key_prefix: str = Field(
        default="linkreg",
        description="Namespace for keys written to Redis"
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
        description="Number of uvicorn worker processes. Must be 1 with memory://."
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:9200",
        description="Base URL for generating short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    code_length: int = Field(
        default=6,
        ge=6,
        le=8,
        description="Length of generated short codes"
    )

    max_code_attempts: int = Field(
        default=10,
        ge=1,
        description="Generated candidates tried before reporting an exhausted code space"
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

    @model_validator(mode="after")
    def memory_store_is_single_process(self) -> "Config":
        if self.workers > 1 and self.database_url.startswith("memory:"):
            raise ValueError("WORKERS > 1 needs a shared store (postgresql:// or redis://)")
        return self


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
