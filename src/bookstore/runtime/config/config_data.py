"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class JWTConfig(BaseModel):
    """Bearer token validation configuration."""

    secret: str | None = Field(
        default=None, description="Shared secret used to sign and verify tokens"
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256", "HS384", "HS512"],
        description="JWT algorithms allowed for token validation",
    )
    issuer: str = Field(
        default="bookstore-api", description="Issuer name to use when generating tokens"
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    require_exp: bool = Field(default=False, description="Require expiration claim")
    token_lifetime_seconds: int = Field(
        default=3600, description="Default lifetime of generated tokens"
    )


class AuthConfig(BaseModel):
    """Route protection configuration."""

    protect_books: bool = Field(
        default=False, description="Require a bearer token on the /books routes"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./bookstore.db",
        description="Database connection URL",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    create_tables: bool = Field(
        default=True, description="Create missing tables on startup"
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """Read the database password from the mounted secrets file, if any."""
        if not self.password_file:
            return None
        try:
            with open(self.password_file) as f:
                return f.read().strip()
        except OSError as e:
            raise ValueError("Failed to read database password from file.") from e

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with password if provided."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password
        if not resolved_password:
            return self.url

        if base_url.password and base_url.password != resolved_password:
            logger.warning(
                "Database password from file does not match the one in the URL. Using password from file."
            )
        return base_url.set(password=resolved_password).render_as_string(
            hide_password=False
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        return self.is_sqlite and (
            ":memory:" in self.url or self.url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:")
        )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=3000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT validation configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Route protection configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
