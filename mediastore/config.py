"""Configuration management for the mediastore system."""

import os
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .constants import CONNECT_TIMEOUT, DEFAULT_DATABASE_NAME, QUERY_TIMEOUT
from .types import Environment

if TYPE_CHECKING:
    from .database.properties import ConnectionProperties


class Settings(BaseModel):
    """Application settings."""

    version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Database
    db_type: str = Field(default="sqlite", description="Database driver type code")
    db_name: str = Field(
        default=DEFAULT_DATABASE_NAME, description="Database (or schema) name"
    )
    db_directory: str = Field(
        default="db", description="Directory holding embedded database files"
    )
    db_hostname: str | None = Field(default=None, description="Database host")
    db_port: int | None = Field(default=None, description="Database port")
    db_username: str | None = Field(default=None, description="Database user")
    db_password: str | None = Field(default=None, description="Database password")
    db_parameters: str | None = Field(
        default=None, description="Extra driver parameters as a query string"
    )
    connect_timeout: int = Field(
        default=CONNECT_TIMEOUT, description="Connection timeout in seconds"
    )
    query_timeout: int = Field(
        default=QUERY_TIMEOUT, description="Statement timeout in seconds"
    )
    create_tables: bool = Field(
        default=True, description="Whether missing tables are created on connect"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING

    def connection_properties(self) -> "ConnectionProperties":
        """Build the connection properties described by these settings."""
        from .database.properties import ConnectionProperties

        return ConnectionProperties(
            type=self.db_type,
            name=self.db_name,
            database_name=self.db_name,
            directory=self.db_directory,
            hostname=self.db_hostname,
            port=self.db_port,
            username=self.db_username,
            password=self.db_password,
            parameters=self.db_parameters,
            connect_timeout=self.connect_timeout,
        )


def _optional_int(value: str | None) -> int | None:
    return int(value) if value else None


def load_settings() -> Settings:
    """Load settings from environment variables."""

    # Load .env file if it exists
    load_dotenv()

    create_tables = os.getenv("MEDIASTORE_CREATE_TABLES", "true").lower() in [
        "true",
        "1",
        "yes",
        "on",
    ]

    return Settings(
        environment=Environment(os.getenv("MEDIASTORE_ENV", "development")),
        log_level=os.getenv("MEDIASTORE_LOG_LEVEL", "INFO").upper(),
        db_type=os.getenv("MEDIASTORE_DB_TYPE", "sqlite"),
        db_name=os.getenv("MEDIASTORE_DB_NAME", DEFAULT_DATABASE_NAME),
        db_directory=os.getenv("MEDIASTORE_DB_DIRECTORY", "db"),
        db_hostname=os.getenv("MEDIASTORE_DB_HOSTNAME"),
        db_port=_optional_int(os.getenv("MEDIASTORE_DB_PORT")),
        db_username=os.getenv("MEDIASTORE_DB_USERNAME"),
        db_password=os.getenv("MEDIASTORE_DB_PASSWORD"),
        db_parameters=os.getenv("MEDIASTORE_DB_PARAMETERS"),
        connect_timeout=int(
            os.getenv("MEDIASTORE_CONNECT_TIMEOUT", str(CONNECT_TIMEOUT))
        ),
        query_timeout=int(os.getenv("MEDIASTORE_QUERY_TIMEOUT", str(QUERY_TIMEOUT))),
        create_tables=create_tables,
    )


# Global settings instance
settings = load_settings()
