"""Configuration management for the Library Catalog.

Settings are loaded from the environment (``LIBRARY_CATALOG_`` prefix) or a
``.env`` file and validated with Pydantic v2. The connection string itself is
owned by this module so the persistence core never has to know where the
database lives.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseSettings):
    """Library Catalog configuration.

    The values fall into three groups:
    1. Server metadata used when the catalog is exposed over MCP
    2. Database location and SQL echo
    3. Integrity strictness and observability toggles
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Server Metadata ===

    server_name: str = Field(
        default="library-catalog",
        description="MCP server name used in protocol handshake",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version for capability negotiation",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # === Database Configuration ===

    database_path: Path = Field(
        default=Path("data/catalog.db"),
        description="SQLite database file path",
    )

    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides database_path when set",
    )

    echo_sql: bool = Field(
        default=False,
        description="Echo every SQL statement through the sqlalchemy.engine logger",
    )

    # === Integrity ===

    strict_integrity: bool = Field(
        default=False,
        description=(
            "Re-check ISBN uniqueness on record updates, report updates that "
            "touch no active row, and require both ids to exist on relink"
        ),
    )

    # === Development / Observability ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    environment: str = Field(
        default="development",
        description="Deployment environment reported with traces",
    )

    logfire_send: bool = Field(
        default=False,
        description="Send spans to the Logfire backend",
    )

    logfire_console: bool = Field(
        default=False,
        description="Print spans to the console",
    )

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Resolve the database path to an absolute location."""
        return v.absolute()

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    @property
    def is_development(self) -> bool:
        return self.debug or self.log_level == "DEBUG"

    def get_database_url(self) -> str:
        """Get the SQLAlchemy database URL."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.database_path}"


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: CatalogConfig | None = None


def get_config() -> CatalogConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = CatalogConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
