"""Settings for the Local Library catalog.

Values come from ``LOCAL_LIBRARY_*`` environment variables or a ``.env`` file.
The catalog reads them through :func:`get_config`; tests call
:func:`reset_config` after changing the environment.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class CatalogConfig(BaseSettings):
    """Catalog rules, store location and logging switches."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="local-library",
        description="Service name used in log lines and spans",
        pattern=r"^[a-z0-9-]+$",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Semantic version of the catalog",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # Store
    database_path: Path = Field(
        default=Path("data/local_library.db"),
        description="SQLite file holding the catalog",
    )
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL used instead of database_path",
    )
    sql_echo: bool = Field(default=False, description="Log every SQL statement")

    # Forms
    genre_name_min_length: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Shortest accepted genre name, counted after trimming",
    )

    # Logging
    debug: bool = Field(default=False, description="Force DEBUG logging")
    log_level: LogLevel = Field(default="INFO", description="Root level for catalog loggers")

    @field_validator("database_path")
    @classmethod
    def prepare_database_path(cls, v: Path) -> Path:
        """Make the path absolute and create its parent directory."""
        path = v.absolute()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def is_development(self) -> bool:
        return self.debug or self.log_level == "DEBUG"

    def get_database_url(self) -> str:
        """The explicit ``database_url`` if set, else a URL for ``database_path``."""
        return self.database_url or f"sqlite:///{self.database_path}"


_config: CatalogConfig | None = None


def get_config() -> CatalogConfig:
    """Process-wide settings, read from the environment on first use."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = CatalogConfig()
    return _config


def reset_config() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    global _config  # noqa: PLW0603
    _config = None
