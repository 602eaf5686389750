"""Configuration management using pydantic settings."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: Path = Field(default=Path("mynotes.db"))


class ListConfig(BaseModel):
    """Note list screen configuration."""

    # Pause after the last keystroke before the search filter runs
    search_debounce_ms: int = Field(
        default=500,
        ge=0,
        le=10_000,
        description="Search debounce delay in milliseconds",
    )

    # Must match a registered sort order
    default_sort: str = Field(
        default="date",
        min_length=1,
        description="Initial sort order (date, title, color)",
    )

    # Upper bound on recycled row views kept by the adapter
    row_pool_size: int = Field(default=16, ge=1, le=1000)


class HistoryConfig(BaseModel):
    """Undo/redo configuration."""

    max_depth: int = Field(
        default=50,
        ge=1,
        le=10_000,
        description="Maximum number of undoable commands kept",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    json_format: bool = Field(default=True)


class Settings(BaseSettings):
    """Application settings."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    list_screen: ListConfig = Field(default_factory=ListConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "MYNOTES_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def load_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings()
