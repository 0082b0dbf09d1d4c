"""Pydantic models for csvfind configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SearchConfig(BaseModel):
    """Row filter backend configuration."""

    backend: Literal["auto", "ripgrep", "python"] = "auto"
    ripgrep_path: str = "rg"
    timeout_seconds: int = Field(default=60, gt=0)


class RenderConfig(BaseModel):
    """Table rendering configuration."""

    delimiter: str = Field(default=",", min_length=1, max_length=1)


class FetchConfig(BaseModel):
    """Source download configuration."""

    timeout_seconds: float = Field(default=30.0, gt=0)
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_base_seconds: float = 1.0
    retry_max_seconds: float = 10.0


class PathsConfig(BaseModel):
    """Paths configuration."""

    data_dir: str | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file_enabled: bool = True


class CsvfindConfig(BaseModel):
    """Top-level csvfind configuration."""

    search: SearchConfig = SearchConfig()
    render: RenderConfig = RenderConfig()
    fetch: FetchConfig = FetchConfig()
    paths: PathsConfig = PathsConfig()
    logging: LoggingConfig = LoggingConfig()
