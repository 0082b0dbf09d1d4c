"""Pydantic models for the csvfind application."""

from __future__ import annotations

from .config import (
    CsvfindConfig,
    FetchConfig,
    LoggingConfig,
    PathsConfig,
    RenderConfig,
    SearchConfig,
)

__all__ = [
    "CsvfindConfig",
    "FetchConfig",
    "LoggingConfig",
    "PathsConfig",
    "RenderConfig",
    "SearchConfig",
]
