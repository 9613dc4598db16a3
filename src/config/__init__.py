"""Конфигурация приложения (YAML + pydantic)."""

from .app_config import AppConfig, EngineSection
from .log_config import LogConfig

__all__ = [
    "AppConfig",
    "EngineSection",
    "LogConfig",
]
