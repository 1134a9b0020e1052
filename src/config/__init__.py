"""
Configuration package for todofile

Provides application settings via environment variables using pydantic-settings,
and the user's todo config loaded from YAML.
"""

from .settings import appsettings, AppSettings
from .user import TodoConfig, TodoStateOps, ConfigError, config_load, config_fromDict

__all__ = [
    "appsettings",
    "AppSettings",
    "TodoConfig",
    "TodoStateOps",
    "ConfigError",
    "config_load",
    "config_fromDict",
]
