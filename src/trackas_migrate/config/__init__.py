"""
Configuration management.

Configuration file parsing, environment resolution and runner settings.
"""

from trackas_migrate.config.loader import Config, load_config
from trackas_migrate.config.resolver import resolve_config
from trackas_migrate.config.settings import MigrateSettings

__all__ = [
    "load_config",
    "Config",
    "MigrateSettings",
    "resolve_config",
]
