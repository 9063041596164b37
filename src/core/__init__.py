"""Core package: configuration and logging setup shared by the ledger."""

from .config import Config, ConfigurationError, get_config, reload_config
from .logging_config import configure_logging

__all__ = [
    "Config",
    "ConfigurationError",
    "get_config",
    "reload_config",
    "configure_logging",
]
