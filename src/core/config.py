#!/usr/bin/env python3
"""
Central configuration module for erf-ledger.
Provides consistent configuration values across all components.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


class Config:
    """Central configuration management for erf-ledger."""

    # Claims extraction
    CLAIMS_SECRET = os.getenv("ERF_CLAIMS_SECRET")
    CLAIMS_ALGORITHMS = [
        alg.strip() for alg in os.getenv("ERF_CLAIMS_ALGORITHMS", "HS256").split(",") if alg.strip()
    ]
    CLAIMS_VERIFY_EXPIRY = os.getenv("ERF_CLAIMS_VERIFY_EXPIRY", "true").lower() == "true"
    CLAIMS_LEEWAY_SECONDS = int(os.getenv("ERF_CLAIMS_LEEWAY", "0"))

    # Record log backend; only the volatile in-memory log exists today
    RECORD_LOG_BACKEND = "memory"
    SUPPORTED_RECORD_LOG_BACKENDS = ["memory"]

    # Logging configuration
    LOG_LEVEL = os.getenv("ERF_LEDGER_LOG_LEVEL", "INFO")
    LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
    VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

    @classmethod
    def load_from_file(cls, config_path: Optional[str] = None, required: bool = False) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            config_path: Path to configuration file. Defaults to .erfledger.yaml
            required: Raise instead of falling back to defaults when the file is missing

        Returns:
            Configuration dictionary
        """
        if config_path is None:
            config_path = os.getenv("ERF_LEDGER_CONFIG", ".erfledger.yaml")

        config_file = Path(config_path)
        if not config_file.exists():
            if required:
                raise ConfigFileNotFoundError(str(config_file))
            # Return default configuration
            return cls.get_defaults()

        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigParseError(str(config_file), str(e)) from e

        if not isinstance(config, dict):
            raise ConfigParseError(str(config_file), "top level must be a mapping")

        # Merge with defaults
        merged = cls._deep_merge(cls.get_defaults(), config)
        cls.validate_configuration(merged)
        return merged

    @classmethod
    def get_defaults(cls) -> Dict[str, Any]:
        """Get default configuration values.

        Returns:
            Default configuration dictionary
        """
        return {
            "claims": {
                "key": cls.CLAIMS_SECRET,
                "algorithms": list(cls.CLAIMS_ALGORITHMS),
                "verify_expiry": cls.CLAIMS_VERIFY_EXPIRY,
                "leeway": cls.CLAIMS_LEEWAY_SECONDS,
            },
            "record_log": {
                "backend": cls.RECORD_LOG_BACKEND,
            },
            "logging": {
                "level": cls.LOG_LEVEL,
                "format": cls.LOG_FORMAT,
            },
        }

    @staticmethod
    def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @classmethod
    def validate_configuration(cls, config: Dict[str, Any]) -> bool:
        """Validate configuration values.

        Args:
            config: Configuration dictionary to validate

        Returns:
            True if valid

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        invalid = []

        claims = config.get("claims", {})
        algorithms = claims.get("algorithms")
        if algorithms is not None and (not isinstance(algorithms, list) or not algorithms):
            invalid.append("claims.algorithms")
        leeway = claims.get("leeway", 0)
        if not isinstance(leeway, int) or leeway < 0:
            invalid.append("claims.leeway")

        backend = config.get("record_log", {}).get("backend", cls.RECORD_LOG_BACKEND)
        if backend not in cls.SUPPORTED_RECORD_LOG_BACKENDS:
            invalid.append("record_log.backend")

        level = str(config.get("logging", {}).get("level", cls.LOG_LEVEL)).upper()
        if level not in cls.VALID_LOG_LEVELS:
            invalid.append("logging.level")

        if invalid:
            raise ConfigValidationError(
                f"Invalid configuration values: {', '.join(invalid)}", invalid_fields=invalid
            )

        return True


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.config_path = config_path
        self.details = details or {}
        super().__init__(message)


class ConfigFileNotFoundError(ConfigurationError):
    """A required configuration file does not exist."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}", config_path=config_path)


class ConfigParseError(ConfigurationError):
    """The configuration file is not valid YAML or not a mapping."""

    def __init__(self, config_path: str, parse_error: str):
        super().__init__(
            f"Failed to parse configuration file {config_path}: {parse_error}",
            config_path=config_path,
            details={"parse_error": parse_error},
        )


class ConfigValidationError(ConfigurationError):
    """One or more configuration values are out of range."""

    def __init__(self, message: str, invalid_fields: Optional[List[str]] = None):
        super().__init__(message, details={"invalid_fields": invalid_fields or []})


# Singleton instance
_config_instance: Optional[Dict[str, Any]] = None


def get_config() -> Dict[str, Any]:
    """Get the global configuration instance.

    Returns:
        Configuration dictionary
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config.load_from_file()
    return _config_instance


def reload_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Reload configuration from file.

    Args:
        config_path: Optional path to configuration file

    Returns:
        New configuration dictionary
    """
    global _config_instance
    _config_instance = Config.load_from_file(config_path)
    return _config_instance


__all__ = [
    "Config",
    "ConfigurationError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "get_config",
    "reload_config",
]
