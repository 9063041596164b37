"""
Logging setup for erf-ledger.

The lineage package logs through loguru; the auth package uses the standard
logging module. configure_logging installs one loguru stderr sink and sets
the stdlib root level to match.
"""

import logging
import sys
from typing import Any, Dict, Optional

from loguru import logger

from .config import Config


def configure_logging(level: Optional[str] = None, config: Optional[Dict[str, Any]] = None) -> int:
    """Install the stderr sink.

    Args:
        level: Log level name; overrides the config value
        config: Ledger configuration dict (uses its "logging" section)

    Returns:
        The loguru handler id of the new sink
    """
    logging_config = (config or {}).get("logging", {})
    level = (level or logging_config.get("level") or Config.LOG_LEVEL).upper()
    fmt = logging_config.get("format", Config.LOG_FORMAT)

    logger.remove()
    handler_id = logger.add(sys.stderr, level=level, format=fmt)

    # loguru has levels stdlib logging lacks
    stdlib_level = {"TRACE": "DEBUG", "SUCCESS": "INFO"}.get(level, level)
    logging.basicConfig(level=stdlib_level, force=True)

    return handler_id
