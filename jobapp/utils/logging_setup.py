"""
Logging configuration utilities.

This module provides standardized logging setup for the API server and
the management commands.
"""

import logging
import sys
from typing import Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def coerce_level(level: Union[int, str]) -> int:
    """
    Resolve a logging level given by number or by name.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_basic_logging(
    level: Union[int, str] = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
) -> None:
    """
    Configure basic logging to stdout.

    Used by the app factory and the CLI instead of calling
    logging.basicConfig() at module level.

    Args:
        level: Logging level, numeric or by name
        format_string: Log message format
    """
    logging.basicConfig(
        level=coerce_level(level),
        format=format_string,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
