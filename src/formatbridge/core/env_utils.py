#!/usr/bin/env python3
"""
Helpers for reading converter settings from environment variables.

Values are stripped of stray whitespace and CRLF line endings, which show up
when .env files are edited on Windows.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def getenv_clean(key: str, default: str = None, strip: bool = True) -> Optional[str]:
    """Get environment variable with line endings and whitespace removed.

    Args:
        key: Environment variable name
        default: Default value if variable is not set
        strip: If True, strip whitespace and line endings (default: True)

    Returns:
        Cleaned environment variable value, or default if not set

    Example:
        >>> # .env file has: CONVERTER_ROOT_NAME=document\r\n
        >>> getenv_clean("CONVERTER_ROOT_NAME", "root")
        'document'
    """
    raw_value = os.getenv(key, default)

    if raw_value is None:
        return None

    if not strip:
        return raw_value

    cleaned = raw_value.strip()

    if raw_value != cleaned:
        logger.warning(
            f"Environment variable {key} had trailing whitespace/line endings: "
            f"raw={repr(raw_value)}, cleaned={repr(cleaned)}"
        )

    return cleaned


def getenv_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean.

    "true", "1", "yes", "on" map to True and "false", "0", "no", "off", ""
    map to False (case-insensitive). Anything else logs a warning and
    falls back to ``default``.
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    cleaned_lower = raw_value.lower()
    if cleaned_lower in ("true", "1", "yes", "on"):
        return True
    elif cleaned_lower in ("false", "0", "no", "off", ""):
        return False
    else:
        logger.warning(
            f"Environment variable {key} has unexpected boolean value: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default


def getenv_int(key: str, default: Optional[int]) -> Optional[int]:
    """Get environment variable as integer.

    Args:
        key: Environment variable name
        default: Value used when the variable is unset, empty or not an integer

    Returns:
        Integer value (or ``default``)

    Example:
        >>> # .env file has: CONVERTER_MAX_DEPTH=64\r\n
        >>> getenv_int("CONVERTER_MAX_DEPTH", 256)
        64
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None or raw_value == "":
        return default

    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            f"Environment variable {key} is not a valid integer: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default
