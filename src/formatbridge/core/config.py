#!/usr/bin/env python3
"""
Configuration settings for format conversion.

Every value can be overridden via environment variables. Settings are read
when a ConverterConfig is constructed, so tests can patch the environment
and build a fresh instance.
"""

import logging

from .env_utils import getenv_bool, getenv_clean, getenv_int

logger = logging.getLogger(__name__)

VALID_XML_POLICIES = ("none", "merge", "group", "attribs")


class ConverterConfig:
    """Conversion limits and defaults.

    MAX_DEPTH bounds recursion in the tree builder, the XML engine and the
    serialized decoder. Nesting deeper than this is rejected instead of
    exhausting the interpreter stack.
    """

    def __init__(self):
        self.MAX_DEPTH = getenv_int("CONVERTER_MAX_DEPTH", 256)

        # Root element name used by to_xml() when none is given
        self.DEFAULT_ROOT_NAME = getenv_clean("CONVERTER_ROOT_NAME", "root") or "root"

        # Attribute policy the CLI applies to XML sources
        self.DEFAULT_XML_POLICY = self._read_policy()

        # None keeps JSON output compact
        self.JSON_INDENT = getenv_int("CONVERTER_JSON_INDENT", None)

        # <empty /> vs <empty></empty>
        self.XML_SHORT_EMPTY_ELEMENTS = getenv_bool("CONVERTER_XML_SHORT_EMPTY_ELEMENTS", True)

        self.LOG_LEVEL = (getenv_clean("CONVERTER_LOG_LEVEL", "INFO") or "INFO").upper()

        if self.MAX_DEPTH < 1:
            logger.warning(f"CONVERTER_MAX_DEPTH must be positive, got {self.MAX_DEPTH}. Using 256")
            self.MAX_DEPTH = 256

    @staticmethod
    def _read_policy() -> str:
        policy = (getenv_clean("CONVERTER_XML_POLICY", "group") or "group").lower()
        if policy not in VALID_XML_POLICIES:
            logger.warning(
                f"CONVERTER_XML_POLICY has unexpected value {repr(policy)}. "
                f"Expected one of {VALID_XML_POLICIES}, using 'group'"
            )
            return "group"
        return policy


# Singleton instance
converter_config = ConverterConfig()
