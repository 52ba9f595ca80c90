"""Placeholder matching and mapping tables.

This module defines how template placeholders (like ``_typeKey_``) are found
inside identifiers and how caller-supplied ``key=value`` pairs become the
mapping table used to replace them.
"""

from .models import (
    MappingTable,
    ReplacementRecord,
    GensmithError,
    ConfigError,
    UnknownPlaceholderError,
)
from .syntax import (
    DEFAULT_PLACEHOLDER_PATTERN,
    REMOVE_MARKER,
    CASE_RULES,
    PlaceholderMatcher,
    capitalize_first,
    get_case_rule,
    token_for,
)
from .builder import build_mapping, parse_pair, is_pair

__all__ = [
    "MappingTable",
    "ReplacementRecord",
    "GensmithError",
    "ConfigError",
    "UnknownPlaceholderError",
    "DEFAULT_PLACEHOLDER_PATTERN",
    "REMOVE_MARKER",
    "CASE_RULES",
    "PlaceholderMatcher",
    "capitalize_first",
    "get_case_rule",
    "token_for",
    "build_mapping",
    "parse_pair",
    "is_pair",
]
