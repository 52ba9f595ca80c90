"""Builder for the placeholder mapping table."""

import logging
from typing import Callable, Iterable, Optional

from .models import ConfigError, MappingTable
from .syntax import PlaceholderMatcher, capitalize_first, token_for

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = "="


def parse_pair(text: str) -> tuple[str, str]:
    """
    Split a ``key=value`` argument on its first separator.

    Args:
        text: The raw argument (e.g. "typeKey=int")

    Returns:
        (key, value) tuple

    Raises:
        ConfigError: If the separator is missing
    """
    key, sep, value = text.partition(PAIR_SEPARATOR)
    if not sep:
        raise ConfigError(f"Mapping '{text}' is missing the '{PAIR_SEPARATOR}' separator")
    return key, value


def is_pair(text: str) -> bool:
    """Check whether a command-line argument looks like a mapping."""
    return PAIR_SEPARATOR in text


def build_mapping(
    pairs: Iterable[tuple[str, str]],
    capitalize: Callable[[str], str] = capitalize_first,
    matcher: Optional[PlaceholderMatcher] = None,
) -> MappingTable:
    """
    Build the mapping table from caller-supplied pairs.

    Each pair ``(name, value)`` produces two entries: ``_name_`` -> ``value``
    and ``_Name_`` -> ``Value``, where the capitalized forms come from
    ``capitalize``. Duplicate keys: last write wins.

    Args:
        pairs: Ordered (name, value) pairs
        capitalize: Naming transform for the capitalized variant
        matcher: Used only to warn about keys no placeholder can ever match

    Returns:
        Immutable MappingTable

    Raises:
        ConfigError: If a key is empty or contains the separator, or a value is empty
    """
    entries: dict[str, str] = {}
    keys: list[str] = []
    capitalized: dict[str, str] = {}

    for name, value in pairs:
        if not name:
            raise ConfigError(f"Mapping '{name}{PAIR_SEPARATOR}{value}' has an empty key")
        if PAIR_SEPARATOR in name:
            raise ConfigError(f"Mapping key '{name}' must not contain '{PAIR_SEPARATOR}'")
        if not value:
            raise ConfigError(f"Mapping for '{name}' has an empty value")

        token = token_for(name)
        title_token = token_for(capitalize_first(name))

        if token in entries:
            logger.warning(f"Duplicate mapping for {token}: '{entries[token]}' replaced by '{value}'")
        else:
            keys.append(token)

        entries[token] = value
        entries[title_token] = capitalize(value)
        capitalized[token] = title_token

        if matcher is not None and not matcher.is_token(token):
            logger.warning(f"Placeholder {token} does not match the placeholder pattern and will never be replaced")

        logger.debug(f"Mapping {token} -> {value}, {title_token} -> {entries[title_token]}")

    return MappingTable(entries=entries, keys=keys, capitalized=capitalized)
