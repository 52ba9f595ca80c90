"""Placeholder syntax definitions and patterns."""

import re
from typing import Callable, Pattern

from .models import ConfigError

# _type_, _typeKey_, _TypeValue_ ... - a placeholder wrapped in underscores
DEFAULT_PLACEHOLDER_PATTERN = r"(?i)_type[^\W_]*_"

# Reserved display name for declarations pending removal (never a valid identifier)
REMOVE_MARKER = "**REMOVE**"


class PlaceholderMatcher:
    """
    Find placeholder runs inside identifier spellings.

    Wraps the compiled placeholder regular expression.
    """

    def __init__(self, pattern: str | Pattern = DEFAULT_PLACEHOLDER_PATTERN):
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise ConfigError(f"Invalid placeholder pattern {pattern!r}: {e}") from e
        self.pattern: Pattern = pattern

    def find(self, text: str) -> list[str]:
        """Return every non-overlapping placeholder run in text, left to right."""
        return [match.group(0) for match in self.pattern.finditer(text)]

    def matches(self, text: str) -> bool:
        """Check whether text contains at least one placeholder run."""
        return self.pattern.search(text) is not None

    def is_token(self, text: str) -> bool:
        """Check whether text is exactly one placeholder run."""
        return self.pattern.fullmatch(text) is not None

    def sub(self, text: str, replace: Callable[[str], str]) -> str:
        """Replace each placeholder run with replace(run), keeping the rest of text."""
        return self.pattern.sub(lambda match: replace(match.group(0)), text)


def token_for(name: str) -> str:
    """Wrap a placeholder name in its delimiters: ``typeKey`` -> ``_typeKey_``."""
    return f"_{name}_"


def capitalize_first(text: str) -> str:
    """
    Upper-case the first letter only.

    Unlike str.capitalize() the rest of the string is left alone, so
    ``typeKey`` becomes ``TypeKey`` rather than ``Typekey``.
    """
    return text[:1].upper() + text[1:]


def keep_case(text: str) -> str:
    return text


CASE_RULES: dict[str, Callable[[str], str]] = {
    "title": capitalize_first,
    "keep": keep_case,
}


def get_case_rule(name: str) -> Callable[[str], str]:
    """
    Look up a capitalization rule for the capitalized placeholder variant.

    Args:
        name: Rule name ("title" or "keep")

    Returns:
        Function applied to the value of the ``_Name_`` entry

    Raises:
        ConfigError: If the rule is unknown
    """
    try:
        return CASE_RULES[name.strip().lower()]
    except KeyError:
        raise ConfigError(
            f"Unknown case rule '{name}' (expected one of: {', '.join(CASE_RULES)})"
        ) from None
