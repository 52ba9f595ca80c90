"""Expansion runs over files, directories and packages."""

from .expander import Expander, ExpansionResult

__all__ = [
    "Expander",
    "ExpansionResult",
]
