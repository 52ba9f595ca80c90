"""Template source resolution and file handling."""

from .resolver import ResolutionError, resolve_sources
from .files import (
    OutputIOError,
    TemplateParseError,
    parse_source,
    read_source,
    write_output,
)

__all__ = [
    "ResolutionError",
    "resolve_sources",
    "OutputIOError",
    "TemplateParseError",
    "parse_source",
    "read_source",
    "write_output",
]
