"""Reading, parsing and writing template sources."""

import ast
import logging
from pathlib import Path
from typing import Optional

from ..placeholders import GensmithError
from .resolver import ResolutionError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class TemplateParseError(GensmithError):
    """Exception raised when a template is not valid Python."""

    pass


class OutputIOError(GensmithError):
    """Exception raised when a generated file cannot be written."""

    pass


def read_source(path: Path) -> str:
    """Read a template file as text."""
    try:
        return Path(path).read_text(encoding=ENCODING)
    except UnicodeDecodeError as e:
        raise TemplateParseError(f"{path} is not valid {ENCODING}: {e}") from e
    except OSError as e:
        raise ResolutionError(f"Cannot read {path}: {e.strerror or e}") from e


def parse_source(path: Path, source: Optional[str] = None) -> ast.Module:
    """
    Parse a template file into a module tree.

    Args:
        path: Template file
        source: Its text, if already read

    Raises:
        TemplateParseError: On syntax or decoding errors
        ResolutionError: If the file cannot be read
    """
    if source is None:
        source = read_source(path)
    try:
        return ast.parse(source, filename=str(path))
    except SyntaxError as e:
        raise TemplateParseError(f"{path}:{e.lineno}:{e.offset}: {e.msg}") from e
    except ValueError as e:
        raise TemplateParseError(f"{path}: {e}") from e


def write_output(path: Path, text: str) -> None:
    """
    Write generated source, creating the parent directory if needed.

    Raises:
        OutputIOError: If the file cannot be created or written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding=ENCODING)
    except OSError as e:
        raise OutputIOError(f"Cannot write {path}: {e.strerror or e}") from e
    logger.info(f"Wrote {path}")
