"""Resolution of command-line targets to template source files."""

import importlib.util
import logging
from pathlib import Path
from typing import Optional

from ..placeholders import GensmithError

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".py"


class ResolutionError(GensmithError):
    """Exception raised when a target cannot be resolved or read."""

    pass


def resolve_sources(target: str, cwd: Optional[Path] = None) -> list[Path]:
    """
    Resolve a target to the template files it names.

    A target is one of:
    - a ``.py`` file path (returned as-is)
    - a directory (its ``*.py`` files, sorted, not recursive)
    - an importable package or module name (e.g. ``mypkg.templates``)

    Args:
        target: File path, directory path or dotted package name
        cwd: Base for relative paths (default: current directory)

    Returns:
        List of source file paths

    Raises:
        ResolutionError: If the target names nothing with Python sources
    """
    cwd = cwd or Path.cwd()

    if target.endswith(SOURCE_SUFFIX):
        return [Path(target)]

    directory = Path(target)
    if not directory.is_absolute():
        directory = cwd / directory
    if directory.is_dir():
        files = _list_sources(directory)
        if not files:
            raise ResolutionError(f"No {SOURCE_SUFFIX} files in directory {target}")
        logger.debug(f"Resolved directory {target} to {len(files)} files")
        return files

    return _resolve_package(target)


def _list_sources(directory: Path) -> list[Path]:
    return sorted(p for p in directory.glob(f"*{SOURCE_SUFFIX}") if p.is_file())


def _resolve_package(name: str) -> list[Path]:
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError) as e:
        raise ResolutionError(f"Cannot import package '{name}': {e}") from e

    if spec is None:
        raise ResolutionError(f"Cannot find package or module '{name}'")

    if spec.submodule_search_locations:
        files = []
        for location in spec.submodule_search_locations:
            files.extend(_list_sources(Path(location)))
        if not files:
            raise ResolutionError(f"Package '{name}' has no {SOURCE_SUFFIX} files")
        logger.debug(f"Resolved package {name} to {len(files)} files")
        return files

    if spec.origin and spec.origin.endswith(SOURCE_SUFFIX):
        return [Path(spec.origin)]

    raise ResolutionError(f"Module '{name}' has no Python source file")
