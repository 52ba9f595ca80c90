"""Output file naming for expanded templates."""

import hashlib
import re
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ..placeholders import ReplacementRecord

DEFAULT_TEST_SUFFIX = "_test"

# Anything that cannot appear in a module name collapses to one underscore
_UNSAFE_CHARS = re.compile(r"\W+")


def name_fragment(value: str) -> str:
    """
    Turn a replacement value into a file name fragment.

    ``int`` -> ``int``, ``MyType`` -> ``mytype``, ``dict[str, int]`` -> ``dict_str_int``.
    A value with no word characters at all gets a short digest of itself.
    """
    fragment = _UNSAFE_CHARS.sub("_", value.lower()).strip("_")
    return fragment or hashlib.sha1(value.encode("utf-8")).hexdigest()[:8]


def compute_output_name(
    path: str | Path,
    record: ReplacementRecord,
    keys: Iterable[str],
    aliases: Optional[Mapping[str, str]] = None,
    test_suffix: str = DEFAULT_TEST_SUFFIX,
) -> str:
    """
    Derive the generated file's name.

    The extension is stripped, a trailing test suffix is set aside, and for
    every key (in caller order) that was replaced, ``_<value>`` is appended.
    A key counts as replaced when the record holds it or its capitalized
    alias. Example: ``map_test.py`` with ``_typeKey_ -> int`` gives
    ``map_int_test.py``.

    Args:
        path: Template file path
        record: Replacements applied to this file
        keys: Literal-case placeholder tokens, in caller order
        aliases: Literal token -> capitalized token
        test_suffix: Suffix kept last before the extension (empty to disable)

    Returns:
        File name (no directory)
    """
    path = Path(path)
    ext = path.suffix
    base = path.name[: len(path.name) - len(ext)] if ext else path.name

    if test_suffix and base.endswith(test_suffix) and len(base) > len(test_suffix):
        base = base[: -len(test_suffix)]
        ext = test_suffix + ext

    aliases = aliases or {}
    for key in keys:
        value = record.get(key)
        if value is None and key in aliases:
            value = record.get(aliases[key])
        if value:
            base += "_" + name_fragment(value)

    return base + ext
