"""Rendering of a transformed template from its original source text.

The concrete module is produced by editing the template text rather than
unparsing the tree, so comments and layout survive. Edits are
character spans:

- every identifier token holding a placeholder run gets its substitution
- every rewritten string annotation gets its new value, in its old quotes
- every swept statement is cut, whole lines where it owns them
"""

import io
import keyword
import logging
import re
import tokenize
from typing import Optional

from ..placeholders import MappingTable, PlaceholderMatcher, UnknownPlaceholderError
from .transform import TransformResult

logger = logging.getLogger(__name__)

# String prefix and opening quote
STRING_OPEN = re.compile(r"([rRuU]?)('''|\"\"\"|'|\")")

Edit = tuple[int, int, str]


class SourceLines:
    """Line offsets of a source text, converting tree and token positions."""

    def __init__(self, source: str):
        self.source = source
        self.starts = [0] + [match.end() for match in re.finditer("\n", source)]

    def __len__(self) -> int:
        return len(self.starts)

    def start(self, lineno: int) -> int:
        return self.starts[lineno - 1]

    def end(self, lineno: int) -> int:
        return self.starts[lineno] if lineno < len(self.starts) else len(self.source)

    def text(self, lineno: int) -> str:
        return self.source[self.start(lineno) : self.end(lineno)]

    def offset(self, lineno: int, col: int) -> int:
        """Offset of a token position (character column)."""
        return self.start(lineno) + col

    def node_offset(self, lineno: int, col_offset: int) -> int:
        """Offset of a tree node position (UTF-8 byte column)."""
        prefix = self.text(lineno).encode("utf-8")[:col_offset]
        return self.start(lineno) + len(prefix.decode("utf-8"))


def statement_span(lines: SourceLines, stmt) -> tuple[int, int]:
    """
    Character span to cut for a swept statement.

    A statement alone on its lines takes those whole lines (trailing comment
    included), plus the blank lines after it when it follows a blank line or
    opens the file. A statement sharing a line with others takes its
    ``;`` separator with it.
    """
    decorators = getattr(stmt, "decorator_list", None)
    if decorators:
        first_line = decorators[0].lineno
        line = lines.text(first_line)
        start = lines.start(first_line) + len(line) - len(line.lstrip())
    else:
        first_line = stmt.lineno
        start = lines.node_offset(stmt.lineno, stmt.col_offset)
    last_line = stmt.end_lineno
    end = lines.node_offset(last_line, stmt.end_col_offset)

    before = lines.source[lines.start(first_line) : start]
    after = lines.source[end : lines.end(last_line)]

    if not before.strip() and (not after.strip() or after.lstrip().startswith("#")):
        start = lines.start(first_line)
        end = lines.end(last_line)
        if first_line == 1 or not lines.text(first_line - 1).strip():
            following = last_line + 1
            while following <= len(lines) and end < len(lines.source) and not lines.text(following).strip():
                end = lines.end(following)
                following += 1
        return start, end

    separator = re.match(r"[ \t]*;[ \t]*", after)
    if separator:
        return start, end + separator.end()
    separator = re.search(r"[ \t]*;[ \t]*$", before)
    if separator:
        return start - (len(before) - separator.start()), end
    return start, end


def string_literal(original: str, value: str) -> str:
    """Spell value as a string literal, keeping the original prefix and quotes when possible."""
    match = STRING_OPEN.match(original)
    if match:
        prefix, quote = match.groups()
        if (
            quote not in value
            and not value.endswith(quote[0])
            and "\\" not in value
            and (len(quote) == 3 or "\n" not in value)
        ):
            return f"{prefix}{quote}{value}{quote}"
    return repr(value)


def render_source(
    source: str,
    result: TransformResult,
    table: MappingTable,
    matcher: Optional[PlaceholderMatcher] = None,
) -> str:
    """
    Render the concrete module for a transformed template.

    Args:
        source: Template text the tree was parsed from
        result: Transform of that tree
        table: Mapping table the transform used
        matcher: Placeholder matcher the transform used (default pattern if omitted)

    Returns:
        Generated source text

    Raises:
        UnknownPlaceholderError: If a placeholder has no mapping
    """
    matcher = matcher or PlaceholderMatcher()
    lines = SourceLines(source)
    cuts = [statement_span(lines, stmt) for stmt in result.dropped]

    def is_cut(offset: int) -> bool:
        return any(start <= offset < end for start, end in cuts)

    def substitute(token: str) -> str:
        value = table.lookup(token)
        if value is None:
            raise UnknownPlaceholderError(token)
        return value

    edits: list[Edit] = [(start, end, "") for start, end in cuts]

    for token in tokenize.generate_tokens(io.StringIO(source).readline):
        if token.type != tokenize.NAME or keyword.iskeyword(token.string):
            continue
        if not matcher.find(token.string):
            continue
        start = lines.offset(*token.start)
        if not is_cut(start):
            edits.append((start, lines.offset(*token.end), matcher.sub(token.string, substitute)))

    for node in result.annotations:
        start = lines.node_offset(node.lineno, node.col_offset)
        if not is_cut(start):
            end = lines.node_offset(node.end_lineno, node.end_col_offset)
            edits.append((start, end, string_literal(source[start:end], node.value)))

    pieces = []
    position = 0
    for start, end, text in sorted(edits):
        pieces.append(source[position:start])
        pieces.append(text)
        position = end
    pieces.append(source[position:])

    logger.debug(f"Rendered {len(edits) - len(cuts)} substitutions and {len(cuts)} cuts")
    return "".join(pieces)
