"""Mark pass: placeholder substitution and template declaration marking."""

import ast
import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..placeholders import (
    MappingTable,
    PlaceholderMatcher,
    REMOVE_MARKER,
    ReplacementRecord,
    UnknownPlaceholderError,
)

logger = logging.getLogger(__name__)

# Node type name -> fields holding identifier text (str, None or list[str]).
# Keyed by name so node types missing from older interpreters are harmless.
IDENTIFIER_FIELDS: dict[str, tuple[str, ...]] = {
    "Name": ("id",),
    "Attribute": ("attr",),
    "FunctionDef": ("name",),
    "AsyncFunctionDef": ("name",),
    "ClassDef": ("name",),
    "arg": ("arg",),
    "keyword": ("arg",),
    "alias": ("name", "asname"),
    "ImportFrom": ("module",),
    "Global": ("names",),
    "Nonlocal": ("names",),
    "ExceptHandler": ("name",),
    "MatchAs": ("name",),
    "MatchStar": ("name",),
    "MatchMapping": ("rest",),
    "MatchClass": ("kwd_attrs",),
    "TypeVar": ("name",),
    "ParamSpec": ("name",),
    "TypeVarTuple": ("name",),
}

# Node type name -> fields holding a type expression, where a string
# constant is a forward reference (`-> "Map_TypeKey_"`)
ANNOTATION_FIELDS: dict[str, tuple[str, ...]] = {
    "arg": ("annotation",),
    "FunctionDef": ("returns",),
    "AsyncFunctionDef": ("returns",),
    "AnnAssign": ("annotation",),
    "TypeVar": ("bound",),
}


def is_declaration_group(node: ast.AST) -> bool:
    """A top-level ``if`` block without ``else`` (e.g. ``if TYPE_CHECKING:``)."""
    return isinstance(node, ast.If) and not node.orelse


def declaration_name(node: ast.AST) -> Optional[tuple[ast.AST, str]]:
    """
    Get the node carrying a type declaration's name, and that name.

    Recognized declarations:
    - ``class _Type_: ...``
    - ``type _Type_ = ...``
    - ``_Type_ = ...`` and ``_Type_: T = ...`` with a single plain name target

    Returns:
        (name_owner, name) or None if node is not a type declaration
    """
    if isinstance(node, ast.ClassDef):
        return node, node.name

    if type(node).__name__ == "TypeAlias" and isinstance(node.name, ast.Name):
        return node.name, node.name.id

    if isinstance(node, ast.Assign):
        if len(node.targets) == 1 and isinstance(node.targets[0], ast.Name):
            return node.targets[0], node.targets[0].id
        return None

    if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
        return node.target, node.target.id

    return None


def top_level_declarations(tree: ast.Module) -> Iterator[ast.stmt]:
    """Yield top-level statements, descending one level into declaration groups."""
    for stmt in tree.body:
        if is_declaration_group(stmt):
            yield from stmt.body
        else:
            yield stmt


@dataclass
class MarkResult:
    """Outcome of a mark pass over one module."""

    record: ReplacementRecord
    marked: list[ast.stmt] = field(default_factory=list)
    annotations: list[ast.Constant] = field(default_factory=list)  # Rewritten forward references

    def __post_init__(self):
        self._marked_ids = {id(node) for node in self.marked}

    def is_marked(self, node: ast.AST) -> bool:
        """Check whether node is a template declaration pending removal."""
        return id(node) in self._marked_ids

    def marked_names(self) -> list[str]:
        names = []
        for node in self.marked:
            declared = declaration_name(node)
            names.append(declared[1] if declared else REMOVE_MARKER)
        return names


class MarkPass(ast.NodeVisitor):
    """
    Depth-first identifier rewriter.

    Every identifier field of every node is passed through the placeholder
    matcher and each run is replaced from the mapping table. Top-level type
    declarations whose name is exactly a mapping key are the template's own
    definitions: they keep their name and are collected for the sweep pass.

    String constants in annotation positions are forward references: they
    are parsed as expressions, rewritten the same way and stored back.
    """

    def __init__(self, table: MappingTable, matcher: Optional[PlaceholderMatcher] = None):
        self.table = table
        self.matcher = matcher or PlaceholderMatcher()
        self.record = ReplacementRecord()
        self._marked: list[ast.stmt] = []
        self._annotations: list[ast.Constant] = []
        self._frozen: set[int] = set()

    def run(self, tree: ast.Module) -> MarkResult:
        """
        Mark and rewrite a module in place.

        Args:
            tree: Parsed module (mutated)

        Returns:
            MarkResult with the replacement record and the marked declarations

        Raises:
            UnknownPlaceholderError: If a placeholder has no mapping
        """
        self.record = ReplacementRecord()
        self._marked = []
        self._annotations = []
        self._frozen = set()

        for stmt in top_level_declarations(tree):
            declared = declaration_name(stmt)
            if declared is None:
                continue
            owner, name = declared
            if name in self.table:
                logger.debug(f"Marking template declaration {name} for removal")
                self._marked.append(stmt)
                self._frozen.add(id(owner))

        self.visit(tree)
        return MarkResult(
            record=self.record,
            marked=list(self._marked),
            annotations=list(self._annotations),
        )

    def generic_visit(self, node: ast.AST):
        if id(node) not in self._frozen:
            self._rewrite(node)
        for name in ANNOTATION_FIELDS.get(type(node).__name__, ()):
            annotation = getattr(node, name, None)
            if annotation is not None:
                self._annotations.extend(self._rewrite_forward_refs(annotation))
        super().generic_visit(node)

    def _rewrite_forward_refs(self, annotation: ast.AST) -> list[ast.Constant]:
        """Rewrite placeholder-bearing string constants inside an annotation."""
        rewritten = []
        for node in ast.walk(annotation):
            if not (isinstance(node, ast.Constant) and isinstance(node.value, str)):
                continue
            if not self.matcher.matches(node.value):
                continue
            try:
                expr = ast.parse(node.value.strip(), mode="eval")
            except SyntaxError:
                logger.debug(f"Leaving unparsable string annotation {node.value!r} as is")
                continue

            # Strings nested in the reference are references too
            self._rewrite_forward_refs(expr.body)
            self.visit(expr)
            node.value = ast.unparse(expr)
            rewritten.append(node)
        return rewritten

    def _rewrite(self, node: ast.AST) -> None:
        for name in IDENTIFIER_FIELDS.get(type(node).__name__, ()):
            value = getattr(node, name, None)
            if isinstance(value, str):
                setattr(node, name, self._replace(value))
            elif isinstance(value, list):
                setattr(node, name, [self._replace(item) for item in value])

    def _replace(self, text: str) -> str:
        return self.matcher.sub(text, self._substitute)

    def _substitute(self, token: str) -> str:
        value = self.table.lookup(token)
        if value is None:
            raise UnknownPlaceholderError(token)
        if token not in self.record:
            logger.debug(f"Replacing {token} with {value}")
        self.record.record(token, value)
        return value


def mark(
    tree: ast.Module,
    table: MappingTable,
    matcher: Optional[PlaceholderMatcher] = None,
) -> MarkResult:
    """Run a mark pass over tree. See MarkPass."""
    return MarkPass(table, matcher).run(tree)
