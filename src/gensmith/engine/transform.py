"""Template transformation: mark then sweep."""

import ast
import logging
from dataclasses import dataclass, field
from typing import Optional

from ..placeholders import MappingTable, PlaceholderMatcher, ReplacementRecord
from .mark import MarkPass
from .sweep import dropped_statements, sweep

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Result of transforming one parsed template."""

    tree: ast.Module
    record: ReplacementRecord
    removed: list[str] = field(default_factory=list)
    dropped: list[ast.stmt] = field(default_factory=list)  # Swept statements, positions intact
    annotations: list[ast.Constant] = field(default_factory=list)


def transform(
    tree: ast.Module,
    table: MappingTable,
    matcher: Optional[PlaceholderMatcher] = None,
) -> TransformResult:
    """
    Instantiate a parsed template in place.

    Args:
        tree: Parsed template module (mutated)
        table: Mapping table for this run
        matcher: Placeholder matcher (default pattern if omitted)

    Returns:
        TransformResult with the concrete tree and the replacements applied

    Raises:
        UnknownPlaceholderError: If a placeholder has no mapping
    """
    marks = MarkPass(table, matcher).run(tree)
    dropped = dropped_statements(tree, marks)
    removed = sweep(tree, marks)
    logger.debug(
        f"Transformed module: {len(marks.record)} placeholders replaced, "
        f"{len(removed)} declarations removed"
    )
    return TransformResult(
        tree=tree,
        record=marks.record,
        removed=removed,
        dropped=dropped,
        annotations=marks.annotations,
    )
