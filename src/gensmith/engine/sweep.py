"""Sweep pass: removal of marked template declarations."""

import ast
import logging

from .mark import MarkResult, is_declaration_group

logger = logging.getLogger(__name__)


def dropped_statements(tree: ast.Module, marks: MarkResult) -> list[ast.stmt]:
    """
    Statements a sweep removes, in source order.

    A marked declaration is dropped on its own; a declaration group whose
    members are all marked is dropped as a whole instead.
    """
    dropped: list[ast.stmt] = []
    for stmt in tree.body:
        if marks.is_marked(stmt):
            dropped.append(stmt)
        elif is_declaration_group(stmt):
            members = [member for member in stmt.body if marks.is_marked(member)]
            if members and len(members) == len(stmt.body):
                dropped.append(stmt)
            else:
                dropped.extend(members)
    return dropped


def sweep(tree: ast.Module, marks: MarkResult) -> list[str]:
    """
    Drop marked declarations from the module's top level.

    Only ``tree.body`` and the bodies of top-level declaration groups are
    touched. A group left empty is dropped as a whole; statements without
    marked members keep their position.

    Args:
        tree: Module previously passed through the mark pass (mutated)
        marks: Result of that mark pass

    Returns:
        Names of the removed declarations, in source order
    """
    dropped = {id(stmt) for stmt in dropped_statements(tree, marks)}
    body: list[ast.stmt] = []

    for stmt in tree.body:
        if id(stmt) in dropped:
            if is_declaration_group(stmt):
                logger.debug("Dropping declaration group emptied by sweep")
            continue
        if is_declaration_group(stmt):
            stmt.body = [member for member in stmt.body if id(member) not in dropped]
        body.append(stmt)

    tree.body = body

    removed = marks.marked_names()
    for name in removed:
        logger.debug(f"Removed template declaration {name}")
    return removed
