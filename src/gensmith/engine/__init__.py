"""Template expansion engine."""

from .mark import MarkPass, MarkResult, mark, declaration_name, is_declaration_group
from .sweep import dropped_statements, sweep
from .naming import compute_output_name, name_fragment
from .transform import TransformResult, transform
from .render import render_source

__all__ = [
    "MarkPass",
    "MarkResult",
    "mark",
    "declaration_name",
    "is_declaration_group",
    "dropped_statements",
    "sweep",
    "compute_output_name",
    "name_fragment",
    "TransformResult",
    "transform",
    "render_source",
]
