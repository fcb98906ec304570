"""Schema trees: compilation, self-validation, merging and rendering.

This package only depends on the error model and the callback contract so
that the data validator, the merger and the generators share one read-only
view of a schema.
"""

from .checker import ensure_valid_schema, validate_schema
from .docs import generate_docs
from .merger import merge_schema
from .template import generate_template
from .tree import SCHEMA_PROPERTIES, SchemaNode, compile_schema

__all__ = [
    "SCHEMA_PROPERTIES",
    "SchemaNode",
    "compile_schema",
    "validate_schema",
    "ensure_valid_schema",
    "merge_schema",
    "generate_template",
    "generate_docs",
]
