"""treeschema - schema-driven validation and transformation of nested data.

treeschema walks a declarative schema, itself a nested mapping, in lockstep
with a data tree. It rewrites values through transformers, checks them
against patterns and validators, and reports every problem with its path.
Schemas authored separately can be merged into one consistent tree.

Basic usage:
    from treeschema import validate

    schema = {"port": {"value": r"\\d+", "transformer": int}}
    errors = validate(schema, {"port": "8080"})
    if errors:
        print(errors.render())
"""

__version__ = "0.1.0"
__author__ = "treeschema contributors"
__description__ = "Validate, transform and document nested data against declarative schemas"

from treeschema.callbacks import CombinedValidator, Failure, Transformed
from treeschema.config import TreeSchemaConfig, load_config
from treeschema.errors import ErrorCollection, ErrorKind, SchemaError, ValidationError, format_path
from treeschema.schema import (
    SchemaNode,
    compile_schema,
    ensure_valid_schema,
    generate_docs,
    generate_template,
    merge_schema,
    validate_schema,
)
from treeschema.validator import DataValidator, validate

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "validate",
    "DataValidator",
    "validate_schema",
    "ensure_valid_schema",
    "compile_schema",
    "merge_schema",
    "generate_template",
    "generate_docs",
    "SchemaNode",
    "ValidationError",
    "ErrorCollection",
    "ErrorKind",
    "SchemaError",
    "Failure",
    "Transformed",
    "CombinedValidator",
    "TreeSchemaConfig",
    "load_config",
    "format_path",
]
