"""Self-validation of raw schema trees."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..errors import ErrorCollection, ErrorKind, SchemaError
from .tree import FLAG_PROPERTIES, SCHEMA_PROPERTIES, TEXT_PROPERTIES, SchemaPath

logger = logging.getLogger(__name__)


def validate_schema(schema: Any) -> ErrorCollection:
    """Check that a raw schema tree is well formed.

    Validators are not inspected here; they are adapted when data is
    validated and reported against the data path if they cannot be invoked.

    Args:
        schema: Mapping of member name to node spec

    Returns:
        Frozen collection of schema-definition errors (empty if valid)
    """
    errors = ErrorCollection()

    if not isinstance(schema, Mapping):
        errors.add((), f"schema must be a mapping, got {type(schema).__name__}", ErrorKind.INVALID_SCHEMA)
        return errors.freeze()

    _check_members(schema, (), errors)

    if errors:
        logger.debug(f"Schema self-validation found {len(errors)} errors")
    return errors.freeze()


def ensure_valid_schema(schema: Any) -> None:
    """Raise SchemaError if the schema fails self-validation."""
    errors = validate_schema(schema)
    if errors:
        raise SchemaError(f"Schema validation failed with {len(errors)} errors", errors)


def _check_members(members: Mapping[Any, Any], path: SchemaPath, errors: ErrorCollection) -> None:
    for name, spec in members.items():
        if not isinstance(name, str):
            errors.add(path, f"member name must be a string, got {name!r}", ErrorKind.INVALID_SCHEMA)
            continue
        _check_node(name, spec, path + (name,), errors)


def _check_node(name: str, spec: Any, path: SchemaPath, errors: ErrorCollection) -> None:
    if not isinstance(spec, Mapping):
        errors.add(path, f"schema node must be a mapping, got {type(spec).__name__}", ErrorKind.INVALID_SCHEMA)
        return

    for key in spec:
        if key not in SCHEMA_PROPERTIES:
            errors.add(path, f"unknown schema property '{key}'", ErrorKind.UNKNOWN_PROPERTY)

    for flag in FLAG_PROPERTIES:
        if flag in spec and not isinstance(spec[flag], bool):
            errors.add(path, f"'{flag}' must be a boolean", ErrorKind.INVALID_SCHEMA)

    for text in TEXT_PROPERTIES:
        if text in spec and not isinstance(spec[text], str):
            errors.add(path, f"'{text}' must be a string", ErrorKind.INVALID_SCHEMA)

    if spec.get("regex") is True:
        _check_pattern(name, path, "member key", errors)

    if "value" in spec:
        if isinstance(spec["value"], str):
            _check_pattern(spec["value"], path, "value", errors)
        else:
            errors.add(path, "'value' must be a pattern string", ErrorKind.INVALID_PATTERN)

    if "transformer" in spec and not callable(spec["transformer"]):
        errors.add(path, "'transformer' must be callable", ErrorKind.INVALID_SCHEMA)

    if "members" in spec:
        if isinstance(spec["members"], Mapping):
            _check_members(spec["members"], path, errors)
        else:
            errors.add(path, "'members' must be a mapping", ErrorKind.INVALID_SCHEMA)


def _check_pattern(pattern: str, path: SchemaPath, label: str, errors: ErrorCollection) -> None:
    try:
        re.compile(pattern)
    except re.error as e:
        errors.add(path, f"{label} pattern '{pattern}' does not compile: {e}", ErrorKind.INVALID_PATTERN)
