"""Schema-driven recursive validation and transformation of data trees.

The walk visits one (schema node, data slot, path) triple at a time. For a
single value the order is fixed: transformer, then member descent, then the
``value`` pattern, then the validator. Errors never abort the pass; a broken
value only stops checks below it.
"""

import logging
from collections.abc import Mapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any

from .callbacks import Failure, InvalidCallbackError, apply_transformer
from .config import TreeSchemaConfig, create_default_config
from .errors import ErrorCollection, ErrorKind, Path
from .schema.tree import SchemaNode, compile_schema

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "required key missing"
UNKNOWN_KEY_MESSAGE = "unknown key"

TEXT_TYPES = (str, bytes, bytearray)


class ReadOnlyContainerError(TypeError):
    """Raised when a transformed value cannot be written back."""


@dataclass
class Slot:
    """Handle to one position in the data tree."""
    container: Mapping[Any, Any] | Sequence[Any]
    key: Any

    def get(self) -> Any:
        return self.container[self.key]

    def set(self, value: Any) -> None:
        try:
            self.container[self.key] = value
        except TypeError:
            raise ReadOnlyContainerError(
                f"cannot write transformed value into read-only {type(self.container).__name__}"
            )


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, TEXT_TYPES)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (Mapping, Sequence, set, frozenset)) or isinstance(value, TEXT_TYPES)


def _type_name(value: Any) -> str:
    return type(value).__name__


def _qualify(node: SchemaNode, message: str) -> str:
    if node.error_msg:
        return f"{message} ({node.error_msg})"
    return message


def _key_segment(key: Any) -> str | int:
    return key if isinstance(key, str) else str(key)


class DataValidator:
    """Validates data instances against one compiled schema.

    The schema is self-checked and compiled once; the validator can then be
    reused for any number of data instances.
    """

    def __init__(self, schema: Mapping[str, Any] | SchemaNode, config: TreeSchemaConfig | None = None):
        """Initialize validator.

        Args:
            schema: Raw schema mapping or an already compiled root node
            config: Optional configuration (defaults apply when omitted)

        Raises:
            SchemaError: If a raw schema fails self-validation
        """
        self.config = config or create_default_config()
        self.root = schema if isinstance(schema, SchemaNode) else compile_schema(schema)

    def validate(self, data: Any) -> ErrorCollection:
        """Validate and transform a data tree in place.

        Args:
            data: Root mapping; transformers write their results into it

        Returns:
            Frozen collection with every error found in the pass
        """
        errors = ErrorCollection()
        logger.debug(f"Validating data against {len(self.root.children())} top-level members")

        if isinstance(data, Mapping):
            self._validate_mapping(self.root, data, (), errors)
        else:
            errors.add((), f"expected a mapping, got {_type_name(data)}", ErrorKind.TYPE_MISMATCH)

        logger.info(f"Validation completed with {len(errors)} errors")
        return errors.freeze()

    def _validate_mapping(self, node: SchemaNode, data: Mapping[Any, Any], path: Path,
                          errors: ErrorCollection) -> None:
        claimed: set[Any] = set()

        for member in node.literal_members():
            member_path = path + (member.name,)
            if member.name not in data:
                if not member.optional:
                    errors.add(member_path, member.error_msg or MISSING_KEY_MESSAGE, ErrorKind.MISSING_KEY)
                continue
            claimed.add(member.name)
            self._validate_member(member, Slot(data, member.name), member_path, errors)

        # Transformers may add or remove sibling keys, so keys are read after them
        keys = [key for key in list(data) if key not in claimed]
        matched: set[Any] = set()
        for member in node.regex_members():
            hits = [key for key in keys if member.matches_key(key)]
            if not hits and not member.optional:
                errors.add(
                    path + (member.name,),
                    member.error_msg or f"no key matches pattern '{member.name}'",
                    ErrorKind.PATTERN_UNMATCHED,
                )
            for key in hits:
                matched.add(key)
                if key in data:
                    self._validate_member(member, Slot(data, key), path + (_key_segment(key),), errors)

        if self.config.validation.allow_unknown_keys:
            return
        for key in list(data):
            if key not in claimed and key not in matched:
                errors.add(path + (_key_segment(key),), UNKNOWN_KEY_MESSAGE, ErrorKind.UNKNOWN_KEY)

    def _validate_member(self, node: SchemaNode, slot: Slot, path: Path, errors: ErrorCollection) -> None:
        if not node.array:
            self._validate_value(node, slot, path, errors)
            return

        sequence = slot.get()
        if not _is_sequence(sequence):
            errors.add(path, _qualify(node, f"expected a sequence, got {_type_name(sequence)}"),
                       ErrorKind.TYPE_MISMATCH)
            return

        # Immutable sequences are validated through a list copy and written back whole
        items = sequence if isinstance(sequence, MutableSequence) else list(sequence)
        for index in range(len(items)):
            self._validate_value(node, Slot(items, index), path + (index,), errors)

        if items is not sequence and any(new is not old for new, old in zip(items, sequence)):
            self._write(slot, tuple(items) if isinstance(sequence, tuple) else items, path, errors)

    def _validate_value(self, node: SchemaNode, slot: Slot, path: Path, errors: ErrorCollection) -> None:
        context = slot.container

        if node.transformer is not None:
            result = apply_transformer(node.transformer, slot.get(), context)
            if isinstance(result, Failure):
                errors.add(path, result.message, ErrorKind.TRANSFORMER_FAILED)
                return
            if not self._write(slot, result.value, path, errors):
                return

        value = slot.get()

        if not node.is_leaf:
            if not isinstance(value, Mapping):
                errors.add(path, _qualify(node, f"expected a mapping, got {_type_name(value)}"),
                           ErrorKind.TYPE_MISMATCH)
                return
            self._validate_mapping(node, value, path, errors)

        if node.value_pattern is not None and not self._matches_value(node, value, path, errors):
            return

        if node.validator is not None:
            self._run_validator(node, value, context, path, errors)

    def _write(self, slot: Slot, value: Any, path: Path, errors: ErrorCollection) -> bool:
        try:
            slot.set(value)
        except ReadOnlyContainerError as e:
            errors.add(path, str(e), ErrorKind.TRANSFORMER_FAILED)
            return False
        return True

    def _matches_value(self, node: SchemaNode, value: Any, path: Path, errors: ErrorCollection) -> bool:
        if not _is_scalar(value):
            errors.add(path, _qualify(node, f"expected a scalar value, got {_type_name(value)}"),
                       ErrorKind.TYPE_MISMATCH)
            return False

        text = value if isinstance(value, str) else str(value)
        if value is None or node.value_pattern.fullmatch(text) is None:
            errors.add(path, _qualify(node, f"value {value!r} does not match '{node.value}'"),
                       ErrorKind.VALUE_MISMATCH)
            return False
        return True

    def _run_validator(self, node: SchemaNode, value: Any, context: Any, path: Path,
                       errors: ErrorCollection) -> None:
        # Combined validators adapt their parts lazily, so check() can raise too
        try:
            message = node.check().check(value, context)
        except InvalidCallbackError as e:
            errors.add(path, str(e), ErrorKind.INVALID_VALIDATOR)
            return

        if message is not None:
            errors.add(path, message, ErrorKind.VALIDATOR_FAILED)


def validate(
    schema: Mapping[str, Any] | SchemaNode,
    data: Any,
    *,
    config: TreeSchemaConfig | None = None,
) -> ErrorCollection:
    """Validate a data tree against a schema in one call.

    Args:
        schema: Raw schema mapping or compiled root node
        data: Root data mapping, transformed in place
        config: Optional configuration

    Returns:
        Frozen collection of all errors (empty if valid)

    Raises:
        SchemaError: If the schema fails self-validation
    """
    return DataValidator(schema, config).validate(data)
