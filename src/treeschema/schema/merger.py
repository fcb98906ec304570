"""Merging of independently authored schema trees.

The merge runs on a detached copy of the base tree. The base is only
rewritten, in place, once the copy has merged without conflicts and passes
self-validation; on any error it is left exactly as it was.
"""

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from ..callbacks import CombinedValidator
from ..config import TreeSchemaConfig, create_default_config
from ..errors import ErrorCollection, ErrorKind
from .checker import validate_schema
from .tree import SchemaPath

logger = logging.getLogger(__name__)


def merge_schema(
    base: MutableMapping[str, Any],
    incoming: Mapping[str, Any],
    at_path: str | Sequence[str] = (),
    *,
    config: TreeSchemaConfig | None = None,
) -> ErrorCollection:
    """Merge ``incoming`` into ``base`` below ``at_path``.

    Args:
        base: Raw schema updated in place when the merge succeeds
        incoming: Raw schema whose members are merged in
        at_path: Member names (or a dotted string) naming the node under
                 which ``incoming`` is merged; missing nodes are created
        config: Optional configuration (validator combination policy)

    Returns:
        Frozen collection of merge errors (empty if the merge was applied)
    """
    config = config or create_default_config()
    policy = config.merge.validator_policy
    errors = ErrorCollection()

    if not isinstance(base, MutableMapping):
        errors.add((), f"base schema must be a mutable mapping, got {type(base).__name__}",
                   ErrorKind.INVALID_SCHEMA)
        return errors.freeze()
    if not isinstance(incoming, Mapping):
        errors.add((), f"incoming schema must be a mapping, got {type(incoming).__name__}",
                   ErrorKind.INVALID_SCHEMA)
        return errors.freeze()

    path = normalize_schema_path(at_path)
    merged = _copy_tree(base)

    target = _resolve_members(merged, path, errors)
    if target is not None:
        _merge_members(target, incoming, path, errors, policy)

    for error in validate_schema(merged):
        errors.add(error.path, f"merged schema invalid: {error.message}", ErrorKind.MERGE_INVALID)

    if errors:
        logger.info(f"Merge at {'.'.join(path) or 'root'} rejected with {len(errors)} errors")
        return errors.freeze()

    base.clear()
    base.update(merged)
    logger.info(f"Merged {len(incoming)} members at {'.'.join(path) or 'root'}")
    return errors.freeze()


def normalize_schema_path(at_path: str | Sequence[str]) -> SchemaPath:
    if isinstance(at_path, str):
        return tuple(part for part in at_path.split(".") if part)
    return tuple(at_path)


def _copy_tree(value: Any) -> Any:
    # Mappings are copied; callables and validator objects are shared
    if isinstance(value, Mapping):
        return {key: _copy_tree(item) for key, item in value.items()}
    return value


def _resolve_members(
    merged: dict[str, Any],
    path: SchemaPath,
    errors: ErrorCollection,
) -> dict[str, Any] | None:
    members = merged
    for depth, name in enumerate(path):
        node = members.setdefault(name, {})
        if not isinstance(node, dict):
            errors.add(path[:depth + 1], "cannot merge below a node that is not a mapping",
                       ErrorKind.INVALID_SCHEMA)
            return None
        members = node.setdefault("members", {})
        if not isinstance(members, dict):
            errors.add(path[:depth + 1], "cannot merge into 'members' that is not a mapping",
                       ErrorKind.INVALID_SCHEMA)
            return None
    return members


def _merge_members(
    base_members: dict[str, Any],
    incoming_members: Mapping[str, Any],
    path: SchemaPath,
    errors: ErrorCollection,
    policy: str,
) -> None:
    for name, incoming_node in incoming_members.items():
        if name not in base_members:
            base_members[name] = _copy_tree(incoming_node)
            continue

        base_node = base_members[name]
        if not isinstance(base_node, dict) or not isinstance(incoming_node, Mapping):
            errors.add(path + (name,), "cannot merge nodes that are not mappings", ErrorKind.INVALID_SCHEMA)
            continue
        _merge_node(base_node, incoming_node, path + (name,), errors, policy)


def _merge_node(
    base_node: dict[str, Any],
    incoming_node: Mapping[str, Any],
    path: SchemaPath,
    errors: ErrorCollection,
    policy: str,
) -> None:
    for key, incoming_value in incoming_node.items():
        if key not in base_node:
            base_node[key] = _copy_tree(incoming_value)
            continue

        base_value = base_node[key]
        if key == "transformer":
            errors.add(path, "transformer conflict: both schemas define a transformer",
                       ErrorKind.TRANSFORMER_CONFLICT)
        elif key == "validator":
            base_node[key] = CombinedValidator([base_value, incoming_value], policy)
        elif key == "members":
            if isinstance(base_value, dict) and isinstance(incoming_value, Mapping):
                _merge_members(base_value, incoming_value, path, errors, policy)
            else:
                errors.add(path, "cannot merge 'members' that are not mappings", ErrorKind.INVALID_SCHEMA)
        elif base_value != incoming_value:
            errors.add(path, f"conflicting '{key}': {base_value!r} != {incoming_value!r}",
                       ErrorKind.PROPERTY_CONFLICT)
