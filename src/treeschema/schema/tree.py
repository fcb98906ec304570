"""Compiled, read-only representation of a schema tree.

A raw schema is a mapping of member name to node spec. ``compile_schema``
turns it into ``SchemaNode`` objects with compiled patterns so the data
validator, template generator and documentation generator can traverse it
without re-interpreting raw mappings.
"""

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..callbacks import Check, as_check

logger = logging.getLogger(__name__)

# Recognized node spec keys, in documentation order
FLAG_PROPERTIES = ("optional", "array", "regex")
TEXT_PROPERTIES = ("description", "error_msg")
SCHEMA_PROPERTIES = (
    "description",
    "error_msg",
    "optional",
    "array",
    "regex",
    "members",
    "value",
    "validator",
    "transformer",
)

SchemaPath = tuple[str, ...]


@dataclass(frozen=True, eq=False)
class SchemaNode:
    """One declaration in the schema tree."""
    name: str
    path: SchemaPath = ()
    description: str | None = None
    error_msg: str | None = None
    optional: bool = False
    array: bool = False
    regex: bool = False
    value: str | None = None
    validator: Any = None
    transformer: Callable[..., Any] | None = None
    members: Mapping[str, "SchemaNode"] | None = None
    declared: frozenset[str] = frozenset()
    value_pattern: re.Pattern[str] | None = field(default=None, repr=False)
    key_pattern: re.Pattern[str] | None = field(default=None, repr=False)

    @property
    def is_leaf(self) -> bool:
        return self.members is None

    @property
    def is_root(self) -> bool:
        return not self.path

    def properties(self) -> dict[str, Any]:
        """Declared properties of this node, excluding members."""
        return {
            name: getattr(self, name)
            for name in SCHEMA_PROPERTIES
            if name in self.declared and name != "members"
        }

    def children(self) -> list["SchemaNode"]:
        return list(self.members.values()) if self.members else []

    def literal_members(self) -> list["SchemaNode"]:
        return [child for child in self.children() if not child.regex]

    def regex_members(self) -> list["SchemaNode"]:
        return [child for child in self.children() if child.regex]

    def array_members(self) -> list["SchemaNode"]:
        return [child for child in self.children() if child.array]

    def matches_key(self, key: Any) -> bool:
        """Check whether a data key is claimed by this regex member."""
        if self.key_pattern is None:
            return False
        return self.key_pattern.fullmatch(str(key)) is not None

    def check(self) -> Check | None:
        """Adapt the declared validator; raises InvalidCallbackError lazily."""
        if self.validator is None:
            return None
        return as_check(self.validator)

    def walk(self) -> Iterator[tuple[SchemaPath, "SchemaNode"]]:
        """Depth-first ``(path, node)`` pairs for all descendants."""
        for child in self.children():
            yield child.path, child
            yield from child.walk()

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else f"{len(self.members)} members"
        return f"SchemaNode({'.'.join(self.path) or '<root>'}, {kind})"


def _compile_node(name: str, spec: Mapping[str, Any], path: SchemaPath) -> SchemaNode:
    members = None
    if "members" in spec:
        members = MappingProxyType({
            child_name: _compile_node(child_name, child_spec, path + (child_name,))
            for child_name, child_spec in spec["members"].items()
        })

    value = spec.get("value")
    regex = bool(spec.get("regex", False))

    return SchemaNode(
        name=name,
        path=path,
        description=spec.get("description"),
        error_msg=spec.get("error_msg"),
        optional=bool(spec.get("optional", False)),
        array=bool(spec.get("array", False)),
        regex=regex,
        value=value,
        validator=spec.get("validator"),
        transformer=spec.get("transformer"),
        members=members,
        declared=frozenset(spec),
        value_pattern=re.compile(value) if value is not None else None,
        key_pattern=re.compile(name) if regex else None,
    )


def compile_schema(schema: Mapping[str, Any]) -> SchemaNode:
    """Self-check a raw schema and compile it into a tree.

    Args:
        schema: Mapping of member name to node spec

    Returns:
        Unnamed root node whose members are the top-level schema entries

    Raises:
        SchemaError: If the schema fails self-validation
    """
    from .checker import ensure_valid_schema

    ensure_valid_schema(schema)
    root = _compile_node("", {"members": schema}, ())
    logger.debug(f"Compiled schema with {sum(1 for _ in root.walk())} nodes")
    return root
