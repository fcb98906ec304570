"""Skeleton data generation from a schema tree."""

from collections.abc import Mapping
from typing import Any

from .tree import SchemaNode, compile_schema


def generate_template(
    schema: Mapping[str, Any] | SchemaNode,
    *,
    include_optional: bool = True,
    use_descriptions: bool = False,
) -> dict[str, Any]:
    """Produce a skeleton data instance for a schema.

    Mappings are produced for nodes with members, one-element lists for array
    nodes and ``None`` (or the node description) for leaves. Regex members
    have no fixed key and are left out.

    Args:
        schema: Raw schema mapping or compiled root node
        include_optional: Whether optional members appear in the skeleton
        use_descriptions: Fill leaves with their description instead of None

    Returns:
        Skeleton mapping for the schema root
    """
    root = schema if isinstance(schema, SchemaNode) else compile_schema(schema)
    return _members_template(root, include_optional, use_descriptions)


def _members_template(node: SchemaNode, include_optional: bool, use_descriptions: bool) -> dict[str, Any]:
    template = {}
    for member in node.literal_members():
        if member.optional and not include_optional:
            continue
        template[member.name] = _node_template(member, include_optional, use_descriptions)
    return template


def _node_template(node: SchemaNode, include_optional: bool, use_descriptions: bool) -> Any:
    if node.is_leaf:
        item = node.description if use_descriptions else None
    else:
        item = _members_template(node, include_optional, use_descriptions)
    return [item] if node.array else item
