"""Markdown documentation generation from a schema tree."""

from collections.abc import Mapping
from typing import Any

from .tree import SchemaNode, compile_schema


def describe_kind(node: SchemaNode) -> str:
    """Short human-readable kind of data a node expects."""
    if node.is_leaf:
        kind = "value"
    else:
        kind = "mapping"
    if node.array:
        kind = f"list of {kind}s"
    if node.regex:
        kind = f"{kind} (pattern key)"
    return kind


def describe_requirement(node: SchemaNode) -> str:
    if node.regex:
        return "optional" if node.optional else "at least one match"
    return "optional" if node.optional else "required"


def display_path(parent: str, node: SchemaNode) -> str:
    name = f"<{node.name}>" if node.regex else node.name
    return f"{parent}.{name}" if parent else name


def generate_docs(schema: Mapping[str, Any] | SchemaNode, *, title: str = "Schema reference") -> str:
    """Render Markdown documentation for a schema.

    The document starts with a summary table of every member path, followed
    by one section per member with its constraints and description.

    Args:
        schema: Raw schema mapping or compiled root node
        title: Top-level heading

    Returns:
        Markdown text
    """
    root = schema if isinstance(schema, SchemaNode) else compile_schema(schema)

    entries: list[tuple[str, SchemaNode]] = []
    _collect(root, "", entries)

    lines = [f"# {title}", ""]
    if not entries:
        lines.append("_This schema declares no members._")
        return "\n".join(lines) + "\n"

    lines.extend([
        "| Path | Kind | Presence | Description |",
        "| --- | --- | --- | --- |",
    ])
    for path, node in entries:
        summary = node.description.splitlines()[0] if node.description else ""
        lines.append(f"| `{path}` | {describe_kind(node)} | {describe_requirement(node)} | {summary} |")
    lines.append("")

    for path, node in entries:
        lines.append(f"## `{path}`")
        lines.append("")
        if node.description:
            lines.append(node.description)
            lines.append("")
        lines.append(f"- Kind: {describe_kind(node)}")
        lines.append(f"- Presence: {describe_requirement(node)}")
        if node.value is not None:
            lines.append(f"- Value pattern: `{node.value}`")
        if node.transformer is not None:
            lines.append("- Transformed before validation")
        if node.validator is not None:
            lines.append("- Checked by a custom validator")
        if node.error_msg:
            lines.append(f"- Error message: {node.error_msg}")
        lines.append("")

    return "\n".join(lines)


def _collect(node: SchemaNode, parent: str, entries: list[tuple[str, SchemaNode]]) -> None:
    for child in node.children():
        path = display_path(parent, child)
        entries.append((path, child))
        _collect(child, path, entries)
