"""Tests for Markdown documentation generation."""

from treeschema.schema import compile_schema, generate_docs
from treeschema.schema.docs import describe_kind, describe_requirement


class TestDescribe:
    """Test node description helpers."""

    def test_kinds(self, server_schema, cluster_schema):
        server = compile_schema(server_schema)
        cluster = compile_schema(cluster_schema)

        assert describe_kind(server.members["name"]) == "value"
        assert describe_kind(server.members["tags"]) == "list of values"
        assert describe_kind(server.members["options"]) == "mapping"
        assert describe_kind(cluster.members["servers"]) == "list of mappings"
        assert describe_kind(server.members["options"].members["opt_.+"]) == "value (pattern key)"

    def test_requirements(self):
        root = compile_schema({
            "a": {},
            "b": {"optional": True},
            "c_.+": {"regex": True},
        })
        assert [describe_requirement(node) for node in root.children()] == [
            "required",
            "optional",
            "at least one match",
        ]


class TestGenerateDocs:
    """Test generate_docs function."""

    def test_heading_and_table(self, server_schema):
        docs = generate_docs(server_schema, title="Server config")
        lines = docs.splitlines()
        assert lines[0] == "# Server config"
        assert "| Path | Kind | Presence | Description |" in lines
        assert "| `name` | value | required | Server name |" in lines
        assert "| `options.<opt_.+>` | value (pattern key) | optional |  |" in lines

    def test_sections(self, server_schema):
        docs = generate_docs(server_schema)
        assert "## `port`" in docs
        assert "- Value pattern: `[a-z][a-z0-9-]*`" in docs
        assert "- Transformed before validation" in docs
        assert "- Checked by a custom validator" in docs
        assert "- Error message: names are lowercase" in docs

    def test_nested_paths(self, cluster_schema):
        docs = generate_docs(cluster_schema)
        assert "## `servers.host`" in docs
        assert "## `servers.port`" in docs

    def test_empty_schema(self):
        docs = generate_docs({})
        assert docs == "# Schema reference\n\n_This schema declares no members._\n"
