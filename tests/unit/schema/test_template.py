"""Tests for skeleton data generation."""

import pytest

from treeschema.errors import SchemaError
from treeschema.schema import compile_schema, generate_template


class TestGenerateTemplate:
    """Test generate_template function."""

    def test_server_skeleton(self, server_schema):
        assert generate_template(server_schema) == {
            "name": None,
            "port": None,
            "tags": [None],
            "options": {},
        }

    def test_required_only(self, server_schema):
        assert generate_template(server_schema, include_optional=False) == {
            "name": None,
            "port": None,
        }

    def test_descriptions(self, server_schema):
        template = generate_template(server_schema, use_descriptions=True)
        assert template["name"] == "Server name"
        assert template["tags"] == ["Free-form labels"]
        assert template["options"] == {}

    def test_array_of_mappings(self, cluster_schema):
        assert generate_template(cluster_schema) == {
            "cluster": None,
            "servers": [{"host": None, "port": None}],
        }

    def test_compiled_root(self, cluster_schema):
        root = compile_schema(cluster_schema)
        assert generate_template(root) == generate_template(cluster_schema)

    def test_invalid_schema(self):
        with pytest.raises(SchemaError):
            generate_template({"a": {"members": "b"}})
