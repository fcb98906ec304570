"""Tests for the compiled schema tree and its traversal interface."""

import pytest

from treeschema.callbacks import InvalidCallbackError, MethodCheck
from treeschema.errors import SchemaError
from treeschema.schema import SchemaNode, compile_schema


@pytest.fixture
def root(server_schema):
    return compile_schema(server_schema)


class TestCompileSchema:
    """Test compilation of raw schemas."""

    def test_root_node(self, root):
        assert isinstance(root, SchemaNode)
        assert root.is_root
        assert not root.is_leaf
        assert [child.name for child in root.children()] == ["name", "port", "tags", "options"]

    def test_invalid_schema_raises(self):
        with pytest.raises(SchemaError):
            compile_schema({"a": {"unknown": True}})

    def test_member_paths(self, root):
        options = root.members["options"]
        assert options.path == ("options",)
        assert options.members["opt_.+"].path == ("options", "opt_.+")

    def test_members_are_read_only(self, root):
        with pytest.raises(TypeError):
            root.members["new"] = root.members["name"]


class TestTraversal:
    """Test the read-only traversal interface."""

    def test_literal_and_regex_members(self, root):
        assert [m.name for m in root.literal_members()] == ["name", "port", "tags", "options"]
        options = root.members["options"]
        assert options.literal_members() == []
        assert [m.name for m in options.regex_members()] == ["opt_.+"]

    def test_array_members(self, root):
        assert [m.name for m in root.array_members()] == ["tags"]

    def test_properties_only_declared(self, root):
        props = root.members["name"].properties()
        assert props == {
            "description": "Server name",
            "error_msg": "names are lowercase",
            "value": r"[a-z][a-z0-9-]*",
        }

    def test_defaults(self, root):
        name = root.members["name"]
        assert name.optional is False
        assert name.array is False
        assert name.is_leaf

    def test_walk(self, root):
        paths = [path for path, _ in root.walk()]
        assert paths == [("name",), ("port",), ("tags",), ("options",), ("options", "opt_.+")]

    def test_matches_key_is_full_match(self, root):
        pattern = root.members["options"].members["opt_.+"]
        assert pattern.matches_key("opt_debug")
        assert not pattern.matches_key("xopt_debug")
        assert not root.members["name"].matches_key("name")


class TestLazyValidatorAdaptation:
    """Validators are adapted when used, not when compiled."""

    def test_object_validator(self):
        class Positive:
            def validate(self, value, context=None):
                return None if value > 0 else "not positive"

        root = compile_schema({"n": {"validator": Positive()}})
        assert isinstance(root.members["n"].check(), MethodCheck)

    def test_no_validator(self):
        root = compile_schema({"n": {}})
        assert root.members["n"].check() is None

    def test_bad_validator_raises_on_use(self):
        root = compile_schema({"n": {"validator": "not callable"}})
        with pytest.raises(InvalidCallbackError):
            root.members["n"].check()
