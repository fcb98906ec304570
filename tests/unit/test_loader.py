"""Tests for schema and data document loading."""

import json
import textwrap

import pytest

from treeschema.loader import load_json, load_schema, save_json


def write_module(path, name, source):
    (path / f"{name}.py").write_text(textwrap.dedent(source), encoding="utf-8")


class TestLoadSchema:
    """Test load_schema reference resolution."""

    def test_json_file(self, tmp_path):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text(json.dumps({"name": {"value": "[a-z]+"}}))
        assert load_schema(str(schema_file)) == {"name": {"value": "[a-z]+"}}

    def test_missing_json_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_schema(str(tmp_path / "missing.json"))

    def test_module_attribute(self, tmp_path, monkeypatch):
        write_module(tmp_path, "loader_attr_schemas", """
            SCHEMA = {"port": {"transformer": int}}
        """)
        monkeypatch.syspath_prepend(str(tmp_path))

        schema = load_schema("loader_attr_schemas:SCHEMA")
        assert schema["port"]["transformer"] is int

    def test_callable_factory(self, tmp_path, monkeypatch):
        write_module(tmp_path, "loader_factory_schemas", """
            def build():
                return {"name": {"optional": True}}
        """)
        monkeypatch.syspath_prepend(str(tmp_path))

        assert load_schema("loader_factory_schemas:build") == {"name": {"optional": True}}

    def test_dotted_attribute(self, tmp_path, monkeypatch):
        write_module(tmp_path, "loader_nested_schemas", """
            class Schemas:
                SERVER = {"host": {}}
        """)
        monkeypatch.syspath_prepend(str(tmp_path))

        assert load_schema("loader_nested_schemas:Schemas.SERVER") == {"host": {}}

    def test_missing_attribute(self, tmp_path, monkeypatch):
        write_module(tmp_path, "loader_empty_schemas", "VALUE = 1\n")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ValueError, match="has no attribute"):
            load_schema("loader_empty_schemas:SCHEMA")

    def test_missing_module(self):
        with pytest.raises(ValueError, match="Cannot import"):
            load_schema("no_such_module_for_treeschema:SCHEMA")

    def test_malformed_reference(self):
        with pytest.raises(ValueError, match="module:attribute"):
            load_schema("not-a-reference")


class TestJsonDocuments:
    """Test load_json and save_json."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "data.json"
        save_json(path, {"name": "web", "port": 80})
        assert path.read_text(encoding="utf-8").endswith("\n")
        assert load_json(path) == {"name": "web", "port": 80}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{broken")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_json(path)
