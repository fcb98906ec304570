"""Shared fixtures for treeschema tests."""

import pytest


def port_in_range(value):
    """Validator used by the server schema fixtures."""
    if not 0 < value < 65536:
        return f"port {value} out of range"
    return None


@pytest.fixture
def server_schema():
    """Schema for a small server configuration."""
    return {
        "name": {
            "description": "Server name",
            "value": r"[a-z][a-z0-9-]*",
            "error_msg": "names are lowercase",
        },
        "port": {
            "description": "Listening port",
            "transformer": int,
            "validator": port_in_range,
        },
        "tags": {
            "description": "Free-form labels",
            "optional": True,
            "array": True,
            "value": r"[a-z]+",
        },
        "options": {
            "optional": True,
            "members": {
                "opt_.+": {"regex": True, "optional": True},
            },
        },
    }


@pytest.fixture
def valid_server():
    """Data conforming to server_schema."""
    return {
        "name": "web-1",
        "port": "8080",
        "tags": ["frontend", "public"],
        "options": {"opt_debug": True},
    }


@pytest.fixture
def cluster_schema():
    """Schema with nested arrays of mappings."""
    return {
        "cluster": {"value": r"\w+"},
        "servers": {
            "array": True,
            "members": {
                "host": {"value": r"[a-z0-9.]+"},
                "port": {"optional": True, "transformer": int},
            },
        },
    }


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line("markers", "cli: tests that drive the command line")
