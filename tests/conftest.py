"""
Pytest configuration and shared fixtures for all tests.

This module provides shared fixtures and configuration for the test suite,
including:
- Writing JSON documents and schemas into temporary workspaces
- A schema loader that never touches the network
- Root logger cleanup between tests
- Environment isolation from CI variables such as GITHUB_WORKSPACE
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import Mock

import pytest

from config import CONFIG_PATH_ENV, ENV_VARS
from schema.loader import SchemaLoader


NAME_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "name": {"type": "string"}
    },
    "required": ["name"]
}


@pytest.fixture
def write_json(tmp_path):
    """Return a helper writing a JSON value (or raw text) to a file under tmp_path."""

    def _write(relative_path, value, raw=False):
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(value if raw else json.dumps(value), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def name_schema_path(tmp_path):
    """Write the name schema outside the workspace and return its path."""
    schema_dir = tmp_path / "schemas"
    schema_dir.mkdir()
    path = schema_dir / "name.schema.json"
    path.write_text(json.dumps(NAME_SCHEMA), encoding="utf-8")
    return path


@pytest.fixture
def loader(tmp_path):
    """Provide a SchemaLoader whose HTTP session is a mock."""
    return SchemaLoader(base_dir=str(tmp_path), session=Mock())


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Remove schemawalk environment variables so CI settings don't leak in."""
    for name in list(ENV_VARS) + [CONFIG_PATH_ENV]:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Remove handlers installed by configure_logging() and restore the root level."""
    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    for handler in list(root_logger.handlers):
        if type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
