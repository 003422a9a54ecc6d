"""
Unit Tests for Configuration Module.

This test suite validates configuration loading from defaults, YAML files
and environment variables.
"""
import os
import pytest
import tempfile

from config import load_config, get_default_config, parse_bool
from validation.errors import ConfigurationError


@pytest.fixture(autouse=True)
def empty_cwd(tmp_path, monkeypatch):
    """Run each test from a directory without schemawalk.yml."""
    monkeypatch.chdir(tmp_path)


def test_get_default_config():
    """Test default configuration values."""
    config = get_default_config()

    assert config["workspace"] == ""
    assert config["force_schema_location"] == ""
    assert config["fail_fast"] is False
    assert config["require_schemas"] is False
    assert config["request_timeout"] == 30


def test_load_config_defaults_with_empty_environment():
    """Without file or environment the defaults are returned."""
    config = load_config(environ={})

    assert config == {**get_default_config(), "request_timeout": 30.0}


def test_load_config_from_environment():
    """Recognised environment variables override defaults."""
    config = load_config(environ={
        "GITHUB_WORKSPACE": "/github/workspace",
        "FORCE_SCHEMA_LOCATION": "https://example.com/schema.json",
        "FAIL_FAST": "true",
        "REQUIRE_SCHEMAS": "1",
        "SCHEMAWALK_REQUEST_TIMEOUT": "2.5",
    })

    assert config["workspace"] == "/github/workspace"
    assert config["force_schema_location"] == "https://example.com/schema.json"
    assert config["fail_fast"] is True
    assert config["require_schemas"] is True
    assert config["request_timeout"] == 2.5


def test_load_config_reads_os_environ(monkeypatch):
    monkeypatch.setenv("FAIL_FAST", "yes")

    assert load_config()["fail_fast"] is True


def test_load_config_with_explicit_path():
    """Test loading config from explicit path."""
    # Create a temporary config file
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
        f.write("""
workspace: data
fail_fast: true
require_schemas: "false"
""")
        temp_path = f.name

    try:
        config = load_config(environ={}, config_path=temp_path)
        assert config["workspace"] == "data"
        assert config["fail_fast"] is True
        assert config["require_schemas"] is False
    finally:
        os.unlink(temp_path)


def test_environment_overrides_config_file(tmp_path):
    """Environment variables win over the YAML file."""
    config_file = tmp_path / "custom.yml"
    config_file.write_text("fail_fast: true\nworkspace: from-file\n")

    config = load_config(environ={"FAIL_FAST": "false"}, config_path=str(config_file))

    assert config["fail_fast"] is False
    assert config["workspace"] == "from-file"


def test_config_file_found_in_cwd(tmp_path):
    (tmp_path / "schemawalk.yml").write_text("require_schemas: yes\n")

    assert load_config(environ={})["require_schemas"] is True


def test_config_file_from_environment_variable(tmp_path):
    config_file = tmp_path / "elsewhere.yml"
    config_file.write_text("force_schema_location: schemas/main.json\n")

    config = load_config(environ={"SCHEMAWALK_CONFIG": str(config_file)})

    assert config["force_schema_location"] == "schemas/main.json"


def test_load_config_file_not_found():
    """Test loading config when file doesn't exist."""
    config = load_config(environ={}, config_path="/nonexistent/path/schemawalk.yml")

    # Should return default config
    assert config["fail_fast"] is False
    assert config["workspace"] == ""


def test_load_config_invalid_yaml(tmp_path):
    config_file = tmp_path / "broken.yml"
    config_file.write_text("fail_fast: [unclosed\n")

    config = load_config(environ={}, config_path=str(config_file))

    assert config["fail_fast"] is False


def test_load_config_path_is_a_directory(tmp_path):
    config = load_config(environ={}, config_path=str(tmp_path))

    assert config == load_config(environ={})


def test_load_config_not_utf8(tmp_path):
    config_file = tmp_path / "latin1.yml"
    config_file.write_bytes(b"workspace: caf\xe9\n")

    assert load_config(environ={}, config_path=str(config_file)) == load_config(environ={})


def test_load_config_non_mapping_root(tmp_path):
    config_file = tmp_path / "list.yml"
    config_file.write_text("- fail_fast\n- true\n")

    assert load_config(environ={}, config_path=str(config_file))["fail_fast"] is False


def test_unknown_keys_ignored(tmp_path):
    config_file = tmp_path / "extra.yml"
    config_file.write_text("colour: blue\nfail_fast: true\n")

    config = load_config(environ={}, config_path=str(config_file))

    assert "colour" not in config
    assert config["fail_fast"] is True


def test_blank_strings_stripped():
    config = load_config(environ={"GITHUB_WORKSPACE": "  ", "FORCE_SCHEMA_LOCATION": " s.json "})

    assert config["workspace"] == ""
    assert config["force_schema_location"] == "s.json"


@pytest.mark.parametrize("value,expected", [
    ("true", True), ("TRUE", True), ("t", True), ("1", True), ("yes", True), ("on", True),
    ("false", False), ("F", False), ("0", False), ("no", False), ("off", False), ("", False),
    (True, True), (False, False),
])
def test_parse_bool(value, expected):
    assert parse_bool(value, "FAIL_FAST") is expected


def test_invalid_boolean_raises():
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(environ={"FAIL_FAST": "sometimes"})

    assert "fail_fast" in exc_info.value.message


@pytest.mark.parametrize("timeout", ["soon", "0", "-1"])
def test_invalid_timeout_raises(timeout):
    with pytest.raises(ConfigurationError):
        load_config(environ={"SCHEMAWALK_REQUEST_TIMEOUT": timeout})
