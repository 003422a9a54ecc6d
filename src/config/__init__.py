"""
Configuration Module for schemawalk.

Settings are layered, later layers winning:
    1. Built-in defaults (get_default_config)
    2. An optional YAML file: an explicit path, $SCHEMAWALK_CONFIG, or
       schemawalk.yml in the current directory
    3. Environment variables (GITHUB_WORKSPACE, FORCE_SCHEMA_LOCATION,
       FAIL_FAST, REQUIRE_SCHEMAS, ...)

Usage:
    >>> from config import load_config
    >>> config = load_config()
    >>> if config["fail_fast"]:
    ...     # stop at the first failing file
"""
import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Mapping, Optional

from validation.errors import ConfigurationError


logger = logging.getLogger(__name__)

CONFIG_FILENAME = "schemawalk.yml"
CONFIG_PATH_ENV = "SCHEMAWALK_CONFIG"

# Environment variable -> configuration key
ENV_VARS = {
    "GITHUB_WORKSPACE": "workspace",
    "FORCE_SCHEMA_LOCATION": "force_schema_location",
    "FAIL_FAST": "fail_fast",
    "REQUIRE_SCHEMAS": "require_schemas",
    "SCHEMAWALK_DEBUG": "debug",
    "SCHEMAWALK_LOG_FILE": "log_file",
    "SCHEMAWALK_REQUEST_TIMEOUT": "request_timeout",
}

BOOLEAN_KEYS = ("fail_fast", "require_schemas", "debug")
TRUE_VALUES = ("1", "t", "true", "yes", "on")
FALSE_VALUES = ("0", "f", "false", "no", "off", "")


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "workspace": "",
        "force_schema_location": "",
        "fail_fast": False,
        "require_schemas": False,
        "debug": False,
        "log_file": "",
        "request_timeout": 30,
    }


def parse_bool(value: Any, name: str) -> bool:
    """Parse a boolean setting given as bool or text.

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value {value!r} for {name}")


def _normalize(config: Dict[str, Any]) -> Dict[str, Any]:
    for key in BOOLEAN_KEYS:
        config[key] = parse_bool(config[key], key)

    for key in ("workspace", "force_schema_location", "log_file"):
        value = config[key]
        config[key] = "" if value is None else str(value).strip()

    try:
        timeout = float(config["request_timeout"])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid request_timeout {config['request_timeout']!r}", cause=e) from e
    if timeout <= 0:
        raise ConfigurationError(f"request_timeout must be positive, got {timeout}")
    config["request_timeout"] = timeout
    return config


def _find_config_file(config_path: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    if config_path:
        return Path(config_path)
    if environ.get(CONFIG_PATH_ENV):
        return Path(environ[CONFIG_PATH_ENV])
    candidate = Path.cwd() / CONFIG_FILENAME
    if candidate.exists():
        return candidate
    return None


def _load_config_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {path}")
        return {}
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading configuration file {path}: {e}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing configuration file {path}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Configuration root in {path} must be a mapping, ignoring file")
        return {}

    defaults = get_default_config()
    settings = {}
    for key, value in data.items():
        if key not in defaults:
            logger.warning(f"Ignoring unknown configuration key '{key}' in {path}")
            continue
        settings[key] = value
    logger.info(f"Loaded configuration from {path}")
    return settings


def load_config(environ: Optional[Mapping[str, str]] = None,
                config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from defaults, an optional YAML file and the environment.

    Args:
        environ: Environment mapping to read; defaults to os.environ
        config_path: Explicit YAML configuration file path

    Returns:
        Dictionary with keys workspace, force_schema_location, fail_fast,
        require_schemas, debug, log_file and request_timeout

    Raises:
        ConfigurationError: If a boolean or numeric setting cannot be parsed

    Example:
        >>> config = load_config({"FAIL_FAST": "true"})
        >>> config["fail_fast"]
        True
    """
    if environ is None:
        environ = os.environ

    config = get_default_config()

    path = _find_config_file(config_path, environ)
    if path is not None:
        config.update(_load_config_file(path))

    for env_name, key in ENV_VARS.items():
        if env_name in environ:
            config[key] = environ[env_name]

    return _normalize(config)
