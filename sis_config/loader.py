"""
Settings loader -- YAML file plus environment overrides.

Precedence, lowest first:

    1. ``Settings`` dataclass defaults
    2. YAML file (``SIS_CONFIG_FILE`` or an explicit path), read with
       ``yaml.safe_load``
    3. Environment variables

Environment variables understood:

    DATABASE_URL          full SQLAlchemy URL
    DB_HOST, DB_PORT,     assembled into a PostgreSQL URL when
    DB_USER, DB_PASSWORD, DATABASE_URL is not set and at least one
    DB_NAME               of them is
    SIS_LOG_LEVEL         log level name
    SIS_DB_ECHO           "1"/"true"/"yes" to echo SQL
    SIS_DB_POOL_SIZE      integer
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy.engine import URL

from sis_config.settings import Settings

CONFIG_FILE_ENV = "SIS_CONFIG_FILE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_INT_FIELDS = {"pool_size", "max_overflow", "pool_timeout", "pool_recycle"}
_BOOL_FIELDS = {"echo"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML settings file.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    # Allow the values to sit under a top-level "sis_finance:" key.
    if set(data) == {"sis_finance"} and isinstance(data["sis_finance"], dict):
        data = data["sis_finance"]
    return data


def _coerce(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_VALUES
    if name in _INT_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Setting {name} must be an integer, got {value!r}") from None
    return str(value)


def _database_url_from_parts(env: Mapping[str, str]) -> str | None:
    parts = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME")
    if not any(key in env for key in parts):
        return None
    port = env.get("DB_PORT", "5432")
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"DB_PORT must be an integer, got {port!r}") from None
    url = URL.create(
        "postgresql+psycopg2",
        username=env.get("DB_USER", "postgres"),
        password=env.get("DB_PASSWORD") or None,
        host=env.get("DB_HOST", "localhost"),
        port=port_number,
        database=env.get("DB_NAME", "sdit_management"),
    )
    # special characters in the password are percent-escaped
    return url.render_as_string(hide_password=False)


def env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Settings values taken from environment variables."""
    overrides: dict[str, Any] = {}

    database_url = env.get("DATABASE_URL") or _database_url_from_parts(env)
    if database_url:
        overrides["database_url"] = database_url
    if env.get("SIS_LOG_LEVEL"):
        overrides["log_level"] = env["SIS_LOG_LEVEL"].upper()
    if env.get("SIS_DB_ECHO"):
        overrides["echo"] = env["SIS_DB_ECHO"]
    if env.get("SIS_DB_POOL_SIZE"):
        overrides["pool_size"] = env["SIS_DB_POOL_SIZE"]
    return overrides


def load_settings(
    config_file: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build a ``Settings`` from defaults, an optional YAML file and the environment.

    Unknown keys in the YAML file are rejected so typos fail loudly.

    Raises:
        FileNotFoundError: an explicitly named file does not exist.
        ValueError: unknown key or uncoercible value.
    """
    env = os.environ if env is None else env
    values: dict[str, Any] = {}

    path = config_file or env.get(CONFIG_FILE_ENV)
    if path:
        file_values = load_yaml_file(Path(path))
        unknown = set(file_values) - Settings.field_names()
        if unknown:
            raise ValueError(f"Unknown settings in {path}: {sorted(unknown)}")
        values.update(file_values)

    values.update(env_overrides(env))
    return Settings(**{name: _coerce(name, value) for name, value in values.items()})
