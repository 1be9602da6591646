"""
sis_config -- single entrypoint for ledger runtime settings.

Responsibility:
    ``get_settings()`` is the only way the ledger obtains configuration.
    It merges dataclass defaults, an optional YAML file and environment
    variables (see ``sis_config.loader``) into a frozen ``Settings``.

Architecture position:
    Configuration.  Sits beside ``sis_finance``; the kernel only refers to
    ``Settings`` for typing and receives instances from its caller.

Failure modes:
    - ``FileNotFoundError`` -- the configured YAML file is missing.
    - ``ValueError`` -- unknown key or bad value in the file/environment.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from sis_config.loader import load_settings
from sis_config.settings import Settings

_logger = logging.getLogger("sis_finance.config")


def get_settings(
    config_file: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings and log a trace of the (redacted) result."""
    settings = load_settings(config_file, env)
    _logger.info(
        "settings_loaded",
        extra={
            "config_file": str(config_file) if config_file else None,
            "settings": settings.to_dict(),
        },
    )
    return settings


__all__ = ["Settings", "get_settings", "load_settings"]
