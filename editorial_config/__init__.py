"""
editorial_config -- single public entrypoint for editorial configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component may read configuration
    files or environment variables directly.

Architecture position:
    Configuration.  This package sits above ``editorial_kernel`` and below
    ``editorial_services``.  The kernel MUST NEVER import from
    ``editorial_config``; ``editorial_config.bridges`` translates the
    configuration into kernel constructor arguments.

Failure modes:
    - ``FileNotFoundError`` -- the configured YAML file does not exist.
    - ``ConfigurationError`` -- a value failed validation.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``EDITORIAL_CONFIG_TRACE`` log entry with the config id, version and
    checksum.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from editorial_config.loader import ENV_CONFIG_PATH, compute_checksum, load_config
from editorial_config.schema import (
    DatabaseConfig,
    EditorialConfig,
    LoggingConfig,
    WorkflowRules,
)
from editorial_kernel.logging_config import get_logger

_logger = get_logger("config")


def get_active_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> EditorialConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Deployment YAML merged over the packaged defaults.
            Falls back to ``$EDITORIAL_CONFIG`` when omitted.
        environ: Environment mapping; defaults to ``os.environ``.

    Raises:
        FileNotFoundError: If the deployment file does not exist.
        ConfigurationError: If validation fails.
    """
    env = os.environ if environ is None else environ
    path = config_path or env.get(ENV_CONFIG_PATH) or None
    config = load_config(path, environ=env)

    _logger.info(
        "EDITORIAL_CONFIG_TRACE",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(path) if path else None,
        },
    )
    return config


__all__ = [
    "get_active_config",
    "load_config",
    "compute_checksum",
    "EditorialConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "WorkflowRules",
]
