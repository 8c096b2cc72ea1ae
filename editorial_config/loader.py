"""
Configuration Loader (``editorial_config.loader``).

Responsibility
--------------
Loads the packaged ``defaults.yaml``, merges an optional deployment file
over it, applies environment overrides and parses the result into the
frozen dataclasses of ``editorial_config.schema``.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Runtime callers go through
``editorial_config.get_active_config()``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Unknown content fields, statuses and log levels are rejected with
  ``ConfigurationError``; nothing is silently ignored.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  merged configuration for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import copy
import dataclasses
import hashlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from editorial_config.schema import (
    DatabaseConfig,
    EditorialConfig,
    LoggingConfig,
    WorkflowRules,
)
from editorial_kernel.domain.article import ArticleContent, ArticleStatus
from editorial_kernel.exceptions import ConfigurationError

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

ENV_CONFIG_PATH = "EDITORIAL_CONFIG"
ENV_DATABASE_URL = "EDITORIAL_DATABASE_URL"
ENV_LOG_LEVEL = "EDITORIAL_LOG_LEVEL"

_CONTENT_FIELDS = frozenset(f.name for f in dataclasses.fields(ArticleContent))
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top-level YAML value must be a mapping")
    return data


def merge_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def apply_env_overrides(
    data: Mapping[str, Any],
    environ: Mapping[str, str],
) -> dict[str, Any]:
    """Overlay ``EDITORIAL_DATABASE_URL`` and ``EDITORIAL_LOG_LEVEL``."""
    overrides: dict[str, Any] = {}
    if environ.get(ENV_DATABASE_URL):
        overrides["database"] = {"url": environ[ENV_DATABASE_URL]}
    if environ.get(ENV_LOG_LEVEL):
        overrides["logging"] = {"level": environ[ENV_LOG_LEVEL]}
    return merge_dicts(data, overrides)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    url = data.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ConfigurationError("database.url", "must be a non-empty string")

    pool_size = data.get("pool_size", 20)
    max_overflow = data.get("max_overflow", 10)
    if not isinstance(pool_size, int) or pool_size < 1:
        raise ConfigurationError("database.pool_size", "must be a positive integer")
    if not isinstance(max_overflow, int) or max_overflow < 0:
        raise ConfigurationError("database.max_overflow", "must be a non-negative integer")

    return DatabaseConfig(
        url=url,
        echo=bool(data.get("echo", False)),
        pool_size=pool_size,
        max_overflow=max_overflow,
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(
            "logging.level", f"must be one of {', '.join(_LOG_LEVELS)}, got {level!r}"
        )
    return LoggingConfig(level=level)


def _parse_content_fields(key: str, values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        raise ConfigurationError(key, "must be a list of content field names")
    unknown = sorted(set(values) - _CONTENT_FIELDS)
    if unknown:
        raise ConfigurationError(key, f"unknown content fields: {', '.join(unknown)}")
    return tuple(values)


def parse_workflow(data: dict[str, Any]) -> WorkflowRules:
    defaults = WorkflowRules()
    submission = _parse_content_fields(
        "workflow.submission_fields",
        data.get("submission_fields", list(defaults.submission_fields)),
    )
    creation = _parse_content_fields(
        "workflow.creation_fields",
        data.get("creation_fields", list(defaults.creation_fields)),
    )
    if "title" not in creation:
        raise ConfigurationError("workflow.creation_fields", "must include 'title'")

    deletable = data.get("deletable_statuses", list(defaults.deletable_statuses))
    if not isinstance(deletable, list):
        raise ConfigurationError("workflow.deletable_statuses", "must be a list of statuses")
    for value in deletable:
        try:
            ArticleStatus(value)
        except ValueError:
            raise ConfigurationError(
                "workflow.deletable_statuses", f"unknown status {value!r}"
            ) from None

    return WorkflowRules(
        submission_fields=submission,
        creation_fields=creation,
        deletable_statuses=tuple(deletable),
    )


def parse_config(data: dict[str, Any]) -> EditorialConfig:
    """Parse a merged configuration mapping into an ``EditorialConfig``."""
    if "database" not in data:
        raise ConfigurationError("database", "section is required")
    version = data.get("version", 1)
    if not isinstance(version, int) or version < 1:
        raise ConfigurationError("version", "must be a positive integer")

    return EditorialConfig(
        config_id=str(data.get("config_id", "editorial")),
        version=version,
        database=parse_database(data["database"] or {}),
        logging=parse_logging(data.get("logging") or {}),
        workflow=parse_workflow(data.get("workflow") or {}),
        checksum=compute_checksum(data),
    )


def load_config(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> EditorialConfig:
    """
    Load defaults, merge ``path`` over them, then apply environment overrides.

    Args:
        path: Optional deployment YAML file.
        environ: Environment mapping; defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ
    data = load_yaml_file(DEFAULTS_PATH)
    if path is not None:
        data = merge_dicts(data, load_yaml_file(Path(path)))
    data = apply_env_overrides(data, env)
    return parse_config(data)


def log_level(config: EditorialConfig) -> int:
    """Numeric logging level for ``config``."""
    return logging.getLevelName(config.logging.level)
