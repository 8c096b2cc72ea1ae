"""
Editorial configuration schema.

Frozen dataclasses parsed from YAML by ``editorial_config.loader``.  The
kernel never sees these types; ``editorial_config.bridges`` turns them
into kernel constructor arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings handed to ``init_engine_from_url``."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class WorkflowRules:
    """Configurable parts of the editorial workflow guards."""

    submission_fields: tuple[str, ...] = ("title", "body", "image_url")
    creation_fields: tuple[str, ...] = ("title", "excerpt", "body", "category_id")
    deletable_statuses: tuple[str, ...] = (
        "DRAFT",
        "REJECTED",
        "NEEDS_REVISION",
        "PUBLISHED",
    )


@dataclass(frozen=True)
class EditorialConfig:
    """Root configuration artifact."""

    config_id: str
    version: int
    database: DatabaseConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    workflow: WorkflowRules = field(default_factory=WorkflowRules)
    checksum: str = ""
