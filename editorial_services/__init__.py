"""
editorial_services -- command and query services over the editorial kernel.

Wires configuration, persistence and identity into the
``ArticleCommandService`` / ``ArticleQueryService`` pair.

Usage:
    config = bootstrap()
    with session_scope() as session:
        service = build_command_service(
            config,
            SqlAlchemyArticleRepository(session),
            StaticIdentityProvider(actor),
        )
        service.submit(article_id, expected_version=3)
"""

from __future__ import annotations

from editorial_config import EditorialConfig, get_active_config
from editorial_config.bridges import build_negotiator, build_workflow_engine
from editorial_config.loader import log_level
from editorial_kernel.db.engine import init_engine_from_url
from editorial_kernel.domain.article import IdentityProvider
from editorial_kernel.domain.clock import Clock
from editorial_kernel.logging_config import configure_logging
from editorial_kernel.services.article_repository import ArticleRepository
from editorial_services.command_facade import (
    ArticleCommandService,
    ArticleQueryService,
    rejection_to_error,
)
from editorial_services.identity import StaticIdentityProvider, SwitchableIdentityProvider


def bootstrap(config: EditorialConfig | None = None) -> EditorialConfig:
    """Configure logging and the database engine from ``config``."""
    config = config or get_active_config()
    configure_logging(level=log_level(config))
    init_engine_from_url(
        config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )
    return config


def build_command_service(
    config: EditorialConfig,
    repository: ArticleRepository,
    identity: IdentityProvider,
    clock: Clock | None = None,
) -> ArticleCommandService:
    return ArticleCommandService(
        repository=repository,
        identity=identity,
        clock=clock,
        engine=build_workflow_engine(config),
        negotiator=build_negotiator(config),
    )


__all__ = [
    "ArticleCommandService",
    "ArticleQueryService",
    "StaticIdentityProvider",
    "SwitchableIdentityProvider",
    "bootstrap",
    "build_command_service",
    "rejection_to_error",
]
