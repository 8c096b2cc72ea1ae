"""
Config -> Kernel Bridges.

Functions that convert an ``EditorialConfig`` into kernel constructor
arguments.  They live in editorial_config (the producer) because the
kernel must NEVER import editorial_config.

Usage:
    from editorial_config.bridges import build_workflow_engine

    config = get_active_config()
    engine = build_workflow_engine(config)
"""

from __future__ import annotations

from editorial_config.schema import EditorialConfig
from editorial_kernel.domain.article import ArticleStatus
from editorial_kernel.domain.authorization import RoleGateway
from editorial_kernel.domain.edit_access import EditAccessNegotiator
from editorial_kernel.domain.workflow import WorkflowEngine


def build_workflow_engine(
    config: EditorialConfig,
    gateway: RoleGateway | None = None,
) -> WorkflowEngine:
    """WorkflowEngine whose content guards follow ``config.workflow``."""
    rules = config.workflow
    return WorkflowEngine(
        gateway=gateway,
        submission_fields=rules.submission_fields,
        creation_fields=rules.creation_fields,
        deletable_statuses=frozenset(ArticleStatus(s) for s in rules.deletable_statuses),
    )


def build_negotiator(
    config: EditorialConfig,
    gateway: RoleGateway | None = None,
) -> EditAccessNegotiator:
    # The negotiation protocol has no configurable parts.
    return EditAccessNegotiator(gateway=gateway)
