"""
Pure domain layer.

This module contains the article aggregate and the editorial decision
logic with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (except the injectable Clock abstraction)
- I/O

All domain objects are immutable and deterministic.
"""

from editorial_kernel.domain.article import (
    MODERATION_STATUSES,
    TERMINAL_STATUSES,
    Actor,
    AdminEditRequest,
    Article,
    ArticleContent,
    ArticleStatus,
    Command,
    EditAccessDecision,
    IdentityProvider,
    Query,
    Role,
)
from editorial_kernel.domain.authorization import (
    COMMAND_PERMISSIONS,
    Action,
    Ownership,
    RoleGateway,
)
from editorial_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from editorial_kernel.domain.decision import Decision, RejectionKind
from editorial_kernel.domain.edit_access import EditAccessNegotiator
from editorial_kernel.domain.workflow import (
    ARTICLE_WORKFLOW,
    Transition,
    Workflow,
    WorkflowEngine,
)

__all__ = [
    "MODERATION_STATUSES",
    "TERMINAL_STATUSES",
    "Actor",
    "AdminEditRequest",
    "Article",
    "ArticleContent",
    "ArticleStatus",
    "Command",
    "EditAccessDecision",
    "IdentityProvider",
    "Query",
    "Role",
    "Action",
    "COMMAND_PERMISSIONS",
    "Ownership",
    "RoleGateway",
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "Decision",
    "RejectionKind",
    "EditAccessNegotiator",
    "ARTICLE_WORKFLOW",
    "Transition",
    "Workflow",
    "WorkflowEngine",
]
