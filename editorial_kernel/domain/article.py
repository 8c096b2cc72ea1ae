"""
Article domain types (``editorial_kernel.domain.article``).

Responsibility
--------------
Pure value objects for the editorial workflow: the article aggregate,
its two closed state enumerations, the command vocabulary, the acting
principal, and the identity-provider protocol.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``models/``, ``services/``, or outer layers.

Invariants enforced
-------------------
* Status and edit-request values are closed enumerations; persisted
  strings are converted with ``ArticleStatus(value)`` and fail loudly
  on unknown values.
* ``Article`` is frozen.  Every accepted command produces a new
  instance through ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID


# =========================================================================
# Primary status
# =========================================================================


class ArticleStatus(str, Enum):
    """Primary editorial status of an article."""

    DRAFT = "DRAFT"
    IN_REVIEW = "IN_REVIEW"
    NEEDS_REVISION = "NEEDS_REVISION"
    JOURNALIST_REVISING = "JOURNALIST_REVISING"
    REVISED = "REVISED"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_under_moderation(self) -> bool:
        """True while an admin may act on the article."""
        return self in MODERATION_STATUSES


TERMINAL_STATUSES: frozenset[ArticleStatus] = frozenset({
    ArticleStatus.PUBLISHED,
    ArticleStatus.REJECTED,
})

# Statuses in which an admin may moderate and negotiate edit access.
MODERATION_STATUSES: frozenset[ArticleStatus] = frozenset({
    ArticleStatus.IN_REVIEW,
    ArticleStatus.REVISED,
})


# =========================================================================
# Edit-access negotiation sub-state
# =========================================================================


class AdminEditRequest(str, Enum):
    """Admin edit-access negotiation state, orthogonal to status."""

    NONE = "NONE"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class EditAccessDecision(str, Enum):
    """Answers an author may give to a pending edit-access request."""

    APPROVED = "APPROVED"
    DENIED = "DENIED"


# =========================================================================
# Actors and commands
# =========================================================================


class Role(str, Enum):
    JOURNALIST = "JOURNALIST"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Actor:
    """The authenticated principal issuing a command."""

    id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Command(str, Enum):
    """Every command the editorial facade accepts."""

    CREATE = "create"
    EDIT_CONTENT = "edit_content"
    DELETE = "delete"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_REVISION = "request_revision"
    START_REVISION = "start_revision"
    FINISH_REVISION = "finish_revision"
    REQUEST_EDIT_ACCESS = "request_edit_access"
    RESPOND = "respond"
    CANCEL_REQUEST = "cancel_request"
    REVERT_APPROVAL = "revert_approval"


class Query(str, Enum):
    """Read-side operations; authorized through the same table as commands."""

    GET = "get"
    LIST_BY_AUTHOR = "list_by_author"
    LIST_BY_STATUS = "list_by_status"
    JOURNALIST_DASHBOARD = "journalist_dashboard"
    ADMIN_DASHBOARD = "admin_dashboard"


# =========================================================================
# Aggregate
# =========================================================================


@dataclass(frozen=True)
class ArticleContent:
    """Snapshot of the content fields the workflow guards inspect.

    Media bytes, SEO metadata and translations live outside the kernel;
    ``image_url`` only records whether a primary image was attached.
    """

    title: str = ""
    excerpt: str = ""
    body: str = ""
    image_url: str | None = None
    category_id: int | None = None

    def missing_fields(self, required: tuple[str, ...]) -> tuple[str, ...]:
        """Names of ``required`` fields that are absent or blank."""
        missing = []
        for name in required:
            value = getattr(self, name, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return tuple(missing)


@dataclass(frozen=True)
class Article:
    """The article aggregate manipulated by the editorial workflow."""

    id: UUID
    author_id: UUID
    status: ArticleStatus = ArticleStatus.DRAFT
    admin_edit_request: AdminEditRequest = AdminEditRequest.NONE
    feedback: str | None = None
    version: int = 1
    content: ArticleContent = field(default_factory=ArticleContent)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_authored_by(self, actor: Actor) -> bool:
        return self.author_id == actor.id


# =========================================================================
# IdentityProvider Protocol
# =========================================================================


class IdentityProvider(Protocol):
    """Resolves the principal acting on behalf of the current session."""

    def current_actor(self) -> Actor:
        """Return the acting principal."""
        ...
