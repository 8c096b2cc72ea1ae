"""
editorial_kernel.domain.authorization -- The single authorization table.

Responsibility:
    Decide whether an actor may issue a command or run a query, based on
    the actor's role and their ownership of the article (or of the author
    a listing is scoped to).  Every path (workflow engine, edit-access
    negotiator, query service) consults this table; no call site carries
    its own permission conditionals.

Architecture position:
    Kernel domain layer.  Pure, zero I/O.

Invariants:
    - Ownership means ``actor.id == article.author_id``.
    - While ``admin_edit_request == APPROVED`` an admin counts as co-owner
      for content mutation only (``AUTHOR_OR_GRANTED``).  Submit, start
      revision and finish revision stay author-only (``AUTHOR``).
    - A journalist reads only their own articles and dashboard; an admin
      reads any.
    - An (action, role) pair missing from the table is denied.
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from editorial_kernel.domain.article import (
    Actor,
    AdminEditRequest,
    Article,
    Command,
    Query,
    Role,
)

Action = Command | Query


class Ownership(str, Enum):
    """Ownership requirement attached to a permitted (command, role) pair."""

    ANY = "any"
    AUTHOR = "author"
    AUTHOR_OR_GRANTED = "author_or_granted"


# (action, role) -> ownership requirement.  Absent pairs are denied.
COMMAND_PERMISSIONS: dict[tuple[Action, Role], Ownership] = {
    # Authoring
    (Command.CREATE, Role.JOURNALIST): Ownership.ANY,
    (Command.CREATE, Role.ADMIN): Ownership.ANY,
    (Command.EDIT_CONTENT, Role.JOURNALIST): Ownership.AUTHOR,
    (Command.EDIT_CONTENT, Role.ADMIN): Ownership.AUTHOR_OR_GRANTED,
    (Command.DELETE, Role.JOURNALIST): Ownership.AUTHOR,
    (Command.DELETE, Role.ADMIN): Ownership.ANY,
    # Primary workflow
    (Command.SUBMIT, Role.JOURNALIST): Ownership.AUTHOR,
    (Command.APPROVE, Role.ADMIN): Ownership.ANY,
    (Command.REJECT, Role.ADMIN): Ownership.ANY,
    (Command.REQUEST_REVISION, Role.ADMIN): Ownership.ANY,
    (Command.START_REVISION, Role.JOURNALIST): Ownership.AUTHOR,
    (Command.START_REVISION, Role.ADMIN): Ownership.AUTHOR,
    (Command.FINISH_REVISION, Role.JOURNALIST): Ownership.AUTHOR,
    (Command.FINISH_REVISION, Role.ADMIN): Ownership.AUTHOR,
    # Edit-access negotiation
    (Command.REQUEST_EDIT_ACCESS, Role.ADMIN): Ownership.ANY,
    (Command.RESPOND, Role.JOURNALIST): Ownership.AUTHOR,
    (Command.RESPOND, Role.ADMIN): Ownership.AUTHOR,
    (Command.CANCEL_REQUEST, Role.ADMIN): Ownership.ANY,
    (Command.REVERT_APPROVAL, Role.ADMIN): Ownership.ANY,
    # Read side
    (Query.GET, Role.JOURNALIST): Ownership.AUTHOR,
    (Query.GET, Role.ADMIN): Ownership.ANY,
    (Query.LIST_BY_AUTHOR, Role.JOURNALIST): Ownership.AUTHOR,
    (Query.LIST_BY_AUTHOR, Role.ADMIN): Ownership.ANY,
    (Query.JOURNALIST_DASHBOARD, Role.JOURNALIST): Ownership.AUTHOR,
    (Query.JOURNALIST_DASHBOARD, Role.ADMIN): Ownership.ANY,
    (Query.LIST_BY_STATUS, Role.ADMIN): Ownership.ANY,
    (Query.ADMIN_DASHBOARD, Role.ADMIN): Ownership.ANY,
}


def get_ownership_rule(action: Action, role: Role) -> Ownership | None:
    """Return the ownership rule for this pair, or None when not permitted."""
    return COMMAND_PERMISSIONS.get((action, role))


def is_effective_owner(actor: Actor, article: Article) -> bool:
    """True for the author, and for an admin holding an approved edit grant."""
    if article.is_authored_by(actor):
        return True
    return actor.is_admin and article.admin_edit_request == AdminEditRequest.APPROVED


class RoleGateway:
    """Consults ``COMMAND_PERMISSIONS`` for every command and query."""

    def __init__(
        self,
        permissions: dict[tuple[Action, Role], Ownership] | None = None,
    ) -> None:
        self._permissions = permissions if permissions is not None else COMMAND_PERMISSIONS

    def check(
        self,
        action: Action,
        actor: Actor,
        article: Article | None = None,
        author_id: UUID | None = None,
    ) -> tuple[bool, str]:
        """Check whether ``actor`` may perform ``action``.

        Ownership is judged against ``article`` when one is given, otherwise
        against ``author_id`` (listings and dashboards scoped to one author).
        Neither is needed for CREATE or for admin-wide queries.

        Returns:
            (allowed, reason). reason is empty when allowed, or a short
            message when denied.
        """
        rule = self._permissions.get((action, actor.role))
        if rule is None:
            return (False, f"role {actor.role.value} may not {action.value}")

        if rule == Ownership.ANY:
            return (True, "")

        owner_id = article.author_id if article is not None else author_id
        if owner_id is None:
            return (False, f"{action.value} requires an existing article")

        if owner_id == actor.id:
            return (True, "")
        if (
            rule == Ownership.AUTHOR_OR_GRANTED
            and article is not None
            and is_effective_owner(actor, article)
        ):
            return (True, "")
        if rule == Ownership.AUTHOR:
            return (False, "only the author may do this")
        return (False, "only the author or an admin with approved edit access may do this")

    def allows(
        self,
        action: Action,
        actor: Actor,
        article: Article | None = None,
        author_id: UUID | None = None,
    ) -> bool:
        allowed, _ = self.check(action, actor, article, author_id)
        return allowed
