"""
Edit-access negotiation (``editorial_kernel.domain.edit_access``).

Responsibility
--------------
Manage the ``admin_edit_request`` sub-state: an admin asks for temporary
write access to an article under moderation, and the author grants or
denies it.  The grant is explicit mutual consent; ownership never moves.

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O.  Layered on the primary
status: a negotiation may only open while the article is IN_REVIEW or
REVISED.

State machine
-------------
::

    NONE     --request_edit_access--> PENDING
    DENIED   --request_edit_access--> PENDING
    PENDING  --respond(APPROVED)----> APPROVED
    PENDING  --respond(DENIED)------> DENIED
    PENDING  --cancel_request-------> NONE
    APPROVED --revert_approval------> NONE

Invariants enforced
-------------------
* At most one PENDING request per article: a request while PENDING is
  an illegal transition.
* ``cancel_request`` after the author answered is an illegal transition.
* ``revert_approval`` only needs an APPROVED grant; status is not
  consulted, so an admin can always relinquish a stale grant.
"""

from __future__ import annotations

from editorial_kernel.domain.article import (
    Actor,
    AdminEditRequest,
    Article,
    Command,
    EditAccessDecision,
)
from editorial_kernel.domain.authorization import RoleGateway
from editorial_kernel.domain.decision import Decision, RejectionKind
from editorial_kernel.domain.workflow import advance

EDIT_ACCESS_TRANSITIONS: dict[AdminEditRequest, frozenset[AdminEditRequest]] = {
    AdminEditRequest.NONE: frozenset({AdminEditRequest.PENDING}),
    AdminEditRequest.PENDING: frozenset({
        AdminEditRequest.APPROVED,
        AdminEditRequest.DENIED,
        AdminEditRequest.NONE,
    }),
    AdminEditRequest.APPROVED: frozenset({AdminEditRequest.NONE}),
    AdminEditRequest.DENIED: frozenset({AdminEditRequest.PENDING}),
}

# Sub-states each negotiation command may start from.
COMMAND_SOURCES: dict[Command, frozenset[AdminEditRequest]] = {
    Command.REQUEST_EDIT_ACCESS: frozenset({AdminEditRequest.NONE, AdminEditRequest.DENIED}),
    Command.RESPOND: frozenset({AdminEditRequest.PENDING}),
    Command.CANCEL_REQUEST: frozenset({AdminEditRequest.PENDING}),
    Command.REVERT_APPROVAL: frozenset({AdminEditRequest.APPROVED}),
}


class EditAccessNegotiator:
    """Pure decision logic for ``admin_edit_request``."""

    def __init__(self, gateway: RoleGateway | None = None) -> None:
        self._gateway = gateway or RoleGateway()

    def request_edit_access(self, article: Article, actor: Actor) -> Decision:
        """Admin asks the author for temporary edit access."""
        refusal = self._guard(Command.REQUEST_EDIT_ACCESS, article, actor)
        if refusal is not None:
            return refusal

        if not article.status.is_under_moderation:
            return Decision.reject(
                Command.REQUEST_EDIT_ACCESS,
                RejectionKind.ILLEGAL_TRANSITION,
                "edit access can only be requested while the article is "
                f"IN_REVIEW or REVISED, article is {article.status.value}",
            )

        return self._move(Command.REQUEST_EDIT_ACCESS, article, AdminEditRequest.PENDING)

    def respond(
        self,
        article: Article,
        actor: Actor,
        decision: EditAccessDecision | str,
    ) -> Decision:
        """Author grants or denies the pending request."""
        refusal = self._guard(Command.RESPOND, article, actor)
        if refusal is not None:
            return refusal

        try:
            answer = EditAccessDecision(decision)
        except ValueError:
            return Decision.reject(
                Command.RESPOND,
                RejectionKind.VALIDATION,
                "response must be APPROVED or DENIED",
                fields=("decision",),
            )

        return self._move(Command.RESPOND, article, AdminEditRequest(answer.value))

    def cancel_request(self, article: Article, actor: Actor) -> Decision:
        refusal = self._guard(Command.CANCEL_REQUEST, article, actor)
        if refusal is not None:
            return refusal
        return self._move(Command.CANCEL_REQUEST, article, AdminEditRequest.NONE)

    def revert_approval(self, article: Article, actor: Actor) -> Decision:
        """Admin hands back a granted edit access."""
        refusal = self._guard(Command.REVERT_APPROVAL, article, actor)
        if refusal is not None:
            return refusal
        return self._move(Command.REVERT_APPROVAL, article, AdminEditRequest.NONE)

    # ------------------------------------------------------------------

    def _guard(self, command: Command, article: Article, actor: Actor) -> Decision | None:
        allowed, reason = self._gateway.check(command, actor, article)
        if not allowed:
            return Decision.reject(command, RejectionKind.UNAUTHORIZED, reason)

        sources = COMMAND_SOURCES[command]
        if article.admin_edit_request not in sources:
            expected = " or ".join(sorted(s.value for s in sources))
            return Decision.reject(
                command,
                RejectionKind.ILLEGAL_TRANSITION,
                f"{command.value} requires admin_edit_request {expected}, "
                f"article has {article.admin_edit_request.value}",
            )
        return None

    def _move(
        self,
        command: Command,
        article: Article,
        target: AdminEditRequest,
    ) -> Decision:
        allowed = EDIT_ACCESS_TRANSITIONS[article.admin_edit_request]
        if target not in allowed:
            return Decision.reject(
                command,
                RejectionKind.ILLEGAL_TRANSITION,
                f"admin_edit_request cannot move from "
                f"{article.admin_edit_request.value} to {target.value}",
            )
        return Decision.accept(command, advance(article, admin_edit_request=target))
