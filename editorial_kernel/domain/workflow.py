"""
Article workflow engine (``editorial_kernel.domain.workflow``).

Responsibility
--------------
Decide, for a given ``(article, actor, command, payload)``, whether the
primary-status transition is legal and, if so, compute the next status,
feedback and version.  Also decides the authoring commands that are not
status transitions (create, edit content, delete).

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O, no clock access.  The
command facade stamps ``updated_at`` and persists the result.

State machine
-------------
::

    DRAFT --submit--> IN_REVIEW
    IN_REVIEW --approve--> PUBLISHED
    IN_REVIEW --reject--> REJECTED
    IN_REVIEW --request_revision--> NEEDS_REVISION
    NEEDS_REVISION --start_revision--> JOURNALIST_REVISING
    JOURNALIST_REVISING --finish_revision--> REVISED
    REVISED --submit--> IN_REVIEW
    REVISED --approve--> PUBLISHED
    REVISED --reject--> REJECTED
    REVISED --request_revision--> NEEDS_REVISION

Invariants enforced
-------------------
* Only transitions in ``ARTICLE_WORKFLOW`` fire; PUBLISHED and REJECTED
  have no outgoing edges.
* Leaving the moderation statuses (IN_REVIEW, REVISED) resets
  ``admin_edit_request`` to NONE so an edit-access negotiation never
  survives outside moderation.
* ``submit`` clears feedback; ``finish_revision`` keeps it.
* Checks run in a fixed order: authorization, then status, then payload.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from uuid import UUID

from editorial_kernel.domain.article import (
    MODERATION_STATUSES,
    Actor,
    AdminEditRequest,
    Article,
    ArticleContent,
    ArticleStatus,
    Command,
    Role,
)
from editorial_kernel.domain.authorization import RoleGateway
from editorial_kernel.domain.decision import Decision, RejectionKind


@dataclass(frozen=True)
class Transition:
    """A valid primary-status transition."""

    from_state: ArticleStatus
    to_state: ArticleStatus
    command: Command


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for the article lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    ``terminal_states`` are states with no outgoing transitions.
    """

    name: str
    description: str
    initial_state: ArticleStatus
    states: tuple[ArticleStatus, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[ArticleStatus, ...] = ()

    def find(self, from_state: ArticleStatus, command: Command) -> Transition | None:
        for t in self.transitions:
            if t.from_state == from_state and t.command == command:
                return t
        return None

    def sources_for(self, command: Command) -> tuple[ArticleStatus, ...]:
        return tuple(t.from_state for t in self.transitions if t.command == command)


ARTICLE_WORKFLOW = Workflow(
    name="article_editorial",
    description="Journalist authoring and admin moderation of articles",
    initial_state=ArticleStatus.DRAFT,
    states=tuple(ArticleStatus),
    transitions=(
        Transition(ArticleStatus.DRAFT, ArticleStatus.IN_REVIEW, Command.SUBMIT),
        Transition(ArticleStatus.IN_REVIEW, ArticleStatus.PUBLISHED, Command.APPROVE),
        Transition(ArticleStatus.IN_REVIEW, ArticleStatus.REJECTED, Command.REJECT),
        Transition(ArticleStatus.IN_REVIEW, ArticleStatus.NEEDS_REVISION, Command.REQUEST_REVISION),
        Transition(ArticleStatus.NEEDS_REVISION, ArticleStatus.JOURNALIST_REVISING, Command.START_REVISION),
        Transition(ArticleStatus.JOURNALIST_REVISING, ArticleStatus.REVISED, Command.FINISH_REVISION),
        Transition(ArticleStatus.REVISED, ArticleStatus.IN_REVIEW, Command.SUBMIT),
        Transition(ArticleStatus.REVISED, ArticleStatus.PUBLISHED, Command.APPROVE),
        Transition(ArticleStatus.REVISED, ArticleStatus.REJECTED, Command.REJECT),
        Transition(ArticleStatus.REVISED, ArticleStatus.NEEDS_REVISION, Command.REQUEST_REVISION),
    ),
    terminal_states=(ArticleStatus.PUBLISHED, ArticleStatus.REJECTED),
)

DEFAULT_SUBMISSION_FIELDS: tuple[str, ...] = ("title", "body", "image_url")
DEFAULT_CREATION_FIELDS: tuple[str, ...] = ("title", "excerpt", "body", "category_id")
# Content edits only insist on a title.
EDIT_REQUIRED_FIELDS: tuple[str, ...] = ("title",)

# Statuses in which the author-journalist may still change content.
JOURNALIST_EDITABLE_STATUSES: frozenset[ArticleStatus] = frozenset({
    ArticleStatus.DRAFT,
    ArticleStatus.NEEDS_REVISION,
    ArticleStatus.JOURNALIST_REVISING,
})

DEFAULT_DELETABLE_STATUSES: frozenset[ArticleStatus] = frozenset({
    ArticleStatus.DRAFT,
    ArticleStatus.REJECTED,
    ArticleStatus.NEEDS_REVISION,
    ArticleStatus.PUBLISHED,
})


def advance(article: Article, **changes) -> Article:
    """Apply ``changes`` as a new version of ``article``."""
    return replace(article, version=article.version + 1, **changes)


def _illegal(command: Command, article: Article, expected: str) -> Decision:
    return Decision.reject(
        command,
        RejectionKind.ILLEGAL_TRANSITION,
        f"{command.value} requires {expected}, article is {article.status.value}",
    )


class WorkflowEngine:
    """Pure decision logic for the primary editorial status."""

    def __init__(
        self,
        gateway: RoleGateway | None = None,
        submission_fields: tuple[str, ...] = DEFAULT_SUBMISSION_FIELDS,
        creation_fields: tuple[str, ...] = DEFAULT_CREATION_FIELDS,
        deletable_statuses: frozenset[ArticleStatus] = DEFAULT_DELETABLE_STATUSES,
        workflow: Workflow = ARTICLE_WORKFLOW,
    ) -> None:
        self._gateway = gateway or RoleGateway()
        self._submission_fields = tuple(submission_fields)
        self._creation_fields = tuple(creation_fields)
        self._deletable_statuses = frozenset(deletable_statuses)
        self._workflow = workflow

    @property
    def workflow(self) -> Workflow:
        return self._workflow

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def decide(
        self,
        command: Command,
        article: Article,
        actor: Actor,
        *,
        feedback: str | None = None,
        content: ArticleContent | None = None,
    ) -> Decision:
        """Decide a primary-status command by name."""
        match command:
            case Command.SUBMIT:
                return self.submit(article, actor, content)
            case Command.APPROVE:
                return self.approve(article, actor)
            case Command.REJECT:
                return self.reject(article, actor)
            case Command.REQUEST_REVISION:
                return self.request_revision(article, actor, feedback)
            case Command.START_REVISION:
                return self.start_revision(article, actor)
            case Command.FINISH_REVISION:
                return self.finish_revision(article, actor)
            case _:
                raise ValueError(f"Not a workflow transition: {command.value}")

    # ------------------------------------------------------------------
    # Primary transitions
    # ------------------------------------------------------------------

    def submit(
        self,
        article: Article,
        actor: Actor,
        content: ArticleContent | None = None,
    ) -> Decision:
        """Send a draft or revised article to moderation.

        ``content`` is the caller's snapshot of the article body; the
        stored content is used when omitted.
        """
        refusal = self._guard(Command.SUBMIT, article, actor)
        if refusal is not None:
            return refusal

        snapshot = content if content is not None else article.content
        missing = snapshot.missing_fields(self._submission_fields)
        if missing:
            return Decision.reject(
                Command.SUBMIT,
                RejectionKind.VALIDATION,
                "article is missing required content",
                fields=missing,
            )

        return self._fire(Command.SUBMIT, article, content=snapshot, feedback=None)

    def approve(self, article: Article, actor: Actor) -> Decision:
        refusal = self._guard(Command.APPROVE, article, actor)
        if refusal is not None:
            return refusal
        return self._fire(Command.APPROVE, article)

    def reject(self, article: Article, actor: Actor) -> Decision:
        refusal = self._guard(Command.REJECT, article, actor)
        if refusal is not None:
            return refusal
        return self._fire(Command.REJECT, article)

    def request_revision(
        self,
        article: Article,
        actor: Actor,
        feedback: str | None,
    ) -> Decision:
        """Send the article back to its author with a note."""
        refusal = self._guard(Command.REQUEST_REVISION, article, actor)
        if refusal is not None:
            return refusal

        if feedback is None or not feedback.strip():
            return Decision.reject(
                Command.REQUEST_REVISION,
                RejectionKind.VALIDATION,
                "revision feedback must not be empty",
                fields=("feedback",),
            )

        return self._fire(Command.REQUEST_REVISION, article, feedback=feedback)

    def start_revision(self, article: Article, actor: Actor) -> Decision:
        refusal = self._guard(Command.START_REVISION, article, actor)
        if refusal is not None:
            return refusal
        return self._fire(Command.START_REVISION, article)

    def finish_revision(self, article: Article, actor: Actor) -> Decision:
        # Feedback stays visible until the next submit.
        refusal = self._guard(Command.FINISH_REVISION, article, actor)
        if refusal is not None:
            return refusal
        return self._fire(Command.FINISH_REVISION, article)

    # ------------------------------------------------------------------
    # Authoring commands
    # ------------------------------------------------------------------

    def create(
        self,
        article_id: UUID,
        actor: Actor,
        content: ArticleContent,
        requested_status: ArticleStatus | None = None,
    ) -> Decision:
        """Create a new article authored by ``actor``.

        Journalists always start in DRAFT.  Admins may publish directly,
        in which case the submission content requirements apply.
        """
        allowed, reason = self._gateway.check(Command.CREATE, actor)
        if not allowed:
            return Decision.reject(Command.CREATE, RejectionKind.UNAUTHORIZED, reason)

        status = requested_status or ArticleStatus.DRAFT
        if status not in (ArticleStatus.DRAFT, ArticleStatus.PUBLISHED):
            return Decision.reject(
                Command.CREATE,
                RejectionKind.VALIDATION,
                f"articles cannot be created as {status.value}",
                fields=("status",),
            )
        if status == ArticleStatus.PUBLISHED and actor.role != Role.ADMIN:
            return Decision.reject(
                Command.CREATE,
                RejectionKind.UNAUTHORIZED,
                "only admins may publish on creation",
            )

        required = self._creation_fields
        if status == ArticleStatus.PUBLISHED:
            required = tuple(dict.fromkeys(required + self._submission_fields))
        missing = content.missing_fields(required)
        if missing:
            return Decision.reject(
                Command.CREATE,
                RejectionKind.VALIDATION,
                "article is missing required content",
                fields=missing,
            )

        return Decision.accept(
            Command.CREATE,
            Article(
                id=article_id,
                author_id=actor.id,
                status=status,
                content=content,
            ),
        )

    def edit_content(
        self,
        article: Article,
        actor: Actor,
        content: ArticleContent,
    ) -> Decision:
        """Replace the article's content snapshot."""
        allowed, reason = self._gateway.check(Command.EDIT_CONTENT, actor, article)
        if not allowed:
            return Decision.reject(Command.EDIT_CONTENT, RejectionKind.UNAUTHORIZED, reason)

        # An admin editing here is either the author or holds an approved grant.
        if actor.role == Role.JOURNALIST and article.status not in JOURNALIST_EDITABLE_STATUSES:
            return _illegal(
                Command.EDIT_CONTENT,
                article,
                "DRAFT, NEEDS_REVISION or JOURNALIST_REVISING",
            )

        missing = content.missing_fields(EDIT_REQUIRED_FIELDS)
        if missing:
            return Decision.reject(
                Command.EDIT_CONTENT,
                RejectionKind.VALIDATION,
                "article is missing required content",
                fields=missing,
            )

        return Decision.accept(Command.EDIT_CONTENT, advance(article, content=content))

    def delete(self, article: Article, actor: Actor) -> Decision:
        """Decide whether the article may be removed.

        Deletion is not a workflow transition; an accepted decision
        carries the article unchanged so its version can be checked.
        """
        allowed, reason = self._gateway.check(Command.DELETE, actor, article)
        if not allowed:
            return Decision.reject(Command.DELETE, RejectionKind.UNAUTHORIZED, reason)

        if actor.role == Role.JOURNALIST and article.status not in self._deletable_statuses:
            expected = ", ".join(sorted(s.value for s in self._deletable_statuses))
            return _illegal(Command.DELETE, article, expected)

        return Decision.accept(Command.DELETE, article)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _guard(self, command: Command, article: Article, actor: Actor) -> Decision | None:
        allowed, reason = self._gateway.check(command, actor, article)
        if not allowed:
            return Decision.reject(command, RejectionKind.UNAUTHORIZED, reason)

        if self._workflow.find(article.status, command) is None:
            expected = " or ".join(s.value for s in self._workflow.sources_for(command))
            return _illegal(command, article, expected)

        return None

    def _fire(self, command: Command, article: Article, **changes) -> Decision:
        transition = self._workflow.find(article.status, command)
        # _guard has already established the transition exists
        assert transition is not None
        changes["status"] = transition.to_state
        if transition.to_state not in MODERATION_STATUSES:
            changes["admin_edit_request"] = AdminEditRequest.NONE
        return Decision.accept(command, advance(article, **changes))
