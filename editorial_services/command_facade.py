"""
editorial_services.command_facade -- the single entry point for article commands.

Responsibility:
    Executes one editorial command per call as a read-decide-write cycle:
    resolve the actor, read the article once, decide with the pure
    WorkflowEngine / EditAccessNegotiator (both consult the RoleGateway
    first), stamp ``updated_at`` from the injected Clock, and persist with
    one conditional write.  Rejected decisions become typed exceptions.

Architecture position:
    Services layer.  May import from editorial_kernel (domain, services,
    selectors) and editorial_config.  Thin coordinator: no transition
    rules live here.

Invariants enforced:
    - Exactly one repository read and at most one conditional write per
      command; a stale ``expected_version`` fails before any decision.
    - A computed article that breaks an aggregate invariant is never saved.
    - Every command outcome emits one ``article_transition`` log record:
      accepted, refused by the engine, or failed on an unknown article,
      a stale or lost version, or an invariant breach.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from editorial_kernel.domain.article import (
    Actor,
    Article,
    ArticleContent,
    ArticleStatus,
    Command,
    EditAccessDecision,
    IdentityProvider,
    Query,
)
from editorial_kernel.domain.clock import Clock, SystemClock
from editorial_kernel.domain.authorization import RoleGateway
from editorial_kernel.domain.decision import Decision, RejectionKind
from editorial_kernel.domain.edit_access import EditAccessNegotiator
from editorial_kernel.domain.workflow import WorkflowEngine
from editorial_kernel.exceptions import (
    ArticleInvariantViolationError,
    ArticleNotFoundError,
    ArticleValidationError,
    ConcurrencyConflictError,
    EditorialKernelError,
    IllegalTransitionError,
    UnauthorizedActionError,
)
from editorial_kernel.invariants import violated_invariants
from editorial_kernel.logging_config import LogContext, get_logger
from editorial_kernel.selectors.article_selector import (
    AdminDashboard,
    ArticleSelector,
    JournalistDashboard,
)
from editorial_kernel.services.article_repository import ArticleRepository

logger = get_logger("services.command_facade")

TRACE_TYPE_ARTICLE_TRANSITION = "ARTICLE_TRANSITION"
OUTCOME_ACCEPTED = "accepted"
OUTCOME_REJECTED = "rejected"

_Decide = Callable[[Article, Actor], Decision]

# Raised around a decision rather than by it; still recorded as rejected.
_RECORDED_ERRORS = (
    ArticleNotFoundError,
    ConcurrencyConflictError,
    ArticleInvariantViolationError,
)


def rejection_to_error(
    decision: Decision,
    actor: Actor,
    article: Article | None = None,
) -> EditorialKernelError:
    """Map a rejected decision onto the matching typed exception."""
    command = decision.command.value
    match decision.rejection:
        case RejectionKind.VALIDATION:
            return ArticleValidationError(decision.reason, decision.fields)
        case RejectionKind.UNAUTHORIZED:
            return UnauthorizedActionError(
                command, str(actor.id), actor.role.value, decision.reason,
            )
        case RejectionKind.ILLEGAL_TRANSITION:
            return IllegalTransitionError(
                command,
                article.status.value if article else "-",
                article.admin_edit_request.value if article else "-",
                decision.reason,
            )
        case _:
            raise ValueError(f"Decision for {command} was not rejected")


class ArticleCommandService:
    """One method per editorial command.

    Each method returns the updated ``Article`` (``delete`` returns None)
    or raises one of the typed kernel exceptions.  The caller owns the
    transaction when the repository is SQLAlchemy-backed.
    """

    def __init__(
        self,
        repository: ArticleRepository,
        identity: IdentityProvider,
        clock: Clock | None = None,
        engine: WorkflowEngine | None = None,
        negotiator: EditAccessNegotiator | None = None,
        outcome_sink: Callable[[dict], None] | None = None,
    ):
        self._repository = repository
        self._identity = identity
        self._clock = clock or SystemClock()
        self._engine = engine or WorkflowEngine()
        self._negotiator = negotiator or EditAccessNegotiator()
        self._outcome_sink = outcome_sink

    # ------------------------------------------------------------------
    # Authoring
    # ------------------------------------------------------------------

    def create(
        self,
        content: ArticleContent,
        status: ArticleStatus | str | None = None,
        article_id: UUID | None = None,
    ) -> Article:
        """Create an article authored by the current actor."""
        actor = self._identity.current_actor()
        new_id = article_id or uuid4()
        requested: ArticleStatus | None = None
        if status is not None:
            try:
                requested = ArticleStatus(status)
            except ValueError:
                raise ArticleValidationError(
                    f"unknown article status {status!r}", ("status",)
                ) from None

        with LogContext.bind(
            actor_id=str(actor.id), article_id=str(new_id), command=Command.CREATE.value,
        ):
            start = time.monotonic()
            decision = self._engine.create(new_id, actor, content, requested)
            if not decision.accepted:
                self._emit(actor, None, start, decision=decision)
                raise rejection_to_error(decision, actor)

            now = self._clock.now()
            article = replace(decision.article, created_at=now, updated_at=now)
            try:
                self._check_invariants(article)
                saved = self._repository.add(article)
            except _RECORDED_ERRORS as exc:
                self._emit(actor, None, start, error=exc)
                raise
            self._emit(actor, None, start, decision=decision, after=saved)
            return saved

    def edit_content(
        self,
        article_id: UUID,
        content: ArticleContent,
        expected_version: int | None = None,
    ) -> Article:
        return self._execute(
            Command.EDIT_CONTENT,
            article_id,
            expected_version,
            lambda article, actor: self._engine.edit_content(article, actor, content),
        )

    def delete(self, article_id: UUID, expected_version: int | None = None) -> None:
        actor = self._identity.current_actor()
        with LogContext.bind(
            actor_id=str(actor.id), article_id=str(article_id), command=Command.DELETE.value,
        ):
            start = time.monotonic()
            article: Article | None = None
            try:
                article = self._load(article_id, expected_version)
                decision = self._engine.delete(article, actor)
                if decision.accepted:
                    self._repository.delete(article.id, article.version)
            except _RECORDED_ERRORS as exc:
                self._emit(actor, article, start, error=exc)
                raise

            self._emit(actor, article, start, decision=decision)
            if not decision.accepted:
                raise rejection_to_error(decision, actor, article)

    # ------------------------------------------------------------------
    # Primary workflow
    # ------------------------------------------------------------------

    def submit(
        self,
        article_id: UUID,
        content: ArticleContent | None = None,
        expected_version: int | None = None,
    ) -> Article:
        """Send a DRAFT or REVISED article to moderation."""
        return self._execute(
            Command.SUBMIT,
            article_id,
            expected_version,
            lambda article, actor: self._engine.submit(article, actor, content),
        )

    def approve(self, article_id: UUID, expected_version: int | None = None) -> Article:
        return self._execute(Command.APPROVE, article_id, expected_version, self._engine.approve)

    def reject(self, article_id: UUID, expected_version: int | None = None) -> Article:
        return self._execute(Command.REJECT, article_id, expected_version, self._engine.reject)

    def request_revision(
        self,
        article_id: UUID,
        feedback: str,
        expected_version: int | None = None,
    ) -> Article:
        return self._execute(
            Command.REQUEST_REVISION,
            article_id,
            expected_version,
            lambda article, actor: self._engine.request_revision(article, actor, feedback),
        )

    def start_revision(self, article_id: UUID, expected_version: int | None = None) -> Article:
        return self._execute(
            Command.START_REVISION, article_id, expected_version, self._engine.start_revision,
        )

    def finish_revision(self, article_id: UUID, expected_version: int | None = None) -> Article:
        return self._execute(
            Command.FINISH_REVISION, article_id, expected_version, self._engine.finish_revision,
        )

    # ------------------------------------------------------------------
    # Edit-access negotiation
    # ------------------------------------------------------------------

    def request_edit_access(
        self,
        article_id: UUID,
        expected_version: int | None = None,
    ) -> Article:
        return self._execute(
            Command.REQUEST_EDIT_ACCESS,
            article_id,
            expected_version,
            self._negotiator.request_edit_access,
        )

    def respond(
        self,
        article_id: UUID,
        decision: EditAccessDecision | str,
        expected_version: int | None = None,
    ) -> Article:
        """Author answers a pending edit-access request."""
        return self._execute(
            Command.RESPOND,
            article_id,
            expected_version,
            lambda article, actor: self._negotiator.respond(article, actor, decision),
        )

    def cancel_request(self, article_id: UUID, expected_version: int | None = None) -> Article:
        return self._execute(
            Command.CANCEL_REQUEST, article_id, expected_version, self._negotiator.cancel_request,
        )

    def revert_approval(self, article_id: UUID, expected_version: int | None = None) -> Article:
        return self._execute(
            Command.REVERT_APPROVAL, article_id, expected_version, self._negotiator.revert_approval,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _execute(
        self,
        command: Command,
        article_id: UUID,
        expected_version: int | None,
        decide: _Decide,
    ) -> Article:
        actor = self._identity.current_actor()
        with LogContext.bind(
            actor_id=str(actor.id), article_id=str(article_id), command=command.value,
        ):
            start = time.monotonic()
            article: Article | None = None
            saved: Article | None = None
            try:
                article = self._load(article_id, expected_version)
                decision = decide(article, actor)
                if decision.accepted:
                    updated = replace(decision.article, updated_at=self._clock.now())
                    self._check_invariants(updated)
                    saved = self._repository.save(updated, article.version)
            except _RECORDED_ERRORS as exc:
                self._emit(actor, article, start, error=exc)
                raise

            self._emit(actor, article, start, decision=decision, after=saved)
            if not decision.accepted:
                raise rejection_to_error(decision, actor, article)
            return saved

    def _load(self, article_id: UUID, expected_version: int | None) -> Article:
        article = self._repository.get(article_id)
        if expected_version is not None and expected_version != article.version:
            logger.warning(
                "stale_expected_version",
                extra={"expected_version": expected_version, "actual_version": article.version},
            )
            raise ConcurrencyConflictError(str(article_id), expected_version, article.version)
        return article

    def _check_invariants(self, article: Article) -> None:
        violations = violated_invariants(article)
        if violations:
            logger.error(
                "article_invariant_violated",
                extra={"invariants": [v.value for v in violations]},
            )
            raise ArticleInvariantViolationError(
                str(article.id), tuple(v.value for v in violations),
            )

    def _emit(
        self,
        actor: Actor,
        before: Article | None,
        start: float,
        decision: Decision | None = None,
        after: Article | None = None,
        error: EditorialKernelError | None = None,
    ) -> None:
        """Emit the structured transition record for one command outcome.

        ``error`` covers failures raised around the decision (unknown
        article, stale or lost version, invariant breach); the record is
        rejected with the lower-cased error code as its rejection kind.
        """
        accepted = decision is not None and decision.accepted
        record: dict[str, Any] = {
            "trace_type": TRACE_TYPE_ARTICLE_TRANSITION,
            "outcome": OUTCOME_ACCEPTED if accepted else OUTCOME_REJECTED,
            "actor_role": actor.role.value,
            "from_status": before.status.value if before else None,
            "from_request": before.admin_edit_request.value if before else None,
            "duration_ms": round((time.monotonic() - start) * 1000, 3),
        }
        if after is not None:
            record["to_status"] = after.status.value
            record["to_request"] = after.admin_edit_request.value
            record["version"] = after.version
        if error is not None:
            record["rejection"] = error.code.lower()
            record["reason"] = str(error)
        elif not accepted:
            record["rejection"] = decision.rejection.value
            record["reason"] = decision.reason

        logger.info("article_transition", extra=record)
        if self._outcome_sink is not None:
            record.update(LogContext.get_all())
            self._outcome_sink(record)


class ArticleQueryService:
    """Read side: listings and dashboards, authorized by the RoleGateway."""

    def __init__(
        self,
        session: Session,
        identity: IdentityProvider,
        gateway: RoleGateway | None = None,
    ):
        self._selector = ArticleSelector(session)
        self._identity = identity
        self._gateway = gateway or RoleGateway()

    def get(self, article_id: UUID) -> Article:
        actor = self._identity.current_actor()
        article = self._selector.get(article_id)
        if article is None:
            raise ArticleNotFoundError(str(article_id))
        self._authorize(Query.GET, actor, article=article)
        return article

    def list_by_author(
        self,
        author_id: UUID | None = None,
        statuses: tuple[ArticleStatus, ...] = (),
    ) -> list[Article]:
        """Articles by ``author_id``; defaults to the current actor's own."""
        actor = self._identity.current_actor()
        author_id = author_id or actor.id
        self._authorize(Query.LIST_BY_AUTHOR, actor, author_id=author_id)
        return self._selector.list_by_author(author_id, statuses)

    def list_by_status(self, *statuses: ArticleStatus) -> list[Article]:
        """Moderation queue."""
        self._authorize(Query.LIST_BY_STATUS, self._identity.current_actor())
        return self._selector.list_by_status(tuple(statuses))

    def journalist_dashboard(self, author_id: UUID | None = None) -> JournalistDashboard:
        actor = self._identity.current_actor()
        author_id = author_id or actor.id
        self._authorize(Query.JOURNALIST_DASHBOARD, actor, author_id=author_id)
        return self._selector.journalist_dashboard(author_id)

    def admin_dashboard(self) -> AdminDashboard:
        self._authorize(Query.ADMIN_DASHBOARD, self._identity.current_actor())
        return self._selector.admin_dashboard()

    def _authorize(
        self,
        query: Query,
        actor: Actor,
        article: Article | None = None,
        author_id: UUID | None = None,
    ) -> None:
        allowed, reason = self._gateway.check(query, actor, article, author_id)
        if not allowed:
            logger.warning(
                "article_query_refused",
                extra={"query": query.value, "actor_id": str(actor.id), "reason": reason},
            )
            raise UnauthorizedActionError(query.value, str(actor.id), actor.role.value, reason)
