"""
Hypothesis fuzzing of the pure editorial decision logic.

Drives one article through random sequences of (actor, command, payload)
drawn from every command the engine and negotiator accept, applying only
accepted decisions, and checks after every step:

- no aggregate invariant is violated
- at most one edit-access request is ever PENDING (a request while
  PENDING is refused as an illegal transition)
- version grows by exactly one per accepted command and never otherwise
- PUBLISHED / REJECTED are never left by a status transition
"""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from hypothesis import given, settings
from hypothesis import strategies as st

from editorial_kernel.domain.article import (
    TERMINAL_STATUSES,
    Actor,
    AdminEditRequest,
    Article,
    ArticleContent,
    Command,
    Role,
)
from editorial_kernel.domain.decision import Decision, RejectionKind
from editorial_kernel.domain.edit_access import EditAccessNegotiator
from editorial_kernel.domain.workflow import WorkflowEngine
from editorial_kernel.invariants import violated_invariants

AUTHOR = Actor(id=uuid4(), role=Role.JOURNALIST)
STRANGER = Actor(id=uuid4(), role=Role.JOURNALIST)
ADMIN = Actor(id=uuid4(), role=Role.ADMIN)

ENGINE = WorkflowEngine()
NEGOTIATOR = EditAccessNegotiator()

FULL = ArticleContent(
    title="Hedges",
    excerpt="Native mixes",
    body="Hawthorn and beech",
    image_url="img",
    category_id=2,
)

STEP_COMMANDS = [c for c in Command if c != Command.CREATE]


def _apply(article: Article, actor: Actor, command: Command, payload: str | None) -> Decision:
    match command:
        case Command.EDIT_CONTENT:
            return ENGINE.edit_content(article, actor, replace(FULL, title=payload or ""))
        case Command.DELETE:
            return ENGINE.delete(article, actor)
        case Command.REQUEST_EDIT_ACCESS:
            return NEGOTIATOR.request_edit_access(article, actor)
        case Command.RESPOND:
            return NEGOTIATOR.respond(article, actor, payload or "")
        case Command.CANCEL_REQUEST:
            return NEGOTIATOR.cancel_request(article, actor)
        case Command.REVERT_APPROVAL:
            return NEGOTIATOR.revert_approval(article, actor)
        case _:
            return ENGINE.decide(command, article, actor, feedback=payload)


steps = st.lists(
    st.tuples(
        st.sampled_from([AUTHOR, STRANGER, ADMIN]),
        st.sampled_from(STEP_COMMANDS),
        st.one_of(
            st.none(),
            st.sampled_from(["APPROVED", "DENIED", "", "  ", "More photos please", "junk"]),
        ),
    ),
    max_size=40,
)


@settings(max_examples=300, deadline=None)
@given(steps=steps)
def test_invariants_hold_over_random_command_sequences(steps):
    article = ENGINE.create(uuid4(), AUTHOR, FULL).article

    for actor, command, payload in steps:
        before = article
        decision = _apply(article, actor, command, payload)

        if command == Command.REQUEST_EDIT_ACCESS and before.admin_edit_request == AdminEditRequest.PENDING:
            assert not decision.accepted

        if not decision.accepted:
            assert decision.article is None
            assert decision.rejection in set(RejectionKind)
            continue

        if command == Command.DELETE:
            assert decision.article == before
            continue

        article = decision.article
        assert violated_invariants(article) == ()
        assert article.version == before.version + 1
        if before.status in TERMINAL_STATUSES:
            assert article.status == before.status


@settings(max_examples=200, deadline=None)
@given(steps=steps)
def test_rejections_follow_authorization_then_status_then_payload(steps):
    """A command refused for a payload reason was authorized and legal."""
    article = ENGINE.create(uuid4(), AUTHOR, FULL).article

    for actor, command, payload in steps:
        decision = _apply(article, actor, command, payload)
        if decision.rejection == RejectionKind.VALIDATION:
            retry_payload = {
                Command.RESPOND: "APPROVED",
                Command.REQUEST_REVISION: "Valid feedback",
                Command.EDIT_CONTENT: "A title",
            }[command]
            assert _apply(article, actor, command, retry_payload).accepted
        if decision.accepted and command != Command.DELETE:
            article = decision.article
