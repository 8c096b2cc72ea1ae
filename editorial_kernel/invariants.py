"""
Article Invariants Contract.

These invariants hold for every article after every accepted command.
The workflow engine and the edit-access negotiator enforce them by
construction; ``violated_invariants`` re-checks a computed article before
it is persisted and is the oracle for the property tests.
"""

from enum import Enum, unique

from editorial_kernel.domain.article import (
    MODERATION_STATUSES,
    AdminEditRequest,
    Article,
    ArticleStatus,
)


@unique
class ArticleInvariant(str, Enum):
    """Non-configurable invariants of the article aggregate."""

    NEGOTIATION_ONLY_UNDER_MODERATION = "negotiation_only_under_moderation"
    """admin_edit_request != NONE implies status in {IN_REVIEW, REVISED}."""

    CLEAN_DRAFT = "clean_draft"
    """status == DRAFT implies admin_edit_request == NONE and no feedback."""

    POSITIVE_VERSION = "positive_version"
    """version starts at 1 and only grows."""


ALL_ARTICLE_INVARIANTS: frozenset[ArticleInvariant] = frozenset(ArticleInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "editorial_services",
    "editorial_config",
)


def violated_invariants(article: Article) -> tuple[ArticleInvariant, ...]:
    """Return the invariants ``article`` breaks, in declaration order."""
    violations: list[ArticleInvariant] = []

    if (
        article.admin_edit_request != AdminEditRequest.NONE
        and article.status not in MODERATION_STATUSES
    ):
        violations.append(ArticleInvariant.NEGOTIATION_ONLY_UNDER_MODERATION)

    if article.status == ArticleStatus.DRAFT and (
        article.admin_edit_request != AdminEditRequest.NONE
        or article.feedback is not None
    ):
        violations.append(ArticleInvariant.CLEAN_DRAFT)

    if article.version < 1:
        violations.append(ArticleInvariant.POSITIVE_VERSION)

    return tuple(violations)
