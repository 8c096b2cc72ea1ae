"""
Module: editorial_kernel.selectors.article_selector
Responsibility: Read-only article queries: author and moderation listings and
    the journalist/admin dashboard counters.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain value types.  MUST NOT mutate data.

Invariants enforced:
    - Read-only: no add/delete/flush/commit on the caller's session.
    - Results are frozen DTOs (Article, JournalistDashboard, AdminDashboard),
      never ORM instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from editorial_kernel.domain.article import AdminEditRequest, Article, ArticleStatus
from editorial_kernel.models.article import ArticleModel
from editorial_kernel.selectors.base import BaseSelector

RECENT_LIMIT = 5


@dataclass(frozen=True)
class JournalistDashboard:
    """Counters shown to a journalist about their own articles."""

    author_id: UUID
    published: int
    in_review: int
    needs_revision: int
    admin_request: int
    rejected: int
    recent: tuple[Article, ...]


@dataclass(frozen=True)
class AdminDashboard:
    """Moderation counters across all articles."""

    total_published: int
    journalist_requests: int
    needs_revision: int
    admin_edit_pending: int
    total_rejected: int
    recent: tuple[Article, ...]


class ArticleSelector(BaseSelector[ArticleModel]):
    """Selector for article listings and dashboards."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get(self, article_id: UUID) -> Article | None:
        model = self.session.get(ArticleModel, article_id, populate_existing=True)
        return model.to_dto() if model is not None else None

    def list_by_author(
        self,
        author_id: UUID,
        statuses: tuple[ArticleStatus, ...] = (),
        limit: int | None = None,
    ) -> list[Article]:
        """A journalist's own articles, most recently updated first."""
        stmt = select(ArticleModel).where(ArticleModel.author_id == author_id)
        if statuses:
            stmt = stmt.where(ArticleModel.status.in_(_values(statuses)))
        return self._fetch(stmt, limit)

    def list_by_status(
        self,
        statuses: tuple[ArticleStatus, ...],
        limit: int | None = None,
    ) -> list[Article]:
        """The moderation queue for ``statuses``, most recently updated first."""
        stmt = select(ArticleModel).where(ArticleModel.status.in_(_values(statuses)))
        return self._fetch(stmt, limit)

    def list_pending_edit_requests(self, limit: int | None = None) -> list[Article]:
        stmt = select(ArticleModel).where(
            ArticleModel.admin_edit_request == AdminEditRequest.PENDING.value
        )
        return self._fetch(stmt, limit)

    def journalist_dashboard(self, author_id: UUID) -> JournalistDashboard:
        counts = self._count_by_status(author_id)
        return JournalistDashboard(
            author_id=author_id,
            published=counts.get(ArticleStatus.PUBLISHED, 0),
            in_review=_sum(counts, ArticleStatus.IN_REVIEW, ArticleStatus.REVISED),
            needs_revision=_sum(
                counts,
                ArticleStatus.NEEDS_REVISION,
                ArticleStatus.JOURNALIST_REVISING,
            ),
            admin_request=self._count_pending_requests(author_id),
            rejected=counts.get(ArticleStatus.REJECTED, 0),
            recent=tuple(self.list_by_author(author_id, limit=RECENT_LIMIT)),
        )

    def admin_dashboard(self) -> AdminDashboard:
        counts = self._count_by_status()
        recent_stmt = select(ArticleModel).where(
            or_(
                ArticleModel.status.in_(_values((
                    ArticleStatus.IN_REVIEW,
                    ArticleStatus.NEEDS_REVISION,
                ))),
                ArticleModel.admin_edit_request == AdminEditRequest.PENDING.value,
            )
        )
        return AdminDashboard(
            total_published=counts.get(ArticleStatus.PUBLISHED, 0),
            journalist_requests=counts.get(ArticleStatus.IN_REVIEW, 0),
            needs_revision=_sum(
                counts,
                ArticleStatus.NEEDS_REVISION,
                ArticleStatus.JOURNALIST_REVISING,
                ArticleStatus.REVISED,
            ),
            admin_edit_pending=self._count_pending_requests(),
            total_rejected=counts.get(ArticleStatus.REJECTED, 0),
            recent=tuple(self._fetch(recent_stmt, RECENT_LIMIT)),
        )

    # ------------------------------------------------------------------

    def _count_by_status(self, author_id: UUID | None = None) -> dict[ArticleStatus, int]:
        stmt = select(ArticleModel.status, func.count()).group_by(ArticleModel.status)
        if author_id is not None:
            stmt = stmt.where(ArticleModel.author_id == author_id)
        return {ArticleStatus(status): count for status, count in self.session.execute(stmt)}

    def _count_pending_requests(self, author_id: UUID | None = None) -> int:
        stmt = select(func.count()).select_from(ArticleModel).where(
            ArticleModel.admin_edit_request == AdminEditRequest.PENDING.value
        )
        if author_id is not None:
            stmt = stmt.where(ArticleModel.author_id == author_id)
        return self.session.execute(stmt).scalar_one()

    def _fetch(self, stmt, limit: int | None) -> list[Article]:
        stmt = stmt.order_by(ArticleModel.updated_at.desc(), ArticleModel.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = self.session.execute(stmt.execution_options(populate_existing=True)).scalars()
        return [row.to_dto() for row in rows]


def _values(statuses: tuple[ArticleStatus, ...]) -> list[str]:
    return [s.value for s in statuses]


def _sum(counts: dict[ArticleStatus, int], *statuses: ArticleStatus) -> int:
    return sum(counts.get(s, 0) for s in statuses)
