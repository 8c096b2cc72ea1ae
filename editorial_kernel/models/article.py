"""
Module: editorial_kernel.models.article
Responsibility: ORM persistence for the article aggregate.

Architecture position: Kernel > Models.  May import from db/base.py and,
    for DTO conversion only, from domain/.

Invariants enforced:
    - Status and admin_edit_request values are closed: DB check constraints
      reject anything outside the enumerations.
    - version is positive; it is the optimistic-concurrency token and is
      only ever changed through a conditional UPDATE in the repository.

Failure modes:
    - IntegrityError on an out-of-range status, request value or version.
    - ValueError from to_dto() if a row holds a value the domain enums
      do not know (fails loudly instead of coercing).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from editorial_kernel.db.base import Base, UTCDateTime, UUIDString

if TYPE_CHECKING:
    from editorial_kernel.domain.article import Article


class ArticleModel(Base):
    """Persistent article row.

    Contract:
        Rows are written only through ArticleRepository, which owns the
        version check.  Content columns mirror ArticleContent.
    """

    __tablename__ = "articles"

    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'IN_REVIEW', 'NEEDS_REVISION', "
            "'JOURNALIST_REVISING', 'REVISED', 'PUBLISHED', 'REJECTED')",
            name="ck_articles_valid_status",
        ),
        CheckConstraint(
            "admin_edit_request IN ('NONE', 'PENDING', 'APPROVED', 'DENIED')",
            name="ck_articles_valid_admin_edit_request",
        ),
        CheckConstraint("version >= 1", name="ck_articles_positive_version"),
        Index("ix_articles_author_created", "author_id", "created_at"),
        Index("ix_articles_status", "status"),
    )

    author_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="DRAFT")
    admin_edit_request: Mapped[str] = mapped_column(
        String(20), nullable=False, default="NONE",
    )
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    title: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    category_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Article {self.id} status={self.status} "
            f"request={self.admin_edit_request} v{self.version}>"
        )

    def to_dto(self) -> Article:
        """Convert ORM model to frozen domain DTO."""
        from editorial_kernel.domain.article import (
            AdminEditRequest,
            Article,
            ArticleContent,
            ArticleStatus,
        )

        return Article(
            id=self.id,
            author_id=self.author_id,
            status=ArticleStatus(self.status),
            admin_edit_request=AdminEditRequest(self.admin_edit_request),
            feedback=self.feedback,
            version=self.version,
            content=ArticleContent(
                title=self.title,
                excerpt=self.excerpt,
                body=self.body,
                image_url=self.image_url,
                category_id=self.category_id,
            ),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_dto(cls, dto: Article) -> ArticleModel:
        """Create ORM model from domain DTO."""
        return cls(
            id=dto.id,
            author_id=dto.author_id,
            version=dto.version,
            created_at=dto.created_at,
            **column_values(dto),
        )


def column_values(dto: Article) -> dict:
    """Mutable column values of ``dto``, keyed by column name."""
    return {
        "status": dto.status.value,
        "admin_edit_request": dto.admin_edit_request.value,
        "feedback": dto.feedback,
        "title": dto.content.title,
        "excerpt": dto.content.excerpt,
        "body": dto.content.body,
        "image_url": dto.content.image_url,
        "category_id": dto.content.category_id,
        "updated_at": dto.updated_at,
    }
