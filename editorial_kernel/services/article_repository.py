"""
ArticleRepository -- versioned persistence of the article aggregate.

Responsibility:
    Load articles by id and persist computed articles with optimistic
    concurrency.  Every write is conditional on the version the caller
    read: ``UPDATE articles ... WHERE id = :id AND version = :expected``.

Architecture position:
    Kernel > Services -- imperative shell.  The pure engine never sees a
    repository; the command facade reads once, decides, and writes once.

Invariants enforced:
    - A write whose expected version no longer matches the stored row is
      refused with ConcurrencyConflictError.  Nothing is retried here.
    - Flush-only: the SQLAlchemy implementation never commits.

Listings and dashboards are read through
``editorial_kernel.selectors.article_selector``; the repository only
serves the command path.

Failure modes:
    - ArticleNotFoundError when the id does not resolve.
    - ConcurrencyConflictError when the stored version moved on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from editorial_kernel.domain.article import Article
from editorial_kernel.exceptions import ArticleNotFoundError, ConcurrencyConflictError
from editorial_kernel.logging_config import get_logger
from editorial_kernel.models.article import ArticleModel, column_values
from editorial_kernel.services.base import BaseService

logger = get_logger("services.article_repository")


class ArticleRepository(ABC):
    """Storage contract for the article aggregate."""

    @abstractmethod
    def get(self, article_id: UUID) -> Article:
        """Return the stored article or raise ArticleNotFoundError."""

    @abstractmethod
    def add(self, article: Article) -> Article:
        """Insert a newly created article."""

    @abstractmethod
    def save(self, article: Article, expected_version: int) -> Article:
        """Persist ``article`` if the stored version equals ``expected_version``."""

    @abstractmethod
    def delete(self, article_id: UUID, expected_version: int) -> None:
        """Remove the article if the stored version equals ``expected_version``."""


class SqlAlchemyArticleRepository(BaseService, ArticleRepository):
    """ArticleRepository backed by the ``articles`` table."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get(self, article_id: UUID) -> Article:
        model = self.session.get(ArticleModel, article_id, populate_existing=True)
        if model is None:
            raise ArticleNotFoundError(str(article_id))
        return model.to_dto()

    def add(self, article: Article) -> Article:
        self.session.add(ArticleModel.from_dto(article))
        self.session.flush()
        logger.debug(
            "article_inserted",
            extra={"article_id": str(article.id), "status": article.status.value},
        )
        return article

    def save(self, article: Article, expected_version: int) -> Article:
        result = self.session.execute(
            update(ArticleModel)
            .where(
                ArticleModel.id == article.id,
                ArticleModel.version == expected_version,
            )
            .values(version=article.version, **column_values(article))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._raise_write_miss(article.id, expected_version)

        self.session.flush()
        logger.debug(
            "article_saved",
            extra={
                "article_id": str(article.id),
                "expected_version": expected_version,
                "version": article.version,
            },
        )
        return article

    def delete(self, article_id: UUID, expected_version: int) -> None:
        result = self.session.execute(
            delete(ArticleModel)
            .where(
                ArticleModel.id == article_id,
                ArticleModel.version == expected_version,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._raise_write_miss(article_id, expected_version)

        self.session.flush()
        logger.debug(
            "article_deleted",
            extra={"article_id": str(article_id), "expected_version": expected_version},
        )

    def _raise_write_miss(self, article_id: UUID, expected_version: int) -> None:
        actual = self.session.execute(
            select(ArticleModel.version).where(ArticleModel.id == article_id)
        ).scalar_one_or_none()
        if actual is None:
            raise ArticleNotFoundError(str(article_id))
        logger.warning(
            "article_version_conflict",
            extra={
                "article_id": str(article_id),
                "expected_version": expected_version,
                "actual_version": actual,
            },
        )
        raise ConcurrencyConflictError(str(article_id), expected_version, actual)


class InMemoryArticleRepository(ArticleRepository):
    """Dict-backed ArticleRepository for pure tests and embedding."""

    def __init__(self) -> None:
        self._articles: dict[UUID, Article] = {}

    def __len__(self) -> int:
        return len(self._articles)

    def get(self, article_id: UUID) -> Article:
        try:
            return self._articles[article_id]
        except KeyError:
            raise ArticleNotFoundError(str(article_id)) from None

    def add(self, article: Article) -> Article:
        if article.id in self._articles:
            raise ValueError(f"Article {article.id} already exists")
        self._articles[article.id] = article
        return article

    def save(self, article: Article, expected_version: int) -> Article:
        self._check_version(article.id, expected_version)
        self._articles[article.id] = article
        return article

    def delete(self, article_id: UUID, expected_version: int) -> None:
        self._check_version(article_id, expected_version)
        del self._articles[article_id]

    def _check_version(self, article_id: UUID, expected_version: int) -> None:
        stored = self.get(article_id)
        if stored.version != expected_version:
            raise ConcurrencyConflictError(str(article_id), expected_version, stored.version)
