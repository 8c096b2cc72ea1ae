"""Kernel services - persistence of the article aggregate."""

from editorial_kernel.services.article_repository import (
    ArticleRepository,
    InMemoryArticleRepository,
    SqlAlchemyArticleRepository,
)
from editorial_kernel.services.base import BaseService

__all__ = [
    "ArticleRepository",
    "InMemoryArticleRepository",
    "SqlAlchemyArticleRepository",
    "BaseService",
]
