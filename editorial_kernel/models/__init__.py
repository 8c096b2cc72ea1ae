"""ORM models for the editorial kernel."""

from editorial_kernel.models.article import ArticleModel

__all__ = ["ArticleModel"]
