"""Read-only article selectors."""

from editorial_kernel.selectors.article_selector import (
    AdminDashboard,
    ArticleSelector,
    JournalistDashboard,
)
from editorial_kernel.selectors.base import BaseSelector

__all__ = [
    "AdminDashboard",
    "ArticleSelector",
    "BaseSelector",
    "JournalistDashboard",
]
