# src/brainscript/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .categories import router as categories_router
from .comments import router as comments_router
from .likes import router as likes_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .presence import router as presence_router
from .saves import router as saves_router
from .search import router as search_router
from .stats import router as stats_router
from .users import router as users_router

__all__ = [
    "posts_router",
    "comments_router",
    "likes_router",
    "saves_router",
    "presence_router",
    "notifications_router",
    "users_router",
    "admin_router",
    "search_router",
    "categories_router",
    "stats_router",
]
