# src/brainscript/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    categories_router,
    comments_router,
    likes_router,
    notifications_router,
    posts_router,
    presence_router,
    saves_router,
    search_router,
    stats_router,
    users_router,
)

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
