# src/brainscript/scripts/seed.py
"""Populate an empty database with a demo admin and a few sample posts.

Run with ``python -m brainscript.scripts.seed``. Does nothing when any
account already exists, so it is safe to run on every deploy.
"""
from __future__ import annotations

import argparse
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from brainscript.db.session import SessionLocal, create_tables
from brainscript.models import Post, User
from brainscript.models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"

SAMPLE_POSTS = (
    {
        "title": "Getting Started with BrainScript",
        "slug": "getting-started-with-brainscript",
        "content": (
            "<h2>Welcome to BrainScript</h2>"
            "<p>A sample post to show how articles look. Edit it or write your own.</p>"
            '<pre><code>print("Hello, World!")</code></pre>'
        ),
        "excerpt": "The basics of publishing on BrainScript.",
        "views": 120,
        "category": "Guides",
        "tags": ["welcome", "guide"],
        "post_type": "tutorial",
    },
    {
        "title": "The Future of Web Development",
        "slug": "future-of-web-development",
        "content": (
            "<h2>Web Development Next Year</h2>"
            "<p>Server components, AI assistance and edge runtimes keep reshaping the stack.</p>"
        ),
        "excerpt": "Where web technology is heading.",
        "views": 85,
        "category": "Web",
        "tags": ["web", "trends"],
        "post_type": "article",
    },
    {
        "title": "Advanced TypeScript Tips",
        "slug": "advanced-typescript-tips",
        "content": (
            "<h2>Mastering Generics</h2>"
            "<p>Generics let you write reusable code without giving up type safety.</p>"
        ),
        "excerpt": "Patterns for getting more out of the type system.",
        "views": 234,
        "category": "Languages",
        "tags": ["typescript", "types"],
        "post_type": "article",
    },
)


def seed(db: Session) -> bool:
    """Insert the demo data unless the database already has accounts.

    Returns True when rows were inserted.
    """
    if db.scalar(select(func.count()).select_from(User)):
        logger.info("Database already seeded")
        return False

    admin = User(
        name="Demo User",
        email=DEMO_EMAIL,
        image="https://github.com/shadcn.png",
        role=ROLE_ADMIN,
    )
    db.add(admin)
    db.flush()

    for sample in SAMPLE_POSTS:
        db.add(Post(author_id=admin.id, published=True, **sample))
    db.commit()
    logger.info("Seeded %d posts and 1 user", len(SAMPLE_POSTS))
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the configured database with demo content")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (for local SQLite setups without Alembic).",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[seed] %(message)s")
    if args.create_tables:
        create_tables()
    with SessionLocal() as db:
        seed(db)


if __name__ == "__main__":
    main()
