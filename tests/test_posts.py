# tests/test_posts.py
"""Tests for post authoring, browsing, views and read time."""

import pytest
from fastapi import status
from sqlalchemy import func, select

from brainscript.core.errors import AuthorizationError, ConflictError, ValidationError
from brainscript.models import Comment, Notification, Post, PostLike, PostSave, Presence
from brainscript.repositories.content_store import ContentStore
from brainscript.services import interactions
from brainscript.services import posts as post_service
from brainscript.services.presence import PresenceTracker


def test_slugify() -> None:
    """Slugs are lower-case, hyphenated and stripped of punctuation."""
    assert post_service.slugify("Hello, World!  Again") == "hello-world-again"
    assert post_service.slugify("  --Trim me--  ") == "trim-me"


def test_create_post_derives_slug(db_session, test_user) -> None:
    """A missing slug is derived from the title and tags are de-duplicated."""
    post = post_service.create_post(
        db_session,
        test_user,
        title="My First Post",
        content="<p>Hi</p>",
        tags=["python", " python ", "", "web"],
    )

    assert post.slug == "my-first-post"
    assert post.tags == ["python", "web"]
    assert post.views == 0
    assert post.likes == 0
    assert post.published is False


def test_create_post_duplicate_slug(db_session, test_user, test_post) -> None:
    """A second post cannot take an existing slug."""
    with pytest.raises(ConflictError, match="Slug already exists"):
        post_service.create_post(
            db_session, test_user, title="Other", content="x", slug=test_post.slug
        )


def test_update_post_only_by_author(db_session, test_post, other_user, test_user) -> None:
    """Only the author can edit a post."""
    with pytest.raises(AuthorizationError):
        post_service.update_post(db_session, test_post.id, other_user, title="Hijack")

    updated = post_service.update_post(
        db_session, test_post.id, test_user, title="Renamed", views=999
    )
    assert updated.title == "Renamed"
    assert updated.views == 0


def test_delete_post_leaves_no_orphans(
    db_session, test_post, test_user, other_user
) -> None:
    """Deleting a post removes every row that references it."""
    interactions.toggle_like(db_session, test_post.id, other_user)
    interactions.toggle_save(db_session, test_post.id, other_user)
    interactions.create_comment(db_session, test_post.id, "Nice", other_user)
    PresenceTracker(ContentStore(db_session)).heartbeat(test_post.id, other_user)
    db_session.commit()
    post_id = test_post.id

    post_service.delete_post(db_session, post_id, test_user)

    assert db_session.get(Post, post_id) is None
    for model in (Comment, PostLike, PostSave, Presence, Notification):
        remaining = db_session.scalar(
            select(func.count()).select_from(model).where(model.post_id == post_id)
        )
        assert remaining == 0, model.__name__


def test_delete_post_permissions(db_session, test_post, other_user, admin_user) -> None:
    """Strangers cannot delete a post but administrators can."""
    with pytest.raises(AuthorizationError):
        post_service.delete_post(db_session, test_post.id, other_user)

    post_service.delete_post(db_session, test_post.id, admin_user)
    assert db_session.get(Post, test_post.id) is None


def test_read_time_is_additive(db_session, test_post) -> None:
    """Read-time flushes accumulate; they never overwrite."""
    assert post_service.track_read_time(db_session, test_post.id, 1500) == 1500
    assert post_service.track_read_time(db_session, test_post.id, 2500) == 4000
    assert test_post.total_read_time_ms == 4000


def test_read_time_rejects_non_positive(db_session, test_post) -> None:
    """Zero or negative durations are invalid."""
    with pytest.raises(ValidationError):
        post_service.track_read_time(db_session, test_post.id, 0)


def test_increment_view(db_session, test_post) -> None:
    """Each view adds one."""
    post_service.increment_view(db_session, test_post.id)
    assert post_service.increment_view(db_session, test_post.id) == 2


def test_check_title_case_insensitive(db_session, test_post) -> None:
    """Title checks ignore case and surrounding whitespace."""
    assert post_service.check_title(db_session, "  test post ") is True
    assert post_service.check_title(db_session, "Unused") is False


def test_categories_and_tags(db_session, make_post, test_user) -> None:
    """Categories are distinct and sorted; tags are ranked by use."""
    make_post(test_user, category="Web", tags=["python", "fastapi"])
    make_post(test_user, category="Data", tags=["python"])
    make_post(test_user, category="Web", tags=["sql"])

    assert post_service.list_categories(db_session) == ["Data", "Web"]
    assert post_service.list_popular_tags(db_session)[0] == "python"


def test_search_posts_and_users(db_session, make_post, test_user, make_user) -> None:
    """Search matches titles, content and user names case-insensitively."""
    make_post(test_user, title="Understanding SQLAlchemy")
    make_post(test_user, title="Other", content="<p>all about sqlalchemy sessions</p>")
    make_user("Alchemy Fan")

    results = post_service.search(db_session, "ALCHEMY")

    assert len(results.posts) == 2
    assert [user.name for user in results.users] == ["Alchemy Fan"]
    assert post_service.search(db_session, "   ").posts == []


def test_create_post_endpoint(client, auth_token) -> None:
    """Authenticated users can create posts."""
    response = client.post(
        "/api/v1/posts/",
        json={"title": "Hello API", "content": "<p>Body</p>", "published": True},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["slug"] == "hello-api"
    assert data["total_read_time_ms"] == 0


def test_create_post_endpoint_conflict(client, auth_token, test_post) -> None:
    """Duplicate slugs return 409."""
    response = client.post(
        "/api/v1/posts/",
        json={"title": "Again", "content": "x", "slug": test_post.slug},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_post_endpoint_requires_auth(client) -> None:
    """Anonymous post creation returns 401."""
    response = client.post("/api/v1/posts/", json={"title": "x", "content": "y"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_post_by_slug(client, test_post) -> None:
    """Posts can be fetched by slug with their author."""
    response = client.get(f"/api/v1/posts/slug/{test_post.slug}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["author"]["name"] == "Test User"

    assert client.get("/api/v1/posts/slug/missing").status_code == status.HTTP_404_NOT_FOUND


def test_drafts_hidden_from_others(client, make_post, test_user, auth_token, other_auth_token) -> None:
    """Drafts are only visible to their author."""
    draft = make_post(test_user, published=False)

    assert client.get(f"/api/v1/posts/{draft.id}").status_code == status.HTTP_404_NOT_FOUND
    response = client.get(f"/api/v1/posts/{draft.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    response = client.get(f"/api/v1/posts/{draft.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK


def test_read_time_endpoint(client, test_post) -> None:
    """The read-time endpoint adds to the running total."""
    client.post(f"/api/v1/posts/{test_post.id}/read-time", json={"duration_ms": 1200})
    response = client.post(f"/api/v1/posts/{test_post.id}/read-time", json={"duration_ms": 800})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"total_read_time_ms": 2000}


def test_read_time_endpoint_validates_duration(client, test_post) -> None:
    """Non-positive durations fail schema validation."""
    response = client.post(f"/api/v1/posts/{test_post.id}/read-time", json={"duration_ms": 0})
    assert response.status_code == 422


def test_update_and_delete_endpoints(client, test_post, auth_token, other_auth_token) -> None:
    """Editing and deleting follow ownership rules."""
    response = client.patch(
        f"/api/v1/posts/{test_post.id}", json={"title": "New"}, headers=other_auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.patch(
        f"/api/v1/posts/{test_post.id}", json={"title": "New"}, headers=auth_token
    )
    assert response.json()["title"] == "New"

    response = client.delete(f"/api/v1/posts/{test_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND


def test_search_and_category_endpoints(client, make_post, test_user) -> None:
    """Search and category listings are public."""
    make_post(test_user, title="FastAPI Tips", category="Web", tags=["fastapi"])

    results = client.get("/api/v1/search/", params={"q": "fastapi"}).json()
    assert [post["title"] for post in results["posts"]] == ["FastAPI Tips"]

    assert client.get("/api/v1/categories/").json() == ["Web"]
    assert client.get("/api/v1/categories/tags").json() == ["fastapi"]


def test_drafts_hidden_from_listings(client, make_post, test_user, auth_token) -> None:
    """Recent posts, search and categories never expose drafts, even to their author."""
    published = make_post(test_user, title="Shipped notes", category="Web")
    make_post(test_user, title="Secret notes", slug="secret-draft", category="Drafts", published=False)

    listing = client.get("/api/v1/posts/", headers=auth_token).json()
    assert [post["slug"] for post in listing] == [published.slug]
    assert all(post["published"] for post in listing)

    results = client.get("/api/v1/search/", params={"q": "notes"}).json()
    assert [post["id"] for post in results["posts"]] == [published.id]

    assert client.get("/api/v1/categories/").json() == ["Web"]


def test_my_posts_include_drafts(client, make_post, test_user, auth_token) -> None:
    """The author still sees their own drafts."""
    draft = make_post(test_user, published=False)

    mine = client.get("/api/v1/posts/my", headers=auth_token).json()
    assert [post["id"] for post in mine] == [draft.id]
