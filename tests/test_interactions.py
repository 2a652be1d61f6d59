# tests/test_interactions.py
"""Tests for likes, saves and comments and the counters they maintain."""

import pytest
from fastapi import status
from sqlalchemy import func, select

from brainscript.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from brainscript.models import Comment, Notification, PostLike, PostSave
from brainscript.services import interactions


def _rows(db_session, model, post_id: int) -> int:
    return db_session.scalar(select(func.count()).select_from(model).where(model.post_id == post_id))


def test_toggle_like_twice_restores_state(db_session, test_post, other_user) -> None:
    """Liking then unliking leaves no row and a zero counter."""
    first = interactions.toggle_like(db_session, test_post.id, other_user)
    assert first.active is True
    assert first.count == 1
    assert _rows(db_session, PostLike, test_post.id) == 1

    second = interactions.toggle_like(db_session, test_post.id, other_user)
    assert second.active is False
    assert second.count == 0
    assert _rows(db_session, PostLike, test_post.id) == 0
    assert test_post.likes == 0


def test_like_counter_matches_rows(db_session, test_post, make_user) -> None:
    """The denormalized counter always equals the number of like rows."""
    readers = [make_user() for _ in range(4)]
    for reader in readers:
        interactions.toggle_like(db_session, test_post.id, reader)
    interactions.toggle_like(db_session, test_post.id, readers[0])

    assert test_post.likes == _rows(db_session, PostLike, test_post.id) == 3


def test_like_notifies_author_once(db_session, test_post, test_user, other_user) -> None:
    """Liking someone else's post notifies its author; unliking does not."""
    interactions.toggle_like(db_session, test_post.id, other_user)
    interactions.toggle_like(db_session, test_post.id, other_user)

    notifications = db_session.scalars(select(Notification)).all()
    assert len(notifications) == 1
    assert notifications[0].recipient_id == test_user.id
    assert notifications[0].sender_id == other_user.id
    assert notifications[0].kind == "like"
    assert notifications[0].read is False


def test_self_like_does_not_notify(db_session, test_post, test_user) -> None:
    """Authors liking their own post get no notification."""
    interactions.toggle_like(db_session, test_post.id, test_user)

    assert db_session.scalar(select(func.count()).select_from(Notification)) == 0


def test_like_requires_identity(db_session, test_post) -> None:
    """Anonymous likes are rejected."""
    with pytest.raises(AuthenticationError):
        interactions.toggle_like(db_session, test_post.id, None)


def test_like_unknown_post(db_session, test_user) -> None:
    """Liking a missing post raises NotFoundError."""
    with pytest.raises(NotFoundError):
        interactions.toggle_like(db_session, 4242, test_user)


def test_like_race_reports_already_liked(db_session, test_post, other_user, mocker) -> None:
    """A concurrent like that wins the insert is absorbed without double counting."""
    interactions.toggle_like(db_session, test_post.id, other_user)
    assert test_post.likes == 1
    for like in db_session.scalars(select(PostLike)).all():
        db_session.expunge(like)

    original_get = db_session.get

    def _stale_get(model, ident, *args, **kwargs):
        # Simulate a request that checked before the competing like landed.
        if model is PostLike:
            return None
        return original_get(model, ident, *args, **kwargs)

    mocker.patch.object(db_session, "get", side_effect=_stale_get)

    result = interactions.toggle_like(db_session, test_post.id, other_user)

    assert result.active is True
    assert result.count == 1
    assert _rows(db_session, PostLike, test_post.id) == 1


def test_has_liked(db_session, test_post, other_user) -> None:
    """``has_liked`` reflects the caller's row and is False when anonymous."""
    assert interactions.has_liked(db_session, test_post.id, other_user) is False
    interactions.toggle_like(db_session, test_post.id, other_user)
    assert interactions.has_liked(db_session, test_post.id, other_user) is True
    assert interactions.has_liked(db_session, test_post.id, None) is False


def test_toggle_save_and_list(db_session, test_post, other_user, test_user) -> None:
    """Saving bookmarks the post and keeps ``saves_count`` in step."""
    result = interactions.toggle_save(db_session, test_post.id, other_user)
    assert result.active is True
    assert test_post.saves_count == 1 == _rows(db_session, PostSave, test_post.id)

    saved = interactions.list_saved_posts(db_session, other_user)
    assert [(post.id, author.id) for post, author in saved] == [(test_post.id, test_user.id)]
    assert interactions.list_saved_posts(db_session, None) == []

    result = interactions.toggle_save(db_session, test_post.id, other_user)
    assert result.active is False
    assert test_post.saves_count == 0
    assert interactions.has_saved(db_session, test_post.id, other_user) is False


def test_create_comment_updates_counter_and_notifies(
    db_session, test_post, test_user, other_user
) -> None:
    """Commenting increments the counter and notifies the author."""
    comment = interactions.create_comment(db_session, test_post.id, "  Great read  ", other_user)

    assert comment.content == "Great read"
    assert test_post.comments_count == 1 == _rows(db_session, Comment, test_post.id)
    notification = db_session.scalars(select(Notification)).one()
    assert notification.kind == "comment"
    assert notification.recipient_id == test_user.id


def test_comment_validation(db_session, test_post, other_user) -> None:
    """Blank and oversized comments are rejected."""
    with pytest.raises(ValidationError):
        interactions.create_comment(db_session, test_post.id, "   ", other_user)
    with pytest.raises(ValidationError):
        interactions.create_comment(db_session, test_post.id, "x" * 5001, other_user)


def test_only_author_edits_or_deletes_comment(db_session, test_post, test_user, other_user) -> None:
    """Comment ownership is enforced for updates and deletes."""
    comment = interactions.create_comment(db_session, test_post.id, "First", other_user)

    with pytest.raises(AuthorizationError):
        interactions.update_comment(db_session, comment.id, "Hijacked", test_user)
    with pytest.raises(AuthorizationError):
        interactions.delete_comment(db_session, comment.id, test_user)

    updated = interactions.update_comment(db_session, comment.id, "Edited", other_user)
    assert updated.content == "Edited"

    interactions.delete_comment(db_session, comment.id, other_user)
    assert test_post.comments_count == 0 == _rows(db_session, Comment, test_post.id)


def test_list_comments_newest_first(db_session, test_post, test_user, other_user) -> None:
    """Comments come back newest first with their authors."""
    first = interactions.create_comment(db_session, test_post.id, "one", test_user)
    second = interactions.create_comment(db_session, test_post.id, "two", other_user)

    views = interactions.list_comments(db_session, test_post.id)

    assert [view.comment.id for view in views] == [second.id, first.id]
    assert views[0].author.id == other_user.id


def test_like_endpoint(client, test_post, other_auth_token) -> None:
    """The like endpoint toggles and reports the counter."""
    response = client.post(f"/api/v1/likes/{test_post.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"liked": True, "likes": 1}

    response = client.get(f"/api/v1/likes/{test_post.id}/status", headers=other_auth_token)
    assert response.json() == {"value": True}

    response = client.get(f"/api/v1/likes/{test_post.id}/count")
    assert response.json() == {"count": 1}


def test_like_endpoint_requires_authentication(client, test_post) -> None:
    """Anonymous likes are answered with 401."""
    response = client.post(f"/api/v1/likes/{test_post.id}")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Unauthenticated"


def test_invalid_token_is_treated_as_anonymous(client, test_post) -> None:
    """A token that fails verification cannot mutate anything."""
    response = client.post(
        f"/api/v1/likes/{test_post.id}",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_comment_endpoints(client, test_post, other_auth_token, auth_token) -> None:
    """Comments can be created, listed and are protected from other users."""
    response = client.post(
        "/api/v1/comments/",
        json={"post_id": test_post.id, "content": "Hello"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    comment = response.json()
    assert comment["author"]["name"] == "Other User"

    listing = client.get(f"/api/v1/comments/post/{test_post.id}").json()
    assert [item["id"] for item in listing] == [comment["id"]]

    response = client.delete(f"/api/v1/comments/{comment['id']}", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/api/v1/comments/{comment['id']}", headers=other_auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/comments/post/{test_post.id}/count").json() == {"count": 0}


def test_save_endpoints(client, test_post, other_auth_token) -> None:
    """Saved posts show up in the caller's bookmark list."""
    response = client.post(f"/api/v1/saves/{test_post.id}", headers=other_auth_token)
    assert response.json() == {"saved": True, "saves": 1}

    saved = client.get("/api/v1/saves/", headers=other_auth_token).json()
    assert [post["id"] for post in saved] == [test_post.id]
    assert client.get("/api/v1/saves/").json() == []
