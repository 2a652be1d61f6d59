# tests/test_notifications.py
"""Tests for the notification inbox."""

import pytest
from fastapi import status

from brainscript.core.errors import AuthenticationError, AuthorizationError
from brainscript.services import interactions
from brainscript.services import notifications as notification_service
from brainscript.services import posts as post_service


@pytest.fixture()
def liked_and_commented(db_session, test_post, other_user) -> None:
    interactions.toggle_like(db_session, test_post.id, other_user)
    interactions.create_comment(db_session, test_post.id, "Hello", other_user)


@pytest.mark.usefixtures("liked_and_commented")
def test_list_notifications_newest_first(db_session, test_user, test_post) -> None:
    """The inbox shows sender and post details, newest first."""
    views = notification_service.list_notifications(db_session, test_user)

    assert [view.notification.kind for view in views] == ["comment", "like"]
    assert views[0].sender_name == "Other User"
    assert views[0].post_title == test_post.title
    assert views[0].post_slug == test_post.slug


def test_anonymous_inbox_is_empty(db_session) -> None:
    """Anonymous callers see nothing."""
    assert notification_service.list_notifications(db_session, None) == []
    assert notification_service.unread_count(db_session, None) == 0


@pytest.mark.usefixtures("liked_and_commented")
def test_mark_read_and_all_read(db_session, test_user) -> None:
    """Marking read lowers the unread count."""
    views = notification_service.list_notifications(db_session, test_user)
    assert notification_service.unread_count(db_session, test_user) == 2

    notification_service.mark_read(db_session, views[0].notification.id, test_user)
    assert notification_service.unread_count(db_session, test_user) == 1

    assert notification_service.mark_all_read(db_session, test_user) == 1
    assert notification_service.unread_count(db_session, test_user) == 0


@pytest.mark.usefixtures("liked_and_commented")
def test_only_recipient_manages_notification(db_session, test_user, other_user) -> None:
    """Other users cannot read or delete someone else's notifications."""
    notification = notification_service.list_notifications(db_session, test_user)[0].notification

    with pytest.raises(AuthorizationError):
        notification_service.mark_read(db_session, notification.id, other_user)
    with pytest.raises(AuthorizationError):
        notification_service.delete_notification(db_session, notification.id, other_user)
    with pytest.raises(AuthenticationError):
        notification_service.mark_all_read(db_session, None)

    notification_service.delete_notification(db_session, notification.id, test_user)
    assert len(notification_service.list_notifications(db_session, test_user)) == 1


@pytest.mark.usefixtures("liked_and_commented")
def test_notifications_removed_with_post(db_session, test_user, test_post) -> None:
    """Deleting a post removes its notifications."""
    post_service.delete_post(db_session, test_post.id, test_user)

    assert notification_service.list_notifications(db_session, test_user) == []


@pytest.mark.usefixtures("liked_and_commented")
def test_notification_endpoints(client, auth_token) -> None:
    """The inbox endpoints list, count and acknowledge notifications."""
    listing = client.get("/api/v1/notifications/", headers=auth_token).json()
    assert [item["kind"] for item in listing] == ["comment", "like"]
    assert client.get("/api/v1/notifications/unread-count", headers=auth_token).json() == {
        "count": 2
    }

    response = client.post(f"/api/v1/notifications/{listing[0]['id']}/read", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = client.post("/api/v1/notifications/read-all", headers=auth_token)
    assert response.json() == {"count": 1}

    response = client.delete(f"/api/v1/notifications/{listing[1]['id']}", headers=auth_token)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert len(client.get("/api/v1/notifications/", headers=auth_token).json()) == 1
