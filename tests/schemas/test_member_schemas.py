"""Member Schemas — request body validation for create/update.

Tests cover:
    - `username` accepted as an alias of user_login
    - login pattern, e-mail shape and known role names enforced
    - update bodies keep only the fields the client sent
"""

import pytest
from pydantic import ValidationError

from community_rest.schemas.member import MemberCreate, MemberUpdate
from community_rest.schemas.notification import NotificationCreate, NotificationUpdate


def test_create_accepts_username_alias():
    body = MemberCreate(username="  jdoe ", email="j@x.com", password="pw")
    assert body.user_login == "jdoe"
    assert body.model_dump(exclude_none=True) == {
        "user_login": "jdoe", "email": "j@x.com", "password": "pw",
    }


def test_create_requires_password():
    with pytest.raises(ValidationError):
        MemberCreate(user_login="jdoe", email="j@x.com")


@pytest.mark.parametrize("login", ["", "bad/login", "x" * 61])
def test_create_rejects_bad_login(login):
    with pytest.raises(ValidationError):
        MemberCreate(user_login=login, email="j@x.com", password="pw")


def test_create_rejects_bad_email():
    with pytest.raises(ValidationError):
        MemberCreate(user_login="jdoe", email="not-an-email", password="pw")


def test_unknown_role_rejected():
    with pytest.raises(ValidationError):
        MemberUpdate(roles=["overlord"])
    assert MemberUpdate(roles=["editor"]).roles == ["editor"]


def test_update_dumps_only_sent_fields():
    body = MemberUpdate(username="janed")
    assert body.model_dump(exclude_unset=True) == {"user_login": "janed"}


def test_notification_defaults():
    body = NotificationCreate(user_id=3, component="messages", action="new_message")
    assert body.unread is True
    assert body.primary_association == 0
    with pytest.raises(ValidationError):
        NotificationCreate(user_id=0, component="messages", action="new_message")
    with pytest.raises(ValidationError):
        NotificationUpdate()


def test_update_strips_login_whitespace():
    assert MemberUpdate(username=" jdoe ").user_login == "jdoe"
