"""Plain in-memory member/notification records for pure core tests."""

from datetime import datetime, timezone
from types import SimpleNamespace


def make_member(**overrides) -> SimpleNamespace:
    fields = {
        "id": 42,
        "user_login": "jdoe",
        "user_nicename": "jdoe",
        "display_name": "Jane Doe",
        "user_email": "a@x.com",
        "password_hash": "pbkdf2_sha256$1000$salt$digest",
        "password": "pw",
        "roles": ["subscriber"],
        "extra_caps": {},
        "member_types": ["student"],
        "xprofile": {"Base": {"Name": "Jane Doe"}},
        "user_registered": datetime(2024, 3, 1, 12, 30, 5, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_notification(**overrides) -> SimpleNamespace:
    fields = {
        "id": 7,
        "user_id": 42,
        "item_id": 3,
        "secondary_item_id": 9,
        "component_name": "messages",
        "component_action": "new_message",
        "date_notified": datetime(2024, 5, 2, 8, 0, 0, tzinfo=timezone.utc),
        "is_new": True,
        "content": "You have a new message",
        "href": "http://example.test/messages/3",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)
