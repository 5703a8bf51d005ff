"""SQL Stores — column mapping, filters, ordering and member deletion.

Tests cover:
    - member create hashes the password and derives nicename/display name
    - xprofile updates merge group-wise
    - member list search, member_type and pagination
    - notification list ordering and the is_new filter
    - deleting a member removes (or reassigns) its notifications
"""

from datetime import datetime, timezone

import pytest
from fastapi.security import HTTPBasicCredentials

from community_rest.core.authorization import CapabilityChecker, MemberGate
from community_rest.core.domain_types import Action
from community_rest.core.errors import ResourceNotFoundError, UnauthenticatedError
from community_rest.infrastructure.authentication import caller_for_member, resolve_caller
from community_rest.infrastructure.member_store import SqlMemberStore
from community_rest.infrastructure.notification_store import SqlNotificationStore
from community_rest.infrastructure.passwords import verify_password


@pytest.fixture
def member_store(db):
    return SqlMemberStore(db, password_iterations=1000)


async def _seed(member_store):
    alice = await member_store.create({
        "user_login": "Alice Smith", "email": "alice@example.com", "password": "pw",
        "member_types": ["instructor"],
    })
    bob = await member_store.create({
        "user_login": "bob", "email": "bob@example.com", "password": "pw",
        "name": "Bobby", "roles": ["editor"], "xprofile": {"Base": {"Name": "Bob"}},
    })
    return alice, bob


async def test_member_create_maps_fields(member_store):
    alice, bob = await _seed(member_store)
    assert alice.user_nicename == "alice-smith"
    assert alice.display_name == "Alice Smith"
    assert alice.roles == ["subscriber"]
    assert bob.display_name == "Bobby"
    assert bob.roles == ["editor"]
    assert bob.password_hash != "pw"
    assert verify_password("pw", bob.password_hash)


async def test_member_lookups(member_store):
    _, bob = await _seed(member_store)
    assert (await member_store.find_by_login("bob")).id == bob.id
    assert (await member_store.find_by_email("BOB@example.com")).id == bob.id
    assert await member_store.find_by_login("nobody") is None
    assert await member_store.find(999) is None


async def test_member_update_merges_xprofile(member_store):
    _, bob = await _seed(member_store)
    updated = await member_store.update(bob.id, {
        "xprofile": {"Base": {"City": "Porto"}, "Work": {"Company": "Acme"}},
    })
    assert updated.xprofile == {
        "Base": {"Name": "Bob", "City": "Porto"},
        "Work": {"Company": "Acme"},
    }


async def test_member_update_unknown_id(member_store):
    with pytest.raises(ResourceNotFoundError):
        await member_store.update(999, {"name": "x"})


async def test_member_list_filters(member_store):
    alice, bob = await _seed(member_store)
    assert [m.id for m in await member_store.list({})] == [alice.id, bob.id]
    assert [m.id for m in await member_store.list({"search": "bobby"})] == [bob.id]
    assert [m.id for m in await member_store.list({"member_type": "instructor"})] == [alice.id]
    assert [m.id for m in await member_store.list({"orderby": "name", "order": "desc"})] == [bob.id, alice.id]
    assert [m.id for m in await member_store.list({"per_page": 1, "page": 2})] == [bob.id]
    assert [m.id for m in await member_store.list({"include": [bob.id]})] == [bob.id]


async def _notify(store, user_id, day, is_new=True):
    notification = await store.create({
        "user_id": user_id, "component": "messages", "action": "new_message",
        "unread": is_new,
    })
    notification.date_notified = datetime(2024, 3, day, tzinfo=timezone.utc)
    await store.db.commit()
    return notification


async def test_notification_list_order_and_unread_filter(db, member_store):
    alice, _ = await _seed(member_store)
    store = SqlNotificationStore(db)
    first = await _notify(store, alice.id, 1)
    second = await _notify(store, alice.id, 2)
    read = await _notify(store, alice.id, 3, is_new=False)

    newest_first = await store.list({"user_id": alice.id, "is_new": True})
    assert [n.id for n in newest_first] == [second.id, first.id]
    oldest_first = await store.list({"user_id": alice.id, "is_new": True, "order": "asc"})
    assert [n.id for n in oldest_first] == [first.id, second.id]
    assert [n.id for n in await store.list({"user_id": alice.id, "is_new": False})] == [read.id]
    assert len(await store.list({"user_id": alice.id, "is_new": None})) == 3


async def test_notification_update_changes_only_read_state(db, member_store):
    alice, _ = await _seed(member_store)
    store = SqlNotificationStore(db)
    created = await _notify(store, alice.id, 1)
    updated = await store.update(created.id, {"unread": False, "component": "ignored"})
    assert updated.is_new is False
    assert updated.component_name == "messages"


async def test_member_delete_removes_notifications(db, member_store):
    alice, bob = await _seed(member_store)
    store = SqlNotificationStore(db)
    await _notify(store, alice.id, 1)
    await member_store.delete(alice.id)
    assert await member_store.find(alice.id) is None
    assert await store.list({"user_id": alice.id, "is_new": None}) == []


async def test_member_delete_reassigns_notifications(db, member_store):
    alice, bob = await _seed(member_store)
    store = SqlNotificationStore(db)
    await _notify(store, alice.id, 1)
    await member_store.delete(alice.id, reassign=bob.id)
    moved = await store.list({"user_id": bob.id, "is_new": None})
    assert len(moved) == 1


async def test_resolve_caller(member_store):
    _, bob = await _seed(member_store)
    assert not (await resolve_caller(None, member_store)).authenticated

    caller = await resolve_caller(HTTPBasicCredentials(username="bob", password="pw"), member_store)
    assert caller.member_id == bob.id
    assert "edit_posts" in caller.capabilities
    assert not caller.is_super_admin

    with pytest.raises(UnauthenticatedError):
        await resolve_caller(HTTPBasicCredentials(username="bob", password="nope"), member_store)
    with pytest.raises(UnauthenticatedError):
        await resolve_caller(HTTPBasicCredentials(username="ghost", password="pw"), member_store)


async def test_super_admin_depends_on_network_mode(member_store):
    admin = await member_store.create({
        "user_login": "root", "email": "root@example.com", "password": "pw",
        "roles": ["administrator"],
    })
    assert caller_for_member(admin).is_super_admin
    assert not caller_for_member(admin, multisite=True, site_admins=["other"]).is_super_admin
    assert caller_for_member(admin, multisite=True, site_admins=["root"]).is_super_admin


async def test_single_site_admin_respects_revoked_capability(member_store):
    admin = await member_store.create({
        "user_login": "root", "email": "root@example.com", "password": "pw",
        "roles": ["administrator"],
    })
    admin.extra_caps = {"promote_users": False}
    caller = caller_for_member(admin)
    assert "promote_users" not in caller.capabilities
    assert not MemberGate(CapabilityChecker()).can(caller, Action.PROMOTE)


async def test_member_search_matches_wildcard_characters_literally(member_store):
    for login in ("alice", "bob", "carol_x"):
        await member_store.create({
            "user_login": login, "email": f"{login.replace('_', '')}@example.com",
            "password": "pw",
        })
    assert [m.user_login for m in await member_store.list({"search": "_"})] == ["carol_x"]
    assert await member_store.list({"search": "%"}) == []
    assert [m.user_login for m in await member_store.list({"search": "CAROL"})] == ["carol_x"]


async def test_member_nicename_is_unique(member_store):
    first = await member_store.create({
        "user_login": "Jane Doe", "email": "jane1@example.com", "password": "pw",
    })
    second = await member_store.create({
        "user_login": "jane-doe", "email": "jane2@example.com", "password": "pw",
    })
    third = await member_store.create({
        "user_login": "jane.doe", "email": "jane3@example.com", "password": "pw",
    })
    assert first.user_nicename == "jane-doe"
    assert second.user_nicename == "jane-doe-2"
    assert third.user_nicename == "jane-doe-3"
