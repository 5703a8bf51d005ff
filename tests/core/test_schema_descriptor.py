"""Schema Descriptor — JSON schema and OPTIONS body built from field tables.

Tests cover:
    - members declare exactly 13 properties, password and xprofile included
    - per-property context lists mirror the inclusion table
    - declared and producible field sets agree (password exempt as write-only)
    - the shared context argument defaults to view
"""

from community_rest.core.domain_types import Context
from community_rest.core.member_fields import MemberUrls, build_member_rules
from community_rest.core.notification_fields import NOTIFICATION_RULES
from community_rest.core.projection import ALL_CONTEXTS, FieldRule
from community_rest.core.schema_descriptor import (
    EndpointSpec, build_item_schema, context_param, describe_route,
    undeclared_or_unproducible, writable_args,
)

RULES = build_member_rules(MemberUrls(site_url="http://example.test"))


def test_member_schema_declares_thirteen_properties():
    schema = build_item_schema("member", RULES)
    props = schema["properties"]
    assert len(props) == 13
    assert set(props) == {
        "id", "name", "user_login", "link", "avatar_urls", "member_types",
        "xprofile", "email", "roles", "capabilities", "extra_capabilities",
        "registered_date", "password",
    }
    assert schema["title"] == "member"
    assert schema["type"] == "object"
    assert schema["$schema"].startswith("http://json-schema.org/")


def test_property_contexts_follow_inclusion_table():
    props = build_item_schema("member", RULES)["properties"]
    assert props["id"]["context"] == ["view", "embed", "edit"]
    assert props["xprofile"]["context"] == ["view", "edit"]
    assert props["email"]["context"] == ["edit"]
    assert props["registered_date"]["format"] == "date-time"
    assert props["roles"]["items"] == {"type": "string"}


def test_password_is_declared_write_only():
    props = build_item_schema("member", RULES)["properties"]
    assert props["password"]["writeonly"] is True
    assert "writeonly" not in props["email"]


def test_member_table_is_consistent():
    undeclared, unproducible = undeclared_or_unproducible(RULES)
    assert undeclared == set()
    assert unproducible == set()


def test_notification_table_is_consistent():
    assert undeclared_or_unproducible(NOTIFICATION_RULES) == (set(), set())
    assert len(build_item_schema("notification", NOTIFICATION_RULES)["properties"]) == 10


def test_field_with_no_context_is_reported_unproducible():
    rules = (
        FieldRule("id", ALL_CONTEXTS, lambda e: e.id),
        FieldRule("ghost", frozenset(), lambda e: None),
    )
    assert undeclared_or_unproducible(rules) == (set(), {"ghost"})


def test_context_param_defaults_to_view():
    param = context_param()
    assert param["default"] == "view"
    assert param["enum"] == ["view", "embed", "edit"]
    assert param["enum"] == Context.values()


def test_writable_args_skip_readonly_fields_and_mark_required():
    args = writable_args(RULES, ("user_login", "email", "password"))
    assert "id" not in args
    assert "capabilities" not in args
    assert args["password"]["required"] is True
    assert "required" not in args["name"]


def test_describe_route_collects_methods_in_order():
    body = describe_route(
        "community/v1",
        [
            EndpointSpec(("GET",), {"context": context_param()}),
            EndpointSpec(("PUT", "PATCH"), {}),
            EndpointSpec(("GET",), {}),
        ],
        {"properties": {}},
    )
    assert body["namespace"] == "community/v1"
    assert body["methods"] == ["GET", "PUT", "PATCH"]
    assert body["endpoints"][0]["args"]["context"]["default"] == "view"
    assert body["endpoints"][1]["methods"] == ["PUT", "PATCH"]
