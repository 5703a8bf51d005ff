"""Member Fields — inclusion table order, links and nicename slugs."""

from community_rest.core.domain_types import Context
from community_rest.core.member_fields import (
    MEMBER_REQUIRED_ON_CREATE, MemberUrls, build_member_rules, sanitize_nicename,
)


def test_rule_order_and_count():
    rules = build_member_rules(MemberUrls(site_url="http://example.test"))
    assert [r.name for r in rules] == [
        "id", "name", "user_login", "link", "avatar_urls", "member_types",
        "xprofile", "email", "roles", "capabilities", "extra_capabilities",
        "registered_date", "password",
    ]


def test_only_password_is_secret():
    rules = build_member_rules(MemberUrls(site_url="http://example.test"))
    assert [r.name for r in rules if r.secret] == ["password"]
    password = rules[-1]
    assert not any(password.included_in(c) for c in Context)


def test_profile_link_trims_trailing_slash():
    urls = MemberUrls(site_url="http://example.test/")
    assert urls.profile_link("jdoe") == "http://example.test/members/jdoe/"


def test_sanitize_nicename():
    assert sanitize_nicename("Jane Doe") == "jane-doe"
    assert sanitize_nicename("jöhn.smith@x") == "john-smith-x"
    assert sanitize_nicename("@@@") == "member"
    assert len(sanitize_nicename("a" * 80)) == 50


def test_create_requires_login_email_password():
    assert MEMBER_REQUIRED_ON_CREATE == ("user_login", "email", "password")
