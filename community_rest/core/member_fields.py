"""Member Fields — the member field-inclusion table and resource definition.

Invariants:
    - Public identity (id, name, link, avatar_urls) is emitted in every context
    - Contact, roles, capability sets and registration date are edit-only
    - password is declared (write-only) but never emitted
    - Exactly 13 declared fields

Design Decisions:
    - Rules built by a factory because link and avatar getters depend on
      site configuration; the table itself is still static per deployment
"""

import copy
import re
import unicodedata
from dataclasses import dataclass

from community_rest.core.authorization import direct_capabilities, effective_capabilities
from community_rest.core.avatars import avatar_urls
from community_rest.core.projection import (
    ALL_CONTEXTS, EDIT_ONLY, VIEW_EDIT, FieldRule, format_datetime,
)

MEMBER_RESOURCE = "member"
MEMBER_ERROR_PREFIX = "rest_member"
MEMBER_REQUIRED_ON_CREATE = ("user_login", "email", "password")


@dataclass(frozen=True)
class MemberUrls:
    """Site settings the link and avatar getters need."""
    site_url: str
    avatar_base_url: str = "https://secure.gravatar.com/avatar"
    avatar_default: str = "mm"

    def profile_link(self, nicename: str) -> str:
        return f"{self.site_url.rstrip('/')}/members/{nicename}/"


def sanitize_nicename(login: str) -> str:
    """URL-safe slug for a login: ascii, lower-case, dashes, max 50 chars."""
    ascii_login = unicodedata.normalize("NFKD", login).encode("ascii", "ignore").decode()
    slug = re.sub(r"[^a-z0-9_-]+", "-", ascii_login.lower()).strip("-")
    return slug[:50] or "member"


def build_member_rules(urls: MemberUrls) -> tuple[FieldRule, ...]:
    return (
        FieldRule(
            "id", ALL_CONTEXTS, lambda m: m.id,
            type="integer", description="A unique numeric ID for the member.",
            readonly=True,
        ),
        FieldRule(
            "name", ALL_CONTEXTS, lambda m: m.display_name,
            description="The display name for the member.",
        ),
        FieldRule(
            "user_login", EDIT_ONLY, lambda m: m.user_login,
            description="An alphanumeric identifier for the member.",
        ),
        FieldRule(
            "link", ALL_CONTEXTS, lambda m: urls.profile_link(m.user_nicename),
            format="uri", description="Profile URL of the member.", readonly=True,
        ),
        FieldRule(
            "avatar_urls", ALL_CONTEXTS,
            lambda m: avatar_urls(m.user_email, urls.avatar_base_url, urls.avatar_default),
            type="object", description="Avatar URLs for the member.", readonly=True,
        ),
        FieldRule(
            "member_types", ALL_CONTEXTS, lambda m: list(m.member_types or []),
            type="array", items={"type": "string"},
            description="Member types associated with the member.",
        ),
        FieldRule(
            "xprofile", VIEW_EDIT, lambda m: copy.deepcopy(m.xprofile or {}),
            type="object", description="Extended profile field groups of the member.",
        ),
        FieldRule(
            "email", EDIT_ONLY, lambda m: m.user_email,
            format="email", description="The email address for the member.",
        ),
        FieldRule(
            "roles", EDIT_ONLY, lambda m: list(m.roles or []),
            type="array", items={"type": "string"},
            description="Roles assigned to the member.",
        ),
        FieldRule(
            "capabilities", EDIT_ONLY,
            lambda m: effective_capabilities(m.roles or [], m.extra_caps or {}),
            type="object", description="All capabilities assigned to the member.",
            readonly=True,
        ),
        FieldRule(
            "extra_capabilities", EDIT_ONLY,
            lambda m: direct_capabilities(m.roles or [], m.extra_caps or {}),
            type="object", description="Any extra capabilities assigned to the member.",
            readonly=True,
        ),
        FieldRule(
            "registered_date", EDIT_ONLY, lambda m: format_datetime(m.user_registered),
            format="date-time", description="Registration date for the member.",
            readonly=True,
        ),
        FieldRule(
            "password", EDIT_ONLY, lambda m: None,
            description="Password for the member (never included).", secret=True,
        ),
    )
