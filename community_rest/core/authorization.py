"""Authorization Gate — role/capability policies injected into resource controllers.

Invariants:
    - Gates are pure: they decide from the Caller and the target owner id only
    - Anonymous callers are never granted a mutating action
    - In multisite mode, network capabilities (user management) belong to
      super admins only; the super-admin bypass applies on multisite only, so
      an explicit revocation in extra_caps holds on a single site
    - Acting on one's own entity satisfies UPDATE/DELETE/READ_PRIVATE without
      the elevated capability; PROMOTE always needs the capability

Design Decisions:
    - One gate per resource family sharing a CapabilityChecker, injected into
      the controller rather than read from module state
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from community_rest.core.domain_types import Action, MemberId, Role


ROLE_CAPABILITIES: dict[Role, frozenset[str]] = {
    Role.ADMINISTRATOR: frozenset({
        "read", "list_users", "create_users", "edit_users", "delete_users",
        "promote_users", "remove_users", "manage_options", "bp_moderate",
        "edit_posts", "edit_others_posts", "publish_posts", "moderate_comments",
        "upload_files",
    }),
    Role.EDITOR: frozenset({
        "read", "edit_posts", "edit_others_posts", "publish_posts",
        "moderate_comments", "upload_files",
    }),
    Role.AUTHOR: frozenset({"read", "edit_posts", "publish_posts", "upload_files"}),
    Role.CONTRIBUTOR: frozenset({"read", "edit_posts"}),
    Role.SUBSCRIBER: frozenset({"read"}),
}

# Reserved to super admins on a multisite network.
NETWORK_CAPABILITIES = frozenset({
    "create_users", "edit_users", "delete_users", "promote_users",
})


def role_capabilities(roles: Iterable[str]) -> set[str]:
    caps: set[str] = set()
    for name in roles:
        try:
            caps |= ROLE_CAPABILITIES[Role(name)]
        except ValueError:
            continue
    return caps


def direct_capabilities(roles: Iterable[str], extra_caps: Mapping[str, bool]) -> dict[str, bool]:
    """Capabilities stored on the member itself: role names plus explicit grants."""
    caps = {name: True for name in roles}
    caps.update(extra_caps)
    return caps


def effective_capabilities(roles: Iterable[str], extra_caps: Mapping[str, bool]) -> dict[str, bool]:
    """Every capability the member holds, role-derived and direct.

    Explicit grants override role defaults, so an extra cap set to False
    revokes a role capability.
    """
    roles = list(roles)
    caps = {cap: True for cap in sorted(role_capabilities(roles))}
    caps.update(direct_capabilities(roles, extra_caps))
    return caps


@dataclass(frozen=True)
class Caller:
    """The requester. member_id is None for anonymous callers."""
    member_id: MemberId | None = None
    login: str | None = None
    capabilities: frozenset[str] = field(default_factory=frozenset)
    is_super_admin: bool = False

    @property
    def authenticated(self) -> bool:
        return self.member_id is not None

    def owns(self, owner_id: int | None) -> bool:
        return self.authenticated and owner_id is not None and self.member_id == owner_id


ANONYMOUS = Caller()


@dataclass(frozen=True)
class CapabilityChecker:
    """Answers has(caller, capability) under the deployment's network mode."""
    multisite: bool = False

    def has(self, caller: Caller, capability: str) -> bool:
        if not caller.authenticated:
            return False
        if self.multisite and caller.is_super_admin:
            return True
        if self.multisite and capability in NETWORK_CAPABILITIES:
            return False
        return capability in caller.capabilities


class MemberGate:
    """Authorization policy for member accounts. target_id is the member id."""

    def __init__(self, checker: CapabilityChecker):
        self._checker = checker

    def can(self, caller: Caller, action: Action, target_id: int | None = None) -> bool:
        has = self._checker.has
        if action in (Action.LIST, Action.READ):
            return True
        if action is Action.READ_PRIVATE:
            if target_id is None:
                return has(caller, "list_users")
            return caller.owns(target_id) or has(caller, "edit_users")
        if action is Action.CREATE:
            return has(caller, "create_users")
        if action is Action.UPDATE:
            return caller.owns(target_id) or has(caller, "edit_users")
        if action is Action.DELETE:
            return caller.owns(target_id) or has(caller, "delete_users")
        if action is Action.PROMOTE:
            return has(caller, "promote_users")
        return False


class NotificationGate:
    """Authorization policy for notifications. target_id is the owning member id."""

    def __init__(self, checker: CapabilityChecker):
        self._checker = checker

    def can(self, caller: Caller, action: Action, target_id: int | None = None) -> bool:
        if not caller.authenticated:
            return False
        if self._checker.has(caller, "bp_moderate"):
            return True
        if action is Action.PROMOTE:
            return False
        return target_id is None or caller.owns(target_id)
