"""Authentication — resolves the request's Caller from HTTP Basic credentials.

Invariants:
    - No credentials → ANONYMOUS (never an error by itself)
    - Unknown login or wrong password → UnauthenticatedError (401)
    - Capabilities are resolved once per request from the member row
    - Super admin: listed in site_admins on multisite, holder of delete_users
      on a single site
"""

import logging

from fastapi.security import HTTPBasicCredentials

from community_rest.core.authorization import ANONYMOUS, Caller, effective_capabilities
from community_rest.core.domain_types import MemberId
from community_rest.core.errors import UnauthenticatedError
from community_rest.infrastructure.passwords import verify_password
from community_rest.models.member import Member

logger = logging.getLogger(__name__)


def caller_for_member(
    member: Member, multisite: bool = False, site_admins: list[str] | None = None,
) -> Caller:
    caps = effective_capabilities(member.roles or [], member.extra_caps or {})
    granted = frozenset(cap for cap, allowed in caps.items() if allowed)
    if multisite:
        super_admin = member.user_login in (site_admins or [])
    else:
        super_admin = "delete_users" in granted
    return Caller(
        member_id=MemberId(member.id),
        login=member.user_login,
        capabilities=granted,
        is_super_admin=super_admin,
    )


async def resolve_caller(
    credentials: HTTPBasicCredentials | None,
    store,
    multisite: bool = False,
    site_admins: list[str] | None = None,
) -> Caller:
    """Turn Basic credentials into a Caller using the member store."""
    if credentials is None:
        return ANONYMOUS
    member = await store.find_by_login(credentials.username)
    if member is None or not verify_password(credentials.password, member.password_hash):
        logger.warning(
            "Rejected credentials",
            extra={"error_code": "rest_invalid_credentials"},
        )
        raise UnauthenticatedError(
            "Invalid username or password.", "rest_invalid_credentials",
        )
    return caller_for_member(member, multisite, site_admins)
