"""Member Store — SQLAlchemy implementation of the member EntityStore.

Invariants:
    - Request field names (name, email, password, ...) are mapped to columns here
    - Passwords are hashed before they reach the ORM row
    - user_nicename is unique; collisions get a numeric suffix
    - search is a case-insensitive literal substring match (no wildcards)
    - delete() removes or reassigns the member's notifications first, then the
      member, and returns the deleted row as a detached snapshot
    - Commits once per mutation; the database serializes concurrent writers
"""

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import delete as sql_delete, func, or_, select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from community_rest.core.errors import ResourceNotFoundError
from community_rest.core.member_fields import (
    MEMBER_ERROR_PREFIX, MEMBER_RESOURCE, sanitize_nicename,
)
from community_rest.infrastructure.passwords import DEFAULT_ITERATIONS, hash_password
from community_rest.models.member import Member
from community_rest.models.notification import Notification

logger = logging.getLogger(__name__)

ORDER_COLUMNS = {
    "id": Member.id,
    "name": Member.display_name,
    "registered": Member.user_registered,
}


class SqlMemberStore:
    """Member persistence over one AsyncSession."""

    def __init__(
        self,
        db: AsyncSession,
        password_iterations: int = DEFAULT_ITERATIONS,
        default_role: str = "subscriber",
    ):
        self.db = db
        self.password_iterations = password_iterations
        self.default_role = default_role

    async def find(self, entity_id: int) -> Member | None:
        return await self.db.get(Member, entity_id)

    async def find_by_login(self, login: str) -> Member | None:
        result = await self.db.execute(
            select(Member).where(Member.user_login == login),
        )
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Member | None:
        result = await self.db.execute(
            select(Member).where(func.lower(Member.user_email) == email.lower()),
        )
        return result.scalar_one_or_none()

    async def list(self, filters: Mapping[str, Any]) -> Sequence[Member]:
        page = max(int(filters.get("page") or 1), 1)
        per_page = int(filters.get("per_page") or 10)
        column = ORDER_COLUMNS.get(filters.get("orderby") or "id", Member.id)
        descending = (filters.get("order") or "asc") == "desc"

        query = select(Member).order_by(
            column.desc() if descending else column.asc(),
            Member.id.desc() if descending else Member.id.asc(),
        )
        if filters.get("search"):
            term = filters["search"]
            query = query.where(or_(
                Member.user_login.icontains(term, autoescape=True),
                Member.display_name.icontains(term, autoescape=True),
                Member.user_email.icontains(term, autoescape=True),
            ))
        if filters.get("include"):
            query = query.where(Member.id.in_(filters["include"]))
        if filters.get("exclude"):
            query = query.where(Member.id.not_in(filters["exclude"]))

        member_type = filters.get("member_type")
        if not member_type:
            result = await self.db.execute(
                query.limit(per_page).offset((page - 1) * per_page),
            )
            return list(result.scalars().all())

        # member_types is a JSON list; filter after ordering, then paginate
        result = await self.db.execute(query)
        matching = [m for m in result.scalars().all() if member_type in (m.member_types or [])]
        start = (page - 1) * per_page
        return matching[start:start + per_page]

    async def create(self, fields: Mapping[str, Any]) -> Member:
        login = fields["user_login"]
        member = Member(
            user_login=login,
            user_nicename=await self._unique_nicename(login),
            display_name=fields.get("name") or login,
            user_email=fields["email"],
            password_hash=hash_password(fields["password"], self.password_iterations),
            roles=list(fields.get("roles") or [self.default_role]),
            extra_caps={},
            member_types=list(fields.get("member_types") or []),
            xprofile=dict(fields.get("xprofile") or {}),
        )
        self.db.add(member)
        await self.db.commit()
        await self.db.refresh(member)
        logger.info(f"Member {member.id} stored", extra={"entity_id": member.id})
        return member

    async def update(self, entity_id: int, fields: Mapping[str, Any]) -> Member:
        member = await self._get_or_raise(entity_id)
        if fields.get("name") is not None:
            member.display_name = fields["name"]
        if fields.get("email") is not None:
            member.user_email = fields["email"]
        if fields.get("password"):
            member.password_hash = hash_password(fields["password"], self.password_iterations)
        if fields.get("roles") is not None:
            member.roles = list(fields["roles"])
        if fields.get("member_types") is not None:
            member.member_types = list(fields["member_types"])
        if fields.get("xprofile") is not None:
            member.xprofile = _merge_xprofile(member.xprofile or {}, fields["xprofile"])
        await self.db.commit()
        await self.db.refresh(member)
        return member

    async def delete(self, entity_id: int, reassign: int | None = None, **_: Any) -> Member:
        member = await self._get_or_raise(entity_id)
        if reassign:
            await self.db.execute(
                sql_update(Notification)
                .where(Notification.user_id == entity_id)
                .values(user_id=reassign),
            )
        else:
            await self.db.execute(
                sql_delete(Notification).where(Notification.user_id == entity_id),
            )
        await self.db.delete(member)
        await self.db.commit()
        logger.info(
            f"Member {entity_id} deleted",
            extra={"entity_id": entity_id, "operation": "delete"},
        )
        return member

    async def _unique_nicename(self, login: str) -> str:
        """Slug for the profile link; a -2, -3, ... suffix when already taken."""
        base = sanitize_nicename(login)
        candidate, suffix = base, 2
        while await self._nicename_taken(candidate):
            tail = f"-{suffix}"
            candidate = f"{base[:50 - len(tail)]}{tail}"
            suffix += 1
        return candidate

    async def _nicename_taken(self, nicename: str) -> bool:
        result = await self.db.execute(
            select(Member.id).where(Member.user_nicename == nicename).limit(1),
        )
        return result.first() is not None

    async def _get_or_raise(self, entity_id: int) -> Member:
        member = await self.find(entity_id)
        if member is None:
            raise ResourceNotFoundError(
                MEMBER_RESOURCE, entity_id, f"{MEMBER_ERROR_PREFIX}_invalid_id",
            )
        return member


def _merge_xprofile(current: Mapping[str, Any], changes: Mapping[str, Any]) -> dict:
    """Group-wise merge; a new dict so the JSON column registers the change."""
    merged = {group: dict(values) for group, values in current.items()}
    for group, values in changes.items():
        merged.setdefault(group, {}).update(values or {})
    return merged
