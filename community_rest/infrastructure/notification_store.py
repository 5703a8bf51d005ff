"""Notification Store — SQLAlchemy implementation of the notification EntityStore.

Invariants:
    - Representation names (component, action, unread, ...) mapped to columns here
    - list() orders by date_notified then id, newest first unless order=asc
    - is_new filter defaults to unread-only; None means no filter
"""

from typing import Any, Mapping, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community_rest.core.errors import ResourceNotFoundError
from community_rest.core.notification_fields import (
    NOTIFICATION_ERROR_PREFIX, NOTIFICATION_RESOURCE,
)
from community_rest.models.notification import Notification

FILTER_COLUMNS = {
    "user_id": Notification.user_id,
    "component_name": Notification.component_name,
    "component_action": Notification.component_action,
    "item_id": Notification.item_id,
    "secondary_item_id": Notification.secondary_item_id,
}


class SqlNotificationStore:
    """Notification persistence over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, entity_id: int) -> Notification | None:
        return await self.db.get(Notification, entity_id)

    async def list(self, filters: Mapping[str, Any]) -> Sequence[Notification]:
        page = max(int(filters.get("page") or 1), 1)
        per_page = int(filters.get("per_page") or 10)
        ascending = filters.get("order") == "asc"

        query = select(Notification).order_by(
            Notification.date_notified.asc() if ascending else Notification.date_notified.desc(),
            Notification.id.asc() if ascending else Notification.id.desc(),
        )
        for key, column in FILTER_COLUMNS.items():
            if filters.get(key) is not None:
                query = query.where(column == filters[key])
        if filters.get("is_new") is not None:
            query = query.where(Notification.is_new.is_(bool(filters["is_new"])))

        result = await self.db.execute(
            query.limit(per_page).offset((page - 1) * per_page),
        )
        return list(result.scalars().all())

    async def create(self, fields: Mapping[str, Any]) -> Notification:
        notification = Notification(
            user_id=fields["user_id"],
            item_id=fields.get("primary_association") or 0,
            secondary_item_id=fields.get("secondary_association") or 0,
            component_name=fields["component"],
            component_action=fields["action"],
            is_new=fields.get("unread", True),
            content=fields.get("content") or "",
            href=fields.get("href") or "",
        )
        self.db.add(notification)
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def update(self, entity_id: int, fields: Mapping[str, Any]) -> Notification:
        notification = await self._get_or_raise(entity_id)
        if fields.get("unread") is not None:
            notification.is_new = bool(fields["unread"])
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def delete(self, entity_id: int, **_: Any) -> Notification:
        notification = await self._get_or_raise(entity_id)
        await self.db.delete(notification)
        await self.db.commit()
        return notification

    async def _get_or_raise(self, entity_id: int) -> Notification:
        notification = await self.find(entity_id)
        if notification is None:
            raise ResourceNotFoundError(
                NOTIFICATION_RESOURCE, entity_id,
                f"{NOTIFICATION_ERROR_PREFIX}_invalid_id",
            )
        return notification
