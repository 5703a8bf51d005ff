"""Notification Controller — resource controller rules specific to notifications.

Invariants:
    - List and create are scoped to an owner (user_id); gates decide whether
      the caller may act for that owner
    - A notification can only be created for an existing member
"""

from typing import Any, Mapping

from community_rest.core.authorization import Caller
from community_rest.core.errors import ValidationFailedError
from community_rest.core.repository_protocols import EntityStore
from community_rest.models.notification import Notification
from community_rest.services.resource_controller import ResourceController


class NotificationController(ResourceController[Notification]):
    """Notifications: owner scoping and recipient validation."""

    def __init__(self, *args: Any, member_store: EntityStore | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.member_store = member_store

    def list_target(self, caller: Caller, filters: Mapping[str, Any]) -> int | None:
        return filters.get("user_id")

    def create_target(self, caller: Caller, fields: Mapping[str, Any]) -> int | None:
        return fields.get("user_id")

    async def validate_create(self, caller: Caller, fields: Mapping[str, Any]) -> None:
        if self.member_store is None:
            return
        if await self.member_store.find(fields["user_id"]) is None:
            raise ValidationFailedError(
                "Invalid member ID for the notification recipient.",
                self.error_code("invalid_user"), field="user_id",
            )
