"""API Dependencies — FastAPI providers for the caller and resource controllers.

Invariants:
    - One AsyncSession per request, shared by the caller lookup and the controller
    - Controllers are built per request; they hold no state between requests
    - Settings come from get_settings() so tests can override them
"""

from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from community_rest.config import Settings, get_settings
from community_rest.core.authorization import (
    Caller, CapabilityChecker, MemberGate, NotificationGate,
)
from community_rest.core.member_fields import (
    MEMBER_ERROR_PREFIX, MEMBER_REQUIRED_ON_CREATE, MEMBER_RESOURCE,
    MemberUrls, build_member_rules,
)
from community_rest.core.notification_fields import (
    NOTIFICATION_ERROR_PREFIX, NOTIFICATION_REQUIRED_ON_CREATE,
    NOTIFICATION_RESOURCE, NOTIFICATION_RULES,
)
from community_rest.infrastructure.authentication import resolve_caller
from community_rest.infrastructure.database import get_db
from community_rest.infrastructure.member_store import SqlMemberStore
from community_rest.infrastructure.notification_store import SqlNotificationStore
from community_rest.services.member_controller import MemberController
from community_rest.services.notification_controller import NotificationController
from community_rest.services.resource_controller import ResourceDefinition

basic_auth = HTTPBasic(auto_error=False)


def member_definition(settings: Settings) -> ResourceDefinition:
    urls = MemberUrls(
        site_url=settings.site_url,
        avatar_base_url=settings.avatar_base_url,
        avatar_default=settings.avatar_default,
    )
    return ResourceDefinition(
        name=MEMBER_RESOURCE,
        error_prefix=MEMBER_ERROR_PREFIX,
        rules=build_member_rules(urls),
        owner_of=lambda member: member.id,
        required_on_create=MEMBER_REQUIRED_ON_CREATE,
    )


NOTIFICATION_DEFINITION = ResourceDefinition(
    name=NOTIFICATION_RESOURCE,
    error_prefix=NOTIFICATION_ERROR_PREFIX,
    rules=NOTIFICATION_RULES,
    owner_of=lambda notification: notification.user_id,
    required_on_create=NOTIFICATION_REQUIRED_ON_CREATE,
)


def collection_url(settings: Settings, resource: str) -> str:
    return f"{settings.site_url.rstrip('/')}{settings.api_prefix}/{resource}"


def _member_store(db: AsyncSession, settings: Settings) -> SqlMemberStore:
    return SqlMemberStore(db, password_iterations=settings.password_hash_iterations)


async def get_caller(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Caller:
    return await resolve_caller(
        credentials, _member_store(db, settings),
        multisite=settings.multisite, site_admins=settings.site_admins,
    )


def get_member_controller(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> MemberController:
    return MemberController(
        member_definition(settings),
        _member_store(db, settings),
        MemberGate(CapabilityChecker(multisite=settings.multisite)),
        collection_url(settings, "members"),
        delete_enabled=not settings.multisite,
    )


def get_notification_controller(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> NotificationController:
    return NotificationController(
        NOTIFICATION_DEFINITION,
        SqlNotificationStore(db),
        NotificationGate(CapabilityChecker(multisite=settings.multisite)),
        collection_url(settings, "notifications"),
        member_store=_member_store(db, settings),
    )
