"""Notifications Routes — REST surface for member notifications.

Invariants:
    - Collection route: GET (list), POST (create), OPTIONS
    - Single route: GET, PUT|PATCH (mark read/unread), DELETE, OPTIONS
    - A list without user_id is scoped to the caller
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from community_rest.api.dependencies import (
    NOTIFICATION_DEFINITION, get_caller, get_notification_controller,
)
from community_rest.config import Settings, get_settings
from community_rest.core.authorization import Caller
from community_rest.core.domain_types import Context
from community_rest.core.notification_fields import NOTIFICATION_REQUIRED_ON_CREATE
from community_rest.core.schema_descriptor import (
    EndpointSpec, build_item_schema, context_param, describe_route, writable_args,
)
from community_rest.schemas.notification import NotificationCreate, NotificationUpdate
from community_rest.services.notification_controller import NotificationController
from community_rest.services.resource_controller import ControllerResult

router = APIRouter(tags=["notifications"])

COLLECTION = "/notifications"
SINGLE = "/notifications/{notification_id}"


def _respond(result: ControllerResult) -> JSONResponse:
    return JSONResponse(
        content=result.data, status_code=int(result.status), headers=result.headers,
    )


def _schema() -> dict:
    return build_item_schema("notification", NOTIFICATION_DEFINITION.rules)


@router.get(COLLECTION)
async def list_notifications(
    context: Context = Query(Context.VIEW),
    user_id: int | None = Query(None, ge=1),
    is_new: bool | None = Query(True),
    component_name: str | None = Query(None),
    component_action: str | None = Query(None),
    item_id: int | None = Query(None),
    secondary_item_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    order: Literal["asc", "desc"] = Query("desc"),
    caller: Caller = Depends(get_caller),
    controller: NotificationController = Depends(get_notification_controller),
):
    """List notifications for one member, newest first by default."""
    filters = {
        "user_id": user_id if user_id is not None else caller.member_id,
        "is_new": is_new,
        "component_name": component_name,
        "component_action": component_action,
        "item_id": item_id,
        "secondary_item_id": secondary_item_id,
        "page": page, "per_page": per_page, "order": order,
    }
    return _respond(await controller.list(caller, context, filters))


@router.post(COLLECTION)
async def create_notification(
    body: NotificationCreate,
    caller: Caller = Depends(get_caller),
    controller: NotificationController = Depends(get_notification_controller),
):
    return _respond(await controller.create(caller, body.model_dump()))


@router.options(COLLECTION)
async def describe_notifications(settings: Settings = Depends(get_settings)):
    endpoints = [
        EndpointSpec(("GET",), {
            "context": context_param(),
            "user_id": {"description": "Limit results to this member.", "type": "integer"},
            "is_new": {"description": "Limit to new (true) or read (false) notifications.", "type": "boolean", "default": True},
            "component_name": {"type": "string"},
            "component_action": {"type": "string"},
            "item_id": {"type": "integer"},
            "secondary_item_id": {"type": "integer"},
            "page": {"type": "integer", "default": 1},
            "per_page": {"type": "integer", "default": 10},
            "order": {"type": "string", "default": "desc", "enum": ["asc", "desc"]},
        }),
        EndpointSpec(
            ("POST",),
            writable_args(NOTIFICATION_DEFINITION.rules, NOTIFICATION_REQUIRED_ON_CREATE),
        ),
    ]
    return describe_route(settings.api_namespace, endpoints, _schema())


@router.get(SINGLE)
async def get_notification(
    notification_id: int,
    context: Context = Query(Context.VIEW),
    caller: Caller = Depends(get_caller),
    controller: NotificationController = Depends(get_notification_controller),
):
    return _respond(await controller.get(caller, notification_id, context))


@router.api_route(SINGLE, methods=["PUT", "PATCH"])
async def update_notification(
    notification_id: int,
    body: NotificationUpdate,
    caller: Caller = Depends(get_caller),
    controller: NotificationController = Depends(get_notification_controller),
):
    """Mark a notification read or unread."""
    return _respond(await controller.update(caller, notification_id, body.model_dump()))


@router.delete(SINGLE)
async def delete_notification(
    notification_id: int,
    caller: Caller = Depends(get_caller),
    controller: NotificationController = Depends(get_notification_controller),
):
    return _respond(await controller.delete(caller, notification_id))


@router.options(SINGLE)
async def describe_notification(notification_id: int, settings: Settings = Depends(get_settings)):
    id_arg = {"description": "Unique identifier for the notification.", "type": "integer"}
    endpoints = [
        EndpointSpec(("GET",), {"id": id_arg, "context": context_param()}),
        EndpointSpec(("PUT", "PATCH"), {
            "id": id_arg,
            "unread": {"description": "Whether the notification is new or not.", "type": "boolean", "required": True},
        }),
        EndpointSpec(("DELETE",), {"id": id_arg}),
    ]
    return describe_route(settings.api_namespace, endpoints, _schema())
