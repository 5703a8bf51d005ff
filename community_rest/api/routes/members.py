"""Members Routes — REST surface for member accounts.

Invariants:
    - Collection route: GET (list), POST (create), OPTIONS (self-description)
    - Single route: GET, PUT|PATCH, DELETE, OPTIONS
    - GET /members/me resolves the caller's own account (401 if anonymous)
    - Routes contain no business logic; MemberController decides everything

Design Decisions:
    - /me registered before /{member_id} so the literal path wins
    - reassign accepted as a string: clients send "false" to mean "no reassignment"
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from community_rest.api.dependencies import (
    get_caller, get_member_controller, member_definition,
)
from community_rest.config import Settings, get_settings
from community_rest.core.authorization import Caller
from community_rest.core.domain_types import Context
from community_rest.core.errors import UnauthenticatedError, ValidationFailedError
from community_rest.core.member_fields import MEMBER_REQUIRED_ON_CREATE
from community_rest.core.schema_descriptor import (
    EndpointSpec, build_item_schema, context_param, describe_route, writable_args,
)
from community_rest.schemas.member import MemberCreate, MemberUpdate
from community_rest.services.member_controller import MemberController
from community_rest.services.resource_controller import ControllerResult

logger = logging.getLogger(__name__)
router = APIRouter(tags=["members"])

COLLECTION = "/members"
SINGLE = "/members/{member_id}"


def _respond(result: ControllerResult) -> JSONResponse:
    return JSONResponse(
        content=result.data, status_code=int(result.status), headers=result.headers,
    )


def _parse_reassign(value: str | None) -> int | None:
    if value is None or value.strip().lower() in ("", "false", "0", "null"):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationFailedError(
            "reassign must be a member ID or false.",
            "rest_invalid_param", field="reassign",
        )


# ─── Collection ─────────────────────────────────────────────────

@router.get(COLLECTION)
async def list_members(
    context: Context = Query(Context.VIEW),
    search: str | None = Query(None, max_length=200),
    member_type: str | None = Query(None),
    include: list[int] | None = Query(None),
    exclude: list[int] | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    orderby: Literal["id", "name", "registered"] = Query("id"),
    order: Literal["asc", "desc"] = Query("asc"),
    caller: Caller = Depends(get_caller),
    controller: MemberController = Depends(get_member_controller),
):
    """List members in store order."""
    filters = {
        "search": search, "member_type": member_type,
        "include": include, "exclude": exclude,
        "page": page, "per_page": per_page,
        "orderby": orderby, "order": order,
    }
    return _respond(await controller.list(caller, context, filters))


@router.post(COLLECTION)
async def create_member(
    body: MemberCreate,
    caller: Caller = Depends(get_caller),
    controller: MemberController = Depends(get_member_controller),
):
    """Create a member; responds 201 with the edit representation."""
    result = await controller.create(caller, body.model_dump(exclude_none=True))
    return _respond(result)


@router.options(COLLECTION)
async def describe_members(settings: Settings = Depends(get_settings)):
    definition = member_definition(settings)
    endpoints = [
        EndpointSpec(("GET",), {
            "context": context_param(),
            "search": {"description": "Limit results to those matching a string.", "type": "string"},
            "member_type": {"description": "Limit results to a member type.", "type": "string"},
            "include": {"description": "Limit results to these member IDs.", "type": "array"},
            "exclude": {"description": "Exclude these member IDs.", "type": "array"},
            "page": {"description": "Current page of the collection.", "type": "integer", "default": 1},
            "per_page": {"description": "Maximum number of items per page.", "type": "integer", "default": 10},
            "orderby": {"type": "string", "default": "id", "enum": ["id", "name", "registered"]},
            "order": {"type": "string", "default": "asc", "enum": ["asc", "desc"]},
        }),
        EndpointSpec(("POST",), writable_args(definition.rules, MEMBER_REQUIRED_ON_CREATE)),
    ]
    return describe_route(
        settings.api_namespace, endpoints, build_item_schema("member", definition.rules),
    )


# ─── Current member ─────────────────────────────────────────────

@router.get("/members/me")
async def get_current_member(
    context: Context = Query(Context.VIEW),
    caller: Caller = Depends(get_caller),
    controller: MemberController = Depends(get_member_controller),
):
    """The authenticated caller's own member record."""
    if not caller.authenticated:
        raise UnauthenticatedError(
            "You are not currently logged in.", "rest_not_logged_in",
        )
    return _respond(await controller.get(caller, caller.member_id, context))


# ─── Single ─────────────────────────────────────────────────────

@router.get(SINGLE)
async def get_member(
    member_id: int,
    context: Context = Query(Context.VIEW),
    caller: Caller = Depends(get_caller),
    controller: MemberController = Depends(get_member_controller),
):
    return _respond(await controller.get(caller, member_id, context))


@router.api_route(SINGLE, methods=["PUT", "PATCH"])
async def update_member(
    member_id: int,
    body: MemberUpdate,
    caller: Caller = Depends(get_caller),
    controller: MemberController = Depends(get_member_controller),
):
    """Update a member; the previous representation goes to the audit log."""
    result = await controller.update(caller, member_id, body.model_dump(exclude_unset=True))
    return _respond(result)


@router.delete(SINGLE)
async def delete_member(
    member_id: int,
    force: bool = Query(False),
    reassign: str | None = Query(None),
    caller: Caller = Depends(get_caller),
    controller: MemberController = Depends(get_member_controller),
):
    """Delete a member (force=true required); 501 in multisite deployments."""
    options = {"force": force, "reassign": _parse_reassign(reassign)}
    return _respond(await controller.delete(caller, member_id, options))


@router.options(SINGLE)
async def describe_member(member_id: int, settings: Settings = Depends(get_settings)):
    definition = member_definition(settings)
    id_arg = {"description": "Unique identifier for the member.", "type": "integer"}
    endpoints = [
        EndpointSpec(("GET",), {"id": id_arg, "context": context_param()}),
        EndpointSpec(("PUT", "PATCH"), {"id": id_arg, **writable_args(definition.rules)}),
        EndpointSpec(("DELETE",), {
            "id": id_arg,
            "force": {"description": "Required to be true, as members do not support trashing.", "type": "boolean", "default": False},
            "reassign": {"description": "Reassign the deleted member's notifications to this member ID.", "type": "integer"},
        }),
    ]
    return describe_route(
        settings.api_namespace, endpoints, build_item_schema("member", definition.rules),
    )
