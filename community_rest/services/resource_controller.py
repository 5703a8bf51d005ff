"""Resource Controller — generic list/get/create/update/delete over one entity type.

Invariants:
    - Every request does a fresh store lookup; nothing is cached between calls
    - Update/Delete reject anonymous callers before any lookup (401, never 404)
    - Get on an unknown id is 404 for every caller
    - Create and Update respond at edit context; Create reports CREATED
    - Update and Delete hand back the pre-mutation representation, which is
      also written to the audit log
    - Store and gate errors propagate unchanged; nothing is retried

Design Decisions:
    - Resource-specific rules (identity collisions, required-field checks)
      live in subclass hooks; the operation sequence stays here
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, TypeVar

from community_rest.core.authorization import Caller
from community_rest.core.domain_types import Action, Context, ResponseStatus
from community_rest.core.errors import (
    ErrorContext,
    ForbiddenError,
    OperationDisabledError,
    ResourceNotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from community_rest.core.projection import FieldRule, build_links, project
from community_rest.core.repository_protocols import AuthorizationGate, EntityStore

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("community_rest.audit")

EntityT = TypeVar("EntityT")


@dataclass(frozen=True)
class ResourceDefinition:
    """Static description of one resource family."""
    name: str
    error_prefix: str
    rules: tuple[FieldRule, ...]
    owner_of: Callable[[Any], int | None]
    required_on_create: tuple[str, ...] = ()


@dataclass
class ControllerResult:
    """What an operation hands to the transport layer."""
    data: Any
    status: ResponseStatus = ResponseStatus.OK
    previous: dict | None = None
    headers: dict[str, str] = field(default_factory=dict)


class ResourceController(Generic[EntityT]):
    """Authorize, delegate to the store, project the result."""

    def __init__(
        self,
        definition: ResourceDefinition,
        store: EntityStore[EntityT],
        gate: AuthorizationGate,
        collection_url: str,
        delete_enabled: bool = True,
    ):
        self.definition = definition
        self.store = store
        self.gate = gate
        self.collection_url = collection_url.rstrip("/")
        self.delete_enabled = delete_enabled

    # ─── Operations ─────────────────────────────────────────────

    async def list(
        self, caller: Caller, context: Context, filters: Mapping[str, Any],
    ) -> ControllerResult:
        target = self.list_target(caller, filters)
        self._authorize(caller, Action.LIST, target, "view")
        if context is Context.EDIT:
            self._authorize(caller, Action.READ_PRIVATE, target, "view")
        entities = await self.store.list(filters)
        return ControllerResult([self.prepare(e, context) for e in entities])

    async def get(
        self, caller: Caller, entity_id: int, context: Context,
    ) -> ControllerResult:
        entity = await self._find_or_404(entity_id)
        owner = self.definition.owner_of(entity)
        self._authorize(caller, Action.READ, owner, "view")
        if context is Context.EDIT:
            self._authorize(caller, Action.READ_PRIVATE, owner, "view")
        return ControllerResult(self.prepare(entity, context))

    async def create(
        self, caller: Caller, fields: Mapping[str, Any],
    ) -> ControllerResult:
        self._authorize(caller, Action.CREATE, self.create_target(caller, fields), "create")
        self._require_fields(fields)
        await self.validate_create(caller, fields)
        entity = await self.store.create(fields)
        data = self.prepare(entity, Context.EDIT)
        logger.info(
            f"{self.definition.name} created",
            extra={
                "resource": self.definition.name, "entity_id": data["id"],
                "caller_id": caller.member_id, "operation": "create",
            },
        )
        return ControllerResult(
            data, ResponseStatus.CREATED,
            headers={"Location": f"{self.collection_url}/{data['id']}"},
        )

    async def update(
        self, caller: Caller, entity_id: int, fields: Mapping[str, Any],
    ) -> ControllerResult:
        self._require_authenticated(caller, "update")
        entity = await self._find_or_404(entity_id)
        self._authorize(caller, Action.UPDATE, self.definition.owner_of(entity), "update")
        previous = self.prepare(entity, Context.EDIT)
        await self.validate_update(caller, entity, fields)
        updated = await self.store.update(entity_id, fields)
        self._audit("update", caller, entity_id, previous)
        return ControllerResult(self.prepare(updated, Context.EDIT), previous=previous)

    async def delete(
        self, caller: Caller, entity_id: int, options: Mapping[str, Any] | None = None,
    ) -> ControllerResult:
        options = dict(options or {})
        self._require_authenticated(caller, "delete")
        entity = await self._find_or_404(entity_id)
        self._authorize(caller, Action.DELETE, self.definition.owner_of(entity), "delete")
        if not self.delete_enabled:
            raise OperationDisabledError(
                f"Deleting a {self.definition.name} is not implemented in this deployment.",
                f"{self.definition.error_prefix}_delete_disabled",
            )
        previous = self.prepare(entity, Context.EDIT)
        await self.validate_delete(caller, entity, options)
        await self.store.delete(entity_id, **options)
        self._audit("delete", caller, entity_id, previous)
        return ControllerResult({"deleted": True, "previous": previous}, previous=previous)

    # ─── Hooks ──────────────────────────────────────────────────

    def list_target(self, caller: Caller, filters: Mapping[str, Any]) -> int | None:
        """Owner id a list request is scoped to (None = unscoped)."""
        return None

    def create_target(self, caller: Caller, fields: Mapping[str, Any]) -> int | None:
        """Owner id the new entity will belong to (None = not yet known)."""
        return None

    async def validate_create(self, caller: Caller, fields: Mapping[str, Any]) -> None:
        return None

    async def validate_update(
        self, caller: Caller, entity: EntityT, fields: Mapping[str, Any],
    ) -> None:
        return None

    async def validate_delete(
        self, caller: Caller, entity: EntityT, options: Mapping[str, Any],
    ) -> None:
        return None

    # ─── Helpers ────────────────────────────────────────────────

    def prepare(self, entity: EntityT, context: Context) -> dict[str, Any]:
        """Projected representation plus relational links."""
        data = project(entity, context, self.definition.rules)
        data["_links"] = build_links(self.collection_url, entity.id)
        return data

    def error_code(self, suffix: str) -> str:
        return f"{self.definition.error_prefix}_{suffix}"

    async def _find_or_404(self, entity_id: int) -> EntityT:
        entity = await self.store.find(entity_id)
        if entity is None:
            raise ResourceNotFoundError(
                self.definition.name, entity_id, self.error_code("invalid_id"),
            )
        return entity

    def _require_authenticated(self, caller: Caller, verb: str) -> None:
        if not caller.authenticated:
            raise UnauthenticatedError(
                f"Sorry, you are not allowed to {verb} this {self.definition.name}.",
                self.error_code(f"cannot_{verb}"),
            )

    def _authorize(
        self, caller: Caller, action: Action, target_id: int | None, verb: str,
    ) -> None:
        if self.gate.can(caller, action, target_id):
            return
        self._require_authenticated(caller, verb)
        raise ForbiddenError(
            f"Sorry, you are not allowed to {verb} this {self.definition.name}.",
            self.error_code(f"cannot_{verb}"),
            ErrorContext(
                resource=self.definition.name, entity_id=target_id,
                caller_id=caller.member_id,
            ),
        )

    def _require_fields(self, fields: Mapping[str, Any]) -> None:
        missing = [
            name for name in self.definition.required_on_create
            if fields.get(name) in (None, "")
        ]
        if missing:
            raise ValidationFailedError(
                f"Missing parameter(s): {', '.join(missing)}",
                "rest_missing_callback_param", field=missing[0],
            )

    def _audit(self, operation: str, caller: Caller, entity_id: int, previous: dict) -> None:
        audit_logger.info(
            f"{self.definition.name} {operation}",
            extra={
                "resource": self.definition.name, "entity_id": entity_id,
                "caller_id": caller.member_id, "operation": operation,
                "previous": {k: v for k, v in previous.items() if k != "_links"},
            },
        )
