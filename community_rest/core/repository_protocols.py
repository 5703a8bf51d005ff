"""Boundary Protocols — contracts between the controller core and the shell.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the shell via dependency injection
    - delete() returns the pre-deletion snapshot; the store owns its own
      concurrency control

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the projector and gates that
      consume the results stay synchronous and pure
"""

from typing import Any, Mapping, Protocol, Sequence, TypeVar

from community_rest.core.authorization import Caller
from community_rest.core.domain_types import Action

EntityT = TypeVar("EntityT")


class EntityStore(Protocol[EntityT]):
    """Contract for entity persistence — implemented by infrastructure stores."""
    async def find(self, entity_id: int) -> EntityT | None: ...
    async def create(self, fields: Mapping[str, Any]) -> EntityT: ...
    async def update(self, entity_id: int, fields: Mapping[str, Any]) -> EntityT: ...
    async def delete(self, entity_id: int, **options: Any) -> EntityT: ...
    async def list(self, filters: Mapping[str, Any]) -> Sequence[EntityT]: ...


class MemberLookup(Protocol):
    """Identity lookups members need on top of EntityStore."""
    async def find_by_login(self, login: str) -> Any | None: ...
    async def find_by_email(self, email: str) -> Any | None: ...


class AuthorizationGate(Protocol):
    """Contract for capability checks — implemented in core/authorization.py."""
    def can(self, caller: Caller, action: Action, target_id: int | None = None) -> bool: ...
