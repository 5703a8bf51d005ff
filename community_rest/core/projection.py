"""Response Projector — table-driven (entity, context) → representation.

Invariants:
    - A field is emitted iff the requested context is in its rule's contexts
    - Secret fields are never emitted in any context; strip_secrets() enforces
      this on its own, independent of the context table
    - Pure: no IO, no mutation of the entity, deterministic for equal inputs
    - Output key order follows rule order

Design Decisions:
    - FieldRule is frozen: the field tables are module-level constants shared
      by the projector and the schema descriptor
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from community_rest.core.domain_types import Context

ALL_CONTEXTS = frozenset(Context)
VIEW_EDIT = frozenset({Context.VIEW, Context.EDIT})
EDIT_ONLY = frozenset({Context.EDIT})
NO_CONTEXT: frozenset[Context] = frozenset()

# Names that must never leave the service, whatever a field table says.
SECRET_FIELD_NAMES = frozenset({"password", "password_hash", "user_pass"})


@dataclass(frozen=True)
class FieldRule:
    """One row of a resource's field-inclusion table."""
    name: str
    contexts: frozenset[Context]
    getter: Callable[[Any], Any]
    type: str | list[str] = "string"
    description: str = ""
    format: str | None = None
    readonly: bool = False
    secret: bool = False
    items: dict | None = field(default=None, compare=False)

    def included_in(self, context: Context) -> bool:
        return not self.secret and context in self.contexts


def project(entity: Any, context: Context, rules: Iterable[FieldRule]) -> dict[str, Any]:
    """Project an entity for a context. Pure, no IO."""
    rules = tuple(rules)
    data = {
        rule.name: rule.getter(entity)
        for rule in rules
        if rule.included_in(context)
    }
    return strip_secrets(data, rules)


def strip_secrets(data: dict[str, Any], rules: Iterable[FieldRule] = ()) -> dict[str, Any]:
    """Drop every secret key from a representation."""
    secret_names = SECRET_FIELD_NAMES | {r.name for r in rules if r.secret}
    return {k: v for k, v in data.items() if k not in secret_names}


def producible_fields(rules: Iterable[FieldRule]) -> set[str]:
    """Every field name the projector can emit in at least one context."""
    return {
        rule.name
        for rule in rules
        for context in Context
        if rule.included_in(context)
    }


def format_datetime(value: datetime | None, with_offset: bool = True) -> str | None:
    """ISO-8601 with seconds precision. Naive datetimes are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if not with_offset:
        return value.astimezone(timezone.utc).replace(tzinfo=None).isoformat(timespec="seconds")
    return value.isoformat(timespec="seconds")


def build_links(collection_url: str, entity_id: int) -> dict[str, list[dict[str, str]]]:
    """Relational links present on every representation."""
    return {
        "self": [{"href": f"{collection_url}/{entity_id}"}],
        "collection": [{"href": collection_url}],
    }
