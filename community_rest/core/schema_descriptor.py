"""Schema Descriptor — JSON schema and OPTIONS self-description from field tables.

Invariants:
    - One schema property per FieldRule, nothing else
    - Every declared property is producible by the projector in some context,
      unless it is write-only (secret)
    - The context argument always defaults to "view" with enum view/embed/edit
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from community_rest.core.domain_types import Context, DEFAULT_CONTEXT
from community_rest.core.projection import FieldRule, producible_fields

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-04/schema#"


@dataclass(frozen=True)
class EndpointSpec:
    """One verb group on a route and the arguments it accepts."""
    methods: tuple[str, ...]
    args: dict[str, dict[str, Any]] = field(default_factory=dict)


def context_param() -> dict[str, Any]:
    """The `context` argument shared by every readable endpoint."""
    return {
        "description": "Scope under which the request is made; determines fields present in response.",
        "type": "string",
        "default": DEFAULT_CONTEXT.value,
        "enum": Context.values(),
        "required": False,
    }


def build_item_schema(title: str, rules: Iterable[FieldRule]) -> dict[str, Any]:
    """Build the JSON schema for one resource's representation."""
    properties: dict[str, Any] = {}
    for rule in rules:
        prop: dict[str, Any] = {
            "description": rule.description,
            "type": rule.type,
            "context": [c.value for c in Context if c in rule.contexts],
            "readonly": rule.readonly,
        }
        if rule.format:
            prop["format"] = rule.format
        if rule.items:
            prop["items"] = rule.items
        if rule.secret:
            prop["writeonly"] = True
        properties[rule.name] = prop
    return {
        "$schema": JSON_SCHEMA_DRAFT,
        "title": title,
        "type": "object",
        "properties": properties,
    }


def undeclared_or_unproducible(rules: Iterable[FieldRule]) -> tuple[set[str], set[str]]:
    """Return (produced-but-undeclared, declared-but-unproducible) field names.

    Both sets are empty for a consistent table; write-only fields are exempt
    from the second check.
    """
    rules = tuple(rules)
    declared = {r.name for r in rules}
    produced = producible_fields(rules)
    write_only = {r.name for r in rules if r.secret}
    return produced - declared, declared - produced - write_only


def writable_args(rules: Iterable[FieldRule], required: Iterable[str] = ()) -> dict[str, dict[str, Any]]:
    """Derive POST/PUT argument docs from the non-readonly fields of a table."""
    required = set(required)
    args = {}
    for rule in rules:
        if rule.readonly:
            continue
        arg: dict[str, Any] = {"description": rule.description, "type": rule.type}
        if rule.name in required:
            arg["required"] = True
        args[rule.name] = arg
    return args


def describe_route(
    namespace: str,
    endpoints: list[EndpointSpec],
    schema: dict[str, Any],
) -> dict[str, Any]:
    """Build the OPTIONS response body for one route."""
    methods: list[str] = []
    for endpoint in endpoints:
        for method in endpoint.methods:
            if method not in methods:
                methods.append(method)
    return {
        "namespace": namespace,
        "methods": methods,
        "endpoints": [
            {"methods": list(e.methods), "args": e.args} for e in endpoints
        ],
        "schema": schema,
    }
