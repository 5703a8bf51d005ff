"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - MemberId, NotificationId wrap int — never use bare int ids in domain logic
    - Context has exactly three values; VIEW is the default everywhere
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

MemberId = NewType("MemberId", int)
NotificationId = NewType("NotificationId", int)


# ─── Enums ───────────────────────────────────────────────────────

class Context(str, Enum):
    """Request context — controls field projection only, never mutation."""
    VIEW = "view"
    EMBED = "embed"
    EDIT = "edit"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]


DEFAULT_CONTEXT = Context.VIEW


class Action(str, Enum):
    """Controller operations checked by the Authorization Gate."""
    LIST = "list"
    READ = "read"
    READ_PRIVATE = "read_private"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    PROMOTE = "promote"


class Role(str, Enum):
    """Site roles, ordered from most to least privileged."""
    ADMINISTRATOR = "administrator"
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"


class ResponseStatus(int, Enum):
    """Success statuses the controller distinguishes."""
    OK = 200
    CREATED = 201
