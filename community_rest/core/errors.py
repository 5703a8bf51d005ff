"""Error Hierarchy — typed, categorized exceptions for every REST failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the HTTP status it maps to at the transport boundary
    - Codes are built from the resource's error prefix (rest_member, rest_notification)
    - to_response() never includes internal details

Design Decisions:
    - Single hierarchy with CommunityError base: one global handler catches all
    - Unauthenticated and Forbidden are separate classes sharing a base, so callers
      can catch "not allowed" without caring which status it maps to
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    NOT_IMPLEMENTED = "not_implemented"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource: str | None = None
    entity_id: int | None = None
    caller_id: int | None = None
    debug_info: dict[str, Any] | None = None


class CommunityError(Exception):
    """Base exception for all community REST errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {
            "code": self.code,
            "message": self.message,
            "data": {
                "status": self.http_status,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationFailedError(CommunityError):
    """Input fields failed validation (missing, malformed, duplicate)."""
    def __init__(
        self, message: str, code: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class NotAllowedError(CommunityError):
    """Common base for Unauthenticated and Forbidden."""


class UnauthenticatedError(NotAllowedError):
    """Caller is anonymous (or sent bad credentials) on a protected operation."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(NotAllowedError):
    """Caller is authenticated but lacks the capability."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(CommunityError):
    """Requested entity id does not resolve in the store."""
    def __init__(
        self, resource: str, entity_id: int, code: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource = resource
        ctx.entity_id = entity_id
        super().__init__(
            f"Invalid {resource} ID.",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, ctx, 404,
        )


class CannotRenameError(CommunityError):
    """Attempt to change an immutable identity field (e.g. login name)."""
    def __init__(
        self, field: str, value: str, code: str,
        in_use: bool = False, context: ErrorContext | None = None,
    ):
        if in_use:
            message = f"Sorry, the {field} '{value}' is already in use and {field} cannot be changed."
        else:
            message = f"Sorry, {field} cannot be changed."
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.field = field
        self.value = value
        self.in_use = in_use


# ─── Deployment / Infrastructure Errors (500-level) ─────────────

class OperationDisabledError(CommunityError):
    """Operation is switched off in this deployment (e.g. member deletion in multisite)."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.NOT_IMPLEMENTED,
            ErrorSeverity.INFO, context, 501,
        )


class DatabaseError(CommunityError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "rest_database_error", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
