"""Error Hierarchy — typed, categorized exceptions for all HirePath failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries a user_message from one of four families:
      sign in / no access / no longer valid / reload
    - NOT_OWNER and NOT_FOUND on a private resource produce byte-identical responses
    - to_response() never includes resource ids or owner ids

Design Decisions:
    - Single hierarchy with HirePathError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - error_for_denial() is the single place a core Denial becomes an HTTP-facing error
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from app.core.authorize import Denial


SIGN_IN_MESSAGE = "Please sign in to continue."
NO_ACCESS_MESSAGE = "You don't have access to this resource."
NO_LONGER_VALID_MESSAGE = "That action is no longer valid."
RELOAD_MESSAGE = "Someone else changed this. Reload and try again."
TRY_AGAIN_MESSAGE = "A service is temporarily unavailable. Please try again."


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    subject_id: int | None = None
    action: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class HirePathError(Exception):
    """Base exception for all HirePath errors."""

    default_user_message = TRY_AGAIN_MESSAGE

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

    @property
    def user_message(self) -> str:
        return self.context.user_message or self.default_user_message

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "user_message": self.user_message,
                "category": self.category.value,
                "severity": self.severity.value,
            }
        }


# ─── Access Errors ──────────────────────────────────────────────

class UnauthenticatedError(HirePathError):
    """No session, or the session token is invalid or expired."""
    default_user_message = SIGN_IN_MESSAGE

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Authentication required",
            "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(HirePathError):
    """Valid session, but the action is not permitted.

    ``reason`` is either ``"wrong_role"`` (the caller's own role is the
    problem) or ``"not_permitted"``, which is also what a missing private
    resource reports.
    """
    default_user_message = NO_ACCESS_MESSAGE

    def __init__(self, reason: str = "not_permitted", context: ErrorContext | None = None):
        message = (
            "Your role cannot perform this action"
            if reason == "wrong_role" else
            "You don't have access to this resource"
        )
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.reason = reason

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["reason"] = self.reason
        return response


class ResourceNotFoundError(HirePathError):
    """Requested public resource does not exist."""
    default_user_message = NO_ACCESS_MESSAGE

    def __init__(
        self, resource_type: str, resource_id: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found"
            if resource_id is not None else f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(HirePathError):
    """Input is malformed or a required piece (résumé) is missing."""

    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    @property
    def user_message(self) -> str:
        return self.context.user_message or self.message

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["field"] = self.field
        return response


class MissingResumeError(ValidationFailedError):
    """Neither a stored résumé nor an uploaded file is available."""

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "A résumé is required: choose your stored résumé or upload a file",
            "resume", context,
        )
        self.code = "MISSING_RESUME"


class InvalidTransitionError(HirePathError):
    """The requested status change is not a legal move for this actor."""
    default_user_message = NO_LONGER_VALID_MESSAGE

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class ConflictError(HirePathError):
    """The write would violate a uniqueness rule (duplicate live application)."""
    default_user_message = NO_LONGER_VALID_MESSAGE

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class ConcurrencyError(ConflictError):
    """Concurrent modification detected — the caller's version is stale."""
    default_user_message = RELOAD_MESSAGE

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, context)
        self.code = "CONCURRENCY_CONFLICT"


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(HirePathError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class UpstreamError(HirePathError):
    """File-storage collaborator unavailable, failed, or timed out."""
    def __init__(
        self, message: str, service: str, timed_out: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{service} failed: {message}",
            "UPSTREAM_TIMEOUT" if timed_out else "UPSTREAM_FAILURE",
            ErrorCategory.TIMEOUT if timed_out else ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.service = service
        self.timed_out = timed_out


# ─── Denial Mapping ─────────────────────────────────────────────

def error_for_denial(
    denial: "Denial", context: ErrorContext | None = None,
) -> HirePathError:
    """Translate a core Denial into the error the caller is allowed to see."""
    from app.core.authorize import DenialReason

    reason = denial.reason
    if reason == DenialReason.WRONG_ROLE:
        return ForbiddenError("wrong_role", context)
    if reason in (DenialReason.NOT_OWNER, DenialReason.NOT_FOUND):
        if denial.public_resource and reason == DenialReason.NOT_FOUND:
            return ResourceNotFoundError(
                denial.resource_type or "Resource",
                str(denial.resource_id) if denial.resource_id is not None else None,
                context,
            )
        return ForbiddenError("not_permitted", context)
    if reason in (DenialReason.ALREADY_EXISTS, DenialReason.DUPLICATE_APPLICATION):
        return ConflictError(denial.message, context)
    if reason == DenialReason.STALE_VERSION:
        return ConcurrencyError(denial.message, context)
    if reason == DenialReason.MISSING_RESUME:
        return MissingResumeError(context)
    return InvalidTransitionError(denial.message, context)
