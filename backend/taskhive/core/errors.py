"""Error Hierarchy — typed, categorized exceptions for all TaskHive failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - message is always safe to show in the form error banner
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TaskHiveError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability without coupling to the logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class TaskHiveError(Exception):
    """Base exception for all TaskHive errors."""

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
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class SignupValidationError(TaskHiveError):
    """Signup form failed field validation."""
    def __init__(
        self, field_errors: dict[str, str], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Please correct the highlighted fields",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field_errors = field_errors

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [
            {"field": name, "message": msg}
            for name, msg in self.field_errors.items()
        ]
        return response


class AuthenticationError(TaskHiveError):
    """Credentials rejected by the identity provider."""
    def __init__(
        self, message: str = "Failed to log in", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class NotAuthenticatedError(TaskHiveError):
    """Operation requires a signed-in user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You must be logged in to do that",
            "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class EmailAlreadyRegisteredError(TaskHiveError):
    """Signup attempted with an email that already has an account."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This email is already registered. "
            "Please log in instead or reset your password.",
            "EMAIL_ALREADY_REGISTERED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class InvalidExperienceError(TaskHiveError):
    """Experience update would leave a negative balance."""
    def __init__(self, current: float, hours: float, context: ErrorContext | None = None):
        super().__init__(
            f"Experience cannot drop below zero (current {current:g}, change {hours:g})",
            "INVALID_EXPERIENCE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.current = current
        self.hours = hours


class PasswordResetError(TaskHiveError):
    """Reset request or new password rejected; message is the banner text."""
    def __init__(
        self, message: str, http_status: int = 400,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "PASSWORD_RESET_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, http_status,
        )


class IdentityRequestError(TaskHiveError):
    """Identity provider rejected a request (4xx)."""
    def __init__(
        self, message: str, status_code: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "IDENTITY_REQUEST_REJECTED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 400,
        )
        self.status_code = status_code


class ResourceNotFoundError(TaskHiveError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class IdentityProviderError(TaskHiveError):
    """Identity provider unreachable, timed out, or failing."""
    def __init__(
        self,
        message: str,
        failure_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            message, "IDENTITY_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.failure_type = failure_type


class DatabaseError(TaskHiveError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
