"""Error Hierarchy — typed, categorized exceptions for all Chirp failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by handlers and middleware alike
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ChirpError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PAYLOAD = "payload"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ChirpError(Exception):
    """Base exception for all Chirp errors."""

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
                    "path": self.context.path,
                    "user_id": self.context.user_id,
                },
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class MalformedBodyError(ChirpError):
    """Request body does not parse as its declared content type."""
    def __init__(self, message: str, media_type: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.media_type = media_type


class PayloadTooLargeError(ChirpError):
    """Request body exceeds the configured size or parameter limit."""
    def __init__(self, message: str, limit: int, context: ErrorContext | None = None):
        super().__init__(
            message, "PAYLOAD_TOO_LARGE", ErrorCategory.PAYLOAD,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit = limit


class AuthenticationError(ChirpError):
    """Bearer token missing, invalid, expired, or bound to no user."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialsError(ChirpError):
    """Login attempted with a wrong password."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Incorrect password", "INVALID_CREDENTIALS",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 400,
        )


class DuplicateUserError(ChirpError):
    """Registration collides with an existing email or handle."""
    def __init__(self, field_name: str, context: ErrorContext | None = None):
        super().__init__(
            f"A user has already registered with this {field_name}",
            "USER_ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field_name


class ResourceNotFoundError(ChirpError):
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

class DatabaseError(ChirpError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
