"""Error Hierarchy - typed, categorized exceptions for all Ezidcode failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages
    - Not-found inside store mutations is a silent no-op; ResourceNotFoundError is
      only raised at the API boundary

Design Decisions:
    - Single hierarchy with EzidcodeError base: FastAPI global handler catches all
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    command_id: str | None = None
    core_id: str | None = None
    phase: str | None = None
    debug_info: dict[str, Any] | None = None


class EzidcodeError(Exception):
    """Base exception for all Ezidcode errors."""

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
                    "command_id": self.context.command_id,
                    "core_id": self.context.core_id,
                    "phase": self.context.phase,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(EzidcodeError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class NoLiveCoreError(EzidcodeError):
    """No core is currently (prime, active)."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No live prime core is available.",
            "NO_LIVE_CORE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class MalformedVersionError(EzidcodeError):
    """Core version is not a MAJOR.MINOR.PATCH triple of integers."""
    def __init__(self, version: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed core version '{version}': expected MAJOR.MINOR.PATCH "
            "with a numeric minor segment.",
            "MALFORMED_VERSION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.version = version


class PipelineNotRunningError(EzidcodeError):
    """Cancel requested for a command with no pipeline in flight or one already promoting."""
    def __init__(self, command_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.command_id = command_id
        super().__init__(
            f"Command '{command_id}' has no cancellable pipeline in flight.",
            "PIPELINE_NOT_RUNNING", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(EzidcodeError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
