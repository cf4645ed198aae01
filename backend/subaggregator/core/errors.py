"""Error Hierarchy — typed, categorized exceptions for all subscription failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are raised before any storage call
    - SubscriptionNotFoundError is raised by storage and passed through unchanged
    - Every other storage failure is wrapped in StorageError naming the operation
    - No internal details (SQL, driver messages) leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SubAggregatorError base: FastAPI global handler catches all
      (ADR: uniform error shape, classification by type — never by message text)
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    subscription_id: str | None = None
    operation: str | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class SubAggregatorError(Exception):
    """Base exception for all subscription aggregator errors."""

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
                    "subscription_id": self.context.subscription_id,
                    "operation": self.context.operation,
                    "field": self.context.field,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(SubAggregatorError):
    """A subscription field violates an invariant."""
    def __init__(self, field: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            reason, "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field
        self.reason = reason


class InvalidPeriodFormatError(SubAggregatorError):
    """Period text is not MM-YYYY."""
    def __init__(self, text: str, field: str | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            f"Invalid period '{text}': expected MM-YYYY",
            "INVALID_PERIOD_FORMAT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.text = text
        self.field = field


class InvalidWindowError(SubAggregatorError):
    """Aggregation window end precedes its start."""
    def __init__(self, start_period: str, end_period: str, context: ErrorContext | None = None):
        super().__init__(
            f"End period '{end_period}' cannot be before start period '{start_period}'",
            "INVALID_WINDOW", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class MissingRequiredPeriodError(SubAggregatorError):
    """start_period or end_period was not supplied."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            f"{field} is required",
            "MISSING_REQUIRED_PERIOD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class SubscriptionNotFoundError(SubAggregatorError):
    """Requested subscription does not exist."""
    def __init__(self, subscription_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.subscription_id = subscription_id
        super().__init__(
            f"Subscription '{subscription_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.subscription_id = subscription_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(SubAggregatorError):
    """Storage operation failed."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Storage {operation} failed",
            "STORAGE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class CancellationRequestedError(SubAggregatorError):
    """Storage call aborted because its deadline fired."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Storage {operation} cancelled: deadline exceeded",
            "CANCELLATION_REQUESTED", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, ctx, 504,
        )
        self.operation = operation
