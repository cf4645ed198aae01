"""Subscription Validation — field invariants checked before any mutation.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Each check returns a ValidationFailedError on violation, None on success
    - find_violation chains all checks in a fixed order — first error wins
    - Owner check is skipped on update (owner is immutable, taken from storage)

Design Decisions:
    - Checks return (not raise) errors so they chain with `or`; only
      validate_subscription raises, keeping the rule order in one expression
"""

from subaggregator.core.domain_types import MAX_SERVICE_NAME_LENGTH, NIL_UUID
from subaggregator.core.errors import ValidationFailedError
from subaggregator.core.subscription import Subscription


def check_service_name_present(sub: Subscription) -> ValidationFailedError | None:
    """Rule 1: service name is non-empty."""
    if not sub.service_name:
        return ValidationFailedError("service_name", "service name is required")
    return None


def check_service_name_length(sub: Subscription) -> ValidationFailedError | None:
    """Rule 2: service name fits the column."""
    if len(sub.service_name) > MAX_SERVICE_NAME_LENGTH:
        return ValidationFailedError(
            "service_name",
            f"service name too long (max {MAX_SERVICE_NAME_LENGTH} characters)",
        )
    return None


def check_price_positive(sub: Subscription) -> ValidationFailedError | None:
    """Rule 3: price > 0."""
    if sub.price <= 0:
        return ValidationFailedError("price", "price must be positive")
    return None


def check_owner_present(sub: Subscription) -> ValidationFailedError | None:
    """Rule 4: owner ID is set and not the nil UUID."""
    if sub.user_id is None or sub.user_id == NIL_UUID:
        return ValidationFailedError("user_id", "user ID is required")
    return None


def check_start_date_present(sub: Subscription) -> ValidationFailedError | None:
    """Rule 5: start date is set."""
    if sub.start_date is None:
        return ValidationFailedError("start_date", "start date is required")
    return None


def check_end_not_before_start(sub: Subscription) -> ValidationFailedError | None:
    """Rule 6: end date, when present, is not before start date."""
    if sub.end_date is not None and sub.end_date < sub.start_date:
        return ValidationFailedError(
            "end_date", "end date cannot be before start date",
        )
    return None


def find_violation(
    sub: Subscription, require_owner: bool = True,
) -> ValidationFailedError | None:
    """Chain all checks. Returns first violation or None."""
    return (
        check_service_name_present(sub)
        or check_service_name_length(sub)
        or check_price_positive(sub)
        or (check_owner_present(sub) if require_owner else None)
        or check_start_date_present(sub)
        or check_end_not_before_start(sub)
    )


def validate_subscription(sub: Subscription, require_owner: bool = True) -> None:
    """Raise the first violated rule as ValidationFailedError."""
    violation = find_violation(sub, require_owner)
    if violation is not None:
        raise violation
