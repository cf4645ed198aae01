"""Subscription Service — lifecycle operations and cost aggregation over the storage port.

Invariants:
    - Parsing and validation run before any storage write; failures never reach storage
    - Update is all-or-nothing: a merged copy that fails validation is never written
    - SubscriptionNotFoundError from storage passes through unchanged
    - Every other storage failure is wrapped in StorageError(operation)
    - Every storage call is bounded by timeout_seconds; only that deadline
      expiring yields CancellationRequestedError, a driver TimeoutError is StorageError
    - No retries; asyncio.CancelledError always propagates

Design Decisions:
    - Repository injected as a Protocol: tests pass an in-memory fake, the API passes
      the SQLAlchemy implementation
    - Lifecycle: Proposed (validated, no id) → Persisted → Updated → Deleted
"""

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, TypeVar
from uuid import UUID

from subaggregator.core.build_filter import build_cost_filter, describe_period
from subaggregator.core.domain_types import NIL_UUID, Currency, LifecycleState
from subaggregator.core.errors import (
    CancellationRequestedError,
    ErrorContext,
    StorageError,
    SubAggregatorError,
    SubscriptionNotFoundError,
    ValidationFailedError,
)
from subaggregator.core.paginate import clamp_page
from subaggregator.core.period import format_period, parse_optional_period, parse_period
from subaggregator.core.repository_protocols import SubscriptionRepository
from subaggregator.core.subscription import Subscription
from subaggregator.core.validate_subscription import validate_subscription
from subaggregator.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionUpdate,
    TotalCostRequest,
    TotalCostResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SubscriptionService:
    """Create/get/update/delete/list subscriptions and sum their cost."""

    def __init__(
        self, repo: SubscriptionRepository, timeout_seconds: float | None = None,
    ):
        self.repo = repo
        self.timeout_seconds = timeout_seconds

    async def create_subscription(
        self, req: SubscriptionCreate,
    ) -> SubscriptionResponse:
        """Proposed → Persisted. Storage assigns id and timestamps."""
        candidate = Subscription(
            service_name=req.service_name,
            price=req.price,
            user_id=req.user_id,
            start_date=parse_optional_period(req.start_date, "start_date"),
            end_date=None,
        )
        validate_subscription(candidate)

        new_id, created_at, updated_at = await self._call_storage(
            "create", self.repo.create(candidate),
        )
        persisted = replace(
            candidate, id=new_id, created_at=created_at, updated_at=updated_at,
        )
        logger.info(
            f"Subscription {LifecycleState.PERSISTED.value}",
            extra={"subscription_id": str(new_id), "operation": "create"},
        )
        return to_response(persisted)

    async def get_subscription(self, subscription_id: UUID) -> SubscriptionResponse:
        _require_id(subscription_id)
        sub = await self._call_storage(
            "get", self.repo.get_by_id(subscription_id), subscription_id,
        )
        return to_response(sub)

    async def update_subscription(
        self, subscription_id: UUID, req: SubscriptionUpdate,
    ) -> SubscriptionResponse:
        """Persisted/Updated → Updated. Owner is kept from the stored record."""
        _require_id(subscription_id)
        start_date = parse_optional_period(req.start_date, "start_date")
        end_date = (
            parse_period(req.end_date, "end_date")
            if req.end_date is not None else None
        )

        existing = await self._call_storage(
            "get", self.repo.get_by_id(subscription_id), subscription_id,
        )
        merged = replace(
            existing,
            service_name=req.service_name,
            price=req.price,
            start_date=start_date,
            end_date=end_date,
        )
        validate_subscription(merged, require_owner=False)

        updated_at = await self._call_storage(
            "update", self.repo.update(merged), subscription_id,
        )
        merged = replace(merged, updated_at=updated_at)
        logger.info(
            f"Subscription {LifecycleState.UPDATED.value}",
            extra={"subscription_id": str(subscription_id), "operation": "update"},
        )
        return to_response(merged)

    async def delete_subscription(self, subscription_id: UUID) -> None:
        _require_id(subscription_id)
        await self._call_storage(
            "delete", self.repo.delete(subscription_id), subscription_id,
        )
        logger.info(
            f"Subscription {LifecycleState.DELETED.value}",
            extra={"subscription_id": str(subscription_id), "operation": "delete"},
        )

    async def list_subscriptions(
        self,
        user_id: UUID | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> SubscriptionListResponse:
        """Page through subscriptions. Out-of-range page/limit are clamped."""
        page_req = clamp_page(page, limit)
        items, total = await self._call_storage(
            "list",
            self.repo.list_by_owner(user_id, page_req.limit, page_req.offset),
        )
        return SubscriptionListResponse(
            total=total, data=[to_response(s) for s in items],
        )

    async def calculate_total_cost(self, req: TotalCostRequest) -> TotalCostResponse:
        """Sum prices of subscriptions overlapping [start_period, end_period]."""
        cost_filter = build_cost_filter(
            req.start_period, req.end_period,
            user_id=req.user_id, service_name=req.service_name,
        )
        total = await self._call_storage(
            "total_cost", self.repo.total_cost(cost_filter),
        )
        return TotalCostResponse(
            total_cost=int(total or 0),
            currency=Currency.RUB.value,
            period=describe_period(req.start_period, req.end_period),
        )

    async def _call_storage(
        self,
        operation: str,
        call: Awaitable[T],
        subscription_id: UUID | None = None,
    ) -> T:
        """Await a storage call under the deadline and classify its failure."""
        ctx = ErrorContext(
            operation=operation,
            subscription_id=str(subscription_id) if subscription_id else None,
        )
        deadline = asyncio.timeout(self.timeout_seconds)
        try:
            async with deadline:
                return await call
        except SubscriptionNotFoundError:
            raise
        except TimeoutError as e:
            if not deadline.expired():
                raise _storage_failure(operation, ctx, e) from e
            logger.warning(
                f"Storage {operation} exceeded {self.timeout_seconds}s deadline",
                extra={"operation": operation, "subscription_id": ctx.subscription_id},
            )
            raise CancellationRequestedError(operation, ctx) from e
        except SubAggregatorError:
            raise
        except Exception as e:
            raise _storage_failure(operation, ctx, e) from e


def _storage_failure(
    operation: str, ctx: ErrorContext, exc: Exception,
) -> StorageError:
    logger.error(
        f"Storage {operation} failed: {exc}",
        extra={"operation": operation, "subscription_id": ctx.subscription_id},
        exc_info=exc,
    )
    return StorageError(operation, ctx)


def _require_id(subscription_id: UUID | None) -> None:
    if subscription_id is None or subscription_id == NIL_UUID:
        raise ValidationFailedError("id", "subscription ID is required")


def to_response(sub: Subscription) -> SubscriptionResponse:
    """Shape a stored subscription for callers: dates rendered as MM-YYYY."""
    return SubscriptionResponse(
        id=sub.id,
        service_name=sub.service_name,
        price=sub.price,
        user_id=sub.user_id,
        start_date=format_period(sub.start_date),
        end_date=format_period(sub.end_date) if sub.end_date else None,
        created_at=sub.created_at,
        updated_at=sub.updated_at,
    )
