"""Subscription Routes — CRUD and total-cost endpoints over SubscriptionService.

Invariants:
    - Routes are thin: parse HTTP input, call the service, return its response record
    - Domain errors propagate to the global SubAggregatorError handler (no per-route mapping)
    - /total-cost is registered before /{subscription_id} so it is never read as an id

Design Decisions:
    - Service built per request from the request-scoped AsyncSession
      (ADR: no shared in-process state between requests)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from subaggregator.config import get_settings
from subaggregator.core.paginate import parse_page_param
from subaggregator.infrastructure.database import get_db
from subaggregator.infrastructure.subscription_repository import SqlSubscriptionRepository
from subaggregator.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionUpdate,
    TotalCostRequest,
    TotalCostResponse,
)
from subaggregator.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


async def get_subscription_service(
    db: AsyncSession = Depends(get_db),
) -> SubscriptionService:
    """Request-scoped service bound to the request's DB session."""
    return SubscriptionService(
        SqlSubscriptionRepository(db),
        timeout_seconds=get_settings().storage_timeout_seconds,
    )


@router.post(
    "", response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription(
    body: SubscriptionCreate,
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Create a subscription. end_date always starts as null."""
    return await service.create_subscription(body)


@router.get("", response_model=SubscriptionListResponse)
async def list_subscriptions(
    user_id: UUID | None = Query(None),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """List subscriptions, optionally for one owner. page/limit are clamped."""
    return await service.list_subscriptions(
        user_id, parse_page_param(page), parse_page_param(limit),
    )


@router.get("/total-cost", response_model=TotalCostResponse)
async def calculate_total_cost(
    start_period: str = Query(""),
    end_period: str = Query(""),
    user_id: UUID | None = Query(None),
    service_name: str | None = Query(None),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Sum prices of subscriptions active in [start_period, end_period] (MM-YYYY)."""
    req = TotalCostRequest(
        start_period=start_period, end_period=end_period,
        user_id=user_id, service_name=service_name,
    )
    return await service.calculate_total_cost(req)


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: UUID,
    service: SubscriptionService = Depends(get_subscription_service),
):
    return await service.get_subscription(subscription_id)


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
async def update_subscription(
    subscription_id: UUID,
    body: SubscriptionUpdate,
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Replace service_name, price, start_date and end_date."""
    return await service.update_subscription(subscription_id, body)


@router.delete(
    "/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_subscription(
    subscription_id: UUID,
    service: SubscriptionService = Depends(get_subscription_service),
):
    await service.delete_subscription(subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
