"""Subscription Schemas — Pydantic request/response records for the API boundary.

Invariants:
    - Request models check types only; business invariants live in
      core/validate_subscription.py so rule order and error kinds stay uniform
    - Response dates are always MM-YYYY text; end_date None means still active
    - TotalCostResponse.period echoes the caller's period text verbatim

Design Decisions:
    - Defaults on required-looking fields (""/0/None): a missing field reaches the
      core validator and fails with the same ValidationFailedError as an empty one
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class SubscriptionCreate(BaseModel):
    """Create request — owner and start month required, end date always null."""
    service_name: str = ""
    price: int = 0
    user_id: UUID | None = None
    start_date: str = ""


class SubscriptionUpdate(BaseModel):
    """Full-field replace. Owner is immutable and not accepted here."""
    service_name: str = ""
    price: int = 0
    start_date: str = ""
    end_date: str | None = None


class SubscriptionResponse(BaseModel):
    """Subscription as returned to callers."""
    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: str
    end_date: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubscriptionListResponse(BaseModel):
    """One page of subscriptions. total counts the items on this page."""
    total: int
    data: list[SubscriptionResponse]


class TotalCostRequest(BaseModel):
    """Aggregation query — both periods mandatory, filters optional."""
    start_period: str = ""
    end_period: str = ""
    user_id: UUID | None = None
    service_name: str | None = None


class TotalCostResponse(BaseModel):
    """Summed price of overlapping subscriptions."""
    total_cost: int
    currency: str
    period: str
