"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Missing records are reported by raising SubscriptionNotFoundError

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      and callers cancel them through ordinary asyncio cancellation
"""

from datetime import datetime
from typing import Protocol, Sequence

from subaggregator.core.build_filter import CostFilter
from subaggregator.core.domain_types import OwnerId, SubscriptionId
from subaggregator.core.subscription import Subscription


class SubscriptionRepository(Protocol):
    """Contract for subscription persistence — implemented by shell."""
    async def create(
        self, subscription: Subscription,
    ) -> tuple[SubscriptionId, datetime, datetime]: ...
    async def get_by_id(self, subscription_id: SubscriptionId) -> Subscription: ...
    async def update(self, subscription: Subscription) -> datetime: ...
    async def delete(self, subscription_id: SubscriptionId) -> None: ...
    async def list_by_owner(
        self, user_id: OwnerId | None, limit: int, offset: int,
    ) -> tuple[Sequence[Subscription], int]: ...
    async def total_cost(self, cost_filter: CostFilter) -> int: ...
