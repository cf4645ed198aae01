"""SQL Subscription Repository — SQLAlchemy implementation of the SubscriptionRepository port.

Invariants:
    - Each write commits its own transaction and rolls back on any SQLAlchemy error
    - Missing rows raise SubscriptionNotFoundError (get, update, delete)
    - list_by_owner orders newest first and applies LIMIT/OFFSET; count = rows returned
    - total_cost is evaluated in SQL:
        start_date <= window.end AND (end_date IS NULL OR end_date >= window.start)
      and returns 0 when nothing matches

Design Decisions:
    - Converts rows to core Subscription dataclasses: ORM objects never leave this module
    - Update is read-then-write inside the request session's transaction; no optimistic
      locking (concurrent updates to one id are last-writer-wins)
"""

from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from subaggregator.core.build_filter import CostFilter
from subaggregator.core.domain_types import OwnerId, SubscriptionId
from subaggregator.core.errors import SubscriptionNotFoundError
from subaggregator.core.period import to_anchor
from subaggregator.core.subscription import Subscription
from subaggregator.models.subscription import SubscriptionModel


class SqlSubscriptionRepository:
    """Subscription persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, subscription: Subscription,
    ) -> tuple[SubscriptionId, datetime, datetime]:
        row = SubscriptionModel(
            service_name=subscription.service_name,
            price=subscription.price,
            user_id=subscription.user_id,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
        )
        try:
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return SubscriptionId(row.id), row.created_at, row.updated_at

    async def get_by_id(self, subscription_id: SubscriptionId) -> Subscription:
        row = await self._get_row(subscription_id)
        return _to_entity(row)

    async def update(self, subscription: Subscription) -> datetime:
        try:
            row = await self._get_row(subscription.id)
            row.service_name = subscription.service_name
            row.price = subscription.price
            row.start_date = subscription.start_date
            row.end_date = subscription.end_date
            row.updated_at = datetime.now(timezone.utc)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return row.updated_at

    async def delete(self, subscription_id: SubscriptionId) -> None:
        try:
            result = await self.db.execute(
                delete(SubscriptionModel).where(
                    SubscriptionModel.id == subscription_id,
                ),
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise SubscriptionNotFoundError(str(subscription_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_by_owner(
        self, user_id: OwnerId | None, limit: int, offset: int,
    ) -> tuple[Sequence[Subscription], int]:
        query = select(SubscriptionModel).order_by(
            SubscriptionModel.created_at.desc(),
        )
        if user_id is not None:
            query = query.where(SubscriptionModel.user_id == user_id)
        query = query.limit(limit).offset(offset)

        result = await self.db.execute(query)
        items = [_to_entity(row) for row in result.scalars().all()]
        return items, len(items)

    async def total_cost(self, cost_filter: CostFilter) -> int:
        query = select(func.coalesce(func.sum(SubscriptionModel.price), 0))
        if cost_filter.user_id is not None:
            query = query.where(SubscriptionModel.user_id == cost_filter.user_id)
        if cost_filter.service_name is not None:
            query = query.where(
                SubscriptionModel.service_name == cost_filter.service_name,
            )
        query = query.where(
            SubscriptionModel.start_date <= cost_filter.end_date,
        ).where(
            SubscriptionModel.end_date.is_(None)
            | (SubscriptionModel.end_date >= cost_filter.start_date),
        )

        result = await self.db.execute(query)
        return int(result.scalar_one())

    async def _get_row(self, subscription_id) -> SubscriptionModel:
        result = await self.db.execute(
            select(SubscriptionModel).where(
                SubscriptionModel.id == subscription_id,
            ),
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise SubscriptionNotFoundError(str(subscription_id))
        return row


def _to_entity(row: SubscriptionModel) -> Subscription:
    return Subscription(
        id=row.id,
        service_name=row.service_name,
        price=row.price,
        user_id=row.user_id,
        start_date=to_anchor(row.start_date),
        end_date=to_anchor(row.end_date) if row.end_date else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
