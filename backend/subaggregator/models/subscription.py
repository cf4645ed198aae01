"""Subscription ORM — persists recurring subscriptions.

Invariants:
    - id is UUID primary key (assigned on insert, never changed)
    - start_date / end_date stored as DATE month anchors; end_date NULL = still active
    - created_at set on insert; updated_at refreshed by every update
    - user_id, service_name and (start_date, end_date) indexed: list and
      total-cost queries filter on them
    - price > 0 and end_date >= start_date enforced by CHECK constraints

Design Decisions:
    - No foreign key to a users table: owner is an opaque reference
    - price is INTEGER in the smallest currency unit (no decimals, no currency column)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from subaggregator.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubscriptionModel(Base):
    """A single subscription row."""
    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_subscriptions_price_positive"),
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date",
            name="ck_subscriptions_end_after_start",
        ),
        Index("ix_subscriptions_start_end", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    service_name: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True,
    )
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
