"""Service test fixtures — in-memory fake storage port, async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe hits the test engine
    - fake_repo records every storage call so tests can assert "no write happened"

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Fake repository evaluates the same month-inclusive overlap rule the SQL
      repository expresses in WHERE clauses
"""

import asyncio
from dataclasses import replace
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from subaggregator.core.build_filter import CostFilter
from subaggregator.core.errors import SubscriptionNotFoundError
from subaggregator.core.subscription import Subscription
from subaggregator.db.base import Base
from subaggregator.infrastructure.database import get_db, DatabaseSessionManager
from subaggregator.models.subscription import SubscriptionModel
from subaggregator.services.subscription_service import SubscriptionService
import subaggregator.infrastructure.database as db_module
from subaggregator.main import app

WRITE_CALLS = {"create", "update", "delete"}


class FakeSubscriptionRepository:
    """In-memory SubscriptionRepository with call log and failure injection."""

    def __init__(self):
        self.rows: dict[UUID, Subscription] = {}
        self.calls: list[str] = []
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.last_page: tuple | None = None
        self.last_filter: CostFilter | None = None

    @property
    def writes(self) -> list[str]:
        return [c for c in self.calls if c in WRITE_CALLS]

    async def _enter(self, call: str) -> None:
        self.calls.append(call)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error

    def seed(self, **fields) -> Subscription:
        now = datetime.now(timezone.utc)
        sub = Subscription(
            id=uuid4(), created_at=now, updated_at=now,
            **{
                "service_name": "Netflix", "price": 799, "user_id": uuid4(),
                "start_date": date(2024, 1, 1), "end_date": None, **fields,
            },
        )
        self.rows[sub.id] = sub
        return sub

    async def create(self, subscription):
        await self._enter("create")
        new_id = uuid4()
        now = datetime.now(timezone.utc)
        self.rows[new_id] = replace(
            subscription, id=new_id, created_at=now, updated_at=now,
        )
        return new_id, now, now

    async def get_by_id(self, subscription_id):
        await self._enter("get_by_id")
        if subscription_id not in self.rows:
            raise SubscriptionNotFoundError(str(subscription_id))
        return replace(self.rows[subscription_id])

    async def update(self, subscription):
        await self._enter("update")
        if subscription.id not in self.rows:
            raise SubscriptionNotFoundError(str(subscription.id))
        now = datetime.now(timezone.utc)
        self.rows[subscription.id] = replace(subscription, updated_at=now)
        return now

    async def delete(self, subscription_id):
        await self._enter("delete")
        if self.rows.pop(subscription_id, None) is None:
            raise SubscriptionNotFoundError(str(subscription_id))

    async def list_by_owner(self, user_id, limit, offset):
        await self._enter("list_by_owner")
        self.last_page = (user_id, limit, offset)
        items = [
            s for s in self.rows.values()
            if user_id is None or s.user_id == user_id
        ][offset:offset + limit]
        return items, len(items)

    async def total_cost(self, cost_filter):
        await self._enter("total_cost")
        self.last_filter = cost_filter
        return sum(
            s.price for s in self.rows.values()
            if (cost_filter.user_id is None or s.user_id == cost_filter.user_id)
            and (
                cost_filter.service_name is None
                or s.service_name == cost_filter.service_name
            )
            and s.start_date <= cost_filter.end_date
            and (s.end_date is None or s.end_date >= cost_filter.start_date)
        )


@pytest.fixture
def fake_repo():
    return FakeSubscriptionRepository()


@pytest.fixture
def service(fake_repo):
    return SubscriptionService(fake_repo, timeout_seconds=1.0)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Patch db_manager for the readiness probe, which uses it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def seed_subscription(test_db):
    """Insert subscription rows directly into the test DB."""
    async def _seed(**fields) -> SubscriptionModel:
        row = SubscriptionModel(**{
            "service_name": "Netflix", "price": 799, "user_id": uuid4(),
            "start_date": date(2024, 1, 1), "end_date": None, **fields,
        })
        test_db.add(row)
        await test_db.commit()
        await test_db.refresh(row)
        return row
    return _seed
