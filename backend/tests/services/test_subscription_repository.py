"""SQL Subscription Repository — CRUD and the overlap predicate against SQLite.

Invariants:
    - total_cost: start_date <= window.end AND (end_date IS NULL OR end_date >= window.start)
    - total_cost over no matches is 0
    - list_by_owner: newest first, LIMIT/OFFSET applied, count == rows returned
    - missing ids raise SubscriptionNotFoundError
    - table constraints and indexes match the 001_subscriptions migration
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from subaggregator.core.build_filter import build_cost_filter
from subaggregator.core.errors import SubscriptionNotFoundError
from subaggregator.core.subscription import Subscription
from subaggregator.infrastructure.subscription_repository import SqlSubscriptionRepository
from subaggregator.models.subscription import SubscriptionModel


@pytest.fixture
def repo(test_db):
    return SqlSubscriptionRepository(test_db)


async def test_create_assigns_id_and_timestamps(repo):
    owner = uuid4()
    new_id, created_at, updated_at = await repo.create(Subscription(
        service_name="Netflix", price=799, user_id=owner,
        start_date=date(2024, 1, 1),
    ))

    assert new_id is not None
    assert created_at is not None
    assert updated_at is not None

    stored = await repo.get_by_id(new_id)
    assert stored.id == new_id
    assert stored.user_id == owner
    assert stored.start_date == date(2024, 1, 1)
    assert stored.end_date is None


async def test_get_missing_raises_not_found(repo):
    with pytest.raises(SubscriptionNotFoundError):
        await repo.get_by_id(uuid4())


async def test_update_replaces_fields(repo, seed_subscription):
    row = await seed_subscription()
    sub = await repo.get_by_id(row.id)
    sub.price = 999
    sub.end_date = date(2024, 12, 1)

    updated_at = await repo.update(sub)

    assert updated_at is not None
    stored = await repo.get_by_id(row.id)
    assert stored.price == 999
    assert stored.end_date == date(2024, 12, 1)


async def test_update_missing_raises_not_found(repo):
    with pytest.raises(SubscriptionNotFoundError):
        await repo.update(Subscription(
            id=uuid4(), service_name="X", price=1, user_id=uuid4(),
            start_date=date(2024, 1, 1),
        ))


async def test_delete_then_get_is_not_found(repo, seed_subscription):
    row = await seed_subscription()
    await repo.delete(row.id)
    with pytest.raises(SubscriptionNotFoundError):
        await repo.get_by_id(row.id)


async def test_delete_missing_raises_not_found(repo):
    with pytest.raises(SubscriptionNotFoundError):
        await repo.delete(uuid4())


async def test_list_newest_first_with_paging(repo, seed_subscription):
    owner = uuid4()
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i, name in enumerate(["A", "B", "C"]):
        await seed_subscription(
            service_name=name, user_id=owner, created_at=base + timedelta(days=i),
        )
    await seed_subscription(service_name="other-owner")

    items, count = await repo.list_by_owner(owner, limit=2, offset=0)
    assert [s.service_name for s in items] == ["C", "B"]
    assert count == 2

    items, count = await repo.list_by_owner(owner, limit=2, offset=2)
    assert [s.service_name for s in items] == ["A"]
    assert count == 1


async def test_list_without_owner_returns_all(repo, seed_subscription):
    await seed_subscription()
    await seed_subscription()
    items, count = await repo.list_by_owner(None, limit=20, offset=0)
    assert count == 2


# ─── total_cost ─────────────────────────────────────────────────

async def test_total_cost_boundary_inclusive(repo, seed_subscription):
    await seed_subscription(start_date=date(2024, 1, 1), end_date=date(2024, 6, 1))
    assert await repo.total_cost(build_cost_filter("06-2024", "12-2024")) == 799


async def test_total_cost_excludes_ended_before_window(repo, seed_subscription):
    await seed_subscription(start_date=date(2024, 1, 1), end_date=date(2024, 6, 1))
    assert await repo.total_cost(build_cost_filter("07-2024", "12-2024")) == 0


async def test_total_cost_open_ended_counts_once(repo, seed_subscription):
    await seed_subscription(price=300, start_date=date(2024, 1, 1))
    assert await repo.total_cost(build_cost_filter("01-2024", "12-2026")) == 300


async def test_total_cost_excludes_starting_after_window(repo, seed_subscription):
    await seed_subscription(start_date=date(2025, 1, 1))
    assert await repo.total_cost(build_cost_filter("01-2024", "12-2024")) == 0


async def test_total_cost_empty_table_is_zero(repo):
    assert await repo.total_cost(build_cost_filter("01-2024", "12-2024")) == 0


async def test_total_cost_filters_owner_and_service(repo, seed_subscription):
    owner = uuid4()
    await seed_subscription(user_id=owner, service_name="Netflix", price=799)
    await seed_subscription(user_id=owner, service_name="Spotify", price=299)
    await seed_subscription(service_name="Netflix", price=500)

    by_owner = build_cost_filter("01-2024", "01-2024", user_id=owner)
    assert await repo.total_cost(by_owner) == 799 + 299

    by_service = build_cost_filter("01-2024", "01-2024", service_name="Netflix")
    assert await repo.total_cost(by_service) == 799 + 500

    both = build_cost_filter(
        "01-2024", "01-2024", user_id=owner, service_name="Spotify",
    )
    assert await repo.total_cost(both) == 299


# ─── Schema ─────────────────────────────────────────────────────

def test_model_declares_migration_constraints_and_indexes():
    table = SubscriptionModel.__table__
    checks = {c.name for c in table.constraints if c.name and c.name.startswith("ck_")}
    assert checks == {
        "ck_subscriptions_price_positive", "ck_subscriptions_end_after_start",
    }
    indexes = {i.name: [c.name for c in i.columns] for i in table.indexes}
    assert indexes == {
        "ix_subscriptions_user_id": ["user_id"],
        "ix_subscriptions_service_name": ["service_name"],
        "ix_subscriptions_start_end": ["start_date", "end_date"],
    }


async def test_database_rejects_end_before_start(test_db, seed_subscription):
    with pytest.raises(IntegrityError):
        await seed_subscription(start_date=date(2024, 6, 1), end_date=date(2024, 1, 1))
    await test_db.rollback()
