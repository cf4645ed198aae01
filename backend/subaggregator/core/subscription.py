"""Subscription Entity — the core's transient copy of a stored subscription.

Invariants:
    - id is None until storage assigns one on create, immutable thereafter
    - start_date / end_date are month anchors (day == 1); end_date None = still active
    - created_at / updated_at are assigned by storage, never by the core

Design Decisions:
    - Plain dataclass, not the ORM model: core never imports the shell
    - Copies are cheap (dataclasses.replace); the core never caches across calls
"""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass
class Subscription:
    service_name: str
    price: int
    user_id: UUID | None
    start_date: date | None
    end_date: date | None = None
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
