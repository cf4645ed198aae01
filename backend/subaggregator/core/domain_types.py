"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SubscriptionId, OwnerId type the storage port; request and entity fields stay plain UUID
    - NIL_UUID is the "absent" identity (all-zero UUID) and never a real record
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SubscriptionId = NewType("SubscriptionId", UUID)
OwnerId = NewType("OwnerId", UUID)

NIL_UUID = UUID(int=0)


# ─── Limits ──────────────────────────────────────────────────────

MAX_SERVICE_NAME_LENGTH = 255


# ─── Pagination ──────────────────────────────────────────────────

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


# ─── Enums ───────────────────────────────────────────────────────

class Currency(str, Enum):
    """Currency the aggregated sum is reported in. No conversion is done."""
    RUB = "RUB"


class LifecycleState(str, Enum):
    """Subscription lifecycle states as seen by the service layer."""
    PERSISTED = "persisted"
    UPDATED = "updated"
    DELETED = "deleted"
