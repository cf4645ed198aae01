"""Filter Builder — turns total-cost query parameters into a CostFilter.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Both period texts are mandatory; empty text → MissingRequiredPeriodError
    - end < start → InvalidWindowError; end == start is a single-month window
    - Owner and service-name filters are optional; None means "any"

Design Decisions:
    - CostFilter is frozen: passed by value to storage, never mutated
    - Period texts are kept verbatim for echoing back in the response
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from subaggregator.core.errors import InvalidWindowError, MissingRequiredPeriodError
from subaggregator.core.period import Period, parse_period


@dataclass(frozen=True)
class CostFilter:
    """Aggregation query: optional owner, optional service name, mandatory window."""
    window: Period
    user_id: UUID | None = None
    service_name: str | None = None

    @property
    def start_date(self) -> date:
        return self.window.start

    @property
    def end_date(self) -> date:
        return self.window.end


def build_cost_filter(
    start_period: str | None,
    end_period: str | None,
    user_id: UUID | None = None,
    service_name: str | None = None,
) -> CostFilter:
    """Validate periods and assemble the filter. First failure wins."""
    if not start_period:
        raise MissingRequiredPeriodError("start_period")
    if not end_period:
        raise MissingRequiredPeriodError("end_period")

    window = Period(
        start=parse_period(start_period, "start_period"),
        end=parse_period(end_period, "end_period"),
    )
    if not window.is_ordered:
        raise InvalidWindowError(start_period, end_period)

    return CostFilter(window=window, user_id=user_id, service_name=service_name)


def describe_period(start_period: str, end_period: str) -> str:
    """Response label built from the caller's own text, not the parsed dates."""
    return f"{start_period} - {end_period}"
