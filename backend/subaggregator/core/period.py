"""Period Parser — converts MM-YYYY text to calendar anchor dates and back.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Accepted text is exactly two-digit month 01–12, dash, four-digit year
    - Parsed dates are anchors: day is always 1, no timezone
    - format_period(parse_period(t)) == t for every accepted t

Design Decisions:
    - Regex fullmatch over strptime: strptime accepts single-digit months and
      surrounding whitespace, which would break the round-trip guarantee
"""

import re
from dataclasses import dataclass
from datetime import date

from subaggregator.core.errors import InvalidPeriodFormatError

_PERIOD_RE = re.compile(r"(0[1-9]|1[0-2])-([0-9]{4})")


def parse_period(text: str, field: str | None = None) -> date:
    """Parse MM-YYYY into the first day of that month."""
    match = _PERIOD_RE.fullmatch(text or "")
    if not match:
        raise InvalidPeriodFormatError(text, field)
    month, year = int(match.group(1)), int(match.group(2))
    if year < 1:
        raise InvalidPeriodFormatError(text, field)
    return date(year, month, 1)


def parse_optional_period(text: str | None, field: str | None = None) -> date | None:
    """Empty or missing text means "no date"; anything else must parse."""
    if not text:
        return None
    return parse_period(text, field)


def format_period(value: date) -> str:
    """Render a date as MM-YYYY. Day component is ignored."""
    return f"{value.month:02d}-{value.year:04d}"


def to_anchor(value: date) -> date:
    """Normalize any date to the first of its month."""
    return value.replace(day=1)


@dataclass(frozen=True)
class Period:
    """Closed month window [start, end], both anchor dates."""
    start: date
    end: date

    @property
    def is_ordered(self) -> bool:
        return self.end >= self.start
