"""Pagination — clamps page/limit instead of rejecting them.

Invariants:
    - Non-integer page/limit text counts as absent, never as an error
    - page < 1 becomes DEFAULT_PAGE
    - limit outside 1..MAX_LIMIT becomes DEFAULT_LIMIT (not MAX_LIMIT)
    - offset = (page - 1) * limit
"""

import re
from dataclasses import dataclass

from subaggregator.core.domain_types import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_page_param(text: str | None) -> int | None:
    """Decimal integer text → int; anything else → None."""
    if text is None or not _INT_RE.fullmatch(text):
        return None
    return int(text)


def clamp_page(page: int | None, limit: int | None) -> PageRequest:
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if limit is None or limit < 1 or limit > MAX_LIMIT:
        limit = DEFAULT_LIMIT
    return PageRequest(page=page, limit=limit)
