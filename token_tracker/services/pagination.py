"""
Offset/limit normalization shared by every paged query.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Select

from token_tracker.core.config import settings


@dataclass(frozen=True)
class PageWindow:
    offset: int
    limit: int

    def apply(self, query: Select) -> Select:
        return query.offset(self.offset).limit(self.limit)


def normalize(offset: Optional[int] = None, limit: Optional[int] = None) -> PageWindow:
    """
    Normalize caller paging input.

    Missing, zero or negative values fall back to the configured defaults,
    and the limit is always clamped to ``query_paging_max_limit``.
    """
    if not offset or offset < 0:
        offset = settings.query_paging_default_offset
    if not limit or limit < 0:
        limit = settings.query_paging_default_limit
    return PageWindow(
        offset=offset,
        limit=min(limit, settings.query_paging_max_limit),
    )
