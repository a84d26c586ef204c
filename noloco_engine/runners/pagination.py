"""
Cursor-paginated record fetching.

Drives ``NolocoClient.list_records`` page by page until the caller's limit is
reached or the server reports no further page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from noloco_engine.core.config import get_settings
from noloco_engine.data_mapping.filters import FilterExpression
from noloco_engine.sdks.noloco_sdk.client import NolocoClient
from noloco_engine.sdks.noloco_sdk.models import RecordsQueryParams

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("createdAt", "updatedAt")
ORDER_DIRECTIONS = ("ASC", "DESC")


@dataclass
class RecordQuery:
    """What to fetch, how to order it and how many records to return."""

    project: str
    table: str
    filter: Optional[FilterExpression] = None
    sort_by: Optional[str] = None
    order_by: str = "DESC"
    limit: Optional[int] = None
    return_all: bool = False
    include: List[str] = field(default_factory=lambda: ["*"])
    page_size_cap: Optional[int] = None

    def __post_init__(self):
        settings = get_settings()

        # The data API only sorts on system timestamps
        if self.sort_by not in SORTABLE_FIELDS:
            self.sort_by = None

        self.order_by = (self.order_by or "DESC").upper()
        if self.order_by not in ORDER_DIRECTIONS:
            raise ValueError(f"order_by must be one of {ORDER_DIRECTIONS}, got '{self.order_by}'")

        if self.page_size_cap is None:
            self.page_size_cap = settings.noloco_page_size_cap
        if self.page_size_cap < 1:
            raise ValueError("page_size_cap must be at least 1")

        if not self.return_all:
            if self.limit is None:
                self.limit = settings.noloco_default_limit
            if self.limit < 1:
                raise ValueError("limit must be at least 1 unless return_all is set")


async def fetch_all_records(client: NolocoClient, query: RecordQuery) -> List[Dict[str, Any]]:
    """
    Fetch records page by page.

    Each request asks for ``min(remaining, page_size_cap)`` records. When a limit
    applies, fetching stops as soon as it is reached, even if more pages exist.
    Otherwise the loop follows ``endCursor`` while ``hasNextPage`` is set; a page
    that claims a successor but carries no cursor ends the stream.

    Args:
        client: Noloco API client
        query: Record query

    Returns:
        Records in server order, at most ``query.limit`` unless return_all
    """
    records: List[Dict[str, Any]] = []
    cursor: Optional[str] = None
    pages = 0

    while True:
        if query.return_all:
            page_size = query.page_size_cap
        else:
            page_size = min(query.limit - len(records), query.page_size_cap)

        page = await client.list_records(
            query.project,
            query.table,
            RecordsQueryParams(
                sort_by=query.sort_by,
                order_by=query.order_by,
                first=page_size,
                after=cursor,
                filter=query.filter,
                include=query.include,
            ),
        )
        pages += 1

        for record in page.records:
            records.append(record)
            if not query.return_all and len(records) >= query.limit:
                logger.debug(
                    f"Reached limit {query.limit} for {query.project}/{query.table} after {pages} page(s)"
                )
                return records

        next_cursor = page.next_cursor
        if next_cursor is None:
            if page.page_info.has_next_page:
                logger.warning(
                    f"{query.project}/{query.table}: page {pages} reports a next page without a cursor, stopping"
                )
            break
        if next_cursor == cursor:
            logger.warning(
                f"{query.project}/{query.table}: cursor did not advance on page {pages}, stopping"
            )
            break
        cursor = next_cursor

    logger.debug(f"Fetched {len(records)} records from {query.project}/{query.table} in {pages} page(s)")
    return records
