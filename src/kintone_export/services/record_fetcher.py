"""Paginated record retrieval."""

import logging
import re
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from kintone_export.schemas.record import Record

if TYPE_CHECKING:
    from kintone_export.services.kintone_client import KintoneClient

logger = logging.getLogger(__name__)

# Maximum records per records API call on export
PAGE_SIZE = 500

# A caller-supplied limit disables paging
LIMIT_PATTERN = re.compile(r"limit\s+\d+")


class RecordFetcher:
    """
    Fetch records page by page.

    Queries without a ``limit`` clause are paged with ``limit 500 offset N``
    until a page comes back short. A query that already carries a limit is
    sent once, unmodified, and treated as the last page.
    """

    def __init__(
        self,
        client: "KintoneClient",
        query: str = "",
        fields: Sequence[str] | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        """Initialize fetcher.

        Args:
            client: kintone API client
            query: kintone query string
            fields: Field codes to request, None for all
            page_size: Records per page
        """
        self.client = client
        self.query = query
        self.fields = list(fields) if fields else None
        self.page_size = page_size

    @property
    def has_caller_limit(self) -> bool:
        """Check if the query already limits the result."""
        return LIMIT_PATTERN.search(self.query) is not None

    def fetch(self, offset: int = 0) -> tuple[list[Record], bool]:
        """Fetch one page.

        Args:
            offset: Number of records to skip

        Returns:
            Tuple of (records, is_last_page)

        Raises:
            KintoneAPIError: If kintone rejects the request
            TransportError: If the request fails
        """
        if self.has_caller_limit:
            records = self.client.get_records(self.fields, self.query)
            return records, True

        query = f"{self.query} limit {self.page_size} offset {offset}"
        records = self.client.get_records(self.fields, query)
        return records, len(records) < self.page_size

    def iter_pages(self) -> Iterator[list[Record]]:
        """Yield pages until the last one has been fetched."""
        offset = 0
        while True:
            records, is_last_page = self.fetch(offset)
            logger.info(f"Fetched {len(records)} records at offset {offset}")
            yield records
            if is_last_page:
                return
            offset += self.page_size
