"""Walks paginated Terraform Cloud collections to completion."""

import asyncio
import logging

from pydantic import ValidationError

from tfc_backup.config import PaginationStrategy

from .client import TerraformCloudClient
from .exceptions import ListingError, PaginationError, TransportError
from .models import CollectionPage, PaginatedCollection

logger = logging.getLogger(__name__)


class Paginator:
    """
    Collect ``(name, id)`` pairs from a paginated collection endpoint.

    The total is read from ``meta.pagination.total-count`` on the first page.
    Names and ids are taken from the same ``data[]`` element of the same page,
    so pairs can never drift out of alignment.

    Two strategies are supported:

    * ``MULTI`` requests successive pages until the collected count reaches the
      total or an empty page comes back. A short result is returned as-is;
      callers check ``is_consistent``. Needing more than ``max_pages`` pages
      raises ``ListingError``.
    * ``SINGLE`` fetches one page only and raises ``ListingError`` if the
      total does not fit on it.
    """

    def __init__(
        self,
        client: TerraformCloudClient,
        strategy: PaginationStrategy = PaginationStrategy.MULTI,
        max_pages: int = 100,
    ) -> None:
        self.client = client
        self.strategy = strategy
        self.max_pages = max_pages

    async def collect(self, base_url: str, page_size: int) -> PaginatedCollection[tuple[str, str]]:
        """Collect every ``(name, id)`` pair of the collection at ``base_url``."""
        collection: PaginatedCollection[tuple[str, str]] = PaginatedCollection()
        page_number = 1

        while True:
            page = await self._fetch_page(base_url, page_size, page_number)
            collection.pages_fetched += 1

            if page_number == 1:
                collection.expected_total = page.meta.pagination.total_count
                logger.info("Total variable sets to process: %d", collection.expected_total)
                if self.strategy == PaginationStrategy.SINGLE and collection.expected_total > page_size:
                    msg = (
                        f"Found {collection.expected_total} variable sets but only "
                        f"{page_size} fit on a single page"
                    )
                    raise ListingError(msg, {"total": collection.expected_total, "page_size": page_size})

            collection.items.extend((item.attributes.name, item.id) for item in page.data)
            logger.info("Processed %d of %d variable sets", collection.observed_total, collection.expected_total)

            if collection.observed_total >= collection.expected_total:
                break
            if self.strategy == PaginationStrategy.SINGLE:
                break
            if not page.data:
                logger.warning("Page %d was empty before the reported total was reached", page_number)
                break
            if page_number >= self.max_pages:
                msg = (
                    f"Found {collection.expected_total} variable sets but only "
                    f"{collection.observed_total} fit in {self.max_pages} pages"
                )
                raise ListingError(msg, {"total": collection.expected_total, "max_pages": self.max_pages})
            page_number += 1

        return collection

    async def _fetch_page(self, base_url: str, page_size: int, page_number: int) -> CollectionPage:
        params = {"page[size]": page_size, "page[number]": page_number}
        try:
            body = await asyncio.to_thread(self.client.fetch_json, base_url, params)
            return CollectionPage.model_validate(body)
        except TransportError as e:
            raise PaginationError(page_number, e.message) from e
        except ValidationError as e:
            raise PaginationError(page_number, f"unexpected response shape: {e.error_count()} error(s)") from e
