"""
Listing fetcher: turns the filter store, page and sort selection into
result pages, applying only the newest response.
"""
import asyncio
import logging
from typing import Any, Mapping, Optional, Set, Tuple

from .client import PropertiesAPIError
from .config import config
from .filters import FilterStore
from .models import Property, ResultPage, page_count
from .query import QueryParameters, build_query, params_key
from .utils import first_value

logger = logging.getLogger(__name__)


class ListingFetcher:
    """
    Fetches listing pages for a FilterStore.

    Every request is tagged with a sequence number and only the latest one
    may commit to ``result``/``error``, so a slow earlier response can never
    overwrite a newer one. On failure the last successful page is kept and
    ``error`` carries a readable message.
    """

    def __init__(self, client, store: FilterStore, page_size: int = config.PAGE_SIZE,
                 sort: Optional[str] = "featured"):
        self.client = client
        self.store = store
        self.page_size = page_size
        self.sort = sort
        self.page = 1
        self.url_params: Mapping[str, Any] = {}

        self.result: Optional[ResultPage] = None
        self.loading = False
        self.error: Optional[str] = None

        self._sequence = 0
        self._last_keys: Optional[Tuple[str, str]] = None
        self._last_trigger: Optional[Tuple[Any, ...]] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def items(self) -> Tuple[Property, ...]:
        return self.result.items if self.result else ()

    @property
    def total(self) -> int:
        return self.result.total if self.result else 0

    @property
    def total_pages(self) -> int:
        return page_count(self.total, self.page_size)

    def build_query(self) -> QueryParameters:
        return build_query(
            self.store.filters, self.store.price_bound, page=self.page,
            page_size=self.page_size, sort=self.sort, url_params=self.url_params,
        )

    async def fetch(self, params: QueryParameters) -> Optional[ResultPage]:
        """
        Issue one listing request.

        Returns the committed page, or None when the request failed or was
        superseded by a newer one before its response arrived.
        """
        if not self.store.is_initialized:
            raise RuntimeError("Filter store is not initialized")

        self._sequence += 1
        sequence = self._sequence
        self.loading = True
        self.error = None

        try:
            result = await self.client.list_properties(params.as_dict())
        except asyncio.CancelledError:
            logger.debug(f"Listing request #{sequence} cancelled")
            raise
        except PropertiesAPIError as e:
            if sequence != self._sequence:
                logger.debug(f"Discarding stale listing error #{sequence}: {e.message}")
                return None
            logger.error(f"Error fetching properties: {e.message}")
            self.error = e.message
            self.loading = False
            return None

        if sequence != self._sequence:
            logger.debug(f"Discarding stale listing response #{sequence}")
            return None

        self.result = result
        self.loading = False
        return result

    async def sync(self, url_params: Optional[Mapping[str, Any]] = None) -> Optional[ResultPage]:
        """
        Refetch when page, sort, filters or URL params changed since the last
        request. A filter or URL change sends the view back to page 1.
        """
        if url_params is not None:
            self.url_params = url_params
        if not self.store.is_initialized:
            return None

        keys = (self.store.key(), params_key(self.url_params))
        if self._last_keys is not None and keys != self._last_keys:
            self.page = 1
        self._last_keys = keys

        trigger = (self.page, self.sort) + keys
        if trigger == self._last_trigger:
            return self.result
        self._last_trigger = trigger

        return await self.fetch(self.build_query())

    async def reload(self) -> Optional[ResultPage]:
        """Fetch the current view again, even if nothing changed."""
        self._last_trigger = None
        return await self.sync()

    async def go_to_page(self, page: int) -> Optional[ResultPage]:
        self.page = max(1, int(page))
        return await self.sync()

    async def set_sort(self, sort: Optional[str]) -> Optional[ResultPage]:
        self.sort = sort
        return await self.sync()

    def start(self, url_params: Optional[Mapping[str, Any]] = None) -> asyncio.Task:
        """Run ``sync`` as a background task that ``cancel()`` can abort."""
        task = asyncio.ensure_future(self.sync(url_params))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self) -> None:
        """Abort in-flight background requests; none of them will commit."""
        self._sequence += 1
        self._last_trigger = None
        self.loading = False
        for task in list(self._tasks):
            task.cancel()

    async def aclose(self) -> None:
        self.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def results_header(self, url_params: Optional[Mapping[str, Any]] = None) -> Tuple[str, str]:
        """Title and subtitle for the current listing view."""
        url_params = self.url_params if url_params is None else url_params
        total = self.total
        if first_value(url_params.get("is_hot_property")) == "true":
            return "Hot Properties", f"{total} hot deals found"
        if first_value(url_params.get("is_featured")) == "true":
            return "Featured Properties", f"{total} featured properties found"
        return "Properties for Sale", f"{total} properties found"
