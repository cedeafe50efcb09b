"""
Lazy, single-pass async iteration over paginated Query/Scan results.

ItemStream pulls one page at a time from a page-fetching function. A page is
requested only when every item of the previous page has been handed to the
consumer, so at most one page is held in memory and nothing is fetched ahead
of demand. Abandoning iteration stops further requests.

Each raw item is validated through the parse function right before it is
yielded. A validation failure ends the stream: items already yielded stay
yielded, nothing after the failing item is produced.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Generic, List, Mapping, Optional, TypeVar

from .exceptions import NotFoundError

T = TypeVar('T')

logger = logging.getLogger(__name__)

PageFetcher = Callable[[Optional[Dict[str, Any]]], Dict[str, Any]]


class ItemStream(Generic[T]):
    """Async iterator over the items of a paginated DynamoDB request.

    Args:
        fetch_page: Blocking callable taking the ExclusiveStartKey (None for the
            first page) and returning the raw DynamoDB response
        parse: Turns a raw item into a validated value
        table_name: Table being read, for logging and NotFoundError
        key: Key attributes of the request, for logging and NotFoundError

    Example:
        async for comment in repository.query({'pk': 'post2', 'sk': BeginsWith('comment')}):
            print(comment.content)
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        parse: Callable[[Dict[str, Any]], T],
        table_name: str,
        key: Optional[Mapping[str, Any]] = None,
    ):
        self._fetch_page = fetch_page
        self._parse = parse
        self.table_name = table_name
        self.key = dict(key or {})
        self._buffer: Deque[Dict[str, Any]] = deque()
        self._last_evaluated_key: Optional[Dict[str, Any]] = None
        self._exhausted = False
        self._lock: Optional[asyncio.Lock] = None
        self.pages_fetched = 0
        self.items_yielded = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted and not self._buffer

    def __aiter__(self) -> 'ItemStream[T]':
        return self

    async def __anext__(self) -> T:
        # one page in flight per stream, even with several consumers
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            while not self._buffer:
                if self._exhausted:
                    raise StopAsyncIteration
                await self._next_page()

            raw = self._buffer.popleft()
            try:
                item = self._parse(raw)
            except Exception:
                self._close()
                raise
            self.items_yielded += 1
            return item

    async def _next_page(self) -> None:
        try:
            response = await asyncio.to_thread(self._fetch_page, self._last_evaluated_key)
        except Exception:
            self._close()
            raise

        self.pages_fetched += 1
        items = response.get('Items', [])
        self._buffer.extend(items)
        self._last_evaluated_key = response.get('LastEvaluatedKey')
        if self._last_evaluated_key is None:
            self._exhausted = True

        logger.debug(
            f"Fetched page {self.pages_fetched} from {self.table_name} "
            f"with {len(items)} item(s), more={not self._exhausted}"
        )

    def _close(self) -> None:
        self._exhausted = True
        self._buffer.clear()

    async def aclose(self) -> None:
        """Stop the stream; no further pages are requested."""
        self._close()

    async def to_list(self) -> List[T]:
        """Drain the remaining items into a list."""
        return [item async for item in self]

    async def first(self) -> T:
        """Return the next item.

        Raises:
            NotFoundError: If the stream produces no item
        """
        try:
            item = await self.__anext__()
        except StopAsyncIteration:
            raise NotFoundError(self.table_name, self.key) from None
        await self.aclose()
        return item
