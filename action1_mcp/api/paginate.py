"""Pagination over list endpoints.

A Paginator owns its own cursor, page number or next link, so two
paginations never share state. It can be driven step by step with
fetch_next(), iterated lazily with ``async for``, or drained with collect().
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from .client import ApiClient, extract_items
from .models import PaginationConfig, PaginationStyle
from .paths import build_query

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 50


class Paginator:
    """Forward-only, non-restartable sequence of item batches

    Args:
        client: Client used for every fetch (GETs go through the retry path)
        base_path: List endpoint path with placeholders already filled
        params: Initial query parameters
        pagination: Overrides the client's pagination config
    """

    def __init__(
        self,
        client: ApiClient,
        base_path: str,
        params: Optional[Mapping[str, Any]] = None,
        pagination: Optional[PaginationConfig] = None,
    ):
        self.client = client
        self.base_path = base_path
        self.params: Dict[str, Any] = dict(params or {})
        self.config = pagination or client.spec.pagination
        self.done = False
        self.pages_fetched = 0

        style = self.config.style
        if style == PaginationStyle.CURSOR:
            cursor_param = self.config.cursor_param
            self.cursor = self.params.get(cursor_param) if cursor_param else None
        elif style == PaginationStyle.PAGE:
            self.page_param = self.config.page_param or "page"
            self.per_page_param = self.config.per_page_param or "per_page"
            self.page = int(self.params.get(self.page_param) or DEFAULT_PAGE)
            self.per_page = int(self.params.get(self.per_page_param) or DEFAULT_PER_PAGE)
        elif style == PaginationStyle.LINK:
            self.next_link: Optional[str] = None

    async def _fetch(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        self.pages_fetched += 1
        return await self.client.get_with_retry(f"{path}{build_query(params)}")

    async def fetch_next(self) -> Optional[List[Any]]:
        """Fetch the next batch, or return None once the sequence has ended"""
        if self.done:
            return None

        style = self.config.style
        if style == PaginationStyle.CURSOR:
            return await self._next_cursor()
        if style == PaginationStyle.PAGE:
            return await self._next_page()
        if style == PaginationStyle.LINK:
            return await self._next_link()

        self.done = True
        return extract_items(await self._fetch(self.base_path, self.params))

    async def _next_cursor(self) -> List[Any]:
        cursor_param = self.config.cursor_param
        params = dict(self.params)
        if self.cursor and cursor_param:
            params[cursor_param] = self.cursor

        data = await self._fetch(self.base_path, params)
        items = extract_items(data)

        self.cursor = None
        if isinstance(data, dict):
            next_field = self.config.next_field or cursor_param
            for key in (next_field, "nextPage", "cursor"):
                if key and data.get(key):
                    self.cursor = data[key]
                    break
        if not self.cursor:
            self.done = True
        return items

    async def _next_page(self) -> Optional[List[Any]]:
        params = {**self.params, self.page_param: self.page, self.per_page_param: self.per_page}
        items = extract_items(await self._fetch(self.base_path, params))
        if not items:
            self.done = True
            return None
        self.page += 1
        if len(items) < self.per_page:
            self.done = True
        return items

    async def _next_link(self) -> List[Any]:
        if self.next_link is None:
            data = await self._fetch(self.base_path, self.params)
        else:
            data = await self._fetch(self.next_link)
        items = extract_items(data)

        self.next_link = None
        if isinstance(data, dict):
            self.next_link = data.get("next") or data.get(self.config.next_field or "next")
        if not self.next_link:
            self.done = True
        return items

    def __aiter__(self) -> "Paginator":
        return self

    async def __anext__(self) -> List[Any]:
        batch = await self.fetch_next()
        if batch is None:
            raise StopAsyncIteration
        return batch

    async def collect(self, limit: Optional[int] = None) -> List[Any]:
        """Drain the paginator into one list, stopping early once limit items are held"""
        results: List[Any] = []
        async for batch in self:
            results.extend(batch)
            if limit is not None and len(results) >= limit:
                return results[:limit]
        logging.debug(f"[Paginator] Collected {len(results)} items in {self.pages_fetched} page(s) from {self.base_path}")
        return results


def paginate(client: ApiClient, base_path: str, params: Optional[Mapping[str, Any]] = None) -> AsyncIterator[List[Any]]:
    """Lazily yield item batches from a list endpoint"""
    return Paginator(client, base_path, params)


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PER_PAGE",
    "Paginator",
    "paginate",
]
