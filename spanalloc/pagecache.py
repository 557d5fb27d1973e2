"""The page cache: hands out runs of pages and merges them back when released."""

from __future__ import annotations

import threading
from typing import Optional

from .memory import AddressSpace
from .objectpool import ObjectPool
from .pagemap import PageMap2
from .sizeclass import NPAGES, PAGE_SHIFT
from .spans import Span, SpanList


def _reset_span(span: Span) -> None:
    span.page_id = 0
    span.n = 0
    span.obj_size = 0
    span.use_count = 0
    span.free_list = []
    span.is_use = False
    span.prev = None
    span.next = None


class PageCache:
    """Keeps free spans bucketed by page count and maps page numbers to spans.

    Callers hold :attr:`lock` around :meth:`new_span` and
    :meth:`release_span_to_page_cache`; :meth:`map_object_to_span` needs no lock.
    """

    def __init__(self, address_space: Optional[AddressSpace] = None) -> None:
        self.lock = threading.Lock()
        self.address_space = address_space if address_space is not None else AddressSpace()
        self._span_pool: ObjectPool[Span] = ObjectPool(Span, _reset_span)
        self._id_span_map = PageMap2(32 - PAGE_SHIFT)
        self._span_lists = [SpanList() for _ in range(NPAGES)]

    def _map_pages(self, span: Span) -> None:
        for page in range(span.page_id, span.page_id + span.n):
            self._id_span_map.set(page, span)

    def _map_ends(self, span: Span) -> None:
        self._id_span_map.set(span.page_id + span.n - 1, span)
        self._id_span_map.set(span.page_id, span)

    def new_span(self, k: int) -> Span:
        """Return a span of exactly ``k`` pages."""
        if k > NPAGES - 1:
            span = self._span_pool.new()
            span.page_id = self.address_space.alloc(k) >> PAGE_SHIFT
            span.n = k
            self._id_span_map.set(span.page_id, span)
            return span
        if k < 1:
            raise ValueError(f"page count must be in [1, {NPAGES - 1}], got {k}")

        while True:
            bucket = self._span_lists[k]
            if not bucket.empty():
                span = bucket.pop_front()
                self._map_pages(span)
                return span

            for n in range(k + 1, NPAGES):
                bucket = self._span_lists[n]
                if bucket.empty():
                    continue
                big = bucket.pop_front()
                span = self._span_pool.new()
                # Cut k pages off the head; the rest goes back to its bucket.
                span.page_id = big.page_id
                span.n = k
                big.page_id += k
                big.n -= k
                self._span_lists[big.n].push_front(big)
                self._map_ends(big)
                self._map_pages(span)
                return span

            fresh = self._span_pool.new()
            fresh.page_id = self.address_space.alloc(NPAGES - 1) >> PAGE_SHIFT
            fresh.n = NPAGES - 1
            self._span_lists[NPAGES - 1].push_front(fresh)

    def map_object_to_span(self, address: int) -> Span:
        """Return the span that holds ``address``."""
        span = self._id_span_map.get(address >> PAGE_SHIFT)
        if span is None:
            raise ValueError(f"address {address:#x} belongs to no span")
        return span

    def release_span_to_page_cache(self, span: Span) -> None:
        """Take back ``span``, merging it with free neighbours."""
        if span.n > NPAGES - 1:
            self.address_space.free(span.address)
            self._id_span_map.set(span.page_id, None)
            self._span_pool.delete(span)
            return

        while True:
            prev = self._id_span_map.get(span.page_id - 1)
            if prev is None or prev.is_use or prev.n + span.n > NPAGES - 1:
                break
            span.page_id = prev.page_id
            span.n += prev.n
            self._span_lists[prev.n].erase(prev)
            self._span_pool.delete(prev)

        while True:
            following = self._id_span_map.get(span.page_id + span.n)
            if following is None or following.is_use or following.n + span.n > NPAGES - 1:
                break
            span.n += following.n
            self._span_lists[following.n].erase(following)
            self._span_pool.delete(following)

        self._span_lists[span.n].push_front(span)
        span.is_use = False
        self._map_ends(span)