"""The central cache: spans cut into objects, shared by all thread caches."""

from __future__ import annotations

from typing import Iterable, Optional

from .pagecache import PageCache
from .sizeclass import NFREELIST, PAGE_SHIFT, index, num_move_page
from .spans import Span, SpanList


class CentralCache:
    """Holds one span list per size class, each guarded by its own lock."""

    def __init__(self, page_cache: Optional[PageCache] = None) -> None:
        self.page_cache = page_cache if page_cache is not None else PageCache()
        self.span_lists = [SpanList() for _ in range(NFREELIST)]

    def get_one_span(self, span_list: SpanList, size: int) -> Span:
        """Return a span of ``span_list`` with free objects, carving a new one if needed.

        The caller holds ``span_list.lock``; it is dropped while pages are fetched.
        """
        for span in span_list:
            if span.free_list:
                return span

        # Let other threads return objects to this bucket meanwhile.
        span_list.lock.release()
        try:
            with self.page_cache.lock:
                span = self.page_cache.new_span(num_move_page(size))
                span.is_use = True
                span.obj_size = size
            start = span.address
            end = start + (span.n << PAGE_SHIFT)
            # The last element is the head of the free list.
            span.free_list = list(range(start, end, size))
            span.free_list.reverse()
        finally:
            span_list.lock.acquire()
        span_list.push_front(span)
        return span

    def fetch_range_obj(self, batch_num: int, size: int) -> list[int]:
        """Take up to ``batch_num`` objects of ``size`` bytes from one span."""
        if batch_num < 1:
            raise ValueError(f"batch size must be positive, got {batch_num}")
        span_list = self.span_lists[index(size)]
        with span_list.lock:
            span = self.get_one_span(span_list, size)
            objs = span.free_list[-batch_num:]
            del span.free_list[-batch_num:]
            objs.reverse()
            span.use_count += len(objs)
        return objs

    def release_list_to_spans(self, objs: Iterable[int], byte_size: int) -> None:
        """Return objects to their spans; spans left unused go back to the page cache."""
        span_list = self.span_lists[index(byte_size)]
        span_list.lock.acquire()
        try:
            for obj in objs:
                span = self.page_cache.map_object_to_span(obj)
                span.free_list.append(obj)
                span.use_count -= 1
                if span.use_count == 0:
                    span_list.erase(span)
                    span.free_list = []
                    span_list.lock.release()
                    try:
                        with self.page_cache.lock:
                            self.page_cache.release_span_to_page_cache(span)
                    finally:
                        span_list.lock.acquire()
        finally:
            span_list.lock.release()