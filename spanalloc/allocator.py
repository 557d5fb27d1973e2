"""The allocator front end: small requests via thread caches, large ones via pages."""

from __future__ import annotations

import threading
from typing import Optional

from .centralcache import CentralCache
from .memory import AddressSpace
from .objectpool import ObjectPool
from .pagecache import PageCache
from .sizeclass import MAXBYTE, PAGE_SHIFT, round_up
from .threadcache import ThreadCache


class ConcurrentAllocator:
    """A three-tier allocator over a simulated address space."""

    def __init__(self, address_space: Optional[AddressSpace] = None) -> None:
        self.page_cache = PageCache(address_space)
        self.central_cache = CentralCache(self.page_cache)
        self._local = threading.local()
        self._pool_lock = threading.Lock()
        self._cache_pool: ObjectPool[ThreadCache] = ObjectPool(
            lambda: ThreadCache(self.central_cache)
        )

    def _current_cache(self, create: bool) -> Optional[ThreadCache]:
        cache = getattr(self._local, "cache", None)
        if cache is None and create:
            with self._pool_lock:
                cache = self._cache_pool.new()
            self._local.cache = cache
        return cache

    def alloc(self, size: int) -> int:
        """Return the address of a block of at least ``size`` bytes."""
        if size > MAXBYTE:
            kpage = round_up(size) >> PAGE_SHIFT
            with self.page_cache.lock:
                span = self.page_cache.new_span(kpage)
                span.obj_size = size
                span.is_use = True
            return span.address
        return self._current_cache(create=True).allocate(size)

    def free(self, ptr: int) -> None:
        """Release the block at ``ptr``."""
        span = self.page_cache.map_object_to_span(ptr)
        size = span.obj_size
        if size > MAXBYTE:
            with self.page_cache.lock:
                self.page_cache.release_span_to_page_cache(span)
            return
        cache = self._current_cache(create=False)
        if cache is None:
            raise RuntimeError("this thread has allocated nothing and has no cache")
        cache.deallocate(ptr, size)


_default: Optional[ConcurrentAllocator] = None
_default_lock = threading.Lock()


def _default_allocator() -> ConcurrentAllocator:
    global _default
    with _default_lock:
        if _default is None:
            _default = ConcurrentAllocator()
        return _default


def concurrent_alloc(size: int) -> int:
    """Allocate from the process-wide allocator."""
    return _default_allocator().alloc(size)


def concurrent_free(ptr: int) -> None:
    """Release a block obtained from :func:`concurrent_alloc`."""
    _default_allocator().free(ptr)