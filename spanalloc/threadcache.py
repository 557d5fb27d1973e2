"""Per-thread caches of free objects, refilled from the central cache."""

from __future__ import annotations

from typing import Any

from .centralcache import CentralCache
from .sizeclass import MAX_BYTES, NFREELIST, index, num_move_size, round_up
from .spans import FreeList


class ThreadCache:
    """Lock-free object cache owned by a single thread."""

    def __init__(self, central_cache: CentralCache) -> None:
        self.central_cache = central_cache
        self.free_lists = [FreeList() for _ in range(NFREELIST)]

    def allocate(self, size: int) -> int:
        """Return the address of an object of at least ``size`` bytes."""
        if size > MAX_BYTES:
            raise ValueError(f"size {size} exceeds {MAX_BYTES}")
        align_size = round_up(size)
        bucket = index(size)
        free_list = self.free_lists[bucket]
        if not free_list.empty():
            return free_list.pop()
        return self.fetch_from_central_cache(bucket, align_size)

    def deallocate(self, ptr: Any, size: int) -> None:
        """Take back the object at ``ptr`` of class ``size``."""
        if ptr is None:
            raise ValueError("cannot deallocate None")
        if size > MAX_BYTES:
            raise ValueError(f"size {size} exceeds {MAX_BYTES}")
        free_list = self.free_lists[index(size)]
        free_list.push(ptr)
        if len(free_list) >= free_list.max_size:
            self.list_too_long(free_list, size)

    def fetch_from_central_cache(self, index: int, size: int) -> int:
        """Refill bucket ``index`` and return one object.

        The batch starts small and grows by one each time the limit is hit,
        capped by how many objects of ``size`` a single move allows.
        """
        free_list = self.free_lists[index]
        batch_num = min(free_list.max_size, num_move_size(size))
        if batch_num == free_list.max_size:
            free_list.max_size += 1
        objs = self.central_cache.fetch_range_obj(batch_num, size)
        first, rest = objs[0], objs[1:]
        if rest:
            free_list.push_range(rest)
        return first

    def list_too_long(self, free_list: FreeList, size: int) -> None:
        """Give a batch of ``free_list`` back to the central cache."""
        objs = free_list.pop_range(free_list.max_size)
        self.central_cache.release_list_to_spans(objs, size)