"""A simulated page-granular system address space."""

from __future__ import annotations

import bisect

from .sizeclass import PAGE_SHIFT, PAGE_SIZE


class AddressSpace:
    """Hands out page-aligned address ranges, reusing freed ranges first-fit.

    Page 0 is never handed out, so address 0 stays free to mean "nothing".
    """

    def __init__(self, limit: int = 1 << 32) -> None:
        self._limit_pages = limit >> PAGE_SHIFT
        self._top = 1
        self._live: dict[int, int] = {}
        self._holes: list[tuple[int, int]] = []

    @property
    def pages_in_use(self) -> int:
        return sum(self._live.values())

    def alloc(self, kpage: int) -> int:
        """Reserve ``kpage`` pages and return the address of the first."""
        if kpage < 1:
            raise ValueError(f"page count must be positive, got {kpage}")
        for position, (start, count) in enumerate(self._holes):
            if count >= kpage:
                if count == kpage:
                    del self._holes[position]
                else:
                    self._holes[position] = (start + kpage, count - kpage)
                break
        else:
            if self._top + kpage > self._limit_pages:
                raise MemoryError(f"cannot allocate {kpage} pages")
            start = self._top
            self._top += kpage
        self._live[start] = kpage
        return start << PAGE_SHIFT

    def free(self, address: int) -> None:
        """Give back a range previously returned by :meth:`alloc`."""
        page = address >> PAGE_SHIFT
        if address & (PAGE_SIZE - 1) or page not in self._live:
            raise ValueError(f"address {address:#x} was not allocated here")
        count = self._live.pop(page)
        bisect.insort(self._holes, (page, count))
        self._merge_holes()

    def _merge_holes(self) -> None:
        merged: list[tuple[int, int]] = []
        for start, count in self._holes:
            if merged and merged[-1][0] + merged[-1][1] == start:
                prev_start, prev_count = merged[-1]
                merged[-1] = (prev_start, prev_count + count)
            else:
                merged.append((start, count))
        if merged and merged[-1][0] + merged[-1][1] == self._top:
            self._top = merged.pop()[0]
        self._holes = merged