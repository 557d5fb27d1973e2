"""Size classes: alignment rules and free-list bucket mapping for object sizes."""

from __future__ import annotations

MAX_BYTES = 256 * 1024
NFREELIST = 208
NPAGES = 129
PAGE_SHIFT = 13
PAGE_SIZE = 1 << PAGE_SHIFT

# Requests larger than this bypass the per-thread caches entirely.
MAXBYTE = 0xFF

# Largest size the bucket index covers.
MAX_INDEXED = 126 * 1024

# Internal fragmentation is held to roughly 10%:
#   [1, 128]              8 byte alignment      buckets [0, 16)
#   [129, 1024]           16 byte alignment     buckets [16, 72)
#   [1025, 8K]            128 byte alignment    buckets [72, 128)
#   [8K+1, 64K]           1K alignment          buckets [128, 184)
#   [64K+1, 126K]         8K alignment          buckets [184, ...)
_GROUPS = (
    (128, 3),
    (1024, 4),
    (8 * 1024, 7),
    (64 * 1024, 10),
    (MAX_INDEXED, 13),
)


def round_up_to(size: int, align: int) -> int:
    """Round ``size`` up to a multiple of ``align``, a power of two."""
    if align <= 0 or align & (align - 1):
        raise ValueError(f"alignment must be a positive power of two, got {align}")
    if size < 0:
        raise ValueError(f"size must not be negative, got {size}")
    return (size + align - 1) & ~(align - 1)


def round_up(size: int) -> int:
    """Round ``size`` up to the alignment of its size class."""
    for upper, shift in _GROUPS[:-1]:
        if size <= upper:
            return round_up_to(size, 1 << shift)
    return round_up_to(size, PAGE_SIZE)


def index(size: int) -> int:
    """Return the free-list bucket that serves objects of ``size`` bytes."""
    if size < 1 or size > MAX_BYTES:
        raise ValueError(f"size {size} is outside [1, {MAX_BYTES}]")
    lower = 0
    offset = 0
    for upper, shift in _GROUPS:
        if size <= upper:
            return ((size - lower + (1 << shift) - 1) >> shift) - 1 + offset
        offset += (upper - lower) >> shift
        lower = upper
    raise ValueError(f"size {size} has no size class (limit {MAX_INDEXED})")


def num_move_size(size: int) -> int:
    """Return how many objects a thread cache fetches from the central cache at most."""
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")
    return max(2, min(512, MAX_BYTES // size))


def num_move_page(size: int) -> int:
    """Return how many pages a central-cache span for ``size`` objects should hold."""
    pages = (size * num_move_size(size)) >> PAGE_SHIFT
    return pages or 1