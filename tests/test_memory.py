import pytest

from spanalloc.memory import AddressSpace
from spanalloc.sizeclass import PAGE_SIZE


def test_alloc_returns_page_aligned_nonzero_address():
    space = AddressSpace()
    address = space.alloc(1)
    assert address > 0
    assert address % PAGE_SIZE == 0


def test_allocations_do_not_overlap():
    space = AddressSpace()
    blocks = [(space.alloc(k), k) for k in (1, 3, 2, 5)]
    ranges = sorted((addr, addr + k * PAGE_SIZE) for addr, k in blocks)
    for (_, end), (start, _) in zip(ranges, ranges[1:]):
        assert end <= start


def test_pages_in_use_tracks_alloc_and_free():
    space = AddressSpace()
    a = space.alloc(2)
    space.alloc(3)
    assert space.pages_in_use == 5
    space.free(a)
    assert space.pages_in_use == 3


def test_freed_range_is_reused():
    space = AddressSpace()
    a = space.alloc(2)
    space.alloc(1)
    space.free(a)
    assert space.alloc(2) == a


def test_adjacent_freed_ranges_merge():
    space = AddressSpace()
    a = space.alloc(1)
    b = space.alloc(1)
    space.alloc(1)
    space.free(a)
    space.free(b)
    assert space.alloc(2) == a


def test_freeing_top_block_gives_same_address_again():
    space = AddressSpace()
    space.alloc(1)
    top = space.alloc(4)
    space.free(top)
    assert space.alloc(4) == top


def test_free_unknown_address_raises():
    space = AddressSpace()
    a = space.alloc(1)
    with pytest.raises(ValueError):
        space.free(a + PAGE_SIZE)
    with pytest.raises(ValueError):
        space.free(a + 8)


def test_double_free_raises():
    space = AddressSpace()
    a = space.alloc(1)
    space.free(a)
    with pytest.raises(ValueError):
        space.free(a)


def test_alloc_zero_pages_raises():
    with pytest.raises(ValueError):
        AddressSpace().alloc(0)


def test_exhaustion_raises_memory_error():
    space = AddressSpace(limit=4 * PAGE_SIZE)
    space.alloc(3)
    with pytest.raises(MemoryError):
        space.alloc(1)