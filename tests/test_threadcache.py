import pytest

from spanalloc.centralcache import CentralCache
from spanalloc.memory import AddressSpace
from spanalloc.pagecache import PageCache
from spanalloc.sizeclass import MAX_BYTES, index
from spanalloc.spans import FreeList
from spanalloc.threadcache import ThreadCache


@pytest.fixture
def central():
    return CentralCache(PageCache(AddressSpace()))


@pytest.fixture
def cache(central):
    return ThreadCache(central)


def test_freed_object_is_reused(cache):
    ptr = cache.allocate(6)
    cache.deallocate(ptr, 8)
    assert cache.allocate(6) == ptr


def test_allocations_are_distinct_and_aligned(cache):
    ptrs = [cache.allocate(6) for _ in range(1024)]
    assert len(set(ptrs)) == len(ptrs)
    assert all(p % 8 == 0 for p in ptrs)


def test_fetch_grows_batch_limit(cache):
    bucket = index(16)
    before = cache.free_lists[bucket].max_size
    ptr = cache.fetch_from_central_cache(bucket, 16)
    assert cache.free_lists[bucket].max_size == before + 1
    assert cache.central_cache.page_cache.map_object_to_span(ptr).obj_size == 16


def test_second_fetch_caches_extras(cache):
    bucket = index(16)
    cache.fetch_from_central_cache(bucket, 16)
    cache.fetch_from_central_cache(bucket, 16)
    assert len(cache.free_lists[bucket]) >= 1


def test_list_too_long_returns_objects(cache, central):
    objs = central.fetch_range_obj(3, 16)
    span = central.page_cache.map_object_to_span(objs[0])
    free_list = FreeList()
    free_list.push_range(objs)
    free_list.max_size = 3
    cache.list_too_long(free_list, 16)
    assert free_list.empty()
    assert span.use_count == 0
    assert span.is_use is False


def test_round_trip_returns_everything(cache, central):
    ptrs = [cache.allocate(16) for _ in range(50)]
    span = central.page_cache.map_object_to_span(ptrs[0])
    for ptr in ptrs:
        cache.deallocate(ptr, 16)
    cached = len(cache.free_lists[index(16)])
    assert span.use_count == cached


def test_too_large_rejected(cache):
    with pytest.raises(ValueError):
        cache.allocate(MAX_BYTES + 1)


def test_deallocate_none_rejected(cache):
    with pytest.raises(ValueError):
        cache.deallocate(None, 8)