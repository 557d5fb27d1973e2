import pytest

from spanalloc.centralcache import CentralCache
from spanalloc.memory import AddressSpace
from spanalloc.pagecache import PageCache
from spanalloc.sizeclass import index


@pytest.fixture
def central():
    return CentralCache(PageCache(AddressSpace()))


def test_fetch_returns_distinct_objects_of_one_span(central):
    objs = central.fetch_range_obj(4, 16)
    assert len(objs) == 4
    assert len(set(objs)) == 4
    span = central.page_cache.map_object_to_span(objs[0])
    assert all(central.page_cache.map_object_to_span(o) is span for o in objs)
    assert span.use_count == 4
    assert span.obj_size == 16
    assert span.is_use is True


def test_objects_are_size_aligned_from_span_start(central):
    objs = central.fetch_range_obj(5, 16)
    span = central.page_cache.map_object_to_span(objs[0])
    assert all((o - span.address) % 16 == 0 for o in objs)
    assert objs == sorted(objs)


def test_short_span_gives_what_it_has(central):
    size = 64 * 1024
    first = central.fetch_range_obj(1000, size)
    span = central.page_cache.map_object_to_span(first[0])
    assert len(first) < 1000
    assert span.use_count == len(first)
    assert span.free_list == []
    second = central.fetch_range_obj(1, size)
    assert central.page_cache.map_object_to_span(second[0]) is not span


def test_release_all_returns_span_to_page_cache(central):
    objs = central.fetch_range_obj(3, 32)
    span = central.page_cache.map_object_to_span(objs[0])
    central.release_list_to_spans(objs, 32)
    assert span.use_count == 0
    assert span.is_use is False
    assert list(central.span_lists[index(32)]) == []


def test_partial_release_keeps_span(central):
    objs = central.fetch_range_obj(3, 32)
    span = central.page_cache.map_object_to_span(objs[0])
    central.release_list_to_spans(objs[:2], 32)
    assert span.use_count == 1
    assert span.is_use is True
    assert list(central.span_lists[index(32)]) == [span]


def test_get_one_span_reuses_span_with_free_objects(central):
    objs = central.fetch_range_obj(1, 8)
    span_list = central.span_lists[index(8)]
    with span_list.lock:
        span = central.get_one_span(span_list, 8)
    assert span is central.page_cache.map_object_to_span(objs[0])


def test_zero_batch_rejected(central):
    with pytest.raises(ValueError):
        central.fetch_range_obj(0, 8)