import pytest

from spanalloc.pagemap import PageMap1, PageMap2, PageMap3

BITS = 9


@pytest.mark.parametrize("cls", [PageMap1, PageMap2])
def test_unset_keys_are_none(cls):
    pm = cls(BITS)
    assert pm.get(0) is None
    assert pm.get((1 << BITS) - 1) is None


@pytest.mark.parametrize("cls", [PageMap1, PageMap2])
def test_set_get_round_trip(cls):
    pm = cls(BITS)
    keys = [0, 1, 63, 64, (1 << BITS) - 1]
    for k in keys:
        pm.set(k, f"value-{k}")
    assert [pm.get(k) for k in keys] == [f"value-{k}" for k in keys]
    assert pm.get(2) is None


@pytest.mark.parametrize("cls", [PageMap1, PageMap2, PageMap3])
def test_out_of_range_get_is_none(cls):
    pm = cls(BITS)
    assert pm.get(1 << BITS) is None
    assert pm.get(-1) is None


@pytest.mark.parametrize("cls", [PageMap1, PageMap2, PageMap3])
def test_out_of_range_set_raises(cls):
    pm = cls(BITS)
    with pytest.raises(IndexError):
        pm.set(1 << BITS, "x")


def test_pagemap1_overwrite():
    pm = PageMap1(4)
    pm.set(3, "a")
    pm.set(3, "b")
    assert pm.get(3) == "b"


def test_pagemap2_is_preallocated():
    pm = PageMap2(BITS)
    assert pm.ensure(0, 1 << BITS) is True
    pm.set(200, "span")
    assert pm.get(200) == "span"


def test_pagemap2_ensure_beyond_range_fails():
    pm = PageMap2(BITS)
    assert pm.ensure((1 << BITS) - 1, 2) is False


def test_pagemap2_rejects_too_few_bits():
    with pytest.raises(ValueError):
        PageMap2(PageMap2.ROOT_BITS - 1)


def test_pagemap3_set_requires_ensure():
    pm = PageMap3(BITS)
    with pytest.raises(IndexError):
        pm.set(5, "x")
    assert pm.get(5) is None


def test_pagemap3_ensure_then_round_trip():
    pm = PageMap3(BITS)
    assert pm.ensure(5, 1) is True
    pm.set(5, "x")
    assert pm.get(5) == "x"
    assert pm.get(6) is None


def test_pagemap3_ensure_range_covers_all_keys():
    pm = PageMap3(BITS)
    assert pm.ensure(0, 1 << BITS) is True
    for k in range(0, 1 << BITS, 7):
        pm.set(k, k)
    assert all(pm.get(k) == k for k in range(0, 1 << BITS, 7))


def test_pagemap3_ensure_beyond_range_fails():
    pm = PageMap3(BITS)
    assert pm.ensure(1 << BITS, 1) is False


def test_pagemap3_rejects_impossible_bits():
    with pytest.raises(ValueError):
        PageMap3(1)