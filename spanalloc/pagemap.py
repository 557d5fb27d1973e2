"""Radix maps from page numbers to arbitrary values."""

from __future__ import annotations

from typing import Any, Optional


class PageMap1:
    """A single flat array covering ``2**bits`` keys."""

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError(f"bits must not be negative, got {bits}")
        self.bits = bits
        self._array: list[Any] = [None] * (1 << bits)

    def get(self, k: int) -> Optional[Any]:
        """Return the value for ``k``, or None if unset or out of range."""
        if k < 0 or k >> self.bits:
            return None
        return self._array[k]

    def set(self, k: int, v: Any) -> None:
        if k < 0 or k >> self.bits:
            raise IndexError(f"key {k} is out of range")
        self._array[k] = v


class PageMap2:
    """A two-level radix tree: 32 root entries, each a leaf of the remaining bits."""

    ROOT_BITS = 5

    def __init__(self, bits: int) -> None:
        if bits < self.ROOT_BITS:
            raise ValueError(f"bits must be at least {self.ROOT_BITS}, got {bits}")
        self.bits = bits
        self._root_length = 1 << self.ROOT_BITS
        self._leaf_bits = bits - self.ROOT_BITS
        self._leaf_length = 1 << self._leaf_bits
        self._root: list[Optional[list[Any]]] = [None] * self._root_length
        self.preallocate_more_memory()

    def get(self, k: int) -> Optional[Any]:
        if k < 0 or k >> self.bits:
            return None
        leaf = self._root[k >> self._leaf_bits]
        if leaf is None:
            return None
        return leaf[k & (self._leaf_length - 1)]

    def set(self, k: int, v: Any) -> None:
        if k < 0:
            raise IndexError(f"key {k} is out of range")
        i1 = k >> self._leaf_bits
        if i1 >= self._root_length:
            raise IndexError(f"key {k} is out of range")
        leaf = self._root[i1]
        if leaf is None:
            raise IndexError(f"key {k} has not been ensured")
        leaf[k & (self._leaf_length - 1)] = v

    def ensure(self, start: int, n: int) -> bool:
        """Make room for keys ``start .. start+n-1``; False if any is out of range."""
        if n <= 0:
            return True
        if start < 0:
            return False
        key = start
        last = start + n - 1
        while key <= last:
            i1 = key >> self._leaf_bits
            if i1 >= self._root_length:
                return False
            if self._root[i1] is None:
                self._root[i1] = [None] * self._leaf_length
            key = (i1 + 1) << self._leaf_bits
        return True

    def preallocate_more_memory(self) -> None:
        """Allocate leaves for every possible key."""
        self.ensure(0, 1 << self.bits)


class PageMap3:
    """A three-level radix tree whose nodes are created on demand by :meth:`ensure`."""

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError(f"bits must not be negative, got {bits}")
        self.bits = bits
        self._interior_bits = (bits + 2) // 3
        self._interior_length = 1 << self._interior_bits
        self._leaf_bits = bits - 2 * self._interior_bits
        if self._leaf_bits < 0:
            raise ValueError(f"bits={bits} leaves no room for the leaf level")
        self._leaf_length = 1 << self._leaf_bits
        self._root: list[Optional[list]] = [None] * self._interior_length

    def _split(self, k: int) -> tuple[int, int, int]:
        i1 = k >> (self._leaf_bits + self._interior_bits)
        i2 = (k >> self._leaf_bits) & (self._interior_length - 1)
        i3 = k & (self._leaf_length - 1)
        return i1, i2, i3

    def get(self, k: int) -> Optional[Any]:
        if k < 0 or k >> self.bits:
            return None
        i1, i2, i3 = self._split(k)
        node = self._root[i1]
        if node is None or node[i2] is None:
            return None
        return node[i2][i3]

    def set(self, k: int, v: Any) -> None:
        if k < 0 or k >> self.bits:
            raise IndexError(f"key {k} is out of range")
        i1, i2, i3 = self._split(k)
        node = self._root[i1]
        if node is None or node[i2] is None:
            raise IndexError(f"key {k} has not been ensured")
        node[i2][i3] = v

    def ensure(self, start: int, n: int) -> bool:
        """Create the nodes for keys ``start .. start+n-1``; False if any is out of range."""
        if n <= 0:
            return True
        if start < 0:
            return False
        key = start
        last = start + n - 1
        while key <= last:
            i1, i2, _ = self._split(key)
            if i1 >= self._interior_length:
                return False
            if self._root[i1] is None:
                self._root[i1] = [None] * self._interior_length
            node = self._root[i1]
            if node[i2] is None:
                node[i2] = [None] * self._leaf_length
            key = ((key >> self._leaf_bits) + 1) << self._leaf_bits
        return True