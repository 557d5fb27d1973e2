"""A fixed-type object pool that recycles released objects."""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class ObjectPool(Generic[T]):
    """Creates objects with ``factory`` and hands released ones out again first.

    A recycled object is passed to ``reset``, when given, before it is returned.
    """

    def __init__(
        self, factory: Callable[[], T], reset: Optional[Callable[[T], None]] = None
    ) -> None:
        self._factory = factory
        self._reset = reset
        self._free: list[T] = []

    def new(self) -> T:
        if self._free:
            obj = self._free.pop()
            if self._reset is not None:
                self._reset(obj)
            return obj
        return self._factory()

    def delete(self, obj: T) -> None:
        self._free.append(obj)

    def __len__(self) -> int:
        """Number of released objects waiting to be reused."""
        return len(self._free)