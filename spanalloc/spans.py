"""Free lists of objects and doubly linked lists of page spans."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from .sizeclass import PAGE_SHIFT


class FreeList:
    """A LIFO list of free objects with a growing batch limit."""

    def __init__(self) -> None:
        self._items: list[Any] = []
        self.max_size = 1

    def push(self, obj: Any) -> None:
        if obj is None:
            raise ValueError("cannot push None onto a free list")
        self._items.append(obj)

    def pop(self) -> Any:
        if not self._items:
            raise IndexError("pop from an empty free list")
        return self._items.pop()

    def push_range(self, objs: Iterable[Any]) -> None:
        """Put ``objs`` at the front so that they pop in the given order."""
        objs = list(objs)
        if not objs:
            raise ValueError("cannot push an empty range")
        self._items.extend(reversed(objs))

    def pop_range(self, n: int) -> list[Any]:
        """Remove and return the first ``n`` objects in pop order."""
        if n < 1 or n > len(self._items):
            raise ValueError(f"cannot pop {n} objects from a list of {len(self._items)}")
        taken = self._items[-n:]
        del self._items[-n:]
        taken.reverse()
        return taken

    def empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


@dataclass(eq=False)
class Span:
    """A run of ``n`` contiguous pages starting at page ``page_id``."""

    page_id: int = 0
    n: int = 0
    obj_size: int = 0
    use_count: int = 0
    free_list: list = field(default_factory=list)
    is_use: bool = False
    prev: Optional["Span"] = field(default=None, repr=False)
    next: Optional["Span"] = field(default=None, repr=False)

    @property
    def address(self) -> int:
        """Address of the first byte of the span."""
        return self.page_id << PAGE_SHIFT


class SpanList:
    """A doubly linked list of spans guarded by its own lock."""

    def __init__(self) -> None:
        self._head = Span()
        self._head.prev = self._head
        self._head.next = self._head
        self.lock = threading.Lock()

    def push_front(self, span: Span) -> None:
        self.insert(self._head.next, span)

    def pop_front(self) -> Span:
        if self.empty():
            raise IndexError("pop from an empty span list")
        front = self._head.next
        self.erase(front)
        return front

    def insert(self, pos: Span, span: Span) -> None:
        """Link ``span`` in front of ``pos``."""
        if pos is None or pos.prev is None:
            raise ValueError("insert position is not in a list")
        if span is None or span.next is not None:
            raise ValueError("span is already linked into a list")
        prev = pos.prev
        span.prev = prev
        span.next = pos
        prev.next = span
        pos.prev = span

    def erase(self, span: Span) -> None:
        if span is self._head:
            raise ValueError("cannot erase the list head")
        if span.next is None or span.prev is None:
            raise ValueError("span is not linked into a list")
        span.prev.next = span.next
        span.next.prev = span.prev
        span.prev = None
        span.next = None

    def empty(self) -> bool:
        return self._head.next is self._head

    def __iter__(self) -> Iterator[Span]:
        node = self._head.next
        while node is not self._head:
            following = node.next
            yield node
            node = following