"""Fixed-capacity least-recently-used cache.

A hash map from key to node plus a doubly linked list ordered by recency:
head is the most recently used node, tail the least. Every operation is O(1).
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Generic, TypeVar

from swaprouter.errors import InvalidInputError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Node:
    __slots__ = ("key", "value", "prev", "next")

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value
        # prev points toward the tail (older), next toward the head (newer)
        self.prev: _Node | None = None
        self.next: _Node | None = None


class LRUCache(Generic[K, V]):
    """LRU cache with a fixed maximum number of entries.

    Args:
        max_size: Capacity, must be >= 1

    Raises:
        InvalidInputError: If max_size < 1
    """

    def __init__(self, max_size: int) -> None:
        if max_size < 1:
            raise InvalidInputError(f"max_size must be at least 1, got {max_size}")
        self._max_size = max_size
        self._map: dict[K, _Node] = {}
        self._head: _Node | None = None
        self._tail: _Node | None = None

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def size(self) -> int:
        return len(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def clear(self) -> None:
        """Drop every entry."""
        self._map = {}
        self._head = None
        self._tail = None

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for key and mark it most recently used.

        Returns default when key is absent. Stored values may themselves be
        falsy, so callers that need to tell "absent" apart pass a sentinel.
        """
        node = self._map.get(key)
        if node is None:
            return default
        self._move_to_head(node)
        return node.value

    def set(self, key: K, value: V) -> None:
        """Insert or update key as the most recently used entry.

        Inserting into a full cache evicts the least recently used entry first.
        """
        node = self._map.get(key)
        if node is not None:
            node.value = value
            self._move_to_head(node)
            return

        if len(self._map) >= self._max_size:
            self._evict_tail()

        node = _Node(key, value)
        self._map[key] = node
        self._push_head(node)

    def peek(self, key: K, default: V | None = None) -> V | None:
        """Return the value for key without touching recency."""
        node = self._map.get(key)
        return default if node is None else node.value

    def peek_all(self) -> list[tuple[K, V]]:
        """Entries from least to most recently used, recency unchanged.

        Raises:
            RuntimeError: If the linked list and the map disagree
        """
        entries: list[tuple[K, V]] = []
        node = self._tail
        prev: _Node | None = None
        while node is not None:
            if node.prev is not prev:
                raise RuntimeError(f"LRU list is corrupted at key {node.key!r}")
            entries.append((node.key, node.value))
            prev = node
            node = node.next

        if prev is not self._head or len(entries) != len(self._map):
            raise RuntimeError(
                f"LRU list holds {len(entries)} nodes but map holds {len(self._map)}"
            )
        return entries

    # -------------------------------------------------------------------------
    # Linked list helpers
    # -------------------------------------------------------------------------

    def _push_head(self, node: _Node) -> None:
        node.prev = self._head
        node.next = None
        if self._head is not None:
            self._head.next = node
        self._head = node
        if self._tail is None:
            self._tail = node

    def _unlink(self, node: _Node) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self._tail = node.next
        if node.next is not None:
            node.next.prev = node.prev
        else:
            self._head = node.prev
        node.prev = None
        node.next = None

    def _move_to_head(self, node: _Node) -> None:
        if node is self._head:
            return
        self._unlink(node)
        self._push_head(node)

    def _evict_tail(self) -> None:
        tail = self._tail
        if tail is None:
            return
        self._unlink(tail)
        del self._map[tail.key]

    def __repr__(self) -> str:
        return f"LRUCache(size={len(self._map)}, max_size={self._max_size})"


__all__ = ["LRUCache"]
