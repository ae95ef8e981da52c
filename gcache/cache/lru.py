"""
LRU Cache Engine

This module implements the fixed-capacity, least-recently-used cache
shared by every client connection.

Structure:
- A dict maps each key to its Node for O(1) lookup
- A DoublyLinkedList keeps nodes in recency order (front = MRU, back = LRU)
- Both are only touched while holding the cache's ReadWriteLock

get() promotes the entry it reads, so it takes the lock in exclusive mode
just like put(). Only size(), contains() and the inspection helpers run
under the shared (read) lock.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .node import DoublyLinkedList, Entry, Node
from .rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


class InvalidCapacityError(ValueError):
    """Raised when a cache is constructed with a non-positive capacity."""


class LRUCache:
    """
    Thread-safe LRU cache with O(1) get, put, delete and eviction.

    Usage:
        cache = LRUCache(capacity=2)
        cache.put("a", "1")
        cache.put("b", "2")
        cache.get("a")          # ("1", True), "a" is now most recently used
        cache.put("c", "3")     # evicts "b"

    Attributes:
        capacity: Maximum number of entries, fixed at construction
    """

    def __init__(self, capacity: int):
        """
        Initialize an empty cache.

        Args:
            capacity: Maximum number of entries (must be a positive int)

        Raises:
            InvalidCapacityError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidCapacityError(
                f"LRUCache capacity must be greater than 0, got {capacity!r}"
            )

        self._capacity = capacity
        self._index: Dict[str, Node] = {}
        self._order = DoublyLinkedList()
        self._lock = ReadWriteLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> Tuple[Optional[str], bool]:
        """
        Look up a key and mark it as most recently used.

        Args:
            key: The key to look up

        Returns:
            (value, True) if the key is present, (None, False) otherwise.
            A miss leaves the cache untouched.

        Time Complexity: O(1) average
        """
        with self._lock.write_locked():
            node = self._index.get(key)
            if node is None:
                self._misses += 1
                return None, False

            self._order.move_to_front(node)
            self._hits += 1
            return node.entry.value, True

    def put(self, key: str, value: str) -> None:
        """
        Insert or update a key-value pair.

        An existing key is overwritten in place and promoted. A new key
        arriving while the cache is full evicts the least recently used
        entry first.

        Time Complexity: O(1) average
        """
        with self._lock.write_locked():
            node = self._index.get(key)
            if node is not None:
                node.entry.value = value
                self._order.move_to_front(node)
                return

            if len(self._order) >= self._capacity:
                self._evict_lru()

            node = Node(Entry(key, value))
            self._order.attach_front(node)
            self._index[key] = node

    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key was present and removed, False otherwise
        """
        with self._lock.write_locked():
            node = self._index.pop(key, None)
            if node is None:
                return False
            self._order.detach(node)
            return True

    def contains(self, key: str) -> bool:
        """Check whether a key is present without changing recency order."""
        with self._lock.read_locked():
            return key in self._index

    def size(self) -> int:
        """Return the current number of entries."""
        with self._lock.read_locked():
            return len(self._order)

    def clear(self) -> None:
        """Discard every entry. Capacity is unchanged."""
        with self._lock.write_locked():
            self._index = {}
            self._order = DoublyLinkedList()

    def _evict_lru(self) -> None:
        # Caller holds the write lock.
        tail = self._order.back()
        if tail is None:
            logger.warning("Eviction requested on an empty cache, skipping")
            return

        self._order.detach(tail)
        del self._index[tail.entry.key]
        self._evictions += 1
        logger.debug(f"Evicted key {tail.entry.key!r}")

    def snapshot(self) -> List[Tuple[str, str]]:
        """
        Return all entries ordered from most to least recently used.

        Does not affect recency order.
        """
        with self._lock.read_locked():
            return [(node.entry.key, node.entry.value) for node in self._order]

    def dump(self) -> str:
        """Render the cache contents on one line for debugging."""
        entries = self.snapshot()
        body = " ".join(f"[{key} : {value}]" for key, value in entries)
        return f"Cache state (MRU->LRU, size: {len(entries)}/{self._capacity}): {body}".rstrip()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache.

        Returns:
            Dictionary containing:
            - size: Current number of entries
            - capacity: Maximum number of entries
            - utilization: size as a fraction of capacity
            - hits / misses: get() outcomes since construction
            - evictions: Entries removed to make room for new keys
        """
        with self._lock.read_locked():
            size = len(self._order)
            return {
                "size": size,
                "capacity": self._capacity,
                "utilization": size / self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"LRUCache(capacity={self._capacity}, size={self.size()})"
