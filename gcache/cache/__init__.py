"""Cache module for GCache."""

from .lru import InvalidCapacityError, LRUCache
from .node import DoublyLinkedList, Entry, Node
from .rwlock import ReadWriteLock

__all__ = [
    "DoublyLinkedList",
    "Entry",
    "InvalidCapacityError",
    "LRUCache",
    "Node",
    "ReadWriteLock",
]
