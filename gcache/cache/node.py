"""
Ordering Structures for the LRU Cache

This module provides the recency-ordered doubly linked list used by
LRUCache. The list knows nothing about keys, locking or capacity; the
cache keeps a dict from key to Node alongside it.

Orientation:
    front (head) -> most recently used
    back  (tail) -> least recently used
"""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class Entry:
    """A cached key-value pair. The value is updated in place on overwrite."""
    key: str
    value: str


class Node:
    """
    A list node owning one Entry.

    Attributes:
        entry: The key-value pair held by this node
        prev: Neighbour towards the front (more recently used)
        next: Neighbour towards the back (less recently used)
    """

    __slots__ = ("entry", "prev", "next")

    def __init__(self, entry: Entry):
        self.entry = entry
        self.prev: Optional["Node"] = None
        self.next: Optional["Node"] = None

    def __repr__(self) -> str:
        return f"Node({self.entry.key!r}, {self.entry.value!r})"


class DoublyLinkedList:
    """
    Doubly linked list with O(1) attach-at-front and detach.

    Usage:
        order = DoublyLinkedList()
        node = Node(Entry("a", "1"))
        order.attach_front(node)
        order.detach(node)
    """

    def __init__(self):
        self.head: Optional[Node] = None
        self.tail: Optional[Node] = None
        self._count = 0

    def attach_front(self, node: Node) -> None:
        """
        Insert a node as the most recently used element.

        Time Complexity: O(1)
        """
        node.prev = None
        node.next = self.head

        if self.head is not None:
            self.head.prev = node
        else:
            self.tail = node

        self.head = node
        self._count += 1

    def detach(self, node: Node) -> None:
        """
        Unlink a node from wherever it sits in the list.

        The node must currently belong to this list. Its links are cleared
        so it can be re-attached.

        Time Complexity: O(1)
        """
        if node is self.head:
            self.head = node.next
        if node is self.tail:
            self.tail = node.prev

        if node.prev is not None:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev

        node.prev = None
        node.next = None
        self._count -= 1

    def move_to_front(self, node: Node) -> None:
        """Promote a node already in the list to most recently used."""
        if node is self.head:
            return
        self.detach(node)
        self.attach_front(node)

    def front(self) -> Optional[Node]:
        """Return the most recently used node, or None if empty."""
        return self.head

    def back(self) -> Optional[Node]:
        """Return the least recently used node, or None if empty."""
        return self.tail

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Node]:
        """Walk the list from most to least recently used (debug helper)."""
        current = self.head
        while current is not None:
            yield current
            current = current.next
