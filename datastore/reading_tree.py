"""Unbalanced binary search tree of temperature/humidity readings keyed by timestamp.

Equal timestamps are routed to the right subtree on both insert and search, so
duplicates are kept as distinct nodes and a search returns the first equal node
on the descent path. The tree never rebalances; callers shuffle insertion order
to keep it shallow. Every walk uses an explicit stack so degenerate (linear)
trees do not exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from threading import RLock
from typing import Callable, Iterator, List, Optional

from datastore.errors import AllocationError, InvalidArgument, NullHandle, TreeError
from datastore.observers import LoggingTreeObserver, TreeObserver
from models.records import Record

logger = logging.getLogger(__name__)

Visitor = Callable[[int, int, int], None]


@dataclass(slots=True, eq=False)
class Node:
    """A tree vertex owning one record and up to two children."""

    record: Record
    left: Optional["Node"] = None
    right: Optional["Node"] = None

    @property
    def timestamp(self) -> int:
        return self.record.timestamp


@dataclass(frozen=True)
class SearchTrace:
    """Outcome of a search plus the records passed on the way down."""

    timestamp: int
    node: Optional[Node]
    path: List[Record] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.node is not None


class ReadingTree:
    """Timestamp-ordered container of :class:`Record` values.

    A single re-entrant lock serialises access so one tree can be shared by
    several request handlers.
    """

    def __init__(self, observer: Optional[TreeObserver] = None) -> None:
        self._root: Optional[Node] = None
        self._count = 0
        self._closed = False
        self._lock = RLock()
        self.observer = observer or TreeObserver()

    @classmethod
    def create(cls, observer: Optional[TreeObserver] = None) -> "ReadingTree":
        """Allocate an empty tree, surfacing memory exhaustion as :class:`AllocationError`."""
        try:
            tree = cls(observer=observer)
        except MemoryError as exc:
            raise AllocationError("Failed to allocate reading tree.") from exc
        logger.info("Created temperature/humidity tree.")
        return tree

    def __enter__(self) -> "ReadingTree":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()

    def __len__(self) -> int:
        return self._count

    @property
    def root(self) -> Optional[Node]:
        return self._root

    @property
    def count(self) -> int:
        return self._count

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        with self._lock:
            self._ensure_open()
            if self._root is None:
                return 0
            tallest = 0
            stack = [(self._root, 1)]
            while stack:
                node, depth = stack.pop()
                tallest = max(tallest, depth)
                if node.left is not None:
                    stack.append((node.left, depth + 1))
                if node.right is not None:
                    stack.append((node.right, depth + 1))
            return tallest

    def insert(self, record: Record) -> Node:
        """Attach ``record`` as a new leaf and return its node."""
        with self._lock:
            self._ensure_open()
            try:
                new_node = Node(record=record)
            except MemoryError as exc:
                raise AllocationError(
                    f"Failed to allocate node for timestamp {record.timestamp}."
                ) from exc

            if self._root is None:
                self._root = new_node
                self._count += 1
                self.observer.on_insert_root(new_node)
                return new_node

            current = self._root
            depth = 1
            while True:
                depth += 1
                if record.timestamp < current.timestamp:
                    self.observer.on_descend(current, "left")
                    if current.left is None:
                        current.left = new_node
                        break
                    current = current.left
                else:
                    self.observer.on_descend(current, "right")
                    if current.right is None:
                        current.right = new_node
                        break
                    current = current.right

            self._count += 1
            self.observer.on_inserted(new_node, depth)
            return new_node

    def trace_search(self, timestamp: int) -> SearchTrace:
        """Search for ``timestamp`` and record every node visited before the match."""
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise InvalidArgument(f"Timestamp must be an integer, got {timestamp!r}.")
        if timestamp < 0:
            raise InvalidArgument(f"Invalid timestamp {timestamp}.")

        with self._lock:
            self._ensure_open()
            self.observer.on_search_start(timestamp)
            path: List[Record] = []
            current = self._root
            while current is not None and current.timestamp != timestamp:
                self.observer.on_visit(current)
                path.append(current.record)
                if timestamp < current.timestamp:
                    current = current.left
                else:
                    current = current.right

            if current is None:
                self.observer.on_not_found(timestamp)
            else:
                self.observer.on_found(current)
            return SearchTrace(timestamp=timestamp, node=current, path=path)

    def search(self, timestamp: int) -> Optional[Node]:
        """Return the node holding exactly ``timestamp``, or ``None``."""
        return self.trace_search(timestamp).node

    def in_order(self) -> List[Record]:
        """Snapshot of every record in ascending timestamp order."""
        with self._lock:
            self._ensure_open()
            return [node.record for node in self._walk_in_order()]

    def traverse(self, visitor: Visitor) -> int:
        """Call ``visitor(timestamp, temperature, humidity)`` per record in key order.

        The snapshot is taken under the lock; the visitor runs outside it so it
        may safely call back into the tree.
        """
        with self._lock:
            self._ensure_open()
            self.observer.on_traverse(self._count)
            records = [node.record for node in self._walk_in_order()]
        for record in records:
            visitor(record.timestamp, record.temperature, record.humidity)
        return len(records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.in_order())

    def destroy(self) -> int:
        """Release every node and close the tree; returns the number of nodes released.

        Further operations raise :class:`NullHandle`. Destroying a closed tree
        is a no-op.
        """
        with self._lock:
            if self._closed:
                return 0
            released = _release_post_order(self._root)
            self._root = None
            self._count = 0
            self._closed = True
        logger.info("Destroyed reading tree.", extra={"node_count": released})
        return released

    def _ensure_open(self) -> None:
        if self._closed:
            raise NullHandle("Reading tree has already been destroyed.")

    def _walk_in_order(self) -> Iterator[Node]:
        stack: List[Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right


def _release_post_order(root: Optional[Node]) -> int:
    if root is None:
        return 0
    released = 0
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            node.left = None
            node.right = None
            released += 1
            continue
        stack.append((node, True))
        if node.right is not None:
            stack.append((node.right, False))
        if node.left is not None:
            stack.append((node.left, False))
    return released


# Module-level API: accepts ``None`` as a handle and turns every tree failure
# into a "no result" outcome for loosely typed callers.


def create_tree(observer: Optional[TreeObserver] = None) -> Optional[ReadingTree]:
    try:
        return ReadingTree.create(observer=observer)
    except AllocationError as exc:
        logger.error("Failed to create tree.", extra={"reason": str(exc)})
        return None


def insert(tree: Optional[ReadingTree], record: Record) -> Optional[Node]:
    if tree is None:
        logger.error("Cannot insert into a missing tree.", extra={"timestamp": record.timestamp})
        return None
    try:
        return tree.insert(record)
    except TreeError as exc:
        logger.error("Insert failed.", extra={"timestamp": record.timestamp, "reason": str(exc)})
        return None


def search(tree: Optional[ReadingTree], timestamp: int) -> Optional[Node]:
    if tree is None:
        logger.error("Cannot search a missing tree.", extra={"timestamp": timestamp})
        return None
    try:
        return tree.search(timestamp)
    except TreeError as exc:
        logger.error("Search failed.", extra={"timestamp": timestamp, "reason": str(exc)})
        return None


def traverse(tree: Optional[ReadingTree], visitor: Visitor) -> int:
    if tree is None:
        logger.error("Cannot traverse a missing tree.")
        return 0
    try:
        return tree.traverse(visitor)
    except TreeError as exc:
        logger.error("Traversal failed.", extra={"reason": str(exc)})
        return 0


def destroy_tree(tree: Optional[ReadingTree]) -> None:
    if tree is None:
        return
    tree.destroy()


@lru_cache
def build_default_tree() -> ReadingTree:
    """Factory for the process-wide tree shared by the HTTP service."""
    return ReadingTree.create(observer=LoggingTreeObserver())
