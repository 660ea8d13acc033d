"""Hooks for narrating tree operations without coupling the tree to any output."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from datastore.reading_tree import Node

Direction = Literal["left", "right"]

trace_logger = logging.getLogger("datastore.trace")


class TreeObserver:
    """No-op base; subclasses override only the events they care about."""

    def on_insert_root(self, node: Node) -> None:
        pass

    def on_descend(self, node: Node, direction: Direction) -> None:
        pass

    def on_inserted(self, node: Node, depth: int) -> None:
        pass

    def on_search_start(self, timestamp: int) -> None:
        pass

    def on_visit(self, node: Node) -> None:
        pass

    def on_found(self, node: Node) -> None:
        pass

    def on_not_found(self, timestamp: int) -> None:
        pass

    def on_traverse(self, node_count: int) -> None:
        pass


class LoggingTreeObserver(TreeObserver):
    """Route every tree event to the ``datastore.trace`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or trace_logger

    def on_insert_root(self, node: Node) -> None:
        self._logger.debug(
            "Tree is empty, inserting root node.", extra={"timestamp": node.timestamp}
        )

    def on_descend(self, node: Node, direction: Direction) -> None:
        self._logger.debug(
            "Descending %s.", direction, extra={"timestamp": node.timestamp, "direction": direction}
        )

    def on_inserted(self, node: Node, depth: int) -> None:
        self._logger.debug(
            "Inserted node.", extra={"timestamp": node.timestamp, "depth": depth}
        )

    def on_search_start(self, timestamp: int) -> None:
        self._logger.debug("Starting search.", extra={"timestamp": timestamp})

    def on_visit(self, node: Node) -> None:
        self._logger.debug("Visiting node.", extra={"timestamp": node.timestamp})

    def on_found(self, node: Node) -> None:
        self._logger.info("Found reading.", extra={"timestamp": node.timestamp})

    def on_not_found(self, timestamp: int) -> None:
        self._logger.info("No reading for timestamp.", extra={"timestamp": timestamp})

    def on_traverse(self, node_count: int) -> None:
        self._logger.info("Traversing tree in order.", extra={"node_count": node_count})
