"""Failure conditions raised by the reading tree."""

from __future__ import annotations


class TreeError(Exception):
    """Base class for every reading-tree failure."""


class AllocationError(TreeError, MemoryError):
    """Memory for a tree or node could not be obtained."""


class InvalidArgument(TreeError, ValueError):
    """An operation received a value that can never be valid, such as a negative timestamp."""


class NullHandle(TreeError):
    """An operation targeted a missing or already destroyed tree."""
