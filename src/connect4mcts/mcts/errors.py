"""
Search invariant violations.

These are never raised for expected runtime conditions. Each one means the
traversal, expansion and backpropagation phases disagree about the tree,
so none of them are caught inside the engine.
"""

from __future__ import annotations


class SearchError(RuntimeError):
    """Base class for fatal search errors."""


class NullPathError(SearchError):
    """A path or rollout contained a missing node."""


class UnexploredNodeError(SearchError):
    """A node expected to have statistics has no record."""


class NoValidChildError(SearchError):
    """No legal (or no unexplored) child where one was required."""


class NoMoveFoundError(SearchError):
    """Backpropagation found no root-adjacent node to take a move from."""
