"""MCTS module."""

from .errors import (
    SearchError,
    NullPathError,
    UnexploredNodeError,
    NoValidChildError,
    NoMoveFoundError,
)
from .search import SearchEngine, FINAL_MOVE_POLICIES
from .stats import ScoreRecord, EngineStats

__all__ = [
    "SearchEngine",
    "FINAL_MOVE_POLICIES",
    "ScoreRecord",
    "EngineStats",
    "SearchError",
    "NullPathError",
    "UnexploredNodeError",
    "NoValidChildError",
    "NoMoveFoundError",
]
