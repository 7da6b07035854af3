"""
Search statistics.

Each distinct position seen by the engine has a ScoreRecord:
- wins: rollouts won by the player who moved into the position
- visits: iterations whose path passed through the position
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreRecord:
    """Win/visit counts for one position. Only ever incremented."""

    wins: int = 0
    visits: int = 0

    @property
    def win_ratio(self) -> float:
        """Fraction of visits credited as wins (0.0 when unvisited)."""
        return self.wins / self.visits if self.visits > 0 else 0.0


@dataclass(frozen=True)
class EngineStats:
    """Read-only snapshot of a SearchEngine."""

    expanded: int
    total_iterations: int
    games_played: int
    wins: int

    def __str__(self) -> str:
        return (
            f"Total Expanded: {self.expanded} "
            f"Total Iterations: {self.total_iterations} "
            f"Games Played: {self.games_played} "
            f"Wins: {self.wins}"
        )
