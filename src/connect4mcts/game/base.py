"""
Abstract game-state contract consumed by the search engine.

The engine doesn't know anything about the game rules. It only needs a
position to:
1. Identify itself (including whose turn it is)
2. Say which moves are legal
3. Copy itself and apply a move to the copy
4. Report whether the game is over and who won
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Hashable

# Returned when no move could be established (zero iterations, terminal root)
NO_MOVE = -1


class GameState(ABC):
    """
    A position in a two-player alternating-move game with a fixed action space.

    The first player is called "red". Moves are integer indices in
    ``range(num_actions)`` and the same index set applies at every position.

    Key concepts:
    - state_id(): canonical identity. Two states with equal identity are
      the same search node even when they are different objects.
    - is_red: True when red is the side to move in this state.
    - last_move: move index that produced this state (-1 for a root).
    """

    @property
    @abstractmethod
    def num_actions(self) -> int:
        """Size of the move-index range."""
        pass

    @abstractmethod
    def state_id(self) -> Hashable:
        """Return a collision-free identity for this position and side to move."""
        pass

    @abstractmethod
    def valid_move(self, move: int) -> bool:
        """Return True if ``move`` is legal in this position."""
        pass

    @abstractmethod
    def clone(self) -> GameState:
        """
        Return an independent copy.

        Mutating the clone must not affect the original.
        """
        pass

    @abstractmethod
    def add_piece(self, move: int) -> None:
        """Apply a legal move in place."""
        pass

    @property
    @abstractmethod
    def game_over(self) -> bool:
        """Whether this position is terminal (win or draw)."""
        pass

    @property
    @abstractmethod
    def red_win(self) -> bool:
        """Whether red won. Only meaningful when ``game_over`` is True."""
        pass

    @property
    @abstractmethod
    def is_red(self) -> bool:
        """Whether red is the side to move."""
        pass

    @property
    @abstractmethod
    def last_move(self) -> int:
        """Move that produced this state from its parent."""
        pass

    @property
    def is_draw(self) -> bool:
        """
        Whether the game ended without a winner.

        The search never needs this (a draw simply isn't a red win), so
        the default says no. Games with draws should override it.
        """
        return False

    def legal_moves(self) -> list[int]:
        """
        Return legal move indices in ascending order.

        Default implementation scans valid_move(); games can override
        for efficiency.
        """
        return [m for m in range(self.num_actions) if self.valid_move(m)]

    def render(self) -> str:
        """
        Render state as string for display.

        Optional - default returns empty string.
        """
        return ""
