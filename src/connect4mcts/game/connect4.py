"""
Connect 4 game implementation.

Rules:
- 6 rows x 7 columns board by default (any size with rows, cols >= win_length
  in at least one direction)
- Players drop pieces into columns, red moves first
- First to get 4 in a row (horizontal, vertical, or diagonal) wins
- If board fills up with no winner, it's a draw

Board representation uses a fixed perspective (not canonical form), because
the search engine credits outcomes from red's point of view:
- +1 = red pieces
- -1 = yellow pieces
- 0 = empty
Row 0 is the top of the board.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
import numpy as np

from .base import GameState


# Board dimensions
ROWS = 6
COLS = 7
WIN_LENGTH = 4

RED = 1
YELLOW = -1

# Line directions checked through the last placed piece
_DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


@dataclass(eq=False)
class Connect4State(GameState):
    """Mutable Connect 4 position. Use clone() before add_piece() to branch."""

    rows: int = ROWS
    cols: int = COLS
    win_length: int = WIN_LENGTH
    board: Optional[np.ndarray] = None  # shape (rows, cols), dtype int8
    to_move: int = RED
    last_col: int = -1
    winner: int = 0

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Board must have at least one row and column, got {self.rows}x{self.cols}")
        if self.win_length < 2 or self.win_length > max(self.rows, self.cols):
            raise ValueError(
                f"win_length must be between 2 and {max(self.rows, self.cols)}, got {self.win_length}"
            )
        if self.board is None:
            self.board = np.zeros((self.rows, self.cols), dtype=np.int8)
        if self.board.shape != (self.rows, self.cols):
            raise ValueError(f"Board must be {self.rows}x{self.cols}")
        if self.board.dtype != np.int8:
            self.board = self.board.astype(np.int8)
        if self.to_move not in (RED, YELLOW):
            raise ValueError(f"to_move must be {RED} or {YELLOW}, got {self.to_move}")

    @classmethod
    def from_moves(
        cls,
        moves: Iterable[int],
        rows: int = ROWS,
        cols: int = COLS,
        win_length: int = WIN_LENGTH,
    ) -> Connect4State:
        """Build a position by playing ``moves`` from the empty board."""
        state = cls(rows=rows, cols=cols, win_length=win_length)
        for move in moves:
            state.add_piece(move)
        return state

    # --- GameState contract ---

    @property
    def num_actions(self) -> int:
        return self.cols

    def state_id(self) -> bytes:
        """Board geometry, board bytes and a side-to-move tag."""
        shape = f"{self.rows}x{self.cols}x{self.win_length}:".encode()
        return shape + self.board.tobytes() + (b"r" if self.to_move == RED else b"y")

    def valid_move(self, move: int) -> bool:
        """A move is legal if it names a column whose top cell is empty."""
        return 0 <= move < self.cols and bool(self.board[0, move] == 0)

    def clone(self) -> Connect4State:
        return Connect4State(
            rows=self.rows,
            cols=self.cols,
            win_length=self.win_length,
            board=self.board.copy(),
            to_move=self.to_move,
            last_col=self.last_col,
            winner=self.winner,
        )

    def add_piece(self, move: int) -> None:
        """
        Drop the side to move's piece in column ``move``.

        Raises:
            ValueError: if the game is over, the column is out of range
                or the column is full
        """
        if self.winner != 0:
            raise ValueError("Game is already over")
        if move < 0 or move >= self.cols:
            raise ValueError(f"Invalid move {move}, must be 0-{self.cols - 1}")
        if self.board[0, move] != 0:
            raise ValueError(f"Column {move} is full")

        # Find lowest empty row in column
        row = self.rows - 1
        while self.board[row, move] != 0:
            row -= 1

        self.board[row, move] = self.to_move
        if self._connects(row, move):
            self.winner = self.to_move

        self.last_col = move
        self.to_move = -self.to_move

    @property
    def game_over(self) -> bool:
        return self.winner != 0 or self.is_full

    @property
    def red_win(self) -> bool:
        return self.winner == RED

    @property
    def is_red(self) -> bool:
        return self.to_move == RED

    @property
    def last_move(self) -> int:
        return self.last_col

    # --- Helpers ---

    @property
    def is_full(self) -> bool:
        """Board is full when every top cell is taken."""
        return bool(np.all(self.board[0, :] != 0))

    @property
    def is_draw(self) -> bool:
        return self.winner == 0 and self.is_full

    @property
    def num_pieces(self) -> int:
        return int(np.count_nonzero(self.board))

    def legal_moves(self) -> list[int]:
        """Return columns that aren't full."""
        return [int(c) for c in np.flatnonzero(self.board[0, :] == 0)]

    def render(self) -> str:
        """Render board as ASCII art, marking the last move."""
        symbols = {0: ".", RED: "R", YELLOW: "Y"}

        lines = []
        lines.append(" " + " ".join(str(i) for i in range(self.cols)))
        lines.append("-" * (self.cols * 2 + 1))

        for r in range(self.rows):
            row_str = "|" + "|".join(
                symbols[int(self.board[r, c])] for c in range(self.cols)
            ) + "|"
            lines.append(row_str)

        lines.append("-" * (self.cols * 2 + 1))

        if self.last_col >= 0:
            lines.append(" " * (self.last_col * 2 + 1) + "^")

        return "\n".join(lines)

    def _connects(self, row: int, col: int) -> bool:
        """Check if the piece at (row, col) completes a line of win_length."""
        player = self.board[row, col]
        for dr, dc in _DIRECTIONS:
            count = 1
            for sign in (1, -1):
                r, c = row + sign * dr, col + sign * dc
                while 0 <= r < self.rows and 0 <= c < self.cols and self.board[r, c] == player:
                    count += 1
                    r += sign * dr
                    c += sign * dc
            if count >= self.win_length:
                return True
        return False


def initial_state(rows: int = ROWS, cols: int = COLS, win_length: int = WIN_LENGTH) -> Connect4State:
    """Create the initial empty board state."""
    return Connect4State(rows=rows, cols=cols, win_length=win_length)


def parse_moves(text: str) -> list[int]:
    """
    Parse a move string such as ``"3344"`` or ``"3,3,4,10"``.

    Comma or whitespace separated input allows columns above 9.
    """
    text = text.strip()
    if not text:
        return []
    if "," in text or " " in text:
        parts = [p for p in text.replace(",", " ").split() if p]
    else:
        parts = list(text)
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"Invalid move string {text!r}") from None
