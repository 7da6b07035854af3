"""Game module - state contract and Connect 4 rules."""

from .base import GameState, NO_MOVE
from .connect4 import (
    ROWS,
    COLS,
    WIN_LENGTH,
    RED,
    YELLOW,
    Connect4State,
    initial_state,
    parse_moves,
)

__all__ = [
    "GameState",
    "NO_MOVE",
    "ROWS",
    "COLS",
    "WIN_LENGTH",
    "RED",
    "YELLOW",
    "Connect4State",
    "initial_state",
    "parse_moves",
]
