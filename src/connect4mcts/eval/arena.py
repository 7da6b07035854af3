"""
Arena for evaluating a search engine through head-to-head matches.

The engine plays against a uniform-random player or another engine,
alternating colours. Results are written to the engine's games-played
and wins counters, which the search loop itself never touches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional
import numpy as np

from ..game import Connect4State, GameState
from ..mcts import SearchEngine

# A player maps a position to a legal move
Player = Callable[[GameState], int]


@dataclass
class ArenaResult:
    """Results from arena evaluation."""

    wins: int
    losses: int
    draws: int
    total_games: int
    win_rate: float
    game_lengths: list[int] = field(default_factory=list)

    @property
    def score(self) -> float:
        """Win rate counting draws as half."""
        return (self.wins + 0.5 * self.draws) / self.total_games if self.total_games > 0 else 0.0

    @property
    def avg_game_length(self) -> float:
        return sum(self.game_lengths) / len(self.game_lengths) if self.game_lengths else 0.0


def engine_player(engine: SearchEngine, iterations: int) -> Player:
    """Wrap an engine as a player that searches ``iterations`` per move."""
    if iterations < 1:
        raise ValueError("An engine player needs at least one iteration per move")

    def play(state: GameState) -> int:
        return engine.search(state, iterations)

    return play


def random_player(rng: Optional[np.random.Generator] = None) -> Player:
    """Create a player that picks uniformly among legal moves."""
    rng = rng if rng is not None else np.random.default_rng()

    def play(state: GameState) -> int:
        moves = state.legal_moves()
        return moves[int(rng.integers(len(moves)))]

    return play


def play_match(
    red: Player,
    yellow: Player,
    start: Optional[GameState] = None,
) -> tuple[GameState, list[int]]:
    """
    Play one game to completion.

    Args:
        red: Player moving first
        yellow: Player moving second
        start: Starting position (empty Connect 4 board if None)

    Returns:
        (final_state, moves)
    """
    state = start.clone() if start is not None else Connect4State()
    moves: list[int] = []

    while not state.game_over:
        player = red if state.is_red else yellow
        move = player(state)
        if not state.valid_move(move):
            raise ValueError(f"Player chose illegal move {move}")
        state.add_piece(move)
        moves.append(move)

    return state, moves


class Arena:
    """
    Arena for engine evaluation matches.

    Args:
        engine: Engine under test
        iterations: Search iterations per engine move
        start_factory: Builds the starting position for each game
    """

    def __init__(
        self,
        engine: SearchEngine,
        iterations: int = 1000,
        start_factory: Callable[[], GameState] = Connect4State,
    ):
        self.engine = engine
        self.iterations = iterations
        self.start_factory = start_factory

    def evaluate(
        self,
        opponent: Player,
        num_games: int = 20,
        progress_callback: Callable[[int, str], None] = None,
    ) -> ArenaResult:
        """
        Evaluate the engine against ``opponent``.

        Plays num_games matches, alternating who goes first. Each finished
        game is recorded on the engine with record_game().

        Args:
            opponent: Opposing player
            num_games: Number of games to play
            progress_callback: Optional callback(games_completed, result)

        Returns:
            ArenaResult from the engine's perspective
        """
        player = engine_player(self.engine, self.iterations)

        wins = 0
        losses = 0
        draws = 0
        lengths: list[int] = []

        for i in range(num_games):
            # Alternate who plays first
            engine_is_red = i % 2 == 0
            if engine_is_red:
                final, moves = play_match(player, opponent, self.start_factory())
            else:
                final, moves = play_match(opponent, player, self.start_factory())
            lengths.append(len(moves))

            won = self._engine_won(final, engine_is_red)
            if won is None:
                draws += 1
                result = "D"
            elif won:
                wins += 1
                result = "W"
            else:
                losses += 1
                result = "L"

            self.engine.record_game(bool(won))

            if progress_callback:
                progress_callback(i + 1, result)

        total = wins + losses + draws
        win_rate = wins / total if total > 0 else 0.0

        return ArenaResult(
            wins=wins,
            losses=losses,
            draws=draws,
            total_games=total,
            win_rate=win_rate,
            game_lengths=lengths,
        )

    @staticmethod
    def _engine_won(final: GameState, engine_is_red: bool) -> Optional[bool]:
        """True/False for a decided game, None for a draw."""
        if final.is_draw:
            return None
        return final.red_win == engine_is_red
