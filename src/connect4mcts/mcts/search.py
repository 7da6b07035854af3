"""
MCTS search implementation with UCB1 and random rollouts.

UCB1 selection formula:
score(child) = wins / visits + C * sqrt(ln(parent_visits) / visits)

Each iteration:
1. Traverse: descend through fully explored nodes by UCB1 score
2. Expand: add one unexplored child of the node reached
3. Rollout: play uniformly random moves to the end of the game
4. Backpropagate: update wins/visits along the path

Statistics live in a table keyed by state identity. The tree itself is
never stored; children are recomputed by enumerating legal moves and
looking their identities up in the table.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Hashable, Iterator, Optional
import numpy as np

from .errors import (
    NoMoveFoundError,
    NoValidChildError,
    NullPathError,
    UnexploredNodeError,
)
from .stats import EngineStats, ScoreRecord
from ..game.base import GameState, NO_MOVE

if TYPE_CHECKING:
    from ..utils.config import SearchConfig

FINAL_MOVE_POLICIES = ("last_path", "most_visited")


class SearchEngine:
    """
    Monte Carlo Tree Search over a GameState.

    One engine owns one statistics table. The table keeps growing across
    calls to search() until reset() is called or the engine is discarded.
    Engines are not thread-safe; give each concurrent search its own.

    Args:
        exploration: UCB1 exploration constant C (default sqrt(2))
        truncate_win_ratio: Use integer division for wins / visits,
            which rounds every ratio below 1 down to 0
        final_move: "last_path" returns the root child taken by the last
            iteration, "most_visited" returns the most visited root child
        seed: Seed for the engine's random generator
        rng: Generator to use instead of creating one from ``seed``
    """

    def __init__(
        self,
        exploration: float = math.sqrt(2),
        truncate_win_ratio: bool = False,
        final_move: str = "last_path",
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if final_move not in FINAL_MOVE_POLICIES:
            raise ValueError(
                f"final_move must be one of {FINAL_MOVE_POLICIES}, got {final_move!r}"
            )
        self.exploration = exploration
        self.truncate_win_ratio = truncate_win_ratio
        self.final_move = final_move
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.node_scores: Dict[Hashable, ScoreRecord] = {}
        self.total_iterations = 0

        # Reporting only, maintained by the caller
        self.games_played = 0
        self.wins = 0

    @classmethod
    def from_config(cls, config: SearchConfig, seed: Optional[int] = None) -> SearchEngine:
        """Create an engine from a SearchConfig."""
        return cls(
            exploration=config.exploration,
            truncate_win_ratio=config.truncate_win_ratio,
            final_move=config.final_move,
            seed=seed,
        )

    def search(self, root: GameState, iterations: int) -> int:
        """
        Run MCTS from the given state.

        Args:
            root: Position to move from
            iterations: Number of traverse/rollout/backpropagate cycles

        Returns:
            Selected move, or NO_MOVE if no iteration ran (zero iterations
            or an already finished game)
        """
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")

        root_id = root.state_id()
        if root_id not in self.node_scores:
            # Seeded with one win so ln(parent_visits) is defined at the top
            self.node_scores[root_id] = ScoreRecord(wins=1, visits=1)

        if root.game_over:
            return NO_MOVE

        move = NO_MOVE
        for _ in range(iterations):
            path = self._traverse(root)
            did_red_win = self._rollout(path[-1])
            move = self._backpropagate(path, did_red_win)
            self.total_iterations += 1

        if self.final_move == "most_visited" and iterations > 0:
            move = self.best_move(root)

        return move

    def best_move(self, root: GameState) -> int:
        """Return the recorded root child with the most visits (lowest index on ties)."""
        best = NO_MOVE
        best_visits = -1
        for move, child in self._children(root):
            record = self.node_scores.get(child.state_id())
            if record is not None and record.visits > best_visits:
                best = move
                best_visits = record.visits
        return best

    def score_of(self, state: GameState) -> Optional[ScoreRecord]:
        """Return the statistics recorded for ``state``, if any."""
        return self.node_scores.get(state.state_id())

    def get_stats(self) -> EngineStats:
        return EngineStats(
            expanded=len(self.node_scores),
            total_iterations=self.total_iterations,
            games_played=self.games_played,
            wins=self.wins,
        )

    def record_game(self, won: bool) -> None:
        """Bump the reporting counters after a finished game."""
        self.games_played += 1
        if won:
            self.wins += 1

    def reset(self) -> None:
        """Forget all statistics and counters."""
        self.node_scores.clear()
        self.total_iterations = 0
        self.games_played = 0
        self.wins = 0

    # --- Traversal ---

    def _traverse(self, node: GameState) -> list[GameState]:
        """Select down through fully explored nodes, then expand one child."""
        path = []

        while self._fully_explored(node):
            path.append(node)
            node = self._best_child(node)

        path.append(node)
        if not node.game_over:
            path.append(self._expand(node))
        return path

    def _children(self, node: GameState) -> Iterator[tuple[int, GameState]]:
        """Yield (move, child) for each legal move in index order."""
        for move in range(node.num_actions):
            if node.valid_move(move):
                child = node.clone()
                child.add_piece(move)
                yield move, child

    def _fully_explored(self, node: GameState) -> bool:
        """Every legal child has a record (never true for a finished game)."""
        if node.game_over:
            return False

        for _, child in self._children(node):
            if child.state_id() not in self.node_scores:
                return False
        return True

    def _best_child(self, node: GameState) -> GameState:
        """Return the child with the strictly highest UCB1 score."""
        parent = self.node_scores.get(node.state_id())
        if parent is None:
            raise UnexploredNodeError("Selecting below a node that has no statistics")
        best_child = None
        best_score = -math.inf

        for _, child in self._children(node):
            record = self.node_scores.get(child.state_id())
            if record is None:
                raise UnexploredNodeError(
                    "Child has no statistics although its parent is fully explored"
                )
            score = self._score(parent, record)
            if score > best_score:
                best_child = child
                best_score = score

        if best_child is None:
            raise NoValidChildError("No valid child found for a non-terminal node")
        return best_child

    def _score(self, parent: ScoreRecord, child: ScoreRecord) -> float:
        """UCB1 score of ``child`` seen from ``parent``."""
        if child.visits == 0:
            return math.inf

        if parent.visits == 0:
            raise UnexploredNodeError("Parent has no visits to score its children against")

        if self.truncate_win_ratio:
            win_ratio = float(child.wins // child.visits)
        else:
            win_ratio = child.wins / child.visits
        visit_ratio = math.log(parent.visits) / child.visits

        return win_ratio + self.exploration * math.sqrt(visit_ratio)

    def _expand(self, node: GameState) -> GameState:
        """Record a random unexplored child with zero statistics."""
        unexplored = [
            child for _, child in self._children(node)
            if child.state_id() not in self.node_scores
        ]
        if not unexplored:
            raise NoValidChildError(
                "No unexplored child to expand although the node is not fully explored"
            )

        child = unexplored[int(self.rng.integers(len(unexplored)))]
        self.node_scores[child.state_id()] = ScoreRecord(wins=0, visits=0)
        return child

    # --- Simulation ---

    def _rollout(self, node: GameState) -> bool:
        """Play uniformly random moves to the end; return whether red won."""
        if node is None:
            raise NullPathError("Rollout started from a missing node")

        state = node.clone()
        depth = 0
        while not state.game_over:
            moves = state.legal_moves()
            if not moves:
                raise NoValidChildError(
                    f"No legal move at rollout depth {depth} although the game is not over"
                )
            state.add_piece(moves[int(self.rng.integers(len(moves)))])
            depth += 1

        return state.red_win

    # --- Backpropagation ---

    def _backpropagate(self, path: list[GameState], did_red_win: bool) -> int:
        """
        Update statistics from leaf to root.

        A node is credited with a win when the player who moved into it
        won, i.e. when red's result differs from red being on move there.

        Returns:
            last_move of the node directly below the root
        """
        move = NO_MOVE

        while path:
            node = path.pop()
            if node is None:
                raise NullPathError("Found a missing node in the path during backpropagation")
            if len(path) == 1:
                move = node.last_move

            record = self.node_scores.get(node.state_id())
            if record is None:
                raise UnexploredNodeError(
                    "Found a node without statistics in the path during backpropagation"
                )
            record.visits += 1
            if did_red_win != node.is_red:
                record.wins += 1

        if move == NO_MOVE:
            raise NoMoveFoundError("No root child was found in the path")
        return move
