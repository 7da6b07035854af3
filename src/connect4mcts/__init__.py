"""
Connect 4 MCTS - Monte Carlo Tree Search for vertical-drop games.

Picks a move with UCB1 selection, random rollouts and win/visit statistics
keyed by position identity.

Usage:
    from connect4mcts.game import Connect4State
    from connect4mcts.mcts import SearchEngine

    engine = SearchEngine(seed=0)
    state = Connect4State.from_moves([3, 3, 4])
    move = engine.search(state, 1000)
    print(engine.get_stats())
"""

__version__ = "0.1.0"

from . import game
from . import mcts
from . import eval
from . import utils

__all__ = [
    "game",
    "mcts",
    "eval",
    "utils",
    "__version__",
]
