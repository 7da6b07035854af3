"""Utilities module."""

from .config import (
    Config,
    SearchConfig,
    GameConfig,
    ArenaConfig,
    get_default_config,
)
from .seed import spawn_seeds
from .logging import (
    SearchLogger,
    SearchMetrics,
    console,
    create_progress,
    print_config,
    print_stats,
    print_board,
)

__all__ = [
    "Config",
    "SearchConfig",
    "GameConfig",
    "ArenaConfig",
    "get_default_config",
    "spawn_seeds",
    "SearchLogger",
    "SearchMetrics",
    "console",
    "create_progress",
    "print_config",
    "print_stats",
    "print_board",
]
