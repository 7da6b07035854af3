"""
Configuration management for the Connect 4 MCTS engine.

Uses dataclasses for clean configuration with sensible defaults.
Supports loading from YAML files.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional
import math
import yaml

from ..mcts.search import FINAL_MOVE_POLICIES

OPPONENTS = ("random", "mcts")


@dataclass
class SearchConfig:
    """MCTS configuration."""

    iterations: int = 1000
    exploration: float = math.sqrt(2)
    # Integer division for wins / visits (reproduces the legacy scoring)
    truncate_win_ratio: bool = False
    final_move: str = "last_path"

    def __post_init__(self):
        if self.iterations < 0:
            raise ValueError("iterations must be non-negative")
        if self.exploration < 0:
            raise ValueError("exploration must be non-negative")
        if self.final_move not in FINAL_MOVE_POLICIES:
            raise ValueError(f"final_move must be one of {FINAL_MOVE_POLICIES}")


@dataclass
class GameConfig:
    """Board configuration."""

    rows: int = 6
    cols: int = 7
    win_length: int = 4

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError("rows and cols must be positive")
        if self.win_length < 2 or self.win_length > max(self.rows, self.cols):
            raise ValueError("win_length must fit on the board")


@dataclass
class ArenaConfig:
    """Arena configuration."""

    num_games: int = 20
    opponent: str = "random"
    opponent_iterations: int = 200  # Only used when opponent is "mcts"

    def __post_init__(self):
        if self.num_games < 1:
            raise ValueError("num_games must be at least 1")
        if self.opponent not in OPPONENTS:
            raise ValueError(f"opponent must be one of {OPPONENTS}")
        if self.opponent_iterations < 1:
            raise ValueError("opponent_iterations must be at least 1")


@dataclass
class Config:
    """Full configuration."""

    # Component configs
    search: SearchConfig = field(default_factory=SearchConfig)
    game: GameConfig = field(default_factory=GameConfig)
    arena: ArenaConfig = field(default_factory=ArenaConfig)

    # Global settings
    log_dir: str = "runs"

    # Random seed (None draws fresh entropy)
    seed: Optional[int] = None

    def save(self, path: str) -> None:
        """Save config to YAML file."""
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> Config:
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Parse nested configs
        return cls(
            search=SearchConfig(**data.get("search", {})),
            game=GameConfig(**data.get("game", {})),
            arena=ArenaConfig(**data.get("arena", {})),
            log_dir=data.get("log_dir", "runs"),
            seed=data.get("seed"),
        )


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()
