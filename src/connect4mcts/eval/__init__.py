"""Evaluation module."""

from .arena import Arena, ArenaResult, Player, engine_player, random_player, play_match

__all__ = [
    "Arena",
    "ArenaResult",
    "Player",
    "engine_player",
    "random_player",
    "play_match",
]
