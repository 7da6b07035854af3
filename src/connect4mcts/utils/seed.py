"""
Random seed management for reproducibility.
"""

from __future__ import annotations

from typing import Optional
import numpy as np


def spawn_seeds(seed: Optional[int], count: int) -> list[Optional[int]]:
    """
    Derive ``count`` independent seeds from one seed.

    Used to give each engine in a match its own reproducible stream.
    Returns ``[None] * count`` when ``seed`` is None.
    """
    if seed is None:
        return [None] * count
    children = np.random.SeedSequence(seed).spawn(count)
    return [int(child.generate_state(1)[0]) for child in children]
