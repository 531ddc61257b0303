"""
Sources of randomness for collapsing cells.

The engine never touches a global random state. It asks an injected choice
source to pick one of a cell's candidates, offered in ascending ID order.
"""

from __future__ import annotations

import random
from typing import Callable, Protocol, Sequence

from tilecollapse.core.types import TileId


class ChoiceSource(Protocol):
    """Picks one tile from a non-empty, sorted sequence of candidates."""

    def choose(self, candidates: Sequence[TileId]) -> TileId: ...


class SeededChoice:
    """Uniform random choice from a private, seedable generator.

    The same seed reproduces the same run.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def choose(self, candidates: Sequence[TileId]) -> TileId:
        return self._rng.choice(candidates)

    def __repr__(self) -> str:
        return f"SeededChoice(seed={self.seed})"


class FixedChoice:
    """Deterministic choice for tests and reproducible scripted runs.

    By default picks the lowest candidate ID. A policy can override that:
        FixedChoice(lambda candidates: candidates[-1])
    A preferred tile order can also be given; the first preferred tile that
    is a candidate wins, falling back to the policy.
        FixedChoice(prefer=[tile_x, tile_y])
    """

    def __init__(
        self,
        policy: Callable[[Sequence[TileId]], TileId] | None = None,
        prefer: Sequence[TileId] = (),
    ):
        self._policy = policy or (lambda candidates: candidates[0])
        self._prefer = list(prefer)
        self.calls: list[tuple[TileId, ...]] = []

    def choose(self, candidates: Sequence[TileId]) -> TileId:
        self.calls.append(tuple(candidates))
        for tile_id in self._prefer:
            if tile_id in candidates:
                return tile_id
        return self._policy(candidates)
