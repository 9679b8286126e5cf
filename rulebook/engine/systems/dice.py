from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Protocol


class DieRoller(Protocol):
    async def roll(self, sides: int) -> int: ...


class RandomDieRoller:
    """Uniform die backed by ``random.Random``; seed it for reproducible runs."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    async def roll(self, sides: int) -> int:
        if sides < 1:
            raise ValueError(f"die needs at least one side, got {sides}")
        return self._rng.randint(1, sides)


class ScriptedDieRoller:
    """Replays fixed results in order; records every draw it was asked for."""

    def __init__(self, results: Iterable[int]) -> None:
        self._results = list(results)
        self.calls: list[int] = []

    async def roll(self, sides: int) -> int:
        self.calls.append(sides)
        if not self._results:
            raise RuntimeError("scripted roller ran out of results")
        value = self._results.pop(0)
        if not 1 <= value <= sides:
            raise ValueError(f"scripted result {value} outside 1..{sides}")
        return value
