from __future__ import annotations

import random
from typing import Any, Sequence

from rfl.contracts import RandomSource


class PythonRandomSource(RandomSource):
    """Injected randomness for auto-fill and team suggestions; seed it for repeatable tests."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("choice items must not be empty")
        return self._rng.choice(items)

    def shuffle(self, items: list[Any]) -> None:
        self._rng.shuffle(items)


def session_random() -> PythonRandomSource:
    return PythonRandomSource(seed=None)


def seeded_random(seed: int) -> PythonRandomSource:
    return PythonRandomSource(seed=seed)
