from __future__ import annotations

import random


class EntropyEngine:
    """Randomness helpers so mood and responses never feel scripted."""

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng or random.Random(seed)

    def fuzz(self, value: float, spread: float) -> float:
        spread = abs(float(spread))
        return float(value) + self._rng.uniform(-spread, spread)

    def jitter_axis(self, value: float, spread: float, low: float = -10.0, high: float = 10.0) -> float:
        return max(low, min(high, self.fuzz(value, spread)))
