from __future__ import annotations

"""Random helpers shared by the generation passes."""

import random
from typing import Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


def make_rng(seed: Optional[int] = None) -> Tuple[random.Random, int]:
    """
    Build the single RNG used by a generation run.

    A missing seed is drawn from system entropy so the run can still be
    reproduced from the returned seed.
    """
    if seed is None:
        seed = random.SystemRandom().randrange(2**32)
    return random.Random(seed), seed


def weighted_choice(rng: random.Random, items: Sequence[T], weights: Sequence[float]) -> Optional[T]:
    """
    Pick one item with probability proportional to its weight.

    Builds a cumulative-weight table, draws a uniform value in [0, total) and
    returns the first item whose cumulative weight exceeds it. Falls back to a
    uniform pick when every weight is zero. Returns None for an empty sequence.
    """
    if not items:
        return None
    if len(items) != len(weights):
        raise ValueError(f"{len(items)} items but {len(weights)} weights")

    cumulative = []
    total = 0.0
    for w in weights:
        total += max(0.0, w)
        cumulative.append(total)

    if total <= 0.0:
        return items[rng.randrange(len(items))]

    draw = rng.random() * total
    for item, upper in zip(items, cumulative):
        if upper > draw:
            return item
    # Rounding can leave draw == total
    return items[-1]


def roll(rng: random.Random, probability: float) -> bool:
    """True with the given probability."""
    return probability > 0.0 and rng.random() < probability


__all__ = ["make_rng", "roll", "weighted_choice"]
