#!/usr/bin/env python3
"""
Randomness Port
===============
A single swappable source of uniform values in [0, multiplier).

Every random decision in phrasekit goes through randomness(). The bound
function is looked up on every draw, so a host may replace it at any time
with set_randomness() and calls already in progress pick up the new source
from their next draw.

The default source is secrets.SystemRandom (the OS entropy pool).
"""

import math
import random
import secrets
from typing import Callable

RandomSource = Callable[[float], float]

_system_rng = secrets.SystemRandom()


def system_randomness(multiplier: float = 1) -> float:
    """Uniform float in [0, multiplier) from the OS CSPRNG."""
    return _system_rng.random() * multiplier


_source: RandomSource = system_randomness


def randomness(multiplier: float = 1) -> float:
    """Return a uniform float in [0, multiplier) from the bound source."""
    return _source(multiplier)


def random_int(multiplier: int = 2) -> int:
    """
    Return a uniform integer in [0, multiplier).

    A multiplier of 0 or 1 always yields 0.
    """
    if multiplier <= 1:
        return 0
    return min(int(math.floor(randomness(multiplier))), multiplier - 1)


def set_randomness(source: RandomSource) -> RandomSource:
    """
    Replace the process-wide source. Returns the previous one.

    The source is called with the multiplier and must return a value in
    [0, multiplier).
    """
    global _source
    if not callable(source):
        raise TypeError("randomness source must be callable")
    previous = _source
    _source = source
    return previous


def get_randomness() -> RandomSource:
    """Get the currently bound source."""
    return _source


def reset_randomness() -> None:
    """Restore the default OS-backed source."""
    global _source
    _source = system_randomness


def seeded_randomness(seed: int) -> RandomSource:
    """
    Build a repeatable source backed by random.Random.

    Not suitable for real passphrases; meant for tests and demos.
    """
    rng = random.Random(seed)

    def _seeded(multiplier: float = 1) -> float:
        return rng.random() * multiplier

    return _seeded


__all__ = [
    "RandomSource",
    "randomness",
    "random_int",
    "set_randomness",
    "get_randomness",
    "reset_randomness",
    "seeded_randomness",
    "system_randomness",
]
