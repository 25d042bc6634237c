"""Seeded random numbers for reproducible scatter and seam generation."""

from __future__ import annotations

import random
from typing import Callable

Rng = Callable[[], float]

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply (unsigned result)."""
    return (a * b) & _MASK32


class Mulberry32:
    """Mulberry32: 32-bit state, xorshift-multiply mix.

    Calling the instance returns the next float in [0, 1).  The output
    matches the common JavaScript implementation bit for bit, so a seed
    reproduces the same layout on every platform.
    """

    def __init__(self, seed: int) -> None:
        self._state = int(seed) & _MASK32

    @property
    def state(self) -> int:
        return self._state

    def next_u32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        x = _imul(t ^ (t >> 15), t | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & _MASK32
        return (x ^ (x >> 14)) & _MASK32

    def __call__(self) -> float:
        return self.next_u32() / 4294967296


def create_seeded_rng(seed: int) -> Rng:
    """Deterministic RNG for repeatable scatter."""
    return Mulberry32(seed)


def random_seed() -> int:
    """Fresh uint32 seed from the process RNG."""
    return random.getrandbits(32)
