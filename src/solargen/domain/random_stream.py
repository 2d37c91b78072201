# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Deterministic random stream with checkpointing and forking.

Every random decision in system generation is drawn from a RandomStream
derived from one root seed. A fork produces an independent child stream
from the parent's current state without consuming any of the parent's
draws, so sub-generations (one planet's moons, one belt's asteroids)
can run in any order and still reproduce the same system.

Backed by numpy's PCG64 bit generator and SeedSequence.
"""
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypeVar

import numpy as np

T = TypeVar("T")


@dataclass(frozen=True)
class StreamState:
    """Exact snapshot of a RandomStream (PCG64 words plus fork counter)."""
    seed: int
    bit_state: int
    increment: int
    has_uint32: int
    uinteger: int
    fork_count: int


class RandomStream:
    """Seeded PCG64 stream supporting save/restore and side-effect-free forks."""

    def __init__(self, seed: int) -> None:
        if seed < 0:
            raise ValueError(f"seed must be non-negative, got {seed}")
        self._seed = int(seed)
        self._bit_generator = np.random.PCG64(self._seed)
        self._generator = np.random.Generator(self._bit_generator)
        self._fork_count = 0

    def __repr__(self) -> str:
        return f"RandomStream(seed={self._seed}, forks={self._fork_count})"

    @property
    def seed(self) -> int:
        return self._seed

    # ── Checkpointing ─────────────────────────────────────────────

    def get_state(self) -> StreamState:
        raw = self._bit_generator.state
        return StreamState(
            seed=self._seed,
            bit_state=int(raw["state"]["state"]),
            increment=int(raw["state"]["inc"]),
            has_uint32=int(raw["has_uint32"]),
            uinteger=int(raw["uinteger"]),
            fork_count=self._fork_count,
        )

    def set_state(self, state: StreamState) -> None:
        self._seed = state.seed
        self._bit_generator.state = {
            "bit_generator": "PCG64",
            "state": {"state": state.bit_state, "inc": state.increment},
            "has_uint32": state.has_uint32,
            "uinteger": state.uinteger,
        }
        self._fork_count = state.fork_count

    def fork(self) -> "RandomStream":
        """
        Derive an independent child stream from the current state.

        The parent's bit generator is not advanced: only its fork counter
        changes, so consecutive forks differ while the parent's own future
        draws stay exactly as they would have been without forking.
        """
        state = self.get_state()
        sequence = np.random.SeedSequence(
            entropy=[state.bit_state, state.increment, state.uinteger],
            spawn_key=(state.fork_count, state.has_uint32),
        )
        self._fork_count += 1

        child = RandomStream.__new__(RandomStream)
        child._seed = int(sequence.generate_state(2, dtype=np.uint64)[0])
        child._bit_generator = np.random.PCG64(sequence)
        child._generator = np.random.Generator(child._bit_generator)
        child._fork_count = 0
        return child

    # ── Draws ─────────────────────────────────────────────────────

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        return float(self._generator.uniform(low, high))

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in [low, high). Returns low when the range is empty."""
        if high <= low:
            return low
        return int(self._generator.integers(low, high))

    def normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        if std <= 0.0:
            return mean
        return float(self._generator.normal(mean, std))

    def log_uniform(self, low: float, high: float) -> float:
        """Log-uniform draw in [low, high); degenerate ranges return low."""
        if low <= 0.0 or high <= low:
            return low
        return float(math.exp(self._generator.uniform(math.log(low), math.log(high))))

    def power_law(self, low: float, high: float, alpha: float) -> float:
        """
        Draw from dN/dx ∝ x^-alpha on [low, high) by inverse transform.

        alpha == 1 falls back to log-uniform.
        """
        if low <= 0.0 or high <= low:
            return low
        u = float(self._generator.random())
        if abs(alpha - 1.0) < 1e-12:
            return low * (high / low) ** u
        k = 1.0 - alpha
        lo_k = low ** k
        hi_k = high ** k
        return (lo_k + u * (hi_k - lo_k)) ** (1.0 / k)

    def chance(self, probability: float) -> bool:
        """One Bernoulli trial. Always draws, even for p <= 0 or p >= 1."""
        return float(self._generator.random()) < probability

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("choice from an empty sequence")
        return options[self.integers(0, len(options))]

    def weighted_choice(self, weights: Mapping[T, float]) -> T:
        """
        Pick a key with probability proportional to its weight.

        Keys are visited in mapping order; non-positive weights never win.
        """
        total = sum(w for w in weights.values() if w > 0.0)
        if total <= 0.0:
            raise ValueError("weighted_choice needs at least one positive weight")
        target = float(self._generator.random()) * total
        acc = 0.0
        last = None
        for key, weight in weights.items():
            if weight <= 0.0:
                continue
            acc += weight
            last = key
            if target < acc:
                return key
        return last
