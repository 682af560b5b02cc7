"""
Description:
    Random-number primitives shared by every sampler.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1

Samplers never touch a global generator. Each chain owns one RandomSource,
so independent chains never share a stream.
"""
import math
from typing import Optional, Protocol

import jax
import jax.random as jr
import numpy as np


class RandomSource(Protocol):
    def uniform(self) -> float:
        """Draw from Uniform[0, 1)"""
        ...

    def normal(self) -> float:
        """Draw from N(0, 1)"""
        ...


def box_muller(u1: float, u2: float) -> float:
    """
    Box-Muller transform of two uniforms into one standard normal.

    Args:
        u1: Uniform on (0, 1], must be non-zero
        u2: Uniform on [0, 1)

    Returns:
        sqrt(-2 ln u1) * cos(2π u2)
    """
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


class JaxRandomSource:
    """
    RandomSource backed by a JAX PRNG key.

    The key is split on every draw, so a fixed seed replays the same
    sequence of uniforms and normals.
    """

    def __init__(self, seed: int = 0, key: Optional[jax.Array] = None):
        self.key = jr.PRNGKey(seed) if key is None else key

    @classmethod
    def from_entropy(cls) -> "JaxRandomSource":
        seed = int(np.random.SeedSequence().generate_state(1)[0])
        return cls(seed=seed)

    def _next_key(self) -> jax.Array:
        self.key, sub = jr.split(self.key)
        return sub

    def uniform(self) -> float:
        return float(jr.uniform(self._next_key(), shape=()))

    def normal(self) -> float:
        u = jr.uniform(self._next_key(), shape=(2,))
        # 1 - u maps [0, 1) onto (0, 1] so the log stays finite
        return box_muller(1.0 - float(u[0]), float(u[1]))
