"""
Description:
    Resumable sampler state machine and helpers shared by all algorithms.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""
import math
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

import jax.numpy as jnp

from .datatypes import QP, Algorithm, GMMComponent, Point, SimulationParams, StepResult
from .rng import RandomSource, JaxRandomSource


def draw_momentum(q: jnp.ndarray, rng: RandomSource) -> QP:
    """
    Resample momentum from standard Gaussian.

    Keeps position q, draws p ~ N(0, I) one axis at a time.

    Args:
        q: Current position
        rng: Random source

    Returns:
        Phase space state (q, p)
    """
    p = jnp.array([rng.normal() for _ in range(q.shape[0])])
    return QP(q=q, p=p)


def acceptance_probability(log_ratio: float) -> float:
    """min(1, exp(log_ratio)), without overflowing for large ratios"""
    if log_ratio >= 0.0:
        return 1.0
    return math.exp(log_ratio)


def accept_reject(log_ratio: float, rng: RandomSource) -> Tuple[bool, float, float]:
    """
    Metropolis-Hastings accept/reject step.

    Accept iff u < min(1, exp(log_ratio)).

    Args:
        log_ratio: log target ratio (or -ΔH for Hamiltonian samplers)
        rng: Random source

    Returns:
        (accepted, alpha, u)
    """
    alpha = acceptance_probability(log_ratio)
    u = rng.uniform()
    return u < alpha, alpha, u


class StepSampler:
    """
    One sampling cycle as an explicit state machine.

    Subclasses set ``algorithm``, ``initial_state`` and register one handler
    per state in ``_handlers``. A handler does the work of its sub-step and
    returns ``(record, next_state)``; ``next_state`` is None after the
    terminal record.

    Usage:
        sampler = MetropolisHastings(current, params, components, rng)
        for record in sampler:
            draw(record)
        new_position = sampler.result
    """

    algorithm: Algorithm
    initial_state: Enum

    def __init__(
        self,
        current: Point,
        params: SimulationParams,
        components: Sequence[GMMComponent],
        rng: Optional[RandomSource] = None,
    ):
        self.start = Point(float(current.x), float(current.y))
        self.params = params
        self.components = tuple(components)
        self.rng = JaxRandomSource.from_entropy() if rng is None else rng
        self._state: Optional[Enum] = self.initial_state
        self._result: Optional[Point] = None
        self._handlers: Dict[Enum, Callable[[], Tuple[StepResult, Optional[Enum]]]] = {}

    @property
    def done(self) -> bool:
        return self._state is None

    @property
    def state(self) -> Optional[Enum]:
        return self._state

    @property
    def result(self) -> Point:
        """Chain position produced by this cycle"""
        if self._result is None:
            raise RuntimeError(f"{self.algorithm.value} cycle has not finished")
        return self._result

    def step(self) -> StepResult:
        """Advance one sub-step and return its record"""
        if self._state is None:
            raise RuntimeError(f"{self.algorithm.value} cycle already finished")
        record, self._state = self._handlers[self._state]()
        if record.is_finished_step:
            self._result = record.current
        return record

    def run(self) -> Point:
        """Drain the remaining sub-steps and return the cycle result"""
        for _ in self:
            pass
        return self.result

    def __iter__(self):
        return self

    def __next__(self) -> StepResult:
        if self._state is None:
            raise StopIteration
        return self.step()
