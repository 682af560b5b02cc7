"""
Description:
    Headless driver: sampler factory, chain history and acceptance counters.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1

Samplers are stateless across cycles. The Chain owns everything that
survives a cycle: history, current position and the accept/total counts.
Only terminal records are committed.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Type, Union

from .datatypes import Algorithm, GMMComponent, Point, SimulationParams, StepResult
from .hmc import HMC, NUTS
from .metropolis import Gibbs, MetropolisHastings
from .rng import JaxRandomSource, RandomSource
from .sampler import StepSampler
from .validation import validate_components, validate_params

logger = logging.getLogger("gmmchain")

MAX_HISTORY = 2000

SAMPLERS: Dict[Algorithm, Type[StepSampler]] = {
    Algorithm.MH: MetropolisHastings,
    Algorithm.GIBBS: Gibbs,
    Algorithm.HMC: HMC,
    Algorithm.NUTS: NUTS,
}


def resolve_algorithm(algorithm: Union[Algorithm, str]) -> Algorithm:
    """Accept an Algorithm, its name ("hmc") or its display value"""
    if isinstance(algorithm, Algorithm):
        return algorithm
    try:
        return Algorithm[str(algorithm).upper()]
    except KeyError:
        pass
    try:
        return Algorithm(algorithm)
    except ValueError:
        names = ", ".join(a.name.lower() for a in Algorithm)
        raise ValueError(f"Unknown algorithm {algorithm!r}; expected one of {names}") from None


def make_sampler(
    algorithm: Union[Algorithm, str],
    current: Point,
    params: SimulationParams,
    components: Sequence[GMMComponent],
    rng: Optional[RandomSource] = None,
) -> StepSampler:
    """Fresh state machine for one cycle of the chosen algorithm"""
    return SAMPLERS[resolve_algorithm(algorithm)](current, params, components, rng)


@dataclass
class Chain:
    """Append-only chain history with running acceptance statistics."""

    current: Point = Point(0.0, 0.0)
    history: List[Point] = field(default_factory=list)
    accepted: int = 0
    total: int = 0
    max_history: int = MAX_HISTORY

    def __post_init__(self) -> None:
        if not self.history:
            self.history = [self.current]

    @property
    def acceptance_rate(self) -> float:
        return self.accepted / self.total if self.total else 0.0

    def commit(self, record: StepResult) -> None:
        """Append the result of a finished cycle"""
        if not record.is_finished_step:
            raise ValueError(
                f"Only terminal records can be committed (phase={record.details.phase.value})"
            )
        self.current = record.current
        self.history.append(record.current)
        if len(self.history) > self.max_history:
            del self.history[: len(self.history) - self.max_history]
        self.accepted += 1 if record.accepted else 0
        self.total += 1

    def reset(self, point: Point = Point(0.0, 0.0)) -> None:
        self.current = point
        self.history = [point]
        self.accepted = 0
        self.total = 0


def run_cycle(
    chain: Chain,
    algorithm: Union[Algorithm, str],
    params: SimulationParams,
    components: Sequence[GMMComponent],
    rng: RandomSource,
) -> List[StepResult]:
    """
    Drive one sampler from chain.current to completion and commit it.

    Returns:
        Every record emitted during the cycle, terminal last
    """
    sampler = make_sampler(algorithm, chain.current, params, components, rng)
    records = list(sampler)
    chain.commit(records[-1])
    logger.debug(
        "%s cycle %d: %d sub-steps, accepted=%s, now at (%.3f, %.3f)",
        sampler.algorithm.name, chain.total, len(records),
        records[-1].accepted, chain.current.x, chain.current.y,
    )
    return records


def sample(
    chain: Chain,
    n: int,
    algorithm: Union[Algorithm, str],
    params: SimulationParams,
    components: Sequence[GMMComponent],
    rng: Optional[RandomSource] = None,
) -> Chain:
    """
    Run n full cycles on chain.

    Validates params and components once up front, since the samplers
    themselves never check them.
    """
    validate_params(params)
    validate_components(components)
    rng = JaxRandomSource.from_entropy() if rng is None else rng
    for _ in range(n):
        run_cycle(chain, algorithm, params, components, rng)
    logger.info(
        "%s: %d cycles, acceptance rate %.3f",
        resolve_algorithm(algorithm).value, chain.total, chain.acceptance_rate,
    )
    return chain
