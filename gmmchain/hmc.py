"""
Description:
    Gradient-based samplers: HMC and a simplified, visually bounded NUTS.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""
import logging
import math
from enum import Enum
from typing import List, Optional

import jax.numpy as jnp

from .datatypes import QP, Algorithm, Phase, Point, StepDetails, StepResult
from .hamiltonian import gmm_hamiltonian
from .integrator import drift, half_kick, kick
from .sampler import StepSampler, accept_reject, draw_momentum

logger = logging.getLogger("gmmchain")

HMC_STEP_SCALE = 0.5
NUTS_STEP_SCALE = 0.4
MAX_TREE_STEPS = 50
DIVERGENCE_THRESHOLD = 1000.0

DIVERGENCE = "Divergence"
U_TURN = "U-Turn Detected"
MAX_STEPS_REACHED = "Max Steps Reached"


class HMCState(Enum):
    SAMPLE_MOMENTUM = "sample_momentum"
    LEAPFROG = "leapfrog"
    ACCEPT_REJECT = "accept_reject"


class HMC(StepSampler):
    """
    Hamiltonian Monte Carlo, L + 2 emissions per cycle:
        SampleMomentum -> Leapfrog x L -> AcceptReject

    τ = 0.5 * step_size, L = params.num_steps.
    Every leapfrog emission carries the trajectory so far (start included).
    """

    algorithm = Algorithm.HMC
    initial_state = HMCState.SAMPLE_MOMENTUM

    def __init__(self, current, params, components, rng=None):
        super().__init__(current, params, components, rng)
        self._handlers = {
            HMCState.SAMPLE_MOMENTUM: self._sample_momentum,
            HMCState.LEAPFROG: self._leapfrog,
            HMCState.ACCEPT_REJECT: self._accept_reject,
        }
        self.τ = HMC_STEP_SCALE * params.step_size
        self.L = int(params.num_steps)
        self.H = gmm_hamiltonian(self.components)
        self.qp: Optional[QP] = None
        self.current_h: Optional[float] = None
        self.path = (self.start,)
        self.n_steps = 0

    def _sample_momentum(self):
        qp0 = draw_momentum(self.start.to_array(), self.rng)
        self.current_h = self.H.energy(qp0)
        # Half step momentum
        self.qp = half_kick(qp0, self.H.grad_q(qp0), self.τ)
        record = StepResult(
            current=self.start,
            is_finished_step=False,
            delay=1500,
            details=StepDetails(
                description=f"Sample momentum p ~ N(0, I). Initial energy H = {self.current_h:.2f}",
                phase=Phase.MOMENTUM,
                current_h=self.current_h,
            ),
        )
        return record, HMCState.LEAPFROG

    def _leapfrog(self):
        # Full step position
        self.qp = drift(self.qp, self.H, self.τ)
        self.n_steps += 1
        self.path = self.path + (Point.from_array(self.qp.q),)

        grad_u = self.H.grad_q(self.qp)
        if self.n_steps < self.L:
            self.qp = kick(self.qp, grad_u, self.τ)
        else:
            self.qp = half_kick(self.qp, grad_u, self.τ)

        record = StepResult(
            current=self.start,
            path=self.path,
            is_finished_step=False,
            delay=max(100, 2500 // self.L),
            details=StepDetails(
                description=f"Leapfrog step {self.n_steps}/{self.L}: integrating Hamiltonian dynamics",
                phase=Phase.LEAPFROG,
                gradient=Point.from_array(-grad_u),
            ),
        )
        next_state = HMCState.LEAPFROG if self.n_steps < self.L else HMCState.ACCEPT_REJECT
        return record, next_state

    def _accept_reject(self):
        proposed_h = self.H.energy(self.qp)
        delta_h = proposed_h - self.current_h
        accepted, alpha, _ = accept_reject(-delta_h, self.rng)
        logger.debug("HMC ΔH=%.4g α=%.4g accepted=%s", delta_h, alpha, accepted)
        if accepted:
            description = f"Metropolis accept. ΔH = {delta_h:.4f}"
        else:
            description = f"Reject (energy error too large). ΔH = {delta_h:.4f}"
        record = StepResult(
            current=self.path[-1] if accepted else self.start,
            proposal=self.path[-1],
            path=self.path,
            accepted=accepted,
            is_finished_step=True,
            delay=1500,
            details=StepDetails(
                description=description,
                phase=Phase.ACCEPT if accepted else Phase.REJECT,
                current_h=self.current_h,
                proposed_h=proposed_h,
                acceptance_prob=alpha,
            ),
        )
        return record, None


class NUTSState(Enum):
    SAMPLE_MOMENTUM_AND_SLICE = "sample_momentum_and_slice"
    TREE_BUILD = "tree_build"
    SELECT = "select"


class NUTS(StepSampler):
    """
    Single-direction, step-capped approximation of NUTS.

    There is no doubling tree: the trajectory runs forward from the start
    until a divergence, a U-turn or MAX_TREE_STEPS, and every visited
    point inside the slice {-H >= log u} is a candidate, together with the
    start itself. The next sample is
    drawn uniformly from the candidates. This is not detailed-balance
    exact and must not be treated as textbook NUTS.

    τ = 0.4 * step_size. Emissions: 1 + (1..MAX_TREE_STEPS) + 1.
    """

    algorithm = Algorithm.NUTS
    initial_state = NUTSState.SAMPLE_MOMENTUM_AND_SLICE

    def __init__(self, current, params, components, rng=None):
        super().__init__(current, params, components, rng)
        self._handlers = {
            NUTSState.SAMPLE_MOMENTUM_AND_SLICE: self._sample_momentum_and_slice,
            NUTSState.TREE_BUILD: self._tree_build,
            NUTSState.SELECT: self._select,
        }
        self.τ = NUTS_STEP_SCALE * params.step_size
        self.H = gmm_hamiltonian(self.components)
        self.q0 = self.start.to_array()
        self.qp: Optional[QP] = None
        self.start_h: Optional[float] = None
        self.log_u: Optional[float] = None
        self.path = (self.start,)
        # start always lies in the slice: -H0 >= ln(u) - H0 for u <= 1
        self.candidates: List[Point] = [self.start]
        self.n_steps = 0
        self.n_emitted = 0
        self.termination: Optional[str] = None

    def _sample_momentum_and_slice(self):
        qp0 = draw_momentum(self.q0, self.rng)
        self.start_h = self.H.energy(qp0)
        u = self.rng.uniform()
        self.log_u = (math.log(u) if u > 0.0 else -math.inf) - self.start_h
        self.qp = half_kick(qp0, self.H.grad_q(qp0), self.τ)
        record = StepResult(
            current=self.start,
            is_finished_step=False,
            delay=1500,
            details=StepDetails(
                description="Sample momentum and slice variable u. Start building trajectory",
                phase=Phase.MOMENTUM,
                current_h=self.start_h,
            ),
        )
        return record, NUTSState.TREE_BUILD

    def _tree_build(self):
        self.qp = drift(self.qp, self.H, self.τ)
        grad_u = self.H.grad_q(self.qp)
        # Energy at the synchronised (half-kicked) momentum
        h = self.H.energy(half_kick(self.qp, grad_u, self.τ))
        dot = float(jnp.dot(self.qp.q - self.q0, self.qp.p))

        point = Point.from_array(self.qp.q)
        self.path = self.path + (point,)
        if -h >= self.log_u:
            self.candidates.append(point)
        self.n_emitted += 1

        if not math.isfinite(h) or h - self.start_h > DIVERGENCE_THRESHOLD:
            self.termination = DIVERGENCE
        elif dot < 0.0:
            self.termination = U_TURN
        else:
            self.qp = kick(self.qp, grad_u, self.τ)
            self.n_steps += 1
            if self.n_steps >= MAX_TREE_STEPS:
                self.termination = MAX_STEPS_REACHED

        record = StepResult(
            current=self.start,
            path=self.path,
            is_finished_step=False,
            delay=150,
            details=StepDetails(
                description=f"Tree step {self.n_emitted}: check U-turn (dot={dot:.2f})",
                phase=Phase.TREE_BUILD,
                current_h=h,
                u_turn_dot=dot,
                gradient=Point.from_array(-grad_u),
                termination=self.termination,
            ),
        )
        next_state = NUTSState.TREE_BUILD if self.termination is None else NUTSState.SELECT
        return record, next_state

    def _select(self):
        if self.candidates:
            n = len(self.candidates)
            idx = min(int(self.rng.uniform() * n), n - 1)
            next_q = self.candidates[idx]
            accepted = True
        else:
            next_q = self.start
            accepted = False
        logger.debug(
            "NUTS stopped after %d tree steps (%s), %d candidates",
            self.n_emitted, self.termination, len(self.candidates),
        )
        record = StepResult(
            current=next_q,
            path=self.path,
            accepted=accepted,
            is_finished_step=True,
            delay=2000,
            details=StepDetails(
                description=f"{self.termination}. Sampling from trajectory... Done.",
                phase=Phase.ACCEPT if accepted else Phase.REJECT,
                current_h=self.start_h,
                termination=self.termination,
            ),
        )
        return record, None
