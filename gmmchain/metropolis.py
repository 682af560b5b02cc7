"""
Description:
    Random-walk samplers: Metropolis-Hastings and Metropolis-within-Gibbs.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""
from enum import Enum

from .datatypes import Algorithm, Phase, Point, StepDetails, StepResult
from .sampler import StepSampler, accept_reject, acceptance_probability
from .target import log_density


class MHState(Enum):
    PROPOSE = "propose"
    COMPUTE = "compute"
    ACCEPT_REJECT = "accept_reject"


class MetropolisHastings(StepSampler):
    """
    Random-walk Metropolis-Hastings, three emissions per cycle:
        Propose -> Compute -> AcceptReject

    x' = x + σ N(0, I),  α = min(1, π(x')/π(x))
    """

    algorithm = Algorithm.MH
    initial_state = MHState.PROPOSE

    def __init__(self, current, params, components, rng=None):
        super().__init__(current, params, components, rng)
        self._handlers = {
            MHState.PROPOSE: self._propose,
            MHState.COMPUTE: self._compute,
            MHState.ACCEPT_REJECT: self._accept_reject,
        }
        self.proposal = None
        self.log_prob_current = None
        self.log_prob_proposal = None
        self.alpha = None

    def _propose(self):
        σ = self.params.step_size
        self.proposal = Point(
            self.start.x + self.rng.normal() * σ,
            self.start.y + self.rng.normal() * σ,
        )
        self.log_prob_current = log_density(self.start, self.components)
        record = StepResult(
            current=self.start,
            proposal=self.proposal,
            is_finished_step=False,
            delay=1500,
            details=StepDetails(
                description=f"Propose candidate x' ~ N(x, σ²) with σ={σ}",
                phase=Phase.PROPOSAL,
                log_prob_current=self.log_prob_current,
            ),
        )
        return record, MHState.COMPUTE

    def _compute(self):
        self.log_prob_proposal = log_density(self.proposal, self.components)
        self.alpha = acceptance_probability(self.log_prob_proposal - self.log_prob_current)
        record = StepResult(
            current=self.start,
            proposal=self.proposal,
            is_finished_step=False,
            delay=1500,
            details=StepDetails(
                description=f"Ratio α = min(1, π(x')/π(x)) = {self.alpha:.4f}",
                phase=Phase.COMPUTE,
                log_prob_current=self.log_prob_current,
                log_prob_proposal=self.log_prob_proposal,
                acceptance_prob=self.alpha,
            ),
        )
        return record, MHState.ACCEPT_REJECT

    def _accept_reject(self):
        accepted, _, u = accept_reject(self.log_prob_proposal - self.log_prob_current, self.rng)
        if accepted:
            description = f"Accept: u={u:.3f} < α, move to the candidate"
        else:
            description = f"Reject: u={u:.3f} >= α, stay at the current position"
        record = StepResult(
            current=self.proposal if accepted else self.start,
            proposal=self.proposal,
            accepted=accepted,
            is_finished_step=True,
            delay=2000,
            details=StepDetails(
                description=description,
                phase=Phase.ACCEPT if accepted else Phase.REJECT,
                log_prob_current=self.log_prob_current,
                log_prob_proposal=self.log_prob_proposal,
                acceptance_prob=self.alpha,
            ),
        )
        return record, None


class GibbsState(Enum):
    START = "start"
    UPDATE_X = "update_x"
    UPDATE_Y = "update_y"


class Gibbs(StepSampler):
    """
    Metropolis-within-Gibbs, three emissions per cycle:
        StartCycle -> UpdateX -> UpdateY

    Each conditional gets one 1D random-walk Metropolis step, since the
    mixture conditionals have no closed form.

    The terminal ``accepted`` flag means the point moved on either axis
    during the cycle. It is not a per-axis acceptance count, so acceptance
    rates built from it are not comparable with MH.
    """

    algorithm = Algorithm.GIBBS
    initial_state = GibbsState.START

    def __init__(self, current, params, components, rng=None):
        super().__init__(current, params, components, rng)
        self._handlers = {
            GibbsState.START: self._start_cycle,
            GibbsState.UPDATE_X: self._update_x,
            GibbsState.UPDATE_Y: self._update_y,
        }
        self.intermediate = None

    def _axis_update(self, point: Point, candidate: Point):
        """1D Metropolis step from point to candidate"""
        log_prob_current = log_density(point, self.components)
        log_prob_proposal = log_density(candidate, self.components)
        accepted, alpha, _ = accept_reject(log_prob_proposal - log_prob_current, self.rng)
        return accepted, alpha, log_prob_current, log_prob_proposal

    def _start_cycle(self):
        record = StepResult(
            current=self.start,
            is_finished_step=False,
            delay=1000,
            details=StepDetails(
                description="Start Gibbs cycle: hold y fixed, sample x",
                phase=Phase.COMPUTE,
            ),
        )
        return record, GibbsState.UPDATE_X

    def _update_x(self):
        candidate = Point(self.start.x + self.rng.normal() * self.params.step_size, self.start.y)
        accepted, alpha, lp_current, lp_proposal = self._axis_update(self.start, candidate)
        self.intermediate = candidate if accepted else self.start
        record = StepResult(
            current=self.intermediate,
            proposal=candidate,
            is_finished_step=False,
            delay=2000,
            details=StepDetails(
                description=f"Sampled x = {self.intermediate.x:.2f}; now hold x, sample y",
                phase=Phase.MOVE_X,
                log_prob_current=lp_current,
                log_prob_proposal=lp_proposal,
                acceptance_prob=alpha,
            ),
        )
        return record, GibbsState.UPDATE_Y

    def _update_y(self):
        mid = self.intermediate
        candidate = Point(mid.x, mid.y + self.rng.normal() * self.params.step_size)
        accepted, alpha, lp_current, lp_proposal = self._axis_update(mid, candidate)
        final = candidate if accepted else mid
        moved = final.x != self.start.x or final.y != self.start.y
        record = StepResult(
            current=final,
            proposal=candidate,
            accepted=moved,
            is_finished_step=True,
            delay=2000,
            details=StepDetails(
                description=f"Sampled y; cycle complete at ({final.x:.2f}, {final.y:.2f})",
                phase=Phase.MOVE_Y,
                log_prob_current=lp_current,
                log_prob_proposal=lp_proposal,
                acceptance_prob=alpha,
            ),
        )
        return record, None
