"""
Description:
    Core data structures for gmmchain.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1

All modules import from here to ensure type consistency and avoid indexing bugs.
"""
from enum import Enum
from typing import NamedTuple, Callable, Optional, Tuple
import jax.numpy as jnp

class Point(NamedTuple):
    """Position on the 2D plane"""
    x: float
    y: float

    def to_array(self) -> jnp.ndarray:
        """Convert to length-2 array [x, y]"""
        return jnp.array([self.x, self.y])
    @classmethod
    def from_array(cls, arr: jnp.ndarray):
        """Convert from array [x, y], detaching to python floats"""
        return cls(x=float(arr[0]), y=float(arr[1]))

class QP(NamedTuple):
    """Phase space state(q,p)"""
    q: jnp.ndarray # position
    p: jnp.ndarray # momentum

class GMMComponent(NamedTuple):
    """One weighted 2D Gaussian of the target mixture"""
    id: int
    mu: Tuple[float, float]
    sigma: Tuple[Tuple[float, float], Tuple[float, float]] # symmetric, det != 0
    weight: float

class SimulationParams(NamedTuple):
    step_size: float # proposal sigma for MH/Gibbs, integrator scale for HMC/NUTS
    num_steps: int = 10 # leapfrog count L (HMC)
    friction: Optional[float] = None # reserved

class Phase(str, Enum):
    """Sub-step tag carried by every emitted record"""
    PROPOSAL = "proposal"
    COMPUTE = "compute"
    MOMENTUM = "momentum"
    LEAPFROG = "leapfrog"
    TREE_BUILD = "tree_build"
    MOVE_X = "move_x"
    MOVE_Y = "move_y"
    ACCEPT = "accept"
    REJECT = "reject"

class Algorithm(str, Enum):
    MH = "Metropolis-Hastings"
    GIBBS = "Gibbs Sampling"
    HMC = "Hamiltonian MC"
    NUTS = "NUTS (Visual Approx)"

class StepDetails(NamedTuple):
    """Human/machine readable record of one sub-step"""
    description: str
    phase: Phase
    log_prob_current: Optional[float] = None
    log_prob_proposal: Optional[float] = None
    acceptance_prob: Optional[float] = None
    current_h: Optional[float] = None
    proposed_h: Optional[float] = None
    gradient: Optional[Point] = None
    u_turn_dot: Optional[float] = None
    termination: Optional[str] = None

class StepResult(NamedTuple):
    """One emission of a sampler state machine"""
    current: Point
    details: StepDetails
    is_finished_step: bool
    proposal: Optional[Point] = None
    accepted: Optional[bool] = None
    path: Optional[Tuple[Point, ...]] = None # HMC/NUTS trajectory
    delay: Optional[int] = None # ms, display hint only

# Type aliases for clarity
LogDensity = Callable[[jnp.ndarray], jnp.ndarray]
GradLogDensity = Callable[[jnp.ndarray], jnp.ndarray]
MassMatrix = jnp.ndarray
