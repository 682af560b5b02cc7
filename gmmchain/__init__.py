"""
Description:
    Step-emitting MCMC samplers (MH, Gibbs, HMC, NUTS) on a 2D Gaussian mixture.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""

import jax

# float64 throughout; must run before any array is created
jax.config.update("jax_enable_x64", True)

from .datatypes import (  # noqa: E402
    Algorithm,
    GMMComponent,
    Phase,
    Point,
    SimulationParams,
    StepDetails,
    StepResult,
)
from .rng import JaxRandomSource, RandomSource, box_muller  # noqa: E402
from .target import DEFAULT_GMM, grad_log_density, log_density  # noqa: E402
from .metropolis import Gibbs, MetropolisHastings  # noqa: E402
from .hmc import HMC, NUTS, MAX_TREE_STEPS  # noqa: E402
from .chain import Chain, make_sampler, run_cycle, sample  # noqa: E402

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "GMMComponent",
    "Phase",
    "Point",
    "SimulationParams",
    "StepDetails",
    "StepResult",
    "JaxRandomSource",
    "RandomSource",
    "box_muller",
    "DEFAULT_GMM",
    "grad_log_density",
    "log_density",
    "Gibbs",
    "MetropolisHastings",
    "HMC",
    "NUTS",
    "MAX_TREE_STEPS",
    "Chain",
    "make_sampler",
    "run_cycle",
    "sample",
]
