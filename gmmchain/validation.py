"""
Description:
    Caller-side validation of sampler parameters and mixture components.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1

The density module and the samplers never call these; a singular
covariance there simply yields non-finite values. Drivers and the
config loader validate before sampling.
"""
import math
from typing import List, Sequence

from .datatypes import GMMComponent, SimulationParams


def validate_params(params: SimulationParams) -> None:
    """
    Raises:
        ValueError: listing every problem found
    """
    errors = []
    if not (params.step_size > 0 and math.isfinite(params.step_size)):
        errors.append(f"step_size must be a finite value > 0, got {params.step_size}")
    if int(params.num_steps) != params.num_steps or params.num_steps < 1:
        errors.append(f"num_steps must be an integer >= 1, got {params.num_steps}")
    if errors:
        raise ValueError("Invalid simulation parameters:\n  " + "\n  ".join(errors))


def component_errors(g: GMMComponent) -> List[str]:
    errors = []
    label = f"component {g.id}"
    if len(g.mu) != 2 or not all(math.isfinite(m) for m in g.mu):
        errors.append(f"{label}: mu must be two finite numbers, got {g.mu}")
    if not (g.weight >= 0 and math.isfinite(g.weight)):
        errors.append(f"{label}: weight must be finite and >= 0, got {g.weight}")

    s = g.sigma
    if len(s) != 2 or any(len(row) != 2 for row in s):
        errors.append(f"{label}: sigma must be 2x2")
        return errors
    if s[0][1] != s[1][0]:
        errors.append(f"{label}: sigma must be symmetric, got {s}")
    det = s[0][0] * s[1][1] - s[0][1] * s[1][0]
    if det == 0 or not math.isfinite(det):
        errors.append(f"{label}: sigma must be invertible (det={det})")
    return errors


def validate_components(components: Sequence[GMMComponent]) -> None:
    """
    Raises:
        ValueError: if the mixture is empty or any component is malformed
    """
    if len(components) == 0:
        raise ValueError("Invalid mixture: at least one component is required")
    errors = []
    for g in components:
        errors.extend(component_errors(g))
    ids = [g.id for g in components]
    if len(set(ids)) != len(ids):
        errors.append(f"component ids must be unique, got {ids}")
    if errors:
        raise ValueError("Invalid mixture:\n  " + "\n  ".join(errors))
