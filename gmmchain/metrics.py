"""
Description:
    Chain summaries. Convergence diagnostics are left to the caller.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""
from typing import NamedTuple, Sequence
import jax.numpy as jnp
import numpy as np
from .chain import Chain
from .datatypes import Point

class ChainSummary(NamedTuple):
    n_samples: int
    mean: np.ndarray # (2,)
    cov: np.ndarray # (2,2)
    acceptance_rate: float

def history_array(points: Sequence[Point]) -> jnp.ndarray:
    """(n, 2) array of positions"""
    return jnp.array([[p.x, p.y] for p in points])

def cov(X):
    Xμ = jnp.mean(X, axis = 0)
    n=X.shape[0]
    return (X - Xμ).T@(X-Xμ)/(n-1)

def summarize_chain(chain: Chain, burn_in: int = 0) -> ChainSummary:
    """Mean and covariance of the stored history after dropping burn_in points"""
    X = history_array(chain.history[burn_in:])
    n = X.shape[0]
    if n < 2:
        raise ValueError(f"Need at least 2 samples to summarize, got {n}")
    return ChainSummary(
        n_samples=n,
        mean=np.asarray(jnp.mean(X, axis=0)),
        cov=np.asarray(cov(X)),
        acceptance_rate=chain.acceptance_rate,
    )
