"""
Description:
    Leapfrog pieces for Hamiltonian dynamics.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1

The samplers emit a record between position updates, so the scheme is
exposed as separate kick/drift operations instead of a fused step:

    p <- p - (τ/2) ∂U/∂q          half_kick
    q <- q + τ M^{-1} p            drift
    p <- p - τ ∂U/∂q               kick   (between drifts)
    p <- p - (τ/2) ∂U/∂q           half_kick (after the last drift)
"""
import jax.numpy as jnp
from .datatypes import QP
from .hamiltonian import Hamiltonian

def kick(qp: QP, grad_u: jnp.ndarray, τ: float) -> QP:
    """Full momentum step using a precomputed ∂U/∂q"""
    return QP(q=qp.q, p=qp.p - τ * grad_u)

def half_kick(qp: QP, grad_u: jnp.ndarray, τ: float) -> QP:
    return kick(qp, grad_u, 0.5 * τ)

def drift(qp: QP, H: Hamiltonian, τ: float) -> QP:
    """Full position step q += τ ∂H/∂p"""
    return QP(q=qp.q + τ * H.grad_p(qp), p=qp.p)

def lf_step(qp: QP, H: Hamiltonian, τ: float) -> QP:
    """
    Single fused leapfrog step (p-first).
    Equivalent to half_kick, drift, half_kick.
    """
    qp_half = half_kick(qp, H.grad_q(qp), τ)
    qp_new = drift(qp_half, H, τ)
    return half_kick(qp_new, H.grad_q(qp_new), τ)
