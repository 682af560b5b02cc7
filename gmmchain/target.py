"""
Description:
    Target density: weighted mixture of 2D Gaussians with full covariance.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1

log p(x) = ln( Σ_i w_i N(x; μ_i, Σ_i) + FLOOR )
∇ log p(x) = Σ_i d_i (-Σ_i^{-1} dx_i) / ( Σ_i d_i + FLOOR )

Both come from the same per-component terms (_component_terms) so the
log-density and its gradient cannot drift apart.
"""
from typing import Sequence, Tuple
import jax
import jax.numpy as jnp
from .datatypes import GMMComponent, Point, LogDensity, GradLogDensity

FLOOR = 1e-20 # keeps ln() finite when every component underflows

DEFAULT_GMM: Tuple[GMMComponent, ...] = (
    GMMComponent(id=1, mu=(-2.0, -2.0), sigma=((1.0, 0.5), (0.5, 1.0)), weight=0.4),
    GMMComponent(id=2, mu=(2.0, 2.0), sigma=((1.2, -0.6), (-0.6, 1.2)), weight=0.6),
)

def stack_components(
        components: Sequence[GMMComponent]
) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """(K,2) means, (K,2,2) covariances, (K,) weights"""
    mu = jnp.array([g.mu for g in components], dtype=float)
    sigma = jnp.array([g.sigma for g in components], dtype=float)
    weight = jnp.array([g.weight for g in components], dtype=float)
    return mu, sigma, weight

@jax.jit
def _component_terms(
        q: jnp.ndarray,
        mu: jnp.ndarray,
        sigma: jnp.ndarray,
        weight: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Per-component weighted density and local gradient of the exponent.

    Uses the closed-form 2x2 inverse; det sign is not assumed, the
    normalisation takes |det|.

    Returns:
        density: (K,) w_i * N(q; μ_i, Σ_i)
        grad: (K,2) -Σ_i^{-1} (q - μ_i)
    """
    s00, s01 = sigma[:, 0, 0], sigma[:, 0, 1]
    s10, s11 = sigma[:, 1, 0], sigma[:, 1, 1]
    det = s00 * s11 - s01 * s10
    inv = jnp.stack([
        jnp.stack([s11, -s01], axis=-1),
        jnp.stack([-s10, s00], axis=-1)
    ], axis=-2) / det[:, None, None]

    dx = q[None, :] - mu
    inv_dx = jnp.einsum("kij,kj->ki", inv, dx)
    mahalanobis = jnp.sum(dx * inv_dx, axis=-1)
    norm = 1.0 / (2.0 * jnp.pi * jnp.sqrt(jnp.abs(det)))
    density = weight * norm * jnp.exp(-0.5 * mahalanobis)
    return density, -inv_dx

@jax.jit
def _log_density(q, mu, sigma, weight) -> jnp.ndarray:
    density, _ = _component_terms(q, mu, sigma, weight)
    return jnp.log(jnp.sum(density) + FLOOR)

@jax.jit
def _grad_log_density(q, mu, sigma, weight) -> jnp.ndarray:
    density, grad = _component_terms(q, mu, sigma, weight)
    return jnp.sum(density[:, None] * grad, axis=0) / (jnp.sum(density) + FLOOR)

def log_density(point: Point, components: Sequence[GMMComponent]) -> float:
    """Natural log of the floored mixture density at point"""
    return float(_log_density(point.to_array(), *stack_components(components)))

def grad_log_density(point: Point, components: Sequence[GMMComponent]) -> Point:
    """Analytic gradient of log_density at point"""
    return Point.from_array(
        _grad_log_density(point.to_array(), *stack_components(components))
    )

def gen_gmm_target(
        components: Sequence[GMMComponent]
) -> Tuple[LogDensity, GradLogDensity]:
    """
    Array-level log-density and gradient closed over one mixture.

    Stacks the components once so integrators can evaluate many
    positions without rebuilding arrays.
    """
    mu, sigma, weight = stack_components(components)

    def target(q: jnp.ndarray) -> jnp.ndarray:
        return _log_density(q, mu, sigma, weight)

    def grad_target(q: jnp.ndarray) -> jnp.ndarray:
        return _grad_log_density(q, mu, sigma, weight)

    return target, grad_target
