"""
Description:
    Hamiltonian structure for a GMM target.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""
from typing import NamedTuple, Callable, Optional, Sequence
import jax.numpy as jnp
from .datatypes import QP, GMMComponent, MassMatrix
from .target import gen_gmm_target

class Hamiltonian(NamedTuple):
    """
    Hamiltonian(q,p) = U(q) + K(p)
    For standard HMC:
        U(q) = -log π(q)
        K(p) = 0.5 *  p.T@ M^{-1}@ p
    """
    potential: Callable[[jnp.ndarray], jnp.ndarray] # U(q)
    potential_grad: Callable[[jnp.ndarray], jnp.ndarray] # ∂U/∂q
    mass_inv: MassMatrix

    def kinetic(self, p: jnp.ndarray) -> float:
        return 0.5 * float(jnp.dot(p, self.mass_inv @ p))

    def energy(self, qp: QP) -> float:
        """total energy H(q,p) = U(q) + K(p)"""
        return float(self.potential(qp.q)) + self.kinetic(qp.p)

    def grad_q(self, qp: QP) -> jnp.ndarray:
        """∂H/∂q = ∂U/∂q"""
        return self.potential_grad(qp.q)

    def grad_p(self, qp: QP) -> jnp.ndarray:
        """∂H/∂p = M^{-1} p"""
        return self.mass_inv @ qp.p

def gmm_hamiltonian(
    components: Sequence[GMMComponent],
    mass_inv: Optional[MassMatrix] = None
) -> Hamiltonian:
    """
    U(q) = -log_density(q), ∂U/∂q = -grad_log_density(q)
    Identity mass unless mass_inv is given.
    """
    target, grad_target = gen_gmm_target(components)
    if mass_inv is None:
        mass_inv = jnp.eye(2)

    def potential(q: jnp.ndarray) -> jnp.ndarray:
        return -target(q)

    def potential_grad(q: jnp.ndarray) -> jnp.ndarray:
        return -grad_target(q)

    return Hamiltonian(potential=potential, potential_grad=potential_grad, mass_inv=mass_inv)
