"""
Test suite for gmmchain.

Checks the mixture density against hand-computed values and finite
differences, the leapfrog pieces against the analytic leapfrog map for a
standard normal target, and the four sampler state machines against their
emission contracts.
"""

import math

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from gmmchain.chain import Chain, make_sampler, resolve_algorithm, run_cycle, sample
from gmmchain.config import AppConfig, config_from_mapping, load_app_config
from gmmchain.datatypes import QP, Algorithm, GMMComponent, Phase, Point, SimulationParams
from gmmchain.hamiltonian import gmm_hamiltonian
from gmmchain.hmc import DIVERGENCE, HMC, MAX_STEPS_REACHED, MAX_TREE_STEPS, NUTS, NUTSState, U_TURN
from gmmchain.integrator import lf_step
from gmmchain.metrics import summarize_chain
from gmmchain.metropolis import Gibbs, MetropolisHastings
from gmmchain.rng import JaxRandomSource, box_muller
from gmmchain.target import (
    DEFAULT_GMM,
    FLOOR,
    _grad_log_density,
    _log_density,
    grad_log_density,
    log_density,
    stack_components,
)
from gmmchain.validation import validate_components, validate_params
from gmmchain.__main__ import main

# Enable 64-bit precision
jax.config.update("jax_enable_x64", True)


# ============================================================================
# Fixtures and helpers
# ============================================================================

STANDARD_NORMAL = (GMMComponent(id=1, mu=(0.0, 0.0), sigma=((1.0, 0.0), (0.0, 1.0)), weight=1.0),)

MIX_5 = (
    GMMComponent(id=1, mu=(-2.0, -2.0), sigma=((1.0, 0.5), (0.5, 1.0)), weight=0.3),
    GMMComponent(id=2, mu=(2.0, 2.0), sigma=((1.2, -0.6), (-0.6, 1.2)), weight=0.2),
    GMMComponent(id=3, mu=(0.0, 1.5), sigma=((0.5, 0.1), (0.1, 0.8)), weight=0.2),
    GMMComponent(id=4, mu=(1.0, -1.0), sigma=((2.0, 0.0), (0.0, 0.3)), weight=0.2),
    GMMComponent(id=5, mu=(-1.0, 2.5), sigma=((0.7, -0.2), (-0.2, 0.4)), weight=0.1),
)

TEST_POINTS = [Point(0.3, -0.7), Point(-1.5, 0.8), Point(2.1, 1.9), Point(0.0, 0.0)]


class ScriptedSource:
    """RandomSource replaying fixed draws"""

    def __init__(self, normals=(), uniforms=()):
        self.normals = list(normals)
        self.uniforms = list(uniforms)

    def normal(self) -> float:
        return self.normals.pop(0)

    def uniform(self) -> float:
        return self.uniforms.pop(0)


def mixture_density_numpy(point, components):
    """Reference mixture density with numpy linear algebra"""
    x = np.array([point.x, point.y])
    total = 0.0
    for g in components:
        sigma = np.array(g.sigma)
        dx = x - np.array(g.mu)
        maha = dx @ np.linalg.inv(sigma) @ dx
        total += g.weight * np.exp(-0.5 * maha) / (2 * np.pi * np.sqrt(abs(np.linalg.det(sigma))))
    return total


def leapfrog_analytic(x: np.ndarray, tau: float) -> np.ndarray:
    """
    Analytical leapfrog step for U(q) = q²/2, acting on (q, p) per axis
    """
    LF_step = np.array([
        [1 - tau**2/2, tau],
        [-tau + tau**3/4, 1 - tau**2/2]
    ])
    return LF_step @ x


def phases(records):
    return [r.details.phase for r in records]


# ============================================================================
# Target density
# ============================================================================

def test_log_density_standard_normal():
    """Single identity component at the origin: p(0) = 1/(2π)"""
    print("=" * 70)
    print("Testing log-density of a standard normal")
    print("=" * 70)

    lp = log_density(Point(0.0, 0.0), STANDARD_NORMAL)
    print(f"log p(0) = {lp:.12f}, expected {math.log(1 / (2 * math.pi)):.12f}")

    assert math.isfinite(lp)
    assert np.isclose(math.exp(lp), 1 / (2 * math.pi), rtol=1e-12), "density at origin != 1/(2π)"
    lp1 = log_density(Point(1.0, 0.0), STANDARD_NORMAL)
    assert np.isclose(lp - lp1, 0.5, atol=1e-12)
    print("\n✓ Standard normal log-density PASSED")


@pytest.mark.parametrize("components", [STANDARD_NORMAL, DEFAULT_GMM, MIX_5])
def test_log_density_matches_numpy(components):
    for point in TEST_POINTS:
        expected = np.log(mixture_density_numpy(point, components) + FLOOR)
        assert np.isclose(log_density(point, components), expected, atol=1e-10), point


def test_log_density_floor_far_from_mass():
    """Underflowed mixture density falls back to ln(1e-20)"""
    far = Point(1e3, -1e3)
    lp = log_density(far, DEFAULT_GMM)
    grad = grad_log_density(far, DEFAULT_GMM)

    assert math.isfinite(lp)
    assert np.isclose(lp, math.log(FLOOR))
    assert math.isfinite(grad.x) and math.isfinite(grad.y)


@pytest.mark.parametrize("components", [STANDARD_NORMAL, DEFAULT_GMM, MIX_5])
def test_grad_log_density_finite_difference(components):
    """Analytic gradient vs central differences, mixtures of size 1, 2 and 5"""
    h = 1e-5
    for point in TEST_POINTS:
        grad = grad_log_density(point, components)
        fd_x = (log_density(Point(point.x + h, point.y), components)
                - log_density(Point(point.x - h, point.y), components)) / (2 * h)
        fd_y = (log_density(Point(point.x, point.y + h), components)
                - log_density(Point(point.x, point.y - h), components)) / (2 * h)
        print(f"{len(components)} comps at {tuple(point)}: analytic {tuple(grad)}, fd ({fd_x:.6f}, {fd_y:.6f})")
        assert abs(grad.x - fd_x) < 1e-3
        assert abs(grad.y - fd_y) < 1e-3


def test_grad_log_density_matches_autodiff():
    arrays = stack_components(MIX_5)
    for point in TEST_POINTS:
        q = point.to_array()
        auto = jax.grad(_log_density)(q, *arrays)
        analytic = _grad_log_density(q, *arrays)
        assert np.allclose(auto, analytic, atol=1e-10)


def test_singular_covariance_is_not_finite():
    singular = (GMMComponent(id=1, mu=(0.0, 0.0), sigma=((1.0, 1.0), (1.0, 1.0)), weight=1.0),)
    assert not math.isfinite(log_density(Point(1.0, 0.0), singular))


# ============================================================================
# Random numbers
# ============================================================================

def test_box_muller():
    assert box_muller(1.0, 0.0) == 0.0
    assert np.isclose(box_muller(math.exp(-0.5), 0.0), 1.0)
    assert np.isclose(box_muller(math.exp(-2.0), 0.5), -2.0)


def test_jax_random_source_replays_and_moments():
    a, b = JaxRandomSource(seed=3), JaxRandomSource(seed=3)
    assert [a.uniform() for _ in range(5)] == [b.uniform() for _ in range(5)]
    assert [a.normal() for _ in range(5)] == [b.normal() for _ in range(5)]

    rng = JaxRandomSource(seed=11)
    u = np.array([rng.uniform() for _ in range(1000)])
    z = np.array([rng.normal() for _ in range(2000)])
    assert np.all((u >= 0.0) & (u < 1.0))
    assert abs(z.mean()) < 0.1
    assert abs(z.std() - 1.0) < 0.1


# ============================================================================
# Integrator
# ============================================================================

def test_leapfrog():
    """Test fused leapfrog step against the analytical solution"""
    print("=" * 70)
    print("Testing Leapfrog Integrator")
    print("=" * 70)

    tau = 0.1
    H = gmm_hamiltonian(STANDARD_NORMAL)
    x0 = QP(q=jnp.array([1.0, -0.5]), p=jnp.array([0.3, -0.8]))

    x_lf = lf_step(x0, H, tau)
    for axis in range(2):
        expected = leapfrog_analytic(np.array([x0.q[axis], x0.p[axis]]), tau)
        got = np.array([x_lf.q[axis], x_lf.p[axis]])
        print(f"axis {axis}: numerical {got}, analytic {expected}")
        assert np.allclose(got, expected, atol=1e-10), "Leapfrog test failed!"

    H0, H1 = H.energy(x0), H.energy(x_lf)
    print(f"Energy error (LF)   : {abs(H1 - H0):.2e}")
    assert abs(H1 - H0) < 1e-2
    print("\n✓ Leapfrog test PASSED")


def test_hamiltonian_energy():
    H = gmm_hamiltonian(DEFAULT_GMM)
    qp = QP(q=jnp.array([0.5, -1.0]), p=jnp.array([1.0, 2.0]))
    expected = -log_density(Point(0.5, -1.0), DEFAULT_GMM) + 0.5 * 5.0
    assert np.isclose(H.energy(qp), expected, atol=1e-12)


# ============================================================================
# Metropolis-Hastings
# ============================================================================

def test_mh_scripted_accept():
    params = SimulationParams(step_size=0.5)
    rng = ScriptedSource(normals=[1.0, 1.0], uniforms=[0.0])
    sampler = MetropolisHastings(Point(0.0, 0.0), params, DEFAULT_GMM, rng)
    records = list(sampler)

    assert phases(records) == [Phase.PROPOSAL, Phase.COMPUTE, Phase.ACCEPT]
    assert records[0].proposal == Point(0.5, 0.5)
    lp0 = log_density(Point(0.0, 0.0), DEFAULT_GMM)
    lp1 = log_density(Point(0.5, 0.5), DEFAULT_GMM)
    assert np.isclose(records[1].details.acceptance_prob, min(1.0, math.exp(lp1 - lp0)))
    assert records[2].accepted is True
    assert records[2].current == Point(0.5, 0.5)
    assert sampler.result == records[-1].current
    assert [r.delay for r in records] == [1500, 1500, 2000]


def test_mh_scripted_reject():
    params = SimulationParams(step_size=0.5)
    rng = ScriptedSource(normals=[20.0, 20.0], uniforms=[0.5])
    records = list(MetropolisHastings(Point(0.0, 0.0), params, DEFAULT_GMM, rng))

    assert records[1].details.acceptance_prob < 1e-10
    assert records[2].details.phase == Phase.REJECT
    assert records[2].accepted is False
    assert records[2].current == Point(0.0, 0.0)
    assert records[2].proposal == Point(10.0, 10.0)


def test_mh_end_to_end_phases():
    """Three emissions from the origin on the default mixture"""
    params = SimulationParams(step_size=0.5)
    sampler = make_sampler(Algorithm.MH, Point(0.0, 0.0), params, DEFAULT_GMM, JaxRandomSource(0))
    records = [sampler.step() for _ in range(3)]

    assert records[0].details.phase == Phase.PROPOSAL
    assert records[1].details.phase == Phase.COMPUTE
    assert records[2].details.phase in (Phase.ACCEPT, Phase.REJECT)
    assert [r.is_finished_step for r in records] == [False, False, True]
    assert sampler.done


def test_mh_small_step_acceptance():
    """σ = 0.001 makes every density ratio ~1"""
    print("=" * 70)
    print("MH acceptance rate at tiny step size")
    print("=" * 70)
    chain = Chain()
    sample(chain, 1000, "mh", SimulationParams(step_size=0.001), DEFAULT_GMM, JaxRandomSource(0))
    print(f"acceptance rate: {chain.acceptance_rate:.4f}")
    assert chain.total == 1000
    assert chain.acceptance_rate > 0.95


def test_mh_terminal_is_proposal_or_start():
    rng = JaxRandomSource(5)
    params = SimulationParams(step_size=1.0)
    for _ in range(30):
        records = list(MetropolisHastings(Point(0.0, 0.0), params, DEFAULT_GMM, rng))
        final = records[-1]
        assert final.current in (Point(0.0, 0.0), final.proposal)
        assert final.accepted == (final.current == final.proposal)


# ============================================================================
# Gibbs
# ============================================================================

def test_gibbs_scripted_move_x_only():
    params = SimulationParams(step_size=0.5)
    rng = ScriptedSource(normals=[0.2, 20.0], uniforms=[0.0, 0.5])
    records = list(Gibbs(Point(0.0, 0.0), params, DEFAULT_GMM, rng))

    assert phases(records) == [Phase.COMPUTE, Phase.MOVE_X, Phase.MOVE_Y]
    assert records[1].current == Point(0.1, 0.0)
    assert records[2].proposal == Point(0.1, 10.0)
    assert records[2].current == Point(0.1, 0.0)
    # moved on x, so the cycle counts as accepted even though y was rejected
    assert records[2].accepted is True
    assert records[2].is_finished_step


def test_gibbs_scripted_no_move():
    params = SimulationParams(step_size=0.5)
    rng = ScriptedSource(normals=[20.0, 20.0], uniforms=[0.5, 0.5])
    records = list(Gibbs(Point(0.0, 0.0), params, DEFAULT_GMM, rng))

    assert records[1].current == Point(0.0, 0.0)
    assert records[2].current == Point(0.0, 0.0)
    assert records[2].accepted is False
    assert [r.delay for r in records] == [1000, 2000, 2000]


def test_gibbs_terminal_axes_are_proposal_or_start():
    rng = JaxRandomSource(9)
    params = SimulationParams(step_size=1.5)
    start = Point(-1.0, 0.5)
    for _ in range(30):
        records = list(Gibbs(start, params, DEFAULT_GMM, rng))
        assert len(records) == 3
        final = records[-1].current
        assert final.x in (start.x, records[1].proposal.x)
        assert final.y in (start.y, records[2].proposal.y)
        assert records[-1].accepted == (final != start)


# ============================================================================
# HMC
# ============================================================================

def test_hmc_matches_analytic_leapfrog():
    """L = 1 on a standard normal reproduces the analytic leapfrog map"""
    tau = 0.1
    params = SimulationParams(step_size=2 * tau, num_steps=1)
    q0, p0 = np.array([1.0, -0.5]), np.array([0.3, -0.8])
    rng = ScriptedSource(normals=list(p0), uniforms=[0.0])
    records = list(HMC(Point(*q0), params, STANDARD_NORMAL, rng))

    q1 = np.empty(2)
    p1 = np.empty(2)
    for axis in range(2):
        q1[axis], p1[axis] = leapfrog_analytic(np.array([q0[axis], p0[axis]]), tau)

    final = records[-1]
    assert np.allclose(final.path[1], q1, atol=1e-10)
    U = lambda q: 0.5 * q @ q + math.log(2 * math.pi)
    assert np.isclose(final.details.current_h, U(q0) + 0.5 * p0 @ p0, atol=1e-10)
    assert np.isclose(final.details.proposed_h, U(q1) + 0.5 * p1 @ p1, atol=1e-10)
    assert final.accepted is True
    assert np.allclose(final.current, q1, atol=1e-10)


def test_hmc_trajectory_length():
    """num_steps = 10: 12 emissions, 11 trajectory points"""
    params = SimulationParams(step_size=0.5, num_steps=10)
    records = list(HMC(Point(0.0, 0.0), params, DEFAULT_GMM, JaxRandomSource(1)))

    assert len(records) == 12
    assert records[0].details.phase == Phase.MOMENTUM
    assert all(p == Phase.LEAPFROG for p in phases(records[1:-1]))
    assert records[-1].details.phase in (Phase.ACCEPT, Phase.REJECT)
    assert len(records[-1].path) == 11
    assert records[-1].path[0] == Point(0.0, 0.0)

    # trajectory only grows; earlier entries never change
    for i, rec in enumerate(records[1:-1]):
        assert len(rec.path) == i + 2
        assert rec.path == records[-1].path[: i + 2]
        assert rec.delay == 250
        assert rec.details.gradient is not None


def test_hmc_energy_error_vanishes():
    params = SimulationParams(step_size=1e-4, num_steps=1)
    rng = JaxRandomSource(2)
    for _ in range(20):
        final = list(HMC(Point(0.5, -0.5), params, DEFAULT_GMM, rng))[-1]
        delta_h = final.details.proposed_h - final.details.current_h
        assert abs(delta_h) < 1e-2


def test_hmc_terminal_is_proposal_or_start():
    rng = JaxRandomSource(4)
    params = SimulationParams(step_size=1.5, num_steps=5)
    start = Point(1.0, 1.0)
    for _ in range(20):
        final = list(HMC(start, params, DEFAULT_GMM, rng))[-1]
        assert final.proposal == final.path[-1]
        assert final.current in (start, final.proposal)


# ============================================================================
# NUTS
# ============================================================================

def test_nuts_terminates_within_max_steps():
    """U-turn or divergence before the step cap in >= 99 of 100 runs"""
    print("=" * 70)
    print("NUTS termination")
    print("=" * 70)
    params = SimulationParams(step_size=0.5)
    rng = JaxRandomSource(7)
    stopped_early = 0
    for _ in range(100):
        sampler = NUTS(Point(0.0, 0.0), params, DEFAULT_GMM, rng)
        records = list(sampler)
        tree = [r for r in records if r.details.phase == Phase.TREE_BUILD]

        assert 1 <= len(tree) <= MAX_TREE_STEPS
        assert len(records) == len(tree) + 2
        assert records[0].details.phase == Phase.MOMENTUM
        assert records[-1].is_finished_step
        assert all(r.details.u_turn_dot is not None for r in tree)
        assert len(records[-1].path) == len(tree) + 1

        final = records[-1]
        assert final.accepted is True
        assert final.current in final.path
        if final.details.termination in (U_TURN, DIVERGENCE):
            stopped_early += 1
    print(f"stopped before the cap: {stopped_early}/100")
    assert stopped_early >= 99


def test_nuts_u_turn_reason_in_description():
    params = SimulationParams(step_size=0.5)
    rng = JaxRandomSource(21)
    for _ in range(10):
        records = list(NUTS(Point(2.0, 2.0), params, DEFAULT_GMM, rng))
        final = records[-1]
        assert final.details.termination in final.details.description
        assert records[-2].details.termination == final.details.termination
        if final.details.termination == U_TURN:
            assert records[-2].details.u_turn_dot < 0.0


NARROW_WELL = (GMMComponent(id=1, mu=(0.0, 0.0), sigma=((1e-6, 0.0), (0.0, 1e-6)), weight=1.0),)


def run_to_select(sampler):
    """Step a NUTS sampler until only the selection step remains"""
    records = []
    while sampler.state is not NUTSState.SELECT:
        records.append(sampler.step())
    return records


def test_nuts_divergence_stops_tree():
    """
    Starting on the wall of a very narrow well, the first kick throws the
    particle far away with enormous kinetic energy
    """
    print("=" * 70)
    print("NUTS divergence")
    print("=" * 70)
    start = Point(0.01, 0.0)
    rng = ScriptedSource(normals=[0.0, 0.0], uniforms=[0.5, 0.5])
    sampler = NUTS(start, SimulationParams(step_size=0.5), NARROW_WELL, rng)
    records = list(sampler)
    tree = [r for r in records if r.details.phase == Phase.TREE_BUILD]

    print(f"ΔH at first tree step: {tree[0].details.current_h - records[0].details.current_h:.3e}")
    assert len(tree) == 1
    assert tree[0].details.current_h - records[0].details.current_h > 1000.0
    assert tree[0].details.termination == DIVERGENCE
    final = records[-1]
    assert final.details.termination == DIVERGENCE
    assert DIVERGENCE in final.details.description
    # only the start is inside the slice
    assert sampler.candidates == [start]
    assert final.current == start
    print("\n✓ NUTS divergence PASSED")


def test_nuts_step_cap():
    """At the mode with a tiny step the trajectory never turns back"""
    rng = ScriptedSource(normals=[1.0, 1.0], uniforms=[0.999999, 0.5])
    records = list(NUTS(Point(2.0, 2.0), SimulationParams(step_size=1e-3), DEFAULT_GMM, rng))
    tree = [r for r in records if r.details.phase == Phase.TREE_BUILD]

    assert len(tree) == MAX_TREE_STEPS
    assert len(records) == MAX_TREE_STEPS + 2
    assert all(r.details.u_turn_dot >= 0.0 for r in tree)
    assert all(r.details.termination is None for r in tree[:-1])
    assert tree[-1].details.termination == MAX_STEPS_REACHED
    final = records[-1]
    assert final.details.termination == MAX_STEPS_REACHED
    assert MAX_STEPS_REACHED in final.details.description
    assert len(final.path) == MAX_TREE_STEPS + 1


def test_nuts_can_stay_at_start():
    """The start is always a candidate, so a draw of 0 keeps the chain in place"""
    start = Point(2.0, 2.0)
    rng = ScriptedSource(normals=[1.0, 1.0], uniforms=[0.5, 0.0])
    sampler = NUTS(start, SimulationParams(step_size=1e-3), DEFAULT_GMM, rng)
    final = list(sampler)[-1]

    assert sampler.candidates[0] == start
    assert len(sampler.candidates) > 1
    assert final.current == start
    assert final.accepted is True
    assert final.details.phase == Phase.ACCEPT


def test_nuts_empty_candidates_stay_put():
    """With nothing to select from the chain stays at the start, not accepted"""
    start = Point(0.01, 0.0)
    rng = ScriptedSource(normals=[0.0, 0.0], uniforms=[0.5])
    sampler = NUTS(start, SimulationParams(step_size=0.5), NARROW_WELL, rng)
    run_to_select(sampler)
    sampler.candidates.clear()
    final = sampler.step()

    assert final.is_finished_step
    assert final.accepted is False
    assert final.current == start
    assert final.details.phase == Phase.REJECT
    assert sampler.result == start


# ============================================================================
# State machine contract and driver
# ============================================================================

@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_state_machine_contract(algorithm):
    params = SimulationParams(step_size=0.5, num_steps=3)
    sampler = make_sampler(algorithm, Point(0.0, 0.0), params, DEFAULT_GMM, JaxRandomSource(0))

    with pytest.raises(RuntimeError):
        sampler.result
    records = list(sampler)
    assert sum(r.is_finished_step for r in records) == 1
    assert records[-1].is_finished_step
    assert sampler.done
    assert sampler.result == records[-1].current
    with pytest.raises(RuntimeError):
        sampler.step()
    with pytest.raises(StopIteration):
        next(sampler)


def test_resolve_algorithm():
    assert resolve_algorithm("hmc") is Algorithm.HMC
    assert resolve_algorithm("NUTS (Visual Approx)") is Algorithm.NUTS
    assert resolve_algorithm(Algorithm.GIBBS) is Algorithm.GIBBS
    with pytest.raises(ValueError):
        resolve_algorithm("slice")


def test_chain_commit_and_history_cap():
    chain = Chain(max_history=5)
    rng = JaxRandomSource(0)
    records = run_cycle(chain, "gibbs", SimulationParams(step_size=0.5), DEFAULT_GMM, rng)
    assert len(records) == 3
    assert chain.total == 1
    assert chain.history == [Point(0.0, 0.0), records[-1].current]

    with pytest.raises(ValueError):
        chain.commit(records[0])

    for _ in range(10):
        run_cycle(chain, "mh", SimulationParams(step_size=0.5), DEFAULT_GMM, rng)
    assert len(chain.history) == 5
    assert chain.total == 11
    assert chain.history[-1] == chain.current
    assert 0.0 <= chain.acceptance_rate <= 1.0

    chain.reset(Point(1.0, 1.0))
    assert chain.history == [Point(1.0, 1.0)]
    assert chain.total == 0 and chain.acceptance_rate == 0.0


def test_sample_validates_inputs():
    with pytest.raises(ValueError):
        sample(Chain(), 1, "mh", SimulationParams(step_size=0.5), [], JaxRandomSource(0))
    with pytest.raises(ValueError):
        sample(Chain(), 1, "mh", SimulationParams(step_size=0.0), DEFAULT_GMM, JaxRandomSource(0))


def test_summarize_chain():
    chain = Chain(history=[Point(0.0, 0.0), Point(2.0, 0.0), Point(0.0, 2.0), Point(2.0, 2.0)])
    summary = summarize_chain(chain)
    X = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0], [2.0, 2.0]])
    assert summary.n_samples == 4
    assert np.allclose(summary.mean, [1.0, 1.0])
    assert np.allclose(summary.cov, np.cov(X.T))
    with pytest.raises(ValueError):
        summarize_chain(chain, burn_in=3)


# ============================================================================
# Validation and configuration
# ============================================================================

def test_validate_params():
    validate_params(SimulationParams(step_size=0.5, num_steps=10))
    with pytest.raises(ValueError, match="step_size"):
        validate_params(SimulationParams(step_size=-1.0))
    with pytest.raises(ValueError, match="num_steps"):
        validate_params(SimulationParams(step_size=0.5, num_steps=0))


def test_validate_components():
    validate_components(DEFAULT_GMM)
    validate_components(MIX_5)
    with pytest.raises(ValueError, match="at least one"):
        validate_components([])
    with pytest.raises(ValueError, match="invertible"):
        validate_components([GMMComponent(1, (0.0, 0.0), ((1.0, 1.0), (1.0, 1.0)), 1.0)])
    with pytest.raises(ValueError, match="symmetric"):
        validate_components([GMMComponent(1, (0.0, 0.0), ((1.0, 0.2), (0.1, 1.0)), 1.0)])
    with pytest.raises(ValueError, match="weight"):
        validate_components([GMMComponent(1, (0.0, 0.0), ((1.0, 0.0), (0.0, 1.0)), -0.5)])
    with pytest.raises(ValueError, match="unique"):
        validate_components([STANDARD_NORMAL[0], STANDARD_NORMAL[0]])


def test_load_app_config(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(
        "run:\n"
        "  algorithm: nuts\n"
        "  seed: 4\n"
        "  samples: 25\n"
        "  start: [1.0, -1.0]\n"
        "sampler:\n"
        "  step_size: 0.3\n"
        "  num_steps: 7\n"
        "logging:\n"
        "  level: DEBUG\n"
        "components:\n"
        "  - {id: 1, mu: [0, 0], sigma: [[1, 0], [0, 1]], weight: 1}\n",
        encoding="utf-8",
    )
    cfg = load_app_config(path)
    assert cfg.run.algorithm is Algorithm.NUTS
    assert cfg.run.seed == 4 and cfg.run.samples == 25
    assert cfg.run.start == Point(1.0, -1.0)
    assert cfg.sampler == SimulationParams(step_size=0.3, num_steps=7)
    assert cfg.logging.level == "DEBUG"
    assert cfg.components == STANDARD_NORMAL


def test_config_defaults_and_errors():
    cfg = config_from_mapping({})
    assert cfg.components == DEFAULT_GMM
    assert cfg.run.algorithm is Algorithm.MH
    assert cfg.sampler == AppConfig().sampler
    with pytest.raises(ValueError):
        config_from_mapping({"sampler": {"step_size": 0}})
    with pytest.raises(ValueError):
        config_from_mapping({"run": {"algorithm": "langevin"}})


def test_cli_runs(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("run: {algorithm: gibbs, samples: 3}\nlogging: {level: WARNING}\n", encoding="utf-8")
    main(["--config", str(path), "--seed", "2"])
    main(["--algorithm", "hmc", "--samples", "2"])


if __name__ == "__main__":
    print("JAX Configuration:")
    print(f"64-bit precision enabled: {jax.config.jax_enable_x64}")
    print()

    test_log_density_standard_normal()
    test_leapfrog()
    test_mh_small_step_acceptance()
    test_nuts_terminates_within_max_steps()

    print("\n" + "=" * 70)
    print("All tests PASSED! ✓")
    print("=" * 70)
