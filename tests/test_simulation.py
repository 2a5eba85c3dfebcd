import math

import numpy as np
import pytest

from particle import ParticleSystem
from simulation import Simulation, wrap_positions


def place(particles, xs, ys, vxs=None, vys=None):
    particles.pos_x[:] = xs
    particles.pos_y[:] = ys
    particles.vel_x[:] = 0.0 if vxs is None else vxs
    particles.vel_y[:] = 0.0 if vys is None else vys


def build(config):
    particles = ParticleSystem.from_config(config)
    return particles, Simulation(particles, config)


def test_speed_cap_clamps_fast_particles(make_config):
    config = make_config(particle_count=1, species_count=1,
                         interaction_matrix=[[0.0]], colors=[(1.0, 1.0, 1.0)],
                         max_speed=50.0)
    particles, sim = build(config)
    place(particles, [50.0], [50.0], [300.0], [400.0])

    sim.step(0.01)

    speed = math.hypot(particles.vel_x[0], particles.vel_y[0])
    assert speed == pytest.approx(50.0)
    # Direction is preserved
    assert particles.vel_y[0] / particles.vel_x[0] == pytest.approx(400.0 / 300.0)


def test_speed_cap_never_speeds_up(make_config):
    config = make_config(particle_count=1, species_count=1,
                         interaction_matrix=[[0.0]], colors=[(1.0, 1.0, 1.0)],
                         max_speed=50.0)
    particles, sim = build(config)
    place(particles, [50.0], [50.0], [3.0], [4.0])

    sim.step(0.01)

    assert particles.vel_x[0] == pytest.approx(3.0)
    assert particles.vel_y[0] == pytest.approx(4.0)


def test_friction_damps_velocity(make_config):
    config = make_config(particle_count=1, species_count=1,
                         interaction_matrix=[[0.0]], colors=[(1.0, 1.0, 1.0)],
                         friction=0.5)
    particles, sim = build(config)
    place(particles, [50.0], [50.0], [10.0], [0.0])

    sim.step(0.1)

    assert particles.vel_x[0] == pytest.approx(5.0)
    assert particles.pos_x[0] == pytest.approx(50.5)


def test_positions_wrap_into_world(make_config):
    config = make_config(particle_count=2, species_count=2, width=100.0, height=50.0)
    particles, sim = build(config)
    place(particles, [99.0, 1.0], [49.5, 25.0], [200.0, -200.0], [100.0, -100.0])

    sim.step(0.02)

    assert particles.pos_x.tolist() == pytest.approx([3.0, 97.0])
    assert particles.pos_y.tolist() == pytest.approx([1.5, 23.0])


def test_random_population_stays_contained(make_config):
    config = make_config(particle_count=60, species_count=3,
                         interaction_matrix=[[1.0, 0.5, -1.0],
                                             [-0.5, 1.0, 0.5],
                                             [0.5, -1.0, 1.0]],
                         colors=[(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)],
                         width=80.0, height=60.0, radius_min=5.0, radius_max=30.0,
                         force_scale=25.0, repulsion_scale=250.0, friction=0.035)
    particles, sim = build(config)
    rng = np.random.default_rng(0)
    particles.vel_x[:] = rng.uniform(-1000.0, 1000.0, 60)
    particles.vel_y[:] = rng.uniform(-1000.0, 1000.0, 60)

    for _ in range(5):
        sim.step(1.0 / 30.0)
        assert np.all((particles.pos_x >= 0.0) & (particles.pos_x < 80.0))
        assert np.all((particles.pos_y >= 0.0) & (particles.pos_y < 60.0))
        speeds = np.hypot(particles.vel_x, particles.vel_y)
        assert np.all(speeds <= config.max_speed * (1 + 1e-12))


def test_forces_use_pre_step_state(make_config):
    config = make_config(particle_count=2, species_count=2,
                         interaction_matrix=[[0.0, 1.0], [1.0, 0.0]])
    particles, sim = build(config)
    place(particles, [20.0, 60.0], [50.0, 50.0])
    expected_fx, expected_fy = sim.compute_forces()

    sim.step(0.5)

    np.testing.assert_allclose(particles.vel_x, expected_fx * 0.5)
    np.testing.assert_allclose(particles.vel_y, expected_fy * 0.5)


def test_step_keeps_array_identity(make_config):
    particles, sim = build(make_config())
    arrays = (particles.pos_x, particles.pos_y, particles.vel_x, particles.vel_y)
    sim.step(0.016)
    after = (particles.pos_x, particles.pos_y, particles.vel_x, particles.vel_y)
    assert all(a is b for a, b in zip(arrays, after))


def test_negative_dt_rejected(make_config):
    particles, sim = build(make_config())
    before = particles.positions()
    with pytest.raises(ValueError):
        sim.step(-0.01)
    np.testing.assert_array_equal(particles.positions(), before)


def test_mismatched_store_rejected(make_config):
    particles = ParticleSystem(4, 2, 100.0, 100.0)
    with pytest.raises(ValueError):
        Simulation(particles, make_config(particle_count=2))


def test_matrix_is_read_only(make_config):
    _, sim = build(make_config())
    with pytest.raises(ValueError):
        sim.interaction_matrix[0, 0] = 1.0


def test_step_counters(make_config):
    _, sim = build(make_config())
    sim.step(0.01)
    sim.step(0.02)
    assert sim.step_count == 2
    assert sim.elapsed_time == pytest.approx(0.03)


def test_wrap_positions_folds_far_edge_to_zero():
    values = np.array([-1e-20, 100.0, 250.0, -30.0])
    wrap_positions(values, 100.0)
    assert values.tolist() == pytest.approx([0.0, 0.0, 50.0, 70.0])
    assert np.all((values >= 0.0) & (values < 100.0))


def test_two_species_chase_across_the_wrap(make_config):
    config = make_config(particle_count=6, species_count=2,
                         width=200.0, height=200.0,
                         radius_min=15.0, radius_max=200.0,
                         interaction_matrix=[[0.0, 1.0], [0.0, 0.0]],
                         force_scale=25.0, repulsion_scale=250.0,
                         friction=0.035, max_speed=300.0)
    particles, sim = build(config)
    assert particles.species.tolist() == [0, 0, 0, 1, 1, 1]
    place(particles, [10.0] * 3 + [190.0] * 3, [100.0] * 6)

    sim.step(0.016)

    # The short path from x=10 to x=190 crosses the left edge.
    assert np.all(particles.vel_x[:3] < 0.0)
    assert np.all(particles.vel_y[:3] == 0.0)
    # Species 1 feels nothing toward species 0 and coincident peers are inert.
    assert np.all(particles.vel_x[3:] == 0.0)
    assert np.all((particles.pos_x >= 0.0) & (particles.pos_x < 200.0))
    assert np.all((particles.pos_y >= 0.0) & (particles.pos_y < 200.0))


def test_diagnostics(make_config):
    particles, sim = build(make_config())
    place(particles, [10.0, 50.0], [10.0, 50.0], [3.0, 0.0], [4.0, 0.0])
    assert sim.mean_speed() == pytest.approx(2.5)
    assert sim.kinetic_energy() == pytest.approx(12.5)
