import numpy as np
import pytest

from particle import ParticleSystem


def test_struct_of_arrays_layout():
    particles = ParticleSystem(12, 3, 200.0, 100.0, seed=1)
    for field in (particles.pos_x, particles.pos_y, particles.vel_x, particles.vel_y):
        assert field.shape == (12,)
        assert field.dtype == np.float64
        assert field.flags['C_CONTIGUOUS']
    assert particles.species.shape == (12,)
    assert particles.species.dtype == np.int32
    assert particles.species.flags['C_CONTIGUOUS']


def test_positions_inside_world_and_velocities_zero():
    particles = ParticleSystem(300, 3, 200.0, 100.0)
    assert np.all((particles.pos_x >= 0.0) & (particles.pos_x < 200.0))
    assert np.all((particles.pos_y >= 0.0) & (particles.pos_y < 100.0))
    assert not np.any(particles.vel_x)
    assert not np.any(particles.vel_y)


def test_species_partition_by_index():
    particles = ParticleSystem(6, 2, 200.0, 200.0)
    assert particles.species.tolist() == [0, 0, 0, 1, 1, 1]
    assert particles.species_counts().tolist() == [3, 3]


def test_species_are_immutable():
    particles = ParticleSystem(4, 2, 10.0, 10.0)
    with pytest.raises(ValueError):
        particles.species[0] = 1


def test_seed_reproduces_layout():
    a = ParticleSystem(10, 2, 50.0, 50.0, seed=42)
    b = ParticleSystem(10, 2, 50.0, 50.0, seed=42)
    np.testing.assert_array_equal(a.pos_x, b.pos_x)
    np.testing.assert_array_equal(a.pos_y, b.pos_y)


def test_positions_returns_copy():
    particles = ParticleSystem(4, 2, 10.0, 10.0, seed=3)
    snapshot = particles.positions()
    snapshot[:] = -1.0
    assert np.all(particles.pos_x >= 0.0)
    assert snapshot.shape == (4, 2)


@pytest.mark.parametrize("count,species", [(0, 1), (5, 0), (7, 2), (-3, 1)])
def test_invalid_population_rejected(count, species):
    with pytest.raises(ValueError):
        ParticleSystem(count, species, 10.0, 10.0)


def test_from_config(make_config):
    config = make_config(particle_count=8, species_count=2)
    particles = ParticleSystem.from_config(config)
    assert particles.particle_count == 8
    assert particles.particle_types == 2
    assert (particles.width, particles.height) == (100.0, 100.0)
