import pytest

from config import SimulationConfig, default_colors


@pytest.fixture
def make_config():
    """Factory for small, valid configurations with per-test overrides."""
    def _make(**overrides):
        species_count = overrides.get('species_count', 2)
        base = dict(
            particle_count=2,
            species_count=species_count,
            width=100.0,
            height=100.0,
            interaction_matrix=[[0.0] * species_count for _ in range(species_count)],
            colors=default_colors(species_count),
            radius_min=10.0,
            radius_max=100.0,
            friction=0.0,
            force_scale=1.0,
            repulsion_scale=10.0,
            max_speed=300.0,
            seed=1234,
        )
        base.update(overrides)
        return SimulationConfig(**base)
    return _make
