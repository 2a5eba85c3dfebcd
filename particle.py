# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
initializing and storing particle data (position, velocity, species) as
a struct of arrays: every scalar field lives in its own contiguous NumPy
array indexed by particle id, so the force kernel can stream over them.
"""
import logging
import numpy as np
from typing import Optional

from config import SimulationConfig

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, count, species_count, width, height, seed=None):
#     - Inputs:
#       - count: int, total number of particles (N).
#       - species_count: int, number of species (S). N must be a multiple of S.
#       - width, height: float, extents of the toroidal world.
#       - seed: Optional[int]. None draws entropy from the OS.
#     - Outputs: None
#     - Side Effects: Allocates the state arrays.
#     - Invariants:
#       - pos_x, pos_y, vel_x, vel_y are contiguous float64 arrays of shape (N,).
#       - species is a contiguous int32 array of shape (N,) and never changes.
#       - species[i] == i // (N // S).
#       - The only mutator is Simulation.step(), which updates the arrays in place.


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(
        self,
        count: int,
        species_count: int,
        width: float,
        height: float,
        seed: Optional[int] = None,
    ):
        """
        Initializes the particle system.

        Args:
            count (int): Number of particles.
            species_count (int): Number of species.
            width (float): The width of the simulation area.
            height (float): The height of the simulation area.
            seed (Optional[int]): RNG seed, None for a non-deterministic run.
        """
        if count <= 0 or species_count <= 0:
            msg = (
                f"Configuration error: particle_count ({count}) and particle_types "
                f"({species_count}) must be positive."
            )
            logging.critical(msg)
            raise ValueError(msg)
        if count % species_count != 0:
            msg = (
                f"Configuration error: particle_count ({count}) must split evenly "
                f"into {species_count} species."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.particle_count = count
        self.particle_types = species_count
        self.width = float(width)
        self.height = float(height)
        self.seed = seed

        # PCG64 seeded from OS entropy unless a seed is given.
        self.rng = np.random.default_rng(seed)

        self.pos_x = self.rng.uniform(0.0, self.width, size=count)
        self.pos_y = self.rng.uniform(0.0, self.height, size=count)
        self.vel_x = np.zeros(count, dtype=np.float64)
        self.vel_y = np.zeros(count, dtype=np.float64)

        per_species = count // species_count
        self.species = (np.arange(count) // per_species).astype(np.int32)
        self.species.flags.writeable = False

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles of {self.particle_types} types."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Position shape: {self.pos_x.shape}, "
            f"Velocity shape: {self.vel_x.shape}, "
            f"Species shape: {self.species.shape}"
        )

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "ParticleSystem":
        return cls(
            config.particle_count,
            config.species_count,
            config.width,
            config.height,
            seed=config.seed,
        )

    def positions(self) -> np.ndarray:
        """Returns an (N, 2) copy of the positions."""
        return np.column_stack((self.pos_x, self.pos_y))

    def velocities(self) -> np.ndarray:
        """Returns an (N, 2) copy of the velocities."""
        return np.column_stack((self.vel_x, self.vel_y))

    def species_counts(self) -> np.ndarray:
        return np.bincount(self.species, minlength=self.particle_types)
