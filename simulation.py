# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Simulation class, which is responsible for
advancing the state of the particle system by one time step. It computes
inter-particle forces on a toroidal world and updates velocities and
positions of every particle at once.
"""
import logging
import math
import numpy as np
from typing import Tuple
from numba import jit, prange

from config import SimulationConfig
from constants import EPSILON
from particle import ParticleSystem

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, config: SimulationConfig):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - config: The validated SimulationConfig the particles were built from.
#     - Outputs: None
#     - Side Effects: Stores references to particles and parameters.
#       Converts the interaction matrix to a read-only NumPy array.
#
#   - step(self, dt: float) -> None:
#     - Inputs: dt, elapsed time in seconds, already clamped by the host loop.
#     - Outputs: None
#     - Side Effects: Modifies the state of the internal ParticleSystem
#       object (positions and velocities).
#     - Invariants: Particle count remains constant. Every force is
#       computed from the state at the start of the step. After the step,
#       |velocity| <= max_speed and 0 <= position < extent on both axes.


@jit(nopython=True)
def minimum_image(delta, extent):
    """
    Shortest displacement across a periodic axis.

    In a world 100 wide, particles at 5 and 95 are 10 apart, not 90.
    """
    if abs(delta) > extent * 0.5:
        delta -= math.floor(delta / extent + 0.5) * extent
    return delta


@jit(nopython=True)
def triangle_wave(norm, beta):
    """
    Envelope of the matrix force across the outer zone.

    0 at norm == beta, 1 at the zone midpoint, 0 again at norm == 1, so the
    species force fades out at both edges instead of jumping.
    """
    return 1.0 - abs(1.0 + beta - 2.0 * norm) / (1.0 - beta)


@jit(nopython=True)
def inner_repulsion(norm, beta, repulsion_scale):
    """Linear push-back: -repulsion_scale at contact, 0 at the zone edge."""
    return (norm / beta - 1.0) * repulsion_scale


@jit(nopython=True)
def pair_force_magnitude(
    distance_sq, norm, beta, coefficient, force_scale, repulsion_scale, radius_max_sq
):
    """
    Signed force magnitude along the unit vector from i toward j.

    Positive pulls i toward j, negative pushes it away. Self pairs
    (distance_sq ~ 0) and pairs beyond radius_max contribute nothing.
    """
    if not (EPSILON < distance_sq < radius_max_sq):
        return 0.0
    if norm < beta:
        return inner_repulsion(norm, beta, repulsion_scale)
    if norm < 1.0:
        return coefficient * force_scale * triangle_wave(norm, beta)
    return 0.0


@jit(nopython=True, parallel=True)
def compute_forces(
    pos_x, pos_y, species, interaction_matrix,
    world_width, world_height,
    radius_max, beta, force_scale, repulsion_scale
):
    """
    Net force on every particle from every other particle (all pairs).

    Each particle's sum is independent, so the outer loop runs in
    parallel. The inner loop order is fixed, which keeps the result
    identical to a serial evaluation.
    """
    particle_count = pos_x.shape[0]
    force_x = np.zeros(particle_count)
    force_y = np.zeros(particle_count)
    radius_max_sq = radius_max * radius_max

    for i in prange(particle_count):
        x_i = pos_x[i]
        y_i = pos_y[i]
        row = species[i]
        fx = 0.0
        fy = 0.0
        for j in range(particle_count):
            dx = minimum_image(pos_x[j] - x_i, world_width)
            dy = minimum_image(pos_y[j] - y_i, world_height)
            distance_sq = dx * dx + dy * dy

            distance = max(math.sqrt(distance_sq), EPSILON)
            inverse_distance = 1.0 / distance
            norm = distance / radius_max

            magnitude = pair_force_magnitude(
                distance_sq, norm, beta,
                interaction_matrix[row, species[j]],
                force_scale, repulsion_scale, radius_max_sq
            )
            # Direction is FROM i TO j
            fx += magnitude * dx * inverse_distance
            fy += magnitude * dy * inverse_distance
        force_x[i] = fx
        force_y[i] = fy
    return force_x, force_y


def wrap_positions(positions: np.ndarray, extent: float) -> None:
    """Folds coordinates back into [0, extent) in place."""
    positions -= np.floor(positions / extent) * extent
    # Float rounding can land exactly on the far edge, which is the same
    # point as 0 on a torus.
    positions[(positions < 0.0) | (positions >= extent)] = 0.0


class Simulation:
    """
    Advances a ParticleSystem through time under the species force field.
    """
    def __init__(self, particles: ParticleSystem, config: SimulationConfig):
        """
        Initializes the simulation environment.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            config (SimulationConfig): Validated simulation parameters.
        """
        if (particles.particle_count != config.particle_count
                or particles.particle_types != config.species_count):
            msg = (
                f"Configuration error: ParticleSystem ({particles.particle_count} "
                f"particles, {particles.particle_types} types) does not match the "
                f"configuration ({config.particle_count} particles, "
                f"{config.species_count} types)."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.particles = particles
        self.config = config
        self.world_width = float(config.width)
        self.world_height = float(config.height)

        self.interaction_matrix = np.array(config.interaction_matrix, dtype=np.float64)
        self.interaction_matrix.flags.writeable = False

        self.beta = config.beta
        self.drag = 1.0 - config.friction

        self.step_count = 0
        self.elapsed_time = 0.0

        logging.info("Simulation logic initialized and configuration validated.")
        logging.info(
            f"All-pairs force field: {config.particle_count} particles, "
            f"zones 0-{config.radius_min:.1f}px repulsion, "
            f"{config.radius_min:.1f}-{config.radius_max:.1f}px interaction."
        )

    def compute_forces(self) -> Tuple[np.ndarray, np.ndarray]:
        """Net force on each particle for the current state."""
        p = self.particles
        return compute_forces(
            p.pos_x, p.pos_y, p.species, self.interaction_matrix,
            self.world_width, self.world_height,
            self.config.radius_max, self.beta,
            self.config.force_scale, self.config.repulsion_scale
        )

    def step(self, dt: float) -> None:
        """
        Executes one time step of the simulation.
        """
        if not (dt >= 0.0 and math.isfinite(dt)):
            raise ValueError(f"Time step must be a finite non-negative number, got {dt}.")

        p = self.particles

        # 1. Forces from the pre-step state only
        force_x, force_y = self.compute_forces()

        # 2. Friction, then acceleration
        p.vel_x *= self.drag
        p.vel_x += force_x * dt
        p.vel_y *= self.drag
        p.vel_y += force_y * dt

        # 3. Speed cap: scale never exceeds 1, so slow particles are untouched
        speed = np.maximum(np.sqrt(p.vel_x * p.vel_x + p.vel_y * p.vel_y), EPSILON)
        speed_scale = np.minimum(self.config.max_speed / speed, 1.0)
        p.vel_x *= speed_scale
        p.vel_y *= speed_scale

        # 4. Move
        p.pos_x += p.vel_x * dt
        p.pos_y += p.vel_y * dt

        # 5. Toroidal wrap
        wrap_positions(p.pos_x, self.world_width)
        wrap_positions(p.pos_y, self.world_height)

        self.step_count += 1
        self.elapsed_time += dt

    def mean_speed(self) -> float:
        p = self.particles
        return float(np.mean(np.hypot(p.vel_x, p.vel_y)))

    def kinetic_energy(self) -> float:
        """Total kinetic energy, taking every particle as unit mass."""
        p = self.particles
        return float(0.5 * np.sum(p.vel_x * p.vel_x + p.vel_y * p.vel_y))
