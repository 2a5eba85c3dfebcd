# config.py
"""
Immutable configuration for the particle life core.

This module turns the loosely-typed `simulation_parameters` section of
config.json into a frozen SimulationConfig that is validated once, at
startup. Everything the force field needs (zone radii, friction, scales,
the species matrix and the species colors) lives here so the integrator
never reads a global constant.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from constants import (
    DEFAULT_FLEE, DEFAULT_FORCE_SCALE, DEFAULT_FRICTION, DEFAULT_HUNT,
    DEFAULT_MAX_SPEED, DEFAULT_PARTICLE_COUNT, DEFAULT_RADIUS_MAX,
    DEFAULT_RADIUS_MIN, DEFAULT_REPULSION_SCALE, DEFAULT_SELF,
    DEFAULT_SPECIES_COLORS, DEFAULT_SPECIES_COUNT, MAX_FRAME_TIME
)

# --- Data Contracts ---
#
# class SimulationConfig (frozen):
#   - from_params(sim_params, width, height, colors=None) -> SimulationConfig
#     - Inputs:
#       - sim_params: "simulation_parameters" section of config.json.
#         - "particle_count": int
#         - "particle_types": int
#         - "interaction_radius_min" / "interaction_radius_max": float
#         - "friction", "force_scale", "repulsion_strength", "max_velocity": float
#         - "interaction_matrix": List[List[float]] (optional)
#         - "seed": int or null (optional)
#       - width, height: simulation area in pixels.
#       - colors: Optional list of RGB triples, either 0-1 floats or 0-255 ints.
#         The scale is picked for the whole table: if any component is above
#         1 every value is divided by 255, otherwise all are read as 0-1
#         floats. Dim byte colors such as [[1, 0, 0], [0, 1, 0]] are
#         therefore read as full-intensity floats.
#     - Outputs: a validated SimulationConfig.
#     - Invariants: every field is checked in __post_init__; an invalid
#       value raises ValueError before any particle exists.
#
# class RunControl (frozen):
#   - from_params(run_params) -> RunControl
#     - Inputs: "run_control" section of config.json.
#       - "max_steps": int >= 0, 0 runs until the window closes
#       - "log_throttle_steps": int >= 1
#       - "max_frame_time": finite float > 0, seconds
#       - "profile": bool
#     - Invariants: validated before the host loop starts, so the loop
#       itself never raises on a bad setting.

Matrix = Tuple[Tuple[float, ...], ...]
ColorTable = Tuple[Tuple[float, float, float], ...]


def cyclic_matrix(
    species_count: int,
    hunt: float = DEFAULT_HUNT,
    flee: float = DEFAULT_FLEE,
    self_weight: float = DEFAULT_SELF,
) -> Matrix:
    """
    Builds a rock-paper-scissors interaction matrix.

    Species `a` hunts species `a + 1`, flees species `a - 1` (both modulo
    the species count) and feels `self_weight` toward its own kind.
    """
    rows = []
    for a in range(species_count):
        row = [0.0] * species_count
        row[(a - 1) % species_count] = flee
        row[(a + 1) % species_count] = hunt
        row[a] = self_weight
        rows.append(tuple(row))
    return tuple(rows)


def default_colors(species_count: int) -> ColorTable:
    """Cycles through the default palette until every species has a color."""
    palette = DEFAULT_SPECIES_COLORS
    return tuple(tuple(palette[i % len(palette)]) for i in range(species_count))


def _normalize_colors(colors: Sequence[Sequence[float]]) -> ColorTable:
    """Accepts 0-255 integer triples as well as 0-1 floats."""
    table = tuple(tuple(float(c) for c in rgb) for rgb in colors)
    if any(c > 1.0 for rgb in table for c in rgb):
        table = tuple(tuple(c / 255.0 for c in rgb) for rgb in table)
    return table


def _fail(msg: str) -> None:
    logging.critical(f"Configuration error: {msg}")
    raise ValueError(f"Configuration error: {msg}")


@dataclass(frozen=True)
class SimulationConfig:
    """Validated, immutable parameter set for one simulation run."""

    particle_count: int
    species_count: int
    width: float
    height: float
    interaction_matrix: Matrix
    colors: ColorTable
    radius_min: float = DEFAULT_RADIUS_MIN
    radius_max: float = DEFAULT_RADIUS_MAX
    friction: float = DEFAULT_FRICTION
    force_scale: float = DEFAULT_FORCE_SCALE
    repulsion_scale: float = DEFAULT_REPULSION_SCALE
    max_speed: float = DEFAULT_MAX_SPEED
    seed: Optional[int] = None

    def __post_init__(self):
        # Freeze nested sequences so callers can't mutate the matrix behind our back.
        object.__setattr__(
            self, 'interaction_matrix',
            tuple(tuple(float(v) for v in row) for row in self.interaction_matrix)
        )
        object.__setattr__(
            self, 'colors',
            tuple(tuple(float(c) for c in rgb) for rgb in self.colors)
        )
        self.validate()

    @property
    def beta(self) -> float:
        """Fraction of the interaction radius taken by the repulsion zone."""
        return self.radius_min / self.radius_max

    def validate(self) -> None:
        """Raises ValueError on the first invalid field."""
        if self.particle_count <= 0:
            _fail(f"particle_count must be positive, got {self.particle_count}.")
        if self.species_count <= 0:
            _fail(f"particle_types must be positive, got {self.species_count}.")
        if self.particle_count % self.species_count != 0:
            _fail(
                f"particle_count ({self.particle_count}) must split evenly into "
                f"{self.species_count} species."
            )
        if not (self.width > 0 and self.height > 0):
            _fail(f"World size must be positive, got {self.width}x{self.height}.")

        scalars = {
            'interaction_radius_min': self.radius_min,
            'interaction_radius_max': self.radius_max,
            'friction': self.friction,
            'force_scale': self.force_scale,
            'repulsion_strength': self.repulsion_scale,
            'max_velocity': self.max_speed,
        }
        for name, value in scalars.items():
            if not math.isfinite(value):
                _fail(f"{name} must be finite, got {value}.")

        if self.radius_min <= 0:
            _fail(f"interaction_radius_min must be positive, got {self.radius_min}.")
        if self.radius_min >= self.radius_max:
            _fail(
                f"interaction_radius_min ({self.radius_min}) must be smaller than "
                f"interaction_radius_max ({self.radius_max})."
            )
        if not 0.0 <= self.friction < 1.0:
            _fail(f"friction must be in [0, 1), got {self.friction}.")
        if self.max_speed <= 0:
            _fail(f"max_velocity must be positive, got {self.max_speed}.")
        if self.force_scale < 0:
            _fail(f"force_scale must not be negative, got {self.force_scale}.")
        if self.repulsion_scale <= 0:
            _fail(f"repulsion_strength must be positive, got {self.repulsion_scale}.")

        n = self.species_count
        matrix = self.interaction_matrix
        if len(matrix) != n or any(len(row) != n for row in matrix):
            shape = (len(matrix), len(matrix[0]) if matrix else 0)
            _fail(
                f"Interaction matrix shape {shape} does not match particle_types "
                f"({n}). The matrix must be square and its dimensions must equal "
                f"the number of particle types."
            )
        if not all(math.isfinite(v) for row in matrix for v in row):
            _fail("Interaction matrix contains a non-finite value.")

        if len(self.colors) != n or any(len(rgb) != 3 for rgb in self.colors):
            _fail(f"Color table must hold one RGB triple per species ({n}).")
        if not all(0.0 <= c <= 1.0 for rgb in self.colors for c in rgb):
            _fail("Color components must lie in [0, 1].")

    @classmethod
    def from_params(
        cls,
        sim_params: Dict[str, Any],
        width: float,
        height: float,
        colors: Optional[list] = None,
    ) -> "SimulationConfig":
        """Builds a config from the JSON parameter dictionary, filling defaults."""
        species_count = int(sim_params.get('particle_types', DEFAULT_SPECIES_COUNT))

        matrix = sim_params.get('interaction_matrix')
        if matrix is None:
            logging.info("No interaction matrix in config. Using cyclic dominance matrix.")
            matrix = cyclic_matrix(species_count)

        if not colors:
            logging.info("No colors found in config. Using default species palette.")
            color_table = default_colors(species_count)
        else:
            try:
                color_table = _normalize_colors(colors)
            except (ValueError, TypeError) as e:
                _fail(f"Could not parse particle colors: {e}.")

        config = cls(
            particle_count=int(sim_params.get('particle_count', DEFAULT_PARTICLE_COUNT)),
            species_count=species_count,
            width=float(width),
            height=float(height),
            interaction_matrix=matrix,
            colors=color_table,
            radius_min=float(sim_params.get('interaction_radius_min', DEFAULT_RADIUS_MIN)),
            radius_max=float(sim_params.get('interaction_radius_max', DEFAULT_RADIUS_MAX)),
            friction=float(sim_params.get('friction', DEFAULT_FRICTION)),
            force_scale=float(sim_params.get('force_scale', DEFAULT_FORCE_SCALE)),
            repulsion_scale=float(sim_params.get('repulsion_strength', DEFAULT_REPULSION_SCALE)),
            max_speed=float(sim_params.get('max_velocity', DEFAULT_MAX_SPEED)),
            seed=sim_params.get('seed'),
        )
        logging.info("Simulation configuration loaded and validated.")
        logging.debug(f"Zone beta (radius_min / radius_max): {config.beta:.4f}")
        return config


@dataclass(frozen=True)
class RunControl:
    """Host-loop settings, checked before the first frame."""

    max_steps: int = 0
    log_throttle_steps: int = 100
    max_frame_time: float = MAX_FRAME_TIME
    profile: bool = False

    def __post_init__(self):
        if isinstance(self.max_steps, bool) or not isinstance(self.max_steps, int) \
                or self.max_steps < 0:
            _fail(f"max_steps must be a non-negative integer, got {self.max_steps!r}.")
        if isinstance(self.log_throttle_steps, bool) \
                or not isinstance(self.log_throttle_steps, int) \
                or self.log_throttle_steps < 1:
            _fail(
                f"log_throttle_steps must be an integer of at least 1, "
                f"got {self.log_throttle_steps!r}."
            )
        if isinstance(self.max_frame_time, bool) or not (isinstance(self.max_frame_time, (int, float))
                and math.isfinite(self.max_frame_time)
                and self.max_frame_time > 0):
            _fail(f"max_frame_time must be a finite positive number, got {self.max_frame_time!r}.")

    @classmethod
    def from_params(cls, run_params: Dict[str, Any]) -> "RunControl":
        run = cls(
            max_steps=run_params.get('max_steps', 0),
            log_throttle_steps=run_params.get('log_throttle_steps', 100),
            max_frame_time=run_params.get('max_frame_time', MAX_FRAME_TIME),
            profile=bool(run_params.get('profile', False)),
        )
        logging.debug(f"Run control: {run}")
        return run
