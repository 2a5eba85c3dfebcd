# frame.py
"""
Packs the simulation state into a per-frame snapshot for the renderer.

The layout mirrors an RGBA32F texture that is N texels wide and 2 rows
tall: row 0 carries (x, y, 0, 0) per particle and is refreshed every
frame, row 1 carries (r, g, b, 1) per particle and is written once,
since species never change.
"""
import logging
import numpy as np
from typing import Sequence

from particle import ParticleSystem

# --- Data Contracts ---
#
# class FrameBuffer:
#   - __init__(self, species: np.ndarray, colors: Sequence[Sequence[float]]):
#     - Inputs:
#       - species: (N,) integer array, the ParticleSystem's species tags.
#       - colors: (S, 3) RGB table in [0, 1], one row per species.
#     - Side Effects: Allocates a float32 (2, N, 4) buffer and writes the
#       color row once.
#
#   - pack(self, particles: ParticleSystem) -> np.ndarray:
#     - Inputs: the ParticleSystem after Simulation.step() has returned.
#     - Outputs: a (2, N, 4) float32 copy; row 0 is (x, y, 0, 0), row 1 is
#       (r, g, b, 1).
#     - Invariants: the color row is never rewritten; the returned array
#       shares no memory with the buffer.

POSITION_ROW = 0
COLOR_ROW = 1


class FrameBuffer:
    """Per-frame (position, color) buffer handed to the presentation stage."""

    def __init__(self, species: np.ndarray, colors: Sequence[Sequence[float]]):
        color_table = np.asarray(colors, dtype=np.float32)
        count = species.shape[0]

        self.data = np.zeros((2, count, 4), dtype=np.float32)
        self.data[COLOR_ROW, :, :3] = color_table[species]
        self.data[COLOR_ROW, :, 3] = 1.0

        logging.debug(f"Frame buffer allocated for {count} particles, color row uploaded.")

    @property
    def particle_count(self) -> int:
        return self.data.shape[1]

    def pack(self, particles: ParticleSystem) -> np.ndarray:
        """
        Writes current positions into row 0 and returns a value copy.

        Must be called after Simulation.step() has returned, never during it.
        """
        self.data[POSITION_ROW, :, 0] = particles.pos_x
        self.data[POSITION_ROW, :, 1] = particles.pos_y
        return self.data.copy()


def snapshot_positions(snapshot: np.ndarray) -> np.ndarray:
    """(N, 2) world coordinates of a packed snapshot."""
    return snapshot[POSITION_ROW, :, :2]


def snapshot_colors(snapshot: np.ndarray) -> np.ndarray:
    """(N, 3) RGB colors in [0, 1] of a packed snapshot."""
    return snapshot[COLOR_ROW, :, :3]
