# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

The Visualizer only ever sees packed frame snapshots (see frame.py); it
never touches the live ParticleSystem.
"""
import logging
import math
import pygame
from typing import Dict, Optional, Tuple

from constants import (
    BACKGROUND_COLOR, DEFAULT_PARTICLE_RADIUS, FULLSCREEN, WINDOWED_SIZE,
    MOTION_BLUR_ALPHA, PARTICLE_HALO_RATIO, HALO_MIN_ALPHA, HALO_MAX_ALPHA,
    PULSE_SPEED, PULSE_PHASE_STEP
)
from frame import snapshot_colors, snapshot_positions


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, fullscreen: Optional[bool] = None):
#     - Side Effects: Initializes Pygame and creates a display surface.
#       Exposes sim_width / sim_height, the size of the toroidal world.
#
#   - draw(self, snapshot, time_s: float, step_num: int = 0) -> bool:
#     - Inputs:
#       - snapshot: (2, N, 4) float32 array from FrameBuffer.pack().
#       - time_s: wall time in seconds, drives the halo pulse.
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders particles to the screen, handles Pygame events.

class Visualizer:
    """
    Renders frame snapshots as glowing discs on a wrapping canvas.
    """
    def __init__(self, fullscreen: Optional[bool] = None):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        pygame.font.init()

        fullscreen = FULLSCREEN if fullscreen is None else fullscreen
        if fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width, height = WINDOWED_SIZE
            self.screen = pygame.display.set_mode((width, height))

        # The whole window is the simulation area
        self.sim_width = width
        self.sim_height = height

        # Fading overlay: blitted each frame to leave short trails.
        self.blur_surface = pygame.Surface((width, height), pygame.SRCALPHA)
        self.blur_surface.fill((*BACKGROUND_COLOR, MOTION_BLUR_ALPHA))
        self.screen.fill(BACKGROUND_COLOR)

        pygame.display.set_caption("Particle Life")
        self.clock = pygame.time.Clock()

        self.halo_radius = int(DEFAULT_PARTICLE_RADIUS * PARTICLE_HALO_RATIO)
        self.halo_surfaces: Dict[Tuple[int, int, int], pygame.Surface] = {}

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
        self.text_color = (200, 200, 200)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _halo_for(self, color: Tuple[int, int, int]) -> pygame.Surface:
        """Pre-renders one halo surface per species color, on first use."""
        halo_surf = self.halo_surfaces.get(color)
        if halo_surf is None:
            diameter = self.halo_radius * 2
            halo_surf = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
            pygame.draw.circle(
                halo_surf, color, (self.halo_radius, self.halo_radius), self.halo_radius
            )
            self.halo_surfaces[color] = halo_surf
            logging.debug(f"Pre-rendered halo surface for color {color}.")
        return halo_surf

    def _ghost_offsets(self, x: float, y: float) -> Tuple[list, list]:
        """Extra draw offsets so a disc crossing an edge shows on both sides."""
        reach = self.halo_radius
        x_offsets = [0]
        if x < reach:
            x_offsets.append(self.sim_width)
        elif x > self.sim_width - reach:
            x_offsets.append(-self.sim_width)

        y_offsets = [0]
        if y < reach:
            y_offsets.append(self.sim_height)
        elif y > self.sim_height - reach:
            y_offsets.append(-self.sim_height)
        return x_offsets, y_offsets

    def draw(self, snapshot, time_s: float, step_num: int = 0) -> bool:
        """
        Draws one snapshot and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

        # 1. Fade the previous frame
        self.screen.blit(self.blur_surface, (0, 0))

        # 2. Particles: pulsing halo under a solid core
        positions = snapshot_positions(snapshot)
        colors = (snapshot_colors(snapshot) * 255).astype(int)

        for i in range(positions.shape[0]):
            x, y = positions[i]
            color = (int(colors[i, 0]), int(colors[i, 1]), int(colors[i, 2]))
            halo_surf = self._halo_for(color)

            pulse = 0.25 + 0.75 * abs(math.sin(time_s * PULSE_SPEED + i * PULSE_PHASE_STEP))
            halo_surf.set_alpha(HALO_MIN_ALPHA + pulse * (HALO_MAX_ALPHA - HALO_MIN_ALPHA))

            x_offsets, y_offsets = self._ghost_offsets(x, y)
            for x_offset in x_offsets:
                for y_offset in y_offsets:
                    draw_pos = (int(x + x_offset), int(y + y_offset))
                    self.screen.blit(
                        halo_surf,
                        (draw_pos[0] - self.halo_radius, draw_pos[1] - self.halo_radius)
                    )
                    pygame.draw.circle(self.screen, color, draw_pos, DEFAULT_PARTICLE_RADIUS)

        # 3. HUD
        hud = f"step {step_num}  |  {self.clock.get_fps():.0f} fps"
        self.screen.blit(self.font_main.render(hud, True, self.text_color), (10, 10))

        pygame.display.flip()
        return True

    def tick(self, fps: int) -> float:
        """Waits for the next frame and returns the elapsed wall time in seconds."""
        return self.clock.tick(fps) / 1000.0

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
