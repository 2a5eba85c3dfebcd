# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or the default shape of the force
curve used when the configuration file leaves a value out.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a fixed-size window (1500x700).
FULLSCREEN = True
WINDOWED_SIZE = (1500, 700)
FPS = 60
BACKGROUND_COLOR = (0, 0, 3) # Near-black blue
DEFAULT_PARTICLE_RADIUS = 3

# Upper bound for a single simulated step, in seconds. A stalled frame
# (window defocus, scheduler hiccup) is simulated as a 30 FPS frame.
MAX_FRAME_TIME = 1.0 / 30.0

# Guards divisions by a distance or a speed.
EPSILON = 1e-6

# --- Default force-curve shape ---
# 0 -> radius_min: species-blind repulsion. Low = particles pass through,
# high = particles bounce off each other.
DEFAULT_RADIUS_MIN = 15.0
# radius_min -> radius_max: matrix-driven interaction zone.
DEFAULT_RADIUS_MAX = 200.0
# Velocity damping per step, applied as vel *= (1 - friction).
DEFAULT_FRICTION = 0.035
# Intensity of all matrix forces.
DEFAULT_FORCE_SCALE = 25.0
# Inner-zone multiplier, larger than the force scale so fast particles
# can't phase through each other.
DEFAULT_REPULSION_SCALE = 250.0
# Pixels per second.
DEFAULT_MAX_SPEED = 300.0

DEFAULT_PARTICLE_COUNT = 1500
DEFAULT_SPECIES_COUNT = 3

# Cyclic dominance: hunt > |flee| keeps predators faster than their prey.
DEFAULT_HUNT = 0.75
DEFAULT_FLEE = -0.25
DEFAULT_SELF = 1.0

# --- Visual Appeal Enhancements ---
# Alpha value for the motion blur effect (0-255). Lower is a longer trail.
MOTION_BLUR_ALPHA = 60
# Ratio of the halo size to the particle radius.
PARTICLE_HALO_RATIO = 3
# Alpha range for the pulsing halo.
HALO_MIN_ALPHA = 10
HALO_MAX_ALPHA = 90
# Pulse speed (radians per second) and golden-ratio phase step between
# consecutive particles so neighbours never pulse in sync.
PULSE_SPEED = 3.0
PULSE_PHASE_STEP = 0.381966


# RGB per species in [0, 1]. The first three match the default cyclic
# matrix (red hunts green, green hunts blue, blue hunts red).
DEFAULT_SPECIES_COLORS = [
    (1.0, 0.2, 0.2),   # Red
    (0.2, 1.0, 0.2),   # Green
    (0.2, 0.2, 1.0),   # Blue
    (1.0, 0.8, 0.0),   # Gold
    (0.8, 0.0, 1.0),   # Purple
    (1.0, 0.4, 0.0),   # Orange
    (0.0, 1.0, 1.0),   # Cyan
    (1.0, 0.0, 0.4),   # Hot Pink
]
