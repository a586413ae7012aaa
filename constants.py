# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover rendering properties, default canvas sizes and the fixed
per-tick constants of the particle model that are not part of the
experimental configuration.
"""

# Visualization settings
FPS = 60
DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 600
UI_PANEL_WIDTH = 260
BACKGROUND_COLOR = (0, 0, 0) # Black
# Alpha for the UI panel background
UI_BACKGROUND_ALPHA = 160

# --- Particle model ---
# Life lost by a particle on every step, whatever its iteration count.
LIFE_DECREMENT = 1 / 60
# Sub-steps per tick, interpolated from the first to the last particle index.
MAX_ITERATIONS = 5
MIN_ITERATIONS = 1
# Draw radius, interpolated from the first to the last particle index.
MIN_RADIUS = 2
MAX_RADIUS = 6
# Horizontal flow transition, mapped across the padded box.
TRANSITION_LEFT = 0.1
TRANSITION_RIGHT = 0.9
# Width of the fade-in and fade-out windows, as a divisor of max life.
FADE_SHARPNESS = 5
# Fraction of the canvas height used for respawns in "everywhere" mode.
# Particles drift downwards, so they are spawned higher up more often.
EVERYWHERE_SPAWN_HEIGHT = 0.7
# One in DIRECTIONAL_ODDS respawns gets the two-colour heading gradient.
DIRECTIONAL_ODDS = 3
# Bounds on noiseScale and simulationSpeed that keep every angle and position finite.
MIN_NOISE_SCALE = 1e-6
MAX_NOISE_SCALE = 1e6
MAX_SIMULATION_SPEED = 1e4

# --- Noise field ---
NOISE_TABLE_SIZE = 4096
NOISE_OCTAVES = 4
NOISE_FALLOFF = 0.5
# Largest falloff that keeps every sample below 1.
MAX_NOISE_FALLOFF = 0.5

# --- Default palette ---
DEFAULT_COLOR = (255, 255, 255) # White
DEFAULT_COLOR_LEFT = (0, 255, 255) # Cyan
DEFAULT_COLOR_RIGHT = (128, 0, 128) # Purple
# Colour used when a colour value cannot be parsed.
FALLBACK_COLOR = (255, 255, 255)
