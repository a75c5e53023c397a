# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover the reference physics of the force law and the rendering
properties of the display window. Anything an experiment may want to vary
lives in config.json and only falls back to these values.
"""

# --- Reference Physics ---
# Magnitude K of every entry in the type-coefficient table.
INTERACTION_STRENGTH = 1e4
# Uniform scaling applied to every pairwise term.
BASE_COEFFICIENT = 5e-3
# Attracting pairs closer than this (squared) distance are ignored.
MIN_RADIUS_SQUARED = 25.0

# Sign of c(row, column): row is the type being moved, column the type
# acting on it. Positive pushes away, negative pulls in. Deliberately
# not symmetric.
REFERENCE_INTERACTION_SIGNS = [
    [1.0, -1.0, 1.0],
    [1.0, -1.0, -1.0],
    [-1.0, 1.0, -1.0],
]

# --- Reference Run ---
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_PARTICLE_COUNT = 10
DEFAULT_SEED = 42

# --- Visualization Settings ---
FPS = 30
BACKGROUND_COLOR = (0, 0, 0)  # Black
# Particles are drawn as filled squares, shifted by one pixel.
PARTICLE_SIZE = 3
PARTICLE_OFFSET = 1
WINDOW_CAPTION = "Particle Torus"

# A curated list of vibrant default colors indexed by particle type, used
# if the config file does not provide a color list.
VIBRANT_COLORS = [
    (255, 0, 102),   # Hot Pink
    (0, 255, 255),   # Cyan
    (255, 204, 0),   # Gold
    (0, 255, 102),   # Bright Green
    (204, 0, 255),   # Purple
    (255, 102, 0)    # Orange
]
