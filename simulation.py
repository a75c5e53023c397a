# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Simulation class, which advances the particle
system by exactly one tick. A tick is two separate passes over the
population:

1. Every particle's net displacement is summed from the positions as they
   stood at the start of the tick. Nothing is written to the store.
2. Every displacement is added to its particle and the result is wrapped
   back onto the torus.

The passes must never be fused into a single per-particle loop: a particle
moved early in the loop would otherwise be seen at its new position by the
particles after it. Either pass may be parallelized on its own.
"""
import logging
from typing import Any, Dict

import numpy as np
from numba import jit, prange

from constants import (
    BASE_COEFFICIENT, INTERACTION_STRENGTH, MIN_RADIUS_SQUARED,
    REFERENCE_INTERACTION_SIGNS
)
from particle import ParticleSystem

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: Dictionary of simulation parameters from config.json.
#         - "interaction_matrix": List[List[float]] (T x T, row = moved type)
#         - "interaction_strength": float, scales the matrix (K)
#         - "base_coefficient": float
#         - "min_radius_squared": float
#         - "parallel": bool, parallelize the force pass
#     - Outputs: None
#     - Side Effects: Stores a reference to the particles. Builds the
#       coefficient table as a NumPy array.
#
#   - step(self) -> ParticleSystem:
#     - Inputs: None (operates on internal state).
#     - Outputs: The same ParticleSystem, advanced by one tick.
#     - Side Effects: Modifies particle positions in place.
#     - Invariants: Particle count and types never change. After the call
#       0 <= x < width and 0 <= y < height for every particle.


@jit(nopython=True)
def shortest_delta(d, size):
    """
    Shortest signed separation along one wrapped axis.

    The candidates d, d + size and d - size are tried in that order and the
    first one with the smallest square wins, so ties resolve to the earlier
    candidate.
    """
    best = d
    candidate = d + size
    if candidate * candidate < best * best:
        best = candidate
    candidate = d - size
    if candidate * candidate < best * best:
        best = candidate
    return best


@jit(nopython=True)
def wrap_coordinate(value, size):
    """Folds a coordinate back into [0, size). Non-finite input maps to 0."""
    if not np.isfinite(value):
        return 0.0
    if value >= size:
        value -= size
    elif value < 0.0:
        value += size
    # A single wrap covers any displacement the reference constants produce.
    # Near-coincident repulsive pairs can still throw a particle further.
    if value < 0.0 or value >= size:
        value = value % size
        if value >= size:
            value = 0.0
    return value


def _accumulate_displacements(
    positions, types, coefficients, width, height, min_radius_sq, base_coefficient
):
    """
    Pass 1: per-particle displacement from a fixed position snapshot.

    Pairs are skipped when they attract and sit inside the cutoff radius, or
    when they coincide exactly (the force law is undefined at r = 0). A pair
    so close that its term overflows is skipped the same way.
    """
    particle_count = positions.shape[0]
    displacements = np.zeros_like(positions)

    for i in prange(particle_count):
        type_i = types[i]
        sum_x = 0.0
        sum_y = 0.0
        for j in range(particle_count):
            if i == j:
                continue

            dx = shortest_delta(positions[i, 0] - positions[j, 0], width)
            dy = shortest_delta(positions[i, 1] - positions[j, 1], height)
            r_sq = dx * dx + dy * dy

            c = coefficients[type_i, types[j]]
            if c < 0.0 and r_sq < min_radius_sq:
                continue
            if r_sq == 0.0:
                continue

            r = np.sqrt(r_sq)
            term_x = c * base_coefficient / r_sq * dx / r
            term_y = c * base_coefficient / r_sq * dy / r
            if not (np.isfinite(term_x) and np.isfinite(term_y)):
                continue
            sum_x += term_x
            sum_y += term_y

        displacements[i, 0] = sum_x
        displacements[i, 1] = sum_y
    return displacements


# Both variants share one body. prange runs as a plain range when the
# function is not compiled with parallel=True, and every particle's sum is
# taken in the same order, so the two agree exactly.
_accumulate_displacements_numba = jit(nopython=True)(_accumulate_displacements)
_accumulate_displacements_parallel = jit(nopython=True, parallel=True)(_accumulate_displacements)


@jit(nopython=True)
def _integrate_numba(positions, displacements, width, height):
    """
    Pass 2: apply each displacement and wrap onto the torus.

    A displacement whose sum overflowed leaves its coordinate where it was.
    """
    particle_count = positions.shape[0]
    for i in range(particle_count):
        for axis in range(2):
            step = displacements[i, axis]
            if not np.isfinite(step):
                step = 0.0
            size = width if axis == 0 else height
            positions[i, axis] = wrap_coordinate(positions[i, axis] + step, size)


class Simulation:
    """
    Advances a ParticleSystem with the type-dependent pairwise force law.
    """
    def __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
        """
        Initializes the simulation engine.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particles = particles
        self.interaction_strength = float(params.get('interaction_strength', INTERACTION_STRENGTH))
        self.interaction_matrix = np.array(
            params.get('interaction_matrix', REFERENCE_INTERACTION_SIGNS), dtype=np.float64
        )
        self.base_coefficient = float(params.get('base_coefficient', BASE_COEFFICIENT))
        self.min_radius_squared = float(params.get('min_radius_squared', MIN_RADIUS_SQUARED))
        self.parallel = bool(params.get('parallel', False))

        # Validate config on initialization.
        num_types = self.particles.particle_types
        matrix_shape = self.interaction_matrix.shape
        if matrix_shape != (num_types, num_types):
            msg = (
                f"Configuration error: Interaction matrix shape {matrix_shape} "
                f"does not match particle_types ({num_types}). The matrix must be square "
                f"and its dimensions must equal the number of particle types."
            )
            logging.critical(msg)
            raise ValueError(msg)
        if not np.all(np.isfinite(self.interaction_matrix)):
            msg = "Configuration error: Interaction matrix contains non-finite values."
            logging.critical(msg)
            raise ValueError(msg)
        if self.min_radius_squared < 0 or self.base_coefficient < 0:
            msg = (
                f"Configuration error: min_radius_squared ({self.min_radius_squared}) "
                f"and base_coefficient ({self.base_coefficient}) must be non-negative."
            )
            logging.critical(msg)
            raise ValueError(msg)

        # The table the kernels read: c(i, j) = sign(i, j) * K.
        self.coefficients = np.ascontiguousarray(
            self.interaction_matrix * self.interaction_strength
        )
        self.step_count = 0
        self.last_displacements = np.zeros_like(self.particles.positions)

        logging.info("Simulation logic initialized and configuration validated.")
        logging.debug(
            f"Coefficient table ({num_types}x{num_types}):\n{self.coefficients}\n"
            f"base_coefficient={self.base_coefficient}, "
            f"min_radius_squared={self.min_radius_squared}, parallel={self.parallel}"
        )

    def compute_displacements(self) -> np.ndarray:
        """
        Runs the force pass over the current positions.

        Returns:
            np.ndarray: (N, 2) array of displacements. The store is untouched.
        """
        kernel = (
            _accumulate_displacements_parallel if self.parallel
            else _accumulate_displacements_numba
        )
        return kernel(
            self.particles.positions, self.particles.types, self.coefficients,
            self.particles.width, self.particles.height,
            self.min_radius_squared, self.base_coefficient
        )

    def apply_displacements(self, displacements: np.ndarray) -> None:
        """Runs the integration pass: moves every particle and wraps it."""
        displacements = np.asarray(displacements, dtype=np.float64)
        if displacements.shape != self.particles.positions.shape:
            raise ValueError(
                f"Displacement shape {displacements.shape} does not match "
                f"positions shape {self.particles.positions.shape}."
            )
        _integrate_numba(
            self.particles.positions, displacements,
            self.particles.width, self.particles.height
        )

    def step(self) -> ParticleSystem:
        """
        Executes one tick of the simulation.
        """
        # 1. Sum every displacement from the pre-tick snapshot
        displacements = self.compute_displacements()

        # 2. Only then move the particles
        self.apply_displacements(displacements)

        self.last_displacements = displacements
        self.step_count += 1
        return self.particles

    tick = step

    @property
    def mean_displacement(self) -> float:
        """Mean displacement magnitude of the last tick."""
        if self.last_displacements.size == 0:
            return 0.0
        return float(np.mean(np.linalg.norm(self.last_displacements, axis=1)))
