# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
initializing and storing particle data (position and type) in NumPy
arrays. The array index of a particle is its identity for the whole run:
the store is sized once and never grows or shrinks.
"""
import logging
from typing import Any, Dict, NamedTuple, Optional

import numpy as np

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], width: float, height: float,
#              seed: Optional[int] = None):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int (overridden by the seed argument when given)
#         - "particle_count": int
#         - "particle_types": int
#       - width, height: size of the toroidal simulation domain.
#     - Outputs: None
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.types is a NumPy array of shape (N,) of dtype int32, with
#         types[i] == i % particle_types.
#       - N never changes after construction.
#
#   - snapshot(self) -> ParticleSnapshot:
#     - Outputs: read-only views of types and positions for rendering.


class ParticleSnapshot(NamedTuple):
    """Read-only view of the store handed to the presentation layer."""
    types: np.ndarray
    positions: np.ndarray


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(
        self,
        params: Dict[str, Any],
        width: float,
        height: float,
        seed: Optional[int] = None,
    ):
        """
        Initializes the particle system with a seeded random layout.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): The width of the simulation domain.
            height (float): The height of the simulation domain.
            seed (Optional[int]): Overrides params["seed"] when given.
        """
        try:
            self.particle_count = int(params['particle_count'])
            self.particle_types = int(params['particle_types'])
        except KeyError as e:
            logging.critical(f"Configuration error: missing simulation parameter {e}.")
            raise
        self.seed = params.get('seed') if seed is None else seed
        _validate_dimensions(self.particle_count, self.particle_types, width, height)
        self.width = float(width)
        self.height = float(height)

        # All randomness comes from one RNG built from the master seed, so
        # the same seed always reproduces the same initial layout.
        self.rng = np.random.default_rng(self.seed)

        # Integer coordinates inclusive of both domain bounds. A particle
        # starting exactly on the far edge is wrapped by the first tick.
        self.positions = np.empty((self.particle_count, 2), dtype=np.float64)
        self.positions[:, 0] = self.rng.integers(
            0, int(width), size=self.particle_count, endpoint=True
        )
        self.positions[:, 1] = self.rng.integers(
            0, int(height), size=self.particle_count, endpoint=True
        )
        # Round-robin type assignment over the type set.
        self.types = (
            np.arange(self.particle_count) % self.particle_types
        ).astype(np.int32)

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles of {self.particle_types} types (seed={self.seed})."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Types shape: {self.types.shape}"
        )

    @classmethod
    def from_state(
        cls,
        positions,
        types,
        particle_types: int,
        width: float,
        height: float,
    ) -> "ParticleSystem":
        """
        Builds a store from explicit positions and types instead of a
        random layout. Useful for scripted scenarios.
        """
        positions = np.array(positions, dtype=np.float64)
        types = np.array(types, dtype=np.int32)
        if positions.ndim != 2 or positions.shape[1] != 2:
            raise ValueError(f"positions must have shape (N, 2), got {positions.shape}.")
        if types.shape != (positions.shape[0],):
            raise ValueError(
                f"types must have shape ({positions.shape[0]},), got {types.shape}."
            )
        _validate_dimensions(positions.shape[0], particle_types, width, height)
        if types.size and (types.min() < 0 or types.max() >= particle_types):
            raise ValueError(
                f"Particle types must lie in [0, {particle_types}), "
                f"got range [{types.min()}, {types.max()}]."
            )

        system = cls.__new__(cls)
        system.particle_count = positions.shape[0]
        system.particle_types = int(particle_types)
        system.seed = None
        system.width = float(width)
        system.height = float(height)
        system.rng = None
        system.positions = positions
        system.types = types
        logging.debug(
            f"ParticleSystem built from explicit state: {system.particle_count} particles."
        )
        return system

    def snapshot(self) -> ParticleSnapshot:
        """Returns read-only views of the current types and positions."""
        positions = self.positions.view()
        positions.flags.writeable = False
        types = self.types.view()
        types.flags.writeable = False
        return ParticleSnapshot(types=types, positions=positions)

    def __len__(self) -> int:
        return self.particle_count


def _validate_dimensions(particle_count: int, particle_types: int, width: float, height: float) -> None:
    problems = []
    if particle_count < 1:
        problems.append(f"particle_count must be at least 1, got {particle_count}")
    if particle_types < 1:
        problems.append(f"particle_types must be at least 1, got {particle_types}")
    if not width > 0 or not height > 0:
        problems.append(f"domain must have positive size, got {width}x{height}")
    if problems:
        msg = "Configuration error: " + "; ".join(problems) + "."
        logging.critical(msg)
        raise ValueError(msg)
