# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

The visualizer never touches the simulation directly. Between ticks it
receives a read-only snapshot of the store and paints one small square per
particle, colored by type.
"""
import logging
from typing import List, Optional

import pygame

from constants import (
    BACKGROUND_COLOR, FPS, PARTICLE_OFFSET, PARTICLE_SIZE, VIBRANT_COLORS,
    WINDOW_CAPTION
)
from particle import ParticleSnapshot

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: int, height: int, particle_types: int,
#              colors: Optional[list] = None, fps: int = FPS):
#     - Inputs:
#       - width, height: size of the display window (the domain size).
#       - particle_types: int, the number of particle types.
#       - colors: Optional list of RGB color lists (e.g., [[255,0,0], ...])
#         from the configuration. If None, the default palette is used.
#       - fps: frame rate cap.
#     - Outputs: None
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, snapshot: ParticleSnapshot) -> bool:
#     - Inputs:
#       - snapshot: read-only types and positions of all particles.
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders particles to the screen, handles Pygame
#       events and sleeps to hold the frame rate.


def resolve_colors(particle_types: int, config_colors: Optional[list] = None) -> List[pygame.Color]:
    """
    One color per particle type.

    Colors from the config come first. Missing entries are taken from the
    default palette at the same index, extra entries are dropped. An
    unparseable list falls back to the palette entirely.
    """
    palette = [pygame.Color(VIBRANT_COLORS[i % len(VIBRANT_COLORS)]) for i in range(particle_types)]
    if not config_colors:
        logging.info("No colors found in config. Using vibrant default palette.")
        return palette

    try:
        parsed = [pygame.Color(tuple(rgb) if isinstance(rgb, list) else rgb) for rgb in config_colors]
    except (ValueError, TypeError) as e:
        logging.error(f"Invalid particle_colors in config ({e}). Using vibrant default palette.")
        return palette

    if len(parsed) != particle_types:
        logging.warning(
            f"Config provides {len(parsed)} colors for {particle_types} particle types. "
            "Padding from the default palette or dropping the excess."
        )
    return parsed[:particle_types] + palette[len(parsed):]


class Visualizer:
    """
    Renders the particle system state in a Pygame window.
    """
    def __init__(
        self,
        width: int,
        height: int,
        particle_types: int,
        colors: Optional[list] = None,
        fps: int = FPS,
    ):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()

        self.width = int(width)
        self.height = int(height)
        self.fps = fps
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption(WINDOW_CAPTION)
        self.clock = pygame.time.Clock()

        # Load or generate colors for each particle type
        self.colors = resolve_colors(particle_types, colors)

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    def handle_events(self) -> bool:
        """
        Drains the Pygame event queue.

        Returns:
            bool: False once the window is closed or q/ESC is pressed.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key in (pygame.K_q, pygame.K_ESCAPE):
                logging.info(f"{pygame.key.name(event.key)} key pressed. Shutting down visualizer.")
                return False
        return True

    def render(self, snapshot: ParticleSnapshot) -> None:
        """Paints one frame from the snapshot."""
        self.screen.fill(BACKGROUND_COLOR)
        for p_type, pos in zip(snapshot.types, snapshot.positions):
            rect = (
                int(pos[0]) + PARTICLE_OFFSET,
                int(pos[1]) + PARTICLE_OFFSET,
                PARTICLE_SIZE,
                PARTICLE_SIZE,
            )
            pygame.draw.rect(self.screen, self.colors[p_type % len(self.colors)], rect)
        pygame.display.flip()

    def draw(self, snapshot: ParticleSnapshot) -> bool:
        """
        Handles events, draws all particles and paces the frame.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        if not self.handle_events():
            return False
        self.render(snapshot)
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
        logging.info("Visualizer closed.")
