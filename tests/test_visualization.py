import numpy as np
import pygame
import pytest

from constants import VIBRANT_COLORS
from particle import ParticleSystem
from visualization import Visualizer, resolve_colors


@pytest.fixture
def visualizer():
    vis = Visualizer(100, 80, particle_types=3, fps=1000)
    yield vis
    vis.close()


def test_default_palette_is_indexed_by_type(visualizer):
    assert visualizer.colors == [pygame.Color(c) for c in VIBRANT_COLORS[:3]]


def test_config_colors_are_padded_and_truncated():
    padded = resolve_colors(3, [[1, 2, 3]])
    assert padded[0] == pygame.Color(1, 2, 3)
    assert padded[1:] == [pygame.Color(c) for c in VIBRANT_COLORS[1:3]]
    assert resolve_colors(1, [[1, 2, 3], [4, 5, 6]]) == [pygame.Color(1, 2, 3)]


def test_unparseable_colors_fall_back_to_palette():
    assert resolve_colors(2, ["not-a-color-name"]) == [pygame.Color(c) for c in VIBRANT_COLORS[:2]]


def test_palette_repeats_for_many_types():
    colors = resolve_colors(len(VIBRANT_COLORS) + 1)
    assert colors[-1] == colors[0]


def test_render_paints_a_square_per_particle(visualizer):
    particles = ParticleSystem.from_state([[10.0, 20.0], [50.5, 60.7]], [0, 2], 3, 100, 80)
    assert visualizer.draw(particles.snapshot())
    screen = visualizer.screen
    assert screen.get_at((11, 21)) == visualizer.colors[0]
    assert screen.get_at((13, 23)) == visualizer.colors[0]
    assert screen.get_at((51, 61)) == visualizer.colors[2]
    assert screen.get_at((0, 0)) == pygame.Color(0, 0, 0)


def test_quit_event_stops_the_run(visualizer):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    particles = ParticleSystem.from_state(np.zeros((1, 2)), [0], 3, 100, 80)
    assert not visualizer.draw(particles.snapshot())


@pytest.mark.parametrize("key", [pygame.K_q, pygame.K_ESCAPE])
def test_quit_keys_stop_the_run(visualizer, key):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=key))
    assert not visualizer.handle_events()


def test_other_keys_are_ignored(visualizer):
    pygame.event.clear()
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
    assert visualizer.handle_events()
