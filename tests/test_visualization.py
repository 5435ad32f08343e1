import dataclasses

import numpy as np
import pygame
import pytest

from field_config import EdgeMetric, FieldConfig
from particle import ParticleStore
from projection import project_positions
from visualization import FieldRenderer, FrameStats, find_proximity_edges, halo_alpha


def _render(config, count, size=(320, 240), frames=1, positions=None):
    surface = pygame.Surface(size)
    store = ParticleStore(config, count, *size)
    if positions is not None:
        store.positions[:] = positions
    renderer = FieldRenderer(config, surface)
    renderer.clear()
    stats = None
    for _ in range(frames):
        screen_xy, sizes, scales = project_positions(
            store.positions, store.sizes, (size[0] / 2, size[1] / 2), config.depth_constant
        )
        store.push_trail(screen_xy)
        stats = renderer.draw(store, screen_xy, sizes, scales)
    return renderer, store, stats


def test_edges_within_threshold():
    points = np.array([[0.0, 0.0], [30.0, 0.0], [300.0, 0.0]])
    edges = find_proximity_edges(points, 100.0)

    assert edges.comparisons == 3
    assert list(edges.first) == [0]
    assert list(edges.second) == [1]
    assert edges.strength[0] == pytest.approx(0.7)


def test_single_point_makes_no_comparisons():
    edges = find_proximity_edges(np.array([[5.0, 5.0]]), 100.0)
    assert edges.comparisons == 0
    assert len(edges.first) == 0


def test_no_points():
    edges = find_proximity_edges(np.zeros((0, 3)), 100.0)
    assert edges.comparisons == 0
    assert len(edges.first) == 0


def test_every_pair_is_compared_once():
    points = np.random.default_rng(0).uniform(0, 500, size=(40, 2))
    edges = find_proximity_edges(points, 120.0)
    assert edges.comparisons == 40 * 39 // 2
    assert np.all(edges.first < edges.second)
    assert np.all((edges.strength > 0) & (edges.strength <= 1))


def test_proximity_is_symmetric():
    points = np.random.default_rng(1).uniform(0, 400, size=(60, 3))
    n = len(points)
    forward = find_proximity_edges(points, 150.0)
    backward = find_proximity_edges(points[::-1], 150.0)

    forward_pairs = {frozenset((int(i), int(j))) for i, j in zip(forward.first, forward.second)}
    backward_pairs = {
        frozenset((n - 1 - int(i), n - 1 - int(j)))
        for i, j in zip(backward.first, backward.second)
    }
    assert forward_pairs == backward_pairs
    assert len(forward_pairs) > 0


def test_spatial_distance_includes_depth():
    points = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 150.0]])
    assert len(find_proximity_edges(points, 100.0).first) == 0
    assert len(find_proximity_edges(points[:, :2], 100.0).first) == 1


def test_halo_gradient_stops():
    assert halo_alpha(0.0) == pytest.approx(1.0)
    assert halo_alpha(0.5) == pytest.approx(0.6)
    assert halo_alpha(1.0) == pytest.approx(0.0)
    assert halo_alpha(0.25) > halo_alpha(0.75)


def test_zero_particles_only_fades(config):
    cfg = dataclasses.replace(config, background_color=(10, 20, 30))
    renderer, _, stats = _render(cfg, 0, frames=3)
    assert stats == FrameStats(0, 0, 0, 0)
    assert renderer.surface.get_at((5, 5))[:3] == (10, 20, 30)


def test_single_particle_draws_no_edges(config):
    _, _, stats = _render(config, 1, frames=2)
    assert stats.comparisons == 0
    assert stats.edges == 0
    assert stats.glows == 1


def test_close_particles_are_connected(config):
    positions = [[100.0, 100.0, 0.0], [120.0, 100.0, 0.0], [300.0, 220.0, 900.0]]
    _, _, stats = _render(config, 3, positions=positions)
    assert stats.comparisons == 3
    assert stats.edges == 1


def test_planar_metric_uses_screen_positions(config):
    cfg = dataclasses.replace(config, edge_metric=EdgeMetric.PLANAR)
    # Same x/y, far apart in depth: connected on screen only.
    positions = [[160.0, 120.0, 0.0], [160.0, 120.0, 900.0]]
    _, _, stats = _render(cfg, 2, positions=positions)
    assert stats.edges == 1

    _, _, stats = _render(config, 2, positions=positions)
    assert stats.edges == 0


def test_trail_segments_follow_trail_length(config):
    cfg = dataclasses.replace(config, trail_length=6, opacity_range=(1.0, 1.0))
    _, store, stats = _render(cfg, 5, frames=10)
    assert store.trail_length == 6
    assert stats.trail_segments == 5 * 5


def test_trails_disabled_by_zero_alpha(config):
    cfg = dataclasses.replace(config, trail_alpha=0.0)
    _, _, stats = _render(cfg, 5, frames=4)
    assert stats.trail_segments == 0


def test_core_is_drawn_at_projected_position(config):
    cfg = dataclasses.replace(config, core_color=(255, 255, 255), size_range=(4.0, 4.0))
    renderer, _, _ = _render(cfg, 1, positions=[[100.0, 80.0, 0.0]])
    assert renderer.surface.get_at((100, 80))[:3] == (255, 255, 255)


def test_halo_cache_is_reused(config):
    renderer, store, _ = _render(config, 10, frames=1)
    cached = len(renderer._halo_cache)
    assert cached > 0
    halo = renderer._halo(int(store.color_indices[0]), 5)
    assert renderer._halo(int(store.color_indices[0]), 5) is halo


def test_invalid_palette_falls_back(config):
    cfg = dataclasses.replace(config, palette=("not-a-color",))
    renderer = FieldRenderer(cfg, pygame.Surface((10, 10)))
    assert len(renderer.colors) == len(FieldConfig().palette)


def test_resize_rebuilds_layers(config):
    renderer = FieldRenderer(config, pygame.Surface((10, 10)))
    renderer.resize(pygame.Surface((50, 40)))
    assert renderer.fade_surface.get_size() == (50, 40)
    assert renderer.line_layer.get_size() == (50, 40)
