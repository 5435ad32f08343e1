# visualization.py
"""
Handles the rendering of a particle field using Pygame.

Each frame is composited in a fixed order: a translucent background fill
(which leaves fading motion trails instead of clearing), trail strokes,
proximity edges, glow halos and finally the solid particle cores.
"""
import logging
import pygame
import numpy as np
from numba import jit
from typing import Dict, NamedTuple, Tuple

from constants import NEON_COLORS
from field_config import EdgeMetric, FieldConfig
from particle import ParticleStore

# --- Data Contracts ---
#
# find_proximity_edges(points: np.ndarray, threshold: float) -> ProximityEdges:
#   - Inputs: (N, D) coordinates (D = 2 for screen space, 3 for world space).
#   - Outputs: every unordered pair (i < j) closer than threshold, with
#     strength = 1 - distance / threshold, plus the number of comparisons.
#   - Invariants: the predicate is symmetric. Exactly N * (N - 1) / 2
#     comparisons are made; no spatial partitioning.
#
# class FieldRenderer:
#   - __init__(self, config: FieldConfig, surface: pygame.Surface):
#     - Side Effects: Builds the fade and line layers for the surface size.
#   - resize(self, surface: pygame.Surface) -> None
#   - draw(self, store, screen_xy, screen_sizes, scales) -> FrameStats:
#     - Inputs: the store and its projection for this frame; the store's
#       trail must already hold this frame's positions.
#     - Side Effects: Draws onto the surface.

# Largest halo radius worth caching, in pixels.
HALO_MAX_RADIUS = 128


class FrameStats(NamedTuple):
    """What one frame drew."""
    comparisons: int
    edges: int
    trail_segments: int
    glows: int


class ProximityEdges(NamedTuple):
    first: np.ndarray
    second: np.ndarray
    strength: np.ndarray
    comparisons: int


@jit(nopython=True)
def _scan_pairs_numba(points, threshold, out_first, out_second, out_strength):
    """
    Numba-jitted O(n^2) neighbor scan.

    Every unordered pair is compared once. Matching pairs are written to the
    preallocated output arrays; returns (pairs found, comparisons made).
    """
    particle_count = points.shape[0]
    dims = points.shape[1]
    threshold_sq = threshold * threshold
    count = 0
    comparisons = 0
    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            comparisons += 1
            distance_sq = 0.0
            for k in range(dims):
                d = points[i, k] - points[j, k]
                distance_sq += d * d
            if distance_sq < threshold_sq:
                out_first[count] = i
                out_second[count] = j
                out_strength[count] = 1.0 - np.sqrt(distance_sq) / threshold
                count += 1
    return count, comparisons


def find_proximity_edges(points: np.ndarray, threshold: float) -> ProximityEdges:
    """
    Finds all pairs of points closer than `threshold`.

    Args:
        points (np.ndarray): (N, D) coordinates.
        threshold (float): Connection distance, > 0.

    Returns:
        ProximityEdges: Pair indices (first < second), their strengths in
        (0, 1], and the number of comparisons made.
    """
    points = np.ascontiguousarray(points, dtype=np.float64)
    n = points.shape[0]
    capacity = n * (n - 1) // 2
    first = np.empty(capacity, dtype=np.int64)
    second = np.empty(capacity, dtype=np.int64)
    strength = np.empty(capacity, dtype=np.float64)
    count, comparisons = _scan_pairs_numba(points, float(threshold), first, second, strength)
    return ProximityEdges(first[:count], second[:count], strength[:count], int(comparisons))


def halo_alpha(t: float) -> float:
    """
    Opacity of a halo at fraction t of its radius.

    Full at the center, 0.6 at half radius, transparent at the edge.
    """
    if t <= 0.5:
        return 1.0 - 0.8 * t
    return max(0.0, 1.2 * (1.0 - t))


class FieldRenderer:
    """
    Draws one particle field onto a Pygame surface.
    """
    def __init__(self, config: FieldConfig, surface: pygame.Surface):
        self.config = config
        self.colors = self._initialize_colors(config.palette)
        self.edge_color = pygame.Color(config.edge_color) if config.edge_color else None
        self.core_color = pygame.Color(config.core_color) if config.core_color else None
        self._halo_cache: Dict[Tuple[int, int], pygame.Surface] = {}
        self.resize(surface)
        logging.info(f"FieldRenderer initialized with {len(self.colors)} colors.")

    def _initialize_colors(self, palette) -> list:
        """Parses the palette, falling back to the neon palette on bad input."""
        try:
            return [pygame.Color(c) for c in palette]
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse palette {palette!r}: {e}. Falling back to the neon palette.")
            return [pygame.Color(c) for c in NEON_COLORS]

    def resize(self, surface: pygame.Surface) -> None:
        """Targets a new surface and rebuilds the full-canvas layers for its size."""
        self.surface = surface
        size = surface.get_size()
        bg = self.config.background_color
        # Blitted every frame to fade the previous one instead of clearing it.
        self.fade_surface = pygame.Surface(size, pygame.SRCALPHA)
        self.fade_surface.fill((bg[0], bg[1], bg[2], int(self.config.fade_alpha * 255)))
        self.line_layer = pygame.Surface(size, pygame.SRCALPHA)
        logging.debug(f"Renderer layers sized to {size[0]}x{size[1]}.")

    def clear(self) -> None:
        """Paints the background fully opaque, used once when a field is mounted."""
        self.surface.fill(self.config.background_color)

    def _color(self, index: int) -> pygame.Color:
        return self.colors[index % len(self.colors)]

    def draw(self, store: ParticleStore, screen_xy: np.ndarray,
             screen_sizes: np.ndarray, scales: np.ndarray) -> FrameStats:
        """
        Draws one frame.

        Returns:
            FrameStats: Counts of what was drawn.
        """
        cfg = self.config

        # 1. Fade the previous frame
        self.surface.blit(self.fade_surface, (0, 0))

        if store.particle_count == 0:
            return FrameStats(0, 0, 0, 0)

        pulse = np.sin(store.pulses)
        radii = screen_sizes * (1.0 + pulse * cfg.pulse_amplitude)
        opacities = np.clip(store.opacities + pulse * cfg.opacity_pulse, 0.0, 1.0)

        # 2. Trails and edges share one translucent layer
        self.line_layer.fill((0, 0, 0, 0))
        trail_segments = self._draw_trails(store, radii, opacities)

        if cfg.edge_metric is EdgeMetric.SPATIAL:
            edges = find_proximity_edges(store.positions, cfg.edge_threshold)
        else:
            edges = find_proximity_edges(screen_xy, cfg.edge_threshold)
        self._draw_edges(store, edges, screen_xy, scales)
        self.surface.blit(self.line_layer, (0, 0))

        # 3. Glows, then cores on top
        glows = self._draw_glows(store, screen_xy, radii, opacities)
        self._draw_cores(store, screen_xy, radii)

        return FrameStats(edges.comparisons, len(edges.first), trail_segments, glows)

    def _draw_trails(self, store: ParticleStore, radii: np.ndarray, opacities: np.ndarray) -> int:
        """Strokes each trail with opacity rising from the oldest point to the newest."""
        cfg = self.config
        length = store.trail_length
        if cfg.trail_alpha <= 0 or length < 2:
            return 0

        points = store.trails[:, store.trail_order()]
        segments = 0
        for i in range(store.particle_count):
            color = self._color(store.color_indices[i])
            width = max(1, int(radii[i] * cfg.trail_width))
            for idx in range(1, length):
                alpha = int((idx / length) * opacities[i] * cfg.trail_alpha * 255)
                if alpha <= 0:
                    continue
                pygame.draw.line(
                    self.line_layer,
                    (color.r, color.g, color.b, alpha),
                    tuple(points[i, idx - 1]),
                    tuple(points[i, idx]),
                    width
                )
                segments += 1
        return segments

    def _draw_edges(self, store: ParticleStore, edges: ProximityEdges,
                    screen_xy: np.ndarray, scales: np.ndarray) -> None:
        cfg = self.config
        for i, j, strength in zip(edges.first, edges.second, edges.strength):
            color = self.edge_color if self.edge_color is not None else self._color(store.color_indices[i])
            alpha = int(strength * cfg.edge_alpha * 255)
            if cfg.taper_edges:
                width = cfg.edge_width * strength * scales[i]
            else:
                width = cfg.edge_width
            pygame.draw.line(
                self.line_layer,
                (color.r, color.g, color.b, alpha),
                tuple(screen_xy[i]),
                tuple(screen_xy[j]),
                max(1, int(round(width)))
            )

    def _draw_glows(self, store: ParticleStore, screen_xy: np.ndarray,
                    radii: np.ndarray, opacities: np.ndarray) -> int:
        glows = 0
        for i in range(store.particle_count):
            radius = int(radii[i] * self.config.glow_ratio)
            if radius < 1:
                continue
            halo = self._halo(int(store.color_indices[i]), radius)
            halo.set_alpha(int(opacities[i] * 255))
            half = halo.get_width() // 2
            self.surface.blit(halo, (int(screen_xy[i, 0]) - half, int(screen_xy[i, 1]) - half))
            glows += 1
        return glows

    def _draw_cores(self, store: ParticleStore, screen_xy: np.ndarray, radii: np.ndarray) -> None:
        for i in range(store.particle_count):
            color = self.core_color if self.core_color is not None else self._color(store.color_indices[i])
            pygame.draw.circle(self.surface, color, tuple(screen_xy[i]), max(1.0, float(radii[i])))

    def _halo(self, color_index: int, radius: int) -> pygame.Surface:
        """Returns a cached radial-gradient halo, rendering it on first use."""
        radius = min(radius, HALO_MAX_RADIUS)
        key = (color_index % len(self.colors), radius)
        halo = self._halo_cache.get(key)
        if halo is None:
            halo = self._render_halo(self._color(color_index), radius)
            self._halo_cache[key] = halo
            logging.debug(f"Rendered halo for color {key[0]} at radius {radius} ({len(self._halo_cache)} cached).")
        return halo

    @staticmethod
    def _render_halo(color: pygame.Color, radius: int) -> pygame.Surface:
        diameter = radius * 2
        halo = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
        # Outer rings first; each smaller circle overwrites the center.
        for r in range(radius, 0, -1):
            alpha = int(halo_alpha(r / radius) * 255)
            pygame.draw.circle(halo, (color.r, color.g, color.b, alpha), (radius, radius), r)
        return halo
