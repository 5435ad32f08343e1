# projection.py
"""
Perspective projection from field space onto the drawing surface.

A particle at depth z is pulled towards the canvas center and shrunk by
the perspective divide depth_constant / (depth_constant + z). The
functions accept Python floats or NumPy arrays of matching shape.
"""
import numpy as np
from typing import Tuple

# --- Data Contracts ---
#
# perspective_scale(z, depth_constant) -> scale
#   - Inputs: z >= 0, depth_constant > 0.
#   - Outputs: scale in (0, 1].
#
# project(x, y, z, size, center, depth_constant) -> (screen_x, screen_y, screen_size)
#   - Pure: identical inputs always give identical outputs.


def perspective_scale(z, depth_constant: float):
    """Returns the perspective divide for depth z."""
    return depth_constant / (depth_constant + z)


def project(x, y, z, size, center: Tuple[float, float], depth_constant: float):
    """
    Projects field coordinates to screen coordinates.

    Args:
        x, y: Position in canvas pixels.
        z: Depth in [0, z_max].
        size: Base radius of the particle.
        center (Tuple[float, float]): Canvas center (cx, cy).
        depth_constant (float): Perspective depth constant.

    Returns:
        Tuple of (screen_x, screen_y, screen_size).
    """
    cx, cy = center
    scale = perspective_scale(z, depth_constant)
    screen_x = (x - cx) * scale + cx
    screen_y = (y - cy) * scale + cy
    return screen_x, screen_y, size * scale


def project_positions(positions: np.ndarray, sizes: np.ndarray,
                      center: Tuple[float, float], depth_constant: float):
    """
    Projects a whole store at once.

    Returns:
        Tuple of ((N, 2) screen positions, (N,) screen sizes, (N,) scales).
    """
    scale = perspective_scale(positions[:, 2], depth_constant)
    cx, cy = center
    screen_xy = np.column_stack((
        (positions[:, 0] - cx) * scale + cx,
        (positions[:, 1] - cy) * scale + cy,
    ))
    return screen_xy, sizes * scale, scale
