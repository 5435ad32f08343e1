# particle.py
"""
Manages the state of all particles in a field.

This module defines the ParticleStore class, which is responsible for
initializing and storing particle data (position, velocity, size, color,
opacity, pulse phase and trail history) in NumPy arrays. The population
is created once and never grows or shrinks.
"""
import logging
import numpy as np
from typing import Optional

from field_config import FieldConfig

# --- Data Contracts ---
#
# class ParticleStore:
#   - __init__(self, config: FieldConfig, count: int, width: int, height: int,
#              rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - config: A validated FieldConfig.
#       - count: int >= 0, number of particles to create.
#       - width, height: size of the drawing surface in pixels.
#       - rng: Optional generator. Defaults to default_rng(config.seed).
#     - Outputs: None
#     - Invariants:
#       - self.positions is (N, 3) float64; x in [0, width), y in [0, height),
#         z in [0, z_max).
#       - self.velocities is (N, 3) float64.
#       - self.sizes, self.opacities, self.pulses are (N,) float64.
#       - self.color_indices is (N,) int32, indices into config.palette.
#       - self.trails is (N, trail_length, 2) float64.
#       - N never changes after construction.
#
#   - push_trail(self, screen_xy: np.ndarray) -> None:
#     - Inputs: (N, 2) projected positions for the current frame.
#     - Side Effects: Overwrites the oldest trail slot once at capacity.
#
#   - trail(self, index: int) -> np.ndarray:
#     - Outputs: (len, 2) trail of one particle ordered oldest to newest.


class ParticleStore:
    """
    A fixed-size container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, config: FieldConfig, count: int, width: int, height: int,
                 rng: Optional[np.random.Generator] = None):
        """
        Creates the initial population.

        Args:
            config (FieldConfig): Field parameters.
            count (int): Number of particles.
            width (int): Width of the drawing surface.
            height (int): Height of the drawing surface.
            rng (Optional[np.random.Generator]): Source of randomness.
        """
        if count < 0:
            raise ValueError(f"Particle count must be >= 0, got {count}.")

        self.particle_count = count
        self.palette_size = len(config.palette)
        self.trail_capacity = config.trail_length
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        self.positions = self.rng.uniform(
            low=[0.0, 0.0, 0.0],
            high=[width, height, config.z_max],
            size=(count, 3)
        )
        speed = np.asarray(config.initial_speed, dtype=np.float64)
        self.velocities = self.rng.uniform(low=-speed, high=speed, size=(count, 3))
        self.sizes = self.rng.uniform(*config.size_range, size=count)
        self.color_indices = self.rng.integers(
            low=0,
            high=self.palette_size,
            size=count,
            dtype=np.int32
        )
        self.opacities = self.rng.uniform(*config.opacity_range, size=count)
        # Random starting phase so particles do not pulse in lockstep.
        self.pulses = self.rng.uniform(0.0, 2.0 * np.pi, size=count)

        # Every particle gains one trail point per frame, so a single
        # head/length pair is shared by the whole store.
        self.trails = np.zeros((count, self.trail_capacity, 2), dtype=np.float64)
        self._trail_head = 0
        self.trail_length = 0

        logging.info(
            f"ParticleStore initialized with {count} particles "
            f"on a {width}x{height} surface."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Trails shape: {self.trails.shape}"
        )

    def __len__(self) -> int:
        return self.particle_count

    def push_trail(self, screen_xy: np.ndarray) -> None:
        """Appends this frame's screen positions, evicting the oldest entry at capacity."""
        self.trails[:, self._trail_head] = screen_xy
        self._trail_head = (self._trail_head + 1) % self.trail_capacity
        self.trail_length = min(self.trail_length + 1, self.trail_capacity)

    def trail_order(self) -> np.ndarray:
        """Slot indices of the live trail entries, oldest first."""
        start = (self._trail_head - self.trail_length) % self.trail_capacity
        return (start + np.arange(self.trail_length)) % self.trail_capacity

    def trail(self, index: int) -> np.ndarray:
        """Returns the trail of one particle, oldest point first."""
        return self.trails[index, self.trail_order()]
