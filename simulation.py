# simulation.py
"""
Handles the per-frame physics of the particle field.

This module defines the Simulation class, which advances every particle
by one frame: orbit, wave drift, pointer force, integration, damping,
boundary handling and pulse phase. Updates are not scaled by elapsed
wall-clock time, so the animation runs faster on high refresh rate
displays.
"""
import logging
import numpy as np
from typing import Tuple

from field_config import BoundaryPolicy, FieldConfig
from particle import ParticleStore

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleStore, config: FieldConfig, width: int, height: int):
#     - Inputs:
#       - particles: An initialized ParticleStore.
#       - config: The FieldConfig the store was built from.
#       - width, height: Size of the drawing surface, used for the orbit
#         center and the x/y boundaries.
#     - Side Effects: Stores references. time starts at 0.
#
#   - step(self, pointer: Tuple[float, float]) -> None:
#     - Inputs: Pointer position in canvas coordinates.
#     - Side Effects: Modifies positions, velocities and pulses in place.
#     - Invariants: Particle count remains constant. 0 <= z <= z_max after
#       every call. x/y stay within [-edge_margin, size + edge_margin].
#
#   - resize(self, width: int, height: int) -> None:
#     - Side Effects: Moves the boundaries. Particles are not repositioned.


def apply_boundary(coords: np.ndarray, velocities: np.ndarray,
                   low: float, high: float, policy: BoundaryPolicy) -> None:
    """
    Keeps one axis of the store inside [low, high].

    WRAP teleports a particle that left through one edge to the opposite
    edge. BOUNCE clamps it to the edge it crossed and points its velocity
    back inside. Both arrays are modified in place.
    """
    below = coords < low
    above = coords > high
    if policy is BoundaryPolicy.WRAP:
        coords[below] = high
        coords[above] = low
    else:
        coords[below] = low
        velocities[below] = np.abs(velocities[below])
        coords[above] = high
        velocities[above] = -np.abs(velocities[above])


class Simulation:
    """
    Advances a ParticleStore one frame at a time.
    """
    def __init__(self, particles: ParticleStore, config: FieldConfig, width: int, height: int):
        """
        Initializes the physics for one field.

        Args:
            particles (ParticleStore): The particles to move.
            config (FieldConfig): Field parameters.
            width (int): Width of the drawing surface.
            height (int): Height of the drawing surface.
        """
        self.particles = particles
        self.config = config
        self.width = width
        self.height = height
        self.time = 0.0

        # Per-particle phase so neighbors do not drift in sync.
        self._phases = np.arange(particles.particle_count, dtype=np.float64) * config.wave_phase_offset
        self._rotation = (np.cos(config.rotation_speed), np.sin(config.rotation_speed))

        logging.info(
            f"Simulation initialized: pointer {config.pointer_force.value} "
            f"within {config.pointer_radius:.0f}px, friction {config.friction}, "
            f"boundary {config.boundary.value}/{config.depth_boundary.value}."
        )

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def step(self, pointer: Tuple[float, float]) -> None:
        """
        Executes one frame of the simulation.
        """
        cfg = self.config
        pos = self.particles.positions
        vel = self.particles.velocities
        self.time += cfg.time_step

        # 0. Orbit the field around the canvas center
        if cfg.rotation_speed:
            cx, cy = self.width / 2, self.height / 2
            cos_a, sin_a = self._rotation
            dx = pos[:, 0] - cx
            dy = pos[:, 1] - cy
            pos[:, 0] = cx + dx * cos_a - dy * sin_a
            pos[:, 1] = cy + dx * sin_a + dy * cos_a

        # 1. Wave drift moves positions directly, not velocities
        phase = self.time + self._phases
        wave_x, wave_y = np.sin(phase), np.cos(phase)
        if cfg.wave_swap:
            wave_x, wave_y = wave_y, wave_x
        pos[:, 0] += wave_x * cfg.wave_amplitude[0]
        pos[:, 1] += wave_y * cfg.wave_amplitude[1]
        if cfg.depth_wave:
            pos[:, 2] += np.sin(self.time * 0.5) * cfg.depth_wave

        # 2. Pointer force, linear falloff inside the interaction radius
        self._apply_pointer_force(pointer)

        # 3. Integrate
        pos += vel

        # 4. Damping
        vel *= cfg.friction

        # 5. Boundaries, independently per axis
        margin = cfg.edge_margin
        apply_boundary(pos[:, 0], vel[:, 0], -margin, self.width + margin, cfg.boundary)
        apply_boundary(pos[:, 1], vel[:, 1], -margin, self.height + margin, cfg.boundary)
        apply_boundary(pos[:, 2], vel[:, 2], 0.0, cfg.z_max, cfg.depth_boundary)

        # 6. Advance the pulse phase used for size and opacity modulation
        self.particles.pulses += cfg.pulse_step

    def _apply_pointer_force(self, pointer: Tuple[float, float]) -> None:
        cfg = self.config
        pos = self.particles.positions
        vel = self.particles.velocities

        delta = np.column_stack((pointer[0] - pos[:, 0], pointer[1] - pos[:, 1]))
        distance = np.hypot(delta[:, 0], delta[:, 1])
        near = distance < cfg.pointer_radius
        if not np.any(near):
            return

        falloff = (cfg.pointer_radius - distance[near]) / cfg.pointer_radius
        # Direction is FROM the particle TO the pointer
        direction = delta[near] / (distance[near, np.newaxis] + 1e-9)
        impulse = direction * (falloff * cfg.pointer_strength * cfg.pointer_force.sign)[:, np.newaxis]
        vel[near, :2] += impulse

        if cfg.pointer_jitter > 0:
            half = cfg.pointer_jitter / 2
            vel[near, :2] += self.particles.rng.uniform(-half, half, size=(int(near.sum()), 2))

    def mean_speed(self) -> float:
        """Average velocity magnitude, for throttled diagnostics."""
        if self.particles.particle_count == 0:
            return 0.0
        return float(np.mean(np.linalg.norm(self.particles.velocities, axis=1)))
