# animator.py
"""
The particle field animator and its mount lifecycle.

An animator is either STOPPED (before mount, after unmount) or RUNNING.
Mounting acquires the host's drawing surface, creates the particle
population, registers pointer and resize listeners and requests the first
frame. Every frame steps the physics, projects, records trails, draws and
requests the next frame. Unmounting deregisters the listeners and cancels
the pending frame, which is all the cleanup a field needs.
"""
import logging
import pygame
from enum import Enum
from typing import Optional

from field_config import FieldConfig
from host import POINTER_MOVE, RESIZE, Host
from particle import ParticleStore
from projection import project_positions
from simulation import Simulation
from visualization import FieldRenderer, FrameStats

# --- Data Contracts ---
#
# class ParticleFieldAnimator:
#   - __init__(self, config: FieldConfig, log_throttle_frames: int = 300):
#     - Side Effects: None. The animator starts STOPPED.
#
#   - mount(self, host: Host) -> bool:
#     - Outputs: True if the animator is RUNNING afterwards.
#     - Side Effects: If the host has no surface, logs a warning and does
#       nothing else: no listeners, no frames.
#
#   - unmount(self) -> None:
#     - Side Effects: Removes both listeners, cancels the pending frame and
#       discards the particles. Safe to call in any state, any number of times.
#
#   - Invariants: While RUNNING exactly one frame request is pending
#     between frames, and the particle count never changes.


class AnimatorState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class ParticleFieldAnimator:
    """
    Runs one particle field inside a host.
    """
    def __init__(self, config: FieldConfig, log_throttle_frames: int = 300):
        self.config = config
        self.log_throttle_frames = log_throttle_frames
        self.state = AnimatorState.STOPPED

        self.host: Optional[Host] = None
        self.surface: Optional[pygame.Surface] = None
        self.particles: Optional[ParticleStore] = None
        self.simulation: Optional[Simulation] = None
        self.renderer: Optional[FieldRenderer] = None
        self.pointer = (0.0, 0.0)
        self.frame_count = 0
        self.last_stats: Optional[FrameStats] = None
        self._frame_handle: Optional[int] = None

    @property
    def running(self) -> bool:
        return self.state is AnimatorState.RUNNING

    def mount(self, host: Host) -> bool:
        """
        Starts the animation inside `host`.

        Returns:
            bool: True if the field is running, False if the host could not
            provide a drawing surface.
        """
        if self.running:
            logging.warning("Animator is already mounted; ignoring mount request.")
            return True

        try:
            surface = host.acquire_surface()
        except pygame.error as e:
            logging.warning(f"Drawing surface unavailable ({e}). Particle field disabled.")
            return False
        if surface is None:
            logging.warning("Host provided no drawing surface. Particle field disabled.")
            return False

        width, height = surface.get_size()
        count = self.config.count_for_width(width)

        self.host = host
        self.surface = surface
        self.particles = ParticleStore(self.config, count, width, height)
        self.simulation = Simulation(self.particles, self.config, width, height)
        self.renderer = FieldRenderer(self.config, surface)
        self.renderer.clear()
        self.pointer = (width / 2, height / 2)
        self.frame_count = 0

        host.events.add_listener(POINTER_MOVE, self._on_pointer_move)
        host.events.add_listener(RESIZE, self._on_resize)
        self.state = AnimatorState.RUNNING
        self._frame_handle = host.scheduler.request_frame(self._on_frame)

        logging.info(f"Particle field mounted: {count} particles on {width}x{height}.")
        return True

    def unmount(self) -> None:
        """Stops the animation and releases everything mount acquired."""
        host = self.host
        if host is not None:
            host.events.remove_listener(POINTER_MOVE, self._on_pointer_move)
            host.events.remove_listener(RESIZE, self._on_resize)
            if self._frame_handle is not None:
                host.scheduler.cancel_frame(self._frame_handle)

        was_running = self.running
        self._frame_handle = None
        self.host = None
        self.surface = None
        self.particles = None
        self.simulation = None
        self.renderer = None
        self.state = AnimatorState.STOPPED
        if was_running:
            logging.info(f"Particle field unmounted after {self.frame_count} frames.")

    def _on_pointer_move(self, x: float, y: float) -> None:
        self.pointer = (float(x), float(y))

    def _on_resize(self, width: int, height: int) -> None:
        # Particles keep their coordinates and wrap back in naturally.
        surface = self.host.acquire_surface()
        if surface is None:
            logging.warning("Host lost its drawing surface on resize; keeping the old one.")
            return
        self.surface = surface
        width, height = surface.get_size()
        self.simulation.resize(width, height)
        self.renderer.resize(surface)
        self.renderer.clear()
        logging.info(f"Particle field resized to {width}x{height}.")

    def _on_frame(self, timestamp: float) -> None:
        self._frame_handle = None
        self.last_stats = self.render_frame()
        self.frame_count += 1

        # Hot loops must throttle logs
        if self.log_throttle_frames and self.frame_count % self.log_throttle_frames == 0:
            logging.debug(
                f"Frame {self.frame_count} at {timestamp:.0f}ms | "
                f"Mean speed: {self.simulation.mean_speed():.4f} | "
                f"Edges: {self.last_stats.edges} | Glows: {self.last_stats.glows}"
            )

        self._frame_handle = self.host.scheduler.request_frame(self._on_frame)

    def render_frame(self) -> FrameStats:
        """Steps the physics once and draws the result."""
        self.simulation.step(self.pointer)
        width, height = self.surface.get_size()
        screen_xy, screen_sizes, scales = project_positions(
            self.particles.positions,
            self.particles.sizes,
            (width / 2, height / 2),
            self.config.depth_constant
        )
        self.particles.push_trail(screen_xy)
        return self.renderer.draw(self.particles, screen_xy, screen_sizes, scales)
