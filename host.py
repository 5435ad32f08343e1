# host.py
"""
Environments an animator can be mounted into.

A host owns the drawing surface, the frame scheduler that paces the
animation and the event hub that delivers pointer and resize input.
PygameHost drives a real window; OffscreenHost renders to an in-memory
surface and only advances when told to, for headless capture and tests.
"""
import logging
import pygame
from typing import Optional, Tuple

from constants import FPS, FRAME_INTERVAL_MS, FULLSCREEN, WINDOW_CAPTION, WINDOW_SIZE
from scheduler import EventHub, FrameScheduler

# --- Data Contracts ---
#
# class Host:
#   - scheduler: FrameScheduler
#   - events: EventHub, dispatching POINTER_MOVE(x, y) and RESIZE(width, height).
#   - acquire_surface(self) -> Optional[pygame.Surface]:
#     - Outputs: the current drawing surface, or None if there is none.
#       May raise pygame.error.
#
# class PygameHost(Host):
#   - open(self) -> bool: Initializes Pygame and creates the window.
#     - Outputs: False if no display is available. acquire_surface()
#       then returns None.
#   - run(self, max_frames: Optional[int] = None) -> int:
#     - Side Effects: Pumps events, ticks the scheduler and flips the
#       display at FPS until the window is closed, ESC is pressed or
#       max_frames is reached.
#     - Outputs: number of frames run.
#   - close(self) -> None
#
# class OffscreenHost(Host):
#   - advance(self, frames: int = 1) -> int: ticks the scheduler.
#   - move_pointer(self, x, y) / resize(self, width, height): synthetic input.

POINTER_MOVE = "pointermove"
RESIZE = "resize"


class Host:
    """
    Base class holding the scheduler and event hub shared by all hosts.
    """
    def __init__(self):
        self.scheduler = FrameScheduler()
        self.events = EventHub()
        self.elapsed_ms = 0.0

    def acquire_surface(self) -> Optional[pygame.Surface]:
        raise NotImplementedError


class OffscreenHost(Host):
    """
    A host backed by a plain in-memory surface.
    """
    def __init__(self, width: int, height: int, available: bool = True):
        """
        Args:
            width (int): Surface width.
            height (int): Surface height.
            available (bool): When False, no surface is ever provided,
                simulating an environment without a drawing context.
        """
        super().__init__()
        self.surface = pygame.Surface((width, height)) if available else None

    def acquire_surface(self) -> Optional[pygame.Surface]:
        return self.surface

    def advance(self, frames: int = 1) -> int:
        """Runs `frames` ticks of the scheduler; returns the callbacks run."""
        run = 0
        for _ in range(frames):
            self.elapsed_ms += FRAME_INTERVAL_MS
            run += self.scheduler.tick(self.elapsed_ms)
        return run

    def move_pointer(self, x: float, y: float) -> None:
        self.events.dispatch(POINTER_MOVE, x, y)

    def resize(self, width: int, height: int) -> None:
        if self.surface is not None:
            self.surface = pygame.Surface((width, height))
        self.events.dispatch(RESIZE, width, height)


class PygameHost(Host):
    """
    A host driving a Pygame window at a fixed frame rate.
    """
    def __init__(self, size: Optional[Tuple[int, int]] = None, fullscreen: bool = FULLSCREEN,
                 resizable: bool = True, caption: str = WINDOW_CAPTION):
        super().__init__()
        self.size = size
        self.fullscreen = fullscreen and size is None
        self.resizable = resizable and size is None
        self.caption = caption
        self.clock = None

    def open(self) -> bool:
        """
        Initializes Pygame and the display window.

        Returns:
            bool: False if no display could be opened. The display is left
            uninitialized so acquire_surface() returns None.
        """
        try:
            pygame.init()
            if self.fullscreen:
                display_info = pygame.display.Info()
                width, height = display_info.current_w, display_info.current_h
                pygame.display.set_mode((width, height), pygame.FULLSCREEN)
            else:
                width, height = self.size or WINDOW_SIZE
                flags = pygame.RESIZABLE if self.resizable else 0
                pygame.display.set_mode((width, height), flags)
        except pygame.error as e:
            logging.warning(f"PygameHost could not open a display: {e}")
            pygame.display.quit()
            return False
        pygame.display.set_caption(self.caption)
        self.clock = pygame.time.Clock()
        logging.info(f"PygameHost opened a {width}x{height} display.")
        return True

    def acquire_surface(self) -> Optional[pygame.Surface]:
        if not pygame.display.get_init():
            return None
        return pygame.display.get_surface()

    def pump_events(self) -> bool:
        """
        Dispatches pending input to listeners.

        Returns:
            bool: False if the user asked to quit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down host.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down host.")
                return False
            if event.type == pygame.MOUSEMOTION:
                self.events.dispatch(POINTER_MOVE, *event.pos)
            elif event.type == pygame.VIDEORESIZE:
                self.events.dispatch(RESIZE, event.w, event.h)
        return True

    def run(self, max_frames: Optional[int] = None) -> int:
        """Runs the frame loop; returns the number of frames run."""
        if self.clock is None:
            if not self.open():
                return 0
        frames = 0
        while self.pump_events():
            self.elapsed_ms = float(pygame.time.get_ticks())
            self.scheduler.tick(self.elapsed_ms)
            pygame.display.flip()
            self.clock.tick(FPS)
            frames += 1
            if max_frames is not None and frames >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping host.")
                break
        return frames

    def close(self) -> None:
        """Shuts down Pygame."""
        pygame.quit()
        self.clock = None
