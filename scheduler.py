# scheduler.py
"""
Per-frame callback scheduling and input listener registries.

FrameScheduler follows requestAnimationFrame semantics: a callback asks
for the next frame, runs once when that frame arrives, and must ask again
to keep animating. EventHub is a plain last-value listener registry for
pointer and resize events; nothing is queued or debounced.
"""
import logging
from typing import Callable, Dict, List

# --- Data Contracts ---
#
# class FrameScheduler:
#   - request_frame(self, callback: Callable[[float], None]) -> int:
#     - Outputs: a handle > 0. The callback runs on the next tick only.
#   - cancel_frame(self, handle: int) -> None:
#     - Side Effects: The callback will not run. Unknown or spent handles
#       are ignored.
#   - tick(self, timestamp: float) -> int:
#     - Side Effects: Runs every callback requested before this tick.
#       Callbacks requested during the tick wait for the next one.
#     - Outputs: number of callbacks run.
#
# class EventHub:
#   - add_listener / remove_listener(self, event_type: str, listener) -> None
#   - dispatch(self, event_type: str, *args) -> int:
#     - Outputs: number of listeners invoked.

FrameCallback = Callable[[float], None]


class FrameScheduler:
    """
    Hands out frame callbacks to whoever drives the clock.
    """
    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._batch: Dict[int, FrameCallback] = {}
        self._next_handle = 1
        self.frames_run = 0

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)
        self._batch.pop(handle, None)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next tick."""
        return len(self._pending)

    def tick(self, timestamp: float) -> int:
        """
        Runs the callbacks due on this frame.

        Args:
            timestamp (float): Milliseconds since the host started.

        Returns:
            int: Number of callbacks run.
        """
        self._batch, self._pending = self._pending, {}
        run = 0
        # A callback may cancel another one from the same batch.
        while self._batch:
            handle = next(iter(self._batch))
            callback = self._batch.pop(handle)
            callback(timestamp)
            run += 1
        self.frames_run += 1
        return run


class EventHub:
    """
    Registry of listeners keyed by event type.
    """
    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}

    def add_listener(self, event_type: str, listener: Callable) -> None:
        self._listeners.setdefault(event_type, []).append(listener)
        logging.debug(f"Listener added for '{event_type}'.")

    def remove_listener(self, event_type: str, listener: Callable) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
            logging.debug(f"Listener removed for '{event_type}'.")

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def dispatch(self, event_type: str, *args) -> int:
        # Copy so listeners may deregister themselves while being called.
        listeners = list(self._listeners.get(event_type, []))
        for listener in listeners:
            listener(*args)
        return len(listeners)
