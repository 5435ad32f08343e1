# conftest.py
"""Shared fixtures. Pygame runs against the dummy video driver."""
import logging
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from field_config import FieldConfig


@pytest.fixture
def config():
    """Dashboard defaults with a fixed seed."""
    return FieldConfig(seed=1234)


@pytest.fixture
def still_config():
    """A field with every source of motion except velocity switched off."""
    return FieldConfig(
        seed=7,
        wave_amplitude=(0.0, 0.0),
        depth_wave=0.0,
        pointer_jitter=0.0,
        friction=1.0,
        edge_margin=0.0,
    )


@pytest.fixture
def restore_logging():
    """Puts the root logger back after a test reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
