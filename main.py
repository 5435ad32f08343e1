# main.py
"""
Main entry point for the particle field.

This script orchestrates a run:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Resolves the field preset and overrides.
4. Mounts the animator in a window (or offscreen for a capture).
5. Runs the frame loop, then unmounts and shuts down cleanly.
"""
import argparse
import cProfile
import io
import logging
import pstats
import sys
from typing import List, Optional

import pygame

from animator import ParticleFieldAnimator
from constants import WINDOW_SIZE
from field_config import PRESETS, FieldConfig
from host import OffscreenHost, PygameHost
from utils import build_field_config, load_config, setup_logging


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Animated 3D particle field with pointer interaction."
    )
    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to the JSON configuration file (default: config.json).",
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Field preset, overriding run_control.preset.",
    )
    parser.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop the window after this many frames.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Render offscreen and save the last frame instead of opening a window.",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=120,
        help="Frames to render in headless mode (default: 120).",
    )
    parser.add_argument(
        "--output",
        default="particle_field.png",
        help="Image written in headless mode (default: particle_field.png).",
    )
    return parser.parse_args(argv)


def capture(field_config: FieldConfig, frames: int, output: str, log_throttle: int) -> bool:
    """
    Renders `frames` frames offscreen and saves the final one.

    Returns:
        bool: True if the image was written.
    """
    width, height = field_config.surface_size or WINDOW_SIZE
    host = OffscreenHost(width, height)
    animator = ParticleFieldAnimator(field_config, log_throttle_frames=log_throttle)
    if not animator.mount(host):
        return False
    host.advance(frames)
    pygame.image.save(host.acquire_surface(), output)
    animator.unmount()
    logging.info(f"Saved {frames}-frame capture to {output}.")
    return True


def run_window(field_config: FieldConfig, max_frames: Optional[int], log_throttle: int) -> int:
    """Runs the field in a Pygame window until closed; returns frames run."""
    host = PygameHost(size=field_config.surface_size)
    animator = ParticleFieldAnimator(field_config, log_throttle_frames=log_throttle)
    try:
        # A failed open leaves no surface, so mount degrades to a no-op.
        host.open()
        if not animator.mount(host):
            return 0
        return host.run(max_frames=max_frames)
    finally:
        animator.unmount()
        host.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main function to run the particle field.
    """
    args = parse_args(argv if argv is not None else sys.argv[1:])

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"FATAL: Could not load {args.config}. Error: {e}")
        return 1

    setup_logging(config)
    logging.info("--- Particle Field Starting ---")

    run_params = config.get('run_control', {})
    log_throttle = run_params.get('log_throttle_frames', 300)
    max_frames = args.max_frames if args.max_frames is not None else run_params.get('max_frames')

    try:
        field_config = build_field_config(config, args.preset)
    except (KeyError, ValueError) as e:
        logging.critical(f"Invalid field configuration: {e}")
        return 1

    profiler = cProfile.Profile() if run_params.get('profile', False) else None
    if profiler is not None:
        profiler.enable()

    if args.headless:
        ok = capture(field_config, args.frames, args.output, log_throttle)
        status = 0 if ok else 1
    else:
        frames = run_window(field_config, max_frames, log_throttle)
        logging.info(f"Frame loop finished after {frames} frames.")
        status = 0

    if profiler is not None:
        profiler.disable()
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Field Shutting Down ---")
    return status


if __name__ == "__main__":
    raise SystemExit(main())
