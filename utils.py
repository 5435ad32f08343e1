# utils.py
"""
Utility functions for the particle field application.

This module provides helper functions, such as logging setup and config
loading, that are used by the entry point but do not belong to the
physics or rendering of a field.
"""
import logging
import logging.handlers
import json
import os
from typing import Any, Dict, Optional

from field_config import FieldConfig, preset

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding
#       "level", "format" and "log_file" sub-keys. A log_file of null
#       disables the file handler.
#   - Side Effects: Configures the root Python logger with a console
#     handler and a rotating file handler. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises FileNotFoundError or json.JSONDecodeError after logging them.
#
# build_field_config(config: Dict[str, Any], preset_name: Optional[str]) -> FieldConfig:
#   - Inputs: the loaded config; preset_name overrides run_control.preset.
#   - Outputs: the preset with the "field" section applied on top.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/particle_field.log'


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to the console and, unless disabled, a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or 'disabled'}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    logging.info("Configuration loaded successfully.")
    return config


def build_field_config(config: Dict[str, Any], preset_name: Optional[str] = None) -> FieldConfig:
    """
    Resolves the field configuration for a run.

    Args:
        config (Dict[str, Any]): The loaded application config.
        preset_name (Optional[str]): Preset to use instead of the one named
            in run_control.

    Returns:
        FieldConfig: The chosen preset with the "field" overrides applied.
    """
    run_params = config.get('run_control', {})
    name = preset_name or run_params.get('preset', 'dashboard')
    base = preset(name)
    overrides = config.get('field', {})
    logging.info(f"Using '{name}' preset with {len(overrides)} override(s).")
    return FieldConfig.from_dict(overrides, base=base)
