# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup, config
loading, interpolation and colour parsing, that are used across
different parts of the application but do not belong to a specific
domain like the particle model or rendering.
"""
import logging
import logging.handlers
import json
import numbers
import os
import pygame
from typing import Dict, Any

from constants import FALLBACK_COLOR

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# parse_color(value: Any) -> pygame.Color:
#   - Inputs: a colour name, hex string, RGB(A) sequence, grey level or
#     pygame.Color.
#   - Outputs: a new opaque pygame.Color.
#   - Invariants: never raises. Unparseable input yields FALLBACK_COLOR.

_SEED_MASK = (1 << 64) - 1


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

def lerp(start: float, stop: float, amount: float) -> float:
    """Linear interpolation between start and stop."""
    return start + (stop - start) * amount

def map_range(value: float, start1: float, stop1: float, start2: float, stop2: float) -> float:
    """
    Re-maps value from [start1, stop1] to [start2, stop2].

    The result is not clamped: values outside the input range are
    extended proportionally past the output range.
    """
    return start2 + (stop2 - start2) * ((value - start1) / (stop1 - start1))

def normalize_seed(seed: int) -> int:
    """Folds any Python int into the unsigned 64-bit range NumPy accepts."""
    return int(seed) & _SEED_MASK

def _channel(value: Any) -> int:
    channel = int(value)
    if not 0 <= channel <= 255:
        raise ValueError(f"colour channel {channel} is outside 0-255")
    return channel

def parse_color(value: Any) -> pygame.Color:
    """
    Permissively converts value to an opaque pygame.Color.

    Invalid input is not an error: it resolves to FALLBACK_COLOR.
    """
    try:
        if isinstance(value, pygame.Color):
            color = pygame.Color(value.r, value.g, value.b)
        elif isinstance(value, numbers.Real) and not isinstance(value, bool):
            grey = _channel(value)
            color = pygame.Color(grey, grey, grey)
        elif isinstance(value, str):
            color = pygame.Color(value.strip())
        else:
            channels = [_channel(c) for c in value]
            if len(channels) not in (3, 4):
                raise ValueError(f"expected 3 or 4 channels, got {len(channels)}")
            color = pygame.Color(*channels[:3])
    except (ValueError, TypeError, OverflowError) as e:
        logging.warning(f"Could not parse colour {value!r} ({e}). Falling back to {FALLBACK_COLOR}.")
        return pygame.Color(*FALLBACK_COLOR)
    color.a = 255
    return color
