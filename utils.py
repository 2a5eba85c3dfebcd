# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup, config
loading and the frame-time clamp, that are used across different parts
of the application but do not belong to a specific domain like physics
or rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

from constants import MAX_FRAME_TIME

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
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: the parsed JSON object with every known section present.
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when
#     the top level or a known section is not a JSON object.
#
# clamp_frame_time(elapsed: float, max_frame_time: float) -> float:
#   - Outputs: elapsed limited to [0, max_frame_time].

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

    # Rotates at 1MB by default, keeping 5 backups.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=log_config.get('max_bytes', 1024*1024),
        backupCount=log_config.get('backup_count', 5)
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

CONFIG_SECTIONS = ('simulation_parameters', 'run_control', 'visualization', 'logging')

def load_config(path: str) -> Dict[str, Any]:
    """
    Reads config.json and checks its top-level shape.

    Every known section must be a JSON object; missing sections come back
    as empty dicts so callers can use .get() on them directly. Unknown
    top-level keys are kept but logged.
    """
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Invalid JSON in {path} (line {e.lineno}, column {e.colno}).")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration error: {path} must hold a JSON object at the top level."
        logging.critical(msg)
        raise ValueError(msg)

    for section in CONFIG_SECTIONS:
        value = config.setdefault(section, {})
        if not isinstance(value, dict):
            msg = f"Configuration error: section '{section}' in {path} must be a JSON object."
            logging.critical(msg)
            raise ValueError(msg)

    unknown = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown:
        logging.warning(f"Ignoring unknown configuration sections: {', '.join(unknown)}")

    logging.info(f"Configuration loaded ({len(config)} sections).")
    return config

def clamp_frame_time(elapsed: float, max_frame_time: float = MAX_FRAME_TIME) -> float:
    """
    Limits the wall-clock time handed to a single simulation step.

    A stalled frame would otherwise be integrated as one oversized step
    and blow the force/friction balance apart.
    """
    return min(max(elapsed, 0.0), max_frame_time)
