# utils.py
"""
Utility functions for the simulation framework.

This module provides the logging setup and configuration loading used by
the entry point. Neither belongs to the physics or the rendering.
"""
import json
import logging
import logging.handlers
import os
from typing import Any, Dict, List

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary whose "logging" section may hold "level",
#       "format", "log_file", "max_bytes" and "backup_count". A null
#       "log_file" keeps output on the console only.
#   - Side Effects: Replaces every handler on the root logger. Creates the
#     log directory when needed.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: the parsed config with every known section present.
#   - Raises: FileNotFoundError, json.JSONDecodeError, ValueError (top
#     level is not an object).

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/simulation.log'
CONFIG_SECTIONS = ('simulation_parameters', 'run_control', 'visualization', 'logging')


def _build_handlers(log_config: Dict[str, Any]) -> List[logging.Handler]:
    """Console handler always, rotating file handler when a path is set."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    if not log_file_path:
        return handlers

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    # 1MB per file and 5 backups unless configured otherwise.
    handlers.append(logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=log_config.get('max_bytes', 1024 * 1024),
        backupCount=log_config.get('backup_count', 5),
    ))
    return handlers


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes the root logger to the console and a rotating log file.
    """
    log_config = config.get('logging') or {}
    log_level = str(log_config.get('level', 'INFO')).upper()
    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    # A second call must not stack handlers on top of the first.
    root.handlers.clear()
    for handler in _build_handlers(log_config):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info("Logging system initialized.")
    logging.debug(
        f"Level {log_level}, log file: {log_config.get('log_file', DEFAULT_LOG_FILE) or 'disabled'}"
    )


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file, filling in any missing sections."""
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

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    for section in CONFIG_SECTIONS:
        if config.get(section) is None:
            config[section] = {}
    logging.info("Configuration loaded successfully.")
    return config
