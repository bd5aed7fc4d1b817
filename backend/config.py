"""
Application configuration management.

Stores settings like server port in a simple JSON config file, and sets up logging
into the same data directory.
"""

import json
import logging
import os
import sys
from pathlib import Path


APP_NAME = "Marginalia"
CONFIG_FILE = "marginalia_config.json"
LOG_FILE = "marginalia.log"
DEFAULT_PORT = 8741
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_data_dir() -> Path:
    """Get the per-user data directory, creating it if needed."""
    override = os.getenv("MARGINALIA_DATA_DIR")
    if override:
        data_dir = Path(override).expanduser()
    elif os.name == 'nt':  # Windows
        data_dir = Path(os.getenv('APPDATA', Path.home())) / APP_NAME
    else:
        data_dir = Path.home() / '.local' / 'share' / APP_NAME

    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_config_path() -> Path:
    """Get path to config file in data directory."""
    return get_data_dir() / CONFIG_FILE


def load_config() -> dict:
    """Load configuration from file, or return defaults."""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            if isinstance(config, dict):
                return config
        except (OSError, ValueError):
            # If config file is corrupted, return defaults
            pass
    return {}


def save_config(config: dict) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def get_port() -> int:
    """Get configured server port, or default."""
    config = load_config()
    try:
        return int(config.get('server_port', DEFAULT_PORT))
    except (TypeError, ValueError):
        # Hand-edited value that isn't a number
        return DEFAULT_PORT


def set_port(port: int) -> None:
    """Set server port in config."""
    config = load_config()
    config['server_port'] = port
    save_config(config)


def configure_logging(level: int = logging.INFO) -> Path:
    """Log to stderr and to marginalia.log in the data directory. Returns the log path."""
    log_path = get_data_dir() / LOG_FILE
    handlers = [logging.StreamHandler(sys.stderr)]
    try:
        handlers.append(logging.FileHandler(log_path, encoding='utf-8'))
    except OSError as e:
        print(f"Could not open log file {log_path}: {e}")
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
    return log_path
