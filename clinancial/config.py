"""
Configuration module for clinancial.

Contains constants, settings, and configuration values used throughout the application.
"""

import os
from pathlib import Path
from typing import Optional

# Version
VERSION = "0.1.0"

# Application paths
CONFIG_DIR = Path.home() / ".config" / "clinancial"
LOG_DIR = CONFIG_DIR

# Database configuration
DEFAULT_DB_PATH = CONFIG_DIR / "clinancial.db"
DB_PATH_ENV = "CLINANCIAL_DB"
DB_TIMEOUT = 10.0  # seconds

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "clinancial.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

# Validation constraints
MAX_ACCOUNT_NAME_LENGTH = 100
MAX_REGISTER_NAME_LENGTH = 200
MIN_VALUE = 0.01
MAX_VALUE = 999_999_999_999.99

# Export configuration
MAX_EXPORT_ENTRIES = 10000
EXPORT_FORMATS = ["csv", "xlsx"]

# Date input format accepted by the command line
DATE_FORMAT = "%Y-%m-%d"

# Error messages
ERROR_MESSAGES = {
    "not_found": "The requested {what} was not found.",
    "storage_error": "Database error: {error}",
    "validation_error": "Invalid input: {error}",
    "cancelled": "Cancelled, nothing was stored.",
}


def get_db_path(override: Optional[str] = None) -> Path:
    """
    Resolve the database path.

    An explicit override wins, then the CLINANCIAL_DB environment variable,
    then the default location in the user's config directory. The environment
    is read on every call so the path may change between operations.
    """
    if override:
        return Path(override).expanduser()

    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()

    return DEFAULT_DB_PATH


def ensure_directories():
    """Ensure required directories exist."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def get_log_level():
    """Get the configured log level."""
    import logging

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(os.getenv("LOG_LEVEL", LOG_LEVEL).upper(), logging.WARNING)
