"""
Configuration module for sqlcmapper.

Provides centralized configuration management with support for:
- Environment variables
- A .env file at the project root
- Default values
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file at project root
# config.py is in sqlcmapper/, so .env is in parent directory
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


def _parse_bool(env_var: str, default: bool) -> bool:
    """Parse a boolean value from an environment variable."""
    value = os.getenv(env_var)
    if value is None:
        return default
    return value.lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Configuration class for mapper settings.

    Supports configuration via environment variables (and .env file) with sensible defaults.
    Logging output is left to the application: the package only emits records
    through ``logging.getLogger(__name__)`` loggers.
    """

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        # Mapping behaviour: raise on shape mismatches instead of skipping the field
        self.strict = _parse_bool("SQLCMAPPER_STRICT", False)


# Global configuration instance
config = Config()


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Global Config instance
    """
    return config
