"""Layered configuration resolution for the rttys server."""

from .errors import ConfigError, ConfigFileError, MissingFileError
from .flags import FlagSource
from .models import ServerConfig
from .resolver import resolve_config

__all__ = [
    "ConfigError",
    "ConfigFileError",
    "FlagSource",
    "MissingFileError",
    "ServerConfig",
    "resolve_config",
]
