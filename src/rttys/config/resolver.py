"""Resolve the server configuration from defaults, file and flags."""

import logging
from pathlib import Path

from .flags import FlagSource, apply_flag_layer
from .loader import apply_file_layer
from .models import ServerConfig
from .validation import validate_tls_paths

logger = logging.getLogger(__name__)


def resolve_config(
    conf_path: str | Path | None = None, flags: FlagSource | None = None
) -> ServerConfig:
    """Build the runtime configuration.

    Precedence per field: explicitly set flags, then the config file, then
    built-in defaults.

    Args:
        conf_path: Optional YAML configuration file.
        flags: Parsed CLI flags. None behaves as if no flag was set.

    Returns:
        Validated, immutable ServerConfig.

    Raises:
        ConfigFileError: If the config file cannot be read or parsed.
        MissingFileError: If a configured TLS path does not exist.
    """
    values = ServerConfig().model_dump()

    if conf_path:
        apply_file_layer(values, Path(conf_path))
    else:
        logger.debug("No configuration file given, using defaults")

    apply_flag_layer(values, flags if flags is not None else FlagSource())

    config = ServerConfig(**values)
    return validate_tls_paths(config)
