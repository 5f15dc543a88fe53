"""Post-merge checks on the resolved configuration."""

import os

from .errors import MissingFileError
from .models import ServerConfig

# Checked in this order; the first missing path aborts.
TLS_PATH_FIELDS = (
    "tls_ca_cert_path",
    "tls_cert_path",
    "tls_key_path",
    "webui_tls_cert_path",
    "webui_tls_key_path",
)


def validate_tls_paths(config: ServerConfig) -> ServerConfig:
    """Check that every configured TLS path exists.

    Only presence is checked (lstat semantics), not content or permissions.

    Raises:
        MissingFileError: For the first configured path that does not exist.
    """
    for field in TLS_PATH_FIELDS:
        path = getattr(config, field)
        if path and not os.path.lexists(path):
            raise MissingFileError(field, path)
    return config
