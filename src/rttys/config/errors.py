"""Exceptions raised while resolving the server configuration."""


class ConfigError(Exception):
    """Raised when configuration resolution fails."""


class ConfigFileError(ConfigError):
    """Raised when the configuration file cannot be read or parsed."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(message)


class MissingFileError(ConfigError):
    """Raised when a configured TLS file does not exist."""

    def __init__(self, field: str, path: str):
        self.field = field
        self.path = path
        super().__init__(f'{field} "{path}" does not exist')
