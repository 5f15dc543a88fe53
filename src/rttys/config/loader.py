"""YAML configuration file layer."""

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigFileError
from .overlay import (
    ADDR_DEV,
    ADDR_HTTP_PROXY,
    ADDR_USER,
    DB,
    DEV_AUTH_URL,
    DISABLE_SIGN_UP,
    HTTP_PROXY_REDIR_DOMAIN,
    HTTP_PROXY_REDIR_URL,
    LOCAL_AUTH,
    SEPARATE_SSL_CONFIG,
    SSL_CACERT,
    SSL_CERT,
    SSL_KEY,
    TOKEN,
    WEBUI_SSL_CERT,
    WEBUI_SSL_KEY,
    WHITE_LIST_KEY,
    overlay,
    parse_whitelist,
)

logger = logging.getLogger(__name__)

# Some YAML readers keep the quotes around a quoted wildcard.
_WILDCARDS = ("*", '"*"')

_BLANK_OR_END = "\0 \t\r\n\x85\u2028\u2029"


class RawLoader(yaml.BaseLoader):
    """Loader that keeps every scalar as its raw string.

    A lone ``*`` (as in ``white-list: *``) is read as a plain scalar
    instead of an alias.
    """

    def fetch_alias(self):
        if self.peek(1) in _BLANK_OR_END:
            return self.fetch_plain()
        return super().fetch_alias()


def load_yaml(path: Path) -> dict:
    """Load a YAML file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents.

    Raises:
        ConfigFileError: If the file cannot be read or parsed.
    """
    try:
        with open(path) as f:
            data = yaml.load(f, Loader=RawLoader)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(path, f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFileError(path, f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            path, f"Invalid YAML in {path}: top level must be a mapping"
        )
    return data


class YamlSource:
    """Option source backed by a parsed YAML mapping."""

    def __init__(self, document: dict):
        self._document = document

    def has(self, key: str) -> bool:
        return self._document.get(key) is not None

    def get(self, key: str) -> Any:
        return self._document.get(key)


def _file_whitelist(raw: Any) -> frozenset[str] | None:
    if isinstance(raw, list):
        ids = [str(item) for item in raw if item is not None]
        if ids == ["*"]:
            return None
        return frozenset(ids) or None

    raw = str(raw)
    if raw in _WILDCARDS:
        return None
    return parse_whitelist(raw)


def apply_file_layer(values: dict[str, Any], path: Path) -> None:
    """Overlay the known keys of a YAML config file onto ``values``.

    Raises:
        ConfigFileError: If the file cannot be read or parsed.
    """
    source = YamlSource(load_yaml(path))
    logger.info("Loaded configuration file %s", path)

    for option in (
        ADDR_DEV,
        ADDR_USER,
        ADDR_HTTP_PROXY,
        DISABLE_SIGN_UP,
        HTTP_PROXY_REDIR_URL,
        HTTP_PROXY_REDIR_DOMAIN,
        SSL_CERT,
        SSL_KEY,
        SSL_CACERT,
        SEPARATE_SSL_CONFIG,
    ):
        overlay(values, source, option)

    # webui keys are only honoured once separate-ssl-config is on
    if values["separate_tls_config"]:
        overlay(values, source, WEBUI_SSL_CERT)
        overlay(values, source, WEBUI_SSL_KEY)

    for option in (TOKEN, DEV_AUTH_URL, DB, LOCAL_AUTH):
        overlay(values, source, option)

    if source.has(WHITE_LIST_KEY):
        values["whitelist"] = _file_whitelist(source.get(WHITE_LIST_KEY))
