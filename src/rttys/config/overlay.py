"""Typed option overlay shared by the file and flag layers.

A layer only overwrites a field when its source affirmatively provides a
value for the option key. Values that cannot be coerced to the field's kind
are skipped, leaving whatever an earlier layer (or the default) put there.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def coerce_string(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    return None


def coerce_integer(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return None
    return None


def coerce_boolean(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in _TRUE_STRINGS:
            return True
        if value in _FALSE_STRINGS:
            return False
    return None


class OptionKind(Enum):
    """Value kinds an option can carry."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    def coerce(self, value: Any) -> Any:
        """Return the value typed for this kind, or None on mismatch."""
        return _COERCERS[self](value)


_COERCERS = {
    OptionKind.STRING: coerce_string,
    OptionKind.INTEGER: coerce_integer,
    OptionKind.BOOLEAN: coerce_boolean,
}


class OptionSource(Protocol):
    """Anything that can answer whether it holds a value for a key."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Any: ...


@dataclass(frozen=True)
class Option:
    """Maps an external option key onto a ServerConfig field."""

    key: str
    field: str
    kind: OptionKind


def overlay_option(
    values: dict[str, Any],
    field: str,
    source: OptionSource,
    key: str,
    kind: OptionKind,
) -> bool:
    """Overwrite ``values[field]`` from ``source`` if it has ``key``.

    Returns:
        True if the field was written, False if the source lacked the key
        or its value did not match ``kind``.
    """
    if not source.has(key):
        return False

    raw = source.get(key)
    coerced = kind.coerce(raw)
    if coerced is None:
        logger.debug("Ignoring %s=%r: not a %s", key, raw, kind.value)
        return False

    values[field] = coerced
    logger.debug("Set %s from %s", field, key)
    return True


def overlay(values: dict[str, Any], source: OptionSource, option: Option) -> bool:
    """Apply a single table-driven option."""
    return overlay_option(values, option.field, source, option.key, option.kind)


def parse_whitelist(raw: str) -> frozenset[str] | None:
    """Split a whitespace separated list of client ids.

    Returns None (allow all) when no ids are present.
    """
    ids = frozenset(raw.split())
    return ids or None


ADDR_DEV = Option("addr-dev", "device_listen_address", OptionKind.STRING)
ADDR_USER = Option("addr-user", "user_listen_address", OptionKind.STRING)
ADDR_HTTP_PROXY = Option("addr-http-proxy", "http_proxy_listen_address", OptionKind.STRING)
DISABLE_SIGN_UP = Option("disable-sign-up", "sign_up_disabled", OptionKind.BOOLEAN)
HTTP_PROXY_REDIR_URL = Option("http-proxy-redir-url", "http_proxy_redirect_url", OptionKind.STRING)
HTTP_PROXY_REDIR_DOMAIN = Option(
    "http-proxy-redir-domain", "http_proxy_redirect_domain", OptionKind.STRING
)
SSL_CERT = Option("ssl-cert", "tls_cert_path", OptionKind.STRING)
SSL_KEY = Option("ssl-key", "tls_key_path", OptionKind.STRING)
SSL_CACERT = Option("ssl-cacert", "tls_ca_cert_path", OptionKind.STRING)
SEPARATE_SSL_CONFIG = Option("separate-ssl-config", "separate_tls_config", OptionKind.BOOLEAN)
WEBUI_SSL_CERT = Option("webui-ssl-cert", "webui_tls_cert_path", OptionKind.STRING)
WEBUI_SSL_KEY = Option("webui-ssl-key", "webui_tls_key_path", OptionKind.STRING)
TOKEN = Option("token", "auth_token", OptionKind.STRING)
DEV_AUTH_URL = Option("dev-auth-url", "dev_auth_url", OptionKind.STRING)
DB = Option("db", "database_connection_string", OptionKind.STRING)
LOCAL_AUTH = Option("local-auth", "local_auth_enabled", OptionKind.BOOLEAN)

WHITE_LIST_KEY = "white-list"

ALL_OPTIONS = (
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
    WEBUI_SSL_CERT,
    WEBUI_SSL_KEY,
    TOKEN,
    DEV_AUTH_URL,
    DB,
    LOCAL_AUTH,
)
