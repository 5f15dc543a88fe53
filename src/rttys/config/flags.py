"""Command-line flag layer."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import click
from click.core import ParameterSource

from .overlay import (
    ADDR_DEV,
    ADDR_HTTP_PROXY,
    ADDR_USER,
    ALL_OPTIONS,
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

# Sources that count as the caller explicitly setting a flag.
_EXPLICIT_SOURCES = (
    ParameterSource.COMMANDLINE,
    ParameterSource.ENVIRONMENT,
    ParameterSource.PROMPT,
)

SERVER_FLAGS = frozenset(option.key for option in ALL_OPTIONS) | {WHITE_LIST_KEY}


class FlagSource:
    """Option source backed by parsed CLI flags.

    A flag only counts as present when the caller explicitly supplied it,
    regardless of its value.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, explicit: Iterable[str] = ()):
        self._values = dict(values or {})
        self._explicit = frozenset(explicit)

    @classmethod
    def from_click_context(cls, ctx: click.Context) -> "FlagSource":
        values = {}
        explicit = []
        for name, value in ctx.params.items():
            flag = name.replace("_", "-")
            if flag not in SERVER_FLAGS:
                continue
            values[flag] = value
            if ctx.get_parameter_source(name) in _EXPLICIT_SOURCES:
                explicit.append(flag)
        return cls(values, explicit)

    def has(self, key: str) -> bool:
        return key in self._explicit

    def get(self, key: str) -> Any:
        return self._values.get(key)


def apply_flag_layer(values: dict[str, Any], flags: FlagSource) -> None:
    """Overlay explicitly set flags onto ``values``."""
    for option in (
        ADDR_DEV,
        ADDR_USER,
        ADDR_HTTP_PROXY,
        HTTP_PROXY_REDIR_URL,
        HTTP_PROXY_REDIR_DOMAIN,
        DISABLE_SIGN_UP,
        DEV_AUTH_URL,
        LOCAL_AUTH,
        TOKEN,
        DB,
        SSL_CACERT,
        SSL_CERT,
        SSL_KEY,
        SEPARATE_SSL_CONFIG,
    ):
        overlay(values, flags, option)

    if values["separate_tls_config"]:
        overlay(values, flags, WEBUI_SSL_CERT)
        overlay(values, flags, WEBUI_SSL_KEY)
    else:
        values["webui_tls_cert_path"] = values["tls_cert_path"]
        values["webui_tls_key_path"] = values["tls_key_path"]

    if flags.has(WHITE_LIST_KEY):
        raw = str(flags.get(WHITE_LIST_KEY) or "")
        if raw == "*":
            values["whitelist"] = None
        else:
            values["whitelist"] = parse_whitelist(raw)
        logger.debug("Whitelist set from flags")
