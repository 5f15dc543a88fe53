"""Pydantic model for the resolved rttys server configuration."""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ServerConfig(BaseModel):
    """Fully resolved server configuration.

    Built once at startup and read-only afterwards.
    """

    model_config = ConfigDict(frozen=True)

    device_listen_address: str = ":5912"
    user_listen_address: str = ":5913"
    http_proxy_listen_address: str = ""
    sign_up_disabled: bool = False
    http_proxy_redirect_url: str = ""
    http_proxy_redirect_domain: str = ""
    http_proxy_port: int = 0  # not wired to any source
    tls_cert_path: str = ""  # device-facing
    tls_key_path: str = ""
    tls_ca_cert_path: str = ""  # mTLS for devices
    webui_tls_cert_path: str = ""
    webui_tls_key_path: str = ""
    auth_token: str = ""
    dev_auth_url: str = ""
    whitelist: frozenset[str] | None = None  # None = allow all
    database_connection_string: str = "sqlite://rttys.db"
    local_auth_enabled: bool = True
    separate_tls_config: bool = False

    @field_validator("whitelist")
    @classmethod
    def empty_whitelist_is_unset(cls, v: frozenset[str] | None) -> frozenset[str] | None:
        if v is not None and not v:
            return None
        return v

    @model_validator(mode="after")
    def webui_mirrors_device_tls(self) -> "ServerConfig":
        if not self.separate_tls_config and (
            self.webui_tls_cert_path != self.tls_cert_path
            or self.webui_tls_key_path != self.tls_key_path
        ):
            raise ValueError(
                "webui TLS cert/key must match device TLS cert/key "
                "unless separate_tls_config is enabled"
            )
        return self

    def allows(self, client_id: str) -> bool:
        """Check whether a client identifier passes the whitelist."""
        if self.whitelist is None:
            return True
        return client_id in self.whitelist
