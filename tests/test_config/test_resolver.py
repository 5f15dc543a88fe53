"""End-to-end tests for layered configuration resolution."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rttys.config import (
    ConfigFileError,
    FlagSource,
    MissingFileError,
    ServerConfig,
    resolve_config,
)


def flags(**values):
    named = {k.replace("_", "-"): v for k, v in values.items()}
    return FlagSource(named, named.keys())


@pytest.fixture
def conf(tmp_path):
    def _create(content: str) -> Path:
        path = tmp_path / "rttys.conf"
        path.write_text(content)
        return path

    return _create


class TestResolveConfig:
    def test_defaults_only(self):
        assert resolve_config() == ServerConfig()

    def test_precedence_is_per_field(self, conf):
        path = conf("addr-dev: ':7000'\naddr-user: ':7001'\ntoken: file\n")
        config = resolve_config(path, flags(addr_user=":8001"))
        assert config.device_listen_address == ":7000"
        assert config.user_listen_address == ":8001"
        assert config.auth_token == "file"
        assert config.database_connection_string == "sqlite://rttys.db"

    def test_accepts_string_path(self, conf):
        path = conf("db: sqlite://other.db\n")
        config = resolve_config(str(path))
        assert config.database_connection_string == "sqlite://other.db"

    def test_result_is_immutable(self):
        config = resolve_config()
        with pytest.raises(ValidationError):
            config.device_listen_address = ":1"

    def test_http_proxy_port_stays_zero(self, conf):
        config = resolve_config(conf("http-proxy-port: 9000\n"))
        assert config.http_proxy_port == 0


class TestWhitelistResolution:
    def test_file_ids(self, conf):
        config = resolve_config(conf('white-list: "alice bob"\n'))
        assert config.whitelist == frozenset({"alice", "bob"})

    def test_flag_wildcard_clears_file_ids(self, conf):
        config = resolve_config(conf('white-list: "alice bob"\n'), flags(white_list="*"))
        assert config.whitelist is None
        assert config.allows("mallory")

    def test_file_wildcard(self, conf):
        config = resolve_config(conf('white-list: "*"\n'))
        assert config.whitelist is None

    def test_file_bare_wildcard(self, conf):
        config = resolve_config(conf("white-list: *\n"))
        assert config.whitelist is None
        assert config.allows("anyone")

    def test_flag_ids_replace_file_bare_wildcard(self, conf):
        config = resolve_config(conf("white-list: *\n"), flags(white_list="alice"))
        assert config.whitelist == frozenset({"alice"})

    def test_blank_whitelist_allows_all(self):
        config = resolve_config(flags=flags(white_list="  "))
        assert config.whitelist is None


class TestTLSResolution:
    def test_shared_identity_overrides_file_webui(self, conf, tmp_path):
        cert = tmp_path / "cert.pem"
        key = tmp_path / "key.pem"
        cert.write_text("c")
        key.write_text("k")
        path = conf(
            f"ssl-cert: {cert}\n"
            f"ssl-key: {key}\n"
            "webui-ssl-cert: /missing/webui.pem\n"
            "webui-ssl-key: /missing/webui-key.pem\n"
        )
        config = resolve_config(path)
        assert config.webui_tls_cert_path == str(cert)
        assert config.webui_tls_key_path == str(key)

    def test_separate_identity_from_flags(self, tmp_path):
        for name in ("cert.pem", "key.pem", "webui.pem", "webui-key.pem"):
            (tmp_path / name).write_text("x")
        config = resolve_config(
            flags=flags(
                ssl_cert=str(tmp_path / "cert.pem"),
                ssl_key=str(tmp_path / "key.pem"),
                separate_ssl_config=True,
                webui_ssl_cert=str(tmp_path / "webui.pem"),
                webui_ssl_key=str(tmp_path / "webui-key.pem"),
            )
        )
        assert config.separate_tls_config is True
        assert config.webui_tls_cert_path == str(tmp_path / "webui.pem")
        assert config.webui_tls_key_path == str(tmp_path / "webui-key.pem")


class TestResolutionErrors:
    def test_missing_conf_file(self, tmp_path):
        with pytest.raises(ConfigFileError):
            resolve_config(tmp_path / "absent.conf", flags(addr_dev=":1"))

    def test_malformed_conf_stops_before_flags(self, conf, monkeypatch):
        called = []
        monkeypatch.setattr(
            "rttys.config.resolver.apply_flag_layer",
            lambda values, source: called.append(True),
        )
        with pytest.raises(ConfigFileError):
            resolve_config(conf("invalid: [yaml: {broken"), flags(addr_dev=":1"))
        assert called == []

    def test_missing_tls_file(self, tmp_path):
        with pytest.raises(MissingFileError) as exc:
            resolve_config(flags=flags(ssl_key=str(tmp_path / "nope.key")))
        assert exc.value.field == "tls_key_path"

    def test_missing_webui_file_with_separate(self, conf, tmp_path):
        path = conf(
            "separate-ssl-config: true\n"
            f"webui-ssl-cert: {tmp_path / 'nope.pem'}\n"
        )
        with pytest.raises(MissingFileError) as exc:
            resolve_config(path)
        assert exc.value.field == "webui_tls_cert_path"
