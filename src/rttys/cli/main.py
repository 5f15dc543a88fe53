"""rttys CLI - Main entry point."""

import json
import logging

import click
from rich.console import Console
from rich.table import Table

from rttys.config import ConfigError, FlagSource, ServerConfig, resolve_config

console = Console()

_LOG_LEVELS = ("debug", "info", "warning", "error")

_console_handler: logging.Handler | None = None


def _setup_logging(level: str) -> None:
    """Configure console logging on the root logger."""
    global _console_handler
    log_format = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(_console_handler)


def _envvar(flag: str) -> str:
    return "RTTYS_" + flag.upper().replace("-", "_")


_SERVER_OPTIONS = [
    click.option("--conf", "-c", default="", help="Config file to load"),
    click.option("--addr-dev", default=":5912", envvar=_envvar("addr-dev"),
                 help="Address to listen for devices"),
    click.option("--addr-user", default=":5913", envvar=_envvar("addr-user"),
                 help="Address to listen for users"),
    click.option("--addr-http-proxy", default="", envvar=_envvar("addr-http-proxy"),
                 help="Address to listen for HTTP proxy (default auto)"),
    click.option("--http-proxy-redir-url", default="", envvar=_envvar("http-proxy-redir-url"),
                 help="URL to redirect for HTTP proxy"),
    click.option("--http-proxy-redir-domain", default="",
                 envvar=_envvar("http-proxy-redir-domain"),
                 help="Domain for HTTP proxy set cookie"),
    click.option("--disable-sign-up", is_flag=True, envvar=_envvar("disable-sign-up"),
                 help="Disable user sign up"),
    click.option("--ssl-cert", default="", envvar=_envvar("ssl-cert"),
                 help="Certificate file path"),
    click.option("--ssl-key", default="", envvar=_envvar("ssl-key"),
                 help="Key file path"),
    click.option("--ssl-cacert", default="", envvar=_envvar("ssl-cacert"),
                 help="CA certificate to verify peer against"),
    click.option("--separate-ssl-config", is_flag=True, envvar=_envvar("separate-ssl-config"),
                 help="Use a separate TLS certificate for the web UI"),
    click.option("--webui-ssl-cert", default="", envvar=_envvar("webui-ssl-cert"),
                 help="Web UI certificate file path"),
    click.option("--webui-ssl-key", default="", envvar=_envvar("webui-ssl-key"),
                 help="Web UI key file path"),
    click.option("--token", "-t", default="", envvar=_envvar("token"),
                 help="Token to access the server"),
    click.option("--dev-auth-url", default="", envvar=_envvar("dev-auth-url"),
                 help="URL for device authentication"),
    click.option("--white-list", default="", envvar=_envvar("white-list"),
                 help="White list (device IDs separated by spaces or *)"),
    click.option("--db", default="sqlite://rttys.db", envvar=_envvar("db"),
                 help="Database source"),
    click.option("--local-auth/--no-local-auth", default=True, envvar=_envvar("local-auth"),
                 help="Need auth for local"),
]


def server_options(f):
    """Attach every server configuration flag to a click command."""
    for option in reversed(_SERVER_OPTIONS):
        f = option(f)
    return f


def _mask(secret: str) -> str:
    if not secret:
        return ""
    return secret[:2] + "*" * max(len(secret) - 2, 4)


def _display_values(config: ServerConfig) -> dict:
    data = config.model_dump()
    data["auth_token"] = _mask(config.auth_token)
    data["whitelist"] = sorted(config.whitelist) if config.whitelist is not None else "*"
    return data


@click.group()
@click.version_option(version="0.1.0", prog_name="rttys")
@click.option("--log-level", type=click.Choice(_LOG_LEVELS), default="info",
              help="Log level")
@click.option("--verbose", "-V", is_flag=True, help="Enable debug logging")
def cli(log_level, verbose):
    """rttys - remote terminal server configuration tools."""
    _setup_logging("debug" if verbose else log_level)


@cli.command()
@server_options
@click.option("--json", "as_json", is_flag=True, help="Print the configuration as JSON")
@click.pass_context
def check(ctx, conf, as_json, **_flags):
    """Resolve and validate the server configuration."""
    try:
        config = resolve_config(conf or None, FlagSource.from_click_context(ctx))
    except ConfigError as e:
        console.print(str(e), style="red", markup=False, highlight=False, soft_wrap=True)
        raise SystemExit(1)

    values = _display_values(config)
    if as_json:
        click.echo(json.dumps(values, indent=2))
        return

    table = Table(title="rttys configuration")
    table.add_column("Option", style="bold")
    table.add_column("Value")
    for name, value in values.items():
        if isinstance(value, list):
            value = " ".join(value)
        table.add_row(name, str(value))
    console.print(table)
    console.print("[green]Configuration OK[/green]")


if __name__ == "__main__":
    cli()
