"""
XenMobile Backup CLI entrypoint.

Usage:
    xenmobile-backup [OPTIONS]
    python -m xenmobile_backup.cli [OPTIONS]
"""

from __future__ import annotations

import ipaddress
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .auth import DEFAULT_PORT, DEFAULT_TIMEOUT, authenticate, load_config
from .client import XenMobileClient
from .collector import collect
from .errors import AuthenticationError, FetchError
from .reporter import generate_all

console = Console()


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


@click.command()
@click.option("--host", "-H", default=None, metavar="HOST", help="XenMobile server FQDN. Must match its TLS certificate.")
@click.option("--port", "-p", default=None, type=click.IntRange(1, 65535), metavar="PORT", help=f"API port. [default: {DEFAULT_PORT}]")
@click.option("--username", "-u", default=None, metavar="USER", help="Administrator login. Prompted for if omitted.")
@click.option(
    "--password",
    default=None,
    envvar="XMS_PASSWORD",
    metavar="PASSWORD",
    help="Administrator password. Read from XMS_PASSWORD or prompted for if omitted.",
)
@click.option(
    "--config",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    metavar="PATH",
    help="Path to xenmobile_backup_config.json (default: ./xenmobile_backup_config.json).",
)
@click.option(
    "--output", "-o",
    default="./output",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    metavar="DIR",
    help="Directory to write the report to.",
)
@click.option(
    "--output-format",
    default="html",
    show_default=True,
    type=click.Choice(["all", "html", "json"], case_sensitive=False),
    help="Report format(s) to generate.",
)
@click.option(
    "--timeout",
    default=None,
    type=click.FloatRange(min=1),
    metavar="SECONDS",
    help=f"Per-request timeout. [default: {DEFAULT_TIMEOUT}]",
)
@click.option("--quiet", is_flag=True, default=False, help="Suppress progress and decorative output.")
@click.version_option(__version__, "--version", "-V")
def main(
    host: str | None,
    port: int | None,
    username: str | None,
    password: str | None,
    config: Path | None,
    output: Path,
    output_format: str,
    timeout: float | None,
    quiet: bool,
) -> None:
    """
    XenMobile Backup: archive server configuration as a static HTML report.

    Logs in to the XenMobile REST API, collects server properties, client
    properties and application containers with their iOS/Android policies,
    and writes a self-contained report.

    Exit codes:
      0  Backup complete
      1  Login or a required fetch failed; no report written
      2  Backup complete, but some application details were skipped
    """
    _start = time.monotonic()
    settings = load_config(config)

    host = host or settings.get("host")
    if not host:
        host = click.prompt("XenMobile server host")
    port = port or int(settings.get("port", DEFAULT_PORT))
    timeout = timeout or float(settings.get("timeout", DEFAULT_TIMEOUT))
    username = username or settings.get("username") or click.prompt("Username")
    if password is None:
        password = click.prompt("Password", hide_input=True)

    if _is_ip_address(host):
        console.print(
            f"[yellow]Warning: '{host}' is an IP address. The server certificate check will "
            "reject it; use the host name on the certificate.[/yellow]"
        )

    # ── Authenticate ────────────────────────────────────────────────────────
    try:
        with console.status(f"[cyan]Logging in to {host}:{port}..."):
            session = authenticate(host, port, username, password, timeout=timeout)
    except AuthenticationError as exc:
        console.print(f"[red]Authentication failed: {exc}[/red]")
        sys.exit(1)
    console.print(f"[green]Connected to:[/green] {host}:{port}")

    # ── Collect data ────────────────────────────────────────────────────────
    client = XenMobileClient(session, timeout=timeout)
    try:
        document = collect(client, quiet=quiet)
    except FetchError as exc:
        console.print(f"[red]Backup aborted: could not fetch {exc.resource}. {exc.message}[/red]")
        sys.exit(1)

    # ── Generate reports ────────────────────────────────────────────────────
    outputs = generate_all(
        document,
        output,
        skip_html=(output_format not in ("all", "html")),
        skip_json=(output_format not in ("all", "json")),
    )

    elapsed = time.monotonic() - _start
    elapsed_str = f"{int(elapsed // 60)}m {int(elapsed % 60)}s" if elapsed >= 60 else f"{elapsed:.1f}s"

    if not quiet:
        console.print(
            Panel(
                "\n".join(
                    [
                        "[bold green]Backup complete![/bold green]",
                        "",
                        f"[bold]HTML:[/bold] {outputs.get('html') or '—'}",
                        f"[bold]JSON:[/bold] {outputs.get('json') or '—'}",
                        "",
                        f"[dim]Server properties: {len(document.server_properties)} · "
                        f"Client properties: {len(document.client_properties)} · "
                        f"Applications: {len(document.applications)} · "
                        f"Skipped details: {len(document.failures)}[/dim]",
                        f"[dim]Completed in {elapsed_str}[/dim]",
                    ]
                ),
                title="[bold cyan]XenMobile Backup[/bold cyan]",
                border_style="cyan",
            )
        )

    if document.failures:
        sys.exit(2)


if __name__ == "__main__":
    main()
