"""
Login and configuration for XenMobile Backup.

Reads host, port and username from xenmobile_backup_config.json when present.
The auth token is held only in memory and never written to disk; passwords
are never read from the config file.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import requests
from rich.console import Console

from .errors import AuthenticationError
from .models import API_PATH, Session

console = Console()

DEFAULT_CONFIG_FILE = Path("xenmobile_backup_config.json")
DEFAULT_PORT = 4443
DEFAULT_TIMEOUT = 30  # seconds

CONFIG_KEYS = ("host", "port", "username", "timeout")


def load_config(config_path: Path | None = None) -> dict:
    """
    Load connection settings from a JSON config file.

    A missing default file is not an error: every value can also be passed on
    the command line. Unknown keys and a stray ``password`` key are dropped.
    """
    path = config_path or DEFAULT_CONFIG_FILE
    if not path.exists():
        if config_path is not None:
            console.print(f"[red]Config file not found: {path}[/red]")
            sys.exit(1)
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Error reading config file {path}: {exc}[/red]")
        sys.exit(1)
    if not isinstance(raw, dict):
        console.print(f"[red]Config file {path} must contain a JSON object.[/red]")
        sys.exit(1)
    if "password" in raw:
        console.print("[yellow]Ignoring 'password' in config file; pass it with --password or the prompt.[/yellow]")
    settings = {k: v for k, v in raw.items() if k in CONFIG_KEYS}

    for key in ("host", "username"):
        if key in settings and not isinstance(settings[key], str):
            console.print(f"[red]Config file {path}: '{key}' must be a string.[/red]")
            sys.exit(1)
    if "port" in settings:
        port = settings["port"]
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            console.print(f"[red]Config file {path}: 'port' must be an integer between 1 and 65535.[/red]")
            sys.exit(1)
    if "timeout" in settings:
        timeout = settings["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 1:
            console.print(f"[red]Config file {path}: 'timeout' must be a number of seconds (at least 1).[/red]")
            sys.exit(1)
    return settings


def authenticate(
    host: str,
    port: int,
    username: str,
    password: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    http: requests.Session | None = None,
) -> Session:
    """
    Exchange credentials for an auth token and return the run's Session.

    TLS verification stays on, so the host must match a trusted certificate
    (plain IP addresses fail here). Raises AuthenticationError on any
    transport error, non-2xx status or a body without ``auth_token``.
    """
    http = http or requests.Session()
    url = f"https://{host}:{port}{API_PATH}/authentication/login"

    try:
        resp = http.post(url, json={"login": username, "password": password}, timeout=timeout)
    except requests.RequestException as exc:
        raise AuthenticationError(f"Could not reach {host}:{port} ({exc})") from exc

    if resp.status_code in (401, 403):
        raise AuthenticationError(f"Login rejected for user '{username}' ({resp.status_code})")
    if not 200 <= resp.status_code < 300:
        raise AuthenticationError(f"Login failed with HTTP {resp.status_code}: {resp.text[:200]}")

    try:
        body = resp.json()
    except ValueError as exc:
        raise AuthenticationError("Login response is not valid JSON") from exc

    token = body.get("auth_token") if isinstance(body, dict) else None
    if not token:
        raise AuthenticationError("Login response did not contain an auth_token")

    return Session(server_host=host, port=port, auth_token=token)
