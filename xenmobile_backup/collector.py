"""
Data collection orchestration for XenMobile Backup.

Runs the fetches strictly in order: server properties, client properties,
application list, then per-application details. Any FetchError from the
first three propagates and aborts the run before later fetches are made.
"""

from __future__ import annotations

from datetime import datetime, timezone

from rich.console import Console

from .aggregator import aggregate
from .builder import build
from .client import XenMobileClient
from .models import ReportDocument

console = Console()


def collect(client: XenMobileClient, *, quiet: bool = False) -> ReportDocument:
    """Fetch everything the report needs and return the assembled document."""

    # ── Step 1: server properties ──────────────────────────────────────────
    with console.status("[cyan]Fetching server properties..."):
        server_properties = client.get_server_properties()
    console.print(f"[green]Server properties:[/green] {len(server_properties):,}")

    # ── Step 2: client properties ──────────────────────────────────────────
    with console.status("[cyan]Fetching client properties..."):
        client_properties = client.get_client_properties()
    console.print(f"[green]Client properties:[/green] {len(client_properties):,}")

    # ── Step 3: application list ───────────────────────────────────────────
    with console.status("[cyan]Fetching application list..."):
        summaries = client.get_applications()
    console.print(f"[green]Applications found:[/green] {len(summaries):,}")

    # ── Step 4: per-application details ────────────────────────────────────
    aggregated = aggregate(client, summaries, quiet=quiet)
    if aggregated.failures:
        console.print(
            f"[yellow]{len(aggregated.failures)} application(s) are listed without details.[/yellow]"
        )

    return build(
        client.session.server_host,
        server_properties,
        client_properties,
        aggregated.applications,
        generated_at=datetime.now(timezone.utc),
        failures=aggregated.failures,
    )
