"""
Report generation for XenMobile Backup.

Produces:
  - Self-contained HTML report (inline CSS, icons as data URIs, works offline)
  - JSON export of the same document
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from rich.console import Console

from . import __version__
from .models import PLATFORMS, ReportDocument

console = Console()

TEMPLATES_DIR = Path(__file__).parent / "templates"


# ── Jinja2 filters ─────────────────────────────────────────────────────────────


def _format_value(value: Any) -> str:
    if value is None:
        return "—"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else "—"
    return str(value)


def _icon_uri(icon_data: str | None) -> str | None:
    """Turn base64 icon data into a data: URI; pass through values that already are one."""
    if not icon_data:
        return None
    if icon_data.startswith("data:"):
        return icon_data
    return f"data:image/png;base64,{icon_data}"


def _host_slug(host: str) -> str:
    """Sanitize a server host name for use in file paths."""
    return re.sub(r"[^\w\-]", "_", host).lower()


def _build_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        # Include "html.j2" and "j2" so templates named *.html.j2 are also escaped
        autoescape=select_autoescape(["html", "html.j2", "j2"]),
    )
    env.filters["format_value"] = _format_value
    env.filters["icon_uri"] = _icon_uri
    return env


# ── HTML report ────────────────────────────────────────────────────────────────


def generate_html(document: ReportDocument, output_path: Path) -> Path:
    """Render the HTML report and write to output_path."""
    env = _build_jinja_env()
    try:
        template = env.get_template("report.html.j2")
    except Exception as exc:
        console.print(f"[red]Error loading report template: {exc}[/red]")
        raise

    # Local time so the report reflects when the backup ran locally
    generated_at = document.generated_at.astimezone().strftime("%Y-%m-%d %H:%M %Z")

    html_content = template.render(
        server_host=document.server_host,
        generated_at=generated_at,
        version=__version__,
        server_properties=document.server_properties,
        client_properties=document.client_properties,
        applications=document.applications,
        detailed_count=sum(1 for a in document.applications if a.is_detailed),
        failures=document.failures,
        platforms=PLATFORMS,
    )

    output_path.write_text(html_content, encoding="utf-8")
    return output_path


# ── JSON export ────────────────────────────────────────────────────────────────


def generate_json(document: ReportDocument, output_path: Path) -> Path:
    """Write the document as indented JSON."""
    output_path.write_text(json.dumps(document.to_dict(), indent=2, default=str), encoding="utf-8")
    return output_path


# ── Orchestrator ───────────────────────────────────────────────────────────────


def generate_all(
    document: ReportDocument,
    output_dir: Path,
    skip_html: bool = False,
    skip_json: bool = False,
) -> dict[str, Path | None]:
    """Generate HTML and JSON reports. Returns dict of format → output path."""
    output_dir.mkdir(parents=True, exist_ok=True)

    date_slug = datetime.now().strftime("%Y-%m-%d")  # local date for filename
    base = output_dir / f"xenmobile_backup_{_host_slug(document.server_host)}_{date_slug}"

    html_path = Path(str(base) + ".html")
    json_path = Path(str(base) + ".json")

    if skip_html:
        html_out = None
    else:
        console.print("[cyan]Generating HTML report...[/cyan]")
        html_out = generate_html(document, html_path)
        console.print(f"[green]HTML:[/green] {html_out}")

    if skip_json:
        json_out = None
    else:
        console.print("[cyan]Generating JSON export...[/cyan]")
        json_out = generate_json(document, json_path)
        console.print(f"[green]JSON:[/green] {json_out}")

    return {"html": html_out, "json": json_out}
