"""
Application aggregation for XenMobile Backup.

Classifies each listed application by its appType and, for mobile
(MDX/Enterprise) apps, fetches the detail container and merges the iOS and
Android sections into the record. A failed detail fetch is recorded and the
summary is kept in its place so the output order always matches the list.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .client import XenMobileClient
from .errors import FetchError
from .models import (
    ApplicationDetail,
    ApplicationSummary,
    FetchFailure,
    needs_detail,
)

console = Console()


@dataclass
class AggregationResult:
    applications: list[ApplicationSummary | ApplicationDetail] = field(default_factory=list)
    failures: list[FetchFailure] = field(default_factory=list)


def aggregate(
    client: XenMobileClient,
    summaries: list[ApplicationSummary],
    *,
    quiet: bool = False,
) -> AggregationResult:
    """Return one record per summary, in input order, plus any skipped details."""
    result = AggregationResult()
    detail_count = sum(1 for s in summaries if needs_detail(s.app_type))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=quiet,
    ) as progress:
        task = progress.add_task("Fetching application details...", total=detail_count)

        for summary in summaries:
            if not needs_detail(summary.app_type):
                result.applications.append(summary)
                continue

            try:
                container = client.get_application_detail(summary.classification, summary.id)
                record = ApplicationDetail.from_container(summary, container)
            except FetchError as exc:
                console.print(f"[yellow]Warning: skipping details for '{summary.name}' ({exc})[/yellow]")
                result.failures.append(
                    FetchFailure(
                        resource=exc.resource,
                        message=str(exc),
                        application_id=summary.id,
                        application_name=summary.name,
                    )
                )
                result.applications.append(summary)
            else:
                result.applications.append(record)
            progress.advance(task)

    return result
