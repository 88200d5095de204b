"""Assemble the ReportDocument. Pure data; no network or file I/O."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .models import (
    ApplicationDetail,
    ApplicationSummary,
    ClientProperty,
    FetchFailure,
    ReportDocument,
    ServerProperty,
)


def build(
    host: str,
    server_properties: Iterable[ServerProperty],
    client_properties: Iterable[ClientProperty],
    applications: Iterable[ApplicationSummary | ApplicationDetail],
    generated_at: datetime,
    failures: Iterable[FetchFailure] = (),
) -> ReportDocument:
    return ReportDocument(
        generated_at=generated_at,
        server_host=host,
        server_properties=list(server_properties),
        client_properties=list(client_properties),
        applications=list(applications),
        failures=list(failures),
    )
