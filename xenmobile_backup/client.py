"""
XenMobile REST API client.

One method per resource kind. Every request carries the Session's auth_token
header and an explicit timeout. No retries are made: a failed request raises
FetchError naming the resource, and the caller decides whether it is fatal.
"""

from __future__ import annotations

from typing import Any

import requests
from rich.console import Console

from .auth import DEFAULT_TIMEOUT
from .errors import FetchError, MalformedResponseError
from .models import (
    ApplicationSummary,
    Classification,
    ClientProperty,
    PLATFORMS,
    ServerProperty,
    Session,
)

console = Console()

# Single-page request; the server's paging is not followed.
APPLICATION_FILTER = {"start": 0, "applicationSortColumn": "name", "sortOrder": "ASC"}


class XenMobileClient:
    """Thin read-only wrapper around the XenMobile REST API for one Session."""

    def __init__(
        self,
        session: Session,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http: requests.Session | None = None,
    ) -> None:
        if not session.auth_token:
            raise ValueError("Session has no auth token")
        self.session = session
        self.timeout = timeout
        self._http = http or requests.Session()
        self._http.headers.update(
            {
                "auth_token": session.auth_token,
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, resource: str, body: dict | None = None) -> Any:
        """Single request; returns the decoded JSON body or raises FetchError."""
        url = f"{self.session.base_url}{path}"
        try:
            if method == "POST":
                resp = self._http.post(url, json=body, timeout=self.timeout)
            else:
                resp = self._http.get(url, timeout=self.timeout)
        except requests.Timeout as exc:
            raise FetchError(resource, f"timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise FetchError(resource, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            raise FetchError(resource, f"HTTP {resp.status_code}: {resp.text[:200]}")

        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(resource, "response is not valid JSON") from exc

    @staticmethod
    def _unwrap(data: Any, resource: str, *keys: str) -> Any:
        """Walk the envelope keys, raising MalformedResponseError if one is missing."""
        for key in keys:
            if not isinstance(data, dict) or key not in data:
                raise MalformedResponseError(resource, f"missing '{key}' in response")
            data = data[key]
        return data

    @staticmethod
    def _records(items: Any, resource: str) -> list[dict]:
        if items is None:
            return []
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise MalformedResponseError(resource, "expected a list of objects")
        return items

    # ── Resources ────────────────────────────────────────────────────────────

    def get_server_properties(self) -> list[ServerProperty]:
        """Return every server property, unfiltered, in server order."""
        resource = "server properties"
        data = self._request("GET", "/serverproperties", resource)
        items = self._records(self._unwrap(data, resource, "allEwProperties"), resource)
        return [ServerProperty.from_api(item) for item in items]

    def get_client_properties(self) -> list[ClientProperty]:
        """Return every client property in server order."""
        resource = "client properties"
        data = self._request("GET", "/clientproperties", resource)
        items = self._records(self._unwrap(data, resource, "allClientProperties"), resource)
        return [ClientProperty.from_api(item) for item in items]

    def get_applications(self) -> list[ApplicationSummary]:
        """
        Return the application list sorted by name, ascending.

        Only the first page is requested. If the server reports more matches
        than it returned, a warning is printed and the short list is kept.
        """
        resource = "application list"
        data = self._request("POST", "/application/filter", resource, body=APPLICATION_FILTER)
        list_data = self._unwrap(data, resource, "applicationListData")
        items = self._records(self._unwrap(list_data, resource, "applist"), resource)

        total = list_data.get("totalMatchCount")
        if isinstance(total, int) and total > len(items):
            console.print(
                f"[yellow]Warning: server reports {total} applications but returned {len(items)}. "
                "Only the first page is included in the report.[/yellow]"
            )
        return [ApplicationSummary.from_api(item) for item in items]

    def get_application_detail(self, classification: Classification, app_id: Any) -> dict:
        """Return the ``container`` object for one application."""
        resource = f"application detail ({classification.value}/{app_id})"
        data = self._request("GET", f"/application/{classification.value}/{app_id}", resource)
        container = self._unwrap(data, resource, "container")
        if not isinstance(container, dict):
            raise MalformedResponseError(resource, "container is not an object")
        for platform in PLATFORMS:
            section = container.get(platform)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise MalformedResponseError(resource, f"'{platform}' section is not an object")
            self._records(section.get("policies"), resource)
        return container
