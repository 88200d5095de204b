"""HTTP doubles and sample payloads shared by the test modules. No network calls are made."""

from __future__ import annotations

from typing import Any

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, *, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def not_json(status_code: int = 200, text: str = "<html>oops</html>") -> FakeResponse:
    return FakeResponse(status_code, _NO_JSON, text=text)


class FakeHttp:
    """
    Stands in for requests.Session.

    ``routes`` maps (method, path suffix) to a FakeResponse or an exception
    instance to raise. Unrouted requests get a 404.
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None) -> None:
        self.routes = routes or {}
        self.headers: dict[str, str] = {}
        self.calls: list[dict] = []

    def _dispatch(self, method: str, url: str, body: Any, timeout: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, "json": body, "timeout": timeout})
        for (route_method, suffix), outcome in self.routes.items():
            if route_method == method and url.endswith(suffix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        return FakeResponse(404, {"message": "not found"}, text="not found")

    def get(self, url: str, timeout: Any = None) -> FakeResponse:
        return self._dispatch("GET", url, None, timeout)

    def post(self, url: str, json: Any = None, timeout: Any = None) -> FakeResponse:
        return self._dispatch("POST", url, json, timeout)

    def paths(self) -> list[str]:
        return [c["url"].split("/xenmobile/api/v1", 1)[1] for c in self.calls]


# ── Sample payloads ────────────────────────────────────────────────────────────

SERVER_PROPERTIES = {
    "allEwProperties": [
        {"name": "z.last", "value": "1", "displayName": "Last", "defaultValue": "0"},
        {"name": "a.first", "value": "true", "displayName": "First", "defaultValue": "false"},
    ]
}

CLIENT_PROPERTIES = {
    "allClientProperties": [
        {"displayName": "Enable User Password Caching", "key": "ENABLE_PASSWORD_CACHING", "value": "false"},
        {"displayName": "Inactivity Timer", "key": "INACTIVITY_TIMER", "value": "15"},
    ]
}

IOS_SECTION = {
    "displayName": "WorxMail iOS",
    "description": "Secure mail",
    "paid": False,
    "removeWithMdm": True,
    "preventBackup": True,
    "appVersion": "10.1",
    "minOsVersion": "12.0",
    "policies": [
        {"policyName": "BlockCameras", "policyValue": "true", "policyType": "boolean", "title": "Block cameras"},
        {"policyName": "AppPasscode", "policyValue": "true", "policyType": "boolean", "title": "App passcode"},
        {"policyName": "MaxOfflinePeriod", "policyValue": "72", "units": "hours", "title": "Max offline period"},
    ],
}

ANDROID_SECTION = {
    "displayName": "WorxMail Android",
    "policies": [
        {"policyName": "BlockScreenCapture", "policyValue": "true", "title": "Block screen capture"},
    ],
}


def app_list(*apps: dict, total: int | None = None) -> dict:
    list_data: dict = {"applist": list(apps)}
    if total is not None:
        list_data["totalMatchCount"] = total
    return {"applicationListData": list_data}


