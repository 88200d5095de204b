"""
Typed records for XenMobile Backup.

Every record maps the server's camelCase JSON keys through a ``from_api``
classmethod. Fields the server omits stay ``None`` so the renderer decides
how to present them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

API_PATH = "/xenmobile/api/v1"

CONFIGURED = "configured"
NOT_CONFIGURED = "not configured"
PLATFORMS = ("ios", "android")


# ── Session ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Session:
    server_host: str
    port: int
    auth_token: str

    @property
    def base_url(self) -> str:
        return f"https://{self.server_host}:{self.port}{API_PATH}"


# ── Classification ────────────────────────────────────────────────────────────


class Classification(str, Enum):
    """URL segment used by the application detail endpoint."""

    MOBILE = "mobile"
    APPSTORE = "appstore"


# "App Store App" has a classification but is not fetched; see DETAIL_CLASSIFICATIONS.
APP_TYPE_CLASSIFICATION: dict[str, Classification | None] = {
    "MDX": Classification.MOBILE,
    "Enterprise": Classification.MOBILE,
    "App Store App": Classification.APPSTORE,
    "Web Link": None,
}

DETAIL_CLASSIFICATIONS: frozenset[Classification] = frozenset({Classification.MOBILE})


def classify(app_type: str | None) -> Classification | None:
    """Map an appType tag to its classification; unknown tags map to None."""
    if app_type is None:
        return None
    return APP_TYPE_CLASSIFICATION.get(app_type)


def needs_detail(app_type: str | None) -> bool:
    return classify(app_type) in DETAIL_CLASSIFICATIONS


def _as_list(value: Any) -> list:
    """A missing value is an empty list; a lone scalar becomes a one-item list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# ── Properties ────────────────────────────────────────────────────────────────


@dataclass
class ServerProperty:
    name: str | None
    value: Any
    display_name: str | None = None
    default_value: Any = None

    @classmethod
    def from_api(cls, data: dict) -> ServerProperty:
        return cls(
            name=data.get("name"),
            value=data.get("value"),
            display_name=data.get("displayName"),
            default_value=data.get("defaultValue"),
        )


@dataclass
class ClientProperty:
    display_name: str | None
    key: str | None
    value: Any

    @classmethod
    def from_api(cls, data: dict) -> ClientProperty:
        return cls(
            display_name=data.get("displayName"),
            key=data.get("key"),
            value=data.get("value"),
        )


# ── Applications ──────────────────────────────────────────────────────────────


@dataclass
class Policy:
    policy_name: str | None
    policy_value: Any
    policy_type: str | None = None
    policy_category: str | None = None
    title: str | None = None
    description: str | None = None
    units: str | None = None
    explanation: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> Policy:
        return cls(
            policy_name=data.get("policyName"),
            policy_value=data.get("policyValue"),
            policy_type=data.get("policyType"),
            policy_category=data.get("policyCategory"),
            title=data.get("title"),
            description=data.get("description"),
            units=data.get("units"),
            explanation=data.get("explanation"),
        )


@dataclass
class PlatformConfig:
    display_name: str | None = None
    description: str | None = None
    paid: bool | None = None
    remove_with_mdm: bool | None = None
    prevent_backup: bool | None = None
    change_management_state: bool | None = None
    associate_to_device: bool | None = None
    can_associate_to_device: bool | None = None
    app_version: str | None = None
    min_os_version: str | None = None
    max_os_version: str | None = None
    excluded_devices: Any = None
    policies: list[Policy] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> PlatformConfig:
        # Server order is kept; the report lists policies as configured.
        return cls(
            display_name=data.get("displayName"),
            description=data.get("description"),
            paid=data.get("paid"),
            remove_with_mdm=data.get("removeWithMdm"),
            prevent_backup=data.get("preventBackup"),
            change_management_state=data.get("changeManagementState"),
            associate_to_device=data.get("associateToDevice"),
            can_associate_to_device=data.get("canAssociateToDevice"),
            app_version=data.get("appVersion"),
            min_os_version=data.get("minOsVersion"),
            max_os_version=data.get("maxOsVersion"),
            excluded_devices=data.get("excludedDevices"),
            policies=[Policy.from_api(p) for p in data.get("policies") or []],
        )


@dataclass
class ApplicationSummary:
    id: Any
    name: str | None
    description: str | None = None
    disabled: bool | None = None
    app_type: str | None = None
    categories: list[str] = field(default_factory=list)
    workflow: Any = None

    @classmethod
    def from_api(cls, data: dict) -> ApplicationSummary:
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            description=data.get("description"),
            disabled=data.get("disabled"),
            app_type=data.get("appType"),
            categories=_as_list(data.get("categories")),
            workflow=data.get("workflow"),
        )

    @property
    def classification(self) -> Classification | None:
        return classify(self.app_type)

    @property
    def is_detailed(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ApplicationDetail(ApplicationSummary):
    icon_data: str | None = None
    roles: list[str] = field(default_factory=list)
    vpp_account: Any = None
    ios: PlatformConfig | None = None
    android: PlatformConfig | None = None

    @classmethod
    def from_container(cls, summary: ApplicationSummary, container: dict) -> ApplicationDetail:
        """
        Merge a detail ``container`` into the listed summary.

        Summary fields come from the list endpoint so the record keeps the
        identity it was listed with; platform sections are attached as sent.
        """
        ios = container.get("ios")
        android = container.get("android")
        return cls(
            id=summary.id,
            name=summary.name,
            description=summary.description,
            disabled=summary.disabled,
            app_type=summary.app_type,
            categories=list(summary.categories),
            workflow=summary.workflow,
            icon_data=container.get("iconData"),
            roles=_as_list(container.get("roles")),
            vpp_account=container.get("vppAccount"),
            ios=PlatformConfig.from_api(ios) if ios else None,
            android=PlatformConfig.from_api(android) if android else None,
        )

    @property
    def is_detailed(self) -> bool:
        return True

    def platform_status(self, platform: str) -> str:
        if platform not in PLATFORMS:
            raise ValueError(f"Unknown platform: {platform!r}")
        return CONFIGURED if getattr(self, platform) is not None else NOT_CONFIGURED

    def to_dict(self) -> dict:
        data = asdict(self)
        data["platforms"] = {p: self.platform_status(p) for p in PLATFORMS}
        return data


# ── Report ────────────────────────────────────────────────────────────────────


@dataclass
class FetchFailure:
    resource: str
    message: str
    application_id: Any = None
    application_name: str | None = None


@dataclass
class ReportDocument:
    generated_at: datetime
    server_host: str
    server_properties: list[ServerProperty]
    client_properties: list[ClientProperty]
    applications: list[ApplicationSummary | ApplicationDetail]
    failures: list[FetchFailure] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "generated_at": self.generated_at.isoformat(),
            "server_host": self.server_host,
            "server_properties": [asdict(p) for p in self.server_properties],
            "client_properties": [asdict(p) for p in self.client_properties],
            "applications": [a.to_dict() for a in self.applications],
            "failures": [asdict(f) for f in self.failures],
        }
