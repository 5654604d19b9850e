"""Render source: services and their state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from status_core.config import Settings
from status_core.models import SourceResult
from status_core.sources import (
    MAX_ITEMS,
    FetchError,
    from_error,
    http_get_json,
    not_configured,
    ok,
)

KEY = "render"
TITLE = "Render"
TOKEN_NAME = "RENDER_TOKEN"
API = "https://api.render.com"


@dataclass(frozen=True)
class Service:
    name: str
    state: str
    url: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Service":
        if not isinstance(payload, dict):
            raise FetchError("unexpected service payload")
        # list items are either the service itself or {"cursor": ..., "service": {...}}
        body = payload.get("service") if isinstance(payload.get("service"), dict) else payload
        if not body.get("name"):
            raise FetchError("unexpected service payload")
        details = body.get("serviceDetails") if isinstance(body.get("serviceDetails"), dict) else {}
        state = body.get("state") or body.get("suspended") or "unknown"
        return cls(
            name=str(body["name"]),
            state=str(state),
            url=str(details.get("url") or details.get("webURL") or body.get("url") or "n/a"),
        )

    def line(self) -> str:
        return f"{self.name} • state:{self.state} • url: {self.url}"


def list_services(settings: Settings, session: requests.Session, limit: int = MAX_ITEMS) -> list[Service]:
    auth = f"Bearer {settings.render_token}"
    payload = http_get_json(session, f"{API}/v1/services", auth, settings.fetch_timeout)
    if not isinstance(payload, list):
        raise FetchError("unexpected service list")
    return [Service.from_payload(item) for item in payload[:limit]]


def fetch(settings: Settings, session: requests.Session) -> SourceResult:
    if not settings.render_token:
        return not_configured(KEY, TITLE, TOKEN_NAME)
    try:
        services = list_services(settings, session)
    except FetchError as exc:
        return from_error(KEY, TITLE, exc, settings.fetch_timeout)
    return ok(KEY, TITLE, [service.line() for service in services])


def detail_lines(settings: Settings, session: requests.Session) -> list[str]:
    if not settings.render_token:
        return [not_configured(KEY, TITLE, TOKEN_NAME).lines[0]]
    try:
        services = list_services(settings, session, limit=200)
    except FetchError as exc:
        return list(from_error(KEY, TITLE, exc, settings.fetch_timeout).lines)
    return [service.line() for service in services] or ["No services"]
