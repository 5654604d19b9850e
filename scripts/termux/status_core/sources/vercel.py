"""Vercel source: projects and their last deployment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from status_core.config import Settings
from status_core.formatting import epoch_ms_to_iso
from status_core.models import SourceResult
from status_core.sources import (
    MAX_ITEMS,
    FetchError,
    from_error,
    http_get_json,
    not_configured,
    ok,
)

KEY = "vercel"
TITLE = "Vercel"
TOKEN_NAME = "VERCEL_TOKEN"
API = "https://api.vercel.com"


@dataclass(frozen=True)
class Project:
    name: str
    id: str
    org: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Project":
        if not isinstance(payload, dict) or not payload.get("id"):
            raise FetchError("unexpected project payload")
        team = payload.get("team") if isinstance(payload.get("team"), dict) else {}
        return cls(
            name=str(payload.get("name") or payload["id"]),
            id=str(payload["id"]),
            org=str(team.get("name") or "personal"),
        )

    def line(self) -> str:
        return f"{self.name} • id:{self.id} • org:{self.org}"


@dataclass(frozen=True)
class Deployment:
    state: str
    url: str
    created: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Deployment":
        if not isinstance(payload, dict):
            raise FetchError("unexpected deployment payload")
        return cls(
            state=str(payload.get("state") or payload.get("readyState") or "unknown"),
            url=str(payload.get("url") or payload.get("name") or "n/a"),
            created=epoch_ms_to_iso(payload.get("createdAt") or payload.get("created")),
        )

    def line(self) -> str:
        return f"{self.state} — {self.url} — created: {self.created}"


def _auth(settings: Settings) -> str:
    return f"Bearer {settings.vercel_token}"


def list_projects(settings: Settings, session: requests.Session, limit: int = MAX_ITEMS) -> list[Project]:
    payload = http_get_json(session, f"{API}/v8/projects", _auth(settings), settings.fetch_timeout)
    projects = payload.get("projects") if isinstance(payload, dict) else None
    if not isinstance(projects, list):
        raise FetchError("unexpected project list")
    return [Project.from_payload(item) for item in projects[:limit]]


def last_deploy(settings: Settings, session: requests.Session, project_id: str) -> str:
    if not settings.vercel_token or not project_id:
        return "—"
    url = f"{API}/v6/deployments?projectId={quote(project_id)}&limit=1"
    try:
        payload = http_get_json(session, url, _auth(settings), settings.fetch_timeout)
    except FetchError as exc:
        return f"— ({exc})"
    deployments = payload.get("deployments") if isinstance(payload, dict) else None
    if not isinstance(deployments, list) or not deployments:
        return "—"
    try:
        return Deployment.from_payload(deployments[0]).line()
    except FetchError:
        return "—"


def fetch(settings: Settings, session: requests.Session) -> SourceResult:
    if not settings.vercel_token:
        return not_configured(KEY, TITLE, TOKEN_NAME)
    try:
        projects = list_projects(settings, session)
    except FetchError as exc:
        return from_error(KEY, TITLE, exc, settings.fetch_timeout)
    return ok(KEY, TITLE, [project.line() for project in projects])


def detail_lines(settings: Settings, session: requests.Session) -> list[str]:
    if not settings.vercel_token:
        return [not_configured(KEY, TITLE, TOKEN_NAME).lines[0]]
    try:
        projects = list_projects(settings, session, limit=200)
    except FetchError as exc:
        return list(from_error(KEY, TITLE, exc, settings.fetch_timeout).lines)
    return [project.line() for project in projects] or ["No projects"]
