"""GitHub source: recently updated repositories and their latest Actions run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from status_core.config import Settings
from status_core.formatting import parse_iso_timestamp
from status_core.models import SourceResult
from status_core.sources import (
    MAX_ITEMS,
    FetchError,
    from_error,
    http_get_json,
    not_configured,
    ok,
)

KEY = "github"
TITLE = "GitHub"
TOKEN_NAME = "GITHUB_TOKEN"
API = "https://api.github.com"


@dataclass(frozen=True)
class Repo:
    full_name: str
    private: bool
    stars: int
    updated_at: str
    url: str

    @classmethod
    def from_payload(cls, payload: Any) -> "Repo":
        if not isinstance(payload, dict) or not payload.get("full_name"):
            raise FetchError("unexpected repository payload")
        try:
            stars = int(payload.get("stargazers_count") or 0)
        except (TypeError, ValueError) as exc:
            raise FetchError("unexpected repository payload") from exc
        return cls(
            full_name=str(payload["full_name"]),
            private=bool(payload.get("private")),
            stars=stars,
            updated_at=str(payload.get("updated_at") or ""),
            url=str(payload.get("html_url") or ""),
        )

    def line(self) -> str:
        visibility = "private" if self.private else "public"
        return f"{self.full_name} • {visibility} • ★{self.stars} • updated: {self.updated_at} • {self.url}"


@dataclass(frozen=True)
class WorkflowRun:
    name: str
    outcome: str
    url: str

    @classmethod
    def from_payload(cls, payload: Any) -> "WorkflowRun | None":
        if not isinstance(payload, dict):
            raise FetchError("unexpected workflow payload")
        runs = payload.get("workflow_runs")
        if not isinstance(runs, list):
            raise FetchError("unexpected workflow payload")
        if not runs or not isinstance(runs[0], dict):
            return None
        run = runs[0]
        return cls(
            name=str(run.get("name") or "workflow"),
            outcome=str(run.get("conclusion") or run.get("status") or "unknown"),
            url=str(run.get("html_url") or ""),
        )

    def line(self) -> str:
        return f"{self.name} — {self.outcome} — {self.url}"


def _auth(settings: Settings) -> str:
    return f"token {settings.github_token}"


def list_repos(settings: Settings, session: requests.Session, limit: int = MAX_ITEMS) -> list[Repo]:
    url = f"{API}/user/repos?per_page=50&sort=updated"
    payload = http_get_json(session, url, _auth(settings), settings.fetch_timeout)
    if not isinstance(payload, list):
        raise FetchError("unexpected repository list")
    repos = [Repo.from_payload(item) for item in payload]
    ordered = sorted(repos, key=_updated_key, reverse=True)
    return ordered[:limit]


def _updated_key(repo: Repo) -> float:
    parsed = parse_iso_timestamp(repo.updated_at)
    return parsed.timestamp() if parsed is not None else 0.0


def actions_status(settings: Settings, session: requests.Session, repo: str) -> str:
    """Latest workflow run for ``repo`` as one line; ``—`` when unavailable."""
    if not settings.github_token:
        return f"{TOKEN_NAME} not set"
    url = f"{API}/repos/{repo}/actions/runs?per_page=1"
    try:
        run = WorkflowRun.from_payload(http_get_json(session, url, _auth(settings), settings.fetch_timeout))
    except FetchError:
        return "—"
    return run.line() if run is not None else "—"


def fetch(settings: Settings, session: requests.Session) -> SourceResult:
    if not settings.github_token:
        return not_configured(KEY, TITLE, TOKEN_NAME)
    try:
        repos = list_repos(settings, session)
    except FetchError as exc:
        return from_error(KEY, TITLE, exc, settings.fetch_timeout)

    lines: list[str] = []
    for repo in repos:
        lines.append(repo.line())
        lines.append(f"   ↳ {actions_status(settings, session, repo.full_name)}")
    return ok(KEY, TITLE, lines)


def detail_lines(settings: Settings, session: requests.Session) -> list[str]:
    if not settings.github_token:
        return [not_configured(KEY, TITLE, TOKEN_NAME).lines[0]]
    try:
        repos = list_repos(settings, session, limit=200)
    except FetchError as exc:
        return list(from_error(KEY, TITLE, exc, settings.fetch_timeout).lines)
    return [repo.line() for repo in repos] or ["No repositories"]
