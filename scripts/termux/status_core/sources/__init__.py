"""Source adapter helpers and registry.

Every adapter exposes ``fetch(settings, session) -> SourceResult`` and is
fail-soft: missing tokens, network errors and malformed payloads come back as
single-line placeholders instead of exceptions.
"""

from __future__ import annotations

import logging
import subprocess
from functools import partial
from typing import Any

import requests

from status_core.config import Settings
from status_core.models import (
    STATUS_ERROR,
    STATUS_OK,
    STATUS_TIMEOUT,
    STATUS_UNCONFIGURED,
    Source,
    SourceResult,
    placeholder,
)

logger = logging.getLogger(__name__)

USER_AGENT = "Termux-TUI/1.0"
MAX_ITEMS = 6


class FetchError(Exception):
    """Raised inside an adapter; never escapes ``fetch``."""

    status = STATUS_ERROR


class FetchTimeout(FetchError):
    status = STATUS_TIMEOUT


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def http_get_json(session: requests.Session, url: str, auth: str, timeout: float) -> Any:
    try:
        response = session.get(url, headers={"Authorization": auth}, timeout=timeout)
    except requests.Timeout as exc:
        raise FetchTimeout("request timed out") from exc
    except requests.RequestException as exc:
        raise FetchError(type(exc).__name__) from exc

    if response.status_code in (401, 403):
        raise FetchError(f"HTTP {response.status_code}, check token")
    if response.status_code != 200:
        raise FetchError(f"HTTP {response.status_code}")

    try:
        return response.json()
    except ValueError as exc:
        raise FetchError("invalid JSON") from exc


def ok(key: str, title: str, lines: list[str]) -> SourceResult:
    if not lines:
        lines = [f"No {title} data"]
    return SourceResult(key=key, title=title, status=STATUS_OK, lines=tuple(lines))


def not_configured(key: str, title: str, token_name: str) -> SourceResult:
    return placeholder(key, title, STATUS_UNCONFIGURED, f"{title} not configured ({token_name} not set)")


def failed(key: str, title: str, reason: str) -> SourceResult:
    return placeholder(key, title, STATUS_ERROR, f"Failed to query {title} API ({reason})")


def timed_out(key: str, title: str, seconds: float) -> SourceResult:
    return placeholder(key, title, STATUS_TIMEOUT, f"{title} timed out after {seconds:g}s")


def from_error(key: str, title: str, exc: FetchError, timeout: float) -> SourceResult:
    if exc.status == STATUS_TIMEOUT:
        return timed_out(key, title, timeout)
    return failed(key, title, str(exc))


def run_command(cmd: list[str], timeout: float) -> str | None:
    """Run a local helper; ``None`` when it is missing, hangs or fails."""
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
    except FileNotFoundError:
        return None
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss", cmd[0], timeout)
        return None
    except OSError as exc:
        logger.warning("%s failed: %s", cmd[0], exc)
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout


def build_sources(settings: Settings) -> list[Source]:
    """Create the five dashboard sources in display order."""
    from status_core.sources import device, github, network, render, vercel

    sources = []
    for module in (github, vercel, render):
        fetch = partial(module.fetch, settings, build_session())
        sources.append(Source(key=module.KEY, title=module.TITLE, fetch=fetch))
    for module in (device, network):
        sources.append(Source(key=module.KEY, title=module.TITLE, fetch=partial(module.fetch, settings)))
    return sources
