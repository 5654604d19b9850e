"""Single-key command table and the handlers behind it."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from status_core.config import Settings
from status_core.keys import KeyReader
from status_core.launcher import LaunchResult, launch_python, launch_script
from status_core.models import SourceResult
from status_core.renderer import Screen
from status_core.snapshot import SnapshotLogger
from status_core.sources import build_session, device, github, network, render, vercel

logger = logging.getLogger(__name__)

STATUS_PAUSE_SECONDS = 1.0
SCAN_PROMPT_SECONDS = 10.0
MAX_DETAIL_LINES = 400


@dataclass(frozen=True)
class Command:
    key: str
    label: str
    handler: Callable[[], None]
    quits: bool = False


def _noop() -> None:
    return None


class CommandSet:
    def __init__(
        self,
        console: Console,
        screen: Screen,
        keys: KeyReader,
        settings: Settings,
        snapshots: SnapshotLogger,
        latest: Callable[[], dict[str, SourceResult]],
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.console = console
        self.screen = screen
        self.keys = keys
        self.settings = settings
        self.snapshots = snapshots
        self.latest = latest
        self.sleep = sleep
        self._session = None

        commands = [
            Command("G", "GitHub", self.github_detail),
            Command("V", "Vercel", self.vercel_detail),
            Command("R", "Render", self.render_detail),
            Command("D", "Device", self.device_detail),
            Command("P", "Ports", self.ports_detail),
            Command("O", "Run OSINT", self.run_osint),
            Command("W", "Run WiFi", self.run_wifi),
            Command("N", "nmap", self.quick_scan),
            Command("L", "Log", self.force_snapshot),
            Command("Q", "Quit", _noop, quits=True),
        ]
        self.table = {command.key.lower(): command for command in commands}

    def lookup(self, key: str | None) -> Command | None:
        if not key or len(key) != 1:
            return None
        return self.table.get(key.lower())

    def legend(self) -> list[tuple[str, str]]:
        return [(command.key, command.label) for command in self.table.values()]

    @property
    def session(self):
        if self._session is None:
            self._session = build_session()
        return self._session

    # ── views ──────────────────────────────────────────────────────────

    def _show(self, title: str, lines: list[str], style: str = "cyan") -> None:
        body = Text("\n".join(lines[:MAX_DETAIL_LINES]) or "No data")
        self.console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style=style))

    def _say(self, message: str) -> None:
        self.console.print(Text(message))

    def _wait_enter(self) -> None:
        self.keys.read_line("Press ENTER to continue...")

    def report(self, message: str) -> None:
        """Print one status line and hold it briefly before the next frame."""
        self._say(message)
        self.sleep(STATUS_PAUSE_SECONDS)

    def github_detail(self) -> None:
        self.screen.pause_view()
        self._show("GitHub Detailed", github.detail_lines(self.settings, self.session))
        repo = self.keys.read_line("Enter repo full name to view latest workflow status (or ENTER to return): ")
        if repo:
            self._say(f"Latest workflow for {repo}:")
            self._say(github.actions_status(self.settings, self.session, repo))
        self._wait_enter()

    def vercel_detail(self) -> None:
        self.screen.pause_view()
        self._show("Vercel Projects", vercel.detail_lines(self.settings, self.session))
        project_id = self.keys.read_line(
            "To check last deployment for a projectId, enter projectId (or ENTER to return): "
        )
        if project_id:
            self._say(vercel.last_deploy(self.settings, self.session, project_id))
        self._wait_enter()

    def render_detail(self) -> None:
        self.screen.pause_view()
        self._show("Render Services", render.detail_lines(self.settings, self.session))
        self._wait_enter()

    def device_detail(self) -> None:
        self.screen.pause_view()
        self._show("Device Summary", device.summary_lines())
        self._wait_enter()

    def ports_detail(self) -> None:
        self.screen.pause_view()
        self._show("Listening Sockets", network.listening_lines(MAX_DETAIL_LINES))
        self._say("Options: [n] Run quick nmap on local IP (requires nmap), [ENTER] return")
        choice = self.keys.read_key(SCAN_PROMPT_SECONDS)
        if choice and choice.lower() == "n":
            self._scan()
            return
        self.report("Returning...")

    def _scan(self) -> None:
        self._say("Running quick nmap...")
        self._show("nmap quick scan (local)", network.quick_scan(), style="magenta")
        self._wait_enter()

    def quick_scan(self) -> None:
        self.screen.pause_view()
        self._scan()

    # ── actions ────────────────────────────────────────────────────────

    def _launch(self, intro: str, result: Callable[[], LaunchResult]) -> None:
        self.screen.pause_view()
        self._say(intro)
        outcome = result()
        self.report(outcome.message)

    def run_osint(self) -> None:
        self._launch(
            "Launching OSINT script in background...",
            lambda: launch_script(self.settings.osint_script, "OSINT"),
        )

    def run_wifi(self) -> None:
        self._launch(
            "Launching WiFi tool in background...",
            lambda: launch_python(self.settings.wifi_tool, "WiFi tool"),
        )

    def force_snapshot(self) -> None:
        self.screen.pause_view()
        self._say("Forcing snapshot log...")
        try:
            path = self.snapshots.write(self.latest())
        except OSError as exc:
            logger.error("forced snapshot failed: %s", exc)
            self.report(f"Snapshot failed: {exc.strerror or exc}")
            return
        self.report(f"Logged to {path}")
