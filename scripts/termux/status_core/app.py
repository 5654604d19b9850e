"""Dashboard entrypoint and the render / await-input / dispatch loop."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from enum import Enum
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.layout import Layout

from status_core.commands import CommandSet
from status_core.config import ConfigError, Settings, load_settings, missing_tools
from status_core.keys import KeyReader, TerminalError
from status_core.layout import compute_layout
from status_core.models import DashboardLayout, SourceResult, utc_now
from status_core.renderer import Screen, compose_frame
from status_core.scheduler import FetchScheduler
from status_core.snapshot import SnapshotLogger
from status_core.sources import build_sources

logger = logging.getLogger(__name__)

LOG_FILE = "dashboard.log"
TERMINATION_SIGNALS = ("SIGTERM", "SIGHUP")

KEY_HELP = """keys:
  G  GitHub detail       V  Vercel detail      R  Render detail
  D  device detail       P  listening sockets  N  quick nmap scan
  O  run OSINT script    W  run WiFi tool      L  force log snapshot
  Q  quit

configuration is read from ./.env or ~/.termux_status.env
"""


class State(Enum):
    RENDERING = "rendering"
    AWAITING_INPUT = "awaiting_input"
    DISPATCHING = "dispatching"
    EXITING = "exiting"


class Terminated(Exception):
    """Raised from the signal handler so the loop unwinds through cleanup."""


class Dashboard:
    def __init__(
        self,
        settings: Settings,
        console: Console,
        screen: Screen,
        keys: KeyReader,
        scheduler: FetchScheduler,
        snapshots: SnapshotLogger,
        commands: CommandSet | None = None,
        clock: Callable = utc_now,
    ):
        self.settings = settings
        self.console = console
        self.screen = screen
        self.keys = keys
        self.scheduler = scheduler
        self.snapshots = snapshots
        self.clock = clock
        self.commands = commands or CommandSet(
            console, screen, keys, settings, snapshots, latest=lambda: self.results
        )
        self.state = State.RENDERING
        self.results: dict[str, SourceResult] = {}
        self.layout: DashboardLayout | None = None
        self.frame: Layout | None = None
        self.pending_key: str | None = None

    def render_cycle(self) -> None:
        width, height = self.screen.size()
        self.layout = compute_layout(width, height)
        self.results = self.scheduler.run_cycle()
        self.frame = compose_frame(
            self.layout,
            self.results,
            self.settings.refresh_interval,
            self.commands.legend(),
            self.clock().astimezone(),
            status=self.snapshots.last_error,
            box=self.screen.box,
        )
        try:
            self.screen.draw(self.frame)
        except OSError as exc:
            logger.error("frame draw failed: %s", exc)
        self.snapshots.submit(self.results)

    def step(self) -> State:
        if self.state is State.RENDERING:
            self.render_cycle()
            self.state = State.AWAITING_INPUT

        elif self.state is State.AWAITING_INPUT:
            self.pending_key = self.keys.read_key(self.settings.refresh_interval)
            self.state = State.DISPATCHING if self.pending_key else State.RENDERING

        elif self.state is State.DISPATCHING:
            self.state = self.dispatch(self.pending_key)
            self.pending_key = None

        return self.state

    def dispatch(self, key: str | None) -> State:
        command = self.commands.lookup(key)
        if command is None:
            return State.RENDERING
        if command.quits:
            return State.EXITING
        logger.info("command %s (%s)", command.key, command.label)
        try:
            command.handler()
        except Exception as exc:
            logger.exception("command %s failed", command.key)
            self.commands.report(f"[x] {command.label} failed: {exc}")
        finally:
            self.screen.resume_view()
        return State.RENDERING

    def run(self) -> int:
        while self.state is not State.EXITING:
            self.step()
        return 0


def configure_logging(log_dir: Path, level: str = "INFO") -> Path | None:
    """Log to a file under ``log_dir``; the terminal belongs to the renderer."""
    root = logging.getLogger()
    path = log_dir / LOG_FILE
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        root.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))
    return path


def _raise_terminated(signum, _frame) -> None:
    raise Terminated(signum)


def _install_signal_handlers() -> dict:
    previous = {}
    for name in TERMINATION_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            previous[signum] = signal.signal(signum, _raise_terminated)
    return previous


def _restore_signal_handlers(previous: dict) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def _preflight(console: Console, settings: Settings, log_path: Path | None) -> None:
    if settings.env_file is not None:
        console.print(f"[cyan]\\[i][/cyan] Loading env from: {settings.env_file}")
    missing = missing_tools()
    if missing:
        console.print(f"[yellow]\\[!][/yellow] Missing tools: {' '.join(missing)}")
        console.print(f"[yellow]\\[!][/yellow] Install with: pkg update && pkg install -y {' '.join(missing)}")
    if log_path is None:
        console.print(f"[yellow]\\[!][/yellow] Cannot write to log directory: {settings.log_dir}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Termux live status dashboard (GitHub / Vercel / Render / device)",
        epilog=KEY_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"[x] {exc}", file=sys.stderr)
        return 2

    log_path = configure_logging(settings.log_dir, settings.log_level)
    console = Console()
    _preflight(console, settings, log_path)

    scheduler = FetchScheduler(build_sources(settings), settings.fetch_timeout)
    snapshots = SnapshotLogger(settings.log_dir)
    screen = Screen(console)
    previous_handlers = _install_signal_handlers()
    status = 0
    try:
        with KeyReader(console) as keys:
            dashboard = Dashboard(settings, console, screen, keys, scheduler, snapshots)
            screen.enter()
            try:
                status = dashboard.run()
            except (KeyboardInterrupt, Terminated):
                logger.info("interrupted, shutting down")
                status = 0
            finally:
                screen.restore()
    except TerminalError as exc:
        logger.critical("%s", exc)
        print(f"[x] {exc}", file=sys.stderr)
        return 1
    finally:
        scheduler.close()
        _restore_signal_handlers(previous_handlers)

    console.print("Exiting dashboard...")
    return status


if __name__ == "__main__":
    raise SystemExit(main())
