"""Single-key input with a timeout, plus line prompts for detail views.

Uses termios non-canonical mode (ICANON/ECHO off, VMIN=0/VTIME=0) and
``select`` for the bounded wait, leaving output processing intact so the
alternate screen keeps rendering normally.
"""

from __future__ import annotations

import os
import select
import sys
import time
from contextlib import contextmanager
from typing import Iterator, TextIO

from rich.console import Console

try:
    import termios
except ImportError:  # non-POSIX: no key input, the dashboard still refreshes
    termios = None  # type: ignore[assignment]

ESCAPE = "\x1b"
ESCAPE_DRAIN_SECONDS = 0.05


class TerminalError(OSError):
    """The terminal mode could not be restored."""


class KeyReader:
    def __init__(self, console: Console, stream: TextIO | None = None):
        self.console = console
        self.stream = stream or sys.stdin
        self.fd: int | None = None
        self._saved: list | None = None

    @property
    def interactive(self) -> bool:
        return self._saved is not None

    def __enter__(self) -> "KeyReader":
        if termios is None:
            return self
        try:
            fd = self.stream.fileno()
            if not os.isatty(fd):
                return self
            saved = termios.tcgetattr(fd)
            raw = termios.tcgetattr(fd)
            raw[3] &= ~(termios.ICANON | termios.ECHO)
            raw[6][termios.VMIN] = 0
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSADRAIN, raw)
        except (OSError, ValueError, termios.error):
            return self
        self.fd = fd
        self._saved = saved
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self.fd is not None and self._saved is not None and termios is not None:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            except termios.error as exc:
                raise TerminalError(f"cannot restore terminal mode: {exc}") from exc
            finally:
                self._saved = None

    def _readable(self, timeout: float) -> bool:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout))
        return bool(ready)

    def read_key(self, timeout: float) -> str | None:
        """Block for one key press, at most ``timeout`` seconds; ``None`` on timeout."""
        if not self.interactive:
            time.sleep(timeout)
            return None
        if not self._readable(timeout):
            return None
        char = os.read(self.fd, 1).decode("utf-8", errors="ignore")
        if char == ESCAPE:
            # swallow the rest of an arrow/function key sequence so "[A" etc. never dispatch
            while self._readable(ESCAPE_DRAIN_SECONDS):
                if not os.read(self.fd, 16):
                    break
        return char or None

    @contextmanager
    def cooked(self) -> Iterator[None]:
        """Temporarily restore line-buffered echoing input."""
        if not self.interactive or termios is None:
            yield
            return
        raw = termios.tcgetattr(self.fd)
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
        try:
            yield
        finally:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, raw)

    def read_line(self, prompt: str = "") -> str:
        with self.cooked():
            try:
                return self.console.input(prompt).strip()
            except EOFError:
                return ""
