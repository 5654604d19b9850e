"""Frame composition and terminal output.

Every cycle builds a fresh rich ``Layout`` sized by :func:`compute_layout` and
hands it to a screen-mode ``Live``, which redraws the whole terminal, so
nothing from an earlier, differently sized frame survives.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rich import box as rich_box
from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.text import Text

from status_core.layout import BODY_TOP, HEADER_ROWS, MIN_HEIGHT, MIN_WIDTH, validate_layout
from status_core.models import DashboardLayout, SourceResult
from status_core.panels import deploy, device, github, header

logger = logging.getLogger(__name__)


def compose_frame(
    layout: DashboardLayout,
    results: dict[str, SourceResult],
    refresh_seconds: int,
    legend: list[tuple[str, str]],
    updated_at: datetime,
    status: str = "",
    box: rich_box.Box = rich_box.ROUNDED,
) -> Layout:
    """Fixed splits taken from ``layout``; rich clips whatever exceeds the terminal."""
    validate_layout(layout)

    frame = Layout(name="frame")
    frame.split_column(
        Layout(header.render(refresh_seconds, legend, updated_at, status), name="header", size=HEADER_ROWS),
        Layout(Text(""), name="gap", size=BODY_TOP - HEADER_ROWS),
        Layout(name="top", size=layout.left.height),
        Layout(device.render(results, box), name="bottom", size=layout.bottom.height),
    )
    frame["top"].split_row(
        Layout(github.render(results, box), name="left", size=layout.left.width),
        Layout(Text(""), name="margin", size=layout.right.col - layout.left.right),
        Layout(deploy.render(results, box), name="right", size=layout.right.width),
    )
    return frame


class Screen:
    """Owns the terminal through a screen-mode ``Live`` display."""

    def __init__(self, console: Console):
        self.console = console
        self.live = Live(
            console=console,
            screen=True,
            auto_refresh=False,
            redirect_stdout=False,
            redirect_stderr=False,
        )

    @property
    def active(self) -> bool:
        return self.live.is_started

    @property
    def box(self) -> rich_box.Box:
        return rich_box.ROUNDED if self.console.encoding.startswith("utf") else rich_box.ASCII

    def size(self) -> tuple[int, int]:
        try:
            width, height = self.console.size
        except (OSError, ValueError) as exc:
            logger.warning("terminal size unavailable: %s", exc)
            return MIN_WIDTH, MIN_HEIGHT
        return max(1, width), max(1, height)

    def enter(self) -> None:
        self.live.start()

    def draw(self, frame: RenderableType) -> None:
        self.live.update(frame, refresh=True)

    def pause_view(self) -> None:
        """Leave the live view for a plain scrolling detail screen."""
        self.live.stop()
        self.console.clear()

    def resume_view(self) -> None:
        self.live.start()

    def restore(self) -> None:
        self.live.stop()
        self.console.show_cursor(True)
