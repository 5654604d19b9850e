"""Panel rendering helpers shared by the per-panel renderers."""

from __future__ import annotations

from rich import box as rich_box
from rich.panel import Panel
from rich.text import Text

from status_core.formatting import clean_line
from status_core.models import (
    STATUS_ERROR,
    STATUS_OK,
    STATUS_TIMEOUT,
    STATUS_UNCONFIGURED,
    SourceResult,
    worst_status,
)

STATUS_BORDER = {
    STATUS_OK: "cyan",
    STATUS_UNCONFIGURED: "yellow",
    STATUS_TIMEOUT: "yellow",
    STATUS_ERROR: "red",
}


def border_for(status: str) -> str:
    return STATUS_BORDER.get(status, "cyan")


def source_lines(results: dict[str, SourceResult], key: str, limit: int | None = None) -> list[str]:
    result = results.get(key)
    if result is None:
        return [f"{key}: no data yet"]
    lines = list(result.lines) or [f"{result.title}: no data"]
    return lines if limit is None else lines[:limit]


def panel_from_lines(
    title: str,
    bound: list[SourceResult],
    lines: list[str],
    box: rich_box.Box = rich_box.ROUNDED,
) -> Panel:
    """One line per row, cropped at the border; rich pads the rows below."""
    body = Text("\n".join(clean_line(line) for line in lines), no_wrap=True, overflow="crop")
    return Panel(
        body,
        title=f"[bold]{title}[/bold]",
        title_align="left",
        border_style=border_for(worst_status(bound)),
        box=box,
    )
