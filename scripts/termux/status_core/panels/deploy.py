"""Deployments panel renderer (top right): Vercel above Render."""

from __future__ import annotations

from rich import box as rich_box
from rich.panel import Panel

from status_core.models import SourceResult
from status_core.panels import panel_from_lines, source_lines

TITLE = "Vercel (projects) / Render (services)"
MAX_LINES_PER_SOURCE = 10


def render(results: dict[str, SourceResult], box: rich_box.Box = rich_box.ROUNDED) -> Panel:
    lines = source_lines(results, "vercel", MAX_LINES_PER_SOURCE)
    lines.append("")
    lines.extend(source_lines(results, "render", MAX_LINES_PER_SOURCE))
    bound = [r for r in (results.get("vercel"), results.get("render")) if r is not None]
    return panel_from_lines(TITLE, bound, lines, box)
