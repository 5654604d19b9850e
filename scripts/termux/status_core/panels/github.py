"""GitHub panel renderer (top left)."""

from __future__ import annotations

from rich import box as rich_box
from rich.panel import Panel

from status_core.models import SourceResult
from status_core.panels import panel_from_lines, source_lines

TITLE = "GitHub (recent repos & actions)"
MAX_LINES = 40


def render(results: dict[str, SourceResult], box: rich_box.Box = rich_box.ROUNDED) -> Panel:
    bound = [r for r in (results.get("github"),) if r is not None]
    return panel_from_lines(TITLE, bound, source_lines(results, "github", MAX_LINES), box)
