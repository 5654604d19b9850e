"""Header renderer: title, refresh clock and key legend on two rows."""

from __future__ import annotations

from datetime import datetime

from rich.console import Group
from rich.table import Table
from rich.text import Text

from status_core.formatting import clean_line

TITLE = "Termux Live Status Dashboard"


def render(
    refresh_seconds: int,
    legend: list[tuple[str, str]],
    updated_at: datetime,
    status: str = "",
) -> Group:
    title = Text(TITLE, style="bold blue")
    if status:
        title.append(f"  {clean_line(status)}", style="red")
    clock = Text(f"Refresh: {refresh_seconds}s  {updated_at.strftime('%H:%M:%S')}", style="yellow")

    top = Table.grid(expand=True)
    top.add_column(ratio=1, no_wrap=True, overflow="crop")
    top.add_column(justify="right", no_wrap=True, overflow="crop")
    top.add_row(title, clock)

    keys = Text("Press ", no_wrap=True, overflow="crop")
    for key, label in legend:
        keys.append(key, style="bold")
        keys.append(f"={label} ")
    return Group(top, keys)
