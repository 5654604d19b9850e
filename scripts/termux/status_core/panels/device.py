"""Device & ports panel renderer (bottom, full width)."""

from __future__ import annotations

from rich import box as rich_box
from rich.panel import Panel

from status_core.models import SourceResult
from status_core.panels import panel_from_lines, source_lines

TITLE = "Device & Ports (press P for details)"
MAX_DEVICE_LINES = 20
MAX_SOCKET_LINES = 10
SHORTCUTS = "Shortcuts: [O] OSINT  [W] WiFi  [N] nmap quick  [L] Log snapshot  [Q] Quit"


def render(results: dict[str, SourceResult], box: rich_box.Box = rich_box.ROUNDED) -> Panel:
    lines = ["Device summary:"]
    lines.extend(f"  {line}" for line in source_lines(results, "device", MAX_DEVICE_LINES))
    lines.append("")
    lines.append("Listening sockets (top):")
    lines.extend(f"  {line}" for line in source_lines(results, "network", MAX_SOCKET_LINES))
    lines.append("")
    lines.append(SHORTCUTS)
    bound = [r for r in (results.get("device"), results.get("network")) if r is not None]
    return panel_from_lines(TITLE, bound, lines, box)
