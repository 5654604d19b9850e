"""Shared text and time formatting helpers for human-facing panels."""

from __future__ import annotations

import re
from datetime import datetime, timezone

CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

BYTE_UNITS = ("B", "K", "M", "G", "T")


def clean_line(text: object) -> str:
    """Make a value safe to place on the cell grid: one line, no escapes."""
    raw = str(text)
    raw = ANSI_RE.sub("", raw)
    raw = raw.replace("\t", "    ").replace("\r", "").replace("\n", " ")
    return CONTROL_RE.sub("", raw)


def format_duration(seconds: float | int | None) -> str:
    if seconds is None:
        return "N/A"
    total = max(0, int(seconds))
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days:
        return f"up {days}d {hours}h {minutes}m"
    if hours:
        return f"up {hours}h {minutes}m"
    return f"up {minutes}m"


def format_bytes(size: float | int) -> str:
    value = float(max(0, size))
    for unit in BYTE_UNITS:
        if value < 1024 or unit == BYTE_UNITS[-1]:
            if unit == "B":
                return f"{int(value)}{unit}"
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.1f}T"


def parse_iso_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def iso_utc(moment: datetime) -> str:
    """Second-resolution UTC stamp, e.g. 2024-05-01T12:00:00Z."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def epoch_ms_to_iso(value: object) -> str:
    try:
        millis = int(value)  # type: ignore[arg-type]
    except (OverflowError, TypeError, ValueError):
        return "n/a"
    if millis <= 0:
        return "n/a"
    try:
        moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return "n/a"
    return iso_utc(moment)
