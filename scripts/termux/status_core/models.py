"""Shared model contracts for the dashboard data flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

STATUS_OK = "ok"
STATUS_UNCONFIGURED = "unconfigured"
STATUS_ERROR = "error"
STATUS_TIMEOUT = "timeout"

# Worst first; used to pick a panel's border colour from its sources.
STATUS_SEVERITY = {
    STATUS_ERROR: 3,
    STATUS_TIMEOUT: 2,
    STATUS_UNCONFIGURED: 1,
    STATUS_OK: 0,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SourceResult:
    key: str
    title: str
    status: str = STATUS_OK
    lines: tuple[str, ...] = ()
    fetched_at: datetime = field(default_factory=utc_now)


def placeholder(key: str, title: str, status: str, message: str) -> SourceResult:
    return SourceResult(key=key, title=title, status=status, lines=(message,))


def worst_status(results: list[SourceResult]) -> str:
    if not results:
        return STATUS_OK
    return max((r.status for r in results), key=lambda s: STATUS_SEVERITY.get(s, 0))


@dataclass
class Source:
    """One monitored entity and its last-result cache."""

    key: str
    title: str
    fetch: Callable[[], SourceResult]
    last: SourceResult | None = None


@dataclass(frozen=True)
class Rect:
    row: int
    col: int
    width: int
    height: int

    @property
    def bottom(self) -> int:
        return self.row + self.height

    @property
    def right(self) -> int:
        return self.col + self.width

    @property
    def interior_width(self) -> int:
        return max(0, self.width - 2)

    @property
    def interior_height(self) -> int:
        return max(0, self.height - 2)

    def overlaps(self, other: "Rect") -> bool:
        return not (
            self.right <= other.col
            or other.right <= self.col
            or self.bottom <= other.row
            or other.bottom <= self.row
        )

    def within(self, width: int, height: int) -> bool:
        return self.row >= 0 and self.col >= 0 and self.right <= width and self.bottom <= height


@dataclass(frozen=True)
class DashboardLayout:
    width: int
    height: int
    header: Rect
    left: Rect
    right: Rect
    bottom: Rect

    def rects(self) -> list[Rect]:
        return [self.header, self.left, self.right, self.bottom]
