"""Fixed dashboard geometry: header, two top panels and one bottom panel."""

from __future__ import annotations

from status_core.models import DashboardLayout, Rect

HEADER_ROWS = 2
BODY_TOP = HEADER_ROWS + 1
MARGIN = 1
MIN_WIDTH = 40
MIN_HEIGHT = 12
MIN_PANEL_HEIGHT = 3
MIN_PANEL_WIDTH = 4


class LayoutError(RuntimeError):
    """Panel rectangles overlap or leave the screen: a geometry bug."""


def compute_layout(width: int, height: int) -> DashboardLayout:
    width = max(MIN_WIDTH, int(width))
    height = max(MIN_HEIGHT, int(height))

    body_height = height - BODY_TOP
    top_height = max(MIN_PANEL_HEIGHT, body_height // 2)
    bottom_height = max(MIN_PANEL_HEIGHT, body_height - top_height)

    half = width // 2
    left_width = max(MIN_PANEL_WIDTH, half - MARGIN)
    right_col = half + MARGIN
    right_width = max(MIN_PANEL_WIDTH, (width - half) - MARGIN)

    return DashboardLayout(
        width=width,
        height=height,
        header=Rect(0, 0, width, HEADER_ROWS),
        left=Rect(BODY_TOP, 0, left_width, top_height),
        right=Rect(BODY_TOP, right_col, right_width, top_height),
        bottom=Rect(BODY_TOP + top_height, 0, width, bottom_height),
    )


def validate_layout(layout: DashboardLayout) -> None:
    rects = layout.rects()
    for rect in rects:
        if not rect.within(layout.width, layout.height):
            raise LayoutError(f"{rect} exceeds {layout.width}x{layout.height}")
    for i, first in enumerate(rects):
        for second in rects[i + 1 :]:
            if first.overlaps(second):
                raise LayoutError(f"{first} overlaps {second}")
