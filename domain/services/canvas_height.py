from __future__ import annotations

from collections.abc import Iterable, Sequence

from domain.models import DEFAULT_CANVAS_BOTTOM_MARGIN, CanvasDocument, GridItem, Rect
from domain.ports.layout import VerticalGridConverter


def calculate_height_from_rects(
    rects: Iterable[Rect],
    converter: VerticalGridConverter,
    bottom_margin: float = DEFAULT_CANVAS_BOTTOM_MARGIN,
) -> int:
    bottoms = [rect.bottom for rect in rects]
    if not bottoms:
        return 0
    return converter.grid_to_pixels_y(max(0, max(bottoms)) + bottom_margin)


def calculate_canvas_height_from_items(
    items: Sequence[GridItem],
    viewport: str,
    converter: VerticalGridConverter,
    bottom_margin: float = DEFAULT_CANVAS_BOTTOM_MARGIN,
) -> int:
    if not items:
        return 0
    rects: list[Rect] = []
    for item in items:
        layout = item.layouts.get(viewport)
        # Stack and inherit layouts may carry null geometry.
        y = layout.y if layout is not None and layout.y is not None else 0
        height = layout.height if layout is not None and layout.height is not None else 0
        rects.append(Rect(0, y, 0, height))
    return calculate_height_from_rects(rects, converter, bottom_margin)


def calculate_canvas_height(
    document: CanvasDocument,
    canvas_id: str,
    viewport: str,
    converter: VerticalGridConverter,
    bottom_margin: float = DEFAULT_CANVAS_BOTTOM_MARGIN,
) -> int:
    canvas = document.canvas(canvas_id)
    if canvas is None or not canvas.items:
        return 0
    return calculate_canvas_height_from_items(canvas.items, viewport, converter, bottom_margin)
