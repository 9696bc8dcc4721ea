from __future__ import annotations

import logging
import math

from domain.models import (
    CANVAS_WIDTH_UNITS,
    DEFAULT_BOTTOM_SPACING,
    DEFAULT_LEFT_MARGIN,
    DEFAULT_TOP_MARGIN,
    MAX_SCAN_Y,
    Canvas,
    CanvasDocument,
    Point,
    Rect,
)
from domain.services.breakpoint_resolution import largest_breakpoint

logger = logging.getLogger(__name__)


def check_collision(first: Rect, second: Rect) -> bool:
    # Shared edges are not an overlap.
    if first.x + first.width <= second.x or second.x + second.width <= first.x:
        return False
    if first.y + first.height <= second.y or second.y + second.height <= first.y:
        return False
    return True


def collides_with_any(candidate: Rect, obstacles: list[Rect]) -> bool:
    return any(check_collision(candidate, obstacle) for obstacle in obstacles)


def canvas_obstacles(canvas: Canvas, breakpoint: str) -> list[Rect]:
    obstacles: list[Rect] = []
    for item in canvas.items:
        layout = item.layouts.get(breakpoint)
        rect = layout.as_rect() if layout is not None else None
        if rect is not None:
            obstacles.append(rect)
    return obstacles


def get_centered_position(width: float) -> Point:
    return Point(math.floor((CANVAS_WIDTH_UNITS - width) / 2), DEFAULT_TOP_MARGIN)


def get_bottom_position(canvas: Canvas | None, breakpoint: str) -> Point:
    if canvas is None or not canvas.items:
        return Point(0, 0)
    obstacles = canvas_obstacles(canvas, breakpoint)
    if not obstacles:
        return Point(0, 0)
    bottom = max(rect.bottom for rect in obstacles)
    return Point(0, bottom + DEFAULT_BOTTOM_SPACING)


def find_free_space(
    document: CanvasDocument,
    canvas_id: str,
    width: float,
    height: float,
    breakpoint: str | None = None,
) -> Point | None:
    canvas = document.canvas(canvas_id)
    if canvas is None:
        return None

    if not canvas.items:
        position = get_centered_position(width)
        logger.debug("Canvas %s is empty, centering new item at %s", canvas_id, position)
        return position

    reference = breakpoint or largest_breakpoint(document.breakpoints)
    obstacles = canvas_obstacles(canvas, reference)

    if DEFAULT_LEFT_MARGIN + width <= CANVAS_WIDTH_UNITS:
        anchor = Rect(DEFAULT_LEFT_MARGIN, DEFAULT_TOP_MARGIN, width, height)
        if not collides_with_any(anchor, obstacles):
            logger.debug("Placing new item on canvas %s at the top-left anchor", canvas_id)
            return Point(DEFAULT_LEFT_MARGIN, DEFAULT_TOP_MARGIN)

    last_x = math.floor(CANVAS_WIDTH_UNITS - width)
    for y in range(MAX_SCAN_Y):
        for x in range(last_x + 1):
            if not collides_with_any(Rect(x, y, width, height), obstacles):
                logger.debug("Grid scan found free space on canvas %s at (%s, %s)", canvas_id, x, y)
                return Point(x, y)

    position = get_bottom_position(canvas, reference)
    logger.debug("No free space on canvas %s, appending at %s", canvas_id, position)
    return position
