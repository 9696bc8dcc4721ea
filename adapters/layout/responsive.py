from __future__ import annotations

import logging
from typing import List

from adapters.layout.grid import CoordinateMapper
from domain.models import CanvasDocument, CanvasLayoutPlan, ItemPlacement, Rect
from domain.ports.layout import CanvasLayoutEngine
from domain.services.auto_stack import calculate_auto_stack_layout
from domain.services.breakpoint_resolution import (
    get_effective_layout,
    get_viewport_for_width,
    should_auto_stack,
)
from domain.services.canvas_height import calculate_height_from_rects

logger = logging.getLogger(__name__)


class ResponsiveGridLayoutEngine(CanvasLayoutEngine):
    def __init__(self, mapper: CoordinateMapper | None = None) -> None:
        self.mapper = mapper or CoordinateMapper()

    def build_plan(
        self, document: CanvasDocument, canvas_id: str, container_width: float
    ) -> CanvasLayoutPlan:
        breakpoints = document.breakpoints
        viewport = get_viewport_for_width(container_width, breakpoints)
        canvas = document.canvas(canvas_id)
        if canvas is None:
            return CanvasLayoutPlan(
                canvas_id=canvas_id, viewport=viewport, placements=[], height_px=0
            )

        self.mapper.prime_cache(canvas_id, container_width)
        stacked = should_auto_stack(viewport, breakpoints)

        placements: List[ItemPlacement] = []
        for item in canvas.items:
            effective = get_effective_layout(item, viewport, breakpoints)
            layout = effective.layout
            if stacked:
                layout = calculate_auto_stack_layout(
                    item, canvas.items, effective.source_breakpoint
                )
            grid = layout.as_rect()
            if grid is None:
                logger.debug(
                    "Item %s has no resolved geometry at %s, skipping", item.id, viewport
                )
                continue
            placements.append(
                ItemPlacement(
                    item_id=item.id,
                    source_breakpoint=effective.source_breakpoint,
                    grid=grid,
                    pixels=self._to_pixels(grid, canvas_id),
                    auto_stacked=stacked,
                )
            )

        height_px = calculate_height_from_rects(
            (placement.grid for placement in placements),
            self.mapper,
            self.mapper.config.canvas_bottom_margin,
        )
        return CanvasLayoutPlan(
            canvas_id=canvas_id, viewport=viewport, placements=placements, height_px=height_px
        )

    def _to_pixels(self, grid: Rect, canvas_id: str) -> Rect:
        return Rect(
            x=self.mapper.grid_to_pixels_x(grid.x, canvas_id),
            y=self.mapper.grid_to_pixels_y(grid.y),
            width=self.mapper.grid_to_pixels_x(grid.width, canvas_id),
            height=self.mapper.grid_to_pixels_y(grid.height),
        )
