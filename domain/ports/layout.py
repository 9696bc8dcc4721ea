from __future__ import annotations

from typing import Protocol

from domain.models import CanvasDocument, CanvasLayoutPlan


class ContainerWidthProvider(Protocol):
    def container_width(self, canvas_id: str) -> float | None:
        ...


class VerticalGridConverter(Protocol):
    def grid_to_pixels_y(self, grid_units: float) -> int:
        ...


class CanvasLayoutEngine(Protocol):
    def build_plan(
        self, document: CanvasDocument, canvas_id: str, container_width: float
    ) -> CanvasLayoutPlan:
        ...
