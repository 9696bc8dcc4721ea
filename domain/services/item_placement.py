from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from domain.models import CanvasDocument, ComponentDefinition, GridItem, LayoutConfig
from domain.services.boundary_constraints import apply_boundary_constraints
from domain.services.breakpoint_resolution import initialize_layouts
from domain.services.space_finder import find_free_space


def place_new_item(
    document: CanvasDocument,
    canvas_id: str,
    item_id: str,
    definition: ComponentDefinition,
    item_type: str,
    config: Mapping[str, Any] | None = None,
) -> GridItem | None:
    """Build a new item at the first free spot of a canvas.

    The document is left untouched; append the result with ``Canvas.with_item``.
    """
    canvas = document.canvas(canvas_id)
    if canvas is None:
        return None

    position = find_free_space(
        document,
        canvas_id,
        definition.default_size.width,
        definition.default_size.height,
    )
    if position is None:
        return None

    placement = apply_boundary_constraints(definition, position.x, position.y)
    if placement is None:
        return None

    base_layout = LayoutConfig(
        x=placement.x,
        y=placement.y,
        width=placement.width,
        height=placement.height,
        customized=True,
    )
    return GridItem(
        id=item_id,
        canvas_id=canvas_id,
        type=item_type,
        z_index=canvas.next_z_index(),
        layouts=initialize_layouts(document.breakpoints, base_layout),
        config=dict(config or {}),
    )
