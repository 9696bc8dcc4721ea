from __future__ import annotations

import logging
import math

from domain.models import (
    CANVAS_WIDTH_UNITS,
    ComponentDefinition,
    ComponentSize,
    ConstrainedPlacement,
    ConstrainedSize,
)

logger = logging.getLogger(__name__)


def can_component_fit_canvas(min_width: float, canvas_width: float = CANVAS_WIDTH_UNITS) -> bool:
    # Height is unbounded, only width can rule a component out.
    return min_width <= canvas_width


def constrain_size_to_canvas(
    default_size: ComponentSize,
    min_size: ComponentSize | None = None,
    max_size: ComponentSize | None = None,
    canvas_width: float = CANVAS_WIDTH_UNITS,
) -> ConstrainedSize:
    min_width = min_size.width if min_size else 0
    min_height = min_size.height if min_size else 0
    max_width = max_size.width if max_size else math.inf
    max_height = max_size.height if max_size else math.inf

    width = default_size.width
    # Only shrinking to the canvas counts as an adjustment, min/max clamping does not.
    was_adjusted = False
    if width > canvas_width:
        width = canvas_width
        was_adjusted = True
    width = max(width, min_width)
    width = min(width, max_width)

    height = max(default_size.height, min_height)
    height = min(height, max_height)

    return ConstrainedSize(width=width, height=height, was_adjusted=was_adjusted)


def constrain_position_to_canvas(
    x: float,
    y: float,
    width: float,
    height: float,
    canvas_width: float = CANVAS_WIDTH_UNITS,
) -> ConstrainedPlacement:
    new_x = x
    new_y = y
    adjusted = False

    if new_x < 0:
        new_x = 0
        adjusted = True
    if new_x + width > canvas_width:
        new_x = canvas_width - width
        adjusted = True
    if new_y < 0:
        new_y = 0
        adjusted = True

    # A component wider than the canvas still starts at the left edge.
    new_x = max(0, new_x)

    return ConstrainedPlacement(
        x=new_x,
        y=new_y,
        width=width,
        height=height,
        position_adjusted=adjusted,
        size_adjusted=False,
    )


def apply_boundary_constraints(
    definition: ComponentDefinition,
    x: float,
    y: float,
    canvas_width: float = CANVAS_WIDTH_UNITS,
) -> ConstrainedPlacement | None:
    min_width = definition.min_size.width if definition.min_size else 0
    if not can_component_fit_canvas(min_width, canvas_width):
        logger.warning(
            "Component %r min width %s exceeds canvas width %s, placement rejected",
            definition.name,
            min_width,
            canvas_width,
        )
        return None

    size = constrain_size_to_canvas(
        definition.default_size, definition.min_size, definition.max_size, canvas_width
    )
    placement = constrain_position_to_canvas(x, y, size.width, size.height, canvas_width)
    return ConstrainedPlacement(
        x=placement.x,
        y=placement.y,
        width=placement.width,
        height=placement.height,
        position_adjusted=placement.position_adjusted,
        size_adjusted=size.was_adjusted,
    )
