from __future__ import annotations

from collections.abc import Sequence

from domain.models import AUTO_STACK_DEFAULT_HEIGHT, CANVAS_WIDTH_UNITS, GridItem, LayoutConfig


def visual_order(items: Sequence[GridItem], source_breakpoint: str) -> list[GridItem]:
    """Items sorted top to bottom at ``source_breakpoint``; lower z-index first on ties."""
    return sorted(
        items,
        key=lambda item: (_source_y(item, source_breakpoint), item.z_index or 0),
    )


def calculate_auto_stack_layout(
    item: GridItem,
    canvas_items: Sequence[GridItem],
    source_breakpoint: str,
) -> LayoutConfig:
    ordered = visual_order(canvas_items, source_breakpoint)
    position = next(
        (index for index, candidate in enumerate(ordered) if candidate.id == item.id), 0
    )
    y = sum(_source_height(previous, source_breakpoint) for previous in ordered[:position])
    return LayoutConfig(
        x=0,
        y=y,
        width=CANVAS_WIDTH_UNITS,
        height=_source_height(item, source_breakpoint),
        customized=False,
    )


def _source_y(item: GridItem, breakpoint: str) -> float:
    layout = item.layouts.get(breakpoint)
    if layout is None or layout.y is None:
        return 0
    return layout.y


def _source_height(item: GridItem, breakpoint: str) -> float:
    layout = item.layouts.get(breakpoint)
    if layout is None or layout.height is None:
        return AUTO_STACK_DEFAULT_HEIGHT
    return layout.height
