from __future__ import annotations

from collections.abc import Mapping, Sequence

from domain.models import (
    CANVAS_WIDTH_UNITS,
    BreakpointDefinition,
    EffectiveLayout,
    GridItem,
    LayoutConfig,
    LayoutMode,
)


class LayoutResolutionError(ValueError):
    pass


class EmptyBreakpointConfigError(LayoutResolutionError):
    def __init__(self) -> None:
        super().__init__("Breakpoint config must define at least one breakpoint")


class UnknownBreakpointError(LayoutResolutionError):
    def __init__(self, breakpoint: str) -> None:
        self.breakpoint = breakpoint
        super().__init__(f"Unknown breakpoint: {breakpoint}")


class InheritanceCycleError(LayoutResolutionError):
    def __init__(self, path: Sequence[str]) -> None:
        self.path = list(path)
        super().__init__(f"Breakpoint inheritance cycle: {' -> '.join(self.path)}")


def breakpoints_by_min_width(breakpoints: Mapping[str, BreakpointDefinition]) -> list[str]:
    """Breakpoint names, largest ``min_width`` first."""
    if not breakpoints:
        raise EmptyBreakpointConfigError()
    return sorted(breakpoints, key=lambda name: -breakpoints[name].min_width)


def largest_breakpoint(breakpoints: Mapping[str, BreakpointDefinition]) -> str:
    return breakpoints_by_min_width(breakpoints)[0]


def smallest_breakpoint(breakpoints: Mapping[str, BreakpointDefinition]) -> str:
    return breakpoints_by_min_width(breakpoints)[-1]


def effective_layout_mode(
    breakpoint: str,
    breakpoints: Mapping[str, BreakpointDefinition],
    largest: str | None = None,
) -> LayoutMode:
    definition = breakpoints.get(breakpoint)
    if definition is None:
        raise UnknownBreakpointError(breakpoint)
    # The largest breakpoint is the final fallback target, so it is always manual.
    if breakpoint == (largest or largest_breakpoint(breakpoints)):
        return LayoutMode.MANUAL
    return definition.layout_mode


def get_viewport_for_width(
    width: float, breakpoints: Mapping[str, BreakpointDefinition]
) -> str:
    ordered = breakpoints_by_min_width(breakpoints)
    for name in ordered:
        if width >= breakpoints[name].min_width:
            return name
    return ordered[-1]


def should_auto_stack(breakpoint: str, breakpoints: Mapping[str, BreakpointDefinition]) -> bool:
    if breakpoint not in breakpoints:
        return False
    return effective_layout_mode(breakpoint, breakpoints) == LayoutMode.STACK


def find_inheritance_cycle(
    start: str, breakpoints: Mapping[str, BreakpointDefinition]
) -> list[str] | None:
    path: list[str] = []
    current: str | None = start
    while current is not None and current in breakpoints:
        if current in path:
            return path[path.index(current):] + [current]
        path.append(current)
        definition = breakpoints[current]
        if definition.layout_mode != LayoutMode.INHERIT:
            return None
        current = definition.inherit_from
    return None


def get_effective_layout(
    item: GridItem,
    target_breakpoint: str,
    breakpoints: Mapping[str, BreakpointDefinition],
) -> EffectiveLayout:
    """Resolve the layout an item renders with at ``target_breakpoint``.

    Order: explicit customization, stack layout with a reference breakpoint,
    ``inherit_from`` chain, nearest customized breakpoint by ``min_width``,
    and finally the largest breakpoint.
    """
    if target_breakpoint not in breakpoints:
        raise UnknownBreakpointError(target_breakpoint)

    largest = largest_breakpoint(breakpoints)
    chain: list[str] = []
    visited: set[str] = set()
    current = target_breakpoint
    while True:
        if current in visited:
            raise InheritanceCycleError(chain[chain.index(current):] + [current])
        chain.append(current)
        visited.add(current)

        layout = item.layouts.get(current)
        mode = effective_layout_mode(current, breakpoints, largest)

        if layout is not None and layout.customized:
            return EffectiveLayout(layout=layout, source_breakpoint=current)

        if mode == LayoutMode.STACK and layout is not None and layout.has_any_value():
            reference = _nearest_customized(item, breakpoints, breakpoints[current].min_width)
            return EffectiveLayout(
                layout=layout,
                source_breakpoint=reference or largest,
            )

        parent = breakpoints[current].inherit_from
        if (
            mode == LayoutMode.INHERIT
            and parent
            and parent in item.layouts
            and parent in breakpoints
        ):
            current = parent
            continue
        break

    nearest = _nearest_customized(item, breakpoints, breakpoints[current].min_width)
    if nearest is not None:
        return EffectiveLayout(layout=item.layouts[nearest], source_breakpoint=nearest)

    return EffectiveLayout(
        layout=item.layouts.get(largest) or LayoutConfig(),
        source_breakpoint=largest,
    )


def _nearest_customized(
    item: GridItem,
    breakpoints: Mapping[str, BreakpointDefinition],
    target_width: float,
) -> str | None:
    nearest: str | None = None
    best_distance = 0.0
    for name, definition in breakpoints.items():
        layout = item.layouts.get(name)
        if layout is None or not layout.customized:
            continue
        distance = abs(definition.min_width - target_width)
        # Strict comparison keeps the first breakpoint in config order on ties.
        if nearest is None or distance < best_distance:
            nearest = name
            best_distance = distance
    return nearest


def initialize_layouts(
    breakpoints: Mapping[str, BreakpointDefinition],
    base_layout: LayoutConfig,
) -> dict[str, LayoutConfig]:
    ordered = breakpoints_by_min_width(breakpoints)
    layouts: dict[str, LayoutConfig] = {ordered[0]: base_layout.with_customized(True)}
    for name in ordered[1:]:
        mode = breakpoints[name].layout_mode
        if mode == LayoutMode.STACK:
            layouts[name] = LayoutConfig(
                x=0,
                y=0,
                width=CANVAS_WIDTH_UNITS,
                height=base_layout.height,
                customized=False,
            )
        elif mode == LayoutMode.INHERIT:
            layouts[name] = LayoutConfig(customized=False)
        else:
            layouts[name] = base_layout.with_customized(False)
    return layouts
