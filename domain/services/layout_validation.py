from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from domain.models import (
    CANVAS_WIDTH_UNITS,
    BreakpointDefinition,
    GridItem,
    LayoutConfig,
    LayoutMode,
    ValidationResult,
)
from domain.services.breakpoint_resolution import find_inheritance_cycle, largest_breakpoint

LAYOUT_BOUNDS: dict[str, tuple[float, float]] = {
    "x": (0, math.inf),
    "y": (0, math.inf),
    "width": (1, CANVAS_WIDTH_UNITS),
    "height": (1, 100),
}


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _layout_value(layout: LayoutConfig | Mapping[str, Any], field: str) -> Any:
    if isinstance(layout, Mapping):
        return layout.get(field)
    return getattr(layout, field, None)


def validate_layout(
    layout: LayoutConfig | Mapping[str, Any] | None, label: str
) -> ValidationResult:
    if layout is None:
        return ValidationResult.from_errors([f"{label} layout is missing"])

    errors: list[str] = []
    for field, (lower, upper) in LAYOUT_BOUNDS.items():
        value = _layout_value(layout, field)
        if not _is_finite_number(value):
            errors.append(f"{label} layout.{field} must be a finite number, got: {value}")
            continue
        if upper == math.inf:
            if value < lower:
                errors.append(f"{label} layout.{field} must be >= {lower}, got: {value}")
        elif value < lower or value > upper:
            errors.append(
                f"{label} layout.{field} must be between {lower}-{upper}, got: {value}"
            )
    return ValidationResult.from_errors(errors)


def validate_grid_item(
    item: GridItem, breakpoints: Mapping[str, BreakpointDefinition]
) -> ValidationResult:
    errors: list[str] = []
    for field in ("id", "canvas_id", "type"):
        value = getattr(item, field)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"Item.{field} must be a non-empty string, got: {value!r}")
    if item.z_index is not None and not _is_finite_number(item.z_index):
        errors.append(f"Item.z_index must be a finite number, got: {item.z_index}")

    largest = largest_breakpoint(breakpoints)
    if largest not in item.layouts:
        errors.append(f"{largest} layout is missing")

    for name, layout in item.layouts.items():
        if name not in breakpoints:
            errors.append(f"Item.layouts has unknown breakpoint: {name}")
            continue
        # Inherit placeholders are all-null by construction.
        if layout.is_unset() and name != largest:
            continue
        errors.extend(validate_layout(layout, name).errors)
    return ValidationResult.from_errors(errors)


def validate_item_updates(updates: Any) -> ValidationResult:
    if not isinstance(updates, Mapping):
        return ValidationResult.from_errors(["Updates must be an object"])

    errors: list[str] = []
    if "layouts" in updates:
        layouts = updates["layouts"]
        if not isinstance(layouts, Mapping):
            errors.append("Updates.layouts must be an object")
        else:
            for name, layout in layouts.items():
                if isinstance(layout, (Mapping, LayoutConfig)):
                    errors.extend(validate_layout(layout, str(name)).errors)
                else:
                    errors.append(f"Updates.layouts.{name} must be an object")

    for key in ("zIndex", "z_index"):
        if key in updates and not _is_finite_number(updates[key]):
            errors.append(f"Updates.{key} must be a finite number, got: {updates[key]}")

    if "config" in updates and not isinstance(updates["config"], Mapping):
        errors.append(
            f"Updates.config must be an object, got: {type(updates['config']).__name__}"
        )
    return ValidationResult.from_errors(errors)


def validate_breakpoints(breakpoints: Mapping[str, BreakpointDefinition]) -> ValidationResult:
    if not breakpoints:
        return ValidationResult.from_errors(["Breakpoint config must not be empty"])

    errors: list[str] = []
    owners: dict[float, str] = {}
    for name, definition in breakpoints.items():
        owner = owners.get(definition.min_width)
        if owner is not None:
            errors.append(
                f"Breakpoints {owner} and {name} share minWidth {definition.min_width}"
            )
        else:
            owners[definition.min_width] = name

    reported: set[frozenset[str]] = set()
    for name, definition in breakpoints.items():
        if definition.layout_mode != LayoutMode.INHERIT:
            continue
        parent = definition.inherit_from
        if not parent:
            errors.append(f"Breakpoint {name} uses inherit mode without inheritFrom")
        elif parent == name:
            errors.append(f"Breakpoint {name} inherits from itself")
        elif parent not in breakpoints:
            errors.append(f"Breakpoint {name} inherits from unknown breakpoint {parent}")
        else:
            cycle = find_inheritance_cycle(name, breakpoints)
            if cycle is not None and frozenset(cycle) not in reported:
                reported.add(frozenset(cycle))
                errors.append(f"Breakpoint inheritance cycle: {' -> '.join(cycle)}")
    return ValidationResult.from_errors(errors)
