from __future__ import annotations

import pytest

from domain.models import BreakpointDefinition, LayoutConfig, LayoutMode
from domain.services.breakpoint_resolution import (
    EmptyBreakpointConfigError,
    InheritanceCycleError,
    UnknownBreakpointError,
    get_effective_layout,
    get_viewport_for_width,
    initialize_layouts,
    largest_breakpoint,
    should_auto_stack,
    smallest_breakpoint,
)
from tests.helpers.canvas_fixtures import custom, layout, make_item


def _bp(min_width: float, mode: LayoutMode = LayoutMode.MANUAL, inherit_from: str | None = None):
    return BreakpointDefinition(min_width=min_width, layout_mode=mode, inherit_from=inherit_from)


def test_viewport_switches_exactly_at_min_width() -> None:
    breakpoints = {"mobile": _bp(0), "desktop": _bp(768)}

    assert get_viewport_for_width(767, breakpoints) == "mobile"
    assert get_viewport_for_width(768, breakpoints) == "desktop"
    assert get_viewport_for_width(5000, breakpoints) == "desktop"


def test_viewport_picks_greatest_min_width_not_above_width() -> None:
    breakpoints = {"md": _bp(768), "xs": _bp(0), "xl": _bp(1200), "sm": _bp(576), "lg": _bp(992)}

    for width in (0, 575, 576, 700, 768, 991, 992, 1199, 1200, 1920):
        expected = max(
            (name for name, bp in breakpoints.items() if bp.min_width <= width),
            key=lambda name: breakpoints[name].min_width,
        )
        assert get_viewport_for_width(width, breakpoints) == expected


def test_viewport_falls_back_to_smallest_breakpoint() -> None:
    breakpoints = {"tablet": _bp(600), "desktop": _bp(1024)}

    assert get_viewport_for_width(320, breakpoints) == "tablet"
    assert smallest_breakpoint(breakpoints) == "tablet"
    assert largest_breakpoint(breakpoints) == "desktop"


def test_empty_breakpoint_config_fails_loudly() -> None:
    with pytest.raises(EmptyBreakpointConfigError):
        get_viewport_for_width(1000, {})


def test_customized_layout_wins(three_breakpoints) -> None:
    item = make_item(
        "a",
        {
            "desktop": custom(10, 20, 30, 40),
            "tablet": custom(1, 2, 3, 4),
            "mobile": layout(0, 0, 50, 40),
        },
    )

    effective = get_effective_layout(item, "tablet", three_breakpoints)

    assert effective.source_breakpoint == "tablet"
    assert effective.layout.x == 1


def test_inherit_mode_follows_inherit_from(three_breakpoints) -> None:
    item = make_item(
        "a",
        {
            "desktop": custom(10, 20, 30, 40),
            "tablet": layout(),
            "mobile": layout(0, 0, 50, 40),
        },
    )

    effective = get_effective_layout(item, "tablet", three_breakpoints)

    assert effective.source_breakpoint == "desktop"
    assert (effective.layout.x, effective.layout.y) == (10, 20)
    assert (effective.layout.width, effective.layout.height) == (30, 40)


def test_stack_layout_reports_nearest_customized_reference(three_breakpoints) -> None:
    item = make_item(
        "a",
        {
            "desktop": custom(10, 20, 30, 40),
            "tablet": custom(5, 5, 20, 10),
            "mobile": layout(0, 0, 50, 40),
        },
    )

    effective = get_effective_layout(item, "mobile", three_breakpoints)

    assert effective.layout is item.layouts["mobile"]
    assert effective.source_breakpoint == "tablet"


def test_stack_layout_without_customized_references_largest() -> None:
    breakpoints = {"mobile": _bp(0, LayoutMode.STACK), "desktop": _bp(768)}
    item = make_item("a", {"desktop": layout(1, 1, 5, 5), "mobile": layout(0, 0, 50, 5)})

    effective = get_effective_layout(item, "mobile", breakpoints)

    assert effective.source_breakpoint == "desktop"
    assert effective.layout is item.layouts["mobile"]


def test_all_null_stack_layout_falls_through_to_nearest_customized() -> None:
    breakpoints = {"mobile": _bp(0, LayoutMode.STACK), "desktop": _bp(768)}
    item = make_item("a", {"desktop": custom(3, 4, 5, 6), "mobile": layout()})

    effective = get_effective_layout(item, "mobile", breakpoints)

    assert effective.source_breakpoint == "desktop"
    assert effective.layout.x == 3


def test_nearest_customized_breaks_ties_by_config_order() -> None:
    breakpoints = {"low": _bp(500), "mid": _bp(700), "high": _bp(900), "top": _bp(2000)}
    item = make_item(
        "a",
        {
            "low": custom(1, 1, 1, 1),
            "mid": layout(2, 2, 2, 2),
            "high": custom(3, 3, 3, 3),
            "top": layout(4, 4, 4, 4),
        },
    )

    effective = get_effective_layout(item, "mid", breakpoints)

    assert effective.source_breakpoint == "low"


def test_falls_back_to_largest_breakpoint() -> None:
    breakpoints = {"mobile": _bp(0), "desktop": _bp(768)}
    item = make_item("a", {"desktop": layout(7, 8, 9, 10), "mobile": layout(0, 0, 1, 1)})

    effective = get_effective_layout(item, "mobile", breakpoints)

    assert effective.source_breakpoint == "desktop"
    assert effective.layout.x == 7


def test_deep_inherit_chain_resolves_without_recursion() -> None:
    depth = 2000
    breakpoints = {
        f"bp{index}": _bp(index, LayoutMode.INHERIT, inherit_from=f"bp{index + 1}")
        for index in range(depth)
    }
    breakpoints[f"bp{depth}"] = _bp(depth)
    layouts = {name: layout() for name in breakpoints}
    layouts[f"bp{depth}"] = custom(1, 2, 3, 4)
    item = make_item("a", layouts)

    effective = get_effective_layout(item, "bp0", breakpoints)

    assert effective.source_breakpoint == f"bp{depth}"
    assert effective.source_breakpoint in item.layouts


def test_inherit_cycle_is_reported() -> None:
    breakpoints = {
        "a": _bp(0, LayoutMode.INHERIT, inherit_from="b"),
        "b": _bp(100, LayoutMode.INHERIT, inherit_from="a"),
        "desktop": _bp(1000),
    }
    item = make_item("x", {"a": layout(), "b": layout(), "desktop": layout(1, 1, 1, 1)})

    with pytest.raises(InheritanceCycleError) as exc_info:
        get_effective_layout(item, "a", breakpoints)

    assert exc_info.value.path == ["a", "b", "a"]
    assert "a -> b -> a" in str(exc_info.value)


def test_unknown_target_breakpoint_raises(two_breakpoints) -> None:
    item = make_item("a", {"desktop": custom(0, 0, 1, 1)})

    with pytest.raises(UnknownBreakpointError):
        get_effective_layout(item, "watch", two_breakpoints)


def test_largest_breakpoint_never_auto_stacks() -> None:
    breakpoints = {"mobile": _bp(0, LayoutMode.STACK), "desktop": _bp(768, LayoutMode.STACK)}

    assert should_auto_stack("mobile", breakpoints)
    assert not should_auto_stack("desktop", breakpoints)
    assert not should_auto_stack("missing", breakpoints)


def test_initialize_layouts_by_mode() -> None:
    breakpoints = {
        "mobile": _bp(0, LayoutMode.STACK),
        "tablet": _bp(768, LayoutMode.INHERIT, inherit_from="desktop"),
        "small": _bp(500),
        "desktop": _bp(1024),
    }
    base = LayoutConfig(x=4, y=6, width=20, height=8)

    layouts = initialize_layouts(breakpoints, base)

    assert list(layouts) == ["desktop", "tablet", "small", "mobile"]
    assert [name for name, value in layouts.items() if value.customized] == ["desktop"]
    assert layouts["desktop"].model_dump() == {
        "x": 4, "y": 6, "width": 20, "height": 8, "customized": True
    }
    assert layouts["mobile"].model_dump() == {
        "x": 0, "y": 0, "width": 50, "height": 8, "customized": False
    }
    assert layouts["tablet"].is_unset()
    assert not layouts["tablet"].customized
    assert layouts["small"].model_dump() == {
        "x": 4, "y": 6, "width": 20, "height": 8, "customized": False
    }
    assert not base.customized
