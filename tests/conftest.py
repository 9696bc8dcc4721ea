from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, GridSettings
from domain.models import BreakpointDefinition, CanvasDocument, GridItem, LayoutMode
from tests.helpers.canvas_fixtures import make_document


def _clear_grid_env() -> None:
    for key in list(os.environ):
        if key.startswith("GRID_"):
            os.environ.pop(key, None)


_clear_grid_env()


@pytest.fixture(autouse=True)
def clear_grid_env() -> Generator[None, None, None]:
    _clear_grid_env()
    yield
    _clear_grid_env()


@pytest.fixture
def two_breakpoints() -> dict[str, BreakpointDefinition]:
    return {
        "mobile": BreakpointDefinition(min_width=0, layout_mode=LayoutMode.STACK),
        "desktop": BreakpointDefinition(min_width=768, layout_mode=LayoutMode.MANUAL),
    }


@pytest.fixture
def three_breakpoints() -> dict[str, BreakpointDefinition]:
    return {
        "mobile": BreakpointDefinition(min_width=0, layout_mode=LayoutMode.STACK),
        "tablet": BreakpointDefinition(
            min_width=768, layout_mode=LayoutMode.INHERIT, inherit_from="desktop"
        ),
        "desktop": BreakpointDefinition(min_width=1024, layout_mode=LayoutMode.MANUAL),
    }


@pytest.fixture
def document_factory(
    two_breakpoints: dict[str, BreakpointDefinition],
) -> Callable[..., CanvasDocument]:
    def _factory(*items: GridItem, **overrides: object) -> CanvasDocument:
        breakpoints = overrides.pop("breakpoints", two_breakpoints)
        canvas_id = str(overrides.pop("canvas_id", "main"))
        return make_document(list(items), breakpoints=breakpoints, canvas_id=canvas_id)

    return _factory


@pytest.fixture
def grid_settings() -> GridSettings:
    return GridSettings(
        grid_size_percent=2,
        min_grid_size=10,
        max_grid_size=50,
        vertical_grid_size=20,
        canvas_bottom_margin=5,
    )


@pytest.fixture
def app_settings(grid_settings: GridSettings) -> AppSettings:
    return AppSettings(grid=grid_settings)
