from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

CANVAS_WIDTH_UNITS = 50
DEFAULT_TOP_MARGIN = 2
DEFAULT_LEFT_MARGIN = 2
DEFAULT_BOTTOM_SPACING = 2
AUTO_STACK_DEFAULT_HEIGHT = 6
MAX_SCAN_Y = 200
DEFAULT_CANVAS_BOTTOM_MARGIN = 5

GridValue = Union[int, float]


class LayoutMode(str, Enum):
    MANUAL = "manual"
    STACK = "stack"
    INHERIT = "inherit"


class BreakpointDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    min_width: GridValue = Field(..., alias="minWidth")
    layout_mode: LayoutMode = Field(LayoutMode.MANUAL, alias="layoutMode")
    inherit_from: Optional[str] = Field(None, alias="inheritFrom")

    @field_validator("layout_mode", mode="before")
    @classmethod
    def default_layout_mode(cls, value: object) -> object:
        return LayoutMode.MANUAL if value in (None, "") else value


BreakpointConfig = Dict[str, BreakpointDefinition]


def normalize_breakpoints(config: Mapping[str, Any]) -> BreakpointConfig:
    """Accept both ``{"mobile": 0}`` and ``{"mobile": {"minWidth": 0, ...}}`` shapes."""
    normalized: BreakpointConfig = {}
    for name, value in config.items():
        if isinstance(value, BreakpointDefinition):
            normalized[str(name)] = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            normalized[str(name)] = BreakpointDefinition(
                min_width=value, layout_mode=LayoutMode.MANUAL
            )
        elif isinstance(value, Mapping):
            normalized[str(name)] = BreakpointDefinition.model_validate(dict(value))
        else:
            msg = f"Breakpoint '{name}' must be a number or an object, got: {value!r}"
            raise ValueError(msg)
    return normalized


DEFAULT_BREAKPOINTS: BreakpointConfig = {
    "mobile": BreakpointDefinition(min_width=0, layout_mode=LayoutMode.STACK),
    "desktop": BreakpointDefinition(min_width=768, layout_mode=LayoutMode.MANUAL),
}


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


class LayoutConfig(BaseModel):
    """Geometry of one item at one breakpoint, in grid units.

    ``None`` marks a field that is not resolved yet (inherited or auto-stacked).
    """

    model_config = ConfigDict(populate_by_name=True)

    x: Optional[GridValue] = None
    y: Optional[GridValue] = None
    width: Optional[GridValue] = None
    height: Optional[GridValue] = None
    customized: bool = False

    def is_unset(self) -> bool:
        return self.x is None and self.y is None and self.width is None and self.height is None

    def has_any_value(self) -> bool:
        return not self.is_unset()

    def as_rect(self) -> Rect | None:
        if self.x is None or self.y is None or self.width is None or self.height is None:
            return None
        return Rect(self.x, self.y, self.width, self.height)

    def with_customized(self, customized: bool) -> LayoutConfig:
        return self.model_copy(update={"customized": customized})


class GridItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    canvas_id: str = Field(..., alias="canvasId")
    type: str
    z_index: Optional[GridValue] = Field(None, alias="zIndex")
    layouts: Dict[str, LayoutConfig] = Field(default_factory=dict)
    config: Dict[str, Any] = Field(default_factory=dict)


class Canvas(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[GridItem] = Field(default_factory=list)
    z_index_counter: int = Field(0, alias="zIndexCounter")

    def next_z_index(self) -> int:
        return self.z_index_counter + 1

    def with_item(self, item: GridItem) -> Canvas:
        if item.z_index is None:
            item = item.model_copy(update={"z_index": self.next_z_index()})
        counter = self.z_index_counter
        if math.isfinite(item.z_index):
            counter = max(counter, int(item.z_index))
        return Canvas(items=[*self.items, item], z_index_counter=counter)


class CanvasDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    breakpoints: Dict[str, BreakpointDefinition] = Field(
        default_factory=lambda: dict(DEFAULT_BREAKPOINTS)
    )
    canvases: Dict[str, Canvas] = Field(default_factory=dict)

    @field_validator("breakpoints", mode="before")
    @classmethod
    def normalize_breakpoint_shapes(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return normalize_breakpoints(value)
        return value

    def canvas(self, canvas_id: str) -> Canvas | None:
        return self.canvases.get(canvas_id)

    def with_canvas(self, canvas_id: str, canvas: Canvas) -> CanvasDocument:
        canvases = dict(self.canvases)
        canvases[canvas_id] = canvas
        return self.model_copy(update={"canvases": canvases})

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ComponentSize(BaseModel):
    width: GridValue
    height: GridValue


class ComponentDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    default_size: ComponentSize = Field(..., alias="defaultSize")
    min_size: Optional[ComponentSize] = Field(None, alias="minSize")
    max_size: Optional[ComponentSize] = Field(None, alias="maxSize")


@dataclass(frozen=True)
class EffectiveLayout:
    layout: LayoutConfig
    source_breakpoint: str


@dataclass(frozen=True)
class ConstrainedSize:
    width: float
    height: float
    was_adjusted: bool


@dataclass(frozen=True)
class ConstrainedPlacement:
    x: float
    y: float
    width: float
    height: float
    position_adjusted: bool
    size_adjusted: bool


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str]

    @classmethod
    def from_errors(cls, errors: List[str]) -> ValidationResult:
        return cls(valid=not errors, errors=list(errors))


@dataclass(frozen=True)
class ItemPlacement:
    item_id: str
    source_breakpoint: str
    grid: Rect
    pixels: Rect
    auto_stacked: bool = False


@dataclass(frozen=True)
class CanvasLayoutPlan:
    canvas_id: str
    viewport: str
    placements: List[ItemPlacement]
    height_px: int
