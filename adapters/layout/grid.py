from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from domain.models import DEFAULT_CANVAS_BOTTOM_MARGIN
from domain.ports.layout import ContainerWidthProvider

logger = logging.getLogger(__name__)

# Containers this narrow have not been laid out yet.
MIN_CACHEABLE_CONTAINER_WIDTH = 100.0

CacheKey = Tuple[str, str]


@dataclass(frozen=True)
class GridConfig:
    grid_size_percent: float = 2.0  # whole-number percent of container width per unit
    min_grid_size: float = 10.0
    max_grid_size: float = 50.0
    vertical_grid_size: float = 20.0
    canvas_bottom_margin: float = DEFAULT_CANVAS_BOTTOM_MARGIN
    instance_id: str | None = None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class GridSizeCache:
    entries: Dict[CacheKey, float] = field(default_factory=dict)

    def get(self, key: CacheKey) -> float | None:
        return self.entries.get(key)

    def set(self, key: CacheKey, size: float) -> None:
        self.entries[key] = size

    def clear(self, instance_id: str | None = None) -> None:
        if instance_id is None:
            self.entries.clear()
            return
        for key in [key for key in self.entries if key[0] == instance_id]:
            del self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


class StaticContainerWidths(ContainerWidthProvider):
    def __init__(self, widths: Mapping[str, float] | None = None) -> None:
        self.widths: Dict[str, float] = dict(widths or {})

    def container_width(self, canvas_id: str) -> float | None:
        return self.widths.get(canvas_id)

    def resize(self, canvas_id: str, width: float) -> None:
        self.widths[canvas_id] = width


class CoordinateMapper:
    """Converts between pixels and grid units.

    The horizontal unit follows the container width and is cached per canvas;
    the vertical unit is a fixed pixel size.
    """

    def __init__(
        self,
        config: GridConfig | None = None,
        width_provider: ContainerWidthProvider | None = None,
        cache: GridSizeCache | None = None,
    ) -> None:
        self.config = config or GridConfig()
        self.width_provider = width_provider
        self.cache = cache if cache is not None else GridSizeCache()

    def cache_key(self, canvas_id: str) -> CacheKey:
        return (self.config.instance_id or "", canvas_id)

    def grid_size_for_width(self, container_width: float) -> float:
        raw_size = container_width * self.config.grid_size_percent / 100
        return max(self.config.min_grid_size, min(self.config.max_grid_size, raw_size))

    def grid_size_horizontal(self, canvas_id: str, force_recalc: bool = False) -> float:
        key = self.cache_key(canvas_id)
        if not force_recalc:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        width = self.width_provider.container_width(canvas_id) if self.width_provider else None
        if width is None:
            logger.warning("Canvas container not found: %s", canvas_id)
            return 0.0

        size = self.grid_size_for_width(width)
        if width > MIN_CACHEABLE_CONTAINER_WIDTH:
            self.cache.set(key, size)
        return size

    def grid_size_vertical(self) -> float:
        return self.config.vertical_grid_size

    def prime_cache(self, canvas_id: str, container_width: float) -> None:
        if container_width <= 0:
            logger.debug("Skipping grid size cache for %s at width %s", canvas_id, container_width)
            return
        self.cache.set(self.cache_key(canvas_id), self.grid_size_for_width(container_width))

    def invalidate(self, all_instances: bool = False) -> None:
        self.cache.clear(None if all_instances else self.config.instance_id or "")

    def grid_to_pixels_x(self, grid_units: float, canvas_id: str) -> int:
        return round_half_up(grid_units * self.grid_size_horizontal(canvas_id))

    def grid_to_pixels_y(self, grid_units: float) -> int:
        return round_half_up(grid_units * self.grid_size_vertical())

    def pixels_to_grid_x(self, pixels: float, canvas_id: str) -> int:
        grid_size = self.grid_size_horizontal(canvas_id)
        if grid_size == 0:
            return 0
        return round_half_up(pixels / grid_size)

    def pixels_to_grid_y(self, pixels: float) -> int:
        grid_size = self.grid_size_vertical()
        if grid_size == 0:
            return 0
        return round_half_up(pixels / grid_size)
