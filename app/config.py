from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.grid import GridConfig
from domain.models import (
    DEFAULT_BREAKPOINTS,
    DEFAULT_CANVAS_BOTTOM_MARGIN,
    BreakpointDefinition,
    normalize_breakpoints,
)

DEFAULT_CONFIG_PATH = Path("config/grid.yaml")


class GridSettings(BaseModel):
    grid_size_percent: float = Field(2.0, gt=0)
    min_grid_size: float = Field(10.0, ge=0)
    max_grid_size: float = Field(50.0, ge=0)
    vertical_grid_size: float = Field(20.0, gt=0)
    canvas_bottom_margin: float = Field(DEFAULT_CANVAS_BOTTOM_MARGIN, ge=0)
    instance_id: str | None = None
    breakpoints: Dict[str, BreakpointDefinition] = Field(
        default_factory=lambda: dict(DEFAULT_BREAKPOINTS)
    )

    @field_validator("instance_id", mode="before")
    @classmethod
    def normalize_instance_id(cls, value: object) -> str | None:
        normalized = str(value or "").strip()
        return normalized or None

    @field_validator("breakpoints", mode="before")
    @classmethod
    def normalize_breakpoint_config(cls, value: object) -> object:
        if value is None or value == "":
            return dict(DEFAULT_BREAKPOINTS)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                msg = "grid.breakpoints must be a JSON object"
                raise ValueError(msg) from exc
        if not isinstance(value, dict):
            msg = "grid.breakpoints must be a JSON object"
            raise ValueError(msg)
        if not value:
            msg = "grid.breakpoints must define at least one breakpoint"
            raise ValueError(msg)
        return normalize_breakpoints(value)

    @model_validator(mode="after")
    def check_grid_size_range(self) -> GridSettings:
        if self.min_grid_size > self.max_grid_size:
            msg = "grid.min_grid_size must not exceed grid.max_grid_size"
            raise ValueError(msg)
        return self

    def to_grid_config(self) -> GridConfig:
        return GridConfig(
            grid_size_percent=self.grid_size_percent,
            min_grid_size=self.min_grid_size,
            max_grid_size=self.max_grid_size,
            vertical_grid_size=self.vertical_grid_size,
            canvas_bottom_margin=self.canvas_bottom_margin,
            instance_id=self.instance_id,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GRID_", env_nested_delimiter="__")

    grid: GridSettings = GridSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Reads nothing unless a subclass sets ``yaml_file``; env always wins over the file.
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Explicit path, then ``GRID_CONFIG_PATH``, then ``config/grid.yaml`` if present."""
    if config_path is not None:
        return config_path
    env_path = os.getenv("GRID_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_settings(config_path: Path | None = None) -> AppSettings:
    path = resolve_config_path(config_path)
    if path is None:
        return AppSettings()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    class FileSettings(AppSettings):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileSettings()
