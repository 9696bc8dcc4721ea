from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.filesystem.canvas_repository import FileSystemCanvasRepository
from adapters.layout.grid import CoordinateMapper, StaticContainerWidths
from adapters.layout.responsive import ResponsiveGridLayoutEngine
from app.config import AppSettings, load_settings
from domain.models import CanvasDocument, ComponentDefinition, ComponentSize
from domain.services.breakpoint_resolution import LayoutResolutionError
from domain.services.item_placement import place_new_item
from domain.services.layout_validation import validate_breakpoints, validate_grid_item

app = typer.Typer(no_args_is_help=True)
console = Console()


def _load_document(path: Path, settings: AppSettings) -> CanvasDocument:
    if not path.exists():
        console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=1)
    try:
        document = FileSystemCanvasRepository().load(path)
    except (ValidationError, TypeError, ValueError) as exc:
        console.print(f"[red]Invalid canvas document:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if "breakpoints" not in document.model_fields_set:
        document = document.model_copy(update={"breakpoints": dict(settings.grid.breakpoints)})
    return document


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(..., help="Canvas document JSON file."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = load_settings(config_path)
    document = _load_document(input_path, settings)

    errors = list(validate_breakpoints(document.breakpoints).errors)
    if not errors:
        for canvas_id, canvas in document.canvases.items():
            for item in canvas.items:
                result = validate_grid_item(item, document.breakpoints)
                errors.extend(f"{canvas_id}/{item.id}: {message}" for message in result.errors)

    if errors:
        for message in errors:
            console.print(f"[red]-[/] {message}")
        console.print(f"[red]Validation failed:[/] {len(errors)} problem(s) in {input_path}")
        raise typer.Exit(code=1)
    console.print(f"[green]Valid canvas document:[/] {input_path}")


@app.command("resolve")
def resolve(
    input_path: Path = typer.Argument(..., help="Canvas document JSON file."),
    width: float = typer.Option(..., "--width", help="Container width in pixels."),
    canvas_id: Optional[str] = typer.Option(None, "--canvas", help="Only this canvas."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = load_settings(config_path)
    document = _load_document(input_path, settings)
    canvas_ids = [canvas_id] if canvas_id else list(document.canvases)

    mapper = CoordinateMapper(
        settings.grid.to_grid_config(),
        StaticContainerWidths({name: width for name in canvas_ids}),
    )
    engine = ResponsiveGridLayoutEngine(mapper)
    for name in canvas_ids:
        if document.canvas(name) is None:
            console.print(f"[yellow]Canvas not found:[/] {name}")
            continue
        try:
            plan = engine.build_plan(document, name, width)
        except LayoutResolutionError as exc:
            console.print(f"[red]Layout resolution failed:[/] {exc}")
            raise typer.Exit(code=1) from exc

        table = Table(title=f"{name} @ {width:g}px → {plan.viewport} ({plan.height_px}px tall)")
        for column in ("item", "source", "x", "y", "width", "height", "px"):
            table.add_column(column)
        for placement in plan.placements:
            grid = placement.grid
            pixels = placement.pixels
            table.add_row(
                placement.item_id,
                placement.source_breakpoint + (" (stack)" if placement.auto_stacked else ""),
                f"{grid.x:g}",
                f"{grid.y:g}",
                f"{grid.width:g}",
                f"{grid.height:g}",
                f"{pixels.x:g},{pixels.y:g} {pixels.width:g}x{pixels.height:g}",
            )
        console.print(table)


@app.command("place")
def place(
    input_path: Path = typer.Argument(..., help="Canvas document JSON file."),
    canvas_id: str = typer.Option(..., "--canvas", help="Target canvas id."),
    item_id: str = typer.Option(..., "--item-id", help="Id of the new item."),
    item_type: str = typer.Option(..., "--type", help="Component type of the new item."),
    width: float = typer.Option(..., "--width", help="Default width in grid units."),
    height: float = typer.Option(..., "--height", help="Default height in grid units."),
    min_width: Optional[float] = typer.Option(None, "--min-width"),
    min_height: Optional[float] = typer.Option(None, "--min-height"),
    max_width: Optional[float] = typer.Option(None, "--max-width"),
    max_height: Optional[float] = typer.Option(None, "--max-height"),
    output_path: Optional[Path] = typer.Option(
        None, "--output", help="Where to write the updated document (defaults to input)."
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = load_settings(config_path)
    document = _load_document(input_path, settings)
    definition = ComponentDefinition(
        name=item_type,
        default_size=ComponentSize(width=width, height=height),
        min_size=_optional_size(min_width, min_height, 0),
        max_size=_optional_size(max_width, max_height, float("inf")),
    )

    item = place_new_item(document, canvas_id, item_id, definition, item_type)
    if item is None:
        console.print(f"[red]Could not place[/] {item_id} on canvas {canvas_id}")
        raise typer.Exit(code=1)

    canvas = document.canvases[canvas_id]
    updated = document.with_canvas(canvas_id, canvas.with_item(item))
    target_path = output_path or input_path
    FileSystemCanvasRepository().save(updated, target_path)
    layout = next(layout for layout in item.layouts.values() if layout.customized)
    console.print(
        f"[green]Placed[/] {item_id} at ({layout.x:g}, {layout.y:g}) "
        f"size {layout.width:g}x{layout.height:g} → {target_path}"
    )


def _optional_size(
    width: float | None, height: float | None, fallback: float
) -> ComponentSize | None:
    if width is None and height is None:
        return None
    return ComponentSize(
        width=width if width is not None else fallback,
        height=height if height is not None else fallback,
    )


if __name__ == "__main__":
    app()
