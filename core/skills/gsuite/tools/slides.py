#!/usr/bin/env -S uv run
# /// script
# dependencies = [
#   "google-api-python-client>=2.100.0",
#   "google-auth>=2.23.0",
#   "google-auth-oauthlib>=1.1.0",
#   "google-auth-httplib2>=0.1.1",
#   "pyyaml>=6.0",
#   "typer>=0.9.0",
#   "rich>=13.0.0",
# ]
# requires-python = ">=3.12"
# ///
"""Google Slides CLI for page element operations."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from googleapiclient.discovery import build
from rich.tree import Tree

# Import sibling modules
SCRIPT_DIR = Path(__file__).parent
sys.path.insert(0, str(SCRIPT_DIR))
from auth import get_credentials  # noqa: E402
from docs_batch import created_object_id, fetch_presentation, submit_batch  # noqa: E402
from docs_errors import DocsError  # noqa: E402
from slides_compose import (  # noqa: E402
    compose_add_image,
    compose_add_line,
    compose_add_shape,
    compose_table_border,
    compose_update_transform,
    new_object_id,
    resolve_slide_id,
    validate_slide_selector,
)
from utils import console, emit, fail, output_format, stdout_console  # noqa: E402

app = typer.Typer(help="Google Slides CLI operations.")

PresentationArg = Annotated[str, typer.Argument(help="Presentation ID")]
SlideIdOpt = Annotated[str | None, typer.Option("--slide-id", help="Slide object ID")]
SlideNumberOpt = Annotated[int, typer.Option("--slide-number", help="Slide number (1-based)")]
AccountOpt = Annotated[str | None, typer.Option("--account", "-a", help="Account email (default: active)")]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def get_slides_service(account: str | None = None):
    """Get authenticated Slides API service."""
    creds = get_credentials(account)
    return build("slides", "v1", credentials=creds)


def get_slide_id(service, presentation_id: str, slide_id: str | None, slide_number: int) -> str:
    """--slide-id as given, or the ID of slide --slide-number (one fetch)."""
    if slide_id:
        return slide_id
    validate_slide_selector(slide_id, slide_number)
    presentation = fetch_presentation(service, presentation_id)
    return resolve_slide_id(presentation.get("slides", []), slide_number)


def describe_element(element: dict[str, Any]) -> str:
    for kind in ("shape", "image", "line", "table", "video", "sheetsChart", "elementGroup"):
        if kind in element:
            return kind
    return "element"


@app.command()
def read(
    presentation_id: PresentationArg,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
    raw: Annotated[bool, typer.Option("--raw", help="Output raw API response")] = False,
) -> None:
    """List slides and the object IDs of their page elements."""
    try:
        presentation = fetch_presentation(get_slides_service(account), presentation_id)

        if raw:
            stdout_console.print_json(json.dumps(presentation))
            return

        title = presentation.get("title", "Untitled")
        slides = presentation.get("slides", [])
        slide_data = [
            {
                "number": i + 1,
                "slide_id": slide.get("objectId", ""),
                "elements": [
                    {"object_id": el.get("objectId", ""), "type": describe_element(el)}
                    for el in slide.get("pageElements", [])
                ],
            }
            for i, slide in enumerate(slides)
        ]

        if output_format(json_output) != "text":
            emit({"presentation_id": presentation_id, "title": title, "slide_count": len(slides), "slides": slide_data},
                 json_output)
            return

        tree = Tree(f"[bold]{title}[/bold] ({len(slides)} slides)")
        for slide in slide_data:
            branch = tree.add(f"Slide {slide['number']}: {slide['slide_id']}")
            for el in slide["elements"]:
                branch.add(f"[dim]{el['type']}[/dim] {el['object_id']}")
        console.print(tree)

    except DocsError as e:
        fail(e, json_output)


@app.command("add-shape")
def add_shape(
    presentation_id: PresentationArg,
    slide_id: SlideIdOpt = None,
    slide_number: SlideNumberOpt = 0,
    shape_type: Annotated[str, typer.Option("--type", help="Shape type (RECTANGLE, ELLIPSE, TEXT_BOX, ...)")] = "RECTANGLE",
    x: Annotated[float, typer.Option("--x", help="X position in points")] = 100,
    y: Annotated[float, typer.Option("--y", help="Y position in points")] = 100,
    width: Annotated[float, typer.Option("--width", help="Width in points")] = 200,
    height: Annotated[float, typer.Option("--height", help="Height in points")] = 100,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Add a shape to a slide."""
    try:
        validate_slide_selector(slide_id, slide_number)
        compose_add_shape("", shape_type, x, y, width, height)

        service = get_slides_service(account)
        target = get_slide_id(service, presentation_id, slide_id, slide_number)
        batch = compose_add_shape(target, shape_type, x, y, width, height)
        replies = submit_batch(service, presentation_id, batch, "add shape", api="slides")
        shape_id = created_object_id(replies, 0, "createShape")

        emit({
            "status": "created",
            "presentation_id": presentation_id,
            "slide_id": target,
            "shape_id": shape_id,
            "shape_type": shape_type.upper(),
            "position": {"x": x, "y": y},
            "size": {"width": width, "height": height},
        }, json_output, f"[green]Added shape:[/green] {shape_id}")

    except DocsError as e:
        fail(e, json_output)


@app.command("add-image")
def add_image(
    presentation_id: PresentationArg,
    url: Annotated[str, typer.Option("--url", help="Publicly accessible image URL")],
    slide_id: SlideIdOpt = None,
    slide_number: SlideNumberOpt = 0,
    x: Annotated[float, typer.Option("--x", help="X position in points")] = 100,
    y: Annotated[float, typer.Option("--y", help="Y position in points")] = 100,
    width: Annotated[float, typer.Option("--width", help="Width in points; height keeps aspect ratio")] = 400,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Add an image to a slide."""
    try:
        validate_slide_selector(slide_id, slide_number)
        compose_add_image("", url, x, y, width)

        service = get_slides_service(account)
        target = get_slide_id(service, presentation_id, slide_id, slide_number)
        replies = submit_batch(
            service, presentation_id, compose_add_image(target, url, x, y, width), "add image", api="slides",
        )
        image_id = created_object_id(replies, 0, "createImage")

        emit({
            "status": "created",
            "presentation_id": presentation_id,
            "slide_id": target,
            "image_id": image_id,
            "url": url,
            "position": {"x": x, "y": y},
            "width": width,
        }, json_output, f"[green]Added image:[/green] {image_id}")

    except DocsError as e:
        fail(e, json_output)


@app.command("add-line")
def add_line(
    presentation_id: PresentationArg,
    slide_id: SlideIdOpt = None,
    slide_number: SlideNumberOpt = 0,
    line_type: Annotated[
        str, typer.Option("--type", help="STRAIGHT_CONNECTOR_1, BENT_CONNECTOR_2, CURVED_CONNECTOR_2, ...")
    ] = "STRAIGHT_CONNECTOR_1",
    start_x: Annotated[float, typer.Option("--start-x", help="Start X in points")] = 0,
    start_y: Annotated[float, typer.Option("--start-y", help="Start Y in points")] = 0,
    end_x: Annotated[float, typer.Option("--end-x", help="End X in points")] = 200,
    end_y: Annotated[float, typer.Option("--end-y", help="End Y in points")] = 200,
    color: Annotated[str, typer.Option("--color", help="Line color (#RRGGBB)")] = "",
    weight: Annotated[float | None, typer.Option("--weight", help="Line thickness in points")] = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Draw a line or connector on a slide."""
    try:
        validate_slide_selector(slide_id, slide_number)
        line_id = new_object_id("line")
        points = ((start_x, start_y), (end_x, end_y))
        compose_add_line("", line_id, *points, line_type=line_type, color=color, weight=weight)

        service = get_slides_service(account)
        target = get_slide_id(service, presentation_id, slide_id, slide_number)
        batch = compose_add_line(target, line_id, *points, line_type=line_type, color=color, weight=weight)
        submit_batch(service, presentation_id, batch, "add line", api="slides")

        emit({
            "status": "created",
            "presentation_id": presentation_id,
            "slide_id": target,
            "line_id": line_id,
            "line_type": line_type,
            "start": {"x": start_x, "y": start_y},
            "end": {"x": end_x, "y": end_y},
        }, json_output, f"[green]Added line:[/green] {line_id}")

    except DocsError as e:
        fail(e, json_output)


@app.command("update-transform")
def update_transform(
    presentation_id: PresentationArg,
    object_id: Annotated[str, typer.Option("--object-id", help="Element to transform")],
    x: Annotated[float, typer.Option("--x", help="X position in points")] = 0,
    y: Annotated[float, typer.Option("--y", help="Y position in points")] = 0,
    scale_x: Annotated[float, typer.Option("--scale-x", help="Scale factor X")] = 1,
    scale_y: Annotated[float, typer.Option("--scale-y", help="Scale factor Y")] = 1,
    rotate: Annotated[float, typer.Option("--rotate", help="Rotation in degrees")] = 0,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Move, scale, or rotate a page element."""
    try:
        batch = compose_update_transform(object_id, x, y, scale_x, scale_y, rotate)
        submit_batch(get_slides_service(account), presentation_id, batch, "update transform", api="slides")
        emit({
            "status": "updated",
            "presentation_id": presentation_id,
            "object_id": object_id,
            "position": {"x": x, "y": y},
            "scale": {"x": scale_x, "y": scale_y},
            "rotation": rotate,
        }, json_output, f"[green]Updated transform:[/green] {object_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("update-table-border")
def update_table_border(
    presentation_id: PresentationArg,
    table_id: Annotated[str, typer.Option("--table-id", help="Table object ID")],
    row: Annotated[int, typer.Option("--row", help="Zero-based row index")] = 0,
    col: Annotated[int, typer.Option("--col", help="Zero-based column index")] = 0,
    border: Annotated[str, typer.Option("--border", help="top, bottom, left, right, or all")] = "all",
    color: Annotated[str, typer.Option("--color", help="Border color (#RRGGBB)")] = "",
    width: Annotated[float, typer.Option("--width", help="Border width in points")] = 1,
    style: Annotated[str, typer.Option("--style", help="solid, dashed, or dotted")] = "solid",
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Style the borders of a table cell."""
    try:
        batch = compose_table_border(table_id, row, col, border, color, width, style)
        submit_batch(get_slides_service(account), presentation_id, batch, "update table border", api="slides")
        emit({
            "status": "updated",
            "presentation_id": presentation_id,
            "table_id": table_id,
            "row": row,
            "col": col,
            "border": border,
            "edges": len(batch),
        }, json_output, f"[green]Updated {len(batch)} border edge(s) of[/green] {table_id}")
    except DocsError as e:
        fail(e, json_output)


if __name__ == "__main__":
    app()
