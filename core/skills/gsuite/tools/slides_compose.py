"""Build Slides batchUpdate batches for page elements and table borders.

Sizes and positions are in points. As with the Docs composers, these are
pure functions; slide lookup and submission live in slides.py / docs_batch.
"""
from __future__ import annotations

import math
import uuid
from typing import Any

from docs_errors import IndexOutOfRange, ValidationError
from docs_ops import BatchBuilder, OperationBatch
from utils import hex_to_rgb

BORDER_POSITIONS = {
    "all": ("INNER_HORIZONTAL", "INNER_VERTICAL", "TOP", "BOTTOM", "LEFT", "RIGHT"),
    "top": ("TOP",),
    "bottom": ("BOTTOM",),
    "left": ("LEFT",),
    "right": ("RIGHT",),
}

DASH_STYLES = {"solid": "SOLID", "dashed": "DASH", "dotted": "DOT"}

SHAPE_TYPES = frozenset({
    "TEXT_BOX", "RECTANGLE", "ROUND_RECTANGLE", "ELLIPSE", "ARC", "BENT_ARROW",
    "BEVEL", "BLOCK_ARC", "BRACE_PAIR", "BRACKET_PAIR", "CAN", "CHEVRON", "CLOUD",
    "CUBE", "DECAGON", "DIAMOND", "DONUT", "DOWN_ARROW", "FOLDED_CORNER", "FRAME",
    "HEART", "HEPTAGON", "HEXAGON", "HOME_PLATE", "LEFT_ARROW", "LEFT_RIGHT_ARROW",
    "LIGHTNING_BOLT", "MOON", "OCTAGON", "PARALLELOGRAM", "PENTAGON", "PIE", "PLAQUE",
    "PLUS", "RIGHT_ARROW", "RIGHT_TRIANGLE", "SMILEY_FACE", "STAR_4", "STAR_5",
    "STAR_6", "STAR_8", "SUN", "TRAPEZOID", "TRIANGLE", "UP_ARROW", "UP_DOWN_ARROW",
    "WAVE",
})


def new_object_id(prefix: str) -> str:
    """An object ID accepted by the Slides API (5-50 chars, [A-Za-z0-9_])."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def resolve_slide_id(slides: list[dict[str, Any]], slide_number: int) -> str:
    """Object ID of the 1-based ``slide_number``."""
    if slide_number < 1 or slide_number > len(slides):
        raise IndexOutOfRange(f"slide number {slide_number} out of range (1-{len(slides)})")
    return slides[slide_number - 1].get("objectId", "")


def validate_slide_selector(slide_id: str | None, slide_number: int) -> None:
    if not slide_id and slide_number <= 0:
        raise ValidationError("must specify --slide-id or --slide-number")


def _pt(magnitude: float) -> dict[str, Any]:
    return {"magnitude": magnitude, "unit": "PT"}


def _solid_fill(hex_color: str) -> dict[str, Any]:
    return {"solidFill": {"color": {"rgbColor": hex_to_rgb(hex_color)}}}


def element_properties(
    slide_id: str,
    x: float,
    y: float,
    width: float | None = None,
    height: float | None = None,
    scale_x: float = 1,
    scale_y: float = 1,
) -> dict[str, Any]:
    size: dict[str, Any] = {}
    if width is not None:
        size["width"] = _pt(width)
    if height is not None:
        size["height"] = _pt(height)
    props: dict[str, Any] = {
        "pageObjectId": slide_id,
        "transform": {
            "scaleX": scale_x,
            "scaleY": scale_y,
            "translateX": x,
            "translateY": y,
            "unit": "PT",
        },
    }
    if size:
        props["size"] = size
    return props


def compose_table_border(
    table_id: str,
    row: int,
    col: int,
    border: str = "all",
    color: str = "",
    width: float = 1,
    style: str = "solid",
) -> OperationBatch:
    """One updateTableBorderProperties per edge; ``all`` covers six edges."""
    if border not in BORDER_POSITIONS:
        raise ValidationError(f"invalid border: {border} (use top, bottom, left, right, or all)")
    if style not in DASH_STYLES:
        raise ValidationError(f"invalid border style: {style} (use solid, dashed, or dotted)")
    if row < 0 or col < 0:
        raise ValidationError("--row and --col must be >= 0")
    if width < 0:
        raise ValidationError("--width must be >= 0")

    props: dict[str, Any] = {"weight": _pt(width)}
    fields = ["weight"]
    if color:
        props["tableBorderFill"] = _solid_fill(color)
        fields.append("tableBorderFill")
    props["dashStyle"] = DASH_STYLES[style]
    fields.append("dashStyle")

    builder = BatchBuilder(api="slides")
    for position in BORDER_POSITIONS[border]:
        builder.add("updateTableBorderProperties", {
            "objectId": table_id,
            "tableRange": {
                "location": {"rowIndex": row, "columnIndex": col},
                "rowSpan": 1,
                "columnSpan": 1,
            },
            "borderPosition": position,
            "tableBorderProperties": props,
            "fields": ",".join(fields),
        })
    return builder.build()


def compose_add_shape(
    slide_id: str,
    shape_type: str = "RECTANGLE",
    x: float = 100,
    y: float = 100,
    width: float = 200,
    height: float = 100,
) -> OperationBatch:
    shape_type = shape_type.upper()
    if shape_type not in SHAPE_TYPES:
        raise ValidationError(
            f"invalid shape type '{shape_type}'. Common types: RECTANGLE, ELLIPSE, TEXT_BOX, TRIANGLE, STAR_5"
        )
    if width <= 0 or height <= 0:
        raise ValidationError("--width and --height must be > 0")
    return BatchBuilder(api="slides").add("createShape", {
        "shapeType": shape_type,
        "elementProperties": element_properties(slide_id, x, y, width, height),
    }).build()


def compose_add_image(slide_id: str, url: str, x: float = 100, y: float = 100, width: float = 400) -> OperationBatch:
    """Height is left unset so the image keeps its aspect ratio."""
    if not url:
        raise ValidationError("--url is required")
    if width <= 0:
        raise ValidationError("--width must be > 0")
    return BatchBuilder(api="slides").add("createImage", {
        "url": url,
        "elementProperties": element_properties(slide_id, x, y, width),
    }).build()


def line_category(line_type: str) -> str:
    line_type = line_type.upper()
    if line_type.startswith("BENT"):
        return "BENT"
    if line_type.startswith("CURVED"):
        return "CURVED"
    return "STRAIGHT"


def compose_add_line(
    slide_id: str,
    object_id: str,
    start: tuple[float, float],
    end: tuple[float, float],
    line_type: str = "STRAIGHT_CONNECTOR_1",
    color: str = "",
    weight: float | None = None,
) -> OperationBatch:
    """createLine, then in the same batch style it through ``object_id``.

    A line drawn right-to-left or bottom-to-top is placed at its end point
    and flipped with a negative scale, since sizes cannot be negative.
    """
    (start_x, start_y), (end_x, end_y) = start, end
    width, height = end_x - start_x, end_y - start_y
    x, y, scale_x, scale_y = start_x, start_y, 1.0, 1.0
    if width < 0:
        width, x, scale_x = -width, end_x, -1.0
    if height < 0:
        height, y, scale_y = -height, end_y, -1.0

    builder = BatchBuilder(api="slides")
    builder.add("createLine", {
        "objectId": object_id,
        "category": line_category(line_type),
        "elementProperties": element_properties(slide_id, x, y, width, height, scale_x, scale_y),
    })

    line_props: dict[str, Any] = {}
    fields: list[str] = []
    if color:
        line_props["lineFill"] = _solid_fill(color)
        fields.append("lineFill")
    if weight is not None:
        if weight <= 0:
            raise ValidationError("--weight must be > 0")
        line_props["weight"] = _pt(weight)
        fields.append("weight")
    if fields:
        builder.add("updateLineProperties", {
            "objectId": object_id,
            "lineProperties": line_props,
            "fields": ",".join(fields),
        })
    return builder.build()


def compose_update_transform(
    object_id: str,
    x: float = 0,
    y: float = 0,
    scale_x: float = 1,
    scale_y: float = 1,
    rotate: float = 0,
) -> OperationBatch:
    """Set an absolute transform; ``rotate`` is clockwise degrees."""
    if not object_id:
        raise ValidationError("--object-id is required")
    radians = math.radians(rotate)
    cos_r, sin_r = math.cos(radians), math.sin(radians)
    return BatchBuilder(api="slides").add("updatePageElementTransform", {
        "objectId": object_id,
        "applyMode": "ABSOLUTE",
        "transform": {
            "scaleX": scale_x * cos_r,
            "scaleY": scale_y * cos_r,
            "shearX": -scale_x * sin_r,
            "shearY": scale_y * sin_r,
            "translateX": x,
            "translateY": y,
            "unit": "PT",
        },
    }).build()
