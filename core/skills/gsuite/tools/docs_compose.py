"""Build batchUpdate operation batches for Google Docs edits.

Every ``compose_*`` function is pure: it takes already-resolved inputs (a tab
ID, and where positions depend on the document, the body from a single
fetched snapshot) and returns an ``OperationBatch``. Nothing here talks to
the API, so validation always happens before any request is made.

Index conventions follow the Docs API: indices are 1-based UTF-16 offsets
inside a tab body, ranges are [start, end).
"""
from __future__ import annotations

from typing import Any

from docs_errors import AmbiguousSelector, EmptyDocument, UnknownFormat, ValidationError
from docs_ops import BatchBuilder, Operation, OperationBatch, location, text_range
from richformat import parse_rich_format
from utils import hex_to_rgb

CONTENT_FORMATS = ("markdown", "plaintext", "richformat")

BULLET_PRESETS = {
    "bullet": "BULLET_DISC_CIRCLE_SQUARE",
    "numbered": "NUMBERED_DECIMAL_NESTED",
}

ALIGNMENTS = ("START", "CENTER", "END", "JUSTIFIED")
SECTION_TYPES = ("NEXT_PAGE", "CONTINUOUS")
CONTENT_DIRECTIONS = ("LEFT_TO_RIGHT", "RIGHT_TO_LEFT")
HEADER_FOOTER_TYPES = ("DEFAULT",)


# -- Validation ---------------------------------------------------------------


def validate_position(position: int, flag: str = "--at") -> None:
    if position < 1:
        raise ValidationError(f"{flag} must be >= 1")


def validate_span(start: int, end: int) -> None:
    if start < 1:
        raise ValidationError("--from must be >= 1")
    if end <= start:
        raise ValidationError("--to must be greater than --from")


def validate_selector(name: str | None, range_id: str | None) -> None:
    """Exactly one of --name / --id must be given."""
    if not name and not range_id:
        raise AmbiguousSelector("either --name or --id is required")
    if name and range_id:
        raise AmbiguousSelector("use either --name or --id, not both")


def validate_content_format(content_format: str) -> None:
    if content_format not in CONTENT_FORMATS:
        raise UnknownFormat(
            f"unknown content format: {content_format} (use markdown, plaintext, or richformat)"
        )


def validate_table_cell(table_start: int, row: int, col: int, row_span: int = 1, col_span: int = 1) -> None:
    validate_position(table_start, "--table-start")
    if row < 0:
        raise ValidationError("--row must be >= 0")
    if col < 0:
        raise ValidationError("--col must be >= 0")
    if row_span < 1:
        raise ValidationError("--row-span must be >= 1")
    if col_span < 1:
        raise ValidationError("--col-span must be >= 1")


def _choice(value: str, choices: tuple[str, ...], what: str) -> str:
    normalized = value.upper()
    if normalized not in choices:
        raise ValidationError(f"invalid {what}: {value} (use {', '.join(choices)})")
    return normalized


def _single(kind: str, body: dict[str, Any]) -> OperationBatch:
    return BatchBuilder().add(kind, body).build()


def _optional_color(hex_color: str) -> dict[str, Any]:
    return {"color": {"rgbColor": hex_to_rgb(hex_color)}}


def _pt(magnitude: float) -> dict[str, Any]:
    return {"magnitude": magnitude, "unit": "PT"}


# -- Text content ---------------------------------------------------------------


def build_text_requests(
    text: str,
    content_format: str,
    insert_index: int,
    tab_id: str = "",
) -> list[Operation]:
    """Turn text in one of the content formats into operations.

    markdown and plaintext both become a single insertText of the literal
    text. richformat text is itself a JSON list of requests and is returned
    as parsed; ``insert_index`` and ``tab_id`` do not apply to it.
    """
    validate_content_format(content_format)
    if content_format == "richformat":
        return parse_rich_format(text)
    return [Operation("insertText", {"location": location(insert_index, tab_id), "text": text})]


def append_index(body: dict[str, Any]) -> int:
    """Index just before the body's final newline."""
    content = body.get("content", [])
    if not content:
        raise EmptyDocument("document has no content")
    return content[-1].get("endIndex", 1) - 1


def compose_append(
    body: dict[str, Any],
    text: str,
    content_format: str,
    tab_id: str = "",
    newline: bool = True,
) -> OperationBatch:
    validate_content_format(content_format)
    index = append_index(body)
    if newline and content_format != "richformat":
        text = "\n" + text
    return BatchBuilder().extend(build_text_requests(text, content_format, index, tab_id)).build()


def compose_insert(text: str, content_format: str, position: int, tab_id: str = "") -> OperationBatch:
    validate_content_format(content_format)
    if content_format != "richformat":
        validate_position(position)
    return BatchBuilder().extend(build_text_requests(text, content_format, position, tab_id)).build()


def compose_initial_text(text: str, content_format: str) -> OperationBatch:
    """Text for a freshly created document, which starts empty at index 1."""
    return compose_insert(text, content_format, 1)


def parse_edit_plan(data: Any) -> list[dict[str, str]]:
    """Accept ``{"edits": [...]}`` or a bare list of find/replace pairs."""
    if isinstance(data, dict) and "edits" in data:
        edits = data["edits"]
    elif isinstance(data, list):
        edits = data
    else:
        raise ValidationError('plan must be {"edits": [...]} or a JSON array')
    for i, edit in enumerate(edits):
        if not isinstance(edit, dict) or "find" not in edit or "replace" not in edit:
            raise ValidationError(f"edit {i} missing 'find' or 'replace' key")
        if not edit["find"]:
            raise ValidationError(f"edit {i} has an empty 'find'")
    if not edits:
        raise ValidationError("plan contains no edits")
    return edits


def compose_replace(edits: list[dict[str, str]], tab_id: str = "", match_case: bool = True) -> OperationBatch:
    """One replaceAllText per edit; reply i carries edit i's occurrence count."""
    builder = BatchBuilder()
    for edit in edits:
        request: dict[str, Any] = {
            "containsText": {"text": edit["find"], "matchCase": match_case},
            "replaceText": edit["replace"],
        }
        if tab_id:
            request["tabsCriteria"] = {"tabIds": [tab_id]}
        builder.add("replaceAllText", request)
    return builder.build()


def compose_delete_range(start: int, end: int, tab_id: str = "") -> OperationBatch:
    validate_span(start, end)
    return _single("deleteContentRange", {"range": text_range(start, end, tab_id)})


# -- Lists ----------------------------------------------------------------------


def list_text(items: str) -> tuple[list[str], str]:
    """Split ``"a; b; c"`` into items and the newline-terminated block to insert."""
    lines = [item.strip() for item in items.split(";")]
    return lines, "\n".join(lines) + "\n"


def compose_add_list(position: int, items: str, list_type: str = "bullet", tab_id: str = "") -> OperationBatch:
    """Insert the items, then bullet exactly the inserted span.

    The bullet range is derived from the length of the text inserted first
    in the same batch, never from a re-fetched document.
    """
    validate_position(position)
    if list_type not in BULLET_PRESETS:
        raise ValidationError(f"invalid list type: {list_type} (use 'bullet' or 'numbered')")

    _, block = list_text(items)
    builder = BatchBuilder().insert_text(position, block, tab_id)
    builder.add("createParagraphBullets", {
        "range": text_range(position, position + builder.shift, tab_id),
        "bulletPreset": BULLET_PRESETS[list_type],
    })
    return builder.build()


def compose_remove_list(start: int, end: int, tab_id: str = "") -> OperationBatch:
    validate_span(start, end)
    return _single("deleteParagraphBullets", {"range": text_range(start, end, tab_id)})


# -- Styles ---------------------------------------------------------------------


def compose_format_text(
    start: int,
    end: int,
    tab_id: str = "",
    *,
    bold: bool | None = None,
    italic: bool | None = None,
    font_size: int = 0,
    color: str = "",
) -> OperationBatch:
    validate_span(start, end)
    style: dict[str, Any] = {}
    fields: list[str] = []

    if bold is not None:
        style["bold"] = bold
        fields.append("bold")
    if italic is not None:
        style["italic"] = italic
        fields.append("italic")
    if font_size > 0:
        style["fontSize"] = _pt(font_size)
        fields.append("fontSize")
    if color:
        style["foregroundColor"] = _optional_color(color)
        fields.append("foregroundColor")

    if not fields:
        raise ValidationError("no formatting options specified; use --bold, --italic, --font-size, or --color")

    return _single("updateTextStyle", {
        "textStyle": style,
        "range": text_range(start, end, tab_id),
        "fields": ",".join(fields),
    })


def compose_paragraph_style(
    start: int,
    end: int,
    tab_id: str = "",
    *,
    alignment: str = "",
    line_spacing: float = 0,
) -> OperationBatch:
    validate_span(start, end)
    style: dict[str, Any] = {}
    fields: list[str] = []

    if alignment:
        style["alignment"] = _choice(alignment, ALIGNMENTS, "alignment")
        fields.append("alignment")
    if line_spacing > 0:
        # The API takes a percentage: 1.15 -> 115
        style["lineSpacing"] = line_spacing * 100
        fields.append("lineSpacing")

    if not fields:
        raise ValidationError("no style options specified; use --alignment or --line-spacing")

    return _single("updateParagraphStyle", {
        "paragraphStyle": style,
        "range": text_range(start, end, tab_id),
        "fields": ",".join(fields),
    })


def compose_section_style(
    start: int,
    end: int,
    tab_id: str = "",
    *,
    column_count: int = 0,
    content_direction: str = "",
) -> OperationBatch:
    validate_span(start, end)
    style: dict[str, Any] = {}
    fields: list[str] = []

    if column_count > 0:
        style["columnProperties"] = [{} for _ in range(column_count)]
        fields.append("columnProperties")
    if content_direction:
        style["contentDirection"] = _choice(content_direction, CONTENT_DIRECTIONS, "content direction")
        fields.append("contentDirection")

    if not fields:
        raise ValidationError("no section style options specified; use --column-count or --content-direction")

    return _single("updateSectionStyle", {
        "sectionStyle": style,
        "range": text_range(start, end, tab_id),
        "fields": ",".join(fields),
    })


def compose_document_style(
    *,
    margin_top: float | None = None,
    margin_bottom: float | None = None,
    margin_left: float | None = None,
    margin_right: float | None = None,
) -> OperationBatch:
    margins = {
        "marginTop": margin_top,
        "marginBottom": margin_bottom,
        "marginLeft": margin_left,
        "marginRight": margin_right,
    }
    style = {field: _pt(value) for field, value in margins.items() if value is not None}
    if not style:
        raise ValidationError(
            "no margin options specified; use --margin-top, --margin-bottom, --margin-left, or --margin-right"
        )
    for field, dim in style.items():
        if dim["magnitude"] < 0:
            raise ValidationError(f"{field} must be >= 0")
    return _single("updateDocumentStyle", {"documentStyle": style, "fields": ",".join(style)})


# -- Tables ---------------------------------------------------------------------


def compose_add_table(position: int, rows: int, cols: int, tab_id: str = "") -> OperationBatch:
    validate_position(position)
    if rows < 1:
        raise ValidationError("--rows must be >= 1")
    if cols < 1:
        raise ValidationError("--cols must be >= 1")
    return _single("insertTable", {"rows": rows, "columns": cols, "location": location(position, tab_id)})


def table_cell_location(table_start: int, row: int, col: int, tab_id: str = "") -> dict[str, Any]:
    return {
        "tableStartLocation": location(table_start, tab_id),
        "rowIndex": row,
        "columnIndex": col,
    }


def table_range(
    table_start: int,
    row: int,
    col: int,
    row_span: int = 1,
    col_span: int = 1,
    tab_id: str = "",
) -> dict[str, Any]:
    return {
        "tableCellLocation": table_cell_location(table_start, row, col, tab_id),
        "rowSpan": row_span,
        "columnSpan": col_span,
    }


def compose_insert_table_row(table_start: int, row: int, col: int, tab_id: str = "", below: bool = True) -> OperationBatch:
    validate_table_cell(table_start, row, col)
    return _single("insertTableRow", {
        "tableCellLocation": table_cell_location(table_start, row, col, tab_id),
        "insertBelow": below,
    })


def compose_delete_table_row(table_start: int, row: int, col: int, tab_id: str = "") -> OperationBatch:
    validate_table_cell(table_start, row, col)
    return _single("deleteTableRow", {"tableCellLocation": table_cell_location(table_start, row, col, tab_id)})


def compose_insert_table_column(table_start: int, row: int, col: int, tab_id: str = "", right: bool = True) -> OperationBatch:
    validate_table_cell(table_start, row, col)
    return _single("insertTableColumn", {
        "tableCellLocation": table_cell_location(table_start, row, col, tab_id),
        "insertRight": right,
    })


def compose_delete_table_column(table_start: int, row: int, col: int, tab_id: str = "") -> OperationBatch:
    validate_table_cell(table_start, row, col)
    return _single("deleteTableColumn", {"tableCellLocation": table_cell_location(table_start, row, col, tab_id)})


def compose_merge_cells(
    table_start: int, row: int, col: int, row_span: int = 1, col_span: int = 1, tab_id: str = "",
) -> OperationBatch:
    validate_table_cell(table_start, row, col, row_span, col_span)
    return _single("mergeTableCells", {"tableRange": table_range(table_start, row, col, row_span, col_span, tab_id)})


def compose_unmerge_cells(
    table_start: int, row: int, col: int, row_span: int = 1, col_span: int = 1, tab_id: str = "",
) -> OperationBatch:
    validate_table_cell(table_start, row, col, row_span, col_span)
    return _single("unmergeTableCells", {"tableRange": table_range(table_start, row, col, row_span, col_span, tab_id)})


def compose_pin_header_rows(table_start: int, count: int, tab_id: str = "") -> OperationBatch:
    validate_position(table_start, "--table-start")
    if count < 0:
        raise ValidationError("--count must be >= 0")
    return _single("pinTableHeaderRows", {
        "tableStartLocation": location(table_start, tab_id),
        "pinnedHeaderRowsCount": count,
    })


def compose_table_cell_style(
    table_start: int,
    row: int,
    col: int,
    row_span: int = 1,
    col_span: int = 1,
    tab_id: str = "",
    *,
    bg_color: str = "",
    padding: float | None = None,
) -> OperationBatch:
    validate_table_cell(table_start, row, col, row_span, col_span)
    style: dict[str, Any] = {}
    fields: list[str] = []

    if bg_color:
        style["backgroundColor"] = _optional_color(bg_color)
        fields.append("backgroundColor")
    if padding is not None:
        if padding < 0:
            raise ValidationError("--padding must be >= 0")
        for side in ("paddingTop", "paddingBottom", "paddingLeft", "paddingRight"):
            style[side] = _pt(padding)
            fields.append(side)

    if not fields:
        raise ValidationError("no cell style options specified; use --bg-color or --padding")

    return _single("updateTableCellStyle", {
        "tableCellStyle": style,
        "tableRange": table_range(table_start, row, col, row_span, col_span, tab_id),
        "fields": ",".join(fields),
    })


def compose_table_column_width(table_start: int, col_index: int, width: float, tab_id: str = "") -> OperationBatch:
    validate_position(table_start, "--table-start")
    if col_index < 0:
        raise ValidationError("--col-index must be >= 0")
    if width <= 0:
        raise ValidationError("--width must be > 0")
    return _single("updateTableColumnProperties", {
        "tableStartLocation": location(table_start, tab_id),
        "columnIndices": [col_index],
        "tableColumnProperties": {"width": _pt(width), "widthType": "FIXED_WIDTH"},
        "fields": "width,widthType",
    })


def compose_table_row_height(table_start: int, row: int, min_height: float, tab_id: str = "") -> OperationBatch:
    validate_position(table_start, "--table-start")
    if row < 0:
        raise ValidationError("--row must be >= 0")
    if min_height < 0:
        raise ValidationError("--min-height must be >= 0")
    return _single("updateTableRowStyle", {
        "tableStartLocation": location(table_start, tab_id),
        "rowIndices": [row],
        "tableRowStyle": {"minRowHeight": _pt(min_height)},
        "fields": "minRowHeight",
    })


# -- Breaks, footnotes, images ----------------------------------------------------


def compose_page_break(position: int, tab_id: str = "") -> OperationBatch:
    validate_position(position)
    return _single("insertPageBreak", {"location": location(position, tab_id)})


def compose_section_break(position: int, section_type: str = "NEXT_PAGE", tab_id: str = "") -> OperationBatch:
    validate_position(position)
    return _single("insertSectionBreak", {
        "location": location(position, tab_id),
        "sectionType": _choice(section_type, SECTION_TYPES, "section break type"),
    })


def compose_footnote(position: int, tab_id: str = "") -> OperationBatch:
    validate_position(position)
    return _single("createFootnote", {"location": location(position, tab_id)})


def compose_inline_image(
    uri: str, position: int, tab_id: str = "", width: float = 0, height: float = 0,
) -> OperationBatch:
    validate_position(position)
    if not uri:
        raise ValidationError("--uri is required")
    request: dict[str, Any] = {"uri": uri, "location": location(position, tab_id)}
    size: dict[str, Any] = {}
    if width > 0:
        size["width"] = _pt(width)
    if height > 0:
        size["height"] = _pt(height)
    if size:
        request["objectSize"] = size
    return _single("insertInlineImage", request)


def compose_replace_image(object_id: str, uri: str) -> OperationBatch:
    return _single("replaceImage", {"imageObjectId": object_id, "uri": uri})


def compose_delete_object(object_id: str) -> OperationBatch:
    return _single("deletePositionedObject", {"objectId": object_id})


# -- Headers, footers, named ranges -------------------------------------------------


def compose_create_header(header_type: str = "DEFAULT") -> OperationBatch:
    return _single("createHeader", {
        "type": _choice(header_type, HEADER_FOOTER_TYPES, "header type"),
        "sectionBreakLocation": {"index": 0},
    })


def compose_create_footer(footer_type: str = "DEFAULT") -> OperationBatch:
    return _single("createFooter", {
        "type": _choice(footer_type, HEADER_FOOTER_TYPES, "footer type"),
        "sectionBreakLocation": {"index": 0},
    })


def compose_delete_header(header_id: str) -> OperationBatch:
    return _single("deleteHeader", {"headerId": header_id})


def compose_delete_footer(footer_id: str) -> OperationBatch:
    return _single("deleteFooter", {"footerId": footer_id})


def compose_create_named_range(name: str, start: int, end: int, tab_id: str = "") -> OperationBatch:
    validate_span(start, end)
    if not name:
        raise ValidationError("--name is required")
    return _single("createNamedRange", {"name": name, "range": text_range(start, end, tab_id)})


def compose_delete_named_range(name: str | None = None, range_id: str | None = None) -> OperationBatch:
    validate_selector(name, range_id)
    request = {"name": name} if name else {"namedRangeId": range_id}
    return _single("deleteNamedRange", request)


def compose_replace_named_range(text: str, name: str | None = None, range_id: str | None = None) -> OperationBatch:
    validate_selector(name, range_id)
    request: dict[str, Any] = {"text": text}
    if name:
        request["namedRangeName"] = name
    else:
        request["namedRangeId"] = range_id
    return _single("replaceNamedRangeContent", request)


# -- Tabs -----------------------------------------------------------------------


def compose_add_tab(title: str, index: int = -1) -> OperationBatch:
    """Add a tab; ``index`` < 0 lets the API append it."""
    if not title:
        raise ValidationError("--title is required")
    props: dict[str, Any] = {"title": title}
    if index >= 0:
        props["index"] = index
    return _single("addDocumentTab", {"tabProperties": props})


def compose_delete_tab(tab_id: str) -> OperationBatch:
    return _single("deleteTab", {"tabId": tab_id})


def compose_rename_tab(tab_id: str, title: str) -> OperationBatch:
    if not title:
        raise ValidationError("--title is required")
    return _single("updateDocumentTabProperties", {
        "tabProperties": {"tabId": tab_id, "title": title},
        "fields": "title",
    })
