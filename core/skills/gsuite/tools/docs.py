#!/usr/bin/env -S uv run
# /// script
# dependencies = [
#   "google-api-python-client>=2.100.0",
#   "google-auth>=2.23.0",
#   "google-auth-oauthlib>=1.1.0",
#   "google-auth-httplib2>=0.1.1",
#   "typer>=0.9.0",
#   "rich>=13.0.0",
#   "pyyaml>=6.0",
# ]
# requires-python = ">=3.12"
# ///
"""Google Docs CLI for tab-aware, position-based editing.

Every editing command validates its flags, fetches the document at most once
(only when it needs positions or a tab), and submits a single batchUpdate.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any, Callable

import typer
from googleapiclient.discovery import build
from rich.tree import Tree

# Import sibling modules
SCRIPT_DIR = Path(__file__).parent
sys.path.insert(0, str(SCRIPT_DIR))
from auth import get_credentials  # noqa: E402
from docs_batch import (  # noqa: E402
    create_document,
    created_object_id,
    created_tab_id,
    fetch_document,
    occurrences_changed,
    submit_batch,
    trash_file,
)
from docs_compose import (  # noqa: E402
    append_index,
    build_text_requests,
    compose_add_list,
    compose_add_tab,
    compose_add_table,
    compose_append,
    compose_create_footer,
    compose_create_header,
    compose_create_named_range,
    compose_delete_footer,
    compose_delete_header,
    compose_delete_named_range,
    compose_delete_object,
    compose_delete_range,
    compose_delete_tab,
    compose_delete_table_column,
    compose_delete_table_row,
    compose_document_style,
    compose_footnote,
    compose_format_text,
    compose_initial_text,
    compose_inline_image,
    compose_insert,
    compose_insert_table_column,
    compose_insert_table_row,
    compose_merge_cells,
    compose_page_break,
    compose_paragraph_style,
    compose_pin_header_rows,
    compose_remove_list,
    compose_rename_tab,
    compose_replace,
    compose_replace_image,
    compose_replace_named_range,
    compose_section_break,
    compose_section_style,
    compose_table_cell_style,
    compose_table_column_width,
    compose_table_row_height,
    compose_unmerge_cells,
    list_text,
    parse_edit_plan,
)
from docs_errors import DocsError, ValidationError  # noqa: E402
from docs_ops import OperationBatch  # noqa: E402
from docs_tabs import (  # noqa: E402
    check_tab_flags,
    describe_tabs,
    find_tab,
    get_tab_body,
    resolve_tab_target,
    tab_id_of,
    tab_title_of,
)
from utils import (  # noqa: E402
    confirm_action,
    console,
    emit,
    fail,
    get_setting,
    output_format,
    stdout_console,
    warn,
)

app = typer.Typer(help="Google Docs CLI operations.")

DocArg = Annotated[str, typer.Argument(help="Document ID")]
TabOpt = Annotated[str | None, typer.Option("--tab", "-t", help="Tab ID or title (default: first tab)")]
TabIndexOpt = Annotated[
    int, typer.Option("--tab-index", help="Zero-based tab position in flattened order (alternative to --tab)")
]
AccountOpt = Annotated[str | None, typer.Option("--account", "-a", help="Account email (default: active)")]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON")]
ContentFormatOpt = Annotated[
    str | None,
    typer.Option("--content-format", "-f", help="markdown, plaintext, or richformat (JSON batchUpdate requests)"),
]
FromOpt = Annotated[int, typer.Option("--from", help="Start index (1-based)")]
ToOpt = Annotated[int, typer.Option("--to", help="End index (exclusive)")]
AtOpt = Annotated[int, typer.Option("--at", help="Insertion index (1-based)")]
TableStartOpt = Annotated[int, typer.Option("--table-start", help="Start index of the table")]
RowOpt = Annotated[int, typer.Option("--row", help="Zero-based row index")]
ColOpt = Annotated[int, typer.Option("--col", help="Zero-based column index")]
RowSpanOpt = Annotated[int, typer.Option("--row-span", help="Number of rows")]
ColSpanOpt = Annotated[int, typer.Option("--col-span", help="Number of columns")]
YesOpt = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")]


def get_docs_service(account: str | None = None):
    """Get authenticated Docs API service."""
    creds = get_credentials(account)
    return build("docs", "v1", credentials=creds)


def get_drive_service(account: str | None = None):
    """Get authenticated Drive API service (for trash/delete)."""
    creds = get_credentials(account)
    return build("drive", "v3", credentials=creds)


def default_content_format() -> str:
    return str(get_setting("docs.content_format", "markdown"))


def resolve_tab(service, doc_id: str, tab: str | None, tab_index: int = -1) -> str:
    """Resolve --tab/--tab-index to a tab ID, fetching only when one is given."""
    check_tab_flags(tab, tab_index)
    if not tab and tab_index < 0:
        return ""
    doc = fetch_document(service, doc_id)
    return resolve_tab_target(tab, tab_index, doc.get("tabs", []))


def prepare(
    account: str | None,
    doc_id: str,
    tab: str | None,
    compose: Callable[[str], OperationBatch],
) -> tuple[Any, OperationBatch, str]:
    """Build a tab-addressed batch with all validation ahead of any API call.

    ``compose`` is called once without a tab, which runs every check, and
    again with the resolved tab ID when --tab was given.
    """
    batch = compose("")
    service = get_docs_service(account)
    tab_id = resolve_tab(service, doc_id, tab)
    if tab_id:
        batch = compose(tab_id)
    return service, batch, tab_id


def tab_fields(tab_id: str) -> dict[str, Any]:
    return {"tab_id": tab_id} if tab_id else {}


def tab_suffix(tab_id: str) -> str:
    return f" [dim](tab: {tab_id})[/dim]" if tab_id else ""


def extract_text(content: list[dict[str, Any]]) -> str:
    """Plain text of a body, including table cells and section breaks."""
    parts: list[str] = []
    for element in content:
        if "paragraph" in element:
            for elem in element["paragraph"].get("elements", []):
                if "textRun" in elem:
                    parts.append(elem["textRun"].get("content", ""))
        if "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    parts.append(extract_text(cell.get("content", [])))
                    parts.append("\t")
                parts.append("\n")
        if "sectionBreak" in element:
            parts.append("\n---\n")
    return "".join(parts)


def extract_structure(content: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """One summary entry per paragraph, table, or section break."""
    structure = []
    for element in content:
        item: dict[str, Any] = {"start_index": element.get("startIndex", 0), "end_index": element.get("endIndex", 0)}
        if "paragraph" in element:
            paragraph = element["paragraph"]
            style = paragraph.get("paragraphStyle", {})
            item["type"] = "paragraph"
            item["style"] = style.get("namedStyleType", "")
            if style.get("headingId"):
                item["heading_id"] = style["headingId"]
            if "bullet" in paragraph:
                item["list_id"] = paragraph["bullet"].get("listId", "")
            text = "".join(
                elem["textRun"].get("content", "")
                for elem in paragraph.get("elements", [])
                if "textRun" in elem
            )
            item["text"] = text.strip()
        elif "table" in element:
            item["type"] = "table"
            item["rows"] = element["table"].get("rows", 0)
            item["columns"] = element["table"].get("columns", 0)
        elif "sectionBreak" in element:
            item["type"] = "section_break"
        else:
            continue
        structure.append(item)
    return structure


# -- Reading -------------------------------------------------------------------


@app.command()
def read(
    doc_id: DocArg,
    tab: TabOpt = None,
    tab_index: TabIndexOpt = -1,
    include_formatting: Annotated[
        bool, typer.Option("--include-formatting", help="Include a per-block structure summary")
    ] = False,
    raw: Annotated[bool, typer.Option("--raw", help="Output raw API response")] = False,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Read the text of a document tab."""
    try:
        check_tab_flags(tab, tab_index)
        service = get_docs_service(account)
        doc = fetch_document(service, doc_id)

        if raw:
            stdout_console.print_json(json.dumps(doc))
            return

        tab_id = resolve_tab_target(tab, tab_index, doc.get("tabs", []))
        body = get_tab_body(doc, tab_id)
        content = body.get("content", [])
        text = extract_text(content)
        title = doc.get("title", "Untitled")

        result: dict[str, Any] = {"doc_id": doc_id, "title": title, "text": text}
        if tab_id:
            result["tab_id"] = tab_id
            result["tab_title"] = tab_title_of(find_tab(doc.get("tabs", []), tab_id) or {})
        if include_formatting:
            result["structure"] = extract_structure(content)

        if output_format(json_output) != "text":
            emit(result, json_output)
            return

        heading = f"[bold]{title}[/bold]"
        if tab_id:
            heading += f" [dim](tab: {result['tab_title'] or tab_id})[/dim]"
        console.print(heading + "\n")
        stdout_console.print(text, markup=False, highlight=False)
        if include_formatting:
            for item in result["structure"]:
                console.print(
                    f"  [{item['start_index']}-{item['end_index']}] {item['type']}"
                    f" [dim]{item.get('style', '')}[/dim] {item.get('text', '')[:60]}"
                )

    except DocsError as e:
        fail(e, json_output)


@app.command()
def info(
    doc_id: DocArg,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Show document metadata, styles, and the flattened tab list."""
    try:
        service = get_docs_service(account)
        doc = fetch_document(service, doc_id)

        result: dict[str, Any] = {
            "doc_id": doc.get("documentId", doc_id),
            "title": doc.get("title", "Untitled"),
            "revision_id": doc.get("revisionId", ""),
        }
        page_size = doc.get("documentStyle", {}).get("pageSize")
        if page_size:
            result["style"] = {
                "page_width": page_size.get("width", {}),
                "page_height": page_size.get("height", {}),
            }
        styles = doc.get("namedStyles", {}).get("styles", [])
        if styles:
            result["named_styles"] = [s.get("namedStyleType", "") for s in styles]
        if doc.get("tabs"):
            result["tabs"] = describe_tabs(doc["tabs"])

        lines = [f"[bold]{result['title']}[/bold]", f"ID: {result['doc_id']}", f"Revision: {result['revision_id']}"]
        for t in result.get("tabs", []):
            indent = "  " * t["nesting_level"]
            lines.append(f"  {indent}[{t['position']}] {t['title'] or '(untitled)'} [dim]({t['tab_id']})[/dim]")
        emit(result, json_output, "\n".join(lines))

    except DocsError as e:
        fail(e, json_output)


@app.command()
def tabs(
    doc_id: DocArg,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """List all tabs, nested tabs included, with their --tab-index positions."""
    try:
        service = get_docs_service(account)
        doc = fetch_document(service, doc_id)
        title = doc.get("title", "Untitled")
        tab_tree = doc.get("tabs", [])
        summaries = describe_tabs(tab_tree)

        if output_format(json_output) != "text":
            emit({"doc_id": doc_id, "title": title, "tabs": summaries}, json_output)
            return

        # Walk in the same pre-order as describe_tabs so positions line up
        tree = Tree(f"[bold]{title}[/bold] ({len(summaries)} tabs)")
        position = 0
        stack = [(tree, t) for t in reversed(tab_tree)]
        while stack:
            parent, t = stack.pop()
            branch = parent.add(f"[{position}] {tab_title_of(t) or '(untitled)'} [dim]({tab_id_of(t)})[/dim]")
            position += 1
            stack.extend((branch, child) for child in reversed(t.get("childTabs", [])))
        console.print(tree)

    except DocsError as e:
        fail(e, json_output)


# -- Text ----------------------------------------------------------------------


@app.command()
def create(
    title: Annotated[str, typer.Argument(help="Document title")],
    text: Annotated[str | None, typer.Option("--text", help="Initial text content")] = None,
    content_format: ContentFormatOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Create a new Google Doc, optionally with initial content."""
    try:
        fmt = content_format or default_content_format()
        initial = compose_initial_text(text, fmt) if text else None

        service = get_docs_service(account)
        doc = create_document(service, title)
        doc_id = doc.get("documentId", "")
        if initial is not None:
            submit_batch(service, doc_id, initial, "add initial text")

        doc_url = f"https://docs.google.com/document/d/{doc_id}/edit"
        result: dict[str, Any] = {"status": "created", "doc_id": doc_id, "title": title, "url": doc_url}
        if text:
            result["text_length"] = len(text)
        emit(result, json_output, f"[green]Created:[/green] {title}\nID: {doc_id}\nURL: {doc_url}")

    except DocsError as e:
        fail(e, json_output)


@app.command()
def append(
    doc_id: DocArg,
    text: Annotated[str, typer.Option("--text", help="Text to append")],
    newline: Annotated[bool, typer.Option("--newline/--no-newline", help="Start on a new line")] = True,
    content_format: ContentFormatOpt = None,
    tab: TabOpt = None,
    tab_index: TabIndexOpt = -1,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Append text to the end of a document tab."""
    try:
        fmt = content_format or default_content_format()
        check_tab_flags(tab, tab_index)
        build_text_requests(text, fmt, 1)

        if fmt == "richformat":
            if not newline:
                warn("--no-newline is ignored for richformat content")
            if tab or tab_index >= 0:
                warn("--tab is ignored for richformat content; put tabId in the JSON requests")
                tab, tab_index = None, -1

        service = get_docs_service(account)
        doc = fetch_document(service, doc_id)
        tab_id = resolve_tab_target(tab, tab_index, doc.get("tabs", []))
        body = get_tab_body(doc, tab_id)
        index = append_index(body)
        batch = compose_append(body, text, fmt, tab_id, newline=newline)
        submit_batch(service, doc_id, batch, "append text")

        result = {"status": "appended", "doc_id": doc_id, "text_length": len(text), **tab_fields(tab_id)}
        if fmt == "richformat":
            result["requests"] = len(batch)
            emit(result, json_output, f"[green]Applied {len(batch)} richformat requests[/green]")
            return
        result["index"] = index
        emit(result, json_output, f"[green]Appended {len(text)} characters at index {index}[/green]{tab_suffix(tab_id)}")

    except DocsError as e:
        fail(e, json_output)


@app.command()
def insert(
    doc_id: DocArg,
    text: Annotated[str, typer.Option("--text", help="Text to insert")],
    at: Annotated[int | None, typer.Option("--at", help="Insertion index (1-based, default 1)")] = None,
    content_format: ContentFormatOpt = None,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert text at a position."""
    try:
        fmt = content_format or default_content_format()
        position = 1 if at is None else at
        if fmt == "richformat":
            if at is not None:
                warn("--at is ignored for richformat content; positions come from the JSON requests")
            if tab:
                warn("--tab is ignored for richformat content; put tabId in the JSON requests")
                tab = None

        service, batch, tab_id = prepare(
            account, doc_id, tab, lambda t: compose_insert(text, fmt, position, t),
        )
        submit_batch(service, doc_id, batch, "insert text")

        result = {"status": "inserted", "doc_id": doc_id, "text_length": len(text), **tab_fields(tab_id)}
        if fmt == "richformat":
            result["requests"] = len(batch)
            emit(result, json_output, f"[green]Applied {len(batch)} richformat requests[/green]")
            return
        result["position"] = position
        emit(result, json_output, f"[green]Inserted {len(text)} characters at index {position}[/green]{tab_suffix(tab_id)}")

    except DocsError as e:
        fail(e, json_output)


@app.command()
def replace(
    doc_id: DocArg,
    find: Annotated[str | None, typer.Option("--find", help="Text to find")] = None,
    replace_with: Annotated[str | None, typer.Option("--replace", help="Replacement text")] = None,
    plan: Annotated[Path | None, typer.Option("--plan", "-p", help="JSON file with several edits")] = None,
    match_case: Annotated[bool, typer.Option("--match-case/--ignore-case", help="Case-sensitive matching")] = True,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Replace all occurrences of text.

    Single edit:
        uv run docs.py replace <doc_id> --find "old" --replace "new"

    Several edits in one batch:
        uv run docs.py replace <doc_id> --plan /tmp/edits.json

    Plan JSON format:
        {"edits": [{"find": "old text", "replace": "new text"}, ...]}
    """
    try:
        if plan and (find is not None or replace_with is not None):
            raise ValidationError("cannot combine --plan with --find/--replace")
        if plan:
            if not plan.exists():
                raise ValidationError(f"plan file not found: {plan}")
            try:
                edits = parse_edit_plan(json.loads(plan.read_text()))
            except json.JSONDecodeError as e:
                raise ValidationError(f"invalid plan JSON: {e}") from e
        elif find and replace_with is not None:
            edits = [{"find": find, "replace": replace_with}]
        else:
            raise ValidationError("provide --find and --replace, or --plan")

        service, batch, tab_id = prepare(
            account, doc_id, tab, lambda t: compose_replace(edits, t, match_case),
        )
        replies = submit_batch(service, doc_id, batch, "replace text")

        edit_results = []
        for i, edit in enumerate(edits):
            count = occurrences_changed(replies, i)
            edit_results.append({"find": edit["find"], "replace": edit["replace"], "occurrences_changed": count})
            if count == 0:
                warn(f"no occurrences of \"{edit['find'][:50]}\"")
        total = sum(e["occurrences_changed"] for e in edit_results)

        result: dict[str, Any] = {"status": "replaced", "doc_id": doc_id, "replacements": total, **tab_fields(tab_id)}
        if plan:
            result["edits"] = edit_results
        else:
            result["find"] = edits[0]["find"]
            result["replace"] = edits[0]["replace"]
        emit(result, json_output, f"[green]Replaced {total} occurrence(s)[/green]{tab_suffix(tab_id)}")

    except DocsError as e:
        fail(e, json_output)


@app.command("delete")
def delete_range(
    doc_id: DocArg,
    start: FromOpt,
    end: ToOpt,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete the content in [--from, --to)."""
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, lambda t: compose_delete_range(start, end, t))
        submit_batch(service, doc_id, batch, "delete content")
        result = {"status": "deleted", "doc_id": doc_id, "from": start, "to": end, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Deleted content {start}-{end}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


# -- Formatting ----------------------------------------------------------------


@app.command("format")
def format_text(
    doc_id: DocArg,
    start: FromOpt,
    end: ToOpt,
    bold: Annotated[bool | None, typer.Option("--bold/--no-bold", help="Set or clear bold")] = None,
    italic: Annotated[bool | None, typer.Option("--italic/--no-italic", help="Set or clear italic")] = None,
    font_size: Annotated[int, typer.Option("--font-size", help="Font size in points")] = 0,
    color: Annotated[str, typer.Option("--color", help="Text color (#RRGGBB)")] = "",
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Apply character formatting to a range."""
    try:
        service, batch, tab_id = prepare(
            account, doc_id, tab,
            lambda t: compose_format_text(start, end, t, bold=bold, italic=italic, font_size=font_size, color=color),
        )
        submit_batch(service, doc_id, batch, "format text")
        result = {"status": "formatted", "doc_id": doc_id, "from": start, "to": end, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Formatted {start}-{end}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


@app.command("set-paragraph-style")
def set_paragraph_style(
    doc_id: DocArg,
    start: FromOpt,
    end: ToOpt,
    alignment: Annotated[str, typer.Option("--alignment", help="START, CENTER, END, or JUSTIFIED")] = "",
    line_spacing: Annotated[float, typer.Option("--line-spacing", help="Line spacing multiplier, e.g. 1.5")] = 0,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Set paragraph alignment and line spacing."""
    try:
        service, batch, tab_id = prepare(
            account, doc_id, tab,
            lambda t: compose_paragraph_style(start, end, t, alignment=alignment, line_spacing=line_spacing),
        )
        submit_batch(service, doc_id, batch, "update paragraph style")
        result = {"status": "styled", "doc_id": doc_id, "from": start, "to": end, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Styled paragraphs {start}-{end}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


@app.command("add-list")
def add_list(
    doc_id: DocArg,
    items: Annotated[str, typer.Option("--items", help="Items separated by semicolons")],
    at: AtOpt = 1,
    list_type: Annotated[str, typer.Option("--type", help="bullet or numbered")] = "bullet",
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert a bulleted or numbered list."""
    try:
        service, batch, tab_id = prepare(
            account, doc_id, tab, lambda t: compose_add_list(at, items, list_type, t),
        )
        submit_batch(service, doc_id, batch, "add list")
        count = len(list_text(items)[0])
        result = {"status": "created", "doc_id": doc_id, "position": at, "type": list_type, "items": count, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Added {list_type} list with {count} item(s) at index {at}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


@app.command("remove-list")
def remove_list(
    doc_id: DocArg,
    start: FromOpt,
    end: ToOpt,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Remove list bullets from paragraphs in a range."""
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, lambda t: compose_remove_list(start, end, t))
        submit_batch(service, doc_id, batch, "remove list")
        result = {"status": "removed", "doc_id": doc_id, "from": start, "to": end, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Removed bullets from {start}-{end}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


@app.command("update-style")
def update_style(
    doc_id: DocArg,
    margin_top: Annotated[float | None, typer.Option("--margin-top", help="Top margin in points")] = None,
    margin_bottom: Annotated[float | None, typer.Option("--margin-bottom", help="Bottom margin in points")] = None,
    margin_left: Annotated[float | None, typer.Option("--margin-left", help="Left margin in points")] = None,
    margin_right: Annotated[float | None, typer.Option("--margin-right", help="Right margin in points")] = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Update document margins."""
    try:
        batch = compose_document_style(
            margin_top=margin_top, margin_bottom=margin_bottom, margin_left=margin_left, margin_right=margin_right,
        )
        submit_batch(get_docs_service(account), doc_id, batch, "update document style")
        emit({"status": "updated", "doc_id": doc_id}, json_output, "[green]Updated document style[/green]")
    except DocsError as e:
        fail(e, json_output)


@app.command("update-section-style")
def update_section_style(
    doc_id: DocArg,
    start: FromOpt,
    end: ToOpt,
    column_count: Annotated[int, typer.Option("--column-count", help="Number of columns")] = 0,
    content_direction: Annotated[
        str, typer.Option("--content-direction", help="LEFT_TO_RIGHT or RIGHT_TO_LEFT")
    ] = "",
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Update columns or direction of the sections in a range."""
    try:
        service, batch, tab_id = prepare(
            account, doc_id, tab,
            lambda t: compose_section_style(start, end, t, column_count=column_count, content_direction=content_direction),
        )
        submit_batch(service, doc_id, batch, "update section style")
        result = {"status": "updated", "doc_id": doc_id, "from": start, "to": end, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Updated section style {start}-{end}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


# -- Tables --------------------------------------------------------------------


@app.command("add-table")
def add_table(
    doc_id: DocArg,
    rows: Annotated[int, typer.Option("--rows", help="Number of rows")] = 3,
    cols: Annotated[int, typer.Option("--cols", help="Number of columns")] = 3,
    at: AtOpt = 1,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert an empty table."""
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, lambda t: compose_add_table(at, rows, cols, t))
        submit_batch(service, doc_id, batch, "add table")
        result = {"status": "created", "doc_id": doc_id, "rows": rows, "columns": cols, "position": at, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Added {rows}x{cols} table at index {at}[/green]{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


def _table_edit(
    doc_id: str,
    tab: str | None,
    account: str | None,
    json_output: bool,
    compose: Callable[[str], OperationBatch],
    intent: str,
    status: str,
    fields: dict[str, Any],
) -> None:
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, compose)
        submit_batch(service, doc_id, batch, intent)
        result = {"status": status, "doc_id": doc_id, **fields, **tab_fields(tab_id)}
        emit(result, json_output, f"[green]Done:[/green] {intent}{tab_suffix(tab_id)}")
    except DocsError as e:
        fail(e, json_output)


@app.command("insert-table-row")
def insert_table_row(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    below: Annotated[bool, typer.Option("--below/--above", help="Insert below the reference cell")] = True,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert a table row next to a reference cell."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_insert_table_row(table_start, row, col, t, below=below),
        "insert table row", "inserted", {"table_start": table_start, "row": row, "below": below},
    )


@app.command("delete-table-row")
def delete_table_row(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete the table row containing a reference cell."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_delete_table_row(table_start, row, col, t),
        "delete table row", "deleted", {"table_start": table_start, "row": row},
    )


@app.command("insert-table-col")
def insert_table_col(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    right: Annotated[bool, typer.Option("--right/--left", help="Insert right of the reference cell")] = True,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert a table column next to a reference cell."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_insert_table_column(table_start, row, col, t, right=right),
        "insert table column", "inserted", {"table_start": table_start, "col": col, "right": right},
    )


@app.command("delete-table-col")
def delete_table_col(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete the table column containing a reference cell."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_delete_table_column(table_start, row, col, t),
        "delete table column", "deleted", {"table_start": table_start, "col": col},
    )


@app.command("merge-cells")
def merge_cells(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    row_span: RowSpanOpt = 1,
    col_span: ColSpanOpt = 1,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Merge a rectangular range of table cells."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_merge_cells(table_start, row, col, row_span, col_span, t),
        "merge cells", "merged",
        {"table_start": table_start, "row": row, "col": col, "row_span": row_span, "col_span": col_span},
    )


@app.command("unmerge-cells")
def unmerge_cells(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    row_span: RowSpanOpt = 1,
    col_span: ColSpanOpt = 1,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Unmerge table cells in a range."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_unmerge_cells(table_start, row, col, row_span, col_span, t),
        "unmerge cells", "unmerged",
        {"table_start": table_start, "row": row, "col": col, "row_span": row_span, "col_span": col_span},
    )


@app.command("pin-rows")
def pin_rows(
    doc_id: DocArg,
    table_start: TableStartOpt,
    count: Annotated[int, typer.Option("--count", help="Number of header rows to pin (0 unpins)")],
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Pin table header rows."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_pin_header_rows(table_start, count, t),
        "pin header rows", "pinned", {"table_start": table_start, "count": count},
    )


@app.command("update-table-cell-style")
def update_table_cell_style(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt = 0,
    col: ColOpt = 0,
    row_span: RowSpanOpt = 1,
    col_span: ColSpanOpt = 1,
    bg_color: Annotated[str, typer.Option("--bg-color", help="Background color (#RRGGBB)")] = "",
    padding: Annotated[float | None, typer.Option("--padding", help="Padding on all sides, in points")] = None,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Set background color and padding of table cells."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_table_cell_style(table_start, row, col, row_span, col_span, t, bg_color=bg_color, padding=padding),
        "update table cell style", "updated", {"table_start": table_start, "row": row, "col": col},
    )


@app.command("update-table-col-properties")
def update_table_col_properties(
    doc_id: DocArg,
    table_start: TableStartOpt,
    col_index: Annotated[int, typer.Option("--col-index", help="Zero-based column index")],
    width: Annotated[float, typer.Option("--width", help="Column width in points")],
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Set a fixed table column width."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_table_column_width(table_start, col_index, width, t),
        "update table column properties", "updated",
        {"table_start": table_start, "col_index": col_index, "width": width},
    )


@app.command("update-table-row-style")
def update_table_row_style(
    doc_id: DocArg,
    table_start: TableStartOpt,
    row: RowOpt,
    min_height: Annotated[float, typer.Option("--min-height", help="Minimum row height in points")],
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Set the minimum height of a table row."""
    _table_edit(
        doc_id, tab, account, json_output,
        lambda t: compose_table_row_height(table_start, row, min_height, t),
        "update table row style", "updated", {"table_start": table_start, "row": row, "min_height": min_height},
    )


# -- Breaks, images, footnotes -------------------------------------------------


@app.command("page-break")
def page_break(
    doc_id: DocArg,
    at: AtOpt = 1,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert a page break."""
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, lambda t: compose_page_break(at, t))
        submit_batch(service, doc_id, batch, "insert page break")
        emit(
            {"status": "inserted", "doc_id": doc_id, "position": at, **tab_fields(tab_id)},
            json_output, f"[green]Inserted page break at index {at}[/green]{tab_suffix(tab_id)}",
        )
    except DocsError as e:
        fail(e, json_output)


@app.command("section-break")
def section_break(
    doc_id: DocArg,
    at: AtOpt = 1,
    section_type: Annotated[str, typer.Option("--type", help="NEXT_PAGE or CONTINUOUS")] = "NEXT_PAGE",
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert a section break."""
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, lambda t: compose_section_break(at, section_type, t))
        submit_batch(service, doc_id, batch, "insert section break")
        emit(
            {"status": "inserted", "doc_id": doc_id, "position": at, "type": section_type.upper(), **tab_fields(tab_id)},
            json_output, f"[green]Inserted {section_type.upper()} section break at index {at}[/green]{tab_suffix(tab_id)}",
        )
    except DocsError as e:
        fail(e, json_output)


@app.command("add-image")
def add_image(
    doc_id: DocArg,
    uri: Annotated[str, typer.Option("--uri", help="Public image URL")],
    at: AtOpt = 1,
    width: Annotated[float, typer.Option("--width", help="Width in points")] = 0,
    height: Annotated[float, typer.Option("--height", help="Height in points")] = 0,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert an inline image."""
    try:
        service, batch, tab_id = prepare(
            account, doc_id, tab, lambda t: compose_inline_image(uri, at, t, width, height),
        )
        replies = submit_batch(service, doc_id, batch, "insert image")
        object_id = created_object_id(replies, 0, "insertInlineImage")
        emit(
            {"status": "inserted", "doc_id": doc_id, "object_id": object_id, "position": at, **tab_fields(tab_id)},
            json_output, f"[green]Inserted image:[/green] {object_id}{tab_suffix(tab_id)}",
        )
    except DocsError as e:
        fail(e, json_output)


@app.command("replace-image")
def replace_image(
    doc_id: DocArg,
    object_id: Annotated[str, typer.Option("--object-id", help="Inline image object ID")],
    uri: Annotated[str, typer.Option("--uri", help="New image URL")],
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Replace an existing image."""
    try:
        submit_batch(get_docs_service(account), doc_id, compose_replace_image(object_id, uri), "replace image")
        emit({"status": "replaced", "doc_id": doc_id, "object_id": object_id}, json_output,
             f"[green]Replaced image:[/green] {object_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("delete-object")
def delete_object(
    doc_id: DocArg,
    object_id: Annotated[str, typer.Argument(help="Positioned object ID")],
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete a positioned object."""
    try:
        submit_batch(get_docs_service(account), doc_id, compose_delete_object(object_id), "delete object")
        emit({"status": "deleted", "doc_id": doc_id, "object_id": object_id}, json_output,
             f"[green]Deleted object:[/green] {object_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("add-footnote")
def add_footnote(
    doc_id: DocArg,
    at: Annotated[int, typer.Option("--at", help="Insertion index (1-based)")],
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Insert a footnote reference."""
    try:
        service, batch, tab_id = prepare(account, doc_id, tab, lambda t: compose_footnote(at, t))
        replies = submit_batch(service, doc_id, batch, "add footnote")
        footnote_id = created_object_id(replies, 0, "createFootnote")
        emit(
            {"status": "created", "doc_id": doc_id, "footnote_id": footnote_id, "position": at, **tab_fields(tab_id)},
            json_output, f"[green]Added footnote:[/green] {footnote_id}{tab_suffix(tab_id)}",
        )
    except DocsError as e:
        fail(e, json_output)


# -- Headers, footers, named ranges --------------------------------------------


@app.command("add-header")
def add_header(
    doc_id: DocArg,
    header_type: Annotated[str, typer.Option("--type", help="Header type")] = "DEFAULT",
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Create the document header."""
    try:
        batch = compose_create_header(header_type)
        replies = submit_batch(get_docs_service(account), doc_id, batch, "add header")
        header_id = created_object_id(replies, 0, "createHeader")
        emit({"status": "created", "doc_id": doc_id, "header_id": header_id}, json_output,
             f"[green]Created header:[/green] {header_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("delete-header")
def delete_header(
    doc_id: DocArg,
    header_id: Annotated[str, typer.Argument(help="Header ID")],
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete a header."""
    try:
        submit_batch(get_docs_service(account), doc_id, compose_delete_header(header_id), "delete header")
        emit({"status": "deleted", "doc_id": doc_id, "header_id": header_id}, json_output,
             f"[green]Deleted header:[/green] {header_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("add-footer")
def add_footer(
    doc_id: DocArg,
    footer_type: Annotated[str, typer.Option("--type", help="Footer type")] = "DEFAULT",
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Create the document footer."""
    try:
        batch = compose_create_footer(footer_type)
        replies = submit_batch(get_docs_service(account), doc_id, batch, "add footer")
        footer_id = created_object_id(replies, 0, "createFooter")
        emit({"status": "created", "doc_id": doc_id, "footer_id": footer_id}, json_output,
             f"[green]Created footer:[/green] {footer_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("delete-footer")
def delete_footer(
    doc_id: DocArg,
    footer_id: Annotated[str, typer.Argument(help="Footer ID")],
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete a footer."""
    try:
        submit_batch(get_docs_service(account), doc_id, compose_delete_footer(footer_id), "delete footer")
        emit({"status": "deleted", "doc_id": doc_id, "footer_id": footer_id}, json_output,
             f"[green]Deleted footer:[/green] {footer_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("add-named-range")
def add_named_range(
    doc_id: DocArg,
    name: Annotated[str, typer.Option("--name", help="Range name")],
    start: FromOpt,
    end: ToOpt,
    tab: TabOpt = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Name a range of content."""
    try:
        service, batch, tab_id = prepare(
            account, doc_id, tab, lambda t: compose_create_named_range(name, start, end, t),
        )
        replies = submit_batch(service, doc_id, batch, "add named range")
        range_id = created_object_id(replies, 0, "createNamedRange")
        emit(
            {"status": "created", "doc_id": doc_id, "name": name, "named_range_id": range_id, **tab_fields(tab_id)},
            json_output, f"[green]Created named range:[/green] {name} ({range_id}){tab_suffix(tab_id)}",
        )
    except DocsError as e:
        fail(e, json_output)


@app.command("delete-named-range")
def delete_named_range(
    doc_id: DocArg,
    name: Annotated[str | None, typer.Option("--name", help="Range name")] = None,
    range_id: Annotated[str | None, typer.Option("--id", help="Named range ID")] = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete a named range by name or ID (not its content)."""
    try:
        batch = compose_delete_named_range(name, range_id)
        submit_batch(get_docs_service(account), doc_id, batch, "delete named range")
        target = name or range_id
        emit({"status": "deleted", "doc_id": doc_id, "named_range": target}, json_output,
             f"[green]Deleted named range:[/green] {target}")
    except DocsError as e:
        fail(e, json_output)


@app.command("replace-named-range")
def replace_named_range(
    doc_id: DocArg,
    text: Annotated[str, typer.Option("--text", help="Replacement text")],
    name: Annotated[str | None, typer.Option("--name", help="Range name")] = None,
    range_id: Annotated[str | None, typer.Option("--id", help="Named range ID")] = None,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Replace the content of a named range."""
    try:
        batch = compose_replace_named_range(text, name, range_id)
        submit_batch(get_docs_service(account), doc_id, batch, "replace named range content")
        target = name or range_id
        emit({"status": "replaced", "doc_id": doc_id, "named_range": target}, json_output,
             f"[green]Replaced content of named range:[/green] {target}")
    except DocsError as e:
        fail(e, json_output)


# -- Tabs and document lifecycle -----------------------------------------------


@app.command("add-tab")
def add_tab(
    doc_id: DocArg,
    title: Annotated[str, typer.Option("--title", help="Tab title")],
    index: Annotated[int, typer.Option("--index", "-i", help="Position among sibling tabs")] = -1,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Add a tab to a document."""
    try:
        batch = compose_add_tab(title, index)
        replies = submit_batch(get_docs_service(account), doc_id, batch, "add tab")
        tab_id = created_tab_id(replies)
        emit({"status": "created", "doc_id": doc_id, "tab_id": tab_id, "title": title}, json_output,
             f"[green]Created tab:[/green] {title}\nTab ID: {tab_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("delete-tab")
def delete_tab(
    doc_id: DocArg,
    tab_id: Annotated[str, typer.Option("--tab-id", help="Tab ID to delete")],
    yes: YesOpt = False,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Delete a tab and its child tabs."""
    try:
        batch = compose_delete_tab(tab_id)
        if not confirm_action("Delete tab", f"Tab {tab_id} in {doc_id}, including child tabs", "docs",
                              skip_confirmation=yes):
            console.print("[yellow]Aborted[/yellow]")
            raise typer.Exit(0)
        submit_batch(get_docs_service(account), doc_id, batch, "delete tab")
        emit({"status": "deleted", "doc_id": doc_id, "tab_id": tab_id}, json_output,
             f"[green]Deleted tab:[/green] {tab_id}")
    except DocsError as e:
        fail(e, json_output)


@app.command("rename-tab")
def rename_tab(
    doc_id: DocArg,
    tab_id: Annotated[str, typer.Option("--tab-id", help="Tab ID to rename")],
    title: Annotated[str, typer.Option("--title", help="New tab title")],
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Rename a tab."""
    try:
        batch = compose_rename_tab(tab_id, title)
        submit_batch(get_docs_service(account), doc_id, batch, "rename tab")
        emit({"status": "renamed", "doc_id": doc_id, "tab_id": tab_id, "title": title}, json_output,
             f"[green]Renamed tab {tab_id} to:[/green] {title}")
    except DocsError as e:
        fail(e, json_output)


@app.command()
def trash(
    doc_id: DocArg,
    permanent: Annotated[bool, typer.Option("--permanent", help="Delete permanently instead of trashing")] = False,
    yes: YesOpt = False,
    account: AccountOpt = None,
    json_output: JsonOpt = False,
) -> None:
    """Move a document to the Drive trash."""
    try:
        if permanent and not confirm_action("Delete document", f"Permanently delete {doc_id}? This cannot be undone.",
                                            "docs", skip_confirmation=yes):
            console.print("[yellow]Aborted[/yellow]")
            raise typer.Exit(0)
        trash_file(get_drive_service(account), doc_id, permanent)
        status = "deleted" if permanent else "trashed"
        emit({"status": status, "doc_id": doc_id}, json_output, f"[green]{status.capitalize()}:[/green] {doc_id}")
    except DocsError as e:
        fail(e, json_output)


if __name__ == "__main__":
    app()
