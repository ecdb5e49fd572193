"""Tests for the Docs request composers."""
from __future__ import annotations

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from builders import body, paragraph
from docs_compose import (
    append_index,
    build_text_requests,
    compose_add_list,
    compose_add_tab,
    compose_add_table,
    compose_append,
    compose_create_header,
    compose_create_named_range,
    compose_delete_named_range,
    compose_delete_range,
    compose_document_style,
    compose_format_text,
    compose_inline_image,
    compose_insert,
    compose_merge_cells,
    compose_paragraph_style,
    compose_pin_header_rows,
    compose_rename_tab,
    compose_replace,
    compose_replace_named_range,
    compose_section_break,
    compose_section_style,
    compose_table_cell_style,
    compose_table_column_width,
    list_text,
    parse_edit_plan,
)
from docs_errors import (
    AmbiguousSelector,
    EmptyDocument,
    ParseError,
    UnknownFormat,
    ValidationError,
)

RICH = json.dumps([{"insertText": {"location": {"index": 3}, "text": "Rich"}}])


# ---------------------------------------------------------------------------
# build_text_requests
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("fmt", ["plaintext", "markdown"])
def test_plain_and_markdown_insert_literal_text(fmt):
    text = "# Title\n\n**not** converted"
    (op,) = build_text_requests(text, fmt, 5, "")
    assert op.kind == "insertText"
    assert op.body == {"location": {"index": 5}, "text": text}


def test_text_request_carries_tab():
    (op,) = build_text_requests("x", "plaintext", 2, "t.4")
    assert op.body["location"] == {"index": 2, "tabId": "t.4"}


def test_richformat_ignores_position_and_tab():
    (op,) = build_text_requests(RICH, "richformat", 99, "t.4")
    assert op.body == {"location": {"index": 3}, "text": "Rich"}


def test_malformed_richformat():
    with pytest.raises(ParseError):
        build_text_requests("[{", "richformat", 1)


def test_unknown_content_format():
    with pytest.raises(UnknownFormat, match="unknown content format: html"):
        build_text_requests("x", "html", 1)


@given(st.text(max_size=50), st.integers(min_value=1, max_value=10_000))
def test_plaintext_is_never_rewritten(text, index):
    (op,) = build_text_requests(text, "plaintext", index)
    assert op.body["text"] == text
    assert op.body["location"]["index"] == index


# ---------------------------------------------------------------------------
# append / insert
# ---------------------------------------------------------------------------


def test_append_index_is_before_final_newline():
    assert append_index(body(paragraph(1, 20, "a"), paragraph(20, 50, "b"))) == 49


def test_append_prefixes_newline():
    batch = compose_append(body(paragraph(1, 50, "x")), "tail", "plaintext")
    assert batch[0].body == {"location": {"index": 49}, "text": "\ntail"}


def test_append_without_newline():
    batch = compose_append(body(paragraph(1, 50, "x")), "tail", "markdown", "t.1", newline=False)
    assert batch[0].body == {"location": {"index": 49, "tabId": "t.1"}, "text": "tail"}


def test_append_richformat_is_taken_as_is():
    batch = compose_append(body(paragraph(1, 50, "x")), RICH, "richformat")
    assert batch[0].body["text"] == "Rich"


def test_append_to_empty_body():
    with pytest.raises(EmptyDocument, match="document has no content"):
        compose_append(body(), "tail", "plaintext")


def test_insert_validates_position():
    with pytest.raises(ValidationError, match="--at must be >= 1"):
        compose_insert("x", "plaintext", 0)


def test_insert_richformat_skips_position_check():
    assert len(compose_insert(RICH, "richformat", 0)) == 1


# ---------------------------------------------------------------------------
# replace
# ---------------------------------------------------------------------------


def test_parse_edit_plan_shapes():
    edits = [{"find": "a", "replace": "b"}]
    assert parse_edit_plan({"edits": edits}) == edits
    assert parse_edit_plan(edits) == edits


@pytest.mark.parametrize("data,message", [
    ({"other": []}, "plan must be"),
    ([{"find": "a"}], "edit 0 missing"),
    ([{"find": "", "replace": "b"}], "empty 'find'"),
    ([], "no edits"),
])
def test_parse_edit_plan_rejects(data, message):
    with pytest.raises(ValidationError, match=message):
        parse_edit_plan(data)


def test_compose_replace_one_request_per_edit():
    batch = compose_replace([{"find": "a", "replace": "b"}, {"find": "c", "replace": ""}], "t.2", match_case=False)
    assert batch.kinds == ["replaceAllText", "replaceAllText"]
    assert batch[0].body == {
        "containsText": {"text": "a", "matchCase": False},
        "replaceText": "b",
        "tabsCriteria": {"tabIds": ["t.2"]},
    }


def test_compose_replace_all_tabs_by_default():
    (op,) = compose_replace([{"find": "a", "replace": "b"}])
    assert "tabsCriteria" not in op.body


# ---------------------------------------------------------------------------
# ranges and lists
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("start,end,message", [
    (0, 5, "--from must be >= 1"),
    (5, 5, "--to must be greater than --from"),
    (8, 3, "--to must be greater than --from"),
])
def test_delete_range_validation(start, end, message):
    with pytest.raises(ValidationError, match=message):
        compose_delete_range(start, end)


def test_delete_range():
    (op,) = compose_delete_range(3, 9, "t.1")
    assert op.to_request() == {"deleteContentRange": {"range": {"startIndex": 3, "endIndex": 9, "tabId": "t.1"}}}


def test_add_list_bullets_exactly_the_inserted_span():
    batch = compose_add_list(10, "A;B")
    assert batch.kinds == ["insertText", "createParagraphBullets"]
    assert batch[0].body == {"location": {"index": 10}, "text": "A\nB\n"}
    assert batch[1].body == {
        "range": {"startIndex": 10, "endIndex": 10 + len("A\nB\n")},
        "bulletPreset": "BULLET_DISC_CIRCLE_SQUARE",
    }


def test_add_numbered_list_in_tab():
    batch = compose_add_list(4, " one ; two; three", "numbered", "t.3")
    assert batch[0].body["text"] == "one\ntwo\nthree\n"
    assert batch[1].body["range"] == {"startIndex": 4, "endIndex": 18, "tabId": "t.3"}
    assert batch[1].body["bulletPreset"] == "NUMBERED_DECIMAL_NESTED"


@given(
    st.lists(st.text(alphabet="abcxyz \u00e9\u4e2d\U0001F600\U0001D11E", min_size=1, max_size=8), min_size=1, max_size=6),
    st.integers(min_value=1, max_value=5_000),
)
def test_add_list_range_matches_inserted_text(items, position):
    batch = compose_add_list(position, ";".join(items))
    inserted = batch[0].body["text"]
    bullet_range = batch[1].body["range"]
    assert bullet_range["startIndex"] == position
    assert bullet_range["endIndex"] == position + len(inserted.encode("utf-16-le")) // 2
    assert inserted.endswith("\n")


def test_add_list_range_covers_emoji_items():
    batch = compose_add_list(10, "\U0001F600\U0001F600\U0001F600;B")
    assert batch[0].body["text"] == "\U0001F600\U0001F600\U0001F600\nB\n"
    # three surrogate pairs, two newlines, one letter
    assert batch[1].body["range"] == {"startIndex": 10, "endIndex": 19}


def test_add_list_rejects_unknown_type():
    with pytest.raises(ValidationError, match="invalid list type"):
        compose_add_list(1, "a", "checkbox")


def test_list_text():
    assert list_text("a; b") == (["a", "b"], "a\nb\n")


# ---------------------------------------------------------------------------
# styles
# ---------------------------------------------------------------------------


def test_format_text_fields_follow_given_options():
    (op,) = compose_format_text(1, 6, bold=True, font_size=14, color="#FF0000")
    assert op.body["fields"] == "bold,fontSize,foregroundColor"
    assert op.body["textStyle"]["fontSize"] == {"magnitude": 14, "unit": "PT"}
    assert op.body["textStyle"]["foregroundColor"] == {
        "color": {"rgbColor": {"red": 1.0, "green": 0.0, "blue": 0.0}}
    }


def test_format_text_can_clear_bold():
    (op,) = compose_format_text(1, 6, bold=False)
    assert op.body["textStyle"] == {"bold": False}
    assert op.body["fields"] == "bold"


def test_format_text_needs_an_option():
    with pytest.raises(ValidationError, match="no formatting options specified"):
        compose_format_text(1, 6)


def test_format_text_bad_color():
    with pytest.raises(ValidationError, match="invalid hex color"):
        compose_format_text(1, 6, color="red")


def test_paragraph_style_line_spacing_is_a_percentage():
    (op,) = compose_paragraph_style(1, 10, alignment="center", line_spacing=1.5)
    assert op.body["paragraphStyle"] == {"alignment": "CENTER", "lineSpacing": 150.0}
    assert op.body["fields"] == "alignment,lineSpacing"


def test_paragraph_style_bad_alignment():
    with pytest.raises(ValidationError, match="invalid alignment: middle"):
        compose_paragraph_style(1, 10, alignment="middle")


def test_section_style_columns():
    (op,) = compose_section_style(1, 10, column_count=2, content_direction="right_to_left")
    assert op.body["sectionStyle"] == {"columnProperties": [{}, {}], "contentDirection": "RIGHT_TO_LEFT"}


def test_document_style_margins():
    (op,) = compose_document_style(margin_top=72, margin_left=0)
    assert op.body == {
        "documentStyle": {
            "marginTop": {"magnitude": 72, "unit": "PT"},
            "marginLeft": {"magnitude": 0, "unit": "PT"},
        },
        "fields": "marginTop,marginLeft",
    }


@pytest.mark.parametrize("kwargs,message", [
    ({}, "no margin options specified"),
    ({"margin_bottom": -1}, "marginBottom must be >= 0"),
])
def test_document_style_validation(kwargs, message):
    with pytest.raises(ValidationError, match=message):
        compose_document_style(**kwargs)


# ---------------------------------------------------------------------------
# tables
# ---------------------------------------------------------------------------


def test_add_table():
    (op,) = compose_add_table(7, 2, 3, "t.1")
    assert op.body == {"rows": 2, "columns": 3, "location": {"index": 7, "tabId": "t.1"}}


@pytest.mark.parametrize("rows,cols", [(0, 2), (2, 0)])
def test_add_table_needs_cells(rows, cols):
    with pytest.raises(ValidationError):
        compose_add_table(1, rows, cols)


def test_merge_cells_range():
    (op,) = compose_merge_cells(12, 1, 0, 2, 3)
    assert op.body == {
        "tableRange": {
            "tableCellLocation": {"tableStartLocation": {"index": 12}, "rowIndex": 1, "columnIndex": 0},
            "rowSpan": 2,
            "columnSpan": 3,
        }
    }


@pytest.mark.parametrize("args,message", [
    ((0, 0, 0, 1, 1), "--table-start must be >= 1"),
    ((5, -1, 0, 1, 1), "--row must be >= 0"),
    ((5, 0, -1, 1, 1), "--col must be >= 0"),
    ((5, 0, 0, 0, 1), "--row-span must be >= 1"),
    ((5, 0, 0, 1, 0), "--col-span must be >= 1"),
])
def test_merge_cells_validation(args, message):
    with pytest.raises(ValidationError, match=message):
        compose_merge_cells(*args)


def test_pin_zero_rows_unpins():
    (op,) = compose_pin_header_rows(5, 0)
    assert op.body["pinnedHeaderRowsCount"] == 0


def test_cell_style_padding_on_all_sides():
    (op,) = compose_table_cell_style(5, 0, 0, padding=4)
    assert op.body["fields"] == "paddingTop,paddingBottom,paddingLeft,paddingRight"
    assert op.body["tableCellStyle"]["paddingLeft"] == {"magnitude": 4, "unit": "PT"}


def test_cell_style_needs_an_option():
    with pytest.raises(ValidationError, match="no cell style options"):
        compose_table_cell_style(5, 0, 0)


def test_column_width_is_fixed():
    (op,) = compose_table_column_width(5, 1, 120)
    assert op.body["tableColumnProperties"] == {"width": {"magnitude": 120, "unit": "PT"}, "widthType": "FIXED_WIDTH"}
    assert op.body["columnIndices"] == [1]


# ---------------------------------------------------------------------------
# breaks, images, headers, named ranges, tabs
# ---------------------------------------------------------------------------


def test_section_break_type_is_normalized():
    (op,) = compose_section_break(3, "continuous")
    assert op.body["sectionType"] == "CONTINUOUS"


def test_section_break_bad_type():
    with pytest.raises(ValidationError, match="invalid section break type"):
        compose_section_break(3, "odd_page")


def test_inline_image_size():
    (op,) = compose_inline_image("https://example.com/a.png", 2, width=100)
    assert op.body == {
        "uri": "https://example.com/a.png",
        "location": {"index": 2},
        "objectSize": {"width": {"magnitude": 100, "unit": "PT"}},
    }


def test_header_targets_first_section():
    (op,) = compose_create_header()
    assert op.body == {"type": "DEFAULT", "sectionBreakLocation": {"index": 0}}


def test_named_range_needs_a_name():
    with pytest.raises(ValidationError, match="--name is required"):
        compose_create_named_range("", 1, 5)


@pytest.mark.parametrize("name,range_id", [("n", "id1"), (None, None), ("", "")])
def test_named_range_selector_must_be_exactly_one(name, range_id):
    with pytest.raises(AmbiguousSelector):
        compose_delete_named_range(name, range_id)
    with pytest.raises(AmbiguousSelector):
        compose_replace_named_range("text", name, range_id)


def test_named_range_by_name_or_id():
    assert compose_delete_named_range(name="intro")[0].body == {"name": "intro"}
    assert compose_delete_named_range(range_id="kix.1")[0].body == {"namedRangeId": "kix.1"}
    assert compose_replace_named_range("new", name="intro")[0].body == {"text": "new", "namedRangeName": "intro"}


def test_add_tab_index_is_optional():
    assert compose_add_tab("Notes")[0].body == {"tabProperties": {"title": "Notes"}}
    assert compose_add_tab("Notes", 0)[0].body == {"tabProperties": {"title": "Notes", "index": 0}}


def test_rename_tab_sets_title_field():
    (op,) = compose_rename_tab("t.1", "Renamed")
    assert op.body == {"tabProperties": {"tabId": "t.1", "title": "Renamed"}, "fields": "title"}
