"""Tests for tab flattening, resolution, and body location."""
from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from builders import body, document, nested_tabs, paragraph, tab
from docs_errors import (
    Ambiguous,
    ConflictingFlags,
    IndexOutOfRange,
    NoContent,
    NoTabs,
    NotFound,
    Unsupported,
)
from docs_tabs import (
    describe_tabs,
    find_tab,
    flatten_tabs,
    get_tab_body,
    resolve_tab_id,
    resolve_tab_target,
    tab_id_of,
)

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def _tab_trees(max_leaves: int = 25):
    """Random tab forests; ids are assigned afterwards so they are unique."""
    leaf = st.just([])
    children = st.recursive(leaf, lambda kids: st.lists(kids, max_size=3), max_leaves=max_leaves)
    return st.lists(children, max_size=4)


def _build(shape: list, counter: list[int]) -> list[dict]:
    tabs = []
    for child_shape in shape:
        tab_id = f"t.{counter[0]}"
        counter[0] += 1
        tabs.append(tab(tab_id, f"Tab {tab_id}", children=_build(child_shape, counter)))
    return tabs


def _preorder_ids(tabs: list[dict]) -> list[str]:
    ids = []
    for t in tabs:
        ids.append(tab_id_of(t))
        ids.extend(_preorder_ids(t["childTabs"]))
    return ids


# ---------------------------------------------------------------------------
# flatten_tabs
# ---------------------------------------------------------------------------


def test_flatten_nested_is_preorder():
    flat = flatten_tabs(nested_tabs())
    assert [tab_id_of(t) for t in flat] == ["t.0", "t.1", "t.2", "t.3"]


def test_flatten_empty():
    assert flatten_tabs([]) == []


@given(_tab_trees())
def test_flatten_visits_every_tab_once_in_preorder(shape):
    counter = [0]
    tabs = _build(shape, counter)
    ids = [tab_id_of(t) for t in flatten_tabs(tabs)]

    assert len(ids) == counter[0]
    assert len(set(ids)) == len(ids)
    assert ids == _preorder_ids(tabs)


@given(_tab_trees())
def test_flatten_parent_precedes_descendants(shape):
    tabs = _build(shape, [0])
    position = {tab_id_of(t): i for i, t in enumerate(flatten_tabs(tabs))}
    for parent in flatten_tabs(tabs):
        for child in flatten_tabs(parent["childTabs"]):
            assert position[tab_id_of(parent)] < position[tab_id_of(child)]


# ---------------------------------------------------------------------------
# resolve_tab_id
# ---------------------------------------------------------------------------


def test_resolve_by_exact_id():
    assert resolve_tab_id(nested_tabs(), "t.2") == "t.2"


def test_resolve_by_title_is_case_insensitive():
    assert resolve_tab_id(nested_tabs(), "aPPendix") == "t.2"


def test_id_match_wins_over_title_match():
    tabs = [tab("notes", "Intro"), tab("t.9", "notes")]
    assert resolve_tab_id(tabs, "notes") == "notes"


def test_duplicate_titles_are_ambiguous():
    tabs = [tab("t.1", "Draft"), tab("t.2", "Misc", children=[tab("t.3", "DRAFT")])]
    with pytest.raises(Ambiguous, match="multiple tabs match title 'draft'; use tab ID instead"):
        resolve_tab_id(tabs, "draft")


def test_duplicate_titles_still_resolve_by_id():
    tabs = [tab("t.1", "Draft"), tab("t.2", "Draft")]
    assert resolve_tab_id(tabs, "t.2") == "t.2"


def test_unknown_query_not_found():
    with pytest.raises(NotFound, match="no tab found matching 'Missing'"):
        resolve_tab_id(nested_tabs(), "Missing")


def test_id_match_is_case_sensitive():
    with pytest.raises(NotFound):
        resolve_tab_id([tab("t.1", "One")], "T.1")


# ---------------------------------------------------------------------------
# get_tab_body
# ---------------------------------------------------------------------------


def test_body_defaults_to_first_flattened_tab():
    doc = document(tabs=nested_tabs())
    assert get_tab_body(doc, "")["content"][0]["paragraph"]["elements"][0]["textRun"]["content"] == "Overview\n"


def test_body_for_nested_tab():
    inner = body(paragraph(1, 4, "abc"))
    doc = document(tabs=[tab("t.0", "Root", children=[tab("t.1", "Child", content=inner)], content=body())])
    assert get_tab_body(doc, "t.1") is inner


def test_first_tab_without_content():
    doc = document(tabs=[tab("t.0", "Root")])
    with pytest.raises(NoContent, match="first tab has no content"):
        get_tab_body(doc, "")


def test_named_tab_without_content():
    with pytest.raises(NoContent, match="tab 't.2' has no content"):
        get_tab_body(document(tabs=nested_tabs()), "t.2")


def test_missing_tab_id():
    with pytest.raises(NotFound, match="tab 't.99' not found"):
        get_tab_body(document(tabs=nested_tabs()), "t.99")


def test_legacy_body_for_default_tab():
    legacy = body(paragraph(1, 6, "Hello"))
    assert get_tab_body(document(legacy_body=legacy), "") is legacy


def test_legacy_document_rejects_tab_id():
    with pytest.raises(Unsupported, match="tab data not available"):
        get_tab_body(document(legacy_body=body()), "t.0")


# ---------------------------------------------------------------------------
# resolve_tab_target
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("query,index", [("Notes", 0), ("t.0", 3), ("x", 99)])
def test_tab_and_index_conflict(query, index):
    with pytest.raises(ConflictingFlags):
        resolve_tab_target(query, index, nested_tabs())


def test_conflict_is_reported_even_without_tabs():
    with pytest.raises(ConflictingFlags):
        resolve_tab_target("Notes", 0, [])


def test_index_addresses_flattened_order():
    assert resolve_tab_target(None, 2, nested_tabs()) == "t.2"
    assert resolve_tab_target(None, 3, nested_tabs()) == "t.3"


def test_index_out_of_range():
    with pytest.raises(IndexOutOfRange, match=r"tab index 4 out of range \(document has 4 tabs\)"):
        resolve_tab_target(None, 4, nested_tabs())


def test_index_without_tab_tree():
    with pytest.raises(NoTabs):
        resolve_tab_target(None, 0, [])


def test_query_without_tab_tree():
    with pytest.raises(NoTabs, match="document has no tabs data"):
        resolve_tab_target("Notes", -1, [])


def test_query_delegates_to_resolver():
    assert resolve_tab_target("notes", -1, nested_tabs()) == "t.3"


def test_neither_flag_means_default_tab():
    assert resolve_tab_target(None, -1, nested_tabs()) == ""
    assert resolve_tab_target("", -1, []) == ""


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def test_find_tab_searches_children():
    assert find_tab(nested_tabs(), "t.2")["tabProperties"]["title"] == "Appendix"
    assert find_tab(nested_tabs(), "nope") is None


def test_describe_tabs_positions_match_tab_index():
    summaries = describe_tabs(nested_tabs())
    assert [s["position"] for s in summaries] == [0, 1, 2, 3]
    assert [s["nesting_level"] for s in summaries] == [0, 1, 2, 0]
    assert summaries[2] == {"position": 2, "tab_id": "t.2", "title": "Appendix", "index": 0, "nesting_level": 2}
