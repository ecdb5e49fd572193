"""Tab tree helpers for Google Docs.

Documents fetched with ``includeTabsContent=True`` expose a tree of tabs::

    {"tabs": [{"tabProperties": {"tabId": "t.0", "title": "Notes", ...},
               "childTabs": [...],
               "documentTab": {"body": {"content": [...]}}}]}

Documents fetched without it only carry the legacy top-level ``body``.
"""
from __future__ import annotations

from typing import Any

from docs_errors import (
    Ambiguous,
    ConflictingFlags,
    IndexOutOfRange,
    NoContent,
    NoTabs,
    NotFound,
    Unsupported,
)


def flatten_tabs(tabs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten a tab tree in pre-order: each tab before its children."""
    flat: list[dict[str, Any]] = []
    stack = list(reversed(tabs))
    while stack:
        tab = stack.pop()
        flat.append(tab)
        stack.extend(reversed(tab.get("childTabs", [])))
    return flat


def tab_id_of(tab: dict[str, Any]) -> str:
    return tab.get("tabProperties", {}).get("tabId", "")


def tab_title_of(tab: dict[str, Any]) -> str:
    return tab.get("tabProperties", {}).get("title", "")


def find_tab(tabs: list[dict[str, Any]], tab_id: str) -> dict[str, Any] | None:
    """Return the tab with this exact ID anywhere in the tree."""
    for tab in flatten_tabs(tabs):
        if tab_id_of(tab) == tab_id:
            return tab
    return None


def resolve_tab_id(tabs: list[dict[str, Any]], query: str) -> str:
    """Resolve a tab ID or title to a tab ID.

    An exact ID match always wins. Otherwise titles are compared
    case-insensitively and must match exactly one tab.

    Raises:
        NotFound: No tab has this ID or title.
        Ambiguous: Several tabs share the title.
    """
    flat = flatten_tabs(tabs)

    for tab in flat:
        if tab_id_of(tab) == query:
            return query

    wanted = query.lower()
    matches = [tab for tab in flat if tab_title_of(tab).lower() == wanted]

    if not matches:
        raise NotFound(f"no tab found matching '{query}'")
    if len(matches) > 1:
        raise Ambiguous(f"multiple tabs match title '{query}'; use tab ID instead")
    return tab_id_of(matches[0])


def get_tab_body(doc: dict[str, Any], tab_id: str = "") -> dict[str, Any]:
    """Return the body to operate on for ``tab_id`` ("" = first tab).

    Falls back to the legacy ``body`` when the document carries no tab tree,
    but only for the default tab.
    """
    tabs = doc.get("tabs", [])
    if tabs:
        flat = flatten_tabs(tabs)
        if not tab_id:
            first = flat[0]
            if "documentTab" not in first:
                raise NoContent("first tab has no content")
            return first["documentTab"].get("body", {})
        tab = find_tab(tabs, tab_id)
        if tab is None:
            raise NotFound(f"tab '{tab_id}' not found")
        if "documentTab" not in tab:
            raise NoContent(f"tab '{tab_id}' has no content")
        return tab["documentTab"].get("body", {})

    if tab_id:
        raise Unsupported("tab data not available; re-fetch with full content")
    return doc.get("body", {})


def check_tab_flags(tab_query: str | None, tab_index: int) -> None:
    """Reject --tab together with --tab-index; needs no document."""
    if tab_query and tab_index >= 0:
        raise ConflictingFlags("cannot use both --tab and --tab-index")


def resolve_tab_target(
    tab_query: str | None,
    tab_index: int,
    tabs: list[dict[str, Any]],
) -> str:
    """Resolve the --tab / --tab-index pair to a tab ID.

    Returns "" when neither flag is set, meaning the default tab.
    ``tab_index`` < 0 means the flag was not given.
    """
    check_tab_flags(tab_query, tab_index)

    if tab_index >= 0:
        if not tabs:
            raise NoTabs("document has no tabs data")
        flat = flatten_tabs(tabs)
        if tab_index >= len(flat):
            raise IndexOutOfRange(
                f"tab index {tab_index} out of range (document has {len(flat)} tabs)"
            )
        return tab_id_of(flat[tab_index])

    if tab_query:
        if not tabs:
            raise NoTabs("document has no tabs data")
        return resolve_tab_id(tabs, tab_query)

    return ""


def describe_tabs(tabs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flattened tab summaries, in the order --tab-index addresses them."""
    summaries = []
    for position, tab in enumerate(flatten_tabs(tabs)):
        props = tab.get("tabProperties", {})
        summaries.append({
            "position": position,
            "tab_id": props.get("tabId", ""),
            "title": props.get("title", ""),
            "index": props.get("index", 0),
            "nesting_level": props.get("nestingLevel", 0),
        })
    return summaries
