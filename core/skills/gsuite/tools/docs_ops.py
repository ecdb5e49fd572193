"""Operation values and batch construction for batchUpdate calls.

An ``Operation`` is one request of a ``batchUpdate`` body, tagged by its
request kind (``insertText``, ``deleteContentRange``, ...). Kinds form a
closed set per API so a typo never reaches the wire.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterator

from docs_errors import ValidationError

DOCS_REQUEST_KINDS = frozenset({
    "addDocumentTab",
    "createFooter",
    "createFootnote",
    "createHeader",
    "createNamedRange",
    "createParagraphBullets",
    "deleteContentRange",
    "deleteFooter",
    "deleteHeader",
    "deleteNamedRange",
    "deleteParagraphBullets",
    "deletePositionedObject",
    "deleteTab",
    "deleteTableColumn",
    "deleteTableRow",
    "insertInlineImage",
    "insertPageBreak",
    "insertPerson",
    "insertDate",
    "insertSectionBreak",
    "insertTable",
    "insertTableColumn",
    "insertTableRow",
    "insertText",
    "mergeTableCells",
    "pinTableHeaderRows",
    "replaceAllText",
    "replaceImage",
    "replaceNamedRangeContent",
    "unmergeTableCells",
    "updateDocumentStyle",
    "updateDocumentTabProperties",
    "updateParagraphStyle",
    "updateSectionStyle",
    "updateTableCellStyle",
    "updateTableColumnProperties",
    "updateTableRowStyle",
    "updateTextStyle",
})

SLIDES_REQUEST_KINDS = frozenset({
    "createImage",
    "createLine",
    "createShape",
    "updateLineProperties",
    "updatePageElementTransform",
    "updateTableBorderProperties",
})


@dataclass(frozen=True)
class Operation:
    """A single batchUpdate request: ``{kind: body}`` on the wire."""

    kind: str
    body: dict[str, Any]
    api: str = "docs"

    def __post_init__(self) -> None:
        kinds = SLIDES_REQUEST_KINDS if self.api == "slides" else DOCS_REQUEST_KINDS
        if self.kind not in kinds:
            raise ValueError(f"unknown {self.api} request kind: {self.kind}")

    def to_request(self) -> dict[str, Any]:
        return {self.kind: copy.deepcopy(self.body)}

    @classmethod
    def from_request(cls, request: dict[str, Any], api: str = "docs") -> Operation:
        """Build from a wire request such as ``{"insertText": {...}}``."""
        (kind, body), = request.items()
        return cls(kind, body, api)


def utf16_len(text: str) -> int:
    """Length of ``text`` in UTF-16 code units, the unit of Docs indices."""
    return len(text.encode("utf-16-le")) // 2


def location(index: int, tab_id: str = "") -> dict[str, Any]:
    """Docs Location; tabId is omitted for the default tab."""
    loc: dict[str, Any] = {"index": index}
    if tab_id:
        loc["tabId"] = tab_id
    return loc


def text_range(start: int, end: int, tab_id: str = "") -> dict[str, Any]:
    """Docs Range. ``end`` is exclusive and must be greater than ``start``."""
    if end <= start:
        raise ValidationError(f"range end ({end}) must be greater than start ({start})")
    rng: dict[str, Any] = {"startIndex": start, "endIndex": end}
    if tab_id:
        rng["tabId"] = tab_id
    return rng


@dataclass(frozen=True)
class OperationBatch:
    """Ordered operations submitted together in one batchUpdate call."""

    operations: tuple[Operation, ...] = ()

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.operations)

    def __getitem__(self, i: int) -> Operation:
        return self.operations[i]

    @property
    def kinds(self) -> list[str]:
        return [op.kind for op in self.operations]

    def to_body(self) -> dict[str, Any]:
        return {"requests": [op.to_request() for op in self.operations]}


@dataclass
class BatchBuilder:
    """Accumulates operations and tracks text inserted so far.

    All positions are computed against the pre-batch snapshot. ``shift``
    is the UTF-16 length of the text inserted by earlier operations of this
    batch, which is what a later operation must add to address text that
    lies after those insertions.
    """

    api: str = "docs"
    shift: int = 0
    _ops: list[Operation] = field(default_factory=list)

    def add(self, kind: str, body: dict[str, Any]) -> BatchBuilder:
        self._ops.append(Operation(kind, body, self.api))
        return self

    def extend(self, operations: list[Operation]) -> BatchBuilder:
        self._ops.extend(operations)
        return self

    def insert_text(self, index: int, text: str, tab_id: str = "") -> BatchBuilder:
        self.add("insertText", {"location": location(index, tab_id), "text": text})
        self.shift += utf16_len(text)
        return self

    def build(self) -> OperationBatch:
        return OperationBatch(tuple(self._ops))
