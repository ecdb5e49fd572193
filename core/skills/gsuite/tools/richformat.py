"""Parse richformat input: a JSON array of Docs batchUpdate requests.

Example::

    [{"insertText": {"location": {"index": 1}, "text": "Hello"}},
     {"updateTextStyle": {"range": {"startIndex": 1, "endIndex": 6},
                          "textStyle": {"bold": true}, "fields": "bold"}}]
"""
from __future__ import annotations

import json

from docs_errors import InvalidFormat
from docs_ops import DOCS_REQUEST_KINDS, Operation


def parse_rich_format(text: str) -> list[Operation]:
    """Parse a richformat string into operations, preserving order.

    Raises:
        InvalidFormat: Not JSON, not a non-empty array, or an element is not
            a single-key object naming a known request kind.
    """
    try:
        requests = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidFormat(f"invalid richformat JSON: {e}") from e

    if not isinstance(requests, list):
        raise InvalidFormat("richformat JSON must be an array of requests")
    if not requests:
        raise InvalidFormat("richformat JSON must contain at least one request")

    operations = []
    for i, request in enumerate(requests):
        if not isinstance(request, dict) or len(request) != 1:
            raise InvalidFormat(f"request {i} must be an object with exactly one request type")
        (kind, body), = request.items()
        if kind not in DOCS_REQUEST_KINDS:
            raise InvalidFormat(f"request {i}: unknown request type '{kind}'")
        if not isinstance(body, dict):
            raise InvalidFormat(f"request {i}: '{kind}' must be an object")
        operations.append(Operation(kind, body))
    return operations
