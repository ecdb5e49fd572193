"""Tests for richformat parsing."""
from __future__ import annotations

import json

import pytest

from docs_errors import InvalidFormat, ParseError
from richformat import parse_rich_format


def test_parses_requests_in_order():
    text = json.dumps([
        {"insertText": {"location": {"index": 1}, "text": "Hello"}},
        {"updateTextStyle": {
            "range": {"startIndex": 1, "endIndex": 6},
            "textStyle": {"bold": True},
            "fields": "bold",
        }},
    ])
    ops = parse_rich_format(text)
    assert [op.kind for op in ops] == ["insertText", "updateTextStyle"]
    assert ops[0].body == {"location": {"index": 1}, "text": "Hello"}


def test_request_bodies_pass_through_untouched():
    body = {"location": {"index": 40, "tabId": "t.9"}, "text": "x"}
    (op,) = parse_rich_format(json.dumps([{"insertText": body}]))
    assert op.to_request() == {"insertText": body}


@pytest.mark.parametrize("text,message", [
    ("not json", "invalid richformat JSON"),
    ('{"insertText": {}}', "must be an array of requests"),
    ("[]", "at least one request"),
    ('["insertText"]', "request 0 must be an object with exactly one request type"),
    ('[{"insertText": {}, "deleteTab": {}}]', "request 0 must be an object with exactly one request type"),
    ('[{"insertText": {"text": "a"}}, {"frobnicate": {}}]', "request 1: unknown request type 'frobnicate'"),
    ('[{"insertText": "a"}]', "request 0: 'insertText' must be an object"),
])
def test_invalid_input(text, message):
    with pytest.raises(InvalidFormat, match=message):
        parse_rich_format(text)


def test_invalid_format_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse_rich_format("[")
    assert exc_info.value.code == "invalid_format"
