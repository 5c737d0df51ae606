import json

import pytest

from kagi_core.domain.exceptions import ParseError, ResponseStateError
from kagi_core.domain.models import MessageDocument
from kagi_core.providers.stream_parser import (
    MESSAGE_MARKER,
    THREAD_MARKER,
    extract_json,
    parse_message_document,
    parse_thread_document,
    require_done,
)


def test_extract_json_ignores_surrounding_noise():
    text = 'garbage before new_message.json: {"state":"done","reply":"<p>Hi</p>"} trailing {"x": 1}'
    assert extract_json(text, MESSAGE_MARKER) == '{"state":"done","reply":"<p>Hi</p>"}'


def test_extract_json_nested_objects():
    doc = {"a": {"b": {"c": [1, 2, {"d": "e"}]}}, "f": "g"}
    text = "hi:\n" + THREAD_MARKER + "\n  " + json.dumps(doc) + "\nnext.json: {}"
    assert json.loads(extract_json(text, THREAD_MARKER)) == doc


def test_extract_json_uses_last_marker_occurrence():
    text = (
        'new_message.json: {"state":"streaming","reply":"<p>H</p>"}\n'
        'new_message.json: {"state":"done","reply":"<p>Hello</p>"}'
    )
    assert json.loads(extract_json(text, MESSAGE_MARKER))["state"] == "done"


def test_extract_json_braces_inside_strings_do_not_count():
    text = 'new_message.json: {"reply":"a } b { c","state":"done"} tail'
    assert extract_json(text, MESSAGE_MARKER) == '{"reply":"a } b { c","state":"done"}'


def test_extract_json_escaped_quotes_and_backslashes():
    raw = r'{"reply":"say \"}\" and \\","n":{"k":"v"}}'
    text = "new_message.json: " + raw + " more"
    extracted = extract_json(text, MESSAGE_MARKER)
    assert extracted == raw
    assert json.loads(extracted)["n"] == {"k": "v"}


def test_extract_json_missing_marker_returns_none():
    assert extract_json('{"id": "x"}', THREAD_MARKER) is None


def test_extract_json_no_object_after_marker():
    assert extract_json("thread.json: nothing here", THREAD_MARKER) is None


def test_extract_json_truncated_object():
    assert extract_json('new_message.json: {"state":"done","reply":"<p>', MESSAGE_MARKER) is None


def test_parse_thread_document_best_effort():
    assert parse_thread_document('thread.json: {"id":"abc"}').id == "abc"
    assert parse_thread_document("no thread here") is None
    # 花括号配平但不是合法 JSON
    assert parse_thread_document("thread.json: {id: abc}") is None


def test_parse_message_document_missing_marker():
    with pytest.raises(ParseError):
        parse_message_document('thread.json: {"id":"abc"}')


def test_parse_message_document_invalid_json():
    with pytest.raises(ParseError) as exc:
        parse_message_document("new_message.json: {state: done}")
    assert exc.value.message == "Failed to parse message JSON response"


def test_require_done():
    assert require_done(MessageDocument(state="done", reply="<p>x</p>")) == "<p>x</p>"
    with pytest.raises(ResponseStateError):
        require_done(MessageDocument(state="error", reply="<p>x</p>"))
    with pytest.raises(ResponseStateError):
        require_done(MessageDocument(state="done", reply=None))
