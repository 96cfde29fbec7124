from __future__ import annotations

import base64
import json

import pytest

from dynaframe.cursor import decode_cursor, encode_cursor


def test_cursor_round_trip_with_index_and_binary_key() -> None:
    key = {"id": {"S": "k1"}, "rank": {"N": "3"}, "blob": {"B": b"hi"}}

    cursor = encode_cursor(key, index="by-rank")
    decoded = decode_cursor(cursor)

    assert decoded.last_key == key
    assert decoded.index == "by-rank"
    assert "=" not in cursor


def test_cursor_sorts_key_names() -> None:
    cursor = encode_cursor({"b": {"S": "2"}, "a": {"S": "1"}})
    padded = cursor + "=" * (-len(cursor) % 4)
    payload = json.loads(base64.urlsafe_b64decode(padded))

    assert list(payload["lastKey"]) == ["a", "b"]
    assert "index" not in payload


def test_encode_cursor_empty_key_is_empty_string() -> None:
    assert encode_cursor({}) == ""
    assert encode_cursor(None) == ""


def test_encode_cursor_rejects_non_scalar_keys() -> None:
    with pytest.raises(ValueError, match="unsupported key value type"):
        encode_cursor({"id": {"BOOL": True}})


def _raw(payload: object) -> str:
    return base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


@pytest.mark.parametrize(
    "cursor",
    [
        "",
        "   ",
        "bm90LWpzb24",  # base64url("not-json")
        _raw([1, 2]),
        _raw({"lastKey": {}}),
        _raw({"lastKey": "x"}),
        _raw({"lastKey": {"id": {"S": 1}}}),
        _raw({"lastKey": {"id": {"M": "x"}}}),
    ],
)
def test_decode_cursor_rejects_invalid_payloads(cursor: str) -> None:
    with pytest.raises(ValueError):
        decode_cursor(cursor)
