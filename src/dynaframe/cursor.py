from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Cursor:
    last_key: dict[str, Any]
    index: str | None = None


def _key_value_to_json(av: Any) -> dict[str, str]:
    if not isinstance(av, Mapping) or len(av) != 1:
        raise ValueError("key value must be a single-key map")
    ((kind, value),) = av.items()
    if kind in {"S", "N"}:
        if not isinstance(value, str):
            raise ValueError(f"{kind} value must be a string")
        return {kind: value}
    if kind == "B":
        if not isinstance(value, (bytes, bytearray)):
            raise ValueError("B value must be bytes")
        return {"B": base64.b64encode(bytes(value)).decode("ascii")}
    raise ValueError(f"unsupported key value type: {kind}")


def _key_value_from_json(enc: Any) -> dict[str, Any]:
    if not isinstance(enc, dict) or len(enc) != 1:
        raise ValueError("key value must be a single-key map")
    ((kind, value),) = enc.items()
    if not isinstance(value, str):
        raise ValueError(f"{kind} value must be a string")
    if kind in {"S", "N"}:
        return {kind: value}
    if kind == "B":
        return {"B": base64.b64decode(value)}
    raise ValueError(f"unsupported key value type: {kind}")


def encode_cursor(last_key: Mapping[str, Any] | None, *, index: str | None = None) -> str:
    if not last_key:
        return ""
    if not isinstance(last_key, Mapping):
        raise ValueError("last_key must be a map")

    payload: dict[str, Any] = {
        "lastKey": {str(k): _key_value_to_json(last_key[k]) for k in sorted(last_key.keys())},
    }
    if index is not None:
        payload["index"] = index
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> Cursor:
    raw = str(cursor or "").strip()
    if not raw:
        raise ValueError("cursor is empty")

    padding = "=" * (-len(raw) % 4)
    parsed = json.loads(base64.urlsafe_b64decode(raw + padding).decode("utf-8"))
    if not isinstance(parsed, dict):
        raise ValueError("cursor must decode to an object")

    last_key_raw = parsed.get("lastKey")
    if not isinstance(last_key_raw, dict) or not last_key_raw:
        raise ValueError("cursor lastKey is invalid")

    index = parsed.get("index")
    return Cursor(
        last_key={str(k): _key_value_from_json(v) for k, v in last_key_raw.items()},
        index=index if isinstance(index, str) else None,
    )
