from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .attributes import Attributes
from .aws_errors import consumed_units, invoke
from .conditions import Conditions
from .credentials import Credentials, connect
from .cursor import decode_cursor, encode_cursor
from .errors import UsageError, ValidationError

logger = logging.getLogger(__name__)


class Dosage(Protocol):
    def items(self) -> Sequence[Attributes]: ...

    def has_next(self) -> bool: ...

    def next(self) -> Dosage: ...

    def cursor(self) -> str | None: ...


class Valve(Protocol):
    def fetch(
        self,
        credentials: Credentials,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
    ) -> Dosage: ...

    def count(
        self,
        credentials: Credentials,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
    ) -> int: ...


class PagedDosage:
    def __init__(
        self,
        credentials: Credentials,
        operation: str,
        request: Mapping[str, Any],
        response: Mapping[str, Any],
    ) -> None:
        self._credentials = credentials
        self._operation = operation
        self._request = dict(request)
        self._items = tuple(Attributes.from_wire(row) for row in response.get("Items") or [])
        self._last_key: dict[str, Any] | None = response.get("LastEvaluatedKey") or None

    def __repr__(self) -> str:
        return (
            f"PagedDosage({self._operation} '{self._request.get('TableName')}', "
            f"items={len(self._items)}, more={self.has_next()})"
        )

    def items(self) -> Sequence[Attributes]:
        return self._items

    def has_next(self) -> bool:
        return self._last_key is not None

    def next(self) -> Dosage:
        if self._last_key is None:
            raise UsageError("there is no next page, check has_next() first")
        request = dict(self._request)
        request["ExclusiveStartKey"] = self._last_key
        return fetch_page(self._credentials, self._operation, request)

    def cursor(self) -> str | None:
        if self._last_key is None:
            return None
        return encode_cursor(self._last_key, index=self._request.get("IndexName"))


class TrimmedDosage:
    def __init__(self, origin: Dosage, items: Sequence[Attributes]) -> None:
        self._origin = origin
        self._items = tuple(items)

    def __repr__(self) -> str:
        return f"TrimmedDosage(items={len(self._items)}, origin={self._origin!r})"

    def items(self) -> Sequence[Attributes]:
        return self._items

    def has_next(self) -> bool:
        return self._origin.has_next()

    def next(self) -> Dosage:
        return self._origin.next()

    def cursor(self) -> str | None:
        return self._origin.cursor()


def fetch_page(credentials: Credentials, operation: str, request: Mapping[str, Any]) -> PagedDosage:
    with connect(credentials) as aws:
        resp = invoke(aws, operation, request)
    dosage = PagedDosage(credentials, operation, request, resp)
    logger.debug(
        "%s: loaded %d item(s) from '%s', %.2f units, more=%s",
        operation,
        len(dosage.items()),
        request.get("TableName"),
        consumed_units(resp),
        dosage.has_next(),
    )
    return dosage


def count_rows(credentials: Credentials, operation: str, request: Mapping[str, Any]) -> int:
    req = dict(request)
    req["Select"] = "COUNT"
    req.pop("Limit", None)
    total = 0
    pages = 0
    while True:
        with connect(credentials) as aws:
            resp = invoke(aws, operation, req)
        total += int(resp.get("Count") or 0)
        pages += 1
        last = resp.get("LastEvaluatedKey")
        if not last:
            break
        req["ExclusiveStartKey"] = last
    logger.debug("%s: counted %d item(s) in '%s' over %d page(s)", operation, total, req.get("TableName"), pages)
    return total


def start_key(cursor: str | None, index_name: str | None) -> dict[str, Any] | None:
    if cursor is None:
        return None
    try:
        decoded = decode_cursor(cursor)
    except ValueError as err:
        raise ValidationError("invalid cursor") from err
    if decoded.index != index_name:
        raise ValidationError("cursor index does not match valve")
    return decoded.last_key
