from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from .conditions import Conditions, ExpressionBuilder
from .credentials import Credentials
from .errors import ValidationError
from .valve import Dosage, count_rows, fetch_page, start_key


@dataclass(frozen=True)
class ScanValve:
    limit: int = 100
    attributes: tuple[str, ...] = ()
    exclusive_start: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.limit, int) or isinstance(self.limit, bool) or self.limit <= 0:
            raise ValidationError("limit must be > 0")

    def fetch(
        self,
        credentials: Credentials,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
    ) -> Dosage:
        request = self._request(table, conditions, keys, projection=True)
        request["Limit"] = self.limit
        return fetch_page(credentials, "scan", request)

    def count(
        self,
        credentials: Credentials,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
    ) -> int:
        return count_rows(credentials, "scan", self._request(table, conditions, keys, projection=False))

    def with_limit(self, limit: int) -> ScanValve:
        return replace(self, limit=limit)

    def with_attribute_to_get(self, name: str) -> ScanValve:
        return self.with_attributes_to_get(name)

    def with_attributes_to_get(self, *names: str) -> ScanValve:
        return replace(self, attributes=self.attributes + tuple(names))

    def with_exclusive_start(self, cursor: str | None) -> ScanValve:
        return replace(self, exclusive_start=cursor)

    def _request(
        self,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
        *,
        projection: bool,
    ) -> dict[str, Any]:
        builder = ExpressionBuilder()
        req: dict[str, Any] = {"TableName": table, "ReturnConsumedCapacity": "TOTAL"}
        if conditions:
            req["FilterExpression"] = builder.render(conditions)
        if projection and (keys or self.attributes):
            req["ProjectionExpression"] = builder.projection([*keys, *self.attributes])
        last_key = start_key(self.exclusive_start, None)
        if last_key is not None:
            req["ExclusiveStartKey"] = last_key
        return builder.apply(req)
