from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from .conditions import Conditions, ExpressionBuilder
from .credentials import Credentials
from .errors import ValidationError
from .valve import Dosage, count_rows, fetch_page, start_key


@dataclass(frozen=True)
class QueryValve:
    limit: int = 20
    forward: bool = True
    attributes: tuple[str, ...] = ()
    index_name: str | None = None
    consistent_read: bool = True
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
        return fetch_page(credentials, "query", request)

    def count(
        self,
        credentials: Credentials,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
    ) -> int:
        return count_rows(credentials, "query", self._request(table, conditions, keys, projection=False))

    def with_limit(self, limit: int) -> QueryValve:
        return replace(self, limit=limit)

    def with_scan_index_forward(self, forward: bool) -> QueryValve:
        return replace(self, forward=forward)

    def with_attribute_to_get(self, name: str) -> QueryValve:
        return self.with_attributes_to_get(name)

    def with_attributes_to_get(self, *names: str) -> QueryValve:
        return replace(self, attributes=self.attributes + tuple(names))

    def with_index_name(self, index_name: str | None) -> QueryValve:
        # global secondary indexes reject consistent reads
        if index_name is None:
            return replace(self, index_name=None)
        return replace(self, index_name=index_name, consistent_read=False)

    def with_consistent_read(self, consistent_read: bool) -> QueryValve:
        return replace(self, consistent_read=consistent_read)

    def with_exclusive_start(self, cursor: str | None) -> QueryValve:
        return replace(self, exclusive_start=cursor)

    def _split(self, conditions: Conditions, keys: Sequence[str]) -> tuple[Conditions, Conditions]:
        if self.index_name is not None or not keys:
            return conditions, Conditions()

        partition = keys[0]
        pinned = conditions.get(partition)
        if pinned is None or pinned.op != "=":
            raise ValidationError(f"query requires an equality condition on partition key '{partition}'")
        return conditions.only(keys), Conditions(
            (name, cond) for name, cond in conditions.items() if name not in keys
        )

    def _request(
        self,
        table: str,
        conditions: Conditions,
        keys: Sequence[str],
        *,
        projection: bool,
    ) -> dict[str, Any]:
        if not conditions:
            raise ValidationError("query requires at least one key condition")
        key_conditions, filters = self._split(conditions, keys)
        for name, cond in key_conditions.items():
            if not cond.is_key_condition:
                raise ValidationError(f"unsupported key condition operator on '{name}': {cond.op}")

        builder = ExpressionBuilder()
        req: dict[str, Any] = {
            "TableName": table,
            "KeyConditionExpression": builder.render(key_conditions),
            "ScanIndexForward": self.forward,
            "ConsistentRead": self.consistent_read,
            "ReturnConsumedCapacity": "TOTAL",
        }
        if filters:
            req["FilterExpression"] = builder.render(filters)
        if projection and (keys or self.attributes):
            req["ProjectionExpression"] = builder.projection([*keys, *self.attributes])
        if self.index_name is not None:
            req["IndexName"] = self.index_name
        last_key = start_key(self.exclusive_start, self.index_name)
        if last_key is not None:
            req["ExclusiveStartKey"] = last_key
        return builder.apply(req)
