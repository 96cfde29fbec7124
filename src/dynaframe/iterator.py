from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING, cast

from .attributes import Attributes
from .aws_errors import consumed_units, invoke
from .conditions import Conditions, ExpressionBuilder
from .credentials import Credentials, connect
from .errors import ConditionFailedError, UsageError
from .item import AwsItem
from .valve import Dosage, TrimmedDosage, Valve

if TYPE_CHECKING:
    from .frame import AwsFrame

logger = logging.getLogger(__name__)


class AwsIterator(Iterator[AwsItem]):
    def __init__(
        self,
        credentials: Credentials,
        frame: AwsFrame,
        table: str,
        conditions: Conditions,
        valve: Valve,
    ) -> None:
        self._credentials = credentials
        self._frame = frame
        self._table = table
        self._conditions = conditions
        self._valve = valve
        self._lock = threading.RLock()
        self._keys: tuple[str, ...] = ()
        self._dosage: Dosage | None = None
        self._position = -1
        self._current: Attributes | None = None

    def __repr__(self) -> str:
        return f"AwsIterator('{self._table}', {self._conditions!r}, position={self._position})"

    def __iter__(self) -> AwsIterator:
        return self

    def has_next(self) -> bool:
        with self._lock:
            if self._dosage is None:
                self._keys = tuple(self._frame.table().keys())
                self._dosage = self._valve.fetch(self._credentials, self._table, self._conditions, self._keys)
                self._position = -1
            while self._position + 1 >= len(self._dosage.items()) and self._dosage.has_next():
                self._dosage = self._dosage.next()
                self._position = -1
            return self._position + 1 < len(self._dosage.items())

    def __next__(self) -> AwsItem:
        with self._lock:
            if not self.has_next():
                raise StopIteration
            dosage = cast(Dosage, self._dosage)
            self._position += 1
            row = dosage.items()[self._position]
            self._current = row
            return AwsItem(self._credentials, self._frame, self._table, row, self._keys)

    def cursor(self) -> str | None:
        with self._lock:
            return None if self._dosage is None else self._dosage.cursor()

    def remove(self) -> None:
        with self._lock:
            row = self._current
            if row is None:
                raise UsageError("remove() requires a preceding next() and may be called once per item")
            key = row.only(self._keys)
            builder = ExpressionBuilder()
            req = builder.apply(
                {
                    "TableName": self._table,
                    "Key": key.to_wire(),
                    "ConditionExpression": builder.render(Conditions.from_attributes(key)),
                    "ReturnConsumedCapacity": "TOTAL",
                }
            )
            try:
                with connect(self._credentials) as aws:
                    resp = invoke(aws, "delete_item", req)
                units = consumed_units(resp)
            except ConditionFailedError:
                units = 0.0
                logger.debug("remove(): item %r is already gone from '%s'", dict(key), self._table)

            self._current = None
            dosage = cast(Dosage, self._dosage)
            items = list(dosage.items())
            if 0 <= self._position < len(items) and items[self._position] is row:
                del items[self._position]
                self._dosage = TrimmedDosage(dosage, items)
                self._position -= 1
            logger.debug(
                "remove(): item #%d removed from '%s', %.2f units",
                self._position + 1,
                self._table,
                units,
            )
