from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, overload

from .conditions import Condition, Conditions
from .credentials import Credentials
from .iterator import AwsIterator
from .scan_valve import ScanValve
from .valve import Valve

if TYPE_CHECKING:
    from .table import AwsTable


class AwsFrame:
    def __init__(
        self,
        credentials: Credentials,
        table: AwsTable,
        name: str,
        conditions: Conditions | None = None,
        valve: Valve | None = None,
    ) -> None:
        self._credentials = credentials
        self._table = table
        self._name = name
        self._conditions = conditions if conditions is not None else Conditions()
        self._valve: Valve = valve if valve is not None else ScanValve()

    def __repr__(self) -> str:
        return f"AwsFrame('{self._name}', {self._conditions!r}, {self._valve!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AwsFrame):
            return NotImplemented
        return (
            self._name == other._name
            and self._conditions == other._conditions
            and self._valve == other._valve
        )

    def __hash__(self) -> int:
        return hash((self._name, self._conditions))

    @property
    def conditions(self) -> Conditions:
        return self._conditions

    @property
    def valve(self) -> Valve:
        return self._valve

    def table(self) -> AwsTable:
        return self._table

    @overload
    def where(self, name: str, condition: Condition) -> AwsFrame: ...

    @overload
    def where(self, name: Mapping[str, Condition]) -> AwsFrame: ...

    def where(self, name: str | Mapping[str, Condition], condition: Condition | None = None) -> AwsFrame:
        if isinstance(name, str):
            if condition is None:
                raise TypeError("where(name, condition) requires a condition")
            merged = self._conditions.with_(name, condition)
        else:
            merged = Conditions({**self._conditions, **Conditions(name)})
        return AwsFrame(self._credentials, self._table, self._name, merged, self._valve)

    def through(self, valve: Valve) -> AwsFrame:
        return AwsFrame(self._credentials, self._table, self._name, self._conditions, valve)

    def iterator(self) -> AwsIterator:
        return AwsIterator(self._credentials, self, self._name, self._conditions, self._valve)

    def __iter__(self) -> AwsIterator:
        return self.iterator()

    def count(self) -> int:
        return self._valve.count(self._credentials, self._name, self._conditions, self._table.keys())
