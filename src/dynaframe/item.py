from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, overload

from .attributes import Attributes, Value
from .aws_errors import consumed_units, invoke
from .conditions import Conditions, ExpressionBuilder
from .credentials import Credentials, connect
from .errors import NoSuchAttributeError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from .frame import AwsFrame

logger = logging.getLogger(__name__)


class Item(Protocol):
    def has(self, name: str) -> bool: ...

    def get(self, name: str) -> Value: ...

    def put(self, attributes: Mapping[str, Any]) -> None: ...

    def frame(self) -> AwsFrame: ...


class AwsItem:
    def __init__(
        self,
        credentials: Credentials,
        frame: AwsFrame,
        table: str,
        attributes: Attributes,
        keys: Sequence[str],
    ) -> None:
        self._credentials = credentials
        self._frame = frame
        self._table = table
        self._attributes = attributes
        self._keys = tuple(keys)

    def __repr__(self) -> str:
        return f"AwsItem('{self._table}', {dict(self.key())!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AwsItem):
            return NotImplemented
        return (
            self._credentials == other._credentials
            and self._table == other._table
            and self.key() == other.key()
        )

    def __hash__(self) -> int:
        return hash((self._table, self.key()))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __getitem__(self, name: str) -> Value:
        return self.get(name)

    def key(self) -> Attributes:
        return self._attributes.only(self._keys)

    def frame(self) -> AwsFrame:
        return self._frame

    def has(self, name: str) -> bool:
        if name in self._attributes:
            return True
        return name in self._read(name)

    def get(self, name: str) -> Value:
        value = self._attributes.get(name)
        if value is None:
            value = self._read(name).get(name)
        if value is None:
            raise NoSuchAttributeError(table=self._table, attribute=name)
        return value

    @overload
    def put(self, attributes: Mapping[str, Any]) -> None: ...

    @overload
    def put(self, attributes: str, value: Any) -> None: ...

    def put(self, attributes: Mapping[str, Any] | str, value: Any = None) -> None:
        if isinstance(attributes, str):
            attributes = {attributes: value}
        attrs = Attributes(attributes)
        key = self.key()
        if not key:
            raise ValidationError(f"item of '{self._table}' has no primary key attributes")
        for name in self._keys:
            if name in attrs and attrs[name] != key[name]:
                raise ValidationError(f"cannot change key attribute '{name}' of an item")
        row = Attributes({**attrs, **key})

        builder = ExpressionBuilder()
        req = builder.apply(
            {
                "TableName": self._table,
                "Item": row.to_wire(),
                "ConditionExpression": builder.render(Conditions.from_attributes(key)),
                "ReturnValues": "NONE",
                "ReturnConsumedCapacity": "TOTAL",
            }
        )
        with connect(self._credentials) as aws:
            resp = invoke(aws, "put_item", req)
        logger.debug(
            "put(%s): saved %d attribute(s) to '%s', %.2f units",
            ", ".join(attrs.keys()),
            len(row),
            self._table,
            consumed_units(resp),
        )

    def _read(self, name: str) -> Attributes:
        key = self.key()
        if not key:
            raise ValidationError(f"item of '{self._table}' has no primary key attributes")
        builder = ExpressionBuilder()
        req = builder.apply(
            {
                "TableName": self._table,
                "Key": key.to_wire(),
                "ProjectionExpression": builder.projection([*self._keys, name]),
                "ConsistentRead": True,
                "ReturnConsumedCapacity": "TOTAL",
            }
        )
        with connect(self._credentials) as aws:
            resp = invoke(aws, "get_item", req)
        row = resp.get("Item")
        if not row:
            raise NotFoundError(f"item {dict(key)!r} not found in '{self._table}'")
        loaded = Attributes.from_wire(row)
        logger.debug(
            "get('%s'): loaded %s from '%s', %.2f units",
            name,
            "a value" if name in loaded else "nothing",
            self._table,
            consumed_units(resp),
        )
        return loaded
