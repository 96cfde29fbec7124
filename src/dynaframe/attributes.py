from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from .errors import ValidationError
from .pairs import FrozenPairs

type Value = str | int | Decimal | bytes

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()

_SCALAR_KINDS = frozenset({"S", "N", "B"})
_ABSENT_KIND = "NULL"


def normalize_value(value: Any) -> Value:
    if value is None:
        raise ValidationError("attribute value is required, absent attributes are simply not set")
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, int, bytes)):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValidationError(f"number must be finite: {value}")
        return value
    if isinstance(value, float):
        number = Decimal(repr(value))
        if not number.is_finite():
            raise ValidationError(f"number must be finite: {value}")
        return number
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, Binary):
        return bytes(value.value)
    raise ValidationError(f"unsupported attribute value type: {type(value).__name__}")


def to_wire(value: Value) -> dict[str, Any]:
    return _serializer.serialize(value)


def from_wire(av: Mapping[str, Any]) -> Value:
    if not isinstance(av, Mapping) or len(av) != 1:
        raise ValidationError("attribute value must be a single-key map")
    (kind,) = av.keys()
    if kind == "BOOL":
        return normalize_value(bool(av[kind]))
    if kind not in _SCALAR_KINDS:
        raise ValidationError(f"unsupported attribute value type: {kind}")
    value = _deserializer.deserialize(dict(av))
    if isinstance(value, Binary):
        return bytes(value.value)
    return value


class Attributes(FrozenPairs[Value]):
    __slots__ = ()

    def _check_value(self, value: Any) -> Value:
        return normalize_value(value)

    def to_wire(self) -> dict[str, dict[str, Any]]:
        return {name: to_wire(value) for name, value in self.items()}

    @classmethod
    def from_wire(cls, item: Mapping[str, Any]) -> Attributes:
        return cls(
            (str(name), from_wire(av))
            for name, av in item.items()
            if not (isinstance(av, Mapping) and _ABSENT_KIND in av)
        )
