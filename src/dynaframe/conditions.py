from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .attributes import Value, normalize_value, to_wire
from .errors import ValidationError
from .pairs import FrozenPairs

_ARITY: dict[str, tuple[int, int | None]] = {
    "=": (1, 1),
    "<>": (1, 1),
    "<": (1, 1),
    "<=": (1, 1),
    ">": (1, 1),
    ">=": (1, 1),
    "begins_with": (1, 1),
    "contains": (1, 1),
    "not_contains": (1, 1),
    "between": (2, 2),
    "in": (1, 100),
    "exists": (0, 0),
    "not_exists": (0, 0),
}

KEY_OPERATORS = frozenset({"=", "<", "<=", ">", ">=", "between", "begins_with"})


@dataclass(frozen=True)
class Condition:
    op: str
    values: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        if self.op not in _ARITY:
            raise ValidationError(f"unsupported condition operator: {self.op}")
        low, high = _ARITY[self.op]
        count = len(self.values)
        if count < low or (high is not None and count > high):
            raise ValidationError(f"{self.op} takes {low}..{high} value(s), got {count}")
        object.__setattr__(self, "values", tuple(normalize_value(v) for v in self.values))

    @property
    def is_key_condition(self) -> bool:
        return self.op in KEY_OPERATORS

    @staticmethod
    def eq(value: Any) -> Condition:
        return Condition(op="=", values=(value,))

    @staticmethod
    def ne(value: Any) -> Condition:
        return Condition(op="<>", values=(value,))

    @staticmethod
    def lt(value: Any) -> Condition:
        return Condition(op="<", values=(value,))

    @staticmethod
    def lte(value: Any) -> Condition:
        return Condition(op="<=", values=(value,))

    @staticmethod
    def gt(value: Any) -> Condition:
        return Condition(op=">", values=(value,))

    @staticmethod
    def gte(value: Any) -> Condition:
        return Condition(op=">=", values=(value,))

    @staticmethod
    def between(low: Any, high: Any) -> Condition:
        return Condition(op="between", values=(low, high))

    @staticmethod
    def begins_with(prefix: Any) -> Condition:
        return Condition(op="begins_with", values=(prefix,))

    @staticmethod
    def contains(value: Any) -> Condition:
        return Condition(op="contains", values=(value,))

    @staticmethod
    def not_contains(value: Any) -> Condition:
        return Condition(op="not_contains", values=(value,))

    @staticmethod
    def in_(values: Iterable[Any]) -> Condition:
        return Condition(op="in", values=tuple(values))

    @staticmethod
    def exists() -> Condition:
        return Condition(op="exists")

    @staticmethod
    def not_exists() -> Condition:
        return Condition(op="not_exists")


class Conditions(FrozenPairs[Condition]):
    __slots__ = ()

    def _check_value(self, value: Any) -> Condition:
        if not isinstance(value, Condition):
            raise ValidationError(f"condition expected, got {type(value).__name__}")
        return value

    @staticmethod
    def equal_to(value: Any) -> Condition:
        return Condition.eq(value)

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> Conditions:
        return cls((name, Condition.eq(value)) for name, value in attributes.items())


class ExpressionBuilder:
    def __init__(self) -> None:
        self.names: dict[str, str] = {}
        self.values: dict[str, Any] = {}
        self._refs: dict[str, str] = {}

    def name(self, attribute: str) -> str:
        ref = self._refs.get(attribute)
        if ref is None:
            ref = f"#n{len(self._refs)}"
            self._refs[attribute] = ref
            self.names[ref] = attribute
        return ref

    def value(self, value: Value) -> str:
        ref = f":v{len(self.values)}"
        self.values[ref] = to_wire(value)
        return ref

    def condition(self, attribute: str, cond: Condition) -> str:
        name = self.name(attribute)
        vals = cond.values
        if cond.op in {"=", "<>", "<", "<=", ">", ">="}:
            return f"{name} {cond.op} {self.value(vals[0])}"
        if cond.op == "between":
            return f"{name} BETWEEN {self.value(vals[0])} AND {self.value(vals[1])}"
        if cond.op == "in":
            return f"{name} IN (" + ", ".join(self.value(v) for v in vals) + ")"
        if cond.op == "begins_with":
            return f"begins_with({name}, {self.value(vals[0])})"
        if cond.op == "contains":
            return f"contains({name}, {self.value(vals[0])})"
        if cond.op == "not_contains":
            return f"NOT contains({name}, {self.value(vals[0])})"
        if cond.op == "exists":
            return f"attribute_exists({name})"
        if cond.op == "not_exists":
            return f"attribute_not_exists({name})"
        raise ValidationError(f"unsupported condition operator: {cond.op}")

    def render(self, conditions: Mapping[str, Condition]) -> str:
        return " AND ".join(self.condition(attr, cond) for attr, cond in conditions.items())

    def projection(self, attributes: Iterable[str]) -> str:
        return ", ".join(self.name(attr) for attr in dict.fromkeys(attributes))

    def apply(self, request: dict[str, Any]) -> dict[str, Any]:
        if self.names:
            request["ExpressionAttributeNames"] = dict(self.names)
        if self.values:
            request["ExpressionAttributeValues"] = dict(self.values)
        return request
