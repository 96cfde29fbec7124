from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, NoReturn, Self

from .errors import ValidationError


class FrozenPairs[V](Mapping[str, V]):
    __slots__ = ("_pairs", "_index")

    def __init__(self, source: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None) -> None:
        index: dict[str, V] = {}
        if source is not None:
            items = source.items() if isinstance(source, Mapping) else source
            for name, value in items:
                index[self._check_name(name)] = self._check_value(value)
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "_pairs", tuple(index.items()))

    def _check_name(self, name: Any) -> str:
        if not isinstance(name, str) or not name:
            raise ValidationError(f"{type(self).__name__} names must be non-empty strings, got {name!r}")
        return name

    def _check_value(self, value: Any) -> V:
        return value

    def with_(self, name: str, value: Any) -> Self:
        index = dict(self._index)
        index[name] = value
        return type(self)(index)

    def only(self, names: Iterable[str]) -> Self:
        wanted = set(names)
        return type(self)((name, value) for name, value in self._pairs if name in wanted)

    def __getitem__(self, name: str) -> V:
        return self._index[name]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FrozenPairs):
            return type(self) is type(other) and self._index == other._index
        if isinstance(other, Mapping):
            return self._index == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, frozenset(self._pairs)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._pairs)!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._pairs,))

    def _immutable(self, *_: Any, **__: Any) -> NoReturn:
        raise TypeError(f"{type(self).__name__} is immutable, use with_() or only() to derive a copy")

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        self._immutable()

    __setitem__ = _immutable
    __delitem__ = _immutable
    clear = _immutable
    update = _immutable
    pop = _immutable
    popitem = _immutable
    setdefault = _immutable
