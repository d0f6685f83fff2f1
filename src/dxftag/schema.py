"""Declarative record schemas.

A :class:`RecordSchema` is an ordered layout of items. The order is the write
order of the interchange format; the decoder ignores it and looks fields up
by ``(group code, occurrence index)`` instead.

Layout items:

* :class:`Field` - one scalar (or, with ``repeat``, a list of scalars).
* :class:`PointField` - a point spread over ``code``, ``code + 10`` and
  ``code + 20``.
* :class:`PointList` - repeated points; ``code`` opens a new point.
* :class:`Count` - the length of a list field, computed on write.
* :class:`Subclass` - a ``100`` subclass marker.
* :class:`Group` - items wrapped in the ``102`` control-brace convention.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Union

from .codes import ValueType
from .versions import NEWEST, OLDEST, DxfVersion

OmitPredicate = Callable[[Any, Any], bool]


def never(value: Any, record: Any) -> bool:
    return False


def if_empty(value: Any, record: Any) -> bool:
    return value is None or value == "" or (isinstance(value, list) and not value)


def if_equal(default: Any) -> OmitPredicate:
    def predicate(value: Any, record: Any) -> bool:
        return value == default

    return predicate


def if_point_equal(*default: float) -> OmitPredicate:
    def predicate(value: Any, record: Any) -> bool:
        return tuple(value.as_tuple()[: len(default)]) == tuple(default)

    return predicate


def unless_aligned(horizontal: str, vertical: str) -> OmitPredicate:
    """Omit an alignment point while both justification flags are at their default."""

    def predicate(value: Any, record: Any) -> bool:
        return not get_attr(record, horizontal) and not get_attr(record, vertical)

    return predicate


def is_zero(value: Any) -> bool:
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    return value == ""


def get_attr(record: Any, path: str) -> Any:
    target = record
    for name in path.split("."):
        target = getattr(target, name)
    return target


def set_attr(record: Any, path: str, value: Any) -> None:
    *parents, name = path.split(".")
    target = record
    for parent in parents:
        target = getattr(target, parent)
    setattr(target, name, value)


@dataclass(frozen=True)
class _Gated:
    def readable(self, version: DxfVersion) -> bool:
        return self.read_min <= version <= self.read_max  # type: ignore[attr-defined]

    def writable(self, version: DxfVersion) -> bool:
        return self.write_min <= version <= self.write_max  # type: ignore[attr-defined]


@dataclass(frozen=True)
class Field(_Gated):
    code: int
    attr: str
    default: Any = None
    type: ValueType | None = None
    read_min: DxfVersion = OLDEST
    read_max: DxfVersion = NEWEST
    write_min: DxfVersion = OLDEST
    write_max: DxfVersion = NEWEST
    omit: OmitPredicate | None = None
    occurrence: int | None = None
    repeat: bool = False
    backfill: bool = False
    required: bool = False
    aliases: tuple[int, ...] = ()
    alias_read_min: DxfVersion = OLDEST

    def readable_as(self, code: int, version: DxfVersion) -> bool:
        if code != self.code and version < self.alias_read_min:
            return False
        return self.readable(version)

    def should_omit(self, value: Any, record: Any) -> bool:
        return self.omit is not None and self.omit(value, record)


@dataclass(frozen=True)
class PointField(_Gated):
    attr: str
    code: int
    dims: int = 3
    read_min: DxfVersion = OLDEST
    read_max: DxfVersion = NEWEST
    write_min: DxfVersion = OLDEST
    write_max: DxfVersion = NEWEST
    omit: OmitPredicate | None = None

    @property
    def codes(self) -> tuple[int, ...]:
        return tuple(self.code + 10 * axis for axis in range(self.dims))

    def should_omit(self, value: Any, record: Any) -> bool:
        return self.omit is not None and self.omit(value, record)


@dataclass(frozen=True)
class PointList(_Gated):
    attr: str
    code: int
    dims: int = 3
    read_min: DxfVersion = OLDEST
    read_max: DxfVersion = NEWEST
    write_min: DxfVersion = OLDEST
    write_max: DxfVersion = NEWEST

    @property
    def codes(self) -> tuple[int, ...]:
        return tuple(self.code + 10 * axis for axis in range(self.dims))


@dataclass(frozen=True)
class Count(_Gated):
    code: int
    attr: str
    read_min: DxfVersion = OLDEST
    read_max: DxfVersion = NEWEST
    write_min: DxfVersion = OLDEST
    write_max: DxfVersion = NEWEST


@dataclass(frozen=True)
class Subclass:
    name: str
    write_min: DxfVersion = DxfVersion.AC1012


@dataclass(frozen=True)
class Group:
    name: str
    items: tuple["LayoutItem", ...]
    write_min: DxfVersion = DxfVersion.AC1014


LayoutItem = Union[Field, PointField, PointList, Count, Subclass, Group]
ValueItem = Union[Field, PointField, PointList, Count]


@dataclass(frozen=True)
class Alignment:
    """Attribute paths involved in the justification correction on write."""

    horizontal: str
    vertical: str
    base: str
    point: str


@dataclass(frozen=True)
class Binding:
    item: ValueItem
    axis: int = 0


class RecordSchema:
    def __init__(
        self,
        kind: str,
        factory: Callable[[], Any],
        layout: Iterable[LayoutItem],
        *,
        alignment: Alignment | None = None,
        sentinel: bool = True,
        extra_subclasses: Iterable[str] = ("AcDbEntity",),
    ) -> None:
        self.kind = kind
        self.factory = factory
        self.layout: tuple[LayoutItem, ...] = tuple(layout)
        self.alignment = alignment
        self.sentinel = sentinel
        self.subclass_names = frozenset(
            [item.name for item in _walk(self.layout) if isinstance(item, Subclass)]
            + list(extra_subclasses)
        )
        self._bindings: dict[int, list[Binding]] = {}
        for item in self.value_items():
            if isinstance(item, Field):
                for code in (item.code, *item.aliases):
                    self._bindings.setdefault(code, []).append(Binding(item))
            elif isinstance(item, (PointField, PointList)):
                for axis, code in enumerate(item.codes):
                    self._bindings.setdefault(code, []).append(Binding(item, axis))
            else:
                self._bindings.setdefault(item.code, []).append(Binding(item))

    def new_record(self) -> Any:
        return self.factory()

    def value_items(self) -> Iterator[ValueItem]:
        for item in _walk(self.layout):
            if not isinstance(item, (Subclass, Group)):
                yield item

    def codes(self) -> frozenset[int]:
        return frozenset(self._bindings)

    def resolve(self, code: int, occurrence: int = 0) -> Binding | None:
        """Return the binding for the ``occurrence``-th appearance of ``code``.

        An exact occurrence index wins, then a repeating field whose first
        occurrence has been reached, then a field that accepts any occurrence.
        """
        candidates = self._bindings.get(code)
        if not candidates:
            return None
        repeating = None
        fallback = None
        for binding in candidates:
            item = binding.item
            index = getattr(item, "occurrence", None)
            if index is None:
                if fallback is None:
                    fallback = binding
                continue
            if index == occurrence:
                return binding
            if getattr(item, "repeat", False) and occurrence >= index:
                repeating = binding
        return repeating or fallback

    def __repr__(self) -> str:
        return f"RecordSchema(kind={self.kind!r}, items={len(self.layout)})"


def _walk(items: Iterable[LayoutItem]) -> Iterator[LayoutItem]:
    for item in items:
        yield item
        if isinstance(item, Group):
            yield from _walk(item.items)
