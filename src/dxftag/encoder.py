from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

from .codes import (
    CONTROL_BRACE,
    MAX_CHUNK_LENGTH,
    SENTINEL,
    SUBCLASS_MARKER,
    ValueType,
    format_float,
    format_value,
    split_graphics_data,
    value_type,
)
from .cursor import StreamCursor
from .diagnostics import DiagnosticKind, DiagnosticLog
from .errors import InvariantViolation
from .log import get_logger
from .schema import (
    Count,
    Field,
    Group,
    LayoutItem,
    PointField,
    PointList,
    RecordSchema,
    Subclass,
    get_attr,
    is_zero,
    set_attr,
)
from .versions import DxfVersion

logger = get_logger(__name__)

Pair = tuple[int, str]


class _MissingRequired(Exception):
    def __init__(self, attr: str) -> None:
        super().__init__(attr)
        self.attr = attr


def encode(
    record: Any,
    cursor: StreamCursor,
    target_version: DxfVersion | str | None = None,
    *,
    schema: RecordSchema | None = None,
    diagnostics: DiagnosticLog | None = None,
) -> None:
    """Write ``record`` as group code/value pairs, sentinel first.

    ``target_version`` defaults to the cursor's version. Fields gated above the
    target or matching their omit predicate are not written. A record whose
    required field is empty is not written at all; a diagnostic is reported.
    """
    if record is None:
        raise InvariantViolation("cannot encode a missing record")
    if schema is None:
        from .kinds import schema_for

        try:
            schema = schema_for(record)
        except KeyError as exc:
            raise InvariantViolation(f"no schema for record type {type(record).__name__}") from exc
    if diagnostics is None:
        diagnostics = DiagnosticLog()
    version = DxfVersion.parse(target_version) if target_version is not None else cursor.version

    for code, text in encode_pairs(record, schema, version, diagnostics, source=cursor.name):
        cursor.write_pair(code, text)


def encode_pairs(
    record: Any,
    schema: RecordSchema,
    version: DxfVersion,
    diagnostics: DiagnosticLog,
    *,
    source: str = "<stream>",
) -> list[Pair]:
    encoder = _Encoder(record, schema, version, diagnostics, source)
    return encoder.run()


class _Encoder:
    def __init__(
        self,
        record: Any,
        schema: RecordSchema,
        version: DxfVersion,
        diagnostics: DiagnosticLog,
        source: str,
    ) -> None:
        self.record = record
        self.schema = schema
        self.version = version
        self.diagnostics = diagnostics
        self.source = source
        self.emitted: Counter[int] = Counter()

    def run(self) -> list[Pair]:
        self._correct_alignment()
        pairs: list[Pair] = []
        if self.schema.sentinel:
            pairs.append((SENTINEL, self.schema.kind))
        try:
            pairs.extend(self._items(self.schema.layout))
        except _MissingRequired as exc:
            self._warn(
                DiagnosticKind.DEGENERATE_VALUE,
                f"required field {exc.attr} is empty, record not written",
            )
            return []
        return pairs

    def _warn(self, kind: DiagnosticKind, message: str) -> None:
        self.diagnostics.add(kind, f"{self.schema.kind}: {message}", source=self.source)

    def _correct_alignment(self) -> None:
        rule = self.schema.alignment
        if rule is None:
            return
        horizontal = get_attr(self.record, rule.horizontal)
        vertical = get_attr(self.record, rule.vertical)
        if not horizontal and not vertical:
            return
        base = get_attr(self.record, rule.base)
        point = get_attr(self.record, rule.point)
        if base.as_tuple() != point.as_tuple():
            return
        set_attr(self.record, rule.horizontal, 0)
        set_attr(self.record, rule.vertical, 0)
        self._warn(
            DiagnosticKind.DEGENERATE_VALUE,
            "alignment point equals base point, default justification applied",
        )

    def _items(self, items: Iterable[LayoutItem]) -> list[Pair]:
        pairs: list[Pair] = []
        for item in items:
            if isinstance(item, Subclass):
                if self.version >= item.write_min:
                    pairs.append((SUBCLASS_MARKER, item.name))
            elif isinstance(item, Group):
                inner = self._items(item.items)
                if not inner:
                    continue
                if self.version >= item.write_min:
                    pairs.append((CONTROL_BRACE, "{" + item.name))
                    pairs.extend(inner)
                    pairs.append((CONTROL_BRACE, "}"))
                else:
                    pairs.extend(inner)
            elif not item.writable(self.version):
                continue
            elif isinstance(item, Field):
                pairs.extend(self._field(item))
            elif isinstance(item, PointField):
                point = get_attr(self.record, item.attr)
                if item.should_omit(point, self.record):
                    continue
                pairs.extend(self._point(item.codes, point))
            elif isinstance(item, PointList):
                for point in get_attr(self.record, item.attr):
                    pairs.extend(self._point(item.codes, point))
            elif isinstance(item, Count):
                pairs.append((item.code, str(len(get_attr(self.record, item.attr)))))
        return pairs

    def _field(self, item: Field) -> list[Pair]:
        value = get_attr(self.record, item.attr)
        if item.repeat:
            return [(item.code, text) for text in self._repeated(item, value)]
        if item.backfill and is_zero(value) and not is_zero(item.default):
            self._warn(
                DiagnosticKind.DEFAULTED,
                f"{item.attr} was {value!r}, defaulted to {item.default!r}",
            )
            value = item.default
            set_attr(self.record, item.attr, value)
        if item.required and is_zero(value):
            raise _MissingRequired(item.attr)
        if item.should_omit(value, self.record):
            return []
        if item.occurrence and self.emitted[item.code] < item.occurrence:
            self._warn(
                DiagnosticKind.DEGENERATE_VALUE,
                f"{item.attr} is occurrence {item.occurrence} of group code {item.code} "
                "but earlier occurrences are missing; it will read back as an earlier field",
            )
        self.emitted[item.code] += 1
        return [(item.code, format_value(item.code, value, item.type))]

    def _repeated(self, item: Field, values: list[Any]) -> list[str]:
        texts: list[str] = []
        for value in values:
            if value_type(item.code) is ValueType.BINARY_CHUNK_LINE:
                if len(value) > MAX_CHUNK_LENGTH:
                    self._warn(
                        DiagnosticKind.DEGENERATE_VALUE,
                        f"{item.attr} chunk of {len(value)} characters split into "
                        f"{MAX_CHUNK_LENGTH}-character lines",
                    )
                    texts.extend(split_graphics_data(value))
                    continue
            texts.append(format_value(item.code, value, item.type))
        return texts

    @staticmethod
    def _point(codes: tuple[int, ...], point: Any) -> list[Pair]:
        values = point.as_tuple()
        return [(code, format_float(values[axis])) for axis, code in enumerate(codes)]
