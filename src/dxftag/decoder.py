from __future__ import annotations

from collections import Counter
from typing import Any

from .codes import SENTINEL, ValueType, coerce, parse_code, value_type
from .cursor import StreamCursor
from .diagnostics import DiagnosticKind, DiagnosticLog
from .errors import MalformedValue
from .log import get_logger
from .records import Point
from .schema import Binding, Count, Field, PointField, PointList, RecordSchema, get_attr, is_zero, set_attr

logger = get_logger(__name__)


def decode(
    cursor: StreamCursor,
    schema: RecordSchema,
    diagnostics: DiagnosticLog | None = None,
) -> Any:
    """Decode one record body from ``cursor`` up to and including the next ``0`` line.

    The kind name following the sentinel is left unread so the caller can
    dispatch on it. Unknown, malformed or version-gated pairs are reported to
    ``diagnostics`` and skipped; only stream errors propagate.
    """
    if diagnostics is None:
        diagnostics = DiagnosticLog()
    record = schema.new_record()
    occurrences: Counter[int] = Counter()
    announced: dict[Count, tuple[int, int]] = {}
    previous_code: int | None = None

    while True:
        code_line = cursor.read_line()
        try:
            code = parse_code(code_line)
        except MalformedValue:
            cursor.read_line()
            _report(
                diagnostics,
                cursor,
                DiagnosticKind.MALFORMED_VALUE,
                f"{schema.kind}: invalid group code line {code_line!r}, pair discarded",
            )
            continue
        if code == SENTINEL:
            break

        text = cursor.read_line()
        preceding, previous_code = previous_code, code
        vtype = value_type(code)
        if vtype is ValueType.SUBCLASS_MARKER:
            if text.strip() not in schema.subclass_names:
                _report(
                    diagnostics,
                    cursor,
                    DiagnosticKind.BAD_SUBCLASS_MARKER,
                    f"{schema.kind}: unexpected subclass marker {text.strip()!r}",
                )
            continue
        if vtype is ValueType.CONTROL_BRACE:
            logger.debug("%s: control brace %r at line %d", schema.kind, text, cursor.line_number)
            continue
        if vtype is ValueType.COMMENT:
            _report(diagnostics, cursor, DiagnosticKind.COMMENT, text)
            continue

        binding = schema.resolve(code, occurrences[code])
        if binding is None:
            _report(
                diagnostics,
                cursor,
                DiagnosticKind.UNKNOWN_GROUP_CODE,
                f"{schema.kind}: unknown group code {code}, value {text!r} discarded",
            )
            continue
        item = binding.item
        if not _readable(item, code, cursor):
            _report(
                diagnostics,
                cursor,
                DiagnosticKind.VERSION_SKIPPED,
                f"{schema.kind}: group code {code} is not read for {cursor.version.tag}",
            )
            continue
        if vtype is ValueType.BINARY_CHUNK_LINE and occurrences[code] and preceding != code:
            _report(
                diagnostics,
                cursor,
                DiagnosticKind.UNEXPECTED_TOKEN,
                f"{schema.kind}: group code {code} chunk after the chunk run ended, discarded",
            )
            continue
        try:
            value = coerce(code, text, _decode_type(item, code))
        except MalformedValue as exc:
            _report(diagnostics, cursor, DiagnosticKind.MALFORMED_VALUE, f"{schema.kind}: {exc}")
            continue

        if isinstance(item, Count):
            announced[item] = (value, cursor.line_number)
        else:
            _assign(record, binding, value)
        occurrences[code] += 1

    for item, (count, line_number) in announced.items():
        actual = len(get_attr(record, item.attr))
        if actual != count:
            diagnostics.add(
                DiagnosticKind.COUNT_MISMATCH,
                f"{schema.kind}: group code {item.code} announced {count} items, read {actual}",
                source=cursor.name,
                line_number=line_number,
            )
    _backfill(record, schema, cursor, diagnostics)
    return record


def _readable(item: Any, code: int, cursor: StreamCursor) -> bool:
    if isinstance(item, Field):
        return item.readable_as(code, cursor.version)
    return item.readable(cursor.version)


def _decode_type(item: Any, code: int) -> ValueType | None:
    if isinstance(item, Field) and code == item.code:
        return item.type
    if isinstance(item, (PointField, PointList)):
        return ValueType.DOUBLE
    return None


def _assign(record: Any, binding: Binding, value: Any) -> None:
    item = binding.item
    if isinstance(item, Field):
        if item.repeat:
            get_attr(record, item.attr).append(value)
        else:
            set_attr(record, item.attr, value)
        return
    if isinstance(item, PointField):
        setattr(get_attr(record, item.attr), "xyz"[binding.axis], value)
        return
    points: list[Point] = get_attr(record, item.attr)
    if binding.axis == 0 or not points:
        points.append(Point())
    setattr(points[-1], "xyz"[binding.axis], value)


def _backfill(record: Any, schema: RecordSchema, cursor: StreamCursor, diagnostics: DiagnosticLog) -> None:
    for item in schema.value_items():
        if not isinstance(item, Field) or not item.backfill:
            continue
        value = get_attr(record, item.attr)
        if is_zero(value) and not is_zero(item.default):
            set_attr(record, item.attr, item.default)
            _report(
                diagnostics,
                cursor,
                DiagnosticKind.DEFAULTED,
                f"{schema.kind}: {item.attr} was {value!r}, defaulted to {item.default!r}",
            )


def _report(diagnostics: DiagnosticLog, cursor: StreamCursor, kind: DiagnosticKind, message: str) -> None:
    diagnostics.add(kind, message, source=cursor.name, line_number=cursor.line_number)
