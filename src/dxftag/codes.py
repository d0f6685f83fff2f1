"""Group code to value type table shared by every record schema."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .errors import MalformedValue

SENTINEL = 0
SUBCLASS_MARKER = 100
CONTROL_BRACE = 102
COMMENT = 999
BINARY_CHUNK = 310
MAX_CHUNK_LENGTH = 256


class ValueType(Enum):
    STR = "str"
    DOUBLE = "double"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    BOOL = "bool"
    HANDLE = "handle"
    BINARY_CHUNK_LINE = "binary-chunk"
    SUBCLASS_MARKER = "subclass-marker"
    CONTROL_BRACE = "control-brace"
    COMMENT = "comment"
    HEX = "hex"


_RANGES: tuple[tuple[int, int, ValueType], ...] = (
    (0, 9, ValueType.STR),
    (10, 59, ValueType.DOUBLE),
    (60, 79, ValueType.INT16),
    (90, 99, ValueType.INT32),
    (100, 100, ValueType.SUBCLASS_MARKER),
    (102, 102, ValueType.CONTROL_BRACE),
    (105, 105, ValueType.HANDLE),
    (110, 139, ValueType.DOUBLE),
    (140, 149, ValueType.FLOAT),
    (160, 169, ValueType.INT64),
    (170, 179, ValueType.INT16),
    (210, 239, ValueType.DOUBLE),
    (270, 289, ValueType.INT16),
    (290, 299, ValueType.BOOL),
    (300, 309, ValueType.STR),
    (310, 319, ValueType.BINARY_CHUNK_LINE),
    (320, 369, ValueType.HANDLE),
    (370, 389, ValueType.INT16),
    (390, 390, ValueType.HANDLE),
    (391, 399, ValueType.HANDLE),
    (400, 409, ValueType.INT16),
    (410, 419, ValueType.STR),
    (420, 429, ValueType.INT32),
    (430, 439, ValueType.STR),
    (440, 459, ValueType.INT32),
    (460, 469, ValueType.DOUBLE),
    (470, 479, ValueType.STR),
    (999, 999, ValueType.COMMENT),
    (1000, 1003, ValueType.STR),
    (1004, 1004, ValueType.BINARY_CHUNK_LINE),
    (1005, 1009, ValueType.STR),
    (1010, 1059, ValueType.DOUBLE),
    (1060, 1070, ValueType.INT16),
    (1071, 1071, ValueType.INT32),
)

_INT_LIMITS = {
    ValueType.INT16: (-(2**15), 2**15 - 1),
    ValueType.INT32: (-(2**31), 2**31 - 1),
    ValueType.INT64: (-(2**63), 2**63 - 1),
}


def value_type(code: int) -> ValueType:
    """Return the value type of ``code``; codes outside every range read as text."""
    for low, high, vtype in _RANGES:
        if low <= code <= high:
            return vtype
    return ValueType.STR


def parse_code(text: str) -> int:
    stripped = text.strip()
    try:
        code = int(stripped)
    except ValueError:
        raise MalformedValue(-1, text, "group code") from None
    if code < 0:
        raise MalformedValue(code, text, "group code")
    return code


def coerce(code: int, text: str, vtype: ValueType | None = None) -> Any:
    vtype = vtype or value_type(code)
    if vtype in (ValueType.DOUBLE, ValueType.FLOAT):
        try:
            return float(text.strip())
        except ValueError:
            raise MalformedValue(code, text, vtype.value) from None
    if vtype in _INT_LIMITS:
        try:
            value = int(text.strip())
        except ValueError:
            raise MalformedValue(code, text, vtype.value) from None
        low, high = _INT_LIMITS[vtype]
        if not low <= value <= high:
            raise MalformedValue(code, text, vtype.value)
        return value
    if vtype is ValueType.BOOL:
        try:
            return int(text.strip()) != 0
        except ValueError:
            raise MalformedValue(code, text, vtype.value) from None
    if vtype is ValueType.HEX:
        try:
            return int(text.strip(), 16)
        except ValueError:
            raise MalformedValue(code, text, vtype.value) from None
    if vtype is ValueType.HANDLE:
        return text.strip()
    if vtype is ValueType.BINARY_CHUNK_LINE:
        chunk = text.strip()
        if len(chunk) > MAX_CHUNK_LENGTH:
            raise MalformedValue(code, text, f"chunk of at most {MAX_CHUNK_LENGTH} characters")
        return chunk
    return text


def format_value(code: int, value: Any, vtype: ValueType | None = None) -> str:
    vtype = vtype or value_type(code)
    if vtype in (ValueType.DOUBLE, ValueType.FLOAT):
        return format_float(float(value))
    if vtype in _INT_LIMITS:
        return str(int(value))
    if vtype is ValueType.BOOL:
        return "1" if value else "0"
    if vtype is ValueType.HEX:
        return f"{int(value):x}"
    return str(value)


def format_float(value: float) -> str:
    text = f"{value:f}"
    if float(text) == value:
        return text
    return repr(value)


def split_graphics_data(hex_text: str, width: int = MAX_CHUNK_LENGTH) -> list[str]:
    """Split a hex payload into binary chunk lines of at most ``width`` characters."""
    hex_text = "".join(hex_text.split())
    return [hex_text[i : i + width] for i in range(0, len(hex_text), width)]
