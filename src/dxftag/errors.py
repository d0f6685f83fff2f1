from __future__ import annotations


class DxfError(Exception):
    """Base class for every error raised by dxftag."""


class IoFailure(DxfError, OSError):
    """A read or write on the underlying stream failed; the pass is aborted."""

    def __init__(self, message: str, *, source: str = "<stream>", line_number: int = 0) -> None:
        super().__init__(f"{message} ({source}, line {line_number})")
        self.source = source
        self.line_number = line_number


class EndOfStream(DxfError):
    """The stream ended before the expected sentinel."""

    def __init__(self, source: str = "<stream>", line_number: int = 0) -> None:
        super().__init__(f"unexpected end of stream in {source} after line {line_number}")
        self.source = source
        self.line_number = line_number


class MalformedValue(DxfError, ValueError):
    """A value line could not be coerced to the type its group code demands."""

    def __init__(self, code: int, text: str, expected: str) -> None:
        super().__init__(f"group code {code}: cannot read {text!r} as {expected}")
        self.code = code
        self.text = text
        self.expected = expected


class InvariantViolation(DxfError):
    """A structural contract was broken by the caller."""
