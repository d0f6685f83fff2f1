from __future__ import annotations

from pathlib import Path
from typing import TextIO

from .errors import EndOfStream, IoFailure
from .log import get_logger
from .versions import DEFAULT_VERSION, DxfVersion

logger = get_logger(__name__)


class StreamCursor:
    """Line-oriented view of one DXF text stream.

    The cursor tracks the 1-based number of the last line read or written,
    the source name used in messages, and the format version that gates both
    decoding and encoding. One cursor serves exactly one read or write pass.
    """

    def __init__(
        self,
        stream: TextIO,
        *,
        name: str | None = None,
        version: DxfVersion | str | int = DEFAULT_VERSION,
        owns_stream: bool = False,
    ) -> None:
        self._stream = stream
        self.name = name or str(getattr(stream, "name", "<stream>"))
        self.version = DxfVersion.parse(version)
        self.line_number = 0
        self._owns_stream = owns_stream
        self._closed = False

    @classmethod
    def open(
        cls,
        path: str | Path,
        mode: str = "r",
        *,
        version: DxfVersion | str | int = DEFAULT_VERSION,
    ) -> "StreamCursor":
        if mode not in {"r", "w"}:
            raise ValueError(f"unsupported cursor mode: {mode!r}")
        try:
            if mode == "r":
                stream = open(path, "r", encoding="utf-8", errors="replace", newline=None)
            else:
                stream = open(path, "w", encoding="utf-8", newline="\n")
        except OSError as exc:
            raise IoFailure(f"cannot open: {exc.strerror or exc}", source=str(path)) from exc
        logger.debug("opened %s for %s", path, "reading" if mode == "r" else "writing")
        return cls(stream, name=str(path), version=version, owns_stream=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def read_line(self) -> str:
        self._ensure_open()
        try:
            line = self._stream.readline()
        except OSError as exc:
            self._fail(f"read failed: {exc}", exc)
        if line == "":
            raise EndOfStream(self.name, self.line_number)
        self.line_number += 1
        return line.rstrip("\r\n")

    def write_line(self, text: str) -> None:
        self._ensure_open()
        try:
            self._stream.write(f"{text}\n")
        except OSError as exc:
            self._fail(f"write failed: {exc}", exc)
        self.line_number += 1

    def write_pair(self, code: int, text: str) -> None:
        self.write_line(f"{code:>3}")
        self.write_line(text)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._owns_stream:
                self._stream.close()
            else:
                self._stream.flush()
        except OSError as exc:
            raise IoFailure(f"close failed: {exc}", source=self.name, line_number=self.line_number) from exc

    def _ensure_open(self) -> None:
        if self._closed:
            raise IoFailure("stream is closed", source=self.name, line_number=self.line_number)

    def _fail(self, message: str, exc: OSError):
        self._closed = True
        try:
            self._stream.close()
        except OSError:
            logger.debug("ignoring close error on failed stream %s", self.name)
        raise IoFailure(message, source=self.name, line_number=self.line_number) from exc

    def __enter__(self) -> "StreamCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"StreamCursor(name={self.name!r}, line={self.line_number}, version={self.version.tag})"
