"""Diagnostic sink for lenient decoding.

Malformed or unrecognised data never aborts a pass; it is reported here
instead. A :class:`DiagnosticLog` collects structured :class:`Diagnostic`
entries for one pass and forwards each one to the module logger.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .log import get_logger

logger = get_logger(__name__)


class DiagnosticKind(Enum):
    UNKNOWN_GROUP_CODE = "unknown-group-code"
    BAD_SUBCLASS_MARKER = "bad-subclass-marker"
    MALFORMED_VALUE = "malformed-value"
    DEFAULTED = "defaulted"
    DEGENERATE_VALUE = "degenerate-value"
    VERSION_SKIPPED = "version-skipped"
    COUNT_MISMATCH = "count-mismatch"
    COMMENT = "comment"
    UNKNOWN_RECORD_KIND = "unknown-record-kind"
    UNEXPECTED_TOKEN = "unexpected-token"

    @property
    def log_level(self) -> int:
        if self is DiagnosticKind.COMMENT:
            return logging.INFO
        return logging.WARNING


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    source: str = "<stream>"
    line_number: int = 0

    def __str__(self) -> str:
        return f"{self.source}:{self.line_number}: {self.kind.value}: {self.message}"


@dataclass
class DiagnosticLog:
    """Mutable collection of diagnostics emitted during one read or write pass."""

    items: list[Diagnostic] = field(default_factory=list)

    def add(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        source: str = "<stream>",
        line_number: int = 0,
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, message=message, source=source, line_number=line_number)
        self.items.append(diagnostic)
        logger.log(kind.log_level, "%s", diagnostic)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [item for item in self.items if item.kind is kind]

    def counts(self) -> dict[str, int]:
        counter = Counter(item.kind.value for item in self.items)
        return dict(sorted(counter.items()))

    def clear(self) -> None:
        self.items.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
