from __future__ import annotations

import fnmatch
import re
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from .chain import RecordChain
from .codes import COMMENT, SENTINEL, parse_code
from .cursor import StreamCursor
from .decoder import decode
from .diagnostics import DiagnosticKind, DiagnosticLog
from .encoder import encode
from .errors import EndOfStream, MalformedValue
from .kinds import ENTITY_KINDS, OBJECT_KINDS, TABLE_ENTRY_KINDS, get_schema
from .log import get_logger
from .records import Block, EndBlk, Table, Thumbnail
from .versions import DEFAULT_VERSION, DxfVersion

logger = get_logger(__name__)

VERSION_VARIABLE = "$ACADVER"

HeaderPairs = list[tuple[int, str]]


@dataclass
class TableSection:
    header: Table
    entries: RecordChain[Any] = field(default_factory=RecordChain)

    @property
    def name(self) -> str:
        return self.header.table_name


@dataclass
class BlockDefinition:
    block: Block
    entities: RecordChain[Any] = field(default_factory=RecordChain)
    end: EndBlk = field(default_factory=EndBlk)

    @property
    def name(self) -> str:
        return self.block.block_name


@dataclass
class DxfDocument:
    """One drawing assembled from (or for) a DXF stream.

    Holds every record chain of the drawing, so independent documents can be
    read or written side by side.
    """

    version: DxfVersion = DEFAULT_VERSION
    source: str | None = None
    header: dict[str, HeaderPairs] = field(default_factory=dict)
    classes: RecordChain[Any] = field(default_factory=lambda: RecordChain("CLASS"))
    tables: dict[str, TableSection] = field(default_factory=dict)
    blocks: list[BlockDefinition] = field(default_factory=list)
    entities: RecordChain[Any] = field(default_factory=lambda: RecordChain("ENTITIES"))
    objects: RecordChain[Any] = field(default_factory=lambda: RecordChain("OBJECTS"))
    thumbnail: Thumbnail | None = None
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

    def add_table(self, name: str) -> TableSection:
        section = self.tables.get(name)
        if section is None:
            section = TableSection(Table(table_name=name), RecordChain(name))
            self.tables[name] = section
        return section

    def add_block(self, name: str) -> BlockDefinition:
        definition = BlockDefinition(Block(block_name=name), RecordChain(name))
        self.blocks.append(definition)
        return definition

    def query(self, kinds: str | Iterable[str] | None = None) -> Iterator[Any]:
        selected = _normalize_kinds(kinds)
        for record in self.entities:
            if record.KIND in selected:
                yield record

    def record_counts(self) -> dict[str, int]:
        counter: Counter[str] = Counter()
        for record in self._iter_records():
            counter[record.KIND] += 1
        return dict(sorted(counter.items()))

    def write(self, path: str | Path, version: DxfVersion | str | None = None) -> DiagnosticLog:
        target = DxfVersion.parse(version) if version is not None else self.version
        with StreamCursor.open(path, "w", version=target) as cursor:
            return self.write_stream(cursor)

    def write_stream(self, cursor: StreamCursor) -> DiagnosticLog:
        _Writer(self, cursor).run()
        return self.diagnostics

    def close(self) -> int:
        released = self.classes.free_chain()
        for section in self.tables.values():
            released += section.entries.free_chain()
        for definition in self.blocks:
            released += definition.entities.free_chain()
        released += self.entities.free_chain()
        released += self.objects.free_chain()
        self.tables.clear()
        self.blocks.clear()
        self.thumbnail = None
        return released

    def __enter__(self) -> "DxfDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _iter_records(self) -> Iterator[Any]:
        yield from self.classes
        for section in self.tables.values():
            yield section.header
            yield from section.entries
        for definition in self.blocks:
            yield definition.block
            yield from definition.entities
            yield definition.end
        yield from self.entities
        yield from self.objects
        if self.thumbnail is not None:
            yield self.thumbnail


def read(path: str | Path, *, diagnostics: DiagnosticLog | None = None) -> DxfDocument:
    with StreamCursor.open(path, "r") as cursor:
        return read_stream(cursor, diagnostics=diagnostics)


def read_stream(cursor: StreamCursor, *, diagnostics: DiagnosticLog | None = None) -> DxfDocument:
    document = DxfDocument(
        version=cursor.version,
        source=cursor.name,
        diagnostics=diagnostics if diagnostics is not None else DiagnosticLog(),
    )
    _Reader(cursor, document).run()
    document.version = cursor.version
    return document


class _Reader:
    """Section dispatcher for one read pass.

    ``_sentinel_pending`` is set once the decoder has consumed a ``0`` code
    line; the record-kind name is then the next physical line.
    """

    def __init__(self, cursor: StreamCursor, document: DxfDocument) -> None:
        self.cursor = cursor
        self.document = document
        self.diagnostics = document.diagnostics
        self._sentinel_pending = False
        self._sections: dict[str, Callable[[], None]] = {
            "HEADER": self._read_header,
            "CLASSES": self._read_classes,
            "TABLES": self._read_tables,
            "BLOCKS": self._read_blocks,
            "ENTITIES": self._read_entities,
            "OBJECTS": self._read_objects,
            "THUMBNAILIMAGE": self._read_thumbnail,
        }

    def run(self) -> None:
        while True:
            try:
                kind = self._next_sentinel()
            except EndOfStream:
                self._report(DiagnosticKind.UNEXPECTED_TOKEN, "stream ended without an EOF marker")
                return
            if kind == "EOF":
                return
            if kind != "SECTION":
                self._report(DiagnosticKind.UNEXPECTED_TOKEN, f"expected SECTION, found {kind!r}")
                self._skip_body()
                continue
            code, name = self._pair()
            name = name.strip()
            handler = self._sections.get(name) if code == 2 else None
            if handler is None:
                self._report(DiagnosticKind.UNKNOWN_RECORD_KIND, f"skipping unknown section {name!r}")
                self._skip_until("ENDSEC")
                continue
            logger.debug("reading %s section at line %d", name, self.cursor.line_number)
            handler()

    def _report(self, kind: DiagnosticKind, message: str) -> None:
        self.diagnostics.add(kind, message, source=self.cursor.name, line_number=self.cursor.line_number)

    def _pair(self) -> tuple[int, str]:
        while True:
            code_line = self.cursor.read_line()
            text = self.cursor.read_line()
            try:
                code = parse_code(code_line)
            except MalformedValue:
                self._report(DiagnosticKind.MALFORMED_VALUE, f"invalid group code line {code_line!r}")
                continue
            if code == COMMENT:
                self._report(DiagnosticKind.COMMENT, text)
                continue
            return code, text

    def _next_sentinel(self) -> str:
        """Return the next record-kind name, discarding stray pairs before it."""
        if self._sentinel_pending:
            self._sentinel_pending = False
            return self.cursor.read_line().strip()
        while True:
            code, text = self._pair()
            if code == SENTINEL:
                return text.strip()
            self._report(DiagnosticKind.UNEXPECTED_TOKEN, f"stray group code {code} outside a record")

    def _skip_until(self, marker: str) -> None:
        if self._sentinel_pending:
            self._sentinel_pending = False
            if self.cursor.read_line().strip() == marker:
                return
        while True:
            code, text = self._pair()
            if code == SENTINEL and text.strip() == marker:
                return

    def _decode(self, kind: str) -> Any:
        record = decode(self.cursor, get_schema(kind), self.diagnostics)
        self._sentinel_pending = True
        return record

    def _records(
        self,
        accepted: Iterable[str],
        markers: Iterable[str] = (),
        end: str = "ENDSEC",
    ) -> Iterator[tuple[str, Any]]:
        """Yield ``(kind, record)`` for each record up to the ``end`` marker.

        Kinds outside ``accepted`` are skipped with a diagnostic; ``markers``
        are yielded with a ``None`` record and left for the caller to consume.
        """
        accepted = set(accepted)
        markers = set(markers)
        while True:
            kind = self._next_sentinel()
            if kind == end:
                return
            if kind in markers:
                yield kind, None
                continue
            if kind not in accepted:
                self._report(DiagnosticKind.UNKNOWN_RECORD_KIND, f"skipping {kind!r} record")
                self._skip_body()
                continue
            yield kind, self._decode(kind)

    def _skip_body(self) -> None:
        while True:
            code_line = self.cursor.read_line()
            try:
                code = parse_code(code_line)
            except MalformedValue:
                code = None
            if code == SENTINEL:
                self._sentinel_pending = True
                return
            self.cursor.read_line()

    def _read_header(self) -> None:
        header = self.document.header
        current: HeaderPairs | None = None
        while True:
            code, text = self._pair()
            if code == SENTINEL:
                if text.strip() != "ENDSEC":
                    self._report(DiagnosticKind.UNEXPECTED_TOKEN, f"unexpected {text.strip()!r} in HEADER")
                    self._skip_until("ENDSEC")
                return
            if code == 9:
                current = header.setdefault(text.strip(), [])
                continue
            if current is None:
                self._report(DiagnosticKind.UNEXPECTED_TOKEN, f"group code {code} before the first variable")
                continue
            current.append((code, text))
            if header.get(VERSION_VARIABLE) is current and code == 1:
                self._set_version(text)

    def _set_version(self, text: str) -> None:
        try:
            version = DxfVersion.parse(text)
        except ValueError:
            self._report(DiagnosticKind.MALFORMED_VALUE, f"unsupported {VERSION_VARIABLE} {text.strip()!r}")
            return
        self.cursor.version = version
        logger.debug("stream version %s", version.tag)

    def _read_classes(self) -> None:
        for _, record in self._records(("CLASS",)):
            self.document.classes.append(record)

    def _read_tables(self) -> None:
        section: TableSection | None = None
        for kind, record in self._records(("TABLE", *TABLE_ENTRY_KINDS), markers=("ENDTAB",)):
            if kind == "ENDTAB":
                section = None
                self._skip_body()
                continue
            if kind == "TABLE":
                section = TableSection(record, RecordChain(record.table_name))
                self.document.tables[record.table_name] = section
                continue
            if section is None:
                self._report(DiagnosticKind.UNEXPECTED_TOKEN, f"{kind} record outside a TABLE")
                continue
            section.entries.append(record)

    def _read_blocks(self) -> None:
        definition: BlockDefinition | None = None
        for kind, record in self._records(("BLOCK", "ENDBLK", *ENTITY_KINDS)):
            if kind == "BLOCK":
                definition = BlockDefinition(record, RecordChain(record.block_name))
                self.document.blocks.append(definition)
            elif definition is None:
                self._report(DiagnosticKind.UNEXPECTED_TOKEN, f"{kind} record outside a BLOCK")
            elif kind == "ENDBLK":
                definition.end = record
                definition = None
            else:
                definition.entities.append(record)

    def _read_entities(self) -> None:
        for _, record in self._records(ENTITY_KINDS):
            self.document.entities.append(record)

    def _read_objects(self) -> None:
        for _, record in self._records(OBJECT_KINDS):
            self.document.objects.append(record)

    def _read_thumbnail(self) -> None:
        self.document.thumbnail = decode(self.cursor, get_schema("THUMBNAILIMAGE"), self.diagnostics)
        self._sentinel_pending = True
        self._skip_until("ENDSEC")


class _Writer:
    def __init__(self, document: DxfDocument, cursor: StreamCursor) -> None:
        self.document = document
        self.cursor = cursor
        self.version = cursor.version
        self.diagnostics = document.diagnostics

    def run(self) -> None:
        document = self.document
        self._header()
        if self.version >= DxfVersion.AC1012 and document.classes:
            with self._section("CLASSES"):
                self._encode_all(document.classes)
        if document.tables:
            with self._section("TABLES"):
                for section in document.tables.values():
                    self._encode(section.header)
                    self._encode_all(section.entries)
                    self.cursor.write_pair(SENTINEL, "ENDTAB")
        if document.blocks:
            with self._section("BLOCKS"):
                for definition in document.blocks:
                    self._encode(definition.block)
                    self._encode_all(definition.entities)
                    self._encode(definition.end)
        with self._section("ENTITIES"):
            self._encode_all(document.entities)
        if self.version >= DxfVersion.AC1012 and document.objects:
            with self._section("OBJECTS"):
                self._encode_all(document.objects)
        if self.version >= DxfVersion.AC1015 and document.thumbnail is not None:
            with self._section("THUMBNAILIMAGE"):
                self._encode(document.thumbnail)
        self.cursor.write_pair(SENTINEL, "EOF")
        logger.debug("wrote %d lines to %s", self.cursor.line_number, self.cursor.name)

    def _header(self) -> None:
        with self._section("HEADER"):
            self.cursor.write_pair(9, VERSION_VARIABLE)
            self.cursor.write_pair(1, self.version.tag)
            for name, pairs in self.document.header.items():
                if name == VERSION_VARIABLE:
                    continue
                self.cursor.write_pair(9, name)
                for code, text in pairs:
                    self.cursor.write_pair(code, text)

    @contextmanager
    def _section(self, name: str) -> Iterator[None]:
        self.cursor.write_pair(SENTINEL, "SECTION")
        self.cursor.write_pair(2, name)
        yield
        self.cursor.write_pair(SENTINEL, "ENDSEC")

    def _encode(self, record: Any) -> None:
        encode(record, self.cursor, self.version, diagnostics=self.diagnostics)

    def _encode_all(self, records: Iterable[Any]) -> None:
        for record in records:
            self._encode(record)


def _normalize_kinds(kinds: str | Iterable[str] | None) -> set[str]:
    if kinds is None:
        return set(ENTITY_KINDS)
    if isinstance(kinds, str):
        tokens = re.split(r"[,\s]+", kinds.strip())
    else:
        tokens = list(kinds)
    normalized = [token.strip().upper() for token in tokens if token and token.strip()]
    if not normalized or any(token in {"*", "ALL"} for token in normalized):
        return set(ENTITY_KINDS)

    selected: set[str] = set()
    for token in normalized:
        if any(ch in token for ch in "*?[]"):
            selected.update(name for name in ENTITY_KINDS if fnmatch.fnmatchcase(name, token))
        elif token in ENTITY_KINDS:
            selected.add(token)
    return selected
