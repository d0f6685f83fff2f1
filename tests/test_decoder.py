from __future__ import annotations

import pytest

from dxftag.decoder import decode
from dxftag.diagnostics import DiagnosticKind, DiagnosticLog
from dxftag.errors import EndOfStream
from dxftag.kinds import ATTDEF, IMAGEDEF, LEADER, LINE, TEXT, THUMBNAILIMAGE
from dxftag.records import Point
from dxftag.versions import DxfVersion
from tests._dxf_helpers import cursor_over, dxf_text


def _decode_after_sentinel(text: str, schema, version=DxfVersion.AC1015):
    cursor = cursor_over(text, version)
    assert cursor.read_line().strip() == "0"
    assert cursor.read_line() == schema.kind
    diagnostics = DiagnosticLog()
    record = decode(cursor, schema, diagnostics)
    return record, diagnostics, cursor


def test_attribute_definition_with_backfilled_scale() -> None:
    text = dxf_text(
        (0, "ATTDEF"),
        (1, "DEFAULT"),
        (2, "TAG1"),
        (3, "Enter value"),
        (40, "1.000000"),
        (41, "0.000000"),
        (0, "ENDSEC"),
    )

    record, diagnostics, cursor = _decode_after_sentinel(text, ATTDEF)

    assert record.default_value == "DEFAULT"
    assert record.tag_value == "TAG1"
    assert record.prompt_value == "Enter value"
    assert record.height == 1.0
    assert record.rel_x_scale == 1.0
    defaulted = diagnostics.of_kind(DiagnosticKind.DEFAULTED)
    assert len(defaulted) == 1
    assert "rel_x_scale" in defaulted[0].message
    assert cursor.read_line() == "ENDSEC"


def test_line_with_common_trailer() -> None:
    text = dxf_text(
        (0, "LINE"),
        (5, "2A"),
        (102, "{ACAD_REACTORS"),
        (330, "1F"),
        (102, "}"),
        (100, "AcDbEntity"),
        (8, "WALLS"),
        (6, "DASHED"),
        (62, "1"),
        (370, "25"),
        (100, "AcDbLine"),
        (10, "1.5"),
        (20, "2.5"),
        (30, "0.0"),
        (11, "3.0"),
        (21, "4.0"),
        (31, "0.0"),
        (0, "EOF"),
    )

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.trailer.id_code == 0x2A
    assert line.trailer.dictionary_owner_soft == "1F"
    assert line.trailer.layer == "WALLS"
    assert line.trailer.linetype == "DASHED"
    assert line.trailer.color == 1
    assert line.trailer.lineweight == 25
    assert line.start == Point(1.5, 2.5, 0.0)
    assert line.end == Point(3.0, 4.0, 0.0)
    assert line.extrusion == Point(0.0, 0.0, 1.0)
    assert len(diagnostics) == 0


def test_unknown_group_code_is_discarded() -> None:
    text = dxf_text((0, "LINE"), (8, "0"), (71, "3"), (10, "1.0"), (11, "2.0"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.start.x == 1.0
    assert line.end.x == 2.0
    unknown = diagnostics.of_kind(DiagnosticKind.UNKNOWN_GROUP_CODE)
    assert len(unknown) == 1
    assert unknown[0].line_number == 6
    assert len(diagnostics) == 1


def test_bad_subclass_marker_is_a_warning() -> None:
    text = dxf_text((0, "LINE"), (100, "AcDbCircle"), (10, "4.0"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.start.x == 4.0
    assert len(diagnostics.of_kind(DiagnosticKind.BAD_SUBCLASS_MARKER)) == 1


def test_malformed_value_leaves_default() -> None:
    text = dxf_text((0, "LINE"), (10, "abc"), (20, "2.0"), (62, "red"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.start == Point(0.0, 2.0, 0.0)
    assert line.trailer.color == 256
    assert len(diagnostics.of_kind(DiagnosticKind.MALFORMED_VALUE)) == 2


def test_malformed_group_code_line_discards_pair() -> None:
    text = dxf_text((0, "LINE"), ("x8", "WALLS"), (10, "1.0"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.trailer.layer == "0"
    assert line.start.x == 1.0
    assert len(diagnostics.of_kind(DiagnosticKind.MALFORMED_VALUE)) == 1


def test_empty_names_are_backfilled() -> None:
    text = dxf_text((0, "LINE"), (8, ""), (6, ""), (48, "0.0"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.trailer.layer == "0"
    assert line.trailer.linetype == "BYLAYER"
    assert line.trailer.linetype_scale == 1.0
    assert len(diagnostics.of_kind(DiagnosticKind.DEFAULTED)) == 3


def test_graphics_data_size_is_gated_on_read() -> None:
    text = dxf_text((0, "LINE"), (92, "12"), (0, "EOF"))

    old, old_diagnostics, _ = _decode_after_sentinel(text, LINE, DxfVersion.AC1009)
    new, new_diagnostics, _ = _decode_after_sentinel(text, LINE, DxfVersion.AC1015)

    assert old.trailer.graphics_data_size == 0
    assert len(old_diagnostics.of_kind(DiagnosticKind.VERSION_SKIPPED)) == 1
    assert new.trailer.graphics_data_size == 12
    assert len(new_diagnostics) == 0


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        (DxfVersion.AC1006, 5.0),
        (DxfVersion.AC1009, 5.0),
        (DxfVersion.AC1012, 0.0),
        (DxfVersion.AC1015, 0.0),
    ],
)
def test_elevation_is_only_read_from_old_streams(version: DxfVersion, expected: float) -> None:
    text = dxf_text((0, "LINE"), (38, "5.0"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE, version)

    assert line.trailer.elevation == expected
    skipped = diagnostics.of_kind(DiagnosticKind.VERSION_SKIPPED)
    assert len(skipped) == (0 if expected else 1)


def test_graphics_data_chunks_accumulate() -> None:
    text = dxf_text((0, "LINE"), (92, "6"), (310, "0A0B0C"), (310, "0D0E0F"), (0, "EOF"))

    line, _, _ = _decode_after_sentinel(text, LINE)

    assert line.trailer.binary_graphics_data == ["0A0B0C", "0D0E0F"]


def test_graphics_data_chunk_after_another_code_is_discarded() -> None:
    text = dxf_text(
        (0, "LINE"),
        (92, "6"),
        (310, "0A0B0C"),
        (8, "WALLS"),
        (310, "0D0E0F"),
        (0, "EOF"),
    )

    line, diagnostics, _ = _decode_after_sentinel(text, LINE)

    assert line.trailer.binary_graphics_data == ["0A0B0C"]
    assert line.trailer.layer == "WALLS"
    messages = [item.message for item in diagnostics.of_kind(DiagnosticKind.UNEXPECTED_TOKEN)]
    assert len(messages) == 1
    assert "310" in messages[0]


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        (DxfVersion.AC1015, 0),
        (DxfVersion.AC1021, 0),
        (DxfVersion.AC1024, 6),
        (DxfVersion.AC1032, 6),
    ],
)
def test_graphics_data_size_alias_is_read_from_r2010(version: DxfVersion, expected: int) -> None:
    text = dxf_text((0, "LINE"), (160, "6"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE, version)

    assert line.trailer.graphics_data_size == expected
    skipped = diagnostics.of_kind(DiagnosticKind.VERSION_SKIPPED)
    assert len(skipped) == (0 if expected else 1)


def test_graphics_data_size_main_code_is_read_from_r2000() -> None:
    text = dxf_text((0, "LINE"), (92, "6"), (0, "EOF"))

    line, diagnostics, _ = _decode_after_sentinel(text, LINE, DxfVersion.AC1015)

    assert line.trailer.graphics_data_size == 6
    assert len(diagnostics) == 0


def test_image_definition_handles_by_occurrence() -> None:
    text = dxf_text(
        (0, "IMAGEDEF"),
        (5, "40"),
        (102, "{ACAD_REACTORS"),
        (330, "A1"),
        (102, "}"),
        (330, "B2"),
        (330, "C3"),
        (330, "D4"),
        (100, "AcDbRasterImageDef"),
        (1, "site.png"),
        (10, "640.0"),
        (20, "480.0"),
        (0, "EOF"),
    )

    imagedef, diagnostics, _ = _decode_after_sentinel(text, IMAGEDEF)

    assert imagedef.trailer.id_code == 0x40
    assert imagedef.trailer.dictionary_owner_soft == "A1"
    assert imagedef.acad_image_dict_soft == "B2"
    assert imagedef.imagedef_reactors == ["C3", "D4"]
    assert imagedef.file_name == "site.png"
    assert (imagedef.image_size.x, imagedef.image_size.y) == (640.0, 480.0)
    assert len(diagnostics) == 0


def test_leader_vertices_and_count_mismatch() -> None:
    text = dxf_text(
        (0, "LEADER"),
        (100, "AcDbEntity"),
        (100, "AcDbLeader"),
        (76, "3"),
        (10, "1.0"),
        (20, "2.0"),
        (30, "0.0"),
        (10, "3.0"),
        (20, "4.0"),
        (30, "0.0"),
        (0, "EOF"),
    )

    leader, diagnostics, _ = _decode_after_sentinel(text, LEADER)

    assert leader.vertices == [Point(1.0, 2.0, 0.0), Point(3.0, 4.0, 0.0)]
    mismatch = diagnostics.of_kind(DiagnosticKind.COUNT_MISMATCH)
    assert len(mismatch) == 1
    assert "announced 3" in mismatch[0].message


def test_comments_are_reported() -> None:
    text = dxf_text((0, "TEXT"), (999, "generated by hand"), (1, "hello"), (0, "EOF"))

    record, diagnostics, _ = _decode_after_sentinel(text, TEXT)

    assert record.text == "hello"
    comments = diagnostics.of_kind(DiagnosticKind.COMMENT)
    assert [item.message for item in comments] == ["generated by hand"]


def test_thumbnail_without_sentinel() -> None:
    cursor = cursor_over(dxf_text((90, "4"), (310, "DEADBEEF"), (0, "ENDSEC")))

    thumbnail = decode(cursor, THUMBNAILIMAGE)

    assert thumbnail.number_of_bytes == 4
    assert thumbnail.preview_image_data == ["DEADBEEF"]


def test_stream_ending_inside_record_raises() -> None:
    with pytest.raises(EndOfStream):
        _decode_after_sentinel(dxf_text((0, "LINE"), (8, "0")), LINE)
