from __future__ import annotations

import io

import pytest

from dxftag.cursor import StreamCursor
from dxftag.diagnostics import DiagnosticKind, DiagnosticLog
from dxftag.encoder import encode, encode_pairs
from dxftag.errors import InvariantViolation
from dxftag.kinds import LINE
from dxftag.records import Attdef, EntityTrailer, ImageDef, Leader, Line, Point, Text, Thumbnail
from dxftag.versions import DxfVersion
from tests._dxf_helpers import encode_text, iter_pairs, pair_codes


def test_default_line_is_sparse() -> None:
    text = encode_text(Line(), DxfVersion.AC1015)

    assert pair_codes(text) == ["0", "100", "8", "100", "10", "20", "30", "11", "21", "31"]
    assert text.startswith("  0\nLINE\n100\nAcDbEntity\n  8\n0\n100\nAcDbLine\n")


def test_subclass_markers_are_gated() -> None:
    text = encode_text(Line(), DxfVersion.AC1009)

    assert pair_codes(text) == ["0", "8", "10", "20", "30", "11", "21", "31"]


def test_default_linetype_is_never_written() -> None:
    assert "6" not in pair_codes(encode_text(Line(), DxfVersion.AC1032))

    dashed = Line(trailer=EntityTrailer(linetype="DASHED"))
    assert ("6", "DASHED") in list(iter_pairs(encode_text(dashed)))


@pytest.mark.parametrize(
    ("version", "written"),
    [
        (DxfVersion.AC1009, False),
        (DxfVersion.AC1014, False),
        (DxfVersion.AC1015, True),
        (DxfVersion.AC1032, True),
    ],
)
def test_graphics_data_size_is_gated_on_write(version: DxfVersion, written: bool) -> None:
    line = Line(trailer=EntityTrailer(graphics_data_size=12, binary_graphics_data=["0A0B"]))

    codes = pair_codes(encode_text(line, version))

    assert ("92" in codes) is written
    assert ("310" in codes) is written


def test_elevation_is_only_written_for_old_targets() -> None:
    line = Line(trailer=EntityTrailer(elevation=2.5))

    assert ("38", "2.500000") in list(iter_pairs(encode_text(line, DxfVersion.AC1009)))
    assert "38" not in pair_codes(encode_text(line, DxfVersion.AC1012))


def test_encoding_is_idempotent() -> None:
    text = Text(text="Label", start=Point(1.0, 2.0, 0.0), hor_align=1, alignment_point=Point(5.0, 2.0, 0.0))

    assert encode_text(text) == encode_text(text)


def test_degenerate_alignment_is_corrected() -> None:
    text = Text(
        text="Label",
        start=Point(1.0, 2.0, 0.0),
        alignment_point=Point(1.0, 2.0, 0.0),
        hor_align=1,
        vert_align=2,
    )
    diagnostics = DiagnosticLog()

    codes = pair_codes(encode_text(text, diagnostics=diagnostics))

    assert text.hor_align == 0
    assert text.vert_align == 0
    assert not {"11", "21", "31", "72", "73"} & set(codes)
    assert len(diagnostics.of_kind(DiagnosticKind.DEGENERATE_VALUE)) == 1


def test_alignment_point_written_when_aligned() -> None:
    text = Text(
        text="Label",
        start=Point(1.0, 2.0, 0.0),
        alignment_point=Point(4.0, 2.0, 0.0),
        hor_align=1,
        vert_align=2,
    )

    pairs = list(iter_pairs(encode_text(text)))

    assert ("72", "1") in pairs
    assert ("73", "2") in pairs
    assert ("11", "4.000000") in pairs
    assert [code for code, _ in pairs].index("73") > [code for code, _ in pairs].index("11")


def test_owner_handles_use_control_braces_when_supported() -> None:
    line = Line(trailer=EntityTrailer(dictionary_owner_soft="1A", dictionary_owner_hard="1B"))

    modern = list(iter_pairs(encode_text(line, DxfVersion.AC1015)))
    r13 = list(iter_pairs(encode_text(line, DxfVersion.AC1012)))
    r12 = pair_codes(encode_text(line, DxfVersion.AC1009))

    assert modern[1:7] == [
        ("102", "{ACAD_REACTORS"),
        ("330", "1A"),
        ("102", "}"),
        ("102", "{ACAD_XDICTIONARY"),
        ("360", "1B"),
        ("102", "}"),
    ]
    assert r13[1:3] == [("330", "1A"), ("360", "1B")]
    assert "102" not in [code for code, _ in r13]
    assert "330" not in r12
    assert "360" not in r12


def test_id_code_is_written_in_hex() -> None:
    line = Line(trailer=EntityTrailer(id_code=0x1F))

    assert list(iter_pairs(encode_text(line)))[1] == ("5", "1f")


def test_overlong_chunk_is_split() -> None:
    line = Line(trailer=EntityTrailer(graphics_data_size=200, binary_graphics_data=["AB" * 200]))
    diagnostics = DiagnosticLog()

    chunks = [value for code, value in iter_pairs(encode_text(line, diagnostics=diagnostics)) if code == "310"]

    assert [len(chunk) for chunk in chunks] == [256, 144]
    assert len(diagnostics.of_kind(DiagnosticKind.DEGENERATE_VALUE)) == 1


def test_zero_height_is_backfilled_on_write() -> None:
    attdef = Attdef(tag_value="TAG1", height=0.0)
    diagnostics = DiagnosticLog()

    pairs = list(iter_pairs(encode_text(attdef, diagnostics=diagnostics)))

    assert ("40", "1.000000") in pairs
    assert attdef.height == 1.0
    assert len(diagnostics.of_kind(DiagnosticKind.DEFAULTED)) == 1


def test_record_with_empty_required_field_is_not_written() -> None:
    diagnostics = DiagnosticLog()

    text = encode_text(Attdef(default_value="X", prompt_value="Name?"), diagnostics=diagnostics)

    assert text == ""
    messages = [item.message for item in diagnostics.of_kind(DiagnosticKind.DEGENERATE_VALUE)]
    assert messages == ["ATTDEF: required field tag_value is empty, record not written"]


def test_empty_required_field_skips_only_that_record() -> None:
    buffer = io.StringIO()
    cursor = StreamCursor(buffer, version=DxfVersion.AC1015)
    diagnostics = DiagnosticLog()

    encode(Attdef(), cursor, diagnostics=diagnostics)
    encode(Attdef(tag_value="TAG1"), cursor, diagnostics=diagnostics)

    pairs = list(iter_pairs(buffer.getvalue()))
    assert pairs.count(("0", "ATTDEF")) == 1
    assert ("2", "TAG1") in pairs
    assert ("2", "") not in pairs


def test_missing_earlier_handle_occurrence_warns() -> None:
    imagedef = ImageDef(file_name="site.png", acad_image_dict_soft="B2")
    diagnostics = DiagnosticLog()

    encode_text(imagedef, diagnostics=diagnostics)

    messages = [item.message for item in diagnostics.of_kind(DiagnosticKind.DEGENERATE_VALUE)]
    assert any("acad_image_dict_soft" in message for message in messages)


def test_leader_vertex_count_is_computed() -> None:
    leader = Leader(vertices=[Point(0.0, 0.0, 0.0), Point(1.0, 1.0, 0.0), Point(2.0, 1.0, 0.0)])

    pairs = list(iter_pairs(encode_text(leader)))

    assert ("76", "3") in pairs
    assert [code for code, _ in pairs].count("10") == 3


def test_thumbnail_has_no_sentinel() -> None:
    text = encode_text(Thumbnail(number_of_bytes=4, preview_image_data=["DEADBEEF"]))

    assert list(iter_pairs(text)) == [("90", "4"), ("310", "DEADBEEF")]


def test_target_version_overrides_cursor_version() -> None:
    buffer = io.StringIO()
    cursor = StreamCursor(buffer, version=DxfVersion.AC1015)

    encode(Line(), cursor, "R12")

    assert "AcDbLine" not in buffer.getvalue()


def test_encode_pairs_returns_tuples() -> None:
    pairs = encode_pairs(Line(), LINE, DxfVersion.AC1009, DiagnosticLog())

    assert pairs[0] == (0, "LINE")
    assert pairs[1] == (8, "0")


def test_missing_record_is_an_invariant_violation() -> None:
    cursor = StreamCursor(io.StringIO())

    with pytest.raises(InvariantViolation):
        encode(None, cursor)
    with pytest.raises(InvariantViolation):
        encode(object(), cursor)
