from __future__ import annotations

import pytest

from dxftag.versions import DEFAULT_VERSION, SUPPORTED_VERSIONS, DxfVersion


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("AC1015", DxfVersion.AC1015),
        ("ac1032", DxfVersion.AC1032),
        (" AC1009 ", DxfVersion.AC1009),
        ("R2000", DxfVersion.AC1015),
        ("r2018", DxfVersion.AC1032),
        ("2004", DxfVersion.AC1018),
        ("R12", DxfVersion.AC1009),
        ("R11", DxfVersion.AC1009),
        ("R14", DxfVersion.AC1014),
        (1021, DxfVersion.AC1021),
        (DxfVersion.AC1024, DxfVersion.AC1024),
    ],
)
def test_parse_accepts_tags_and_release_aliases(text, expected) -> None:
    assert DxfVersion.parse(text) is expected


@pytest.mark.parametrize("text", ["AC9999", "R99", "", "latest", 1013])
def test_parse_rejects_unknown_versions(text) -> None:
    with pytest.raises(ValueError):
        DxfVersion.parse(text)


def test_versions_are_ordered_oldest_to_newest() -> None:
    ordered = sorted(DxfVersion)
    assert ordered[0] is DxfVersion.AC1006
    assert ordered[-1] is DxfVersion.AC1032
    assert DxfVersion.AC1009 < DxfVersion.AC1012 < DxfVersion.AC1015


def test_tag_and_release_names() -> None:
    assert DxfVersion.AC1015.tag == "AC1015"
    assert DxfVersion.AC1015.release == "R2000"
    assert DxfVersion.AC1009.release == "R12"
    assert DEFAULT_VERSION is DxfVersion.AC1015
    assert "AC1032" in SUPPORTED_VERSIONS
