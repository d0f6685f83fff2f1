from __future__ import annotations

from enum import IntEnum


class DxfVersion(IntEnum):
    AC1006 = 1006
    AC1009 = 1009
    AC1012 = 1012
    AC1014 = 1014
    AC1015 = 1015
    AC1018 = 1018
    AC1021 = 1021
    AC1024 = 1024
    AC1027 = 1027
    AC1032 = 1032

    @property
    def tag(self) -> str:
        return self.name

    @property
    def release(self) -> str:
        return _RELEASE_NAMES[self]

    @classmethod
    def parse(cls, text: str | int | "DxfVersion") -> "DxfVersion":
        if isinstance(text, DxfVersion):
            return text
        if isinstance(text, int):
            return cls(text)
        name = str(text).strip().upper()
        if name in cls.__members__:
            return cls[name]
        alias = name[1:] if name.startswith("R") else name
        if alias in _RELEASE_ALIASES:
            return _RELEASE_ALIASES[alias]
        raise ValueError(f"unsupported DXF version: {text}")


_RELEASE_NAMES = {
    DxfVersion.AC1006: "R10",
    DxfVersion.AC1009: "R12",
    DxfVersion.AC1012: "R13",
    DxfVersion.AC1014: "R14",
    DxfVersion.AC1015: "R2000",
    DxfVersion.AC1018: "R2004",
    DxfVersion.AC1021: "R2007",
    DxfVersion.AC1024: "R2010",
    DxfVersion.AC1027: "R2013",
    DxfVersion.AC1032: "R2018",
}

_RELEASE_ALIASES = {
    "10": DxfVersion.AC1006,
    "11": DxfVersion.AC1009,
    "12": DxfVersion.AC1009,
    "13": DxfVersion.AC1012,
    "14": DxfVersion.AC1014,
    "2000": DxfVersion.AC1015,
    "2004": DxfVersion.AC1018,
    "2007": DxfVersion.AC1021,
    "2010": DxfVersion.AC1024,
    "2013": DxfVersion.AC1027,
    "2018": DxfVersion.AC1032,
}

OLDEST = DxfVersion.AC1006
NEWEST = DxfVersion.AC1032
DEFAULT_VERSION = DxfVersion.AC1015
SUPPORTED_VERSIONS = tuple(version.tag for version in DxfVersion)
