from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

DEFAULT_LAYER = "0"
DEFAULT_LINETYPE = "BYLAYER"
DEFAULT_LINETYPE_SCALE = 1.0
DEFAULT_TEXTSTYLE = "STANDARD"
COLOR_BYBLOCK = 0
COLOR_BYLAYER = 256
MODELSPACE = 0
PAPERSPACE = 1
NO_ID = -1


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


def _extrusion() -> Point:
    return Point(0.0, 0.0, 1.0)


@dataclass
class EntityTrailer:
    """Attributes shared by every drawable record kind."""

    id_code: int = NO_ID
    linetype: str = DEFAULT_LINETYPE
    layer: str = DEFAULT_LAYER
    elevation: float = 0.0
    thickness: float = 0.0
    linetype_scale: float = DEFAULT_LINETYPE_SCALE
    visibility: int = 0
    color: int = COLOR_BYLAYER
    paperspace: int = MODELSPACE
    graphics_data_size: int = 0
    shadow_mode: int = 0
    binary_graphics_data: list[str] = field(default_factory=list)
    dictionary_owner_soft: str = ""
    dictionary_owner_hard: str = ""
    material: str = ""
    lineweight: int = 0
    plot_style: str = ""
    color_value: int = 0
    color_name: str = ""
    transparency: int = 0


@dataclass
class ObjectTrailer:
    """Identification and owner handles of non-drawable records."""

    id_code: int = NO_ID
    dictionary_owner_soft: str = ""
    dictionary_owner_hard: str = ""


@dataclass
class Line:
    KIND: ClassVar[str] = "LINE"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    start: Point = field(default_factory=Point)
    end: Point = field(default_factory=Point)
    extrusion: Point = field(default_factory=_extrusion)


@dataclass
class PointEntity:
    KIND: ClassVar[str] = "POINT"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    location: Point = field(default_factory=Point)
    extrusion: Point = field(default_factory=_extrusion)
    x_axis_angle: float = 0.0


@dataclass
class Circle:
    KIND: ClassVar[str] = "CIRCLE"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    center: Point = field(default_factory=Point)
    radius: float = 0.0
    extrusion: Point = field(default_factory=_extrusion)


@dataclass
class Arc:
    KIND: ClassVar[str] = "ARC"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    center: Point = field(default_factory=Point)
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 0.0
    extrusion: Point = field(default_factory=_extrusion)


@dataclass
class XLine:
    KIND: ClassVar[str] = "XLINE"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    start: Point = field(default_factory=Point)
    direction: Point = field(default_factory=lambda: Point(1.0, 0.0, 0.0))


@dataclass
class Ray:
    KIND: ClassVar[str] = "RAY"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    start: Point = field(default_factory=Point)
    direction: Point = field(default_factory=lambda: Point(1.0, 0.0, 0.0))


@dataclass
class Text:
    KIND: ClassVar[str] = "TEXT"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    text: str = ""
    text_style: str = DEFAULT_TEXTSTYLE
    start: Point = field(default_factory=Point)
    alignment_point: Point = field(default_factory=Point)
    height: float = 1.0
    rel_x_scale: float = 1.0
    rot_angle: float = 0.0
    obl_angle: float = 0.0
    text_flags: int = 0
    hor_align: int = 0
    vert_align: int = 0
    extrusion: Point = field(default_factory=_extrusion)


@dataclass
class Attdef:
    KIND: ClassVar[str] = "ATTDEF"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    default_value: str = ""
    tag_value: str = ""
    prompt_value: str = ""
    text_style: str = DEFAULT_TEXTSTYLE
    start: Point = field(default_factory=Point)
    alignment_point: Point = field(default_factory=Point)
    height: float = 1.0
    rel_x_scale: float = 1.0
    rot_angle: float = 0.0
    obl_angle: float = 0.0
    attr_flags: int = 0
    text_flags: int = 0
    hor_align: int = 0
    field_length: int = 0
    vert_align: int = 0
    extrusion: Point = field(default_factory=_extrusion)


@dataclass
class Leader:
    KIND: ClassVar[str] = "LEADER"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    dimension_style_name: str = ""
    arrow_head_flag: int = 0
    path_type: int = 0
    creation_flag: int = 3
    hookline_direction_flag: int = 0
    hookline_flag: int = 0
    text_annotation_height: float = 0.0
    text_annotation_width: float = 0.0
    vertices: list[Point] = field(default_factory=list)
    leader_color: int = 0
    annotation_reference_hard: str = ""
    extrusion: Point = field(default_factory=_extrusion)
    horizontal_direction: Point = field(default_factory=lambda: Point(1.0, 0.0, 0.0))
    block_offset: Point = field(default_factory=Point)
    annotation_offset: Point = field(default_factory=Point)


@dataclass
class Block:
    KIND: ClassVar[str] = "BLOCK"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)
    block_name: str = ""
    block_name_additional: str = ""
    block_type: int = 0
    base_point: Point = field(default_factory=Point)
    xref_name: str = ""
    description: str = ""


@dataclass
class EndBlk:
    KIND: ClassVar[str] = "ENDBLK"

    trailer: EntityTrailer = field(default_factory=EntityTrailer)


@dataclass
class Table:
    KIND: ClassVar[str] = "TABLE"

    trailer: ObjectTrailer = field(default_factory=ObjectTrailer)
    table_name: str = ""
    max_entries: int = 0


@dataclass
class AppId:
    KIND: ClassVar[str] = "APPID"

    trailer: ObjectTrailer = field(default_factory=ObjectTrailer)
    application_name: str = ""
    standard_flag: int = 0


@dataclass
class Layer:
    KIND: ClassVar[str] = "LAYER"

    trailer: ObjectTrailer = field(default_factory=ObjectTrailer)
    layer_name: str = ""
    flag: int = 0
    color: int = 7
    linetype: str = "CONTINUOUS"
    plotting_flag: bool = True
    lineweight: int = -3
    plot_style: str = ""
    material: str = ""


@dataclass
class Class:
    KIND: ClassVar[str] = "CLASS"

    record_name: str = ""
    class_name: str = ""
    app_name: str = ""
    proxy_cap_flag: int = 0
    instance_count: int = 0
    was_a_proxy_flag: int = 0
    is_an_entity_flag: int = 0


@dataclass
class ImageDef:
    KIND: ClassVar[str] = "IMAGEDEF"

    trailer: ObjectTrailer = field(default_factory=ObjectTrailer)
    acad_image_dict_soft: str = ""
    imagedef_reactors: list[str] = field(default_factory=list)
    class_version: int = 0
    file_name: str = ""
    image_size: Point = field(default_factory=Point)
    pixel_size: Point = field(default_factory=Point)
    image_is_loaded_flag: int = 0
    resolution_units: int = 0


@dataclass
class ImageDefReactor:
    KIND: ClassVar[str] = "IMAGEDEF_REACTOR"

    trailer: ObjectTrailer = field(default_factory=ObjectTrailer)
    class_version: int = 2
    associated_image: str = ""


@dataclass
class Thumbnail:
    KIND: ClassVar[str] = "THUMBNAILIMAGE"

    number_of_bytes: int = 0
    preview_image_data: list[str] = field(default_factory=list)
