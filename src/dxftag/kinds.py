"""Record schemas for the record kinds dxftag reads and writes.

Each schema lists its group codes in the order the format documents them.
Entity kinds share the common trailer layout from :func:`entity_head`; table
records and objects share :func:`object_head`.
"""

from __future__ import annotations

from typing import Any

from .codes import ValueType
from .records import (
    COLOR_BYLAYER,
    DEFAULT_LAYER,
    DEFAULT_LINETYPE,
    DEFAULT_LINETYPE_SCALE,
    DEFAULT_TEXTSTYLE,
    MODELSPACE,
    NO_ID,
    AppId,
    Arc,
    Attdef,
    Block,
    Circle,
    Class,
    EndBlk,
    ImageDef,
    ImageDefReactor,
    Layer,
    Leader,
    Line,
    PointEntity,
    Ray,
    Table,
    Text,
    Thumbnail,
    XLine,
)
from .schema import (
    Alignment,
    Count,
    Field,
    Group,
    LayoutItem,
    PointField,
    PointList,
    RecordSchema,
    Subclass,
    if_empty,
    if_equal,
    if_point_equal,
    unless_aligned,
)
from .versions import DxfVersion

R12 = DxfVersion.AC1009
R13 = DxfVersion.AC1012
R2000 = DxfVersion.AC1015
R2004 = DxfVersion.AC1018
R2007 = DxfVersion.AC1021
R2010 = DxfVersion.AC1024

_omit_zero = if_equal(0)
_omit_zero_float = if_equal(0.0)


def _id_field() -> Field:
    return Field(5, "trailer.id_code", NO_ID, type=ValueType.HEX, omit=if_equal(NO_ID))


def _owner_groups(soft_occurrence: int | None = None) -> tuple[LayoutItem, ...]:
    return (
        Group(
            "ACAD_REACTORS",
            (
                Field(
                    330,
                    "trailer.dictionary_owner_soft",
                    "",
                    write_min=R13,
                    omit=if_empty,
                    occurrence=soft_occurrence,
                ),
            ),
        ),
        Group(
            "ACAD_XDICTIONARY",
            (Field(360, "trailer.dictionary_owner_hard", "", write_min=R13, omit=if_empty),),
        ),
    )


def entity_head() -> tuple[LayoutItem, ...]:
    """Common trailer of drawable records, up to the first kind-specific subclass."""
    return (
        _id_field(),
        *_owner_groups(),
        Subclass("AcDbEntity"),
        Field(67, "trailer.paperspace", MODELSPACE, omit=if_equal(MODELSPACE)),
        Field(8, "trailer.layer", DEFAULT_LAYER, backfill=True),
        Field(6, "trailer.linetype", DEFAULT_LINETYPE, omit=if_equal(DEFAULT_LINETYPE), backfill=True),
        Field(347, "trailer.material", "", read_min=R2007, write_min=R2007, omit=if_empty),
        Field(62, "trailer.color", COLOR_BYLAYER, omit=if_equal(COLOR_BYLAYER)),
        Field(370, "trailer.lineweight", 0, read_min=R2000, write_min=R2000, omit=_omit_zero),
        Field(38, "trailer.elevation", 0.0, read_max=R12, write_max=R12, omit=_omit_zero_float),
        Field(
            48,
            "trailer.linetype_scale",
            DEFAULT_LINETYPE_SCALE,
            omit=if_equal(DEFAULT_LINETYPE_SCALE),
            backfill=True,
        ),
        Field(60, "trailer.visibility", 0, omit=_omit_zero),
        Field(
            92,
            "trailer.graphics_data_size",
            0,
            read_min=R2000,
            write_min=R2000,
            omit=_omit_zero,
            aliases=(160,),
            alias_read_min=R2010,
        ),
        Field(
            310,
            "trailer.binary_graphics_data",
            read_min=R2000,
            write_min=R2000,
            occurrence=0,
            repeat=True,
        ),
        Field(420, "trailer.color_value", 0, read_min=R2004, write_min=R2004, omit=_omit_zero),
        Field(430, "trailer.color_name", "", read_min=R2004, write_min=R2004, omit=if_empty),
        Field(440, "trailer.transparency", 0, read_min=R2004, write_min=R2004, omit=_omit_zero),
        Field(390, "trailer.plot_style", "", read_min=R2000, write_min=R2000, omit=if_empty),
        Field(284, "trailer.shadow_mode", 0, read_min=R2007, write_min=R2007, omit=_omit_zero),
    )


def object_head(soft_occurrence: int | None = None) -> tuple[LayoutItem, ...]:
    return (_id_field(), *_owner_groups(soft_occurrence))


def _thickness() -> Field:
    return Field(39, "trailer.thickness", 0.0, omit=_omit_zero_float)


def _extrusion(attr: str = "extrusion") -> PointField:
    return PointField(attr, 210, write_min=R12, omit=if_point_equal(0.0, 0.0, 1.0))


LINE = RecordSchema(
    "LINE",
    Line,
    (
        *entity_head(),
        Subclass("AcDbLine"),
        _thickness(),
        PointField("start", 10),
        PointField("end", 11),
        _extrusion(),
    ),
)

POINT = RecordSchema(
    "POINT",
    PointEntity,
    (
        *entity_head(),
        Subclass("AcDbPoint"),
        PointField("location", 10),
        _thickness(),
        _extrusion(),
        Field(50, "x_axis_angle", 0.0, omit=_omit_zero_float),
    ),
)

CIRCLE = RecordSchema(
    "CIRCLE",
    Circle,
    (
        *entity_head(),
        Subclass("AcDbCircle"),
        _thickness(),
        PointField("center", 10),
        Field(40, "radius", 0.0),
        _extrusion(),
    ),
)

ARC = RecordSchema(
    "ARC",
    Arc,
    (
        *entity_head(),
        Subclass("AcDbCircle"),
        _thickness(),
        PointField("center", 10),
        Field(40, "radius", 0.0),
        _extrusion(),
        Subclass("AcDbArc"),
        Field(50, "start_angle", 0.0),
        Field(51, "end_angle", 0.0),
    ),
)

XLINE = RecordSchema(
    "XLINE",
    XLine,
    (
        *entity_head(),
        Subclass("AcDbXline"),
        PointField("start", 10),
        PointField("direction", 11),
    ),
)

RAY = RecordSchema(
    "RAY",
    Ray,
    (
        *entity_head(),
        Subclass("AcDbRay"),
        PointField("start", 10),
        PointField("direction", 11),
    ),
)

TEXT = RecordSchema(
    "TEXT",
    Text,
    (
        *entity_head(),
        Subclass("AcDbText"),
        _thickness(),
        PointField("start", 10),
        Field(40, "height", 1.0, backfill=True),
        Field(1, "text", ""),
        Field(50, "rot_angle", 0.0, omit=_omit_zero_float),
        Field(41, "rel_x_scale", 1.0, omit=if_equal(1.0), backfill=True),
        Field(51, "obl_angle", 0.0, omit=_omit_zero_float),
        Field(7, "text_style", DEFAULT_TEXTSTYLE, omit=if_equal(DEFAULT_TEXTSTYLE), backfill=True),
        Field(71, "text_flags", 0, omit=_omit_zero),
        Field(72, "hor_align", 0, omit=_omit_zero),
        PointField("alignment_point", 11, omit=unless_aligned("hor_align", "vert_align")),
        _extrusion(),
        Subclass("AcDbText"),
        Field(73, "vert_align", 0, omit=_omit_zero),
    ),
    alignment=Alignment("hor_align", "vert_align", "start", "alignment_point"),
)

ATTDEF = RecordSchema(
    "ATTDEF",
    Attdef,
    (
        *entity_head(),
        Subclass("AcDbText"),
        _thickness(),
        PointField("start", 10),
        Field(40, "height", 1.0, backfill=True),
        Field(1, "default_value", ""),
        Field(50, "rot_angle", 0.0, omit=_omit_zero_float),
        Field(41, "rel_x_scale", 1.0, omit=if_equal(1.0), backfill=True),
        Field(51, "obl_angle", 0.0, omit=_omit_zero_float),
        Field(7, "text_style", DEFAULT_TEXTSTYLE, omit=if_equal(DEFAULT_TEXTSTYLE), backfill=True),
        Field(71, "text_flags", 0, omit=_omit_zero),
        Field(72, "hor_align", 0, omit=_omit_zero),
        PointField("alignment_point", 11, omit=unless_aligned("hor_align", "vert_align")),
        _extrusion(),
        Subclass("AcDbAttributeDefinition"),
        Field(3, "prompt_value", ""),
        Field(2, "tag_value", "", required=True),
        Field(70, "attr_flags", 0),
        Field(73, "field_length", 0, omit=_omit_zero),
        Field(74, "vert_align", 0, omit=_omit_zero),
    ),
    alignment=Alignment("hor_align", "vert_align", "start", "alignment_point"),
)

LEADER = RecordSchema(
    "LEADER",
    Leader,
    (
        *entity_head(),
        Subclass("AcDbLeader"),
        Field(3, "dimension_style_name", "", omit=if_empty),
        Field(71, "arrow_head_flag", 0),
        Field(72, "path_type", 0),
        Field(73, "creation_flag", 3),
        Field(74, "hookline_direction_flag", 0),
        Field(75, "hookline_flag", 0),
        Field(40, "text_annotation_height", 0.0, omit=_omit_zero_float),
        Field(41, "text_annotation_width", 0.0, omit=_omit_zero_float),
        Count(76, "vertices"),
        PointList("vertices", 10),
        Field(77, "leader_color", 0, omit=_omit_zero),
        Field(340, "annotation_reference_hard", "", omit=if_empty),
        _extrusion(),
        PointField("horizontal_direction", 211, omit=if_point_equal(1.0, 0.0, 0.0)),
        PointField("block_offset", 212, omit=if_point_equal(0.0, 0.0, 0.0)),
        PointField("annotation_offset", 213, omit=if_point_equal(0.0, 0.0, 0.0)),
    ),
)

BLOCK = RecordSchema(
    "BLOCK",
    Block,
    (
        *entity_head(),
        Subclass("AcDbBlockBegin"),
        Field(2, "block_name", "", required=True),
        Field(70, "block_type", 0),
        PointField("base_point", 10),
        Field(3, "block_name_additional", "", omit=if_empty),
        Field(1, "xref_name", "", omit=if_empty),
        Field(4, "description", "", read_min=R2000, write_min=R2000, omit=if_empty),
    ),
)

ENDBLK = RecordSchema(
    "ENDBLK",
    EndBlk,
    (
        *entity_head(),
        Subclass("AcDbBlockEnd"),
    ),
)

TABLE = RecordSchema(
    "TABLE",
    Table,
    (
        Field(2, "table_name", "", required=True),
        _id_field(),
        _owner_groups()[1],
        Field(330, "trailer.dictionary_owner_soft", "", write_min=R13, omit=if_empty),
        Subclass("AcDbSymbolTable"),
        Field(70, "max_entries", 0),
    ),
    extra_subclasses=(),
)

APPID = RecordSchema(
    "APPID",
    AppId,
    (
        *object_head(),
        Subclass("AcDbSymbolTableRecord"),
        Subclass("AcDbRegAppTableRecord"),
        Field(2, "application_name", "", required=True),
        Field(70, "standard_flag", 0),
    ),
    extra_subclasses=(),
)

LAYER = RecordSchema(
    "LAYER",
    Layer,
    (
        *object_head(),
        Subclass("AcDbSymbolTableRecord"),
        Subclass("AcDbLayerTableRecord"),
        Field(2, "layer_name", "", required=True),
        Field(70, "flag", 0),
        Field(62, "color", 7),
        Field(6, "linetype", "CONTINUOUS", backfill=True),
        Field(290, "plotting_flag", True, read_min=R2000, write_min=R2000, omit=if_equal(True)),
        Field(370, "lineweight", -3, read_min=R2000, write_min=R2000),
        Field(390, "plot_style", "", read_min=R2000, write_min=R2000, omit=if_empty),
        Field(347, "material", "", read_min=R2007, write_min=R2007, omit=if_empty),
    ),
    extra_subclasses=(),
)

CLASS = RecordSchema(
    "CLASS",
    Class,
    (
        Field(1, "record_name", ""),
        Field(2, "class_name", "", required=True),
        Field(3, "app_name", ""),
        Field(90, "proxy_cap_flag", 0),
        Field(91, "instance_count", 0, read_min=R2004, write_min=R2004),
        Field(280, "was_a_proxy_flag", 0),
        Field(281, "is_an_entity_flag", 0),
    ),
    extra_subclasses=(),
)

IMAGEDEF = RecordSchema(
    "IMAGEDEF",
    ImageDef,
    (
        *object_head(soft_occurrence=0),
        Field(330, "acad_image_dict_soft", "", write_min=R13, omit=if_empty, occurrence=1),
        Field(330, "imagedef_reactors", write_min=R13, occurrence=2, repeat=True),
        Subclass("AcDbRasterImageDef"),
        Field(90, "class_version", 0),
        Field(1, "file_name", "", required=True),
        PointField("image_size", 10, dims=2),
        PointField("pixel_size", 11, dims=2),
        Field(280, "image_is_loaded_flag", 0),
        Field(281, "resolution_units", 0),
    ),
    extra_subclasses=(),
)

IMAGEDEF_REACTOR = RecordSchema(
    "IMAGEDEF_REACTOR",
    ImageDefReactor,
    (
        *object_head(soft_occurrence=0),
        Subclass("AcDbRasterImageDefReactor"),
        Field(90, "class_version", 2),
        Field(330, "associated_image", "", write_min=R13, omit=if_empty, occurrence=1),
    ),
    extra_subclasses=(),
)

THUMBNAILIMAGE = RecordSchema(
    "THUMBNAILIMAGE",
    Thumbnail,
    (
        Field(90, "number_of_bytes", 0),
        Field(310, "preview_image_data", occurrence=0, repeat=True),
    ),
    sentinel=False,
    extra_subclasses=(),
)

ENTITY_KINDS = ("LINE", "POINT", "CIRCLE", "ARC", "XLINE", "RAY", "TEXT", "ATTDEF", "LEADER")
TABLE_ENTRY_KINDS = ("APPID", "LAYER")
OBJECT_KINDS = ("IMAGEDEF", "IMAGEDEF_REACTOR")

SCHEMAS: dict[str, RecordSchema] = {
    schema.kind: schema
    for schema in (
        LINE,
        POINT,
        CIRCLE,
        ARC,
        XLINE,
        RAY,
        TEXT,
        ATTDEF,
        LEADER,
        BLOCK,
        ENDBLK,
        TABLE,
        APPID,
        LAYER,
        CLASS,
        IMAGEDEF,
        IMAGEDEF_REACTOR,
        THUMBNAILIMAGE,
    )
}

_SCHEMAS_BY_TYPE: dict[type, RecordSchema] = {schema.factory: schema for schema in SCHEMAS.values()}


def get_schema(kind: str) -> RecordSchema:
    return SCHEMAS[kind.strip().upper()]


def schema_for(record: Any) -> RecordSchema:
    return _SCHEMAS_BY_TYPE[type(record)]
