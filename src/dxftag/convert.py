from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from .document import DxfDocument, read
from .log import get_logger
from .records import COLOR_BYLAYER, DEFAULT_LINETYPE, Point

logger = get_logger(__name__)

_DEFAULT_DIMSTYLE = "Standard"
_THICKNESS_KINDS = {"LINE", "POINT", "CIRCLE", "ARC", "TEXT", "ATTDEF"}


@dataclass(frozen=True)
class ConvertResult:
    source_path: str
    output_path: str | None
    total_entities: int
    written_entities: int
    skipped_entities: int
    skipped_by_type: dict[str, int]
    drawing: Any = field(default=None, repr=False, compare=False)


def to_ezdxf(
    source: str | Path | DxfDocument,
    output_path: str | Path | None = None,
    *,
    kinds: str | Iterable[str] | None = None,
    dxf_version: str = "R2010",
    strict: bool = False,
) -> ConvertResult:
    """Copy the entity records of ``source`` into a new ezdxf drawing.

    The drawing is saved to ``output_path`` when one is given and is always
    returned as ``ConvertResult.drawing``.
    """
    ezdxf = _require_ezdxf()
    source_path, document = _resolve_document(source)

    drawing = ezdxf.new(dxfversion=dxf_version)
    _copy_layers(drawing, document)
    modelspace = drawing.modelspace()

    total = 0
    written = 0
    skipped_by_type: dict[str, int] = {}

    for record in document.query(kinds):
        total += 1
        if _write_record_to_modelspace(drawing, modelspace, record):
            written += 1
            continue
        skipped_by_type[record.KIND] = skipped_by_type.get(record.KIND, 0) + 1

    skipped = total - written
    if strict and skipped > 0:
        summary = ", ".join(f"{kind}:{count}" for kind, count in sorted(skipped_by_type.items()))
        raise ValueError(f"failed to convert {skipped} records ({summary})")

    out_path = None
    if output_path is not None:
        out_path = Path(output_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        drawing.saveas(str(out_path))

    return ConvertResult(
        source_path=source_path,
        output_path=str(out_path) if out_path is not None else None,
        total_entities=total,
        written_entities=written,
        skipped_entities=skipped,
        skipped_by_type=dict(sorted(skipped_by_type.items())),
        drawing=drawing,
    )


def _require_ezdxf():
    try:
        import ezdxf
    except Exception as exc:
        raise ImportError(
            "ezdxf is required for conversion. "
            'Install it with `pip install "dxftag[dxf]"`.'
        ) from exc
    return ezdxf


def _resolve_document(source: str | Path | DxfDocument) -> tuple[str, DxfDocument]:
    if isinstance(source, DxfDocument):
        return source.source or "<memory>", source
    return str(source), read(source)


def _copy_layers(drawing: Any, document: DxfDocument) -> None:
    section = document.tables.get("LAYER")
    if section is None:
        return
    for layer in section.entries:
        if not layer.layer_name or layer.layer_name in drawing.layers:
            continue
        attribs: dict[str, Any] = {"color": abs(layer.color) or 7}
        if layer.linetype in drawing.linetypes:
            attribs["linetype"] = layer.linetype
        drawing.layers.add(layer.layer_name, **attribs)


def _write_record_to_modelspace(drawing: Any, modelspace: Any, record: Any) -> bool:
    try:
        return _write_record_to_modelspace_unsafe(drawing, modelspace, record)
    except Exception as exc:
        logger.debug("%s record not converted: %s", record.KIND, exc)
        return False


def _write_record_to_modelspace_unsafe(drawing: Any, modelspace: Any, record: Any) -> bool:
    kind = record.KIND
    dxfattribs = _entity_dxfattribs(drawing, record)

    if kind == "LINE":
        modelspace.add_line(_point3(record.start), _point3(record.end), dxfattribs=dxfattribs)
        return True

    if kind == "POINT":
        modelspace.add_point(_point3(record.location), dxfattribs=dxfattribs)
        return True

    if kind == "CIRCLE":
        modelspace.add_circle(_point3(record.center), float(record.radius), dxfattribs=dxfattribs)
        return True

    if kind == "ARC":
        modelspace.add_arc(
            _point3(record.center),
            float(record.radius),
            float(record.start_angle),
            float(record.end_angle),
            dxfattribs=dxfattribs,
        )
        return True

    if kind == "XLINE":
        modelspace.add_xline(_point3(record.start), _point3(record.direction), dxfattribs=dxfattribs)
        return True

    if kind == "RAY":
        modelspace.add_ray(_point3(record.start), _point3(record.direction), dxfattribs=dxfattribs)
        return True

    if kind == "TEXT":
        return _write_text(modelspace, record, dxfattribs)

    if kind == "ATTDEF":
        if not record.tag_value:
            return False
        attdef = modelspace.add_attdef(
            record.tag_value,
            _point3(record.start),
            record.default_value,
            height=float(record.height),
            rotation=float(record.rot_angle),
            dxfattribs=dxfattribs,
        )
        if record.prompt_value:
            attdef.dxf.prompt = record.prompt_value
        return True

    if kind == "LEADER":
        vertices = [_point3(vertex) for vertex in record.vertices]
        if len(vertices) < 2:
            return False
        dimstyle = record.dimension_style_name or _DEFAULT_DIMSTYLE
        if dimstyle not in drawing.dimstyles:
            dimstyle = _DEFAULT_DIMSTYLE
        modelspace.add_leader(vertices, dimstyle=dimstyle, dxfattribs=dxfattribs)
        return True

    return False


def _write_text(modelspace: Any, record: Any, dxfattribs: dict[str, Any]) -> bool:
    text = str(record.text or "")
    if text == "":
        return False
    text_entity = modelspace.add_text(
        text,
        height=float(record.height),
        rotation=float(record.rot_angle),
        dxfattribs=dxfattribs,
    )
    text_entity.dxf.insert = _point3(record.start)
    if record.hor_align or record.vert_align:
        text_entity.dxf.halign = record.hor_align
        text_entity.dxf.valign = record.vert_align
        text_entity.dxf.align_point = _point3(record.alignment_point)
    return True


def _entity_dxfattribs(drawing: Any, record: Any) -> dict[str, Any]:
    trailer = record.trailer
    attribs: dict[str, Any] = {"layer": trailer.layer or "0"}
    if trailer.linetype and trailer.linetype != DEFAULT_LINETYPE and trailer.linetype in drawing.linetypes:
        attribs["linetype"] = trailer.linetype
    color = _to_valid_aci(trailer.color)
    if color is not None:
        attribs["color"] = color
    if trailer.color_value:
        attribs["true_color"] = trailer.color_value & 0xFFFFFF
    if trailer.thickness and record.KIND in _THICKNESS_KINDS:
        attribs["thickness"] = float(trailer.thickness)
    return attribs


def _to_valid_aci(value: Any) -> int | None:
    try:
        aci = int(value)
    except (TypeError, ValueError):
        return None
    if aci in (0, COLOR_BYLAYER, 257):
        return None
    if 1 <= aci <= 255:
        return aci
    return None


def _point3(value: Point) -> tuple[float, float, float]:
    return (float(value.x), float(value.y), float(value.z))
