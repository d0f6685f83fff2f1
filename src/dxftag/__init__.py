from typing import Sequence

from .chain import ChainNode, RecordChain, free_chain, free_node
from .codes import ValueType, coerce, format_value, value_type
from .convert import ConvertResult, to_ezdxf
from .cursor import StreamCursor
from .decoder import decode
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog
from .document import BlockDefinition, DxfDocument, TableSection, read, read_stream
from .encoder import encode
from .errors import DxfError, EndOfStream, InvariantViolation, IoFailure, MalformedValue
from .kinds import get_schema, schema_for
from .schema import RecordSchema
from .versions import DxfVersion

__all__ = [
    "read",
    "read_stream",
    "DxfDocument",
    "TableSection",
    "BlockDefinition",
    "StreamCursor",
    "decode",
    "encode",
    "RecordSchema",
    "get_schema",
    "schema_for",
    "RecordChain",
    "ChainNode",
    "free_chain",
    "free_node",
    "ValueType",
    "value_type",
    "coerce",
    "format_value",
    "DxfVersion",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLog",
    "DxfError",
    "IoFailure",
    "EndOfStream",
    "MalformedValue",
    "InvariantViolation",
    "to_ezdxf",
    "ConvertResult",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxftag.cli import main as cli_main

    return cli_main(argv)
