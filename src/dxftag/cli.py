from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .convert import to_ezdxf
from .document import read
from .errors import DxfError
from .log import setup_logging
from .versions import SUPPORTED_VERSIONS, DxfVersion

_VERBOSE_DIAGNOSTIC_LIMIT = 50


def _package_version() -> str:
    try:
        return version("dxftag")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dxftag", description="Inspect, rewrite, and convert DXF files.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level for diagnostics on stderr (overrides DXFTAG_LOG_LEVEL).",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser("inspect", help="Show record and diagnostic counts.")
    inspect_parser.add_argument("path", help="Path to DXF file.")
    inspect_parser.add_argument(
        "--verbose",
        action="store_true",
        help="List individual diagnostics as well as their counts.",
    )

    rewrite_parser = subparsers.add_parser(
        "rewrite",
        help="Decode a DXF file and encode it again, optionally for another version.",
    )
    rewrite_parser.add_argument("input_path", help="Path to input DXF file.")
    rewrite_parser.add_argument("output_path", help="Path to output DXF file.")
    rewrite_parser.add_argument(
        "--version",
        dest="target_version",
        default=None,
        help=f"Target version ({', '.join(SUPPORTED_VERSIONS)} or R2000-style aliases).",
    )

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert DXF entities using ezdxf as the writing backend.",
    )
    convert_parser.add_argument("input_path", help="Path to input DXF file.")
    convert_parser.add_argument("output_path", help="Path to output DXF file.")
    convert_parser.add_argument(
        "--kinds",
        default=None,
        help='Entity filter passed to query(), e.g. "LINE ARC TEXT".',
    )
    convert_parser.add_argument(
        "--dxf-version",
        default="R2010",
        help="DXF version for ezdxf.new(), e.g. R2000/R2010/R2018.",
    )
    convert_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if any entity cannot be converted.",
    )
    return parser


def _configure_logging(level_name: str | None) -> None:
    if level_name is None:
        setup_logging()
        return
    level = logging.getLevelName(level_name.strip().upper())
    setup_logging(level if isinstance(level, int) else None)


def _run_inspect(path: str, *, verbose: bool = False) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        doc = read(file_path)
    except DxfError as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    counts = doc.record_counts()
    print(f"file: {file_path}")
    print(f"version: {doc.version.tag} ({doc.version.release})")
    print(f"total_records: {sum(counts.values())}")
    print(f"total_entities: {len(doc.entities)}")
    for kind, count in counts.items():
        print(f"{kind}: {count}")
    for kind, count in doc.diagnostics.counts().items():
        print(f"diagnostics[{kind}]: {count}")
    if verbose:
        for diagnostic in list(doc.diagnostics)[:_VERBOSE_DIAGNOSTIC_LIMIT]:
            print(f"  {diagnostic}")
        hidden = len(doc.diagnostics) - _VERBOSE_DIAGNOSTIC_LIMIT
        if hidden > 0:
            print(f"  ... {hidden} more")
    doc.close()
    return 0


def _run_rewrite(input_path: str, output_path: str, *, target_version: str | None = None) -> int:
    source = Path(input_path)
    if not source.exists():
        print(f"error: file not found: {source}", file=sys.stderr)
        return 2

    try:
        target = DxfVersion.parse(target_version) if target_version is not None else None
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        doc = read(source)
        read_diagnostics = len(doc.diagnostics)
        doc.write(output_path, target)
    except DxfError as exc:
        print(f"error: failed to rewrite DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {source}")
    print(f"output: {output_path}")
    print(f"source_version: {doc.version.tag}")
    print(f"target_version: {(target or doc.version).tag}")
    print(f"read_diagnostics: {read_diagnostics}")
    print(f"write_diagnostics: {len(doc.diagnostics) - read_diagnostics}")
    doc.close()
    return 0


def _run_convert(
    input_path: str,
    output_path: str,
    *,
    kinds: str | None = None,
    dxf_version: str = "R2010",
    strict: bool = False,
) -> int:
    source = Path(input_path)
    if not source.exists():
        print(f"error: file not found: {source}", file=sys.stderr)
        return 2

    try:
        result = to_ezdxf(
            source,
            output_path,
            kinds=kinds,
            dxf_version=dxf_version,
            strict=strict,
        )
    except (DxfError, ImportError, ValueError) as exc:
        print(f"error: failed to convert DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {result.source_path}")
    print(f"output: {result.output_path}")
    print(f"total_entities: {result.total_entities}")
    print(f"written_entities: {result.written_entities}")
    print(f"skipped_entities: {result.skipped_entities}")
    for kind, count in result.skipped_by_type.items():
        print(f"skipped[{kind}]: {count}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.command == "inspect":
        return _run_inspect(args.path, verbose=bool(args.verbose))
    if args.command == "rewrite":
        return _run_rewrite(args.input_path, args.output_path, target_version=args.target_version)
    if args.command == "convert":
        return _run_convert(
            args.input_path,
            args.output_path,
            kinds=args.kinds,
            dxf_version=args.dxf_version,
            strict=bool(args.strict),
        )

    parser.print_help()
    return 0
