"""jlcbridge — convert EasyEDA/LCSC component records into KiCad libraries."""

import argparse
import logging
import os
import sys

from kiutils.symbol import SymbolLib

from category_router import all_categories, library_name, symbol_reference
from footprint_generator import FootprintOptions, footprint_name_for, get_footprint
from library_injector import (
    MODELS_ENV_VAR, PlatformPaths, detect_kicad_version, ensure_library_dirs,
    footprint_dir, register_global_libraries, symbol_library_path,
)
from library_mutator import merge_entry_into_file, write_library
from models import ProcessingResult, RawComponentRecord
from normalizer import load_record, normalize_component
from symbol_generator import (
    SymbolLayout, SymbolOptions, generate_symbol_entry, library_header, symbol_name_for,
)

logger = logging.getLogger(__name__)


def default_library_root(paths: PlatformPaths | None = None) -> str:
    paths = paths or PlatformPaths.current()
    return paths.user_dir(detect_kicad_version(paths))


def process_record(record: RawComponentRecord, library_root: str | None = None,
                   overwrite: bool = False, include_3d: bool = False,
                   layout: SymbolLayout = SymbolLayout.AUTO) -> ProcessingResult:
    """Process one component record through the full pipeline.

    Steps: normalize -> footprint (reference or generated file) ->
           symbol entry -> merge into the category library
    """
    if library_root is None:
        library_root = default_library_root()

    warnings = []
    try:
        ensure_library_dirs(library_root)
        component = normalize_component(record)

        if not component.symbol.pins:
            warnings.append("No pins found in symbol")
        if not component.footprint.pads:
            warnings.append("No pads found in footprint")

        # 1. Footprint
        model_path = None
        if include_3d and component.model_3d:
            model_path = f"${{{MODELS_ENV_VAR}}}/{footprint_name_for(component)}.step"
        footprint = get_footprint(component, FootprintOptions(include_3d=include_3d,
                                                              model_path=model_path))
        footprint_file = None
        if footprint.kind == "generated":
            footprint_file = os.path.join(footprint_dir(library_root), f"{footprint.name}.kicad_mod")
            write_library(footprint_file, footprint.content)
            logger.info("Wrote footprint %s", footprint_file)
        component.info.footprint_ref = footprint.reference

        # 2. Symbol
        symbol_name = symbol_name_for(component)
        entry = generate_symbol_entry(component, SymbolOptions(layout=layout))
        lib_path = symbol_library_path(library_root, component.category)
        action = merge_entry_into_file(lib_path, symbol_name, entry, library_header(),
                                       overwrite=overwrite)
        if action == "exists":
            warnings.append(f"Symbol {symbol_name} already exists in "
                            f"{library_name(component.category)}, not replaced")

        if component.model_3d is None:
            warnings.append("No 3D model in record")

        status = "success" if component.symbol.pins and component.footprint.pads else "partial"
        return ProcessingResult(
            status=status,
            name=component.info.name,
            category=component.category,
            symbol_name=symbol_reference(component.category, symbol_name),
            symbol_library=lib_path,
            symbol_action=action,
            footprint_ref=footprint.reference,
            footprint_file=footprint_file,
            has_3d_model=component.model_3d is not None,
            warnings=warnings,
        )

    except Exception as e:
        logger.debug("Processing %s failed", record.name, exc_info=True)
        return ProcessingResult(
            status="error",
            name=record.name,
            error=str(e),
            warnings=warnings,
        )


def list_library(library_root: str) -> dict[str, list[str]]:
    """Symbol names per category library that exists under `library_root`."""
    listing = {}
    for category in all_categories():
        path = symbol_library_path(library_root, category)
        if not os.path.exists(path):
            continue
        lib = SymbolLib.from_file(path)
        listing[library_name(category)] = [symbol.entryName for symbol in lib.symbols]
    return listing


# ── CLI ──────────────────────────────────────────────────────────────────────

def _print_result(result: ProcessingResult) -> None:
    print(f"Status: {result.status}")
    if result.name:
        print(f"Component: {result.name}")
    if result.symbol_name:
        print(f"Symbol: {result.symbol_name} ({result.symbol_action})")
    if result.footprint_ref:
        print(f"Footprint: {result.footprint_ref}")
    if result.footprint_file:
        print(f"Footprint file: {result.footprint_file}")
    print(f"3D Model: {'yes' if result.has_3d_model else 'no'}")
    for w in result.warnings:
        print(f"Warning: {w}", file=sys.stderr)
    if result.error:
        print(f"Error: {result.error}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="jlcbridge — EasyEDA/LCSC to KiCad library converter"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # convert command
    conv = subparsers.add_parser("convert", help="Convert a saved component record (JSON)")
    conv.add_argument("record", help="Path to the saved API response")
    conv.add_argument("--part-id", help="LCSC part number, when the record lacks one")
    conv.add_argument("--library-root", help="Library root directory")
    conv.add_argument("--overwrite", action="store_true", help="Replace an existing symbol")
    conv.add_argument("--with-3d", action="store_true", help="Reference the 3D model")
    conv.add_argument("--layout", choices=[m.value for m in SymbolLayout],
                      default=SymbolLayout.AUTO.value, help="Symbol pin layout")

    # register command
    reg = subparsers.add_parser("register", help="Register libraries in KiCad's global tables")
    reg.add_argument("--kicad-version", help="KiCad version directory, e.g. 9.0")
    reg.add_argument("--library-root", help="Library root directory")

    # list command
    lst = subparsers.add_parser("list", help="List symbols in the category libraries")
    lst.add_argument("--library-root", help="Library root directory")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "convert":
        try:
            record = load_record(args.record, args.part_id)
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        result = process_record(
            record,
            library_root=args.library_root,
            overwrite=args.overwrite,
            include_3d=args.with_3d,
            layout=SymbolLayout(args.layout),
        )
        _print_result(result)
        return 1 if result.status == "error" else 0

    elif args.command == "register":
        result = register_global_libraries(version=args.kicad_version,
                                           library_root=args.library_root)
        print(f"KiCad version: {result.version}")
        for table in (result.sym_lib_table, result.fp_lib_table):
            if table.path:
                print(f"{table.path}: created={table.created} modified={table.modified} "
                      f"rows_added={table.rows_added}")
        for path in result.symbols_created + result.directories_created:
            print(f"Created: {path}")
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 0 if result.success else 1

    elif args.command == "list":
        root = args.library_root or default_library_root()
        for lib, names in list_library(root).items():
            print(f"{lib} ({len(names)})")
            for name in names:
                print(f"  {name}")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
