"""
Command line interface: `sodium-typegen OUTPUT [options]`.

Examples:
    sodium-typegen types/ --source ../libsodium.js
    sodium-typegen types/ --version 0.7.6 --variant both
    sodium-typegen types/ --source ../libsodium.js --dump-catalog yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from sodium_typegen import __version__
from sodium_typegen.analyzer import analyze_catalog
from sodium_typegen.config import GeneratorConfig, load_config
from sodium_typegen.errors import TypeGenError
from sodium_typegen.generator import TypeGenerator
from sodium_typegen.loader import load_catalog
from sodium_typegen.model import Catalog
from sodium_typegen.serialization import catalog_to_json, catalog_to_yaml
from sodium_typegen.variants import Variant


logger = logging.getLogger("sodium_typegen")

VARIANT_CHOICES = ("standard", "sumo", "both")
DUMP_FORMATS = {"json": catalog_to_json, "yaml": catalog_to_yaml}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sodium-typegen",
        description="Generate TypeScript declarations for libsodium.js.",
    )
    parser.add_argument("output", help="Output file, or directory for libsodium-wrappers[-sumo].d.ts")
    parser.add_argument("--source", help="Local libsodium.js source tree (skips the download)")
    parser.add_argument("--version", dest="catalog_version", help="libsodium.js version to download")
    parser.add_argument("--variant", choices=VARIANT_CHOICES, default="standard")
    parser.add_argument("--config", help="YAML file overriding generator settings")
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print a catalog analysis of --source instead of generating",
    )
    parser.add_argument(
        "--dump-catalog",
        choices=sorted(DUMP_FORMATS),
        help="Print the loaded catalog of --source instead of generating",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-V", "--tool-version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _variants(choice: str) -> List[Variant]:
    if choice == "both":
        return [Variant.STANDARD, Variant.SUMO]
    return [Variant(choice)]


def _load_local_catalog(generator: TypeGenerator) -> Catalog:
    return load_catalog(
        generator.local_source,
        generator.declarations,
        version=generator.version,
        max_workers=generator.config.max_workers,
    )


def _print_report(generator: TypeGenerator) -> None:
    catalog = _load_local_catalog(generator)
    report = analyze_catalog(catalog, generator.declarations, generator.sumo_only)
    print(f"libsodium.js {report.version}")
    print(f"  Symbols: {report.total_symbols} ({report.overloaded_functions} overloaded)")
    print(f"  Constants: {report.total_constants}")
    for kind, count in report.shape_counts.items():
        print(f"  Return shape {kind}: {count}")
    for warning in report.warnings:
        print(f"  - {warning}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else GeneratorConfig()
        generator = TypeGenerator(args.output, args.source, config=config)
        if args.catalog_version:
            generator.set_download_version(args.catalog_version)

        if args.report or args.dump_catalog:
            if generator.local_source is None:
                parser.error("--report and --dump-catalog require --source")
            if args.report:
                _print_report(generator)
            else:
                print(DUMP_FORMATS[args.dump_catalog](_load_local_catalog(generator)))
            return 0

        for variant in _variants(args.variant):
            print(generator.generate(variant))
    except (TypeGenError, ValueError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
