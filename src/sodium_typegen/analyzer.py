"""
Catalog Analyzer: early diagnostics for libsodium.js catalogs.

Unknown type tokens pass through the type mapper unchanged, and unmatched
return expressions are emitted verbatim as type names. Both are silent in
the generated document. This module finds them before they ship.

IMPORTANT: This is read-only. It never modifies the catalog.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Set

from sodium_typegen.model import Catalog, Declarations
from sodium_typegen.return_shapes import PlainReturn
from sodium_typegen.type_mapping import convert_type


BUILTIN_TYPE_NAMES = frozenset({
    "any",
    "Array",
    "boolean",
    "null",
    "number",
    "Promise",
    "string",
    "Uint8Array",
    "undefined",
    "unknown",
    "void",
})

_QUOTED_RE = re.compile(r"'[^']*'|\"[^\"]*\"")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def referenced_type_names(type_expr: str) -> Set[str]:
    """
    Identifiers referenced by a TypeScript type expression.

    String literal members are ignored.

    Example:
        "Array<KeyType | 'hex'>" -> {"Array", "KeyType"}
    """
    return set(_IDENTIFIER_RE.findall(_QUOTED_RE.sub(" ", type_expr)))


@dataclass
class CatalogReport:
    """Analysis report for a catalog."""

    version: str
    total_symbols: int = 0
    total_constants: int = 0
    total_inputs: int = 0
    overloaded_functions: int = 0

    shape_counts: Dict[str, int] = field(default_factory=dict)

    # Type tokens / return types that reference nothing known
    unresolved_input_types: Dict[str, List[str]] = field(default_factory=dict)
    unresolved_constant_types: Dict[str, List[str]] = field(default_factory=dict)
    unresolved_return_types: Dict[str, List[str]] = field(default_factory=dict)

    # Sumo-only names that the catalog does not contain
    stale_exclusions: Set[str] = field(default_factory=set)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _unknown_names(type_expr: str, known: AbstractSet[str]) -> List[str]:
    return sorted(name for name in referenced_type_names(type_expr) if name not in known)


def _record(bucket: Dict[str, List[str]], token: str, owner: str) -> None:
    bucket.setdefault(token, [])
    if owner not in bucket[token]:
        bucket[token].append(owner)


def _describe(bucket: Dict[str, List[str]]) -> str:
    return ", ".join(f"{token} ({', '.join(owners)})" for token, owners in sorted(bucket.items()))


def analyze_catalog(
    catalog: Catalog,
    declarations: Declarations,
    excluded: Iterable[str] = (),
) -> CatalogReport:
    """
    Inspect a catalog against the declarations it will be emitted with.

    Checks for:
    - Input and constant type tokens that map to unknown type names
    - Verbatim return types that name nothing declared
    - Sumo-only names missing from the catalog

    Returns a CatalogReport with counts and warnings.
    """
    report = CatalogReport(version=catalog.version)
    report.total_symbols = len(catalog.symbols)
    report.total_constants = len(catalog.constants)

    known = set(BUILTIN_TYPE_NAMES) | set(declarations.declared_names())

    shapes: Counter = Counter()
    for symbol in catalog.symbols:
        shapes[symbol.return_shape.kind.value] += 1
        if symbol.return_shape.is_paired:
            report.overloaded_functions += 1

        for io in symbol.inputs:
            report.total_inputs += 1
            if _unknown_names(convert_type(io.type), known):
                _record(report.unresolved_input_types, io.type, symbol.name)

        shape = symbol.return_shape
        if isinstance(shape, PlainReturn) and _unknown_names(shape.type_name, known):
            _record(report.unresolved_return_types, shape.type_name, symbol.name)

    for constant in catalog.constants:
        if _unknown_names(convert_type(constant.type), known):
            _record(report.unresolved_constant_types, constant.type, constant.name)

    report.shape_counts = dict(sorted(shapes.items()))

    catalog_names = {s.name.lower() for s in catalog.symbols} | {c.name.lower() for c in catalog.constants}
    report.stale_exclusions = {name for name in excluded if name not in catalog_names}

    # =========================================================================
    # WARNING FLAGS
    # =========================================================================

    if report.unresolved_input_types:
        report.add_warning(f"Unmapped input type tokens: {_describe(report.unresolved_input_types)}")

    if report.unresolved_constant_types:
        report.add_warning(f"Unmapped constant type tokens: {_describe(report.unresolved_constant_types)}")

    if report.unresolved_return_types:
        report.add_warning(f"Return expressions emitted verbatim: {_describe(report.unresolved_return_types)}")

    if report.stale_exclusions:
        report.add_warning(
            f"Sumo-only names not in catalog: {', '.join(sorted(report.stale_exclusions))}"
        )

    return report
