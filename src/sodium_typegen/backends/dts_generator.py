"""
TypeScript declaration (.d.ts) generator for libsodium.js catalogs.

Converts a Catalog plus the hand-maintained Declarations into the text of
`libsodium-wrappers.d.ts` or `libsodium-wrappers-sumo.d.ts`.

Document layout, in order:
    - three header comment lines and a blank line
    - declare module '<module>' {
    - type aliases, blank line
    - enums, then interfaces (each followed by a blank line)
    - constants (sorted), blank line
    - functions and overload pairs (sorted)
    - }

The layout is reproduced byte-for-byte: downstream tooling diffs it.
"""

from dataclasses import dataclass
from typing import AbstractSet, List, Optional

from sodium_typegen.model import Catalog, Declarations, Symbol
from sodium_typegen.resolver import formatting_available
from sodium_typegen.return_shapes import PairedReturn
from sodium_typegen.type_mapping import convert_type, render_parameters
from sodium_typegen.variants import Variant, select_for_variant


BINARY_SELECTOR = "outputFormat?: Uint8ArrayOutputFormat | null"
STRING_SELECTOR = "outputFormat: StringOutputFormat"
ANY_SELECTOR = "outputFormat?: Uint8ArrayOutputFormat | StringOutputFormat | null"


@dataclass(frozen=True)
class EmitterOptions:
    """Header and module naming for the generated document."""
    module_base: str = "libsodium-wrappers"
    project_url: str = "https://github.com/jedisct1/libsodium.js"
    definitions_by: str = "Florian Keller <https://github.com/ffflorian>"


def _header_lines(version: str, variant: Variant, options: EmitterOptions) -> List[str]:
    module = variant.module_name(options.module_base)
    return [
        f"// Type definitions for {module} {version}\n",
        f"// Project: {options.project_url}\n",
        f"// Definitions by: {options.definitions_by}\n",
        "\n",
        f"declare module '{module}' {{\n",
    ]


def _type_alias_lines(declarations: Declarations) -> List[str]:
    lines = [f"  type {name} = {' | '.join(members)};\n" for name, members in declarations.types.items()]
    lines.append("\n")
    return lines


def _enum_lines(declarations: Declarations) -> List[str]:
    lines = []
    for name, members in declarations.enums.items():
        lines.append(f"  enum {name} {{\n")
        lines.extend(f"    {member},\n" for member in members)
        lines.append("  }\n\n")
    return lines


def _record_lines(declarations: Declarations) -> List[str]:
    lines = []
    for name, fields in declarations.records.items():
        lines.append(f"  interface {name} {{\n")
        lines.extend(f"    {field.name}: {field.type};\n" for field in fields)
        lines.append("  }\n\n")
    return lines


def render_function(symbol: Symbol) -> List[str]:
    """
    Render the declaration(s) of one function.

    Paired shapes produce two overloads sharing the same inputs:
        f(<inputs>outputFormat?: Uint8ArrayOutputFormat | null): <binary>;
        f(<inputs>outputFormat: StringOutputFormat): <string>;

    Returns:
        One line per emitted signature
    """
    shape = symbol.return_shape
    formatting = formatting_available(symbol.return_expr, shape)
    inputs = render_parameters(symbol.inputs, formatting)

    if isinstance(shape, PairedReturn):
        return [
            f"  function {symbol.name}({inputs}{BINARY_SELECTOR}): {shape.binary_type};\n",
            f"  function {symbol.name}({inputs}{STRING_SELECTOR}): {shape.string_type};\n",
        ]

    selector = ANY_SELECTOR if formatting else ""
    return [f"  function {symbol.name}({inputs}{selector}): {shape.type_name};\n"]


def generate_dts(
    catalog: Catalog,
    declarations: Declarations,
    variant: Variant = Variant.STANDARD,
    excluded: AbstractSet[str] = frozenset(),
    options: Optional[EmitterOptions] = None,
) -> str:
    """
    Generate the declaration document for a catalog.

    Args:
        catalog: Loaded catalog (symbols and constants already sorted)
        declarations: Aliases, enums and records, emitted in declared order
        variant: STANDARD drops the excluded names, SUMO keeps everything
        excluded: Lower-cased sumo-only names
        options: Header and module naming

    Returns:
        The complete document text (no trailing newline)
    """
    options = options or EmitterOptions()
    parts: List[str] = _header_lines(catalog.version, variant, options)

    parts.extend(_type_alias_lines(declarations))
    parts.extend(_enum_lines(declarations))
    parts.extend(_record_lines(declarations))

    for constant in select_for_variant(catalog.constants, excluded, variant):
        parts.append(f"  const {constant.name}: {convert_type(constant.type)};\n")
    parts.append("\n")

    for symbol in select_for_variant(catalog.symbols, excluded, variant):
        parts.extend(render_function(symbol))

    parts.append("}")
    return "".join(parts)


def save_dts_file(
    catalog: Catalog,
    declarations: Declarations,
    filename: str,
    variant: Variant = Variant.STANDARD,
    excluded: AbstractSet[str] = frozenset(),
    options: Optional[EmitterOptions] = None,
) -> None:
    """
    Generate the document and save it to a file.

    Args:
        filename: Output file path (.d.ts extension recommended)
    """
    dts = generate_dts(catalog, declarations, variant=variant, excluded=excluded, options=options)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(dts)


__all__ = ["EmitterOptions", "generate_dts", "render_function", "save_dts_file"]
