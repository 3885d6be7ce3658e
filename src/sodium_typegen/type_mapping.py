"""
Catalog type tokens -> TypeScript type expressions.

The catalog uses a handful of primitive tokens ("uint", "buf", ...).
Everything else is assumed to already name a valid TypeScript type and
passes through unchanged.
"""

from typing import Dict, List, Sequence

from .model import SymbolIO


_TYPE_TABLE: Dict[str, str] = {
    "uint": "number",
    "buf": "Uint8Array",
    "randombytes_implementation": "Uint8Array",
    "unsized_buf": "string | Uint8Array | undefined",
    "unsized_buf_optional": "string | Uint8Array | undefined",
}

OPTIONAL_MARKER = "optional"


def convert_type(token: str) -> str:
    """
    Map a catalog type token to a TypeScript type expression.

    Unknown tokens are returned unchanged.
    """
    return _TYPE_TABLE.get(token, token)


def is_optional_token(token: str) -> bool:
    return OPTIONAL_MARKER in token


def render_parameter(io: SymbolIO) -> str:
    """Render one parameter as `name: type`, adding `| null` for optional tokens."""
    rendered = f"{io.name}: {convert_type(io.type)}"
    if is_optional_token(io.type):
        rendered += " | null"
    return rendered


def render_parameters(inputs: Sequence[SymbolIO], formatting_available: bool) -> str:
    """
    Render a parameter list in declared order.

    Parameters are separated by ", ". When formatting_available is set, a
    trailing ", " is kept so the output-format selector can be appended
    directly.

    Args:
        inputs: Declared inputs of the symbol
        formatting_available: Whether an outputFormat parameter follows

    Returns:
        Parameter list text without surrounding parentheses
    """
    parts: List[str] = [render_parameter(io) for io in inputs]
    rendered = ", ".join(parts)
    if parts and formatting_available:
        rendered += ", "
    return rendered


__all__ = [
    "convert_type",
    "is_optional_token",
    "render_parameter",
    "render_parameters",
]
