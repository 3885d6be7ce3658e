"""
Return Shape Resolver (return expression text -> ReturnShape).

libsodium.js descriptors carry the wrapper's JavaScript return statement
as plain text. The expression is never executed; it is matched against a
fixed list of markers, in priority order, first match wins:

    1. {publicKey: _format_output...            -> KeyPair / StringKeyPair
    2. _format_output({ciphertext, mac}...      -> CryptoBox / StringCryptoBox
    3. _format_output({mac, cipher}...          -> SecretBox / StringSecretBox
    4. _format_output({sharedRx, sharedTx}...   -> CryptoKX / StringCryptoKX
    5. random_value                             -> number
    6. ... === 0                                -> boolean
    7. ... stringify ...                        -> string
    8. ... _format_output ...                   -> Uint8Array / string
    9. anything else                            -> the expression itself

Rules 2-4 also satisfy rule 8, so the order matters.

Descriptors may instead carry an explicit `return_shape` object, which
bypasses the matcher entirely.
"""

from typing import Any, List, Mapping, Optional, Tuple

from .errors import CatalogParseError
from .return_shapes import (
    BooleanReturn,
    NumericReturn,
    PairedReturn,
    PlainReturn,
    ReturnShape,
    ShapeKind,
    TextReturn,
    GENERIC_PAIRED_RETURN,
    VOID_RETURN,
)


FORMAT_OUTPUT_MARKER = "_format_output"
RANDOM_VALUE_MARKER = "random_value"
ZERO_CHECK_MARKER = "=== 0"
STRINGIFY_MARKER = "stringify"

# (prefix, binary record, string record), checked in this order
_STRUCTURED_PREFIXES: List[Tuple[str, str, str]] = [
    ("{publicKey: _format_output", "KeyPair", "StringKeyPair"),
    ("_format_output({ciphertext: ciphertext, mac: mac}", "CryptoBox", "StringCryptoBox"),
    ("_format_output({mac: mac, cipher: cipher}", "SecretBox", "StringSecretBox"),
    ("_format_output({sharedRx: sharedRx, sharedTx: sharedTx}", "CryptoKX", "StringCryptoKX"),
]


def convert_return_type(expr: str) -> ReturnShape:
    """
    Classify a return expression.

    Args:
        expr: Return expression, verbatim from the catalog

    Returns:
        The matching ReturnShape (see module docstring for the rule order)
    """
    for prefix, binary_type, string_type in _STRUCTURED_PREFIXES:
        if expr.startswith(prefix):
            return PairedReturn(binary_type=binary_type, string_type=string_type)

    if expr == RANDOM_VALUE_MARKER:
        return NumericReturn()
    if ZERO_CHECK_MARKER in expr:
        return BooleanReturn()
    if STRINGIFY_MARKER in expr:
        return TextReturn()
    if FORMAT_OUTPUT_MARKER in expr:
        return GENERIC_PAIRED_RETURN

    return PlainReturn(expr)


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise CatalogParseError(f"return_shape requires a non-empty string '{key}'")
    return value


def shape_from_dict(data: Any) -> ReturnShape:
    """
    Build a ReturnShape from an explicit descriptor field.

    Accepted forms:
        {"kind": "plain", "type": "Uint8Array"}
        {"kind": "boolean"} / {"kind": "numeric"} / {"kind": "text"}
        {"kind": "paired", "binary": "KeyPair", "string": "StringKeyPair"}

    Raises:
        CatalogParseError: If the kind is unknown or a member is missing
    """
    if not isinstance(data, Mapping):
        raise CatalogParseError(f"return_shape must be an object, got {type(data).__name__}")

    try:
        kind = ShapeKind(data.get("kind"))
    except ValueError:
        raise CatalogParseError(f"Unknown return_shape kind: {data.get('kind')!r}")

    if kind is ShapeKind.PLAIN:
        return PlainReturn(_require_str(data, "type"))
    if kind is ShapeKind.BOOLEAN:
        return BooleanReturn()
    if kind is ShapeKind.NUMERIC:
        return NumericReturn()
    if kind is ShapeKind.TEXT:
        return TextReturn()
    return PairedReturn(
        binary_type=_require_str(data, "binary"),
        string_type=_require_str(data, "string"),
    )


def shape_to_dict(shape: ReturnShape) -> dict:
    if isinstance(shape, PairedReturn):
        return {"kind": shape.kind.value, "binary": shape.binary_type, "string": shape.string_type}
    if isinstance(shape, PlainReturn):
        return {"kind": shape.kind.value, "type": shape.type_name}
    return {"kind": shape.kind.value}


def resolve_symbol_shape(return_expr: Optional[str], explicit: Any = None) -> ReturnShape:
    """
    Decide the return shape of a symbol at load time.

    An explicit `return_shape` wins; otherwise the expression is matched.
    A missing or empty expression means the function returns nothing.
    """
    if explicit is not None:
        return shape_from_dict(explicit)
    if not return_expr:
        return VOID_RETURN
    return convert_return_type(return_expr)


def formatting_available(return_expr: Optional[str], shape: ReturnShape) -> bool:
    """Whether the function accepts a trailing outputFormat selector."""
    if shape.is_paired:
        return True
    return bool(return_expr) and FORMAT_OUTPUT_MARKER in return_expr


__all__ = [
    "convert_return_type",
    "shape_from_dict",
    "shape_to_dict",
    "resolve_symbol_shape",
    "formatting_available",
    "FORMAT_OUTPUT_MARKER",
]
