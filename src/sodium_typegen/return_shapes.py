"""
Return Shapes for libsodium.js Functions

The catalog describes what a function returns as a free-text JavaScript
expression. Before anything is emitted, that text is classified once into
one of a closed set of shapes defined here.

ARCHITECTURAL RULE:
    The emitter dispatches on these objects, never on the raw expression.
    Classification belongs in the resolver layer.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum


VOID_TYPE = "void"
NUMBER_TYPE = "number"
BOOLEAN_TYPE = "boolean"
STRING_TYPE = "string"
BINARY_TYPE = "Uint8Array"


class ShapeKind(Enum):
    """
    Tag values for return shapes.

    These are also the accepted values of the explicit `return_shape.kind`
    field in a symbol descriptor.
    """

    PLAIN = "plain"
    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    TEXT = "text"
    PAIRED = "paired"


class ReturnShape(ABC):
    """
    Base class for all return shapes.

    Structure only. Rendering belongs in backends.
    """

    kind: ShapeKind

    @property
    def is_paired(self) -> bool:
        return self.kind is ShapeKind.PAIRED


@dataclass(frozen=True)
class PlainReturn(ReturnShape):
    """
    A return type used verbatim.

    Examples:
        - void (no return expression)
        - Uint8Array
        - a declared alias or record name
    """

    type_name: str
    kind = ShapeKind.PLAIN


@dataclass(frozen=True)
class BooleanReturn(ReturnShape):
    """Result of an equality-to-zero check."""

    kind = ShapeKind.BOOLEAN

    @property
    def type_name(self) -> str:
        return BOOLEAN_TYPE


@dataclass(frozen=True)
class NumericReturn(ReturnShape):
    """A random numeric value."""

    kind = ShapeKind.NUMERIC

    @property
    def type_name(self) -> str:
        return NUMBER_TYPE


@dataclass(frozen=True)
class TextReturn(ReturnShape):
    """A stringified result."""

    kind = ShapeKind.TEXT

    @property
    def type_name(self) -> str:
        return STRING_TYPE


@dataclass(frozen=True)
class PairedReturn(ReturnShape):
    """
    A result whose representation depends on the caller's output format.

    Produces two overloads in the declaration document:
        - binary_type when the selector is 'uint8array' or omitted
        - string_type when a string selector is given

    Example:
        PairedReturn(binary_type="KeyPair", string_type="StringKeyPair")
    """

    binary_type: str
    string_type: str
    kind = ShapeKind.PAIRED


VOID_RETURN = PlainReturn(VOID_TYPE)
GENERIC_PAIRED_RETURN = PairedReturn(binary_type=BINARY_TYPE, string_type=STRING_TYPE)
