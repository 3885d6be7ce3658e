"""
Core Catalog Model Objects

Defines the data structures describing the exported surface of libsodium.js:
    - SymbolIO (one input or output of a function)
    - Symbol (an exported function)
    - Constant (an exported constant)
    - RecordField / Declarations (hand-maintained aliases, enums and records)
    - Catalog (root container for one library version)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about TypeScript rendering
        - Are produced once by the loader and never mutated afterwards
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .return_shapes import ReturnShape, VOID_RETURN


@dataclass(frozen=True)
class SymbolIO:
    """
    A single declared input or output of a function.

    Properties:
        name: Parameter name as it appears in the signature
        type: Catalog type token (e.g. "buf", "uint", "unsized_buf_optional")
        optional: Informational flag from the catalog
        size: Informational size expression from the catalog
    """

    name: str
    type: str
    optional: bool = False
    size: Optional[str] = None


@dataclass(frozen=True)
class Symbol:
    """
    An exported function of the wrapper.

    Properties:
        name:
            Function name, unique within a catalog
            Examples: "crypto_box_keypair", "to_hex"

        inputs:
            Ordered input parameters

        outputs:
            Declared outputs (informational only)

        return_expr:
            The JavaScript return expression, verbatim from the catalog.
            None means the function returns nothing.
            Example: "_format_output(hash, outputFormat)"

        return_shape:
            The classified return shape (computed once at load time)

        dependencies, assert_retval:
            Informational, carried through for catalog dumps

        no_output_format:
            Catalog flag, informational

        target:
            Build-variant marker from the catalog
    """

    name: str
    inputs: List[SymbolIO] = field(default_factory=list)
    outputs: List[SymbolIO] = field(default_factory=list)
    return_expr: Optional[str] = None
    return_shape: ReturnShape = VOID_RETURN
    dependencies: List[str] = field(default_factory=list)
    assert_retval: List[Dict[str, Any]] = field(default_factory=list)
    no_output_format: bool = False
    target: Optional[str] = None
    type: str = "function"


@dataclass(frozen=True)
class Constant:
    """An exported constant and its catalog type token."""

    name: str
    type: str


@dataclass(frozen=True)
class RecordField:
    name: str
    type: str


@dataclass
class Declarations:
    """
    Hand-maintained declarations that the upstream catalog does not carry.

    Properties:
        types:
            Alias name -> literal members, rendered as a union in this order
            Example: {"StringOutputFormat": ["'text'", "'hex'", "'base64'"]}

        enums:
            Enum name -> members in declared order

        records:
            Interface name -> fields in declared order

        additional_symbols:
            Utility functions of the wrapper that have no catalog descriptor

    INVARIANT:
        Ordering is source-declared and never re-sorted.
    """

    types: Dict[str, List[str]] = field(default_factory=dict)
    enums: Dict[str, List[str]] = field(default_factory=dict)
    records: Dict[str, List[RecordField]] = field(default_factory=dict)
    additional_symbols: List[Symbol] = field(default_factory=list)

    def declared_names(self) -> List[str]:
        """All alias, enum and record names, in declaration order."""
        return list(self.types) + list(self.enums) + list(self.records)


@dataclass
class Catalog:
    """
    Root container for one version of the libsodium.js wrapper surface.

    INVARIANTS:
        - symbols and constants are sorted ascending by name
        - names are unique within each list
        - constants include the synthetic `ready` entry
    """

    version: str
    symbols: List[Symbol] = field(default_factory=list)
    constants: List[Constant] = field(default_factory=list)

    def get_symbol(self, name: str) -> Optional[Symbol]:
        """
        Retrieve a symbol by name.

        Args:
            name: Function name

        Returns:
            Symbol object or None if not found
        """
        for symbol in self.symbols:
            if symbol.name == name:
                return symbol
        return None

    def get_constant(self, name: str) -> Optional[Constant]:
        for constant in self.constants:
            if constant.name == name:
                return constant
        return None
