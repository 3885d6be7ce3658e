"""
Tests for the Catalog Analyzer.

Tests verify that the analyzer correctly:
    - Counts symbols, constants, inputs and overloads
    - Flags type tokens that resolve to nothing declared
    - Flags return expressions emitted verbatim
    - Reports sumo-only names missing from the catalog
"""

from sodium_typegen.analyzer import analyze_catalog, referenced_type_names
from sodium_typegen.loader import READY_CONSTANT
from sodium_typegen.model import Catalog, Constant, Declarations, RecordField
from sodium_typegen.serialization import symbol_from_dict

from conftest import HASH_SYMBOL, KEYPAIR_SYMBOL


def build_declarations() -> Declarations:
    return Declarations(
        types={"KeyType": ["'ed25519'"]},
        records={
            "KeyPair": [RecordField("keyType", "KeyType")],
            "StringKeyPair": [RecordField("keyType", "KeyType")],
        },
    )


def test_clean_catalog():
    """A clean catalog gives counts and no warnings."""
    catalog = Catalog(
        version="0.7.3",
        symbols=[symbol_from_dict(KEYPAIR_SYMBOL), symbol_from_dict(HASH_SYMBOL)],
        constants=[Constant("crypto_box_SEEDBYTES", "uint"), READY_CONSTANT],
    )
    report = analyze_catalog(catalog, build_declarations())

    assert report.total_symbols == 2
    assert report.total_constants == 2
    assert report.total_inputs == 2
    assert report.overloaded_functions == 2
    assert report.shape_counts == {"paired": 2}
    assert report.warnings == []


def test_unmapped_input_token():
    """Input tokens that resolve to nothing are reported."""
    symbol = symbol_from_dict({"name": "f", "inputs": [{"name": "x", "type": "sized_buf"}]})
    report = analyze_catalog(Catalog(version="0.7.3", symbols=[symbol]), build_declarations())

    assert report.unresolved_input_types == {"sized_buf": ["f"]}
    assert any("sized_buf (f)" in w for w in report.warnings)


def test_unmapped_constant_token():
    """Constant tokens that resolve to nothing are reported."""
    catalog = Catalog(version="0.7.3", constants=[Constant("X", "ulong")])
    report = analyze_catalog(catalog, build_declarations())
    assert report.unresolved_constant_types == {"ulong": ["X"]}


def test_verbatim_return_expression():
    """Return expressions emitted verbatim are flagged."""
    symbol = symbol_from_dict({"name": "g", "return": "libsodium._g(a, b)"})
    report = analyze_catalog(Catalog(version="0.7.3", symbols=[symbol]), build_declarations())

    assert "libsodium._g(a, b)" in report.unresolved_return_types
    assert any("emitted verbatim" in w for w in report.warnings)


def test_declared_return_type_is_fine():
    """Return text naming declared types is not flagged."""
    symbol = symbol_from_dict({"name": "h", "return": "Array<KeyType | 'hex'>"})
    report = analyze_catalog(Catalog(version="0.7.3", symbols=[symbol]), build_declarations())
    assert report.unresolved_return_types == {}


def test_stale_exclusions():
    """Sumo-only names missing from the catalog are reported."""
    catalog = Catalog(version="0.7.3", symbols=[symbol_from_dict({"name": "crypto_hash_sha256"})])
    report = analyze_catalog(catalog, build_declarations(), {"crypto_hash_sha256", "crypto_gone"})
    assert report.stale_exclusions == {"crypto_gone"}
    assert "Sumo-only names not in catalog: crypto_gone" in report.warnings


def test_referenced_type_names_ignores_literals():
    """String literals are not type names."""
    assert referenced_type_names("Array<KeyType | 'hex'>") == {"Array", "KeyType"}
    assert referenced_type_names("'uint8array'") == set()
